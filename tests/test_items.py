from conftest import make_category, make_item, receive


def test_crud_round(app, client, staff_headers, category):
    resp = client.post(
        "/items",
        json={"kode": "BRG-9", "nama": "Baut", "jenisId": category, "satuan": "pcs", "stokMinimum": 5},
        headers=staff_headers,
    )
    assert resp.status_code == 201
    data = resp.get_json()["data"]
    assert data["jenis"]["nama"] == "Sparepart"
    assert data["stok"] == 0

    resp = client.put(
        f"/items/{data['id']}",
        json={"kode": "BRG-9", "nama": "Baut M10", "jenisId": category},
        headers=staff_headers,
    )
    assert resp.get_json()["data"]["nama"] == "Baut M10"

    listing = client.get("/items?search=baut", headers=staff_headers).get_json()
    assert [it["kode"] for it in listing["data"]] == ["BRG-9"]

    assert client.delete(f"/items/{data['id']}", headers=staff_headers).status_code == 200
    assert client.get(f"/items/{data['id']}", headers=staff_headers).status_code == 404


def test_create_requires_code_and_name(client, staff_headers):
    resp = client.post("/items", json={"kode": "X"}, headers=staff_headers)
    assert resp.status_code == 400
    assert resp.get_json()["message"] == "Kode dan nama barang wajib diisi"


def test_duplicate_code(app, client, staff_headers, item):
    resp = client.post("/items", json={"kode": "BRG-001", "nama": "Lagi"}, headers=staff_headers)
    assert resp.status_code == 400
    assert resp.get_json()["message"] == "Kode barang sudah ada"


def test_unknown_category(client, staff_headers):
    resp = client.post("/items", json={"kode": "X", "nama": "Y", "jenisId": 77}, headers=staff_headers)
    assert resp.status_code == 404


def test_assign_category(app, client, staff_headers, item):
    other = make_category(app, "Oli")
    resp = client.put(f"/items/{item}/category", json={"jenisId": other}, headers=staff_headers)
    assert resp.status_code == 200
    assert resp.get_json()["data"]["jenis"]["nama"] == "Oli"


def test_delete_refused_when_used_in_transaction(app, client, staff_headers, item):
    receive(app, item, ["S1"])
    resp = client.delete(f"/items/{item}", headers=staff_headers)
    assert resp.status_code == 400


def test_search_autocomplete(app, client, staff_headers):
    make_item(app, "MSN-02", "Mesin Bubut")
    make_item(app, "MSN-01", "Mesin Las")
    make_item(app, "OLI-01", "Oli Mesin")

    assert client.get("/items/search?q=M", headers=staff_headers).get_json() == {"data": []}

    data = client.get("/items/search?q=msn", headers=staff_headers).get_json()["data"]
    assert [d["kode"] for d in data] == ["MSN-01", "MSN-02"]
    assert data[0]["label"] == "MSN-01 - Mesin Las"
    assert data[0]["value"] == data[0]["id"]

    limited = client.get("/items/search?q=mesin&limit=2", headers=staff_headers).get_json()
    assert len(limited["data"]) == 2


def test_list_requires_token(client):
    resp = client.get("/items")
    assert resp.status_code == 401
    assert resp.get_json()["success"] is False


def test_update_without_stock_keeps_stock(app, client, staff_headers, item):
    receive(app, item, ["S1", "S2"])
    resp = client.put(f"/items/{item}", json={"kode": "BRG-001", "nama": "Mesin A1"}, headers=staff_headers)
    assert resp.get_json()["data"]["stok"] == 2


def test_search_treats_wildcards_literally(app, client, staff_headers):
    make_item(app, "A_1", "Baut")
    make_item(app, "AB1", "Mur")
    make_item(app, "DSK-01", "Diskon 50%")

    data = client.get("/items/search?q=A_", headers=staff_headers).get_json()["data"]
    assert [d["kode"] for d in data] == ["A_1"]

    data = client.get("/items?search=%25", headers=staff_headers).get_json()["data"]
    assert [d["kode"] for d in data] == ["DSK-01"]

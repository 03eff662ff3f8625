import re

from configs import db
from conftest import make_item, receive, stock_of
from db.models.outgoing import OutgoingShipment


def test_create_assigns_transaction_number(app, client, staff_headers):
    a = make_item(app, "A", "Item A")
    units = receive(app, a, ["S1", "S2"])

    resp = client.post(
        "/goods-out",
        json={"destination": "Gudang 2", "items": [{"itemId": a, "qty": 1, "serialUnitId": units[0]}]},
        headers=staff_headers,
    )
    body = resp.get_json()
    assert resp.status_code == 201
    assert re.fullmatch(r"BK\d{8}001", body["data"]["transactionNo"])
    assert body["data"]["serialNumbers"] == ["S1"]
    assert body["data"]["lines"][0]["serialNo"] == "S1"
    # stok baru berkurang saat approve
    assert stock_of(app, a) == 2


def test_create_requires_items(client, staff_headers):
    resp = client.post("/goods-out", json={"destination": "X"}, headers=staff_headers)
    assert resp.status_code == 400
    assert resp.get_json()["message"] == "Detail barang wajib diisi"


def test_create_rejects_insufficient_stock(app, client, staff_headers):
    a = make_item(app, "A", "Item A")
    receive(app, a, ["S1"])

    resp = client.post("/goods-out", json={"items": [{"itemId": a, "qty": 5}]}, headers=staff_headers)
    assert resp.status_code == 400
    assert resp.get_json()["message"] == (
        "Stok barang Item A tidak mencukupi. Tersedia: 1, Dibutuhkan: 5"
    )


def test_serial_unit_cannot_be_allocated_twice(app, client, staff_headers):
    a = make_item(app, "A", "Item A")
    units = receive(app, a, ["S1", "S2"])
    payload = {"items": [{"itemId": a, "qty": 1, "serialUnitId": units[0]}]}

    assert client.post("/goods-out", json=payload, headers=staff_headers).status_code == 201
    resp = client.post("/goods-out", json=payload, headers=staff_headers)
    assert resp.status_code == 400
    assert resp.get_json()["message"] == "No seri S1 sudah digunakan"


def test_serial_unit_must_belong_to_item(app, client, staff_headers):
    a = make_item(app, "A", "Item A")
    b = make_item(app, "B", "Item B")
    receive(app, a, ["A1"])
    units_b = receive(app, b, ["B1"], "KD-002", "F-002")

    resp = client.post(
        "/goods-out",
        json={"items": [{"itemId": a, "qty": 1, "serialUnitId": units_b[0]}]},
        headers=staff_headers,
    )
    assert resp.status_code == 400


def test_list_filters_by_status_and_serial(app, client, staff_headers, supervisor_headers):
    a = make_item(app, "A", "Item A")
    units = receive(app, a, ["XY-1", "XY-2"])
    first = client.post(
        "/goods-out", json={"items": [{"itemId": a, "qty": 1, "serialUnitId": units[0]}]}, headers=staff_headers
    ).get_json()["data"]
    client.post(
        "/goods-out", json={"items": [{"itemId": a, "qty": 1, "serialUnitId": units[1]}]}, headers=staff_headers
    )
    client.put(f"/goods-out/{first['id']}/approve", json={"action": "approve"}, headers=supervisor_headers)

    approved = client.get("/goods-out?status=approved", headers=staff_headers).get_json()
    assert [s["id"] for s in approved["data"]] == [first["id"]]
    assert approved["pagination"]["total"] == 1

    by_serial = client.get("/goods-out?search=XY-2", headers=staff_headers).get_json()
    assert len(by_serial["data"]) == 1
    assert by_serial["data"][0]["serialNumbers"] == ["XY-2"]


def test_delete_releases_serial_unit(app, client, staff_headers):
    a = make_item(app, "A", "Item A")
    units = receive(app, a, ["S1"])
    payload = {"items": [{"itemId": a, "qty": 1, "serialUnitId": units[0]}]}
    created = client.post("/goods-out", json=payload, headers=staff_headers).get_json()["data"]

    resp = client.delete(f"/goods-out/{created['id']}", headers=staff_headers)
    assert resp.status_code == 200
    assert client.get(f"/goods-out/{created['id']}", headers=staff_headers).status_code == 404

    # unit bisa dipakai lagi
    assert client.post("/goods-out", json=payload, headers=staff_headers).status_code == 201


def test_delete_refused_after_approval(app, client, staff_headers, supervisor_headers):
    a = make_item(app, "A", "Item A")
    units = receive(app, a, ["S1"])
    created = client.post(
        "/goods-out", json={"items": [{"itemId": a, "qty": 1, "serialUnitId": units[0]}]}, headers=staff_headers
    ).get_json()["data"]
    client.put(f"/goods-out/{created['id']}/approve", json={"action": "approve"}, headers=supervisor_headers)

    resp = client.delete(f"/goods-out/{created['id']}", headers=staff_headers)
    assert resp.status_code == 400
    assert stock_of(app, a) == 0


def test_concurrent_allocation_is_caught_by_unique_serial(app, client, staff_headers, monkeypatch):
    a = make_item(app, "A", "Item A")
    units = receive(app, a, ["S1", "S2"])
    payload = {"items": [{"itemId": a, "qty": 1, "serialUnitId": units[0]}]}
    assert client.post("/goods-out", json=payload, headers=staff_headers).status_code == 201

    # request kedua lolos cek ketersediaan, seperti dua request yang berjalan bersamaan
    monkeypatch.setattr("dao.serial_unit.is_available", lambda unit_id: True)
    resp = client.post("/goods-out", json=payload, headers=staff_headers)
    assert resp.status_code == 400
    assert resp.get_json()["message"] == "No seri sudah digunakan oleh barang keluar lain"
    with app.app_context():
        assert db.session.query(OutgoingShipment).count() == 1


def test_transaction_number_clash_has_its_own_message(app, client, staff_headers, monkeypatch):
    a = make_item(app, "A", "Item A")
    units = receive(app, a, ["S1", "S2"])
    first = client.post(
        "/goods-out",
        json={"items": [{"itemId": a, "qty": 1, "serialUnitId": units[0]}]},
        headers=staff_headers,
    ).get_json()["data"]

    monkeypatch.setattr("dao.goods_out._next_transaction_no", lambda now: first["transactionNo"])
    resp = client.post(
        "/goods-out",
        json={"items": [{"itemId": a, "qty": 1, "serialUnitId": units[1]}]},
        headers=staff_headers,
    )
    assert resp.status_code == 400
    assert resp.get_json()["message"] == (
        "No transaksi bentrok dengan transaksi lain, silakan coba lagi"
    )


def test_list_search_treats_wildcards_literally(app, client, staff_headers):
    a = make_item(app, "A", "Item A")
    receive(app, a, ["S1", "S2"])
    for dest in ("Rak_1", "RakX1"):
        client.post(
            "/goods-out",
            json={"destination": dest, "items": [{"itemId": a, "qty": 1}]},
            headers=staff_headers,
        )

    data = client.get("/goods-out?search=Rak_", headers=staff_headers).get_json()["data"]
    assert [s["destination"] for s in data] == ["Rak_1"]
    assert client.get("/goods-out?search=%25", headers=staff_headers).get_json()["data"] == []


# ---------- edit ----------
def _goods_out(client, headers, lines, destination="Gudang 2"):
    resp = client.post("/goods-out", json={"destination": destination, "items": lines}, headers=headers)
    assert resp.status_code == 201, resp.get_json()
    return resp.get_json()["data"]


def test_edit_replaces_lines_and_releases_old_unit(app, client, staff_headers):
    a = make_item(app, "A", "Item A")
    units = receive(app, a, ["S1", "S2"])
    created = _goods_out(client, staff_headers, [{"itemId": a, "qty": 1, "serialUnitId": units[0]}])

    resp = client.put(
        f"/goods-out/{created['id']}",
        json={"destination": "Gudang 3", "items": [{"itemId": a, "qty": 1, "serialUnitId": units[1]}]},
        headers=staff_headers,
    )
    body = resp.get_json()
    assert resp.status_code == 200
    assert body["message"] == "Barang keluar berhasil diperbarui"
    assert body["data"]["destination"] == "Gudang 3"
    assert body["data"]["transactionNo"] == created["transactionNo"]
    assert body["data"]["serialNumbers"] == ["S2"]

    free = client.get(f"/items/{a}/serial-units", headers=staff_headers).get_json()["data"]
    assert [u["noSeri"] for u in free] == ["S1"]


def test_edit_may_keep_its_own_serial_unit(app, client, staff_headers):
    a = make_item(app, "A", "Item A")
    units = receive(app, a, ["S1"])
    created = _goods_out(client, staff_headers, [{"itemId": a, "qty": 1, "serialUnitId": units[0]}])

    resp = client.put(
        f"/goods-out/{created['id']}",
        json={"notes": "kirim pagi", "items": [{"itemId": a, "qty": 1, "serialUnitId": units[0]}]},
        headers=staff_headers,
    )
    assert resp.status_code == 200
    assert resp.get_json()["data"]["serialNumbers"] == ["S1"]
    assert resp.get_json()["data"]["notes"] == "kirim pagi"


def test_failed_edit_keeps_previous_lines(app, client, staff_headers):
    a = make_item(app, "A", "Item A")
    units = receive(app, a, ["S1", "S2"])
    created = _goods_out(client, staff_headers, [{"itemId": a, "qty": 1, "serialUnitId": units[0]}])

    resp = client.put(
        f"/goods-out/{created['id']}",
        json={"items": [{"itemId": a, "qty": 9}]},
        headers=staff_headers,
    )
    assert resp.status_code == 400
    detail = client.get(f"/goods-out/{created['id']}", headers=staff_headers).get_json()["data"]
    assert detail["serialNumbers"] == ["S1"]
    assert detail["destination"] == "Gudang 2"


def test_edit_refused_after_approval(app, client, staff_headers, supervisor_headers):
    a = make_item(app, "A", "Item A")
    receive(app, a, ["S1", "S2"])
    created = _goods_out(client, staff_headers, [{"itemId": a, "qty": 1}])
    client.put(f"/goods-out/{created['id']}/approve", json={"action": "approve"}, headers=supervisor_headers)

    resp = client.put(
        f"/goods-out/{created['id']}", json={"items": [{"itemId": a, "qty": 1}]}, headers=staff_headers
    )
    assert resp.status_code == 400
    assert resp.get_json()["message"] == "Tidak dapat mengubah barang keluar yang sudah disetujui"
    assert stock_of(app, a) == 1


def test_edit_deleted_goods_out_is_404(app, client, staff_headers):
    a = make_item(app, "A", "Item A")
    receive(app, a, ["S1"])
    created = _goods_out(client, staff_headers, [{"itemId": a, "qty": 1}])
    client.delete(f"/goods-out/{created['id']}", headers=staff_headers)

    resp = client.put(
        f"/goods-out/{created['id']}", json={"items": [{"itemId": a, "qty": 1}]}, headers=staff_headers
    )
    assert resp.status_code == 404
    assert resp.get_json()["message"] == "Barang keluar tidak ditemukan"

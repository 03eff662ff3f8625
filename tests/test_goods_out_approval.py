from sqlalchemy.exc import OperationalError

from configs import db
from dao import goods_out as go_dao
from conftest import make_item, receive, stock_of
from db.models.item import Item
from db.models.outgoing import OutgoingShipment, OutgoingStatus


def _create_goods_out(client, headers, lines):
    resp = client.post("/goods-out", json={"destination": "Line 2", "items": lines}, headers=headers)
    assert resp.status_code == 201, resp.get_json()
    return resp.get_json()["data"]


def _status_of(app, shipment_id):
    with app.app_context():
        return db.session.get(OutgoingShipment, shipment_id).status


def test_approve_decrements_stock_per_line(app, client, staff_headers, supervisor_headers, supervisor):
    a = make_item(app, "A", "Item A")
    b = make_item(app, "B", "Item B")
    units_a = receive(app, a, [f"A{i:02d}" for i in range(10)])
    units_b = receive(app, b, [f"B{i}" for i in range(5)], "KD-002", "F-002")

    created = _create_goods_out(
        client,
        staff_headers,
        [
            {"itemId": a, "qty": 3, "serialUnitId": units_a[0]},
            {"itemId": b, "qty": 2, "serialUnitId": units_b[0]},
        ],
    )
    assert created["status"] == "pending"

    resp = client.put(
        f"/goods-out/{created['id']}/approve", json={"action": "approve"}, headers=supervisor_headers
    )
    body = resp.get_json()
    assert resp.status_code == 200
    assert body["success"] is True
    assert body["data"]["status"] == "approved"
    assert body["data"]["approverId"] == supervisor
    assert body["data"]["transactionNo"] == created["transactionNo"]
    assert stock_of(app, a) == 7
    assert stock_of(app, b) == 3


def test_second_approve_is_rejected_without_touching_stock(app, client, staff_headers, supervisor_headers):
    a = make_item(app, "A", "Item A")
    units = receive(app, a, ["S1", "S2", "S3"])
    created = _create_goods_out(client, staff_headers, [{"itemId": a, "qty": 1, "serialUnitId": units[0]}])
    url = f"/goods-out/{created['id']}/approve"

    assert client.put(url, json={"action": "approve"}, headers=supervisor_headers).status_code == 200
    assert stock_of(app, a) == 2

    resp = client.put(url, json={"action": "approve"}, headers=supervisor_headers)
    assert resp.status_code == 400
    assert resp.get_json() == {"success": False, "message": "Barang keluar sudah diproses"}
    assert stock_of(app, a) == 2


def test_reject_leaves_stock_unchanged(app, client, staff_headers, supervisor_headers):
    a = make_item(app, "A", "Item A")
    units = receive(app, a, ["S1", "S2"])
    created = _create_goods_out(client, staff_headers, [{"itemId": a, "qty": 2, "serialUnitId": units[0]}])

    resp = client.put(
        f"/goods-out/{created['id']}/approve", json={"action": "reject"}, headers=supervisor_headers
    )
    assert resp.status_code == 200
    assert resp.get_json()["data"]["status"] == "rejected"
    assert stock_of(app, a) == 2

    again = client.put(
        f"/goods-out/{created['id']}/approve", json={"action": "approve"}, headers=supervisor_headers
    )
    assert again.status_code == 400
    assert _status_of(app, created["id"]) == OutgoingStatus.REJECTED


def test_unknown_action_is_checked_before_lookup(client, supervisor_headers):
    resp = client.put("/goods-out/999/approve", json={"action": "maybe"}, headers=supervisor_headers)
    assert resp.status_code == 400
    assert resp.get_json()["message"] == "Action harus approve atau reject"

    resp = client.put("/goods-out/999/approve", json={}, headers=supervisor_headers)
    assert resp.status_code == 400


def test_missing_shipment_is_404(client, supervisor_headers):
    resp = client.put("/goods-out/999/approve", json={"action": "approve"}, headers=supervisor_headers)
    assert resp.status_code == 404
    assert resp.get_json() == {"success": False, "message": "Barang keluar tidak ditemukan"}


def test_approve_requires_token(client):
    resp = client.put("/goods-out/1/approve", json={"action": "approve"})
    assert resp.status_code == 401
    assert resp.get_json() == {"success": False, "message": "Access token required"}


def test_approve_requires_approver_role(app, client, staff_headers):
    a = make_item(app, "A", "Item A")
    units = receive(app, a, ["S1"])
    created = _create_goods_out(client, staff_headers, [{"itemId": a, "qty": 1, "serialUnitId": units[0]}])

    resp = client.put(
        f"/goods-out/{created['id']}/approve", json={"action": "approve"}, headers=staff_headers
    )
    assert resp.status_code == 403
    assert _status_of(app, created["id"]) == OutgoingStatus.PENDING
    assert stock_of(app, a) == 1


def test_shortfall_on_one_line_rolls_back_everything(app, client, staff_headers, supervisor_headers):
    a = make_item(app, "A", "Item A")
    b = make_item(app, "B", "Item B")
    units_a = receive(app, a, ["A1", "A2", "A3"])
    units_b = receive(app, b, ["B1", "B2"], "KD-002", "F-002")
    created = _create_goods_out(
        client,
        staff_headers,
        [
            {"itemId": a, "qty": 2, "serialUnitId": units_a[0]},
            {"itemId": b, "qty": 2, "serialUnitId": units_b[0]},
        ],
    )

    # stok B berkurang di luar alur setelah barang keluar dibuat
    with app.app_context():
        db.session.get(Item, b).stock = 1
        db.session.commit()

    resp = client.put(
        f"/goods-out/{created['id']}/approve", json={"action": "approve"}, headers=supervisor_headers
    )
    assert resp.status_code == 400
    assert "tidak mencukupi" in resp.get_json()["message"]
    assert stock_of(app, a) == 3
    assert stock_of(app, b) == 1
    assert _status_of(app, created["id"]) == OutgoingStatus.PENDING


def test_store_failure_mid_approval_rolls_back(app, client, staff_headers, supervisor_headers, monkeypatch):
    a = make_item(app, "A", "Item A")
    b = make_item(app, "B", "Item B")
    units_a = receive(app, a, ["A1", "A2"])
    units_b = receive(app, b, ["B1", "B2"], "KD-002", "F-002")
    created = _create_goods_out(
        client,
        staff_headers,
        [
            {"itemId": a, "qty": 1, "serialUnitId": units_a[0]},
            {"itemId": b, "qty": 1, "serialUnitId": units_b[0]},
        ],
    )

    real_decrement = go_dao._decrement_stock
    done = []

    def failing_decrement(line):
        # baris pertama berhasil, baris kedua gagal di database
        if done:
            raise OperationalError("UPDATE item", {}, Exception("connection lost"))
        done.append(line.id)
        real_decrement(line)

    monkeypatch.setattr(go_dao, "_decrement_stock", failing_decrement)
    resp = client.put(
        f"/goods-out/{created['id']}/approve", json={"action": "approve"}, headers=supervisor_headers
    )
    assert resp.status_code == 500
    assert resp.get_json() == {"success": False, "message": "Terjadi kesalahan pada server"}
    assert len(done) == 1
    assert _status_of(app, created["id"]) == OutgoingStatus.PENDING
    assert stock_of(app, a) == 2
    assert stock_of(app, b) == 2

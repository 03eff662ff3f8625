from flask import Blueprint, jsonify
from flask_login import current_user, login_required

from dao import goods_out as go_dao
from db.models.user import APPROVER_ROLES
from schemas.goods_out import ApprovalRequest, GoodsOutCreate, GoodsOutQuery
from utils.auth import roles_required
from utils.request import iso, page_params, pagination_json, parse_args, parse_body

goods_out_bp = Blueprint("goods_out_api", __name__, url_prefix="/goods-out")


def _user_ref(u):
    if not u:
        return None
    return {"id": u.id, "name": u.name, "username": u.username}


def shipment_json(s, with_lines: bool = False) -> dict:
    data = {
        "id": s.id,
        "transactionNo": s.transaction_no,
        "deliveryNo": s.delivery_no,
        "shipVia": s.ship_via,
        "date": iso(s.date),
        "destination": s.destination,
        "notes": s.notes,
        "status": s.status.value,
        "totalItems": sum(ln.quantity for ln in s.lines),
        "serialNumbers": [ln.serial_unit.serial_no for ln in s.lines if ln.serial_unit],
        "createdBy": _user_ref(s.created_by),
        "approvedBy": _user_ref(s.approved_by),
        "createdAt": iso(s.created_at),
        "updatedAt": iso(s.updated_at),
    }
    if with_lines:
        data["lines"] = [
            {
                "id": ln.id,
                "itemId": ln.item_id,
                "itemCode": ln.item.code,
                "itemName": ln.item.name,
                "unit": ln.item.unit,
                "quantity": ln.quantity,
                "serialUnitId": ln.serial_unit_id,
                "serialNo": ln.serial_unit.serial_no if ln.serial_unit else None,
            }
            for ln in s.lines
        ]
    return data


@goods_out_bp.route("", methods=["GET"])
@login_required
def goods_out_list():
    q = parse_args(GoodsOutQuery)
    page, limit = page_params(q.page, q.limit)
    p = go_dao.list_shipments(page, limit, q.search, q.status)
    return jsonify(
        {
            "success": True,
            "message": "Data berhasil diambil" if p.total else "Tidak ada data barang keluar",
            "data": [shipment_json(s) for s in p.items],
            "pagination": pagination_json(p),
        }
    )


@goods_out_bp.route("/<int:shipment_id>", methods=["GET"])
@login_required
def goods_out_detail(shipment_id: int):
    s = go_dao.get_shipment_or_404(shipment_id)
    return jsonify({"success": True, "data": shipment_json(s, with_lines=True)})


@goods_out_bp.route("", methods=["POST"])
@login_required
def goods_out_add():
    body = parse_body(GoodsOutCreate)
    s = go_dao.create_shipment(
        current_user.id,
        lines=[ln.model_dump() for ln in body.items],
        date=body.date,
        delivery_no=body.delivery_no,
        ship_via=body.ship_via,
        destination=body.destination,
        notes=body.notes,
    )
    return (
        jsonify(
            {
                "success": True,
                "message": "Barang keluar berhasil ditambahkan",
                "data": shipment_json(s, with_lines=True),
            }
        ),
        201,
    )


@goods_out_bp.route("/<int:shipment_id>", methods=["PUT"])
@login_required
def goods_out_edit(shipment_id: int):
    body = parse_body(GoodsOutCreate)
    s = go_dao.update_shipment(
        shipment_id,
        lines=[ln.model_dump() for ln in body.items],
        date=body.date,
        delivery_no=body.delivery_no,
        ship_via=body.ship_via,
        destination=body.destination,
        notes=body.notes,
    )
    return jsonify(
        {
            "success": True,
            "message": "Barang keluar berhasil diperbarui",
            "data": shipment_json(s, with_lines=True),
        }
    )


@goods_out_bp.route("/<int:shipment_id>/approve", methods=["PUT"])
@login_required
@roles_required(*APPROVER_ROLES)
def goods_out_approve(shipment_id: int):
    # action divalidasi sebelum menyentuh database
    body = parse_body(ApprovalRequest)
    s = go_dao.approve_shipment(shipment_id, body.action, current_user.id)
    verb = "disetujui" if body.action == go_dao.APPROVE else "ditolak"
    return jsonify(
        {
            "success": True,
            "message": f"Barang keluar berhasil {verb}",
            "data": {
                "id": s.id,
                "transactionNo": s.transaction_no,
                "status": s.status.value,
                "approverId": s.approved_by_id,
                "updatedAt": iso(s.updated_at),
            },
        }
    )


@goods_out_bp.route("/<int:shipment_id>", methods=["DELETE"])
@login_required
def goods_out_delete(shipment_id: int):
    go_dao.delete_shipment(shipment_id)
    return jsonify({"success": True, "message": "Barang keluar berhasil dihapus"})

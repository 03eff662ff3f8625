from flask import Blueprint, jsonify
from flask_login import current_user, login_required

from dao import goods_in as gi_dao
from schemas.goods_in import GoodsInCreate, GoodsInQuery
from utils.request import iso, page_params, pagination_json, parse_args, parse_body

goods_in_bp = Blueprint("goods_in_api", __name__, url_prefix="/goods-in")


def unit_json(u) -> dict:
    return {
        "id": u.id,
        "noSeri": u.serial_no,
        "lokasi": u.location,
        "keterangan": u.notes,
        "detailId": u.line_id,
        "createdAt": iso(u.created_at),
    }


def shipment_json(s, with_lines: bool = False) -> dict:
    data = {
        "id": s.id,
        "kodeKedatangan": s.arrival_code,
        "tanggal": iso(s.date),
        "namaSupplier": s.supplier_name,
        "noForm": s.form_no,
        "status": s.status,
        "totalItems": sum(ln.quantity for ln in s.lines),
        "createdBy": (
            {"id": s.created_by.id, "name": s.created_by.name} if s.created_by else None
        ),
        "createdAt": iso(s.created_at),
        "updatedAt": iso(s.updated_at),
    }
    if with_lines:
        data["details"] = [
            {
                "id": ln.id,
                "barang": {
                    "id": ln.item.id,
                    "kode": ln.item.code,
                    "nama": ln.item.name,
                    "satuan": ln.item.unit,
                },
                "jumlah": ln.quantity,
                "noSeriList": [unit_json(u) for u in ln.units],
            }
            for ln in s.lines
        ]
    return data


@goods_in_bp.route("", methods=["GET"])
@login_required
def goods_in_list():
    q = parse_args(GoodsInQuery)
    page, limit = page_params(q.page, q.limit)
    p = gi_dao.list_shipments(page, limit, q.search, q.start_date, q.end_date)
    return jsonify(
        {
            "success": True,
            "data": [shipment_json(s, with_lines=True) for s in p.items],
            "pagination": pagination_json(p),
        }
    )


@goods_in_bp.route("/<int:shipment_id>", methods=["GET"])
@login_required
def goods_in_detail(shipment_id: int):
    s = gi_dao.get_shipment_or_404(shipment_id)
    return jsonify({"success": True, "data": shipment_json(s, with_lines=True)})


@goods_in_bp.route("", methods=["POST"])
@login_required
def goods_in_add():
    body = parse_body(GoodsInCreate)
    s = gi_dao.create_shipment(
        current_user.id,
        date=body.date,
        arrival_code=body.arrival_code,
        supplier_name=body.supplier_name,
        form_no=body.form_no,
        status=body.status,
        details=[d.model_dump() for d in body.details],
    )
    return (
        jsonify(
            {
                "success": True,
                "message": "Barang masuk berhasil ditambahkan",
                "data": shipment_json(s, with_lines=True),
            }
        ),
        201,
    )


@goods_in_bp.route("/<int:shipment_id>", methods=["PUT"])
@login_required
def goods_in_edit(shipment_id: int):
    body = parse_body(GoodsInCreate)
    s = gi_dao.update_shipment(
        shipment_id,
        date=body.date,
        arrival_code=body.arrival_code,
        supplier_name=body.supplier_name,
        form_no=body.form_no,
        status=body.status,
        details=[d.model_dump() for d in body.details],
    )
    return jsonify(
        {
            "success": True,
            "message": "Barang masuk berhasil diperbarui",
            "data": shipment_json(s, with_lines=True),
        }
    )


@goods_in_bp.route("/<int:shipment_id>", methods=["DELETE"])
@login_required
def goods_in_delete(shipment_id: int):
    gi_dao.delete_shipment(shipment_id)
    return jsonify({"success": True, "message": "Barang masuk berhasil dihapus"})

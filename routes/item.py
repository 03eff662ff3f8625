from flask import Blueprint, jsonify
from flask_login import current_user, login_required

from dao import item as item_dao, serial_unit as unit_dao
from schemas.base import ListQuery
from schemas.item import (
    AssignCategory,
    ItemIn,
    ItemSearchQuery,
    SerialSearchQuery,
    SerialUnitsQuery,
)
from utils.request import iso, page_params, pagination_json, parse_args, parse_body

item_bp = Blueprint("item_api", __name__, url_prefix="/items")


def item_json(it) -> dict:
    return {
        "id": it.id,
        "kode": it.code,
        "nama": it.name,
        "jenis": (
            {"id": it.category.id, "nama": it.category.name} if it.category else None
        ),
        "satuan": it.unit,
        "stok": it.stock,
        "stokMinimum": it.min_stock,
        "lokasi": it.location,
        "deskripsi": it.description,
        "isActive": it.is_active,
        "createdAt": iso(it.created_at),
        "updatedAt": iso(it.updated_at),
    }


@item_bp.route("", methods=["GET"])
@login_required
def items_list():
    q = parse_args(ListQuery)
    page, limit = page_params(q.page, q.limit)
    p = item_dao.list_items(page, limit, q.search)
    return jsonify(
        {
            "success": True,
            "data": [item_json(it) for it in p.items],
            "pagination": pagination_json(p),
        }
    )


@item_bp.route("/<int:item_id>", methods=["GET"])
@login_required
def items_detail(item_id: int):
    return jsonify({"success": True, "data": item_json(item_dao.get_item_or_404(item_id))})


@item_bp.route("", methods=["POST"])
@login_required
def items_add():
    body = parse_body(ItemIn)
    it = item_dao.create_item(current_user.id, **body.model_dump())
    return (
        jsonify(
            {
                "success": True,
                "message": "Barang berhasil ditambahkan",
                "data": item_json(it),
            }
        ),
        201,
    )


@item_bp.route("/<int:item_id>", methods=["PUT"])
@login_required
def items_edit(item_id: int):
    body = parse_body(ItemIn)
    fields = body.model_dump()
    if "stock" not in body.model_fields_set:
        fields.pop("stock")  # stok lama dipertahankan
    it = item_dao.update_item(item_id, **fields)
    return jsonify(
        {"success": True, "message": "Barang berhasil diperbarui", "data": item_json(it)}
    )


@item_bp.route("/<int:item_id>", methods=["DELETE"])
@login_required
def items_delete(item_id: int):
    item_dao.delete_item(item_id)
    return jsonify({"success": True, "message": "Barang berhasil dihapus"})


@item_bp.route("/<int:item_id>/category", methods=["PUT"])
@login_required
def items_assign_category(item_id: int):
    body = parse_body(AssignCategory)
    it = item_dao.assign_category(item_id, body.category_id)
    return jsonify(
        {
            "success": True,
            "message": "Jenis barang berhasil ditetapkan",
            "data": item_json(it),
        }
    )


@item_bp.route("/search", methods=["GET"])
@login_required
def items_search():
    q = parse_args(ItemSearchQuery)
    payload = []
    for it in item_dao.search_items(q.q, q.limit):
        payload.append(
            {
                "id": it.id,
                "kode": it.code,
                "nama": it.name,
                "satuan": it.unit,
                "stok": it.stock,
                "lokasi": it.location,
                "jenis": it.category.name if it.category else "",
                "label": f"{it.code} - {it.name}",
                "value": it.id,
            }
        )
    return jsonify({"data": payload})


@item_bp.route("/serial-search", methods=["GET"])
@login_required
def items_serial_search():
    q = parse_args(SerialSearchQuery)
    payload = []
    for u in unit_dao.search_available_units(q.search, q.limit):
        it = u.line.item
        shipment = u.line.shipment
        payload.append(
            {
                "id": u.id,
                "noSeri": u.serial_no,
                "lokasi": u.location,
                "barangId": it.id,
                "barangKode": it.code,
                "barangNama": it.name,
                "barangSatuan": it.unit,
                "barangMasukId": shipment.id,
                "kodeKedatangan": shipment.arrival_code,
                "tanggalMasuk": iso(shipment.date),
            }
        )
    return jsonify({"success": True, "data": payload})


@item_bp.route("/<int:item_id>/serial-units", methods=["GET"])
@login_required
def items_serial_units(item_id: int):
    q = parse_args(SerialUnitsQuery)
    it = item_dao.get_item_or_404(item_id)
    units = unit_dao.available_units_for_item(it.id, q.search)
    return jsonify(
        {
            "success": True,
            "data": [
                {
                    "id": u.id,
                    "noSeri": u.serial_no,
                    "lokasi": u.location,
                    "keterangan": u.notes,
                    "barang": {"id": it.id, "kode": it.code, "nama": it.name},
                }
                for u in units
            ],
        }
    )

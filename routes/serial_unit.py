from flask import Blueprint, jsonify
from flask_login import login_required

from dao import serial_unit as unit_dao
from routes.goods_in import unit_json
from schemas.goods_in import SerialUnitCreate, SerialUnitUpdate
from utils.request import parse_body

# no seri per detail barang masuk
serial_unit_bp = Blueprint("serial_unit_api", __name__)


@serial_unit_bp.route("/goods-in/lines/<int:line_id>/serial-units", methods=["GET"])
@login_required
def serial_units_list(line_id: int):
    units = unit_dao.list_units(line_id)
    return jsonify({"success": True, "data": [unit_json(u) for u in units]})


@serial_unit_bp.route("/goods-in/lines/<int:line_id>/serial-units", methods=["POST"])
@login_required
def serial_units_add(line_id: int):
    body = parse_body(SerialUnitCreate)
    u = unit_dao.add_unit(line_id, body.serial_no, body.location, body.notes)
    return (
        jsonify(
            {"success": True, "message": "No Seri berhasil ditambahkan", "data": unit_json(u)}
        ),
        201,
    )


@serial_unit_bp.route("/serial-units/<int:unit_id>", methods=["PUT"])
@login_required
def serial_units_edit(unit_id: int):
    body = parse_body(SerialUnitUpdate)
    u = unit_dao.update_unit(unit_id, **body.changes())
    return jsonify(
        {"success": True, "message": "No Seri berhasil diperbarui", "data": unit_json(u)}
    )


@serial_unit_bp.route("/serial-units/<int:unit_id>", methods=["DELETE"])
@login_required
def serial_units_delete(unit_id: int):
    unit_dao.delete_unit(unit_id)
    return jsonify({"success": True, "message": "No Seri berhasil dihapus"})

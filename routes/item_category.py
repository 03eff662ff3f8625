from flask import Blueprint, jsonify
from flask_login import login_required

from dao import item_category as category_dao
from schemas.item import CategoryIn, CategoryQuery
from utils.request import iso, parse_args, parse_body

category_bp = Blueprint("item_category_api", __name__, url_prefix="/item-categories")


def category_json(c) -> dict:
    return {
        "id": c.id,
        "nama": c.name,
        "deskripsi": c.description,
        "isActive": c.is_active,
        "createdAt": iso(c.created_at),
        "updatedAt": iso(c.updated_at),
    }


@category_bp.route("", methods=["GET"])
@login_required
def categories_list():
    q = parse_args(CategoryQuery)
    categories = category_dao.list_categories(q.search)
    return jsonify({"success": True, "data": [category_json(c) for c in categories]})


@category_bp.route("", methods=["POST"])
@login_required
def categories_add():
    body = parse_body(CategoryIn)
    c = category_dao.create_category(body.name, body.description)
    return (
        jsonify(
            {
                "success": True,
                "message": "Jenis barang berhasil ditambahkan",
                "data": category_json(c),
            }
        ),
        201,
    )


@category_bp.route("/<int:category_id>", methods=["PUT"])
@login_required
def categories_edit(category_id: int):
    body = parse_body(CategoryIn)
    c = category_dao.update_category(category_id, body.name, body.description)
    return jsonify(
        {
            "success": True,
            "message": "Jenis barang berhasil diperbarui",
            "data": category_json(c),
        }
    )


@category_bp.route("/<int:category_id>", methods=["DELETE"])
@login_required
def categories_delete(category_id: int):
    category_dao.delete_category(category_id)
    return jsonify({"success": True, "message": "Jenis barang berhasil dihapus"})

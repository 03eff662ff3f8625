from flask import Blueprint, jsonify
from flask_login import login_required

from dao import user as user_dao
from db.models.user import UserRole
from routes.auth import user_json
from schemas.base import ListQuery
from schemas.user import JobTypeQuery, RoleQuery, UserCreate, UserUpdate
from utils.auth import roles_required
from utils.request import page_params, pagination_json, parse_args, parse_body

user_bp = Blueprint("user_api", __name__, url_prefix="/users")


def _brief(u) -> dict:
    return {
        "id": u.id,
        "name": u.name,
        "username": u.username,
        "role": u.role.value,
        "jobType": u.job_type.value if u.job_type else None,
    }


@user_bp.route("", methods=["GET"])
@login_required
def users_list():
    q = parse_args(ListQuery)
    page, limit = page_params(q.page, q.limit)
    p = user_dao.list_users(page, limit, q.search)
    return jsonify(
        {
            "success": True,
            "data": [user_json(u) for u in p.items],
            "pagination": pagination_json(p),
        }
    )


@user_bp.route("", methods=["POST"])
@login_required
@roles_required(UserRole.ADMIN)
def users_add():
    body = parse_body(UserCreate)
    u = user_dao.create_user(
        username=body.username,
        password=body.password,
        name=body.name,
        email=body.email,
        role=body.role,
        job_type=body.job_type,
    )
    return (
        jsonify(
            {"success": True, "message": "User berhasil ditambahkan", "data": user_json(u)}
        ),
        201,
    )


@user_bp.route("/<int:user_id>", methods=["PUT"])
@login_required
@roles_required(UserRole.ADMIN)
def users_edit(user_id: int):
    body = parse_body(UserUpdate)
    u = user_dao.update_user(user_id, body.role, body.is_active, body.job_type)
    return jsonify(
        {"success": True, "message": "User berhasil diupdate", "data": user_json(u)}
    )


@user_bp.route("/<int:user_id>", methods=["DELETE"])
@login_required
@roles_required(UserRole.ADMIN)
def users_delete(user_id: int):
    user_dao.delete_user(user_id)
    return jsonify({"success": True, "message": "User berhasil dihapus"})


@user_bp.route("/by-role", methods=["GET"])
@login_required
def users_by_role():
    q = parse_args(RoleQuery)
    users = user_dao.list_by_role(q.role)
    return jsonify(
        {
            "success": True,
            "data": [_brief(u) for u in users],
            "message": f"Users found for role: {q.role.value}",
        }
    )


@user_bp.route("/by-job-type", methods=["GET"])
@login_required
def users_by_job_type():
    q = parse_args(JobTypeQuery)
    users = user_dao.list_by_job_type(q.job_type)
    return jsonify(
        {
            "success": True,
            "data": [_brief(u) for u in users],
            "message": f"Users found for job type: {q.job_type.value}",
        }
    )

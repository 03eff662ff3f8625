from flask import Blueprint, jsonify
from flask_login import current_user, login_required, logout_user

from dao import user as user_dao
from schemas.auth import LoginRequest, ProfileUpdate
from utils.auth import create_access_token
from utils.request import iso, parse_body

auth_bp = Blueprint("auth", __name__, url_prefix="/auth")


def user_json(u) -> dict:
    return {
        "id": u.id,
        "username": u.username,
        "name": u.name,
        "email": u.email,
        "role": u.role.value,
        "jobType": u.job_type.value if u.job_type else None,
        "isActive": u.is_active,
        "createdAt": iso(u.created_at),
        "updatedAt": iso(u.updated_at),
    }


@auth_bp.route("/login", methods=["POST"])
def login():
    body = parse_body(LoginRequest)
    user = user_dao.authenticate(body.username, body.password)
    return jsonify(
        {
            "success": True,
            "message": "Login berhasil",
            "token": create_access_token(user),
            "user": user_json(user),
        }
    )


@auth_bp.route("/me")
@login_required
def me():
    return jsonify({"success": True, "data": user_json(current_user)})


@auth_bp.route("/update-profile", methods=["PUT"])
@login_required
def update_profile():
    body = parse_body(ProfileUpdate)
    u = user_dao.update_profile(
        current_user.id,
        name=body.name,
        username=body.username,
        current_password=body.current_password,
        new_password=body.new_password,
    )
    return jsonify({"success": True, "message": "Profil berhasil diupdate", "data": user_json(u)})


@auth_bp.route("/logout", methods=["POST"])
def logout():
    # token stateless; yang dihapus hanya sesi panel /manage (kalau ada)
    logout_user()
    return jsonify({"success": True, "message": "Logout berhasil"})

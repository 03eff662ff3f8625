# utils/auth.py
from datetime import datetime, timedelta, timezone
from functools import wraps

import jwt
from flask import current_app, g
from flask_login import current_user

from configs import db, login
from db.models.user import User
from utils.errors import AuthenticationError, ForbiddenError, error_response


def extract_token(auth_header: str | None) -> str | None:
    """Ambil token dari header 'Authorization: Bearer <token>'."""
    if not auth_header:
        return None
    parts = auth_header.split(" ")
    if len(parts) != 2 or parts[0] != "Bearer" or not parts[1]:
        return None
    return parts[1]


def create_access_token(user: User) -> str:
    cfg = current_app.config
    now = datetime.now(timezone.utc)
    payload = {
        "userId": str(user.id),
        "username": user.username,
        "role": user.role.value,
        "iss": cfg["JWT_ISSUER"],
        "aud": cfg["JWT_AUDIENCE"],
        "iat": now,
        "exp": now + timedelta(hours=cfg["JWT_EXPIRES_HOURS"]),
    }
    return jwt.encode(payload, cfg["JWT_SECRET"], algorithm="HS256")


def decode_access_token(token: str) -> dict:
    cfg = current_app.config
    try:
        return jwt.decode(
            token,
            cfg["JWT_SECRET"],
            algorithms=["HS256"],
            issuer=cfg["JWT_ISSUER"],
            audience=cfg["JWT_AUDIENCE"],
        )
    except jwt.ExpiredSignatureError:
        raise AuthenticationError("Token has expired")
    except jwt.InvalidTokenError:
        raise AuthenticationError("Token tidak valid")


def user_from_token(token: str) -> User:
    payload = decode_access_token(token)
    try:
        user_id = int(payload.get("userId"))
    except (TypeError, ValueError):
        raise AuthenticationError("Token tidak valid")

    user = db.session.get(User, user_id)
    if not user:
        raise AuthenticationError("User tidak ditemukan")
    if not user.is_active:
        raise AuthenticationError("Akun tidak aktif")
    return user


def init_auth(login_manager):
    @login_manager.user_loader
    def load_user(user_id):
        # sesi panel admin; akun nonaktif langsung keluar
        user = db.session.get(User, int(user_id))
        return user if user and user.is_active else None

    @login_manager.request_loader
    def load_user_from_request(req):
        token = extract_token(req.headers.get("Authorization"))
        if not token:
            g.auth_error = "Access token required"
            return None
        try:
            return user_from_token(token)
        except AuthenticationError as e:
            g.auth_error = e.message
            return None

    @login_manager.unauthorized_handler
    def unauthorized():
        return error_response(g.get("auth_error", "Access token required"), 401)


def roles_required(*roles):
    def deco(fn):
        @wraps(fn)
        def inner(*a, **kw):
            if not current_user.is_authenticated:
                return login.unauthorized()
            if not current_user.has_role(*roles):
                raise ForbiddenError()
            return fn(*a, **kw)

        return inner

    return deco


from typing import List, Optional

from sqlalchemy import or_
from sqlalchemy.exc import SQLAlchemyError
from werkzeug.security import check_password_hash, generate_password_hash

from configs import db
from db.models.user import JobType, User, UserRole
from utils.errors import AuthenticationError, ConflictError, NotFoundError, ValidationError


def authenticate(username: str, password: str) -> User:
    user = User.query.filter_by(username=username).first()
    if not user or not check_password_hash(user.password_hash, password):
        raise AuthenticationError("Username atau password salah")
    if not user.is_active:
        raise AuthenticationError("Akun tidak aktif")
    return user


def list_users(page: int, limit: int, search: str = ""):
    stmt = db.select(User).where(User.is_active.is_(True))
    if search:
        stmt = stmt.where(
            or_(
                User.username.icontains(search, autoescape=True),
                User.name.icontains(search, autoescape=True),
                User.email.icontains(search, autoescape=True),
            )
        )
    stmt = stmt.order_by(User.username.asc())
    return db.paginate(stmt, page=page, per_page=limit, error_out=False)


def list_by_role(role: UserRole) -> List[User]:
    return (
        User.query.filter_by(role=role, is_active=True)
        .order_by(User.name.asc())
        .all()
    )


def list_by_job_type(job_type: JobType) -> List[User]:
    return (
        User.query.filter_by(job_type=job_type, is_active=True)
        .order_by(User.name.asc())
        .all()
    )


def get_user(user_id: int) -> Optional[User]:
    return db.session.get(User, user_id)


def get_user_or_404(user_id: int) -> User:
    u = get_user(user_id)
    if not u:
        raise NotFoundError("User tidak ditemukan")
    return u


def create_user(
    username: str,
    password: str,
    name: str,
    email: str | None = None,
    role: UserRole = UserRole.PINDAH_LOKASI,
    job_type: JobType | None = None,
) -> User:
    if User.query.filter_by(username=username).first():
        raise ConflictError("Username sudah ada")
    u = User(
        username=username,
        password_hash=generate_password_hash(password),
        name=name,
        email=email or None,
        role=role,
        job_type=job_type,
        is_active=True,
    )
    db.session.add(u)
    _commit()
    return u


def update_user(
    user_id: int, role: UserRole, is_active: bool | None, job_type: JobType | None
) -> User:
    u = get_user_or_404(user_id)
    u.role = role
    if is_active is not None:
        u.is_active = is_active
    u.job_type = job_type
    _commit()
    return u


def update_profile(
    user_id: int,
    name: str,
    username: str,
    current_password: str | None = None,
    new_password: str | None = None,
) -> User:
    """Profil milik user sendiri; ganti password wajib dengan password lama."""
    u = get_user_or_404(user_id)
    if username != u.username:
        taken = User.query.filter(User.username == username, User.id != u.id).first()
        if taken:
            raise ConflictError("Username sudah digunakan")
    if new_password:
        if not check_password_hash(u.password_hash, current_password or ""):
            raise ValidationError("Password saat ini tidak benar")
        u.password_hash = generate_password_hash(new_password)
    u.name = name
    u.username = username
    _commit()
    return u


def delete_user(user_id: int) -> None:
    u = get_user_or_404(user_id)
    if u.role == UserRole.ADMIN:
        raise ConflictError("Tidak dapat menghapus user admin")
    u.is_active = False
    _commit()


def _commit():
    try:
        db.session.commit()
    except SQLAlchemyError:
        db.session.rollback()
        raise

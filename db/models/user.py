# db/models/user.py
import enum
from datetime import datetime

from configs import db
from flask_login import UserMixin


class UserRole(enum.Enum):
    ADMIN = "admin"
    SUPERVISOR = "supervisor"  # approver barang keluar
    INSPEKSI_MESIN = "inspeksi_mesin"
    ASSEMBLY_STAFF = "assembly_staff"
    QC_STAFF = "qc_staff"
    PDI_STAFF = "pdi_staff"
    PAINTING_STAFF = "painting_staff"
    PINDAH_LOKASI = "pindah_lokasi"


class JobType(enum.Enum):
    STAFF = "staff"
    SUPERVISOR = "supervisor"
    ADMIN = "admin"


APPROVER_ROLES = (UserRole.ADMIN, UserRole.SUPERVISOR)


class User(db.Model, UserMixin):
    __tablename__ = "user_account"

    id = db.Column(db.Integer, primary_key=True)
    username = db.Column(db.String(80), unique=True, nullable=False, index=True)
    password_hash = db.Column(db.String(255), nullable=False)
    name = db.Column(db.String(120), nullable=False)
    email = db.Column(db.String(120))
    role = db.Column(
        db.Enum(UserRole, name="userrole"),
        default=UserRole.PINDAH_LOKASI,
        nullable=False,
    )
    job_type = db.Column(db.Enum(JobType, name="jobtype"))
    is_active = db.Column(db.Boolean, default=True, nullable=False)
    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)
    updated_at = db.Column(
        db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False
    )

    def get_id(self):
        return str(self.id)

    def has_role(self, *roles: UserRole):
        """True kalau role user termasuk salah satu role yang diberikan"""
        return self.role in roles

    def __str__(self):
        return self.username

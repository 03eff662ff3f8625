# schemas/user.py
import re
from typing import Optional

from pydantic import Field, field_validator, model_validator

from db.models.user import JobType, UserRole
from schemas.base import ApiModel, require


def password_problems(password: str) -> list:
    errors = []
    if len(password) < 6:
        errors.append("Password minimal 6 karakter")
    if not re.search(r"[A-Z]", password):
        errors.append("Password harus mengandung huruf besar")
    if not re.search(r"[a-z]", password):
        errors.append("Password harus mengandung huruf kecil")
    if not re.search(r"\d", password):
        errors.append("Password harus mengandung angka")
    return errors


def _to_enum(enum_cls, value, message):
    if value is None or value == "":
        return None
    if isinstance(value, enum_cls):
        return value
    try:
        return enum_cls(value)
    except ValueError:
        raise ValueError(message)


class UserCreate(ApiModel):
    username: str
    password: str
    name: str
    email: Optional[str] = None
    role: UserRole = UserRole.PINDAH_LOKASI
    job_type: Optional[JobType] = Field(None, alias="jobType")

    @model_validator(mode="before")
    @classmethod
    def _required(cls, data):
        return require(
            data, ("username", "password", "name"), "Username, password, dan nama wajib diisi"
        )

    @field_validator("password")
    @classmethod
    def _strong_password(cls, v):
        problems = password_problems(v)
        if problems:
            raise ValueError("Password tidak memenuhi kriteria: " + ", ".join(problems))
        return v

    @field_validator("role", mode="before")
    @classmethod
    def _role(cls, v):
        return _to_enum(UserRole, v, "Role tidak valid") or UserRole.PINDAH_LOKASI

    @field_validator("job_type", mode="before")
    @classmethod
    def _job_type(cls, v):
        return _to_enum(JobType, v, "Job type tidak valid")


class UserUpdate(ApiModel):
    role: UserRole
    is_active: Optional[bool] = Field(None, alias="isActive")
    job_type: Optional[JobType] = Field(None, alias="jobType")

    @model_validator(mode="before")
    @classmethod
    def _required(cls, data):
        return require(data, ("role",), "Role wajib diisi")

    @field_validator("role", mode="before")
    @classmethod
    def _role(cls, v):
        return _to_enum(UserRole, v, "Role tidak valid")

    @field_validator("job_type", mode="before")
    @classmethod
    def _job_type(cls, v):
        return _to_enum(JobType, v, "Job type tidak valid")


class RoleQuery(ApiModel):
    role: UserRole

    @model_validator(mode="before")
    @classmethod
    def _required(cls, data):
        return require(data, ("role",), "Role parameter is required")

    @field_validator("role", mode="before")
    @classmethod
    def _role(cls, v):
        return _to_enum(UserRole, v, "Invalid role")


class JobTypeQuery(ApiModel):
    job_type: JobType = Field(alias="jobType")

    @model_validator(mode="before")
    @classmethod
    def _required(cls, data):
        return require(data, ("jobType",), "Job type parameter is required")

    @field_validator("job_type", mode="before")
    @classmethod
    def _job_type(cls, v):
        return _to_enum(JobType, v, "Invalid job type")

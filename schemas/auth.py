# schemas/auth.py
from typing import Optional

from pydantic import Field, model_validator

from schemas.base import ApiModel, require
from schemas.user import password_problems


class LoginRequest(ApiModel):
    username: str
    password: str

    @model_validator(mode="before")
    @classmethod
    def _required(cls, data):
        return require(data, ("username", "password"), "Username dan password wajib diisi")


class ProfileUpdate(ApiModel):
    name: str
    username: str
    current_password: Optional[str] = Field(None, alias="currentPassword")
    new_password: Optional[str] = Field(None, alias="newPassword")

    @model_validator(mode="before")
    @classmethod
    def _required(cls, data):
        return require(data, ("name", "username"), "Nama dan username wajib diisi")

    @model_validator(mode="after")
    def _password_change(self):
        if not self.new_password:
            return self
        if not self.current_password:
            raise ValueError("Password saat ini wajib diisi untuk mengubah password")
        problems = password_problems(self.new_password)
        if problems:
            raise ValueError("Password baru tidak memenuhi kriteria: " + ", ".join(problems))
        return self

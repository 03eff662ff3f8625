# schemas/base.py
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class ApiModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True, str_strip_whitespace=True)


def require(data, fields, message):
    """Cek field wajib (tidak boleh kosong) sebelum validasi tipe."""
    if not isinstance(data, dict):
        raise ValueError(message)
    for f in fields:
        v = data.get(f)
        if v is None or (isinstance(v, str) and not v.strip()):
            raise ValueError(message)
    return data


class ListQuery(ApiModel):
    page: Optional[int] = Field(None, ge=1)
    limit: Optional[int] = Field(None, ge=1)
    search: str = ""

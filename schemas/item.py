# schemas/item.py
from typing import Optional

from pydantic import Field, model_validator

from schemas.base import ApiModel, require


class ItemIn(ApiModel):
    code: str = Field(alias="kode")
    name: str = Field(alias="nama")
    category_id: Optional[int] = Field(None, alias="jenisId")
    unit: Optional[str] = Field(None, alias="satuan")
    stock: int = Field(0, ge=0, alias="stok")
    min_stock: int = Field(0, ge=0, alias="stokMinimum")
    location: Optional[str] = Field(None, alias="lokasi")
    description: Optional[str] = Field(None, alias="deskripsi")

    @model_validator(mode="before")
    @classmethod
    def _required(cls, data):
        return require(data, ("kode", "nama"), "Kode dan nama barang wajib diisi")


class AssignCategory(ApiModel):
    category_id: int = Field(alias="jenisId")

    @model_validator(mode="before")
    @classmethod
    def _required(cls, data):
        return require(data, ("jenisId",), "ID jenis barang wajib diisi")


class CategoryIn(ApiModel):
    name: str = Field(alias="nama")
    description: Optional[str] = Field(None, alias="deskripsi")

    @model_validator(mode="before")
    @classmethod
    def _required(cls, data):
        return require(data, ("nama",), "Nama jenis barang wajib diisi")


class ItemSearchQuery(ApiModel):
    q: str = ""
    limit: int = Field(10, ge=1, le=100)


class SerialSearchQuery(ApiModel):
    search: str = ""
    limit: int = Field(10, ge=1, le=100)


class SerialUnitsQuery(ApiModel):
    search: str = ""


class CategoryQuery(ApiModel):
    search: str = ""

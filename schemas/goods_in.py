# schemas/goods_in.py
from datetime import date, datetime
from typing import List, Optional

from pydantic import Field, field_validator, model_validator

from schemas.base import ApiModel, ListQuery, require


class UnitIn(ApiModel):
    serial_no: Optional[str] = Field(None, alias="serialNo")
    location: Optional[str] = None
    notes: Optional[str] = None


class GoodsInLine(ApiModel):
    item_id: int = Field(alias="itemId")
    quantity: int = Field(gt=0)
    units: List[UnitIn] = Field(default_factory=list)

    @model_validator(mode="after")
    def _units_fit_quantity(self):
        if len(self.units) > self.quantity:
            raise ValueError("Jumlah no seri melebihi jumlah barang")
        return self


class GoodsInCreate(ApiModel):
    date: datetime
    arrival_code: str = Field(alias="arrivalCode")
    supplier_name: str = Field(alias="supplierName")
    form_no: str = Field(alias="formNo")
    status: str
    details: List[GoodsInLine] = Field(None, validate_default=True)

    @model_validator(mode="before")
    @classmethod
    def _required(cls, data):
        return require(
            data,
            ("date", "arrivalCode", "supplierName", "formNo", "status"),
            "Semua field wajib diisi",
        )

    @field_validator("details", mode="before")
    @classmethod
    def _has_details(cls, v):
        if not v or not isinstance(v, list):
            raise ValueError(
                "Minimal satu detail barang dengan jumlah minimal 1 harus ditambahkan"
            )
        return v


class GoodsInQuery(ListQuery):
    start_date: Optional[date] = Field(None, alias="startDate")
    end_date: Optional[date] = Field(None, alias="endDate")


class SerialUnitCreate(ApiModel):
    serial_no: str = Field(alias="noSeri")
    location: Optional[str] = Field(None, alias="lokasi")
    notes: Optional[str] = Field(None, alias="keterangan")

    @model_validator(mode="before")
    @classmethod
    def _required(cls, data):
        return require(data, ("noSeri",), "No Seri wajib diisi")


class SerialUnitUpdate(ApiModel):
    serial_no: Optional[str] = Field(None, alias="noSeri")
    location: Optional[str] = Field(None, alias="lokasi")
    notes: Optional[str] = Field(None, alias="keterangan")

    @model_validator(mode="after")
    def _something_to_change(self):
        if not self.model_fields_set:
            raise ValueError("Minimal satu field (noSeri, lokasi atau keterangan) harus diisi")
        if "serial_no" in self.model_fields_set and not self.serial_no:
            raise ValueError("No Seri wajib diisi")
        return self

    def changes(self) -> dict:
        return {k: getattr(self, k) for k in self.model_fields_set}

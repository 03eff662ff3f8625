# schemas/goods_out.py
from datetime import datetime
from typing import Any, List, Optional

from pydantic import Field, field_validator

from db.models.outgoing import OutgoingStatus
from schemas.base import ApiModel, ListQuery

ACTIONS = ("approve", "reject")


class ApprovalRequest(ApiModel):
    action: Any = Field(None, validate_default=True)

    @field_validator("action")
    @classmethod
    def _known_action(cls, v):
        if v not in ACTIONS:
            raise ValueError("Action harus approve atau reject")
        return v


class GoodsOutLine(ApiModel):
    item_id: int = Field(alias="itemId")
    qty: int = Field(gt=0)
    serial_unit_id: Optional[int] = Field(None, alias="serialUnitId")


class GoodsOutCreate(ApiModel):
    date: Optional[datetime] = None
    delivery_no: Optional[str] = Field(None, alias="deliveryNo")
    ship_via: Optional[str] = Field(None, alias="shipVia")
    destination: Optional[str] = None
    notes: Optional[str] = None
    items: List[GoodsOutLine] = Field(None, validate_default=True)

    @field_validator("items", mode="before")
    @classmethod
    def _has_items(cls, v):
        if not v or not isinstance(v, list):
            raise ValueError("Detail barang wajib diisi")
        return v


class GoodsOutQuery(ListQuery):
    status: Optional[OutgoingStatus] = None

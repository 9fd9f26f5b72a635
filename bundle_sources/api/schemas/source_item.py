# bundle_sources/api/schemas/source_item.py
from __future__ import annotations

from decimal import Decimal
from typing import Annotated, Any, Dict, List, Optional

from pydantic import BaseModel, Field, field_validator

from bundle_sources.domain.source_item import SourceItemValue
from bundle_sources.models.enums import SourceItemStatus


class SourceItemIn(BaseModel):
    source_code: str = Field(..., min_length=1, max_length=64)
    sku: str = Field(..., min_length=1, max_length=64)
    # ✅ 删除请求里 quantity / status 可省略
    quantity: Decimal = Field(Decimal("0"), ge=0)
    status: SourceItemStatus = Field(SourceItemStatus.IN_STOCK)

    # 先去空白再校验长度，"   " 不能当作合法 code
    @field_validator("source_code", "sku", mode="before")
    @classmethod
    def _trim(cls, v):
        return v.strip() if isinstance(v, str) else v

    def to_value(self) -> SourceItemValue:
        return SourceItemValue(
            source_code=self.source_code,
            sku=self.sku,
            quantity=self.quantity,
            status=self.status,
        )


class SourceItemsIn(BaseModel):
    source_items: List[SourceItemIn] = Field(..., min_length=1)


class SourceItemOut(BaseModel):
    source_code: str
    sku: str
    quantity: float
    status: int

    @classmethod
    def from_value(cls, v: SourceItemValue) -> "SourceItemOut":
        return cls(
            source_code=v.source_code,
            sku=v.sku,
            quantity=float(v.quantity),
            status=int(v.status),
        )


class SourceItemsWriteOut(BaseModel):
    ok: bool = True
    count: int


class SourceItemSearchOut(BaseModel):
    items: List[SourceItemOut]
    total_count: int
    search_criteria: Dict[str, Any]


class AssignmentCheckIn(BaseModel):
    sku: str = Field(..., min_length=1, max_length=64)
    source_codes: List[Annotated[str, Field(min_length=1, max_length=64)]] = Field(..., min_length=1)

    @field_validator("sku", mode="before")
    @classmethod
    def _trim_sku(cls, v):
        return v.strip() if isinstance(v, str) else v

    @field_validator("source_codes", mode="before")
    @classmethod
    def _trim_codes(cls, v):
        if isinstance(v, list):
            return [c.strip() if isinstance(c, str) else c for c in v]
        return v


class AssignmentCheckOut(BaseModel):
    allowed: bool
    sku: str
    source_code: Optional[str] = None
    message: Optional[str] = None

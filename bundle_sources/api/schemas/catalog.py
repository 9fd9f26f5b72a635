# bundle_sources/api/schemas/catalog.py
from __future__ import annotations

from decimal import Decimal
from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from bundle_sources.models.enums import PriceType, ProductType, ShipmentType


class SourceCreateIn(BaseModel):
    source_code: str = Field(..., min_length=1, max_length=64)
    name: str = Field(..., min_length=1, max_length=128)
    enabled: bool = True

    @field_validator("source_code", "name", mode="before")
    @classmethod
    def _trim(cls, v):
        return v.strip() if isinstance(v, str) else v


class SourceOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    source_code: str
    name: str
    enabled: bool


class SourceListOut(BaseModel):
    ok: bool = True
    data: List[SourceOut]


class ProductCreateIn(BaseModel):
    sku: str = Field(..., min_length=1, max_length=64)
    name: str = Field(..., min_length=1, max_length=255)
    type_id: ProductType = Field(ProductType.SIMPLE)
    # 仅 bundle：不传默认 together
    shipment_type: Optional[ShipmentType] = None

    @field_validator("sku", "name", mode="before")
    @classmethod
    def _trim(cls, v):
        return v.strip() if isinstance(v, str) else v


BundleOptionType = Literal["select", "radio", "checkbox", "multi"]


class BundleOptionCreateIn(BaseModel):
    title: str = Field(..., min_length=1, max_length=255)
    type: BundleOptionType = "select"
    required: bool = True
    position: int = Field(0, ge=0)


class BundleOptionCreateOut(BaseModel):
    option_id: int


class LinkedProductIn(BaseModel):
    """挂子商品的载荷；id / option_id 只做兼容接收，以路径参数为准。"""

    sku: str = Field(..., min_length=1, max_length=64)
    id: Optional[int] = None
    option_id: Optional[int] = None
    qty: Decimal = Field(Decimal("1"), gt=0)
    price: Decimal = Field(Decimal("0"), ge=0)
    price_type: PriceType = Field(PriceType.FIXED)
    position: int = Field(0, ge=0)
    is_default: bool = False
    can_change_quantity: bool = False

    @field_validator("sku", mode="before")
    @classmethod
    def _trim_sku(cls, v):
        return v.strip() if isinstance(v, str) else v


class AddChildIn(BaseModel):
    linked_product: LinkedProductIn


class BundleLinkOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    sku: str
    option_id: int
    qty: float
    price: float
    price_type: int
    position: int
    is_default: bool
    can_change_quantity: bool


class BundleOptionOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    option_id: int = Field(validation_alias="id")
    title: str
    type: str
    required: bool
    position: int
    product_links: List[BundleLinkOut] = Field(validation_alias="links")


class ProductOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    sku: str
    name: str
    type_id: ProductType
    shipment_type: Optional[ShipmentType] = None
    bundle_product_options: Optional[List[BundleOptionOut]] = None

# bundle_sources/models/product.py
from __future__ import annotations

from typing import TYPE_CHECKING, List, Optional

from sqlalchemy import CheckConstraint, Integer, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from bundle_sources.db.base import Base

if TYPE_CHECKING:
    from .bundle import BundleOption


class Product(Base):
    """
    商品主档：

        id              INTEGER PRIMARY KEY
        sku             VARCHAR(64) UNIQUE NOT NULL
        name            VARCHAR(255) NOT NULL
        type_id         VARCHAR(16) NOT NULL      simple / bundle
        shipment_type   VARCHAR(16) NULL          仅 bundle：together / separately
    """

    __tablename__ = "products"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    sku: Mapped[str] = mapped_column(String(64), nullable=False, unique=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    type_id: Mapped[str] = mapped_column(String(16), nullable=False, server_default="simple")
    shipment_type: Mapped[Optional[str]] = mapped_column(String(16), nullable=True)

    __table_args__ = (
        CheckConstraint("type_id IN ('simple', 'bundle')", name="ck_products_type_id"),
        CheckConstraint(
            "shipment_type IS NULL OR shipment_type IN ('together', 'separately')",
            name="ck_products_shipment_type",
        ),
    )

    options: Mapped[List["BundleOption"]] = relationship(
        "BundleOption",
        back_populates="parent",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="[BundleOption.position, BundleOption.id]",
        lazy="selectin",
    )

    def __repr__(self) -> str:
        return f"<Product id={self.id} sku={self.sku!r} type={self.type_id}>"

# bundle_sources/models/bundle.py
from __future__ import annotations

from decimal import Decimal
from typing import List

from sqlalchemy import (
    Boolean,
    ForeignKey,
    Integer,
    Numeric,
    String,
    UniqueConstraint,
    false,
    true,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from bundle_sources.db.base import Base


class BundleOption(Base):
    __tablename__ = "bundle_options"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    parent_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("products.id", ondelete="CASCADE"), nullable=False, index=True
    )
    title: Mapped[str] = mapped_column(String(255), nullable=False)

    # select | radio | checkbox | multi（只存储，展示层用）
    type: Mapped[str] = mapped_column(String(16), nullable=False, server_default="select")
    required: Mapped[bool] = mapped_column(Boolean, nullable=False, server_default=true())
    position: Mapped[int] = mapped_column(Integer, nullable=False, server_default="0")

    parent = relationship("Product", back_populates="options")
    links: Mapped[List["BundleLink"]] = relationship(
        back_populates="option",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="[BundleLink.position, BundleLink.id]",
        lazy="selectin",
    )


class BundleLink(Base):
    """
    option → 子商品 链接。子商品按 sku 引用（与 source item 同一维度）。
    同一 option 下同一 sku 只能出现一次。
    """

    __tablename__ = "bundle_links"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    option_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("bundle_options.id", ondelete="CASCADE"), nullable=False, index=True
    )
    sku: Mapped[str] = mapped_column(
        String(64), ForeignKey("products.sku", ondelete="CASCADE"), nullable=False, index=True
    )

    qty: Mapped[Decimal] = mapped_column(Numeric(12, 4), nullable=False, server_default="1")
    price: Mapped[Decimal] = mapped_column(Numeric(12, 4), nullable=False, server_default="0")
    price_type: Mapped[int] = mapped_column(Integer, nullable=False, server_default="0")
    position: Mapped[int] = mapped_column(Integer, nullable=False, server_default="0")
    is_default: Mapped[bool] = mapped_column(Boolean, nullable=False, server_default=false())
    can_change_quantity: Mapped[bool] = mapped_column(Boolean, nullable=False, server_default=false())

    __table_args__ = (UniqueConstraint("option_id", "sku", name="uq_bundle_links_option_sku"),)

    option: Mapped["BundleOption"] = relationship(back_populates="links")

    def __repr__(self) -> str:
        return f"<BundleLink option={self.option_id} sku={self.sku!r}>"

"""baseline: sources / products / bundle options+links / source_items

Revision ID: 7c1e2a9b4d10
Revises:
Create Date: 2026-10-17 09:00:00.000000

"""
from __future__ import annotations

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = "7c1e2a9b4d10"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "sources",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("source_code", sa.String(length=64), nullable=False),
        sa.Column("name", sa.String(length=128), nullable=False),
        sa.Column("enabled", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.UniqueConstraint("source_code", name="uq_sources_source_code"),
    )

    op.create_table(
        "products",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("sku", sa.String(length=64), nullable=False),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("type_id", sa.String(length=16), nullable=False, server_default="simple"),
        sa.Column("shipment_type", sa.String(length=16), nullable=True),
        sa.UniqueConstraint("sku", name="uq_products_sku"),
        sa.CheckConstraint("type_id IN ('simple', 'bundle')", name="ck_products_type_id"),
        sa.CheckConstraint(
            "shipment_type IS NULL OR shipment_type IN ('together', 'separately')",
            name="ck_products_shipment_type",
        ),
    )

    op.create_table(
        "bundle_options",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column(
            "parent_id",
            sa.Integer(),
            sa.ForeignKey("products.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("title", sa.String(length=255), nullable=False),
        sa.Column("type", sa.String(length=16), nullable=False, server_default="select"),
        sa.Column("required", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("position", sa.Integer(), nullable=False, server_default="0"),
    )
    op.create_index("ix_bundle_options_parent_id", "bundle_options", ["parent_id"])

    op.create_table(
        "bundle_links",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column(
            "option_id",
            sa.Integer(),
            sa.ForeignKey("bundle_options.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column(
            "sku",
            sa.String(length=64),
            sa.ForeignKey("products.sku", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("qty", sa.Numeric(12, 4), nullable=False, server_default="1"),
        sa.Column("price", sa.Numeric(12, 4), nullable=False, server_default="0"),
        sa.Column("price_type", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("position", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("is_default", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("can_change_quantity", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.UniqueConstraint("option_id", "sku", name="uq_bundle_links_option_sku"),
    )
    op.create_index("ix_bundle_links_option_id", "bundle_links", ["option_id"])
    op.create_index("ix_bundle_links_sku", "bundle_links", ["sku"])

    op.create_table(
        "source_items",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column(
            "source_code",
            sa.String(length=64),
            sa.ForeignKey("sources.source_code", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column(
            "sku",
            sa.String(length=64),
            sa.ForeignKey("products.sku", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("quantity", sa.Numeric(12, 4), nullable=False, server_default="0"),
        sa.Column("status", sa.SmallInteger(), nullable=False, server_default="1"),
        sa.UniqueConstraint("source_code", "sku", name="uq_source_items_source_sku"),
        sa.CheckConstraint("quantity >= 0", name="ck_source_items_qty_non_negative"),
        sa.CheckConstraint("status IN (0, 1)", name="ck_source_items_status"),
    )
    op.create_index("ix_source_items_source_code", "source_items", ["source_code"])
    op.create_index("ix_source_items_sku", "source_items", ["sku"])


def downgrade() -> None:
    op.drop_index("ix_source_items_sku", table_name="source_items")
    op.drop_index("ix_source_items_source_code", table_name="source_items")
    op.drop_table("source_items")

    op.drop_index("ix_bundle_links_sku", table_name="bundle_links")
    op.drop_index("ix_bundle_links_option_id", table_name="bundle_links")
    op.drop_table("bundle_links")

    op.drop_index("ix_bundle_options_parent_id", table_name="bundle_options")
    op.drop_table("bundle_options")

    op.drop_table("products")
    op.drop_table("sources")

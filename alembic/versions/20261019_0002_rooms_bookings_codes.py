"""Listing rooms, bookings and unique property codes

Revision ID: 0002
Revises: 0001
Create Date: 2026-10-19

- Rooms (property_details, property_detail_images)
- Bookings (bookings)
- properties.property_code becomes unique
"""
from typing import Sequence, Union

import sqlalchemy as sa

from alembic import op

# revision identifiers, used by Alembic.
revision: str = "0002"
down_revision: Union[str, None] = "0001"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    ]


def upgrade() -> None:
    # =====================
    # PROPERTY CODES
    # =====================

    op.drop_index("ix_properties_property_code", table_name="properties")
    op.create_index("ix_properties_property_code", "properties", ["property_code"], unique=True)

    # =====================
    # ROOMS
    # =====================

    op.create_table(
        "property_details",
        sa.Column("id", sa.String(36), nullable=False),
        sa.Column("property_id", sa.String(36), nullable=False),
        sa.Column("detail_type", sa.String(50), nullable=False),
        sa.Column("detail_name", sa.String(255), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("display_order", sa.Integer(), nullable=False, server_default="0"),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["property_id"], ["properties.id"], ondelete="CASCADE"),
    )
    op.create_index("ix_property_details_property", "property_details", ["property_id"])

    op.create_table(
        "property_detail_images",
        sa.Column("id", sa.String(36), nullable=False),
        sa.Column("property_detail_id", sa.String(36), nullable=False),
        sa.Column("image_url", sa.String(1024), nullable=False),
        sa.Column("display_order", sa.Integer(), nullable=False, server_default="0"),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["property_detail_id"], ["property_details.id"], ondelete="CASCADE"),
    )
    op.create_index(
        "ix_property_detail_images_detail", "property_detail_images", ["property_detail_id"]
    )

    # =====================
    # BOOKINGS
    # =====================

    op.create_table(
        "bookings",
        sa.Column("id", sa.String(36), nullable=False),
        sa.Column("property_id", sa.String(36), nullable=False),
        sa.Column("tenant_id", sa.String(36), nullable=False),
        sa.Column("unit_id", sa.String(36), nullable=True),
        sa.Column("check_in", sa.Date(), nullable=False),
        sa.Column("check_out", sa.Date(), nullable=False),
        sa.Column("months", sa.Integer(), nullable=False),
        sa.Column("total_price_ugx", sa.BigInteger(), nullable=False),
        sa.Column(
            "status",
            sa.Enum("PENDING", "CONFIRMED", "CANCELLED", name="bookingstatus"),
            nullable=False,
        ),
        sa.Column(
            "payment_status",
            sa.Enum("PENDING", "PAID", name="bookingpaymentstatus"),
            nullable=False,
        ),
        sa.Column("notes", sa.Text(), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["property_id"], ["properties.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["tenant_id"], ["profiles.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["unit_id"], ["property_units.id"], ondelete="SET NULL"),
    )
    op.create_index("ix_bookings_tenant", "bookings", ["tenant_id"])
    op.create_index("ix_bookings_property", "bookings", ["property_id"])
    op.create_index("ix_bookings_status", "bookings", ["status"])


def downgrade() -> None:
    op.drop_table("bookings")
    op.drop_table("property_detail_images")
    op.drop_table("property_details")

    op.drop_index("ix_properties_property_code", table_name="properties")
    op.create_index("ix_properties_property_code", "properties", ["property_code"])

"""Initial schema for Rentify

Revision ID: 0001
Revises:
Create Date: 2026-10-19

Creates all tables for:
- Accounts (profiles)
- Landlords (landlord_profiles, landlord_payments, landlord_documents)
- Properties (property_blocks, properties, property_units, property_images)
- Engagement (property_views, property_interested)
- Tenants (tenant_profiles, tenant_documents, tenant_references)
"""
from typing import Sequence, Union

import sqlalchemy as sa

from alembic import op

# revision identifiers, used by Alembic.
revision: str = "0001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

# Enum columns store member names
VERIFICATION_STATUS = ("UNVERIFIED", "PENDING", "VERIFIED", "REJECTED")


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    ]


def upgrade() -> None:
    """Create all tables."""

    # =====================
    # ACCOUNTS
    # =====================

    op.create_table(
        "profiles",
        sa.Column("id", sa.String(36), nullable=False),
        sa.Column("email", sa.String(255), nullable=False),
        sa.Column("password_hash", sa.String(128), nullable=False),
        sa.Column("full_name", sa.String(255), nullable=True),
        sa.Column("role", sa.Enum("ADMIN", "LANDLORD", "TENANT", name="userrole"), nullable=False),
        sa.Column("is_admin", sa.Boolean(), nullable=False, server_default="0"),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default="1"),
        sa.Column("phone_number", sa.String(40), nullable=True),
        sa.Column("avatar_url", sa.String(1024), nullable=True),
        sa.Column("bio", sa.Text(), nullable=True),
        sa.Column("last_login", sa.DateTime(timezone=True), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("email"),
    )

    # =====================
    # LANDLORDS
    # =====================

    op.create_table(
        "landlord_profiles",
        sa.Column("id", sa.String(36), nullable=False),
        sa.Column("user_id", sa.String(36), nullable=False),
        sa.Column("business_name", sa.String(255), nullable=True),
        sa.Column("business_registration_number", sa.String(100), nullable=True),
        sa.Column("phone_number", sa.String(40), nullable=True),
        sa.Column("alternative_phone", sa.String(40), nullable=True),
        sa.Column("business_address", sa.String(255), nullable=True),
        sa.Column("city", sa.String(120), nullable=True),
        sa.Column("district", sa.String(120), nullable=True),
        sa.Column("postal_code", sa.String(20), nullable=True),
        sa.Column("bank_name", sa.String(255), nullable=True),
        sa.Column("bank_account_number", sa.String(100), nullable=True),
        sa.Column("bank_account_name", sa.String(255), nullable=True),
        sa.Column("mobile_money_number", sa.String(40), nullable=True),
        sa.Column("mobile_money_provider", sa.String(50), nullable=True),
        sa.Column("commission_rate", sa.Numeric(5, 2), nullable=False, server_default="0"),
        sa.Column("payment_schedule", sa.String(30), nullable=False, server_default="monthly"),
        sa.Column(
            "status",
            sa.Enum("PENDING", "ACTIVE", "INACTIVE", "SUSPENDED", "BLACKLISTED", name="landlordstatus"),
            nullable=False,
        ),
        sa.Column("verification_status", sa.Enum(*VERIFICATION_STATUS, name="verificationstatus"), nullable=False),
        sa.Column("verification_date", sa.DateTime(timezone=True), nullable=True),
        sa.Column("verified_by", sa.String(36), nullable=True),
        sa.Column("verification_notes", sa.Text(), nullable=True),
        sa.Column("id_document_type", sa.String(50), nullable=True),
        sa.Column("id_document_number", sa.String(100), nullable=True),
        sa.Column("id_document_url", sa.String(1024), nullable=True),
        sa.Column("preferred_communication", sa.String(20), nullable=False, server_default="email"),
        sa.Column("notifications_enabled", sa.Boolean(), nullable=False, server_default="1"),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.Column("rating", sa.Numeric(3, 2), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["user_id"], ["profiles.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["verified_by"], ["profiles.id"], ondelete="SET NULL"),
        sa.UniqueConstraint("user_id"),
    )

    op.create_table(
        "landlord_payments",
        sa.Column("id", sa.String(36), nullable=False),
        sa.Column("landlord_id", sa.String(36), nullable=False),
        sa.Column("period_start", sa.Date(), nullable=False),
        sa.Column("period_end", sa.Date(), nullable=False),
        sa.Column("amount_ugx", sa.BigInteger(), nullable=False),
        sa.Column("commission_ugx", sa.BigInteger(), nullable=False, server_default="0"),
        sa.Column(
            "status",
            sa.Enum("PENDING", "COMPLETED", "FAILED", "CANCELLED", name="paymentstatus"),
            nullable=False,
        ),
        sa.Column("paid_date", sa.Date(), nullable=True),
        sa.Column("payment_method", sa.String(50), nullable=True),
        sa.Column("reference", sa.String(100), nullable=True),
        sa.Column("notes", sa.Text(), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["landlord_id"], ["landlord_profiles.id"], ondelete="CASCADE"),
    )
    op.create_index("ix_landlord_payments_landlord_id", "landlord_payments", ["landlord_id"])

    op.create_table(
        "landlord_documents",
        sa.Column("id", sa.String(36), nullable=False),
        sa.Column("landlord_id", sa.String(36), nullable=False),
        sa.Column("document_type", sa.String(50), nullable=False),
        sa.Column("document_name", sa.String(255), nullable=False),
        sa.Column("document_url", sa.String(1024), nullable=False),
        sa.Column("is_verified", sa.Boolean(), nullable=False, server_default="0"),
        sa.Column("verified_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("notes", sa.Text(), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["landlord_id"], ["landlord_profiles.id"], ondelete="CASCADE"),
    )
    op.create_index("ix_landlord_documents_landlord_id", "landlord_documents", ["landlord_id"])

    # =====================
    # PROPERTIES
    # =====================

    op.create_table(
        "property_blocks",
        sa.Column("id", sa.String(36), nullable=False),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("location", sa.String(255), nullable=False),
        sa.Column("total_floors", sa.Integer(), nullable=False, server_default="1"),
        sa.Column("total_units", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("created_by", sa.String(36), nullable=True),
        sa.Column("landlord_id", sa.String(36), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["created_by"], ["profiles.id"], ondelete="SET NULL"),
        sa.ForeignKeyConstraint(["landlord_id"], ["landlord_profiles.id"], ondelete="SET NULL"),
    )
    op.create_index("ix_property_blocks_landlord_id", "property_blocks", ["landlord_id"])

    op.create_table(
        "properties",
        sa.Column("id", sa.String(36), nullable=False),
        sa.Column("property_code", sa.String(10), nullable=True),
        sa.Column("title", sa.String(255), nullable=False),
        sa.Column("location", sa.String(255), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("price_ugx", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("category", sa.String(50), nullable=False),
        sa.Column("bedrooms", sa.Integer(), nullable=False, server_default="1"),
        sa.Column("bathrooms", sa.Integer(), nullable=False, server_default="1"),
        sa.Column("image_url", sa.String(1024), nullable=True),
        sa.Column("video_url", sa.String(1024), nullable=True),
        sa.Column("google_maps_embed_url", sa.Text(), nullable=True),
        sa.Column("unit_type", sa.String(50), nullable=True),
        sa.Column("total_floors", sa.Integer(), nullable=True),
        sa.Column("units_config", sa.String(255), nullable=True),
        sa.Column("minimum_initial_months", sa.Integer(), nullable=False, server_default="1"),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default="1"),
        sa.Column("is_featured", sa.Boolean(), nullable=False, server_default="0"),
        sa.Column("is_occupied", sa.Boolean(), nullable=False, server_default="0"),
        sa.Column("daily_views_count", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("total_views_count", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("interested_count", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("last_view_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("block_id", sa.String(36), nullable=True),
        sa.Column("host_id", sa.String(36), nullable=True),
        sa.Column("landlord_id", sa.String(36), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["block_id"], ["property_blocks.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["host_id"], ["profiles.id"], ondelete="SET NULL"),
        sa.ForeignKeyConstraint(["landlord_id"], ["landlord_profiles.id"], ondelete="SET NULL"),
    )
    op.create_index("ix_properties_property_code", "properties", ["property_code"])
    op.create_index("ix_properties_block", "properties", ["block_id"])
    op.create_index("ix_properties_public", "properties", ["is_active", "is_occupied", "created_at"])

    op.create_table(
        "property_units",
        sa.Column("id", sa.String(36), nullable=False),
        sa.Column("property_id", sa.String(36), nullable=False),
        sa.Column("block_id", sa.String(36), nullable=False),
        sa.Column("floor_number", sa.Integer(), nullable=False),
        sa.Column("unit_number", sa.String(10), nullable=False),
        sa.Column("unit_type", sa.String(50), nullable=False),
        sa.Column("bedrooms", sa.Integer(), nullable=False, server_default="1"),
        sa.Column("bathrooms", sa.Integer(), nullable=False, server_default="1"),
        sa.Column("price_ugx", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("is_available", sa.Boolean(), nullable=False, server_default="1"),
        sa.Column("sync_with_template", sa.Boolean(), nullable=False, server_default="1"),
        sa.Column("template_name", sa.String(255), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["property_id"], ["properties.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["block_id"], ["property_blocks.id"], ondelete="CASCADE"),
        sa.UniqueConstraint("block_id", "unit_number", name="uq_property_units_block_number"),
    )
    op.create_index("ix_property_units_property", "property_units", ["property_id"])

    op.create_table(
        "property_images",
        sa.Column("id", sa.String(36), nullable=False),
        sa.Column("property_id", sa.String(36), nullable=False),
        sa.Column("image_url", sa.String(1024), nullable=False),
        sa.Column("category", sa.String(50), nullable=False, server_default="general"),
        sa.Column("display_order", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("is_primary", sa.Boolean(), nullable=False, server_default="0"),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["property_id"], ["properties.id"], ondelete="CASCADE"),
    )
    op.create_index("ix_property_images_property", "property_images", ["property_id"])

    # =====================
    # ENGAGEMENT
    # =====================

    op.create_table(
        "property_views",
        sa.Column("id", sa.String(36), nullable=False),
        sa.Column("property_id", sa.String(36), nullable=False),
        sa.Column("session_id", sa.String(64), nullable=False),
        sa.Column("view_date", sa.Date(), nullable=False),
        sa.Column("viewed_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("user_id", sa.String(36), nullable=True),
        sa.Column("user_agent", sa.String(512), nullable=True),
        sa.Column("ip_address", sa.String(64), nullable=True),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["property_id"], ["properties.id"], ondelete="CASCADE"),
        sa.UniqueConstraint("property_id", "session_id", "view_date", name="uq_property_views_daily"),
    )

    op.create_table(
        "property_interested",
        sa.Column("id", sa.String(36), nullable=False),
        sa.Column("property_id", sa.String(36), nullable=False),
        sa.Column("user_id", sa.String(36), nullable=True),
        sa.Column("email", sa.String(255), nullable=True),
        sa.Column("name", sa.String(255), nullable=True),
        sa.Column("phone", sa.String(40), nullable=True),
        sa.Column("message", sa.Text(), nullable=True),
        sa.Column("session_id", sa.String(64), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["property_id"], ["properties.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["user_id"], ["profiles.id"], ondelete="CASCADE"),
    )
    op.create_index("ix_property_interested_property", "property_interested", ["property_id"])

    # =====================
    # TENANTS
    # =====================

    op.create_table(
        "tenant_profiles",
        sa.Column("id", sa.String(36), nullable=False),
        sa.Column("user_id", sa.String(36), nullable=False),
        sa.Column("phone_number", sa.String(40), nullable=True),
        sa.Column("date_of_birth", sa.Date(), nullable=True),
        sa.Column("national_id", sa.String(100), nullable=True),
        sa.Column(
            "national_id_type",
            sa.Enum("PASSPORT", "NATIONAL_ID", "DRIVING_LICENSE", "OTHER", name="nationalidtype"),
            nullable=True,
        ),
        sa.Column("home_address", sa.String(255), nullable=True),
        sa.Column("home_city", sa.String(120), nullable=True),
        sa.Column("home_district", sa.String(120), nullable=True),
        sa.Column("home_postal_code", sa.String(20), nullable=True),
        sa.Column(
            "employment_status",
            sa.Enum(
                "EMPLOYED", "SELF_EMPLOYED", "STUDENT", "UNEMPLOYED", "RETIRED", "OTHER",
                name="employmentstatus",
            ),
            nullable=True,
        ),
        sa.Column("employer_name", sa.String(255), nullable=True),
        sa.Column("employer_contact", sa.String(255), nullable=True),
        sa.Column("employment_start_date", sa.Date(), nullable=True),
        sa.Column(
            "employment_type",
            sa.Enum("FULL_TIME", "PART_TIME", "CONTRACT", "FREELANCE", "OTHER", name="employmenttype"),
            nullable=True,
        ),
        sa.Column("monthly_income_ugx", sa.BigInteger(), nullable=True),
        sa.Column(
            "status",
            sa.Enum("ACTIVE", "INACTIVE", "SUSPENDED", "BLACKLISTED", name="tenantstatus"),
            nullable=False,
        ),
        sa.Column("verification_status", sa.Enum(*VERIFICATION_STATUS, name="verificationstatus"), nullable=False),
        sa.Column("verification_date", sa.DateTime(timezone=True), nullable=True),
        sa.Column("verified_by", sa.String(36), nullable=True),
        sa.Column("preferred_communication", sa.String(20), nullable=False, server_default="email"),
        sa.Column("notes", sa.Text(), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["user_id"], ["profiles.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["verified_by"], ["profiles.id"], ondelete="SET NULL"),
        sa.UniqueConstraint("user_id"),
    )

    op.create_table(
        "tenant_documents",
        sa.Column("id", sa.String(36), nullable=False),
        sa.Column("tenant_profile_id", sa.String(36), nullable=False),
        sa.Column("document_type", sa.String(100), nullable=False),
        sa.Column("document_name", sa.String(255), nullable=False),
        sa.Column("document_url", sa.String(1024), nullable=False),
        sa.Column("document_storage_path", sa.String(1024), nullable=True),
        sa.Column(
            "status",
            sa.Enum("PENDING", "APPROVED", "REJECTED", "EXPIRED", name="documentstatus"),
            nullable=False,
        ),
        sa.Column("expiry_date", sa.Date(), nullable=True),
        sa.Column("file_size", sa.Integer(), nullable=True),
        sa.Column("mime_type", sa.String(100), nullable=True),
        sa.Column("uploaded_by", sa.String(36), nullable=True),
        sa.Column("reviewed_by", sa.String(36), nullable=True),
        sa.Column("reviewed_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("notes", sa.Text(), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["tenant_profile_id"], ["tenant_profiles.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["uploaded_by"], ["profiles.id"], ondelete="SET NULL"),
        sa.ForeignKeyConstraint(["reviewed_by"], ["profiles.id"], ondelete="SET NULL"),
    )
    op.create_index("ix_tenant_documents_tenant_profile_id", "tenant_documents", ["tenant_profile_id"])

    op.create_table(
        "tenant_references",
        sa.Column("id", sa.String(36), nullable=False),
        sa.Column("tenant_profile_id", sa.String(36), nullable=False),
        sa.Column("reference_type", sa.String(50), nullable=False),
        sa.Column("reference_name", sa.String(255), nullable=False),
        sa.Column("reference_title", sa.String(255), nullable=False),
        sa.Column("reference_company", sa.String(255), nullable=True),
        sa.Column("reference_email", sa.String(255), nullable=False),
        sa.Column("reference_phone", sa.String(40), nullable=False),
        sa.Column("reference_address", sa.String(255), nullable=True),
        sa.Column(
            "verification_status",
            sa.Enum("PENDING", "VERIFIED", "FAILED", name="referencestatus"),
            nullable=False,
        ),
        sa.Column("verified_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("notes", sa.Text(), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["tenant_profile_id"], ["tenant_profiles.id"], ondelete="CASCADE"),
    )
    op.create_index("ix_tenant_references_tenant_profile_id", "tenant_references", ["tenant_profile_id"])


def downgrade() -> None:
    """Drop all tables."""

    # Drop tenant tables
    op.drop_table("tenant_references")
    op.drop_table("tenant_documents")
    op.drop_table("tenant_profiles")

    # Drop engagement tables
    op.drop_table("property_interested")
    op.drop_table("property_views")

    # Drop property tables
    op.drop_table("property_images")
    op.drop_table("property_units")
    op.drop_table("properties")
    op.drop_table("property_blocks")

    # Drop landlord tables
    op.drop_table("landlord_documents")
    op.drop_table("landlord_payments")
    op.drop_table("landlord_profiles")

    # Drop accounts
    op.drop_table("profiles")

"""Tenant models.

A tenant is an account (``profiles`` row) with a personal profile used for
screening. Documents and references are attached to the tenant profile.
"""

import enum
import uuid
from datetime import date, datetime

from sqlalchemy import (
    BigInteger,
    Date,
    DateTime,
    Enum,
    ForeignKey,
    Integer,
    String,
    Text,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from ...core.database_types import UUID as UUID_DB
from ...database import Base, TimestampMixin, UUIDPrimaryKey
from ..auth.models import User
from ..commons.verification import VerificationStatus


class TenantStatus(str, enum.Enum):
    ACTIVE = "active"
    INACTIVE = "inactive"
    SUSPENDED = "suspended"
    BLACKLISTED = "blacklisted"


class NationalIdType(str, enum.Enum):
    PASSPORT = "Passport"
    NATIONAL_ID = "National ID"
    DRIVING_LICENSE = "Driving License"
    OTHER = "Other"


class EmploymentStatus(str, enum.Enum):
    EMPLOYED = "Employed"
    SELF_EMPLOYED = "Self-Employed"
    STUDENT = "Student"
    UNEMPLOYED = "Unemployed"
    RETIRED = "Retired"
    OTHER = "Other"


class EmploymentType(str, enum.Enum):
    FULL_TIME = "Full-Time"
    PART_TIME = "Part-Time"
    CONTRACT = "Contract"
    FREELANCE = "Freelance"
    OTHER = "Other"


class DocumentStatus(str, enum.Enum):
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"
    EXPIRED = "expired"


class ReferenceStatus(str, enum.Enum):
    PENDING = "pending"
    VERIFIED = "verified"
    FAILED = "failed"


class TenantProfile(UUIDPrimaryKey, TimestampMixin, Base):
    """Screening profile of a tenant account."""

    __tablename__ = "tenant_profiles"

    user_id: Mapped[uuid.UUID] = mapped_column(
        UUID_DB(),
        ForeignKey("profiles.id", ondelete="CASCADE"),
        unique=True,
        nullable=False,
    )

    # Personal
    phone_number: Mapped[str | None] = mapped_column(String(40), nullable=True)
    date_of_birth: Mapped[date | None] = mapped_column(Date, nullable=True)
    national_id: Mapped[str | None] = mapped_column(String(100), nullable=True)
    national_id_type: Mapped[NationalIdType | None] = mapped_column(
        Enum(NationalIdType), nullable=True
    )

    # Address
    home_address: Mapped[str | None] = mapped_column(String(255), nullable=True)
    home_city: Mapped[str | None] = mapped_column(String(120), nullable=True)
    home_district: Mapped[str | None] = mapped_column(String(120), nullable=True)
    home_postal_code: Mapped[str | None] = mapped_column(String(20), nullable=True)

    # Employment
    employment_status: Mapped[EmploymentStatus | None] = mapped_column(
        Enum(EmploymentStatus), nullable=True
    )
    employer_name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    employer_contact: Mapped[str | None] = mapped_column(String(255), nullable=True)
    employment_start_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    employment_type: Mapped[EmploymentType | None] = mapped_column(
        Enum(EmploymentType), nullable=True
    )
    monthly_income_ugx: Mapped[int | None] = mapped_column(BigInteger, nullable=True)

    # Status
    status: Mapped[TenantStatus] = mapped_column(
        Enum(TenantStatus), default=TenantStatus.ACTIVE, nullable=False
    )
    verification_status: Mapped[VerificationStatus] = mapped_column(
        Enum(VerificationStatus),
        default=VerificationStatus.UNVERIFIED,
        nullable=False,
    )
    verification_date: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )
    verified_by: Mapped[uuid.UUID | None] = mapped_column(
        UUID_DB(), ForeignKey("profiles.id", ondelete="SET NULL"), nullable=True
    )
    preferred_communication: Mapped[str] = mapped_column(
        String(20), default="email", nullable=False
    )
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)

    user: Mapped[User] = relationship(User, foreign_keys=[user_id], lazy="joined")
    documents: Mapped[list["TenantDocument"]] = relationship(
        back_populates="tenant",
        cascade="all, delete-orphan",
        order_by=lambda: TenantDocument.created_at.desc(),
    )
    references: Mapped[list["TenantReference"]] = relationship(
        back_populates="tenant",
        cascade="all, delete-orphan",
        order_by=lambda: TenantReference.created_at.desc(),
    )

    @property
    def full_name(self) -> str | None:
        return self.user.full_name if self.user else None

    @property
    def email(self) -> str | None:
        return self.user.email if self.user else None


class TenantDocument(UUIDPrimaryKey, TimestampMixin, Base):
    """An uploaded screening document."""

    __tablename__ = "tenant_documents"

    tenant_profile_id: Mapped[uuid.UUID] = mapped_column(
        UUID_DB(),
        ForeignKey("tenant_profiles.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    document_type: Mapped[str] = mapped_column(String(100), nullable=False)
    document_name: Mapped[str] = mapped_column(String(255), nullable=False)
    document_url: Mapped[str] = mapped_column(String(1024), nullable=False)
    document_storage_path: Mapped[str | None] = mapped_column(
        String(1024), nullable=True
    )
    status: Mapped[DocumentStatus] = mapped_column(
        Enum(DocumentStatus), default=DocumentStatus.PENDING, nullable=False
    )
    expiry_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    file_size: Mapped[int | None] = mapped_column(Integer, nullable=True)
    mime_type: Mapped[str | None] = mapped_column(String(100), nullable=True)
    uploaded_by: Mapped[uuid.UUID | None] = mapped_column(
        UUID_DB(), ForeignKey("profiles.id", ondelete="SET NULL"), nullable=True
    )
    reviewed_by: Mapped[uuid.UUID | None] = mapped_column(
        UUID_DB(), ForeignKey("profiles.id", ondelete="SET NULL"), nullable=True
    )
    reviewed_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)

    tenant: Mapped[TenantProfile] = relationship(back_populates="documents")

    @property
    def is_expired(self) -> bool:
        if self.expiry_date:
            return date.today() > self.expiry_date
        return False


class TenantReference(UUIDPrimaryKey, TimestampMixin, Base):
    """A personal or professional reference given by a tenant."""

    __tablename__ = "tenant_references"

    tenant_profile_id: Mapped[uuid.UUID] = mapped_column(
        UUID_DB(),
        ForeignKey("tenant_profiles.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    reference_type: Mapped[str] = mapped_column(String(50), nullable=False)
    reference_name: Mapped[str] = mapped_column(String(255), nullable=False)
    reference_title: Mapped[str] = mapped_column(String(255), nullable=False)
    reference_company: Mapped[str | None] = mapped_column(String(255), nullable=True)
    reference_email: Mapped[str] = mapped_column(String(255), nullable=False)
    reference_phone: Mapped[str] = mapped_column(String(40), nullable=False)
    reference_address: Mapped[str | None] = mapped_column(String(255), nullable=True)
    verification_status: Mapped[ReferenceStatus] = mapped_column(
        Enum(ReferenceStatus), default=ReferenceStatus.PENDING, nullable=False
    )
    verified_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)

    tenant: Mapped[TenantProfile] = relationship(back_populates="references")

"""Landlord models.

A landlord is an account (``profiles`` row) with a business profile on top.
Payments and documents hang off the landlord profile.
"""

import enum
import uuid
from datetime import date, datetime
from decimal import Decimal

from sqlalchemy import (
    BigInteger,
    Boolean,
    Date,
    DateTime,
    Enum,
    ForeignKey,
    Numeric,
    String,
    Text,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from ...core.database_types import UUID as UUID_DB
from ...database import Base, TimestampMixin, UUIDPrimaryKey
from ..auth.models import User
from ..commons.verification import VerificationStatus


class LandlordStatus(str, enum.Enum):
    PENDING = "pending"
    ACTIVE = "active"
    INACTIVE = "inactive"
    SUSPENDED = "suspended"
    BLACKLISTED = "blacklisted"


class PaymentStatus(str, enum.Enum):
    PENDING = "pending"
    COMPLETED = "completed"
    FAILED = "failed"
    CANCELLED = "cancelled"


class LandlordProfile(UUIDPrimaryKey, TimestampMixin, Base):
    """Business profile of a landlord account."""

    __tablename__ = "landlord_profiles"

    user_id: Mapped[uuid.UUID] = mapped_column(
        UUID_DB(),
        ForeignKey("profiles.id", ondelete="CASCADE"),
        unique=True,
        nullable=False,
    )
    business_name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    business_registration_number: Mapped[str | None] = mapped_column(
        String(100), nullable=True
    )
    # Contact
    phone_number: Mapped[str | None] = mapped_column(String(40), nullable=True)
    alternative_phone: Mapped[str | None] = mapped_column(String(40), nullable=True)
    business_address: Mapped[str | None] = mapped_column(String(255), nullable=True)
    city: Mapped[str | None] = mapped_column(String(120), nullable=True)
    district: Mapped[str | None] = mapped_column(String(120), nullable=True)
    postal_code: Mapped[str | None] = mapped_column(String(20), nullable=True)
    # Payouts
    bank_name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    bank_account_number: Mapped[str | None] = mapped_column(String(100), nullable=True)
    bank_account_name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    mobile_money_number: Mapped[str | None] = mapped_column(String(40), nullable=True)
    mobile_money_provider: Mapped[str | None] = mapped_column(String(50), nullable=True)
    commission_rate: Mapped[Decimal] = mapped_column(
        Numeric(5, 2), default=Decimal("0"), nullable=False
    )
    payment_schedule: Mapped[str] = mapped_column(
        String(30), default="monthly", nullable=False
    )
    # Status and verification
    status: Mapped[LandlordStatus] = mapped_column(
        Enum(LandlordStatus), default=LandlordStatus.PENDING, nullable=False
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
    verification_notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    id_document_type: Mapped[str | None] = mapped_column(String(50), nullable=True)
    id_document_number: Mapped[str | None] = mapped_column(String(100), nullable=True)
    id_document_url: Mapped[str | None] = mapped_column(String(1024), nullable=True)
    # Preferences
    preferred_communication: Mapped[str] = mapped_column(
        String(20), default="email", nullable=False
    )
    notifications_enabled: Mapped[bool] = mapped_column(
        Boolean, default=True, nullable=False
    )
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    rating: Mapped[Decimal | None] = mapped_column(Numeric(3, 2), nullable=True)

    user: Mapped[User] = relationship(User, foreign_keys=[user_id], lazy="joined")
    payments: Mapped[list["LandlordPayment"]] = relationship(
        back_populates="landlord",
        cascade="all, delete-orphan",
        order_by=lambda: LandlordPayment.period_start.desc(),
    )
    documents: Mapped[list["LandlordDocument"]] = relationship(
        back_populates="landlord",
        cascade="all, delete-orphan",
        order_by=lambda: LandlordDocument.created_at,
    )

    @property
    def full_name(self) -> str | None:
        return self.user.full_name if self.user else None

    @property
    def email(self) -> str | None:
        return self.user.email if self.user else None


class LandlordPayment(UUIDPrimaryKey, TimestampMixin, Base):
    """A payout to a landlord for a period."""

    __tablename__ = "landlord_payments"

    landlord_id: Mapped[uuid.UUID] = mapped_column(
        UUID_DB(),
        ForeignKey("landlord_profiles.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    period_start: Mapped[date] = mapped_column(Date, nullable=False)
    period_end: Mapped[date] = mapped_column(Date, nullable=False)
    amount_ugx: Mapped[int] = mapped_column(BigInteger, nullable=False)
    commission_ugx: Mapped[int] = mapped_column(BigInteger, default=0, nullable=False)
    status: Mapped[PaymentStatus] = mapped_column(
        Enum(PaymentStatus), default=PaymentStatus.PENDING, nullable=False
    )
    paid_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    payment_method: Mapped[str | None] = mapped_column(String(50), nullable=True)
    reference: Mapped[str | None] = mapped_column(String(100), nullable=True)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)

    landlord: Mapped[LandlordProfile] = relationship(back_populates="payments")


class LandlordDocument(UUIDPrimaryKey, TimestampMixin, Base):
    """An identity or ownership document on file for a landlord."""

    __tablename__ = "landlord_documents"

    landlord_id: Mapped[uuid.UUID] = mapped_column(
        UUID_DB(),
        ForeignKey("landlord_profiles.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    document_type: Mapped[str] = mapped_column(String(50), nullable=False)
    document_name: Mapped[str] = mapped_column(String(255), nullable=False)
    document_url: Mapped[str] = mapped_column(String(1024), nullable=False)
    is_verified: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    verified_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)

    landlord: Mapped[LandlordProfile] = relationship(back_populates="documents")

"""Booking models.

A booking reserves a listing (and, inside a building, one of its units)
for a tenant between two dates. Its price covers whole months.
"""

import builtins
import enum
import uuid
from datetime import date

from sqlalchemy import BigInteger, Date, Enum, ForeignKey, Index, Integer, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from ...core.database_types import UUID as UUID_DB
from ...database import Base, TimestampMixin, UUIDPrimaryKey
from ..auth.models import User
from ..property_management.models import Property, PropertyUnit


class BookingStatus(str, enum.Enum):
    PENDING = "pending"
    CONFIRMED = "confirmed"
    CANCELLED = "cancelled"


class BookingPaymentStatus(str, enum.Enum):
    PENDING = "pending"
    PAID = "paid"


class Booking(UUIDPrimaryKey, TimestampMixin, Base):
    __tablename__ = "bookings"

    property_id: Mapped[uuid.UUID] = mapped_column(
        UUID_DB(), ForeignKey("properties.id", ondelete="CASCADE"), nullable=False
    )
    tenant_id: Mapped[uuid.UUID] = mapped_column(
        UUID_DB(), ForeignKey("profiles.id", ondelete="CASCADE"), nullable=False
    )
    unit_id: Mapped[uuid.UUID | None] = mapped_column(
        UUID_DB(), ForeignKey("property_units.id", ondelete="SET NULL"), nullable=True
    )
    check_in: Mapped[date] = mapped_column(Date, nullable=False)
    check_out: Mapped[date] = mapped_column(Date, nullable=False)
    months: Mapped[int] = mapped_column(Integer, nullable=False)
    total_price_ugx: Mapped[int] = mapped_column(BigInteger, nullable=False)
    status: Mapped[BookingStatus] = mapped_column(
        Enum(BookingStatus), default=BookingStatus.CONFIRMED, nullable=False
    )
    payment_status: Mapped[BookingPaymentStatus] = mapped_column(
        Enum(BookingPaymentStatus),
        default=BookingPaymentStatus.PENDING,
        nullable=False,
    )
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)

    property: Mapped[Property] = relationship(Property, lazy="joined")
    unit: Mapped[PropertyUnit | None] = relationship(PropertyUnit, lazy="joined")
    tenant: Mapped[User] = relationship(User, lazy="joined")

    __table_args__ = (
        Index("ix_bookings_tenant", "tenant_id"),
        Index("ix_bookings_property", "property_id"),
        Index("ix_bookings_status", "status"),
    )

    @builtins.property
    def property_title(self) -> str | None:
        return self.property.title if self.property else None

    @builtins.property
    def unit_number(self) -> str | None:
        return self.unit.unit_number if self.unit else None

    @builtins.property
    def tenant_name(self) -> str | None:
        return self.tenant.full_name if self.tenant else None

    @builtins.property
    def tenant_email(self) -> str | None:
        return self.tenant.email if self.tenant else None

    def __repr__(self) -> str:
        return f"<Booking(id={self.id}, status={self.status})>"

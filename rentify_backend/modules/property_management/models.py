"""Property models.

A PropertyBlock is a building. Each unit type in a building has its own
Property listing, and every physical unit is a PropertyUnit linked to both.
Stand-alone listings (houses, villas) have no block.
"""

import uuid
from datetime import date, datetime

from sqlalchemy import (
    Boolean,
    Date,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from ...core.database_types import UUID as UUID_DB
from ...database import Base, TimestampMixin, UUIDPrimaryKey


class PropertyBlock(UUIDPrimaryKey, TimestampMixin, Base):
    """A building grouping several unit-type listings."""

    __tablename__ = "property_blocks"

    name: Mapped[str] = mapped_column(String(255), nullable=False)
    location: Mapped[str] = mapped_column(String(255), nullable=False)
    total_floors: Mapped[int] = mapped_column(Integer, default=1, nullable=False)
    total_units: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    created_by: Mapped[uuid.UUID | None] = mapped_column(
        UUID_DB(), ForeignKey("profiles.id", ondelete="SET NULL"), nullable=True
    )
    landlord_id: Mapped[uuid.UUID | None] = mapped_column(
        UUID_DB(),
        ForeignKey("landlord_profiles.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )

    properties: Mapped[list["Property"]] = relationship(
        "Property",
        back_populates="block",
        cascade="all, delete-orphan",
        order_by="Property.created_at",
    )
    units: Mapped[list["PropertyUnit"]] = relationship(
        "PropertyUnit",
        back_populates="block",
        cascade="all, delete-orphan",
        order_by=lambda: [PropertyUnit.floor_number, PropertyUnit.unit_number],
    )

    def __repr__(self) -> str:
        return f"<PropertyBlock(id={self.id}, name={self.name})>"


class Property(UUIDPrimaryKey, TimestampMixin, Base):
    """A public listing."""

    __tablename__ = "properties"

    property_code: Mapped[str | None] = mapped_column(
        String(10), nullable=True, unique=True, index=True
    )
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    location: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    price_ugx: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    category: Mapped[str] = mapped_column(String(50), nullable=False)
    bedrooms: Mapped[int] = mapped_column(Integer, default=1, nullable=False)
    bathrooms: Mapped[int] = mapped_column(Integer, default=1, nullable=False)
    image_url: Mapped[str | None] = mapped_column(String(1024), nullable=True)
    video_url: Mapped[str | None] = mapped_column(String(1024), nullable=True)
    google_maps_embed_url: Mapped[str | None] = mapped_column(Text, nullable=True)
    unit_type: Mapped[str | None] = mapped_column(String(50), nullable=True)
    total_floors: Mapped[int | None] = mapped_column(Integer, nullable=True)
    units_config: Mapped[str | None] = mapped_column(String(255), nullable=True)
    minimum_initial_months: Mapped[int] = mapped_column(
        Integer, default=1, nullable=False
    )
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
    is_featured: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    is_occupied: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)

    daily_views_count: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    total_views_count: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    interested_count: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    last_view_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )

    block_id: Mapped[uuid.UUID | None] = mapped_column(
        UUID_DB(), ForeignKey("property_blocks.id", ondelete="CASCADE"), nullable=True
    )
    host_id: Mapped[uuid.UUID | None] = mapped_column(
        UUID_DB(), ForeignKey("profiles.id", ondelete="SET NULL"), nullable=True
    )
    landlord_id: Mapped[uuid.UUID | None] = mapped_column(
        UUID_DB(),
        ForeignKey("landlord_profiles.id", ondelete="SET NULL"),
        nullable=True,
    )

    block: Mapped["PropertyBlock | None"] = relationship(
        "PropertyBlock", back_populates="properties"
    )
    units: Mapped[list["PropertyUnit"]] = relationship(
        "PropertyUnit",
        back_populates="property",
        cascade="all, delete-orphan",
        order_by=lambda: [PropertyUnit.floor_number, PropertyUnit.unit_number],
    )
    images: Mapped[list["PropertyImage"]] = relationship(
        "PropertyImage",
        back_populates="property",
        cascade="all, delete-orphan",
        order_by="PropertyImage.display_order",
    )
    rooms: Mapped[list["PropertyRoom"]] = relationship(
        "PropertyRoom",
        back_populates="property",
        cascade="all, delete-orphan",
        order_by="PropertyRoom.display_order",
    )

    __table_args__ = (
        Index("ix_properties_block", "block_id"),
        Index("ix_properties_public", "is_active", "is_occupied", "created_at"),
    )

    def __repr__(self) -> str:
        return f"<Property(id={self.id}, title={self.title})>"


class PropertyUnit(UUIDPrimaryKey, TimestampMixin, Base):
    """One physical rental unit."""

    __tablename__ = "property_units"

    property_id: Mapped[uuid.UUID] = mapped_column(
        UUID_DB(), ForeignKey("properties.id", ondelete="CASCADE"), nullable=False
    )
    block_id: Mapped[uuid.UUID] = mapped_column(
        UUID_DB(), ForeignKey("property_blocks.id", ondelete="CASCADE"), nullable=False
    )
    floor_number: Mapped[int] = mapped_column(Integer, nullable=False)
    unit_number: Mapped[str] = mapped_column(String(10), nullable=False)
    unit_type: Mapped[str] = mapped_column(String(50), nullable=False)
    bedrooms: Mapped[int] = mapped_column(Integer, default=1, nullable=False)
    bathrooms: Mapped[int] = mapped_column(Integer, default=1, nullable=False)
    price_ugx: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    is_available: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
    sync_with_template: Mapped[bool] = mapped_column(
        Boolean, default=True, nullable=False
    )
    template_name: Mapped[str | None] = mapped_column(String(255), nullable=True)

    property: Mapped["Property"] = relationship("Property", back_populates="units")
    block: Mapped["PropertyBlock"] = relationship(
        "PropertyBlock", back_populates="units"
    )

    __table_args__ = (
        UniqueConstraint("block_id", "unit_number", name="uq_property_units_block_number"),
        Index("ix_property_units_property", "property_id"),
    )

    def __repr__(self) -> str:
        return f"<PropertyUnit(unit_number={self.unit_number}, type={self.unit_type})>"


class PropertyImage(UUIDPrimaryKey, TimestampMixin, Base):
    __tablename__ = "property_images"

    property_id: Mapped[uuid.UUID] = mapped_column(
        UUID_DB(), ForeignKey("properties.id", ondelete="CASCADE"), nullable=False
    )
    image_url: Mapped[str] = mapped_column(String(1024), nullable=False)
    category: Mapped[str] = mapped_column(String(50), default="general", nullable=False)
    display_order: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    is_primary: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)

    property: Mapped["Property"] = relationship("Property", back_populates="images")

    __table_args__ = (Index("ix_property_images_property", "property_id"),)


class PropertyView(UUIDPrimaryKey, Base):
    """One counted view: a session sees a listing at most once per day."""

    __tablename__ = "property_views"

    property_id: Mapped[uuid.UUID] = mapped_column(
        UUID_DB(), ForeignKey("properties.id", ondelete="CASCADE"), nullable=False
    )
    session_id: Mapped[str] = mapped_column(String(64), nullable=False)
    view_date: Mapped[date] = mapped_column(Date, nullable=False)
    viewed_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    user_id: Mapped[uuid.UUID | None] = mapped_column(UUID_DB(), nullable=True)
    user_agent: Mapped[str | None] = mapped_column(String(512), nullable=True)
    ip_address: Mapped[str | None] = mapped_column(String(64), nullable=True)

    __table_args__ = (
        UniqueConstraint(
            "property_id", "session_id", "view_date", name="uq_property_views_daily"
        ),
    )


class PropertyInterest(UUIDPrimaryKey, TimestampMixin, Base):
    """A prospective tenant's expression of interest."""

    __tablename__ = "property_interested"

    property_id: Mapped[uuid.UUID] = mapped_column(
        UUID_DB(), ForeignKey("properties.id", ondelete="CASCADE"), nullable=False
    )
    user_id: Mapped[uuid.UUID | None] = mapped_column(
        UUID_DB(), ForeignKey("profiles.id", ondelete="CASCADE"), nullable=True
    )
    email: Mapped[str | None] = mapped_column(String(255), nullable=True)
    name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    phone: Mapped[str | None] = mapped_column(String(40), nullable=True)
    message: Mapped[str | None] = mapped_column(Text, nullable=True)
    session_id: Mapped[str | None] = mapped_column(String(64), nullable=True)

    __table_args__ = (Index("ix_property_interested_property", "property_id"),)


class PropertyRoom(UUIDPrimaryKey, TimestampMixin, Base):
    """A described room of a listing (bedroom, kitchen, balcony...)."""

    __tablename__ = "property_details"

    property_id: Mapped[uuid.UUID] = mapped_column(
        UUID_DB(), ForeignKey("properties.id", ondelete="CASCADE"), nullable=False
    )
    detail_type: Mapped[str] = mapped_column(String(50), nullable=False)
    detail_name: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    display_order: Mapped[int] = mapped_column(Integer, default=0, nullable=False)

    property: Mapped["Property"] = relationship("Property", back_populates="rooms")
    images: Mapped[list["PropertyRoomImage"]] = relationship(
        "PropertyRoomImage",
        back_populates="room",
        cascade="all, delete-orphan",
        order_by="PropertyRoomImage.display_order",
    )

    __table_args__ = (Index("ix_property_details_property", "property_id"),)

    def __repr__(self) -> str:
        return f"<PropertyRoom(name={self.detail_name}, type={self.detail_type})>"


class PropertyRoomImage(UUIDPrimaryKey, TimestampMixin, Base):
    __tablename__ = "property_detail_images"

    property_detail_id: Mapped[uuid.UUID] = mapped_column(
        UUID_DB(), ForeignKey("property_details.id", ondelete="CASCADE"), nullable=False
    )
    image_url: Mapped[str] = mapped_column(String(1024), nullable=False)
    display_order: Mapped[int] = mapped_column(Integer, default=0, nullable=False)

    room: Mapped["PropertyRoom"] = relationship("PropertyRoom", back_populates="images")

    __table_args__ = (
        Index("ix_property_detail_images_detail", "property_detail_id"),
    )

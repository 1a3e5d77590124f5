"""Landlord management schemas."""

from datetime import date, datetime
from decimal import Decimal
from uuid import UUID

from pydantic import BaseModel, EmailStr, Field, model_validator

from ..commons import PaginatedResponse
from ..commons.verification import VerificationStatus
from .models import LandlordStatus, PaymentStatus

# ----- Landlord Schemas -----


class LandlordBase(BaseModel):
    business_name: str | None = Field(None, max_length=255)
    business_registration_number: str | None = Field(None, max_length=100)
    phone_number: str | None = Field(None, max_length=40)
    alternative_phone: str | None = Field(None, max_length=40)
    business_address: str | None = Field(None, max_length=255)
    city: str | None = Field(None, max_length=120)
    district: str | None = Field(None, max_length=120)
    postal_code: str | None = Field(None, max_length=20)
    bank_name: str | None = Field(None, max_length=255)
    bank_account_number: str | None = Field(None, max_length=100)
    bank_account_name: str | None = Field(None, max_length=255)
    mobile_money_number: str | None = Field(None, max_length=40)
    mobile_money_provider: str | None = Field(None, max_length=50)
    commission_rate: Decimal = Field(Decimal("0"), ge=0, le=100)
    payment_schedule: str = Field("monthly", max_length=30)
    preferred_communication: str = Field("email", max_length=20)
    notifications_enabled: bool = True
    notes: str | None = None


class LandlordCreate(LandlordBase):
    """Create a landlord.

    When no account exists for ``email`` one is created, and then
    ``password`` and ``full_name`` are required.
    """

    email: EmailStr
    password: str | None = Field(None, min_length=8, max_length=128)
    full_name: str | None = Field(None, max_length=255)
    national_id: str | None = Field(None, max_length=100)
    tax_id: str | None = Field(None, max_length=100)
    status: LandlordStatus = LandlordStatus.ACTIVE


class LandlordUpdate(BaseModel):
    """Editable landlord fields; status and verification have their own routes."""

    full_name: str | None = Field(None, max_length=255)
    business_name: str | None = Field(None, max_length=255)
    business_registration_number: str | None = Field(None, max_length=100)
    phone_number: str | None = Field(None, max_length=40)
    alternative_phone: str | None = Field(None, max_length=40)
    business_address: str | None = Field(None, max_length=255)
    city: str | None = Field(None, max_length=120)
    district: str | None = Field(None, max_length=120)
    postal_code: str | None = Field(None, max_length=20)
    bank_name: str | None = Field(None, max_length=255)
    bank_account_number: str | None = Field(None, max_length=100)
    bank_account_name: str | None = Field(None, max_length=255)
    mobile_money_number: str | None = Field(None, max_length=40)
    mobile_money_provider: str | None = Field(None, max_length=50)
    commission_rate: Decimal | None = Field(None, ge=0, le=100)
    payment_schedule: str | None = Field(None, max_length=30)
    preferred_communication: str | None = Field(None, max_length=20)
    notifications_enabled: bool | None = None
    id_document_type: str | None = Field(None, max_length=50)
    id_document_number: str | None = Field(None, max_length=100)
    id_document_url: str | None = Field(None, max_length=1024)
    notes: str | None = None
    rating: Decimal | None = Field(None, ge=0, le=5)


class LandlordStatusUpdate(BaseModel):
    status: LandlordStatus


class LandlordVerificationUpdate(BaseModel):
    verification_status: VerificationStatus
    notes: str | None = None


class LandlordResponse(LandlordBase):
    id: UUID
    user_id: UUID
    full_name: str | None = None
    email: str | None = None
    status: LandlordStatus
    verification_status: VerificationStatus
    verification_date: datetime | None = None
    verified_by: UUID | None = None
    verification_notes: str | None = None
    id_document_type: str | None = None
    id_document_number: str | None = None
    id_document_url: str | None = None
    rating: Decimal | None = None
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class EmailAvailability(BaseModel):
    email: str
    available: bool


class LandlordCreated(BaseModel):
    landlord: LandlordResponse
    user_id: UUID
    account_created: bool


class LandlordStats(BaseModel):
    total: int = 0
    active: int = 0
    verified: int = 0
    pending_verification: int = 0
    total_properties: int = 0
    total_units: int = 0


class LandlordListResponse(PaginatedResponse[LandlordResponse]):
    """A page of landlords plus directory-wide stats."""

    stats: LandlordStats = LandlordStats()


# ----- Payment Schemas -----


class LandlordPaymentCreate(BaseModel):
    period_start: date
    period_end: date
    amount_ugx: int = Field(..., ge=0)
    commission_ugx: int = Field(0, ge=0)
    status: PaymentStatus = PaymentStatus.PENDING
    paid_date: date | None = None
    payment_method: str | None = Field(None, max_length=50)
    reference: str | None = Field(None, max_length=100)
    notes: str | None = None

    @model_validator(mode="after")
    def validate_period(self):
        if self.period_end < self.period_start:
            raise ValueError("period_end must be on or after period_start")
        return self


class LandlordPaymentResponse(LandlordPaymentCreate):
    id: UUID
    landlord_id: UUID
    created_at: datetime

    class Config:
        from_attributes = True


# ----- Document Schemas -----


class LandlordDocumentCreate(BaseModel):
    document_type: str = Field(..., min_length=1, max_length=50)
    document_name: str = Field(..., min_length=1, max_length=255)
    document_url: str = Field(..., min_length=1, max_length=1024)
    notes: str | None = None


class LandlordDocumentResponse(LandlordDocumentCreate):
    id: UUID
    landlord_id: UUID
    is_verified: bool
    verified_at: datetime | None = None
    created_at: datetime

    class Config:
        from_attributes = True


class LandlordPropertySummary(BaseModel):
    id: UUID
    title: str
    location: str
    price_ugx: int
    is_active: bool
    block_id: UUID | None = None

    class Config:
        from_attributes = True


class LandlordDetailResponse(LandlordResponse):
    properties: list[LandlordPropertySummary] = []
    total_units: int = 0
    payments: list[LandlordPaymentResponse] = []
    documents: list[LandlordDocumentResponse] = []

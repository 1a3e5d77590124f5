"""Tenant management schemas."""

from datetime import date, datetime
from uuid import UUID

from pydantic import BaseModel, EmailStr, Field

from ..commons.verification import VerificationStatus
from .models import (
    DocumentStatus,
    EmploymentStatus,
    EmploymentType,
    NationalIdType,
    ReferenceStatus,
    TenantStatus,
)

# ----- Profile Schemas -----


class TenantProfileBase(BaseModel):
    phone_number: str | None = Field(None, max_length=40)
    date_of_birth: date | None = None
    national_id: str | None = Field(None, max_length=100)
    national_id_type: NationalIdType | None = None
    home_address: str | None = Field(None, max_length=255)
    home_city: str | None = Field(None, max_length=120)
    home_district: str | None = Field(None, max_length=120)
    home_postal_code: str | None = Field(None, max_length=20)
    employment_status: EmploymentStatus | None = None
    employer_name: str | None = Field(None, max_length=255)
    employer_contact: str | None = Field(None, max_length=255)
    employment_start_date: date | None = None
    employment_type: EmploymentType | None = None
    monthly_income_ugx: int | None = Field(None, ge=0)
    preferred_communication: str = Field("email", max_length=20)


class TenantProfileUpdate(BaseModel):
    """Self-service profile changes; omitted fields are left alone."""

    phone_number: str | None = Field(None, max_length=40)
    date_of_birth: date | None = None
    national_id: str | None = Field(None, max_length=100)
    national_id_type: NationalIdType | None = None
    home_address: str | None = Field(None, max_length=255)
    home_city: str | None = Field(None, max_length=120)
    home_district: str | None = Field(None, max_length=120)
    home_postal_code: str | None = Field(None, max_length=20)
    employment_status: EmploymentStatus | None = None
    employer_name: str | None = Field(None, max_length=255)
    employer_contact: str | None = Field(None, max_length=255)
    employment_start_date: date | None = None
    employment_type: EmploymentType | None = None
    monthly_income_ugx: int | None = Field(None, ge=0)
    preferred_communication: str | None = Field(None, max_length=20)


class TenantProfileResponse(TenantProfileBase):
    id: UUID
    user_id: UUID
    full_name: str | None = None
    email: str | None = None
    status: TenantStatus
    verification_status: VerificationStatus
    verification_date: datetime | None = None
    verified_by: UUID | None = None
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class TenantAdminResponse(TenantProfileResponse):
    notes: str | None = None


class ProfileCompletionResponse(BaseModel):
    percentage: int
    label: str
    description: str
    missing_fields: list[str]
    documents_count: int
    references_count: int


class TenantStatusUpdate(BaseModel):
    status: TenantStatus
    notes: str | None = None


class TenantVerificationUpdate(BaseModel):
    verification_status: VerificationStatus
    notes: str | None = None


# ----- Document Schemas -----


class TenantDocumentResponse(BaseModel):
    id: UUID
    tenant_profile_id: UUID
    document_type: str
    document_name: str
    document_url: str
    document_storage_path: str | None = None
    status: DocumentStatus
    expiry_date: date | None = None
    is_expired: bool = False
    file_size: int | None = None
    mime_type: str | None = None
    reviewed_at: datetime | None = None
    notes: str | None = None
    created_at: datetime

    class Config:
        from_attributes = True


class DocumentDownloadResponse(BaseModel):
    signed_url: str
    document: TenantDocumentResponse


class DocumentReview(BaseModel):
    status: DocumentStatus
    notes: str | None = None


# ----- Reference Schemas -----


class TenantReferenceCreate(BaseModel):
    reference_type: str = Field(..., min_length=1, max_length=50)
    reference_name: str = Field(..., min_length=1, max_length=255)
    reference_title: str = Field(..., min_length=1, max_length=255)
    reference_company: str | None = Field(None, max_length=255)
    reference_email: EmailStr
    reference_phone: str = Field(..., min_length=1, max_length=40)
    reference_address: str | None = Field(None, max_length=255)


class TenantReferenceUpdate(BaseModel):
    reference_type: str | None = Field(None, min_length=1, max_length=50)
    reference_name: str | None = Field(None, min_length=1, max_length=255)
    reference_title: str | None = Field(None, min_length=1, max_length=255)
    reference_company: str | None = Field(None, max_length=255)
    reference_email: EmailStr | None = None
    reference_phone: str | None = Field(None, min_length=1, max_length=40)
    reference_address: str | None = Field(None, max_length=255)


class TenantReferenceResponse(BaseModel):
    id: UUID
    tenant_profile_id: UUID
    reference_type: str
    reference_name: str
    reference_title: str
    reference_company: str | None = None
    reference_email: str
    reference_phone: str
    reference_address: str | None = None
    verification_status: ReferenceStatus
    verified_at: datetime | None = None
    notes: str | None = None
    created_at: datetime

    class Config:
        from_attributes = True


class ReferenceReview(BaseModel):
    verification_status: ReferenceStatus
    notes: str | None = None


class TenantDetailResponse(TenantAdminResponse):
    documents: list[TenantDocumentResponse] = []
    references: list[TenantReferenceResponse] = []
    completion: ProfileCompletionResponse | None = None

"""Tenant management business logic services."""

import uuid
from datetime import date, datetime

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from ...config import settings
from ...core.exceptions import (
    DatabaseError,
    ExternalServiceError,
    NotFoundError,
    ValidationError,
)
from ...core.logging import get_logger
from ...core.state_machine import StatusMachine
from ...core.utils import sanitize_string, slugify, utc_now
from ..commons.verification import VerificationStatus, verification_machine
from ..uploads.storage import StorageProvider
from . import crud
from .models import (
    DocumentStatus,
    ReferenceStatus,
    TenantDocument,
    TenantProfile,
    TenantReference,
    TenantStatus,
)
from .schemas import (
    ProfileCompletionResponse,
    TenantProfileUpdate,
    TenantReferenceCreate,
    TenantReferenceUpdate,
)
from .scoring import calculate_profile_completion, missing_fields, profile_strength

logger = get_logger(__name__)

ALLOWED_DOCUMENT_TYPES = {
    "application/pdf": "pdf",
    "application/msword": "doc",
    "application/vnd.openxmlformats-officedocument.wordprocessingml.document": "docx",
    "image/jpeg": "jpg",
    "image/jpg": "jpg",
    "image/png": "png",
}
DOWNLOAD_URL_TTL_SECONDS = 3600

tenant_status_machine = StatusMachine(
    "tenant status",
    {
        TenantStatus.ACTIVE: {
            TenantStatus.INACTIVE,
            TenantStatus.SUSPENDED,
            TenantStatus.BLACKLISTED,
        },
        TenantStatus.INACTIVE: {TenantStatus.ACTIVE, TenantStatus.BLACKLISTED},
        TenantStatus.SUSPENDED: {
            TenantStatus.ACTIVE,
            TenantStatus.INACTIVE,
            TenantStatus.BLACKLISTED,
        },
        TenantStatus.BLACKLISTED: {TenantStatus.INACTIVE},
    },
)

document_review_machine = StatusMachine(
    "document status",
    {
        DocumentStatus.PENDING: {
            DocumentStatus.APPROVED,
            DocumentStatus.REJECTED,
            DocumentStatus.EXPIRED,
        },
        DocumentStatus.APPROVED: {DocumentStatus.REJECTED, DocumentStatus.EXPIRED},
        DocumentStatus.REJECTED: {DocumentStatus.APPROVED},
        DocumentStatus.EXPIRED: set(),
    },
)

reference_review_machine = StatusMachine(
    "reference status",
    {
        ReferenceStatus.PENDING: {ReferenceStatus.VERIFIED, ReferenceStatus.FAILED},
        ReferenceStatus.VERIFIED: {ReferenceStatus.FAILED},
        ReferenceStatus.FAILED: {ReferenceStatus.PENDING, ReferenceStatus.VERIFIED},
    },
)


# ----- Profile Services -----


async def get_own_profile(db: AsyncSession, user_id: uuid.UUID) -> TenantProfile | None:
    return await crud.get_profile_by_user_id(db, user_id)


async def require_own_profile(
    db: AsyncSession,
    user_id: uuid.UUID,
    message: str = "Tenant profile not found",
) -> TenantProfile:
    profile = await crud.get_profile_by_user_id(db, user_id)
    if not profile:
        raise NotFoundError(message)
    return profile


async def save_own_profile(
    db: AsyncSession, user_id: uuid.UUID, data: TenantProfileUpdate
) -> TenantProfile:
    """Create the caller's tenant profile or update the given fields."""
    changes = data.model_dump(exclude_unset=True)
    for key in ("phone_number", "national_id", "home_address", "home_city"):
        if key in changes:
            changes[key] = sanitize_string(changes[key])
    if changes.get("preferred_communication") is None:
        changes.pop("preferred_communication", None)

    profile = await crud.get_profile_by_user_id(db, user_id)
    if profile is None:
        profile = await crud.create_profile(db, user_id=user_id, **changes)
        logger.info(f"Created tenant profile {profile.id} for user {user_id}")
    else:
        await crud.update_profile(db, profile, **changes)
    await db.commit()
    return await crud.get_profile_by_id(db, profile.id)


async def get_completion(
    db: AsyncSession, profile: TenantProfile | None
) -> ProfileCompletionResponse:
    documents_count = await crud.count_documents(db, profile.id) if profile else 0
    references_count = await crud.count_references(db, profile.id) if profile else 0
    percentage = calculate_profile_completion(
        profile, documents_count, references_count
    )
    strength = profile_strength(percentage)
    return ProfileCompletionResponse(
        percentage=percentage,
        label=strength.label,
        description=strength.description,
        missing_fields=missing_fields(profile),
        documents_count=documents_count,
        references_count=references_count,
    )


# ----- Document Services -----


def document_storage_path(
    user_id: uuid.UUID, document_type: str, extension: str, now: datetime
) -> str:
    """``<user id>/<epoch millis>-<document type>.<ext>``"""
    millis = int(now.timestamp() * 1000)
    return f"{user_id}/{millis}-{slugify(document_type)}.{extension}"


def _extension_for(file_name: str | None, content_type: str) -> str:
    if file_name and "." in file_name:
        return file_name.rsplit(".", 1)[-1].lower()
    return ALLOWED_DOCUMENT_TYPES[content_type]


def validate_document_upload(
    size: int,
    content_type: str | None,
    document_type: str | None,
    document_name: str | None,
) -> None:
    if not sanitize_string(document_type) or not sanitize_string(document_name):
        raise ValidationError(
            "Missing required fields: document_type and document_name"
        )
    max_bytes = settings.tenant_document_max_bytes
    if size > max_bytes:
        raise ValidationError(
            f"File size exceeds {max_bytes // (1024 * 1024)}MB limit",
            details={"max_bytes": max_bytes, "size": size},
        )
    if content_type not in ALLOWED_DOCUMENT_TYPES:
        raise ValidationError(
            "Invalid file type. Only PDF, DOC, DOCX, JPG, and PNG files are allowed."
        )


async def upload_document(
    db: AsyncSession,
    storage: StorageProvider,
    user_id: uuid.UUID,
    data: bytes,
    file_name: str | None,
    content_type: str | None,
    document_type: str | None,
    document_name: str | None,
    expiry_date: date | None = None,
) -> TenantDocument:
    """Store a document file, then its record.

    The stored file is removed again when the record cannot be saved.
    """
    profile = await require_own_profile(
        db, user_id, "Tenant profile not found. Please complete your profile first."
    )
    validate_document_upload(len(data), content_type, document_type, document_name)

    bucket = settings.tenant_documents_bucket
    extension = _extension_for(file_name, content_type)
    path = document_storage_path(user_id, document_type.strip(), extension, utc_now())
    await storage.upload(bucket, path, data, content_type=content_type, upsert=False)

    try:
        url = await storage.signed_url(
            bucket, path, settings.storage_signed_url_ttl_seconds
        )
        document = await crud.create_document(
            db,
            tenant_profile_id=profile.id,
            document_type=document_type.strip(),
            document_name=document_name.strip(),
            document_url=url,
            document_storage_path=path,
            status=DocumentStatus.PENDING,
            expiry_date=expiry_date,
            file_size=len(data),
            mime_type=content_type,
            uploaded_by=user_id,
        )
        await db.commit()
    except SQLAlchemyError as e:
        await db.rollback()
        logger.error(f"Saving document record for {path} failed: {e}")
        await storage.remove(bucket, path)
        raise DatabaseError("Failed to save document record") from e
    except ExternalServiceError:
        logger.error(f"Signing {bucket}/{path} failed, removing the stored file")
        await storage.remove(bucket, path)
        raise

    logger.info(f"Stored tenant document {document.id} at {bucket}/{path}")
    return document


async def list_own_documents(
    db: AsyncSession, user_id: uuid.UUID
) -> list[TenantDocument]:
    profile = await require_own_profile(db, user_id)
    return await crud.get_documents(db, profile.id)


async def get_document_download(
    db: AsyncSession,
    storage: StorageProvider,
    user_id: uuid.UUID,
    document_id: uuid.UUID,
) -> tuple[TenantDocument, str]:
    """The caller's document with a one-hour download link."""
    profile = await require_own_profile(db, user_id)
    document = await crud.get_document(db, profile.id, document_id)
    if not document:
        raise NotFoundError(
            "Document not found or you don't have permission to access it"
        )
    if not document.document_storage_path:
        return document, document.document_url
    url = await storage.signed_url(
        settings.tenant_documents_bucket,
        document.document_storage_path,
        DOWNLOAD_URL_TTL_SECONDS,
    )
    return document, url


async def delete_own_document(
    db: AsyncSession,
    storage: StorageProvider,
    user_id: uuid.UUID,
    document_id: uuid.UUID,
) -> None:
    profile = await require_own_profile(db, user_id)
    document = await crud.get_document(db, profile.id, document_id)
    if not document:
        raise NotFoundError(
            "Document not found or you don't have permission to delete it"
        )

    if document.document_storage_path:
        try:
            await storage.remove(
                settings.tenant_documents_bucket, document.document_storage_path
            )
        except ExternalServiceError as e:
            # Record is deleted even if file removal fails.
            logger.error(
                f"Removing {document.document_storage_path} from storage failed: {e}"
            )

    await crud.delete_document(db, document)
    await db.commit()


# ----- Reference Services -----


async def list_own_references(
    db: AsyncSession, user_id: uuid.UUID
) -> list[TenantReference]:
    profile = await require_own_profile(db, user_id)
    return await crud.get_references(db, profile.id)


async def add_reference(
    db: AsyncSession, user_id: uuid.UUID, data: TenantReferenceCreate
) -> TenantReference:
    profile = await require_own_profile(
        db, user_id, "Tenant profile not found. Please complete your profile first."
    )
    reference = await crud.create_reference(
        db,
        tenant_profile_id=profile.id,
        verification_status=ReferenceStatus.PENDING,
        **data.model_dump(),
    )
    await db.commit()
    return reference


async def _own_reference(
    db: AsyncSession, user_id: uuid.UUID, reference_id: uuid.UUID, action: str
) -> TenantReference:
    profile = await require_own_profile(db, user_id)
    reference = await crud.get_reference(db, profile.id, reference_id)
    if not reference:
        raise NotFoundError(
            f"Reference not found or you don't have permission to {action} it"
        )
    return reference


async def update_reference(
    db: AsyncSession,
    user_id: uuid.UUID,
    reference_id: uuid.UUID,
    data: TenantReferenceUpdate,
) -> TenantReference:
    reference = await _own_reference(db, user_id, reference_id, "update")
    updated = await crud.update_reference(
        db, reference, **data.model_dump(exclude_unset=True)
    )
    await db.commit()
    return updated


async def delete_reference(
    db: AsyncSession, user_id: uuid.UUID, reference_id: uuid.UUID
) -> None:
    reference = await _own_reference(db, user_id, reference_id, "delete")
    await crud.delete_reference(db, reference)
    await db.commit()


# ----- Admin Services -----


async def get_tenant(
    db: AsyncSession, profile_id: uuid.UUID, include_details: bool = False
) -> TenantProfile:
    profile = await crud.get_profile_by_id(db, profile_id, include_details)
    if not profile:
        raise NotFoundError(f"Tenant with ID {profile_id} not found")
    return profile


def _append_note(existing: str | None, note: str | None) -> str | None:
    note = sanitize_string(note, max_length=2000)
    if not note:
        return existing
    return f"{existing}\n{note}" if existing else note


async def change_status(
    db: AsyncSession,
    profile_id: uuid.UUID,
    status: TenantStatus,
    notes: str | None = None,
) -> TenantProfile:
    profile = await get_tenant(db, profile_id)
    if tenant_status_machine.validate(profile.status, status):
        logger.info(
            f"Tenant {profile_id} status {profile.status.value} -> {status.value}"
        )
        profile.status = status
    profile.notes = _append_note(profile.notes, notes)
    await db.commit()
    return profile


async def change_verification(
    db: AsyncSession,
    profile_id: uuid.UUID,
    verification_status: VerificationStatus,
    verified_by: uuid.UUID | None = None,
    notes: str | None = None,
) -> TenantProfile:
    profile = await get_tenant(db, profile_id)
    if verification_machine.validate(profile.verification_status, verification_status):
        verified = verification_status == VerificationStatus.VERIFIED
        await crud.update_profile(
            db,
            profile,
            verification_status=verification_status,
            verification_date=utc_now() if verified else None,
            verified_by=verified_by if verified else None,
        )
    profile.notes = _append_note(profile.notes, notes)
    await db.commit()
    return profile


async def review_document(
    db: AsyncSession,
    profile_id: uuid.UUID,
    document_id: uuid.UUID,
    status: DocumentStatus,
    reviewer_id: uuid.UUID,
    notes: str | None = None,
) -> TenantDocument:
    """Approve, reject or expire a tenant document."""
    document = await crud.get_document(db, profile_id, document_id)
    if not document:
        raise NotFoundError(f"Document with ID {document_id} not found for this tenant")
    if document_review_machine.validate(document.status, status):
        await crud.update_document(
            db,
            document,
            status=status,
            reviewed_by=reviewer_id,
            reviewed_at=utc_now(),
        )
    if notes is not None:
        document.notes = notes
    await db.commit()
    return document


async def review_reference(
    db: AsyncSession,
    profile_id: uuid.UUID,
    reference_id: uuid.UUID,
    verification_status: ReferenceStatus,
    notes: str | None = None,
) -> TenantReference:
    """Mark a reference verified or failed after contacting it."""
    reference = await crud.get_reference(db, profile_id, reference_id)
    if not reference:
        raise NotFoundError(
            f"Reference with ID {reference_id} not found for this tenant"
        )
    if reference_review_machine.validate(
        reference.verification_status, verification_status
    ):
        await crud.update_reference(
            db,
            reference,
            verification_status=verification_status,
            verified_at=utc_now()
            if verification_status == ReferenceStatus.VERIFIED
            else None,
        )
    if notes is not None:
        reference.notes = notes
    await db.commit()
    return reference

"""Landlord management business logic services."""

import uuid

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from ...core.exceptions import (
    DatabaseError,
    NotFoundError,
    ResourceAlreadyExistsError,
    ValidationError,
)
from ...core.logging import get_logger
from ...core.state_machine import StatusMachine
from ...core.utils import sanitize_string, utc_now
from ..auth import crud as auth_crud
from ..auth.models import UserRole
from ..commons.verification import VerificationStatus, verification_machine
from . import crud
from .models import LandlordDocument, LandlordPayment, LandlordProfile, LandlordStatus
from .schemas import (
    EmailAvailability,
    LandlordCreate,
    LandlordDetailResponse,
    LandlordDocumentCreate,
    LandlordPaymentCreate,
    LandlordPropertySummary,
    LandlordStats,
    LandlordUpdate,
)

logger = get_logger(__name__)

landlord_status_machine = StatusMachine(
    "landlord status",
    {
        LandlordStatus.PENDING: {
            LandlordStatus.ACTIVE,
            LandlordStatus.INACTIVE,
            LandlordStatus.SUSPENDED,
            LandlordStatus.BLACKLISTED,
        },
        LandlordStatus.ACTIVE: {
            LandlordStatus.INACTIVE,
            LandlordStatus.SUSPENDED,
            LandlordStatus.BLACKLISTED,
        },
        LandlordStatus.INACTIVE: {LandlordStatus.ACTIVE, LandlordStatus.BLACKLISTED},
        LandlordStatus.SUSPENDED: {
            LandlordStatus.ACTIVE,
            LandlordStatus.INACTIVE,
            LandlordStatus.BLACKLISTED,
        },
        LandlordStatus.BLACKLISTED: {LandlordStatus.INACTIVE},
    },
)


async def get_landlord(
    db: AsyncSession, landlord_id: uuid.UUID, include_details: bool = False
) -> LandlordProfile:
    landlord = await crud.get_landlord_by_id(db, landlord_id, include_details)
    if not landlord:
        raise NotFoundError(f"Landlord with ID {landlord_id} not found")
    return landlord


async def get_own_landlord(db: AsyncSession, user_id: uuid.UUID) -> LandlordProfile:
    landlord = await crud.get_landlord_by_user_id(db, user_id)
    if not landlord:
        raise NotFoundError("Landlord profile not found")
    return landlord


async def check_email(db: AsyncSession, email: str) -> EmailAvailability:
    """An e-mail is available when no account uses it yet."""
    if not email or not email.strip():
        raise ValidationError("Email parameter is required", field="email")
    existing = await auth_crud.get_user_by_email(db, email)
    return EmailAvailability(email=email, available=existing is None)


async def create_landlord(
    db: AsyncSession, data: LandlordCreate
) -> tuple[LandlordProfile, bool]:
    """Create a landlord profile, creating the account when needed.

    An existing account is promoted to the landlord role; otherwise a new
    account is created from ``email``, ``password`` and ``full_name``.
    Account and profile are written in one transaction, so a failed
    profile insert leaves no orphan account behind.

    Returns:
        Tuple of (landlord, account_created)
    """
    user = await auth_crud.get_user_by_email(db, data.email)
    account_created = user is None

    if user is not None:
        if await crud.get_landlord_by_user_id(db, user.id):
            raise ResourceAlreadyExistsError("Landlord", data.email)
    elif not data.password or not sanitize_string(data.full_name):
        raise ValidationError("Email, password, and full name are required")

    try:
        if account_created:
            user = await auth_crud.create_user(
                db,
                email=data.email,
                password=data.password,
                full_name=sanitize_string(data.full_name),
                role=UserRole.LANDLORD,
                phone_number=data.phone_number,
            )
        elif user.role != UserRole.ADMIN:
            await auth_crud.update_user(db, user, role=UserRole.LANDLORD)

        fields = data.model_dump(
            exclude={"email", "password", "full_name", "national_id", "tax_id"}
        )
        fields["business_registration_number"] = (
            data.business_registration_number or data.tax_id
        )
        if data.national_id:
            fields["id_document_type"] = "National ID"
            fields["id_document_number"] = data.national_id

        landlord = await crud.create_landlord(db, user=user, **fields)
        await db.commit()
    except SQLAlchemyError as e:
        await db.rollback()
        logger.error(f"Failed to create landlord for {data.email}: {e}")
        raise DatabaseError("Failed to create landlord profile") from e

    logger.info(
        f"Created landlord {landlord.id} for user {user.id} "
        f"(account_created={account_created})"
    )
    return landlord, account_created


async def update_landlord(
    db: AsyncSession, landlord_id: uuid.UUID, data: LandlordUpdate
) -> LandlordProfile:
    landlord = await get_landlord(db, landlord_id)
    changes = data.model_dump(exclude_unset=True)

    full_name = changes.pop("full_name", None)
    if full_name is not None:
        await auth_crud.update_user(db, landlord.user, full_name=full_name)

    updated = await crud.update_landlord(db, landlord, **changes)
    await db.commit()
    return updated


async def change_status(
    db: AsyncSession, landlord_id: uuid.UUID, status: LandlordStatus
) -> LandlordProfile:
    landlord = await get_landlord(db, landlord_id)
    if landlord_status_machine.validate(landlord.status, status):
        previous = landlord.status
        await crud.update_landlord(db, landlord, status=status)
        await db.commit()
        logger.info(
            f"Landlord {landlord_id} status {previous.value} -> {status.value}"
        )
    return landlord


async def change_verification(
    db: AsyncSession,
    landlord_id: uuid.UUID,
    verification_status: VerificationStatus,
    verified_by: uuid.UUID | None = None,
    notes: str | None = None,
) -> LandlordProfile:
    """Move verification along; the verification date tracks ``verified``."""
    landlord = await get_landlord(db, landlord_id)
    if verification_machine.validate(landlord.verification_status, verification_status):
        verified = verification_status == VerificationStatus.VERIFIED
        await crud.update_landlord(
            db,
            landlord,
            verification_status=verification_status,
            verification_date=utc_now() if verified else None,
            verified_by=verified_by if verified else None,
        )
    if notes is not None:
        landlord.verification_notes = notes
    await db.commit()
    return landlord


async def delete_landlord(db: AsyncSession, landlord_id: uuid.UUID) -> None:
    """Delete a landlord profile; its listings and blocks become unassigned."""
    landlord = await get_landlord(db, landlord_id, include_details=True)
    await crud.release_landlord_assignments(db, landlord_id)
    await crud.delete_landlord(db, landlord)
    await db.commit()
    logger.info(f"Deleted landlord {landlord_id}")


async def get_stats(db: AsyncSession) -> LandlordStats:
    by_status = await crud.count_by_status(db)
    by_verification = await crud.count_by_verification(db)
    return LandlordStats(
        total=sum(by_status.values()),
        active=by_status.get(LandlordStatus.ACTIVE, 0),
        verified=by_verification.get(VerificationStatus.VERIFIED, 0),
        pending_verification=by_verification.get(VerificationStatus.PENDING, 0),
        total_properties=await crud.count_assigned_properties(db),
        total_units=await crud.count_assigned_units(db),
    )


async def get_landlord_details(
    db: AsyncSession, landlord_id: uuid.UUID
) -> LandlordDetailResponse:
    """A landlord with assigned listings, payments and documents."""
    landlord = await get_landlord(db, landlord_id, include_details=True)
    properties = await crud.get_landlord_properties(db, landlord_id)
    total_units = await crud.count_assigned_units(db, landlord_id)
    return LandlordDetailResponse.model_validate(landlord).model_copy(
        update={
            "properties": [
                LandlordPropertySummary.model_validate(p) for p in properties
            ],
            "total_units": total_units,
        }
    )


# ----- Payments -----


async def record_payment(
    db: AsyncSession, landlord_id: uuid.UUID, data: LandlordPaymentCreate
) -> LandlordPayment:
    await get_landlord(db, landlord_id)
    payment = await crud.create_payment(
        db, landlord_id=landlord_id, **data.model_dump()
    )
    await db.commit()
    return payment


async def list_payments(
    db: AsyncSession, landlord_id: uuid.UUID
) -> list[LandlordPayment]:
    await get_landlord(db, landlord_id)
    return await crud.get_payments(db, landlord_id)


# ----- Documents -----


async def add_document(
    db: AsyncSession, landlord_id: uuid.UUID, data: LandlordDocumentCreate
) -> LandlordDocument:
    await get_landlord(db, landlord_id)
    document = await crud.create_document(
        db, landlord_id=landlord_id, **data.model_dump()
    )
    await db.commit()
    return document


async def list_documents(
    db: AsyncSession, landlord_id: uuid.UUID
) -> list[LandlordDocument]:
    await get_landlord(db, landlord_id)
    return await crud.get_documents(db, landlord_id)


async def verify_document(
    db: AsyncSession, landlord_id: uuid.UUID, document_id: uuid.UUID
) -> LandlordDocument:
    document = await crud.get_document_by_id(db, landlord_id, document_id)
    if not document:
        raise NotFoundError(f"Document with ID {document_id} not found")
    document.is_verified = True
    document.verified_at = utc_now()
    await db.commit()
    return document


async def delete_document(
    db: AsyncSession, landlord_id: uuid.UUID, document_id: uuid.UUID
) -> None:
    document = await crud.get_document_by_id(db, landlord_id, document_id)
    if not document:
        raise NotFoundError(f"Document with ID {document_id} not found")
    await crud.delete_document(db, document)
    await db.commit()

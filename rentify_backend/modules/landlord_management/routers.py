"""Landlord management API routes (admin only)."""

import uuid
from typing import Annotated

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from ...database import get_db
from ..auth.dependencies import AdminUser, LandlordUser
from ..commons import BaseResponse, page_offset
from ..commons.verification import VerificationStatus
from . import crud, services
from .models import LandlordStatus
from .schemas import (
    EmailAvailability,
    LandlordCreate,
    LandlordCreated,
    LandlordDetailResponse,
    LandlordDocumentCreate,
    LandlordDocumentResponse,
    LandlordListResponse,
    LandlordPaymentCreate,
    LandlordPaymentResponse,
    LandlordResponse,
    LandlordStats,
    LandlordStatusUpdate,
    LandlordUpdate,
    LandlordVerificationUpdate,
)

router = APIRouter(prefix="/admin/landlords", tags=["Admin Landlords"])
self_router = APIRouter(prefix="/landlord", tags=["Landlord"])


@router.get("", response_model=BaseResponse[LandlordListResponse])
async def list_landlords(
    current_user: AdminUser,
    db: Annotated[AsyncSession, Depends(get_db)],
    page: int = Query(1, ge=1),
    page_size: int = Query(20, ge=1, le=100),
    status: LandlordStatus | None = Query(None),
    verification_status: VerificationStatus | None = Query(None),
    search: str | None = Query(None),
):
    """List landlords with filters, plus directory stats."""
    landlords, total = await crud.get_landlords(
        db,
        skip=page_offset(page, page_size),
        limit=page_size,
        status=status,
        verification_status=verification_status,
        search=search,
    )
    result = LandlordListResponse.from_items(
        items=[LandlordResponse.model_validate(item) for item in landlords],
        total=total,
        page=page,
        page_size=page_size,
    )
    result.stats = await services.get_stats(db)
    return BaseResponse(success=True, data=result)


@router.get("/stats", response_model=BaseResponse[LandlordStats])
async def get_landlord_stats(
    current_user: AdminUser,
    db: Annotated[AsyncSession, Depends(get_db)],
):
    return BaseResponse(success=True, data=await services.get_stats(db))


@router.get("/check-email", response_model=BaseResponse[EmailAvailability])
async def check_email(
    current_user: AdminUser,
    db: Annotated[AsyncSession, Depends(get_db)],
    email: str = Query(""),
):
    """Tell whether an e-mail is free for a new landlord account."""
    return BaseResponse(success=True, data=await services.check_email(db, email))


@router.post("", response_model=BaseResponse[LandlordCreated], status_code=201)
async def create_landlord(
    data: LandlordCreate,
    current_user: AdminUser,
    db: Annotated[AsyncSession, Depends(get_db)],
):
    landlord, account_created = await services.create_landlord(db, data)
    return BaseResponse(
        success=True,
        message="Landlord created successfully",
        data=LandlordCreated(
            landlord=LandlordResponse.model_validate(landlord),
            user_id=landlord.user_id,
            account_created=account_created,
        ),
    )


@router.get("/{landlord_id}", response_model=BaseResponse[LandlordDetailResponse])
async def get_landlord(
    landlord_id: uuid.UUID,
    current_user: AdminUser,
    db: Annotated[AsyncSession, Depends(get_db)],
):
    return BaseResponse(
        success=True, data=await services.get_landlord_details(db, landlord_id)
    )


@router.patch("/{landlord_id}", response_model=BaseResponse[LandlordResponse])
async def update_landlord(
    landlord_id: uuid.UUID,
    data: LandlordUpdate,
    current_user: AdminUser,
    db: Annotated[AsyncSession, Depends(get_db)],
):
    landlord = await services.update_landlord(db, landlord_id, data)
    return BaseResponse(
        success=True,
        message="Landlord updated successfully",
        data=LandlordResponse.model_validate(landlord),
    )


@router.post("/{landlord_id}/status", response_model=BaseResponse[LandlordResponse])
async def change_landlord_status(
    landlord_id: uuid.UUID,
    data: LandlordStatusUpdate,
    current_user: AdminUser,
    db: Annotated[AsyncSession, Depends(get_db)],
):
    landlord = await services.change_status(db, landlord_id, data.status)
    return BaseResponse(
        success=True,
        message="Status updated successfully",
        data=LandlordResponse.model_validate(landlord),
    )


@router.post(
    "/{landlord_id}/verification", response_model=BaseResponse[LandlordResponse]
)
async def change_landlord_verification(
    landlord_id: uuid.UUID,
    data: LandlordVerificationUpdate,
    current_user: AdminUser,
    db: Annotated[AsyncSession, Depends(get_db)],
):
    landlord = await services.change_verification(
        db,
        landlord_id,
        data.verification_status,
        verified_by=current_user.id,
        notes=data.notes,
    )
    return BaseResponse(
        success=True,
        message="Verification status updated successfully",
        data=LandlordResponse.model_validate(landlord),
    )


@router.delete("/{landlord_id}", response_model=BaseResponse[None])
async def delete_landlord(
    landlord_id: uuid.UUID,
    current_user: AdminUser,
    db: Annotated[AsyncSession, Depends(get_db)],
):
    await services.delete_landlord(db, landlord_id)
    return BaseResponse(success=True, message="Landlord deleted successfully")


# ----- Payments -----


@router.get(
    "/{landlord_id}/payments",
    response_model=BaseResponse[list[LandlordPaymentResponse]],
)
async def list_landlord_payments(
    landlord_id: uuid.UUID,
    current_user: AdminUser,
    db: Annotated[AsyncSession, Depends(get_db)],
):
    payments = await services.list_payments(db, landlord_id)
    return BaseResponse(
        success=True,
        data=[LandlordPaymentResponse.model_validate(p) for p in payments],
    )


@router.post(
    "/{landlord_id}/payments", response_model=BaseResponse[LandlordPaymentResponse]
)
async def record_landlord_payment(
    landlord_id: uuid.UUID,
    data: LandlordPaymentCreate,
    current_user: AdminUser,
    db: Annotated[AsyncSession, Depends(get_db)],
):
    payment = await services.record_payment(db, landlord_id, data)
    return BaseResponse(
        success=True,
        message="Payment recorded successfully",
        data=LandlordPaymentResponse.model_validate(payment),
    )


# ----- Documents -----


@router.get(
    "/{landlord_id}/documents",
    response_model=BaseResponse[list[LandlordDocumentResponse]],
)
async def list_landlord_documents(
    landlord_id: uuid.UUID,
    current_user: AdminUser,
    db: Annotated[AsyncSession, Depends(get_db)],
):
    documents = await services.list_documents(db, landlord_id)
    return BaseResponse(
        success=True,
        data=[LandlordDocumentResponse.model_validate(d) for d in documents],
    )


@router.post(
    "/{landlord_id}/documents", response_model=BaseResponse[LandlordDocumentResponse]
)
async def add_landlord_document(
    landlord_id: uuid.UUID,
    data: LandlordDocumentCreate,
    current_user: AdminUser,
    db: Annotated[AsyncSession, Depends(get_db)],
):
    document = await services.add_document(db, landlord_id, data)
    return BaseResponse(
        success=True,
        message="Document added successfully",
        data=LandlordDocumentResponse.model_validate(document),
    )


@router.post(
    "/{landlord_id}/documents/{document_id}/verify",
    response_model=BaseResponse[LandlordDocumentResponse],
)
async def verify_landlord_document(
    landlord_id: uuid.UUID,
    document_id: uuid.UUID,
    current_user: AdminUser,
    db: Annotated[AsyncSession, Depends(get_db)],
):
    document = await services.verify_document(db, landlord_id, document_id)
    return BaseResponse(
        success=True, data=LandlordDocumentResponse.model_validate(document)
    )


@router.delete(
    "/{landlord_id}/documents/{document_id}", response_model=BaseResponse[None]
)
async def delete_landlord_document(
    landlord_id: uuid.UUID,
    document_id: uuid.UUID,
    current_user: AdminUser,
    db: Annotated[AsyncSession, Depends(get_db)],
):
    await services.delete_document(db, landlord_id, document_id)
    return BaseResponse(success=True, message="Document deleted successfully")


# ----- Landlord self-service -----


@self_router.get("/profile", response_model=BaseResponse[LandlordDetailResponse])
async def get_my_landlord_profile(
    current_user: LandlordUser,
    db: Annotated[AsyncSession, Depends(get_db)],
):
    """The caller's landlord profile with assigned listings and payouts."""
    landlord = await services.get_own_landlord(db, current_user.id)
    return BaseResponse(
        success=True, data=await services.get_landlord_details(db, landlord.id)
    )

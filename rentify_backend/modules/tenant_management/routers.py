"""Tenant API routes: self-service under /tenant, back-office under /admin/tenants."""

import uuid
from datetime import date
from typing import Annotated

from fastapi import APIRouter, Depends, File, Form, HTTPException, Query, UploadFile
from sqlalchemy.ext.asyncio import AsyncSession

from ...database import get_db
from ..auth.dependencies import AdminUser, TenantUser
from ..commons import BaseResponse, PaginatedResponse, page_offset
from ..commons.verification import VerificationStatus
from ..uploads.storage import StorageProvider, get_storage
from . import crud, services
from .models import TenantStatus
from .schemas import (
    DocumentDownloadResponse,
    DocumentReview,
    ProfileCompletionResponse,
    ReferenceReview,
    TenantAdminResponse,
    TenantDetailResponse,
    TenantDocumentResponse,
    TenantProfileResponse,
    TenantProfileUpdate,
    TenantReferenceCreate,
    TenantReferenceResponse,
    TenantReferenceUpdate,
    TenantStatusUpdate,
    TenantVerificationUpdate,
)

router = APIRouter(prefix="/tenant", tags=["Tenant"])
admin_router = APIRouter(prefix="/admin/tenants", tags=["Admin Tenants"])


# ----- Profile -----


@router.get("/profile", response_model=BaseResponse[TenantProfileResponse])
async def get_my_profile(
    current_user: TenantUser,
    db: Annotated[AsyncSession, Depends(get_db)],
):
    """The caller's tenant profile, or null before one is saved."""
    profile = await services.get_own_profile(db, current_user.id)
    return BaseResponse(
        success=True,
        data=TenantProfileResponse.model_validate(profile) if profile else None,
    )


@router.put("/profile", response_model=BaseResponse[TenantProfileResponse])
async def save_my_profile(
    data: TenantProfileUpdate,
    current_user: TenantUser,
    db: Annotated[AsyncSession, Depends(get_db)],
):
    profile = await services.save_own_profile(db, current_user.id, data)
    return BaseResponse(
        success=True,
        message="Profile saved successfully",
        data=TenantProfileResponse.model_validate(profile),
    )


@router.get(
    "/profile/completion", response_model=BaseResponse[ProfileCompletionResponse]
)
async def get_my_profile_completion(
    current_user: TenantUser,
    db: Annotated[AsyncSession, Depends(get_db)],
):
    profile = await services.get_own_profile(db, current_user.id)
    return BaseResponse(success=True, data=await services.get_completion(db, profile))


# ----- Documents -----


@router.get("/documents", response_model=BaseResponse[list[TenantDocumentResponse]])
async def list_my_documents(
    current_user: TenantUser,
    db: Annotated[AsyncSession, Depends(get_db)],
):
    documents = await services.list_own_documents(db, current_user.id)
    return BaseResponse(
        success=True,
        data=[TenantDocumentResponse.model_validate(d) for d in documents],
    )


@router.post(
    "/documents",
    response_model=BaseResponse[TenantDocumentResponse],
    status_code=201,
)
async def upload_my_document(
    current_user: TenantUser,
    db: Annotated[AsyncSession, Depends(get_db)],
    storage: Annotated[StorageProvider, Depends(get_storage)],
    file: UploadFile | None = File(None),
    document_type: str | None = Form(None),
    document_name: str | None = Form(None),
    expiry_date: date | None = Form(None),
):
    if file is None:
        raise HTTPException(status_code=400, detail="No file provided")
    document = await services.upload_document(
        db,
        storage,
        current_user.id,
        data=await file.read(),
        file_name=file.filename,
        content_type=file.content_type,
        document_type=document_type,
        document_name=document_name,
        expiry_date=expiry_date,
    )
    return BaseResponse(
        success=True,
        message="Document uploaded successfully",
        data=TenantDocumentResponse.model_validate(document),
    )


@router.get(
    "/documents/{document_id}", response_model=BaseResponse[DocumentDownloadResponse]
)
async def download_my_document(
    document_id: uuid.UUID,
    current_user: TenantUser,
    db: Annotated[AsyncSession, Depends(get_db)],
    storage: Annotated[StorageProvider, Depends(get_storage)],
):
    document, url = await services.get_document_download(
        db, storage, current_user.id, document_id
    )
    return BaseResponse(
        success=True,
        data=DocumentDownloadResponse(
            signed_url=url, document=TenantDocumentResponse.model_validate(document)
        ),
    )


@router.delete("/documents/{document_id}", response_model=BaseResponse[None])
async def delete_my_document(
    document_id: uuid.UUID,
    current_user: TenantUser,
    db: Annotated[AsyncSession, Depends(get_db)],
    storage: Annotated[StorageProvider, Depends(get_storage)],
):
    await services.delete_own_document(db, storage, current_user.id, document_id)
    return BaseResponse(success=True, message="Document deleted successfully")


# ----- References -----


@router.get("/references", response_model=BaseResponse[list[TenantReferenceResponse]])
async def list_my_references(
    current_user: TenantUser,
    db: Annotated[AsyncSession, Depends(get_db)],
):
    references = await services.list_own_references(db, current_user.id)
    return BaseResponse(
        success=True,
        data=[TenantReferenceResponse.model_validate(r) for r in references],
    )


@router.post(
    "/references",
    response_model=BaseResponse[TenantReferenceResponse],
    status_code=201,
)
async def add_my_reference(
    data: TenantReferenceCreate,
    current_user: TenantUser,
    db: Annotated[AsyncSession, Depends(get_db)],
):
    reference = await services.add_reference(db, current_user.id, data)
    return BaseResponse(
        success=True,
        message="Reference added successfully",
        data=TenantReferenceResponse.model_validate(reference),
    )


@router.put(
    "/references/{reference_id}", response_model=BaseResponse[TenantReferenceResponse]
)
async def update_my_reference(
    reference_id: uuid.UUID,
    data: TenantReferenceUpdate,
    current_user: TenantUser,
    db: Annotated[AsyncSession, Depends(get_db)],
):
    reference = await services.update_reference(db, current_user.id, reference_id, data)
    return BaseResponse(
        success=True,
        message="Reference updated successfully",
        data=TenantReferenceResponse.model_validate(reference),
    )


@router.delete("/references/{reference_id}", response_model=BaseResponse[None])
async def delete_my_reference(
    reference_id: uuid.UUID,
    current_user: TenantUser,
    db: Annotated[AsyncSession, Depends(get_db)],
):
    await services.delete_reference(db, current_user.id, reference_id)
    return BaseResponse(success=True, message="Reference deleted successfully")


# ----- Admin -----


@admin_router.get(
    "", response_model=BaseResponse[PaginatedResponse[TenantAdminResponse]]
)
async def list_tenants(
    current_user: AdminUser,
    db: Annotated[AsyncSession, Depends(get_db)],
    page: int = Query(1, ge=1),
    page_size: int = Query(20, ge=1, le=100),
    status: TenantStatus | None = Query(None),
    verification_status: VerificationStatus | None = Query(None),
    search: str | None = Query(None),
):
    profiles, total = await crud.get_profiles(
        db,
        skip=page_offset(page, page_size),
        limit=page_size,
        status=status,
        verification_status=verification_status,
        search=search,
    )
    return BaseResponse(
        success=True,
        data=PaginatedResponse.from_items(
            items=[TenantAdminResponse.model_validate(p) for p in profiles],
            total=total,
            page=page,
            page_size=page_size,
        ),
    )


@admin_router.get("/{tenant_id}", response_model=BaseResponse[TenantDetailResponse])
async def get_tenant(
    tenant_id: uuid.UUID,
    current_user: AdminUser,
    db: Annotated[AsyncSession, Depends(get_db)],
):
    """A tenant with documents, references and completion score."""
    profile = await services.get_tenant(db, tenant_id, include_details=True)
    completion = await services.get_completion(db, profile)
    return BaseResponse(
        success=True,
        data=TenantDetailResponse.model_validate(profile).model_copy(
            update={"completion": completion}
        ),
    )


@admin_router.post(
    "/{tenant_id}/status", response_model=BaseResponse[TenantAdminResponse]
)
async def change_tenant_status(
    tenant_id: uuid.UUID,
    data: TenantStatusUpdate,
    current_user: AdminUser,
    db: Annotated[AsyncSession, Depends(get_db)],
):
    profile = await services.change_status(db, tenant_id, data.status, data.notes)
    return BaseResponse(
        success=True,
        message="Status updated successfully",
        data=TenantAdminResponse.model_validate(profile),
    )


@admin_router.post(
    "/{tenant_id}/verification", response_model=BaseResponse[TenantAdminResponse]
)
async def change_tenant_verification(
    tenant_id: uuid.UUID,
    data: TenantVerificationUpdate,
    current_user: AdminUser,
    db: Annotated[AsyncSession, Depends(get_db)],
):
    profile = await services.change_verification(
        db,
        tenant_id,
        data.verification_status,
        verified_by=current_user.id,
        notes=data.notes,
    )
    return BaseResponse(
        success=True,
        message="Verification status updated successfully",
        data=TenantAdminResponse.model_validate(profile),
    )


@admin_router.post(
    "/{tenant_id}/documents/{document_id}/review",
    response_model=BaseResponse[TenantDocumentResponse],
)
async def review_tenant_document(
    tenant_id: uuid.UUID,
    document_id: uuid.UUID,
    data: DocumentReview,
    current_user: AdminUser,
    db: Annotated[AsyncSession, Depends(get_db)],
):
    document = await services.review_document(
        db, tenant_id, document_id, data.status, current_user.id, data.notes
    )
    return BaseResponse(
        success=True, data=TenantDocumentResponse.model_validate(document)
    )


@admin_router.post(
    "/{tenant_id}/references/{reference_id}/review",
    response_model=BaseResponse[TenantReferenceResponse],
)
async def review_tenant_reference(
    tenant_id: uuid.UUID,
    reference_id: uuid.UUID,
    data: ReferenceReview,
    current_user: AdminUser,
    db: Annotated[AsyncSession, Depends(get_db)],
):
    reference = await services.review_reference(
        db, tenant_id, reference_id, data.verification_status, data.notes
    )
    return BaseResponse(
        success=True, data=TenantReferenceResponse.model_validate(reference)
    )

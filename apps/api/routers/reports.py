"""
Router for lesson reports, their photos and their share links.
"""

import logging
from datetime import datetime
from typing import List, Optional

from fastapi import APIRouter, Body, Depends, File, HTTPException, UploadFile
from fastapi.responses import Response
from pydantic import Field
from sqlalchemy.ext.asyncio import AsyncSession

from config import settings
from database import get_db
from routers.auth_scope import AuthContext, get_auth_context
from routers.schemas import CamelModel
from services import report_photos as photo_service
from services import reports as report_service
from services.report_share import (
    create_report_share_link,
    list_report_share_links,
    revoke_report_share_links,
)

router = APIRouter()
logger = logging.getLogger(__name__)


class ReportFields(CamelModel):
    summary_items: Optional[str] = Field(default=None, max_length=1000)
    strength_note: Optional[str] = Field(default=None, max_length=1000)
    improve_note: Optional[str] = Field(default=None, max_length=1000)
    next_goal: Optional[str] = Field(default=None, max_length=500)
    homework: Optional[str] = Field(default=None, max_length=1000)
    pain_change: Optional[str] = Field(default=None, max_length=500)


class ReportCreateRequest(ReportFields):
    session_id: str


class ReportUpdateRequest(ReportFields):
    pass


class ReportResponse(CamelModel):
    id: str
    client_id: str
    session_id: str
    summary_items: Optional[str] = None
    strength_note: Optional[str] = None
    improve_note: Optional[str] = None
    next_goal: Optional[str] = None
    homework: Optional[str] = None
    pain_change: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class ShareCreateRequest(CamelModel):
    expire_hours: Optional[int] = Field(default=None, ge=1, le=720)


class ShareResponse(CamelModel):
    token: str
    share_url: str
    expires_at: datetime


class ShareLinkSummary(CamelModel):
    id: str
    expires_at: datetime
    revoked: bool
    view_count: int
    last_viewed_at: Optional[datetime] = None
    created_at: Optional[datetime] = None


class ReportPhotoResponse(CamelModel):
    id: str
    report_id: str
    file_name: str
    created_at: Optional[datetime] = None
    image_url: str


def _photo_response(photo) -> ReportPhotoResponse:
    return ReportPhotoResponse(
        id=photo.id,
        report_id=photo.report_id,
        file_name=photo.file_name or "photo",
        created_at=photo.created_at,
        image_url=f"/reports/{photo.report_id}/photos/{photo.id}",
    )


def _inline_image(data: bytes, content_type: str, file_name: str) -> Response:
    return Response(
        content=data,
        media_type=content_type,
        headers={"Content-Disposition": f'inline; filename="{file_name}"'},
    )


@router.post("", response_model=ReportResponse, status_code=201)
async def create_report(
    request: ReportCreateRequest,
    auth: AuthContext = Depends(get_auth_context),
    db: AsyncSession = Depends(get_db),
):
    """Create the report for an owned session; one report per session."""
    report = await report_service.create_report(
        db,
        instructor_id=auth.instructor_id,
        session_id=request.session_id,
        fields=request.model_dump(exclude={"session_id"}),
    )
    return ReportResponse.model_validate(report)


@router.get("/{report_id}", response_model=ReportResponse)
async def get_report(
    report_id: str,
    auth: AuthContext = Depends(get_auth_context),
    db: AsyncSession = Depends(get_db),
):
    report = await report_service.get_owned_report(db, instructor_id=auth.instructor_id, report_id=report_id)
    return ReportResponse.model_validate(report)


@router.patch("/{report_id}", response_model=ReportResponse)
async def update_report(
    report_id: str,
    request: ReportUpdateRequest,
    auth: AuthContext = Depends(get_auth_context),
    db: AsyncSession = Depends(get_db),
):
    report = await report_service.update_report(
        db,
        instructor_id=auth.instructor_id,
        report_id=report_id,
        changes=request.model_dump(exclude_unset=True),
    )
    return ReportResponse.model_validate(report)


@router.post("/{report_id}/share", response_model=ShareResponse)
async def create_share_link(
    report_id: str,
    request: Optional[ShareCreateRequest] = Body(default=None),
    auth: AuthContext = Depends(get_auth_context),
    db: AsyncSession = Depends(get_db),
):
    """Create a shareable public link for a report."""
    try:
        payload = await create_report_share_link(
            instructor_id=auth.instructor_id,
            report_id=report_id,
            db=db,
            expire_hours=request.expire_hours if request else None,
        )
        return ShareResponse(
            token=payload["token"],
            share_url=payload["share_url"],
            expires_at=payload["expires_at"],
        )
    except HTTPException:
        raise
    except Exception:
        logger.exception("Failed to create share link for report=%s", report_id)
        raise HTTPException(status_code=500, detail="Failed to create share link.")


@router.get("/{report_id}/share", response_model=List[ShareLinkSummary])
async def list_share_links(
    report_id: str,
    auth: AuthContext = Depends(get_auth_context),
    db: AsyncSession = Depends(get_db),
):
    rows = await list_report_share_links(instructor_id=auth.instructor_id, report_id=report_id, db=db)
    return [ShareLinkSummary.model_validate(row) for row in rows]


@router.delete("/{report_id}/share")
async def revoke_share_links(
    report_id: str,
    auth: AuthContext = Depends(get_auth_context),
    db: AsyncSession = Depends(get_db),
):
    """Revoke every active share link of a report."""
    revoked = await revoke_report_share_links(instructor_id=auth.instructor_id, report_id=report_id, db=db)
    return {"revoked": revoked}


@router.post("/{report_id}/photos", response_model=ReportPhotoResponse, status_code=201)
async def upload_report_photo(
    report_id: str,
    file: UploadFile = File(...),
    auth: AuthContext = Depends(get_auth_context),
    db: AsyncSession = Depends(get_db),
):
    data = await file.read(int(settings.MAX_PHOTO_UPLOAD_BYTES) + 1)
    photo = await photo_service.add_report_photo(
        db,
        instructor_id=auth.instructor_id,
        report_id=report_id,
        data=data,
        content_type=file.content_type,
        filename=file.filename,
    )
    return _photo_response(photo)


@router.get("/{report_id}/photos", response_model=List[ReportPhotoResponse])
async def list_report_photos(
    report_id: str,
    auth: AuthContext = Depends(get_auth_context),
    db: AsyncSession = Depends(get_db),
):
    rows = await photo_service.list_owned_report_photos(db, instructor_id=auth.instructor_id, report_id=report_id)
    return [_photo_response(row) for row in rows]


@router.get("/{report_id}/photos/{photo_id}")
async def open_report_photo(
    report_id: str,
    photo_id: str,
    auth: AuthContext = Depends(get_auth_context),
    db: AsyncSession = Depends(get_db),
):
    photo, data, content_type = await photo_service.open_owned_photo(
        db,
        instructor_id=auth.instructor_id,
        report_id=report_id,
        photo_id=photo_id,
    )
    return _inline_image(data, content_type, photo.file_name)

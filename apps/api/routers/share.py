"""
Public share router. Every endpoint here is reachable without a session token;
the share token itself is the credential.
"""

import logging
from datetime import date, datetime
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import Response
from sqlalchemy.ext.asyncio import AsyncSession

from database import get_db
from routers.rate_limit import rate_limit
from routers.schemas import CamelModel
from services.report_share import load_shared_photo, load_shared_progress_photo, resolve_shared_report

router = APIRouter()
logger = logging.getLogger(__name__)


class PublicSharePhotoResponse(CamelModel):
    id: str
    image_url: str
    created_at: Optional[datetime] = None


class PublicShareProgressPhotoResponse(CamelModel):
    id: str
    phase: str
    note: Optional[str] = None
    taken_on: Optional[date] = None
    image_url: str
    created_at: Optional[datetime] = None


class PublicShareResponse(CamelModel):
    client_name: str
    session_date: date
    session_start_time: Optional[str] = None
    summary_items: Optional[str] = None
    strength_note: Optional[str] = None
    improve_note: Optional[str] = None
    next_goal: Optional[str] = None
    homework: Optional[str] = None
    pain_change: Optional[str] = None
    photos: List[PublicSharePhotoResponse] = []
    progress_photos: List[PublicShareProgressPhotoResponse] = []
    expires_at: datetime
    view_count: int
    last_viewed_at: Optional[datetime] = None


def _no_store_image(data: bytes, content_type: str, file_name: str) -> Response:
    return Response(
        content=data,
        media_type=content_type,
        headers={
            "Content-Disposition": f'inline; filename="{file_name}"',
            "Cache-Control": "no-store",
        },
    )


@router.get("/{share_token}", response_model=PublicShareResponse)
async def open_shared_report(
    share_token: str,
    _rate_limit: None = Depends(rate_limit("share_open", limit=120, window_seconds=60)),
    db: AsyncSession = Depends(get_db),
):
    """Public report snapshot via share token."""
    try:
        payload = await resolve_shared_report(share_token=share_token, db=db)
        return PublicShareResponse(**payload)
    except HTTPException:
        raise
    except Exception:
        logger.exception("Failed to resolve shared report")
        raise HTTPException(status_code=500, detail="Failed to fetch shared report.")


@router.get("/{share_token}/photos/{photo_id}")
async def open_shared_photo(
    share_token: str,
    photo_id: str,
    db: AsyncSession = Depends(get_db),
):
    """Photo of a shared report; the token is re-validated on every fetch."""
    data, content_type, file_name = await load_shared_photo(
        share_token=share_token,
        photo_id=photo_id,
        db=db,
    )
    return _no_store_image(data, content_type, file_name)


@router.get("/{share_token}/client-photos/{photo_id}")
async def open_shared_progress_photo(
    share_token: str,
    photo_id: str,
    db: AsyncSession = Depends(get_db),
):
    """Client progress photo of a shared report; re-validated like report photos."""
    data, content_type, file_name = await load_shared_progress_photo(
        share_token=share_token,
        photo_id=photo_id,
        db=db,
    )
    return _no_store_image(data, content_type, file_name)

"""Report photo upload and retrieval."""

from __future__ import annotations

import logging
import os
from typing import List, Optional, Tuple

from fastapi import HTTPException
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select

from config import settings
from models.report_photo import ReportPhoto
from services.photo_storage import LocalPhotoStorage, get_photo_storage
from services.reports import get_owned_report

logger = logging.getLogger(__name__)


def sanitize_filename(filename: Optional[str], default: str = "photo.jpg") -> str:
    base = os.path.basename(filename or default)
    safe = "".join(ch for ch in base if ch.isascii() and (ch.isalnum() or ch in "._- ")).strip()
    return (safe or default)[:240]


def validate_photo_upload(data: bytes, content_type: Optional[str]) -> str:
    if not data:
        raise HTTPException(status_code=400, detail="File is empty")
    normalized = (content_type or "").strip().lower()
    if not normalized.startswith("image/"):
        raise HTTPException(status_code=400, detail="Only image files are allowed")
    if len(data) > int(settings.MAX_PHOTO_UPLOAD_BYTES):
        raise HTTPException(
            status_code=400,
            detail=f"File too large. Max upload size is {settings.MAX_PHOTO_UPLOAD_BYTES // (1024 * 1024)}MB.",
        )
    return normalized


async def add_report_photo(
    db: AsyncSession,
    *,
    instructor_id: str,
    report_id: str,
    data: bytes,
    content_type: Optional[str],
    filename: Optional[str],
    storage: Optional[LocalPhotoStorage] = None,
) -> ReportPhoto:
    report = await get_owned_report(db, instructor_id=instructor_id, report_id=report_id)
    normalized_type = validate_photo_upload(data, content_type)

    store = storage or get_photo_storage()
    locator = store.store(data, normalized_type, prefix=report.id)
    photo = ReportPhoto(
        report_id=report.id,
        file_name=sanitize_filename(filename),
        content_type=normalized_type,
        storage_path=locator,
    )
    db.add(photo)
    try:
        await db.commit()
    except Exception:
        await db.rollback()
        store.delete(locator)
        raise
    await db.refresh(photo)
    logger.info("Stored photo %s for report %s", photo.id, report.id)
    return photo


async def list_report_photos(db: AsyncSession, *, report_id: str) -> List[ReportPhoto]:
    """List photos of a report the caller has already resolved through a scoped path."""
    result = await db.execute(
        select(ReportPhoto)
        .where(ReportPhoto.report_id == report_id)
        .order_by(ReportPhoto.created_at.desc())
    )
    return list(result.scalars().all())


async def list_owned_report_photos(db: AsyncSession, *, instructor_id: str, report_id: str) -> List[ReportPhoto]:
    report = await get_owned_report(db, instructor_id=instructor_id, report_id=report_id)
    return await list_report_photos(db, report_id=report.id)


async def get_photo_in_report(db: AsyncSession, *, report_id: str, photo_id: str) -> ReportPhoto:
    result = await db.execute(
        select(ReportPhoto).where(
            ReportPhoto.id == photo_id,
            ReportPhoto.report_id == report_id,
        )
    )
    photo = result.scalar_one_or_none()
    if not photo:
        raise HTTPException(status_code=404, detail="Photo not found")
    return photo


def read_photo_bytes(photo, storage: Optional[LocalPhotoStorage] = None) -> Tuple[bytes, str]:
    """Load bytes for any stored photo row (report or progress photo)."""
    store = storage or get_photo_storage()
    try:
        data = store.retrieve(photo.storage_path)
    except (FileNotFoundError, ValueError) as exc:
        raise HTTPException(status_code=404, detail="Photo file not found") from exc
    return data, photo.content_type or "image/jpeg"


async def open_owned_photo(
    db: AsyncSession,
    *,
    instructor_id: str,
    report_id: str,
    photo_id: str,
) -> Tuple[ReportPhoto, bytes, str]:
    report = await get_owned_report(db, instructor_id=instructor_id, report_id=report_id)
    photo = await get_photo_in_report(db, report_id=report.id, photo_id=photo_id)
    data, content_type = read_photo_bytes(photo)
    return photo, data, content_type

"""Client progress photo upload and retrieval."""

from __future__ import annotations

import logging
from datetime import date
from typing import List, Optional, Tuple

from fastapi import HTTPException
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select

from models.client_progress_photo import PROGRESS_PHOTO_PHASES, ClientProgressPhoto
from services.clients import get_owned_client
from services.photo_storage import LocalPhotoStorage, get_photo_storage
from services.report_photos import read_photo_bytes, sanitize_filename, validate_photo_upload

logger = logging.getLogger(__name__)

SHARED_PROGRESS_PHOTO_LIMIT = 12


def normalize_phase(phase: Optional[str]) -> str:
    value = (phase or "ETC").strip().upper()
    if value not in PROGRESS_PHOTO_PHASES:
        raise HTTPException(
            status_code=400,
            detail=f"phase must be one of {', '.join(PROGRESS_PHOTO_PHASES)}",
        )
    return value


async def add_progress_photo(
    db: AsyncSession,
    *,
    instructor_id: str,
    client_id: str,
    data: bytes,
    content_type: Optional[str],
    filename: Optional[str],
    phase: Optional[str] = None,
    note: Optional[str] = None,
    taken_on: Optional[date] = None,
    storage: Optional[LocalPhotoStorage] = None,
) -> ClientProgressPhoto:
    client = await get_owned_client(db, instructor_id=instructor_id, client_id=client_id)
    normalized_type = validate_photo_upload(data, content_type)
    normalized_phase = normalize_phase(phase)

    store = storage or get_photo_storage()
    locator = store.store(data, normalized_type, prefix=f"client-progress-{client.id}")
    photo = ClientProgressPhoto(
        instructor_id=instructor_id,
        client_id=client.id,
        phase=normalized_phase,
        note=(note or "").strip()[:500] or None,
        taken_on=taken_on,
        file_name=sanitize_filename(filename, default="progress.jpg"),
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
    logger.info("Stored progress photo %s for client %s", photo.id, client.id)
    return photo


async def list_client_progress_photos(
    db: AsyncSession,
    *,
    instructor_id: str,
    client_id: str,
    limit: Optional[int] = None,
) -> List[ClientProgressPhoto]:
    """List without an ownership check; callers resolve the client through a scoped path first."""
    query = (
        select(ClientProgressPhoto)
        .where(
            ClientProgressPhoto.client_id == client_id,
            ClientProgressPhoto.instructor_id == instructor_id,
        )
        .order_by(ClientProgressPhoto.created_at.desc())
    )
    if limit is not None:
        query = query.limit(limit)
    result = await db.execute(query)
    return list(result.scalars().all())


async def list_owned_progress_photos(db: AsyncSession, *, instructor_id: str, client_id: str) -> List[ClientProgressPhoto]:
    client = await get_owned_client(db, instructor_id=instructor_id, client_id=client_id)
    return await list_client_progress_photos(db, instructor_id=instructor_id, client_id=client.id)


async def get_progress_photo_for_client(db: AsyncSession, *, client_id: str, photo_id: str) -> ClientProgressPhoto:
    result = await db.execute(
        select(ClientProgressPhoto).where(
            ClientProgressPhoto.id == photo_id,
            ClientProgressPhoto.client_id == client_id,
        )
    )
    photo = result.scalar_one_or_none()
    if not photo:
        raise HTTPException(status_code=404, detail="Photo not found")
    return photo


async def open_owned_progress_photo(
    db: AsyncSession,
    *,
    instructor_id: str,
    client_id: str,
    photo_id: str,
) -> Tuple[ClientProgressPhoto, bytes, str]:
    client = await get_owned_client(db, instructor_id=instructor_id, client_id=client_id)
    photo = await get_progress_photo_for_client(db, client_id=client.id, photo_id=photo_id)
    data, content_type = read_photo_bytes(photo)
    return photo, data, content_type

"""Share-link helpers for lesson reports.

Owners mint opaque tokens against one of their reports; anyone holding a token
can open a read-only snapshot of that report until the link expires or is
revoked. Opening is the only unscoped lookup in the API: token validity stands
in for instructor ownership.
"""

from __future__ import annotations

import logging
import uuid
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, List, Optional, Tuple

from fastapi import HTTPException
from sqlalchemy import update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select
from sqlalchemy.orm import selectinload

from config import settings
from models.report import Report
from models.report_share import ReportShare
from services.progress_photos import (
    SHARED_PROGRESS_PHOTO_LIMIT,
    get_progress_photo_for_client,
    list_client_progress_photos,
)
from services.report_photos import get_photo_in_report, list_report_photos, read_photo_bytes
from services.reports import REPORT_TEXT_FIELDS, get_owned_report

logger = logging.getLogger(__name__)

MIN_EXPIRE_HOURS = 1


def _as_utc(value: Optional[datetime]) -> Optional[datetime]:
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def generate_share_token() -> str:
    """Return a random UUID4 token (122 random bits), hex encoded."""
    return uuid.uuid4().hex


def build_share_url(token: str) -> str:
    return f"{settings.SHARE_BASE_URL.rstrip('/')}/{token}"


def validate_expire_hours(expire_hours: Optional[int]) -> int:
    """Resolve the TTL in hours; out-of-range values are rejected, never clamped."""
    if expire_hours is None:
        return int(settings.SHARE_DEFAULT_EXPIRE_HOURS)
    max_hours = int(settings.SHARE_MAX_EXPIRE_HOURS)
    if isinstance(expire_hours, bool) or not isinstance(expire_hours, int):
        raise HTTPException(status_code=400, detail="expireHours must be an integer")
    if expire_hours < MIN_EXPIRE_HOURS or expire_hours > max_hours:
        raise HTTPException(
            status_code=400,
            detail=f"expireHours must be between {MIN_EXPIRE_HOURS} and {max_hours}",
        )
    return expire_hours


def is_share_usable(share: ReportShare, now: Optional[datetime] = None) -> bool:
    current = now or datetime.now(timezone.utc)
    expires_at = _as_utc(share.expires_at)
    return not share.revoked and expires_at is not None and current < expires_at


async def _find_share_by_token(token: str, db: AsyncSession) -> Optional[ReportShare]:
    result = await db.execute(
        select(ReportShare)
        .where(ReportShare.token == token)
        .execution_options(populate_existing=True)
    )
    return result.scalar_one_or_none()


async def _require_usable_share(token: str, db: AsyncSession, now: datetime) -> ReportShare:
    share = await _find_share_by_token(token, db)
    if not share:
        raise HTTPException(status_code=404, detail="Share link not found")
    if not is_share_usable(share, now):
        raise HTTPException(status_code=410, detail="Share link expired")
    return share


def _normalize_token(share_token: Optional[str]) -> str:
    token = str(share_token or "").strip()
    if not token:
        raise HTTPException(status_code=404, detail="Share link not found")
    return token


async def create_report_share_link(
    *,
    instructor_id: str,
    report_id: str,
    db: AsyncSession,
    expire_hours: Optional[int] = None,
) -> Dict[str, Any]:
    """Mint a fresh token for an owned report, reusing its latest active row."""
    report = await get_owned_report(db, instructor_id=instructor_id, report_id=report_id)
    ttl_hours = validate_expire_hours(expire_hours)

    result = await db.execute(
        select(ReportShare)
        .where(
            ReportShare.report_id == report.id,
            ReportShare.revoked.is_(False),
        )
        .order_by(ReportShare.created_at.desc())
        .limit(1)
    )
    share = result.scalar_one_or_none()
    reused = share is not None
    if share is None:
        share = ReportShare(report_id=report.id)
        db.add(share)

    now = datetime.now(timezone.utc)
    share.token = generate_share_token()
    share.revoked = False
    share.view_count = 0
    share.last_viewed_at = None
    share.expires_at = now + timedelta(hours=ttl_hours)
    await db.commit()
    await db.refresh(share)

    logger.info(
        "share_minted report=%s share=%s reused=%s ttl_hours=%s",
        report.id,
        share.id,
        reused,
        ttl_hours,
    )
    return {
        "share_id": share.id,
        "report_id": report.id,
        "token": share.token,
        "share_url": build_share_url(share.token),
        "expires_at": _as_utc(share.expires_at),
    }


async def list_report_share_links(
    *,
    instructor_id: str,
    report_id: str,
    db: AsyncSession,
) -> List[ReportShare]:
    report = await get_owned_report(db, instructor_id=instructor_id, report_id=report_id)
    result = await db.execute(
        select(ReportShare)
        .where(ReportShare.report_id == report.id)
        .order_by(ReportShare.created_at.desc())
    )
    return list(result.scalars().all())


async def revoke_report_share_links(
    *,
    instructor_id: str,
    report_id: str,
    db: AsyncSession,
) -> int:
    """Revoke every active link of an owned report; returns how many were revoked."""
    report = await get_owned_report(db, instructor_id=instructor_id, report_id=report_id)
    result = await db.execute(
        update(ReportShare)
        .where(
            ReportShare.report_id == report.id,
            ReportShare.revoked.is_(False),
        )
        .values(revoked=True)
        .execution_options(synchronize_session=False)
    )
    await db.commit()
    revoked = int(result.rowcount or 0)
    logger.info("share_revoked report=%s count=%s", report.id, revoked)
    return revoked


async def resolve_shared_report(
    *,
    share_token: str,
    db: AsyncSession,
    now: Optional[datetime] = None,
) -> Dict[str, Any]:
    """Open a share link anonymously and return the report snapshot."""
    token = _normalize_token(share_token)
    current = now or datetime.now(timezone.utc)

    # Validity check and view count increment happen in one conditional UPDATE.
    result = await db.execute(
        update(ReportShare)
        .where(
            ReportShare.token == token,
            ReportShare.revoked.is_(False),
            ReportShare.expires_at > current,
        )
        .values(
            view_count=ReportShare.view_count + 1,
            last_viewed_at=current,
        )
        .execution_options(synchronize_session=False)
    )
    if result.rowcount != 1:
        await db.rollback()
        share = await _find_share_by_token(token, db)
        if not share:
            raise HTTPException(status_code=404, detail="Share link not found")
        raise HTTPException(status_code=410, detail="Share link expired")

    share = await _find_share_by_token(token, db)
    report_result = await db.execute(
        select(Report)
        .options(selectinload(Report.client), selectinload(Report.session))
        .where(Report.id == share.report_id)
    )
    report = report_result.scalar_one()
    photos = await list_report_photos(db, report_id=report.id)
    progress_photos = await list_client_progress_photos(
        db,
        instructor_id=report.instructor_id,
        client_id=report.client_id,
        limit=SHARED_PROGRESS_PHOTO_LIMIT,
    )

    payload: Dict[str, Any] = {
        "client_name": report.client.name,
        "session_date": report.session.session_date,
        "session_start_time": (
            report.session.session_start_time.strftime("%H:%M")
            if report.session.session_start_time
            else None
        ),
        "photos": [
            {
                "id": photo.id,
                "image_url": f"/share/{token}/photos/{photo.id}",
                "created_at": _as_utc(photo.created_at),
            }
            for photo in photos
        ],
        "progress_photos": [
            {
                "id": photo.id,
                "phase": photo.phase,
                "note": photo.note,
                "taken_on": photo.taken_on,
                "image_url": f"/share/{token}/client-photos/{photo.id}",
                "created_at": _as_utc(photo.created_at),
            }
            for photo in progress_photos
        ],
        "expires_at": _as_utc(share.expires_at),
        "view_count": int(share.view_count),
        "last_viewed_at": _as_utc(share.last_viewed_at),
    }
    for name in REPORT_TEXT_FIELDS:
        payload[name] = getattr(report, name)

    await db.commit()
    logger.info("share_opened share=%s views=%s", share.id, payload["view_count"])
    return payload


async def load_shared_photo(
    *,
    share_token: str,
    photo_id: str,
    db: AsyncSession,
    now: Optional[datetime] = None,
) -> Tuple[bytes, str, str]:
    """Return (bytes, content_type, file_name) for a photo of a still-valid share."""
    token = _normalize_token(share_token)
    share = await _require_usable_share(token, db, now or datetime.now(timezone.utc))
    photo = await get_photo_in_report(db, report_id=share.report_id, photo_id=photo_id)
    data, content_type = read_photo_bytes(photo)
    return data, content_type, photo.file_name


async def load_shared_progress_photo(
    *,
    share_token: str,
    photo_id: str,
    db: AsyncSession,
    now: Optional[datetime] = None,
) -> Tuple[bytes, str, str]:
    """Progress photo of the shared report's client, behind the same validity check."""
    token = _normalize_token(share_token)
    share = await _require_usable_share(token, db, now or datetime.now(timezone.utc))
    result = await db.execute(select(Report.client_id).where(Report.id == share.report_id))
    client_id = result.scalar_one()
    photo = await get_progress_photo_for_client(db, client_id=client_id, photo_id=photo_id)
    data, content_type = read_photo_bytes(photo)
    return data, content_type, photo.file_name

"""Owner-scoped client profile and tracking log helpers."""

from __future__ import annotations

from typing import List

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select

from models.client_profile import ClientProfile
from models.client_tracking_log import ClientTrackingLog
from services.clients import get_owned_client


PROFILE_FIELDS = (
    "pain_note",
    "goal_note",
    "surgery_history",
    "before_class_memo",
    "after_class_memo",
    "next_lesson_plan",
)
TRACKING_LOG_FIELDS = PROFILE_FIELDS + ("homework_given", "homework_reminder_at")


async def _find_profile(db: AsyncSession, client_id: str):
    result = await db.execute(select(ClientProfile).where(ClientProfile.client_id == client_id))
    return result.scalar_one_or_none()


async def get_client_profile(db: AsyncSession, *, instructor_id: str, client_id: str) -> ClientProfile:
    """Return the stored profile, or an unsaved blank one when none exists yet."""
    client = await get_owned_client(db, instructor_id=instructor_id, client_id=client_id)
    profile = await _find_profile(db, client.id)
    return profile or ClientProfile(client_id=client.id)


async def upsert_client_profile(
    db: AsyncSession,
    *,
    instructor_id: str,
    client_id: str,
    fields: dict,
) -> ClientProfile:
    """Replace every profile field; omitted fields are cleared."""
    client = await get_owned_client(db, instructor_id=instructor_id, client_id=client_id)
    profile = await _find_profile(db, client.id)
    if profile is None:
        profile = ClientProfile(client_id=client.id)
        db.add(profile)
    for name in PROFILE_FIELDS:
        setattr(profile, name, fields.get(name))
    await db.commit()
    await db.refresh(profile)
    return profile


async def list_tracking_logs(db: AsyncSession, *, instructor_id: str, client_id: str) -> List[ClientTrackingLog]:
    await get_owned_client(db, instructor_id=instructor_id, client_id=client_id)
    result = await db.execute(
        select(ClientTrackingLog)
        .where(
            ClientTrackingLog.client_id == client_id,
            ClientTrackingLog.instructor_id == instructor_id,
        )
        .order_by(ClientTrackingLog.created_at.desc())
    )
    return list(result.scalars().all())


async def create_tracking_log(
    db: AsyncSession,
    *,
    instructor_id: str,
    client_id: str,
    fields: dict,
) -> ClientTrackingLog:
    client = await get_owned_client(db, instructor_id=instructor_id, client_id=client_id)
    row = ClientTrackingLog(
        instructor_id=instructor_id,
        client_id=client.id,
        **{name: fields.get(name) for name in TRACKING_LOG_FIELDS},
    )
    db.add(row)
    await db.commit()
    await db.refresh(row)
    return row

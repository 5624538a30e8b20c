"""Owner-scoped report helpers."""

from __future__ import annotations

from typing import List

from fastapi import HTTPException
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select

from models.report import Report
from services.clients import get_owned_client
from services.lesson_sessions import get_owned_session


REPORT_TEXT_FIELDS = (
    "summary_items",
    "strength_note",
    "improve_note",
    "next_goal",
    "homework",
    "pain_change",
)


async def get_owned_report(db: AsyncSession, *, instructor_id: str, report_id: str) -> Report:
    """Fetch a report only if it belongs to the instructor; 404 otherwise."""
    result = await db.execute(
        select(Report).where(
            Report.id == report_id,
            Report.instructor_id == instructor_id,
        )
    )
    report = result.scalar_one_or_none()
    if not report:
        raise HTTPException(status_code=404, detail="Report not found")
    return report


async def create_report(
    db: AsyncSession,
    *,
    instructor_id: str,
    session_id: str,
    fields: dict,
) -> Report:
    session = await get_owned_session(db, instructor_id=instructor_id, session_id=session_id)

    existing = await db.execute(select(Report.id).where(Report.session_id == session.id))
    if existing.scalar_one_or_none():
        raise HTTPException(status_code=409, detail="Report already exists for this session")

    report = Report(
        instructor_id=instructor_id,
        client_id=session.client_id,
        session_id=session.id,
        **{name: fields.get(name) for name in REPORT_TEXT_FIELDS},
    )
    db.add(report)
    try:
        await db.commit()
    except IntegrityError as exc:
        # Lost a race with another create for the same session.
        await db.rollback()
        raise HTTPException(status_code=409, detail="Report already exists for this session") from exc
    await db.refresh(report)
    return report


async def update_report(
    db: AsyncSession,
    *,
    instructor_id: str,
    report_id: str,
    changes: dict,
) -> Report:
    report = await get_owned_report(db, instructor_id=instructor_id, report_id=report_id)
    for name in REPORT_TEXT_FIELDS:
        if changes.get(name) is not None:
            setattr(report, name, changes[name])
    await db.commit()
    await db.refresh(report)
    return report


async def list_client_reports(
    db: AsyncSession,
    *,
    instructor_id: str,
    client_id: str,
    limit: int = 20,
) -> List[Report]:
    await get_owned_client(db, instructor_id=instructor_id, client_id=client_id)
    safe_limit = max(1, min(int(limit), 100))
    result = await db.execute(
        select(Report)
        .where(
            Report.client_id == client_id,
            Report.instructor_id == instructor_id,
        )
        .order_by(Report.created_at.desc())
        .limit(safe_limit)
    )
    return list(result.scalars().all())

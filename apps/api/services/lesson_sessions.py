"""Owner-scoped lesson session helpers."""

from __future__ import annotations

from datetime import date, time
from typing import List, Optional, Set

from fastapi import HTTPException
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select

from models.lesson_session import LessonSession
from models.report import Report
from services.clients import get_owned_client


async def get_owned_session(db: AsyncSession, *, instructor_id: str, session_id: str) -> LessonSession:
    result = await db.execute(
        select(LessonSession).where(
            LessonSession.id == session_id,
            LessonSession.instructor_id == instructor_id,
        )
    )
    session = result.scalar_one_or_none()
    if not session:
        raise HTTPException(status_code=404, detail="Session not found")
    return session


async def create_session(
    db: AsyncSession,
    *,
    instructor_id: str,
    client_id: str,
    session_date: date,
    session_type: str,
    session_start_time: Optional[time] = None,
    memo: Optional[str] = None,
) -> LessonSession:
    # Parent ownership is re-checked; a client id from the body is never trusted.
    client = await get_owned_client(db, instructor_id=instructor_id, client_id=client_id)

    session = LessonSession(
        instructor_id=instructor_id,
        client_id=client.id,
        session_date=session_date,
        session_start_time=session_start_time,
        session_type=session_type,
        memo=memo,
    )
    db.add(session)
    await db.commit()
    await db.refresh(session)
    return session


async def list_sessions_by_date(
    db: AsyncSession,
    *,
    instructor_id: str,
    session_date: date,
) -> List[LessonSession]:
    result = await db.execute(
        select(LessonSession)
        .where(
            LessonSession.instructor_id == instructor_id,
            LessonSession.session_date == session_date,
        )
        .order_by(LessonSession.created_at.desc())
    )
    return list(result.scalars().all())


async def session_ids_with_report(
    db: AsyncSession,
    *,
    instructor_id: str,
    session_ids: List[str],
) -> Set[str]:
    if not session_ids:
        return set()
    result = await db.execute(
        select(Report.session_id).where(
            Report.instructor_id == instructor_id,
            Report.session_id.in_(session_ids),
        )
    )
    return {row for row in result.scalars().all()}

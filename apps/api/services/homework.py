"""Owner-scoped homework assignment helpers."""

from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from fastapi import HTTPException
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select

from models.homework_assignment import HomeworkAssignment
from services.clients import get_owned_client


async def list_homeworks(db: AsyncSession, *, instructor_id: str, client_id: str) -> List[HomeworkAssignment]:
    await get_owned_client(db, instructor_id=instructor_id, client_id=client_id)
    result = await db.execute(
        select(HomeworkAssignment)
        .where(
            HomeworkAssignment.client_id == client_id,
            HomeworkAssignment.instructor_id == instructor_id,
        )
        .order_by(HomeworkAssignment.created_at.desc())
    )
    return list(result.scalars().all())


async def create_homework(
    db: AsyncSession,
    *,
    instructor_id: str,
    client_id: str,
    content: str,
    remind_at: Optional[datetime] = None,
) -> HomeworkAssignment:
    client = await get_owned_client(db, instructor_id=instructor_id, client_id=client_id)
    cleaned = (content or "").strip()
    if not cleaned:
        raise HTTPException(status_code=400, detail="Homework content is required")

    row = HomeworkAssignment(
        instructor_id=instructor_id,
        client_id=client.id,
        content=cleaned,
        remind_at=remind_at,
        completed=False,
    )
    db.add(row)
    await db.commit()
    await db.refresh(row)
    return row

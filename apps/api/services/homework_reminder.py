"""Periodic homework reminder scan and delivery."""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Awaitable, Callable, Dict, Optional

import httpx
from sqlalchemy.future import select
from sqlalchemy.orm import selectinload

from config import settings
from database import async_session_maker
from models.homework_assignment import HomeworkAssignment

logger = logging.getLogger(__name__)

ReminderSender = Callable[[str, str, Optional[datetime]], Awaitable[bool]]


def _as_utc(value: Optional[datetime]) -> Optional[datetime]:
    if value is not None and value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


async def send_homework_reminder(client_name: str, content: str, remind_at: Optional[datetime]) -> bool:
    """Log the reminder and, when configured, POST it to the notification webhook."""
    logger.info(
        "[HOMEWORK_REMINDER] client=%r remind_at=%s content=%r",
        client_name,
        remind_at.isoformat() if remind_at else None,
        content,
    )

    webhook_url = (settings.HOMEWORK_REMINDER_WEBHOOK_URL or "").strip()
    if not webhook_url:
        return True

    payload = {
        "type": "homework_reminder",
        "clientName": client_name,
        "content": content,
        "remindAt": remind_at.isoformat() if remind_at else "",
    }
    try:
        async with httpx.AsyncClient(timeout=settings.HOMEWORK_REMINDER_WEBHOOK_TIMEOUT_SECONDS) as client:
            response = await client.post(webhook_url, json=payload)
    except httpx.HTTPError as exc:
        logger.warning("Failed to send homework reminder webhook: %s", exc)
        return False
    return 200 <= response.status_code < 300


async def run_due_homework_reminders(
    now: Optional[datetime] = None,
    sender: Optional[ReminderSender] = None,
) -> Dict[str, int]:
    """Send due reminders; each row is marked notified and committed right after it is sent."""
    current = now or datetime.now(timezone.utc)
    send = sender or send_homework_reminder

    async with async_session_maker() as db:
        result = await db.execute(
            select(HomeworkAssignment)
            .options(selectinload(HomeworkAssignment.client))
            .where(
                HomeworkAssignment.remind_at.is_not(None),
                HomeworkAssignment.remind_at <= current,
                HomeworkAssignment.notified_at.is_(None),
                HomeworkAssignment.completed.is_(False),
            )
            .order_by(HomeworkAssignment.remind_at.asc())
        )
        due = result.scalars().all()

        sent = 0
        for row in due:
            client_name = row.client.name if row.client else "client"
            if await send(client_name, row.content, _as_utc(row.remind_at)):
                row.notified_at = current
                await db.commit()
                sent += 1

    if due:
        logger.info("Processed homework reminders: due=%s sent=%s", len(due), sent)
    return {"due": len(due), "sent": sent, "failed": len(due) - sent}

from datetime import datetime, timedelta, timezone

import httpx
import pytest
from sqlalchemy import select

from config import settings
from models.homework_assignment import HomeworkAssignment
from services.clients import create_client
from services.homework import create_homework
from services.homework_reminder import run_due_homework_reminders, send_homework_reminder


NOW = datetime(2026, 10, 18, 9, 0, tzinfo=timezone.utc)


async def _seed_homeworks(session_maker, instructor_id):
    async with session_maker() as db:
        client = await create_client(db, instructor_id=instructor_id, name="Jung")
        due = await create_homework(
            db,
            instructor_id=instructor_id,
            client_id=client.id,
            content="hip bridge x20",
            remind_at=NOW - timedelta(minutes=5),
        )
        later = await create_homework(
            db,
            instructor_id=instructor_id,
            client_id=client.id,
            content="walk 30 min",
            remind_at=NOW + timedelta(hours=1),
        )
        unscheduled = await create_homework(
            db,
            instructor_id=instructor_id,
            client_id=client.id,
            content="drink water",
        )
    return due.id, later.id, unscheduled.id


async def _notified_at(session_maker, homework_id):
    async with session_maker() as db:
        result = await db.execute(
            select(HomeworkAssignment.notified_at).where(HomeworkAssignment.id == homework_id)
        )
        return result.scalar_one()


@pytest.mark.asyncio
async def test_due_reminders_are_sent_once(session_maker, make_instructor, monkeypatch):
    instructor_id, _headers = await make_instructor("coach")
    due_id, later_id, unscheduled_id = await _seed_homeworks(session_maker, instructor_id)
    monkeypatch.setattr("services.homework_reminder.async_session_maker", session_maker)

    delivered = []

    async def sender(client_name, content, remind_at):
        delivered.append((client_name, content, remind_at))
        return True

    first = await run_due_homework_reminders(now=NOW, sender=sender)
    second = await run_due_homework_reminders(now=NOW, sender=sender)

    assert first == {"due": 1, "sent": 1, "failed": 0}
    assert second == {"due": 0, "sent": 0, "failed": 0}
    assert delivered == [("Jung", "hip bridge x20", NOW - timedelta(minutes=5))]
    assert await _notified_at(session_maker, due_id) is not None
    assert await _notified_at(session_maker, later_id) is None
    assert await _notified_at(session_maker, unscheduled_id) is None


@pytest.mark.asyncio
async def test_failed_delivery_is_retried_next_tick(session_maker, make_instructor, monkeypatch):
    instructor_id, _headers = await make_instructor("coach")
    due_id, _later_id, _unscheduled_id = await _seed_homeworks(session_maker, instructor_id)
    monkeypatch.setattr("services.homework_reminder.async_session_maker", session_maker)

    async def failing_sender(client_name, content, remind_at):
        return False

    async def working_sender(client_name, content, remind_at):
        return True

    failed = await run_due_homework_reminders(now=NOW, sender=failing_sender)
    assert failed == {"due": 1, "sent": 0, "failed": 1}
    assert await _notified_at(session_maker, due_id) is None

    retried = await run_due_homework_reminders(now=NOW, sender=working_sender)
    assert retried == {"due": 1, "sent": 1, "failed": 0}


@pytest.mark.asyncio
async def test_send_without_webhook_only_logs(monkeypatch, caplog):
    monkeypatch.setattr(settings, "HOMEWORK_REMINDER_WEBHOOK_URL", "")
    with caplog.at_level("INFO", logger="services.homework_reminder"):
        assert await send_homework_reminder("Jung", "plank", NOW) is True
    assert "HOMEWORK_REMINDER" in caplog.text


@pytest.mark.asyncio
async def test_send_posts_payload_to_webhook(monkeypatch):
    monkeypatch.setattr(settings, "HOMEWORK_REMINDER_WEBHOOK_URL", "https://hooks.example.test/reminder")
    captured = []

    def handler(request: httpx.Request) -> httpx.Response:
        captured.append(request)
        return httpx.Response(204)

    real_client = httpx.AsyncClient

    def client_factory(*args, **kwargs):
        kwargs["transport"] = httpx.MockTransport(handler)
        return real_client(*args, **kwargs)

    monkeypatch.setattr("services.homework_reminder.httpx.AsyncClient", client_factory)

    assert await send_homework_reminder("Jung", "plank", NOW) is True
    assert len(captured) == 1
    assert str(captured[0].url) == "https://hooks.example.test/reminder"
    assert b'"clientName":"Jung"' in captured[0].content.replace(b" ", b"")


@pytest.mark.asyncio
async def test_send_reports_webhook_failure(monkeypatch):
    monkeypatch.setattr(settings, "HOMEWORK_REMINDER_WEBHOOK_URL", "https://hooks.example.test/reminder")

    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    real_client = httpx.AsyncClient

    def client_factory(*args, **kwargs):
        kwargs["transport"] = httpx.MockTransport(handler)
        return real_client(*args, **kwargs)

    monkeypatch.setattr("services.homework_reminder.httpx.AsyncClient", client_factory)

    assert await send_homework_reminder("Jung", "plank", NOW) is False

"""
Lesson Report API - FastAPI Backend
Main application entry point with health check and API routing.
"""

import asyncio
import logging
from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from config import settings, validate_security_settings
from database import async_session_maker, engine, Base
import models  # noqa: F401
from routers import auth, clients, health, reports, sessions, share
from routers.auth_scope import get_auth_context
from services.credentials import ensure_bootstrap_account
from services.homework_reminder import run_due_homework_reminders

logger = logging.getLogger(__name__)


async def _periodic_homework_reminders() -> None:
    interval_seconds = max(int(settings.HOMEWORK_REMINDER_POLL_SECONDS), 0)
    if interval_seconds <= 0:
        return
    while True:
        await asyncio.sleep(interval_seconds)
        try:
            await run_due_homework_reminders()
        except Exception as exc:
            logger.warning("Homework reminder tick failed: %s", exc)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler for startup/shutdown."""
    # Startup
    print("🚀 Starting Lesson Report API...")
    validate_security_settings()
    if settings.AUTO_CREATE_DB_SCHEMA:
        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
        print("🗄️ Database schema verified.")
    async with async_session_maker() as db:
        seeded = await ensure_bootstrap_account(db)
        if seeded is not None:
            print(f"👤 Bootstrap account ready: {seeded.username}")
    reminder_task = None
    if settings.HOMEWORK_REMINDER_ENABLED and int(settings.HOMEWORK_REMINDER_POLL_SECONDS) > 0:
        reminder_task = asyncio.create_task(_periodic_homework_reminders())
        print(
            "📅 Homework reminder loop enabled "
            f"(every {int(settings.HOMEWORK_REMINDER_POLL_SECONDS)} s)."
        )
    yield
    # Shutdown
    if reminder_task is not None:
        reminder_task.cancel()
        try:
            await reminder_task
        except asyncio.CancelledError:
            pass
    print("👋 Shutting down API...")


app = FastAPI(
    title="Lesson Report API",
    description="Track clients, lesson sessions and reports, and share reports through expiring links",
    version="0.1.0",
    lifespan=lifespan,
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Report malformed request fields as 400 Bad Request."""
    return JSONResponse(status_code=400, content={"detail": jsonable_encoder(exc.errors())})


guarded = [Depends(get_auth_context)]

# Public routers (health, login, share links)
app.include_router(health.router, tags=["Health"])
app.include_router(auth.router, prefix="/auth", tags=["Authentication"])
app.include_router(share.router, prefix="/share", tags=["Share"])

# Instructor routers; every route requires a verified Bearer token
app.include_router(clients.router, prefix="/clients", tags=["Clients"], dependencies=guarded)
app.include_router(sessions.router, prefix="/sessions", tags=["Sessions"], dependencies=guarded)
app.include_router(reports.router, prefix="/reports", tags=["Reports"], dependencies=guarded)


@app.get("/")
async def root():
    """Root endpoint."""
    return {
        "name": "Lesson Report API",
        "version": "0.1.0",
        "status": "running"
    }

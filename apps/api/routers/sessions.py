"""
Lesson session router.
"""

from datetime import date as date_type, datetime, time
from typing import List, Literal, Optional

from fastapi import APIRouter, Depends, Query
from pydantic import Field
from sqlalchemy.ext.asyncio import AsyncSession

from database import get_db
from routers.auth_scope import AuthContext, get_auth_context
from routers.schemas import CamelModel
from services import lesson_sessions as session_service

router = APIRouter()


class SessionCreateRequest(CamelModel):
    client_id: str
    date: date_type
    type: Literal["PERSONAL", "GROUP"]
    start_time: Optional[time] = None
    memo: Optional[str] = Field(default=None, max_length=500)


class SessionResponse(CamelModel):
    id: str
    client_id: str
    date: date_type
    type: str
    start_time: Optional[str] = None
    memo: Optional[str] = None
    created_at: Optional[datetime] = None


class SessionWithReportStatusResponse(SessionResponse):
    has_report: bool


def _session_fields(session) -> dict:
    return {
        "id": session.id,
        "client_id": session.client_id,
        "date": session.session_date,
        "type": session.session_type,
        "start_time": session.session_start_time.strftime("%H:%M") if session.session_start_time else None,
        "memo": session.memo,
        "created_at": session.created_at,
    }


@router.post("", response_model=SessionResponse, status_code=201)
async def create_session(
    request: SessionCreateRequest,
    auth: AuthContext = Depends(get_auth_context),
    db: AsyncSession = Depends(get_db),
):
    session = await session_service.create_session(
        db,
        instructor_id=auth.instructor_id,
        client_id=request.client_id,
        session_date=request.date,
        session_type=request.type,
        session_start_time=request.start_time,
        memo=request.memo,
    )
    return SessionResponse(**_session_fields(session))


@router.get("", response_model=List[SessionResponse])
async def list_sessions(
    date: date_type = Query(...),
    auth: AuthContext = Depends(get_auth_context),
    db: AsyncSession = Depends(get_db),
):
    rows = await session_service.list_sessions_by_date(db, instructor_id=auth.instructor_id, session_date=date)
    return [SessionResponse(**_session_fields(row)) for row in rows]


@router.get("/with-report", response_model=List[SessionWithReportStatusResponse])
async def list_sessions_with_report(
    date: date_type = Query(...),
    auth: AuthContext = Depends(get_auth_context),
    db: AsyncSession = Depends(get_db),
):
    rows = await session_service.list_sessions_by_date(db, instructor_id=auth.instructor_id, session_date=date)
    reported = await session_service.session_ids_with_report(
        db,
        instructor_id=auth.instructor_id,
        session_ids=[row.id for row in rows],
    )
    return [
        SessionWithReportStatusResponse(**_session_fields(row), has_report=row.id in reported)
        for row in rows
    ]

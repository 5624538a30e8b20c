"""
Client router: owner-scoped client records, their reports, homework, profile,
tracking logs and progress photos.
"""

from datetime import date, datetime
from typing import List, Optional

from fastapi import APIRouter, Depends, File, Form, Query, UploadFile
from fastapi.responses import Response
from pydantic import Field
from sqlalchemy.ext.asyncio import AsyncSession

from config import settings
from database import get_db
from routers.auth_scope import AuthContext, get_auth_context
from routers.reports import ReportResponse
from routers.schemas import CamelModel
from services import client_profiles as profile_service
from services import clients as client_service
from services import homework as homework_service
from services import progress_photos as progress_photo_service
from services.reports import list_client_reports

router = APIRouter()


class ClientCreateRequest(CamelModel):
    name: str = Field(min_length=1, max_length=80)
    phone: Optional[str] = Field(default=None, max_length=40)
    flags_note: Optional[str] = Field(default=None, max_length=500)
    note: Optional[str] = Field(default=None, max_length=1000)


class ClientUpdateRequest(CamelModel):
    name: Optional[str] = Field(default=None, max_length=80)
    phone: Optional[str] = Field(default=None, max_length=40)
    flags_note: Optional[str] = Field(default=None, max_length=500)
    note: Optional[str] = Field(default=None, max_length=1000)


class ClientResponse(CamelModel):
    id: str
    name: str
    phone: Optional[str] = None
    flags_note: Optional[str] = None
    note: Optional[str] = None
    created_at: Optional[datetime] = None


class HomeworkCreateRequest(CamelModel):
    content: str = Field(min_length=1, max_length=1000)
    remind_at: Optional[datetime] = None


class HomeworkResponse(CamelModel):
    id: str
    content: str
    remind_at: Optional[datetime] = None
    notified_at: Optional[datetime] = None
    completed: bool
    created_at: Optional[datetime] = None


class ClientProfileFields(CamelModel):
    pain_note: Optional[str] = Field(default=None, max_length=1000)
    goal_note: Optional[str] = Field(default=None, max_length=1000)
    surgery_history: Optional[str] = Field(default=None, max_length=1000)
    before_class_memo: Optional[str] = Field(default=None, max_length=1000)
    after_class_memo: Optional[str] = Field(default=None, max_length=1000)
    next_lesson_plan: Optional[str] = Field(default=None, max_length=1000)


class ClientProfileResponse(ClientProfileFields):
    client_id: str
    updated_at: Optional[datetime] = None


class TrackingLogCreateRequest(ClientProfileFields):
    homework_given: Optional[str] = Field(default=None, max_length=1000)
    homework_reminder_at: Optional[datetime] = None


class TrackingLogResponse(TrackingLogCreateRequest):
    id: str
    created_at: Optional[datetime] = None


class ProgressPhotoResponse(CamelModel):
    id: str
    client_id: str
    phase: str
    note: Optional[str] = None
    taken_on: Optional[date] = None
    file_name: str
    image_url: str
    created_at: Optional[datetime] = None


def _progress_photo_response(photo) -> ProgressPhotoResponse:
    return ProgressPhotoResponse(
        id=photo.id,
        client_id=photo.client_id,
        phase=photo.phase,
        note=photo.note,
        taken_on=photo.taken_on,
        file_name=photo.file_name,
        image_url=f"/clients/{photo.client_id}/progress-photos/{photo.id}",
        created_at=photo.created_at,
    )


@router.get("", response_model=List[ClientResponse])
async def list_clients(
    auth: AuthContext = Depends(get_auth_context),
    db: AsyncSession = Depends(get_db),
):
    rows = await client_service.list_clients(db, instructor_id=auth.instructor_id)
    return [ClientResponse.model_validate(row) for row in rows]


@router.post("", response_model=ClientResponse, status_code=201)
async def create_client(
    request: ClientCreateRequest,
    auth: AuthContext = Depends(get_auth_context),
    db: AsyncSession = Depends(get_db),
):
    client = await client_service.create_client(
        db,
        instructor_id=auth.instructor_id,
        name=request.name,
        phone=request.phone,
        flags_note=request.flags_note,
        note=request.note,
    )
    return ClientResponse.model_validate(client)


@router.get("/{client_id}", response_model=ClientResponse)
async def get_client(
    client_id: str,
    auth: AuthContext = Depends(get_auth_context),
    db: AsyncSession = Depends(get_db),
):
    client = await client_service.get_owned_client(db, instructor_id=auth.instructor_id, client_id=client_id)
    return ClientResponse.model_validate(client)


@router.patch("/{client_id}", response_model=ClientResponse)
async def update_client(
    client_id: str,
    request: ClientUpdateRequest,
    auth: AuthContext = Depends(get_auth_context),
    db: AsyncSession = Depends(get_db),
):
    client = await client_service.update_client(
        db,
        instructor_id=auth.instructor_id,
        client_id=client_id,
        changes=request.model_dump(exclude_unset=True),
    )
    return ClientResponse.model_validate(client)


@router.get("/{client_id}/reports", response_model=List[ReportResponse])
async def list_reports_for_client(
    client_id: str,
    limit: int = Query(default=20),
    auth: AuthContext = Depends(get_auth_context),
    db: AsyncSession = Depends(get_db),
):
    rows = await list_client_reports(
        db,
        instructor_id=auth.instructor_id,
        client_id=client_id,
        limit=limit,
    )
    return [ReportResponse.model_validate(row) for row in rows]


@router.get("/{client_id}/homeworks", response_model=List[HomeworkResponse])
async def list_homeworks(
    client_id: str,
    auth: AuthContext = Depends(get_auth_context),
    db: AsyncSession = Depends(get_db),
):
    rows = await homework_service.list_homeworks(db, instructor_id=auth.instructor_id, client_id=client_id)
    return [HomeworkResponse.model_validate(row) for row in rows]


@router.post("/{client_id}/homeworks", response_model=HomeworkResponse, status_code=201)
async def create_homework(
    client_id: str,
    request: HomeworkCreateRequest,
    auth: AuthContext = Depends(get_auth_context),
    db: AsyncSession = Depends(get_db),
):
    row = await homework_service.create_homework(
        db,
        instructor_id=auth.instructor_id,
        client_id=client_id,
        content=request.content,
        remind_at=request.remind_at,
    )
    return HomeworkResponse.model_validate(row)


@router.get("/{client_id}/profile", response_model=ClientProfileResponse)
async def get_client_profile(
    client_id: str,
    auth: AuthContext = Depends(get_auth_context),
    db: AsyncSession = Depends(get_db),
):
    """Client profile; an empty profile is returned until one is saved."""
    profile = await profile_service.get_client_profile(db, instructor_id=auth.instructor_id, client_id=client_id)
    return ClientProfileResponse.model_validate(profile)


@router.put("/{client_id}/profile", response_model=ClientProfileResponse)
async def put_client_profile(
    client_id: str,
    request: ClientProfileFields,
    auth: AuthContext = Depends(get_auth_context),
    db: AsyncSession = Depends(get_db),
):
    profile = await profile_service.upsert_client_profile(
        db,
        instructor_id=auth.instructor_id,
        client_id=client_id,
        fields=request.model_dump(),
    )
    return ClientProfileResponse.model_validate(profile)


@router.get("/{client_id}/tracking-logs", response_model=List[TrackingLogResponse])
async def list_tracking_logs(
    client_id: str,
    auth: AuthContext = Depends(get_auth_context),
    db: AsyncSession = Depends(get_db),
):
    rows = await profile_service.list_tracking_logs(db, instructor_id=auth.instructor_id, client_id=client_id)
    return [TrackingLogResponse.model_validate(row) for row in rows]


@router.post("/{client_id}/tracking-logs", response_model=TrackingLogResponse, status_code=201)
async def create_tracking_log(
    client_id: str,
    request: TrackingLogCreateRequest,
    auth: AuthContext = Depends(get_auth_context),
    db: AsyncSession = Depends(get_db),
):
    row = await profile_service.create_tracking_log(
        db,
        instructor_id=auth.instructor_id,
        client_id=client_id,
        fields=request.model_dump(),
    )
    return TrackingLogResponse.model_validate(row)


@router.get("/{client_id}/progress-photos", response_model=List[ProgressPhotoResponse])
async def list_progress_photos(
    client_id: str,
    auth: AuthContext = Depends(get_auth_context),
    db: AsyncSession = Depends(get_db),
):
    rows = await progress_photo_service.list_owned_progress_photos(
        db,
        instructor_id=auth.instructor_id,
        client_id=client_id,
    )
    return [_progress_photo_response(row) for row in rows]


@router.post("/{client_id}/progress-photos", response_model=ProgressPhotoResponse, status_code=201)
async def upload_progress_photo(
    client_id: str,
    file: UploadFile = File(...),
    phase: str = Form(default="ETC"),
    note: Optional[str] = Form(default=None, max_length=500),
    taken_on: Optional[date] = Form(default=None, alias="takenOn"),
    auth: AuthContext = Depends(get_auth_context),
    db: AsyncSession = Depends(get_db),
):
    data = await file.read(int(settings.MAX_PHOTO_UPLOAD_BYTES) + 1)
    photo = await progress_photo_service.add_progress_photo(
        db,
        instructor_id=auth.instructor_id,
        client_id=client_id,
        data=data,
        content_type=file.content_type,
        filename=file.filename,
        phase=phase,
        note=note,
        taken_on=taken_on,
    )
    return _progress_photo_response(photo)


@router.get("/{client_id}/progress-photos/{photo_id}")
async def open_progress_photo(
    client_id: str,
    photo_id: str,
    auth: AuthContext = Depends(get_auth_context),
    db: AsyncSession = Depends(get_db),
):
    photo, data, content_type = await progress_photo_service.open_owned_progress_photo(
        db,
        instructor_id=auth.instructor_id,
        client_id=client_id,
        photo_id=photo_id,
    )
    return Response(
        content=data,
        media_type=content_type,
        headers={"Content-Disposition": f'inline; filename="{photo.file_name}"'},
    )

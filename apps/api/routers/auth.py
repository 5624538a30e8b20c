"""
Authentication router: credential login and current instructor profile.
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException
from pydantic import Field
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select

from database import get_db
from models.auth_user import AuthUser
from models.instructor import Instructor
from routers.auth_scope import AuthContext, get_auth_context
from routers.rate_limit import rate_limit
from routers.schemas import CamelModel
from services.credentials import authenticate_user
from services.session_token import create_session_token

router = APIRouter()
logger = logging.getLogger(__name__)


class LoginRequest(CamelModel):
    username: str = Field(min_length=1, max_length=80)
    password: str = Field(min_length=1, max_length=200)


class LoginResponse(CamelModel):
    access_token: str
    token_type: str = "Bearer"
    expires_in: int


class CurrentInstructorResponse(CamelModel):
    instructor_id: str
    username: Optional[str] = None
    email: str
    display_name: str


@router.post("/login", response_model=LoginResponse)
async def login(
    request: LoginRequest,
    _rate_limit: None = Depends(rate_limit("auth_login", limit=20, window_seconds=300)),
    db: AsyncSession = Depends(get_db),
):
    """Exchange username/password for a Bearer session token."""
    username = request.username.strip()
    user = await authenticate_user(db, username, request.password)
    if not user:
        logger.info("Login failed for username=%s", username)
        raise HTTPException(
            status_code=401,
            detail="Invalid credentials",
            headers={"WWW-Authenticate": "Bearer"},
        )

    session = create_session_token(user.instructor_id, user.username)
    return LoginResponse(
        access_token=session["token"],
        token_type="Bearer",
        expires_in=session["expires_in"],
    )


@router.get("/me", response_model=CurrentInstructorResponse)
async def get_current_instructor(
    auth: AuthContext = Depends(get_auth_context),
    db: AsyncSession = Depends(get_db),
):
    """Get the instructor behind the current session token."""
    result = await db.execute(select(Instructor).where(Instructor.id == auth.instructor_id))
    instructor = result.scalar_one_or_none()
    if not instructor:
        raise HTTPException(status_code=404, detail="Instructor not found")

    username = auth.username
    if not username:
        user_result = await db.execute(
            select(AuthUser.username).where(AuthUser.instructor_id == instructor.id).limit(1)
        )
        username = user_result.scalar_one_or_none()

    return CurrentInstructorResponse(
        instructor_id=instructor.id,
        username=username,
        email=instructor.email,
        display_name=instructor.display_name,
    )


@router.post("/logout")
async def logout(_auth: AuthContext = Depends(get_auth_context)):
    """Stateless tokens: the client simply discards its token."""
    return {"message": "Logged out successfully"}

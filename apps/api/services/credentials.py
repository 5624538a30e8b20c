"""Credential store: password hashing, login checks and bootstrap seeding."""

from __future__ import annotations

import logging
from typing import Optional

from passlib.context import CryptContext
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select

from config import settings
from models.auth_user import AuthUser
from models.instructor import Instructor

logger = logging.getLogger(__name__)

pwd_context = CryptContext(schemes=["argon2"], deprecated="auto")


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(plain_password: str, password_hash: Optional[str]) -> bool:
    if not password_hash:
        return False
    try:
        return pwd_context.verify(plain_password, password_hash)
    except (ValueError, TypeError):
        return False


async def authenticate_user(db: AsyncSession, username: str, password: str) -> Optional[AuthUser]:
    """Return the matching credential row, or None when username/password do not match."""
    normalized = (username or "").strip()
    if not normalized or not password:
        return None

    result = await db.execute(select(AuthUser).where(AuthUser.username == normalized))
    user = result.scalar_one_or_none()
    if user is None:
        return None
    if not verify_password(password, user.password_hash):
        return None
    return user


async def create_instructor_account(
    db: AsyncSession,
    *,
    username: str,
    password: str,
    email: str,
    display_name: str,
) -> AuthUser:
    """Create an instructor plus its login credential."""
    instructor = Instructor(email=email.strip(), display_name=display_name.strip())
    db.add(instructor)
    await db.flush()

    user = AuthUser(
        username=username.strip(),
        password_hash=hash_password(password),
        instructor_id=instructor.id,
    )
    db.add(user)
    await db.commit()
    await db.refresh(user)
    return user


async def ensure_bootstrap_account(db: AsyncSession) -> Optional[AuthUser]:
    """Seed the configured bootstrap instructor if it does not exist yet."""
    username = (settings.BOOTSTRAP_USERNAME or "").strip()
    if not username:
        return None

    result = await db.execute(select(AuthUser).where(AuthUser.username == username))
    existing = result.scalar_one_or_none()
    if existing is not None:
        return existing

    user = await create_instructor_account(
        db,
        username=username,
        password=settings.BOOTSTRAP_PASSWORD,
        email=settings.BOOTSTRAP_INSTRUCTOR_EMAIL,
        display_name=settings.BOOTSTRAP_INSTRUCTOR_NAME,
    )
    logger.info("Seeded bootstrap instructor %s for user %s", user.instructor_id, username)
    return user

"""Session token helpers for instructor bearer authentication."""

from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional

from jose import JWTError, jwt

from config import settings


SESSION_TOKEN_TYPE = "lr_session"


def expires_in_seconds() -> int:
    """Configured session lifetime in seconds."""
    return max(int(settings.JWT_EXPIRATION_MINUTES or 120), 1) * 60


def create_session_token(
    instructor_id: str,
    username: Optional[str] = None,
    now: Optional[datetime] = None,
) -> Dict[str, Any]:
    """Create a signed session token carrying the instructor identity."""
    issued_at = now or datetime.now(timezone.utc)
    ttl_seconds = expires_in_seconds()
    expires_at = issued_at + timedelta(seconds=ttl_seconds)
    claims: Dict[str, Any] = {
        "sub": str(instructor_id),
        "type": SESSION_TOKEN_TYPE,
        "iat": int(issued_at.timestamp()),
        "exp": int(expires_at.timestamp()),
    }
    if username:
        claims["username"] = username

    token = jwt.encode(claims, settings.JWT_SECRET, algorithm=settings.JWT_ALGORITHM)
    return {
        "token": token,
        "expires_at": int(expires_at.timestamp()),
        "expires_in": ttl_seconds,
    }


def decode_session_token(token: str) -> Dict[str, Any]:
    """Decode and validate a signed session token."""
    if not isinstance(token, str) or not token.strip():
        raise ValueError("Missing session token.")

    try:
        payload = jwt.decode(token, settings.JWT_SECRET, algorithms=[settings.JWT_ALGORITHM])
    except JWTError as exc:
        raise ValueError("Invalid or expired session token.") from exc

    token_type = str(payload.get("type", "")).strip()
    if token_type != SESSION_TOKEN_TYPE:
        raise ValueError("Invalid session token type.")

    subject = str(payload.get("sub", "") or "").strip()
    if not subject:
        raise ValueError("Session token missing subject.")

    return payload


def verify_session_token(token: str) -> Optional[str]:
    """Return the instructor id for a valid token, None otherwise."""
    try:
        payload = decode_session_token(token)
    except (ValueError, TypeError):
        return None
    return str(payload["sub"])

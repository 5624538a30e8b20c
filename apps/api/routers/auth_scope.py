"""Authentication dependencies for instructor scoping."""

from dataclasses import dataclass
from typing import Optional

from fastapi import Depends, HTTPException
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from services.session_token import decode_session_token


auth_scheme = HTTPBearer(auto_error=False)


@dataclass(frozen=True)
class AuthContext:
    instructor_id: str
    username: Optional[str] = None


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=401,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


async def get_auth_context(
    credentials: HTTPAuthorizationCredentials = Depends(auth_scheme),
) -> AuthContext:
    """Resolve the authenticated instructor from a Bearer session token."""
    if not credentials or credentials.scheme.lower() != "bearer":
        raise _unauthorized("Missing Bearer session token.")

    try:
        payload = decode_session_token(credentials.credentials)
    except ValueError as exc:
        raise _unauthorized(str(exc)) from exc

    return AuthContext(
        instructor_id=str(payload["sub"]),
        username=str(payload.get("username", "")) or None,
    )

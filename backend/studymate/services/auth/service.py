import logging
from dataclasses import dataclass
from typing import Optional

from fastapi import Depends, Header, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from studymate.services.auth.security import decode_token

logger = logging.getLogger(__name__)

security = HTTPBearer(auto_error=False)


@dataclass(frozen=True)
class CurrentUser:
    id: str


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


async def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    x_auth_token: Optional[str] = Header(default=None, alias="x-auth-token"),
) -> CurrentUser:
    """Resolve the caller from an ``x-auth-token`` or ``Authorization: Bearer`` header."""
    token = x_auth_token or (credentials.credentials if credentials else None)
    if not token:
        raise _unauthorized("Not authenticated")

    payload = decode_token(token)
    if payload is None:
        raise _unauthorized("Invalid or expired token")

    # Tokens issued elsewhere may omit "type" and carry the user under "id"
    token_type = payload.get("type")
    if token_type is not None and token_type != "access":
        raise _unauthorized("Invalid token type")

    user_id = payload.get("sub") or payload.get("id")
    if not user_id:
        raise _unauthorized("Invalid token payload")

    return CurrentUser(id=str(user_id))

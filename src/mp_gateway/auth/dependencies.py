"""FastAPI dependencies: get_current_actor / require_admin.

Usage in any protected router:
    from src.mp_gateway.auth.dependencies import get_current_actor

    @router.get("/protected")
    async def protected(actor: Annotated[Actor, Depends(get_current_actor)]):
        ...
"""

from dataclasses import dataclass
from typing import Annotated

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from config.settings import Settings
from src.mp_common.errors import ForbiddenError, InvalidCredentialsError
from src.mp_common.ids import require_uuid
from src.mp_gateway.auth.jwt_handler import decode_token

ADMIN_ROLE = "admin"

bearer_scheme = HTTPBearer(auto_error=False)

# Reusable 401 exception with WWW-Authenticate header (OAuth2 standard)
_CREDENTIALS_EXCEPTION = HTTPException(
    status_code=status.HTTP_401_UNAUTHORIZED,
    detail="Invalid or expired token",
    headers={"WWW-Authenticate": "Bearer"},
)


@dataclass(frozen=True)
class Actor:
    user_id: str
    role: str | None = None

    @property
    def is_admin(self) -> bool:
        return self.role == ADMIN_ROLE


async def get_current_actor(
    request: Request,
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(bearer_scheme)],
) -> Actor:
    """Decode the Bearer token into the acting user's id and role.

    Raises HTTP 401 if the token is missing, invalid, expired, or its subject
    is not a user id (UUID).
    """
    if credentials is None:
        raise _CREDENTIALS_EXCEPTION
    settings: Settings = request.app.state.settings
    try:
        payload = decode_token(
            credentials.credentials, settings.JWT_SECRET, settings.JWT_ALGORITHM
        )
        user_id = require_uuid(payload["sub"], lambda _sub: InvalidCredentialsError())
    except InvalidCredentialsError:
        raise _CREDENTIALS_EXCEPTION from None
    return Actor(user_id=user_id, role=payload.get("role"))


async def require_admin(
    actor: Annotated[Actor, Depends(get_current_actor)],
) -> Actor:
    """Raises ForbiddenError (403) unless the token carries the admin role."""
    if not actor.is_admin:
        raise ForbiddenError("Administrator role required")
    return actor

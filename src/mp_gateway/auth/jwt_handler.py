"""JWT token creation and verification.

The marketplace core only needs an opaque actor id (`sub`) and a role claim;
issuing tokens belongs to the identity provider. `create_access_token` is
kept for operational tooling and tests.

Secret and algorithm are passed in explicitly from Settings.
"""

from datetime import UTC, datetime, timedelta

from jose import JWTError, jwt

from src.mp_common.errors import InvalidCredentialsError

DEFAULT_EXPIRE_MINUTES = 30


def create_access_token(
    user_id: str,
    secret: str,
    algorithm: str = "HS256",
    role: str | None = None,
    expires_minutes: int = DEFAULT_EXPIRE_MINUTES,
) -> str:
    now = datetime.now(UTC)
    payload: dict[str, object] = {
        "sub": user_id,
        "type": "access",
        "iat": now,
        "exp": now + timedelta(minutes=expires_minutes),
    }
    if role is not None:
        payload["role"] = role
    return str(jwt.encode(payload, secret, algorithm=algorithm))


def decode_token(token: str, secret: str, algorithm: str = "HS256") -> dict[str, str]:
    """Decode and validate an access token.

    Raises:
        InvalidCredentialsError: signature invalid, token expired, or not an
            access token.
    """
    try:
        payload: dict[str, str] = jwt.decode(
            token,
            secret,
            algorithms=[algorithm],  # Explicit list prevents algorithm confusion
        )
    except JWTError:
        raise InvalidCredentialsError() from None

    if payload.get("type") != "access" or not payload.get("sub"):
        raise InvalidCredentialsError()
    return payload

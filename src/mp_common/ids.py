"""Identifier helpers.

Users, listings and orders are keyed by PostgreSQL UUIDs. Anything that
does not parse as a UUID can never name a row, so callers turn it into the
matching NotFound error before it reaches the driver.
"""

import uuid
from collections.abc import Callable

from src.mp_common.errors import AppError


def is_uuid(value: object) -> bool:
    if not isinstance(value, str):
        return False
    try:
        uuid.UUID(value)
    except ValueError:
        return False
    return True


def require_uuid(value: str, not_found: Callable[[str], AppError]) -> str:
    """Canonical lowercase text of `value`, or raise `not_found(value)`."""
    if not is_uuid(value):
        raise not_found(value)
    return str(uuid.UUID(value))

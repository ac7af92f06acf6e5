"""Classify raw persistence errors at the repository boundary.

Repositories wrap every statement in `translate_db_errors()` so that only
`AppError` subclasses ever reach services and routers.

SQLSTATE classes (PostgreSQL):
  23505 unique_violation       -> ConflictError
  23503 foreign_key_violation  -> ConflictError
  23514 check_violation        -> InvalidInputError
  23502 not_null_violation     -> InvalidInputError
"""

import logging
from collections.abc import Iterator
from contextlib import contextmanager

from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from src.mp_common.errors import AppError, ConflictError, InternalError, InvalidInputError

logger = logging.getLogger(__name__)

_CONFLICT_STATES = frozenset({"23505", "23503"})
_INVALID_STATES = frozenset({"23514", "23502"})


def _sqlstate(exc: SQLAlchemyError) -> str | None:
    orig = getattr(exc, "orig", None)
    # asyncpg exposes `sqlstate`, psycopg exposes `pgcode`
    return getattr(orig, "sqlstate", None) or getattr(orig, "pgcode", None)


def classify_db_error(exc: SQLAlchemyError) -> AppError:
    """Map a SQLAlchemy exception onto the application error taxonomy."""
    state = _sqlstate(exc)
    text = str(exc.orig if getattr(exc, "orig", None) is not None else exc)
    if isinstance(exc, IntegrityError):
        if state in _INVALID_STATES or "violates check constraint" in text:
            return InvalidInputError("value violates a column constraint")
        if state in _CONFLICT_STATES or "duplicate key value" in text:
            return ConflictError("resource already exists or is still referenced")
        return ConflictError()
    logger.error("Unclassified persistence error: %s", text)
    return InternalError()


@contextmanager
def translate_db_errors() -> Iterator[None]:
    """Re-raise SQLAlchemy errors as AppError; let AppError pass through."""
    try:
        yield
    except SQLAlchemyError as exc:
        raise classify_db_error(exc) from exc

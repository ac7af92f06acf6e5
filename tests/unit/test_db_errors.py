"""Tests for mp_common.db_errors — persistence error classification."""

import pytest
from sqlalchemy.exc import IntegrityError, OperationalError

from src.mp_common.db_errors import classify_db_error, translate_db_errors
from src.mp_common.errors import (
    ConflictError,
    InternalError,
    InvalidInputError,
    ListingNotFoundError,
)


class _DriverError(Exception):
    def __init__(self, message: str, sqlstate: str | None = None) -> None:
        super().__init__(message)
        self.sqlstate = sqlstate


def _integrity(message: str, sqlstate: str | None = None) -> IntegrityError:
    return IntegrityError("INSERT ...", {}, _DriverError(message, sqlstate))


class TestClassifyDbError:
    def test_unique_violation_is_conflict(self) -> None:
        err = classify_db_error(_integrity("dup", "23505"))
        assert isinstance(err, ConflictError)

    def test_foreign_key_violation_is_conflict(self) -> None:
        err = classify_db_error(_integrity("fk", "23503"))
        assert isinstance(err, ConflictError)

    def test_check_violation_is_invalid_input(self) -> None:
        err = classify_db_error(_integrity("check", "23514"))
        assert isinstance(err, InvalidInputError)

    def test_message_fallback_without_sqlstate(self) -> None:
        err = classify_db_error(
            _integrity('new row violates check constraint "ck_ledger_amount_gt_0"')
        )
        assert isinstance(err, InvalidInputError)
        err = classify_db_error(_integrity("duplicate key value violates unique constraint"))
        assert isinstance(err, ConflictError)

    def test_other_integrity_error_is_conflict(self) -> None:
        err = classify_db_error(_integrity("restrict", "23001"))
        assert isinstance(err, ConflictError)

    def test_anything_else_is_internal(self) -> None:
        exc = OperationalError("SELECT 1", {}, _DriverError("connection reset"))
        assert isinstance(classify_db_error(exc), InternalError)


class TestTranslateDbErrors:
    def test_reraises_as_app_error_with_cause(self) -> None:
        raw = _integrity("dup", "23505")
        with pytest.raises(ConflictError) as exc_info:
            with translate_db_errors():
                raise raw
        assert exc_info.value.__cause__ is raw

    def test_app_errors_pass_through(self) -> None:
        with pytest.raises(ListingNotFoundError):
            with translate_db_errors():
                raise ListingNotFoundError("l1")

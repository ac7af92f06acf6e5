"""Tests for mp_common.cents — integer arithmetic utilities."""

import pytest

from src.mp_common.cents import cents_to_display, order_amount, require_positive_cents
from src.mp_common.errors import InvalidInputError


class TestRequirePositiveCents:
    def test_positive_ok(self) -> None:
        require_positive_cents(1)
        require_positive_cents(2000)

    @pytest.mark.parametrize("amount", [0, -1, 10.5, "100", True, None])
    def test_rejects_non_positive_or_non_int(self, amount: object) -> None:
        with pytest.raises(InvalidInputError):
            require_positive_cents(amount)  # type: ignore[arg-type]

    def test_message_names_the_field(self) -> None:
        with pytest.raises(InvalidInputError, match="payout amount"):
            require_positive_cents(0, "payout amount")


class TestOrderAmount:
    def test_unit_price_times_quantity(self) -> None:
        assert order_amount(1000, 2) == 2000


class TestCentsToDisplay:
    def test_basic(self) -> None:
        assert cents_to_display(2000) == "$20.00"

    def test_zero(self) -> None:
        assert cents_to_display(0) == "$0.00"

    def test_thousands(self) -> None:
        assert cents_to_display(123456) == "$1,234.56"

    def test_negative(self) -> None:
        assert cents_to_display(-1200) == "-$12.00"

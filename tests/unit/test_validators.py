from decimal import Decimal

import pytest

from boxoffice.domain.exceptions import ValidationError
from boxoffice.domain.validators import (
    clamp_pagination,
    parse_seat_label,
    validate_pay_method,
    validate_price,
)


@pytest.mark.parametrize(
    "value, expected",
    [
        (25, Decimal("25.00")),
        ("25.5", Decimal("25.50")),
        (0, Decimal("0.00")),
        (Decimal("19.99"), Decimal("19.99")),
    ],
)
def test_validate_price_accepts_non_negative_amounts(value, expected):
    assert validate_price(value) == expected


@pytest.mark.parametrize(
    "value",
    [-5, "-0.01", float("nan"), float("inf"), "abc", None, True, "1.001", "100000000"],
)
def test_validate_price_rejects_bad_amounts(value):
    with pytest.raises(ValidationError):
        validate_price(value)


def test_parse_seat_label_with_row():
    assert parse_seat_label("b-7") == ("B", 7)


def test_parse_seat_label_bare_number():
    assert parse_seat_label("7") == (None, 7)
    assert parse_seat_label(7) == (None, 7)


@pytest.mark.parametrize("label", ["", "A-", "-3", "A-0", "A7", "A-B", None, 3.5])
def test_parse_seat_label_rejects_malformed(label):
    with pytest.raises(ValidationError):
        parse_seat_label(label)


def test_clamp_pagination_defaults_and_bounds():
    assert clamp_pagination(None, None) == (20, 0)
    assert clamp_pagination(0, -4) == (1, 0)
    assert clamp_pagination(10_000, 5) == (200, 5)


def test_validate_pay_method():
    assert validate_pay_method(" Debit ") == "Debit"
    with pytest.raises(ValidationError):
        validate_pay_method("   ")
    with pytest.raises(ValidationError):
        validate_pay_method("x" * 33)

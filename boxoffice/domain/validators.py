"""Input validation shared by the catalog and order services."""

import re
from decimal import Decimal, InvalidOperation
from typing import Any, Optional, Tuple

from boxoffice.domain.exceptions import ValidationError

MAX_PRICE = Decimal("99999999.99")
DEFAULT_PAGE_SIZE = 20
MAX_PAGE_SIZE = 200
MAX_PAY_METHOD_LENGTH = 32

_SEAT_LABEL = re.compile(r"^(?:(?P<row>[A-Za-z]+)-)?(?P<number>\d+)$")


def validate_price(value: Any, field_name: str = "Price") -> Decimal:
    """Return ``value`` as a two-place Decimal, rejecting NaN, infinities and negatives."""
    if isinstance(value, bool) or value is None:
        raise ValidationError(f"{field_name} must be a number")
    try:
        amount = Decimal(str(value))
    except (InvalidOperation, ValueError) as exc:
        raise ValidationError(f"{field_name} must be a number") from exc

    if not amount.is_finite():
        raise ValidationError(f"{field_name} must be a finite number")
    if amount < 0:
        raise ValidationError(f"{field_name} must not be negative")
    if amount > MAX_PRICE:
        raise ValidationError(f"{field_name} must not exceed {MAX_PRICE}")
    if amount != amount.quantize(Decimal("0.01")):
        raise ValidationError(f"{field_name} must have at most 2 decimal places")
    return amount.quantize(Decimal("0.01"))


def parse_seat_label(label: Any) -> Tuple[Optional[str], int]:
    """
    Split a seat label into (row, number).

    ``"B-7"`` gives ``("B", 7)``; a bare ``"7"`` gives ``(None, 7)`` and
    must be resolved against the venue's seats by number alone.
    """
    if isinstance(label, int) and not isinstance(label, bool):
        label = str(label)
    if not isinstance(label, str):
        raise ValidationError("Seat label must be a string")

    match = _SEAT_LABEL.match(label.strip())
    if not match:
        raise ValidationError(
            "Seat label must look like '<row>-<number>' or '<number>'"
        )

    number = int(match.group("number"))
    if number < 1:
        raise ValidationError("Seat number must be positive")

    row = match.group("row")
    return (row.upper() if row else None), number


def clamp_pagination(limit: Optional[int], offset: Optional[int]) -> Tuple[int, int]:
    safe_limit = DEFAULT_PAGE_SIZE if limit is None else max(1, min(limit, MAX_PAGE_SIZE))
    safe_offset = 0 if offset is None else max(0, offset)
    return safe_limit, safe_offset


def validate_pay_method(value: Any) -> str:
    if not isinstance(value, str) or not value.strip():
        raise ValidationError("Payment method is required")
    method = value.strip()
    if len(method) > MAX_PAY_METHOD_LENGTH:
        raise ValidationError(
            f"Payment method must be at most {MAX_PAY_METHOD_LENGTH} characters"
        )
    return method


def validate_required_string(value: Any, field_name: str, max_length: int) -> str:
    if not isinstance(value, str) or not value.strip():
        raise ValidationError(f"{field_name} is required")
    text = value.strip()
    if len(text) > max_length:
        raise ValidationError(f"{field_name} must be at most {max_length} characters")
    return text

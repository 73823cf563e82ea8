from __future__ import annotations

import re
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from typing import Any


EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")

CENTS = Decimal("0.01")


class ValidationError(ValueError):
    """400-level input problem, raised before anything is sent to the data store."""


def is_blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def compact(payload: dict) -> dict:
    """
    Drop None and empty-string fields.

    The data store applies column defaults only when a field is absent,
    so optional fields must never be sent as null.
    """
    return {k: v for k, v in payload.items() if v is not None and v != ""}


def to_decimal(value: Any, *, minimum: Decimal | int | None = None, default: Decimal | int = 0) -> Decimal:
    """
    Lenient numeric coercion: non-numeric input becomes `default`,
    values below `minimum` are clamped up to it. Never raises.
    """
    if isinstance(value, bool):
        value = int(value)
    try:
        number = Decimal(str(value).strip()) if value is not None else Decimal(default)
    except (InvalidOperation, ValueError):
        number = Decimal(default)
    if not number.is_finite():
        number = Decimal(default)
    if minimum is not None and number < minimum:
        number = Decimal(minimum)
    return number


def to_int(value: Any, *, minimum: int | None = None, default: int = 0) -> int:
    """Lenient integer coercion (fractions truncate); never raises."""
    number = int(to_decimal(value, default=default))
    if minimum is not None and number < minimum:
        number = minimum
    return number


def parse_amount(value: Any, field: str, *, allow_zero: bool = False) -> Decimal:
    """
    Strict amount parsing for required money fields.

    Raises ValidationError for missing, non-numeric, or non-positive values.
    """
    if is_blank(value) or isinstance(value, bool):
        raise ValidationError(f"{field} is required")
    try:
        amount = Decimal(str(value).strip())
    except (InvalidOperation, ValueError):
        raise ValidationError(f"{field} must be a number")
    if not amount.is_finite():
        raise ValidationError(f"{field} must be a number")
    if amount < 0 or (amount == 0 and not allow_zero):
        raise ValidationError(f"{field} must be greater than zero")
    return amount


def parse_id(value: Any, field: str) -> int:
    """Required integer identifier (accepts numeric strings)."""
    if is_blank(value) or isinstance(value, bool):
        raise ValidationError(f"{field} is required")
    if isinstance(value, int):
        return value
    stripped = str(value).strip()
    if not stripped.isdigit():
        raise ValidationError(f"{field} must be an integer")
    return int(stripped)


def optional_number(value: Any, field: str) -> Decimal | None:
    """None/'' -> None; otherwise a non-negative number or ValidationError."""
    if is_blank(value):
        return None
    return parse_amount(value, field, allow_zero=True)


def money(value: Decimal) -> float:
    """Round to cents for JSON payloads."""
    return float(Decimal(value).quantize(CENTS, rounding=ROUND_HALF_UP))


def clamp_page(page: int | None, page_size: int | None, *, max_page_size: int = 500) -> tuple[int, int]:
    """Clamp page >= 1 and 1 <= page_size <= max_page_size."""
    page = page if page and page > 0 else 1
    if not page_size or page_size < 1:
        page_size = 1
    if page_size > max_page_size:
        page_size = max_page_size
    return page, page_size

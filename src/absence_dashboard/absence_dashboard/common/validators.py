from __future__ import annotations

from datetime import date

from ..core.exceptions import ValidationError


def require_non_empty(value: str, field_name: str) -> str:
    if not isinstance(value, str) or not value.strip():
        raise ValidationError(f"{field_name} is invalid")
    return value.strip()


def require_min_length(value: str, field_name: str, min_len: int) -> str:
    if value is None or len(value) < min_len:
        raise ValidationError(f"{field_name} must have at least {min_len} characters")
    return value


def require_positive_id(value, field_name: str) -> int:
    try:
        parsed = int(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{field_name} is invalid")
    if parsed <= 0:
        raise ValidationError(f"{field_name} is invalid")
    return parsed


def require_date_order(start: date, end: date) -> None:
    if end < start:
        raise ValidationError("End date must be on or after the start date")

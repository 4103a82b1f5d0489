from __future__ import annotations

import math

from ..core.exceptions import ValidationError


def require_non_empty(value: str, field_name: str) -> str:
    if not value or not str(value).strip():
        raise ValidationError(f"{field_name} is required")
    return str(value).strip()


def require_float(value, field_name: str) -> float:
    try:
        number = float(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{field_name} must be a number")
    if not math.isfinite(number):
        raise ValidationError(f"{field_name} must be a finite number")
    return number


def require_in_range(value: float, field_name: str, low: float, high: float) -> float:
    if not low <= value <= high:
        raise ValidationError(f"{field_name} must be between {low} and {high}")
    return value


def require_positive(value: float, field_name: str) -> float:
    if value <= 0:
        raise ValidationError(f"{field_name} must be greater than 0")
    return value

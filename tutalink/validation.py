"""Small helpers for pulling typed fields out of JSON payloads."""
from __future__ import annotations

import math

from flask import request

from .errors import ValidationError


def json_payload() -> dict:
    payload = request.get_json(silent=True)
    return payload if isinstance(payload, dict) else {}


def text(payload: dict, key: str) -> str:
    """Return a stripped string field, or "" when missing or not a string."""
    value = payload.get(key)
    return value.strip() if isinstance(value, str) else ""


def optional_text(payload: dict, key: str) -> str | None:
    return text(payload, key) or None


def optional_int(payload: dict, key: str) -> int | None:
    value = payload.get(key)
    if value is None or value == "":
        return None
    # bool is an int subclass; "true" is never a valid id or year.
    if isinstance(value, bool):
        raise ValidationError(f"{key} must be an integer")
    try:
        return int(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{key} must be an integer") from None


def required_int(payload: dict, key: str) -> int:
    value = optional_int(payload, key)
    if value is None:
        raise ValidationError(f"{key} is required")
    return value


def optional_float(payload: dict, key: str) -> float | None:
    value = payload.get(key)
    if value is None or value == "":
        return None
    if isinstance(value, bool):
        raise ValidationError(f"{key} must be a number")
    try:
        number = float(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{key} must be a number") from None
    if not math.isfinite(number):
        raise ValidationError(f"{key} must be a finite number")
    return number

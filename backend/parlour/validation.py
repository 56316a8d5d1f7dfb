from __future__ import annotations

import math
from typing import Any

# Signed 64-bit column range
MAX_INT = 2**63 - 1
MIN_INT = -(2**63)

# NUMERIC(12, 2) holds at most ten integer digits
MAX_AMOUNT = 10**10


class ValidationError(ValueError):
    """400-level input problem."""


class MissingFieldsError(ValidationError):
    """Required request fields are absent or empty."""

    def __init__(self, message: str = "Missing fields"):
        super().__init__(message)


class InvalidTTypeError(ValidationError):
    """Ledger t_type outside the DR/CR set."""


class ConflictError(ValueError):
    """Business rule conflict (e.g., not enough stock). Reported as 400."""


class InsufficientStockError(ConflictError):
    def __init__(self, message: str = "Not enough stock"):
        super().__init__(message)


class NotFoundError(LookupError):
    """404-level: a referenced product or service does not exist."""


class ProductNotFoundError(NotFoundError):
    def __init__(self, message: str = "Product not found"):
        super().__init__(message)


class ServiceNotFoundError(NotFoundError):
    def __init__(self, message: str = "Service not found"):
        super().__init__(message)


def is_blank(value: Any) -> bool:
    """Falsy request values (None, "", 0) count as absent, like the client sends them."""
    if isinstance(value, str):
        return not value.strip()
    return not value


def coerce_int(value: Any, field: str, *, default: int | None = 0) -> int | None:
    """
    Strict integer coercion for request payloads.

    Blank values fall back to `default`; floats with a fractional part,
    booleans and scientific notation are rejected.
    """
    if value is None or (isinstance(value, str) and not value.strip()):
        return default
    if isinstance(value, bool):
        raise ValidationError(f"{field} must be an integer")
    if isinstance(value, int):
        result = value
    elif isinstance(value, float):
        if not math.isfinite(value) or not value.is_integer():
            raise ValidationError(f"{field} must be an integer, not a decimal")
        result = int(value)
    elif isinstance(value, str):
        stripped = value.strip()
        if "e" in stripped.lower() or "." in stripped:
            raise ValidationError(f"{field} must be a plain integer")
        try:
            result = int(stripped)
        except ValueError:
            raise ValidationError(f"{field} must be an integer")
    else:
        raise ValidationError(f"{field} must be an integer")

    if not MIN_INT <= result <= MAX_INT:
        raise ValidationError(f"{field} is out of range")
    return result


def coerce_amount(value: Any, field: str, *, default: float | None = 0.0) -> float | None:
    """Monetary values are plain floats; blank falls back to `default`."""
    if value is None or (isinstance(value, str) and not value.strip()):
        return default
    if isinstance(value, bool):
        raise ValidationError(f"{field} must be a number")
    try:
        result = float(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{field} must be a number")
    except OverflowError:
        raise ValidationError(f"{field} is out of range")

    if not math.isfinite(result):
        raise ValidationError(f"{field} must be a finite number")
    if abs(result) >= MAX_AMOUNT:
        raise ValidationError(f"{field} is out of range")
    return result


def coerce_text(value: Any, *, default: str = "") -> str:
    if value is None:
        return default
    return str(value).strip()

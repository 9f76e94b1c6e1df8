"""Decimal coercion helpers for currency inputs."""

from decimal import Decimal, InvalidOperation
from typing import Any

from premium_engine.exceptions import ValidationError

ZERO = Decimal("0")
CENTS = Decimal("0.01")


def to_decimal(value: Any, field_name: str = "amount") -> Decimal:
    """Convert a money value to ``Decimal``.

    ``None`` becomes zero. Floats go through ``str()`` so ``0.1`` is read as
    ``Decimal("0.1")`` rather than its binary expansion.

    Raises
    ------
    ValidationError
        If the value is not numeric or not finite.
    """
    if value is None:
        return ZERO
    if isinstance(value, Decimal):
        result = value
    elif isinstance(value, bool):
        raise ValidationError(f"{field_name} must be numeric, got {value!r}")
    else:
        try:
            result = Decimal(str(value).strip())
        except InvalidOperation as exc:
            raise ValidationError(f"{field_name} must be numeric, got {value!r}") from exc
    if not result.is_finite():
        raise ValidationError(f"{field_name} must be finite, got {value!r}")
    return result


def non_negative(value: Any, field_name: str = "amount") -> Decimal:
    """Convert and reject values below zero."""
    result = to_decimal(value, field_name)
    if result < ZERO:
        raise ValidationError(f"{field_name} must not be negative, got {result}")
    return result

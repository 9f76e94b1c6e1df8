"""Shared serialization utilities for sinks."""

from dataclasses import fields, is_dataclass
from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import Any


def to_dict(obj: Any) -> dict:
    """Convert object to dictionary."""
    if is_dataclass(obj) and not isinstance(obj, type):
        return dataclass_to_dict(obj)
    elif isinstance(obj, dict):
        return obj
    else:
        return {"value": str(obj)}


def dataclass_to_dict(obj: Any, decimal_as_number: bool = False) -> dict:
    """Convert dataclass to dict with proper serialization.

    Nested dataclasses (policies inside alerts, buckets inside a snapshot)
    are converted recursively.
    """
    return {f.name: serialize_value(getattr(obj, f.name), decimal_as_number) for f in fields(obj)}


def serialize_value(value: Any, decimal_as_number: bool = False) -> Any:
    """Serialize a value for JSON output.

    Decimals become strings, which keeps them exact. Report consumers that
    expect plain numbers pass ``decimal_as_number=True``.
    """
    if isinstance(value, Decimal):
        if decimal_as_number:
            return int(value) if value == value.to_integral_value() else float(value)
        return str(value)
    elif isinstance(value, Enum):
        return value.value
    elif isinstance(value, datetime):
        return value.isoformat()
    elif isinstance(value, date):
        return value.isoformat()
    elif is_dataclass(value) and not isinstance(value, type):
        return dataclass_to_dict(value, decimal_as_number)
    elif isinstance(value, dict):
        return {serialize_value(k): serialize_value(v, decimal_as_number) for k, v in value.items()}
    elif isinstance(value, (list, tuple)):
        return [serialize_value(v, decimal_as_number) for v in value]
    return value

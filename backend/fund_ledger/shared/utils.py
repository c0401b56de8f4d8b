from __future__ import annotations

import uuid
from decimal import Decimal, InvalidOperation
from typing import Any


def new_id() -> str:
    return str(uuid.uuid4())


def to_decimal(value: Any) -> Decimal:
    """Parse a monetary value without going through binary floating point."""
    if isinstance(value, Decimal):
        return value
    if isinstance(value, float):
        raise ValueError("monetary amounts must be decimal strings, not floats")
    if isinstance(value, bool):
        raise ValueError("monetary amounts must be decimal strings")
    try:
        return Decimal(str(value).strip())
    except InvalidOperation as exc:
        raise ValueError(f"invalid decimal amount: {value!r}") from exc

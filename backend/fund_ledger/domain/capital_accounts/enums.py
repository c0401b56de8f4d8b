from __future__ import annotations

from enum import Enum


class CapitalAccountActionType(str, Enum):
    DEPOSIT = "deposit"
    WITHDRAWAL = "withdrawal"

from __future__ import annotations

from enum import Enum


class PortfolioActionType(str, Enum):
    BUY = "buy"
    SELL = "sell"

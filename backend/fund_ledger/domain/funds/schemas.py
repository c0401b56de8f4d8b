from __future__ import annotations

from decimal import Decimal
from typing import ClassVar

from pydantic import Field

from fund_ledger.domain.documents import DecimalString, LedgerDocument
from fund_ledger.shared.enums import DocType


class Fund(LedgerDocument):
    """Top-level vehicle; owns period valuation state and the investor numbering sequence."""

    doc_type: ClassVar[DocType] = DocType.FUND

    name: str
    inception_date: str
    current_period: int = 0
    period_opening_value: DecimalString = Decimal("0")
    period_closing_value: DecimalString = Decimal("0")
    aggregate_fixed_fees: DecimalString = Decimal("0")
    aggregate_deposits: DecimalString = Decimal("0")
    next_investor_number: int = Field(default=0, ge=0)
    period_updated: bool = False

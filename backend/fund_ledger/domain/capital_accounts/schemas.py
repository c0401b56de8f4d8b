from __future__ import annotations

from decimal import Decimal
from typing import ClassVar

from pydantic import Field

from fund_ledger.domain.capital_accounts.enums import CapitalAccountActionType
from fund_ledger.domain.documents import DecimalString, LedgerDocument, LedgerModel
from fund_ledger.shared.enums import DocType, TxStatus

ZERO = Decimal("0.0")


class HighWaterMark(LedgerModel):
    amount: DecimalString = ZERO
    # Opaque date string; "None" until the first mark is set.
    date: str = "None"


class CapitalAccount(LedgerDocument):
    """Per-investor position within a fund.

    ``number`` is the fund's ``nextInvestorNumber`` at the moment the account
    was created.
    """

    doc_type: ClassVar[DocType] = DocType.CAPITAL_ACCOUNT

    fund: str
    investor: str
    number: int = Field(ge=0)
    current_period: int = 0
    period_opening_value: DecimalString = ZERO
    period_closing_value: DecimalString = ZERO
    fixed_fees: DecimalString = ZERO
    deposits: DecimalString = ZERO
    ownership_percentage: DecimalString = ZERO
    high_water_mark: HighWaterMark = Field(default_factory=HighWaterMark)


class CapitalAccountAction(LedgerDocument):
    """A proposed deposit or withdrawal, pending settlement."""

    doc_type: ClassVar[DocType] = DocType.CAPITAL_ACCOUNT_ACTION

    type: CapitalAccountActionType
    amount: DecimalString
    full: bool = False
    status: str = TxStatus.SUBMITTED.value
    description: str = ""
    date: str
    period: int
    fund: str = ""
    capital_account: str = ""

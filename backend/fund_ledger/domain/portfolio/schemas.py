from __future__ import annotations

from typing import ClassVar

from pydantic import Field

from fund_ledger.domain.documents import DecimalString, LedgerDocument, LedgerModel
from fund_ledger.domain.portfolio.enums import PortfolioActionType
from fund_ledger.shared.enums import DocType, TxStatus


class Security(LedgerModel):
    name: str
    cusip: str
    amount: DecimalString
    currency: str


class Portfolio(LedgerDocument):
    doc_type: ClassVar[DocType] = DocType.PORTFOLIO

    fund: str
    name: str
    securities: list[Security] = Field(default_factory=list)


class PortfolioAction(LedgerDocument):
    """A proposed buy or sell; creating one does not touch the portfolio's securities."""

    doc_type: ClassVar[DocType] = DocType.PORTFOLIO_ACTION

    fund: str
    portfolio: str
    security: Security
    type: PortfolioActionType
    date: str
    period: int
    status: str = TxStatus.SUBMITTED.value
    description: str = ""

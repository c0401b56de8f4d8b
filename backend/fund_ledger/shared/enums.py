from __future__ import annotations

from enum import Enum


class Env(str, Enum):
    dev = "dev"
    prod = "prod"
    test = "test"


class LedgerBackend(str, Enum):
    memory = "memory"
    sql = "sql"


class DocType(str, Enum):
    """Discriminator stored in every ledger document."""

    FUND = "fund"
    INVESTOR = "investor"
    CAPITAL_ACCOUNT = "capitalAccount"
    CAPITAL_ACCOUNT_ACTION = "capitalAccountAction"
    PORTFOLIO = "portfolio"
    PORTFOLIO_ACTION = "portfolioAction"


class TxStatus(str, Enum):
    SUBMITTED = "submitted"

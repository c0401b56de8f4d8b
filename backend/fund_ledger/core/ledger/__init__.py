"""World-state collaborator: key/value storage with selector queries."""
from __future__ import annotations

from fund_ledger.core.ledger.base import Ledger, LedgerStub, QueryRead, QueryResult, ResultsIterator
from fund_ledger.core.ledger.memory import InMemoryLedger
from fund_ledger.core.ledger.selectors import Selector, build_selector
from fund_ledger.core.ledger.sql import SqlLedger

__all__ = [
    "InMemoryLedger",
    "Ledger",
    "LedgerStub",
    "QueryRead",
    "QueryResult",
    "ResultsIterator",
    "Selector",
    "SqlLedger",
    "build_selector",
]

from __future__ import annotations

from fund_ledger.contract import AdminContract
from fund_ledger.core.config import settings
from fund_ledger.core.db.session import get_engine, get_session_local
from fund_ledger.core.ledger import InMemoryLedger, Ledger, SqlLedger
from fund_ledger.core.logging import configure_logging
from fund_ledger.shared.enums import LedgerBackend


def create_ledger() -> Ledger:
    if settings.ledger_backend == LedgerBackend.sql:
        return SqlLedger(get_session_local(get_engine(settings.database_url)))
    return InMemoryLedger()


def create_contract(ledger: Ledger | None = None) -> AdminContract:
    configure_logging()
    return AdminContract(ledger if ledger is not None else create_ledger())

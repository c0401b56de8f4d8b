from __future__ import annotations

import json
import os
import sys
from collections.abc import Generator

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

# Make `backend/` importable regardless of pytest import mode.
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))

from fund_ledger.contract import AdminContract
from fund_ledger.core.db.base import Base
from fund_ledger.core.ledger import InMemoryLedger, SqlLedger
from fund_ledger.main import create_contract

# Ensure model modules are imported so Base.metadata is complete.
from fund_ledger.core.db import models as _core_models  # noqa: F401


@pytest.fixture()
def db_engine():
    engine = create_engine(
        "sqlite+pysqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    return engine


@pytest.fixture()
def session_factory(db_engine) -> sessionmaker[Session]:
    return sessionmaker(bind=db_engine, autoflush=False, autocommit=False, class_=Session)


@pytest.fixture()
def memory_ledger() -> InMemoryLedger:
    return InMemoryLedger()


@pytest.fixture()
def sql_ledger(session_factory: sessionmaker[Session]) -> SqlLedger:
    return SqlLedger(session_factory)


@pytest.fixture(params=["memory", "sql"])
def ledger(request: pytest.FixtureRequest, memory_ledger: InMemoryLedger, session_factory) -> Generator:
    if request.param == "memory":
        yield memory_ledger
    else:
        yield SqlLedger(session_factory)


@pytest.fixture()
def contract(ledger) -> AdminContract:
    return create_contract(ledger)


@pytest.fixture()
def seeded_fund(contract: AdminContract) -> dict:
    fund = contract.create_fund("fund-1", "Seeded Fund", "2024-01-01")
    investor = contract.create_investor("Seed Investor")
    return {"fund_id": fund.id, "investor_id": investor.id}


@pytest.fixture()
def world_state(ledger, session_factory):
    """Callable returning the committed key/value state of the active ledger."""

    def _snapshot() -> dict[str, bytes]:
        if isinstance(ledger, InMemoryLedger):
            return ledger.world_state()
        db = session_factory()
        try:
            return {entry.key: entry.value for entry in db.query(_core_models.LedgerEntry).all()}
        finally:
            db.close()

    return _snapshot


@pytest.fixture()
def file_session_factory(tmp_path) -> Generator:
    """Sessions on a file database, each with its own connection, so transactions can overlap."""
    engine = create_engine(f"sqlite+pysqlite:///{tmp_path / 'ledger.db'}")
    Base.metadata.create_all(engine)
    yield sessionmaker(bind=engine, autoflush=False, autocommit=False, class_=Session)
    engine.dispose()


@pytest.fixture(params=["memory", "sql"])
def overlapping_ledger(request: pytest.FixtureRequest, file_session_factory) -> InMemoryLedger | SqlLedger:
    """A ledger on which one transaction may be opened while another is still pending."""
    if request.param == "memory":
        return InMemoryLedger()
    return SqlLedger(file_session_factory)


@pytest.fixture()
def committed_docs(overlapping_ledger, file_session_factory):
    """Callable listing committed documents of one docType on the overlapping ledger."""

    def _docs(doc_type: str) -> list[dict]:
        if isinstance(overlapping_ledger, InMemoryLedger):
            values = overlapping_ledger.world_state().values()
        else:
            db = file_session_factory()
            try:
                values = [entry.value for entry in db.query(_core_models.LedgerEntry).all()]
            finally:
                db.close()
        docs = [json.loads(value) for value in values]
        return [doc for doc in docs if doc.get("docType") == doc_type]

    return _docs

from __future__ import annotations

from functools import lru_cache

from sqlalchemy import Engine, create_engine
from sqlalchemy.orm import Session, sessionmaker

from fund_ledger.core.config import settings
from fund_ledger.core.db.base import Base
from fund_ledger.core.db import models as _models  # noqa: F401


@lru_cache(maxsize=4)
def get_engine(database_url: str | None = None) -> Engine:
    engine = create_engine(database_url or settings.database_url, pool_pre_ping=True)
    Base.metadata.create_all(bind=engine)
    return engine


def get_session_local(engine: Engine | None = None) -> sessionmaker[Session]:
    return sessionmaker(bind=engine or get_engine(), autoflush=False, autocommit=False, class_=Session)

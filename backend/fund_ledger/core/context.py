from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager

import structlog
from structlog import contextvars

from fund_ledger.shared.utils import new_id


def get_tx_id() -> str | None:
    ctx = contextvars.get_contextvars()
    v = ctx.get("tx_id")
    return str(v) if v is not None else None


@contextmanager
def invocation_context(function: str, tx_id: str | None = None) -> Iterator[str]:
    """Bind the transaction id and function name to every log line of one invocation."""
    tx_id = tx_id or new_id()
    tokens = contextvars.bind_contextvars(tx_id=tx_id, function=function)
    try:
        yield tx_id
    finally:
        contextvars.reset_contextvars(**tokens)


def get_logger(name: str | None = None):
    return structlog.get_logger(name)

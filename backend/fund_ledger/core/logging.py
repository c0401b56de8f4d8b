from __future__ import annotations

import logging
import sys
from typing import Any

import structlog
from structlog.typing import EventDict, Processor

from fund_ledger.core.config import settings
from fund_ledger.shared.enums import Env


def add_contract_version(_: Any, __: str, event_dict: EventDict) -> EventDict:
    """Stamp each event with the contract name and version."""
    event_dict.setdefault("contract", settings.contract_name)
    event_dict.setdefault("contract_version", settings.contract_version)
    return event_dict


def build_processors(env: Env) -> list[Processor]:
    processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        add_contract_version,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
    ]
    if env == Env.dev:
        processors.append(structlog.dev.ConsoleRenderer(colors=False))
    else:
        processors.append(structlog.processors.JSONRenderer(sort_keys=True))
    return processors


def configure_logging(env: Env | None = None, log_level: str | None = None) -> None:
    """Readable console lines in dev; one JSON object per ledger event elsewhere, carrying ``tx_id`` and ``function``."""
    level_name = (log_level or settings.log_level).upper()
    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=getattr(logging, level_name, logging.INFO),
    )

    structlog.configure(
        processors=build_processors(env or settings.env),
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

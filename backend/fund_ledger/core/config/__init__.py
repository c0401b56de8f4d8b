from __future__ import annotations

from fund_ledger.core.config.settings import Settings, settings

__all__ = ["Settings", "settings"]

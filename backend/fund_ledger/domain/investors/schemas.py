from __future__ import annotations

from typing import ClassVar

from fund_ledger.domain.documents import LedgerDocument
from fund_ledger.shared.enums import DocType


class Investor(LedgerDocument):
    doc_type: ClassVar[DocType] = DocType.INVESTOR

    name: str

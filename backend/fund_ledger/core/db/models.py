from __future__ import annotations

from sqlalchemy import Integer, LargeBinary, String
from sqlalchemy.orm import Mapped, mapped_column

from fund_ledger.core.db.base import AuditMetaMixin, Base


class LedgerEntry(Base, AuditMetaMixin):
    """One key of the world state.

    ``doc_type`` mirrors the document's ``docType`` so selector queries can
    narrow by entity kind in SQL. ``version`` drives optimistic concurrency:
    a commit that rewrites a row another transaction already changed fails.
    """

    __tablename__ = "ledger_state"

    key: Mapped[str] = mapped_column(String(200), primary_key=True)
    doc_type: Mapped[str | None] = mapped_column(String(64), index=True, nullable=True)
    value: Mapped[bytes] = mapped_column(LargeBinary, nullable=False)
    version: Mapped[int] = mapped_column(Integer, nullable=False)

    __mapper_args__ = {"version_id_col": version}

from __future__ import annotations

from fund_ledger.core.context import get_logger
from fund_ledger.core.ledger.base import LedgerStub
from fund_ledger.core.ledger.selectors import build_selector
from fund_ledger.domain.documents import build_document
from fund_ledger.domain.investors.schemas import Investor
from fund_ledger.domain.queries import first_match, get_by_id
from fund_ledger.shared.enums import DocType
from fund_ledger.shared.exceptions import DuplicateName
from fund_ledger.shared.utils import new_id

logger = get_logger(__name__)


def create_investor(stub: LedgerStub, *, name: str) -> Investor:
    if find_investor_by_name(stub, name) is not None:
        logger.info("investor.duplicate_name", name=name)
        raise DuplicateName(f"an investor with the name '{name}' already exists")

    investor = build_document(Investor, id=new_id(), name=name)
    stub.put(investor.id, investor.to_ledger())
    logger.info("investor.created", investor_id=investor.id)
    return investor


def get_investor(stub: LedgerStub, investor_id: str) -> Investor | None:
    return get_by_id(stub, Investor, investor_id)


def find_investor_by_name(stub: LedgerStub, name: str) -> Investor | None:
    return first_match(stub, Investor, build_selector(DocType.INVESTOR, name=name))

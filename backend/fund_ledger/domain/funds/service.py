from __future__ import annotations

from fund_ledger.core.context import get_logger
from fund_ledger.core.ledger.base import LedgerStub
from fund_ledger.core.ledger.selectors import build_selector
from fund_ledger.domain.documents import build_document
from fund_ledger.domain.funds.schemas import Fund
from fund_ledger.domain.queries import first_match, get_by_id
from fund_ledger.shared.enums import DocType
from fund_ledger.shared.exceptions import AlreadyExists, InvalidArgument

logger = get_logger(__name__)


def create_fund(stub: LedgerStub, *, fund_id: str, name: str, inception_date: str) -> Fund:
    """Fund ids are natural keys; any value already stored at the key blocks creation."""
    if not fund_id:
        raise InvalidArgument("a fund id is required")

    if stub.get(fund_id):
        logger.info("fund.already_exists", fund_id=fund_id)
        raise AlreadyExists(f"an object already exists with the id '{fund_id}'")

    fund = build_document(Fund, id=fund_id, name=name, inception_date=inception_date)
    stub.put(fund.id, fund.to_ledger())
    logger.info("fund.created", fund_id=fund.id, name=fund.name)
    return fund


def get_fund(stub: LedgerStub, fund_id: str) -> Fund | None:
    return get_by_id(stub, Fund, fund_id)


def find_fund_by_name(stub: LedgerStub, name: str) -> Fund | None:
    return first_match(stub, Fund, build_selector(DocType.FUND, name=name))


def reserve_investor_number(stub: LedgerStub, fund: Fund) -> int:
    """Hand out the fund's next investor number and persist the advanced counter.

    The caller must write the numbered record in the same transactional unit.
    """
    number = fund.next_investor_number
    advanced = fund.model_copy(update={"next_investor_number": number + 1})
    stub.put(advanced.id, advanced.to_ledger())
    return number

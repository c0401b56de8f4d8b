from __future__ import annotations

from typing import Any

from fund_ledger.core.context import get_logger
from fund_ledger.core.ledger.base import LedgerStub
from fund_ledger.core.ledger.selectors import build_selector
from fund_ledger.domain.documents import build_document
from fund_ledger.domain.portfolio.enums import PortfolioActionType
from fund_ledger.domain.portfolio.schemas import Portfolio, PortfolioAction, Security
from fund_ledger.domain.queries import collect, first_match, get_by_id
from fund_ledger.shared.enums import DocType, TxStatus
from fund_ledger.shared.exceptions import DuplicateName, InvalidActionType, InvalidArgument
from fund_ledger.shared.utils import new_id

logger = get_logger(__name__)


def create_portfolio(stub: LedgerStub, *, fund_id: str, name: str) -> Portfolio:
    if find_portfolio_by_name(stub, fund_id, name) is not None:
        logger.info("portfolio.duplicate_name", fund_id=fund_id, name=name)
        raise DuplicateName(f"a portfolio with the name '{name}' already exists for fund '{fund_id}'")

    portfolio = build_document(Portfolio, id=new_id(), fund=fund_id, name=name, securities=[])
    stub.put(portfolio.id, portfolio.to_ledger())
    logger.info("portfolio.created", portfolio_id=portfolio.id, fund_id=fund_id)
    return portfolio


def get_portfolio(stub: LedgerStub, portfolio_id: str) -> Portfolio | None:
    return get_by_id(stub, Portfolio, portfolio_id)


def find_portfolio_by_name(stub: LedgerStub, fund_id: str, name: str) -> Portfolio | None:
    return first_match(stub, Portfolio, build_selector(DocType.PORTFOLIO, fund=fund_id, name=name))


def find_portfolio_by_fund(stub: LedgerStub, fund_id: str) -> Portfolio | None:
    return first_match(stub, Portfolio, build_selector(DocType.PORTFOLIO, fund=fund_id))


def list_portfolios_by_fund(stub: LedgerStub, fund_id: str) -> list[Portfolio]:
    return collect(stub, Portfolio, build_selector(DocType.PORTFOLIO, fund=fund_id))


def _parse_action_type(value: Any) -> PortfolioActionType:
    try:
        return PortfolioActionType(value)
    except ValueError as exc:
        raise InvalidActionType(f"the specified action is invalid for a portfolio: '{value}'") from exc


def create_portfolio_action(
    stub: LedgerStub,
    *,
    fund_id: str,
    portfolio_id: str,
    action_type: str,
    date: str,
    period: int,
    name: str,
    cusip: str,
    amount: Any,
    currency: str,
) -> PortfolioAction:
    """Record a proposed trade with a snapshot of the security; the portfolio itself is untouched."""
    parsed_type = _parse_action_type(action_type)

    security = build_document(Security, name=name, cusip=cusip, amount=amount, currency=currency)
    if security.amount < 0:
        raise InvalidArgument(f"amount must not be negative, got '{security.amount}'")
    action = build_document(
        PortfolioAction,
        id=new_id(),
        fund=fund_id,
        portfolio=portfolio_id,
        security=security,
        type=parsed_type,
        date=date,
        period=period,
        status=TxStatus.SUBMITTED.value,
        description="",
    )
    stub.put(action.id, action.to_ledger())
    logger.info(
        "portfolio_action.submitted",
        action_id=action.id,
        action_type=parsed_type.value,
        fund_id=fund_id,
        portfolio_id=portfolio_id,
    )
    return action


def get_portfolio_action(stub: LedgerStub, action_id: str) -> PortfolioAction | None:
    return get_by_id(stub, PortfolioAction, action_id)


def list_portfolio_actions_by_portfolio(stub: LedgerStub, fund_id: str, portfolio_id: str) -> list[PortfolioAction]:
    selector = build_selector(DocType.PORTFOLIO_ACTION, fund=fund_id, portfolio=portfolio_id)
    return collect(stub, PortfolioAction, selector)

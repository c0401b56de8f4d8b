from __future__ import annotations

from typing import Any

from fund_ledger.core.context import get_logger
from fund_ledger.core.ledger.base import LedgerStub
from fund_ledger.core.ledger.selectors import build_selector
from fund_ledger.domain.capital_accounts.enums import CapitalAccountActionType
from fund_ledger.domain.capital_accounts.schemas import CapitalAccount, CapitalAccountAction
from fund_ledger.domain.documents import build_document
from fund_ledger.domain.funds.service import get_fund, reserve_investor_number
from fund_ledger.domain.investors.service import get_investor
from fund_ledger.domain.queries import collect, get_by_id
from fund_ledger.shared.enums import DocType, TxStatus
from fund_ledger.shared.exceptions import FundNotFound, InvalidActionType, InvalidArgument, InvestorNotFound
from fund_ledger.shared.utils import new_id

logger = get_logger(__name__)


def create_capital_account(stub: LedgerStub, *, fund_id: str, investor_id: str) -> CapitalAccount:
    """
    Open a capital account for an investor in a fund.

    The account takes the fund's current ``nextInvestorNumber`` and the fund
    counter is advanced by one. Both writes belong to the caller's
    transactional unit, so neither becomes visible without the other.
    """
    fund = get_fund(stub, fund_id)
    if fund is None:
        raise FundNotFound(f"a fund with the id '{fund_id}' does not exist")

    investor = get_investor(stub, investor_id)
    if investor is None:
        raise InvestorNotFound(f"an investor with the id '{investor_id}' does not exist")

    number = reserve_investor_number(stub, fund)
    account = build_document(
        CapitalAccount,
        id=new_id(),
        fund=fund.id,
        investor=investor.id,
        number=number,
        current_period=fund.current_period,
    )
    stub.put(account.id, account.to_ledger())
    logger.info(
        "capital_account.created",
        capital_account_id=account.id,
        fund_id=fund.id,
        investor_id=investor.id,
        number=number,
    )
    return account


def get_capital_account(stub: LedgerStub, capital_account_id: str) -> CapitalAccount | None:
    return get_by_id(stub, CapitalAccount, capital_account_id)


def list_capital_accounts_by_fund(stub: LedgerStub, fund_id: str) -> list[CapitalAccount]:
    return collect(stub, CapitalAccount, build_selector(DocType.CAPITAL_ACCOUNT, fund=fund_id))


def list_capital_accounts_by_investor(stub: LedgerStub, fund_id: str, investor_id: str) -> list[CapitalAccount]:
    selector = build_selector(DocType.CAPITAL_ACCOUNT, fund=fund_id, investor=investor_id)
    return collect(stub, CapitalAccount, selector)


def _parse_action_type(value: Any) -> CapitalAccountActionType:
    try:
        return CapitalAccountActionType(value)
    except ValueError as exc:
        raise InvalidActionType(f"the specified type of '{value}' is invalid for a CapitalAccountAction") from exc


def create_capital_account_action(
    stub: LedgerStub,
    *,
    action_type: str,
    amount: Any,
    full: bool,
    date: str,
    period: int,
    fund_id: str = "",
    capital_account_id: str = "",
) -> CapitalAccountAction:
    """
    Submit a deposit or withdrawal.

    Only the pending record is written; balances change when settlement
    applies the action, outside this operation.
    The direction comes from the action type, so the amount must not be
    negative.
    """
    parsed_type = _parse_action_type(action_type)

    action = build_document(
        CapitalAccountAction,
        id=new_id(),
        type=parsed_type,
        amount=amount,
        full=full,
        status=TxStatus.SUBMITTED.value,
        description="",
        date=date,
        period=period,
        fund=fund_id,
        capital_account=capital_account_id,
    )
    if action.amount < 0:
        raise InvalidArgument(f"amount must not be negative, got '{action.amount}'")
    stub.put(action.id, action.to_ledger())
    logger.info(
        "capital_account_action.submitted",
        action_id=action.id,
        action_type=parsed_type.value,
        fund_id=fund_id or None,
        period=action.period,
    )
    return action


def get_capital_account_action(stub: LedgerStub, action_id: str) -> CapitalAccountAction | None:
    return get_by_id(stub, CapitalAccountAction, action_id)


def list_capital_account_actions_by_fund(stub: LedgerStub, fund_id: str) -> list[CapitalAccountAction]:
    return collect(stub, CapitalAccountAction, build_selector(DocType.CAPITAL_ACCOUNT_ACTION, fund=fund_id))


def list_capital_account_actions_by_account_period(
    stub: LedgerStub, fund_id: str, capital_account_id: str, period: int
) -> list[CapitalAccountAction]:
    selector = build_selector(
        DocType.CAPITAL_ACCOUNT_ACTION,
        fund=fund_id,
        capitalAccount=capital_account_id,
        period=period,
    )
    return collect(stub, CapitalAccountAction, selector)

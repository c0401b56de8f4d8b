from __future__ import annotations

from decimal import Decimal

import pytest

from fund_ledger.contract import AdminContract
from fund_ledger.domain.capital_accounts.enums import CapitalAccountActionType
from fund_ledger.shared.exceptions import InvalidActionType, InvalidArgument


def test_deposit_is_submitted_pending(contract: AdminContract, seeded_fund: dict):
    action = contract.create_capital_account_action("deposit", "1000.50", False, "2024-03-31", 1)

    assert action.type == CapitalAccountActionType.DEPOSIT
    assert action.amount == Decimal("1000.50")
    assert action.full is False
    assert action.status == "submitted"
    assert action.description == ""
    assert action.date == "2024-03-31"
    assert action.period == 1
    assert contract.query_capital_account_action_by_id(action.id) == action


def test_creating_action_does_not_touch_balances(contract: AdminContract, seeded_fund: dict):
    fund_id = seeded_fund["fund_id"]
    account = contract.create_capital_account(fund_id, seeded_fund["investor_id"])

    contract.create_capital_account_action("deposit", "500", False, "2024-03-31", 0, fund_id, account.id)

    assert contract.query_capital_account_by_id(account.id) == account
    assert contract.query_fund_by_id(fund_id).aggregate_deposits == Decimal("0")


def test_full_withdrawal(contract: AdminContract):
    action = contract.create_capital_account_action("withdrawal", "0", True, "2024-12-31", 4)
    assert action.type == CapitalAccountActionType.WITHDRAWAL
    assert action.full is True


@pytest.mark.parametrize("action_type", ["transfer", "Deposit", ""])
def test_invalid_action_type_rejected(contract: AdminContract, world_state, action_type: str):
    with pytest.raises(InvalidActionType):
        contract.create_capital_account_action(action_type, "10", False, "2024-03-31", 1)
    assert world_state() == {}


def test_float_amount_rejected(contract: AdminContract, world_state):
    with pytest.raises(InvalidArgument):
        contract.create_capital_account_action("deposit", 10.1, False, "2024-03-31", 1)
    assert world_state() == {}


def test_query_actions_by_fund_and_account_period(contract: AdminContract, seeded_fund: dict):
    fund_id = seeded_fund["fund_id"]
    account = contract.create_capital_account(fund_id, seeded_fund["investor_id"])
    p1 = contract.create_capital_account_action("deposit", "100", False, "2024-03-31", 1, fund_id, account.id)
    p2 = contract.create_capital_account_action("withdrawal", "40", False, "2024-06-30", 2, fund_id, account.id)
    contract.create_capital_account_action("deposit", "7", False, "2024-03-31", 1, "other-fund", "other-account")

    by_fund = contract.query_capital_account_actions_by_fund(fund_id)
    assert {a.id for a in by_fund} == {p1.id, p2.id}

    assert contract.query_capital_account_actions_by_account_period(fund_id, account.id, 1) == [p1]
    assert contract.query_capital_account_actions_by_account_period(fund_id, account.id, 2) == [p2]
    assert contract.query_capital_account_actions_by_account_period(fund_id, account.id, 3) == []


def test_action_lookups_do_not_return_capital_accounts(contract: AdminContract, seeded_fund: dict):
    contract.create_capital_account(seeded_fund["fund_id"], seeded_fund["investor_id"])
    assert contract.query_capital_account_actions_by_fund(seeded_fund["fund_id"]) == []


@pytest.mark.parametrize("amount", ["-5", "-0.01"])
def test_negative_amount_rejected(contract: AdminContract, world_state, amount: str):
    with pytest.raises(InvalidArgument, match="negative"):
        contract.create_capital_account_action("withdrawal", amount, False, "2024-03-31", 1)
    assert world_state() == {}


def test_zero_amount_full_withdrawal_accepted(contract: AdminContract):
    action = contract.create_capital_account_action("withdrawal", "0", True, "2024-03-31", 1)
    assert action.amount == Decimal("0")

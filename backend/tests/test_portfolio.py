from __future__ import annotations

from decimal import Decimal

import pytest

from fund_ledger.contract import AdminContract
from fund_ledger.domain.portfolio.enums import PortfolioActionType
from fund_ledger.domain.portfolio.service import create_portfolio
from fund_ledger.shared.exceptions import DuplicateName, InvalidActionType, InvalidArgument, StorageFailure


def test_create_portfolio(contract: AdminContract, seeded_fund: dict):
    portfolio = contract.create_portfolio(seeded_fund["fund_id"], "Core Equities")

    assert portfolio.fund == seeded_fund["fund_id"]
    assert portfolio.name == "Core Equities"
    assert portfolio.securities == []
    assert contract.query_portfolio_by_id(portfolio.id) == portfolio


def test_portfolio_name_unique_within_fund(contract: AdminContract, seeded_fund: dict):
    fund_id = seeded_fund["fund_id"]
    contract.create_portfolio(fund_id, "Core Equities")

    with pytest.raises(DuplicateName):
        contract.create_portfolio(fund_id, "Core Equities")

    other = contract.create_portfolio("fund-2", "Core Equities")
    assert other.fund == "fund-2"
    assert len(contract.query_portfolios_by_fund(fund_id)) == 1


def test_query_portfolio_by_name_and_fund(contract: AdminContract, seeded_fund: dict):
    fund_id = seeded_fund["fund_id"]
    equities = contract.create_portfolio(fund_id, "Core Equities")
    bonds = contract.create_portfolio(fund_id, "Bonds")

    assert contract.query_portfolio_by_name(fund_id, "Bonds") == bonds
    assert contract.query_portfolio_by_name(fund_id, "Commodities") is None
    assert contract.query_portfolio_by_fund(fund_id) in (equities, bonds)
    assert contract.query_portfolio_by_fund("no-fund") is None
    assert {p.id for p in contract.query_portfolios_by_fund(fund_id)} == {equities.id, bonds.id}


def test_portfolio_action_is_recorded_but_not_applied(contract: AdminContract, seeded_fund: dict):
    fund_id = seeded_fund["fund_id"]
    portfolio = contract.create_portfolio(fund_id, "Core Equities")

    action = contract.create_portfolio_action(
        fund_id, portfolio.id, "buy", "2024-03-31", 1, "Acme Corp", "000360206", "250.00", "USD"
    )

    assert action.type == PortfolioActionType.BUY
    assert action.status == "submitted"
    assert action.security.name == "Acme Corp"
    assert action.security.cusip == "000360206"
    assert action.security.amount == Decimal("250.00")
    assert action.security.currency == "USD"
    assert contract.query_portfolio_action_by_id(action.id) == action
    assert contract.query_portfolio_by_id(portfolio.id).securities == []


def test_hold_is_not_a_portfolio_action(contract: AdminContract, seeded_fund: dict, world_state):
    before = world_state()

    with pytest.raises(InvalidActionType) as excinfo:
        contract.create_portfolio_action(
            seeded_fund["fund_id"], "portfolio-1", "hold", "2024-03-31", 1, "Acme Corp", "000360206", "1", "USD"
        )

    assert isinstance(excinfo.value, InvalidArgument)
    assert world_state() == before


def test_query_portfolio_actions_by_portfolio(contract: AdminContract, seeded_fund: dict):
    fund_id = seeded_fund["fund_id"]
    equities = contract.create_portfolio(fund_id, "Core Equities")
    bonds = contract.create_portfolio(fund_id, "Bonds")
    buy = contract.create_portfolio_action(fund_id, equities.id, "buy", "2024-03-31", 1, "Acme", "1", "10", "USD")
    sell = contract.create_portfolio_action(fund_id, equities.id, "sell", "2024-04-30", 1, "Acme", "1", "5", "USD")
    contract.create_portfolio_action(fund_id, bonds.id, "buy", "2024-03-31", 1, "T-Bill", "2", "100", "USD")

    actions = contract.query_portfolio_actions_by_portfolio(fund_id, equities.id)
    assert {a.id for a in actions} == {buy.id, sell.id}


def test_overlapping_creation_of_same_portfolio_name_is_rejected(overlapping_ledger, committed_docs):
    with pytest.raises(StorageFailure, match="read conflict"):
        with overlapping_ledger.transaction() as first:
            create_portfolio(first, fund_id="fund-1", name="Core")
            with overlapping_ledger.transaction() as second:
                create_portfolio(second, fund_id="fund-1", name="Core")

    assert len(committed_docs("portfolio")) == 1


def test_negative_security_amount_rejected(contract: AdminContract, seeded_fund: dict, world_state):
    before = world_state()

    with pytest.raises(InvalidArgument, match="negative"):
        contract.create_portfolio_action(
            seeded_fund["fund_id"], "portfolio-1", "sell", "2024-03-31", 1, "Acme Corp", "000360206", "-10", "USD"
        )

    assert world_state() == before

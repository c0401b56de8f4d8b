from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from functools import lru_cache
from typing import Any, NoReturn, TypeVar

from pydantic import ValidationError, validate_call
from pydantic.alias_generators import to_snake

from fund_ledger.core.config import settings
from fund_ledger.core.context import get_logger, invocation_context
from fund_ledger.core.ledger.base import Ledger, LedgerStub
from fund_ledger.domain.capital_accounts import service as capital_accounts
from fund_ledger.domain.capital_accounts.schemas import CapitalAccount, CapitalAccountAction
from fund_ledger.domain.documents import DecimalString
from fund_ledger.domain.funds import service as funds
from fund_ledger.domain.funds.schemas import Fund
from fund_ledger.domain.investors import service as investors
from fund_ledger.domain.investors.schemas import Investor
from fund_ledger.domain.portfolio import service as portfolio
from fund_ledger.domain.portfolio.schemas import Portfolio, PortfolioAction
from fund_ledger.shared.exceptions import AppError, InvalidArgument

logger = get_logger(__name__)

T = TypeVar("T")

# Names clients invoke; each maps to the snake_case method of the same name.
FUNCTIONS: tuple[str, ...] = (
    "CreateFund",
    "CreateInvestor",
    "CreateCapitalAccount",
    "CreatePortfolio",
    "CreatePortfolioAction",
    "CreateCapitalAccountAction",
    "QueryFundById",
    "QueryFundByName",
    "QueryInvestorById",
    "QueryInvestorByName",
    "QueryCapitalAccountById",
    "QueryCapitalAccountsByFund",
    "QueryCapitalAccountsByInvestor",
    "QueryCapitalAccountActionById",
    "QueryCapitalAccountActionsByFund",
    "QueryCapitalAccountActionsByAccountPeriod",
    "QueryPortfolioById",
    "QueryPortfolioByName",
    "QueryPortfolioByFund",
    "QueryPortfoliosByFund",
    "QueryPortfolioActionById",
    "QueryPortfolioActionsByPortfolio",
)


@dataclass(frozen=True)
class ContractInfo:
    title: str
    version: str
    description: str
    license: str


class AdminContract:
    """
    Fund administration operations over an injected ledger.

    Every call runs inside exactly one transactional unit of the ledger: all
    of its writes commit together, or none do.
    """

    def __init__(self, ledger: Ledger, info: ContractInfo | None = None) -> None:
        self._ledger = ledger
        self.info = info or ContractInfo(
            title=f"{settings.contract_name} chaincode",
            version=settings.contract_version,
            description=settings.contract_description,
            license=settings.contract_license,
        )

    def invoke(self, function: str, *args: Any) -> Any:
        """Dispatch a client call by operation name, coercing positional string arguments."""
        if function not in FUNCTIONS:
            self._reject(function, InvalidArgument(f"unknown function '{function}'"))
        try:
            return _validated(to_snake(function))(self, *args)
        except ValidationError as exc:
            self._reject(
                function, InvalidArgument(f"invalid arguments for '{function}': {exc.error_count()} error(s)"), exc
            )

    def _reject(self, function: str, error: InvalidArgument, cause: Exception | None = None) -> NoReturn:
        with invocation_context(function):
            logger.warning("contract.invocation_failed", error=type(error).__name__, detail=str(error))
        raise error from cause

    def _run(self, function: str, operation: Callable[[LedgerStub], T]) -> T:
        with invocation_context(function):
            try:
                with self._ledger.transaction() as stub:
                    return operation(stub)
            except AppError as exc:
                logger.warning("contract.invocation_failed", error=type(exc).__name__, detail=str(exc))
                raise

    # Mutations

    def create_fund(self, fund_id: str, name: str, inception_date: str) -> Fund:
        return self._run(
            "CreateFund",
            lambda stub: funds.create_fund(stub, fund_id=fund_id, name=name, inception_date=inception_date),
        )

    def create_investor(self, name: str) -> Investor:
        return self._run("CreateInvestor", lambda stub: investors.create_investor(stub, name=name))

    def create_capital_account(self, fund_id: str, investor_id: str) -> CapitalAccount:
        return self._run(
            "CreateCapitalAccount",
            lambda stub: capital_accounts.create_capital_account(stub, fund_id=fund_id, investor_id=investor_id),
        )

    def create_portfolio(self, fund_id: str, name: str) -> Portfolio:
        return self._run("CreatePortfolio", lambda stub: portfolio.create_portfolio(stub, fund_id=fund_id, name=name))

    def create_portfolio_action(
        self,
        fund_id: str,
        portfolio_id: str,
        type_: str,
        date: str,
        period: int,
        name: str,
        cusip: str,
        amount: DecimalString,
        currency: str,
    ) -> PortfolioAction:
        return self._run(
            "CreatePortfolioAction",
            lambda stub: portfolio.create_portfolio_action(
                stub,
                fund_id=fund_id,
                portfolio_id=portfolio_id,
                action_type=type_,
                date=date,
                period=period,
                name=name,
                cusip=cusip,
                amount=amount,
                currency=currency,
            ),
        )

    def create_capital_account_action(
        self,
        type_: str,
        amount: DecimalString,
        full: bool,
        date: str,
        period: int,
        fund_id: str = "",
        capital_account_id: str = "",
    ) -> CapitalAccountAction:
        return self._run(
            "CreateCapitalAccountAction",
            lambda stub: capital_accounts.create_capital_account_action(
                stub,
                action_type=type_,
                amount=amount,
                full=full,
                date=date,
                period=period,
                fund_id=fund_id,
                capital_account_id=capital_account_id,
            ),
        )

    # Lookups

    def query_fund_by_id(self, fund_id: str) -> Fund | None:
        return self._run("QueryFundById", lambda stub: funds.get_fund(stub, fund_id))

    def query_fund_by_name(self, name: str) -> Fund | None:
        return self._run("QueryFundByName", lambda stub: funds.find_fund_by_name(stub, name))

    def query_investor_by_id(self, investor_id: str) -> Investor | None:
        return self._run("QueryInvestorById", lambda stub: investors.get_investor(stub, investor_id))

    def query_investor_by_name(self, name: str) -> Investor | None:
        return self._run("QueryInvestorByName", lambda stub: investors.find_investor_by_name(stub, name))

    def query_capital_account_by_id(self, capital_account_id: str) -> CapitalAccount | None:
        return self._run(
            "QueryCapitalAccountById",
            lambda stub: capital_accounts.get_capital_account(stub, capital_account_id),
        )

    def query_capital_accounts_by_fund(self, fund_id: str) -> list[CapitalAccount]:
        return self._run(
            "QueryCapitalAccountsByFund",
            lambda stub: capital_accounts.list_capital_accounts_by_fund(stub, fund_id),
        )

    def query_capital_accounts_by_investor(self, fund_id: str, investor_id: str) -> list[CapitalAccount]:
        return self._run(
            "QueryCapitalAccountsByInvestor",
            lambda stub: capital_accounts.list_capital_accounts_by_investor(stub, fund_id, investor_id),
        )

    def query_capital_account_action_by_id(self, action_id: str) -> CapitalAccountAction | None:
        return self._run(
            "QueryCapitalAccountActionById",
            lambda stub: capital_accounts.get_capital_account_action(stub, action_id),
        )

    def query_capital_account_actions_by_fund(self, fund_id: str) -> list[CapitalAccountAction]:
        return self._run(
            "QueryCapitalAccountActionsByFund",
            lambda stub: capital_accounts.list_capital_account_actions_by_fund(stub, fund_id),
        )

    def query_capital_account_actions_by_account_period(
        self, fund_id: str, capital_account_id: str, period: int
    ) -> list[CapitalAccountAction]:
        return self._run(
            "QueryCapitalAccountActionsByAccountPeriod",
            lambda stub: capital_accounts.list_capital_account_actions_by_account_period(
                stub, fund_id, capital_account_id, period
            ),
        )

    def query_portfolio_by_id(self, portfolio_id: str) -> Portfolio | None:
        return self._run("QueryPortfolioById", lambda stub: portfolio.get_portfolio(stub, portfolio_id))

    def query_portfolio_by_name(self, fund_id: str, name: str) -> Portfolio | None:
        return self._run("QueryPortfolioByName", lambda stub: portfolio.find_portfolio_by_name(stub, fund_id, name))

    def query_portfolio_by_fund(self, fund_id: str) -> Portfolio | None:
        return self._run("QueryPortfolioByFund", lambda stub: portfolio.find_portfolio_by_fund(stub, fund_id))

    def query_portfolios_by_fund(self, fund_id: str) -> list[Portfolio]:
        return self._run("QueryPortfoliosByFund", lambda stub: portfolio.list_portfolios_by_fund(stub, fund_id))

    def query_portfolio_action_by_id(self, action_id: str) -> PortfolioAction | None:
        return self._run("QueryPortfolioActionById", lambda stub: portfolio.get_portfolio_action(stub, action_id))

    def query_portfolio_actions_by_portfolio(self, fund_id: str, portfolio_id: str) -> list[PortfolioAction]:
        return self._run(
            "QueryPortfolioActionsByPortfolio",
            lambda stub: portfolio.list_portfolio_actions_by_portfolio(stub, fund_id, portfolio_id),
        )


@lru_cache(maxsize=None)
def _validated(method_name: str) -> Callable[..., Any]:
    return validate_call(getattr(AdminContract, method_name))

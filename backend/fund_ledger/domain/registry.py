from __future__ import annotations

from pydantic import ValidationError

from fund_ledger.core.ledger.selectors import decode_document
from fund_ledger.domain.capital_accounts.schemas import CapitalAccount, CapitalAccountAction
from fund_ledger.domain.documents import LedgerDocument
from fund_ledger.domain.funds.schemas import Fund
from fund_ledger.domain.investors.schemas import Investor
from fund_ledger.domain.portfolio.schemas import Portfolio, PortfolioAction
from fund_ledger.shared.enums import DocType
from fund_ledger.shared.exceptions import StorageFailure

DOCUMENT_MODELS: dict[DocType, type[LedgerDocument]] = {
    DocType.FUND: Fund,
    DocType.INVESTOR: Investor,
    DocType.CAPITAL_ACCOUNT: CapitalAccount,
    DocType.CAPITAL_ACCOUNT_ACTION: CapitalAccountAction,
    DocType.PORTFOLIO: Portfolio,
    DocType.PORTFOLIO_ACTION: PortfolioAction,
}


def parse_document(value: bytes) -> LedgerDocument:
    """Decode any stored document into the model its ``docType`` names."""
    document = decode_document(value)
    if document is None:
        raise StorageFailure("stored value is not a JSON document")
    try:
        model = DOCUMENT_MODELS[DocType(document.get("docType"))]
    except ValueError as exc:
        raise StorageFailure(f"unknown docType {document.get('docType')!r}") from exc
    try:
        return model.model_validate(document)
    except ValidationError as exc:
        raise StorageFailure(f"stored {model.doc_type.value} document is malformed") from exc

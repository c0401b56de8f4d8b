from __future__ import annotations

from fund_ledger.core.ledger.base import LedgerStub
from fund_ledger.core.ledger.selectors import Selector
from fund_ledger.domain.documents import D, load_document
from fund_ledger.shared.exceptions import StorageFailure


def get_by_id(stub: LedgerStub, model: type[D], key: str) -> D | None:
    return load_document(model, stub.get(key))


def _load_match(model: type[D], key: str, value: bytes) -> D:
    document = load_document(model, value)
    if document is None:
        raise StorageFailure(f"query returned key '{key}' which is not a {model.doc_type.value} document")
    return document


def first_match(stub: LedgerStub, model: type[D], selector: Selector) -> D | None:
    """First document matching ``selector``; uniqueness is assumed, not checked."""
    with stub.query(selector) as results:
        for result in results:
            return _load_match(model, result.key, result.value)
    return None


def collect(stub: LedgerStub, model: type[D], selector: Selector) -> list[D]:
    with stub.query(selector) as results:
        return [_load_match(model, result.key, result.value) for result in results]

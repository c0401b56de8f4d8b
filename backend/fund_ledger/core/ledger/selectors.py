from __future__ import annotations

import json
from collections.abc import Mapping
from typing import Any

from fund_ledger.shared.enums import DocType

Selector = dict[str, Any]

_MISSING = object()


def build_selector(doc_type: DocType, **predicates: Any) -> Selector:
    """Equality filter on ``docType`` plus top-level document fields."""
    selector: Selector = {"docType": doc_type.value}
    for field, value in predicates.items():
        selector[field] = value.value if isinstance(value, DocType) else value
    return selector


def decode_document(value: bytes | None) -> dict[str, Any] | None:
    """Best-effort JSON object decode; anything else is not a queryable document."""
    if not value:
        return None
    try:
        document = json.loads(value)
    except (UnicodeDecodeError, ValueError):
        return None
    return document if isinstance(document, dict) else None


def matches(document: Mapping[str, Any], selector: Selector) -> bool:
    return all(document.get(field, _MISSING) == expected for field, expected in selector.items())

"""Base model and byte codec for documents stored in the world state.

Field names are snake_case in Python and camelCase on the ledger. The
``docType`` discriminator exists only in the serialized form: each model class
declares its kind as a ``ClassVar`` and the codec adds or checks the tag.
"""
from __future__ import annotations

import json
from decimal import Decimal
from typing import Annotated, Any, ClassVar, TypeVar

from pydantic import BaseModel, BeforeValidator, ConfigDict, PlainSerializer, ValidationError
from pydantic.alias_generators import to_camel

from fund_ledger.core.ledger.selectors import decode_document
from fund_ledger.shared.enums import DocType
from fund_ledger.shared.exceptions import InvalidArgument, StorageFailure
from fund_ledger.shared.utils import to_decimal

DecimalString = Annotated[
    Decimal,
    BeforeValidator(to_decimal),
    PlainSerializer(lambda value: str(value), return_type=str),
]


class LedgerModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
        extra="ignore",
    )


class LedgerDocument(LedgerModel):
    doc_type: ClassVar[DocType]

    id: str

    def to_document(self) -> dict[str, Any]:
        return {"docType": self.doc_type.value, **self.model_dump(mode="json", by_alias=True)}

    def to_ledger(self) -> bytes:
        return json.dumps(self.to_document(), separators=(",", ":")).encode("utf-8")


D = TypeVar("D", bound=LedgerDocument)
M = TypeVar("M", bound=LedgerModel)


def load_document(model: type[D], value: bytes | None) -> D | None:
    """Decode ``value`` as ``model``; ``None`` when absent or tagged as another kind."""
    if value is None:
        return None
    document = decode_document(value)
    if document is None:
        raise StorageFailure("stored value is not a JSON document")
    if document.get("docType") != model.doc_type.value:
        return None
    try:
        return model.model_validate(document)
    except ValidationError as exc:
        raise StorageFailure(f"stored {model.doc_type.value} document is malformed") from exc


def build_document(model: type[M], **fields: Any) -> M:
    """Construct a new document from operation arguments."""
    try:
        return model(**fields)
    except ValidationError as exc:
        errors = "; ".join(f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}" for err in exc.errors())
        raise InvalidArgument(f"invalid {model.__name__} arguments: {errors}") from exc

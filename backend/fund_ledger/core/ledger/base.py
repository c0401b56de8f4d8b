from __future__ import annotations

from collections.abc import Callable, Collection, Iterable, Iterator, Mapping
from contextlib import AbstractContextManager
from dataclasses import dataclass, field
from typing import Any, Protocol


@dataclass(frozen=True)
class QueryResult:
    key: str
    value: bytes


@dataclass
class QueryRead:
    """Rows one selector query handed out, checked again at commit.

    A query read to the end is stale when its match set changed at all, which
    catches phantoms. A query abandoned early is stale only when a row it
    yielded was rewritten or stopped matching.
    """

    selector: dict[str, Any]
    versions: dict[str, int] = field(default_factory=dict)
    exhausted: bool = False

    def is_stale(self, current: Mapping[str, int], ignore: Collection[str] = ()) -> bool:
        seen = {key: version for key, version in self.versions.items() if key not in ignore}
        if self.exhausted:
            return {key: version for key, version in current.items() if key not in ignore} != seen
        return any(current.get(key) != version for key, version in seen.items())


class ResultsIterator(Iterator[QueryResult]):
    """Lazily produced, finite query results.

    The iterator owns a backend cursor; callers must close it, preferably by
    using it as a context manager, even when they stop after the first match.
    """

    def __init__(self, results: Iterable[QueryResult], on_close: Callable[[], None] | None = None) -> None:
        self._results = iter(results)
        self._on_close = on_close
        self._closed = False

    def __iter__(self) -> ResultsIterator:
        return self

    def __next__(self) -> QueryResult:
        if self._closed:
            raise StopIteration
        return next(self._results)

    @property
    def closed(self) -> bool:
        return self._closed

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        close = getattr(self._results, "close", None)
        if close is not None:
            close()
        if self._on_close is not None:
            self._on_close()

    def __enter__(self) -> ResultsIterator:
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()


class LedgerStub(Protocol):
    """Reads and writes available to one operation inside its transactional unit."""

    def get(self, key: str) -> bytes | None:
        ...

    def put(self, key: str, value: bytes) -> None:
        ...

    def query(self, selector: dict[str, Any]) -> ResultsIterator:
        ...


class Ledger(Protocol):
    """Provides all-or-nothing transactional units.

    Writes made through the yielded stub become visible only when the block
    exits normally; any exception discards them.
    """

    def transaction(self) -> AbstractContextManager[LedgerStub]:
        ...

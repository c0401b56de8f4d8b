from __future__ import annotations

import threading
from collections.abc import Iterator
from contextlib import contextmanager

from fund_ledger.core.context import get_logger
from fund_ledger.core.ledger.base import QueryRead, QueryResult, ResultsIterator
from fund_ledger.core.ledger.selectors import Selector, decode_document, matches
from fund_ledger.shared.exceptions import StorageFailure

logger = get_logger(__name__)


class InMemoryLedger:
    """Dict-backed world state with MVCC-style commit validation.

    Reads always see committed state. Writes are buffered per transaction and
    applied at commit, after checking that every key read is still at the
    version the transaction observed and that every selector query would
    still return the same rows.
    """

    def __init__(self) -> None:
        self._state: dict[str, bytes] = {}
        self._versions: dict[str, int] = {}
        self._lock = threading.Lock()

    @contextmanager
    def transaction(self) -> Iterator[InMemoryStub]:
        stub = InMemoryStub(self)
        try:
            yield stub
        except BaseException:
            logger.debug("ledger.rollback", discarded_writes=len(stub.write_set))
            raise
        finally:
            stub.close_iterators()
        self._commit(stub)

    def world_state(self) -> dict[str, bytes]:
        with self._lock:
            return dict(self._state)

    def _read(self, key: str) -> tuple[bytes | None, int]:
        with self._lock:
            return self._state.get(key), self._versions.get(key, 0)

    def _snapshot(self) -> list[tuple[str, bytes, int]]:
        with self._lock:
            return [(key, value, self._versions[key]) for key, value in self._state.items()]

    def _matching_versions(self, selector: Selector) -> dict[str, int]:
        # caller holds the lock
        versions: dict[str, int] = {}
        for key, value in self._state.items():
            document = decode_document(value)
            if document is not None and matches(document, selector):
                versions[key] = self._versions[key]
        return versions

    def _commit(self, stub: InMemoryStub) -> None:
        with self._lock:
            for key, version in stub.read_set.items():
                if self._versions.get(key, 0) != version:
                    raise StorageFailure(f"read conflict on key '{key}'; transaction was not committed")
            for read in stub.query_reads:
                if read.is_stale(self._matching_versions(read.selector)):
                    raise StorageFailure(
                        f"read conflict on query {read.selector!r}; transaction was not committed"
                    )
            for key, value in stub.write_set.items():
                self._state[key] = value
                self._versions[key] = self._versions.get(key, 0) + 1
        logger.debug("ledger.commit", writes=len(stub.write_set))


class InMemoryStub:
    def __init__(self, ledger: InMemoryLedger) -> None:
        self._ledger = ledger
        self.read_set: dict[str, int] = {}
        self.write_set: dict[str, bytes] = {}
        self.query_reads: list[QueryRead] = []
        self._iterators: list[ResultsIterator] = []

    def get(self, key: str) -> bytes | None:
        value, version = self._ledger._read(key)
        self.read_set.setdefault(key, version)
        return value

    def put(self, key: str, value: bytes) -> None:
        if not key:
            raise StorageFailure("empty key is not allowed")
        self.write_set[key] = bytes(value)

    def query(self, selector: Selector) -> ResultsIterator:
        snapshot = self._ledger._snapshot()
        read = QueryRead(selector=dict(selector))
        self.query_reads.append(read)

        def _rows() -> Iterator[QueryResult]:
            for key, value, version in snapshot:
                document = decode_document(value)
                if document is not None and matches(document, selector):
                    read.versions[key] = version
                    yield QueryResult(key=key, value=value)
            read.exhausted = True

        results = ResultsIterator(_rows())
        self._iterators.append(results)
        return results

    def close_iterators(self) -> None:
        for results in self._iterators:
            results.close()
        self._iterators.clear()

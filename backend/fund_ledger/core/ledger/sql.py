from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager

from sqlalchemy import Select, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.orm.exc import StaleDataError

from fund_ledger.core.context import get_logger
from fund_ledger.core.db.models import LedgerEntry
from fund_ledger.core.db.session import get_session_local
from fund_ledger.core.ledger.base import QueryRead, QueryResult, ResultsIterator
from fund_ledger.core.ledger.selectors import Selector, decode_document, matches
from fund_ledger.shared.exceptions import StorageFailure

logger = get_logger(__name__)

QUERY_BATCH_SIZE = 100


class SqlLedger:
    """World state persisted through SQLAlchemy, one ``Session`` per transaction.

    Rows read through ``get`` stay loaded in the session, so rewriting one
    issues ``UPDATE ... WHERE version = <version read>`` and a concurrent
    commit in between surfaces as ``StaleDataError``. Keys read but not
    written, and selector queries, are checked again after the writes are
    flushed and before the commit.
    """

    def __init__(self, session_factory: sessionmaker[Session] | None = None) -> None:
        self._session_factory = session_factory or get_session_local()

    @contextmanager
    def transaction(self) -> Iterator[SqlStub]:
        db = self._session_factory()
        stub = SqlStub(db)
        try:
            try:
                yield stub
            finally:
                stub.close_iterators()
            stub.flush_writes()
            stub.validate_reads()
            db.commit()
            logger.debug("ledger.commit", writes=len(stub.write_set))
        except StaleDataError as exc:
            db.rollback()
            raise StorageFailure("read conflict on a rewritten key; transaction was not committed") from exc
        except SQLAlchemyError as exc:
            db.rollback()
            raise StorageFailure(f"ledger commit failed: {exc}") from exc
        except BaseException:
            db.rollback()
            logger.debug("ledger.rollback", discarded_writes=len(stub.write_set))
            raise
        finally:
            db.close()


def _selector_statement(selector: Selector) -> Select:
    stmt = select(LedgerEntry.key, LedgerEntry.value, LedgerEntry.version)
    doc_type = selector.get("docType")
    if doc_type is not None:
        stmt = stmt.where(LedgerEntry.doc_type == doc_type)
    return stmt


class SqlStub:
    def __init__(self, db: Session) -> None:
        self._db = db
        self.write_set: dict[str, bytes] = {}
        self.query_reads: list[QueryRead] = []
        # strong references keep read rows in the identity map at their read version
        self._entries: dict[str, LedgerEntry | None] = {}
        self._iterators: list[ResultsIterator] = []

    def get(self, key: str) -> bytes | None:
        if key in self._entries:
            entry = self._entries[key]
        else:
            try:
                entry = self._db.get(LedgerEntry, key)
            except SQLAlchemyError as exc:
                raise StorageFailure(f"error retrieving key '{key}' from the world state") from exc
            self._entries[key] = entry
        return entry.value if entry is not None else None

    def put(self, key: str, value: bytes) -> None:
        if not key:
            raise StorageFailure("empty key is not allowed")
        self.write_set[key] = bytes(value)

    def query(self, selector: Selector) -> ResultsIterator:
        stmt = _selector_statement(selector)
        try:
            result = self._db.execute(stmt.execution_options(yield_per=QUERY_BATCH_SIZE))
        except SQLAlchemyError as exc:
            raise StorageFailure("error executing selector query") from exc
        read = QueryRead(selector=dict(selector))
        self.query_reads.append(read)

        def _rows() -> Iterator[QueryResult]:
            try:
                for key, value, version in result:
                    document = decode_document(value)
                    if document is not None and matches(document, selector):
                        read.versions[key] = version
                        yield QueryResult(key=key, value=value)
            except SQLAlchemyError as exc:
                raise StorageFailure("error reading selector query results") from exc
            read.exhausted = True

        results = ResultsIterator(_rows(), on_close=result.close)
        self._iterators.append(results)
        return results

    def flush_writes(self) -> None:
        """Apply buffered writes to the session and flush them."""
        for key, value in self.write_set.items():
            document = decode_document(value)
            doc_type = document.get("docType") if document is not None else None
            if key in self._entries:
                entry = self._entries[key]
            else:
                entry = self._db.get(LedgerEntry, key)
            if entry is None:
                self._db.add(LedgerEntry(key=key, doc_type=doc_type, value=value))
            else:
                entry.doc_type = doc_type
                entry.value = value
        self._db.flush()

    def validate_reads(self) -> None:
        """Fail when a key read but not written, or a query result, changed since it was read."""
        read_only = [key for key in self._entries if key not in self.write_set]
        if read_only:
            current = dict(
                self._db.execute(
                    select(LedgerEntry.key, LedgerEntry.version).where(LedgerEntry.key.in_(read_only))
                ).all()
            )
            for key in read_only:
                entry = self._entries[key]
                if current.get(key) != (entry.version if entry is not None else None):
                    raise StorageFailure(f"read conflict on key '{key}'; transaction was not committed")

        # keys this transaction wrote were checked through their row versions
        for read in self.query_reads:
            if read.is_stale(self._matching_versions(read), ignore=self.write_set):
                raise StorageFailure(f"read conflict on query {read.selector!r}; transaction was not committed")

    def _matching_versions(self, read: QueryRead) -> dict[str, int]:
        versions: dict[str, int] = {}
        for key, value, version in self._db.execute(_selector_statement(read.selector)):
            document = decode_document(value)
            if document is not None and matches(document, read.selector):
                versions[key] = version
        return versions

    def close_iterators(self) -> None:
        for results in self._iterators:
            results.close()
        self._iterators.clear()

from contextlib import contextmanager
import copy
import functools
import logging
import threading
from datetime import datetime, timezone
from typing import ContextManager, Protocol

from sqlalchemy import select
from sqlalchemy.orm import Session, sessionmaker

from ricemill.constants.collections import LAST_SYNC
from ricemill.models.storage.collection_models import StoredCollection

logger = logging.getLogger(__name__)


class CollectionStore(Protocol):
    """Key-value collaborator holding every named collection.

    Calls are synchronous and total: a save is either fully visible to the
    next load or not at all. ``transaction()`` groups several saves so they
    become visible together, and holds the store's write lock until then.
    """

    def load(self, key: str) -> list[dict]: ...

    def save(self, key: str, records: list[dict]) -> None: ...

    def keys(self) -> list[str]: ...

    def delete(self, key: str) -> None: ...

    def last_sync(self) -> datetime | None: ...

    def transaction(self) -> ContextManager[None]: ...


def transactional(func):
    """Run a service function (store first) inside one store transaction."""

    @functools.wraps(func)
    def wrapper(store, *args, **kwargs):
        with store.transaction():
            return func(store, *args, **kwargs)

    return wrapper


# =====================================================
# IN-MEMORY
# =====================================================
class InMemoryCollectionStore:
    def __init__(self, initial: dict[str, list[dict]] | None = None):
        self._data: dict[str, list[dict]] = copy.deepcopy(initial or {})
        self._last_sync: datetime | None = None
        self._lock = threading.RLock()
        self._local = threading.local()

    def _staged(self) -> dict | None:
        # key -> records, or None for a staged delete
        return getattr(self._local, "staged", None)

    @contextmanager
    def transaction(self):
        with self._lock:
            if self._staged() is not None:
                yield
                return

            staged = self._local.staged = {}
            try:
                yield
                for key, records in staged.items():
                    if records is None:
                        self._data.pop(key, None)
                    else:
                        self._data[key] = records
                if staged:
                    self._last_sync = datetime.now(timezone.utc)
            finally:
                self._local.staged = None

    def load(self, key: str) -> list[dict]:
        # callers get their own copy; mutation only happens through save()
        with self._lock:
            staged = self._staged()
            if staged is not None and key in staged:
                return copy.deepcopy(staged[key] or [])
            return copy.deepcopy(self._data.get(key, []))

    def save(self, key: str, records: list[dict]) -> None:
        with self._lock:
            staged = self._staged()
            if staged is not None:
                staged[key] = copy.deepcopy(records)
            else:
                self._data[key] = copy.deepcopy(records)
                self._last_sync = datetime.now(timezone.utc)
        logger.debug("Saved collection", extra={"key": key, "records": len(records)})

    def keys(self) -> list[str]:
        with self._lock:
            keys = set(self._data)
            for key, records in (self._staged() or {}).items():
                if records is None:
                    keys.discard(key)
                else:
                    keys.add(key)
            return sorted(keys)

    def delete(self, key: str) -> None:
        with self._lock:
            staged = self._staged()
            if staged is not None:
                staged[key] = None
            else:
                self._data.pop(key, None)

    def last_sync(self) -> datetime | None:
        return self._last_sync


# =====================================================
# SQLALCHEMY
# =====================================================
class SqlCollectionStore:
    """One ``StoredCollection`` row per key, JSON payload.

    Inside ``transaction()`` every call shares one session that commits on
    exit and rolls back on error. Outside it each call commits on its own.
    """

    def __init__(self, session_factory: sessionmaker):
        self._session_factory = session_factory
        self._lock = threading.RLock()
        self._local = threading.local()

    @contextmanager
    def transaction(self):
        with self._lock:
            if getattr(self._local, "session", None) is not None:
                yield
                return

            with self._session_factory() as session:
                self._local.session = session
                try:
                    yield
                    session.commit()
                except Exception:
                    session.rollback()
                    raise
                finally:
                    self._local.session = None

    @contextmanager
    def _session(self):
        session = getattr(self._local, "session", None)
        if session is not None:
            yield session
            return

        with self._lock, self._session_factory() as session:
            yield session
            session.commit()

    def load(self, key: str) -> list[dict]:
        with self._session() as session:
            row = session.get(StoredCollection, key)
            if row is None:
                return []
            return copy.deepcopy(row.payload or [])

    def save(self, key: str, records: list[dict]) -> None:
        with self._session() as session:
            self._upsert(session, key, records)
            self._upsert(
                session,
                LAST_SYNC,
                [{"at": datetime.now(timezone.utc).isoformat()}],
            )

        logger.debug("Saved collection", extra={"key": key, "records": len(records)})

    def keys(self) -> list[str]:
        with self._session() as session:
            rows = session.execute(
                select(StoredCollection.key).where(StoredCollection.key != LAST_SYNC)
            )
            return sorted(rows.scalars().all())

    def delete(self, key: str) -> None:
        with self._session() as session:
            row = session.get(StoredCollection, key)
            if row is not None:
                session.delete(row)
                session.flush()

    def last_sync(self) -> datetime | None:
        with self._session() as session:
            row = session.get(StoredCollection, LAST_SYNC)
            if row is None or not row.payload:
                return None
            return datetime.fromisoformat(row.payload[0]["at"])

    @staticmethod
    def _upsert(session: Session, key: str, records: list[dict]) -> None:
        row = session.get(StoredCollection, key)
        if row is None:
            row = StoredCollection(key=key)
            session.add(row)
        # new list object so the JSON column is flagged dirty
        row.payload = copy.deepcopy(list(records))
        row.record_count = len(records)
        # later gets in the same session must see this row
        session.flush()

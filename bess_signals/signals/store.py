"""Durable key-value store used by the signal cache.

The cache only needs ``get``/``put`` by string key with an optional
time-to-live. No multi-key transactions are assumed. Two implementations:

- ``InMemoryStore``: process-local, used by tests and single-process runs.
- ``SqlAlchemyStore``: one row per key in a SQL table.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Callable
from datetime import datetime, timedelta, timezone

from sqlalchemy import Column, DateTime, String, Text, create_engine
from sqlalchemy.orm import Session, declarative_base, sessionmaker

Clock = Callable[[], datetime]


def utc_now() -> datetime:
    """Current time as an aware UTC datetime."""
    return datetime.now(timezone.utc)


class KeyValueStore(ABC):
    """Interface of the durable store."""

    @abstractmethod
    def get(self, key: str) -> str | None:
        """Return the stored value, or None if absent or expired."""

    @abstractmethod
    def put(self, key: str, value: str, ttl_seconds: float | None = None) -> None:
        """Store a value, replacing any previous one."""


class InMemoryStore(KeyValueStore):
    """Dictionary-backed store with optional per-key expiry."""

    def __init__(self, clock: Clock = utc_now) -> None:
        """Initialize an empty store.

        Args:
            clock: Time source used for expiry checks.
        """
        self._clock = clock
        self._data: dict[str, tuple[str, datetime | None]] = {}

    def get(self, key: str) -> str | None:
        item = self._data.get(key)
        if item is None:
            return None
        value, expires_at = item
        if expires_at is not None and self._clock() >= expires_at:
            del self._data[key]
            return None
        return value

    def put(self, key: str, value: str, ttl_seconds: float | None = None) -> None:
        expires_at = (
            self._clock() + timedelta(seconds=ttl_seconds)
            if ttl_seconds is not None
            else None
        )
        self._data[key] = (value, expires_at)

    def __contains__(self, key: str) -> bool:
        return self.get(key) is not None


# =============================================================================
# SQL-backed store
# =============================================================================

Base = declarative_base()


class KeyValueModel(Base):
    """SQLAlchemy model for one stored key."""

    __tablename__ = "signal_store"

    key = Column(String(200), primary_key=True)
    value = Column(Text, nullable=False)
    expires_at = Column(DateTime(timezone=True), nullable=True)
    updated_at = Column(DateTime(timezone=True), nullable=False)


class SqlAlchemyStore(KeyValueStore):
    """Key-value store persisted in a single SQL table."""

    def __init__(self, database_url: str, clock: Clock = utc_now) -> None:
        """Connect and ensure the table exists.

        Args:
            database_url: SQLAlchemy database URL.
            clock: Time source used for expiry checks.
        """
        self._clock = clock
        self.engine = create_engine(database_url)
        self._session_factory = sessionmaker(
            autocommit=False, autoflush=False, bind=self.engine
        )
        Base.metadata.create_all(bind=self.engine)

    def _session(self) -> Session:
        return self._session_factory()

    def get(self, key: str) -> str | None:
        with self._session() as db:
            row = db.get(KeyValueModel, key)
            if row is None:
                return None
            if row.expires_at is not None and self._clock() >= _as_utc(row.expires_at):
                return None
            return row.value

    def put(self, key: str, value: str, ttl_seconds: float | None = None) -> None:
        now = self._clock()
        expires_at = now + timedelta(seconds=ttl_seconds) if ttl_seconds is not None else None
        with self._session() as db:
            row = db.get(KeyValueModel, key)
            if row is None:
                row = KeyValueModel(key=key)
                db.add(row)
            row.value = value
            row.expires_at = expires_at
            row.updated_at = now
            db.commit()

    def drop(self) -> None:
        """Drop the backing table."""
        Base.metadata.drop_all(bind=self.engine)


def _as_utc(value: datetime) -> datetime:
    # SQLite returns naive datetimes even for timezone-aware columns
    return value if value.tzinfo is not None else value.replace(tzinfo=timezone.utc)


def create_store(database_url: str | None) -> KeyValueStore:
    """Create the configured store; ``memory://`` or empty gives an in-memory one."""
    if not database_url or database_url.startswith("memory://"):
        return InMemoryStore()
    return SqlAlchemyStore(database_url)

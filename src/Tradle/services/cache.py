"""In-memory and SQLite caching layer with per-data-type TTLs.

Provides a cache-first pattern for price fetching: check cache, fetch on
miss, store, and return. The simulation code never touches the cache; it is
injected into the services that call the data vendor. Historical price
windows never change, so they are stored permanently in SQLite when a
database is configured; everything else lives in memory.
"""

from __future__ import annotations

import datetime
import logging
from typing import Final

from pydantic import BaseModel, ConfigDict

from Tradle.data.database import Database

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Constants: TTL values in seconds
# ---------------------------------------------------------------------------

TTL_PRICES_PERMANENT: Final[int] = 0  # 0 means never expires
TTL_CATALOG: Final[int] = 24 * 60 * 60  # 24 hours
TTL_FAILURE: Final[int] = 60 * 60  # 1 hour
TTL_DEFAULT: Final[int] = 5 * 60  # 5 minutes

# Data type string constants (second segment of a cache key)
DATA_TYPE_PRICES: Final[str] = "prices"
DATA_TYPE_CATALOG: Final[str] = "catalog"
DATA_TYPE_FAILURE: Final[str] = "failure"

# Lazy cleanup: run eviction at most every N accesses
LAZY_CLEANUP_INTERVAL: Final[int] = 100

_SQLITE_DATA_TYPES: Final[frozenset[str]] = frozenset({DATA_TYPE_PRICES, DATA_TYPE_CATALOG})


class CacheEntry(BaseModel):
    """A single cached value with metadata for expiration checking."""

    model_config = ConfigDict(frozen=True)

    key: str
    value: str  # JSON-serialized payload
    created_at: datetime.datetime
    ttl_seconds: int

    def is_expired(self) -> bool:
        """Return True if this entry has exceeded its TTL.

        A ttl_seconds of 0 means the entry never expires (permanent data).
        """
        if self.ttl_seconds == 0:
            return False
        now = datetime.datetime.now(datetime.UTC)
        age = (now - self.created_at).total_seconds()
        return age > self.ttl_seconds


class ServiceCache:
    """Two-tier cache: in-memory dict, plus SQLite for persistent data types.

    Keys follow ``"<source>:<data_type>:<rest>"``, e.g.
    ``"yfinance:prices:AAPL:2015-03-02:2018-03-02"``.

    Usage::

        async with Database("data/tradle.db") as db:
            cache = ServiceCache(database=db)

            cached = await cache.get(key)
            if cached is None:
                rows = await source.fetch(ticker, start, end)
                await cache.set(key, payload, cache.get_ttl(DATA_TYPE_PRICES))
    """

    def __init__(self, database: Database | None = None) -> None:
        self._database = database
        self._memory_cache: dict[str, CacheEntry] = {}
        self._access_count: int = 0

        logger.info(
            "ServiceCache initialized: sqlite=%s",
            "enabled" if database is not None else "disabled",
        )

    async def get(self, key: str) -> str | None:
        """Retrieve a cached value by key.

        Checks in-memory first, then SQLite. Returns None on miss or if the
        entry has expired. Expired entries are lazily removed.
        """
        self._increment_access_count()

        entry = self._memory_cache.get(key)
        if entry is not None:
            if entry.is_expired():
                del self._memory_cache[key]
                logger.debug("Memory cache expired: %s", key)
                return None
            logger.debug("Memory cache hit: %s", key)
            return entry.value

        if self._database is not None:
            entry = await self._sqlite_get(key)
            if entry is not None:
                if entry.is_expired():
                    await self._sqlite_delete(key)
                    logger.debug("SQLite cache expired: %s", key)
                    return None
                logger.debug("SQLite cache hit: %s", key)
                return entry.value

        logger.debug("Cache miss: %s", key)
        return None

    async def set(self, key: str, value: str, ttl_seconds: int) -> None:
        """Store a value, routing persistent data types to SQLite."""
        entry = CacheEntry(
            key=key,
            value=value,
            created_at=datetime.datetime.now(datetime.UTC),
            ttl_seconds=ttl_seconds,
        )

        if self._database is not None and self._should_use_sqlite(key):
            await self._sqlite_set(entry)
            logger.debug("SQLite cache set: %s (ttl=%ds)", key, ttl_seconds)
        else:
            self._memory_cache[key] = entry
            logger.debug("Memory cache set: %s (ttl=%ds)", key, ttl_seconds)

    async def invalidate(self, key: str) -> None:
        """Remove a specific key from both cache tiers."""
        self._memory_cache.pop(key, None)
        if self._database is not None:
            await self._sqlite_delete(key)
        logger.debug("Cache invalidated: %s", key)

    async def invalidate_pattern(self, pattern: str) -> None:
        """Remove all keys matching a pattern from both cache tiers.

        Supports a ``*`` wildcard suffix: ``"yfinance:prices:AAPL:*"``
        removes every cached AAPL window.
        """
        if pattern.endswith("*"):
            prefix = pattern[:-1]
            keys_to_remove = [k for k in self._memory_cache if k.startswith(prefix)]
        else:
            keys_to_remove = [k for k in self._memory_cache if k == pattern]

        for key in keys_to_remove:
            del self._memory_cache[key]

        if self._database is not None:
            if pattern.endswith("*"):
                conn = self._database.connection
                await conn.execute(
                    "DELETE FROM service_cache WHERE key LIKE ?",
                    (pattern[:-1] + "%",),
                )
                await conn.commit()
            else:
                await self._sqlite_delete(pattern)

        logger.debug(
            "Cache invalidated pattern '%s': %d memory entries removed",
            pattern,
            len(keys_to_remove),
        )

    def get_ttl(self, data_type: str) -> int:
        """Return the TTL in seconds for a data type (0 means permanent)."""
        match data_type:
            case "prices":
                return TTL_PRICES_PERMANENT
            case "catalog":
                return TTL_CATALOG
            case "failure":
                return TTL_FAILURE
            case _:
                logger.warning("Unknown data type '%s', using 5-minute TTL", data_type)
                return TTL_DEFAULT

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _should_use_sqlite(self, key: str) -> bool:
        """Persistent data types (prices, catalog) go to SQLite."""
        parts = key.split(":")
        if len(parts) < 2:  # noqa: PLR2004
            return False
        return parts[1] in _SQLITE_DATA_TYPES

    def _increment_access_count(self) -> None:
        """Track accesses and trigger lazy cleanup when threshold is reached."""
        self._access_count += 1
        if self._access_count >= LAZY_CLEANUP_INTERVAL:
            self._access_count = 0
            self._evict_expired_memory_entries()

    def _evict_expired_memory_entries(self) -> None:
        expired_keys = [k for k, v in self._memory_cache.items() if v.is_expired()]
        for key in expired_keys:
            del self._memory_cache[key]
        if expired_keys:
            logger.debug("Lazy cleanup: evicted %d expired memory entries", len(expired_keys))

    # ------------------------------------------------------------------
    # SQLite operations (table created by migration 001)
    # ------------------------------------------------------------------

    async def _sqlite_get(self, key: str) -> CacheEntry | None:
        if self._database is None:
            return None
        conn = self._database.connection
        cursor = await conn.execute(
            "SELECT key, value, created_at, ttl_seconds FROM service_cache WHERE key = ?",
            (key,),
        )
        row = await cursor.fetchone()
        if row is None:
            return None
        return CacheEntry(
            key=row[0],
            value=row[1],
            created_at=datetime.datetime.fromisoformat(row[2]),
            ttl_seconds=row[3],
        )

    async def _sqlite_set(self, entry: CacheEntry) -> None:
        if self._database is None:
            return
        conn = self._database.connection
        await conn.execute(
            "INSERT OR REPLACE INTO service_cache (key, value, created_at, ttl_seconds) "
            "VALUES (?, ?, ?, ?)",
            (entry.key, entry.value, entry.created_at.isoformat(), entry.ttl_seconds),
        )
        await conn.commit()

    async def _sqlite_delete(self, key: str) -> None:
        if self._database is None:
            return
        conn = self._database.connection
        await conn.execute("DELETE FROM service_cache WHERE key = ?", (key,))
        await conn.commit()

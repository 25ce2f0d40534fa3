"""Cache abstractions and the shared meal analysis cache."""

import hashlib
import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import UTC, datetime, timedelta
from typing import Protocol

from macro_ledger.domain.meals import AnalysisResult

ANALYSIS_TTL_SECONDS = 24 * 60 * 60

_logger = logging.getLogger(__name__)


def _utc_now() -> datetime:
    return datetime.now(tz=UTC)


class Cache(Protocol):
    """Cache interface for simple key-value data."""

    def get(self, key: str) -> object | None:
        """Return a cached value if present and not expired."""

    def set(self, key: str, value: object, ttl_seconds: int) -> None:
        """Store a cached value with a TTL in seconds."""


@dataclass
class _CacheEntry:
    value: object
    stored_at: datetime
    ttl: timedelta


@dataclass
class InMemoryCache(Cache):
    """In-memory cache with expiry checked at read time."""

    clock: Callable[[], datetime] = _utc_now
    _entries: dict[str, _CacheEntry] = field(default_factory=dict)

    def get(self, key: str) -> object | None:
        """Return a cached value unless it is older than its TTL."""
        entry = self._entries.get(key)
        if entry is None:
            return None
        if self.clock() - entry.stored_at > entry.ttl:
            self._entries.pop(key, None)
            return None
        return entry.value

    def set(self, key: str, value: object, ttl_seconds: int) -> None:
        """Store a cached value, resetting its age."""
        self._entries[key] = _CacheEntry(
            value=value,
            stored_at=self.clock(),
            ttl=timedelta(seconds=ttl_seconds),
        )


def normalize_description(description: str) -> str:
    """Case-fold a description and collapse its whitespace."""
    return " ".join(description.casefold().split())


def analysis_cache_key(description: str) -> str:
    digest = hashlib.sha256(normalize_description(description).encode("utf-8"))
    return f"analysis:{digest.hexdigest()}"


@dataclass
class AnalysisCache:
    """Analysis results keyed by normalized description, shared by all users.

    Failures of the backing cache are logged and never raised: a failed
    lookup is a miss and a failed store means the next request recomputes.
    """

    cache: Cache
    ttl_seconds: int = ANALYSIS_TTL_SECONDS

    def lookup(self, description: str) -> AnalysisResult | None:
        """Return a fresh cached estimate for the description, if any."""
        try:
            cached = self.cache.get(analysis_cache_key(description))
        except Exception:
            _logger.warning("Analysis cache lookup failed", exc_info=True)
            return None
        if isinstance(cached, AnalysisResult):
            return cached
        return None

    def store(self, description: str, result: AnalysisResult) -> None:
        """Insert or overwrite the estimate for the description."""
        try:
            self.cache.set(
                analysis_cache_key(description), result, ttl_seconds=self.ttl_seconds
            )
        except Exception:
            _logger.warning("Analysis cache store failed", exc_info=True)

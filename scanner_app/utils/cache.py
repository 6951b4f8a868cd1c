"""
TTL-based in-memory cache for analysis results.

The cache is an ordinary object owned by whoever constructs it; there is no
process-wide instance. The clock is injectable so expiry is testable.
"""
import time
from dataclasses import dataclass
from typing import Any, Callable, Optional


@dataclass(frozen=True)
class CacheEntry:
    """Cached value with its absolute expiry time."""
    value: Any
    stored_at: float
    expires_at: float


class TTLCache:
    """
    Simple time-to-live cache backed by a plain dict.
    Not thread-safe; give each worker its own instance.
    """

    def __init__(self, default_ttl: float = 300.0,
                 clock: Optional[Callable[[], float]] = None):
        self._default_ttl = default_ttl
        self._clock = clock or time.monotonic
        self._store: dict[str, CacheEntry] = {}

    def get(self, key: str) -> Optional[Any]:
        """Return cached value if still within TTL, else None."""
        entry = self.get_entry(key)
        return entry.value if entry is not None else None

    def get_entry(self, key: str) -> Optional[CacheEntry]:
        """Return the live cache entry for key, evicting it once expired."""
        entry = self._store.get(key)
        if entry is None:
            return None
        if self._clock() >= entry.expires_at:
            del self._store[key]
            return None
        return entry

    def put(self, key: str, value: Any, ttl: Optional[float] = None) -> None:
        """Store value for ttl seconds (default TTL when omitted)."""
        now = self._clock()
        lifetime = self._default_ttl if ttl is None else ttl
        self._store[key] = CacheEntry(value=value, stored_at=now, expires_at=now + lifetime)

    def invalidate(self, key: str) -> None:
        """Invalidate a single cache entry."""
        self._store.pop(key, None)

    def clear(self) -> None:
        """Invalidate all cached entries."""
        self._store.clear()

    def __len__(self) -> int:
        return len(self._store)

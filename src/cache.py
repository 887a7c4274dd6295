"""
In-memory key-value cache with per-entry expiry.

One cache instance is constructed per process and handed to the services
that need it (dictionary loader, game service).
"""

import time
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Optional, Tuple


GAME_CACHE_TTL = 24 * 60 * 60
DICTIONARY_CACHE_TTL = 7 * 24 * 60 * 60


@dataclass
class TTLCache:
    """
    Key-value store whose entries expire after a time-to-live.

    Attributes:
        default_ttl: Seconds an entry lives unless set() overrides it
        check_period: Seconds between sweeps of expired entries
        clock: Time source, monotonic by default

    Usage:
        cache = TTLCache(default_ttl=600)
        cache.set(game_key('2024-11-01'), game)
        game = cache.get(game_key('2024-11-01'))
    """
    default_ttl: float = GAME_CACHE_TTL
    check_period: float = 600
    clock: Callable[[], float] = time.monotonic
    _entries: Dict[str, Tuple[Any, float]] = field(
        default_factory=dict, init=False, repr=False
    )
    _last_sweep: float = field(default=0.0, init=False, repr=False)

    def __post_init__(self):
        self._last_sweep = self.clock()

    def get(self, key: str, default: Any = None) -> Any:
        """Return the cached value, or default if missing or expired."""
        self._maybe_sweep()
        entry = self._entries.get(key)
        if entry is None:
            return default

        value, expires_at = entry
        if expires_at <= self.clock():
            del self._entries[key]
            return default
        return value

    def set(self, key: str, value: Any, ttl: Optional[float] = None) -> None:
        """Store a value. Values are kept by reference, not copied."""
        ttl = self.default_ttl if ttl is None else ttl
        self._entries[key] = (value, self.clock() + ttl)

    def delete(self, key: str) -> bool:
        """Remove a key; returns True if it was present."""
        return self._entries.pop(key, None) is not None

    def clear(self) -> None:
        """Remove all entries."""
        self._entries.clear()

    def _maybe_sweep(self) -> None:
        now = self.clock()
        if now - self._last_sweep < self.check_period:
            return
        expired = [k for k, (_, exp) in self._entries.items() if exp <= now]
        for key in expired:
            del self._entries[key]
        self._last_sweep = now

    def __contains__(self, key: str) -> bool:
        return self.get(key, _MISSING) is not _MISSING

    def __len__(self) -> int:
        now = self.clock()
        return sum(1 for _, exp in self._entries.values() if exp > now)


_MISSING = object()


def game_key(game_id: str) -> str:
    return f"game:{game_id}"


def dictionary_key(dictionary_name: str) -> str:
    return f"dictionary:{dictionary_name}"

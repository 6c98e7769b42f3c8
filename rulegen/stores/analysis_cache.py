"""In-memory TTL cache for corpus analysis results."""

from __future__ import annotations

import time
from dataclasses import dataclass
from typing import Callable, Dict, Generic, Optional, TypeVar

from ..config import DEFAULT_CACHE_TTL

T = TypeVar("T")

Clock = Callable[[], float]


@dataclass
class _Entry(Generic[T]):
    value: T
    stored_at: float


class AnalysisCache(Generic[T]):
    """Stores one analysis per repository identity for ``ttl`` seconds."""

    def __init__(self, *, ttl: float = DEFAULT_CACHE_TTL, clock: Clock | None = None) -> None:
        self.ttl = ttl
        self._clock = clock or time.monotonic
        self._entries: Dict[str, _Entry[T]] = {}

    def get(self, key: str) -> Optional[T]:
        entry = self._entries.get(key)
        if entry is None:
            return None
        if self._clock() - entry.stored_at >= self.ttl:
            self._entries.pop(key, None)
            return None
        return entry.value

    def store(self, key: str, value: T) -> None:
        self._entries[key] = _Entry(value=value, stored_at=self._clock())

    def invalidate(self, key: str) -> None:
        self._entries.pop(key, None)

    def prune(self) -> int:
        """Drop expired entries and return how many were removed."""
        now = self._clock()
        expired = [key for key, entry in self._entries.items() if now - entry.stored_at >= self.ttl]
        for key in expired:
            self._entries.pop(key, None)
        return len(expired)

    def clear(self) -> None:
        self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: object) -> bool:
        return isinstance(key, str) and self.get(key) is not None


__all__ = ["AnalysisCache"]

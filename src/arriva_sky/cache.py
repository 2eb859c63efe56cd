"""Single-slot, TTL-bound memo of the composed payload.

The slot is process-local: separate API workers each hold their own copy, so
responses from different instances may differ by up to one TTL.
"""

from __future__ import annotations

import threading
import time
from collections.abc import Callable
from dataclasses import dataclass

from .models import WeatherPayload


@dataclass(frozen=True, slots=True)
class CacheEntry:
    payload: WeatherPayload
    timestamp_ms: int


class ResponseCache:
    """Holds at most one payload, for ``ttl_seconds`` measured on ``clock``."""

    def __init__(
        self,
        ttl_seconds: float = 300.0,
        clock: Callable[[], float] = time.time,
    ) -> None:
        if ttl_seconds <= 0:
            raise ValueError("ttl_seconds must be > 0.")
        self.ttl_ms = int(ttl_seconds * 1000)
        self._clock = clock
        self._entry: CacheEntry | None = None
        self._lock = threading.Lock()

    def now_ms(self) -> int:
        return int(self._clock() * 1000)

    @property
    def entry(self) -> CacheEntry | None:
        return self._entry

    def get(self) -> WeatherPayload | None:
        """Return the stored payload marked ``cached`` while it is fresh."""
        with self._lock:
            entry = self._entry
        if entry is None:
            return None
        if self.now_ms() - entry.timestamp_ms >= self.ttl_ms:
            return None
        return entry.payload.model_copy(update={"cached": True})

    def set(self, payload: WeatherPayload, now_ms: int | None = None) -> CacheEntry:
        entry = CacheEntry(
            payload=payload.model_copy(update={"cached": False}),
            timestamp_ms=self.now_ms() if now_ms is None else now_ms,
        )
        with self._lock:
            self._entry = entry
        return entry

    def clear(self) -> None:
        with self._lock:
            self._entry = None

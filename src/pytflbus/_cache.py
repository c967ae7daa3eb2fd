"""Arrivals cache with a time-to-live.

Lets a re-selected stop show its last arrival board immediately while a
fresh fetch runs in the background.
"""

from __future__ import annotations

import time
from collections.abc import Callable
from dataclasses import dataclass

from pytflbus.models.arrival import BusArrival


@dataclass(frozen=True)
class ArrivalsCacheEntry:
    arrivals: tuple[BusArrival, ...]
    stored_at: float


class ArrivalsCache:
    """Per-stop arrival lists, valid for *ttl* seconds."""

    def __init__(self, ttl: float = 60.0, *, clock: Callable[[], float] = time.monotonic) -> None:
        self._ttl = ttl
        self._clock = clock
        self._entries: dict[str, ArrivalsCacheEntry] = {}

    def put(self, stop_id: str, arrivals: list[BusArrival] | tuple[BusArrival, ...]) -> None:
        self._entries[stop_id] = ArrivalsCacheEntry(arrivals=tuple(arrivals), stored_at=self._clock())

    def get(self, stop_id: str) -> ArrivalsCacheEntry | None:
        """Return the entry for *stop_id* if it is younger than the TTL."""
        entry = self._entries.get(stop_id)
        if entry is None:
            return None
        if self._clock() - entry.stored_at >= self._ttl:
            del self._entries[stop_id]
            return None
        return entry

    def age_seconds(self, stop_id: str) -> float | None:
        entry = self._entries.get(stop_id)
        if entry is None:
            return None
        return self._clock() - entry.stored_at

    def invalidate(self, stop_id: str | None = None) -> None:
        if stop_id is None:
            self._entries.clear()
        else:
            self._entries.pop(stop_id, None)

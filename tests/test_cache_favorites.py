from __future__ import annotations

from pytflbus._cache import ArrivalsCache
from pytflbus.favorites import InMemoryFavorites, toggle_favorite
from pytflbus.models.arrival import BusArrival


class _Clock:
    def __init__(self) -> None:
        self.now = 1000.0

    def __call__(self) -> float:
        return self.now


def _arrival(line: str, seconds: int) -> BusArrival:
    return BusArrival(line_name=line, time_to_station=seconds)


def test_cache_returns_entry_within_ttl() -> None:
    clock = _Clock()
    cache = ArrivalsCache(60.0, clock=clock)
    cache.put("S1", [_arrival("73", 30)])

    clock.now += 59.0
    entry = cache.get("S1")

    assert entry is not None
    assert [a.line_name for a in entry.arrivals] == ["73"]
    assert cache.age_seconds("S1") == 59.0


def test_cache_expires_at_ttl() -> None:
    clock = _Clock()
    cache = ArrivalsCache(60.0, clock=clock)
    cache.put("S1", [_arrival("73", 30)])

    clock.now += 60.0

    assert cache.get("S1") is None
    assert cache.age_seconds("S1") is None


def test_cache_invalidate() -> None:
    cache = ArrivalsCache()
    cache.put("S1", [])
    cache.put("S2", [])

    cache.invalidate("S1")
    assert cache.get("S1") is None
    assert cache.get("S2") is not None

    cache.invalidate()
    assert cache.get("S2") is None


def test_in_memory_favorites_keeps_order_and_ignores_duplicates() -> None:
    favorites = InMemoryFavorites(["A", "B", "A"])
    favorites.add("C")
    favorites.add("")

    assert favorites.list() == ["A", "B", "C"]
    favorites.remove("B")
    favorites.remove("missing")
    assert favorites.list() == ["A", "C"]


def test_toggle_favorite() -> None:
    favorites = InMemoryFavorites()

    assert toggle_favorite(favorites, "490000077E") is True
    assert favorites.is_favorite("490000077E")
    assert toggle_favorite(favorites, "490000077E") is False
    assert not favorites.is_favorite("490000077E")

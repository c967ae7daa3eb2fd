"""Bus tracker facade.

Wires a :class:`~pytflbus.client.TflClient` to the map engine: nearby
lookups and searches publish stop layers, selecting a stop starts the
arrivals and vehicle pollers for it, and favourites go through an
injected :class:`~pytflbus.favorites.FavoritesPort`.
"""

from __future__ import annotations

import asyncio
import contextlib
import logging
import time
from collections.abc import Callable
from typing import Protocol

from pytflbus._cache import ArrivalsCache
from pytflbus.config import MapConfig, TflConfig
from pytflbus.exceptions import TflError
from pytflbus.favorites import FavoritesPort, InMemoryFavorites, toggle_favorite
from pytflbus.map.engine import LiveMap, MapFrame
from pytflbus.map.entities import buses_to_entities, stops_to_entities
from pytflbus.map.types import GeoPoint, ViewportSize
from pytflbus.models.arrival import BusArrival
from pytflbus.models.bus import BusLocation
from pytflbus.models.stop import BusStop
from pytflbus.poller import LivePoller
from pytflbus.search import StopSearch
from pytflbus.state.events import EntityLayer, IngestionSource
from pytflbus.state.store import EntityStore

_logger = logging.getLogger(__name__)

ArrivalsListener = Callable[[str, tuple[BusArrival, ...]], None]


class TrackerClient(Protocol):
    async def search_stops(self, query: str, *, timeout: float | None = None) -> list[BusStop]:
        ...

    async def get_nearby_stops(self, lat: float, lon: float, *, radius: int | None = None) -> list[BusStop]:
        ...

    async def get_arrivals(self, stop_id: str) -> list[BusArrival]:
        ...

    async def get_bus_locations(self, stop_id: str) -> list[BusLocation]:
        ...


class BusTracker:
    """Dashboard state for one user session.

    Usage::

        async with TflClient(config) as client:
            tracker = BusTracker(client, config=config)
            stops = await tracker.locate(GeoPoint(51.5074, -0.1278))
            tracker.select_stop(stops[0])
            ...
            await tracker.aclose()
    """

    def __init__(
        self,
        client: TrackerClient,
        *,
        config: TflConfig | None = None,
        map_config: MapConfig | None = None,
        favorites: FavoritesPort | None = None,
        store: EntityStore | None = None,
        size: ViewportSize | None = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._client = client
        self._config = config or TflConfig()
        self._store = store or EntityStore()
        self._map = LiveMap(map_config, size=size, store=self._store)
        self._favorites: FavoritesPort = favorites if favorites is not None else InMemoryFavorites()
        self._cache = ArrivalsCache(self._config.arrivals_cache_ttl, clock=clock)
        self._search = StopSearch(
            client,
            debounce=self._config.search_debounce,
            timeout=self._config.search_timeout,
        )
        self._arrivals_poller: LivePoller[list[BusArrival]] = LivePoller(
            client.get_arrivals,
            self._on_arrivals,
            interval=self._config.arrivals_poll_interval,
            empty=list,
            name="arrivals",
        )
        self._vehicle_poller: LivePoller[list[BusLocation]] = LivePoller(
            client.get_bus_locations,
            self._on_buses,
            interval=self._config.vehicle_poll_interval,
            empty=list,
            name="vehicles",
        )
        self._nearby: tuple[BusStop, ...] = ()
        self._search_results: tuple[BusStop, ...] = ()
        self._nearby_task: asyncio.Task[list[BusStop]] | None = None
        self._nearby_generation = 0
        self._selected: BusStop | None = None
        self._arrivals: tuple[BusArrival, ...] = ()
        self._arrivals_updated_at: float | None = None
        self._clock = clock
        self._listeners: list[ArrivalsListener] = []
        self.last_error: str | None = None

    # ------------------------------------------------------------------
    # Accessors
    # ------------------------------------------------------------------

    @property
    def map(self) -> LiveMap:
        return self._map

    @property
    def store(self) -> EntityStore:
        return self._store

    @property
    def selected_stop(self) -> BusStop | None:
        return self._selected

    @property
    def nearby_stops(self) -> tuple[BusStop, ...]:
        return self._nearby

    @property
    def search_results(self) -> tuple[BusStop, ...]:
        return self._search_results

    @property
    def arrivals(self) -> tuple[BusArrival, ...]:
        return self._arrivals

    @property
    def arrivals_age(self) -> float | None:
        """Seconds since the arrivals shown were fetched."""
        if self._arrivals_updated_at is None:
            return None
        return self._clock() - self._arrivals_updated_at

    def frame(self) -> MapFrame:
        return self._map.frame()

    def on_arrivals(self, listener: ArrivalsListener) -> Callable[[], None]:
        self._listeners.append(listener)

        def _unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _unsubscribe

    # ------------------------------------------------------------------
    # Stops
    # ------------------------------------------------------------------

    def _publish_stops(self, source: IngestionSource) -> None:
        # Search results that are also nearby are drawn once, nearby first.
        nearby_ids = {stop.id for stop in self._nearby}
        merged = list(self._nearby) + [stop for stop in self._search_results if stop.id not in nearby_ids]
        self._store.replace(EntityLayer.STOPS, stops_to_entities(merged), source=source)

    async def locate(self, point: GeoPoint, *, radius: int | None = None) -> list[BusStop]:
        """Record the user's position and load the stops around it.

        A newer lookup supersedes this one: its request is aborted and
        ``[]`` is returned.  Failures leave an empty nearby list and set
        :attr:`last_error`; they never raise.
        """
        previous = self._nearby_task
        if previous is not None and not previous.done():
            previous.cancel()

        self._nearby_generation += 1
        generation = self._nearby_generation
        self.clear_selection()
        self._map.set_user_location(point)
        task = asyncio.get_running_loop().create_task(
            self._client.get_nearby_stops(point.latitude, point.longitude, radius=radius)
        )
        self._nearby_task = task
        try:
            stops = await task
        except asyncio.CancelledError:
            if task.cancelled() and generation != self._nearby_generation:
                return []
            raise
        except TflError as exc:
            _logger.warning("Nearby stop lookup failed: %s", exc)
            self.last_error = "Failed to find nearby bus stops. Please try again."
            stops = []
        else:
            self.last_error = None if stops else "No bus stops were found near your location."
        finally:
            if self._nearby_task is task:
                self._nearby_task = None

        if generation != self._nearby_generation:
            _logger.debug("Discarding superseded nearby lookup")
            return []
        self._nearby = tuple(stops)
        self._publish_stops(IngestionSource.NEARBY)
        return stops

    async def search(self, query: str) -> list[BusStop] | None:
        """Search stops; ``None`` means a newer search replaced this one.

        Only searches supersede searches; a nearby lookup finishing in the
        meantime is merged with the results.
        """
        results = await self._search.search(query)
        if results is None:
            return None
        self._search_results = tuple(results)
        self._publish_stops(IngestionSource.SEARCH)
        return results

    # ------------------------------------------------------------------
    # Selection and live data
    # ------------------------------------------------------------------

    def select_stop(self, stop: BusStop) -> None:
        """Follow *stop* on the map and start its live pollers.

        Cached arrivals younger than ``arrivals_cache_ttl`` are shown at
        once; the pollers refresh them immediately either way.
        """
        self._selected = stop
        self._map.select_stop(stop)
        self._store.clear(EntityLayer.VEHICLES, source=IngestionSource.POLL)

        cached = self._cache.get(stop.id)
        if cached is not None:
            self._set_arrivals(stop.id, cached.arrivals, updated_at=cached.stored_at)
        else:
            self._set_arrivals(stop.id, (), updated_at=None)

        self._arrivals_poller.start(stop.id)
        self._vehicle_poller.start(stop.id)

    def clear_selection(self) -> None:
        self._arrivals_poller.stop()
        self._vehicle_poller.stop()
        if self._selected is None:
            return
        self._selected = None
        self._arrivals = ()
        self._arrivals_updated_at = None
        self._store.clear(EntityLayer.VEHICLES, source=IngestionSource.POLL)
        self._map.clear_selection()

    async def refresh_arrivals(self) -> None:
        await self._arrivals_poller.refresh()

    def _set_arrivals(self, stop_id: str, arrivals: tuple[BusArrival, ...], *, updated_at: float | None) -> None:
        self._arrivals = arrivals
        self._arrivals_updated_at = updated_at
        for listener in list(self._listeners):
            try:
                listener(stop_id, arrivals)
            except Exception:
                _logger.debug("Arrivals listener failed", exc_info=True)

    def _on_arrivals(self, stop_id: str, arrivals: list[BusArrival]) -> None:
        if self._selected is None or self._selected.id != stop_id:
            return
        ordered = tuple(sorted(arrivals, key=lambda arrival: arrival.time_to_station))
        if ordered:
            self._cache.put(stop_id, ordered)
        self._set_arrivals(stop_id, ordered, updated_at=self._clock())

    def _on_buses(self, stop_id: str, buses: list[BusLocation]) -> None:
        if self._selected is None or self._selected.id != stop_id:
            return
        self._store.replace(
            EntityLayer.VEHICLES,
            buses_to_entities(buses),
            source=IngestionSource.POLL,
            key=stop_id,
        )

    # ------------------------------------------------------------------
    # Favourites
    # ------------------------------------------------------------------

    def favorites(self) -> list[str]:
        return self._favorites.list()

    def is_favorite(self, stop_id: str) -> bool:
        return self._favorites.is_favorite(stop_id)

    def toggle_favorite(self, stop_id: str) -> bool:
        return toggle_favorite(self._favorites, stop_id)

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    async def aclose(self) -> None:
        self._search.cancel()
        task = self._nearby_task
        self._nearby_task = None
        if task is not None and not task.done():
            task.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await task
        await self._arrivals_poller.aclose()
        await self._vehicle_poller.aclose()
        self._map.close()

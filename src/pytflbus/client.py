"""High-level async client for the TfL bus endpoints."""

from __future__ import annotations

import logging
from typing import Any

import aiohttp

from pytflbus._api import stop_points as _stop_api
from pytflbus._api import vehicles as _vehicle_api
from pytflbus._transport import HttpTransport, Transport
from pytflbus.config import TflConfig
from pytflbus.exceptions import TflError
from pytflbus.models.arrival import BusArrival
from pytflbus.models.bus import BusLocation
from pytflbus.models.stop import BusStop

_logger = logging.getLogger(__name__)


class TflClient:
    """Async client for the TfL unified API (bus subset).

    Usage::

        async with TflClient(TflConfig.from_env()) as client:
            stops = await client.get_nearby_stops(51.5074, -0.1278)
            arrivals = await client.get_arrivals(stops[0].id)
    """

    def __init__(
        self,
        config: TflConfig | None = None,
        *,
        session: aiohttp.ClientSession | None = None,
        transport: Transport | None = None,
    ) -> None:
        self._config = config or TflConfig()
        self._external_session = session is not None
        self._http_session = session
        self._transport: Transport | None = transport

    @property
    def config(self) -> TflConfig:
        return self._config

    # ------------------------------------------------------------------
    # Context manager lifecycle
    # ------------------------------------------------------------------

    async def __aenter__(self) -> TflClient:
        if self._transport is None:
            if self._http_session is None:
                self._http_session = aiohttp.ClientSession()
            self._transport = HttpTransport(self._config, self._http_session)
        return self

    async def __aexit__(self, *exc: Any) -> None:
        if not self._external_session and self._http_session is not None:
            await self._http_session.close()
            self._http_session = None
            self._transport = None

    def _require_transport(self) -> Transport:
        if self._transport is None:
            raise TflError("Client not initialized. Use 'async with TflClient(...) as client:'")
        return self._transport

    # ------------------------------------------------------------------
    # Stops
    # ------------------------------------------------------------------

    async def search_stops(self, query: str, *, timeout: float | None = None) -> list[BusStop]:
        """Search bus stops by name (de-duplicated, at most ``search_result_limit``)."""
        return await _stop_api.search_stops(self._config, self._require_transport(), query, timeout=timeout)

    async def get_nearby_stops(self, lat: float, lon: float, *, radius: int | None = None) -> list[BusStop]:
        """Bus stops around a coordinate, nearest first."""
        return await _stop_api.nearby_stops(self._config, self._require_transport(), lat, lon, radius=radius)

    async def get_arrivals(self, stop_id: str) -> list[BusArrival]:
        """Live arrival predictions for a stop, soonest first."""
        return await _stop_api.stop_arrivals(self._require_transport(), stop_id)

    # ------------------------------------------------------------------
    # Vehicles
    # ------------------------------------------------------------------

    async def get_vehicle_location(self, vehicle_id: str) -> BusLocation | None:
        return await _vehicle_api.vehicle_location(self._require_transport(), vehicle_id)

    async def get_bus_locations(self, stop_id: str) -> list[BusLocation]:
        """Positions of the buses heading to *stop_id* (see ``tracked_vehicle_limit``)."""
        return await _vehicle_api.bus_locations(self._config, self._require_transport(), stop_id)

"""StopPoint endpoints.

Endpoints:
  - /StopPoint/Search           (stop search by text)
  - /StopPoint                  (stops within a radius)
  - /StopPoint/{id}/Arrivals    (arrival predictions)
"""

from __future__ import annotations

import logging

from pytflbus._api._common import expect_list, expect_object, list_field, parse_items, path_segment
from pytflbus._transport import Transport
from pytflbus.config import TflConfig
from pytflbus.ingestion.normalize import dedupe_by
from pytflbus.models.arrival import BusArrival
from pytflbus.models.stop import BusStop

_logger = logging.getLogger(__name__)


async def search_stops(
    config: TflConfig,
    transport: Transport,
    query: str,
    *,
    timeout: float | None = None,
) -> list[BusStop]:
    """Search bus stops by name.

    Matches are de-duplicated by name (the first occurrence wins, so one
    entry per stop pair) and cut to ``config.search_result_limit``.
    """
    text = query.strip() if query else ""
    if not text:
        raise ValueError("query is required")

    endpoint = "/StopPoint/Search"
    payload = expect_object(
        await transport.get_json(
            endpoint,
            {"query": text, "modes": "bus", "maxResults": config.search_max_results},
            timeout=timeout,
        ),
        endpoint=endpoint,
    )
    matches = list_field(payload, "matches")
    unique = dedupe_by(matches, "name")[: config.search_result_limit]
    _logger.debug("Search %r: %d match(es), %d unique kept", text, len(matches), len(unique))
    return parse_items(unique, BusStop.from_search_match, endpoint=endpoint)


async def nearby_stops(
    config: TflConfig,
    transport: Transport,
    lat: float,
    lon: float,
    *,
    radius: int | None = None,
) -> list[BusStop]:
    """Bus stops within *radius* metres of ``(lat, lon)``, nearest first."""
    endpoint = "/StopPoint"
    payload = expect_object(
        await transport.get_json(
            endpoint,
            {
                "stopTypes": config.stop_types,
                "radius": radius if radius is not None else config.nearby_radius,
                "lat": lat,
                "lon": lon,
            },
        ),
        endpoint=endpoint,
    )
    stops = parse_items(list_field(payload, "stopPoints"), BusStop.model_validate, endpoint=endpoint)
    stops.sort(key=lambda stop: stop.distance if stop.distance is not None else float("inf"))
    return stops


async def stop_arrivals(transport: Transport, stop_id: str) -> list[BusArrival]:
    """Arrival predictions for a stop, soonest first."""
    endpoint = f"/StopPoint/{path_segment(stop_id, name='stop_id')}/Arrivals"
    items = expect_list(await transport.get_json(endpoint), endpoint=endpoint)
    arrivals = parse_items(items, BusArrival.model_validate, endpoint=endpoint)
    arrivals.sort(key=lambda arrival: arrival.time_to_station)
    return arrivals

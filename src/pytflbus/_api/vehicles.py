"""Vehicle endpoints.

Endpoints:
  - /Vehicle/{id}/Arrivals  (predictions for one vehicle, used for its position)
"""

from __future__ import annotations

import asyncio
import logging

from pytflbus._api._common import expect_list, parse_items, path_segment
from pytflbus._api.stop_points import stop_arrivals
from pytflbus._transport import Transport
from pytflbus.config import TflConfig
from pytflbus.exceptions import TflError
from pytflbus.models.bus import BusLocation

_logger = logging.getLogger(__name__)


async def vehicle_location(transport: Transport, vehicle_id: str) -> BusLocation | None:
    """Position of one vehicle, from the first of its predictions.

    Returns ``None`` when the vehicle has no predictions or the first one
    is malformed.
    """
    segment = path_segment(vehicle_id, name="vehicle_id")
    endpoint = f"/Vehicle/{segment}/Arrivals"
    items = expect_list(await transport.get_json(endpoint), endpoint=endpoint)
    if not items:
        return None
    located = parse_items(
        items[:1],
        lambda prediction: BusLocation.from_prediction(vehicle_id, prediction),
        endpoint=endpoint,
    )
    return located[0] if located else None


async def _vehicle_location_or_none(transport: Transport, vehicle_id: str) -> BusLocation | None:
    try:
        return await vehicle_location(transport, vehicle_id)
    except TflError:
        _logger.debug("Locating vehicle %s failed", vehicle_id, exc_info=True)
        return None


async def bus_locations(config: TflConfig, transport: Transport, stop_id: str) -> list[BusLocation]:
    """Live positions of the buses due at *stop_id*.

    Vehicle ids come from the stop's arrivals; at most
    ``config.tracked_vehicle_limit`` distinct vehicles are located,
    concurrently.  Vehicles that fail to resolve are left out.
    """
    arrivals = await stop_arrivals(transport, stop_id)
    vehicle_ids: list[str] = []
    for arrival in arrivals:
        if arrival.vehicle_id and arrival.vehicle_id not in vehicle_ids:
            vehicle_ids.append(arrival.vehicle_id)
    tracked = vehicle_ids[: config.tracked_vehicle_limit]
    if not tracked:
        return []

    results = await asyncio.gather(*(_vehicle_location_or_none(transport, vid) for vid in tracked))
    located = [bus for bus in results if bus is not None]
    _logger.debug("Stop %s: located %d of %d tracked bus(es)", stop_id, len(located), len(tracked))
    return located

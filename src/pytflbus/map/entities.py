"""Map entities drawn on top of the tile layer.

Entities are immutable and are always replaced as whole tuples when new
upstream data arrives.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass
from enum import IntEnum

from pytflbus.ingestion.normalize import is_valid_position
from pytflbus.map.types import GeoPoint
from pytflbus.models.bus import BusLocation
from pytflbus.models.stop import BusStop

_logger = logging.getLogger(__name__)


class MarkerLayer(IntEnum):
    """Paint order, back to front."""

    TILES = 0
    STOPS = 1
    USER_LOCATION = 2
    VEHICLES = 3
    SELECTED_STOP = 4


@dataclass(frozen=True, slots=True)
class _EntityBase:
    id: str
    position: GeoPoint
    label: str


@dataclass(frozen=True, slots=True)
class StopEntity(_EntityBase):
    indicator: str | None = None
    distance: float | None = None

    @property
    def layer(self) -> MarkerLayer:
        return MarkerLayer.STOPS


@dataclass(frozen=True, slots=True)
class VehicleEntity(_EntityBase):
    line_name: str = ""
    destination: str = ""
    bearing: float | None = None

    @property
    def layer(self) -> MarkerLayer:
        return MarkerLayer.VEHICLES


@dataclass(frozen=True, slots=True)
class UserLocationEntity(_EntityBase):
    @property
    def layer(self) -> MarkerLayer:
        return MarkerLayer.USER_LOCATION


MapEntity = StopEntity | VehicleEntity | UserLocationEntity
"""Everything the marker layer can draw; each variant knows its paint layer."""

USER_LOCATION_ID = "user-location"


def user_location_entity(point: GeoPoint, label: str = "Your Location") -> UserLocationEntity:
    return UserLocationEntity(id=USER_LOCATION_ID, position=point, label=label)


def stop_entity(stop: BusStop) -> StopEntity | None:
    """Convert a stop, or return ``None`` when it has no usable position."""
    if not stop.id or not is_valid_position(stop.lat, stop.lon):
        return None
    assert stop.lat is not None and stop.lon is not None  # noqa: S101
    return StopEntity(
        id=stop.id,
        position=GeoPoint(stop.lat, stop.lon),
        label=stop.common_name,
        indicator=stop.indicator,
        distance=stop.distance,
    )


def vehicle_entity(bus: BusLocation) -> VehicleEntity | None:
    """Convert a bus position, or return ``None`` when it has no usable position."""
    if not is_valid_position(bus.lat, bus.lon):
        return None
    assert bus.lat is not None and bus.lon is not None  # noqa: S101
    bearing = bus.bearing % 360.0 if bus.bearing is not None else None
    return VehicleEntity(
        id=bus.id or bus.vehicle_id,
        position=GeoPoint(bus.lat, bus.lon),
        label=bus.line_name,
        line_name=bus.line_name,
        destination=bus.destination,
        bearing=bearing,
    )


def stops_to_entities(stops: Iterable[BusStop]) -> tuple[StopEntity, ...]:
    """Convert stops, dropping entries without a position and duplicate ids."""
    entities: list[StopEntity] = []
    seen: set[str] = set()
    dropped = 0
    for stop in stops:
        entity = stop_entity(stop)
        if entity is None:
            dropped += 1
            continue
        if entity.id in seen:
            continue
        seen.add(entity.id)
        entities.append(entity)
    if dropped:
        _logger.debug("Dropped %d stop(s) without a usable position", dropped)
    return tuple(entities)


def buses_to_entities(buses: Iterable[BusLocation]) -> tuple[VehicleEntity, ...]:
    """Convert bus positions, dropping entries without a position."""
    entities: list[VehicleEntity] = []
    dropped = 0
    for bus in buses:
        entity = vehicle_entity(bus)
        if entity is None:
            dropped += 1
            continue
        entities.append(entity)
    if dropped:
        _logger.debug("Dropped %d bus(es) without a usable position", dropped)
    return tuple(entities)

"""Web Mercator projection math.

Pure functions: world pixels at zoom ``z`` live on a square of
``tile_size * 2**z`` pixels, with ``(0, 0)`` at 180°W / ~85.05°N.
Longitude maps linearly; latitude goes through ``ln(tan(π/4 + φ/2))``.

Callers clamp latitude to ±85° before projecting.  Exactly ±90° still
yields a defined value (the top or bottom world edge) rather than an
exception.
"""

from __future__ import annotations

import math
from typing import TYPE_CHECKING

from pytflbus._constants import MAX_LATITUDE, TILE_SIZE
from pytflbus.map.types import GeoPoint, ScreenPoint, TileCoordinate, ViewportSize, WorldPixel

if TYPE_CHECKING:
    from pytflbus.map.viewport import ViewportState

__all__ = [
    "clamp_latitude",
    "geo_to_screen",
    "normalize_longitude",
    "project",
    "screen_to_geo",
    "tile_for_point",
    "unproject",
    "world_size",
]


def world_size(zoom: int, tile_size: int = TILE_SIZE) -> float:
    """Edge length in pixels of the world square at *zoom*."""
    return float(tile_size * (2**zoom))


def clamp_latitude(latitude: float, limit: float = MAX_LATITUDE) -> float:
    return max(-limit, min(limit, latitude))


def normalize_longitude(longitude: float) -> float:
    """Wrap *longitude* into the half-open range (-180, 180]."""
    if -180.0 < longitude <= 180.0:
        return longitude
    wrapped = math.fmod(longitude + 180.0, 360.0)
    if wrapped < 0:
        wrapped += 360.0
    wrapped -= 180.0
    if wrapped == -180.0:
        return 180.0
    return wrapped


def project(point: GeoPoint, zoom: int, tile_size: int = TILE_SIZE) -> WorldPixel:
    size = world_size(zoom, tile_size)
    x = (point.longitude + 180.0) / 360.0 * size
    if point.latitude >= 90.0:
        return WorldPixel(x, 0.0)
    if point.latitude <= -90.0:
        return WorldPixel(x, size)
    lat_rad = math.radians(point.latitude)
    merc_n = math.log(math.tan(math.pi / 4.0 + lat_rad / 2.0))
    y = size / 2.0 - size * merc_n / (2.0 * math.pi)
    return WorldPixel(x, y)


def unproject(pixel: WorldPixel, zoom: int, tile_size: int = TILE_SIZE) -> GeoPoint:
    """Inverse of :func:`project`.

    ``y`` is clamped to the world square, so pixels above or below it map
    to the edge latitude (about ±85.05°).  ``x`` is not wrapped.
    """
    size = world_size(zoom, tile_size)
    longitude = pixel.x / size * 360.0 - 180.0
    y = min(max(pixel.y, 0.0), size)
    n = math.pi - 2.0 * math.pi * y / size
    latitude = math.degrees(math.atan(math.sinh(n)))
    return GeoPoint(latitude, longitude)


def geo_to_screen(point: GeoPoint, viewport: ViewportState, size: ViewportSize) -> ScreenPoint:
    """Place *point* on a viewport of *size*.

    The live drag offset is added on top so markers follow the pointer
    before the drag is committed to the centre.
    """
    tile_size = viewport.config.tile_size
    target = project(point, viewport.zoom, tile_size)
    origin = project(viewport.center, viewport.zoom, tile_size)
    return ScreenPoint(
        target.x - origin.x + size.width / 2.0 + viewport.drag_offset.dx,
        target.y - origin.y + size.height / 2.0 + viewport.drag_offset.dy,
    )


def screen_to_geo(screen: ScreenPoint, viewport: ViewportState, size: ViewportSize) -> GeoPoint:
    """Inverse of :func:`geo_to_screen` (no clamping applied)."""
    tile_size = viewport.config.tile_size
    origin = project(viewport.center, viewport.zoom, tile_size)
    return unproject(
        WorldPixel(
            origin.x + screen.x - size.width / 2.0 - viewport.drag_offset.dx,
            origin.y + screen.y - size.height / 2.0 - viewport.drag_offset.dy,
        ),
        viewport.zoom,
        tile_size,
    )


def tile_for_point(point: GeoPoint, zoom: int, tile_size: int = TILE_SIZE) -> TileCoordinate:
    """Tile containing *point*, clamped into ``[0, 2**zoom)`` on both axes.

    The clamp only matters on the world edges (longitude exactly +180 or
    latitude at ±90), which would otherwise floor one tile past the end.
    """
    pixel = project(point, zoom, tile_size)
    last = (1 << zoom) - 1
    x = min(max(math.floor(pixel.x / tile_size), 0), last)
    y = min(max(math.floor(pixel.y / tile_size), 0), last)
    return TileCoordinate(x, y, zoom)

"""Value types for the slippy-map engine."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class GeoPoint:
    """A WGS84 coordinate in degrees."""

    latitude: float
    longitude: float


@dataclass(frozen=True, slots=True)
class WorldPixel:
    """Absolute pixel position on the Mercator world square at some zoom."""

    x: float
    y: float


@dataclass(frozen=True, slots=True)
class ScreenPoint:
    """Pixel position relative to the viewport's top-left corner."""

    x: float
    y: float


@dataclass(frozen=True, slots=True)
class ViewportSize:
    width: float
    height: float


@dataclass(frozen=True, slots=True)
class DragOffset:
    """Screen-space displacement of an in-progress drag."""

    dx: float = 0.0
    dy: float = 0.0

    @property
    def is_zero(self) -> bool:
        return self.dx == 0.0 and self.dy == 0.0


NO_DRAG = DragOffset()


@dataclass(frozen=True, slots=True)
class TileCoordinate:
    """Address of a 256px raster tile."""

    x: int
    y: int
    z: int

    @property
    def is_valid(self) -> bool:
        limit = 1 << self.z
        return 0 <= self.x < limit and 0 <= self.y < limit

    def url(self, template: str) -> str:
        return template.format(z=self.z, x=self.x, y=self.y)

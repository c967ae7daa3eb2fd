"""Viewport state.

:class:`ViewportState` is immutable; every transition returns a new
state with the invariants re-applied:

* zoom within ``[config.min_zoom, config.max_zoom]``
* centre latitude within ±85°
* centre longitude within (-180, 180]

``drag_offset`` is transient and is cleared by every programmatic
recentre and at the end of every gesture.
"""

from __future__ import annotations

import dataclasses
from collections.abc import Iterable
from dataclasses import dataclass, field

from pytflbus.config import MapConfig
from pytflbus.map.entities import MapEntity
from pytflbus.map.projection import clamp_latitude, normalize_longitude, project, unproject
from pytflbus.map.types import NO_DRAG, DragOffset, GeoPoint, WorldPixel


def _clamp_point(point: GeoPoint) -> GeoPoint:
    return GeoPoint(clamp_latitude(point.latitude), normalize_longitude(point.longitude))


@dataclass(frozen=True, slots=True)
class ViewportState:
    center: GeoPoint
    zoom: int
    drag_offset: DragOffset = NO_DRAG
    config: MapConfig = field(default_factory=MapConfig, compare=False)

    def __post_init__(self) -> None:
        # Normalise on construction so no instance can violate the invariants.
        object.__setattr__(self, "center", _clamp_point(self.center))
        object.__setattr__(self, "zoom", self._clamp_zoom(self.zoom))

    @classmethod
    def initial(cls, config: MapConfig | None = None) -> ViewportState:
        config = config or MapConfig()
        lat, lon = config.default_center
        return cls(center=GeoPoint(lat, lon), zoom=config.default_zoom, config=config)

    def _clamp_zoom(self, level: int) -> int:
        return max(self.config.min_zoom, min(self.config.max_zoom, int(level)))

    # ------------------------------------------------------------------
    # Transitions
    # ------------------------------------------------------------------

    def set_center(self, point: GeoPoint) -> ViewportState:
        return dataclasses.replace(self, center=point)

    def set_zoom(self, level: int) -> ViewportState:
        return dataclasses.replace(self, zoom=level)

    def zoom_in(self) -> ViewportState:
        return self.set_zoom(self.zoom + 1)

    def zoom_out(self) -> ViewportState:
        return self.set_zoom(self.zoom - 1)

    def reset_view(self) -> ViewportState:
        """Return to the configured default centre and zoom."""
        lat, lon = self.config.default_center
        return dataclasses.replace(
            self,
            center=GeoPoint(lat, lon),
            zoom=self.config.default_zoom,
            drag_offset=NO_DRAG,
        )

    def recenter_on(self, point: GeoPoint, zoom: int | None = None) -> ViewportState:
        """Jump to *point* (and *zoom*), discarding any drag in progress."""
        return dataclasses.replace(
            self,
            center=point,
            zoom=self.zoom if zoom is None else zoom,
            drag_offset=NO_DRAG,
        )

    def with_drag_offset(self, offset: DragOffset) -> ViewportState:
        return dataclasses.replace(self, drag_offset=offset)

    def commit_drag(self) -> ViewportState:
        """Fold the drag offset into the centre.

        Dragging the map by ``(dx, dy)`` moves the world with the
        pointer, so the new centre is the point that was ``(-dx, -dy)``
        from the screen centre when the drag began.
        """
        if self.drag_offset.is_zero:
            return self
        tile_size = self.config.tile_size
        origin = project(self.center, self.zoom, tile_size)
        moved = WorldPixel(origin.x - self.drag_offset.dx, origin.y - self.drag_offset.dy)
        return dataclasses.replace(
            self,
            center=unproject(moved, self.zoom, tile_size),
            drag_offset=NO_DRAG,
        )


def bounding_box_center(points: Iterable[GeoPoint]) -> GeoPoint | None:
    """Midpoint of the axis-aligned bounding box of *points*."""
    lats: list[float] = []
    lons: list[float] = []
    for point in points:
        lats.append(point.latitude)
        lons.append(point.longitude)
    if not lats:
        return None
    return GeoPoint((max(lats) + min(lats)) / 2.0, (max(lons) + min(lons)) / 2.0)


def auto_center(
    viewport: ViewportState,
    *,
    selected: GeoPoint | None = None,
    user_location: GeoPoint | None = None,
    entities: Iterable[MapEntity] = (),
) -> ViewportState:
    """Pick the centre the map should follow.

    Priority: explicit selection, then the user's location, then the
    bounding-box midpoint of *entities*, then the configured default.
    """
    config = viewport.config
    if selected is not None:
        return viewport.recenter_on(selected, config.selection_zoom)
    if user_location is not None:
        return viewport.recenter_on(user_location, config.user_zoom)
    midpoint = bounding_box_center(entity.position for entity in entities)
    if midpoint is not None:
        return viewport.recenter_on(midpoint, config.overview_zoom)
    return viewport.reset_view()

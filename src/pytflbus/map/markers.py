"""Tile enumeration and marker projection."""

from __future__ import annotations

import math
from collections.abc import Iterable
from dataclasses import dataclass

from pytflbus.map.entities import MapEntity, MarkerLayer, StopEntity
from pytflbus.map.projection import geo_to_screen, project, tile_for_point
from pytflbus.map.types import ScreenPoint, TileCoordinate, ViewportSize
from pytflbus.map.viewport import ViewportState


@dataclass(frozen=True, slots=True)
class TilePlacement:
    tile: TileCoordinate
    left: float
    top: float
    url: str


@dataclass(frozen=True, slots=True)
class ProjectedMarker:
    entity: MapEntity
    screen: ScreenPoint
    layer: MarkerLayer
    selected: bool = False


def tile_grid_shape(size: ViewportSize, tile_size: int) -> tuple[int, int]:
    """Columns and rows of the tile grid covering *size* plus a one-tile border."""
    columns = math.ceil(size.width / tile_size) + 2
    rows = math.ceil(size.height / tile_size) + 2
    return columns, rows


def enumerate_tiles(viewport: ViewportState, size: ViewportSize) -> list[TilePlacement]:
    """Tiles needed to cover the viewport, with their screen placement.

    The grid is ``ceil(w/ts)+2`` by ``ceil(h/ts)+2`` tiles centred on the
    tile under the viewport centre.  Tiles outside ``[0, 2**zoom)`` on
    either axis are skipped; there is no horizontal wrap-around.
    """
    config = viewport.config
    tile_size = config.tile_size
    zoom = viewport.zoom
    center_tile = tile_for_point(viewport.center, zoom, tile_size)
    origin = project(viewport.center, zoom, tile_size)
    columns, rows = tile_grid_shape(size, tile_size)

    # Top-left of world pixel (0, 0) on screen.
    base_left = size.width / 2.0 - origin.x + viewport.drag_offset.dx
    base_top = size.height / 2.0 - origin.y + viewport.drag_offset.dy

    placements: list[TilePlacement] = []
    for dy in range(-(rows // 2), rows - rows // 2):
        for dx in range(-(columns // 2), columns - columns // 2):
            tile = TileCoordinate(center_tile.x + dx, center_tile.y + dy, zoom)
            if not tile.is_valid:
                continue
            placements.append(
                TilePlacement(
                    tile=tile,
                    left=base_left + tile.x * tile_size,
                    top=base_top + tile.y * tile_size,
                    url=tile.url(config.tile_url_template),
                )
            )
    return placements


def is_within_bounds(point: ScreenPoint, size: ViewportSize, margin: float) -> bool:
    """True when *point* lies inside the viewport grown by *margin* on every side."""
    return -margin <= point.x <= size.width + margin and -margin <= point.y <= size.height + margin


def project_markers(
    entities: Iterable[MapEntity],
    viewport: ViewportState,
    size: ViewportSize,
    *,
    selected_stop_id: str | None = None,
    margin: float | None = None,
) -> list[ProjectedMarker]:
    """Screen positions of the visible entities, ordered back to front.

    Entities outside the viewport expanded by *margin* (default
    ``config.cull_margin``) are culled.  The selected stop is promoted to
    its own topmost layer.
    """
    cull_margin = viewport.config.cull_margin if margin is None else margin
    markers: list[ProjectedMarker] = []
    for entity in entities:
        screen = geo_to_screen(entity.position, viewport, size)
        if not is_within_bounds(screen, size, cull_margin):
            continue
        selected = (
            selected_stop_id is not None and isinstance(entity, StopEntity) and entity.id == selected_stop_id
        )
        layer = MarkerLayer.SELECTED_STOP if selected else entity.layer
        markers.append(ProjectedMarker(entity=entity, screen=screen, layer=layer, selected=selected))
    # Stable sort keeps upstream order within a layer.
    markers.sort(key=lambda marker: marker.layer)
    return markers

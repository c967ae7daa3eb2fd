"""The slippy-map engine behind every map widget.

:class:`LiveMap` owns the viewport size, the interaction state, the
current selection and a view onto the :class:`EntityStore`.  Hosts feed
it UI events and read back a :class:`MapFrame` describing what to draw.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from pytflbus.config import MapConfig
from pytflbus.map.entities import MapEntity, StopEntity, stop_entity, user_location_entity
from pytflbus.map.interaction import InteractionController, InteractionState, MapEvent
from pytflbus.map.markers import ProjectedMarker, TilePlacement, enumerate_tiles, project_markers
from pytflbus.map.projection import screen_to_geo
from pytflbus.map.types import GeoPoint, ScreenPoint, ViewportSize
from pytflbus.map.viewport import ViewportState, auto_center
from pytflbus.models.stop import BusStop
from pytflbus.state.events import EntityLayer, IngestionSource
from pytflbus.state.store import EntitySnapshot, EntityStore

_logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class MapFrame:
    viewport: ViewportState
    size: ViewportSize
    tiles: tuple[TilePlacement, ...]
    markers: tuple[ProjectedMarker, ...]
    is_dragging: bool
    snapshot_version: int


class LiveMap:
    """Viewport engine with auto-follow.

    The view recentres by itself whenever the selection, the user's
    location or the set of stops changes (see
    :func:`~pytflbus.map.viewport.auto_center`).  Vehicle refreshes never
    move the view.
    """

    def __init__(
        self,
        config: MapConfig | None = None,
        *,
        size: ViewportSize | None = None,
        store: EntityStore | None = None,
    ) -> None:
        self._config = config or MapConfig()
        self._controller = InteractionController(self._config)
        self._size = size or ViewportSize(800.0, 600.0)
        self._validate_size(self._size)
        self._store = store or EntityStore()
        self._selected: StopEntity | None = None
        self._follow_generations = self._layer_generations(self._store.snapshot)
        self._unsubscribe = self._store.subscribe(self._on_snapshot)

    @staticmethod
    def _validate_size(size: ViewportSize) -> None:
        if size.width <= 0 or size.height <= 0:
            raise ValueError(f"viewport size must be positive, got {size.width}x{size.height}")

    @staticmethod
    def _layer_generations(snapshot: EntitySnapshot) -> tuple[int | None, int | None]:
        return (
            snapshot.layer(EntityLayer.STOPS).generation,
            snapshot.layer(EntityLayer.USER_LOCATION).generation,
        )

    # ------------------------------------------------------------------
    # Accessors
    # ------------------------------------------------------------------

    @property
    def config(self) -> MapConfig:
        return self._config

    @property
    def store(self) -> EntityStore:
        return self._store

    @property
    def size(self) -> ViewportSize:
        return self._size

    @property
    def state(self) -> InteractionState:
        return self._controller.state

    @property
    def viewport(self) -> ViewportState:
        return self._controller.viewport

    @property
    def selected_stop(self) -> StopEntity | None:
        return self._selected

    @property
    def user_location(self) -> GeoPoint | None:
        entity = self._store.snapshot.user_location
        return entity.position if entity is not None else None

    # ------------------------------------------------------------------
    # Inputs
    # ------------------------------------------------------------------

    def resize(self, width: float, height: float) -> None:
        """Host viewport resized; tiles and culling follow on the next frame."""
        size = ViewportSize(float(width), float(height))
        self._validate_size(size)
        self._size = size

    def dispatch(self, event: MapEvent) -> ViewportState:
        return self._controller.dispatch(event)

    def select_stop(self, stop: StopEntity | BusStop | None) -> None:
        """Select *stop* (or clear with ``None``) and follow it.

        A stop without a usable position clears the selection, so the map
        never keeps following a previously selected stop.
        """
        if isinstance(stop, BusStop):
            entity = stop_entity(stop)
            if entity is None:
                _logger.debug("Stop %s has no position; clearing map selection", stop.id)
            stop = entity
        self._selected = stop
        self._follow()

    def clear_selection(self) -> None:
        self.select_stop(None)

    def set_user_location(self, point: GeoPoint | None) -> None:
        entities = () if point is None else (user_location_entity(point),)
        self._store.replace(EntityLayer.USER_LOCATION, entities, source=IngestionSource.GEOLOCATION)

    def screen_to_geo(self, x: float, y: float) -> GeoPoint:
        """Geographic position under a screen pixel (e.g. for click handling)."""
        return screen_to_geo(ScreenPoint(x, y), self.viewport, self._size)

    def close(self) -> None:
        self._unsubscribe()

    # ------------------------------------------------------------------
    # Auto-follow
    # ------------------------------------------------------------------

    def _on_snapshot(self, snapshot: EntitySnapshot) -> None:
        generations = self._layer_generations(snapshot)
        if generations == self._follow_generations:
            return
        self._follow_generations = generations
        self._follow()

    def _follow(self) -> None:
        snapshot = self._store.snapshot
        user = snapshot.user_location
        viewport = auto_center(
            self.viewport,
            selected=self._selected.position if self._selected is not None else None,
            user_location=user.position if user is not None else None,
            entities=snapshot.stops,
        )
        self._controller.replace_viewport(viewport)

    # ------------------------------------------------------------------
    # Output
    # ------------------------------------------------------------------

    def _entities(self, snapshot: EntitySnapshot) -> tuple[MapEntity, ...]:
        entities = snapshot.all_entities()
        selected = self._selected
        if selected is not None and not any(
            isinstance(entity, StopEntity) and entity.id == selected.id for entity in entities
        ):
            entities = entities + (selected,)
        return entities

    def frame(self) -> MapFrame:
        """Everything a presentation layer needs to draw the current view."""
        # Read each reference once so the frame is built from one consistent state.
        snapshot = self._store.snapshot
        state = self._controller.state
        size = self._size
        viewport = state.viewport
        return MapFrame(
            viewport=viewport,
            size=size,
            tiles=tuple(enumerate_tiles(viewport, size)),
            markers=tuple(
                project_markers(
                    self._entities(snapshot),
                    viewport,
                    size,
                    selected_stop_id=self._selected.id if self._selected is not None else None,
                )
            ),
            is_dragging=state.is_dragging,
            snapshot_version=snapshot.version,
        )

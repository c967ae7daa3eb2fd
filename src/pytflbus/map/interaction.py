"""Gesture handling as a pure reducer.

``reduce(state, event) -> state`` maps host UI events onto viewport
transitions.  The drag state machine has two phases:

* ``IDLE --pointer down--> DRAGGING`` records the start position.
* ``DRAGGING --pointer move--> DRAGGING`` sets the viewport's drag offset
  to ``current - start`` without touching the centre.
* ``DRAGGING --pointer up / leave--> IDLE`` commits the offset into the
  centre via the inverse projection and clears it.

Only single-pointer gestures pan; multi-touch is ignored.  Zoom and
reset are direct commands valid in either phase and never cancel a drag.
Events are applied strictly in delivery order; nothing is debounced.
"""

from __future__ import annotations

import dataclasses
import logging
from dataclasses import dataclass
from enum import StrEnum

from pytflbus.config import MapConfig
from pytflbus.map.types import DragOffset, GeoPoint, ScreenPoint
from pytflbus.map.viewport import ViewportState

_logger = logging.getLogger(__name__)


class DragPhase(StrEnum):
    IDLE = "idle"
    DRAGGING = "dragging"


# ------------------------------------------------------------------
# Events
# ------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class PointerDown:
    client_x: float
    client_y: float


@dataclass(frozen=True, slots=True)
class PointerMove:
    client_x: float
    client_y: float


@dataclass(frozen=True, slots=True)
class PointerUp:
    pass


@dataclass(frozen=True, slots=True)
class PointerLeave:
    pass


@dataclass(frozen=True, slots=True)
class TouchStart:
    client_x: float
    client_y: float
    touches: int = 1


@dataclass(frozen=True, slots=True)
class TouchMove:
    client_x: float
    client_y: float
    touches: int = 1


@dataclass(frozen=True, slots=True)
class TouchEnd:
    touches: int = 0


@dataclass(frozen=True, slots=True)
class ZoomIn:
    pass


@dataclass(frozen=True, slots=True)
class ZoomOut:
    pass


@dataclass(frozen=True, slots=True)
class ResetView:
    pass


@dataclass(frozen=True, slots=True)
class Recenter:
    point: GeoPoint
    zoom: int | None = None


MapEvent = (
    PointerDown
    | PointerMove
    | PointerUp
    | PointerLeave
    | TouchStart
    | TouchMove
    | TouchEnd
    | ZoomIn
    | ZoomOut
    | ResetView
    | Recenter
)


@dataclass(frozen=True, slots=True)
class InteractionState:
    viewport: ViewportState
    phase: DragPhase = DragPhase.IDLE
    drag_start: ScreenPoint | None = None

    @classmethod
    def initial(cls, config: MapConfig | None = None) -> InteractionState:
        return cls(viewport=ViewportState.initial(config))

    @property
    def is_dragging(self) -> bool:
        return self.phase is DragPhase.DRAGGING


def _begin_drag(state: InteractionState, x: float, y: float) -> InteractionState:
    if state.is_dragging:
        # A second press without a release keeps the original anchor.
        return state
    return dataclasses.replace(state, phase=DragPhase.DRAGGING, drag_start=ScreenPoint(x, y))


def _move_drag(state: InteractionState, x: float, y: float) -> InteractionState:
    if not state.is_dragging or state.drag_start is None:
        return state
    offset = DragOffset(x - state.drag_start.x, y - state.drag_start.y)
    return dataclasses.replace(state, viewport=state.viewport.with_drag_offset(offset))


def _end_drag(state: InteractionState) -> InteractionState:
    if not state.is_dragging:
        return state
    return InteractionState(viewport=state.viewport.commit_drag())


def reduce(state: InteractionState, event: MapEvent) -> InteractionState:
    """Apply one UI event and return the resulting state."""
    match event:
        case PointerDown(client_x=x, client_y=y):
            return _begin_drag(state, x, y)
        case PointerMove(client_x=x, client_y=y):
            return _move_drag(state, x, y)
        case PointerUp() | PointerLeave():
            return _end_drag(state)
        case TouchStart(client_x=x, client_y=y, touches=touches):
            if touches != 1:
                return state
            return _begin_drag(state, x, y)
        case TouchMove(client_x=x, client_y=y, touches=touches):
            if touches != 1:
                return state
            return _move_drag(state, x, y)
        case TouchEnd():
            return _end_drag(state)
        case ZoomIn():
            return dataclasses.replace(state, viewport=state.viewport.zoom_in())
        case ZoomOut():
            return dataclasses.replace(state, viewport=state.viewport.zoom_out())
        case ResetView():
            return _reset_keeping_drag(state, state.viewport.reset_view())
        case Recenter(point=point, zoom=zoom):
            return _reset_keeping_drag(state, state.viewport.recenter_on(point, zoom))
    _logger.debug("Ignoring unknown map event %r", event)
    return state


def _reset_keeping_drag(state: InteractionState, viewport: ViewportState) -> InteractionState:
    """Swap in a recentred viewport without cancelling an active drag.

    The drag anchor is moved to "now" so the next move measures its
    offset from the recentred view instead of jumping.
    """
    if not state.is_dragging or state.drag_start is None:
        return dataclasses.replace(state, viewport=viewport)
    previous = state.viewport.drag_offset
    anchor = ScreenPoint(state.drag_start.x + previous.dx, state.drag_start.y + previous.dy)
    return dataclasses.replace(state, viewport=viewport, drag_start=anchor)


class InteractionController:
    """Stateful wrapper over :func:`reduce` for hosts that push events."""

    def __init__(self, config: MapConfig | None = None, *, state: InteractionState | None = None) -> None:
        self._state = state or InteractionState.initial(config)

    @property
    def state(self) -> InteractionState:
        return self._state

    @property
    def viewport(self) -> ViewportState:
        return self._state.viewport

    def dispatch(self, event: MapEvent) -> ViewportState:
        self._state = reduce(self._state, event)
        return self._state.viewport

    def replace_viewport(self, viewport: ViewportState) -> ViewportState:
        """Programmatic recentre (auto-follow); an active drag keeps going."""
        self._state = _reset_keeping_drag(self._state, viewport)
        return self._state.viewport

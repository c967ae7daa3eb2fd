from __future__ import annotations

import pytest

from pytflbus.map.interaction import (
    DragPhase,
    InteractionController,
    InteractionState,
    PointerDown,
    PointerLeave,
    PointerMove,
    PointerUp,
    Recenter,
    ResetView,
    TouchEnd,
    TouchMove,
    TouchStart,
    ZoomIn,
    ZoomOut,
    reduce,
)
from pytflbus.map.projection import geo_to_screen
from pytflbus.map.types import NO_DRAG, DragOffset, GeoPoint, ScreenPoint, ViewportSize

SIZE = ViewportSize(800, 600)


def _run(state: InteractionState, *events: object) -> InteractionState:
    for event in events:
        state = reduce(state, event)  # type: ignore[arg-type]
    return state


def test_drag_sets_offset_without_moving_center() -> None:
    start = InteractionState.initial()
    state = _run(start, PointerDown(100, 100), PointerMove(150, 130))

    assert state.phase is DragPhase.DRAGGING
    assert state.viewport.drag_offset == DragOffset(50.0, 30.0)
    assert state.viewport.center == start.viewport.center


def test_pointer_up_commits_drag() -> None:
    start = InteractionState.initial()
    state = _run(start, PointerDown(100, 100), PointerMove(150, 130), PointerUp())

    assert state.phase is DragPhase.IDLE
    assert state.drag_start is None
    assert state.viewport.drag_offset == NO_DRAG
    screen = geo_to_screen(start.viewport.center, state.viewport, SIZE)
    assert screen.x == pytest.approx(450.0, abs=1e-6)
    assert screen.y == pytest.approx(330.0, abs=1e-6)


def test_pointer_leave_commits_like_pointer_up() -> None:
    start = InteractionState.initial()
    events = (PointerDown(10, 10), PointerMove(-20, 40))
    left = _run(start, *events, PointerLeave())
    released = _run(start, *events, PointerUp())

    assert left == released
    assert not left.is_dragging


def test_move_while_idle_is_ignored() -> None:
    start = InteractionState.initial()
    assert reduce(start, PointerMove(300, 300)) == start


def test_second_pointer_down_keeps_original_anchor() -> None:
    state = _run(InteractionState.initial(), PointerDown(100, 100), PointerDown(400, 400), PointerMove(110, 100))
    assert state.drag_start == ScreenPoint(100, 100)
    assert state.viewport.drag_offset == DragOffset(10.0, 0.0)


def test_multi_touch_does_not_pan() -> None:
    start = InteractionState.initial()
    state = _run(start, TouchStart(100, 100, touches=2), TouchMove(200, 200, touches=2))
    assert not state.is_dragging
    assert state.viewport == start.viewport


def test_single_touch_pans_and_commits() -> None:
    start = InteractionState.initial()
    state = _run(start, TouchStart(0, 0), TouchMove(-30, 0))
    assert state.viewport.drag_offset == DragOffset(-30.0, 0.0)

    state = reduce(state, TouchEnd())
    assert not state.is_dragging
    assert state.viewport.center.longitude > start.viewport.center.longitude


def test_zoom_during_drag_keeps_dragging() -> None:
    state = _run(InteractionState.initial(), PointerDown(0, 0), PointerMove(5, 5), ZoomIn())

    assert state.is_dragging
    assert state.viewport.zoom == 14
    assert state.viewport.drag_offset == DragOffset(5.0, 5.0)

    state = reduce(state, ZoomOut())
    assert state.viewport.zoom == 13


def test_reset_during_drag_rebases_anchor() -> None:
    state = _run(InteractionState.initial(), PointerDown(100, 100), PointerMove(150, 130), ResetView())

    assert state.is_dragging
    assert state.viewport.drag_offset == NO_DRAG
    assert state.drag_start == ScreenPoint(150, 130)

    state = reduce(state, PointerMove(160, 130))
    assert state.viewport.drag_offset == DragOffset(10.0, 0.0)


def test_recenter_event() -> None:
    target = GeoPoint(51.52, -0.08)
    state = reduce(InteractionState.initial(), Recenter(target, zoom=16))
    assert state.viewport.center == target
    assert state.viewport.zoom == 16


def test_controller_dispatch_returns_viewport() -> None:
    controller = InteractionController()
    viewport = controller.dispatch(ZoomIn())
    assert viewport.zoom == 14
    assert controller.viewport is viewport


def test_controller_replace_viewport_keeps_drag_alive() -> None:
    controller = InteractionController()
    controller.dispatch(PointerDown(0, 0))
    controller.dispatch(PointerMove(20, 0))

    controller.replace_viewport(controller.viewport.recenter_on(GeoPoint(51.6, -0.2), 15))

    assert controller.state.is_dragging
    assert controller.viewport.zoom == 15
    assert controller.viewport.drag_offset == NO_DRAG

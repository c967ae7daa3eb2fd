from __future__ import annotations

import pytest

from pytflbus.config import MapConfig
from pytflbus.map.entities import StopEntity
from pytflbus.map.projection import geo_to_screen
from pytflbus.map.types import NO_DRAG, DragOffset, GeoPoint, ViewportSize
from pytflbus.map.viewport import ViewportState, auto_center, bounding_box_center

LONDON = GeoPoint(51.5074, -0.1278)


def _stop(stop_id: str, lat: float, lon: float) -> StopEntity:
    return StopEntity(id=stop_id, position=GeoPoint(lat, lon), label=stop_id)


def test_initial_viewport_uses_configured_defaults() -> None:
    viewport = ViewportState.initial()
    assert viewport.center == LONDON
    assert viewport.zoom == 13
    assert viewport.drag_offset == NO_DRAG


def test_zoom_is_clamped_to_configured_bounds() -> None:
    viewport = ViewportState.initial()
    assert viewport.set_zoom(25).zoom == 18
    assert viewport.set_zoom(1).zoom == 3
    assert viewport.set_zoom(18).zoom_in().zoom == 18
    assert viewport.set_zoom(3).zoom_out().zoom == 3


def test_compact_map_lower_zoom_bound() -> None:
    viewport = ViewportState.initial(MapConfig(min_zoom=8))
    assert viewport.set_zoom(5).zoom == 8


def test_center_is_normalised_on_construction() -> None:
    viewport = ViewportState(center=GeoPoint(89.0, 190.0), zoom=10)
    assert viewport.center.latitude == 85.0
    assert viewport.center.longitude == pytest.approx(-170.0)


def test_reset_view_restores_default_and_clears_drag() -> None:
    viewport = ViewportState(center=GeoPoint(48.85, 2.35), zoom=6, drag_offset=DragOffset(3.0, 4.0))
    reset = viewport.reset_view()
    assert reset.center == LONDON
    assert reset.zoom == 13
    assert reset.drag_offset == NO_DRAG


def test_recenter_on_keeps_zoom_unless_given() -> None:
    viewport = ViewportState.initial()
    target = GeoPoint(51.52, -0.10)
    assert viewport.recenter_on(target).zoom == 13
    assert viewport.recenter_on(target, 16).zoom == 16
    assert viewport.recenter_on(target).center == target


def test_commit_drag_moves_world_with_pointer() -> None:
    size = ViewportSize(800, 600)
    viewport = ViewportState(center=LONDON, zoom=13, drag_offset=DragOffset(50.0, 30.0))

    committed = viewport.commit_drag()

    assert committed.drag_offset == NO_DRAG
    assert committed.center != LONDON
    # The old centre stays under the pointer: shifted by the drag distance.
    screen = geo_to_screen(LONDON, committed, size)
    assert screen.x == pytest.approx(450.0, abs=1e-6)
    assert screen.y == pytest.approx(330.0, abs=1e-6)


def test_commit_drag_without_offset_is_identity() -> None:
    viewport = ViewportState.initial()
    assert viewport.commit_drag() is viewport


def test_bounding_box_center() -> None:
    midpoint = bounding_box_center([GeoPoint(51.50, -0.10), GeoPoint(51.52, -0.14), GeoPoint(51.51, -0.12)])
    assert midpoint is not None
    assert midpoint.latitude == pytest.approx(51.51)
    assert midpoint.longitude == pytest.approx(-0.12)
    assert bounding_box_center([]) is None


def test_auto_center_prefers_selection() -> None:
    viewport = ViewportState.initial()
    selected = GeoPoint(51.53, -0.09)

    result = auto_center(
        viewport,
        selected=selected,
        user_location=GeoPoint(51.50, -0.12),
        entities=[_stop("a", 51.40, -0.20)],
    )

    assert result.center == selected
    assert result.zoom == 16


def test_auto_center_user_location_beats_stop_bounds() -> None:
    user = GeoPoint(51.50, -0.12)
    result = auto_center(
        ViewportState.initial(),
        user_location=user,
        entities=[_stop("a", 51.40, -0.20), _stop("b", 51.60, -0.05)],
    )
    assert result.center == user
    assert result.zoom == 15


def test_auto_center_falls_back_to_stop_bounds() -> None:
    result = auto_center(
        ViewportState.initial(),
        entities=[_stop("a", 51.50, -0.10), _stop("b", 51.52, -0.14)],
    )
    assert result.center.latitude == pytest.approx(51.51)
    assert result.center.longitude == pytest.approx(-0.12)
    assert result.zoom == 14


def test_auto_center_without_anything_resets() -> None:
    viewport = ViewportState(center=GeoPoint(40.0, -3.7), zoom=5)
    result = auto_center(viewport)
    assert result.center == LONDON
    assert result.zoom == 13

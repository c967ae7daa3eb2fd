from __future__ import annotations

import pytest

from pytflbus.map.engine import LiveMap
from pytflbus.map.entities import MarkerLayer, StopEntity, VehicleEntity
from pytflbus.map.interaction import PointerDown, PointerMove, PointerUp
from pytflbus.map.types import GeoPoint, ViewportSize
from pytflbus.models.stop import BusStop
from pytflbus.state.events import EntityLayer
from pytflbus.state.store import EntityStore

LONDON = GeoPoint(51.5074, -0.1278)


def _stop(stop_id: str, lat: float, lon: float) -> StopEntity:
    return StopEntity(id=stop_id, position=GeoPoint(lat, lon), label=stop_id)


def test_initial_frame() -> None:
    live_map = LiveMap()
    frame = live_map.frame()

    assert frame.size == ViewportSize(800.0, 600.0)
    assert frame.viewport.center == LONDON
    assert frame.viewport.zoom == 13
    assert frame.tiles
    assert frame.markers == ()
    assert not frame.is_dragging


def test_stops_update_recenters_on_bounds() -> None:
    store = EntityStore()
    live_map = LiveMap(store=store)

    store.replace(EntityLayer.STOPS, [_stop("a", 51.50, -0.10), _stop("b", 51.52, -0.14)])

    assert live_map.viewport.center.latitude == pytest.approx(51.51)
    assert live_map.viewport.zoom == 14


def test_user_location_recenters_and_is_drawn() -> None:
    live_map = LiveMap()
    user = GeoPoint(51.503, -0.119)

    live_map.set_user_location(user)

    assert live_map.user_location == user
    assert live_map.viewport.center == user
    assert live_map.viewport.zoom == 15
    assert [m.layer for m in live_map.frame().markers] == [MarkerLayer.USER_LOCATION]


def test_select_stop_follows_and_draws_on_top() -> None:
    store = EntityStore()
    live_map = LiveMap(store=store)
    store.replace(EntityLayer.STOPS, [_stop("a", 51.5075, -0.1279), _stop("b", 51.5076, -0.1277)])

    stop = BusStop(id="a", common_name="A", lat=51.5075, lon=-0.1279)
    live_map.select_stop(stop)

    assert live_map.selected_stop is not None
    assert live_map.viewport.center == GeoPoint(51.5075, -0.1279)
    assert live_map.viewport.zoom == 16
    markers = live_map.frame().markers
    assert markers[-1].entity.id == "a"
    assert markers[-1].layer is MarkerLayer.SELECTED_STOP


def test_selected_stop_drawn_even_when_not_in_store() -> None:
    live_map = LiveMap()
    live_map.select_stop(_stop("elsewhere", 51.52, -0.09))

    ids = [m.entity.id for m in live_map.frame().markers]
    assert ids == ["elsewhere"]


def test_selecting_stop_without_position_is_ignored() -> None:
    live_map = LiveMap()
    live_map.select_stop(BusStop(id="x", common_name="Nowhere"))
    assert live_map.selected_stop is None


def test_selecting_stop_without_position_clears_previous_selection() -> None:
    live_map = LiveMap()
    user = GeoPoint(51.50, -0.12)
    live_map.set_user_location(user)
    live_map.select_stop(BusStop(id="a", common_name="A", lat=51.52, lon=-0.10))

    live_map.select_stop(BusStop(id="x", common_name="Nowhere"))

    assert live_map.selected_stop is None
    assert live_map.viewport.center == user
    assert all(m.layer is not MarkerLayer.SELECTED_STOP for m in live_map.frame().markers)


def test_clear_selection_falls_back_to_user() -> None:
    live_map = LiveMap()
    user = GeoPoint(51.50, -0.12)
    live_map.set_user_location(user)
    live_map.select_stop(_stop("a", 51.52, -0.10))

    live_map.clear_selection()

    assert live_map.viewport.center == user
    assert live_map.viewport.zoom == 15


def test_vehicle_refresh_does_not_move_view() -> None:
    store = EntityStore()
    live_map = LiveMap(store=store)
    live_map.dispatch(PointerDown(100, 100))
    live_map.dispatch(PointerMove(180, 100))
    live_map.dispatch(PointerUp())
    panned = live_map.viewport

    store.replace(
        EntityLayer.VEHICLES,
        [VehicleEntity(id="bus", position=panned.center, label="73", line_name="73")],
    )

    assert live_map.viewport == panned
    assert [m.entity.id for m in live_map.frame().markers] == ["bus"]


def test_frame_reports_drag() -> None:
    live_map = LiveMap()
    live_map.dispatch(PointerDown(0, 0))
    live_map.dispatch(PointerMove(12, 0))

    frame = live_map.frame()
    assert frame.is_dragging
    assert frame.viewport.drag_offset.dx == 12.0


def test_resize_validates_and_changes_tile_count() -> None:
    live_map = LiveMap(size=ViewportSize(512, 512))
    assert len(live_map.frame().tiles) == 16

    live_map.resize(1024, 512)
    assert len(live_map.frame().tiles) == 24

    with pytest.raises(ValueError):
        live_map.resize(0, 100)


def test_screen_to_geo_at_center() -> None:
    live_map = LiveMap()
    point = live_map.screen_to_geo(400, 300)
    assert point.latitude == pytest.approx(LONDON.latitude)
    assert point.longitude == pytest.approx(LONDON.longitude)


def test_close_stops_following() -> None:
    store = EntityStore()
    live_map = LiveMap(store=store)
    live_map.close()

    store.replace(EntityLayer.STOPS, [_stop("a", 52.0, 0.5)])

    assert live_map.viewport.center == LONDON

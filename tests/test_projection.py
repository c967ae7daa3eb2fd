from __future__ import annotations

import math

import pytest

from pytflbus.map.projection import (
    clamp_latitude,
    geo_to_screen,
    normalize_longitude,
    project,
    screen_to_geo,
    tile_for_point,
    unproject,
    world_size,
)
from pytflbus.map.types import DragOffset, GeoPoint, ScreenPoint, TileCoordinate, ViewportSize, WorldPixel
from pytflbus.map.viewport import ViewportState

LONDON = GeoPoint(51.5074, -0.1278)


def test_world_size_doubles_per_zoom() -> None:
    assert world_size(0) == 256.0
    assert world_size(1) == 512.0
    assert world_size(13) == 256.0 * 8192


def test_project_origin_and_antimeridian() -> None:
    pixel = project(GeoPoint(0.0, -180.0), 0)
    assert pixel.x == pytest.approx(0.0)
    assert pixel.y == pytest.approx(128.0)

    pixel = project(GeoPoint(0.0, 180.0), 2)
    assert pixel.x == pytest.approx(1024.0)


def test_project_poles_map_to_world_edges() -> None:
    assert project(GeoPoint(90.0, 0.0), 3).y == 0.0
    assert project(GeoPoint(-90.0, 0.0), 3).y == world_size(3)


@pytest.mark.parametrize("zoom", [3, 10, 13, 18])
def test_unproject_inverts_project(zoom: int) -> None:
    for point in (LONDON, GeoPoint(-33.8688, 151.2093), GeoPoint(84.9, -179.5)):
        back = unproject(project(point, zoom), zoom)
        assert back.latitude == pytest.approx(point.latitude, abs=1e-9)
        assert back.longitude == pytest.approx(point.longitude, abs=1e-9)


def test_unproject_off_world_pixels_pin_to_edge_latitude() -> None:
    edge = math.degrees(math.atan(math.sinh(math.pi)))

    assert unproject(WorldPixel(0.0, 1e6), 0).latitude == pytest.approx(-edge)
    assert unproject(WorldPixel(0.0, -1e6), 0).latitude == pytest.approx(edge)
    assert edge == pytest.approx(85.0511, abs=1e-4)


def test_clamp_latitude_keeps_mercator_band() -> None:
    assert clamp_latitude(89.0) == 85.0
    assert clamp_latitude(-89.0) == -85.0
    assert clamp_latitude(51.5) == 51.5


@pytest.mark.parametrize(
    ("value", "expected"),
    [
        (0.0, 0.0),
        (180.0, 180.0),
        (-180.0, 180.0),
        (190.0, -170.0),
        (-190.0, 170.0),
        (540.0, 180.0),
    ],
)
def test_normalize_longitude_half_open_range(value: float, expected: float) -> None:
    assert normalize_longitude(value) == pytest.approx(expected)


def test_tile_for_point_london() -> None:
    assert tile_for_point(LONDON, 10) == TileCoordinate(511, 340, 10)


def test_tile_for_point_clamps_world_edges() -> None:
    assert tile_for_point(GeoPoint(90.0, 180.0), 2) == TileCoordinate(3, 0, 2)
    assert tile_for_point(GeoPoint(-90.0, -180.0), 2) == TileCoordinate(0, 3, 2)


def test_geo_to_screen_places_center_in_middle() -> None:
    viewport = ViewportState(center=LONDON, zoom=13)
    screen = geo_to_screen(LONDON, viewport, ViewportSize(800, 600))
    assert screen.x == pytest.approx(400.0)
    assert screen.y == pytest.approx(300.0)


def test_geo_to_screen_applies_drag_offset() -> None:
    viewport = ViewportState(center=LONDON, zoom=13, drag_offset=DragOffset(20.0, -10.0))
    screen = geo_to_screen(LONDON, viewport, ViewportSize(800, 600))
    assert screen.x == pytest.approx(420.0)
    assert screen.y == pytest.approx(290.0)


def test_screen_to_geo_inverts_geo_to_screen() -> None:
    viewport = ViewportState(center=LONDON, zoom=15, drag_offset=DragOffset(5.0, 7.0))
    size = ViewportSize(640, 480)
    point = GeoPoint(51.51, -0.12)

    screen = geo_to_screen(point, viewport, size)
    back = screen_to_geo(ScreenPoint(screen.x, screen.y), viewport, size)

    assert back.latitude == pytest.approx(point.latitude, abs=1e-9)
    assert back.longitude == pytest.approx(point.longitude, abs=1e-9)
    assert not math.isnan(screen.x)

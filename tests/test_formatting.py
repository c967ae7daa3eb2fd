from __future__ import annotations

import pytest

from pytflbus.formatting import (
    ArrivalUrgency,
    arrival_urgency,
    format_arrival_time,
    format_distance,
    format_distance_miles,
    stop_indicator,
    towards_destination,
    walking_minutes,
    walking_minutes_brisk,
)
from pytflbus.models.stop import BusStop


@pytest.mark.parametrize(("seconds", "label"), [(0, "Due"), (59, "Due"), (60, "1min"), (125, "2min"), (600, "10min")])
def test_format_arrival_time(seconds: int, label: str) -> None:
    assert format_arrival_time(seconds) == label


@pytest.mark.parametrize(
    ("seconds", "urgency"),
    [
        (0, ArrivalUrgency.URGENT),
        (119, ArrivalUrgency.URGENT),
        (120, ArrivalUrgency.SOON),
        (299, ArrivalUrgency.SOON),
        (300, ArrivalUrgency.LATER),
    ],
)
def test_arrival_urgency(seconds: int, urgency: ArrivalUrgency) -> None:
    assert arrival_urgency(seconds) is urgency


def test_walking_minutes() -> None:
    assert walking_minutes(350) == 4
    assert walking_minutes(700) == 8
    assert walking_minutes(None) is None
    assert walking_minutes(0) is None


def test_walking_minutes_brisk_rounds_up() -> None:
    assert walking_minutes_brisk(84) == 1
    assert walking_minutes_brisk(85) == 2
    assert walking_minutes_brisk(None) is None


def test_format_distance() -> None:
    assert format_distance(350.4) == "350m away"
    assert format_distance(1234) == "1.2km away"
    assert format_distance(None) is None


def test_format_distance_miles_keeps_legacy_label() -> None:
    assert format_distance_miles(1609.34) == "1.0m away"
    assert format_distance_miles(1609.34, unit_label="mi") == "1.0mi away"
    assert format_distance_miles(None) == "Unknown distance"


def test_towards_and_indicator() -> None:
    stop = BusStop.model_validate(
        {
            "naptanId": "490000077E",
            "commonName": "Charing Cross Station",
            "indicator": "Stop E",
            "additionalProperties": [{"key": "Towards", "value": "Westminster"}],
        }
    )
    assert towards_destination(stop) == "towards Westminster"
    assert stop_indicator(stop) == "E"

    bare = BusStop(id="X", common_name="Nowhere")
    assert towards_destination(bare) == ""
    assert stop_indicator(bare) == "BUS"

"""Display helpers for arrival boards and stop listings."""

from __future__ import annotations

import math
from enum import StrEnum

from pytflbus._constants import (
    BRISK_WALKING_M_PER_MIN,
    DUE_THRESHOLD_S,
    METRES_TO_MILES,
    SOON_THRESHOLD_S,
    URGENT_THRESHOLD_S,
    WALKING_SPEED_MPS,
)
from pytflbus.models.stop import BusStop


class ArrivalUrgency(StrEnum):
    URGENT = "urgent"
    SOON = "soon"
    LATER = "later"


def format_arrival_time(seconds: int) -> str:
    """``"Due"`` under a minute, otherwise whole minutes (``"4min"``)."""
    if seconds < DUE_THRESHOLD_S:
        return "Due"
    return f"{seconds // 60}min"


def arrival_urgency(seconds: int) -> ArrivalUrgency:
    if seconds < URGENT_THRESHOLD_S:
        return ArrivalUrgency.URGENT
    if seconds < SOON_THRESHOLD_S:
        return ArrivalUrgency.SOON
    return ArrivalUrgency.LATER


def _round_half_up(value: float) -> int:
    return math.floor(value + 0.5)


def walking_minutes(distance_m: float | None) -> int | None:
    """Minutes on foot at 1.4 m/s, rounded to the nearest minute."""
    if not distance_m:
        return None
    return _round_half_up(distance_m / WALKING_SPEED_MPS / 60)


def walking_minutes_brisk(distance_m: float | None) -> int | None:
    """Minutes on foot at 84 m/min (~5 km/h), rounded up."""
    if not distance_m:
        return None
    return math.ceil(distance_m / BRISK_WALKING_M_PER_MIN)


def format_distance(distance_m: float | None) -> str | None:
    """``"350m away"`` below a kilometre, ``"1.2km away"`` above."""
    if not distance_m:
        return None
    if distance_m < 1000:
        return f"{_round_half_up(distance_m)}m away"
    return f"{distance_m / 1000:.1f}km away"


def format_distance_miles(distance_m: float | None, *, unit_label: str = "m") -> str:
    """Distance converted to miles, one decimal.

    The stop panels historically label miles with an ``"m"`` suffix,
    which reads as metres.  That label is kept as the default until the
    product decides otherwise; pass ``unit_label="mi"`` for an
    unambiguous one.
    """
    if not distance_m:
        return "Unknown distance"
    return f"{distance_m * METRES_TO_MILES:.1f}{unit_label} away"


def towards_destination(stop: BusStop) -> str:
    towards = stop.towards
    return f"towards {towards}" if towards else ""


def stop_indicator(stop: BusStop) -> str:
    """Short badge text: the stop letter, or ``"BUS"`` when unknown."""
    if not stop.indicator:
        return "BUS"
    letter = stop.indicator.replace("Stop ", "").strip()
    return letter or "BUS"

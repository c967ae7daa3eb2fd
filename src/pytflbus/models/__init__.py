"""Data models for TfL API responses."""

from pytflbus.models._base import TflBaseModel, TflTimestamp, parse_tfl_timestamp
from pytflbus.models.arrival import BusArrival
from pytflbus.models.bus import BusLocation
from pytflbus.models.stop import AdditionalProperty, BusStop

__all__ = [
    "AdditionalProperty",
    "BusArrival",
    "BusLocation",
    "BusStop",
    "TflBaseModel",
    "TflTimestamp",
    "parse_tfl_timestamp",
]

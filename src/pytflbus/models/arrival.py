"""Arrival prediction model."""

from __future__ import annotations

from typing import Any

from pydantic import field_validator

from pytflbus.ingestion.normalize import safe_int, safe_str
from pytflbus.models._base import TflBaseModel, TflTimestamp


class BusArrival(TflBaseModel):
    """A live arrival prediction from ``/StopPoint/{id}/Arrivals``.

    ``time_to_station`` is in seconds and is the sort key for arrival
    boards.
    """

    id: str = ""
    line_name: str = ""
    destination_name: str = ""
    time_to_station: int = 0
    expected_arrival: TflTimestamp = None
    vehicle_id: str | None = None
    naptan_id: str | None = None
    station_name: str | None = None
    platform_name: str | None = None
    towards: str | None = None
    bearing: str | None = None

    @field_validator("time_to_station", mode="before")
    @classmethod
    def _coerce_seconds(cls, value: Any) -> int:
        parsed = safe_int(value)
        return parsed if parsed is not None and parsed >= 0 else 0

    @field_validator("vehicle_id", "naptan_id", "station_name", "platform_name", "towards", "bearing", mode="before")
    @classmethod
    def _coerce_str(cls, value: Any) -> str | None:
        return safe_str(value)

    @property
    def minutes(self) -> int:
        """Whole minutes until arrival (floored)."""
        return self.time_to_station // 60

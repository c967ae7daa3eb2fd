"""Live bus position model."""

from __future__ import annotations

from typing import Any

from pydantic import AliasChoices, Field, field_validator

from pytflbus.ingestion.normalize import safe_float, safe_str
from pytflbus.models._base import TflBaseModel


class BusLocation(TflBaseModel):
    """Last known position of a bus serving the selected stop.

    Built from the first prediction returned by
    ``/Vehicle/{id}/Arrivals``.  ``lat``/``lon`` are ``None`` when the
    prediction carries no position; such buses are dropped before they
    reach the map.
    """

    id: str = ""
    vehicle_id: str = ""
    line_name: str = ""
    destination: str = Field(default="", validation_alias=AliasChoices("destination", "destinationName"))
    lat: float | None = None
    lon: float | None = None
    bearing: float | None = None

    @field_validator("lat", "lon", "bearing", mode="before")
    @classmethod
    def _coerce_floats(cls, value: Any) -> float | None:
        return safe_float(value)

    @classmethod
    def from_prediction(cls, vehicle_id: str, prediction: dict[str, Any]) -> BusLocation:
        return cls.model_validate(
            {
                **prediction,
                "id": vehicle_id,
                "vehicleId": safe_str(prediction.get("vehicleId")) or vehicle_id,
                "raw": prediction,
            }
        )

    @property
    def has_position(self) -> bool:
        return self.lat is not None and self.lon is not None

"""Bus stop models."""

from __future__ import annotations

import math
from typing import Any

from pydantic import AliasChoices, Field, field_validator, model_validator

from pytflbus._constants import WALKING_SPEED_MPS
from pytflbus.ingestion.normalize import clean_stop_name, extract_stop_letter, safe_float, safe_int, safe_str
from pytflbus.models._base import TflBaseModel


class AdditionalProperty(TflBaseModel):
    """A key/value annotation attached to a stop point (e.g. ``Towards``)."""

    category: str = ""
    key: str = ""
    value: str = ""


class BusStop(TflBaseModel):
    """A bus stop as returned by ``/StopPoint`` radius or search queries.

    Parameters
    ----------
    id : str
        NaPTAN id (``490000077E``); falls back to the generic ``id``.
    common_name : str
        Display name, with any ``(Stop K)`` suffix removed for search matches.
    lat, lon : float or None
        WGS84 position; ``None`` when the payload omits it.
    distance : float or None
        Metres from the query point (radius searches only).
    walking_time : int or None
        Minutes on foot at 1.4 m/s, derived from ``distance`` when the
        payload does not carry it.
    indicator : str or None
        Stop letter or indicator (``"Stop K"``, ``"K"``, ``"->N"``).
    original_name : str or None
        Unmodified search match name.
    additional_properties : list[AdditionalProperty]
        Extra annotations, including the ``Towards`` direction hint.
    """

    id: str = Field(default="", validation_alias=AliasChoices("naptanId", "id"))
    common_name: str = Field(default="", validation_alias=AliasChoices("commonName", "common_name", "name"))
    lat: float | None = None
    lon: float | None = None
    distance: float | None = None
    walking_time: int | None = None
    indicator: str | None = None
    original_name: str | None = None
    additional_properties: list[AdditionalProperty] = Field(default_factory=list)

    @model_validator(mode="before")
    @classmethod
    def _derive_walking_time(cls, values: Any) -> Any:
        if not isinstance(values, dict):
            return values
        if values.get("walkingTime") is None and values.get("walking_time") is None:
            distance = safe_float(values.get("distance"))
            if distance is not None:
                merged = dict(values)
                # Half-up rounding, matching the dashboard's minute labels.
                merged["walkingTime"] = math.floor(distance / WALKING_SPEED_MPS / 60 + 0.5)
                return merged
        return values

    @field_validator("lat", "lon", "distance", mode="before")
    @classmethod
    def _coerce_floats(cls, value: Any) -> float | None:
        return safe_float(value)

    @field_validator("walking_time", mode="before")
    @classmethod
    def _coerce_int(cls, value: Any) -> int | None:
        return safe_int(value)

    @field_validator("indicator", "original_name", mode="before")
    @classmethod
    def _coerce_str(cls, value: Any) -> str | None:
        return safe_str(value)

    @field_validator("additional_properties", mode="before")
    @classmethod
    def _coerce_properties(cls, value: Any) -> Any:
        if not isinstance(value, list):
            return []
        return [item for item in value if isinstance(item, (dict, AdditionalProperty))]

    @classmethod
    def from_search_match(cls, match: dict[str, Any]) -> BusStop:
        """Build a stop from a ``/StopPoint/Search`` match.

        The stop letter is pulled out of the name into ``indicator`` and
        the name is cleaned for display; the original stays available as
        ``original_name``.
        """
        name = str(match.get("name") or "")
        return cls.model_validate(
            {
                "id": match.get("id"),
                "commonName": clean_stop_name(name),
                "originalName": name,
                "lat": match.get("lat"),
                "lon": match.get("lon"),
                "distance": match.get("distance"),
                "indicator": extract_stop_letter(name),
                "raw": match,
            }
        )

    @property
    def has_position(self) -> bool:
        return self.lat is not None and self.lon is not None

    @property
    def towards(self) -> str | None:
        """Value of the ``Towards`` additional property, if any."""
        for prop in self.additional_properties:
            if prop.key.lower() == "towards" and prop.value:
                return prop.value
        return None

"""Snapshot update events.

Every producer (search, nearby lookup, geolocation, live polling) wraps
its result in a :class:`SnapshotUpdate`.  Only the state/store layer is
allowed to apply them.
"""

from __future__ import annotations

from datetime import UTC, datetime
from enum import StrEnum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator


class IngestionSource(StrEnum):
    NEARBY = "nearby"
    SEARCH = "search"
    POLL = "poll"
    GEOLOCATION = "geolocation"
    MANUAL = "manual"


class EntityLayer(StrEnum):
    STOPS = "stops"
    VEHICLES = "vehicles"
    USER_LOCATION = "user_location"


class SnapshotUpdate(BaseModel):
    """A wholesale replacement of one entity layer."""

    model_config = ConfigDict(frozen=True)

    layer: EntityLayer
    source: IngestionSource
    entities: tuple[Any, ...] = Field(default_factory=tuple, description="Replacement entities for the layer")
    generation: int = Field(default=0, ge=0, description="Request generation; older ones lose")
    key: str | None = Field(default=None, description="What the data was fetched for (e.g. a stop id)")
    observed_at: datetime = Field(default_factory=lambda: datetime.now(UTC))

    @field_validator("observed_at")
    @classmethod
    def _ensure_tz_aware(cls, value: datetime) -> datetime:
        if value.tzinfo is None:
            return value.replace(tzinfo=UTC)
        return value

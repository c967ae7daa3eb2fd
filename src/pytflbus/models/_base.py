"""Base model for TfL API responses.

Every TfL response model inherits from :class:`TflBaseModel` which
provides:

* ``alias_generator=to_camel`` so camelCase API keys map
  automatically to snake_case fields.
* A ``model_validator(mode="before")`` that strips empty values
  (``""``, NaN, ``None``) so the field default is used.
* A ``raw`` dict that captures the original payload.
"""

from __future__ import annotations

import math
from datetime import UTC, datetime
from typing import Annotated, Any

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel

_SENTINELS = frozenset({"", "NaN", "nan", "null"})


def parse_tfl_timestamp(value: Any) -> datetime | None:
    """Parse TfL ISO-8601 timestamps (``2024-05-01T12:03:00Z``) to aware UTC datetimes.

    Returns ``None`` for anything that does not parse.
    """
    if value is None:
        return None
    if isinstance(value, datetime):
        return value if value.tzinfo is not None else value.replace(tzinfo=UTC)
    text = str(value).strip()
    if not text:
        return None
    if text.endswith("Z"):
        text = f"{text[:-1]}+00:00"
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=UTC)
    return parsed


TflTimestamp = Annotated[datetime | None, BeforeValidator(parse_tfl_timestamp)]
"""Annotated type that coerces TfL ISO strings to UTC datetimes."""


class TflBaseModel(BaseModel):
    """Base for TfL API response models.

    Handles:
    * camelCase → snake_case via ``alias_generator=to_camel``
    * empty values (``""``, NaN) → dropped so the field default is used
    * stashes the original API dict in ``raw``
    """

    model_config = ConfigDict(
        frozen=True,
        extra="ignore",
        populate_by_name=True,
        alias_generator=to_camel,
    )

    raw: dict[str, Any] = Field(default_factory=dict)
    """Original API response dict."""

    @staticmethod
    def _clean_dict(values: dict[str, Any]) -> dict[str, Any]:
        cleaned: dict[str, Any] = {}
        for key, value in values.items():
            if value is None:
                continue
            if isinstance(value, str) and value.strip() in _SENTINELS:
                continue
            if isinstance(value, float) and math.isnan(value):
                continue
            cleaned[key] = value
        return cleaned

    @model_validator(mode="before")
    @classmethod
    def _clean_tfl_values(cls, values: Any) -> Any:
        """Strip empty values and stash the raw payload."""
        if not isinstance(values, dict):
            return values
        original = dict(values)
        cleaned = TflBaseModel._clean_dict(original)
        # Keep an explicit raw= from keyword construction.
        if "raw" not in values:
            cleaned["raw"] = original
        return cleaned

"""Shared helpers for TfL endpoint modules.

It is internal to pytflbus and may change at any time.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable
from typing import Any, TypeVar
from urllib.parse import quote

from pydantic import ValidationError

from pytflbus.exceptions import TflApiError

_logger = logging.getLogger(__name__)

M = TypeVar("M")


def path_segment(value: str, *, name: str) -> str:
    """Validate and URL-quote an id used as a path segment."""
    text = str(value).strip() if value is not None else ""
    if not text:
        raise ValueError(f"{name} is required")
    return quote(text, safe="")


def expect_list(payload: Any, *, endpoint: str) -> list[dict[str, Any]]:
    """Return the dict items of a JSON array payload."""
    if not isinstance(payload, list):
        raise TflApiError(f"{endpoint} returned {type(payload).__name__}, expected a list", endpoint=endpoint)
    return [item for item in payload if isinstance(item, dict)]


def expect_object(payload: Any, *, endpoint: str) -> dict[str, Any]:
    if not isinstance(payload, dict):
        raise TflApiError(f"{endpoint} returned {type(payload).__name__}, expected an object", endpoint=endpoint)
    return payload


def list_field(payload: dict[str, Any], key: str) -> list[dict[str, Any]]:
    """``payload[key]`` as a list of dicts, or ``[]`` when absent."""
    value = payload.get(key)
    if not isinstance(value, list):
        return []
    return [item for item in value if isinstance(item, dict)]


def parse_items(
    items: Iterable[dict[str, Any]],
    build: Callable[[dict[str, Any]], M],
    *,
    endpoint: str,
) -> list[M]:
    """Build a model per item, dropping items that fail validation."""
    parsed: list[M] = []
    for item in items:
        try:
            parsed.append(build(item))
        except ValidationError as exc:
            _logger.debug("Dropping malformed item from %s: %s", endpoint, exc)
    return parsed

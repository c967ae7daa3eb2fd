"""Normalization helpers.

Centralizes defensive parsing and placeholder handling.
"""

from __future__ import annotations

import math
import re
from typing import Any

# "Forest Road (Stop K)" -> indicator "K"
_STOP_LETTER_RE = re.compile(r"(?:Stop\s+)([A-Z0-9]+)", re.IGNORECASE)
_STOP_SUFFIX_RE = re.compile(r"\s*\(?Stop\s+[A-Z0-9]+\)?", re.IGNORECASE)


def safe_float(value: Any) -> float | None:
    if value is None or value == "" or value == "--":
        return None
    if isinstance(value, bool):
        return None
    try:
        result = float(value)
    except (TypeError, ValueError):
        return None
    if math.isnan(result) or math.isinf(result):
        return None
    return result


def safe_int(value: Any) -> int | None:
    parsed = safe_float(value)
    if parsed is None:
        return None
    return int(parsed)


def safe_str(value: Any) -> str | None:
    if value is None:
        return None
    text = str(value).strip()
    return text if text else None


def is_valid_position(lat: Any, lon: Any) -> bool:
    """Return True when *lat*/*lon* form a usable WGS84 coordinate.

    Entities failing this check are dropped before they reach the map
    so nothing is ever drawn at (0, 0) or at NaN screen coordinates.
    """
    lat_f = safe_float(lat)
    lon_f = safe_float(lon)
    if lat_f is None or lon_f is None:
        return False
    return -90.0 <= lat_f <= 90.0 and -180.0 <= lon_f <= 180.0


def extract_stop_letter(name: str | None) -> str | None:
    """Pull the stop letter out of names such as ``"Forest Road (Stop K)"``."""
    if not name:
        return None
    match = _STOP_LETTER_RE.search(name)
    return match.group(1) if match else None


def clean_stop_name(name: str | None) -> str:
    """Strip the ``(Stop K)`` suffix from a stop name for display."""
    if not name:
        return ""
    return _STOP_SUFFIX_RE.sub("", name).strip()


def dedupe_by(items: list[dict[str, Any]], key: str) -> list[dict[str, Any]]:
    """Keep the first item for each distinct ``item[key]`` value, preserving order."""
    seen: set[Any] = set()
    unique: list[dict[str, Any]] = []
    for item in items:
        marker = item.get(key)
        if marker in seen:
            continue
        seen.add(marker)
        unique.append(item)
    return unique

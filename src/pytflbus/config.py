"""Client and map configuration for pytflbus."""

from __future__ import annotations

import dataclasses
import os
from collections.abc import Mapping
from typing import Any

from pytflbus._constants import (
    BASE_URL,
    BUS_STOP_TYPES,
    LONDON_CENTER,
    OSM_TILE_URL,
    TILE_SIZE,
    USER_AGENT,
)
from pytflbus.exceptions import TflConfigError


def _env_float(env: Mapping[str, str], key: str) -> float | None:
    value = env.get(key)
    if value is None:
        return None
    try:
        return float(value)
    except ValueError as exc:
        raise TflConfigError(f"{key} must be numeric, got {value!r}") from exc


def _env_int(env: Mapping[str, str], key: str) -> int | None:
    parsed = _env_float(env, key)
    if parsed is None:
        return None
    return int(parsed)


@dataclasses.dataclass(frozen=True)
class TflConfig:
    """Client configuration.

    Parameters
    ----------
    base_url : str
        TfL unified API base URL.
    app_key : str or None
        Optional TfL developer key, sent as the ``app_key`` query
        parameter.  Anonymous access works but is rate limited.
    request_timeout : float
        Total time budget in seconds for a single upstream request.
    search_timeout : float
        Time budget for a stop search; a slower search resolves to no
        results instead of hanging the search box.
    search_debounce : float
        Seconds a search waits before hitting the network.  A newer
        query arriving during the wait replaces it without a request.
    search_max_results : int
        ``maxResults`` requested from ``/StopPoint/Search``.
    search_result_limit : int
        Matches kept after de-duplication by stop name.
    nearby_radius : int
        Radius in metres for nearby-stop lookups.
    stop_types : str
        ``stopTypes`` filter for nearby-stop lookups.
    tracked_vehicle_limit : int
        Maximum number of vehicles located per stop, to avoid fanning out
        too many requests.
    arrivals_poll_interval : float
        Seconds between arrival refreshes for the selected stop.
    vehicle_poll_interval : float
        Seconds between live bus position refreshes.
    arrivals_cache_ttl : float
        How long cached arrivals are shown before a refresh is required.
    user_agent : str
        ``User-Agent`` header value.
    """

    base_url: str = BASE_URL
    app_key: str | None = None
    request_timeout: float = 10.0
    search_timeout: float = 5.0
    search_debounce: float = 0.3
    search_max_results: int = 20
    search_result_limit: int = 5
    nearby_radius: int = 500
    stop_types: str = BUS_STOP_TYPES
    tracked_vehicle_limit: int = 5
    arrivals_poll_interval: float = 30.0
    vehicle_poll_interval: float = 15.0
    arrivals_cache_ttl: float = 60.0
    user_agent: str = USER_AGENT

    def __post_init__(self) -> None:
        for name in (
            "request_timeout",
            "search_timeout",
            "arrivals_poll_interval",
            "vehicle_poll_interval",
        ):
            if getattr(self, name) <= 0:
                raise TflConfigError(f"{name} must be positive")
        if self.search_debounce < 0:
            raise TflConfigError("search_debounce must not be negative")
        if self.nearby_radius <= 0:
            raise TflConfigError("nearby_radius must be positive")
        if self.search_result_limit <= 0 or self.tracked_vehicle_limit <= 0:
            raise TflConfigError("result limits must be positive")

    @classmethod
    def from_env(cls, **overrides: Any) -> TflConfig:
        """Create configuration from ``TFL_*`` environment variables.

        Explicit keyword arguments override environment values.
        """
        env = os.environ
        config_kwargs: dict[str, Any] = {}

        _ENV_STR_MAP = {
            "TFL_BASE_URL": "base_url",
            "TFL_APP_KEY": "app_key",
            "TFL_STOP_TYPES": "stop_types",
            "TFL_USER_AGENT": "user_agent",
        }
        for env_key, field_name in _ENV_STR_MAP.items():
            val = env.get(env_key)
            if val is not None:
                config_kwargs[field_name] = val

        _ENV_FLOAT_MAP = {
            "TFL_REQUEST_TIMEOUT": "request_timeout",
            "TFL_SEARCH_TIMEOUT": "search_timeout",
            "TFL_SEARCH_DEBOUNCE": "search_debounce",
            "TFL_ARRIVALS_POLL_INTERVAL": "arrivals_poll_interval",
            "TFL_VEHICLE_POLL_INTERVAL": "vehicle_poll_interval",
            "TFL_ARRIVALS_CACHE_TTL": "arrivals_cache_ttl",
        }
        for env_key, field_name in _ENV_FLOAT_MAP.items():
            parsed = _env_float(env, env_key)
            if parsed is not None:
                config_kwargs[field_name] = parsed

        _ENV_INT_MAP = {
            "TFL_SEARCH_MAX_RESULTS": "search_max_results",
            "TFL_SEARCH_RESULT_LIMIT": "search_result_limit",
            "TFL_NEARBY_RADIUS": "nearby_radius",
            "TFL_TRACKED_VEHICLE_LIMIT": "tracked_vehicle_limit",
        }
        for env_key, field_name in _ENV_INT_MAP.items():
            parsed_int = _env_int(env, env_key)
            if parsed_int is not None:
                config_kwargs[field_name] = parsed_int

        config_kwargs.update(overrides)
        return cls(**config_kwargs)


@dataclasses.dataclass(frozen=True)
class MapConfig:
    """Viewport engine parameters.

    The dashboard shipped several map widgets that disagreed on the
    lower zoom bound (3 for the interactive map, 8 for the compact one).
    Both are reachable through ``min_zoom``; 3 is the default.

    Parameters
    ----------
    tile_url_template : str
        ``str.format`` template with ``{z}``, ``{x}`` and ``{y}``.
    tile_size : int
        Tile edge in pixels.
    min_zoom, max_zoom : int
        Inclusive zoom bounds.
    default_center : tuple[float, float]
        ``(latitude, longitude)`` used by reset and as the last fallback.
    default_zoom : int
        Zoom used by reset.
    selection_zoom : int
        Zoom applied when following a selected stop.
    user_zoom : int
        Zoom applied when centring on the user's location.
    overview_zoom : int
        Zoom applied when centring on the bounding box of all stops.
    cull_margin : float
        Pixels beyond the viewport edge within which markers still render.
    """

    tile_url_template: str = OSM_TILE_URL
    tile_size: int = TILE_SIZE
    min_zoom: int = 3
    max_zoom: int = 18
    default_center: tuple[float, float] = LONDON_CENTER
    default_zoom: int = 13
    selection_zoom: int = 16
    user_zoom: int = 15
    overview_zoom: int = 14
    cull_margin: float = 50.0

    def __post_init__(self) -> None:
        if self.min_zoom < 0 or self.max_zoom < self.min_zoom:
            raise TflConfigError(f"invalid zoom range [{self.min_zoom}, {self.max_zoom}]")
        if self.tile_size <= 0:
            raise TflConfigError("tile_size must be positive")
        if self.cull_margin < 0:
            raise TflConfigError("cull_margin must not be negative")
        for token in ("{z}", "{x}", "{y}"):
            if token not in self.tile_url_template:
                raise TflConfigError(f"tile_url_template is missing {token}")

    @classmethod
    def from_env(cls, **overrides: Any) -> MapConfig:
        """Create map configuration from ``TFL_MAP_*`` environment variables."""
        env = os.environ
        config_kwargs: dict[str, Any] = {}

        template = env.get("TFL_MAP_TILE_URL")
        if template is not None:
            config_kwargs["tile_url_template"] = template

        for env_key, field_name in {
            "TFL_MAP_MIN_ZOOM": "min_zoom",
            "TFL_MAP_MAX_ZOOM": "max_zoom",
            "TFL_MAP_DEFAULT_ZOOM": "default_zoom",
        }.items():
            parsed = _env_int(env, env_key)
            if parsed is not None:
                config_kwargs[field_name] = parsed

        margin = _env_float(env, "TFL_MAP_CULL_MARGIN")
        if margin is not None:
            config_kwargs["cull_margin"] = margin

        lat = _env_float(env, "TFL_MAP_DEFAULT_LAT")
        lon = _env_float(env, "TFL_MAP_DEFAULT_LON")
        if lat is not None and lon is not None:
            config_kwargs["default_center"] = (lat, lon)

        config_kwargs.update(overrides)
        return cls(**config_kwargs)

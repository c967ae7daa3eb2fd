"""pytflbus - Async London bus tracker: TfL client and slippy-map engine."""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("pytflbus")
except PackageNotFoundError:
    __version__ = "0+local"
from pytflbus.client import TflClient
from pytflbus.config import MapConfig, TflConfig
from pytflbus.exceptions import (
    TflApiError,
    TflConfigError,
    TflError,
    TflNotFoundError,
    TflRateLimitError,
    TflTimeoutError,
    TflTransportError,
)
from pytflbus.favorites import FavoritesPort, InMemoryFavorites
from pytflbus.map.engine import LiveMap, MapFrame
from pytflbus.map.types import GeoPoint, ViewportSize
from pytflbus.map.viewport import ViewportState
from pytflbus.models import BusArrival, BusLocation, BusStop
from pytflbus.tracker import BusTracker

__all__ = [
    "__version__",
    "BusArrival",
    "BusLocation",
    "BusStop",
    "BusTracker",
    "FavoritesPort",
    "GeoPoint",
    "InMemoryFavorites",
    "LiveMap",
    "MapConfig",
    "MapFrame",
    "TflApiError",
    "TflClient",
    "TflConfig",
    "TflConfigError",
    "TflError",
    "TflNotFoundError",
    "TflRateLimitError",
    "TflTimeoutError",
    "TflTransportError",
    "ViewportSize",
    "ViewportState",
]

"""
Radio domain module.

Provides the station catalog, locator parsing, and broadcaster-specific
stream URL resolution.
"""

from .exceptions import (
    InvalidURLError,
    NoStreamFoundError,
    NoStreamURLError,
    PlaybackFailedError,
    RadioError,
)
from .models import Episode, Station, StationCategory
from .providers import ProviderKind, StreamLocator, is_http_url, parse_locator
from .stations import (
    default_catalog,
    filter_by_category,
    find_station,
    load_catalog,
    station_from_entry,
)
from .stream_resolver import resolve_locator, resolve_stream_url

__all__ = [
    # Models
    "Station",
    "StationCategory",
    "Episode",
    # Errors
    "RadioError",
    "InvalidURLError",
    "NoStreamFoundError",
    "NoStreamURLError",
    "PlaybackFailedError",
    # Locators
    "ProviderKind",
    "StreamLocator",
    "parse_locator",
    "is_http_url",
    # Catalog
    "default_catalog",
    "load_catalog",
    "station_from_entry",
    "filter_by_category",
    "find_station",
    # Resolution
    "resolve_locator",
    "resolve_stream_url",
]

"""
Station catalog.

The built-in catalog plus any ``[[stations]]`` entries from config.toml.
Stations are constructed once at startup and shared by reference afterwards.
"""

from typing import Any, Dict, Iterable, List, Optional

from loguru import logger

from mlradio.core.config import Config

from .models import Station, StationCategory

# Shorter id prefixes collide with ordinary words
MIN_ID_PREFIX = 6

_DEFAULT_ENTRIES = [
    # KBS
    ("KBS 1Radio", "kbs://21", StationCategory.KOREAN),
    ("KBS 2Radio Happy FM", "kbs://22", StationCategory.KOREAN),
    ("KBS 3Radio Cool FM", "kbs://23", StationCategory.KOREAN),
    ("KBS Classic FM", "kbs://24", StationCategory.KOREAN),
    # MBC
    ("MBC Standard FM", "mbc://sfm", StationCategory.KOREAN),
    ("MBC FM4U", "mbc://mfm", StationCategory.KOREAN),
    ("MBC All That Music", "mbc://chm", StationCategory.KOREAN),
    # SBS
    ("SBS Love FM", "sbs://love", StationCategory.KOREAN),
    ("SBS Power FM", "sbs://power", StationCategory.KOREAN),
    # Other broadcasters with fixed HLS streams
    ("BBS Buddhist Radio", "bbs://main", StationCategory.KOREAN),
    ("YTN Radio", "ytn://main", StationCategory.KOREAN),
    ("Arirang Radio", "arirang://main", StationCategory.KOREAN),
    # iHeart
    ("KISS FM 106.1", "https://n35a-e2.revma.ihrhls.com/zc181", StationCategory.INTERNATIONAL),
    ("STAR 102.1", "https://n10a-e2.revma.ihrhls.com/zc2815", StationCategory.INTERNATIONAL),
    ("The New MiX 102.9", "https://n10a-e2.revma.ihrhls.com/zc2237", StationCategory.INTERNATIONAL),
    # Podcasts
    ("Syntax", "https://feed.syntax.fm/rss", StationCategory.PODCAST),
    ("Lex Fridman Podcast", "https://lexfridman.com/feed/podcast/", StationCategory.PODCAST),
]


def default_catalog() -> List[Station]:
    """Build the built-in station list."""
    return [
        Station(name=name, url=url, category=category)
        for name, url, category in _DEFAULT_ENTRIES
    ]


def station_from_entry(entry: Dict[str, Any]) -> Optional[Station]:
    """Build a Station from a config ``[[stations]]`` table.

    Returns:
        Station, or None if the entry is incomplete or has an unknown category
    """
    name = entry.get("name")
    url = entry.get("url")
    if not name or not url:
        logger.warning(f"Skipping station entry without name/url: {entry}")
        return None

    try:
        category = StationCategory(str(entry.get("category", "international")).lower())
    except ValueError:
        logger.warning(f"Skipping station {name!r}: unknown category {entry.get('category')!r}")
        return None

    return Station(name=name, url=url, category=category)


def load_catalog(config: Optional[Config] = None) -> List[Station]:
    """Built-in catalog followed by stations configured in config.toml."""
    stations = default_catalog()

    if config is not None:
        for entry in config.stations:
            station = station_from_entry(entry)
            if station is not None:
                stations.append(station)

    logger.debug(f"Catalog loaded with {len(stations)} stations")
    return stations


def filter_by_category(
    stations: Iterable[Station], category: Optional[StationCategory]
) -> List[Station]:
    if category is None:
        return list(stations)
    return [s for s in stations if s.category is category]


def find_station(stations: Iterable[Station], query: str) -> Optional[Station]:
    """Find a station by name or id.

    Exact (case-insensitive) name wins, then an id prefix, then a unique
    name substring.

    Args:
        stations: Catalog to search
        query: Station name, name fragment, or id prefix

    Returns:
        Matching station or None if nothing (or more than one fragment match) fits
    """
    query = query.strip()
    if not query:
        return None

    stations = list(stations)
    lowered = query.lower()

    for station in stations:
        if station.name.lower() == lowered:
            return station

    if len(lowered) >= MIN_ID_PREFIX:
        for station in stations:
            if station.id.startswith(lowered):
                return station

    partial = [s for s in stations if lowered in s.name.lower()]
    if len(partial) == 1:
        return partial[0]

    return None

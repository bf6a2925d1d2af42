"""Stream URL resolution for catalog stations.

Turns a station's locator into a directly playable URL. Korean broadcasters
hand out short-lived stream URLs through their own web APIs, so those are
looked up on every play; the rest are fixed or literal URLs. Every lookup is
a single attempt with no caching.
"""

from typing import Callable, Dict, Optional

import requests
from loguru import logger

from .exceptions import InvalidURLError, NoStreamFoundError
from .models import Station
from .providers import ProviderKind, StreamLocator, is_http_url, parse_locator

KBS_CHANNEL_API = "https://cfpwwwapi.kbs.co.kr/api/v1/landing/live/channel_code/{code}"
MBC_STREAM_API = "https://sminiplay.imbc.com/aacplay.ashx?agent=webapp&channel={channel}"
MBC_ALL_THAT_MUSIC_API = "https://sminiplay.imbc.com/aacplay.ashx?agent=webapp&channel=chm"
SBS_STREAM_API = (
    "https://apis.sbs.co.kr/play-api/1.0/livestream/"
    "{channel}pc/{channel}fm?protocol=hls&ssl=Y"
)

BBS_STREAM_URL = "https://bbslive.clouducs.com/bbsradio-live/livestream/playlist.m3u8"
YTN_STREAM_URL = (
    "https://radiolive.ytn.co.kr/radio/_definst_/20211118_fmlive/playlist.m3u8"
)
ARIRANG_STREAM_URL = (
    "https://amdlive-ch01-ctnd-com.akamaized.net/"
    "arirang_1ch/smil:arirang_1ch.smil/playlist.m3u8"
)


def _get(url: str, timeout: Optional[float]) -> requests.Response:
    """Single GET attempt; transport and HTTP errors become NoStreamFoundError."""
    logger.debug(f"GET {url}")
    try:
        response = requests.get(url, timeout=timeout)
        response.raise_for_status()
    except requests.RequestException as e:
        raise NoStreamFoundError(f"Request failed for {url}: {e}") from e
    return response


def _get_text_url(url: str, timeout: Optional[float]) -> str:
    """Fetch an endpoint whose body is the raw stream URL."""
    response = _get(url, timeout)
    stream_url = response.content.decode("utf-8", errors="replace").strip()
    if not stream_url:
        raise NoStreamFoundError(f"Empty stream URL from {url}")
    return stream_url


def get_kbs_stream_url(code: str, timeout: Optional[float] = None) -> str:
    """Look up a KBS channel (21, 22, 23, 24) via the landing API.

    Args:
        code: KBS channel code
        timeout: Request timeout in seconds (None waits indefinitely)

    Returns:
        The ``service_url`` of the first channel item

    Raises:
        NoStreamFoundError: If the request fails or the payload has no stream
    """
    api_url = KBS_CHANNEL_API.format(code=code)
    response = _get(api_url, timeout)

    try:
        data = response.json()
    except ValueError as e:
        raise NoStreamFoundError(f"Invalid JSON from {api_url}") from e

    items = data.get("channel_item") if isinstance(data, dict) else None
    if not isinstance(items, list) or not items:
        raise NoStreamFoundError(f"No channel_item for KBS channel {code}")

    first = items[0]
    service_url = first.get("service_url") if isinstance(first, dict) else None
    if not isinstance(service_url, str) or not service_url:
        raise NoStreamFoundError(f"No service_url for KBS channel {code}")

    return service_url


def get_mbc_stream_url(channel: str, timeout: Optional[float] = None) -> str:
    """Look up an MBC channel (sfm, mfm, chm)."""
    if channel == "chm":
        return _get_text_url(MBC_ALL_THAT_MUSIC_API, timeout)
    return _get_text_url(MBC_STREAM_API.format(channel=channel), timeout)


def get_sbs_stream_url(channel: str, timeout: Optional[float] = None) -> str:
    """Look up an SBS channel (love, power) as an HLS stream."""
    return _get_text_url(SBS_STREAM_API.format(channel=channel), timeout)


_Lookup = Callable[[StreamLocator, Optional[float]], str]

_LOOKUPS: Dict[ProviderKind, _Lookup] = {
    ProviderKind.KBS: lambda loc, timeout: get_kbs_stream_url(loc.channel, timeout),
    ProviderKind.MBC: lambda loc, timeout: get_mbc_stream_url(loc.channel, timeout),
    ProviderKind.SBS: lambda loc, timeout: get_sbs_stream_url(loc.channel, timeout),
    ProviderKind.BBS: lambda loc, timeout: BBS_STREAM_URL,
    ProviderKind.YTN: lambda loc, timeout: YTN_STREAM_URL,
    ProviderKind.ARIRANG: lambda loc, timeout: ARIRANG_STREAM_URL,
    ProviderKind.DIRECT: lambda loc, timeout: loc.channel,
}


def resolve_locator(locator: StreamLocator, timeout: Optional[float] = None) -> str:
    """Resolve a parsed locator to a playable URL.

    Raises:
        InvalidURLError: If the provider returned something that is not a URL
        NoStreamFoundError: If the provider yielded no stream
    """
    stream_url = _LOOKUPS[locator.kind](locator, timeout)

    if not is_http_url(stream_url):
        raise InvalidURLError(
            f"{locator.kind.value} returned an invalid stream URL: {stream_url!r}"
        )

    return stream_url


def resolve_stream_url(station: Station, timeout: Optional[float] = None) -> str:
    """Resolve a station to a directly playable stream URL.

    Args:
        station: Korean or international catalog station
        timeout: Request timeout in seconds (None waits indefinitely)

    Returns:
        Concrete stream URL

    Raises:
        InvalidURLError: Malformed locator or unknown scheme
        NoStreamFoundError: Provider lookup yielded no stream
    """
    try:
        locator = parse_locator(station.url)
        stream_url = resolve_locator(locator, timeout)
    except (InvalidURLError, NoStreamFoundError) as e:
        logger.warning(f"Failed to resolve {station.name} ({station.url}): {e}")
        raise

    logger.info(f"Resolved {station.name}: {stream_url}")
    return stream_url

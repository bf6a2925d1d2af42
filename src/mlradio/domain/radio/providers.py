"""Parsing of catalog station locators into provider variants.

Catalog URLs either use a broadcaster scheme (``kbs://21``, ``mbc://sfm``,
``sbs://love``, ``bbs://main``, ``ytn://main``, ``arirang://main``) or are a
literal HTTP(S) stream URL. Parsing happens once here so the resolver can
dispatch on a closed set of kinds.
"""

from dataclasses import dataclass
from enum import Enum
from urllib.parse import urlsplit

from .exceptions import InvalidURLError


class ProviderKind(Enum):
    """Known stream providers."""

    KBS = "kbs"
    MBC = "mbc"
    SBS = "sbs"
    BBS = "bbs"
    YTN = "ytn"
    ARIRANG = "arirang"
    DIRECT = "direct"  # Literal http(s) URL


# Providers whose channel selects an API endpoint
CHANNEL_PROVIDERS = frozenset({ProviderKind.KBS, ProviderKind.MBC, ProviderKind.SBS})

_SCHEME_TO_KIND = {
    kind.value: kind for kind in ProviderKind if kind is not ProviderKind.DIRECT
}


@dataclass(frozen=True)
class StreamLocator:
    """A parsed station locator."""

    kind: ProviderKind
    channel: str  # Channel code for scheme locators, full URL for DIRECT


def is_http_url(url: str) -> bool:
    """Check that ``url`` is an absolute http(s) URL with a host."""
    try:
        parts = urlsplit(url)
    except ValueError:
        return False
    return parts.scheme in ("http", "https") and bool(parts.netloc)


def parse_locator(url: str) -> StreamLocator:
    """Parse a catalog URL into a StreamLocator.

    Args:
        url: Station locator from the catalog

    Returns:
        Parsed locator

    Raises:
        InvalidURLError: If the scheme is unknown, the URL is malformed, or a
            channel-based provider has no channel
    """
    if not url:
        raise InvalidURLError("Empty station URL")

    url = url.strip()
    scheme, sep, rest = url.partition("://")
    if not sep:
        raise InvalidURLError(f"Station URL has no scheme: {url}")

    scheme = scheme.lower()
    if scheme in ("http", "https"):
        if not is_http_url(url):
            raise InvalidURLError(f"Malformed stream URL: {url}")
        return StreamLocator(kind=ProviderKind.DIRECT, channel=url)

    kind = _SCHEME_TO_KIND.get(scheme)
    if kind is None:
        raise InvalidURLError(f"Unknown station scheme '{scheme}': {url}")

    channel = rest.strip().strip("/")
    if kind in CHANNEL_PROVIDERS and not channel:
        raise InvalidURLError(f"Missing channel in station URL: {url}")

    return StreamLocator(kind=kind, channel=channel)

"""
Podcast RSS feed parsing.

Only the latest episode matters, and feeds list newest first, so the first
entry in the document is the one played. The feed body is fetched with
requests and parsed with feedparser.
"""

import re
from typing import Optional, Tuple, Union

import feedparser
import requests
from loguru import logger

from mlradio.domain.radio.exceptions import NoStreamFoundError
from mlradio.domain.radio.models import Episode

# Episode number prefixes, tried in order: "928: Title" then "#928 Title"
_COLON_NUMBER_RE = re.compile(r"^(\d+):")
_HASH_NUMBER_RE = re.compile(r"#(\d+)")
_COLON_PREFIX_RE = re.compile(r"^\d+:\s*")
_HASH_PREFIX_RE = re.compile(r"^#\d+\s*")


def split_episode_number(raw_title: str) -> Tuple[Optional[str], str]:
    """Extract the episode number and strip its prefix from a title.

    The first matching pattern decides both the number and the stripping rule.

    Examples:
        >>> split_episode_number("928: Some Episode")
        ('928', 'Some Episode')
        >>> split_episode_number("#928 Some Episode")
        ('928', 'Some Episode')
        >>> split_episode_number("Plain Episode")
        (None, 'Plain Episode')
    """
    match = _COLON_NUMBER_RE.search(raw_title)
    if match:
        return match.group(1), _COLON_PREFIX_RE.sub("", raw_title, count=1)

    match = _HASH_NUMBER_RE.search(raw_title)
    if match:
        return match.group(1), _HASH_PREFIX_RE.sub("", raw_title, count=1)

    return None, raw_title


def _find_audio_enclosure(entry) -> Optional[str]:
    for enclosure in entry.get("enclosures", []):
        url = enclosure.get("href")
        if url and enclosure.get("type", "").lower().startswith("audio/"):
            return url.strip()
    return None


def parse_latest_episode(feed_body: Union[str, bytes]) -> Episode:
    """Parse the latest episode out of an RSS document.

    Args:
        feed_body: RSS/XML document

    Returns:
        Episode for the first entry

    Raises:
        NoStreamFoundError: No entry, no title, or no audio enclosure
    """
    if isinstance(feed_body, str):
        feed_body = feed_body.encode("utf-8")

    # Bytes are never treated as a URL or file name
    parsed = feedparser.parse(feed_body or b"")
    if not parsed.entries:
        raise NoStreamFoundError("Feed contains no items")
    entry = parsed.entries[0]

    raw_title = (entry.get("title") or "").strip()
    if not raw_title:
        raise NoStreamFoundError("Latest feed item has no title")

    number, title = split_episode_number(raw_title)

    audio_url = _find_audio_enclosure(entry)
    if not audio_url:
        raise NoStreamFoundError(f"Feed item {raw_title!r} has no audio enclosure")

    return Episode(title=title, number=number, audio_url=audio_url)


def fetch_latest_episode(feed_url: str, timeout: Optional[float] = None) -> Episode:
    """Fetch a podcast feed and return its latest episode.

    Single attempt, no retry.

    Args:
        feed_url: RSS feed URL
        timeout: Request timeout in seconds (None waits indefinitely)

    Raises:
        NoStreamFoundError: Fetch failed or the feed has no playable episode
    """
    logger.debug(f"Fetching podcast feed {feed_url}")
    try:
        response = requests.get(feed_url, timeout=timeout)
        response.raise_for_status()
    except requests.RequestException as e:
        logger.warning(f"Podcast feed request failed for {feed_url}: {e}")
        raise NoStreamFoundError(f"Feed request failed for {feed_url}: {e}") from e

    episode = parse_latest_episode(response.content)
    logger.info(
        f"Latest episode from {feed_url}: {episode.display_title} -> {episode.audio_url}"
    )
    return episode

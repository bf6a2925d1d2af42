"""Podcast domain - latest-episode lookup from RSS feeds."""

from .feed import fetch_latest_episode, parse_latest_episode, split_episode_number

__all__ = [
    "fetch_latest_episode",
    "parse_latest_episode",
    "split_episode_number",
]

"""
Radio domain models.

Contains data structures for representing catalog stations and podcast episodes.
"""

import uuid
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional


class StationCategory(str, Enum):
    """How a station's locator is turned into a playable URL."""

    KOREAN = "korean"  # Broadcaster-specific scheme (kbs://, mbc://, ...)
    INTERNATIONAL = "international"  # Literal HTTP(S) stream URL
    PODCAST = "podcast"  # RSS feed, play the latest episode


@dataclass(frozen=True)
class Station:
    """Represents a catalog radio station or podcast feed.

    Stations are built once from the catalog and never mutated. Identity is
    the generated ``id``, so two entries with the same name and URL are still
    distinct selections.
    """

    name: str = field(compare=False)
    url: str = field(compare=False)  # 'kbs://21', 'https://...', feed URL
    category: StationCategory = field(
        default=StationCategory.INTERNATIONAL, compare=False
    )
    id: str = field(default_factory=lambda: uuid.uuid4().hex)

    @property
    def is_podcast(self) -> bool:
        return self.category is StationCategory.PODCAST


@dataclass(frozen=True)
class Episode:
    """The most recent installment of a podcast feed."""

    title: str  # Episode number prefix stripped
    number: Optional[str]
    audio_url: str

    @property
    def display_title(self) -> str:
        if self.number:
            return f"#{self.number} {self.title}"
        return self.title

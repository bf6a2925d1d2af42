"""
Observable playback session state.

The session publishes immutable SessionState snapshots; observers never see
a half-applied transition.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from mlradio.domain.radio.models import Episode, Station


class PlaybackStatus(Enum):
    IDLE = "idle"
    LOADING = "loading"
    PLAYING = "playing"
    PAUSED = "paused"
    ERROR = "error"


@dataclass(frozen=True)
class SessionState:
    """Snapshot of the playback session.

    Invariants:
        - current_station is None exactly when no playback attempt is active
        - is_playing and is_loading are never both True
        - current_episode is only set for podcast stations
    """

    status: PlaybackStatus = PlaybackStatus.IDLE
    is_playing: bool = False
    is_loading: bool = False
    error_message: Optional[str] = None
    current_station: Optional[Station] = None
    current_episode: Optional[Episode] = None
    volume: float = 0.5
    current_time: float = 0.0  # Podcast only
    duration: float = 0.0  # Podcast only
    progress: float = 0.0  # current_time / duration in [0, 1]

    @property
    def is_active(self) -> bool:
        return self.current_station is not None


def clamp_unit(value: float) -> float:
    """Clamp a value to the 0.0 - 1.0 range."""
    return max(0.0, min(1.0, float(value)))


def compute_progress(current_time: float, duration: float) -> float:
    """Playback progress in [0, 1]; 0 while the duration is unknown."""
    if duration <= 0:
        return 0.0
    return clamp_unit(current_time / duration)

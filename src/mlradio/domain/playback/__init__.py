"""Playback domain - MPV integration and session state management.

This domain handles:
- MPV player integration via JSON IPC
- Provider events (ready, failed, playing, paused, buffering, interrupted)
- The single playback session and its observable state
"""

# Player integration
from .player import (
    EventCallback,
    MpvPlayer,
    Player,
    PlayerFactory,
    ProviderEvent,
    check_mpv_available,
    format_time,
    get_mpv_property,
    mpv_player_factory,
    send_mpv_command,
)

# Session
from .session import PlaybackSession, resolve_failure_message
from .state import PlaybackStatus, SessionState, clamp_unit, compute_progress

__all__ = [
    # Player
    "EventCallback",
    "MpvPlayer",
    "Player",
    "PlayerFactory",
    "ProviderEvent",
    "check_mpv_available",
    "format_time",
    "get_mpv_property",
    "mpv_player_factory",
    "send_mpv_command",
    # Session
    "PlaybackSession",
    "resolve_failure_message",
    "PlaybackStatus",
    "SessionState",
    "clamp_unit",
    "compute_progress",
]

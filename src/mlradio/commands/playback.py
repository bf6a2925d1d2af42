"""
Playback command handlers for mlradio.

Handles: play, pause, stop, vol, seek, status
"""

from typing import List

from mlradio.context import AppContext
from mlradio.core.output import log
from mlradio.domain import playback
from mlradio.domain.radio import find_station
from mlradio.utils.parsers import parse_percent


def handle_play_command(ctx: AppContext, args: List[str]) -> bool:
    """Play a station by name, name fragment, or id prefix."""
    if not args:
        log("Usage: play <station>", level="warning")
        return True

    query = " ".join(args)
    station = find_station(ctx.stations, query)
    if station is None:
        log(f"❌ No unique station matches '{query}' (try 'list')", level="error")
        return True

    log(f"📻 Tuning in: {station.name}")
    ctx.session.play(station)
    return True


def handle_pause_command(ctx: AppContext) -> bool:
    """Toggle between play and pause."""
    if not ctx.session.has_player:
        log("Nothing is playing", level="warning")
        return True

    ctx.session.toggle_play_pause()
    return True


def handle_stop_command(ctx: AppContext) -> bool:
    ctx.session.stop()
    log("⏹ Stopped")
    return True


def handle_volume_command(ctx: AppContext, args: List[str]) -> bool:
    """Show or set volume (0-100)."""
    if not args:
        log(f"🔊 Volume: {round(ctx.session.state.volume * 100)}%")
        return True

    volume = parse_percent(args[0])
    if volume is None:
        log("Usage: vol <0-100>", level="warning")
        return True

    ctx.session.set_volume(volume)
    log(f"🔊 Volume: {round(volume * 100)}%")
    return True


def handle_seek_command(ctx: AppContext, args: List[str]) -> bool:
    """Seek to a percentage of the current podcast episode."""
    progress = parse_percent(args[0]) if args else None
    if progress is None:
        log("Usage: seek <0-100>", level="warning")
        return True

    state = ctx.session.state
    if state.duration <= 0:
        log("Seeking is only available for podcast episodes", level="warning")
        return True

    ctx.session.seek(progress)
    log(f"⏩ Seeking to {playback.format_time(progress * state.duration)}")
    return True


def handle_status_command(ctx: AppContext) -> bool:
    """Display the current session state."""
    state = ctx.session.state

    if state.current_station is None:
        log("Nothing is playing")
        if state.error_message:
            log(f"Last error: {state.error_message}", level="warning")
        return True

    log(f"📻 {state.current_station.name} [{state.status.value}]")

    if state.current_episode is not None:
        log(f"   🎙 {state.current_episode.display_title}")

    if state.duration > 0:
        log(
            f"   {playback.format_time(state.current_time)} / "
            f"{playback.format_time(state.duration)} ({state.progress:.0%})"
        )

    log(f"   🔊 {round(state.volume * 100)}%")

    if state.error_message:
        log(f"   ❌ {state.error_message}", level="error")

    return True

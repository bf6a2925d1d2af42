"""
mlradio - Interactive loop

The main thread runs the MainContext; a reader thread turns stdin lines into
commands posted onto it. Session state changes are printed as they happen.
"""

import threading
from pathlib import Path
from typing import Optional, Tuple

from loguru import logger

from mlradio import router
from mlradio.context import AppContext
from mlradio.core import config
from mlradio.core.console import safe_print
from mlradio.core.output import log, setup_loguru
from mlradio.domain import playback
from mlradio.domain.playback import PlaybackStatus, SessionState
from mlradio.utils.parsers import parse_command


def setup_logging(cfg: config.Config) -> None:
    """Configure loguru from the [logging] config section."""
    if cfg.logging.log_file:
        log_file = Path(cfg.logging.log_file).expanduser()
    else:
        log_file = config.get_data_dir() / "mlradio.log"

    setup_loguru(
        log_file,
        level=cfg.logging.level,
        max_file_size_mb=cfg.logging.max_file_size_mb,
        backup_count=cfg.logging.backup_count,
        console_output=cfg.logging.console_output,
    )


def describe_state(state: SessionState) -> Optional[Tuple[str, str]]:
    """User-facing line for a session state, as (message, level)."""
    station = state.current_station

    if state.status is PlaybackStatus.ERROR and state.error_message:
        return f"❌ {state.error_message}", "error"

    if station is None:
        return None

    if state.status is PlaybackStatus.LOADING:
        return f"⏳ Loading {station.name}...", "info"

    if state.status is PlaybackStatus.PLAYING:
        message = f"▶ Now playing: {station.name}"
        if state.current_episode is not None:
            message += f" | {state.current_episode.display_title}"
        return message, "success"

    if state.status is PlaybackStatus.PAUSED:
        return f"⏸ Paused: {station.name}", "info"

    return None


class StatusPrinter:
    """Session observer printing status transitions (not progress ticks)."""

    def __init__(self) -> None:
        self._last_key = None

    def __call__(self, state: SessionState) -> None:
        key = (
            state.status,
            state.error_message,
            state.current_station,
            state.current_episode,
        )
        if key == self._last_key:
            return
        self._last_key = key

        described = describe_state(state)
        if described is not None:
            message, level = described
            log(message, level=level)


def _dispatch_line(ctx: AppContext, line: str) -> None:
    command, args = parse_command(line)
    if not router.handle_command(ctx, command, args):
        ctx.main.stop()


def _read_input(ctx: AppContext) -> None:
    """Reader thread: forward stdin lines to the main context."""
    while True:
        try:
            line = input()
        except (EOFError, KeyboardInterrupt):
            ctx.main.post(_dispatch_line, ctx, "quit")
            return

        ctx.main.post(_dispatch_line, ctx, line)
        if parse_command(line)[0] in ("quit", "exit"):
            return


def interactive_mode(station_query: Optional[str] = None) -> None:
    """Run the interactive command loop, optionally starting a station."""
    cfg = config.load_config()
    config.ensure_directories()
    setup_logging(cfg)

    if not playback.check_mpv_available():
        safe_print("❌ mpv is required for playback but was not found on PATH", style="red")
        return

    ctx = AppContext.create(cfg)
    unsubscribe = ctx.session.subscribe(StatusPrinter())

    safe_print("mlradio - type 'help' for commands, 'list' for stations", style="bold")
    logger.info(f"Interactive mode started with {len(ctx.stations)} stations")

    if station_query:
        ctx.main.post(_dispatch_line, ctx, f"play {station_query}")

    reader = threading.Thread(
        target=_read_input, args=(ctx,), name="stdin-reader", daemon=True
    )
    reader.start()

    try:
        ctx.main.run_forever()
    except KeyboardInterrupt:
        safe_print("\nGoodbye!")
    finally:
        ctx.session.stop()
        unsubscribe()
        logger.info("Interactive mode stopped")

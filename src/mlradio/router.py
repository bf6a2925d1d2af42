"""
Command routing for mlradio.

Routes user commands to appropriate handler functions.
"""

from typing import List

from rich.markup import escape

from mlradio.commands import playback
from mlradio.commands import stations
from mlradio.context import AppContext
from mlradio.core.console import safe_print


def print_help() -> None:
    """Display help information for available commands."""
    help_text = """
mlradio - Korean & international radio, plus podcasts

Available commands:
  list [category]   List stations (korean, international, podcast)
  play <station>    Play a station by name, name fragment, or id
  pause             Toggle pause/resume
  stop              Stop playback
  vol [0-100]       Show or set volume
  seek <0-100>      Seek within the current podcast episode
  status            Show current station and player status
  help              Show this help message
  quit, exit        Exit the program

Examples:
  play KBS Classic FM
  play syntax
  vol 30
  seek 50
"""
    safe_print(escape(help_text.strip()))


def handle_command(ctx: AppContext, command: str, args: List[str]) -> bool:
    """
    Handle a single command.

    Args:
        ctx: Application context
        command: Command name
        args: Command arguments

    Returns:
        Whether the interactive loop should continue
    """
    if command in ['quit', 'exit']:
        if ctx.session.has_player:
            safe_print("Stopping playback...")
        ctx.session.stop()
        safe_print("Goodbye!")
        return False

    elif command == 'help':
        print_help()
        return True

    elif command in ['list', 'ls']:
        return stations.handle_list_command(ctx, args)

    elif command == 'play':
        return playback.handle_play_command(ctx, args)

    elif command in ['pause', 'resume', 'toggle']:
        return playback.handle_pause_command(ctx)

    elif command == 'stop':
        return playback.handle_stop_command(ctx)

    elif command in ['vol', 'volume']:
        return playback.handle_volume_command(ctx, args)

    elif command == 'seek':
        return playback.handle_seek_command(ctx, args)

    elif command == 'status':
        return playback.handle_status_command(ctx)

    elif command == '':
        return True

    else:
        safe_print(
            escape(f"Unknown command: '{command}'. Type 'help' for available commands."),
            style="yellow",
        )
        return True

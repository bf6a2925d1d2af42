"""Application context for explicit state passing.

Bundles what command handlers need: configuration, the station catalog,
the main context, and the playback session.
"""

from dataclasses import dataclass
from typing import List

from mlradio.core.config import Config
from mlradio.core.dispatch import MainContext
from mlradio.domain.playback import PlaybackSession, mpv_player_factory
from mlradio.domain.radio import Station, load_catalog


@dataclass
class AppContext:
    """Application context passed to command handlers.

    Attributes:
        config: Application configuration
        stations: Station catalog (built once, never mutated)
        main: Main execution context owning session state
        session: The single playback session
    """

    config: Config
    stations: List[Station]
    main: MainContext
    session: PlaybackSession

    @classmethod
    def create(cls, config: Config) -> "AppContext":
        """Create the application context with an mpv-backed session.

        Args:
            config: Application configuration

        Returns:
            New AppContext with the catalog loaded and an idle session
        """
        main = MainContext()
        session = PlaybackSession(
            main,
            mpv_player_factory(config.player.mpv_socket_path),
            volume=config.player.volume,
            progress_interval=config.player.progress_interval,
            request_timeout=config.network.request_timeout,
        )
        return cls(
            config=config,
            stations=load_catalog(config),
            main=main,
            session=session,
        )

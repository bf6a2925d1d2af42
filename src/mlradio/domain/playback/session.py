"""
Playback session: the single active player and its observable state.

All public methods run on the main context. Stream resolution, player
startup, seeking and progress sampling happen on background threads and post
their results back.
Each play attempt gets a new generation number; any continuation carrying an
older generation is dropped, so a slow lookup for a previous station can
never overwrite the current selection.
"""

from dataclasses import replace
from typing import Callable, List, Optional

from loguru import logger

from mlradio.core.dispatch import MainContext, Ticker
from mlradio.domain.podcast.feed import fetch_latest_episode
from mlradio.domain.radio.exceptions import RadioError
from mlradio.domain.radio.models import Episode, Station, StationCategory
from mlradio.domain.radio.stream_resolver import resolve_stream_url

from .player import Player, PlayerFactory, ProviderEvent
from .state import PlaybackStatus, SessionState, clamp_unit, compute_progress

Observer = Callable[[SessionState], None]

_RESOLVE_FAILURE_MESSAGES = {
    StationCategory.KOREAN: "Korean radio connection failed: {name}",
    StationCategory.INTERNATIONAL: "International radio connection failed: {name}",
    StationCategory.PODCAST: "Podcast feed failed: {name}",
}


def resolve_failure_message(station: Station) -> str:
    return _RESOLVE_FAILURE_MESSAGES[station.category].format(name=station.name)


class PlaybackSession:
    """Owns the active player and publishes SessionState snapshots."""

    def __init__(
        self,
        context: MainContext,
        player_factory: PlayerFactory,
        resolver: Callable[..., str] = resolve_stream_url,
        feed_parser: Callable[..., Episode] = fetch_latest_episode,
        volume: float = 0.5,
        progress_interval: float = 0.5,
        request_timeout: Optional[float] = None,
    ):
        """
        Args:
            context: Main context all state changes are marshalled onto
            player_factory: Creates a player for a resolved URL
            resolver: ``resolver(station, timeout=...) -> url`` for radio stations
            feed_parser: ``feed_parser(feed_url, timeout=...) -> Episode`` for podcasts
            volume: Initial volume (0.0 - 1.0)
            progress_interval: Seconds between podcast progress samples
            request_timeout: Timeout for resolver/feed requests (None waits forever)
        """
        self.context = context
        self.player_factory = player_factory
        self.resolver = resolver
        self.feed_parser = feed_parser
        self.progress_interval = progress_interval
        self.request_timeout = request_timeout

        self._state = SessionState(volume=clamp_unit(volume))
        self._observers: List[Observer] = []
        self._generation = 0
        self._player: Optional[Player] = None
        self._ticker: Optional[Ticker] = None

    # ── Observation ──

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def has_player(self) -> bool:
        return self._player is not None

    def subscribe(self, observer: Observer) -> Callable[[], None]:
        """Register an observer; returns a function that unsubscribes it."""
        self._observers.append(observer)

        def unsubscribe() -> None:
            if observer in self._observers:
                self._observers.remove(observer)

        return unsubscribe

    def _publish(self, **changes) -> None:
        new_state = replace(self._state, **changes)
        if new_state == self._state:
            return
        self._state = new_state

        for observer in list(self._observers):
            try:
                observer(new_state)
            except Exception:
                logger.exception(f"Session observer {observer!r} failed")

    def _is_current(self, generation: int) -> bool:
        return generation == self._generation

    # ── Transport controls ──

    def play(self, station: Station) -> None:
        """Stop whatever is playing and start resolving ``station``."""
        logger.info(f"Play requested: {station.name} ({station.url})")

        self._teardown()
        self._generation += 1
        generation = self._generation

        self._publish(
            status=PlaybackStatus.LOADING,
            is_loading=True,
            is_playing=False,
            error_message=None,
            current_station=station,
            current_episode=None,
            current_time=0.0,
            duration=0.0,
            progress=0.0,
        )

        self.context.spawn(
            self._resolve, station, generation, name=f"resolve-{generation}"
        )

    def stop(self) -> None:
        """Tear down the player and reset playback state. Safe to call when idle."""
        self._generation += 1
        if self._player is not None:
            logger.info("Stopping playback")
        self._teardown()

        self._publish(
            status=PlaybackStatus.IDLE,
            is_playing=False,
            is_loading=False,
            current_station=None,
            current_episode=None,
            current_time=0.0,
            duration=0.0,
            progress=0.0,
        )

    def toggle_play_pause(self) -> None:
        """Flip between playing and paused. No-op without a player."""
        if self._player is None:
            return

        if self._state.is_playing:
            self._player.pause()
            self._publish(status=PlaybackStatus.PAUSED, is_playing=False)
        else:
            self._player.play()
            self._publish(
                status=PlaybackStatus.PLAYING, is_playing=True, is_loading=False
            )

    def set_volume(self, volume: float) -> None:
        """Set volume (clamped to 0.0 - 1.0) and apply it to the active player."""
        volume = clamp_unit(volume)
        self._publish(volume=volume)
        if self._player is not None:
            self._player.set_volume(volume)

    def seek(self, progress: float) -> None:
        """Seek to a fraction of the episode duration.

        Silently ignored without a player or a known duration, since only
        podcasts expose seeking.
        """
        player = self._player
        duration = self._state.duration
        if player is None or duration <= 0:
            logger.debug(f"Ignoring seek to {progress}: no seekable media")
            return

        progress = clamp_unit(progress)
        target_time = progress * duration
        self.context.spawn(
            self._seek_worker,
            player,
            self._generation,
            target_time,
            progress,
            name="seek",
        )

    # ── Internals ──

    def _teardown(self) -> None:
        if self._ticker is not None:
            self._ticker.cancel()
            self._ticker = None

        if self._player is not None:
            player = self._player
            self._player = None
            player.close()

    def _resolve(self, station: Station, generation: int) -> None:
        """Background task: turn the station into a playable URL."""
        episode: Optional[Episode] = None
        try:
            if station.category is StationCategory.PODCAST:
                episode = self.feed_parser(station.url, timeout=self.request_timeout)
                url = episode.audio_url
            else:
                url = self.resolver(station, timeout=self.request_timeout)
        except RadioError as e:
            logger.warning(f"Resolution failed for {station.name}: {e}")
            self.context.post(self._on_resolve_failed, station, generation)
            return
        except Exception:
            logger.exception(f"Unexpected error resolving {station.name}")
            self.context.post(self._on_resolve_failed, station, generation)
            return

        self.context.post(self._on_resolved, station, generation, url, episode)

    def _on_resolve_failed(self, station: Station, generation: int) -> None:
        if not self._is_current(generation):
            logger.debug(f"Discarding stale failure for {station.name}")
            return

        self._publish(
            status=PlaybackStatus.ERROR,
            error_message=resolve_failure_message(station),
            is_loading=False,
            is_playing=False,
        )

    def _on_resolved(
        self,
        station: Station,
        generation: int,
        url: str,
        episode: Optional[Episode],
    ) -> None:
        if not self._is_current(generation):
            logger.debug(f"Discarding stale stream URL for {station.name}: {url}")
            return

        logger.info(f"Loading {station.name}: {url}")

        def on_event(event: ProviderEvent, detail: Optional[str] = None) -> None:
            self.context.post(self._on_provider_event, generation, event, detail)

        player = self.player_factory(url, on_event)
        self._player = player
        player.set_volume(self._state.volume)

        if episode is not None:
            self._publish(current_episode=episode)

        self.context.spawn(
            self._start_worker, player, station, generation, name=f"start-{generation}"
        )

    def _start_worker(self, player: Player, station: Station, generation: int) -> None:
        """Background task: launch the player (may block for several seconds)."""
        try:
            player.start()
        except RadioError as e:
            logger.error(f"Player failed to start for {station.name}: {e}")
            self.context.post(self._on_start_failed, player, station, generation)
            return
        except Exception:
            logger.exception(f"Unexpected error starting player for {station.name}")
            self.context.post(self._on_start_failed, player, station, generation)
            return

        self.context.post(self._on_started, player, station, generation)

    def _on_start_failed(self, player: Player, station: Station, generation: int) -> None:
        if not self._is_current(generation):
            player.close()
            return

        self._teardown()
        self._publish(
            status=PlaybackStatus.ERROR,
            error_message=f"Failed to load station: {station.name}",
            is_loading=False,
            is_playing=False,
        )

    def _on_started(self, player: Player, station: Station, generation: int) -> None:
        if not self._is_current(generation):
            # Superseded while launching
            player.close()
            return

        if station.category is StationCategory.PODCAST:
            self._ticker = self.context.every(
                self.progress_interval,
                lambda: self._sample_progress(player, generation),
            )

    def _on_provider_event(
        self, generation: int, event: ProviderEvent, detail: Optional[str] = None
    ) -> None:
        if not self._is_current(generation) or self._player is None:
            return

        station = self._state.current_station
        name = station.name if station else "unknown"

        if event is ProviderEvent.READY:
            logger.info(f"Player ready to play: {name}")
            self._player.play()
            self._publish(
                status=PlaybackStatus.PLAYING, is_playing=True, is_loading=False
            )
        elif event is ProviderEvent.FAILED:
            logger.error(f"Player failed for {name}: {detail}")
            self._publish(
                status=PlaybackStatus.ERROR,
                error_message=f"Failed to load station: {name}",
                is_playing=False,
                is_loading=False,
            )
        elif event is ProviderEvent.PLAYING:
            self._publish(
                status=PlaybackStatus.PLAYING,
                is_playing=True,
                is_loading=False,
                error_message=None,
            )
        elif event is ProviderEvent.PAUSED:
            self._publish(
                status=PlaybackStatus.PAUSED, is_playing=False, is_loading=False
            )
        elif event is ProviderEvent.BUFFERING:
            self._publish(
                status=PlaybackStatus.LOADING, is_loading=True, is_playing=False
            )
        elif event is ProviderEvent.INTERRUPTED:
            logger.error(f"Playback interrupted for {name}: {detail}")
            self._publish(
                status=PlaybackStatus.ERROR,
                error_message=f"Playback error: {detail or 'stream interrupted'}",
                is_playing=False,
                is_loading=False,
            )

    def _seek_worker(
        self, player: Player, generation: int, target_time: float, progress: float
    ) -> None:
        """Background task: ask the player to seek and report completion."""
        try:
            completed = player.seek(target_time)
        except Exception:
            logger.exception(f"Seek to {target_time:.1f}s failed")
            return

        if completed:
            self.context.post(self._on_seek_complete, generation, target_time, progress)
        else:
            logger.warning(f"Player rejected seek to {target_time:.1f}s")

    def _on_seek_complete(
        self, generation: int, target_time: float, progress: float
    ) -> None:
        if not self._is_current(generation):
            return
        self._publish(current_time=target_time, progress=progress)

    def _sample_progress(self, player: Player, generation: int) -> None:
        """Ticker thread: read the player position and post it back."""
        current_time = player.current_time()
        duration = player.duration()
        self.context.post(self._apply_progress, generation, current_time, duration)

    def _apply_progress(
        self, generation: int, current_time: float, duration: float
    ) -> None:
        if not self._is_current(generation):
            return
        self._publish(
            current_time=current_time,
            duration=duration,
            progress=compute_progress(current_time, duration),
        )

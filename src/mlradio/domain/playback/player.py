"""
MPV player integration with JSON IPC for mlradio

One MpvPlayer wraps one mpv process playing one URL. Commands go over short
lived IPC connections; a second, long lived connection observes mpv events
and translates them into provider events for the session.
"""

import json
import os
import socket
import subprocess
import tempfile
import threading
import time
import uuid
from enum import Enum
from pathlib import Path
from typing import Any, Callable, Optional, Protocol

from loguru import logger

from mlradio.domain.radio.exceptions import PlaybackFailedError

# Seconds to wait for mpv to create its IPC socket
SOCKET_TIMEOUT = 5.0

# Seconds to wait for a command reply
COMMAND_TIMEOUT = 2.0

# Observed property ids on the event connection
_PAUSE_OBSERVER = 1
_CACHE_OBSERVER = 2


class ProviderEvent(Enum):
    """Load/playback notifications raised by the underlying player."""

    READY = "ready"  # Media loaded, ready to start playback
    FAILED = "failed"  # Media could not be loaded
    PLAYING = "playing"
    PAUSED = "paused"
    BUFFERING = "buffering"  # Waiting for network data
    INTERRUPTED = "interrupted"  # Playback failed mid-stream


EventCallback = Callable[[ProviderEvent, Optional[str]], None]


class Player(Protocol):
    """Interface the playback session drives."""

    def start(self) -> None:
        """Begin loading the media. Raises PlaybackFailedError."""
        ...

    def play(self) -> None: ...

    def pause(self) -> None: ...

    def set_volume(self, volume: float) -> None:
        """Apply volume in the 0.0 - 1.0 range."""
        ...

    def seek(self, position: float) -> bool:
        """Seek to an absolute position in seconds; blocks until acknowledged."""
        ...

    def current_time(self) -> float: ...

    def duration(self) -> float: ...

    def close(self) -> None: ...


PlayerFactory = Callable[[str, EventCallback], Player]


def check_mpv_available() -> bool:
    """Check if MPV is available on the system."""
    try:
        result = subprocess.run(
            ["mpv", "--version"], capture_output=True, text=True, timeout=5
        )
        return result.returncode == 0
    except (subprocess.SubprocessError, FileNotFoundError, OSError):
        return False


def _read_reply(sock: socket.socket) -> Optional[dict[str, Any]]:
    """Read lines until the command reply (the message carrying 'error')."""
    buffer = b""
    while True:
        chunk = sock.recv(4096)
        if not chunk:
            return None
        buffer += chunk
        while b"\n" in buffer:
            line, buffer = buffer.split(b"\n", 1)
            try:
                message = json.loads(line.decode("utf-8"))
            except (UnicodeDecodeError, json.JSONDecodeError):
                continue
            # Events broadcast to every client can arrive ahead of the reply
            if "error" in message:
                return message


def mpv_request(
    socket_path: Optional[str], command: dict[str, Any]
) -> Optional[dict[str, Any]]:
    """Send a JSON IPC command to MPV and return its reply."""
    if not socket_path or not os.path.exists(socket_path):
        return None

    try:
        with socket.socket(socket.AF_UNIX, socket.SOCK_STREAM) as sock:
            sock.settimeout(COMMAND_TIMEOUT)
            sock.connect(socket_path)
            sock.sendall((json.dumps(command) + "\n").encode("utf-8"))
            return _read_reply(sock)
    except (socket.error, OSError):
        return None


def send_mpv_command(socket_path: Optional[str], command: dict[str, Any]) -> bool:
    """Send JSON IPC command to MPV."""
    reply = mpv_request(socket_path, command)
    return reply is not None and reply.get("error") == "success"


def get_mpv_property(socket_path: Optional[str], property_name: str) -> Any:
    """Get a property value from MPV."""
    reply = mpv_request(socket_path, {"command": ["get_property", property_name]})
    if reply and reply.get("error") == "success":
        return reply.get("data")
    return None


def _default_socket_path() -> str:
    temp_dir = Path(tempfile.gettempdir())
    return str(temp_dir / f"mlradio-mpv-{os.getpid()}-{uuid.uuid4().hex[:8]}")


class MpvPlayer:
    """A single mpv process playing a single stream URL."""

    def __init__(
        self,
        url: str,
        on_event: EventCallback,
        socket_path: Optional[str] = None,
        volume: float = 0.5,
    ):
        self.url = url
        self.on_event = on_event
        self.socket_path = socket_path or _default_socket_path()
        self.volume = volume
        self.process: Optional[subprocess.Popen] = None
        self._event_sock: Optional[socket.socket] = None
        self._reader: Optional[threading.Thread] = None
        self._ready = False
        self._paused = True
        self._closed = False

    @property
    def is_running(self) -> bool:
        return (
            self.process is not None
            and self.process.poll() is None
            and os.path.exists(self.socket_path)
        )

    def start(self) -> None:
        """Start mpv paused, subscribe to events, and load the URL."""
        if self._closed:
            raise PlaybackFailedError("Player already closed")

        logger.info(f"Starting MPV for {self.url} (socket: {self.socket_path})")

        if os.path.exists(self.socket_path):
            logger.debug(f"Removing existing socket: {self.socket_path}")
            try:
                os.unlink(self.socket_path)
            except OSError as e:
                raise PlaybackFailedError(
                    f"Cannot remove stale MPV socket {self.socket_path}: {e}"
                ) from e

        cmd = [
            "mpv",
            "--idle=yes",
            "--no-video",
            "--no-terminal",
            "--pause",
            f"--input-ipc-server={self.socket_path}",
            f"--volume={_to_mpv_volume(self.volume)}",
            "--keep-open=yes",
            "--load-scripts=no",
        ]

        try:
            self.process = subprocess.Popen(
                cmd,
                stdout=subprocess.DEVNULL,
                stderr=subprocess.DEVNULL,
                stdin=subprocess.DEVNULL,
            )
        except (subprocess.SubprocessError, OSError) as e:
            raise PlaybackFailedError(f"Failed to start MPV: {e}") from e

        if self._closed:
            # Closed by the session while launching
            self.close()
            raise PlaybackFailedError("Player closed during startup")

        start_time = time.time()
        while not os.path.exists(self.socket_path):
            if self._closed:
                raise PlaybackFailedError("Player closed during startup")
            if time.time() - start_time > SOCKET_TIMEOUT:
                logger.error(f"MPV socket creation timeout after {SOCKET_TIMEOUT}s")
                self.close()
                raise PlaybackFailedError("MPV did not create its IPC socket")
            time.sleep(0.1)

        try:
            self._event_sock = socket.socket(socket.AF_UNIX, socket.SOCK_STREAM)
            self._event_sock.connect(self.socket_path)
            for observer_id, name in (
                (_PAUSE_OBSERVER, "pause"),
                (_CACHE_OBSERVER, "paused-for-cache"),
            ):
                command = {"command": ["observe_property", observer_id, name]}
                self._event_sock.sendall((json.dumps(command) + "\n").encode("utf-8"))
        except OSError as e:
            self.close()
            raise PlaybackFailedError(f"MPV event connection failed: {e}") from e

        self._reader = threading.Thread(
            target=self._read_events, name="mpv-events", daemon=True
        )
        self._reader.silent_logging = True
        self._reader.start()

        if not send_mpv_command(
            self.socket_path, {"command": ["loadfile", self.url, "replace"]}
        ):
            self.close()
            raise PlaybackFailedError(f"MPV rejected {self.url}")

    def _emit(self, event: ProviderEvent, detail: Optional[str] = None) -> None:
        if self._closed:
            return
        logger.debug(f"MPV event {event.value} ({detail or '-'}) for {self.url}")
        self.on_event(event, detail)

    def _read_events(self) -> None:
        """Read mpv's line-delimited event stream until closed."""
        buffer = b""
        sock = self._event_sock
        try:
            while not self._closed and sock is not None:
                chunk = sock.recv(4096)
                if not chunk:
                    break
                buffer += chunk
                while b"\n" in buffer:
                    line, buffer = buffer.split(b"\n", 1)
                    try:
                        message = json.loads(line.decode("utf-8"))
                    except (UnicodeDecodeError, json.JSONDecodeError):
                        continue
                    self._handle_message(message)
        except OSError as e:
            if not self._closed:
                logger.warning(f"MPV event connection error: {e}")

        if not self._closed:
            self._emit(ProviderEvent.INTERRUPTED, "Lost connection to MPV")

    def _handle_message(self, message: dict[str, Any]) -> None:
        event = message.get("event")
        if event is None:
            return  # Command reply

        if event == "file-loaded":
            self._ready = True
            self._emit(ProviderEvent.READY)

        elif event == "end-file" and message.get("reason") == "error":
            detail = message.get("file_error") or "unknown error"
            if self._ready:
                self._emit(ProviderEvent.INTERRUPTED, detail)
            else:
                self._emit(ProviderEvent.FAILED, detail)
            self._ready = False

        elif event == "property-change":
            name = message.get("name")
            data = message.get("data")
            if name == "pause":
                self._paused = bool(data)
                if self._ready:
                    self._emit(
                        ProviderEvent.PAUSED if self._paused else ProviderEvent.PLAYING
                    )
            elif name == "paused-for-cache" and self._ready:
                if data:
                    self._emit(ProviderEvent.BUFFERING)
                elif not self._paused:
                    self._emit(ProviderEvent.PLAYING)

    def play(self) -> None:
        send_mpv_command(self.socket_path, {"command": ["set_property", "pause", False]})

    def pause(self) -> None:
        send_mpv_command(self.socket_path, {"command": ["set_property", "pause", True]})

    def set_volume(self, volume: float) -> None:
        self.volume = volume
        if self.is_running:
            send_mpv_command(
                self.socket_path,
                {"command": ["set_property", "volume", _to_mpv_volume(volume)]},
            )

    def seek(self, position: float) -> bool:
        return send_mpv_command(
            self.socket_path, {"command": ["seek", position, "absolute"]}
        )

    def current_time(self) -> float:
        return get_mpv_property(self.socket_path, "time-pos") or 0.0

    def duration(self) -> float:
        return get_mpv_property(self.socket_path, "duration") or 0.0

    def close(self) -> None:
        """Stop MPV process and cleanup."""
        self._closed = True

        if self._event_sock is not None:
            try:
                self._event_sock.close()
            except OSError:
                pass
            self._event_sock = None

        if self.process:
            try:
                self.process.kill()
                self.process.wait(timeout=2.0)
            except (OSError, subprocess.TimeoutExpired):
                pass  # Process already terminated or couldn't be killed
            self.process = None

        if os.path.exists(self.socket_path):
            try:
                os.unlink(self.socket_path)
            except OSError:
                pass


def _to_mpv_volume(volume: float) -> int:
    """Map 0.0 - 1.0 onto mpv's 0 - 100 scale."""
    return int(round(max(0.0, min(1.0, volume)) * 100))


def mpv_player_factory(socket_path: Optional[str] = None) -> PlayerFactory:
    """Build a PlayerFactory creating MpvPlayer instances."""

    def create(url: str, on_event: EventCallback) -> Player:
        return MpvPlayer(url, on_event, socket_path=socket_path)

    return create


def format_time(seconds: float) -> str:
    """Format time in seconds to MM:SS format."""
    if seconds < 0:
        return "00:00"

    minutes = int(seconds // 60)
    secs = int(seconds % 60)
    return f"{minutes:02d}:{secs:02d}"

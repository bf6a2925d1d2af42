"""
Configuration management for mlradio
"""

import json
import os
import tomllib
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional


@dataclass
class PlayerConfig:
    """Configuration for the mpv-backed player."""

    mpv_socket_path: Optional[str] = None
    volume: float = 0.5  # 0.0 - 1.0
    progress_interval: float = 0.5  # Seconds between podcast progress samples


@dataclass
class NetworkConfig:
    """Configuration for broadcaster API and feed requests."""

    request_timeout: Optional[float] = None  # None waits indefinitely


@dataclass
class LoggingConfig:
    """Configuration for logging."""

    level: str = "INFO"  # DEBUG, INFO, WARNING, ERROR, CRITICAL
    log_file: Optional[str] = (
        None  # Custom log file path (default: ~/.local/share/mlradio/mlradio.log)
    )
    max_file_size_mb: int = 10  # Maximum log file size before rotation
    backup_count: int = 5  # Number of backup files to keep
    console_output: bool = False  # Also output to stderr (for debugging)


@dataclass
class Config:
    """Main configuration object."""

    player: PlayerConfig = field(default_factory=PlayerConfig)
    network: NetworkConfig = field(default_factory=NetworkConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)
    # Extra catalog entries: [{"name": ..., "url": ..., "category": ...}]
    stations: List[Dict[str, Any]] = field(default_factory=list)


def get_config_dir() -> Path:
    """Get the configuration directory path."""
    config_home = os.environ.get("XDG_CONFIG_HOME")
    if config_home:
        return Path(config_home) / "mlradio"
    return Path.home() / ".config" / "mlradio"


def _find_project_config() -> Optional[Path]:
    """Find config.toml in project root by looking for pyproject.toml.

    Used during development so the project's config file is picked up
    regardless of the working directory.

    Returns:
        Path to config.toml in project root, or None if not found
    """
    current = Path(__file__).resolve().parent
    for parent in [current] + list(current.parents):
        if (parent / "pyproject.toml").exists():
            config_path = parent / "config.toml"
            if config_path.exists():
                return config_path
            # Found project root but no config.toml there
            return None
    return None


def get_config_path() -> Path:
    """Get the main configuration file path.

    Checks for config.toml in the following order:
    1. Project root (detected via pyproject.toml) - for development
    2. Current working directory
    3. XDG_CONFIG_HOME/mlradio (or ~/.config/mlradio)
    """
    project_config = _find_project_config()
    if project_config:
        return project_config

    local_config = Path.cwd() / "config.toml"
    if local_config.exists():
        return local_config

    return get_config_dir() / "config.toml"


def get_data_dir() -> Path:
    """Get the data directory path."""
    data_home = os.environ.get("XDG_DATA_HOME")
    if data_home:
        return Path(data_home) / "mlradio"
    return Path.home() / ".local" / "share" / "mlradio"


def create_default_config() -> str:
    """Create a default configuration TOML content."""
    return """
# mlradio Configuration

[player]
# Path for mpv socket (auto-generated per player if not specified)
# mpv_socket_path = "/tmp/mlradio-mpv.sock"

# Default volume (0.0 - 1.0)
volume = 0.5

# Seconds between podcast progress updates
progress_interval = 0.5

[network]
# Timeout in seconds for broadcaster API and podcast feed requests.
# Leave unset to wait indefinitely.
# request_timeout = 10

[logging]
# Log level: DEBUG, INFO, WARNING, ERROR, CRITICAL
level = "INFO"

# Custom log file path (optional)
# log_file = "~/.local/share/mlradio/mlradio.log"

# Maximum log file size in MB before rotation
max_file_size_mb = 10

# Number of backup log files to keep
backup_count = 5

# Also output logs to stderr (for debugging)
console_output = false

# Extra stations appended to the built-in catalog
# [[stations]]
# name = "My Podcast"
# url = "https://example.com/feed.xml"
# category = "podcast"
""".strip()


def _parse_config(toml_data: Dict[str, Any]) -> Config:
    """Build a Config from parsed TOML data, keeping defaults for missing keys."""
    config = Config()

    if "player" in toml_data:
        player_data = toml_data["player"]
        config.player = PlayerConfig(
            mpv_socket_path=player_data.get("mpv_socket_path"),
            volume=float(player_data.get("volume", config.player.volume)),
            progress_interval=float(
                player_data.get("progress_interval", config.player.progress_interval)
            ),
        )

    if "network" in toml_data:
        network_data = toml_data["network"]
        timeout = network_data.get("request_timeout")
        config.network = NetworkConfig(
            request_timeout=float(timeout) if timeout is not None else None
        )

    if "logging" in toml_data:
        logging_data = toml_data["logging"]
        config.logging = LoggingConfig(
            level=logging_data.get("level", config.logging.level),
            log_file=logging_data.get("log_file"),
            max_file_size_mb=logging_data.get(
                "max_file_size_mb", config.logging.max_file_size_mb
            ),
            backup_count=logging_data.get(
                "backup_count", config.logging.backup_count
            ),
            console_output=logging_data.get(
                "console_output", config.logging.console_output
            ),
        )

    config.stations = list(toml_data.get("stations", []))
    return config


def load_config() -> Config:
    """Load configuration from file or create default.

    Environment variables override TOML values:
    - MLRADIO_LOG_LEVEL
    - MLRADIO_MPV_SOCKET
    """
    from dotenv import load_dotenv

    env_path = get_config_dir() / ".env"
    if env_path.exists():
        load_dotenv(env_path)

    config_path = get_config_path()

    if not config_path.exists():
        config_path.parent.mkdir(parents=True, exist_ok=True)
        with open(config_path, "w", encoding="utf-8") as f:
            f.write(create_default_config())
        print(f"Created default configuration at: {config_path}")
        config = Config()
    else:
        try:
            with open(config_path, "rb") as f:
                toml_data = tomllib.load(f)
            config = _parse_config(toml_data)
        except (OSError, tomllib.TOMLDecodeError, TypeError, ValueError) as e:
            print(f"Error loading configuration from {config_path}: {e}")
            print("Using default configuration.")
            config = Config()

    log_level = os.environ.get("MLRADIO_LOG_LEVEL")
    if log_level:
        config.logging.level = log_level.upper()

    mpv_socket = os.environ.get("MLRADIO_MPV_SOCKET")
    if mpv_socket:
        config.player.mpv_socket_path = mpv_socket

    return config


def _toml_string(value: Any) -> str:
    """Quote a value as a TOML basic string."""
    # JSON string escapes are valid TOML; DEL is the one control JSON leaves raw
    return json.dumps(str(value), ensure_ascii=False).replace("\x7f", "\\u007f")


def save_config(config: Config) -> bool:
    """Save configuration to file."""
    config_path = get_config_path()

    try:
        config_path.parent.mkdir(parents=True, exist_ok=True)

        toml_content = f"""# mlradio Configuration

[player]
volume = {config.player.volume}
progress_interval = {config.player.progress_interval}"""

        if config.player.mpv_socket_path:
            toml_content += f"\nmpv_socket_path = {_toml_string(config.player.mpv_socket_path)}"

        toml_content += "\n\n[network]"
        if config.network.request_timeout is not None:
            toml_content += f"\nrequest_timeout = {config.network.request_timeout}"

        toml_content += f"""

[logging]
level = {_toml_string(config.logging.level)}
max_file_size_mb = {config.logging.max_file_size_mb}
backup_count = {config.logging.backup_count}
console_output = {str(config.logging.console_output).lower()}"""

        if config.logging.log_file:
            toml_content += f"\nlog_file = {_toml_string(config.logging.log_file)}"

        for station in config.stations:
            category = station.get("category", "international")
            toml_content += "\n\n[[stations]]"
            toml_content += f"\nname = {_toml_string(station['name'])}"
            toml_content += f"\nurl = {_toml_string(station['url'])}"
            toml_content += f"\ncategory = {_toml_string(category)}"

        toml_content += "\n"

        with open(config_path, "w", encoding="utf-8") as f:
            f.write(toml_content)

        return True

    except OSError as e:
        print(f"Error saving configuration to {config_path}: {e}")
        return False


def ensure_directories() -> None:
    """Ensure all necessary directories exist."""
    get_config_dir().mkdir(parents=True, exist_ok=True)
    get_data_dir().mkdir(parents=True, exist_ok=True)

"""
mlradio - Entry point

Supports one-shot commands (listing, resolving and adding stations) and the
interactive playback loop.
"""

import argparse
import sys
from typing import Optional

from rich.markup import escape

from mlradio.core import config
from mlradio.core.console import get_console, safe_print
from mlradio.domain.podcast import fetch_latest_episode
from mlradio.domain.radio import (
    RadioError,
    StationCategory,
    filter_by_category,
    find_station,
    is_http_url,
    load_catalog,
    parse_locator,
    resolve_stream_url,
)


def run_list_stations(category_name: Optional[str] = None) -> int:
    """Print the station catalog as a table.

    Args:
        category_name: Optional category filter (korean, international, podcast)

    Returns:
        Exit code (0 for success, 1 for failure)
    """
    from mlradio.commands.stations import parse_category, render_station_table

    category = parse_category(category_name)
    if category_name and category is None:
        print(f"Unknown category: {category_name}", file=sys.stderr)
        return 1

    stations = filter_by_category(load_catalog(config.load_config()), category)
    get_console().print(render_station_table(stations))
    return 0


def run_resolve(query: str) -> int:
    """Resolve a station to its playable URL without starting playback.

    Args:
        query: Station name, name fragment, or id prefix

    Returns:
        Exit code (0 for success, 1 for failure)
    """
    cfg = config.load_config()
    station = find_station(load_catalog(cfg), query)
    if station is None:
        print(f"No unique station matches '{query}'", file=sys.stderr)
        return 1

    timeout = cfg.network.request_timeout

    try:
        if station.is_podcast:
            episode = fetch_latest_episode(station.url, timeout=timeout)
            safe_print(escape(f"{station.name}: {episode.display_title}"), style="bold")
            print(episode.audio_url)
        else:
            print(resolve_stream_url(station, timeout=timeout))
        return 0

    except RadioError as e:
        print(f"Could not resolve {station.name}: {e}", file=sys.stderr)
        return 1


def run_add_station(name: str, url: str, category_name: str = "international") -> int:
    """Append a station to config.toml.

    Args:
        name: Display name, unique across the catalog
        url: Station locator (podcasts take the RSS feed URL)
        category_name: korean, international, or podcast

    Returns:
        Exit code (0 for success, 1 for failure)
    """
    name = name.strip()
    url = url.strip()
    if not name:
        print("Station name cannot be empty", file=sys.stderr)
        return 1

    try:
        category = StationCategory(category_name.lower())
    except ValueError:
        print(f"Unknown category: {category_name}", file=sys.stderr)
        return 1

    if category is StationCategory.PODCAST:
        if not is_http_url(url):
            print(f"Podcast feed must be an http(s) URL: {url}", file=sys.stderr)
            return 1
    else:
        try:
            parse_locator(url)
        except RadioError as e:
            print(f"Invalid station URL: {e}", file=sys.stderr)
            return 1

    cfg = config.load_config()
    if any(s.name.lower() == name.lower() for s in load_catalog(cfg)):
        print(f"A station named '{name}' already exists", file=sys.stderr)
        return 1

    cfg.stations.append({"name": name, "url": url, "category": category.value})
    if not config.save_config(cfg):
        return 1

    safe_print(escape(f"✅ Added {name} ({category.value})"), style="green")
    return 0


def main() -> None:
    """Main entry point for the mlradio command."""
    parser = argparse.ArgumentParser(
        description="mlradio - Korean & international radio, plus podcasts",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )

    subparsers = parser.add_subparsers(dest='subcommand', help='Available commands')

    stations_parser = subparsers.add_parser('stations', help='List catalog stations')
    stations_parser.add_argument(
        '--category',
        choices=['korean', 'international', 'podcast'],
        help='Only list stations in this category',
    )

    resolve_parser = subparsers.add_parser(
        'resolve', help='Print the playable URL for a station'
    )
    resolve_parser.add_argument('station', nargs='+', help='Station name or id')

    play_parser = subparsers.add_parser('play', help='Start playing a station')
    play_parser.add_argument('station', nargs='+', help='Station name or id')

    add_parser = subparsers.add_parser(
        'add-station', help='Add a station to config.toml'
    )
    add_parser.add_argument('name', help='Station name')
    add_parser.add_argument('url', help='Stream locator or podcast feed URL')
    add_parser.add_argument(
        '--category',
        choices=['korean', 'international', 'podcast'],
        default='international',
        help='Station category (default: international)',
    )

    args = parser.parse_args()

    if args.subcommand == 'stations':
        sys.exit(run_list_stations(args.category))

    elif args.subcommand == 'resolve':
        sys.exit(run_resolve(' '.join(args.station)))

    elif args.subcommand == 'add-station':
        sys.exit(run_add_station(args.name, args.url, args.category))

    from .main import interactive_mode

    if args.subcommand == 'play':
        interactive_mode(' '.join(args.station))
    else:
        interactive_mode()


if __name__ == "__main__":
    main()

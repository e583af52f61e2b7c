"""CLI entry points: the offline terminal and the online (HTTP) variant."""

import argparse
import logging
import sys
from typing import List, Optional

from .archive import build_archive
from .config import Settings, get_settings
from .interpreter import CommandInterpreter
from .remote import MastermindAPI, RemoteCommandInterpreter
from .store import GameStore


def configure_logging(settings: Settings) -> None:
    # stderr only: stdout carries the JSON responses
    logging.basicConfig(
        stream=sys.stderr,
        level=getattr(logging, settings.log_level, logging.WARNING),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def main(argv: Optional[List[str]] = None) -> int:
    """Offline Mastermind terminal."""
    parser = argparse.ArgumentParser(
        prog="mastermind",
        description="Mastermind (offline) - API-like terminal",
    )
    parser.add_argument("--debug", action="store_true",
                        help="Print each new game's secret code to STDERR")
    args = parser.parse_args(argv)

    settings = get_settings()
    configure_logging(settings)

    store = GameStore(archive=build_archive(settings), debug=args.debug)
    interpreter = CommandInterpreter(store)
    interpreter.run(sys.stdin, interactive=sys.stdin.isatty())
    return 0


def online_main(argv: Optional[List[str]] = None) -> int:
    """Same commands, answered by a remote Mastermind service."""
    settings = get_settings()
    parser = argparse.ArgumentParser(
        prog="mastermind-online",
        description="Mastermind (online) - terminal client for the HTTP service",
    )
    parser.add_argument("--url", default=settings.api_url,
                        help=f"Service base URL (default: {settings.api_url})")
    args = parser.parse_args(argv)

    configure_logging(settings)

    api = MastermindAPI(args.url, timeout=settings.api_timeout)
    interpreter = RemoteCommandInterpreter(api)
    interpreter.run(sys.stdin, interactive=sys.stdin.isatty())
    return 0


if __name__ == "__main__":
    sys.exit(main())

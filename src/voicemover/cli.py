"""CLI for the voicemover bot."""

from __future__ import annotations

from pathlib import Path
from typing import Optional, Sequence
import argparse
import asyncio
import json
import logging
import sys

from dotenv import find_dotenv, load_dotenv
import discord

from voicemover import __version__
from voicemover.config.settings import SettingsError, load_settings, settings_summary
from voicemover.runtime.app import LOG_FORMAT, run_runtime


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Scheduled voice channel mover for Discord")
    parser.add_argument(
        "--config",
        type=Path,
        help="Path to JSON config file. Environment variables override file values.",
    )
    parser.add_argument(
        "--env-file",
        type=Path,
        help="Load environment variables from this file instead of ./.env.",
    )
    parser.add_argument(
        "--check",
        action="store_true",
        help="Validate settings and print a redacted summary.",
    )
    parser.add_argument(
        "--once",
        action="store_true",
        help="Boot runtime and stop immediately (startup wiring smoke check).",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"voicemover {__version__}",
    )
    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    # Existing environment variables take precedence over the file.
    load_dotenv(dotenv_path=args.env_file or find_dotenv(usecwd=True))

    try:
        settings = load_settings(config_path=args.config)
    except SettingsError as exc:
        return _fatal("Configuration error", exc)

    if args.check:
        print(json.dumps(settings_summary(settings), indent=2, sort_keys=True))
        return 0

    shutdown_event = None
    if args.once:
        shutdown_event = asyncio.Event()
        shutdown_event.set()

    try:
        asyncio.run(run_runtime(settings=settings, shutdown_event=shutdown_event))
    except SettingsError as exc:
        return _fatal("Configuration error", exc)
    except (discord.LoginFailure, discord.PrivilegedIntentsRequired) as exc:
        return _fatal("Discord login failed", exc)
    except KeyboardInterrupt:
        return 130

    return 0


def _fatal(label: str, exc: Exception) -> int:
    if not logging.getLogger().handlers:
        logging.basicConfig(format=LOG_FORMAT)
    logging.getLogger("voicemover.cli").critical("Startup aborted: %s", exc)
    print(f"{label}: {exc}", file=sys.stderr)
    return 2

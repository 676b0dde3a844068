"""CLI bootstrap entry point for rainbowtree."""

from __future__ import annotations

import argparse
import logging
import time
from typing import Optional

from . import __version__
from .commands import default_commands
from .config import AppConfig, default_config, load_config, map_path
from .constants import APP_NAME
from .errors import ConfigError
from .host.context import Host
from .host.dispatch import CommandDispatcher
from .host.repl import Shell
from .logging_utils import log_event, setup_logging
from .terminal import ConsoleTerminal


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog=APP_NAME,
        description="Shell with a rainbow themed TREE command.",
    )
    parser.add_argument(
        "-c",
        "--config",
        help="Path to a JSON config file (absolute, or mapped with ~ / @).",
    )
    parser.add_argument(
        "-l",
        "--log",
        help="Path to a log file (overrides log_file from the config).",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def _resolve_config(args: argparse.Namespace) -> AppConfig:
    config = load_config(args.config) if args.config else default_config()
    if args.log:
        config.log_file = map_path(args.log)
    return config


def main(argv: Optional[list[str]] = None) -> int:
    """Main entry point for the rainbowtree CLI."""
    args = _build_parser().parse_args(argv)

    try:
        config = _resolve_config(args)
    except ConfigError as e:
        print(f"ERROR: {e}")
        return 1

    setup_logging(config.log_file)
    app_started = time.perf_counter()
    log_event(
        "app_start",
        version=__version__,
        config_file=args.config,
        log_file=config.log_file,
        tree_command=config.tree_command,
        color_interval_ms=config.color_interval_ms,
        pacing_threshold=config.pacing_threshold,
    )

    host = Host(config, ConsoleTerminal())
    dispatcher = CommandDispatcher(host, default_commands())

    try:
        code = Shell(host, dispatcher).run()
    except Exception as e:
        log_event(
            "app_stop",
            level=logging.ERROR,
            reason="error",
            uptime_ms=round((time.perf_counter() - app_started) * 1000, 1),
            error_type=type(e).__name__,
            error=str(e),
        )
        raise

    log_event(
        "app_stop",
        reason="exit",
        uptime_ms=round((time.perf_counter() - app_started) * 1000, 1),
    )
    return code

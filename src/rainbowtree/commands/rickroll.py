"""RICKROLL: opens a well-known video in the default browser."""

from __future__ import annotations

import logging
import webbrowser

from ..host.context import Host
from ..host.dispatch import Command
from ..logging_utils import log_event


class RickrollCommand(Command):
    name = "Rickroll"
    description = "Opens a YouTube video in the default browser"
    commands_handled = ("rickroll",)

    def execute(self, text: str, host: Host) -> None:
        url = host.config.rickroll_url
        host.terminal.write_line()
        host.write_prompt()
        try:
            opened = webbrowser.open(url)
        except webbrowser.Error as e:
            opened = False
            log_event(
                "browser_open_failed",
                level=logging.WARNING,
                url=url,
                error_type=type(e).__name__,
                error=str(e),
            )
        if not opened:
            host.terminal.write_line(f"Could not open a browser. Visit {url}")

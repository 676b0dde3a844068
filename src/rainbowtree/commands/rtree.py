"""RTREE: the tree listing, relayed in rotating colours with a little lag."""

from __future__ import annotations

import shlex

from ..errors import UsageError
from ..host.context import Host
from ..host.dispatch import Command
from ..process import CommandProcess
from ..relay import PacingGenerator, RelaySession


class RainbowTreeCommand(Command):
    name = "RainbowTree"
    description = "Rainbow themed tree listing with artificial lag"
    commands_handled = ("rtree",)

    def build_argv(self, text: str, host: Host) -> list[str]:
        """Configured tree program plus whatever followed the command name."""
        _name, _sep, params = text.partition(" ")
        try:
            extra = shlex.split(params)
        except ValueError as e:
            raise UsageError(f"Invalid command syntax: {e}") from e
        return [*host.config.tree_command, *extra]

    def build_session(self, argv: list[str], host: Host) -> RelaySession:
        process = CommandProcess(argv, host_state=host.state)
        return RelaySession(
            process,
            host,
            pacing=PacingGenerator(threshold=host.config.pacing_threshold),
            color_interval=host.config.color_interval_sec,
        )

    def execute(self, text: str, host: Host) -> None:
        self.build_session(self.build_argv(text, host), host).run()

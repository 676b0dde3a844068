"""Host-owned state shared between the shell loop and running commands."""

from __future__ import annotations

import threading
from dataclasses import dataclass, field


class CommandRunningFlag:
    """Boolean "a command is still running" flag that can be waited on."""

    def __init__(self) -> None:
        self._condition = threading.Condition()
        self._running = False

    def set(self) -> None:
        with self._condition:
            self._running = True

    def clear(self) -> None:
        with self._condition:
            self._running = False
            self._condition.notify_all()

    def is_set(self) -> bool:
        with self._condition:
            return self._running

    def wait_cleared(self, timeout: float) -> bool:
        """Wait up to ``timeout`` seconds for the flag to clear.

        Returns whether it is clear; callers proceed either way.
        """
        with self._condition:
            return self._condition.wait_for(lambda: not self._running, timeout=timeout)


@dataclass
class HostState:
    """In-memory state of the command host."""

    edit_mode: bool = False
    input_text: str = ""
    command_running: CommandRunningFlag = field(default_factory=CommandRunningFlag)

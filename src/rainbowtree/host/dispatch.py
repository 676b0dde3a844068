"""Command matching and dispatch."""

from __future__ import annotations

import logging
import re
import time
from collections.abc import Iterable
from dataclasses import dataclass
from typing import Optional

from ..logging_utils import log_event, summarize_command_args
from .context import Host
from .state import HostState


@dataclass
class CommandEvent:
    """One line of input offered to the registered commands."""

    text: str
    edit_mode: bool = False
    handled: bool = False


class Command:
    """Base class for commands the shell can dispatch to.

    Subclasses set ``name``, ``description`` and ``commands_handled`` and
    implement ``execute``.
    """

    name: str = ""
    description: str = ""
    commands_handled: tuple[str, ...] = ()
    edit_mode_handled: bool = False

    def __init__(self) -> None:
        self._pattern: Optional[re.Pattern[str]] = None

    def init(self, state: HostState) -> None:
        """Build the name matcher: any handled name, optionally followed by arguments."""
        if self.commands_handled:
            names = "|".join(re.escape(name) for name in self.commands_handled)
            self._pattern = re.compile(rf"^({names})( .*)?$", re.IGNORECASE)

    def matches(self, text: str) -> bool:
        return self._pattern is not None and self._pattern.match(text.strip()) is not None

    def process(self, event: CommandEvent, host: Host) -> None:
        if self._pattern is None:
            self.init(host.state)
        if event.handled or (event.edit_mode and not self.edit_mode_handled):
            return
        if not self.matches(event.text):
            return
        event.handled = True
        self.execute(event.text.strip(), host)

    def execute(self, text: str, host: Host) -> None:
        raise NotImplementedError


class CommandDispatcher:
    """Offers each input line to the registered commands in order."""

    def __init__(self, host: Host, commands: Iterable[Command] = ()) -> None:
        self._host = host
        self._commands: list[Command] = []
        for command in commands:
            self.register(command)

    @property
    def commands(self) -> tuple[Command, ...]:
        return tuple(self._commands)

    def register(self, command: Command) -> None:
        command.init(self._host.state)
        self._commands.append(command)

    def dispatch(self, text: str) -> bool:
        """Run the first command that claims ``text``; return whether one did."""
        state = self._host.state
        state.input_text = text
        event = CommandEvent(text=text, edit_mode=state.edit_mode)
        handler: Optional[Command] = None
        word = text.strip().split(" ", 1)[0]
        started = time.perf_counter()

        state.command_running.set()
        try:
            with self._host.interrupts.armed():
                for command in self._commands:
                    command.process(event, self._host)
                    if event.handled:
                        handler = command
                        break
        except Exception as error:
            label = word.lower()
            log_event(
                "command_error",
                level=logging.ERROR,
                command=label,
                args_summary=summarize_command_args(label, text),
                error_type=type(error).__name__,
                error=str(error),
            )
            raise
        finally:
            # Handled commands hand back via Host.write_prompt().
            if handler is None:
                state.command_running.clear()

        if handler is None:
            return False

        log_event(
            "command_exec",
            level=logging.INFO,
            command=handler.commands_handled[0],
            args_summary=summarize_command_args(word, text),
            elapsed_ms=round((time.perf_counter() - started) * 1000, 1),
        )
        return True

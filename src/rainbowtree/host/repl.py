"""Interactive shell loop for rainbowtree."""

from __future__ import annotations

import logging
import os
import traceback
from typing import Any, Optional

from prompt_toolkit import PromptSession
from prompt_toolkit.history import InMemoryHistory

from .. import __version__
from ..constants import APP_NAME, DEBUG_ENV_VAR
from ..errors import AppError, UsageError
from .context import Host
from .dispatch import CommandDispatcher

_EXIT = "EXIT"
_EXIT_COMMANDS = frozenset(("exit", "quit"))
_EDIT_MODE_VALUES = {"on": True, "off": False}


def _report_unexpected_error(error: Exception) -> None:
    """Print an unexpected exception with optional debug traceback."""
    print(f"ERROR: {error}")
    if os.getenv(DEBUG_ENV_VAR):
        print("Debug traceback:")
        traceback.print_exc()


def create_prompt_session() -> PromptSession:
    """Create the prompt-toolkit session used for shell input."""
    return PromptSession(history=InMemoryHistory())


class Shell:
    """Reads lines, runs built-ins, and hands everything else to the dispatcher."""

    def __init__(
        self,
        host: Host,
        dispatcher: CommandDispatcher,
        prompt_session: Optional[Any] = None,
    ) -> None:
        self._host = host
        self._dispatcher = dispatcher
        self._prompt_session = prompt_session

    def help_text(self) -> str:
        lines = ["Commands:"]
        for command in self._dispatcher.commands:
            names = " | ".join(command.commands_handled)
            lines.append(f"  {names:<24}{command.description}")
        lines.append(f"  {'editmode [on|off]':<24}Show or set edit mode (commands are ignored)")
        lines.append(f"  {'help':<24}Show this help")
        lines.append(f"  {'exit | quit':<24}Leave the shell")
        return "\n".join(lines)

    def run_builtin(self, text: str) -> Optional[str]:
        """Run a built-in command; return its output, or None if ``text`` is not one."""
        parts = text.split()
        name = parts[0].lower()

        if name in _EXIT_COMMANDS and len(parts) == 1:
            return _EXIT

        if name == "help" and len(parts) == 1:
            return self.help_text()

        if name == "editmode":
            state = self._host.state
            if len(parts) == 1:
                return f"Edit mode: {'on' if state.edit_mode else 'off'}"
            value = _EDIT_MODE_VALUES.get(parts[1].lower()) if len(parts) == 2 else None
            if value is None:
                raise UsageError("Usage: editmode [on|off]")
            state.edit_mode = value
            return f"Edit mode: {parts[1].lower()}"

        return None

    def run(self) -> int:
        """Run the shell loop until exit or end of input."""
        if self._prompt_session is None:
            self._prompt_session = create_prompt_session()

        print(f"{APP_NAME} {__version__}")
        print("Type 'help' for commands, 'exit' or 'quit' to leave, or Ctrl-D")

        while True:
            try:
                line = self._prompt_session.prompt(self._host.config.prompt)
                text = line.strip()
                if not text:
                    continue

                result = self.run_builtin(text)
                if result == _EXIT:
                    print("Exiting.")
                    break
                if result is not None:
                    print(result)
                    continue

                if not self._dispatcher.dispatch(text):
                    if self._host.state.edit_mode:
                        print("Edit mode is on; commands are not run (editmode off to leave)")
                    else:
                        print(f"ERROR: Unknown command: {text.split()[0]}")

            except EOFError:
                print()
                break

            except KeyboardInterrupt:
                # Ctrl+C at the prompt only discards the current line.
                continue

            except AppError as e:
                # Expected errors (usage, config, process misuse)
                print(f"ERROR: {e}")

            except Exception as e:
                logging.error("Unexpected shell error: %s", e, exc_info=True)
                _report_unexpected_error(e)

        return 0

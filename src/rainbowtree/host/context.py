"""Host services handed to every command."""

from __future__ import annotations

from typing import Optional

from ..config import AppConfig
from ..terminal import Terminal
from .interrupts import InterruptSource
from .state import HostState


class Host:
    """Config, state, terminal and interrupt routing of one shell."""

    def __init__(
        self,
        config: AppConfig,
        terminal: Terminal,
        *,
        state: Optional[HostState] = None,
        interrupts: Optional[InterruptSource] = None,
    ) -> None:
        self.config = config
        self.terminal = terminal
        self.state = state if state is not None else HostState()
        self.interrupts = interrupts if interrupts is not None else InterruptSource(self.state)

    def write_prompt(self) -> None:
        """Hand the console back to the shell, which draws the next prompt."""
        self.terminal.flush()
        self.state.command_running.clear()

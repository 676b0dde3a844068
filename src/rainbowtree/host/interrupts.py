"""Routing of Ctrl+C (SIGINT) to the command that is currently running."""

from __future__ import annotations

import contextlib
import logging
import signal
import threading
from collections.abc import Callable, Iterator
from dataclasses import dataclass
from typing import Any, Optional

from .state import HostState


@dataclass
class InterruptEventArgs:
    """Arguments passed to the subscribed interrupt handler.

    A handler clears ``cancel_requested`` to stop the default behaviour
    (raising ``KeyboardInterrupt`` in the main thread).
    """

    signum: int
    cancel_requested: bool = True


InterruptHandler = Callable[[InterruptEventArgs], None]


class InterruptSource:
    """Single-slot interrupt subscription for the duration of a command.

    ``arm()`` installs the SIGINT handler and must run on the main thread;
    ``subscribe``/``unsubscribe`` may be called from any thread.
    """

    def __init__(self, state: HostState) -> None:
        self._state = state
        # Re-entrant: the SIGINT handler reads the slot on the main thread.
        self._lock = threading.RLock()
        self._handler: Optional[InterruptHandler] = None
        self._previous: Any = None
        self._armed = False

    @property
    def handler(self) -> Optional[InterruptHandler]:
        with self._lock:
            return self._handler

    @property
    def is_armed(self) -> bool:
        return self._armed

    def subscribe(self, handler: InterruptHandler) -> None:
        with self._lock:
            self._handler = handler

    def unsubscribe(self, handler: InterruptHandler) -> None:
        with self._lock:
            if self._handler == handler:
                self._handler = None

    def arm(self) -> None:
        if self._armed:
            return
        if threading.current_thread() is not threading.main_thread():
            logging.warning("Interrupt source not armed: not on the main thread")
            return
        self._previous = signal.signal(signal.SIGINT, self._on_signal)
        self._armed = True

    def disarm(self) -> None:
        if not self._armed:
            return
        previous = self._previous
        if previous is None:
            previous = signal.default_int_handler
        signal.signal(signal.SIGINT, previous)
        self._previous = None
        self._armed = False

    @contextlib.contextmanager
    def armed(self) -> Iterator[None]:
        self.arm()
        try:
            yield
        finally:
            self.disarm()

    def raise_interrupt(self, signum: int = signal.SIGINT) -> None:
        """Deliver one interrupt to the subscribed handler."""
        handler = self.handler
        args = InterruptEventArgs(signum=signum)
        if handler is None:
            # Nothing running wants it; the host just stops waiting.
            logging.info("Interrupt with no subscribed handler")
            self._state.command_running.clear()
            return

        handler(args)
        if args.cancel_requested:
            raise KeyboardInterrupt
        self._state.command_running.clear()

    def _on_signal(self, signum: int, _frame: Any) -> None:
        self.raise_interrupt(signum)

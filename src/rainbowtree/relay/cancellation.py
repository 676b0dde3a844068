"""Bridge from the host interrupt signal to a cooperative relay stop."""

from __future__ import annotations

import logging
import threading
from typing import Any, Optional, Protocol

from ..host.interrupts import InterruptEventArgs, InterruptSource
from ..logging_utils import log_event


class Stoppable(Protocol):
    def stop(self) -> None: ...


class CancellationToken:
    """One-shot cancellation signal that also wakes pending waits."""

    def __init__(self) -> None:
        self._event = threading.Event()

    @property
    def is_cancelled(self) -> bool:
        return self._event.is_set()

    def cancel(self) -> None:
        self._event.set()

    def wait(self, timeout: float) -> bool:
        """Sleep up to ``timeout`` seconds; return True if cancelled."""
        return self._event.wait(timeout)


class CancellationCoordinator:
    """Owns the stop flag and token of one relay session.

    The stop flag is level-triggered: once set it stays set. The token is the
    edge that wakes a pacing wait. Both are driven from the interrupt handler
    under the session lock, the same lock the output handler holds while it
    writes, so a stop never lands in the middle of a line.
    """

    def __init__(
        self,
        interrupts: InterruptSource,
        lock: threading.RLock,
        *,
        terminal: Optional[Any] = None,
    ) -> None:
        self.token = CancellationToken()
        self._interrupts = interrupts
        self._lock = lock
        self._terminal = terminal
        self._stopping = False
        self._process: Optional[Stoppable] = None
        self._installed = False
        self._closed = False

    @property
    def stop_requested(self) -> bool:
        return self._stopping

    @property
    def is_installed(self) -> bool:
        return self._installed

    def attach(self, process: Stoppable) -> None:
        with self._lock:
            if not self._closed:
                self._process = process

    def install(self) -> None:
        with self._lock:
            if self._installed or self._closed:
                return
            self._interrupts.subscribe(self.handle_interrupt)
            self._installed = True

    def remove(self) -> None:
        with self._lock:
            if not self._installed:
                return
            self._interrupts.unsubscribe(self.handle_interrupt)
            self._installed = False

    def close(self) -> None:
        """Forget the process; interrupts from here on change nothing."""
        with self._lock:
            self.remove()
            self._process = None
            self._closed = True

    def request_stop(self) -> bool:
        """Stop the session; return False when it was already stopping or closed."""
        with self._lock:
            if self._closed or self._stopping:
                return False
            # Plain attribute first: a nested interrupt must see it before any
            # Event lock is taken.
            self._stopping = True
            self.token.cancel()
            process = self._process
            if process is not None:
                process.stop()
            return True

    def handle_interrupt(self, args: InterruptEventArgs) -> None:
        """Interrupt handler: stop cooperatively and keep the host alive."""
        if self.request_stop():
            # The tty echoes ^C on its own.
            if self._terminal is not None:
                self._terminal.note_echo("^C")
            log_event("relay_interrupt", level=logging.INFO, signum=args.signum)
        args.cancel_requested = False

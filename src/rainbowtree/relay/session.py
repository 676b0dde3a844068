"""Relay session: runs one program and re-renders its output in colour."""

from __future__ import annotations

import logging
import threading
import time
from collections.abc import Callable
from enum import Enum
from typing import Any, Optional, Protocol

from ..constants import COMMAND_RUNNING_WAIT_SEC, DEFAULT_COLOR_INTERVAL_MS
from ..errors import ProcessError
from ..events import EventHook
from ..host.context import Host
from ..logging_utils import log_event
from .cancellation import CancellationCoordinator
from .pacing import PacingGenerator
from .palette import ColorPair, PaletteCycle
from .timer import PeriodicTimer


class RelayState(str, Enum):
    """Lifecycle of a relay session."""

    IDLE = "idle"
    STARTED = "started"
    RELAYING = "relaying"
    COMPLETING = "completing"


class LineSource(Protocol):
    def dequeue(self) -> Optional[str]: ...

    def __len__(self) -> int: ...


class RelayProcess(Protocol):
    """What the relay needs from the external program handle."""

    output: LineSource
    started: EventHook[bool]
    new_output: EventHook[int]
    completed: EventHook[bool]

    def start(self) -> None: ...

    def stop(self) -> None: ...

    def wait_for_exit(self, timeout: Optional[float] = None) -> bool: ...


TimerFactory = Callable[[float, Callable[[], None]], Any]


class RelaySession:
    """One end-to-end run of the wrapped program plus its coloured display.

    Output notifications arrive on the process reader thread, palette timer
    ticks on the timer thread, and interrupts on the main thread. The
    notification handler, the interrupt path, teardown and colour restore
    share one re-entrant lock: Python runs signal handlers on the main
    thread, which may already be inside one of those sections.
    """

    def __init__(
        self,
        process: RelayProcess,
        host: Host,
        *,
        pacing: Optional[PacingGenerator] = None,
        color_interval: float = DEFAULT_COLOR_INTERVAL_MS / 1000,
        timer_factory: TimerFactory = PeriodicTimer,
        palette: Optional[PaletteCycle] = None,
    ) -> None:
        self._process = process
        self._host = host
        self._terminal = host.terminal
        self._lock = threading.RLock()
        self._coordinator = CancellationCoordinator(
            host.interrupts, self._lock, terminal=host.terminal
        )
        self._pacing = pacing if pacing is not None else PacingGenerator()
        self._palette = palette if palette is not None else PaletteCycle()
        self._color_interval = color_interval
        self._timer = timer_factory(color_interval, self._on_timer)
        self._timer_armed = threading.Event()
        self._saved_colors: Optional[ColorPair] = None
        self._torn_down = False
        self._colors_restored = False
        self._ran = False

        self.state = RelayState.IDLE
        self.lines_displayed = 0
        self.completed_ok: Optional[bool] = None

    @property
    def coordinator(self) -> CancellationCoordinator:
        return self._coordinator

    @property
    def stopped(self) -> bool:
        return self._coordinator.stop_requested

    @property
    def rotations(self) -> int:
        return self._palette.rotations

    @property
    def colors(self) -> ColorPair:
        return self._palette.current

    @property
    def saved_colors(self) -> Optional[ColorPair]:
        return self._saved_colors

    def run(self) -> None:
        """Run the program to completion or interrupt, then restore the console."""
        if self._ran:
            raise ProcessError("Relay session already ran")
        self._ran = True

        started_at = time.perf_counter()
        log_event(
            "relay_start",
            argv=getattr(self._process, "argv", None),
            color_interval_ms=round(self._color_interval * 1000),
            pacing_threshold=self._pacing.threshold,
        )
        try:
            self._start()
            if not self._coordinator.stop_requested:
                self._process.start()
                self._process.wait_for_exit()
            # Give an interrupt that is still propagating a moment to land.
            self._host.state.command_running.wait_cleared(COMMAND_RUNNING_WAIT_SEC)
        finally:
            self._finish(started_at)

    def _start(self) -> None:
        with self._lock:
            self._snapshot_colors()
            self._process.started.subscribe(self._on_started)
            self._process.new_output.subscribe(self._on_new_output)
            self._process.completed.subscribe(self._on_completed)
            self._coordinator.attach(self._process)
            self._coordinator.install()
            self._apply(self._palette.current)
            # Line break after the echoed command, already in the first colour.
            self._terminal.write_line()
            self.state = RelayState.STARTED

    def _snapshot_colors(self) -> None:
        if self._saved_colors is None:
            self._saved_colors = ColorPair(
                self._terminal.background, self._terminal.foreground
            )

    def _apply(self, pair: ColorPair) -> None:
        self._terminal.background = pair.background
        self._terminal.foreground = pair.foreground

    def _on_timer(self) -> None:
        self._timer_armed.set()

    def _on_started(self, started: bool) -> None:
        if started:
            self._timer.start()

    def _on_new_output(self, _line_count: int) -> None:
        # One line per notification keeps rotation at most once per line.
        with self._lock:
            if self._coordinator.stop_requested:
                return
            self._snapshot_colors()
            line = self._process.output.dequeue()
            if line is None:
                return
            self.state = RelayState.RELAYING
            self._terminal.write(line)
            # The terminator goes out after the colour change so a line is
            # never split across two colours.
            if self._timer_armed.is_set():
                self._timer_armed.clear()
                self._apply(self._palette.advance())
            self._terminal.write_line()
            self.lines_displayed += 1

        delay_ms = self._pacing.next_delay()
        if delay_ms is not None:
            self._coordinator.token.wait(delay_ms / 1000)

    def _on_completed(self, completed: bool) -> None:
        self.completed_ok = completed
        self._teardown()

    def _teardown(self) -> None:
        with self._lock:
            if self._torn_down:
                return
            self._torn_down = True
            self.state = RelayState.COMPLETING
            self._process.started.unsubscribe(self._on_started)
            self._process.new_output.unsubscribe(self._on_new_output)
            self._process.completed.unsubscribe(self._on_completed)
            self._coordinator.remove()
            self._timer.stop()
            self._coordinator.close()

    def _finish(self, started_at: float) -> None:
        self._teardown()
        with self._lock:
            if not self._colors_restored:
                self._colors_restored = True
                if self._saved_colors is not None:
                    self._apply(self._saved_colors)
            self._terminal.write_line()
            # A late ^C echo can leave the cursor mid-line.
            if self._terminal.cursor_column != 0:
                self._terminal.write_line()
            self.state = RelayState.IDLE

        log_event(
            "relay_stop",
            level=logging.INFO,
            reason="cancelled" if self.stopped else "completed",
            lines_displayed=self.lines_displayed,
            rotations=self.rotations,
            lines_dropped=len(self._process.output),
            elapsed_ms=round((time.perf_counter() - started_at) * 1000, 1),
        )
        self._host.write_prompt()

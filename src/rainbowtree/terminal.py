"""Console colour model and the terminal writer used by commands."""

from __future__ import annotations

import threading
from enum import Enum
from typing import Optional, Protocol

from prompt_toolkit.output import ColorDepth, Output, create_output
from prompt_toolkit.styles import DEFAULT_ATTRS


class ConsoleColor(str, Enum):
    """The sixteen console colours, valued by prompt_toolkit ANSI names."""

    DEFAULT = "ansidefault"
    BLACK = "ansiblack"
    DARK_RED = "ansired"
    DARK_GREEN = "ansigreen"
    DARK_YELLOW = "ansiyellow"
    DARK_BLUE = "ansiblue"
    DARK_MAGENTA = "ansimagenta"
    DARK_CYAN = "ansicyan"
    GRAY = "ansigray"
    DARK_GRAY = "ansibrightblack"
    RED = "ansibrightred"
    GREEN = "ansibrightgreen"
    YELLOW = "ansibrightyellow"
    BLUE = "ansibrightblue"
    MAGENTA = "ansibrightmagenta"
    CYAN = "ansibrightcyan"
    WHITE = "ansiwhite"


class Terminal(Protocol):
    """Minimal console contract used by the relay and the commands."""

    foreground: ConsoleColor
    background: ConsoleColor

    @property
    def cursor_column(self) -> int:
        """Zero-based column the next character lands in."""

    def write(self, text: str) -> None:
        """Write text without a terminator."""

    def write_line(self, text: str = "") -> None:
        """Write text followed by a line break."""

    def note_echo(self, text: str) -> None:
        """Account for text the terminal echoed on its own (e.g. ``^C``)."""

    def flush(self) -> None:
        """Push buffered output to the device."""


class ConsoleTerminal:
    """Terminal backed by a prompt_toolkit ``Output``.

    prompt_toolkit cannot read colours back from the device, so the current
    colours and the cursor column are tracked from what this object writes.
    """

    def __init__(self, output: Optional[Output] = None) -> None:
        self._output = output if output is not None else create_output()
        self._lock = threading.RLock()
        self._foreground = ConsoleColor.DEFAULT
        self._background = ConsoleColor.DEFAULT
        self._column = 0

    @property
    def foreground(self) -> ConsoleColor:
        return self._foreground

    @foreground.setter
    def foreground(self, color: ConsoleColor) -> None:
        with self._lock:
            self._foreground = ConsoleColor(color)
            self._apply_colors()

    @property
    def background(self) -> ConsoleColor:
        return self._background

    @background.setter
    def background(self, color: ConsoleColor) -> None:
        with self._lock:
            self._background = ConsoleColor(color)
            self._apply_colors()

    @property
    def cursor_column(self) -> int:
        return self._column

    def write(self, text: str) -> None:
        if not text:
            return
        with self._lock:
            # write() would mask ESC; relayed program output passes through as-is.
            self._output.write_raw(text)
            self._output.flush()
            self._advance(text)

    def write_line(self, text: str = "") -> None:
        self.write(text + "\n")

    def note_echo(self, text: str) -> None:
        with self._lock:
            self._advance(text)

    def flush(self) -> None:
        with self._lock:
            self._output.flush()

    def _advance(self, text: str) -> None:
        _head, newline, tail = text.rpartition("\n")
        if newline:
            self._column = len(tail)
        else:
            self._column += len(tail)

    def _apply_colors(self) -> None:
        if (
            self._foreground is ConsoleColor.DEFAULT
            and self._background is ConsoleColor.DEFAULT
        ):
            self._output.reset_attributes()
        else:
            attrs = DEFAULT_ATTRS._replace(
                color=self._foreground.value,
                bgcolor=self._background.value,
            )
            self._output.set_attributes(attrs, ColorDepth.DEPTH_4_BIT)
        self._output.flush()

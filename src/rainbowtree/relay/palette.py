"""Six-step background/foreground colour ring."""

from __future__ import annotations

from typing import NamedTuple

from ..terminal import ConsoleColor


class ColorPair(NamedTuple):
    background: ConsoleColor
    foreground: ConsoleColor


PALETTE: tuple[ColorPair, ...] = (
    ColorPair(ConsoleColor.DARK_RED, ConsoleColor.WHITE),
    ColorPair(ConsoleColor.DARK_YELLOW, ConsoleColor.WHITE),
    ColorPair(ConsoleColor.YELLOW, ConsoleColor.BLACK),
    ColorPair(ConsoleColor.DARK_GREEN, ConsoleColor.WHITE),
    ColorPair(ConsoleColor.DARK_BLUE, ConsoleColor.WHITE),
    ColorPair(ConsoleColor.DARK_MAGENTA, ConsoleColor.WHITE),
)

_INDEX_BY_BACKGROUND = {pair.background: index for index, pair in enumerate(PALETTE)}


def next_colors(current: ColorPair) -> ColorPair:
    """Return the pair after ``current``.

    Lookup is by background only; a background outside the ring (the
    terminal default, say) restarts at the first pair.
    """
    index = _INDEX_BY_BACKGROUND.get(current.background)
    if index is None:
        return PALETTE[0]
    return PALETTE[(index + 1) % len(PALETTE)]


class PaletteCycle:
    """Current position in the ring plus a count of rotations made."""

    def __init__(self, start: ColorPair = PALETTE[0]) -> None:
        self.current = start
        self.rotations = 0

    def advance(self) -> ColorPair:
        self.current = next_colors(self.current)
        self.rotations += 1
        return self.current

"""Colorized streaming relay of an external program's output."""

from .cancellation import CancellationCoordinator, CancellationToken
from .pacing import PacingGenerator
from .palette import PALETTE, ColorPair, PaletteCycle, next_colors
from .session import RelaySession, RelayState

__all__ = [
    "PALETTE",
    "CancellationCoordinator",
    "CancellationToken",
    "ColorPair",
    "PacingGenerator",
    "PaletteCycle",
    "RelaySession",
    "RelayState",
    "next_colors",
]

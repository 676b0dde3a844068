"""Commands registered with the shell."""

from .rickroll import RickrollCommand
from .rtree import RainbowTreeCommand
from .trees import TreesCommand

__all__ = ["RainbowTreeCommand", "RickrollCommand", "TreesCommand", "default_commands"]


def default_commands() -> list:
    """Return fresh instances of every built-in command, in dispatch order."""
    return [RainbowTreeCommand(), TreesCommand(), RickrollCommand()]

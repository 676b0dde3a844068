"""TREES: prints a small ASCII forest."""

from __future__ import annotations

from ..host.context import Host
from ..host.dispatch import Command
from ..terminal import ConsoleColor

TREE_ART = r"""
       *             ^              ^
      /_\           /^\            /^\
     /_ _\         /^ ^\          /^ ^\
    /_ _ _\       /^ ^ ^\        /^ ^ ^\
   /_ _ _ _\     /^ ^ ^ ^\      /^ ^ ^ ^\
  /_ _ _ _ _\   /^ ^ ^ ^ ^\    /^ ^ ^ ^ ^\
      |||           |||            |||
""".strip("\n")


class TreesCommand(Command):
    name = "Trees"
    description = "Prints some ASCII art trees"
    commands_handled = ("trees",)

    def execute(self, text: str, host: Host) -> None:
        terminal = host.terminal
        previous = terminal.foreground
        terminal.foreground = ConsoleColor.GREEN
        try:
            terminal.write_line(f"\n\n{TREE_ART}\n")
        finally:
            terminal.foreground = previous
        host.write_prompt()

import sys
import webbrowser

import pytest

from rainbowtree.commands import (
    RainbowTreeCommand,
    RickrollCommand,
    TreesCommand,
    default_commands,
)
from rainbowtree.commands.trees import TREE_ART
from rainbowtree.config import AppConfig
from rainbowtree.errors import UsageError
from rainbowtree.host.dispatch import CommandDispatcher
from rainbowtree.terminal import ConsoleColor
from test_helpers import make_host


def test_default_commands_order():
    names = [command.commands_handled[0] for command in default_commands()]
    assert names == ["rtree", "trees", "rickroll"]


class TestRainbowTree:
    def test_argv_uses_configured_program(self, host):
        assert RainbowTreeCommand().build_argv("rtree", host) == ["tree"]

    def test_argv_appends_parameters(self):
        host = make_host(AppConfig(tree_command=["tree", "/F"]))

        argv = RainbowTreeCommand().build_argv('rtree "C:\\My Files" -a', host)

        assert argv == ["tree", "/F", "C:\\My Files", "-a"]

    def test_argv_rejects_bad_quoting(self, host):
        with pytest.raises(UsageError, match="Invalid command syntax"):
            RainbowTreeCommand().build_argv('rtree "unterminated', host)

    def test_session_uses_config(self):
        host = make_host(AppConfig(color_interval_ms=250, pacing_threshold=0))

        session = RainbowTreeCommand().build_session(["tree"], host)

        assert session._color_interval == 0.25
        assert session._pacing.threshold == 0

    def test_dispatch_relays_program_output(self):
        config = AppConfig(
            tree_command=[sys.executable, "-c", "print('|-- src'); print('`-- tests')"],
            pacing_threshold=0,
        )
        host = make_host(config)
        dispatcher = CommandDispatcher(host, default_commands())

        assert dispatcher.dispatch("RTREE") is True

        assert host.terminal.displayed() == ["|-- src", "`-- tests"]
        assert host.terminal.background == ConsoleColor.DEFAULT
        assert not host.state.command_running.is_set()

    def test_missing_program_is_shown_not_raised(self):
        host = make_host(AppConfig(tree_command=["rainbowtree-no-such-tree"]))

        RainbowTreeCommand().execute("rtree", host)

        shown = host.terminal.displayed()
        assert len(shown) == 1
        assert shown[0].startswith("rainbowtree-no-such-tree: ")


class TestTrees:
    def test_prints_art_in_green(self, host, terminal):
        terminal.foreground = ConsoleColor.CYAN

        TreesCommand().execute("trees", host)

        write = terminal.writes[0]
        assert write.text == f"\n\n{TREE_ART}\n\n"
        assert write.foreground == ConsoleColor.GREEN
        assert terminal.foreground == ConsoleColor.CYAN
        assert terminal.flushes == 1

    def test_clears_command_running(self, host):
        host.state.command_running.set()

        TreesCommand().execute("trees", host)

        assert not host.state.command_running.is_set()


class TestRickroll:
    def test_opens_configured_url(self, host, terminal, monkeypatch):
        opened = []
        monkeypatch.setattr(webbrowser, "open", lambda url: opened.append(url) or True)

        RickrollCommand().execute("rickroll", host)

        assert opened == [host.config.rickroll_url]
        assert terminal.output == "\n"
        assert not host.state.command_running.is_set()

    def test_reports_url_when_no_browser(self, host, terminal, monkeypatch):
        monkeypatch.setattr(webbrowser, "open", lambda url: False)

        RickrollCommand().execute("rickroll", host)

        assert terminal.displayed() == [
            f"Could not open a browser. Visit {host.config.rickroll_url}\n"
        ]

    def test_browser_error_is_logged(self, host, terminal, monkeypatch, caplog):
        def fail(url):
            raise webbrowser.Error("no runnable browser")

        monkeypatch.setattr(webbrowser, "open", fail)

        with caplog.at_level("WARNING"):
            RickrollCommand().execute("rickroll", host)

        assert '"event":"browser_open_failed"' in caplog.text
        assert "Could not open a browser" in terminal.output

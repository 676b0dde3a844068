import threading
import time

from rainbowtree.host.interrupts import InterruptEventArgs, InterruptSource
from rainbowtree.host.state import HostState
from rainbowtree.relay import CancellationCoordinator, CancellationToken
from test_helpers import FakeTerminal


class StubProcess:
    def __init__(self):
        self.stop_calls = 0

    def stop(self):
        self.stop_calls += 1


def _coordinator(terminal=None):
    interrupts = InterruptSource(HostState())
    coordinator = CancellationCoordinator(
        interrupts, threading.RLock(), terminal=terminal
    )
    return coordinator, interrupts


class TestCancellationToken:
    def test_wait_times_out_when_not_cancelled(self):
        assert CancellationToken().wait(0.01) is False

    def test_cancel_wakes_waiter_early(self):
        token = CancellationToken()
        timer = threading.Timer(0.05, token.cancel)
        timer.start()
        try:
            started = time.monotonic()
            assert token.wait(5) is True
            assert time.monotonic() - started < 2
        finally:
            timer.cancel()

    def test_cancel_is_sticky(self):
        token = CancellationToken()
        token.cancel()
        token.cancel()
        assert token.is_cancelled
        assert token.wait(0) is True


class TestCancellationCoordinator:
    def test_request_stop_stops_process_once(self):
        coordinator, _ = _coordinator()
        process = StubProcess()
        coordinator.attach(process)

        assert coordinator.request_stop() is True
        assert coordinator.request_stop() is False

        assert process.stop_calls == 1
        assert coordinator.stop_requested
        assert coordinator.token.is_cancelled

    def test_request_stop_without_process(self):
        coordinator, _ = _coordinator()

        assert coordinator.request_stop() is True
        assert coordinator.stop_requested

    def test_close_makes_later_stops_noops(self):
        coordinator, interrupts = _coordinator()
        process = StubProcess()
        coordinator.attach(process)
        coordinator.install()

        coordinator.close()

        assert coordinator.request_stop() is False
        assert process.stop_calls == 0
        assert interrupts.handler is None
        coordinator.attach(process)
        coordinator.install()
        assert not coordinator.is_installed

    def test_install_and_remove_are_idempotent(self):
        coordinator, interrupts = _coordinator()

        coordinator.install()
        coordinator.install()
        assert interrupts.handler == coordinator.handle_interrupt

        coordinator.remove()
        coordinator.remove()
        assert interrupts.handler is None
        assert not coordinator.is_installed

    def test_remove_leaves_other_handler_alone(self):
        coordinator, interrupts = _coordinator()
        coordinator.install()

        def other(args):
            pass

        interrupts.subscribe(other)
        coordinator.remove()

        assert interrupts.handler is other

    def test_handle_interrupt_suppresses_propagation(self):
        terminal = FakeTerminal()
        coordinator, _ = _coordinator(terminal)
        process = StubProcess()
        coordinator.attach(process)
        args = InterruptEventArgs(signum=2)

        coordinator.handle_interrupt(args)

        assert args.cancel_requested is False
        assert process.stop_calls == 1
        assert terminal.cursor_column == 2

    def test_repeated_interrupt_only_echo_once(self):
        terminal = FakeTerminal()
        coordinator, _ = _coordinator(terminal)
        second = InterruptEventArgs(signum=2)

        coordinator.handle_interrupt(InterruptEventArgs(signum=2))
        coordinator.handle_interrupt(second)

        assert second.cancel_requested is False
        assert terminal.cursor_column == 2

    def test_interrupt_after_close_is_swallowed(self):
        terminal = FakeTerminal()
        coordinator, _ = _coordinator(terminal)
        coordinator.close()
        args = InterruptEventArgs(signum=2)

        coordinator.handle_interrupt(args)

        assert args.cancel_requested is False
        assert not coordinator.stop_requested
        assert terminal.cursor_column == 0

    def test_nested_stop_from_process_stop_is_ignored(self):
        coordinator, _ = _coordinator()
        nested = []

        class ReentrantProcess(StubProcess):
            def stop(self):
                super().stop()
                nested.append(coordinator.request_stop())

        process = ReentrantProcess()
        coordinator.attach(process)

        assert coordinator.request_stop() is True
        assert nested == [False]
        assert process.stop_calls == 1

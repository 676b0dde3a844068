import threading

from rainbowtree.host.state import CommandRunningFlag, HostState


def test_defaults():
    state = HostState()
    assert state.edit_mode is False
    assert state.input_text == ""
    assert not state.command_running.is_set()


def test_wait_cleared_returns_immediately_when_clear():
    assert CommandRunningFlag().wait_cleared(0) is True


def test_wait_cleared_times_out_while_set():
    flag = CommandRunningFlag()
    flag.set()
    assert flag.wait_cleared(0.01) is False


def test_clear_from_other_thread_wakes_waiter():
    flag = CommandRunningFlag()
    flag.set()
    timer = threading.Timer(0.02, flag.clear)
    timer.start()
    try:
        assert flag.wait_cleared(5) is True
    finally:
        timer.cancel()

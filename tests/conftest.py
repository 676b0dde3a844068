"""Pytest configuration and fixtures for rainbowtree tests."""

import logging

import pytest

from test_helpers import FakeTerminal, TimerRecorder, make_host


@pytest.fixture(autouse=True)
def _restore_logging():
    """setup_logging() mutates global logging state; undo it after each test."""
    yield
    logging.disable(logging.NOTSET)
    root = logging.getLogger()
    for handler in list(root.handlers):
        if isinstance(handler, logging.FileHandler):
            root.removeHandler(handler)
            handler.close()


@pytest.fixture
def host():
    return make_host()


@pytest.fixture
def terminal(host) -> FakeTerminal:
    return host.terminal


@pytest.fixture
def timers():
    return TimerRecorder()

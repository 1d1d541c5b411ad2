"""Pytest configuration and shared fixtures."""

import shutil
import tempfile
from pathlib import Path

import pytest

from scopectx.config import reset_config

ENV_VARS = (
    "SCOPECTX_LOG_LEVEL",
    "SCOPECTX_LOG_TRANSITIONS",
    "SCOPECTX_READ_ONLY_VIEWS",
    "SCOPECTX_DEBUG",
)


@pytest.fixture
def temp_dir():
    """Create a temporary directory for tests."""
    dir_path = tempfile.mkdtemp()
    yield dir_path
    # Cleanup
    shutil.rmtree(dir_path, ignore_errors=True)


@pytest.fixture(autouse=True)
def isolated_config(monkeypatch):
    """Keep user config and SCOPECTX_* variables out of every test."""
    home = tempfile.mkdtemp()
    monkeypatch.setenv("HOME", home)
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    reset_config()
    yield Path(home) / ".config" / "scopectx"
    reset_config()
    shutil.rmtree(home, ignore_errors=True)


class Recorder:
    """Counts calls and remembers what cleanup saw."""

    def __init__(self):
        self.setup_calls = 0
        self.operation_calls = 0
        self.cleanup_calls = 0
        self.cleaned = []

    def operation(self, result=None):
        def run(context):
            self.operation_calls += 1
            return result
        return run


@pytest.fixture
def recorder():
    """Fresh call recorder."""
    return Recorder()


def pytest_configure(config):
    """Configure custom pytest markers."""
    config.addinivalue_line(
        "markers", "integration: marks tests that touch the filesystem"
    )

"""Shared test configuration and fixtures."""

import contextlib
import logging
import os
import signal
from pathlib import Path

import pytest

RUNSVC_SCRIPT = """#!/bin/sh
echo "runner booting in $(pwd)"
exec sleep 30
"""


@pytest.fixture(scope="function", autouse=True)
def reset_logging():
    """Reset logging configuration after each test."""
    yield
    root_logger = logging.getLogger()
    for handler in root_logger.handlers[:]:
        handler.close()
        root_logger.removeHandler(handler)
    root_logger.setLevel(logging.WARNING)


@pytest.fixture
def runner_dir(tmp_path: Path) -> Path:
    """Create a fake runner directory with an executable bin/runsvc.sh."""
    runner = tmp_path / "actions-runner"
    (runner / "bin").mkdir(parents=True)
    script = runner / "bin" / "runsvc.sh"
    script.write_text(RUNSVC_SCRIPT)
    script.chmod(0o755)
    return runner


@pytest.fixture
def reaper():
    """Collect PIDs spawned by a test and kill and reap them afterwards."""
    pids: list[int] = []
    yield pids
    for pid in pids:
        with contextlib.suppress(ProcessLookupError):
            os.kill(pid, signal.SIGKILL)
        with contextlib.suppress(ChildProcessError):
            os.waitpid(pid, 0)

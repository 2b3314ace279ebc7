import signal
import sys

import pytest

from pm_core.process import COMMAND_NOT_FOUND, ProcessRunner

pytestmark = pytest.mark.unit_core


def test_capture_returns_output_and_code() -> None:
    result = ProcessRunner().capture([sys.executable, "-c", "import sys; print('hi'); sys.exit(3)"])
    assert result.returncode == 3
    assert result.stdout.strip() == "hi"


def test_capture_missing_binary_is_127() -> None:
    result = ProcessRunner().capture(["pmgr-definitely-missing-binary"])
    assert result.returncode == COMMAND_NOT_FOUND
    assert "pmgr-definitely-missing-binary" in result.stderr


def test_handoff_restores_sigint_handler() -> None:
    before = signal.getsignal(signal.SIGINT)
    code = ProcessRunner().handoff([sys.executable, "-c", "raise SystemExit(2)"])
    assert code == 2
    assert signal.getsignal(signal.SIGINT) is before


def test_handoff_missing_binary_is_127() -> None:
    assert ProcessRunner().handoff(["pmgr-definitely-missing-binary"]) == COMMAND_NOT_FOUND


def test_signal_death_is_reported_as_128_plus_signum() -> None:
    code = ProcessRunner().handoff(
        [sys.executable, "-c", "import os, signal; os.kill(os.getpid(), signal.SIGTERM)"]
    )
    assert code == 128 + signal.SIGTERM

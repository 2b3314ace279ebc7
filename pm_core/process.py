"""Thin subprocess layer: captured queries and blocking terminal handoffs."""

from __future__ import annotations

import logging
import os
import shutil
import signal
import subprocess
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Iterator, Mapping, Sequence

logger = logging.getLogger(__name__)

COMMAND_NOT_FOUND = 127


@dataclass(frozen=True)
class CommandResult:
    argv: tuple[str, ...]
    returncode: int
    stdout: str = ""
    stderr: str = ""

    @property
    def ok(self) -> bool:
        return self.returncode == 0


def _normalize_returncode(code: int) -> int:
    # Popen reports death-by-signal as -N; shells report 128+N.
    return 128 - code if code < 0 else code


@contextmanager
def _sigint_ignored() -> Iterator[None]:
    """Leave Ctrl+C to the child process while it owns the terminal."""
    try:
        previous = signal.signal(signal.SIGINT, signal.SIG_IGN)
    except ValueError:
        # Not on the main thread; nothing to swap.
        yield
        return
    try:
        yield
    finally:
        signal.signal(signal.SIGINT, previous)


class ProcessRunner:
    """Run backend tools either captured (queries) or attached (handoff)."""

    def __init__(self, env: Mapping[str, str] | None = None) -> None:
        self._env = dict(env) if env is not None else None

    def which(self, tool: str) -> str | None:
        return shutil.which(tool)

    def capture(self, argv: Sequence[str]) -> CommandResult:
        """Run a query with C-locale output so diagnostics parse predictably."""
        env = dict(self._env if self._env is not None else os.environ)
        env["LC_ALL"] = "C"
        logger.debug("capture: %s", " ".join(argv))
        try:
            completed = subprocess.run(
                list(argv),
                check=False,
                capture_output=True,
                text=True,
                errors="replace",
                stdin=subprocess.DEVNULL,
                env=env,
            )
        except OSError as exc:
            logger.debug("capture failed to start %s: %s", argv[0], exc)
            return CommandResult(
                argv=tuple(argv),
                returncode=COMMAND_NOT_FOUND,
                stderr=f"{argv[0]}: {exc.strerror or exc}",
            )
        return CommandResult(
            argv=tuple(argv),
            returncode=_normalize_returncode(completed.returncode),
            stdout=completed.stdout or "",
            stderr=completed.stderr or "",
        )

    def handoff(self, argv: Sequence[str]) -> int:
        """Block on a child that inherits stdin/stdout/stderr; return its exit code."""
        logger.info("handoff: %s", " ".join(argv))
        try:
            with _sigint_ignored():
                completed = subprocess.run(list(argv), check=False, env=self._env)
        except OSError as exc:
            logger.error("Could not start %s: %s", argv[0], exc)
            return COMMAND_NOT_FOUND
        return _normalize_returncode(completed.returncode)

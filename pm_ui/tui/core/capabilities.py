from __future__ import annotations

import os
import sys


def is_tty_available() -> bool:
    return sys.stdin.isatty() and sys.stdout.isatty()


def supports_fullscreen_ui() -> bool:
    if not is_tty_available():
        return False
    return os.environ.get("TERM", "") != "dumb"

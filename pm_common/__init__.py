"""Shared helpers for pmgr."""

from pm_common.api import PMError, Settings, configure_logging

__all__ = ["configure_logging", "PMError", "Settings"]

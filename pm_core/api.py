"""Public API surface for pm_core."""

from pm_core.backends import HELPER_TOOL, PACMAN, PRIMARY_TOOL, YAY, BackendTool
from pm_core.dispatcher import ExecutionDispatcher, invocation_errors
from pm_core.models import (
    Action,
    CandidateList,
    Classification,
    ExitOutcome,
    Invocation,
    InvocationResult,
    Package,
    PackageOrigin,
    bare_name,
)
from pm_core.parsing import parse_info_fields
from pm_core.process import CommandResult, ProcessRunner
from pm_core.provider import PackageDataProvider
from pm_core.router import PackageSourceRouter
from pm_core.sources import PackageSource, Presence, SourceProbe, SyncDatabaseSource

__all__ = [
    "Action",
    "BackendTool",
    "CandidateList",
    "Classification",
    "CommandResult",
    "ExecutionDispatcher",
    "ExitOutcome",
    "HELPER_TOOL",
    "Invocation",
    "InvocationResult",
    "PACMAN",
    "PRIMARY_TOOL",
    "Package",
    "PackageDataProvider",
    "PackageOrigin",
    "PackageSource",
    "PackageSourceRouter",
    "Presence",
    "ProcessRunner",
    "SourceProbe",
    "SyncDatabaseSource",
    "YAY",
    "bare_name",
    "invocation_errors",
    "parse_info_fields",
]

"""Shared error taxonomy for pmgr."""

from __future__ import annotations

from typing import Any, Iterable, Mapping, TypeVar


def _normalize_context_value(value: Any) -> Any:
    if isinstance(value, Mapping):
        return normalize_context(value)
    if isinstance(value, (list, tuple, set, frozenset)):
        items = sorted(value) if isinstance(value, (set, frozenset)) else value
        return [_normalize_context_value(item) for item in items]
    if isinstance(value, (str, int, float, bool)) or value is None:
        return value
    return str(value)


def normalize_context(context: Mapping[str, Any]) -> dict[str, Any]:
    """Return a JSON-friendly copy of an error context mapping."""
    return {key: _normalize_context_value(val) for key, val in context.items()}


def format_packages(packages: Iterable[str]) -> str:
    return ", ".join(sorted(packages)) or "-"


class PMError(Exception):
    """Base error type for typed failure handling."""

    exit_code: int = 1

    def __init__(
        self,
        message: str,
        *,
        context: Mapping[str, Any] | None = None,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(message)
        self.context = normalize_context(context or {})
        if cause is not None:
            self.__cause__ = cause

    @property
    def error_type(self) -> str:
        return self.__class__.__name__

    def to_dict(self) -> dict[str, Any]:
        return {"type": self.error_type, "message": str(self), "context": self.context}


class BackendUnavailable(PMError):
    """No usable package tool was found on this system."""


class TerminalUnavailable(PMError):
    """The output device cannot be placed in interactive mode."""


class ClassificationAmbiguous(PMError):
    """Probing a package's source failed in an unexpected way."""

    def __init__(
        self,
        packages: Iterable[str],
        backend: str,
        detail: str = "",
        *,
        cause: Exception | None = None,
    ) -> None:
        self.packages = tuple(sorted(packages))
        self.backend = backend
        message = (
            f"Could not determine the repository of {format_packages(self.packages)} "
            f"using {backend}"
        )
        if detail:
            message = f"{message}: {detail}"
        super().__init__(
            message,
            context={"packages": self.packages, "backend": backend, "detail": detail},
            cause=cause,
        )


class BackendInvocationFailed(PMError):
    """An external package tool exited with a non-zero status."""

    def __init__(
        self,
        backend: str,
        packages: Iterable[str],
        returncode: int,
        *,
        action: str = "",
        detail: str = "",
        cause: Exception | None = None,
    ) -> None:
        self.backend = backend
        self.packages = tuple(sorted(packages))
        self.returncode = returncode
        self.action = action
        subject = format_packages(self.packages) if self.packages else action or "command"
        message = f"{backend} failed for {subject} (exit code {returncode})"
        if detail:
            message = f"{message}: {detail}"
        super().__init__(
            message,
            context={
                "backend": backend,
                "packages": self.packages,
                "returncode": returncode,
                "action": action,
            },
            cause=cause,
        )
        self.exit_code = returncode or 1


class ParseSkipped(PMError):
    """A single listing entry could not be parsed and was dropped."""


class PackageInfoUnavailable(PMError):
    """Detail text for a package could not be fetched."""

    def __init__(self, package: str, backend: str, detail: str = "") -> None:
        self.package = package
        self.backend = backend
        message = f"No information for {package} from {backend}"
        if detail:
            message = f"{message}: {detail}"
        super().__init__(message, context={"package": package, "backend": backend})


T = TypeVar("T", bound=PMError)


def wrap_error(
    error_cls: type[T],
    message: str,
    *,
    context: Mapping[str, Any] | None = None,
    cause: Exception | None = None,
) -> T:
    """Create a typed PMError with optional context and cause."""
    return error_cls(message, context=context, cause=cause)


__all__ = [
    "BackendInvocationFailed",
    "BackendUnavailable",
    "ClassificationAmbiguous",
    "PMError",
    "PackageInfoUnavailable",
    "ParseSkipped",
    "TerminalUnavailable",
    "format_packages",
    "normalize_context",
    "wrap_error",
]

"""Parsers for pacman/yay plain-text output.

Formats follow the documented output of pacman 6.x and yay 12.x:

* ``-Sl``  ``<repo> <name> <version> [installed[: <local version>]]``
* ``-Q``   ``<name> <version>``
* ``-Ss``  ``<repo>/<name> <version> [extras...]`` followed by an indented
  description line
* ``-Si`` / ``-Qi``  ``<Key> : <value>`` records, continuation lines indented

A line that does not fit its format raises ``ParseSkipped`` internally and is
dropped; one bad entry never aborts a listing.
"""

from __future__ import annotations

import logging
from typing import Callable, Iterable, Iterator, Optional

from pm_common.errors import ParseSkipped
from pm_core.models import Package, PackageOrigin

logger = logging.getLogger(__name__)


def _skip_unparseable(
    lines: Iterable[str], parse_line: Callable[[str], Package]
) -> Iterator[Package]:
    for line in lines:
        if not line.strip():
            continue
        try:
            yield parse_line(line)
        except ParseSkipped as exc:
            logger.debug("Skipping entry: %s", exc)


def parse_sync_list_line(line: str) -> Package:
    parts = line.split()
    if len(parts) < 3:
        raise ParseSkipped(f"expected '<repo> <name> <version>', got {line!r}")
    repository, name, version = parts[0], parts[1], parts[2]
    extras = " ".join(parts[3:])
    return Package(
        name=name,
        origin=PackageOrigin.from_repository(repository),
        version=version,
        repository=repository,
        installed="[installed" in extras.lower(),
    )


def parse_sync_list(text: str) -> list[Package]:
    return list(_skip_unparseable(text.splitlines(), parse_sync_list_line))


def _query_line_parser(origin: PackageOrigin) -> Callable[[str], Package]:
    def parse(line: str) -> Package:
        parts = line.split()
        if len(parts) != 2:
            raise ParseSkipped(f"expected '<name> <version>', got {line!r}")
        return Package(name=parts[0], origin=origin, version=parts[1], installed=True)

    return parse


def parse_query_list(
    text: str, origin: PackageOrigin = PackageOrigin.PRIMARY
) -> list[Package]:
    return list(_skip_unparseable(text.splitlines(), _query_line_parser(origin)))


def _parse_search_header(line: str) -> Package:
    parts = line.split()
    qualified = parts[0]
    if "/" not in qualified:
        raise ParseSkipped(f"expected '<repo>/<name>', got {line!r}")
    repository, _, name = qualified.partition("/")
    if not repository or not name:
        raise ParseSkipped(f"empty repository or name in {line!r}")
    version = parts[1] if len(parts) > 1 else ""
    extras = " ".join(parts[2:]).lower()
    return Package(
        name=name,
        origin=PackageOrigin.from_repository(repository),
        version=version,
        repository=repository,
        installed="[installed" in extras,
    )


def parse_search(text: str) -> list[Package]:
    """Decode ``-Ss`` two-line blocks; a header without description is kept."""
    packages: list[Package] = []
    pending: Optional[Package] = None
    for line in text.splitlines():
        if not line.strip():
            continue
        if line[0].isspace():
            if pending is None:
                logger.debug("Skipping orphan description line: %r", line)
                continue
            packages.append(
                Package(
                    name=pending.name,
                    origin=pending.origin,
                    description=line.strip(),
                    version=pending.version,
                    repository=pending.repository,
                    installed=pending.installed,
                )
            )
            pending = None
            continue
        if pending is not None:
            packages.append(pending)
            pending = None
        try:
            pending = _parse_search_header(line)
        except ParseSkipped as exc:
            logger.debug("Skipping entry: %s", exc)
    if pending is not None:
        packages.append(pending)
    return packages


def parse_info_fields(text: str) -> list[tuple[str, str]]:
    """Split ``-Si``/``-Qi`` output into ordered ``(key, value)`` pairs."""
    fields: list[tuple[str, str]] = []
    for line in text.splitlines():
        if not line.strip():
            continue
        if line[0].isspace() and fields:
            key, value = fields[-1]
            fields[-1] = (key, f"{value} {line.strip()}".strip())
            continue
        key, sep, value = line.partition(":")
        if not sep:
            continue
        fields.append((key.strip(), value.strip()))
    return fields

"""Route package names to the primary or secondary repository."""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Iterable

from pm_common.errors import ClassificationAmbiguous
from pm_core.models import Classification, normalize_names
from pm_core.sources import PackageSource, Presence, SourceProbe

logger = logging.getLogger(__name__)

DEFAULT_PROBE_WORKERS = 4


class PackageSourceRouter:
    """Classify names by probing the primary source once per name.

    FOUND routes to the primary set, NOT_FOUND to the secondary set. An UNKNOWN
    probe for any name aborts the whole batch with ``ClassificationAmbiguous``
    naming every offending package.
    """

    def __init__(
        self, primary: PackageSource, *, max_workers: int = DEFAULT_PROBE_WORKERS
    ) -> None:
        self._primary = primary
        self._max_workers = max(1, max_workers)

    def classify(self, names: Iterable[str]) -> Classification:
        ordered = sorted(normalize_names(names))
        if not ordered:
            return Classification()

        probes = self._probe_all(ordered)

        unknown = [probe for probe in probes if probe.presence is Presence.UNKNOWN]
        if unknown:
            details = "; ".join(f"{probe.package}: {probe.detail}" for probe in unknown)
            raise ClassificationAmbiguous(
                [probe.package for probe in unknown], self._primary.name, details
            )

        primary = frozenset(p.package for p in probes if p.presence is Presence.FOUND)
        secondary = frozenset(p.package for p in probes if p.presence is Presence.NOT_FOUND)
        logger.debug(
            "Classified %d package(s): primary=%s secondary=%s",
            len(ordered),
            sorted(primary),
            sorted(secondary),
        )
        return Classification(primary=primary, secondary=secondary)

    def _probe_all(self, names: list[str]) -> list[SourceProbe]:
        if len(names) == 1 or self._max_workers == 1:
            return [self._primary.exists(name) for name in names]
        workers = min(self._max_workers, len(names))
        with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="pmgr-probe") as pool:
            # map() yields in input order regardless of completion order.
            return list(pool.map(self._primary.exists, names))

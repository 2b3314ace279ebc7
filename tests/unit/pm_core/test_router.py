import threading
import time

import pytest

from pm_common.errors import ClassificationAmbiguous
from pm_core.router import PackageSourceRouter
from pm_core.sources import Presence, SourceProbe, SyncDatabaseSource
from tests.helpers.fake_runner import FakeRunner

pytestmark = pytest.mark.unit_core


def _router(runner: FakeRunner, workers: int = 4) -> PackageSourceRouter:
    return PackageSourceRouter(SyncDatabaseSource(runner), max_workers=workers)


def test_partition_is_complete_and_disjoint() -> None:
    runner = FakeRunner().primary_packages("firefox", "vim").secondary_packages("yay-bin")
    result = _router(runner).classify(["vim", "yay-bin", "firefox"])
    assert result.primary == {"firefox", "vim"}
    assert result.secondary == {"yay-bin"}
    assert result.primary.isdisjoint(result.secondary)
    assert result.all == {"firefox", "vim", "yay-bin"}


def test_repository_prefix_is_stripped() -> None:
    runner = FakeRunner().primary_packages("firefox")
    result = _router(runner).classify(["extra/firefox"])
    assert result.primary == {"firefox"}
    assert ("pacman", "-Si", "--", "firefox") in runner.captured


def test_classifying_twice_is_identical() -> None:
    runner = FakeRunner().primary_packages("a", "c").secondary_packages("b", "d")
    router = _router(runner)
    assert router.classify(["d", "c", "b", "a"]) == router.classify(["a", "b", "c", "d"])


def test_empty_input_probes_nothing() -> None:
    runner = FakeRunner()
    result = _router(runner).classify([])
    assert result.is_empty()
    assert runner.captured == []


def test_unexpected_probe_failure_names_every_package() -> None:
    runner = FakeRunner().primary_packages("vim")
    runner.on("pacman", "-Si", "--", "zsh", returncode=1, stderr="error: failed to init transaction (unable to lock database)\n")
    runner.on("pacman", "-Si", "--", "bash", returncode=130)
    with pytest.raises(ClassificationAmbiguous) as excinfo:
        _router(runner).classify(["vim", "zsh", "bash"])
    err = excinfo.value
    assert err.packages == ("bash", "zsh")
    assert err.backend == "pacman"
    assert "unable to lock database" in str(err)


def test_missing_pacman_is_ambiguous() -> None:
    runner = FakeRunner(tools=())
    with pytest.raises(ClassificationAmbiguous):
        _router(runner).classify(["vim"])


class _SlowSource:
    """Answers out of order and records peak concurrency."""

    name = "slow"

    def __init__(self) -> None:
        self.active = 0
        self.peak = 0
        self._lock = threading.Lock()

    def exists(self, package: str) -> SourceProbe:
        with self._lock:
            self.active += 1
            self.peak = max(self.peak, self.active)
        # Later names finish first.
        time.sleep(0.02 if package < "m" else 0.0)
        with self._lock:
            self.active -= 1
        presence = Presence.FOUND if package.startswith("p") else Presence.NOT_FOUND
        return SourceProbe(package, presence)


def test_parallel_probing_is_bounded_and_deterministic() -> None:
    source = _SlowSource()
    router = PackageSourceRouter(source, max_workers=2)
    names = ["p-one", "a-two", "p-three", "z-four", "b-five"]
    first = router.classify(names)
    second = router.classify(list(reversed(names)))
    assert first == second
    assert first.primary == {"p-one", "p-three"}
    assert first.secondary == {"a-two", "b-five", "z-four"}
    assert source.peak <= 2

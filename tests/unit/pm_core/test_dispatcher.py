import pytest

from pm_common.config.settings import Elevation, Settings
from pm_core.dispatcher import ExecutionDispatcher, invocation_errors
from pm_core.models import Action
from pm_core.process import COMMAND_NOT_FOUND
from tests.helpers.fake_runner import FakeRunner

pytestmark = pytest.mark.unit_core


def _dispatcher(runner: FakeRunner, *, euid: int = 1000, **settings) -> ExecutionDispatcher:
    return ExecutionDispatcher(runner, settings=Settings(**settings), euid=euid)


def test_primary_runs_elevated_before_helper() -> None:
    runner = FakeRunner()
    outcome = _dispatcher(runner).install({"vim", "bash"}, {"yay-bin"})
    assert runner.handoffs == [
        ("sudo", "pacman", "-S", "bash", "vim"),
        ("yay", "-S", "yay-bin"),
    ]
    assert outcome.ok and outcome.exit_code == 0


def test_empty_sets_are_never_invoked() -> None:
    runner = FakeRunner()
    outcome = _dispatcher(runner).install(set(), set())
    assert runner.handoffs == []
    assert outcome.results == []
    assert outcome.exit_code == 0


def test_only_helper_path_for_secondary_only() -> None:
    runner = FakeRunner()
    _dispatcher(runner).install(set(), {"firefox-beta"})
    assert runner.handoffs == [("yay", "-S", "firefox-beta")]


def test_remove_uses_rns() -> None:
    runner = FakeRunner()
    plan = _dispatcher(runner).plan_remove({"vim"}, {"yay-bin"})
    assert [inv.argv for inv in plan] == [
        ("sudo", "pacman", "-Rns", "vim"),
        ("yay", "-Rns", "yay-bin"),
    ]
    assert all(inv.action is Action.REMOVE for inv in plan)


def test_failure_does_not_suppress_other_backend() -> None:
    runner = FakeRunner(handoff_codes={"pacman": 1, "yay": 0})
    outcome = _dispatcher(runner).install({"vim"}, {"yay-bin"})
    assert len(runner.handoffs) == 2
    assert not outcome.ok
    assert outcome.exit_code == 1
    errors = invocation_errors(outcome)
    assert [(e.backend, e.packages) for e in errors] == [("pacman", ("vim",))]


def test_exit_code_is_worst_code() -> None:
    runner = FakeRunner(handoff_codes={"pacman": 1, "yay": 4})
    outcome = _dispatcher(runner).install({"vim"}, {"yay-bin"})
    assert outcome.exit_code == 4
    assert len(invocation_errors(outcome)) == 2


def test_missing_helper_is_recorded_without_skipping_primary() -> None:
    runner = FakeRunner(tools=("pacman", "sudo"))
    outcome = _dispatcher(runner).install({"vim"}, {"yay-bin"})
    assert runner.handoffs == [("sudo", "pacman", "-S", "vim")]
    assert outcome.exit_code == COMMAND_NOT_FOUND
    assert "yay is not installed" in str(invocation_errors(outcome)[0])


def test_noconfirm_is_appended_everywhere() -> None:
    runner = FakeRunner()
    plan = _dispatcher(runner, noconfirm=True).plan_install({"vim"}, {"yay-bin"})
    assert all("--noconfirm" in inv.argv for inv in plan)
    plan = _dispatcher(runner, noconfirm=True).plan_install({"vim"}, set(), noconfirm=False)
    assert "--noconfirm" not in plan[0].argv


def test_root_needs_no_elevation() -> None:
    plan = _dispatcher(FakeRunner(), euid=0).plan_install({"vim"}, set())
    assert plan[0].argv == ("pacman", "-S", "vim")


def test_auto_elevation_falls_back_to_pkexec() -> None:
    runner = FakeRunner(tools=("pacman", "pkexec"))
    assert _dispatcher(runner).elevation == ("pkexec",)


def test_configured_elevation_is_used_verbatim() -> None:
    runner = FakeRunner(tools=("pacman", "sudo", "doas"))
    assert _dispatcher(runner, elevation=Elevation.DOAS).elevation == ("doas",)
    assert _dispatcher(runner, elevation=Elevation.NONE).elevation == ()


def test_upgrade_plan_with_aur() -> None:
    plan = _dispatcher(FakeRunner()).plan_upgrade(include_secondary=True)
    assert [inv.argv for inv in plan] == [
        ("sudo", "pacman", "-Syu"),
        ("yay", "-Sua"),
    ]


def test_announce_called_before_each_handoff() -> None:
    runner = FakeRunner()
    seen: list[tuple[str, int]] = []
    dispatcher = _dispatcher(runner)
    dispatcher.install(
        {"vim"},
        {"yay-bin"},
        announce=lambda inv: seen.append((inv.backend, len(runner.handoffs))),
    )
    assert seen == [("pacman", 0), ("yay", 1)]

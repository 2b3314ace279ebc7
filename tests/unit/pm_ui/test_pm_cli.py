import logging

import pytest
from typer.testing import CliRunner

from pm_common.config.settings import PreviewLayout, Settings, SettingsRepository, ThemeName
from pm_core.dispatcher import ExecutionDispatcher
from pm_core.models import Package
from pm_core.provider import PackageDataProvider
from pm_core.router import PackageSourceRouter
from pm_core.sources import SyncDatabaseSource
from pm_ui.cli.main import app, ctx_store
from pm_ui.flows.doctor import DoctorService
from pm_ui.tui.system.headless import HeadlessUI
from pm_ui.tui.system.models import SelectedSet
from tests.helpers.fake_runner import FakeRunner

pytestmark = pytest.mark.unit_ui

cli = CliRunner()


@pytest.fixture
def fake(tmp_path) -> FakeRunner:
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level

    runner = FakeRunner()
    settings = Settings()
    ctx_store.headless = False
    ctx_store.ui = HeadlessUI()
    ctx_store.runner = runner
    ctx_store.settings_repo = SettingsRepository(config_home=tmp_path)
    ctx_store.settings = settings
    ctx_store.provider = PackageDataProvider(runner)
    ctx_store.router = PackageSourceRouter(SyncDatabaseSource(runner), max_workers=1)
    ctx_store.dispatcher = ExecutionDispatcher(runner, settings=settings, euid=1000)
    ctx_store.doctor_service = DoctorService(
        runner=runner,
        settings_repo=ctx_store.settings_repo,
        settings=settings,
        tty_check=lambda: True,
    )
    yield runner

    for name in (
        "_ui",
        "_runner",
        "_settings_repo",
        "_settings",
        "_provider",
        "_router",
        "_dispatcher",
        "_doctor_service",
    ):
        setattr(ctx_store, name, None)
    for handler in root.handlers:
        if handler not in handlers:
            handler.close()
    root.handlers[:] = handlers
    root.setLevel(level)


def _ui() -> HeadlessUI:
    return ctx_store.ui


def test_no_subcommand_prints_help() -> None:
    result = cli.invoke(app, [])
    assert "install" in result.output


def test_install_names_bypass_selector(fake: FakeRunner) -> None:
    fake.primary_packages("vim").secondary_packages("yay-bin")
    result = cli.invoke(app, ["install", "vim", "yay-bin"])
    assert result.exit_code == 0, result.output
    assert _ui().recorded_selections == []
    assert fake.handoffs == [("sudo", "pacman", "-S", "vim"), ("yay", "-S", "yay-bin")]
    plan = _ui().recorded_tables[0].model
    assert plan.title == "Execution plan"
    assert [row[1] for row in plan.rows] == ["pacman", "yay"]


def test_install_alias_and_noconfirm(fake: FakeRunner) -> None:
    fake.primary_packages("vim")
    result = cli.invoke(app, ["i", "vim", "--noconfirm"])
    assert result.exit_code == 0, result.output
    assert fake.handoffs == [("sudo", "pacman", "-S", "--noconfirm", "vim")]


def test_install_without_names_opens_selector(fake: FakeRunner) -> None:
    fake.on("yay", "-Sl", stdout="extra vim 9.1-1\naur yay-bin 12.3-1\n")
    fake.secondary_packages("yay-bin")
    _ui().next_selection = SelectedSet((Package("yay-bin"),))

    result = cli.invoke(app, ["install"])

    assert result.exit_code == 0, result.output
    (selection,) = _ui().recorded_selections
    assert [pkg.name for pkg in selection.candidates] == ["vim", "yay-bin"]
    assert selection.mode.multi_select
    assert fake.handoffs == [("yay", "-S", "yay-bin")]


def test_cancelled_selection_runs_nothing(fake: FakeRunner) -> None:
    fake.on("yay", "-Sl", stdout="extra vim 9.1-1\n")
    result = cli.invoke(app, ["install"])
    assert result.exit_code == 0
    assert fake.handoffs == []
    assert "INFO: Nothing selected." in _ui().recorded_messages


def test_forbidding_selector_without_names_is_usage_error(fake: FakeRunner) -> None:
    result = cli.invoke(app, ["install", "-y"])
    assert result.exit_code == 2
    assert fake.handoffs == []
    assert any("selector is disabled" in msg for msg in _ui().recorded_messages)


def test_worst_exit_code_is_propagated(fake: FakeRunner) -> None:
    fake.handoff_codes.update({"pacman": 1, "yay": 3})
    fake.primary_packages("vim").secondary_packages("yay-bin")
    result = cli.invoke(app, ["install", "vim", "yay-bin"])
    assert result.exit_code == 3
    assert len(fake.handoffs) == 2
    errors = [msg for msg in _ui().recorded_messages if msg.startswith("ERROR:")]
    assert errors == [
        "ERROR: pacman failed for vim (exit code 1)",
        "ERROR: yay failed for yay-bin (exit code 3)",
    ]


def test_ambiguous_probe_aborts_before_any_handoff(fake: FakeRunner) -> None:
    fake.primary_packages("vim")
    fake.on("pacman", "-Si", "--", "ghost", returncode=1, stderr="error: could not lock database\n")
    result = cli.invoke(app, ["install", "vim", "ghost"])
    assert result.exit_code == 1
    assert fake.handoffs == []
    assert any(
        "Could not determine the repository of ghost" in msg for msg in _ui().recorded_messages
    )


def test_remove_routes_foreign_packages_to_helper(fake: FakeRunner) -> None:
    fake.primary_packages("vim").secondary_packages("yay-bin")
    result = cli.invoke(app, ["remove", "vim", "yay-bin"])
    assert result.exit_code == 0, result.output
    assert fake.handoffs == [("sudo", "pacman", "-Rns", "vim"), ("yay", "-Rns", "yay-bin")]


def test_search_shows_table(fake: FakeRunner) -> None:
    fake.on(
        "yay",
        "-Ss",
        "vim",
        stdout="extra/vim 9.1-1 [installed]\n    Vi Improved\naur/vim-git 9.1.r1-1 (+10 0.5)\n    Vim from git\n",
    )
    result = cli.invoke(app, ["search", "vim"])
    assert result.exit_code == 0, result.output
    table = _ui().recorded_tables[0].model
    assert table.columns == ["Repository", "Name", "Version", "Installed", "Description"]
    assert [row[1] for row in table.rows] == ["vim", "vim-git"]
    assert fake.handoffs == []


def test_search_without_results_is_a_warning(fake: FakeRunner) -> None:
    fake.on("yay", "-Ss", "nothing", returncode=1)
    result = cli.invoke(app, ["s", "nothing"])
    assert result.exit_code == 0
    assert "WARNING: No packages match 'nothing'." in _ui().recorded_messages


def test_list_shows_installed_with_source(fake: FakeRunner) -> None:
    fake.on("yay", "-Q", stdout="bash 5.2-1\nyay-bin 12.3-1\n")
    fake.on("yay", "-Qm", stdout="yay-bin 12.3-1\n")
    result = cli.invoke(app, ["list"])
    assert result.exit_code == 0, result.output
    table = _ui().recorded_tables[0].model
    assert [row[0] for row in table.rows] == ["bash", "yay-bin"]


def test_update_with_aur(fake: FakeRunner) -> None:
    result = cli.invoke(app, ["update", "--aur"])
    assert result.exit_code == 0, result.output
    assert fake.handoffs == [("sudo", "pacman", "-Syu"), ("yay", "-Sua")]


def test_theme_saves_settings(fake: FakeRunner) -> None:
    result = cli.invoke(app, ["theme", "nord", "--layout", "horizontal"])
    assert result.exit_code == 0, result.output
    stored = ctx_store.settings_repo.load()
    assert stored.theme is ThemeName.NORD
    assert stored.layout is PreviewLayout.HORIZONTAL
    assert ctx_store.settings.theme is ThemeName.NORD


def test_theme_without_arguments_lists_themes(fake: FakeRunner) -> None:
    result = cli.invoke(app, ["theme"])
    assert result.exit_code == 0
    table = _ui().recorded_tables[0].model
    assert [row[0] for row in table.rows] == [item.value for item in ThemeName]
    assert not ctx_store.settings_repo.path.exists()


def test_doctor_passes_with_tools_present(fake: FakeRunner) -> None:
    result = cli.invoke(app, ["doctor"])
    assert result.exit_code == 0, result.output
    titles = [table.model.title for table in _ui().recorded_tables]
    assert titles == ["Package Tools", "Privilege Escalation", "Terminal"]
    assert "SUCCESS: All required checks passed." in _ui().recorded_messages


def _without_tools(fake: FakeRunner) -> None:
    fake.tools.clear()
    ctx_store.provider = None


def test_install_without_any_backend_fails_before_probing(fake: FakeRunner) -> None:
    _without_tools(fake)
    result = cli.invoke(app, ["install", "vim"])
    assert result.exit_code == 1
    assert fake.captured == []
    assert fake.handoffs == []
    assert _ui().recorded_messages == ["ERROR: Neither yay nor pacman was found in PATH"]


def test_update_without_any_backend_runs_nothing(fake: FakeRunner) -> None:
    _without_tools(fake)
    result = cli.invoke(app, ["update"])
    assert result.exit_code == 1
    assert fake.handoffs == []
    assert _ui().recorded_tables == []


def test_selected_packages_need_confirmation(fake: FakeRunner) -> None:
    fake.on("yay", "-Sl", stdout="extra vim 9.1-1\naur yay-bin 12.3-1\n")
    fake.primary_packages("vim").secondary_packages("yay-bin")
    _ui().next_selection = SelectedSet((Package("vim"), Package("yay-bin")))
    _ui().next_confirm_response = False

    result = cli.invoke(app, ["install"])

    assert result.exit_code == 0, result.output
    assert fake.handoffs == []
    assert "CONFIRM: Install 2 package(s): vim, yay-bin?" in _ui().recorded_messages
    assert _ui().recorded_messages[-1] == "INFO: Aborted."


def test_noconfirm_skips_confirmation(fake: FakeRunner) -> None:
    fake.on("yay", "-Sl", stdout="extra vim 9.1-1\n")
    fake.primary_packages("vim")
    _ui().next_selection = SelectedSet((Package("vim"),))
    _ui().next_confirm_response = False

    result = cli.invoke(app, ["install", "--noconfirm"])

    assert result.exit_code == 0, result.output
    assert fake.handoffs == [("sudo", "pacman", "-S", "--noconfirm", "vim")]
    assert not any(msg.startswith("CONFIRM:") for msg in _ui().recorded_messages)


def test_explicit_names_are_not_asked_again(fake: FakeRunner) -> None:
    fake.primary_packages("vim")
    _ui().next_confirm_response = False
    result = cli.invoke(app, ["install", "vim"])
    assert result.exit_code == 0, result.output
    assert fake.handoffs == [("sudo", "pacman", "-S", "vim")]

"""
Engine tests — execution order, dry run, confirmation, batch resilience.
"""

from __future__ import annotations

import shutil
import subprocess
from unittest.mock import patch

import pytest

from tranquility.core.models.application import Application
from tranquility.core.services.app_install import (
    InstallEngine,
    InstallOptions,
    InstallRunner,
    ResolutionFailure,
    select_method,
)
from tranquility.core.services.package_managers import PackageManagerRegistry
from tests.app_install.simulated_systems import SYSTEMS

_SHELL = "tranquility.adapters.shell.command"
LINUX = SYSTEMS["ubuntu"]


def _ok(*args, **kwargs):
    return subprocess.CompletedProcess(args=[], returncode=0, stdout="", stderr="")


def _app(name: str, methods: list[dict]) -> Application:
    return Application.model_validate({
        "name": name,
        "categories": ["Utilities"],
        "supported_systems": ["Cross"],
        "versions": [{"name": "v1", "check_command": name.lower(), "install_methods": methods}],
    })


@pytest.fixture(autouse=True)
def plain_linux_shell():
    with patch(f"{_SHELL}._is_windows", return_value=False), \
         patch(f"{_SHELL}._is_root", return_value=False):
        yield


@pytest.fixture
def nothing_installed():
    with patch(f"{_SHELL}.shutil.which", return_value=None):
        yield


def _engine(*, dry_run=False, auto=True, confirm=None) -> InstallEngine:
    registry = PackageManagerRegistry(LINUX, confirm=lambda *a, **k: False)
    return InstallEngine(
        LINUX, registry, InstallOptions(dry_run=dry_run, auto=auto),
        confirm=confirm or (lambda *a, **k: pytest.fail("unexpected prompt")),
    )


class TestInstallRunner:
    def _run(self, app, operation="install"):
        registry = PackageManagerRegistry(LINUX)
        runner = InstallRunner(app, select_method(app, LINUX), registry, dry_run=True)
        return runner.run_install() if operation == "install" else runner.run_uninstall()

    def test_steps_replace_package_manager(self):
        app = _app("t", [{
            "os": ["Linux"], "package_manager": "apt", "package_name": "t",
            "steps": {
                "preinstall_steps": ["echo pre"],
                "install": ["echo install"],
                "postinstall_steps": ["echo post"],
            },
        }])
        assert self._run(app).commands == [
            "sh -c 'echo pre'", "sh -c 'echo install'", "sh -c 'echo post'",
        ]

    def test_package_manager_between_pre_and_post(self):
        app = _app("t", [{
            "os": ["Linux"], "package_manager": "apt", "package_name": "t",
            "steps": {"preinstall_steps": ["echo pre"], "postinstall_steps": ["echo post"]},
        }])
        assert self._run(app).commands == [
            "sh -c 'echo pre'", "sudo apt install t -y", "sh -c 'echo post'",
        ]

    def test_uninstall_order(self):
        app = _app("t", [{
            "os": ["Linux"], "package_manager": "apt", "package_name": "t",
            "steps": {"postuninstall_steps": ["echo cleanup"]},
        }])
        assert self._run(app, "uninstall").commands == [
            "sudo apt remove t -y", "sh -c 'echo cleanup'",
        ]

    def test_unusable_method(self):
        app = _app("t", [{"os": ["Linux"], "steps": {"preinstall_steps": ["echo pre"]}}])
        with pytest.raises(ResolutionFailure):
            self._run(app)

    def test_failed_step_does_not_stop_the_rest(self):
        app = _app("t", [{"os": ["Linux"], "steps": {"install": ["a", "b", "c"]}}])
        results = [
            subprocess.CompletedProcess([], 1, "", "a failed"),
            subprocess.CompletedProcess([], 0, "", ""),
            subprocess.CompletedProcess([], 0, "", ""),
        ]
        registry = PackageManagerRegistry(LINUX)
        runner = InstallRunner(app, select_method(app, LINUX), registry)
        with patch(f"{_SHELL}.subprocess.run", side_effect=results) as run:
            outcome = runner.run_install()
        assert run.call_count == 3
        assert len(outcome.failures) == 1
        assert "a failed" in str(outcome.failures[0])
        assert not outcome.ok


class TestInstallEngine:
    def test_fish_dry_run_on_linux(self, nothing_installed, capsys):
        fish = Application.model_validate({
            "name": "Fish Shell", "categories": ["Shells"], "supported_systems": ["MacLin"],
            "versions": [{"name": "Fish", "check_command": "fish --version", "install_methods": [
                {"os": ["Linux", "Macos"], "package_manager": "apt", "package_name": "fish"},
            ]}],
        })
        with patch(f"{_SHELL}.subprocess.run") as run:
            report = _engine(dry_run=True).install([fish])
        run.assert_not_called()
        assert report.ok
        assert report.outcomes[0].commands == ["sudo apt install fish -y"]
        assert "[dry-run] sudo apt install fish -y" in capsys.readouterr().out

    def test_batch_resilience(self, nothing_installed):
        apps = [
            _app("first", [{"os": ["Linux"], "package_manager": "apt", "package_name": "first"}]),
            _app("second", [{"os": ["Windows"], "package_manager": "winget", "package_name": "s"}]),
            _app("third", [{"os": ["Linux"], "package_manager": "apt", "package_name": "third"}]),
        ]
        with patch(f"{_SHELL}.subprocess.run", side_effect=_ok) as run:
            report = _engine().install(apps)

        assert [o.status for o in report.outcomes] == ["done", "unresolved", "done"]
        assert len(report.resolution_failures) == 1
        assert report.resolution_failures[0].app.name == "second"
        assert run.call_count == 2
        assert not report.ok

    def test_dry_run_matches_live_trace(self, nothing_installed):
        apps = [
            _app("a", [{"os": ["Windows"], "package_manager": "winget", "package_name": "a"},
                       {"os": ["Linux"], "steps": {"install": ["make"], "uninstall": ["rm"]}}]),
            _app("b", [{"os": ["ubuntu"], "package_manager": "apt", "package_name": "b"}]),
        ]
        with patch(f"{_SHELL}.subprocess.run") as run:
            dry = _engine(dry_run=True).install(apps)
        run.assert_not_called()

        with patch(f"{_SHELL}.subprocess.run", side_effect=_ok):
            live = _engine().install(apps)

        assert [o.method for o in dry.outcomes] == [o.method for o in live.outcomes]
        assert [o.commands for o in dry.outcomes] == [o.commands for o in live.outcomes]

    def test_installed_apps_skipped(self):
        app = _app("present", [{"os": ["Linux"], "package_manager": "apt", "package_name": "p"}])
        with patch(f"{_SHELL}.shutil.which", return_value="/usr/bin/present"), \
             patch(f"{_SHELL}.subprocess.run") as run:
            report = _engine().install([app])
        run.assert_not_called()
        assert report.outcomes[0].status == "skipped"

    def test_uninstall_skips_missing(self, nothing_installed):
        app = _app("absent", [{"os": ["Linux"], "package_manager": "apt", "package_name": "a"}])
        report = _engine().uninstall([app])
        assert report.outcomes[0].status == "skipped"

    def test_uninstall_installed(self):
        app = _app("present", [{"os": ["Linux"], "package_manager": "apt", "package_name": "p"}])
        with patch(f"{_SHELL}.shutil.which", return_value="/usr/bin/present"):
            report = _engine(dry_run=True).uninstall([app])
        assert report.outcomes[0].commands == ["sudo apt remove p -y"]

    def test_confirmation_declined(self, nothing_installed):
        asked = []

        def confirm(question, default=True):
            asked.append(question)
            return False

        app = _app("tool", [{"os": ["Linux"], "package_manager": "apt", "package_name": "t"}])
        with patch(f"{_SHELL}.subprocess.run") as run:
            report = _engine(auto=False, confirm=confirm).install([app])
        run.assert_not_called()
        assert asked == ["Do you want to install: tool?"]
        assert report.outcomes[0].status == "declined"
        assert report.ok

    def test_execution_failure_counted(self, nothing_installed):
        app = _app("tool", [{"os": ["Linux"], "package_manager": "apt", "package_name": "t"}])
        failing = subprocess.CompletedProcess([], 100, "", "E: Unable to locate package t")
        with patch(f"{_SHELL}.subprocess.run", return_value=failing):
            report = _engine().install([app])
        assert report.outcomes[0].status == "failed"
        assert report.execution_failures == 1
        assert "Unable to locate" in report.outcomes[0].errors[0]
        assert report.to_dict()["applications"][0]["status"] == "failed"

    @pytest.mark.skipif(shutil.which("sh") is None, reason="needs a POSIX shell")
    def test_binary_step_output_does_not_abort_batch(self, nothing_installed, tmp_path):
        marker = tmp_path / "marker"
        apps = [
            _app("a", [{"os": ["Linux"], "steps": {"install": ["true"]}}]),
            _app("b", [{"os": ["Linux"], "steps": {"install": ["printf '\\377\\376'"]}}]),
            _app("c", [{"os": ["Linux"], "steps": {"install": [f"touch '{marker}'"]}}]),
        ]
        report = _engine().install(apps)
        assert [o.status for o in report.outcomes] == ["done", "done", "done"]
        assert marker.exists()
        assert report.ok

"""
Resolver tests — filtering, installed check, method selection.

Method selection is run against every simulated system to make sure it
is deterministic and never picks a method for the wrong OS.
"""

from __future__ import annotations

from unittest.mock import patch

import pytest

from tranquility.core.models.application import Application
from tranquility.core.models.category import Category
from tranquility.core.services.app_install import (
    BUILTIN_APPS,
    ResolutionFailure,
    filter_apps,
    is_installed,
    select_method,
)
from tests.app_install.simulated_systems import SYSTEMS


def _app(name: str, methods: list[dict], **extra) -> Application:
    data = {
        "name": name,
        "categories": ["Utilities"],
        "supported_systems": ["Cross"],
        "versions": [{"name": "v1", "check_command": f"{name.lower()} --version",
                      "install_methods": methods}],
    }
    data.update(extra)
    return Application.model_validate(data)


FISH = next(a for a in BUILTIN_APPS if a.id == "fish-shell")


class TestFishScenario:
    def test_linux_selects_apt(self):
        resolved = select_method(FISH, SYSTEMS["ubuntu"])
        assert resolved.method.package_manager.value == "apt"
        assert resolved.method.package_name == "fish"
        assert (resolved.version_index, resolved.method_index) == (0, 0)

    def test_windows_fails(self):
        with pytest.raises(ResolutionFailure):
            select_method(FISH, SYSTEMS["windows"])

    def test_windows_filtered_out(self):
        assert FISH not in filter_apps([FISH], SYSTEMS["windows"])


class TestSelectMethod:
    def test_first_match_wins(self):
        app = _app("tool", [
            {"os": ["Windows"], "package_manager": "winget", "package_name": "t"},
            {"os": ["linux"], "package_manager": "apt", "package_name": "first"},
            {"os": ["Linux"], "package_manager": "dnf", "package_name": "second"},
        ])
        assert select_method(app, SYSTEMS["fedora"]).method.package_name == "first"

    def test_later_version_used_when_earlier_has_no_match(self):
        app = Application.model_validate({
            "name": "tool", "categories": [], "supported_systems": ["Cross"],
            "versions": [
                {"name": "win", "install_methods": [{"os": ["Windows"], "steps": {"install": ["x"]}}]},
                {"name": "mac", "install_methods": [{"os": ["Macos"], "steps": {"install": ["y"]}}]},
            ],
        })
        resolved = select_method(app, SYSTEMS["macos"])
        assert resolved.version.name == "mac"
        assert resolved.trace()["version_index"] == 1

    def test_distro_id_matches(self):
        alacritty = next(a for a in BUILTIN_APPS if a.name == "Alacritty")
        assert select_method(alacritty, SYSTEMS["debian"]).method.package_name == "alacritty"
        with pytest.raises(ResolutionFailure):
            select_method(alacritty, SYSTEMS["fedora"])

    def test_no_versions_never_resolves(self):
        app = Application.model_validate(
            {"name": "empty", "categories": [], "supported_systems": ["Cross"], "versions": []}
        )
        with pytest.raises(ResolutionFailure):
            select_method(app, SYSTEMS["ubuntu"])

    @pytest.mark.parametrize("system_name", sorted(SYSTEMS))
    def test_deterministic(self, system_name):
        app = _app("tool", [
            {"os": ["Windows"], "package_manager": "winget", "package_name": "w"},
            {"os": ["Linux", "Macos"], "package_manager": "brew", "package_name": "b"},
            {"os": ["Macos"], "package_manager": "brew", "package_name": "never"},
        ])
        system = SYSTEMS[system_name]
        try:
            first = select_method(app, system).trace()
        except ResolutionFailure:
            with pytest.raises(ResolutionFailure):
                select_method(app, system)
            return
        assert all(select_method(app, system).trace() == first for _ in range(5))
        assert any(system.matches_os(o) for o in first["os"])


class TestFilterApps:
    def test_os_mask(self):
        linux_only = _app("l", [], supported_systems=["Linux"])
        win_only = _app("w", [], supported_systems=["Windows"])
        assert filter_apps([linux_only, win_only], SYSTEMS["arch"]) == [linux_only]

    def test_server_only(self):
        server = _app("s", [], server_compatible=True)
        desktop = _app("d", [])
        assert filter_apps([server, desktop], SYSTEMS["ubuntu"], server_only=True) == [server]

    def test_categories(self):
        shell = _app("s", [], categories=["Shells"])
        editor = _app("e", [], categories=["Editors", "Development"])
        result = filter_apps([shell, editor], SYSTEMS["ubuntu"],
                             categories=[Category.DEVELOPMENT, Category.AI])
        assert result == [editor]

    def test_unsupported_os_yields_nothing(self):
        assert filter_apps([_app("x", [])], SYSTEMS["freebsd"]) == []


class TestIsInstalled:
    def test_probes_first_word(self):
        with patch("shutil.which", return_value="/usr/bin/fish") as which:
            assert is_installed(FISH)
        which.assert_called_once_with("fish")

    def test_not_on_path(self):
        with patch("shutil.which", return_value=None):
            assert not is_installed(FISH)

    def test_no_check_command(self):
        app = Application.model_validate({
            "name": "x", "categories": [], "supported_systems": ["Cross"],
            "versions": [{"name": "v"}],
        })
        assert not is_installed(app)

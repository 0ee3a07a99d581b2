"""
Shared test fixtures and configuration.
"""

from pathlib import Path

import pytest

from tests.app_install.simulated_systems import SYSTEMS


@pytest.fixture(autouse=True)
def isolated_config_dir(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Point the settings directory at a temp dir for every test."""
    config_dir = tmp_path / "tranquility-config"
    monkeypatch.setenv("TRANQUILITY_CONFIG_DIR", str(config_dir))
    monkeypatch.delenv("TRANQUILITY_LOG_FILE", raising=False)
    monkeypatch.setenv("TRANQUILITY_LOG_LEVEL", "CRITICAL")  # keep CLI output clean
    return config_dir


@pytest.fixture
def linux_system():
    return SYSTEMS["ubuntu"]


@pytest.fixture
def windows_system():
    return SYSTEMS["windows"]


@pytest.fixture
def macos_system():
    return SYSTEMS["macos"]

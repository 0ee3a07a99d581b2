"""
Tests for CLI commands — global options, apps, config, vps, pm, doctor.
"""

import json
import textwrap
from pathlib import Path
from unittest.mock import patch

import pytest
from click.testing import CliRunner

from tranquility.main import cli
from tests.app_install.simulated_systems import SYSTEMS

_SHELL = "tranquility.adapters.shell.command"


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture
def ubuntu_obj():
    return {"system": SYSTEMS["ubuntu"]}


@pytest.fixture(autouse=True)
def plain_linux_shell():
    with patch(f"{_SHELL}._is_windows", return_value=False), \
         patch(f"{_SHELL}._is_root", return_value=False):
        yield


class TestCLIGlobal:
    def test_help(self, runner):
        result = runner.invoke(cli, ["--help"])
        assert result.exit_code == 0
        assert "Tranquility" in result.output

    def test_version(self, runner):
        result = runner.invoke(cli, ["--version"])
        assert result.exit_code == 0
        assert "0.1.0" in result.output

    def test_settings_created_on_first_run(self, runner, isolated_config_dir: Path):
        result = runner.invoke(cli, ["apps", "categories"])
        assert result.exit_code == 0
        assert (isolated_config_dir / "config.yaml").is_file()
        assert (isolated_config_dir / "logs").is_dir()


class TestAppsCommands:
    def test_categories(self, runner):
        result = runner.invoke(cli, ["apps", "categories"])
        assert result.exit_code == 0
        assert "terminal-emulators" in result.output
        assert "Development Tools" in result.output

    def test_list_json(self, runner, ubuntu_obj):
        with patch("shutil.which", return_value=None):
            result = runner.invoke(cli, ["apps", "list", "--json"], obj=ubuntu_obj)
        assert result.exit_code == 0
        ids = [a["id"] for a in json.loads(result.output)]
        assert ids == ["alacritty", "fish-shell", "zsh-shell"]

    def test_list_server_only(self, runner, ubuntu_obj):
        result = runner.invoke(cli, ["apps", "list", "--server", "--json"], obj=ubuntu_obj)
        assert [a["id"] for a in json.loads(result.output)] == ["fish-shell", "zsh-shell"]

    def test_list_windows_empty(self, runner):
        result = runner.invoke(cli, ["apps", "list"], obj={"system": SYSTEMS["windows"]})
        assert result.exit_code == 0
        assert "No applications" in result.output

    def test_install_dry_run(self, runner, ubuntu_obj):
        with patch(f"{_SHELL}.shutil.which", return_value=None), \
             patch(f"{_SHELL}.subprocess.run") as run:
            result = runner.invoke(
                cli, ["--dry-run", "apps", "install", "--all", "--category", "shells"], obj=ubuntu_obj,
            )
        run.assert_not_called()
        assert result.exit_code == 0, result.output
        assert "[dry-run] sudo apt install fish -y" in result.output
        assert "[dry-run] sudo apt install zsh -y" in result.output
        assert "alacritty" not in result.output

    def test_install_prompts(self, runner, ubuntu_obj):
        with patch(f"{_SHELL}.shutil.which", return_value=None):
            result = runner.invoke(
                cli, ["--dry-run", "apps", "install", "--server"], obj=ubuntu_obj, input="n\nn\n",
            )
        assert result.exit_code == 0
        assert "Do you want to install: Fish Shell?" in result.output
        assert "[dry-run]" not in result.output

    def test_unknown_category(self, runner, ubuntu_obj):
        result = runner.invoke(cli, ["apps", "list", "--category", "nope"], obj=ubuntu_obj)
        assert result.exit_code == 2

    def test_user_applications_file(self, runner, ubuntu_obj, isolated_config_dir: Path):
        isolated_config_dir.mkdir(parents=True)
        (isolated_config_dir / "applications.json").write_text(json.dumps([{
            "name": "Ripgrep", "categories": ["CLITools"], "supported_systems": ["Cross"],
            "versions": [{"name": "rg", "install_methods": [
                {"os": ["Linux"], "package_manager": "apt", "package_name": "ripgrep"},
            ]}],
        }]))
        result = runner.invoke(cli, ["apps", "list", "--category", "cli-tools", "--json"], obj=ubuntu_obj)
        assert [a["id"] for a in json.loads(result.output)] == ["ripgrep"]


class TestConfigCommands:
    def test_validate_valid(self, runner, tmp_path: Path):
        path = tmp_path / "vps.yaml"
        path.write_text("vps:\n  - name: a\n    host: example.com\n")
        result = runner.invoke(cli, ["config", "validate", "vps", "--file", str(path)])
        assert result.exit_code == 0
        assert "valid vps file" in result.output

    def test_validate_invalid_json_report(self, runner, tmp_path: Path):
        path = tmp_path / "vps.json"
        path.write_text(json.dumps({"vps": [{"name": "x", "host": ""}]}))
        result = runner.invoke(cli, ["config", "validate", "vps", "--file", str(path), "--json"])
        assert result.exit_code == 1
        data = json.loads(result.output)
        assert data["valid"] is False
        assert {v["kind"] for v in data["violations"]} == {"schema", "semantic"}

    def test_validate_unsupported_extension(self, runner, tmp_path: Path):
        path = tmp_path / "apps.ini"
        path.write_text("x")
        result = runner.invoke(cli, ["config", "validate", "applications", "--file", str(path)])
        assert result.exit_code == 1
        assert "Unsupported file extension" in result.output

    def test_override_converts_format(self, runner, tmp_path: Path, isolated_config_dir: Path):
        source = tmp_path / "mine.json"
        source.write_text(json.dumps({"vps": [{"name": "a", "host": "h"}]}))
        result = runner.invoke(cli, ["config", "override", "vps", "--file", str(source)])
        assert result.exit_code == 0, result.output
        target = isolated_config_dir / "vps.yaml"
        assert "host: h" in target.read_text()

    def test_override_rejects_invalid(self, runner, tmp_path: Path, isolated_config_dir: Path):
        source = tmp_path / "mine.yaml"
        source.write_text("vps:\n  - name: a\n")
        result = runner.invoke(cli, ["config", "override", "vps", "--file", str(source)])
        assert result.exit_code == 1
        assert not (isolated_config_dir / "vps.yaml").exists()

    def test_show_json(self, runner, isolated_config_dir: Path):
        result = runner.invoke(cli, ["config", "show", "--json"])
        data = json.loads(result.output)
        assert data["log_output"] == "primary"
        assert data["vps_file"] == str(isolated_config_dir / "vps.yaml")

    def test_invalid_settings_block_commands(self, runner, isolated_config_dir: Path, ubuntu_obj):
        isolated_config_dir.mkdir(parents=True)
        (isolated_config_dir / "config.yaml").write_text("log_directory: relative/logs\n")
        result = runner.invoke(cli, ["apps", "list"], obj=ubuntu_obj)
        assert result.exit_code == 1
        assert "absolute" in result.output

    def test_reset_repairs_invalid_settings(self, runner, isolated_config_dir: Path):
        isolated_config_dir.mkdir(parents=True)
        (isolated_config_dir / "config.yaml").write_text("log_directory: relative/logs\n")
        result = runner.invoke(cli, ["config", "reset", "--yes"])
        assert result.exit_code == 0
        result = runner.invoke(cli, ["config", "validate", "config"])
        assert result.exit_code == 0


class TestVpsCommands:
    def test_add_list_update_delete(self, runner):
        result = runner.invoke(cli, [
            "vps", "add", "--name", "Web Box", "--host", "10.0.0.5", "--user", "root", "--port", "2200",
        ])
        assert result.exit_code == 0, result.output
        assert "web-box-root" in result.output

        result = runner.invoke(cli, ["vps", "list", "--json"])
        entry = json.loads(result.output)["vps"][0]
        assert entry == {"id": "web-box-root", "name": "Web Box", "host": "10.0.0.5",
                         "user": "root", "port": 2200}

        result = runner.invoke(cli, ["vps", "update", "--id", "web-box-root", "--port", "22"])
        assert result.exit_code == 0

        result = runner.invoke(cli, ["vps", "list"])
        assert "root@10.0.0.5:22" in result.output

        result = runner.invoke(cli, ["vps", "delete", "--id", "web-box-root", "--yes"])
        assert result.exit_code == 0
        result = runner.invoke(cli, ["vps", "list"])
        assert "No VPS configured" in result.output

    def test_add_duplicate_flags_fail(self, runner):
        args = ["vps", "add", "--name", "A", "--host", "h", "--user", "u"]
        assert runner.invoke(cli, args).exit_code == 0
        result = runner.invoke(cli, args)
        assert result.exit_code == 1
        assert "already exists" in result.output

    def test_add_interactive_rename(self, runner):
        runner.invoke(cli, ["vps", "add", "--name", "A", "--host", "h", "--user", "u"])
        # name, host, user, port, key, conflict choice
        result = runner.invoke(cli, ["vps", "add"], input="A\nh2\nu\n22\n\n3\n")
        assert result.exit_code == 0, result.output
        assert "a-u-1" in result.output

    def test_delete_missing(self, runner):
        result = runner.invoke(cli, ["vps", "delete", "--id", "nope", "--yes"])
        assert result.exit_code == 1

    def test_schema(self, runner):
        result = runner.invoke(cli, ["vps", "schema", "--format", "json"])
        assert result.exit_code == 0
        assert json.loads(result.output)["vps"][0]["host"] == "203.0.113.10"


class TestPmAndDoctor:
    def test_pm_list(self, runner, ubuntu_obj):
        with patch(f"{_SHELL}.shutil.which", side_effect=lambda n: "/usr/bin/apt" if n == "apt" else None):
            result = runner.invoke(cli, ["pm", "list", "--json"], obj=ubuntu_obj)
        rows = json.loads(result.output)
        assert [r["name"] for r in rows] == ["apt", "snap", "flatpak", "nix"]
        assert rows[0]["installed"] is True

    def test_pm_update_dry_run(self, runner, ubuntu_obj):
        with patch(f"{_SHELL}.subprocess.run") as run:
            result = runner.invoke(cli, ["--dry-run", "pm", "update", "-m", "apt"], obj=ubuntu_obj)
        run.assert_not_called()
        assert "sudo apt update" in result.output
        assert "sudo apt upgrade -y" in result.output

    def test_doctor_json(self, runner, ubuntu_obj):
        result = runner.invoke(cli, ["doctor", "--json"], obj=ubuntu_obj)
        data = json.loads(result.output)
        assert data["ok"] is True
        assert data["system"]["distro_id"] == "ubuntu"
        assert set(data["package_managers"]) == {"apt", "snap", "flatpak", "nix"}

    def test_doctor_fix_repairs_settings(self, runner, ubuntu_obj, isolated_config_dir: Path):
        isolated_config_dir.mkdir(parents=True)
        (isolated_config_dir / "config.yaml").write_text(textwrap.dedent("""\
            log_directory: ''
            log_output: stdout
        """))
        assert runner.invoke(cli, ["doctor"], obj=ubuntu_obj).exit_code == 1
        result = runner.invoke(cli, ["doctor", "--fix"], obj=ubuntu_obj)
        assert result.exit_code == 0, result.output
        assert "log_directory" in result.output
        assert runner.invoke(cli, ["config", "validate", "config"]).exit_code == 0

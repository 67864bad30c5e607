"""Tests for the callaudit CLI commands."""

from __future__ import annotations

from pathlib import Path

import pytest
from typer.testing import CliRunner

from callaudit import __version__
from callaudit.cli.main import app

runner = CliRunner()


@pytest.fixture(autouse=True)
def _isolated_cwd(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """Run every command from a directory with no callaudit.yaml."""
    monkeypatch.chdir(tmp_path)
    monkeypatch.delenv("LOG_API_RAW", raising=False)
    monkeypatch.delenv("CALLAUDIT_LOG_DIR", raising=False)


class TestVersion:
    def test_version_flag(self):
        result = runner.invoke(app, ["--version"])
        assert result.exit_code == 0
        assert __version__ in result.output


class TestStatusCommand:
    def test_disabled_by_default(self):
        result = runner.invoke(app, ["status"])
        assert result.exit_code == 0
        assert "disabled" in result.output
        assert "LOG_API_RAW=true" in result.output

    def test_enabled_via_env(self, tmp_path: Path):
        result = runner.invoke(
            app,
            ["status"],
            env={"LOG_API_RAW": "true", "CALLAUDIT_LOG_DIR": str(tmp_path / "logs")},
        )
        assert result.exit_code == 0
        assert "enabled" in result.output
        assert "unset LOG_API_RAW" in result.output

    def test_invalid_config_exits_nonzero(self, tmp_path: Path):
        (tmp_path / "callaudit.yaml").write_text("bogus: 1\n")
        result = runner.invoke(app, ["status"])
        assert result.exit_code == 1
        assert "Error" in result.output


class TestDemoCommand:
    def test_disabled_writes_nothing(self, tmp_path: Path):
        log_dir = tmp_path / "logs"
        result = runner.invoke(app, ["demo"], env={"CALLAUDIT_LOG_DIR": str(log_dir)})
        assert result.exit_code == 0
        assert "disabled" in result.output
        assert not log_dir.exists()

    def test_writes_redacted_entry(self, tmp_path: Path):
        log_dir = tmp_path / "logs"
        result = runner.invoke(
            app,
            ["demo", "--translated"],
            env={"LOG_API_RAW": "true", "CALLAUDIT_LOG_DIR": str(log_dir)},
        )
        assert result.exit_code == 0

        logs = list(log_dir.glob("api-session-*.log"))
        assert len(logs) == 1
        content = logs[0].read_text(encoding="utf-8")
        assert "[REDACTED]" in content
        assert "sk-demo-not-a-real-key" not in content
        assert "CHAT COMPLETIONS FORMAT REQUEST (TRANSLATED)" in content
        assert "RESPONSES FORMAT RESPONSE (BACK-TRANSLATED)" in content

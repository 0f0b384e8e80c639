"""Tests for the command line interface."""

import json

import pytest
from click.testing import CliRunner

from talk_analyzer.cli import cli


@pytest.fixture
def runner(monkeypatch):
    monkeypatch.delenv("TALK_ANALYZER_LLM_MODE", raising=False)
    monkeypatch.delenv("ANTHROPIC_API_KEY", raising=False)
    return CliRunner()


@pytest.fixture
def sessions(claude_dir, write_session):
    for index, text in enumerate(["How do I write React hooks?", "React state keeps resetting"]):
        write_session(
            [
                {
                    "type": "user",
                    "uuid": f"u{index}",
                    "timestamp": f"2024-06-0{index + 3}T09:30:00Z",
                    "cwd": "/home/dev/shop",
                    "message": {"role": "user", "content": text},
                }
            ],
            session_id=f"s{index}",
        )
    return claude_dir


class TestCli:
    def test_personas(self, runner):
        result = runner.invoke(cli, ["personas"])
        assert result.exit_code == 0
        assert "INTJ" in result.output
        assert "ENFP" in result.output

    def test_analyze(self, runner, sessions, tmp_path):
        output = tmp_path / "report.json"
        result = runner.invoke(
            cli, ["--claude-dir", str(sessions), "analyze", "--timezone", "UTC", "--json", str(output)]
        )
        assert result.exit_code == 0, result.output
        assert "Summary Statistics" in result.output
        assert "Found 2 conversations" in result.output
        data = json.loads(output.read_text(encoding="utf-8"))
        assert data["statistics"]["total_conversations"] == 2

    def test_analyze_empty_dir(self, runner, claude_dir):
        result = runner.invoke(cli, ["--claude-dir", str(claude_dir), "analyze", "--timezone", "UTC"])
        assert result.exit_code == 0
        assert "No conversations found" in result.output

    def test_hourly(self, runner, sessions):
        result = runner.invoke(cli, ["--claude-dir", str(sessions), "hourly", "--timezone", "UTC"])
        assert result.exit_code == 0, result.output
        assert "Peak energy hits around 9 AM" in result.output

    def test_export(self, runner, sessions, tmp_path):
        output = tmp_path / "share.json"
        result = runner.invoke(cli, ["--claude-dir", str(sessions), "export", str(output), "--timezone", "UTC"])
        assert result.exit_code == 0, result.output
        data = json.loads(output.read_text(encoding="utf-8"))
        assert data["privacy_level"] == "high_privacy"
        assert data["statistics"]["top_projects"] == [{"name": "project-1", "count": 2}]
        assert "shop" not in output.read_text(encoding="utf-8")

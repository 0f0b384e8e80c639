"""Shared fixtures for talk analyzer tests."""

import json
from datetime import datetime, timedelta, timezone

import pytest

from talk_analyzer.config import AnalysisConfig, HourlyActivityConfig
from talk_analyzer.models import AssistantMessage, Conversation, UserMessage

UTC = timezone.utc

# A Monday
BASE_TIME = datetime(2024, 6, 3, 9, 30, tzinfo=UTC)
NOW = datetime(2024, 6, 10, 12, 0, tzinfo=UTC)


@pytest.fixture
def make_conversation():
    """Factory for a conversation with one user turn and an optional reply."""

    def factory(
        session_id: str = "s1",
        user: str = "Hello there",
        assistant: str | None = None,
        project: str = "/home/dev/shop",
        started_at: datetime = BASE_TIME,
    ) -> Conversation:
        messages = [UserMessage(content=user, timestamp=started_at)]
        if assistant is not None:
            messages.append(AssistantMessage(content=assistant, timestamp=started_at + timedelta(minutes=1)))
        return Conversation(
            session_id=session_id,
            project_path=project,
            started_at=started_at,
            messages=tuple(messages),
        )

    return factory


@pytest.fixture
def analysis_config():
    """Deterministic config: fixed clock, UTC buckets, no history file."""
    return AnalysisConfig(hourly=HourlyActivityConfig(timezone="UTC"), now=NOW)


@pytest.fixture
def claude_dir(tmp_path):
    """An empty Claude data directory with a projects/ folder."""
    (tmp_path / "projects").mkdir()
    return tmp_path


@pytest.fixture
def write_session(claude_dir):
    """Write transcript lines to projects/<project_dir>/<session_id>.jsonl."""

    def writer(entries, session_id: str = "session-1", project_dir: str = "-home-dev-shop"):
        directory = claude_dir / "projects" / project_dir
        directory.mkdir(exist_ok=True)
        path = directory / f"{session_id}.jsonl"
        lines = [e if isinstance(e, str) else json.dumps(e) for e in entries]
        path.write_text("\n".join(lines) + "\n", encoding="utf-8")
        return path

    return writer

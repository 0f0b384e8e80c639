"""Tests for achievement badges."""

from datetime import datetime, timedelta, timezone

import pytest

from talk_analyzer.achievements import (
    ACHIEVEMENT_CATALOG,
    CATEGORY_ICONS,
    RARITY_COLORS,
    achievement_catalog,
    format_progress,
)
from talk_analyzer.analytics import analyze
from talk_analyzer.models import Conversation, UserMessage

UTC = timezone.utc
NOW = datetime(2024, 6, 10, 12, 0, tzinfo=UTC)


@pytest.fixture
def busy_week(make_conversation):
    """One conversation a day for the seven days up to NOW, plus four more on the last day."""
    days = [make_conversation(f"d{i}", started_at=NOW - timedelta(days=i, hours=2)) for i in range(7)]
    extra = [make_conversation(f"x{i}", started_at=NOW - timedelta(hours=i + 3)) for i in range(4)]
    return days + extra


def by_id(report):
    return {a.id: a for a in report.achievements.achievements}


class TestCatalog:
    def test_ids_are_unique_and_ordered(self):
        ids = [a.id for a in achievement_catalog()]
        assert ids[:4] == ["century_club", "week_warrior", "full_stack", "knowledge_seeker"]
        assert len(ids) == len(set(ids)) == 10

    def test_styles_cover_every_badge(self):
        for achievement, target, _ in ACHIEVEMENT_CATALOG:
            assert achievement.rarity in RARITY_COLORS
            assert achievement.category in CATEGORY_ICONS
            assert target > 0
            assert not achievement.unlocked

    def test_format_progress(self):
        assert format_progress(0.5) == "50%"
        assert format_progress(1 / 3) == "33%"
        assert format_progress(1.0) == "100%"


class TestCheckAchievements:
    def test_empty_corpus_unlocks_nothing(self, analysis_config):
        summary = analyze([], config=analysis_config).achievements
        assert summary.total_available == 10
        assert summary.total_unlocked == 0
        assert summary.completion_percentage == 0.0
        assert all(a.progress == 0.0 and a.unlocked_at is None for a in summary.achievements)

    def test_busy_week(self, busy_week, analysis_config):
        report = analyze(busy_week, config=analysis_config)
        badges = by_id(report)

        assert {a.id for a in report.achievements.unlocked()} == {"week_warrior", "first_steps", "productive_day"}
        assert badges["week_warrior"].unlocked_at == report.generated_at
        assert badges["marathon"].progress == pytest.approx(0.5)
        assert badges["knowledge_seeker"].progress == pytest.approx(11 / 50)
        assert badges["consistent"].progress == pytest.approx(7 / 30)
        assert badges["tech_enthusiast"].progress == 0.0
        assert badges["century_club"].unlocked_at is None
        assert report.achievements.completion_percentage == pytest.approx(30.0)

    def test_long_conversation_unlocks_deep_diver(self, analysis_config):
        messages = tuple(
            UserMessage(content=f"step {i}", timestamp=NOW - timedelta(hours=1, minutes=60 - i)) for i in range(50)
        )
        conversation = Conversation(
            session_id="long", project_path="/home/dev/shop", started_at=messages[0].timestamp, messages=messages
        )
        badge = by_id(analyze([conversation], config=analysis_config))["chatty"]
        assert badge.name == "Deep Diver"
        assert badge.unlocked
        assert badge.progress == 1.0

    def test_serialized_with_report(self, busy_week, analysis_config):
        data = analyze(busy_week, config=analysis_config).to_dict()["achievements"]
        assert data["total_unlocked"] == 3
        assert data["total_available"] == 10
        first = data["achievements"][0]
        assert first["id"] == "century_club"
        assert first["unlocked"] is False
        assert first["unlocked_at"] is None

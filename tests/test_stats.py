"""Tests for corpus statistics."""

from datetime import date, datetime, timezone
from zoneinfo import ZoneInfo

from talk_analyzer.models import AnalyticsStatistics, ProjectCount
from talk_analyzer.stats import calculate_statistics, count_tokens

UTC = timezone.utc


def corpus(make_conversation):
    return [
        make_conversation("a", user="Hello there", assistant="Sure thing friend"),
        make_conversation("b", project="/home/dev/blog", started_at=datetime(2024, 6, 4, 9, 0, tzinfo=UTC)),
        make_conversation("c", started_at=datetime(2024, 6, 5, 14, 0, tzinfo=UTC)),
    ]


class TestCalculateStatistics:
    def test_empty(self):
        assert calculate_statistics([]) == AnalyticsStatistics()

    def test_totals_and_averages(self, make_conversation):
        stats = calculate_statistics(corpus(make_conversation))
        assert stats.total_conversations == 3
        assert stats.total_messages == 4
        assert stats.total_words == 9
        assert stats.average_messages_per_conversation == 4 / 3
        assert stats.average_words_per_message == 9 / 4
        assert stats.user_tokens == stats.assistant_tokens == 0

    def test_rankings(self, make_conversation):
        stats = calculate_statistics(corpus(make_conversation))
        assert stats.top_projects == (ProjectCount("shop", 2), ProjectCount("blog", 1))
        assert stats.most_active_hour == (9, 2)
        # three days with one conversation each; the first seen wins
        assert stats.most_active_day == (date(2024, 6, 3), 1)
        assert stats.date_range == (
            datetime(2024, 6, 3, 9, 30, tzinfo=UTC),
            datetime(2024, 6, 5, 14, 0, tzinfo=UTC),
        )

    def test_hours_follow_timezone(self, make_conversation):
        stats = calculate_statistics([make_conversation()], ZoneInfo("Asia/Tokyo"))
        assert stats.most_active_hour == (18, 1)

    def test_token_counts_when_requested(self, make_conversation):
        stats = calculate_statistics(corpus(make_conversation), with_tokens=True)
        assert stats.user_tokens > 0
        assert stats.assistant_tokens > 0


def test_count_tokens_empty():
    assert count_tokens("") == 0

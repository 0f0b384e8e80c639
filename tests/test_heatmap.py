"""Tests for the daily heatmap, streaks and heatmap statistics."""

from datetime import date, datetime, timezone

import pytest

from talk_analyzer.heatmap import activity_level, generate_heatmap

END = date(2024, 6, 10)


def on_days(make_conversation, *days):
    return [
        make_conversation(f"s{i}", started_at=datetime(2024, 6, day, 14, 0, tzinfo=timezone.utc))
        for i, day in enumerate(days)
    ]


@pytest.mark.parametrize(
    ("count", "max_count", "level"),
    [(0, 5, 0), (5, 5, 4), (3, 4, 3), (2, 4, 2), (1, 4, 1)],
)
def test_activity_level(count, max_count, level):
    assert activity_level(count, max_count) == level


class TestGrid:
    def test_one_cell_per_day(self, make_conversation):
        heatmap = generate_heatmap(on_days(make_conversation, 9), END, days=7)
        assert len(heatmap.cells) == 7
        assert heatmap.start_date == date(2024, 6, 4)
        assert heatmap.cells[-1].date == END
        assert heatmap.cells[-1].day_of_week == 1

    def test_days_outside_the_window_are_ignored(self, make_conversation):
        heatmap = generate_heatmap(on_days(make_conversation, 1, 9), END, days=7)
        assert heatmap.stats.total_conversations == 1

    def test_empty(self):
        heatmap = generate_heatmap([], END, days=30)
        assert all(c.level == 0 for c in heatmap.cells)
        assert heatmap.streak.longest_streak == 0
        assert heatmap.stats.active_days == 0
        assert heatmap.stats.most_productive_day_of_week == 1


class TestStreaks:
    def test_active_streak_reaches_today(self, make_conversation):
        streak = generate_heatmap(on_days(make_conversation, 8, 9, 10), END, days=30).streak
        assert streak.current_streak == 3
        assert streak.is_active
        assert streak.current_streak_start == date(2024, 6, 8)

    def test_streak_ending_yesterday_still_counts(self, make_conversation):
        streak = generate_heatmap(on_days(make_conversation, 7, 8, 9), END, days=30).streak
        assert streak.current_streak == 3
        assert not streak.is_active

    def test_old_streak_is_only_longest(self, make_conversation):
        streak = generate_heatmap(on_days(make_conversation, 1, 2, 5), END, days=30).streak
        assert streak.current_streak == 0
        assert streak.current_streak_start is None
        assert streak.longest_streak == 2
        assert (streak.longest_streak_start, streak.longest_streak_end) == (date(2024, 6, 1), date(2024, 6, 2))


class TestStats:
    def test_ties_go_to_the_earliest(self, make_conversation):
        # Monday the 3rd and Wednesday the 5th both have two conversations
        heatmap = generate_heatmap(on_days(make_conversation, 3, 3, 5, 5), END, days=30)
        stats = heatmap.stats
        assert stats.max_day_count == 2
        assert stats.max_day_date == date(2024, 6, 3)
        assert stats.most_productive_day_of_week == 1
        assert stats.active_days == 2
        assert stats.avg_per_active_day == 2.0

    def test_levels_scale_to_busiest_day(self, make_conversation):
        heatmap = generate_heatmap(on_days(make_conversation, 3, 3, 3, 3, 5), END, days=30)
        levels = {c.date: c.level for c in heatmap.cells if c.count}
        assert levels == {date(2024, 6, 3): 4, date(2024, 6, 5): 1}

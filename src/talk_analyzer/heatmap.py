"""Daily conversation heatmap with streaks."""

from collections.abc import Sequence
from datetime import date, timedelta, tzinfo

from .hourly import as_aware
from .models import Conversation, HeatmapCell, HeatmapData, HeatmapStats, StreakInfo

DEFAULT_DAYS = 365


def activity_level(count: int, max_count: int) -> int:
    """0 for no activity, otherwise 1-4 by quartile of the busiest day."""
    if count == 0:
        return 0
    ratio = count / max(max_count, 1)
    if ratio > 0.75:
        return 4
    if ratio > 0.5:
        return 3
    if ratio > 0.25:
        return 2
    return 1


def daily_counts(
    conversations: Sequence[Conversation], start: date, end: date, tz: tzinfo | None = None
) -> dict[date, int]:
    """Conversations per day of last activity, inside ``[start, end]``."""
    counts: dict[date, int] = {}
    for conversation in conversations:
        moment = as_aware(conversation.ended_at)
        day = (moment.astimezone(tz) if tz else moment).date()
        if start <= day <= end:
            counts[day] = counts.get(day, 0) + 1
    return counts


def find_streaks(cells: Sequence[HeatmapCell]) -> list[tuple[date, date, int]]:
    """Runs of consecutive active days as (start, end, length)."""
    streaks = []
    run_start = None
    length = 0
    for index, cell in enumerate(cells):
        if cell.count > 0:
            if run_start is None:
                run_start = cell.date
            length += 1
            continue
        if run_start is not None:
            streaks.append((run_start, cells[index - 1].date, length))
            run_start, length = None, 0
    if run_start is not None:
        streaks.append((run_start, cells[-1].date, length))
    return streaks


def calculate_streaks(cells: Sequence[HeatmapCell], end: date) -> StreakInfo:
    streaks = find_streaks(cells)
    if not streaks:
        return StreakInfo()

    longest = streaks[0]
    for streak in streaks[1:]:
        if streak[2] > longest[2]:
            longest = streak

    # The current streak must reach today or yesterday
    last_start, last_end, last_length = streaks[-1]
    if last_end in (end, end - timedelta(days=1)):
        return StreakInfo(
            current_streak=last_length,
            longest_streak=longest[2],
            current_streak_start=last_start,
            current_streak_end=last_end,
            longest_streak_start=longest[0],
            longest_streak_end=longest[1],
            is_active=last_end == end,
        )
    return StreakInfo(
        longest_streak=longest[2],
        longest_streak_start=longest[0],
        longest_streak_end=longest[1],
    )


def calculate_stats(cells: Sequence[HeatmapCell]) -> HeatmapStats:
    active = [c for c in cells if c.count > 0]
    total = sum(c.count for c in cells)
    if not active:
        return HeatmapStats()

    busiest = active[0]
    for cell in active[1:]:
        if cell.count > busiest.count:
            busiest = cell

    by_weekday = {day: 0 for day in range(1, 8)}
    for cell in active:
        by_weekday[cell.day_of_week] += cell.count
    best_weekday = max(by_weekday, key=lambda day: (by_weekday[day], -day))

    return HeatmapStats(
        active_days=len(active),
        max_day_count=busiest.count,
        max_day_date=busiest.date,
        avg_per_active_day=total / len(active),
        most_productive_day_of_week=best_weekday,
        total_conversations=total,
    )


def generate_heatmap(
    conversations: Sequence[Conversation],
    end_date: date,
    days: int = DEFAULT_DAYS,
    tz: tzinfo | None = None,
) -> HeatmapData:
    """One cell per day for the ``days`` days ending at ``end_date``."""
    start = end_date - timedelta(days=days - 1)
    counts = daily_counts(conversations, start, end_date, tz)
    max_count = max(counts.values(), default=1)

    cells = []
    current = start
    while current <= end_date:
        count = counts.get(current, 0)
        iso = current.isocalendar()
        cells.append(
            HeatmapCell(
                date=current,
                count=count,
                level=activity_level(count, max_count),
                day_of_week=iso[2],
                week_number=iso[1],
            )
        )
        current += timedelta(days=1)

    return HeatmapData(
        cells=tuple(cells),
        streak=calculate_streaks(cells, end_date),
        stats=calculate_stats(cells),
        start_date=start,
        end_date=end_date,
    )

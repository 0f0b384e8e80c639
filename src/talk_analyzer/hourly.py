"""Hour-of-day and day-of-week activity profile.

Events come from two places: one per conversation (its start time) and one
per line of ``history.jsonl`` in the configured directory.
"""

import json
from collections import Counter
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone, tzinfo
from pathlib import Path
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

import numpy as np

from .config import HourlyActivityConfig
from .logging_config import get_logger
from .models import (
    ActivityRecommendation,
    Conversation,
    DominantDay,
    FocusWindow,
    HourlyActivityEvent,
    HourlyActivitySummary,
    HourlyBucket,
)

logger = get_logger(__name__)

HISTORY_FILE = "history.jsonl"
DEFAULT_EVENT_LABEL = "Claude activity"
WEEKDAY_LABELS = ("Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun")
MAX_SAMPLES = 8
MAX_RECOMMENDATIONS = 4


def as_aware(moment: datetime) -> datetime:
    """Treat naive datetimes as UTC."""
    if moment.tzinfo is None:
        return moment.replace(tzinfo=timezone.utc)
    return moment


def resolve_timezone(name: str | None) -> tuple[tzinfo, str]:
    """The zone to bucket in and its display name; system local time by default."""
    if name:
        try:
            return ZoneInfo(name), name
        except (ZoneInfoNotFoundError, ValueError):
            logger.warning("Unknown timezone %r, falling back to local time", name)
    local = datetime.now().astimezone().tzinfo
    return local, datetime.now(local).tzname() or "Local Time"


def format_hour(hour: int) -> str:
    suffix = "AM" if hour < 12 else "PM"
    return f"{hour % 12 or 12} {suffix}"


def parse_history_line(line: str) -> HourlyActivityEvent | None:
    """One history.jsonl line as an event, or None when it is unusable."""
    line = line.strip()
    if not line:
        return None
    try:
        data = json.loads(line)
    except json.JSONDecodeError:
        return None
    if not isinstance(data, dict):
        return None

    raw = data.get("timestamp", data.get("ts"))
    if raw is None or isinstance(raw, bool):
        return None
    try:
        millis = float(raw)
        timestamp = datetime.fromtimestamp(millis / 1000, tz=timezone.utc)
    except (TypeError, ValueError, OverflowError, OSError):
        return None

    display = data.get("display")
    label = display.split("\n", 1)[0].strip() if isinstance(display, str) else ""
    project = data.get("project")
    return HourlyActivityEvent(
        timestamp=timestamp,
        source="history",
        label=label or DEFAULT_EVENT_LABEL,
        project=project if isinstance(project, str) else None,
    )


def load_history_events(config: HourlyActivityConfig, now: datetime | None = None) -> list[HourlyActivityEvent]:
    """Read history.jsonl within the lookback window, oldest first.

    Malformed lines are skipped. When more than ``max_history_records``
    remain, only the most recent are kept.
    """
    if config.history_dir is None:
        return []
    path = Path(config.history_dir) / HISTORY_FILE
    if not path.is_file():
        logger.debug("No history file at %s", path)
        return []

    now = as_aware(now or datetime.now(timezone.utc))
    cutoff = now - timedelta(days=config.lookback_days)
    events = []
    skipped = 0
    try:
        with path.open(encoding="utf-8", errors="replace") as f:
            for line in f:
                event = parse_history_line(line)
                if event is None:
                    if line.strip():
                        skipped += 1
                    continue
                if event.timestamp >= cutoff:
                    events.append(event)
    except OSError as e:
        logger.warning("Failed to read %s: %s", path, e)
        return []

    if skipped:
        logger.debug("Skipped %d malformed lines in %s", skipped, path)

    events.sort(key=lambda e: e.timestamp)
    limit = config.max_history_records
    if limit is not None and len(events) > limit:
        events = events[len(events) - max(limit, 0) :]
    return events


def conversation_events(conversations: Sequence[Conversation]) -> list[HourlyActivityEvent]:
    return [
        HourlyActivityEvent(
            timestamp=as_aware(c.started_at),
            source="conversation",
            label=f"Conversation: {c.project_name}",
            project=c.project_name,
        )
        for c in conversations
    ]


def focus_window(counts: Sequence[int], total: int) -> FocusWindow | None:
    """Longest run of hours at or above the hourly average, wrapping midnight.

    Ties go to the earliest start hour. ``end_hour`` is exclusive.
    """
    if total <= 0:
        return None
    average = total / 24
    above = [count >= average for count in counts]

    if all(above):
        best_start, best_span = 0, 24
    else:
        best_start, best_span = 0, 0
        for start in range(24):
            if not above[start] or above[(start - 1) % 24]:
                continue
            span = 0
            while above[(start + span) % 24]:
                span += 1
            if span > best_span:
                best_start, best_span = start, span

    end = (best_start + best_span) % 24
    window_counts = [counts[(best_start + i) % 24] for i in range(best_span)]
    return FocusWindow(
        start_hour=best_start,
        end_hour=end,
        span_hours=best_span,
        average_count=sum(window_counts) / best_span,
        label=f"{format_hour(best_start)} - {format_hour(end)}",
    )


@dataclass(frozen=True)
class RhythmContext:
    """What the recommendation rules look at."""

    night_share: float
    early_share: float
    weekend_share: float
    peak_hour: HourlyBucket
    focus_window: FocusWindow | None
    dominant_day: DominantDay | None


Rule = tuple[Callable[[RhythmContext], bool], Callable[[RhythmContext], ActivityRecommendation]]

RECOMMENDATION_RULES: tuple[Rule, ...] = (
    (
        lambda ctx: ctx.focus_window is not None,
        lambda ctx: ActivityRecommendation(
            title="Protect your prime window",
            description=f"Your {ctx.focus_window.label} block captures the densest activity. "
            "Guard it for deep work.",
            tone="positive",
            icon="🎯",
        ),
    ),
    (
        lambda ctx: ctx.night_share > 0.35,
        lambda ctx: ActivityRecommendation(
            title="Night-owl surge",
            description="Over a third of your activity happens between 10 PM and 6 AM. "
            "Consider moving collaborative work into daylight hours.",
            tone="caution",
            icon="🌙",
        ),
    ),
    (
        lambda ctx: ctx.night_share <= 0.35 and ctx.early_share > 0.25,
        lambda ctx: ActivityRecommendation(
            title="Sunrise builder",
            description="You log meaningful sessions before 9 AM. "
            "Keep making key decisions early while it is quiet.",
            tone="positive",
            icon="🌅",
        ),
    ),
    (
        lambda ctx: ctx.weekend_share > 0.2,
        lambda ctx: ActivityRecommendation(
            title="Weekend warrior",
            description="Weekends carry a big share of your sessions. Make sure you still get real time off.",
            tone="caution",
            icon="📆",
        ),
    ),
    (
        lambda ctx: ctx.dominant_day is not None,
        lambda ctx: ActivityRecommendation(
            title="Broadcast timing",
            description=f"Your busiest stretch lands on {ctx.dominant_day.label} around "
            f"{ctx.peak_hour.label}. Schedule launches and reviews there.",
            tone="neutral",
            icon="📣",
        ),
    ),
)

MAINTAIN_RHYTHM = ActivityRecommendation(
    title="Maintain rhythm",
    description="Activity is evenly spread. Keep logging sessions to surface sharper patterns.",
    tone="neutral",
    icon="⚙️",
)


def build_recommendations(ctx: RhythmContext) -> tuple[ActivityRecommendation, ...]:
    recommendations = [build(ctx) for applies, build in RECOMMENDATION_RULES if applies(ctx)]
    if len(recommendations) < 3:
        recommendations.append(MAINTAIN_RHYTHM)
    return tuple(recommendations[:MAX_RECOMMENDATIONS])


def build_summary(events: Sequence[HourlyActivityEvent], tz: tzinfo, tz_label: str) -> HourlyActivitySummary:
    """Aggregate a non-empty event stream."""
    matrix = np.zeros((7, 24), dtype=np.int64)
    for event in events:
        local = event.timestamp.astimezone(tz)
        matrix[local.weekday(), local.hour] += 1

    total = len(events)
    hour_counts = [int(c) for c in matrix.sum(axis=0)]
    day_totals = matrix.sum(axis=1)
    buckets = tuple(HourlyBucket(hour=h, count=hour_counts[h], label=format_hour(h)) for h in range(24))

    # argmax/argmin return the first index on ties
    peak = buckets[int(np.argmax(hour_counts))]
    quiet = buckets[int(np.argmin(hour_counts))]
    dominant = None
    if day_totals.max() > 0:
        day_index = int(np.argmax(day_totals))
        dominant = DominantDay(day_index=day_index, label=WEEKDAY_LABELS[day_index], count=int(day_totals[day_index]))

    night_share = (sum(hour_counts[22:]) + sum(hour_counts[:6])) / total
    early_share = sum(hour_counts[5:9]) / total
    weekend_share = int(matrix[5:].sum()) / total
    window = focus_window(hour_counts, total)

    recommendations = build_recommendations(
        RhythmContext(
            night_share=night_share,
            early_share=early_share,
            weekend_share=weekend_share,
            peak_hour=peak,
            focus_window=window,
            dominant_day=dominant,
        )
    )
    samples = tuple(sorted(events, key=lambda e: e.timestamp, reverse=True)[:MAX_SAMPLES])
    sources = Counter(e.source for e in events)
    day_text = f"{dominant.label}s" if dominant else "weekdays"

    return HourlyActivitySummary(
        timezone=tz_label,
        total_events=total,
        buckets=buckets,
        weekday_matrix=tuple(tuple(int(c) for c in row) for row in matrix),
        peak_hour=peak,
        quiet_hour=quiet,
        focus_window=window,
        night_share=night_share,
        early_share=early_share,
        weekend_share=weekend_share,
        dominant_day=dominant,
        recommendations=recommendations,
        samples=samples,
        source_breakdown=dict(sorted(sources.items())),
        trend_statement=f"Peak energy hits around {peak.label} on {day_text}.",
    )


def analyze_hourly_activity(
    conversations: Sequence[Conversation] | None,
    config: HourlyActivityConfig | None = None,
    now: datetime | None = None,
) -> HourlyActivitySummary | None:
    """Profile conversation starts plus history events.

    Returns None when there is no activity at all.
    """
    config = config or HourlyActivityConfig()
    events = conversation_events(conversations or ())
    events.extend(load_history_events(config, now))
    if not events:
        return None

    events.sort(key=lambda e: e.timestamp)
    tz, tz_label = resolve_timezone(config.timezone)
    logger.debug("Bucketing %d activity events in %s", len(events), tz_label)
    return build_summary(events, tz, tz_label)

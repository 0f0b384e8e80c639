"""Achievement badges earned by a corpus."""

from collections.abc import Callable, Sequence
from dataclasses import replace

from .models import Achievement, AchievementSummary, Conversation, HeatmapData
from .report import AnalyticsReport

Metric = Callable[[Sequence[Conversation], AnalyticsReport, HeatmapData], int]

# Upper bound on clusters counted as distinct technologies
TECH_LOOKUP = 100


def conversation_count(conversations, report, heatmap) -> int:
    return len(conversations)


def technology_count(conversations, report, heatmap) -> int:
    return len(report.tech_stack_clusters.largest(TECH_LOOKUP))


def longest_conversation(conversations, report, heatmap) -> int:
    return max((c.message_count for c in conversations), default=0)


# Each badge unlocks once its metric reaches the target
ACHIEVEMENT_CATALOG: tuple[tuple[Achievement, int, Metric], ...] = (
    (
        Achievement(
            id="century_club",
            name="Century Club",
            icon="🏆",
            description="Reached 100 conversations with Claude",
            criteria="Have 100+ conversations",
            rarity="legendary",
            category="activity",
        ),
        100,
        conversation_count,
    ),
    (
        Achievement(
            id="week_warrior",
            name="Week Warrior",
            icon="🔥",
            description="Maintained a 7-day conversation streak",
            criteria="Talk to Claude for 7 consecutive days",
            rarity="epic",
            category="consistency",
        ),
        7,
        lambda convs, report, heat: heat.streak.current_streak,
    ),
    (
        Achievement(
            id="full_stack",
            name="Full-Stack Explorer",
            icon="🌟",
            description="Explored 10+ different technologies",
            criteria="Discuss 10+ different tech stacks",
            rarity="rare",
            category="exploration",
        ),
        10,
        technology_count,
    ),
    (
        Achievement(
            id="knowledge_seeker",
            name="Knowledge Seeker",
            icon="📚",
            description="Had 50+ learning conversations",
            criteria="Reach 50 conversations",
            rarity="rare",
            category="activity",
        ),
        50,
        conversation_count,
    ),
    (
        Achievement(
            id="chatty",
            name="Deep Diver",
            icon="💬",
            description="Had a conversation with 50+ messages",
            criteria="Single conversation with 50+ messages",
            rarity="rare",
            category="activity",
        ),
        50,
        longest_conversation,
    ),
    (
        Achievement(
            id="marathon",
            name="Marathon Runner",
            icon="🏃",
            description="Achieved a 14-day conversation streak",
            criteria="Maintain 14-day streak",
            rarity="legendary",
            category="consistency",
        ),
        14,
        lambda convs, report, heat: heat.streak.longest_streak,
    ),
    (
        Achievement(
            id="tech_enthusiast",
            name="Tech Enthusiast",
            icon="💻",
            description="Explored 5+ different technologies",
            criteria="Discuss 5+ tech stacks",
            rarity="common",
            category="exploration",
        ),
        5,
        technology_count,
    ),
    (
        Achievement(
            id="consistent",
            name="Consistent Learner",
            icon="📅",
            description="Active on 30+ different days",
            criteria="Be active on 30+ days",
            rarity="rare",
            category="consistency",
        ),
        30,
        lambda convs, report, heat: heat.stats.active_days,
    ),
    (
        Achievement(
            id="first_steps",
            name="First Steps",
            icon="👣",
            description="Started your journey with Claude",
            criteria="Have your first conversation",
            rarity="common",
            category="activity",
        ),
        1,
        conversation_count,
    ),
    (
        Achievement(
            id="productive_day",
            name="Productive Day",
            icon="⚡",
            description="Had 5+ conversations in a single day",
            criteria="5+ conversations in one day",
            rarity="common",
            category="activity",
        ),
        5,
        lambda convs, report, heat: heat.stats.max_day_count,
    ),
)

RARITY_COLORS = {
    "common": "#10b981",
    "rare": "#3b82f6",
    "epic": "#a855f7",
    "legendary": "#f59e0b",
}

CATEGORY_ICONS = {
    "activity": "📊",
    "consistency": "🎯",
    "exploration": "🧭",
    "mastery": "🎓",
    "social": "👥",
}


def format_progress(progress: float) -> str:
    return f"{round(progress * 100)}%"


def achievement_catalog() -> tuple[Achievement, ...]:
    return tuple(achievement for achievement, _, _ in ACHIEVEMENT_CATALOG)


def check_achievements(
    conversations: Sequence[Conversation],
    report: AnalyticsReport,
    heatmap: HeatmapData,
) -> AchievementSummary:
    """Every badge in catalog order, scored against one report.

    Unlocked badges are stamped with the report's ``generated_at`` so the
    same input always yields the same summary.
    """
    results = []
    for achievement, target, metric in ACHIEVEMENT_CATALOG:
        value = metric(conversations, report, heatmap)
        unlocked = value >= target
        results.append(
            replace(
                achievement,
                unlocked=unlocked,
                progress=min(value / target, 1.0),
                unlocked_at=report.generated_at if unlocked else None,
            )
        )
    return AchievementSummary(tuple(results))

"""Developer persona classification."""

from collections.abc import Callable
from dataclasses import dataclass, replace

from .models import ClusterCollection, DeveloperPersona, HeatmapData, HourlyActivitySummary


@dataclass(frozen=True)
class ActivityPattern:
    """When the developer works. Weekday is ISO (1=Mon, 7=Sun)."""

    peak_hour: int
    peak_day_of_week: int
    weekend_ratio: float
    night_percentage: float
    early_percentage: float


@dataclass(frozen=True)
class LearningPattern:
    """How widely and deeply the developer explores technologies."""

    breadth: int
    depth: float
    consistency: float
    exploration_rate: float


DEFAULT_PEAK_HOUR = 14
CONSISTENCY_DAYS = 90


def activity_pattern(hourly: HourlyActivitySummary | None, heatmap: HeatmapData) -> ActivityPattern:
    if hourly is None:
        return ActivityPattern(
            peak_hour=DEFAULT_PEAK_HOUR,
            peak_day_of_week=heatmap.stats.most_productive_day_of_week,
            weekend_ratio=0.0,
            night_percentage=0.0,
            early_percentage=0.0,
        )
    if hourly.dominant_day is not None:
        peak_day = hourly.dominant_day.day_index + 1
    else:
        peak_day = heatmap.stats.most_productive_day_of_week
    return ActivityPattern(
        peak_hour=hourly.peak_hour.hour,
        peak_day_of_week=peak_day,
        weekend_ratio=hourly.weekend_share,
        night_percentage=hourly.night_share,
        early_percentage=hourly.early_share,
    )


def learning_pattern(conversation_count: int, tech_clusters: ClusterCollection, heatmap: HeatmapData) -> LearningPattern:
    breadth = len(tech_clusters.clusters)
    return LearningPattern(
        breadth=breadth,
        depth=conversation_count / (breadth or 1),
        consistency=min(heatmap.stats.active_days / CONSISTENCY_DAYS, 1.0),
        exploration_rate=breadth / conversation_count if conversation_count else 0.0,
    )


def _bonus(condition: bool, points: float) -> float:
    return points if condition else 0.0


Scorer = Callable[[ActivityPattern, LearningPattern, HeatmapData], float]

# Order matters: the first persona with the top score wins
PERSONA_CATALOG: tuple[tuple[DeveloperPersona, Scorer], ...] = (
    (
        DeveloperPersona(
            id="night_owl_full_stack",
            name="Night Owl Full-Stack",
            emoji="🦉",
            description="You code when the world sleeps, exploring everything from frontend to backend",
            traits=("Most active after 10 PM", "Explores multiple technologies", "Weekend coding sessions", "Full-stack curiosity"),
            mbti="ENTP",
            mbti_description="The Innovator - You thrive on exploring new possibilities and debating technical approaches",
        ),
        lambda act, learn, heat: act.night_percentage * 3 + _bonus(learn.breadth > 8, 2) + _bonus(act.weekend_ratio > 0.3, 1),
    ),
    (
        DeveloperPersona(
            id="early_bird_architect",
            name="Early Bird Architect",
            emoji="🌅",
            description="You start early, plan carefully, and build with intention",
            traits=("Peak productivity before noon", "Deep focus on architecture", "Weekday routine", "Quality over quantity"),
            mbti="INTJ",
            mbti_description="The Architect - You excel at strategic planning and building robust systems",
        ),
        lambda act, learn, heat: act.early_percentage * 3 + _bonus(learn.depth > 3, 2) + _bonus(act.peak_day_of_week <= 5, 1),
    ),
    (
        DeveloperPersona(
            id="weekend_warrior",
            name="Weekend Warrior",
            emoji="⚔️",
            description="You save your coding adventures for the weekend",
            traits=("Saturday/Sunday focus", "Long coding sessions", "Side project enthusiast", "Work-life balance champion"),
            mbti="ENFP",
            mbti_description="The Champion - You pursue passion projects with infectious enthusiasm",
        ),
        lambda act, learn, heat: act.weekend_ratio * 5 + _bonus(heat.streak.longest_streak > 7, 1),
    ),
    (
        DeveloperPersona(
            id="consistent_learner",
            name="Consistent Learner",
            emoji="📚",
            description="Every day is a learning day - your consistency is impressive",
            traits=("Daily conversation habit", "Long streaks", "Steady progress", "Learning mindset"),
            mbti="ISFJ",
            mbti_description="The Defender - You learn methodically and build knowledge brick by brick",
        ),
        lambda act, learn, heat: learn.consistency * 4 + _bonus(heat.streak.current_streak > 5, 2),
    ),
    (
        DeveloperPersona(
            id="tech_explorer",
            name="Tech Explorer",
            emoji="🧭",
            description="You love discovering new technologies and frameworks",
            traits=("High technology variety", "Frequent tech switching", "Curiosity-driven", "Broad knowledge base"),
            mbti="ENTP",
            mbti_description="The Visionary - You see connections across technologies and love the new",
        ),
        lambda act, learn, heat: learn.exploration_rate * 5 + _bonus(learn.breadth > 10, 2),
    ),
    (
        DeveloperPersona(
            id="deep_specialist",
            name="Deep Specialist",
            emoji="🎯",
            description="You dive deep into specific technologies, mastering them thoroughly",
            traits=("Focused technology stack", "Many conversations per tech", "Expert-level depth", "Specialized knowledge"),
            mbti="ISTJ",
            mbti_description="The Logistician - You master details and build deep expertise through focus",
        ),
        lambda act, learn, heat: _bonus(learn.depth > 5, 4) + _bonus(learn.breadth < 5, 2),
    ),
    (
        DeveloperPersona(
            id="sprint_coder",
            name="Sprint Coder",
            emoji="⚡",
            description="You work in intense bursts, crushing multiple conversations in a day",
            traits=("High-intensity days", "Burst productivity", "Fast iteration", "Sprint mentality"),
            mbti="ESTP",
            mbti_description="The Entrepreneur - You take action fast and ship quickly",
        ),
        lambda act, learn, heat: _bonus(heat.stats.max_day_count >= 5, 3) + _bonus(heat.stats.active_days < 30, 2),
    ),
    (
        DeveloperPersona(
            id="steady_builder",
            name="Steady Builder",
            emoji="🏗️",
            description="You build consistently, making steady progress day by day",
            traits=("Regular cadence", "Moderate daily volume", "Sustainable pace", "Long-term mindset"),
            mbti="ISFJ",
            mbti_description="The Protector - You build sustainable systems through reliable, steady effort",
        ),
        lambda act, learn, heat: learn.consistency * 3 + _bonus(2 <= heat.stats.avg_per_active_day <= 4, 2),
    ),
)


def persona_catalog() -> tuple[DeveloperPersona, ...]:
    return tuple(persona for persona, _ in PERSONA_CATALOG)


def persona_by_id(persona_id: str) -> DeveloperPersona | None:
    for persona, _ in PERSONA_CATALOG:
        if persona.id == persona_id:
            return persona
    return None


def score_personas(
    activity: ActivityPattern, learning: LearningPattern, heatmap: HeatmapData
) -> tuple[DeveloperPersona, ...]:
    """Every persona with its score attached, in catalog order."""
    return tuple(replace(persona, score=float(score(activity, learning, heatmap))) for persona, score in PERSONA_CATALOG)


def classify_persona(
    conversation_count: int,
    tech_clusters: ClusterCollection,
    hourly: HourlyActivitySummary | None,
    heatmap: HeatmapData,
) -> DeveloperPersona:
    """Best-scoring persona; ties go to the one listed first."""
    scored = score_personas(
        activity_pattern(hourly, heatmap),
        learning_pattern(conversation_count, tech_clusters, heatmap),
        heatmap,
    )
    best = scored[0]
    for persona in scored[1:]:
        if persona.score > best.score:
            best = persona
    return best

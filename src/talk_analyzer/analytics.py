"""Run every analysis stage over a corpus and assemble the report."""

from collections.abc import Sequence
from dataclasses import replace
from datetime import date, datetime, timezone, tzinfo

from .achievements import check_achievements
from .clustering import cluster_by_task_type, cluster_by_tech_stack, cluster_by_topic, detect_technologies
from .concepts import extract_concepts
from .config import AnalysisConfig
from .exceptions import InvalidCorpusError
from .frequency import analyze_frequencies
from .heatmap import generate_heatmap
from .hourly import analyze_hourly_activity, as_aware, resolve_timezone
from .llm_insights import LlmSentenceInsightService
from .logging_config import get_logger
from .models import (
    AnalyticsInsight,
    ClusterCollection,
    Conversation,
    HourlyActivitySummary,
    TimelineDataPoint,
    WordCloudData,
)
from .persona import classify_persona
from .privacy import PrivacyLevel, PrivacySettings, apply_content_selection
from .report import VERSION, AnalyticsReport
from .sentences import analyze_sentences
from .stats import calculate_statistics
from .text import extract_from_conversations, extract_technical_terms

logger = get_logger(__name__)

TIMELINE_KEYWORDS = 10
TIMELINE_TECH = 10


def validate_corpus(conversations) -> None:
    if not isinstance(conversations, list | tuple):
        raise InvalidCorpusError(conversations)
    for item in conversations:
        if not isinstance(item, Conversation):
            raise InvalidCorpusError(item, reason="every item must be a Conversation")


def build_timeline(conversations: Sequence[Conversation], tz: tzinfo | None = None) -> tuple[TimelineDataPoint, ...]:
    """One point per calendar month of conversation start, oldest first."""
    months: dict[date, list[Conversation]] = {}
    for conversation in conversations:
        started = as_aware(conversation.started_at)
        if tz is not None:
            started = started.astimezone(tz)
        months.setdefault(date(started.year, started.month, 1), []).append(conversation)

    timeline = []
    for month in sorted(months):
        members = months[month]
        combined = " ".join(t.content for t in extract_from_conversations(members))
        tech: dict[str, None] = {}
        for conversation in members:
            detection = detect_technologies(conversation.searchable_content)
            for name in detection.languages + detection.frameworks + detection.tools:
                tech.setdefault(name, None)
        timeline.append(
            TimelineDataPoint(
                period=month.strftime("%Y-%m"),
                date=month,
                keywords=tuple(extract_technical_terms(combined)[:TIMELINE_KEYWORDS]),
                tech_stack=tuple(list(tech)[:TIMELINE_TECH]),
                conversation_count=len(members),
                message_count=sum(c.message_count for c in members),
            )
        )
    return tuple(timeline)


def generate_insights(
    conversations: Sequence[Conversation],
    word_cloud: WordCloudData,
    tech_clusters: ClusterCollection,
    timeline: Sequence[TimelineDataPoint],
    hourly: HourlyActivitySummary | None,
) -> tuple[AnalyticsInsight, ...]:
    insights = []

    top = tech_clusters.largest(1)
    if top:
        cluster = top[0]
        insights.append(
            AnalyticsInsight(
                insight_type="observation",
                title="Primary Technology Focus",
                description=f"Your most discussed technology is {cluster.label} with {cluster.size} conversations.",
                importance="high",
                evidence=(cluster.label,),
            )
        )

    if len(timeline) >= 3:
        earliest = set(timeline[0].tech_stack)
        new_tech = tuple(t for t in timeline[-1].tech_stack if t not in earliest)
        if new_tech:
            insights.append(
                AnalyticsInsight(
                    insight_type="trend",
                    title="Technology Evolution",
                    description=f"You've recently started exploring: {', '.join(new_tech[:3])}",
                    importance="medium",
                    evidence=new_tech,
                )
            )

    richness = word_cloud.vocabulary_richness
    if richness > 0.3:
        insights.append(
            AnalyticsInsight(
                insight_type="observation",
                title="Diverse Vocabulary",
                description=f"You use a rich vocabulary with {richness * 100:.1f}% unique words.",
                importance="low",
                evidence=(f"Vocabulary richness: {richness:.3f}",),
            )
        )

    if timeline:
        rate = len(conversations) / len(timeline)
        insights.append(
            AnalyticsInsight(
                insight_type="observation",
                title="Activity Pattern",
                description=f"You average {rate:.1f} conversations per month.",
                importance="low",
                evidence=(f"{len(conversations)} conversations over {len(timeline)} months",),
            )
        )

    if hourly is not None:
        window = f" Your focus window runs {hourly.focus_window.label}." if hourly.focus_window else ""
        insights.append(
            AnalyticsInsight(
                insight_type="recommendation",
                title="Peak Coding Hours",
                description=f"Most of your activity lands around {hourly.peak_hour.label}.{window}",
                importance="medium",
                evidence=(hourly.trend_statement,),
            )
        )

    return tuple(insights)


def analyze(
    conversations: Sequence[Conversation],
    privacy: PrivacySettings | None = None,
    config: AnalysisConfig | None = None,
) -> AnalyticsReport:
    """Build a full analytics report.

    Raises:
        InvalidCorpusError: if ``conversations`` is not a list or tuple of
            Conversation objects. Empty corpora are fine.
    """
    validate_corpus(conversations)
    config = config or AnalysisConfig()
    privacy = privacy or PrivacySettings.for_level(PrivacyLevel.HIGH_PRIVACY)

    selected = apply_content_selection(conversations, privacy)
    now = as_aware(config.now or datetime.now(timezone.utc))
    tz, tz_label = resolve_timezone(config.hourly.timezone)
    logger.info("Analyzing %d of %d conversations (%s)", len(selected), len(conversations), tz_label)

    concepts = extract_concepts(selected)
    word_cloud = replace(analyze_frequencies(selected, config.frequency), concepts=concepts)

    tech_clusters = cluster_by_tech_stack(selected)
    task_clusters = cluster_by_task_type(selected)
    topic_clusters = cluster_by_topic(selected, concepts)

    timeline = build_timeline(selected, tz)
    statistics = calculate_statistics(selected, tz, with_tokens=config.count_tokens)
    hourly = analyze_hourly_activity(selected, config.hourly, now)
    insights = generate_insights(selected, word_cloud, tech_clusters, timeline, hourly)
    heatmap = generate_heatmap(selected, now.astimezone(tz).date(), config.heatmap_days, tz)

    sentence_patterns = analyze_sentences(selected)
    sentence_patterns = LlmSentenceInsightService(config.llm).enhance(selected, sentence_patterns)

    persona = classify_persona(len(selected), tech_clusters, hourly, heatmap)
    logger.debug("Classified persona as %s", persona.id)

    report = AnalyticsReport(
        word_cloud=word_cloud,
        tech_stack_clusters=tech_clusters,
        task_type_clusters=task_clusters,
        topic_clusters=topic_clusters,
        timeline=timeline,
        statistics=statistics,
        insights=insights,
        privacy=privacy,
        generated_at=now,
        version=VERSION,
        heatmap=heatmap,
        persona=persona,
        sentence_patterns=sentence_patterns,
        hourly_activity=hourly,
    )
    achievements = check_achievements(selected, report, heatmap)
    logger.debug("Unlocked %d of %d achievements", achievements.total_unlocked, achievements.total_available)
    return replace(report, achievements=achievements)

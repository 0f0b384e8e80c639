"""The analytics report and its shareable projection."""

import json
import re
from collections.abc import Mapping
from dataclasses import dataclass, field, fields, is_dataclass, replace
from datetime import date, datetime
from enum import Enum

from .models import (
    AchievementSummary,
    AnalyticsInsight,
    AnalyticsStatistics,
    ClusterCollection,
    ConversationReference,
    DeveloperPersona,
    HeatmapData,
    HourlyActivityEvent,
    HourlyActivitySummary,
    Importance,
    ProjectCount,
    SemanticCluster,
    SentenceAnalysisSummary,
    TimelineDataPoint,
    WordCloudData,
    WordEntry,
)
from .privacy import PrivacyLevel, PrivacySettings

VERSION = "1.0.0"
TOP_WORDS = 50
TOP_PHRASES = 20
PATH_LIKE = re.compile(r"(?:~|\.{1,2})?(?:/[\w.@-]+){2,}/?|[A-Za-z]:\\[^\s]+")


def to_jsonable(value):
    """Convert report values into plain JSON types."""
    if is_dataclass(value) and not isinstance(value, type):
        return {f.name: to_jsonable(getattr(value, f.name)) for f in fields(value)}
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, datetime | date):
        return value.isoformat()
    if isinstance(value, Mapping):
        return {str(k): to_jsonable(v) for k, v in value.items()}
    if isinstance(value, frozenset | set):
        return sorted(to_jsonable(v) for v in value)
    if isinstance(value, list | tuple):
        return [to_jsonable(v) for v in value]
    return value


def _cluster_overview(cluster: SemanticCluster) -> dict:
    return {"label": cluster.label, "size": cluster.size, "keywords": list(cluster.keywords[:10])}


def _achievement_overview(summary: AchievementSummary | None) -> dict | None:
    if summary is None:
        return None
    return {
        "achievements": summary.achievements,
        "total_unlocked": summary.total_unlocked,
        "total_available": summary.total_available,
        "completion_percentage": summary.completion_percentage,
    }


@dataclass(frozen=True)
class AnalyticsReport:
    """Everything one ``analyze()`` call produced."""

    word_cloud: WordCloudData
    tech_stack_clusters: ClusterCollection
    task_type_clusters: ClusterCollection
    topic_clusters: ClusterCollection
    timeline: tuple[TimelineDataPoint, ...]
    statistics: AnalyticsStatistics
    insights: tuple[AnalyticsInsight, ...]
    privacy: PrivacySettings
    generated_at: datetime
    version: str = VERSION
    heatmap: HeatmapData | None = None
    persona: DeveloperPersona | None = None
    sentence_patterns: SentenceAnalysisSummary | None = None
    hourly_activity: HourlyActivitySummary | None = None
    achievements: AchievementSummary | None = None

    def summary(self) -> str:
        stats = self.statistics
        lines = [
            f"Analyzed {stats.total_conversations} conversations with "
            f"{stats.total_messages} messages and {stats.total_words} words."
        ]
        if stats.date_range:
            start, end = stats.date_range
            lines.append(f"Date range: {start.date().isoformat()} to {end.date().isoformat()}.")
        topics = ", ".join(c.label for c in self.topic_clusters.largest(3)) or "none"
        tech = ", ".join(c.label for c in self.tech_stack_clusters.largest(3)) or "none"
        lines.append(f"Top Topics: {topics}")
        lines.append(f"Top Technologies: {tech}")
        lines.append(f"{len(self.insights)} insights generated.")
        return "\n".join(lines)

    def insights_by_importance(self, importance: Importance) -> tuple[AnalyticsInsight, ...]:
        return tuple(i for i in self.insights if i.importance == importance)

    def key_insights(self) -> tuple[AnalyticsInsight, ...]:
        return self.insights_by_importance("high")

    def timeline_for_range(self, start: date, end: date) -> tuple[TimelineDataPoint, ...]:
        """Timeline points with ``start <= date <= end``."""
        return tuple(p for p in self.timeline if start <= p.date <= end)

    def tech_evolution(self) -> dict[str, list[int]]:
        """Per-period conversation counts for each technology, aligned to the timeline.

        A period where the technology was not seen contributes 0.
        """
        names: dict[str, None] = {}
        for point in self.timeline:
            for tech in point.tech_stack:
                names.setdefault(tech, None)
        return {
            tech: [p.conversation_count if tech in p.tech_stack else 0 for p in self.timeline]
            for tech in names
        }

    def most_used_technologies(self, limit: int = 10) -> list[tuple[str, int]]:
        """Technologies ranked by the number of periods they appear in."""
        counts: dict[str, int] = {}
        for point in self.timeline:
            for tech in point.tech_stack:
                counts[tech] = counts.get(tech, 0) + 1
        return sorted(counts.items(), key=lambda item: item[1], reverse=True)[:limit]

    def learning_trajectory(self) -> list[tuple[str, tuple[str, ...]]]:
        """(YYYY-MM, up to 10 keywords) per month, oldest first."""
        monthly: dict[str, dict[str, None]] = {}
        for point in self.timeline:
            topics = monthly.setdefault(point.date.strftime("%Y-%m"), {})
            for keyword in point.keywords:
                topics.setdefault(keyword, None)
        return [(period, tuple(list(topics)[:10])) for period, topics in sorted(monthly.items())]

    def to_dict(self) -> dict:
        word_cloud = self.word_cloud
        return to_jsonable(
            {
                "version": self.version,
                "generated_at": self.generated_at,
                "privacy_level": self.privacy.level,
                "summary": self.summary(),
                "statistics": self.statistics,
                "word_cloud": {
                    "top_words": word_cloud.top_words(TOP_WORDS),
                    "phrases": word_cloud.phrases[:TOP_PHRASES],
                    "concepts": word_cloud.concepts,
                    "total_tokens": word_cloud.total_tokens,
                    "unique_tokens": word_cloud.unique_tokens,
                    "vocabulary_richness": word_cloud.vocabulary_richness,
                },
                "clusters": {
                    "tech_stack": {
                        "total": len(self.tech_stack_clusters.clusters),
                        "coverage": self.tech_stack_clusters.coverage,
                        "largest": [_cluster_overview(c) for c in self.tech_stack_clusters.largest(5)],
                    },
                    "task_type": {
                        "total": len(self.task_type_clusters.clusters),
                        "distribution": self.task_type_clusters.distribution(),
                    },
                    "topics": {
                        "total": len(self.topic_clusters.clusters),
                        "largest": [_cluster_overview(c) for c in self.topic_clusters.largest(5)],
                    },
                },
                "timeline": self.timeline,
                "insights": self.insights,
                "learning_trajectory": [
                    {"period": period, "topics": topics} for period, topics in self.learning_trajectory()
                ],
                "top_technologies": [{"tech": t, "count": c} for t, c in self.most_used_technologies(10)],
                "tech_evolution": self.tech_evolution(),
                "heatmap": self.heatmap,
                "persona": self.persona,
                "sentence_patterns": self.sentence_patterns,
                "hourly_activity": self.hourly_activity,
                "achievements": _achievement_overview(self.achievements),
            }
        )

    def to_json(self, indent: int | None = 2) -> str:
        return json.dumps(self.to_dict(), indent=indent, ensure_ascii=False)

    def to_shareable(self) -> "ShareableReport":
        return ShareableReport.from_report(self)


class ProjectRedactor:
    """Applies the privacy settings to project names and free text.

    Aliases are handed out in the order names are first seen, so the same
    report always redacts the same way.
    """

    def __init__(self, settings: PrivacySettings):
        self.settings = settings
        self.aliases: dict[str, str] = {}

    @property
    def drops_projects(self) -> bool:
        return self.settings.level == PrivacyLevel.PRIVATE

    def project(self, name: str | None) -> str | None:
        if name is None or self.drops_projects:
            return None
        if not self.settings.anonymize_project_names:
            return name
        if name not in self.aliases:
            self.aliases[name] = f"project-{len(self.aliases) + 1}"
        return self.aliases[name]

    def text(self, value: str) -> str:
        if self.settings.anonymize_paths:
            value = PATH_LIKE.sub("<path>", value)
        if self.settings.anonymize_project_names:
            for name, alias in self.aliases.items():
                # whole words only: "app" must not rewrite "application"
                value = re.sub(rf"(?<!\w){re.escape(name)}(?!\w)", alias, value)
        return value

    def reference(self, ref: ConversationReference) -> ConversationReference:
        return replace(ref, project_name=self.project(ref.project_name) or "")

    def cluster(self, cluster: SemanticCluster) -> SemanticCluster:
        return replace(cluster, conversations=tuple(self.reference(r) for r in cluster.conversations))

    def event(self, event: HourlyActivityEvent) -> HourlyActivityEvent:
        project = self.project(event.project)
        return replace(event, label=self.text(event.label), project=project)


@dataclass(frozen=True)
class ShareableReport:
    """A report stripped down to what the privacy level allows to be shared."""

    summary: str
    privacy_level: PrivacyLevel
    watermark: str
    statistics: AnalyticsStatistics
    top_words: tuple[WordEntry, ...]
    tech_clusters: tuple[SemanticCluster, ...]
    topic_clusters: tuple[SemanticCluster, ...]
    key_insights: tuple[AnalyticsInsight, ...]
    persona: DeveloperPersona | None = None
    samples: tuple[HourlyActivityEvent, ...] = ()
    project_aliases: dict[str, str] = field(default_factory=dict, repr=False)

    @classmethod
    def from_report(cls, report: AnalyticsReport) -> "ShareableReport":
        redactor = ProjectRedactor(report.privacy)

        if redactor.drops_projects:
            top_projects = ()
        else:
            top_projects = tuple(ProjectCount(redactor.project(p.name), p.count) for p in report.statistics.top_projects)
        tech = tuple(redactor.cluster(c) for c in report.tech_stack_clusters.largest(10))
        topics = tuple(redactor.cluster(c) for c in report.topic_clusters.largest(10))

        samples = ()
        if report.privacy.include_samples and report.hourly_activity is not None:
            samples = tuple(redactor.event(e) for e in report.hourly_activity.samples)

        return cls(
            summary=report.summary(),
            privacy_level=report.privacy.level,
            watermark=report.privacy.watermark,
            statistics=replace(report.statistics, top_projects=top_projects),
            top_words=report.word_cloud.top_words(TOP_WORDS),
            tech_clusters=tech,
            topic_clusters=topics,
            key_insights=report.key_insights(),
            persona=report.persona,
            samples=samples,
            project_aliases=dict(redactor.aliases),
        )

    def to_dict(self) -> dict:
        # The alias table maps real names and must never leave the machine
        data = to_jsonable(self)
        data.pop("project_aliases")
        return data

    def to_json(self, indent: int | None = 2) -> str:
        return json.dumps(self.to_dict(), indent=indent, ensure_ascii=False)

"""Data models for talk analyzer."""

import re
from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import date, datetime
from functools import cached_property
from pathlib import PurePath
from types import MappingProxyType
from typing import Literal

Role = Literal["user", "assistant"]
TextSource = Literal["user", "assistant", "mixed"]
TermCategory = Literal["language", "framework", "tool", "concept"]
ClusterType = Literal["tech_stack", "task_type", "topic"]
Tone = Literal["positive", "neutral", "caution"]
Importance = Literal["low", "medium", "high"]
InsightType = Literal["observation", "recommendation", "trend"]
SentenceIntent = Literal["issue", "question", "request", "learning", "planning", "statement"]
SentenceSentiment = Literal["positive", "neutral", "negative"]

CODE_FENCE = re.compile(r"```[\s\S]*?```")


# Conversation input


@dataclass(frozen=True)
class ToolInvocation:
    """A tool call made by the assistant."""

    name: str
    input: Mapping[str, object] = field(default_factory=dict)

    def __post_init__(self):
        object.__setattr__(self, "input", MappingProxyType(dict(self.input)))


@dataclass(frozen=True)
class UserMessage:
    """A turn typed by the user."""

    content: str
    timestamp: datetime
    role: Literal["user"] = "user"


@dataclass(frozen=True)
class AssistantMessage:
    """A turn produced by the assistant, possibly with tool calls."""

    content: str
    timestamp: datetime
    tool_invocations: tuple[ToolInvocation, ...] = ()
    model: str | None = None
    role: Literal["assistant"] = "assistant"


Message = UserMessage | AssistantMessage


@dataclass(frozen=True)
class Conversation:
    """One recorded session between a user and the assistant."""

    session_id: str
    project_path: str
    started_at: datetime
    messages: tuple[Message, ...] = ()

    def __post_init__(self):
        if not isinstance(self.messages, tuple):
            object.__setattr__(self, "messages", tuple(self.messages))

    @property
    def project_name(self) -> str:
        return PurePath(self.project_path).name or self.project_path or "unknown"

    @property
    def user_messages(self) -> tuple[UserMessage, ...]:
        return tuple(m for m in self.messages if isinstance(m, UserMessage))

    @property
    def assistant_messages(self) -> tuple[AssistantMessage, ...]:
        return tuple(m for m in self.messages if isinstance(m, AssistantMessage))

    @property
    def title(self) -> str:
        for message in self.user_messages:
            line = message.content.strip().split("\n", 1)[0].strip()
            if line:
                return line if len(line) <= 80 else line[:77] + "..."
        return "Untitled conversation"

    @property
    def message_count(self) -> int:
        return len(self.messages)

    @property
    def word_count(self) -> int:
        return sum(len(m.content.split()) for m in self.messages)

    @property
    def has_code_blocks(self) -> bool:
        return any(CODE_FENCE.search(m.content) for m in self.messages)

    @property
    def has_tool_usage(self) -> bool:
        return any(m.tool_invocations for m in self.assistant_messages)

    @property
    def ended_at(self) -> datetime:
        if self.messages:
            return max(m.timestamp for m in self.messages)
        return self.started_at

    @cached_property
    def searchable_content(self) -> str:
        """Lower-cased title, project name and all turn text."""
        parts = [self.title, self.project_name]
        parts.extend(m.content for m in self.messages)
        return " ".join(parts).lower()


# Text and vocabulary


@dataclass(frozen=True)
class ExtractedText:
    """A non-empty turn attributed to its conversation."""

    content: str
    source: TextSource
    conversation_id: str
    timestamp: datetime


@dataclass(frozen=True)
class TextAnalysis:
    """Tokenization result for a single string."""

    text: str
    tokens: tuple[str, ...]
    filtered_tokens: tuple[str, ...]
    language: Literal["en", "zh", "mixed"]

    @property
    def word_count(self) -> int:
        return len(self.tokens)

    @property
    def unique_words(self) -> int:
        return len(set(self.filtered_tokens))


@dataclass(frozen=True)
class TermFrequency:
    """Corpus-wide counters for one term."""

    term: str
    frequency: int
    document_ids: frozenset[str]

    @property
    def document_frequency(self) -> int:
        return len(self.document_ids)


@dataclass(frozen=True)
class WordEntry:
    """A word cloud entry; ``value`` is the raw count, ``weight`` its TF-IDF."""

    text: str
    value: int
    weight: float
    category: TermCategory | None = None


@dataclass(frozen=True)
class PhraseEntry:
    """A recurring n-gram with up to three example contexts."""

    text: str
    frequency: int
    contexts: tuple[str, ...] = ()


@dataclass(frozen=True)
class ConceptEntry:
    """A technical concept seen across conversations."""

    concept: str
    related_terms: tuple[str, ...]
    occurrences: int
    conversation_ids: tuple[str, ...]


@dataclass(frozen=True)
class WordCloudData:
    """Vocabulary statistics for the whole corpus."""

    words: tuple[WordEntry, ...] = ()
    phrases: tuple[PhraseEntry, ...] = ()
    concepts: tuple[ConceptEntry, ...] = ()
    total_tokens: int = 0
    unique_tokens: int = 0

    @property
    def vocabulary_richness(self) -> float:
        if self.total_tokens == 0:
            return 0.0
        return self.unique_tokens / self.total_tokens

    @property
    def is_empty(self) -> bool:
        return not self.words and not self.phrases

    def top_words(self, n: int = 50) -> tuple[WordEntry, ...]:
        return self.words[:n]

    def words_by_category(self, category: TermCategory) -> tuple[WordEntry, ...]:
        return tuple(w for w in self.words if w.category == category)


# Clusters


@dataclass(frozen=True)
class ConversationReference:
    """A conversation's membership in a cluster."""

    session_id: str
    project_name: str
    timestamp: datetime
    relevance: float = 1.0

    @classmethod
    def of(cls, conversation: Conversation, relevance: float = 1.0) -> "ConversationReference":
        return cls(
            session_id=conversation.session_id,
            project_name=conversation.project_name,
            timestamp=conversation.started_at,
            relevance=relevance,
        )


@dataclass(frozen=True)
class TechStackInfo:
    """Technologies detected in one or more conversations, sorted by name."""

    languages: tuple[str, ...] = ()
    frameworks: tuple[str, ...] = ()
    tools: tuple[str, ...] = ()
    platforms: tuple[str, ...] = ()

    @property
    def all_technologies(self) -> tuple[str, ...]:
        return self.languages + self.frameworks + self.tools + self.platforms

    @property
    def is_empty(self) -> bool:
        return not self.all_technologies


@dataclass(frozen=True)
class SemanticCluster:
    """A group of at least two conversations sharing a theme."""

    id: str
    cluster_type: ClusterType
    label: str
    keywords: tuple[str, ...]
    conversations: tuple[ConversationReference, ...]
    tech_stack: TechStackInfo | None = None
    category: str | None = None

    @property
    def size(self) -> int:
        return len(self.conversations)

    @property
    def average_relevance(self) -> float:
        if not self.conversations:
            return 0.0
        return sum(c.relevance for c in self.conversations) / len(self.conversations)

    def date_range(self) -> tuple[datetime, datetime] | None:
        if not self.conversations:
            return None
        stamps = [c.timestamp for c in self.conversations]
        return min(stamps), max(stamps)

    def contains(self, session_id: str) -> bool:
        return any(c.session_id == session_id for c in self.conversations)


@dataclass(frozen=True)
class ClusterCollection:
    """All clusters of one type over a corpus."""

    clusters: tuple[SemanticCluster, ...]
    cluster_type: ClusterType
    total_conversations: int

    @property
    def coverage(self) -> float:
        """Sum of cluster sizes over corpus size; can exceed 1.0."""
        if self.total_conversations == 0:
            return 0.0
        return sum(c.size for c in self.clusters) / self.total_conversations

    def largest(self, n: int = 10) -> tuple[SemanticCluster, ...]:
        return tuple(sorted(self.clusters, key=lambda c: c.size, reverse=True)[:n])

    def distribution(self) -> dict[str, int]:
        return {c.label: c.size for c in self.clusters}

    def by_id(self, cluster_id: str) -> SemanticCluster | None:
        for cluster in self.clusters:
            if cluster.id == cluster_id:
                return cluster
        return None

    def for_conversation(self, session_id: str) -> tuple[SemanticCluster, ...]:
        return tuple(c for c in self.clusters if c.contains(session_id))


# Hourly activity


@dataclass(frozen=True)
class HourlyActivityEvent:
    """A single moment of activity."""

    timestamp: datetime
    source: Literal["history", "conversation"]
    label: str
    project: str | None = None


@dataclass(frozen=True)
class HourlyBucket:
    hour: int
    count: int
    label: str


@dataclass(frozen=True)
class FocusWindow:
    """Contiguous hours at or above the average; ``end_hour`` is exclusive."""

    start_hour: int
    end_hour: int
    span_hours: int
    average_count: float
    label: str


@dataclass(frozen=True)
class DominantDay:
    day_index: int
    label: str
    count: int


@dataclass(frozen=True)
class ActivityRecommendation:
    title: str
    description: str
    tone: Tone
    icon: str = ""


@dataclass(frozen=True)
class HourlyActivitySummary:
    """Hour-of-day and day-of-week profile of all activity."""

    timezone: str
    total_events: int
    buckets: tuple[HourlyBucket, ...]
    weekday_matrix: tuple[tuple[int, ...], ...]
    peak_hour: HourlyBucket
    quiet_hour: HourlyBucket
    focus_window: FocusWindow | None
    night_share: float
    early_share: float
    weekend_share: float
    dominant_day: DominantDay | None
    recommendations: tuple[ActivityRecommendation, ...]
    samples: tuple[HourlyActivityEvent, ...]
    source_breakdown: Mapping[str, int]
    trend_statement: str

    def __post_init__(self):
        object.__setattr__(self, "source_breakdown", MappingProxyType(dict(self.source_breakdown)))


# Daily heatmap


@dataclass(frozen=True)
class HeatmapCell:
    date: date
    count: int
    level: int
    day_of_week: int
    week_number: int


@dataclass(frozen=True)
class StreakInfo:
    current_streak: int = 0
    longest_streak: int = 0
    current_streak_start: date | None = None
    current_streak_end: date | None = None
    longest_streak_start: date | None = None
    longest_streak_end: date | None = None
    is_active: bool = False


@dataclass(frozen=True)
class HeatmapStats:
    active_days: int = 0
    max_day_count: int = 0
    max_day_date: date | None = None
    avg_per_active_day: float = 0.0
    most_productive_day_of_week: int = 1
    total_conversations: int = 0


@dataclass(frozen=True)
class HeatmapData:
    cells: tuple[HeatmapCell, ...]
    streak: StreakInfo
    stats: HeatmapStats
    start_date: date
    end_date: date


# Persona


@dataclass(frozen=True)
class DeveloperPersona:
    """A behavioural archetype, scored against one corpus."""

    id: str
    name: str
    emoji: str
    description: str
    traits: tuple[str, ...]
    mbti: str
    mbti_description: str
    score: float = 0.0


# Achievements

AchievementRarity = Literal["common", "rare", "epic", "legendary"]
AchievementCategory = Literal["activity", "consistency", "exploration", "mastery", "social"]


@dataclass(frozen=True)
class Achievement:
    """A badge, with how close the corpus is to earning it."""

    id: str
    name: str
    icon: str
    description: str
    criteria: str
    rarity: AchievementRarity
    category: AchievementCategory
    unlocked: bool = False
    progress: float = 0.0
    unlocked_at: datetime | None = None


@dataclass(frozen=True)
class AchievementSummary:
    achievements: tuple[Achievement, ...] = ()

    @property
    def total_available(self) -> int:
        return len(self.achievements)

    @property
    def total_unlocked(self) -> int:
        return sum(1 for a in self.achievements if a.unlocked)

    @property
    def completion_percentage(self) -> float:
        if not self.achievements:
            return 0.0
        return self.total_unlocked / self.total_available * 100

    def unlocked(self) -> tuple[Achievement, ...]:
        return tuple(a for a in self.achievements if a.unlocked)


# Sentence patterns


@dataclass(frozen=True)
class SentencePatternStat:
    sentence: str
    normalized: str
    frequency: int
    intent: SentenceIntent
    sentiment: SentenceSentiment
    average_length: float
    tags: tuple[str, ...]
    conversation_count: int
    sample_contexts: tuple[str, ...] = ()


@dataclass(frozen=True)
class SentenceIntentBreakdown:
    intent: SentenceIntent
    count: int
    percentage: float


@dataclass(frozen=True)
class SentenceAnalysisSummary:
    total_sentences: int = 0
    unique_sentences: int = 0
    average_sentence_length: float = 0.0
    average_sentences_per_conversation: float = 0.0
    intent_breakdown: tuple[SentenceIntentBreakdown, ...] = ()
    top_sentences: tuple[SentencePatternStat, ...] = ()
    top_questions: tuple[SentencePatternStat, ...] = ()
    troubleshooting_sentences: tuple[SentencePatternStat, ...] = ()


# Report pieces


@dataclass(frozen=True)
class TimelineDataPoint:
    """Activity for one calendar month."""

    period: str
    date: date
    keywords: tuple[str, ...]
    tech_stack: tuple[str, ...]
    conversation_count: int
    message_count: int


@dataclass(frozen=True)
class ProjectCount:
    name: str
    count: int


@dataclass(frozen=True)
class AnalyticsStatistics:
    total_conversations: int = 0
    total_messages: int = 0
    total_words: int = 0
    average_messages_per_conversation: float = 0.0
    average_words_per_message: float = 0.0
    date_range: tuple[datetime, datetime] | None = None
    top_projects: tuple[ProjectCount, ...] = ()
    most_active_day: tuple[date, int] | None = None
    most_active_hour: tuple[int, int] | None = None
    user_tokens: int = 0
    assistant_tokens: int = 0


@dataclass(frozen=True)
class AnalyticsInsight:
    insight_type: InsightType
    title: str
    description: str
    importance: Importance
    evidence: tuple[str, ...] = ()

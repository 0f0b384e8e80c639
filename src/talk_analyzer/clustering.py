"""Group conversations into technology, task-type and topic clusters."""

from collections.abc import Sequence
from dataclasses import dataclass

from .catalog import CLUSTERED_CATEGORIES, TECH_CATEGORIES, match_names
from .concepts import categorize_concepts, extract_concepts
from .logging_config import get_logger
from .models import (
    ClusterCollection,
    ConceptEntry,
    Conversation,
    ConversationReference,
    SemanticCluster,
    TechStackInfo,
)

logger = get_logger(__name__)

# Smaller groups are treated as one-off noise
MIN_CLUSTER_SIZE = 2


@dataclass(frozen=True)
class TechDetection:
    """Technologies matched in one piece of text."""

    languages: tuple[str, ...] = ()
    frameworks: tuple[str, ...] = ()
    tools: tuple[str, ...] = ()
    platforms: tuple[str, ...] = ()

    def all(self) -> tuple[str, ...]:
        return self.languages + self.frameworks + self.tools + self.platforms


def detect_technologies(text: str) -> TechDetection:
    lowered = text.lower()
    return TechDetection(**{attr: match_names(patterns, lowered) for attr, _, patterns in TECH_CATEGORIES})


def merge_tech_stack(detections: Sequence[TechDetection]) -> TechStackInfo:
    """Union of every category across ``detections``, each sorted."""
    merged = {}
    for attr, _, _ in TECH_CATEGORIES:
        names = {name for detection in detections for name in getattr(detection, attr)}
        merged[attr] = tuple(sorted(names))
    return TechStackInfo(**merged)


def cluster_by_tech_stack(conversations: Sequence[Conversation]) -> ClusterCollection:
    """One cluster per language, framework or tool seen in two or more conversations.

    Membership is not exclusive, and every member has relevance 1.0. The
    cluster's tech stack is the union of everything detected in its members.
    """
    detections = [detect_technologies(c.searchable_content) for c in conversations]
    labels = {attr: prefix for attr, prefix, _ in TECH_CATEGORIES}

    clusters = []
    for attr in CLUSTERED_CATEGORIES:
        groups: dict[str, list[int]] = {}
        for index, detection in enumerate(detections):
            for name in getattr(detection, attr):
                groups.setdefault(name, []).append(index)

        for name, members in groups.items():
            if len(members) < MIN_CLUSTER_SIZE:
                continue
            clusters.append(
                SemanticCluster(
                    id=f"{name}-cluster",
                    cluster_type="tech_stack",
                    label=f"{labels[attr]}: {name}",
                    keywords=(name,),
                    conversations=tuple(ConversationReference.of(conversations[i]) for i in members),
                    tech_stack=merge_tech_stack([detections[i] for i in members]),
                    category=labels[attr],
                )
            )

    logger.debug("Built %d technology clusters from %d conversations", len(clusters), len(conversations))
    return ClusterCollection(clusters=tuple(clusters), cluster_type="tech_stack", total_conversations=len(conversations))


def tech_distribution(conversations: Sequence[Conversation]) -> dict[str, int]:
    """Number of conversations mentioning each technology, platforms included."""
    distribution: dict[str, int] = {}
    for conversation in conversations:
        for name in detect_technologies(conversation.searchable_content).all():
            distribution[name] = distribution.get(name, 0) + 1
    return distribution


def most_used_tech(conversations: Sequence[Conversation], limit: int = 10) -> list[tuple[str, int]]:
    ranked = sorted(tech_distribution(conversations).items(), key=lambda item: item[1], reverse=True)
    return ranked[:limit]


# Task types, checked in order; implementation also needs a code block
TASK_TYPE_RULES = (
    (
        "learning",
        (
            "how to", "what is", "can you explain", "help me understand", "how do i",
            "what does", "why does", "difference between", "best practice", "recommend",
            "should i", "tutorial", "example", "learn", "new to",
        ),
    ),
    (
        "debugging",
        (
            "error", "bug", "issue", "problem", "fix", "broken", "not working", "fails",
            "crash", "exception", "debug", "troubleshoot", "wrong",
        ),
    ),
    (
        "architecture",
        (
            "architecture", "design pattern", "structure", "organize", "module",
            "component", "system design", "scalable", "maintainable",
            "separation of concerns", "dependency injection",
        ),
    ),
    (
        "refactoring",
        (
            "refactor", "improve", "optimize", "clean up", "better way", "rewrite",
            "restructure", "simplify", "performance", "efficient",
        ),
    ),
    (
        "implementation",
        (
            "implement", "create", "build", "add feature", "develop", "code", "function",
            "class", "method", "algorithm",
        ),
    ),
)

TASK_TYPE_LABELS = {
    "debugging": "Debugging & Troubleshooting",
    "architecture": "Architecture & Design",
    "implementation": "Implementation",
    "refactoring": "Code Refactoring",
    "learning": "Learning & Exploration",
    "other": "General Discussion",
}


def categorize_task_type(conversation: Conversation) -> str:
    content = conversation.searchable_content
    for category, keywords in TASK_TYPE_RULES:
        if not any(keyword in content for keyword in keywords):
            continue
        if category == "implementation" and not conversation.has_code_blocks:
            continue
        return category
    return "other"


def cluster_by_task_type(conversations: Sequence[Conversation]) -> ClusterCollection:
    """Every conversation gets exactly one task type; small groups are dropped."""
    groups: dict[str, list[Conversation]] = {category: [] for category in TASK_TYPE_LABELS}
    for conversation in conversations:
        groups[categorize_task_type(conversation)].append(conversation)

    clusters = tuple(
        SemanticCluster(
            id=f"{category}-cluster",
            cluster_type="task_type",
            label=TASK_TYPE_LABELS[category],
            keywords=(category,),
            conversations=tuple(ConversationReference.of(c) for c in members),
            category=category,
        )
        for category, members in groups.items()
        if len(members) >= MIN_CLUSTER_SIZE
    )
    return ClusterCollection(clusters=clusters, cluster_type="task_type", total_conversations=len(conversations))


def cluster_by_topic(
    conversations: Sequence[Conversation], concepts: Sequence[ConceptEntry] | None = None
) -> ClusterCollection:
    """One ``Topic: <category>`` cluster per concept category."""
    if concepts is None:
        concepts = extract_concepts(conversations)

    clusters = []
    for category, entries in categorize_concepts(concepts).items():
        member_ids = {cid for entry in entries for cid in entry.conversation_ids}
        members = [c for c in conversations if c.session_id in member_ids]
        if len(members) < MIN_CLUSTER_SIZE:
            continue
        clusters.append(
            SemanticCluster(
                id=f"{category}-topic-cluster",
                cluster_type="topic",
                label=f"Topic: {category}",
                keywords=tuple(entry.concept for entry in entries[:10]),
                conversations=tuple(ConversationReference.of(c) for c in members),
                category=category,
            )
        )
    return ClusterCollection(clusters=tuple(clusters), cluster_type="topic", total_conversations=len(conversations))

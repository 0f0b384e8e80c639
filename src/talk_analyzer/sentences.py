"""Sentence-level patterns in what the user types."""

import re
from collections import Counter
from collections.abc import Sequence
from dataclasses import dataclass, field

from .models import (
    Conversation,
    SentenceAnalysisSummary,
    SentenceIntent,
    SentenceIntentBreakdown,
    SentencePatternStat,
    SentenceSentiment,
)

INTENT_ORDER: tuple[SentenceIntent, ...] = ("issue", "question", "request", "learning", "planning", "statement")
MIN_SENTENCE_LENGTH = 6
CONTEXT_RADIUS = 80
TOP_N = 5

CODE = re.compile(r"```[\s\S]*?```|`[^`]+`")
SENTENCE_END = re.compile(r"([.!?。！？])\s+")
HAS_LETTER = re.compile(r"[a-zA-Z一-龥]")
NOT_WORD = re.compile(r"[^a-z0-9一-龥\s]")
WHITESPACE = re.compile(r"\s+")

# Checked in order; anything unmatched is a statement
INTENT_RULES: tuple[tuple[SentenceIntent, re.Pattern], ...] = (
    ("issue", re.compile(r"error|exception|bug|crash|fail(ed)?|not working|stack trace|cannot|can't")),
    ("question", re.compile(r"\?|^(how|what|why|can|could|would|is|are|do|does|should|any chance)\b")),
    ("request", re.compile(r"please|could you|can you|help me|show me|walk me|i need you to")),
    ("learning", re.compile(r"learn|explain|understand|difference|concept|meaning")),
    ("planning", re.compile(r"plan|roadmap|strategy|next step|approach|timeline")),
)
INTENT_TAGS = {
    "issue": "troubleshooting",
    "question": "curiosity",
    "request": "actionable",
    "learning": "learning",
    "planning": "planning",
    "statement": "statement",
}
ENGINEERING = re.compile(r"refactor|optimiz(e|ation)|performance")

POSITIVE_WORDS = ("thank", "thanks", "appreciate", "love", "great", "awesome", "nice")
NEGATIVE_WORDS = ("hate", "frustrated", "can't", "cannot", "stuck", "annoyed", "wtf", "bad")


@dataclass(frozen=True)
class SentenceSample:
    conversation_id: str
    project_name: str
    full_text: str
    sentence: str
    normalized: str


@dataclass
class _Accumulator:
    display: str
    count: int = 0
    total_length: int = 0
    intents: Counter = field(default_factory=Counter)
    sentiments: Counter = field(default_factory=Counter)
    tags: dict[str, None] = field(default_factory=dict)
    conversation_ids: set[str] = field(default_factory=set)
    contexts: list[str] = field(default_factory=list)


def split_sentences(text: str) -> list[str]:
    sentences = []
    for line in CODE.sub(" ", text).splitlines():
        line = WHITESPACE.sub(" ", line).strip()
        if not line:
            continue
        parts = SENTENCE_END.sub("\\1\n", line).split("\n")
        sentences.extend(p.strip() for p in parts if p.strip() and HAS_LETTER.search(p))
    return sentences


def normalize_sentence(sentence: str) -> str:
    return WHITESPACE.sub(" ", NOT_WORD.sub("", sentence.lower())).strip()


def detect_intent(sentence: str) -> SentenceIntent:
    lowered = sentence.lower()
    for intent, pattern in INTENT_RULES:
        if pattern.search(lowered):
            return intent
    return "statement"


def detect_sentiment(sentence: str) -> SentenceSentiment:
    lowered = sentence.lower()
    positive = sum(word in lowered for word in POSITIVE_WORDS)
    negative = sum(word in lowered for word in NEGATIVE_WORDS)
    if positive > negative:
        return "positive"
    if negative > positive:
        return "negative"
    return "neutral"


def sentence_tags(sentence: str, intent: SentenceIntent) -> list[str]:
    tags = [INTENT_TAGS[intent]]
    if ENGINEERING.search(sentence.lower()):
        tags.append("engineering")
    return tags


def sentence_context(full_text: str, sentence: str, radius: int = CONTEXT_RADIUS) -> str | None:
    index = full_text.lower().find(sentence.lower().strip())
    if index == -1:
        return None
    start = max(0, index - radius)
    end = min(len(full_text), index + len(sentence) + radius)
    prefix = "…" if start > 0 else ""
    suffix = "…" if end < len(full_text) else ""
    return f"{prefix}{full_text[start:end].strip()}{suffix}"


def sentence_samples(conversations: Sequence[Conversation]) -> list[SentenceSample]:
    samples = []
    for conversation in conversations:
        for message in conversation.user_messages:
            if not message.content.strip():
                continue
            for sentence in split_sentences(message.content):
                if len(sentence) < MIN_SENTENCE_LENGTH:
                    continue
                normalized = normalize_sentence(sentence)
                if not normalized:
                    continue
                samples.append(
                    SentenceSample(
                        conversation_id=conversation.session_id,
                        project_name=conversation.project_name,
                        full_text=message.content,
                        sentence=sentence,
                        normalized=normalized,
                    )
                )
    return samples


def collect_sentence_prompts(conversations: Sequence[Conversation], limit: int = 500) -> list[str]:
    """Sentences prefixed with their project, for sending to a model."""
    return [
        f"[{s.project_name}] {s.sentence}" if s.project_name else s.sentence
        for s in sentence_samples(conversations)[:limit]
    ]


def _top(counts: Counter, fallback):
    # most_common keeps insertion order among equal counts
    return counts.most_common(1)[0][0] if counts else fallback


def _to_stat(normalized: str, acc: _Accumulator) -> SentencePatternStat:
    return SentencePatternStat(
        sentence=acc.display,
        normalized=normalized,
        frequency=acc.count,
        intent=_top(acc.intents, "statement"),
        sentiment=_top(acc.sentiments, "neutral"),
        average_length=acc.total_length / acc.count if acc.count else len(acc.display),
        tags=tuple(acc.tags),
        conversation_count=len(acc.conversation_ids),
        sample_contexts=tuple(acc.contexts[:3]),
    )


def analyze_sentences(conversations: Sequence[Conversation]) -> SentenceAnalysisSummary:
    """Group repeated user sentences and break them down by intent."""
    accumulators: dict[str, _Accumulator] = {}
    intent_counts: Counter = Counter()
    total_length = 0

    samples = sentence_samples(conversations)
    for sample in samples:
        intent = detect_intent(sample.sentence)
        intent_counts[intent] += 1
        total_length += len(sample.sentence)

        acc = accumulators.setdefault(sample.normalized, _Accumulator(display=sample.sentence))
        acc.count += 1
        acc.total_length += len(sample.sentence)
        acc.intents[intent] += 1
        acc.sentiments[detect_sentiment(sample.sentence)] += 1
        for tag in sentence_tags(sample.sentence, intent):
            acc.tags.setdefault(tag, None)
        acc.conversation_ids.add(sample.conversation_id)
        context = sentence_context(sample.full_text, sample.sentence)
        if context and context not in acc.contexts and len(acc.contexts) < 3:
            acc.contexts.append(context)

    stats = sorted(
        (_to_stat(normalized, acc) for normalized, acc in accumulators.items()),
        key=lambda s: s.frequency,
        reverse=True,
    )
    total = len(samples)
    breakdown = tuple(
        SentenceIntentBreakdown(
            intent=intent,
            count=intent_counts[intent],
            percentage=intent_counts[intent] / total * 100 if total else 0.0,
        )
        for intent in INTENT_ORDER
    )
    return SentenceAnalysisSummary(
        total_sentences=total,
        unique_sentences=len(accumulators),
        average_sentence_length=total_length / total if total else 0.0,
        average_sentences_per_conversation=total / len(conversations) if conversations else 0.0,
        intent_breakdown=breakdown,
        top_sentences=tuple(stats[:TOP_N]),
        top_questions=tuple(s for s in stats if s.intent == "question")[:TOP_N],
        troubleshooting_sentences=tuple(s for s in stats if s.intent == "issue")[:TOP_N],
    )

"""Refine sentence patterns with Claude."""

import json
import math
import os
from collections.abc import Sequence
from dataclasses import asdict

from anthropic import Anthropic, APIError

from .config import LlmConfig
from .logging_config import get_logger
from .models import (
    Conversation,
    SentenceAnalysisSummary,
    SentenceIntent,
    SentenceIntentBreakdown,
    SentencePatternStat,
    SentenceSentiment,
)
from .sentences import INTENT_ORDER, collect_sentence_prompts

logger = get_logger(__name__)

SENTIMENTS: tuple[SentenceSentiment, ...] = ("positive", "neutral", "negative")
MAX_TAGS = 5
MAX_CONTEXTS = 3

SYSTEM_PROMPT = """You are an analytics assistant who summarizes developer conversations.
Analyze the provided sentences and return a JSON object with these keys:
  "total_sentences", "unique_sentences" (integers),
  "average_sentence_length", "average_sentences_per_conversation" (numbers),
  "intent_breakdown": list of {"intent", "count", "percentage"},
  "top_sentences", "top_questions", "troubleshooting_sentences": lists of sentence entries.
A sentence entry has "sentence", "normalized", "frequency", "intent", "sentiment",
"average_length", "tags" (list of strings), "conversation_count" and "sample_contexts" (list of strings).
intent is one of question, request, issue, learning, planning, statement.
sentiment is one of positive, neutral, negative.
Always respond with valid JSON and no prose."""

USER_PROMPT = """Here are up to {count} recent user sentences (one per line):
{sentences}

Here is a heuristic summary you may refine or improve:
{fallback}"""


def parse_json_response(content: str) -> dict:
    """Parse a JSON object from Claude's response, handling fenced blocks."""
    content = content.strip()

    if "```" in content:
        parts = content.split("```")
        if len(parts) >= 2:
            content = parts[1]
            if content.startswith("json"):
                content = content[4:]
            content = content.strip()

    start = content.find("{")
    end = content.rfind("}")
    if start != -1 and end > start:
        content = content[start : end + 1]

    parsed = json.loads(content)
    if not isinstance(parsed, dict):
        raise ValueError(f"Expected a JSON object, got {type(parsed).__name__}")
    return parsed


def ensure_intent(value) -> SentenceIntent:
    intent = str(value or "").lower()
    return intent if intent in INTENT_ORDER else "statement"


def ensure_sentiment(value) -> SentenceSentiment:
    sentiment = str(value or "").lower()
    return sentiment if sentiment in SENTIMENTS else "neutral"


def _number(value, default: float = 0) -> float:
    """``value`` when it is a finite JSON number, else ``default``."""
    if isinstance(value, bool) or not isinstance(value, int | float):
        return default
    try:
        finite = math.isfinite(value)
    except OverflowError:
        # integers too large for a float
        return default
    return value if finite else default


def _stat(entry: dict) -> SentencePatternStat | None:
    sentence = entry.get("sentence") if isinstance(entry, dict) else None
    if not isinstance(sentence, str) or not sentence:
        return None
    frequency = int(_number(entry.get("frequency")))
    tags = entry.get("tags")
    contexts = entry.get("sample_contexts")
    return SentencePatternStat(
        sentence=sentence,
        normalized=entry.get("normalized") or sentence.lower(),
        frequency=frequency,
        intent=ensure_intent(entry.get("intent")),
        sentiment=ensure_sentiment(entry.get("sentiment")),
        average_length=float(_number(entry.get("average_length"), len(sentence))),
        tags=tuple(str(t) for t in tags[:MAX_TAGS]) if isinstance(tags, list) else (),
        conversation_count=int(_number(entry.get("conversation_count"), frequency)),
        sample_contexts=tuple(str(c) for c in contexts[:MAX_CONTEXTS]) if isinstance(contexts, list) else (),
    )


def _stats(entries) -> tuple[SentencePatternStat, ...]:
    if not isinstance(entries, list):
        return ()
    return tuple(stat for stat in map(_stat, entries) if stat is not None)


def normalize_summary(candidate: dict) -> SentenceAnalysisSummary:
    """Coerce a model reply into a summary; unknown labels fall back to defaults."""
    breakdown = candidate.get("intent_breakdown")
    return SentenceAnalysisSummary(
        total_sentences=int(_number(candidate.get("total_sentences"))),
        unique_sentences=int(_number(candidate.get("unique_sentences"))),
        average_sentence_length=float(_number(candidate.get("average_sentence_length"))),
        average_sentences_per_conversation=float(_number(candidate.get("average_sentences_per_conversation"))),
        intent_breakdown=tuple(
            SentenceIntentBreakdown(
                intent=ensure_intent(item.get("intent")),
                count=int(_number(item.get("count"))),
                percentage=float(_number(item.get("percentage"))),
            )
            for item in breakdown
            if isinstance(item, dict)
        )
        if isinstance(breakdown, list)
        else (),
        top_sentences=_stats(candidate.get("top_sentences")),
        top_questions=_stats(candidate.get("top_questions")),
        troubleshooting_sentences=_stats(candidate.get("troubleshooting_sentences")),
    )


def merge_with_fallback(candidate: SentenceAnalysisSummary, fallback: SentenceAnalysisSummary) -> SentenceAnalysisSummary:
    """Take each field from ``candidate`` unless it is zero or empty."""
    return SentenceAnalysisSummary(
        total_sentences=candidate.total_sentences or fallback.total_sentences,
        unique_sentences=candidate.unique_sentences or fallback.unique_sentences,
        average_sentence_length=candidate.average_sentence_length or fallback.average_sentence_length,
        average_sentences_per_conversation=(
            candidate.average_sentences_per_conversation or fallback.average_sentences_per_conversation
        ),
        intent_breakdown=candidate.intent_breakdown or fallback.intent_breakdown,
        top_sentences=candidate.top_sentences or fallback.top_sentences,
        top_questions=candidate.top_questions or fallback.top_questions,
        troubleshooting_sentences=candidate.troubleshooting_sentences or fallback.troubleshooting_sentences,
    )


class LlmSentenceInsightService:
    """Ask Claude to refine the heuristic sentence summary.

    ``mode`` is "off" (never call), "auto" (call when an API key is
    available) or "live" (call, warning when no key is set). Any failure
    leaves the heuristic summary untouched.
    """

    def __init__(self, config: LlmConfig | None = None, client: Anthropic | None = None):
        self.config = config or LlmConfig()
        self.api_key = self.config.api_key or os.environ.get("ANTHROPIC_API_KEY")
        self._client = client

    def is_enabled(self) -> bool:
        if self.config.mode == "off":
            return False
        return self._client is not None or bool(self.api_key)

    @property
    def client(self) -> Anthropic:
        if self._client is None:
            self._client = Anthropic(api_key=self.api_key)
        return self._client

    def build_messages(self, sentences: Sequence[str], fallback: SentenceAnalysisSummary) -> list[dict]:
        prompt = USER_PROMPT.format(
            count=len(sentences),
            sentences="\n".join(f"{i}. {sentence}" for i, sentence in enumerate(sentences, 1)),
            fallback=json.dumps(asdict(fallback), indent=2, ensure_ascii=False),
        )
        return [{"role": "user", "content": prompt}]

    def enhance(self, conversations: Sequence[Conversation], fallback: SentenceAnalysisSummary) -> SentenceAnalysisSummary:
        if self.config.mode == "off":
            return fallback
        if not self.is_enabled():
            if self.config.mode == "live":
                logger.warning("LLM refinement requested but ANTHROPIC_API_KEY is not set")
            return fallback

        sentences = collect_sentence_prompts(conversations, self.config.max_sentences)
        if not sentences:
            return fallback

        try:
            response = self.client.messages.create(
                model=self.config.model,
                max_tokens=self.config.max_tokens,
                system=SYSTEM_PROMPT,
                messages=self.build_messages(sentences, fallback),
            )
            content = response.content[0].text
            candidate = normalize_summary(parse_json_response(content))
        except APIError as e:
            logger.warning("LLM sentence refinement failed: %s", e)
            return fallback
        except (json.JSONDecodeError, ValueError, IndexError, AttributeError) as e:
            logger.warning("Could not parse LLM sentence summary: %s", e)
            return fallback

        logger.debug("Refined sentence summary from %d sentences", len(sentences))
        return merge_with_fallback(candidate, fallback)

"""Corpus-level statistics for a set of conversations."""

from collections import Counter
from collections.abc import Sequence
from datetime import tzinfo

import tiktoken

from .hourly import as_aware
from .models import AnalyticsStatistics, AssistantMessage, Conversation, ProjectCount, UserMessage

TOP_PROJECTS = 5


def count_tokens(text: str, model: str = "cl100k_base") -> int:
    """Count tokens in text using tiktoken."""
    try:
        enc = tiktoken.get_encoding(model)
        return len(enc.encode(text))
    except Exception:
        # Fallback: rough estimate
        return len(text) // 4


def token_totals(conversations: Sequence[Conversation]) -> tuple[int, int]:
    """(user, assistant) token counts across every message."""
    user = assistant = 0
    for conversation in conversations:
        for message in conversation.messages:
            match message:
                case UserMessage(content=content):
                    user += count_tokens(content)
                case AssistantMessage(content=content):
                    assistant += count_tokens(content)
    return user, assistant


def calculate_statistics(
    conversations: Sequence[Conversation], tz: tzinfo | None = None, with_tokens: bool = False
) -> AnalyticsStatistics:
    if not conversations:
        return AnalyticsStatistics()

    total_messages = sum(c.message_count for c in conversations)
    total_words = sum(c.word_count for c in conversations)
    starts = [as_aware(c.started_at) for c in conversations]
    local_starts = [s.astimezone(tz) if tz else s for s in starts]

    # Counter preserves first-seen order, so most_common breaks ties that way
    projects = Counter(c.project_name for c in conversations)
    days = Counter(s.date() for s in local_starts)
    hours = Counter(s.hour for s in local_starts)

    user_tokens, assistant_tokens = token_totals(conversations) if with_tokens else (0, 0)

    return AnalyticsStatistics(
        total_conversations=len(conversations),
        total_messages=total_messages,
        total_words=total_words,
        average_messages_per_conversation=total_messages / len(conversations),
        average_words_per_message=total_words / total_messages if total_messages else 0.0,
        date_range=(min(starts), max(starts)),
        top_projects=tuple(ProjectCount(name, count) for name, count in projects.most_common(TOP_PROJECTS)),
        most_active_day=days.most_common(1)[0],
        most_active_hour=hours.most_common(1)[0],
        user_tokens=user_tokens,
        assistant_tokens=assistant_tokens,
    )

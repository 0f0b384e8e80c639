"""Text extraction, normalization and tokenization."""

import re
from collections.abc import Iterable, Iterator
from datetime import datetime
from typing import Literal

from .models import AssistantMessage, Conversation, ExtractedText, TextAnalysis, UserMessage
from .stopwords import EN_STOPWORDS, ZH_STOPWORDS

Language = Literal["en", "zh", "mixed"]
Period = Literal["day", "week", "month"]

MIN_TOKEN_LENGTH = 2
MAX_TOKEN_LENGTH = 50

# Applied in order before tokenizing
NOISE_PATTERNS = (
    re.compile(r"https?://\S+"),
    re.compile(r"[\w.-]+@[\w.-]+\.\w+"),
    re.compile(r"```[\s\S]*?```"),
    re.compile(r"`[^`]+`"),
    re.compile(r"[*_~`]"),
)
WHITESPACE = re.compile(r"\s+")
TOKEN_SPLIT = re.compile(r"[\s,;:!?()\[\]{}'\"<>/\\]+")
DIGITS_ONLY = re.compile(r"^\d+$")
HAS_LETTER = re.compile(r"[a-zA-Z\u4e00-\u9fa5]")
CJK_CHAR = re.compile(r"[\u4e00-\u9fa5]")
LATIN_CHAR = re.compile(r"[a-zA-Z]")

TECHNICAL_TERM_PATTERNS = (
    re.compile(r"\b(javascript|typescript|python|java|rust|go|c\+\+|c#|ruby|php|swift|kotlin)(?![\w+#])", re.I),
    re.compile(r"\b(react|vue|angular|next\.js|express|django|flask|spring|laravel)\b", re.I),
    re.compile(r"\b(git|docker|kubernetes|npm|yarn|webpack|vite|jest|vitest)\b", re.I),
    re.compile(r"\b(api|rest|graphql|sql|nosql|http|https|json|xml|yaml)\b", re.I),
)


def extract_text(conversation: Conversation) -> list[ExtractedText]:
    """Turn each non-empty message into an attributed text span."""
    extracted = []
    for message in conversation.messages:
        if not message.content or not message.content.strip():
            continue
        match message:
            case UserMessage():
                source = "user"
            case AssistantMessage():
                source = "assistant"
        extracted.append(
            ExtractedText(
                content=message.content,
                source=source,
                conversation_id=conversation.session_id,
                timestamp=message.timestamp,
            )
        )
    return extracted


def extract_from_conversations(conversations: Iterable[Conversation]) -> Iterator[ExtractedText]:
    """Lazily extract text spans from every conversation in order."""
    for conversation in conversations:
        yield from extract_text(conversation)


def normalize_text(text: str) -> str:
    """Strip URLs, emails, code and markdown emphasis; collapse whitespace."""
    for pattern in NOISE_PATTERNS:
        text = pattern.sub("", text)
    return WHITESPACE.sub(" ", text).strip()


def tokenize(text: str) -> list[str]:
    normalized = normalize_text(text)
    return [token for token in TOKEN_SPLIT.split(normalized) if token]


def detect_language(text: str) -> Language:
    """Classify text by its share of CJK characters among letters.

    A ratio above 0.7 is Chinese, below 0.3 is English; the boundaries
    themselves are mixed. Text without letters counts as English.
    """
    cjk = len(CJK_CHAR.findall(text))
    latin = len(LATIN_CHAR.findall(text))
    total = cjk + latin
    if total == 0:
        return "en"
    ratio = cjk / total
    if ratio > 0.7:
        return "zh"
    if ratio < 0.3:
        return "en"
    return "mixed"


def remove_stopwords(tokens: list[str], language: Language) -> list[str]:
    lowered = [t.lower() for t in tokens]
    match language:
        case "en":
            return [t for t in lowered if t not in EN_STOPWORDS]
        case "zh":
            return [t for t in lowered if t not in ZH_STOPWORDS]
        case _:
            without_en = [t for t in lowered if t not in EN_STOPWORDS]
            return [t for t in without_en if t not in ZH_STOPWORDS]


def filter_tokens(
    tokens: list[str],
    language: Language,
    min_length: int = MIN_TOKEN_LENGTH,
    max_length: int = MAX_TOKEN_LENGTH,
) -> list[str]:
    """Lower-case, drop stop words and keep tokens that look like words."""
    return [
        token
        for token in remove_stopwords(tokens, language)
        if min_length <= len(token) <= max_length
        and not DIGITS_ONLY.match(token)
        and HAS_LETTER.search(token)
    ]


def analyze_text(
    text: str,
    min_length: int = MIN_TOKEN_LENGTH,
    max_length: int = MAX_TOKEN_LENGTH,
) -> TextAnalysis:
    language = detect_language(text)
    tokens = tokenize(text)
    return TextAnalysis(
        text=text,
        tokens=tuple(tokens),
        filtered_tokens=tuple(filter_tokens(tokens, language, min_length, max_length)),
        language=language,
    )


def extract_technical_terms(text: str) -> list[str]:
    """Well-known technical terms in ``text``, lower-cased, first-seen order."""
    terms: dict[str, None] = {}
    for pattern in TECHNICAL_TERM_PATTERNS:
        for match in pattern.finditer(text):
            terms.setdefault(match.group(0).lower(), None)
    return list(terms)


def period_key(timestamp: datetime, period: Period) -> str:
    match period:
        case "day":
            return timestamp.strftime("%Y-%m-%d")
        case "week":
            year, week, _ = timestamp.isocalendar()
            return f"{year}-W{week:02d}"
        case "month":
            return timestamp.strftime("%Y-%m")
    raise ValueError(f"Unknown period: {period}")


def group_by_period(texts: Iterable[ExtractedText], period: Period) -> dict[str, list[ExtractedText]]:
    groups: dict[str, list[ExtractedText]] = {}
    for text in texts:
        groups.setdefault(period_key(text.timestamp, period), []).append(text)
    return groups

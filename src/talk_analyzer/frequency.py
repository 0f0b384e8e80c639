"""Word frequency, TF-IDF weighting and n-gram phrase extraction."""

import math
from collections import Counter
from collections.abc import Iterable, Sequence

from .catalog import categorize_term
from .config import FrequencyConfig
from .logging_config import get_logger
from .models import Conversation, ExtractedText, PhraseEntry, TermFrequency, WordCloudData, WordEntry
from .text import analyze_text, extract_from_conversations

logger = get_logger(__name__)

CONTEXT_RADIUS = 50
MAX_CONTEXTS = 3


def tfidf_weight(frequency: int, document_frequency: int, total_documents: int) -> float:
    """``frequency * ln(total / df)``; exactly 0.0 for terms found in every document."""
    if total_documents <= 0 or document_frequency <= 0 or document_frequency >= total_documents:
        return 0.0
    return frequency * math.log(total_documents / document_frequency)


def ngrams(tokens: Sequence[str], n: int) -> list[str]:
    return [" ".join(tokens[i : i + n]) for i in range(len(tokens) - n + 1)]


def phrase_context(text: str, phrase: str, radius: int = CONTEXT_RADIUS) -> str | None:
    """Text around the first case-insensitive occurrence of ``phrase``."""
    index = text.lower().find(phrase.lower())
    if index == -1:
        return None
    start = max(0, index - radius)
    end = min(len(text), index + len(phrase) + radius)
    context = text[start:end]
    if start > 0:
        context = "..." + context
    if end < len(text):
        context = context + "..."
    return context.strip()


class FrequencyAccumulator:
    """Streaming counters over extracted texts.

    Only per-term and per-phrase counters are kept, so memory grows with the
    vocabulary rather than with the corpus.
    """

    def __init__(self, config: FrequencyConfig | None = None):
        self.config = config or FrequencyConfig()
        self.term_counts: dict[str, int] = {}
        self.term_documents: dict[str, set[str]] = {}
        self.phrase_counts: dict[str, int] = {}
        self.phrase_contexts: dict[str, list[str]] = {}
        self.total_tokens = 0

    def add(self, text: ExtractedText):
        analysis = analyze_text(
            text.content,
            min_length=self.config.min_token_length,
            max_length=self.config.max_token_length,
        )
        tokens = analysis.filtered_tokens
        self.total_tokens += len(tokens)

        for term, count in Counter(tokens).items():
            self.term_counts[term] = self.term_counts.get(term, 0) + count
            self.term_documents.setdefault(term, set()).add(text.conversation_id)

        for n in self.config.ngram_sizes:
            for phrase in ngrams(tokens, n):
                self.phrase_counts[phrase] = self.phrase_counts.get(phrase, 0) + 1
                contexts = self.phrase_contexts.setdefault(phrase, [])
                if len(contexts) < MAX_CONTEXTS:
                    context = phrase_context(text.content, phrase)
                    if context and context not in contexts:
                        contexts.append(context)

    @property
    def unique_tokens(self) -> int:
        return len(self.term_counts)

    def term_frequencies(self) -> list[TermFrequency]:
        return [
            TermFrequency(term=term, frequency=count, document_ids=frozenset(self.term_documents[term]))
            for term, count in self.term_counts.items()
        ]

    def word_entries(self, total_documents: int) -> tuple[WordEntry, ...]:
        """Entries whose TF-IDF weight reaches ``min_frequency``, heaviest first."""
        entries = []
        for term, count in self.term_counts.items():
            weight = tfidf_weight(count, len(self.term_documents[term]), total_documents)
            if weight < self.config.min_frequency:
                continue
            category = categorize_term(term) if self.config.include_technical_terms else None
            entries.append(WordEntry(text=term, value=count, weight=weight, category=category))
        entries.sort(key=lambda e: e.weight, reverse=True)
        return tuple(entries[: self.config.max_words])

    def phrase_entries(self) -> tuple[PhraseEntry, ...]:
        entries = [
            PhraseEntry(text=phrase, frequency=count, contexts=tuple(self.phrase_contexts[phrase]))
            for phrase, count in self.phrase_counts.items()
            if count >= self.config.min_frequency
        ]
        entries.sort(key=lambda e: e.frequency, reverse=True)
        return tuple(entries[: self.config.max_phrases])


def analyze_frequencies(
    conversations: Iterable[Conversation] | None, config: FrequencyConfig | None = None
) -> WordCloudData:
    """Build word cloud data for a corpus; documents are conversations.

    An empty corpus gives an empty word cloud with zero token counts.
    """
    conversations = list(conversations or ())
    if not conversations:
        return WordCloudData()

    accumulator = FrequencyAccumulator(config)
    for text in extract_from_conversations(conversations):
        accumulator.add(text)

    logger.debug(
        "Counted %d tokens, %d unique terms, %d phrases over %d conversations",
        accumulator.total_tokens,
        accumulator.unique_tokens,
        len(accumulator.phrase_counts),
        len(conversations),
    )
    return WordCloudData(
        words=accumulator.word_entries(len(conversations)),
        phrases=accumulator.phrase_entries(),
        total_tokens=accumulator.total_tokens,
        unique_tokens=accumulator.unique_tokens,
    )


def frequency_distribution(word_cloud: WordCloudData) -> dict[int, int]:
    """Number of word entries per raw-count bucket of width 10."""
    distribution: dict[int, int] = {}
    for word in word_cloud.words:
        bucket = (word.value // 10) * 10
        distribution[bucket] = distribution.get(bucket, 0) + 1
    return dict(sorted(distribution.items()))

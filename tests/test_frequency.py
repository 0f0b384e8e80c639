"""Tests for TF-IDF word weighting and phrase extraction."""

import math

import pytest

from talk_analyzer.config import FrequencyConfig
from talk_analyzer.frequency import (
    analyze_frequencies,
    frequency_distribution,
    ngrams,
    phrase_context,
    tfidf_weight,
)
from talk_analyzer.models import WordCloudData, WordEntry


class TestTfidfWeight:
    def test_term_in_every_document_weighs_zero(self):
        assert tfidf_weight(50, 3, 3) == 0.0

    def test_weight_formula(self):
        assert tfidf_weight(2, 1, 2) == pytest.approx(2 * math.log(2))

    def test_degenerate_inputs(self):
        assert tfidf_weight(3, 0, 5) == 0.0
        assert tfidf_weight(3, 1, 0) == 0.0


class TestHelpers:
    def test_ngrams(self):
        assert ngrams(["a", "b", "c"], 2) == ["a b", "b c"]
        assert ngrams(["a"], 2) == []

    def test_phrase_context_marks_truncation(self):
        text = "x" * 60 + " alpha beta " + "y" * 60
        context = phrase_context(text, "ALPHA BETA", radius=10)
        assert context.startswith("...")
        assert context.endswith("...")
        assert "alpha beta" in context

    def test_phrase_context_missing(self):
        assert phrase_context("nothing here", "alpha") is None


class TestAnalyzeFrequencies:
    def test_empty_corpus(self):
        result = analyze_frequencies([])
        assert result == WordCloudData()
        assert result.total_tokens == 0
        assert result.vocabulary_richness == 0.0

    def test_none_corpus(self):
        assert analyze_frequencies(None).is_empty

    def test_ubiquitous_term_is_dropped(self, make_conversation):
        corpus = [
            make_conversation("a", user="kubernetes docker docker docker"),
            make_conversation("b", user="kubernetes banana"),
            make_conversation("c", user="kubernetes cherry"),
        ]
        words = {w.text: w for w in analyze_frequencies(corpus).words}
        assert "kubernetes" not in words
        # 1 * ln(3) is below the default threshold of 2
        assert "banana" not in words
        docker = words["docker"]
        assert docker.value == 3
        assert docker.weight == pytest.approx(3 * math.log(3))
        assert docker.category == "tool"

    def test_threshold_is_configurable(self, make_conversation):
        corpus = [
            make_conversation("a", user="kubernetes banana"),
            make_conversation("b", user="kubernetes cherry"),
            make_conversation("c", user="kubernetes plum"),
        ]
        result = analyze_frequencies(corpus, FrequencyConfig(min_frequency=1.0))
        assert {w.text for w in result.words} == {"banana", "cherry", "plum"}

    def test_sorted_by_weight_and_truncated(self, make_conversation):
        corpus = [
            make_conversation("a", user="apple apple apple apple pear pear pear"),
            make_conversation("b", user="melon"),
        ]
        result = analyze_frequencies(corpus, FrequencyConfig(min_frequency=0.1, max_words=1))
        assert [w.text for w in result.words] == ["apple"]

    def test_phrases_need_repeats(self, make_conversation):
        corpus = [
            make_conversation("a", user="alpha beta"),
            make_conversation("b", user="alpha beta"),
            make_conversation("c", user="gamma delta"),
        ]
        phrases = {p.text: p for p in analyze_frequencies(corpus).phrases}
        assert set(phrases) == {"alpha beta"}
        assert phrases["alpha beta"].frequency == 2
        assert phrases["alpha beta"].contexts == ("alpha beta",)

    def test_phrase_order_contexts_and_limit(self, make_conversation):
        texts = ["gamma delta", "gamma delta", "kiwi alpha beta", "lime alpha beta", "pear alpha beta", "plum alpha beta"]
        corpus = [make_conversation(f"c{i}", user=text) for i, text in enumerate(texts)]

        phrases = analyze_frequencies(corpus).phrases
        assert [(p.text, p.frequency) for p in phrases] == [("alpha beta", 4), ("gamma delta", 2)]
        assert phrases[0].contexts == ("kiwi alpha beta", "lime alpha beta", "pear alpha beta")

        limited = analyze_frequencies(corpus, FrequencyConfig(max_phrases=1)).phrases
        assert [p.text for p in limited] == ["alpha beta"]

    def test_all_unique_tokens_have_full_richness(self, make_conversation):
        words = [f"word{chr(97 + i // 26)}{chr(97 + i % 26)}" for i in range(100)]
        result = analyze_frequencies([make_conversation(user=" ".join(words))])
        assert result.total_tokens == 100
        assert result.unique_tokens == 100
        assert result.vocabulary_richness == 1.0


def test_frequency_distribution():
    cloud = WordCloudData(
        words=(
            WordEntry("a", 3, 3.0),
            WordEntry("b", 12, 5.0),
            WordEntry("c", 15, 6.0),
        )
    )
    assert frequency_distribution(cloud) == {0: 1, 10: 2}

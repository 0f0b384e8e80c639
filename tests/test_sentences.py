"""Tests for sentence splitting, intent detection and pattern aggregation."""

import pytest

from talk_analyzer.sentences import (
    analyze_sentences,
    collect_sentence_prompts,
    detect_intent,
    detect_sentiment,
    sentence_context,
    sentence_tags,
    split_sentences,
)


class TestSplitSentences:
    def test_splits_after_end_punctuation(self):
        assert split_sentences("First one. Second one? Third!") == ["First one.", "Second one?", "Third!"]

    def test_splits_on_newlines(self):
        assert split_sentences("line one\nline two") == ["line one", "line two"]

    def test_code_is_removed(self):
        assert split_sentences("Run `npm test` now.\n```\ncode here\n```") == ["Run now."]

    def test_parts_without_letters_are_dropped(self):
        assert split_sentences("123. abc") == ["abc"]

    def test_chinese_punctuation(self):
        assert split_sentences("你好。 再见") == ["你好。", "再见"]


class TestClassification:
    @pytest.mark.parametrize(
        ("sentence", "intent"),
        [
            ("I get an error on startup", "issue"),
            ("Can you fix the crash?", "issue"),
            ("How does this work", "question"),
            ("Please add tests", "request"),
            ("Explain closures to me", "learning"),
            ("Let's plan the release", "planning"),
            ("The sky is blue", "statement"),
        ],
    )
    def test_detect_intent(self, sentence, intent):
        assert detect_intent(sentence) == intent

    def test_detect_sentiment(self):
        assert detect_sentiment("Thanks, this is great") == "positive"
        assert detect_sentiment("I'm stuck and frustrated") == "negative"
        assert detect_sentiment("The build ran") == "neutral"

    def test_tags(self):
        assert sentence_tags("Please refactor this", "request") == ["actionable", "engineering"]
        assert sentence_tags("What now?", "question") == ["curiosity"]


class TestSentenceContext:
    def test_truncation_marks(self):
        text = "x" * 100 + " target sentence " + "y" * 100
        context = sentence_context(text, "Target sentence")
        assert context.startswith("…")
        assert context.endswith("…")
        assert "target sentence" in context

    def test_short_text_is_whole(self):
        assert sentence_context("just this", "just this") == "just this"

    def test_missing(self):
        assert sentence_context("nothing", "else entirely") is None


class TestAnalyzeSentences:
    def test_repeated_sentences_are_grouped(self, make_conversation):
        corpus = [
            make_conversation("a", user="How do I fix this? The build broke."),
            make_conversation("b", user="how do I fix this?", assistant="You could try this. And that."),
        ]
        summary = analyze_sentences(corpus)

        assert summary.total_sentences == 3
        assert summary.unique_sentences == 2
        assert summary.average_sentences_per_conversation == 1.5

        top = summary.top_sentences[0]
        assert top.sentence == "How do I fix this?"
        assert top.normalized == "how do i fix this"
        assert top.frequency == 2
        assert top.conversation_count == 2
        assert top.intent == "question"
        assert top.tags == ("curiosity",)
        assert len(top.sample_contexts) == 2
        assert [s.sentence for s in summary.top_questions] == ["How do I fix this?"]
        assert summary.troubleshooting_sentences == ()

    def test_intent_breakdown(self, make_conversation):
        corpus = [make_conversation(user="How do I fix this? The build broke. It crashed again.")]
        breakdown = {b.intent: b for b in analyze_sentences(corpus).intent_breakdown}
        assert list(breakdown) == ["issue", "question", "request", "learning", "planning", "statement"]
        assert breakdown["issue"].count == 1
        assert breakdown["question"].percentage == pytest.approx(100 / 3)
        assert breakdown["planning"].percentage == 0.0

    def test_short_sentences_are_skipped(self, make_conversation):
        assert analyze_sentences([make_conversation(user="ok. yes")]).total_sentences == 0

    def test_empty_corpus(self):
        summary = analyze_sentences([])
        assert summary.total_sentences == 0
        assert summary.top_sentences == ()
        assert summary.average_sentence_length == 0.0
        assert all(b.percentage == 0.0 for b in summary.intent_breakdown)


def test_collect_sentence_prompts(make_conversation):
    corpus = [make_conversation(user="How do I fix this? The build broke.")]
    assert collect_sentence_prompts(corpus) == ["[shop] How do I fix this?", "[shop] The build broke."]
    assert collect_sentence_prompts(corpus, limit=1) == ["[shop] How do I fix this?"]

"""Tests for text extraction, normalization and language detection."""

from datetime import datetime, timezone

from talk_analyzer.models import AssistantMessage, Conversation, UserMessage
from talk_analyzer.text import (
    analyze_text,
    detect_language,
    extract_technical_terms,
    extract_text,
    filter_tokens,
    group_by_period,
    normalize_text,
    period_key,
    tokenize,
)

T0 = datetime(2024, 6, 3, 9, 0, tzinfo=timezone.utc)


class TestExtractText:
    def test_sources_follow_message_type(self):
        conversation = Conversation(
            session_id="abc",
            project_path="/home/dev/shop",
            started_at=T0,
            messages=(
                UserMessage(content="question", timestamp=T0),
                AssistantMessage(content="answer", timestamp=T0),
            ),
        )
        texts = extract_text(conversation)
        assert [t.source for t in texts] == ["user", "assistant"]
        assert all(t.conversation_id == "abc" for t in texts)

    def test_blank_turns_are_dropped(self):
        conversation = Conversation(
            session_id="abc",
            project_path="/p",
            started_at=T0,
            messages=(
                UserMessage(content="   \n", timestamp=T0),
                AssistantMessage(content="", timestamp=T0),
                UserMessage(content="real text", timestamp=T0),
            ),
        )
        assert [t.content for t in extract_text(conversation)] == ["real text"]


class TestNormalization:
    def test_strips_noise_in_order(self):
        text = "See https://example.com/docs and mail dev@example.com `code` **bold**"
        assert normalize_text(text) == "See and mail bold"

    def test_strips_fenced_blocks(self):
        assert normalize_text("before\n```python\nx = 1\n```\nafter") == "before after"

    def test_tokenize_splits_on_punctuation(self):
        assert tokenize("foo, bar; (baz) <qux>") == ["foo", "bar", "baz", "qux"]

    def test_filter_tokens(self):
        tokens = ["The", "Python", "42", "a", "x" * 51, "数据"]
        assert filter_tokens(tokens, "mixed") == ["python", "数据"]

    def test_chinese_stopwords_only_for_chinese(self):
        assert filter_tokens(["我们", "数据"], "zh") == ["数据"]
        assert filter_tokens(["the", "data"], "zh") == ["the", "data"]

    def test_analyze_text(self):
        analysis = analyze_text("The parser handles streaming input")
        assert analysis.language == "en"
        assert analysis.filtered_tokens == ("parser", "handles", "streaming", "input")
        assert analysis.word_count == 5


class TestDetectLanguage:
    def test_english(self):
        assert detect_language("hello world") == "en"

    def test_chinese(self):
        assert detect_language("你好世界") == "zh"

    def test_no_letters_is_english(self):
        assert detect_language("12345 !!") == "en"

    def test_exactly_seventy_percent_is_mixed(self):
        assert detect_language("中文中文中文中abc") == "mixed"

    def test_exactly_thirty_percent_is_mixed(self):
        assert detect_language("中文中abcdefg") == "mixed"


class TestTechnicalTerms:
    def test_first_seen_and_lowercased(self):
        assert extract_technical_terms("Python with React, then python again") == ["python", "react"]

    def test_cpp_is_matched_whole(self):
        assert "c++" in extract_technical_terms("written in C++ mostly")


class TestPeriods:
    def test_period_keys(self):
        assert period_key(datetime(2024, 6, 3), "day") == "2024-06-03"
        assert period_key(datetime(2024, 6, 3), "month") == "2024-06"
        assert period_key(datetime(2024, 1, 1), "week") == "2024-W01"

    def test_iso_week_crosses_year(self):
        assert period_key(datetime(2021, 1, 3), "week") == "2020-W53"

    def test_group_by_period(self, make_conversation):
        early = make_conversation("a", started_at=datetime(2024, 5, 30, tzinfo=timezone.utc))
        late = make_conversation("b", started_at=datetime(2024, 6, 2, tzinfo=timezone.utc))
        texts = extract_text(early) + extract_text(late)
        groups = group_by_period(texts, "month")
        assert sorted(groups) == ["2024-05", "2024-06"]

"""Tests for developer persona classification."""

from datetime import date, datetime, timezone

from talk_analyzer.analytics import analyze
from talk_analyzer.heatmap import generate_heatmap
from talk_analyzer.models import ClusterCollection
from talk_analyzer.persona import (
    ActivityPattern,
    LearningPattern,
    classify_persona,
    persona_by_id,
    persona_catalog,
    score_personas,
)


class TestCatalog:
    def test_eight_personas_in_order(self):
        ids = [p.id for p in persona_catalog()]
        assert ids == [
            "night_owl_full_stack",
            "early_bird_architect",
            "weekend_warrior",
            "consistent_learner",
            "tech_explorer",
            "deep_specialist",
            "sprint_coder",
            "steady_builder",
        ]

    def test_lookup(self):
        assert persona_by_id("weekend_warrior").mbti == "ENFP"
        assert persona_by_id("nope") is None


class TestClassify:
    def test_empty_history_is_deep_specialist(self):
        heatmap = generate_heatmap([], date(2024, 6, 10))
        tech = ClusterCollection(clusters=(), cluster_type="tech_stack", total_conversations=0)
        persona = classify_persona(0, tech, None, heatmap)
        # ties with sprint_coder at 2 and is listed first
        assert persona.id == "deep_specialist"
        assert persona.score == 2.0

    def test_scores_follow_patterns(self):
        heatmap = generate_heatmap([], date(2024, 6, 10))
        activity = ActivityPattern(
            peak_hour=23, peak_day_of_week=6, weekend_ratio=0.4, night_percentage=0.8, early_percentage=0.0
        )
        learning = LearningPattern(breadth=9, depth=1.0, consistency=0.0, exploration_rate=0.5)
        scores = {p.id: p.score for p in score_personas(activity, learning, heatmap)}
        assert scores["night_owl_full_stack"] == 0.8 * 3 + 2 + 1
        assert scores["weekend_warrior"] == 0.4 * 5
        assert scores["tech_explorer"] == 2.5

    def test_weekend_only_history(self, make_conversation, analysis_config):
        corpus = [
            make_conversation(f"w{day}", started_at=datetime(2024, 6, day, 14, 0, tzinfo=timezone.utc))
            for day in (1, 2, 8)
        ]
        report = analyze(corpus, config=analysis_config)
        assert report.persona.id == "weekend_warrior"
        assert report.persona.score == 5.0

"""Tests for technology, task-type and topic clustering."""

from talk_analyzer.catalog import LANGUAGE_PATTERNS, categorize_term, match_names
from talk_analyzer.clustering import (
    categorize_task_type,
    cluster_by_task_type,
    cluster_by_tech_stack,
    cluster_by_topic,
    detect_technologies,
    most_used_tech,
)
from talk_analyzer.concepts import extract_concepts


class TestDetection:
    def test_detects_each_category(self):
        detection = detect_technologies("a react app in typescript, built with vite, hosted on vercel")
        assert detection.frameworks == ("React",)
        assert detection.languages == ("TypeScript",)
        assert detection.tools == ("Vite",)
        assert detection.platforms == ("Vercel",)

    def test_java_is_not_javascript(self):
        assert match_names(LANGUAGE_PATTERNS, "plain javascript") == ("JavaScript",)
        assert match_names(LANGUAGE_PATTERNS, "plain java") == ("Java",)

    def test_categorize_term_order(self):
        # typescript is in both the language and tool tables
        assert categorize_term("TypeScript") == "language"
        assert categorize_term("graphql") == "concept"
        assert categorize_term("banana") is None


class TestTechStackClusters:
    def test_two_mentions_make_one_cluster(self, make_conversation):
        corpus = [
            make_conversation("a", user="How do I write React hooks?"),
            make_conversation("b", user="React state keeps resetting"),
            make_conversation("c", user="Vue question about slots"),
        ]
        collection = cluster_by_tech_stack(corpus)
        assert [c.label for c in collection.clusters] == ["Framework: React"]
        cluster = collection.clusters[0]
        assert cluster.id == "React-cluster"
        assert cluster.size == 2
        assert [r.session_id for r in cluster.conversations] == ["a", "b"]
        assert cluster.average_relevance == 1.0
        assert collection.total_conversations == 3

    def test_single_mention_makes_no_cluster(self, make_conversation):
        corpus = [make_conversation("a", user="Vue question"), make_conversation("b", user="nothing")]
        assert cluster_by_tech_stack(corpus).clusters == ()

    def test_tech_stack_is_union_of_members(self, make_conversation):
        corpus = [
            make_conversation("a", user="React with Python backend"),
            make_conversation("b", user="React on AWS"),
        ]
        cluster = cluster_by_tech_stack(corpus).by_id("React-cluster")
        assert cluster.tech_stack.frameworks == ("React",)
        assert cluster.tech_stack.languages == ("Python",)
        assert cluster.tech_stack.platforms == ("AWS",)

    def test_platforms_are_not_clustered(self, make_conversation):
        corpus = [make_conversation("a", user="deploy to heroku"), make_conversation("b", user="heroku again")]
        assert cluster_by_tech_stack(corpus).clusters == ()

    def test_membership_is_not_exclusive(self, make_conversation):
        corpus = [
            make_conversation("a", user="python and rust"),
            make_conversation("b", user="python and rust"),
        ]
        collection = cluster_by_tech_stack(corpus)
        assert len(collection.clusters) == 2
        assert collection.coverage == 2.0
        assert len(collection.for_conversation("a")) == 2

    def test_empty_corpus(self):
        collection = cluster_by_tech_stack([])
        assert collection.clusters == ()
        assert collection.coverage == 0.0

    def test_most_used_tech(self, make_conversation):
        corpus = [
            make_conversation("a", user="python and docker"),
            make_conversation("b", user="python only"),
        ]
        assert most_used_tech(corpus, 1) == [("Python", 2)]


class TestTaskTypes:
    def test_debugging(self, make_conversation):
        assert categorize_task_type(make_conversation(user="I get an error in the checkout")) == "debugging"

    def test_learning_wins_over_debugging(self, make_conversation):
        assert categorize_task_type(make_conversation(user="what is this error about")) == "learning"

    def test_implementation_needs_code(self, make_conversation):
        plain = make_conversation(user="implement a parser")
        with_code = make_conversation(user="implement a parser", assistant="```py\nx = 1\n```")
        assert categorize_task_type(plain) == "other"
        assert categorize_task_type(with_code) == "implementation"

    def test_small_groups_dropped(self, make_conversation):
        corpus = [
            make_conversation("a", user="crash on startup"),
            make_conversation("b", user="another crash"),
            make_conversation("c", user="refactor the cart"),
        ]
        collection = cluster_by_task_type(corpus)
        assert collection.distribution() == {"Debugging & Troubleshooting": 2}


class TestTopics:
    def test_shared_concept_becomes_topic(self, make_conversation):
        corpus = [
            make_conversation("a", user="docker image is huge"),
            make_conversation("b", user="docker compose networking"),
            make_conversation("c", user="nothing related"),
        ]
        concepts = extract_concepts(corpus)
        assert [c.concept for c in concepts] == ["containerization"]
        assert concepts[0].conversation_ids == ("a", "b")

        collection = cluster_by_topic(corpus, concepts)
        assert [c.label for c in collection.clusters] == ["Topic: DevOps"]
        assert collection.clusters[0].keywords == ("containerization",)

    def test_no_concepts_no_clusters(self, make_conversation):
        assert cluster_by_topic([make_conversation()]).clusters == ()

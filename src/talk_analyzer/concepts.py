"""Regex-based technical concept extraction and categorization."""

import re
from collections.abc import Iterable

from .models import ConceptEntry, Conversation

MIN_OCCURRENCES = 2
MAX_CONCEPTS = 50

CODE_CONCEPTS = {
    "error handling": re.compile(r"error[- ]?handl(ing|er)", re.I),
    "data structure": re.compile(r"data[- ]?struct", re.I),
    "algorithm": re.compile(r"algorithm|algo\b", re.I),
    "API design": re.compile(r"api[- ]?design", re.I),
    "database schema": re.compile(r"database[- ]?schema|db[- ]?schema", re.I),
    "authentication": re.compile(r"\bauth(entication)?\b|oauth|jwt", re.I),
    "authorization": re.compile(r"authorization|access[- ]?control", re.I),
    "state management": re.compile(r"state[- ]?manag", re.I),
    "dependency injection": re.compile(r"dependency[- ]?inject", re.I),
    "test driven development": re.compile(r"\btdd\b|test[- ]?driven", re.I),
    "continuous integration": re.compile(r"ci/cd|continuous[- ]?integrat", re.I),
    "code review": re.compile(r"code[- ]?review", re.I),
    "performance optimization": re.compile(r"perform.*optimi|optimi.*perform", re.I),
    "memory leak": re.compile(r"memory[- ]?leak", re.I),
    "race condition": re.compile(r"race[- ]?condition", re.I),
    "async programming": re.compile(r"\basync|asynchronous[- ]?programm", re.I),
}

TOOL_CONCEPTS = {
    "version control": re.compile(r"\bgit\b|version[- ]?control|\bvcs\b", re.I),
    "containerization": re.compile(r"docker|container", re.I),
    "package management": re.compile(r"\b(npm|yarn|pnpm|pip|cargo)\b", re.I),
    "build system": re.compile(r"webpack|vite|rollup|build[- ]?system", re.I),
    "testing framework": re.compile(r"jest|vitest|mocha|pytest|testing[- ]?framework", re.I),
    "linting": re.compile(r"eslint|prettier|\blint", re.I),
    "deployment": re.compile(r"deploy|ci/cd|pipeline", re.I),
    "monitoring": re.compile(r"monitor|observab|telemetry", re.I),
}

# First matching category wins; anything else is General
CONCEPT_CATEGORIES = (
    ("Architecture", re.compile(r"design|pattern|architecture|structure|component", re.I)),
    ("Development", re.compile(r"develop|implement|build|create|code", re.I)),
    ("Testing", re.compile(r"test|quality|coverage|assertion", re.I)),
    ("Performance", re.compile(r"performance|optimi|speed|memory|efficient", re.I)),
    ("Security", re.compile(r"security|auth|encrypt|vulnerability|safe", re.I)),
    ("DevOps", re.compile(r"deploy|\bci\b|\bcd\b|pipeline|docker|kubernetes|container|monitor|version control", re.I)),
    ("Database", re.compile(r"database|query|schema|migration|orm", re.I)),
    ("Frontend", re.compile(r"\bui\b|\bux\b|component|react|vue|angular|state management", re.I)),
    ("Backend", re.compile(r"\bapi\b|server|backend|endpoint|middleware", re.I)),
)
GENERAL_CATEGORY = "General"


def concepts_in_text(text: str, code: bool = True, tools: bool = True) -> list[str]:
    found = []
    if code:
        found.extend(name for name, pattern in CODE_CONCEPTS.items() if pattern.search(text))
    if tools:
        found.extend(name for name, pattern in TOOL_CONCEPTS.items() if pattern.search(text))
    return found


def extract_concepts(
    conversations: Iterable[Conversation],
    min_occurrences: int = MIN_OCCURRENCES,
    max_concepts: int = MAX_CONCEPTS,
) -> tuple[ConceptEntry, ...]:
    """Concepts mentioned in at least ``min_occurrences`` conversations."""
    occurrences: dict[str, int] = {}
    conversation_ids: dict[str, list[str]] = {}

    for conversation in conversations:
        for concept in concepts_in_text(conversation.searchable_content):
            occurrences[concept] = occurrences.get(concept, 0) + 1
            ids = conversation_ids.setdefault(concept, [])
            if conversation.session_id not in ids:
                ids.append(conversation.session_id)

    entries = [
        ConceptEntry(
            concept=concept,
            related_terms=(),
            occurrences=count,
            conversation_ids=tuple(conversation_ids[concept]),
        )
        for concept, count in occurrences.items()
        if count >= min_occurrences
    ]
    entries.sort(key=lambda e: e.occurrences, reverse=True)
    return tuple(entries[:max_concepts])


def concept_category(concept: ConceptEntry) -> str:
    for category, pattern in CONCEPT_CATEGORIES:
        if pattern.search(concept.concept) or any(pattern.search(t) for t in concept.related_terms):
            return category
    return GENERAL_CATEGORY


def categorize_concepts(concepts: Iterable[ConceptEntry]) -> dict[str, list[ConceptEntry]]:
    """Group concepts by category, in first-seen category order."""
    categories: dict[str, list[ConceptEntry]] = {}
    for concept in concepts:
        categories.setdefault(concept_category(concept), []).append(concept)
    return categories


def key_topics(concepts: Iterable[ConceptEntry], limit: int = 10) -> list[str]:
    ranked = sorted(concepts, key=lambda c: c.occurrences, reverse=True)
    return [c.concept for c in ranked[:limit]]

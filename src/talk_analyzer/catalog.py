"""Technology vocabulary: detection patterns and term categories.

Both tables are plain data so they can be inspected and tested on their own.
Patterns run against lower-cased text; dict order is detection order.
"""

import re

from .models import TermCategory


def _patterns(table: dict[str, str]) -> dict[str, re.Pattern]:
    return {name: re.compile(pattern, re.IGNORECASE) for name, pattern in table.items()}


LANGUAGE_PATTERNS = _patterns(
    {
        "JavaScript": r"\b(javascript|js|ecmascript)\b",
        "TypeScript": r"\btypescript\b|\.ts\b",
        "Python": r"\bpython\b|\.py\b",
        "Java": r"\bjava\b(?!script)",
        "Rust": r"\brust\b|\.rs\b",
        "Go": r"\b(golang|go)\b|\.go\b",
        "C++": r"(?<![\w+])c\+\+(?![\w+])|\bcpp\b|\.cpp\b",
        "C#": r"(?<!\w)c#(?!\w)|\bcsharp\b|\.cs\b",
        "Ruby": r"\bruby\b|\.rb\b",
        "PHP": r"\bphp\b",
        "Swift": r"\bswift\b",
        "Kotlin": r"\bkotlin\b|\.kt\b",
        "Scala": r"\bscala\b",
        "Haskell": r"\bhaskell\b|\.hs\b",
        "Elixir": r"\belixir\b|\.ex\b",
    }
)

FRAMEWORK_PATTERNS = _patterns(
    {
        "React": r"\breact\b",
        "Vue": r"\bvue(\.js)?\b",
        "Angular": r"\bangular\b",
        "Svelte": r"\bsvelte\b",
        "Next.js": r"\bnext(\.js|js)?\b",
        "Nuxt": r"\bnuxt\b",
        "Express": r"\bexpress(\.js)?\b",
        "Fastify": r"\bfastify\b",
        "Koa": r"\bkoa\b",
        "Django": r"\bdjango\b",
        "Flask": r"\bflask\b",
        "Spring": r"\bspring\b",
        "Laravel": r"\blaravel\b",
        "Rails": r"\b(rails|ruby on rails)\b",
        "ASP.NET": r"\basp\.net\b",
        "Gin": r"\bgin\b",
        "Fiber": r"\bfiber\b",
    }
)

TOOL_PATTERNS = _patterns(
    {
        "Git": r"\bgit\b",
        "Docker": r"\bdocker\b",
        "Kubernetes": r"\b(kubernetes|k8s)\b",
        "npm": r"\bnpm\b",
        "yarn": r"\byarn\b",
        "pnpm": r"\bpnpm\b",
        "Webpack": r"\bwebpack\b",
        "Vite": r"\bvite\b",
        "Rollup": r"\brollup\b",
        "Jest": r"\bjest\b",
        "Vitest": r"\bvitest\b",
        "Mocha": r"\bmocha\b",
        "Cypress": r"\bcypress\b",
        "Playwright": r"\bplaywright\b",
        "ESLint": r"\beslint\b",
        "Prettier": r"\bprettier\b",
        "Babel": r"\bbabel\b",
    }
)

PLATFORM_PATTERNS = _patterns(
    {
        "Node.js": r"\bnode(\.js|js)?\b",
        "Browser": r"\b(browser|dom|window)\b",
        "AWS": r"\baws\b|amazon web services",
        "Azure": r"\bazure\b",
        "GCP": r"\b(gcp|google cloud)\b",
        "Vercel": r"\bvercel\b",
        "Netlify": r"\bnetlify\b",
        "Heroku": r"\bheroku\b",
    }
)

# (category attribute, cluster label prefix, patterns); platforms are detected only
TECH_CATEGORIES = (
    ("languages", "Language", LANGUAGE_PATTERNS),
    ("frameworks", "Framework", FRAMEWORK_PATTERNS),
    ("tools", "Tool", TOOL_PATTERNS),
    ("platforms", "Platform", PLATFORM_PATTERNS),
)
CLUSTERED_CATEGORIES = ("languages", "frameworks", "tools")

# Checked in this order when categorizing a word cloud term
TERM_CATEGORIES: tuple[tuple[TermCategory, frozenset[str]], ...] = (
    (
        "language",
        frozenset(
            {
                "javascript", "typescript", "python", "java", "rust", "go", "c++", "cpp",
                "c#", "csharp", "ruby", "php", "swift", "kotlin", "scala", "haskell",
                "elixir", "clojure", "dart", "lua",
            }
        ),
    ),
    (
        "framework",
        frozenset(
            {
                "react", "vue", "angular", "svelte", "next", "nextjs", "nuxt", "express",
                "fastify", "koa", "django", "flask", "spring", "laravel", "rails", "gin",
                "fiber", "actix",
            }
        ),
    ),
    (
        "tool",
        frozenset(
            {
                "git", "github", "gitlab", "docker", "kubernetes", "k8s", "npm", "yarn",
                "pnpm", "webpack", "vite", "rollup", "parcel", "jest", "vitest", "mocha",
                "cypress", "playwright", "eslint", "prettier", "typescript", "babel",
            }
        ),
    ),
    (
        "concept",
        frozenset(
            {
                "api", "rest", "graphql", "grpc", "websocket", "database", "sql", "nosql",
                "redis", "mongodb", "postgres", "http", "https", "json", "xml", "yaml",
                "authentication", "authorization", "jwt", "oauth", "testing",
                "deployment", "ci", "cd", "devops",
            }
        ),
    ),
)


def categorize_term(term: str) -> TermCategory | None:
    """First category whose keyword table contains ``term``."""
    lowered = term.lower()
    for category, keywords in TERM_CATEGORIES:
        if lowered in keywords:
            return category
    return None


def match_names(patterns: dict[str, re.Pattern], text: str) -> tuple[str, ...]:
    return tuple(name for name, pattern in patterns.items() if pattern.search(text))

"""Configuration for an analysis run.

Every stage receives its settings explicitly; nothing here is global state.
"""

import os
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Literal

DEFAULT_CLAUDE_DIR = Path.home() / ".claude"
DEFAULT_LLM_MODEL = "claude-sonnet-4-20250514"

LlmMode = Literal["off", "auto", "live"]


@dataclass(frozen=True)
class FrequencyConfig:
    """Word cloud and phrase extraction settings.

    ``min_frequency`` is compared against the TF-IDF weight of a word, and
    against the raw count of a phrase.
    """

    min_frequency: float = 2.0
    max_words: int = 100
    max_phrases: int = 100
    ngram_sizes: tuple[int, ...] = (2, 3)
    include_technical_terms: bool = True
    min_token_length: int = 2
    max_token_length: int = 50


@dataclass(frozen=True)
class HourlyActivityConfig:
    """Where to find history.jsonl and how much of it to read."""

    history_dir: Path | None = None
    lookback_days: int = 120
    max_history_records: int | None = 20000
    timezone: str | None = None


@dataclass(frozen=True)
class LlmConfig:
    """Optional Claude refinement of sentence patterns."""

    mode: LlmMode = "off"
    model: str = DEFAULT_LLM_MODEL
    max_sentences: int = 500
    max_tokens: int = 1024
    api_key: str | None = field(default=None, repr=False)


@dataclass(frozen=True)
class AnalysisConfig:
    """Settings for one ``analyze()`` call."""

    frequency: FrequencyConfig = field(default_factory=FrequencyConfig)
    hourly: HourlyActivityConfig = field(default_factory=HourlyActivityConfig)
    llm: LlmConfig = field(default_factory=LlmConfig)
    heatmap_days: int = 365
    count_tokens: bool = False
    now: datetime | None = None

    @classmethod
    def from_env(cls, **overrides) -> "AnalysisConfig":
        """Build a config, picking LLM settings up from the environment."""
        mode = os.environ.get("TALK_ANALYZER_LLM_MODE", "off").strip().lower()
        if mode not in ("off", "auto", "live"):
            mode = "off"
        llm = LlmConfig(
            mode=mode,
            model=os.environ.get("TALK_ANALYZER_LLM_MODEL", DEFAULT_LLM_MODEL),
            api_key=os.environ.get("ANTHROPIC_API_KEY"),
        )
        overrides.setdefault("llm", llm)
        return cls(**overrides)

"""What a report may reveal, and which conversations it covers."""

from collections.abc import Sequence
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum

from .hourly import as_aware
from .models import Conversation

DEFAULT_WATERMARK = "Generated by talk-analyzer"


class PrivacyLevel(str, Enum):
    PUBLIC = "public"
    HIGH_PRIVACY = "high_privacy"
    PRIVATE = "private"


@dataclass(frozen=True)
class ContentSelection:
    """Filters applied to the corpus before analysis. Empty means no filter."""

    include_conversation_ids: frozenset[str] = frozenset()
    exclude_conversation_ids: frozenset[str] = frozenset()
    include_projects: frozenset[str] = frozenset()
    exclude_projects: frozenset[str] = frozenset()
    date_start: datetime | None = None
    date_end: datetime | None = None

    def accepts(self, conversation: Conversation) -> bool:
        if self.include_conversation_ids and conversation.session_id not in self.include_conversation_ids:
            return False
        if conversation.session_id in self.exclude_conversation_ids:
            return False
        project = conversation.project_name
        if self.include_projects and project not in self.include_projects:
            return False
        if project in self.exclude_projects:
            return False
        started = as_aware(conversation.started_at)
        if self.date_start is not None and started < as_aware(self.date_start):
            return False
        if self.date_end is not None and started > as_aware(self.date_end):
            return False
        return True


@dataclass(frozen=True)
class PrivacySettings:
    level: PrivacyLevel = PrivacyLevel.HIGH_PRIVACY
    content_selection: ContentSelection = field(default_factory=ContentSelection)
    anonymize_project_names: bool = True
    anonymize_paths: bool = True
    include_samples: bool = False
    watermark: str = DEFAULT_WATERMARK

    @classmethod
    def for_level(cls, level: PrivacyLevel | str) -> "PrivacySettings":
        """Preset for a privacy level.

        public shares project names and samples, high_privacy aliases
        projects and hides samples, private also drops project names from
        shared output entirely.
        """
        level = PrivacyLevel(level)
        match level:
            case PrivacyLevel.PUBLIC:
                return cls(level=level, anonymize_project_names=False, anonymize_paths=False, include_samples=True)
            case PrivacyLevel.HIGH_PRIVACY:
                return cls(level=level)
            case PrivacyLevel.PRIVATE:
                return cls(level=level, watermark="")


def apply_content_selection(
    conversations: Sequence[Conversation], settings: PrivacySettings | None
) -> list[Conversation]:
    if settings is None:
        return list(conversations)
    selection = settings.content_selection
    return [c for c in conversations if selection.accepts(c)]

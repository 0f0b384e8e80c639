"""Parser for Claude session transcripts (projects/*/*.jsonl)."""

import json
from datetime import datetime, timezone
from pathlib import Path

from .logging_config import get_logger
from .models import AssistantMessage, Conversation, Message, ToolInvocation, UserMessage

logger = get_logger(__name__)


def decode_project_dir(name: str) -> str:
    """Best-effort project path from an encoded directory name.

    Claude stores ``/Users/me/app`` as ``-Users-me-app``; dashes inside the
    original names cannot be told apart, so ``cwd`` is preferred when present.
    """
    return "/" + name.lstrip("-").replace("-", "/")


def parse_timestamp(value) -> datetime | None:
    """ISO-8601 string to an aware datetime; naive values are taken as UTC."""
    if not isinstance(value, str) or not value:
        return None
    try:
        parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def user_content(content) -> str | None:
    """Text of a user turn; None for turns that only carry tool results."""
    if isinstance(content, str):
        return content
    if not isinstance(content, list):
        return ""
    if content and all(isinstance(item, dict) and item.get("type") == "tool_result" for item in content):
        return None

    parts = []
    for item in content:
        if not isinstance(item, dict):
            continue
        if item.get("type") == "text" and item.get("text"):
            parts.append(item["text"])
        elif item.get("type") == "image":
            parts.append("[Image attached]")
    return "\n".join(parts)


def assistant_content(content) -> tuple[str, tuple[ToolInvocation, ...]]:
    """Text and tool invocations of an assistant turn."""
    if isinstance(content, str):
        return content, ()
    if not isinstance(content, list):
        return "", ()

    parts = []
    tools = []
    for item in content:
        if not isinstance(item, dict):
            continue
        match item.get("type"):
            case "text":
                if item.get("text"):
                    parts.append(item["text"])
            case "tool_use":
                tool_input = item.get("input")
                tools.append(
                    ToolInvocation(
                        name=str(item.get("name") or "unknown"),
                        input=tool_input if isinstance(tool_input, dict) else {},
                    )
                )
            case "thinking":
                continue
            case other:
                parts.append(f"[{other}: {item['text']}]" if item.get("text") else f"[{other} content]")
    return "\n".join(parts), tuple(tools)


def parse_entry(data: dict) -> Message | None:
    """One transcript line as a message, or None when it is not a chat turn."""
    if not isinstance(data.get("uuid"), str) or not data["uuid"]:
        return None
    timestamp = parse_timestamp(data.get("timestamp"))
    if timestamp is None:
        return None
    message = data.get("message")
    if not isinstance(message, dict):
        return None

    match data.get("type"):
        case "user":
            text = user_content(message.get("content"))
            if text is None:
                return None
            return UserMessage(content=text, timestamp=timestamp)
        case "assistant":
            text, tools = assistant_content(message.get("content"))
            return AssistantMessage(
                content=text,
                timestamp=timestamp,
                tool_invocations=tools,
                model=message.get("model"),
            )
    return None


def parse_session_file(filepath: Path) -> Conversation | None:
    """Parse one session file. Returns None when it holds no chat turns."""
    messages: list[Message] = []
    project_path = None
    skipped = 0

    with filepath.open(encoding="utf-8", errors="replace") as f:
        for line in f:
            line = line.strip()
            if not line:
                continue
            try:
                data = json.loads(line)
            except json.JSONDecodeError:
                skipped += 1
                continue
            if not isinstance(data, dict):
                skipped += 1
                continue
            if project_path is None and isinstance(data.get("cwd"), str) and data["cwd"]:
                project_path = data["cwd"]
            message = parse_entry(data)
            if message is not None:
                messages.append(message)

    if skipped:
        logger.debug("Skipped %d malformed lines in %s", skipped, filepath)
    if not messages:
        return None

    messages.sort(key=lambda m: m.timestamp)
    return Conversation(
        session_id=filepath.stem,
        project_path=project_path or decode_project_dir(filepath.parent.name),
        started_at=messages[0].timestamp,
        messages=tuple(messages),
    )


def discover_session_files(projects_dir: Path) -> list[Path]:
    """Session files under every non-hidden project directory, sorted per project."""
    files: list[Path] = []
    for project_dir in sorted(projects_dir.iterdir()):
        if project_dir.is_dir() and not project_dir.name.startswith("."):
            files.extend(sorted(project_dir.glob("*.jsonl")))
    return files


def parse_directory(claude_dir: Path) -> list[Conversation]:
    """Parse every session under ``claude_dir/projects``, oldest first."""
    projects_dir = Path(claude_dir) / "projects"
    if not projects_dir.is_dir():
        logger.warning("No projects directory at %s", projects_dir)
        return []

    conversations = []
    for filepath in discover_session_files(projects_dir):
        try:
            conversation = parse_session_file(filepath)
        except (OSError, UnicodeDecodeError) as e:
            logger.warning("Error parsing %s: %s", filepath, e)
            continue
        if conversation is not None:
            conversations.append(conversation)

    conversations.sort(key=lambda c: c.started_at)
    logger.info("Loaded %d conversations from %s", len(conversations), projects_dir)
    return conversations

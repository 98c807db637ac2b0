"""Readers for AI coding-session logs stored as JSONL files."""

import json
import logging
from datetime import datetime
from pathlib import Path
from typing import Any

from ..models import DateRange, WorkItem
from ..utils.dates import is_within_range, parse_timestamp
from .base import SourceReader

logger = logging.getLogger(__name__)

MAX_TITLE_CHARS = 200


def _text_from_content(content: Any) -> str:
    """Plain text from a message body that is a string or a list of parts."""
    if isinstance(content, str):
        return content
    if isinstance(content, list):
        parts = []
        for part in content:
            if isinstance(part, dict) and part.get("type") in ("text", "input_text", None):
                text = part.get("text")
                if isinstance(text, str):
                    parts.append(text)
            elif isinstance(part, str):
                parts.append(part)
        return "\n".join(parts)
    return ""


def extract_user_message(record: dict[str, Any]) -> tuple[datetime, str] | None:
    """Pull (timestamp, text) out of one log record if it is a user message.

    Handles the flat ``{role, content, timestamp}`` shape as well as records
    that nest the message under ``message`` or ``payload``.
    """
    raw_ts = record.get("timestamp")
    message = record
    for key in ("message", "payload"):
        nested = record.get(key)
        if isinstance(nested, dict) and "role" in nested:
            message = nested
            raw_ts = raw_ts or nested.get("timestamp")
            break

    if message.get("role") != "user" or not isinstance(raw_ts, str):
        return None

    text = _text_from_content(message.get("content")).strip()
    if not text:
        return None

    try:
        return parse_timestamp(raw_ts), text
    except ValueError:
        return None


def first_timestamp(record: dict[str, Any]) -> datetime | None:
    raw_ts = record.get("timestamp")
    if not isinstance(raw_ts, str):
        return None
    try:
        return parse_timestamp(raw_ts)
    except ValueError:
        return None


class SessionLogReader(SourceReader):
    """One work item per session file that started inside the date range."""

    def __init__(self, name: str, label: str):
        self.name = name
        self.label = label

    def read(self, date_range: DateRange, config: dict[str, Any]) -> list[WorkItem]:
        root = Path(config.get("paths", {}).get(self.name, "")).expanduser()
        if not root.is_dir():
            logger.debug(f"{self.name}: session directory {root} not found")
            return []

        items = []
        for file_path in sorted(root.rglob("*.jsonl")):
            item = self.parse_session_file(file_path, date_range)
            if item:
                items.append(item)
        return sorted(items, key=lambda i: i.timestamp)

    def parse_session_file(self, file_path: Path, date_range: DateRange) -> WorkItem | None:
        """Summarize a single JSONL session log."""
        try:
            lines = file_path.read_text(encoding="utf-8", errors="replace").splitlines()
        except OSError as e:
            logger.warning(f"{self.name}: could not read {file_path}: {e}")
            return None

        session_start: datetime | None = None
        user_messages: list[str] = []

        for line in lines:
            if not line.strip():
                continue
            try:
                record = json.loads(line)
            except json.JSONDecodeError:
                continue
            if not isinstance(record, dict):
                continue

            if session_start is None:
                session_start = first_timestamp(record)

            message = extract_user_message(record)
            if message is None:
                continue
            timestamp, text = message
            if session_start is None:
                session_start = timestamp
            if is_within_range(timestamp, date_range):
                user_messages.append(text.split("\n")[0][:MAX_TITLE_CHARS])

        if session_start is None or not user_messages or not is_within_range(session_start, date_range):
            return None

        return WorkItem(
            source=self.name,
            timestamp=session_start,
            title=f"{self.label} session: {user_messages[0]}",
            description=f"{len(user_messages)} interactions" if len(user_messages) > 1 else None,
            metadata={"session_file": file_path.name, "message_count": len(user_messages)},
        )

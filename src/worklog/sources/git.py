"""Git commit reader."""

import logging
import subprocess
from pathlib import Path
from typing import Any

from ..models import DateRange, WorkItem
from ..utils.dates import is_within_range, parse_timestamp
from .base import SourceReader

logger = logging.getLogger(__name__)

FIELD_SEP = "\x1f"
RECORD_SEP = "\x1e"
LOG_FORMAT = f"%H{FIELD_SEP}%aI{FIELD_SEP}%s{FIELD_SEP}%b{RECORD_SEP}"


def parse_git_log(output: str, repo: str) -> list[WorkItem]:
    """Turn ``git log`` output in LOG_FORMAT into work items."""
    repo_name = Path(repo).name
    items = []

    for record in output.split(RECORD_SEP):
        record = record.strip("\n")
        if not record.strip():
            continue
        fields = record.split(FIELD_SEP)
        if len(fields) < 3:
            logger.debug(f"Skipping malformed git log record in {repo}: {record[:80]!r}")
            continue
        commit_hash, authored, subject = fields[0], fields[1], fields[2]
        body = fields[3].strip() if len(fields) > 3 else ""
        try:
            timestamp = parse_timestamp(authored)
        except ValueError:
            logger.debug(f"Bad commit date {authored!r} in {repo}")
            continue

        items.append(WorkItem(
            source="git",
            timestamp=timestamp,
            title=f"[{repo_name}] {subject.strip()}",
            description=body.splitlines()[0] if body else None,
            metadata={"repo": repo, "hash": commit_hash[:7]},
        ))

    return items


class GitReader(SourceReader):
    """Reads commits from the repositories listed in ``git_repos``."""

    name = "git"

    def read(self, date_range: DateRange, config: dict[str, Any]) -> list[WorkItem]:
        items: list[WorkItem] = []
        for repo in config.get("git_repos") or []:
            items.extend(self._read_repo(repo, date_range, config.get("git_author")))
        return sorted(items, key=lambda i: i.timestamp)

    def _read_repo(self, repo: str, date_range: DateRange, author: str | None) -> list[WorkItem]:
        cmd = [
            "git", "-C", repo, "log", "--all", "--no-merges",
            f"--since={date_range.start.isoformat()}",
            f"--until={date_range.end.isoformat()}",
            f"--pretty=format:{LOG_FORMAT}",
        ]
        if author:
            cmd.append(f"--author={author}")

        try:
            result = subprocess.run(cmd, capture_output=True, text=True, check=True)
        except subprocess.CalledProcessError as e:
            logger.warning(f"git log failed for {repo} (exit {e.returncode}): {e.stderr.strip()}")
            return []
        except FileNotFoundError:
            logger.warning("git not found on PATH")
            return []

        return [i for i in parse_git_log(result.stdout, repo) if is_within_range(i.timestamp, date_range)]

"""GitHub activity reader backed by the ``gh`` CLI."""

import json
import logging
import subprocess
from typing import Any

from ..models import DateRange, WorkItem
from ..utils.dates import is_within_range, parse_timestamp
from .base import SourceReader

logger = logging.getLogger(__name__)


def parse_paginated_json(output: str) -> list[dict[str, Any]]:
    """Decode ``gh api --paginate`` output, which concatenates one array per page."""
    decoder = json.JSONDecoder()
    events: list[dict[str, Any]] = []
    pos = 0
    output = output.strip()

    while pos < len(output):
        page, end = decoder.raw_decode(output, pos)
        if isinstance(page, list):
            events.extend(page)
        else:
            events.append(page)
        pos = end
        while pos < len(output) and output[pos].isspace():
            pos += 1

    return events


def event_to_work_item(event: dict[str, Any]) -> WorkItem | None:
    """Convert one GitHub event into a work item, or None for ignored types."""
    try:
        timestamp = parse_timestamp(event["created_at"])
        repo = event["repo"]["name"]
    except (KeyError, TypeError, ValueError):
        return None

    payload = event.get("payload") or {}
    event_type = event.get("type")

    if event_type == "PushEvent":
        commits = payload.get("commits") or []
        if not commits:
            return None
        first = (commits[0].get("message") or "Push").split("\n")[0]
        return WorkItem(
            source="github",
            timestamp=timestamp,
            title=f"[{repo}] Push: {first}",
            description=f"{len(commits)} commits" if len(commits) > 1 else None,
            metadata={"type": "push", "repo": repo, "commit_count": len(commits)},
        )

    if event_type == "PullRequestEvent":
        pr = payload.get("pull_request")
        if not pr:
            return None
        action = payload.get("action") or "updated"
        return WorkItem(
            source="github",
            timestamp=timestamp,
            title=f"[{repo}] PR #{pr['number']} {action}: {pr['title']}",
            metadata={"type": "pr", "repo": repo, "number": pr["number"], "action": action},
        )

    if event_type == "IssuesEvent":
        issue = payload.get("issue")
        if not issue:
            return None
        action = payload.get("action") or "updated"
        return WorkItem(
            source="github",
            timestamp=timestamp,
            title=f"[{repo}] Issue #{issue['number']} {action}: {issue['title']}",
            metadata={"type": "issue", "repo": repo, "number": issue["number"], "action": action},
        )

    if event_type == "PullRequestReviewEvent":
        pr = payload.get("pull_request")
        review = payload.get("review")
        if not pr or not review:
            return None
        return WorkItem(
            source="github",
            timestamp=timestamp,
            title=f"[{repo}] Reviewed PR #{pr['number']}: {pr['title']}",
            description=f"Review: {review.get('state', 'commented')}",
            metadata={"type": "review", "repo": repo, "number": pr["number"], "state": review.get("state")},
        )

    if event_type == "IssueCommentEvent":
        issue = payload.get("issue")
        if not issue:
            return None
        return WorkItem(
            source="github",
            timestamp=timestamp,
            title=f"[{repo}] Commented on #{issue['number']}: {issue['title']}",
            metadata={"type": "comment", "repo": repo, "number": issue["number"]},
        )

    return None


class GitHubReader(SourceReader):
    """Reads the public event feed of ``github_user``."""

    name = "github"

    def read(self, date_range: DateRange, config: dict[str, Any]) -> list[WorkItem]:
        user = config.get("github_user")
        if not user:
            logger.debug("No github_user configured, skipping GitHub")
            return []

        cmd = ["gh", "api", f"/users/{user}/events", "--paginate"]
        try:
            result = subprocess.run(cmd, capture_output=True, text=True, check=True)
        except subprocess.CalledProcessError as e:
            logger.warning(f"gh api failed (exit {e.returncode}): {e.stderr.strip()}")
            return []
        except FileNotFoundError:
            logger.warning("gh CLI not found on PATH")
            return []

        try:
            events = parse_paginated_json(result.stdout)
        except json.JSONDecodeError as e:
            logger.warning(f"Could not decode GitHub events: {e}")
            return []

        items = []
        for event in events:
            item = event_to_work_item(event)
            if item and is_within_range(item.timestamp, date_range):
                items.append(item)
        return sorted(items, key=lambda i: i.timestamp)

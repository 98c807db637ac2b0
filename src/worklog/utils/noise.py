"""Filter out work items that carry no real work signal."""

import re
from typing import Iterable

from ..models import WorkItem

REQUEST_INTERRUPTED_BY_USER = re.compile(r"request interrupted by user", re.IGNORECASE)


def is_noise_work_item(item: WorkItem) -> bool:
    """True when the title or description is an interrupted-request marker."""
    if REQUEST_INTERRUPTED_BY_USER.search(item.title):
        return True
    if item.description and REQUEST_INTERRUPTED_BY_USER.search(item.description):
        return True
    return False


def filter_noise_work_items(items: Iterable[WorkItem]) -> list[WorkItem]:
    return [item for item in items if not is_noise_work_item(item)]

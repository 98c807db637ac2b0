"""Abstract base class for activity source readers."""

from abc import ABC, abstractmethod
from typing import Any

from ..models import DateRange, WorkItem


class SourceReader(ABC):
    """Common interface for anything that yields work items for a date range."""

    name: str = ""

    @abstractmethod
    def read(self, date_range: DateRange, config: dict[str, Any]) -> list[WorkItem]:
        """Return work items inside ``date_range``, sorted by timestamp."""

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.name!r})"

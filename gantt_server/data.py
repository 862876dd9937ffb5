# data.py
"""Task record and the default collection seeded on first run."""
from __future__ import annotations

from dataclasses import dataclass
from datetime import date, timedelta
from typing import Any, Dict, List, Mapping, Optional

DATE_FORMAT = "%Y-%m-%d"


def _require_int(raw: Mapping[str, Any], key: str) -> int:
    value = raw[key]
    if isinstance(value, bool) or not isinstance(value, int):
        raise TypeError(f"{key!r} must be an integer, got {value!r}")
    return value


def _require_str(raw: Mapping[str, Any], key: str) -> str:
    value = raw[key]
    if not isinstance(value, str):
        raise TypeError(f"{key!r} must be a string, got {value!r}")
    return value


@dataclass
class Task:
    """One bar on the Gantt chart.

    ``duration_days`` travels as ``durationDays`` on the wire and in storage.
    """

    id: int
    name: str
    start: str
    duration_days: int
    color: str
    priority: int

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "start": self.start,
            "durationDays": self.duration_days,
            "color": self.color,
            "priority": self.priority,
        }

    @classmethod
    def from_dict(cls, raw: Mapping[str, Any]) -> "Task":
        """Build a task from its stored mapping.

        Raises KeyError for a missing field and TypeError for a field of the
        wrong type.
        """
        if not isinstance(raw, Mapping):
            raise TypeError(f"task must be an object, got {type(raw).__name__}")
        return cls(
            id=_require_int(raw, "id"),
            name=_require_str(raw, "name"),
            start=_require_str(raw, "start"),
            duration_days=_require_int(raw, "durationDays"),
            color=_require_str(raw, "color"),
            priority=_require_int(raw, "priority"),
        )


def default_tasks(today: Optional[date] = None) -> List[Task]:
    """Five sample tasks anchored at January 1st of next year."""
    today = today or date.today()
    start = date(today.year + 1, 1, 1)

    def day(offset: int) -> str:
        return (start + timedelta(days=offset)).strftime(DATE_FORMAT)

    # P1 red, P2 orange, P3 amber, P4 blue, P5 green
    return [
        Task(1, "Requirements gathering", day(0), 7, "#3B82F6", 4),
        Task(2, "System design", day(7), 5, "#F97316", 2),
        Task(3, "Backend development", day(12), 12, "#EF4444", 1),
        Task(4, "Frontend development", day(12), 10, "#FBBF24", 3),
        Task(5, "Integration testing", day(24), 8, "#10B981", 5),
    ]

# src/task_cli/tasks/task_models.py

from __future__ import annotations

import re
from dataclasses import dataclass, field
from datetime import date, datetime, timezone
from enum import StrEnum
from typing import Any

from ..errors import TaskValidationError

DEFAULT_CATEGORY = "General"

CATEGORIES: tuple[str, ...] = (
    "General",
    "Work",
    "Personal",
    "Shopping",
    "Health",
    "Learning",
    "Finance",
    "Projects",
)

_DUE_DATE_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")


class Priority(StrEnum):
    """
    Task priority, declared from most to least urgent.

    Declaration order is the sort order (see `rank`).
    """

    URGENT = "urgent"
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"

    @property
    def rank(self) -> int:
        return _PRIORITY_RANK[self]

    @classmethod
    def parse(cls, raw: str | Priority) -> Priority:
        try:
            return cls(str(raw).strip().lower())
        except ValueError:
            allowed = ", ".join(p.value for p in cls)
            raise TaskValidationError(f"Unknown priority {raw!r} (expected one of: {allowed})") from None

    @classmethod
    def from_json(cls, raw: Any) -> Priority:
        if not raw:
            return cls.MEDIUM
        try:
            return cls(str(raw))
        except ValueError:
            return cls.MEDIUM


_PRIORITY_RANK: dict[Priority, int] = {p: i for i, p in enumerate(Priority)}


def utc_now_iso() -> str:
    """Current UTC time as `2024-03-01T12:00:00.000Z`."""
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def parse_timestamp(raw: str | None) -> datetime | None:
    if not raw:
        return None
    try:
        dt = datetime.fromisoformat(raw.replace("Z", "+00:00"))
    except ValueError:
        return None
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt


def parse_due_date(raw: str | None) -> date | None:
    """Parse a stored `YYYY-MM-DD` due date; anything else reads as no date."""
    if not isinstance(raw, str) or not _DUE_DATE_RE.match(raw):
        return None
    try:
        return date.fromisoformat(raw)
    except ValueError:
        return None


def normalize_due_date(raw: str | None) -> str | None:
    """Validate user input for a due date. Empty means "no due date"."""
    if raw is None:
        return None
    value = raw.strip()
    if not value:
        return None
    if parse_due_date(value) is None:
        raise TaskValidationError(f"Invalid due date {raw!r} (expected YYYY-MM-DD)")
    return value


@dataclass(slots=True)
class Task:
    id: str
    title: str
    description: str = ""
    priority: Priority = Priority.MEDIUM
    category: str = DEFAULT_CATEGORY
    due_date: str | None = None
    completed: bool = False
    completed_at: str | None = None
    created_at: str = ""
    tags: list[str] = field(default_factory=list)

    def set_completed(self, completed: bool) -> None:
        """Flip completion, keeping `completed_at` in step with it."""
        if completed and not self.completed:
            self.completed_at = utc_now_iso()
        elif not completed:
            self.completed_at = None
        self.completed = completed

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "description": self.description,
            "priority": self.priority.value,
            "category": self.category,
            "dueDate": self.due_date,
            "completed": self.completed,
            "completedAt": self.completed_at,
            "createdAt": self.created_at,
            "tags": list(self.tags),
        }

    @classmethod
    def from_dict(cls, raw: dict[str, Any]) -> Task:
        """
        Build a Task from a stored record, coercing hand-edited values.

        `completedAt` is kept only on completed tasks; a completed record
        without one takes its `createdAt` (or now).
        """
        completed = raw.get("completed") is True
        created_at = raw.get("createdAt")
        created_at = created_at if isinstance(created_at, str) else ""
        completed_at = raw.get("completedAt")
        if not completed:
            completed_at = None
        elif not isinstance(completed_at, str) or not completed_at:
            completed_at = created_at or utc_now_iso()
        due = raw.get("dueDate")
        tags = raw.get("tags") or []
        return cls(
            id=str(raw["id"]),
            title=str(raw.get("title") or ""),
            description=str(raw.get("description") or ""),
            priority=Priority.from_json(raw.get("priority")),
            category=str(raw.get("category") or DEFAULT_CATEGORY),
            due_date=due if isinstance(due, str) and due else None,
            completed=completed,
            completed_at=completed_at,
            created_at=created_at,
            tags=[str(t) for t in tags] if isinstance(tags, list) else [],
        )


@dataclass(slots=True)
class TaskStats:
    total: int
    completed: int
    pending: int
    completion_rate: int
    by_priority: dict[Priority, int]
    categories: dict[str, int]

# src/task_cli/ui/render.py

"""Display helpers: tasks and stats in, plain text lines out. No state."""

from __future__ import annotations

from collections.abc import Sequence

from ..tasks.task_models import Priority, Task, TaskStats, parse_timestamp

RULE = "─"
PRIORITY_DOT = "●"
DONE_MARK = "✓"
PENDING_MARK = "○"


def _truncate(text: str, width: int) -> str:
    return text[:width]


def status_mark(task: Task) -> str:
    return DONE_MARK if task.completed else PENDING_MARK


def priority_label(priority: Priority) -> str:
    return f"{PRIORITY_DOT} {priority.value.capitalize()}"


def priority_options() -> list[str]:
    return [priority_label(p) for p in Priority]


def format_due(due_date: str | None) -> str:
    return due_date or "-"


def format_created(created_at: str) -> str:
    """`2024-03-01T12:05:00.000Z` -> `Mar 1, 12:05` (local time)."""
    dt = parse_timestamp(created_at)
    if dt is None:
        return created_at or "-"
    dt = dt.astimezone()
    return f"{dt:%b} {dt.day}, {dt:%H:%M}"


def task_option(task: Task, width: int = 28) -> str:
    """Menu row for a task: `○ Pay rent | ● urgent | Finance`."""
    return f"{status_mark(task)} {_truncate(task.title, width)} | {PRIORITY_DOT} {task.priority} | {task.category}"


def pending_option(task: Task, width: int = 35) -> str:
    return f"{PRIORITY_DOT} {_truncate(task.title, width)} | {task.category}"


def task_table(tasks: Sequence[Task]) -> list[str]:
    if not tasks:
        return ["", "  No tasks", ""]

    lines = ["", "  Tasks", "", "  " + RULE * 60]
    for i, task in enumerate(tasks, start=1):
        lines.append(f"  {i}. {status_mark(task)} {_truncate(task.title, 35)}")
        lines.append(
            f"      {PRIORITY_DOT} {task.priority}  |  {task.category}  |  {format_due(task.due_date)}"
        )
    lines.extend(["  " + RULE * 60, ""])
    return lines


def task_detail(task: Task) -> list[str]:
    status = "Completed" if task.completed else "Pending"
    lines = [
        "",
        "  Task Details",
        "  " + RULE * 25,
        "",
        f"  Title:    {task.title}",
        f"  Status:   {status}",
        f"  Priority: {PRIORITY_DOT} {task.priority.value.upper()}",
        f"  Category: {task.category}",
        f"  Due:      {format_due(task.due_date)}",
    ]
    if task.description:
        lines.append(f"  Desc:     {task.description}")
    if task.tags:
        lines.append(f"  Tags:     {', '.join(task.tags)}")
    lines.extend(
        [
            "",
            f"  ID: {task.id[:8]}  |  Created: {format_created(task.created_at)}",
            "  " + RULE * 25,
            "",
        ]
    )
    return lines


def stats_lines(stats: TaskStats) -> list[str]:
    lines = [
        "",
        "  Statistics",
        "  " + RULE * 20,
        "",
        f"  Total:     {stats.total}",
        f"  Completed: {stats.completed}",
        f"  Pending:   {stats.pending}",
        f"  Rate:      {stats.completion_rate}%",
        "",
        "  By Priority:",
    ]
    for p in Priority:
        label = f"{p.value.capitalize()}:"
        lines.append(f"    {PRIORITY_DOT} {label:<8} {stats.by_priority.get(p, 0)}")

    if stats.categories:
        lines.extend(["", "  By Category:"])
        for name, count in stats.categories.items():
            lines.append(f"    ▸ {name}: {count}")
    lines.append("")
    return lines


def help_lines() -> list[str]:
    return [
        "",
        "  Help",
        "  " + RULE * 15,
        "",
        "  ↑↓ navigate   Navigate menu",
        "  ↵ select     Select / Confirm",
        "  ⎵ toggle     Toggle selection",
        "  esc cancel   Go back / Cancel",
        "",
        "  Commands:",
        "  List         View all tasks",
        "  Add          Create new task",
        "  Complete     Mark task done",
        "  Edit         Modify task",
        "  Delete       Remove task",
        "  Search       Find tasks",
        "  Stats        View statistics",
        "",
    ]


def welcome_lines(app_name: str = "task-cli") -> list[str]:
    title = app_name.upper()
    inner = 35
    return [
        "",
        "  ╔" + "═" * inner + "╗",
        "  ║" + title.center(inner) + "║",
        "  ║" + "Your smart task manager".center(inner) + "║",
        "  ╚" + "═" * inner + "╝",
        "",
    ]


def success(message: str) -> str:
    return f"  {DONE_MARK} {message}"


def error(message: str) -> str:
    return f"  ✗ {message}"

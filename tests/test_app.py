# tests/test_app.py

from __future__ import annotations

import io

import pytest

from task_cli.cli.app import TaskApp
from task_cli.core.state import AppState
from task_cli.errors import TaskStorageError
from task_cli.tasks.task_models import Priority
from task_cli.tasks.task_store import TaskStore
from task_cli.ui.engine import PromptEngine
from task_cli.ui.keys import Key

from .fakes import ScriptedPrompts

ANY = ["x"]
RETURN = [Key.RETURN]


def menu(index: int) -> list[str]:
    return [Key.DOWN] * index + [Key.RETURN]


@pytest.mark.asyncio
async def test_add_task_flow(state: AppState, prompts: ScriptedPrompts, store: TaskStore) -> None:
    prompts.keys(ANY, menu(1), menu(0), menu(6))  # welcome, Add Task, Urgent, Finance
    prompts.answers("Pay rent", "2024-03-01", "monthly", "")

    await TaskApp(state).run()

    tasks = store.get_all()
    assert len(tasks) == 1
    t = tasks[0]
    assert t.title == "Pay rent"
    assert t.priority is Priority.URGENT
    assert t.category == "Finance"
    assert t.due_date == "2024-03-01"
    assert t.description == "monthly"
    assert "Created!" in prompts.text
    assert prompts.titles[:4] == ["Press any key to continue...", "Main Menu", "Priority", "Category"]


@pytest.mark.asyncio
async def test_add_with_empty_title_is_rejected(state: AppState, prompts: ScriptedPrompts, store: TaskStore) -> None:
    prompts.keys(ANY, menu(1))
    prompts.answers("   ", "")

    await TaskApp(state).run()

    assert store.get_all() == []
    assert "✗ Title required" in prompts.text


@pytest.mark.asyncio
async def test_add_with_bad_due_date_reports_and_returns_to_menu(
    state: AppState, prompts: ScriptedPrompts, store: TaskStore
) -> None:
    prompts.keys(ANY, menu(1), RETURN, RETURN)
    prompts.answers("Dentist", "next week", "", "")

    await TaskApp(state).run()

    assert store.get_all() == []
    assert "expected YYYY-MM-DD" in prompts.text
    # back at the main menu after the error
    assert prompts.titles.count("Main Menu") == 2


@pytest.mark.asyncio
async def test_cancelled_main_menu_shows_it_again(state: AppState, prompts: ScriptedPrompts) -> None:
    prompts.keys(ANY, [Key.ESCAPE], menu(9))

    await TaskApp(state).run()

    assert prompts.titles == ["Press any key to continue...", "Main Menu", "Main Menu"]
    assert "Goodbye!" in prompts.text


@pytest.mark.asyncio
async def test_exit_stops_without_pause(state: AppState, prompts: ScriptedPrompts) -> None:
    prompts.keys(ANY, menu(9))

    await TaskApp(state).run()

    assert prompts.asked == []
    assert "Goodbye!" in prompts.text


@pytest.mark.asyncio
async def test_complete_selected_tasks(state: AppState, prompts: ScriptedPrompts, store: TaskStore) -> None:
    a = store.add(title="a")
    b = store.add(title="b")
    c = store.add(title="c")
    prompts.keys(ANY, menu(2), [Key.SPACE, Key.DOWN, Key.DOWN, Key.SPACE, Key.RETURN])
    prompts.answers("")

    await TaskApp(state).run()

    assert store.get_by_id(a.id).completed is True
    assert store.get_by_id(b.id).completed is False
    assert store.get_by_id(c.id).completed is True
    assert "2 completed" in prompts.text


@pytest.mark.asyncio
async def test_delete_needs_confirmation(state: AppState, prompts: ScriptedPrompts, store: TaskStore) -> None:
    store.add(title="keep me")
    prompts.keys(ANY, menu(4), [Key.SPACE, Key.RETURN], [Key.DOWN, Key.RETURN])
    prompts.answers("")

    await TaskApp(state).run()

    assert [t.title for t in store.get_all()] == ["keep me"]


@pytest.mark.asyncio
async def test_delete_confirmed(state: AppState, prompts: ScriptedPrompts, store: TaskStore) -> None:
    store.add(title="low one", priority="low")
    urgent = store.add(title="urgent one", priority="urgent")
    # list is sorted by priority, so index 1 is the low task
    prompts.keys(ANY, menu(4), [Key.DOWN, Key.SPACE, Key.RETURN], RETURN)
    prompts.answers("")

    await TaskApp(state).run()

    assert [t.id for t in store.get_all()] == [urgent.id]
    assert "1 deleted" in prompts.text


@pytest.mark.asyncio
async def test_edit_keeps_values_for_empty_answers(state: AppState, prompts: ScriptedPrompts, store: TaskStore) -> None:
    task = store.add(title="Old", description="desc", category="Work", due_date="2024-01-01")
    prompts.keys(ANY, menu(3), RETURN, menu(1), [Key.ESCAPE])  # pick task, High, keep category
    prompts.answers("New", "", "", "")

    await TaskApp(state).run()

    edited = store.get_by_id(task.id)
    assert edited.title == "New"
    assert edited.priority is Priority.HIGH
    assert edited.category == "Work"
    assert edited.due_date == "2024-01-01"
    assert edited.description == "desc"
    assert edited.created_at == task.created_at
    assert "Updated!" in prompts.text


@pytest.mark.asyncio
async def test_search_lists_matches(state: AppState, prompts: ScriptedPrompts, store: TaskStore) -> None:
    store.add(title="Pay rent", category="Finance")
    store.add(title="Walk")
    prompts.keys(ANY, menu(6))
    prompts.answers("RENT", "")

    await TaskApp(state).run()

    assert "1 result(s)" in prompts.text
    assert "Pay rent" in prompts.text
    assert "Walk" not in prompts.text


@pytest.mark.asyncio
async def test_clear_completed_flow(state: AppState, prompts: ScriptedPrompts, store: TaskStore) -> None:
    store.toggle_complete(store.add(title="done").id)
    pending = store.add(title="pending")
    prompts.keys(ANY, menu(7), RETURN)
    prompts.answers("")

    await TaskApp(state).run()

    assert [t.id for t in store.get_all()] == [pending.id]
    assert "Cleared 1" in prompts.text


@pytest.mark.asyncio
async def test_stats_and_help_screens(state: AppState, prompts: ScriptedPrompts, store: TaskStore) -> None:
    store.add(title="a", category="Work")
    prompts.keys(ANY, menu(5), menu(8))
    prompts.answers("", "")

    await TaskApp(state).run()

    assert "Total:     1" in prompts.text
    assert "▸ Work: 1" in prompts.text
    assert "Commands:" in prompts.text


@pytest.mark.asyncio
async def test_storage_failure_is_reported_inline(
    state: AppState, prompts: ScriptedPrompts, store: TaskStore, monkeypatch: pytest.MonkeyPatch
) -> None:
    def _fail(tasks) -> None:
        raise TaskStorageError("Could not save tasks to tasks.json: No space left on device")

    monkeypatch.setattr(store, "save_all", _fail)
    prompts.keys(ANY, menu(1), RETURN, RETURN, menu(9))
    prompts.answers("x", "", "", "")

    await TaskApp(state).run()

    assert "✗ Could not save tasks" in prompts.text
    assert "Goodbye!" in prompts.text


@pytest.mark.asyncio
async def test_headless_session_runs_to_end_of_input(settings, store: TaskStore) -> None:
    store.add(title="only task")
    lines = iter(["", ""])

    def read_line(message: str) -> str:
        try:
            return next(lines)
        except StopIteration:
            raise EOFError from None

    out = io.StringIO()
    engine = PromptEngine(output=out, interactive=False, read_line=read_line)
    app = TaskApp(AppState(settings=settings, store=store, prompts=engine))

    await app.run()

    text = out.getvalue()
    # headless main menu picks "List Tasks" and the multi-select views the first task;
    # the third pause finds no input left
    assert text.count("Task Details") == 3
    assert "only task" in text
    assert "Goodbye!" in text


@pytest.mark.asyncio
async def test_ctrl_c_ends_the_session(state: AppState, prompts: ScriptedPrompts) -> None:
    async def _interrupt(options, title):
        raise KeyboardInterrupt

    prompts.keys(ANY)
    prompts.select = _interrupt  # type: ignore[method-assign]

    await TaskApp(state).run()

    assert "Interrupted. Goodbye!" in prompts.text


@pytest.mark.asyncio
async def test_headless_interrupt_at_a_line_prompt_ends_the_session(settings, store: TaskStore) -> None:
    def read_line(message: str) -> str:
        raise KeyboardInterrupt

    out = io.StringIO()
    engine = PromptEngine(output=out, interactive=False, read_line=read_line)

    await TaskApp(AppState(settings=settings, store=store, prompts=engine)).run()

    assert "Interrupted. Goodbye!" in out.getvalue()

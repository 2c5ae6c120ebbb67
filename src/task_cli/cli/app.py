# src/task_cli/cli/app.py

"""
Menu-driven session.

The loop asks the prompt engine for a main-menu choice, runs the matching
handler against the store, waits for Enter, and starts over. Handlers talk to
the store and the prompts only through `AppState`.
"""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from ..core.state import AppState
from ..errors import TaskCliError, TaskStorageError
from ..tasks.task_models import CATEGORIES, DEFAULT_CATEGORY, Priority, Task
from ..ui import render

logger = logging.getLogger(__name__)

PRIORITIES: tuple[Priority, ...] = tuple(Priority)

Handler = Callable[[], Awaitable[None]]


@dataclass(frozen=True, slots=True)
class MenuItem:
    name: str
    handler: Handler


class TaskApp:
    def __init__(self, state: AppState) -> None:
        self.state = state
        self.store = state.store
        self.prompts = state.prompts
        self._running = False
        self.menu: list[MenuItem] = [
            MenuItem("List Tasks", self.list_tasks),
            MenuItem("Add Task", self.add_task),
            MenuItem("Complete Task", self.complete_task),
            MenuItem("Edit Task", self.edit_task),
            MenuItem("Delete Task", self.delete_task),
            MenuItem("Statistics", self.show_stats),
            MenuItem("Search Tasks", self.search_tasks),
            MenuItem("Clear Completed", self.clear_completed),
            MenuItem("Help", self.show_help),
            MenuItem("Exit", self.exit),
        ]

    # ---- output helpers ----

    def _say(self, lines: list[str] | str) -> None:
        self.prompts.write(lines)

    def _ok(self, message: str) -> None:
        self._say(["", render.success(message), ""])

    def _fail(self, message: str) -> None:
        self._say(["", render.error(message), ""])

    def _note(self, message: str) -> None:
        self._say(["", f"  {message}", ""])

    # ---- loop ----

    async def run(self) -> None:
        app_name = str(getattr(self.state.settings, "app_name", "task-cli"))
        logger.info("%s session started (interactive=%s)", app_name, self.prompts.interactive)

        self._running = True
        try:
            self.prompts.clear()
            self._say(render.welcome_lines(app_name))
            await self.prompts.wait_for_key()

            names = [item.name for item in self.menu]
            while self._running:
                result = await self.prompts.select(names, "Main Menu")
                if not result.accepted:
                    continue

                item = self.menu[result.index]
                self.prompts.clear()
                await self.dispatch(item)

                if self._running:
                    await self.prompts.ask("\n  Press Enter to continue...")
        except EOFError:
            logger.info("Input closed, exiting.")
            self._say(["", "  Goodbye!", ""])
        except KeyboardInterrupt:
            logger.info("Interrupted, exiting.")
            self._say(["", "  Interrupted. Goodbye!", ""])

        logger.info("%s session finished", app_name)

    async def dispatch(self, item: MenuItem) -> None:
        """Run one handler; report known failures inline and keep the loop alive."""
        try:
            await item.handler()
        except TaskStorageError as e:
            logger.exception("Storage failure in %r", item.name)
            self._fail(e.message)
        except TaskCliError as e:
            logger.info("%s rejected: %s", item.name, e.message)
            self._fail(e.message)

    # ---- shared prompts ----

    async def _pick_priority(self, current: Priority) -> Priority:
        res = await self.prompts.select(render.priority_options(), "Priority")
        return PRIORITIES[res.index] if res.accepted else current

    async def _pick_category(self, current: str) -> str:
        res = await self.prompts.select(list(CATEGORIES), "Category")
        return CATEGORIES[res.index] if res.accepted else current

    def _sorted_tasks(self) -> list[Task]:
        return self.store.sort(self.store.get_all(), "priority")

    # ---- handlers ----

    async def list_tasks(self) -> None:
        tasks = self._sorted_tasks()
        if not tasks:
            self._note("No tasks")
            return

        options = [render.task_option(t, width=30) for t in tasks]
        res = await self.prompts.multi_select(options, "Tasks - Space to select, Enter to view")
        if not res.accepted or not res.indexes:
            return

        self.prompts.clear()
        for i in res.indexes:
            self._say(render.task_detail(tasks[i]))

    async def add_task(self) -> None:
        self._say(["", "  ADD TASK", ""])

        title = await self.prompts.ask("  Title: ")
        if not title.strip():
            self._fail("Title required")
            return

        priority = await self._pick_priority(Priority.MEDIUM)
        category = await self._pick_category(DEFAULT_CATEGORY)
        due = await self.prompts.ask("  Due (YYYY-MM-DD): ")
        description = await self.prompts.ask("  Description: ")

        task = self.store.add(
            title=title.strip(),
            priority=priority,
            category=category,
            due_date=due.strip() or None,
            description=description.strip(),
        )

        self.prompts.clear()
        self._ok("Created!")
        self._say(render.task_detail(task))

    async def complete_task(self) -> None:
        tasks = self.store.filter(status="pending")
        if not tasks:
            self._note("No pending tasks")
            return

        options = [render.pending_option(t) for t in tasks]
        res = await self.prompts.multi_select(options, "Complete - Space to select, Enter to complete")
        if not res.accepted or not res.indexes:
            return

        done = sum(1 for i in res.indexes if self.store.toggle_complete(tasks[i].id) is not None)
        self.prompts.clear()
        self._ok(f"{done} completed")

    async def edit_task(self) -> None:
        tasks = self._sorted_tasks()
        if not tasks:
            self._note("No tasks")
            return

        options = [render.task_option(t) for t in tasks]
        res = await self.prompts.select(options, "Edit")
        if not res.accepted:
            return

        task = tasks[res.index]
        self.prompts.clear()
        self._say(["", "  EDIT TASK", "", f"  Current: {task.title}", ""])

        # Empty answers keep the current value.
        title = (await self.prompts.ask("  Title: ")).strip() or task.title
        priority = await self._pick_priority(task.priority)
        category = await self._pick_category(task.category)
        due = (await self.prompts.ask("  Due: ")).strip() or task.due_date
        description = (await self.prompts.ask("  Description: ")).strip() or task.description

        updated = self.store.update(
            task.id,
            title=title,
            priority=priority,
            category=category,
            due_date=due,
            description=description,
        )

        self.prompts.clear()
        if updated is None:
            self._fail("Task no longer exists")
            return
        self._ok("Updated!")
        self._say(render.task_detail(updated))

    async def delete_task(self) -> None:
        tasks = self._sorted_tasks()
        if not tasks:
            self._note("No tasks")
            return

        options = [render.task_option(t) for t in tasks]
        res = await self.prompts.multi_select(options, "Delete - Space to select, Enter to delete")
        if not res.accepted or not res.indexes:
            return

        answer = await self.prompts.confirm(f"Delete {len(res.indexes)} task(s)?", ["Yes, Delete", "Cancel"])
        if not answer.accepted:
            return

        deleted = sum(1 for i in res.indexes if self.store.delete(tasks[i].id))
        self.prompts.clear()
        self._ok(f"{deleted} deleted")

    async def show_stats(self) -> None:
        self._say(render.stats_lines(self.store.get_stats()))

    async def search_tasks(self) -> None:
        query = await self.prompts.ask("  Search: ")
        if not query.strip():
            return

        results = self.store.search(query.strip())
        self.prompts.clear()
        if not results:
            self._note(f'No results for "{query.strip()}"')
            return
        self._say(["", f"  {len(results)} result(s)"])
        self._say(render.task_table(results))

    async def clear_completed(self) -> None:
        stats = self.store.get_stats()
        if not stats.completed:
            self._note("No completed tasks")
            return

        answer = await self.prompts.confirm(f"Clear {stats.completed} completed?", ["Yes, Clear", "Cancel"])
        if not answer.accepted:
            return

        removed = self.store.clear_completed()
        self.prompts.clear()
        self._ok(f"Cleared {removed}")

    async def show_help(self) -> None:
        self._say(render.help_lines())

    async def exit(self) -> None:
        self._running = False
        self.prompts.clear()
        self._say(["", "  Goodbye!", ""])

# src/task_cli/ui/prompts.py

"""
Prompt state machines.

Each prompt is a small object that paints a frame and consumes named keys
(see `keys.py`) until it resolves. Nothing here touches the terminal; the
engine owns raw mode and drives these objects.

    RENDERING --frame()--> AWAITING_INPUT --handle(key)--> RENDERING | RESOLVED

A resolved prompt is finished: calling `handle()` again raises.

The four primitives share one machine. Subclasses only differ in:
- the key table (`_bindings`)
- how an option row is drawn (`_row`)
- the footer hint (`_hint`)
- what headless mode resolves to (`headless_result`)
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from enum import StrEnum
from typing import Any, Generic, TypeVar

from .keys import Key

R = TypeVar("R")

CURSOR = "►"
CHECKED = "◉"
UNCHECKED = "○"


class PromptState(StrEnum):
    RENDERING = "rendering"
    AWAITING_INPUT = "awaiting_input"
    RESOLVED = "resolved"


@dataclass(frozen=True, slots=True)
class SelectResult:
    index: int
    accepted: bool


@dataclass(frozen=True, slots=True)
class MultiSelectResult:
    indexes: list[int] = field(default_factory=list)
    accepted: bool = True


@dataclass(frozen=True, slots=True)
class Resolved(Generic[R]):
    """Terminal state payload. `value` is None for the any-key prompt."""

    value: R


class Prompt(Generic[R]):
    """Base machine: a title, a list of options and an active row."""

    def __init__(self, title: str, options: Sequence[str] = ()) -> None:
        self.title = title
        self.options: list[str] = list(options)
        self.active = 0
        self.state = PromptState.RENDERING
        self._bindings: dict[str, Callable[[], Resolved[R] | None]] = {
            Key.UP: lambda: self._move(-1),
            Key.DOWN: lambda: self._move(1),
        }

    # ---- transitions ----

    def _move(self, delta: int) -> None:
        last = max(0, len(self.options) - 1)
        self.active = min(last, max(0, self.active + delta))
        return None

    def handle(self, key: str) -> Resolved[R] | None:
        """Feed one key. Returns `Resolved` when the prompt is done."""
        if self.state is PromptState.RESOLVED:
            raise RuntimeError("prompt already resolved")
        action = self._bindings.get(key)
        result = action() if action is not None else None
        if result is not None:
            self.state = PromptState.RESOLVED
            return result
        self.state = PromptState.RENDERING
        return None

    def headless_result(self) -> Resolved[R]:
        raise NotImplementedError

    # ---- rendering ----

    def frame(self) -> list[str]:
        lines = ["", f"  {self.title}", ""]
        lines.extend(self._row(i, opt) for i, opt in enumerate(self.options))
        lines.extend(["", f"  {self._hint()}"])
        if self.state is PromptState.RENDERING:
            self.state = PromptState.AWAITING_INPUT
        return lines

    def _marker(self, i: int) -> str:
        return CURSOR if i == self.active else " "

    def _row(self, i: int, option: str) -> str:
        return f"  {self._marker(i)} {option}"

    def _hint(self) -> str:
        return ""


class SelectPrompt(Prompt[SelectResult]):
    def __init__(self, title: str, options: Sequence[str]) -> None:
        if not options:
            raise ValueError("select prompt needs at least one option")
        super().__init__(title, options)
        self._bindings[Key.RETURN] = lambda: Resolved(SelectResult(self.active, True))
        self._bindings[Key.ESCAPE] = lambda: Resolved(SelectResult(self.active, False))

    def headless_result(self) -> Resolved[SelectResult]:
        return Resolved(SelectResult(0, True))

    def _hint(self) -> str:
        return "↑↓ navigate  ↵ select  esc cancel"


class MultiSelectPrompt(Prompt[MultiSelectResult]):
    def __init__(self, title: str, options: Sequence[str]) -> None:
        super().__init__(title, options)
        # dict as an ordered set: keeps toggle order
        self.selected: dict[int, None] = {}
        self._bindings[Key.SPACE] = self._toggle
        self._bindings[Key.RETURN] = lambda: Resolved(MultiSelectResult(list(self.selected), True))
        self._bindings[Key.ESCAPE] = lambda: Resolved(MultiSelectResult([], False))

    def _toggle(self) -> None:
        if not self.options:
            return None
        if self.active in self.selected:
            del self.selected[self.active]
        else:
            self.selected[self.active] = None
        return None

    def headless_result(self) -> Resolved[MultiSelectResult]:
        return Resolved(MultiSelectResult([0] if self.options else [], True))

    def _row(self, i: int, option: str) -> str:
        check = CHECKED if i in self.selected else UNCHECKED
        return f"  {self._marker(i)} {check} {option}"

    def _hint(self) -> str:
        info = f" ({len(self.selected)} selected)" if self.selected else ""
        return "↑↓ navigate  ␣ toggle  ↵ confirm  esc cancel" + info


class ConfirmPrompt(Prompt[SelectResult]):
    """Two options; index 0 is the affirmative (usually destructive) action."""

    def __init__(self, message: str, options: Sequence[str] = ("Yes", "Cancel")) -> None:
        if len(options) != 2:
            raise ValueError("confirm prompt takes exactly two options")
        super().__init__(message, options)
        self._bindings[Key.RETURN] = lambda: Resolved(SelectResult(self.active, self.active == 0))

    def headless_result(self) -> Resolved[SelectResult]:
        return Resolved(SelectResult(0, True))

    def _row(self, i: int, option: str) -> str:
        label = f"[{option}]" if i == 0 else option
        return f"  {self._marker(i)} {label}"

    def _hint(self) -> str:
        return "↑↓ navigate  ↵ confirm"


class AnyKeyPrompt(Prompt[None]):
    """Resolves on the first key press, whatever it is."""

    def __init__(self, message: str = "Press any key to continue...") -> None:
        super().__init__(message)

    def handle(self, key: str) -> Resolved[None] | None:
        if self.state is PromptState.RESOLVED:
            raise RuntimeError("prompt already resolved")
        self.state = PromptState.RESOLVED
        return Resolved(None)

    def headless_result(self) -> Resolved[None]:
        return Resolved(None)

    def frame(self) -> list[str]:
        if self.state is PromptState.RENDERING:
            self.state = PromptState.AWAITING_INPUT
        return ["", f"  {self.title}", ""]


def run_keys(prompt: Prompt[Any], keys: Sequence[str]) -> Resolved[Any] | None:
    """Feed keys until the prompt resolves. Keys after resolution are not consumed."""
    for key in keys:
        prompt.frame()
        result = prompt.handle(key)
        if result is not None:
            return result
    return None

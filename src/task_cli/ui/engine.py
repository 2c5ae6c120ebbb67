# src/task_cli/ui/engine.py

"""
Terminal driver for the prompt state machines.

One prompt at a time:
- paint the frame
- enter raw mode and attach a key callback (prompt_toolkit Input)
- feed key presses to the machine, repainting after each one
- leave raw mode on every exit path (resolve, Ctrl-C, exception, cancellation)

When stdin is not a terminal (pipes, CI) key prompts do not wait: they
resolve to the machine's headless default.
"""

from __future__ import annotations

import asyncio
import logging
import signal
import sys
from collections.abc import Callable, Iterable, Sequence
from typing import Any, TextIO

from prompt_toolkit import PromptSession
from prompt_toolkit.input import Input, create_input
from prompt_toolkit.key_binding import KeyPress
from prompt_toolkit.output import Output, create_output

from .keys import Key, key_name
from .prompts import (
    AnyKeyPrompt,
    ConfirmPrompt,
    MultiSelectPrompt,
    MultiSelectResult,
    Prompt,
    Resolved,
    SelectPrompt,
    SelectResult,
)

logger = logging.getLogger(__name__)

# A lone ESC byte may be the start of an arrow-key sequence; wait this long
# for the rest before reporting it as the Escape key.
ESCAPE_FLUSH_TIMEOUT = 0.05

CLEAR_SCREEN = "\033[H\033[2J"

_INTERRUPTED = object()


def _stdin_is_tty() -> bool:
    try:
        return sys.stdin.isatty()
    except (AttributeError, ValueError):
        return False


def _read_stdin_line(message: str) -> str:
    # Under asyncio.run() SIGINT only cancels the main task, which a blocking
    # read never notices. Let Ctrl-C raise inside input() instead.
    try:
        previous = signal.signal(signal.SIGINT, signal.default_int_handler)
    except ValueError:
        # not the main thread
        return input(message)
    try:
        return input(message)
    finally:
        if previous is not None:
            signal.signal(signal.SIGINT, previous)


class PromptEngine:
    """
    Runs prompts against a terminal.

    `key_input` and `output` are injectable so tests can drive real key
    sequences through `prompt_toolkit.input.create_pipe_input()`.
    """

    def __init__(
        self,
        *,
        key_input: Input | None = None,
        output: TextIO | None = None,
        interactive: bool | None = None,
        clear_screen: bool = True,
        read_line: Callable[[str], str] | None = None,
        line_output: Output | None = None,
    ) -> None:
        self._input = key_input
        self._output = output if output is not None else sys.stdout
        self.interactive = _stdin_is_tty() if interactive is None else interactive
        self._clear_screen = clear_screen
        self._read_line = read_line
        self._line_output = line_output
        self._session: PromptSession[str] | None = None

    # ---- output ----

    def _is_tty(self) -> bool:
        try:
            return bool(self._output.isatty())
        except (AttributeError, ValueError):
            return False

    def clear(self) -> None:
        if self._clear_screen and self._is_tty():
            self._output.write(CLEAR_SCREEN)
            self._output.flush()

    def write(self, lines: Iterable[str] | str) -> None:
        text = lines if isinstance(lines, str) else "\n".join(lines)
        self._output.write(text + "\n")
        self._output.flush()

    def _paint(self, prompt: Prompt[Any]) -> None:
        self.clear()
        self.write(prompt.frame())

    # ---- the loop ----

    def _get_input(self) -> Input:
        if self._input is None:
            self._input = create_input()
        return self._input

    async def run(self, prompt: Prompt[Any]) -> Any:
        """Drive `prompt` until it resolves and return its payload."""
        if not self.interactive:
            logger.debug("Headless prompt %r -> default", prompt.title)
            return prompt.headless_result().value

        inp = self._get_input()
        loop = asyncio.get_running_loop()
        done: asyncio.Future[Any] = loop.create_future()
        flush_handle: asyncio.TimerHandle | None = None

        def feed(key_presses: list[KeyPress]) -> None:
            for kp in key_presses:
                if done.done():
                    return
                name = key_name(kp)
                if name == Key.INTERRUPT:
                    done.set_result(_INTERRUPTED)
                    return
                result: Resolved[Any] | None = prompt.handle(name)
                if result is not None:
                    done.set_result(result.value)
                    return
                self._paint(prompt)

        def guarded_feed(key_presses: list[KeyPress]) -> None:
            # Runs inside an event-loop callback; hand failures to the awaiting coroutine.
            try:
                feed(key_presses)
            except Exception as e:
                if not done.done():
                    done.set_exception(e)

        def flush() -> None:
            if not done.done():
                guarded_feed(inp.flush_keys())

        def keys_ready() -> None:
            nonlocal flush_handle
            guarded_feed(inp.read_keys())
            if flush_handle is not None:
                flush_handle.cancel()
            if not done.done():
                flush_handle = loop.call_later(ESCAPE_FLUSH_TIMEOUT, flush)

        self._paint(prompt)
        try:
            with inp.raw_mode(), inp.attach(keys_ready):
                value = await done
        finally:
            if flush_handle is not None:
                flush_handle.cancel()

        if value is _INTERRUPTED:
            logger.debug("Prompt %r interrupted with Ctrl-C", prompt.title)
            raise KeyboardInterrupt
        return value

    # ---- primitives ----

    async def select(self, options: Sequence[str], title: str) -> SelectResult:
        return await self.run(SelectPrompt(title, options))

    async def multi_select(self, options: Sequence[str], title: str) -> MultiSelectResult:
        return await self.run(MultiSelectPrompt(title, options))

    async def confirm(self, message: str, options: Sequence[str] = ("Yes", "Cancel")) -> SelectResult:
        return await self.run(ConfirmPrompt(message, options))

    async def wait_for_key(self, message: str = "Press any key to continue...") -> None:
        await self.run(AnyKeyPrompt(message))

    def _get_session(self) -> PromptSession[str]:
        if self._session is None:
            output = self._line_output
            if output is None and self._output is not sys.stdout:
                output = create_output(stdout=self._output)
            self._session = PromptSession(input=self._get_input(), output=output)
        return self._session

    async def ask(self, message: str) -> str:
        """
        Read one line of text, returned untrimmed.

        On a terminal the line is edited through a prompt_toolkit session, so
        Ctrl-C and Ctrl-D arrive as keys. Headless input is read with
        `input()`. Either way end of input raises EOFError and Ctrl-C raises
        KeyboardInterrupt.
        """
        if self._read_line is not None:
            return self._read_line(message)
        if self.interactive:
            return await self._get_session().prompt_async(message)
        return _read_stdin_line(message)

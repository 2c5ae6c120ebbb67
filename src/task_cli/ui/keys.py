# src/task_cli/ui/keys.py

"""Key names the prompts understand, and the mapping from prompt_toolkit key presses."""

from __future__ import annotations

from enum import StrEnum

from prompt_toolkit.key_binding import KeyPress
from prompt_toolkit.keys import Keys


class Key(StrEnum):
    UP = "up"
    DOWN = "down"
    RETURN = "return"
    ESCAPE = "escape"
    SPACE = "space"
    INTERRUPT = "interrupt"


_NAMED: dict[str, Key] = {
    Keys.Up.value: Key.UP,
    Keys.Down.value: Key.DOWN,
    Keys.ControlM.value: Key.RETURN,  # CR: Enter in raw mode
    Keys.ControlJ.value: Key.RETURN,  # LF: Enter from pipes
    Keys.Escape.value: Key.ESCAPE,
    Keys.ControlC.value: Key.INTERRUPT,
}


def key_name(key_press: KeyPress) -> str:
    """
    Name a key press the way the prompts expect it.

    Arrows, Enter, Esc, space and Ctrl-C get a `Key`; printable characters
    are returned as themselves; anything else keeps prompt_toolkit's name.
    """
    key = key_press.key
    raw = key.value if isinstance(key, Keys) else str(key)
    named = _NAMED.get(raw)
    if named is not None:
        return named
    if raw == " ":
        return Key.SPACE
    return raw

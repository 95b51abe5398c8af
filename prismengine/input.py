"""Keyboard and mouse state tracked from window callbacks."""

from __future__ import annotations

from enum import IntEnum
from typing import List

KEY_COUNT = 350
MOUSE_BUTTON_COUNT = 8


class Action(IntEnum):
    """What happened to a key or button in a callback."""

    RELEASE = 0
    PRESS = 1
    REPEAT = 2


def _check_index(index: int, count: int, kind: str) -> int:
    if not 0 <= index < count:
        raise IndexError(f"{kind} {index} out of range (0..{count - 1})")
    return index


class InputState:
    """Current and previous-frame state of keys, mouse buttons and cursor."""

    def __init__(self) -> None:
        self._keys: List[bool] = [False] * KEY_COUNT
        self._previous_keys: List[bool] = [False] * KEY_COUNT
        self._mouse: List[bool] = [False] * MOUSE_BUTTON_COUNT
        self._previous_mouse: List[bool] = [False] * MOUSE_BUTTON_COUNT
        self._mouse_x = 0.0
        self._mouse_y = 0.0

    def key_callback(self, key: int, action: int) -> None:
        """Record a key event; keys outside the tracked range are ignored."""
        if 0 <= key < KEY_COUNT:
            self._keys[key] = action != Action.RELEASE

    def mouse_button_callback(self, button: int, action: int) -> None:
        """Record a mouse button event; unknown buttons are ignored."""
        if 0 <= button < MOUSE_BUTTON_COUNT:
            self._mouse[button] = action != Action.RELEASE

    def cursor_pos_callback(self, x: float, y: float) -> None:
        self._mouse_x = x
        self._mouse_y = y

    def update(self) -> None:
        """Close the frame: the current state becomes the previous one."""
        self._previous_keys = list(self._keys)
        self._previous_mouse = list(self._mouse)

    def is_key_pressed(self, key: int) -> bool:
        _check_index(key, KEY_COUNT, "key")
        return self._keys[key] and not self._previous_keys[key]

    def is_key_held(self, key: int) -> bool:
        _check_index(key, KEY_COUNT, "key")
        return self._keys[key]

    def is_key_released(self, key: int) -> bool:
        _check_index(key, KEY_COUNT, "key")
        return not self._keys[key] and self._previous_keys[key]

    def is_key_up(self, key: int) -> bool:
        _check_index(key, KEY_COUNT, "key")
        return not self._keys[key]

    def is_mouse_pressed(self, button: int) -> bool:
        _check_index(button, MOUSE_BUTTON_COUNT, "mouse button")
        return self._mouse[button] and not self._previous_mouse[button]

    def is_mouse_held(self, button: int) -> bool:
        _check_index(button, MOUSE_BUTTON_COUNT, "mouse button")
        return self._mouse[button]

    def is_mouse_released(self, button: int) -> bool:
        _check_index(button, MOUSE_BUTTON_COUNT, "mouse button")
        return not self._mouse[button] and self._previous_mouse[button]

    def is_mouse_up(self, button: int) -> bool:
        _check_index(button, MOUSE_BUTTON_COUNT, "mouse button")
        return not self._mouse[button]

    @property
    def mouse_x(self) -> float:
        return self._mouse_x

    @property
    def mouse_y(self) -> float:
        return self._mouse_y
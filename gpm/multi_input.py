"""A popup holding several single-line text inputs."""

from __future__ import annotations

import unicodedata
from dataclasses import dataclass

# A key is a one-character string for a typed character, or one of these names.
ESC = "esc"
ENTER = "enter"
TAB = "tab"
BACKSPACE = "backspace"
DELETE = "delete"
LEFT = "left"
RIGHT = "right"
HOME = "home"
END = "end"
UP = "up"
DOWN = "down"


def _char_width(char: str) -> int:
    if unicodedata.combining(char):
        return 0
    if unicodedata.east_asian_width(char) in ("W", "F"):
        return 2
    return 1


@dataclass
class InputBox:
    """One prompt with an editable value and a cursor."""

    prompt: str
    value: str = ""
    cursor: int = 0

    def handle_key(self, key: str) -> bool:
        """Apply a key to the value; return whether anything changed."""
        if len(key) == 1:
            self.value = self.value[: self.cursor] + key + self.value[self.cursor :]
            self.cursor += 1
            return True
        if key == BACKSPACE:
            if self.cursor == 0:
                return False
            self.value = self.value[: self.cursor - 1] + self.value[self.cursor :]
            self.cursor -= 1
            return True
        if key == DELETE:
            if self.cursor >= len(self.value):
                return False
            self.value = self.value[: self.cursor] + self.value[self.cursor + 1 :]
            return True
        moves = {
            LEFT: max(self.cursor - 1, 0),
            RIGHT: min(self.cursor + 1, len(self.value)),
            HOME: 0,
            END: len(self.value),
        }
        if key in moves and moves[key] != self.cursor:
            self.cursor = moves[key]
            return True
        return False

    def visual_scroll(self, width: int) -> int:
        """Columns to scroll so that the cursor stays within width."""
        cursor_width = sum(_char_width(c) for c in self.value[: self.cursor])
        scroll = max(cursor_width, width) - width
        done = 0
        for char in self.value:
            if done >= scroll:
                break
            done += _char_width(char)
        return done


class MultiInputState:
    """A titled set of input boxes, one of which has focus."""

    def __init__(self, title: str, prompts: list[str]) -> None:
        self.title = title
        self.boxes = [InputBox(prompt) for prompt in prompts]
        self.idx = 0

    def next_box(self) -> None:
        if len(self.boxes) <= 1:
            return
        self.idx = (self.idx + 1) % len(self.boxes)

    def handle_key(self, key: str) -> bool:
        """Handle a key; return True if it closes the popup and should be passed on."""
        if key in (ESC, ENTER):
            return True
        if key == TAB:
            self.next_box()
            return False
        self.boxes[self.idx].handle_key(key)
        return False

    def content_at(self, idx: int) -> str:
        return self.boxes[idx].value
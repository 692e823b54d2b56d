# src/todot/input/keys.py

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum


class KeyCode(StrEnum):
    CHAR = "char"
    UP = "up"
    DOWN = "down"
    ENTER = "enter"
    BACKSPACE = "backspace"
    ESC = "esc"
    OTHER = "other"


@dataclass(frozen=True, slots=True)
class Key:
    """A terminal-independent key press. `char` is set only for KeyCode.CHAR."""

    code: KeyCode
    char: str = ""

    @classmethod
    def of(cls, char: str) -> Key:
        return cls(KeyCode.CHAR, char)

    def is_char(self, *chars: str) -> bool:
        return self.code is KeyCode.CHAR and self.char in chars


UP = Key(KeyCode.UP)
DOWN = Key(KeyCode.DOWN)
ENTER = Key(KeyCode.ENTER)
BACKSPACE = Key(KeyCode.BACKSPACE)
ESC = Key(KeyCode.ESC)
OTHER = Key(KeyCode.OTHER)

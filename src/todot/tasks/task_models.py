# src/todot/tasks/task_models.py

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from typing import Any

DONE_GLYPH = "[x]"
OPEN_GLYPH = "[ ]"


class Mode(StrEnum):
    """
    Interaction mode of the UI.

    Only one mode is active at a time. The scratch text typed for a new task
    lives on the ModeMachine and is meaningful only in INSERT.
    """

    NORMAL = "normal"
    INSERT = "insert"
    DELETE = "delete"


@dataclass(slots=True)
class Task:
    text: str
    completed: bool = False

    def to_dict(self) -> dict[str, Any]:
        return {"text": self.text, "completed": self.completed}

    @classmethod
    def from_dict(cls, raw: Any) -> Task:
        """
        Build a Task from one element of the persisted JSON array.

        Raises ValueError if `raw` is not an object with a string "text".
        A missing "completed" is read as False.
        """
        if not isinstance(raw, dict):
            raise ValueError(f"task entry must be an object, got {type(raw).__name__}")
        text = raw.get("text")
        if not isinstance(text, str):
            raise ValueError("task entry is missing a string 'text'")
        return cls(text=text, completed=bool(raw.get("completed", False)))


@dataclass(frozen=True, slots=True)
class Row:
    """One display row produced by TaskStore.render_rows()."""

    index: int
    text: str
    completed: bool
    selected: bool

    @property
    def glyph(self) -> str:
        return DONE_GLYPH if self.completed else OPEN_GLYPH

    @property
    def label(self) -> str:
        return f"{self.glyph} {self.text}"

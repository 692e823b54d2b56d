# src/todot/core/ports.py

from __future__ import annotations

"""
Ports (interfaces) used by the core.

TaskStore only talks to a TaskRepo, so the local JSON file, the remote peer
and the in-memory fake used by tests are interchangeable.
"""

from collections.abc import Sequence
from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from ..tasks.task_models import Task


class TaskRepo(Protocol):
    """Whole-list persistence: every save replaces everything previously stored."""

    def load(self) -> list[Task]: ...
    def save(self, tasks: Sequence[Task]) -> None: ...
    def describe(self) -> str: ...

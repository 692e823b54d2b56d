# src/todot/core/state.py

from __future__ import annotations

from dataclasses import dataclass

from ..input.modes import ModeMachine
from ..tasks.task_store import TaskStore


@dataclass
class AppState:
    # Settings travel with the state so the UI can read poll interval, app name, ...
    settings: object

    store: TaskStore
    machine: ModeMachine

    # Last error / notice shown in the status line; cleared by the next key press.
    status: str | None = None
    running: bool = True

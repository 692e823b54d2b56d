# src/todot/tasks/task_store.py

from __future__ import annotations

import logging
from collections.abc import Iterator, Sequence

from ..core.ports import TaskRepo
from .task_models import Row, Task

logger = logging.getLogger(__name__)


class TaskRows:
    """
    Lazy view over a TaskStore.

    Each iteration walks the store as it is at that moment, so the same object
    can be iterated again after the store changes.
    """

    __slots__ = ("_store",)

    def __init__(self, store: TaskStore) -> None:
        self._store = store

    def __iter__(self) -> Iterator[Row]:
        current = self._store.current_index
        for i, task in enumerate(self._store.tasks):
            yield Row(index=i, text=task.text, completed=task.completed, selected=i == current)

    def __len__(self) -> int:
        return len(self._store.tasks)


class TaskStore:
    """
    Ordered task list plus a selection cursor.

    Invariants:
    - non-empty: 0 <= current_index < len(tasks)
    - empty: current_index == 0 and index-based operations do nothing

    Mutations (insert/toggle/delete) write the whole list through the repo
    synchronously. If the repo raises PersistenceError the in-memory change is
    kept: memory and storage disagree until the next successful save.
    """

    def __init__(self, repo: TaskRepo, tasks: Sequence[Task] | None = None) -> None:
        self._repo = repo
        self.tasks: list[Task] = list(tasks or [])
        self.current_index = 0

    @classmethod
    def open(cls, repo: TaskRepo) -> TaskStore:
        """Load tasks from `repo`. PersistenceError from the repo propagates."""
        store = cls(repo, repo.load())
        logger.info("TaskStore ready repo=%s total=%d", repo.describe(), len(store))
        return store

    @property
    def repo(self) -> TaskRepo:
        return self._repo

    def __len__(self) -> int:
        return len(self.tasks)

    @property
    def selected(self) -> Task | None:
        if not self.tasks:
            return None
        return self.tasks[self.current_index]

    # ---- mutations (persisted) ----

    def insert(self, text: str) -> None:
        self.tasks.append(Task(text=text))
        self.current_index = len(self.tasks) - 1
        logger.debug("Task inserted index=%d", self.current_index)
        self._save()

    def toggle(self) -> None:
        task = self.selected
        if task is not None:
            task.completed = not task.completed
            logger.debug("Task toggled index=%d completed=%s", self.current_index, task.completed)
        self._save()

    def delete(self) -> None:
        if not self.tasks:
            return
        removed = self.tasks.pop(self.current_index)
        self.current_index = max(0, self.current_index - 1)
        logger.debug("Task deleted text=%r", removed.text)
        self._save()

    # ---- navigation (not persisted) ----

    def prev(self) -> None:
        if self.current_index > 0:
            self.current_index -= 1

    def next(self) -> None:
        if self.current_index < len(self.tasks) - 1:
            self.current_index += 1

    # ---- projection ----

    def render_rows(self) -> TaskRows:
        return TaskRows(self)

    def _save(self) -> None:
        self._repo.save(self.tasks)

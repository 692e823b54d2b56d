# src/todot/storage/json_file.py

from __future__ import annotations

import contextlib
import logging
import os
import time
from collections.abc import Sequence
from pathlib import Path

from ..core.errors import PersistenceError
from ..tasks.task_models import Task
from .codec import decode_tasks, encode_tasks

logger = logging.getLogger(__name__)


class JsonFileRepo:
    """
    Task list stored as a single JSON array file.

    Every save rewrites the whole file. The write goes to a sibling .tmp file
    first and is then moved over the target with os.replace, so readers never
    see a half-written list.
    """

    def __init__(self, path: str | Path) -> None:
        self._path = Path(path)

    @property
    def path(self) -> Path:
        return self._path

    def describe(self) -> str:
        return f"file:{self._path}"

    def load(self) -> list[Task]:
        if not self._path.exists():
            logger.info("No task file at %s; starting with an empty list.", self._path)
            return []
        try:
            raw = self._path.read_text("utf-8")
        except OSError as e:
            raise PersistenceError("load", f"cannot read {self._path}: {e}") from e

        tasks = decode_tasks(raw, source=str(self._path))
        logger.debug("Loaded %d tasks from %s", len(tasks), self._path)
        return tasks

    def save(self, tasks: Sequence[Task]) -> None:
        tmp = self._path.with_suffix(self._path.suffix + ".tmp")
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            tmp.write_text(encode_tasks(tasks), "utf-8")
            os.replace(tmp, self._path)
        except OSError as e:
            with contextlib.suppress(OSError):
                tmp.unlink()
            raise PersistenceError("save", f"cannot write {self._path}: {e}") from e

        with contextlib.suppress(OSError):
            os.chmod(self._path, 0o600)
        logger.debug("Saved %d tasks to %s", len(tasks), self._path)

    def quarantine(self) -> Path | None:
        """
        Move an unreadable task file out of the way.

        Called after a failed load so that the next save does not overwrite
        the user's data with an empty list. Returns the new path, or None when
        there was nothing to move.
        """
        if not self._path.exists():
            return None
        target = self._path.with_name(f"{self._path.name}.corrupt-{int(time.time())}")
        try:
            os.replace(self._path, target)
        except OSError:
            logger.exception("Failed to quarantine %s", self._path)
            return None
        logger.warning("Moved unreadable task file %s -> %s", self._path, target)
        return target

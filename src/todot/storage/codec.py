# src/todot/storage/codec.py

from __future__ import annotations

import json
from collections.abc import Sequence

from ..core.errors import PersistenceError
from ..tasks.task_models import Task


def encode_tasks(tasks: Sequence[Task]) -> str:
    return json.dumps([t.to_dict() for t in tasks], ensure_ascii=False)


def decode_tasks(raw: str | bytes, *, source: str) -> list[Task]:
    """
    Parse a JSON array of {"text", "completed"} objects.

    Any malformed payload raises PersistenceError("load", ...) naming `source`.
    """
    try:
        data = json.loads(raw)
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise PersistenceError("load", f"invalid JSON from {source}: {e}") from e

    if not isinstance(data, list):
        raise PersistenceError("load", f"expected a JSON array from {source}")

    try:
        return [Task.from_dict(item) for item in data]
    except ValueError as e:
        raise PersistenceError("load", f"bad task entry from {source}: {e}") from e

# src/todot/cli/bootstrap.py

"""
CLI bootstrap helpers.

This module is the "composition root":
- ensures the local data directory exists,
- picks the persistence adapter (JSON file or sync peer) from settings,
- loads the task list and wires TaskStore + ModeMachine into AppState.

Nothing here aborts on a storage or config problem. Failures become a status
message and the app starts with whatever it could load (possibly nothing).
"""

from __future__ import annotations

import logging

from ..config import get_settings, parse_address
from ..core.errors import ConfigError, PersistenceError
from ..core.ports import TaskRepo
from ..core.state import AppState
from ..input.modes import ModeMachine
from ..storage.json_file import JsonFileRepo
from ..storage.remote import RemoteTaskRepo
from ..tasks.task_store import TaskStore

logger = logging.getLogger(__name__)


def _ensure_local_dirs(settings) -> None:
    settings.data_dir.mkdir(parents=True, exist_ok=True)
    settings.db_path.parent.mkdir(parents=True, exist_ok=True)


def build_repo(settings) -> TaskRepo:
    """
    Remote peer when server_address is configured, local JSON file otherwise.

    Raises ConfigError for an unusable server_address.
    """
    address = getattr(settings, "server_address", None)
    if address:
        host, port = parse_address(address)
        return RemoteTaskRepo(host, port, timeout=settings.connect_timeout)
    return JsonFileRepo(settings.db_path)


def _open_store(repo: TaskRepo) -> tuple[TaskStore, str | None]:
    try:
        return TaskStore.open(repo), None
    except PersistenceError as e:
        logger.error("Could not load tasks from %s: %s", repo.describe(), e)
        status = f"Could not load tasks: {e}"
        if isinstance(repo, JsonFileRepo):
            moved = repo.quarantine()
            if moved is not None:
                status += f" (old file kept as {moved.name})"
        return TaskStore(repo), status


def create_initial_state(*, settings=None) -> AppState:
    """
    Create AppState from the provided settings.

    Keeping settings injectable makes the app easier to test and avoids hidden global config reads.
    If settings is None, falls back to get_settings().
    """
    if settings is None:
        settings = get_settings()

    _ensure_local_dirs(settings)

    notices: list[str] = []
    config_error = getattr(settings, "config_error", None)
    if config_error:
        notices.append(f"Config ignored: {config_error}")

    try:
        repo = build_repo(settings)
    except ConfigError as e:
        logger.error("Falling back to local storage: %s", e)
        notices.append(f"Using local file: {e}")
        repo = JsonFileRepo(settings.db_path)

    store, load_error = _open_store(repo)
    if load_error:
        notices.append(load_error)

    return AppState(
        settings=settings,
        store=store,
        machine=ModeMachine(store),
        status="; ".join(notices) or None,
    )

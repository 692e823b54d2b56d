# tests/conftest.py

from __future__ import annotations

import threading
from collections.abc import Iterator
from pathlib import Path
from types import SimpleNamespace

import pytest

from todot.input.modes import ModeMachine
from todot.storage.json_file import JsonFileRepo
from todot.sync.peer import PeerServer
from todot.tasks.task_models import Task
from todot.tasks.task_store import TaskStore

from .fakes import InMemoryTaskRepo


@pytest.fixture()
def settings(tmp_path: Path) -> SimpleNamespace:
    """
    Minimal settings object compatible with bootstrap and the UI.

    We intentionally use a SimpleNamespace rather than importing real config,
    to keep unit tests isolated from the environment and ~/.config.
    """
    data_dir = tmp_path / "data"
    return SimpleNamespace(
        app_name="todot-test",
        data_dir=data_dir,
        db_path=data_dir / "db.json",
        server_address=None,
        connect_timeout=2.0,
        poll_interval_ms=10,
        config_error=None,
    )


@pytest.fixture()
def repo() -> InMemoryTaskRepo:
    return InMemoryTaskRepo()


@pytest.fixture()
def store(repo: InMemoryTaskRepo) -> TaskStore:
    """Store with three open tasks, selection on the first one."""
    repo.stored = [Task("alpha"), Task("beta"), Task("gamma")]
    return TaskStore.open(repo)


@pytest.fixture()
def machine(store: TaskStore) -> ModeMachine:
    return ModeMachine(store)


@pytest.fixture()
def peer(tmp_path: Path) -> Iterator[PeerServer]:
    """Sync peer on an ephemeral localhost port, served from a background thread."""
    server = PeerServer(("127.0.0.1", 0), JsonFileRepo(tmp_path / "peer.json"))
    thread = threading.Thread(target=server.serve_forever, daemon=True)
    thread.start()
    try:
        yield server
    finally:
        server.shutdown()
        server.server_close()
        thread.join(timeout=5.0)

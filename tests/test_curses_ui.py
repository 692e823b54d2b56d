# tests/test_curses_ui.py

from __future__ import annotations

import curses
from types import SimpleNamespace

import pytest

from todot.cli.bootstrap import create_initial_state
from todot.connectors.curses_ui import Palette, draw, run_ui, translate_key
from todot.core.state import AppState
from todot.input import keys
from todot.input.keys import Key
from todot.input.modes import DELETE_HINT, ModeMachine
from todot.storage.json_file import JsonFileRepo
from todot.tasks.task_models import Mode, Task
from todot.tasks.task_store import TaskStore

from .fakes import FailingTaskRepo, FakeScreen

MONO = Palette.monochrome()


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("a", Key.of("a")),
        (" ", Key.of(" ")),
        ("é", Key.of("é")),
        ("\n", keys.ENTER),
        ("\r", keys.ENTER),
        (curses.KEY_ENTER, keys.ENTER),
        ("\x7f", keys.BACKSPACE),
        ("\b", keys.BACKSPACE),
        (curses.KEY_BACKSPACE, keys.BACKSPACE),
        ("\x1b", keys.ESC),
        (curses.KEY_UP, keys.UP),
        (curses.KEY_DOWN, keys.DOWN),
        (curses.KEY_F1, keys.OTHER),
        ("\t", keys.OTHER),
    ],
)
def test_translate_key(raw, expected: Key) -> None:
    assert translate_key(raw) == expected


def test_session_adds_toggles_and_deletes(settings: SimpleNamespace) -> None:
    state = create_initial_state(settings=settings)
    script = [
        "i", "m", "i", "l", "k", "\n",      # add "milk"
        "a", "t", "e", "a", "\n",           # add "tea"
        curses.KEY_UP, " ",                 # toggle "milk"
        None,                               # poll timeout, just a redraw
        curses.KEY_DOWN, "d", "x", "d",     # delete "tea" (x ignored)
        "q",
    ]
    screen = FakeScreen(script)

    run_ui(screen, state, MONO)

    assert not state.running
    assert screen.timeout_ms == settings.poll_interval_ms
    assert [(t.text, t.completed) for t in state.store.tasks] == [("milk", True)]
    saved = JsonFileRepo(settings.db_path).load()
    assert [(t.text, t.completed) for t in saved] == [("milk", True)]
    assert "[x] milk" in screen.all_text()


def test_insert_mode_places_cursor_after_text(settings: SimpleNamespace) -> None:
    state = create_initial_state(settings=settings)
    screen = FakeScreen(["i", "a", "b", None, "\x1b", "q"], height=10, width=30)

    run_ui(screen, state, MONO)

    # the last insert-mode frame put the cursor inside the input pane after "ab"
    assert screen.cursor == (10 - 3 + 1, 1 + len("ab"))
    assert state.store.tasks == []


def test_delete_prompt_text(settings: SimpleNamespace) -> None:
    state = create_initial_state(settings=settings)
    state.machine.mode = Mode.DELETE
    screen = FakeScreen([], width=60)

    draw(screen, state, MONO)
    assert DELETE_HINT in screen.all_text()


def test_storage_failure_is_shown_and_loop_keeps_running(settings: SimpleNamespace) -> None:
    store = TaskStore(FailingTaskRepo(fail_save=True))
    state = AppState(settings=settings, store=store, machine=ModeMachine(store))
    screen = FakeScreen(["i", "x", "\n", None, "q"])

    run_ui(screen, state, MONO)

    assert "save failed: disk full" in screen.all_text()
    assert [t.text for t in store.tasks] == ["x"]
    assert state.status is None


def test_selection_scrolls_into_view(settings: SimpleNamespace) -> None:
    state = create_initial_state(settings=settings)
    for i in range(20):
        state.store.insert(f"task {i}")
    screen = FakeScreen(["q"], height=10, width=30)

    run_ui(screen, state, MONO)

    list_pane = screen.subwindows[0]
    labels = [text for y, _, text in list_pane.lines if y > 0]
    assert labels == [f"[ ] task {i}" for i in range(15, 20)]


def test_tiny_terminal_does_not_crash(settings: SimpleNamespace) -> None:
    state = create_initial_state(settings=settings)
    screen = FakeScreen(["q"], height=4, width=8)
    run_ui(screen, state, MONO)
    assert "Termina" in screen.all_text()


def test_control_characters_in_stored_text_are_drawn_safely(settings: SimpleNamespace) -> None:
    JsonFileRepo(settings.db_path).save([Task("nul\x00byte"), Task("a" + "\n" * 30 + "b")])
    state = create_initial_state(settings=settings)
    state.status = "line one\nline two"
    screen = FakeScreen(["q"], width=60)

    run_ui(screen, state, MONO)

    text = screen.all_text()
    assert "[ ] nul?byte" in text
    assert "[ ] a" + "?" * 30 + "b" in text
    assert "line one?line two" in text
    # stored text is untouched
    assert state.store.tasks[0].text == "nul\x00byte"

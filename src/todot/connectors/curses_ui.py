# src/todot/connectors/curses_ui.py

from __future__ import annotations

import contextlib
import curses
import logging
from dataclasses import dataclass

from ..core.errors import PersistenceError
from ..core.state import AppState
from ..input import keys
from ..input.keys import Key
from ..tasks.task_models import Mode

logger = logging.getLogger(__name__)

INPUT_PANE_HEIGHT = 3
TASKS_TITLE = " Tasks "
INPUT_TITLE = " Add a task "

_ENTER_CHARS = ("\n", "\r")
_BACKSPACE_CHARS = ("\x7f", "\b")
_ESC_CHAR = "\x1b"


def translate_key(ch: str | int) -> Key:
    """Map a get_wch() result (str for characters, int for KEY_* codes) to a Key."""
    if isinstance(ch, str):
        if ch in _ENTER_CHARS:
            return keys.ENTER
        if ch in _BACKSPACE_CHARS:
            return keys.BACKSPACE
        if ch == _ESC_CHAR:
            return keys.ESC
        if ch.isprintable():
            return Key.of(ch)
        return keys.OTHER

    if ch == curses.KEY_UP:
        return keys.UP
    if ch == curses.KEY_DOWN:
        return keys.DOWN
    if ch == curses.KEY_ENTER:
        return keys.ENTER
    if ch == curses.KEY_BACKSPACE:
        return keys.BACKSPACE
    return keys.OTHER


@dataclass(frozen=True, slots=True)
class Palette:
    done: int
    pending: int
    selected: int
    delete_prompt: int
    insert_prompt: int
    status: int

    @classmethod
    def monochrome(cls) -> Palette:
        return cls(
            done=curses.A_DIM,
            pending=curses.A_NORMAL,
            selected=curses.A_BOLD | curses.A_REVERSE,
            delete_prompt=curses.A_BOLD | curses.A_STANDOUT,
            insert_prompt=curses.A_BOLD,
            status=curses.A_BOLD,
        )

    @classmethod
    def for_terminal(cls) -> Palette:
        """Green done / yellow pending / red delete prompt when the terminal has colors."""
        if not curses.has_colors():
            return cls.monochrome()
        curses.start_color()
        with contextlib.suppress(curses.error):
            curses.use_default_colors()
        curses.init_pair(1, curses.COLOR_GREEN, -1)
        curses.init_pair(2, curses.COLOR_YELLOW, -1)
        curses.init_pair(3, curses.COLOR_RED, -1)
        return cls(
            done=curses.color_pair(1),
            pending=curses.color_pair(2),
            selected=curses.A_BOLD | curses.A_REVERSE,
            delete_prompt=curses.color_pair(3) | curses.A_BOLD,
            insert_prompt=curses.A_BOLD,
            status=curses.color_pair(3),
        )


def _scroll_offset(selected: int, visible: int, total: int) -> int:
    if visible <= 0 or total <= visible:
        return 0
    return min(max(0, selected - visible + 1), total - visible)


def _displayable(text: str) -> str:
    """Replace characters curses cannot draw in one cell (NUL, newlines, other controls) with "?"."""
    if text.isprintable():
        return text
    return "".join(ch if ch.isprintable() else "?" for ch in text)


def _put(win, y: int, x: int, text: str, n: int, attr: int = 0) -> None:
    # curses reports ERR for writes that clip at the window edge
    with contextlib.suppress(curses.error):
        win.addnstr(y, x, _displayable(text), n, attr)


def _show_cursor(visible: bool) -> None:
    with contextlib.suppress(curses.error):
        curses.curs_set(1 if visible else 0)


def draw(stdscr, state: AppState, palette: Palette) -> None:
    """Render the task list pane and the input/status pane."""
    stdscr.erase()
    height, width = stdscr.getmaxyx()
    if height < INPUT_PANE_HEIGHT + 3 or width < 10:
        _put(stdscr, 0, 0, "Terminal too small", max(1, width - 1))
        stdscr.refresh()
        return

    list_h = height - INPUT_PANE_HEIGHT
    tasks_win = stdscr.derwin(list_h, width, 0, 0)
    input_win = stdscr.derwin(INPUT_PANE_HEIGHT, width, list_h, 0)

    # ---- task list ----
    tasks_win.box()
    _put(tasks_win, 0, 2, TASKS_TITLE, width - 4)
    inner_w = width - 2
    visible = list_h - 2
    store = state.store
    offset = _scroll_offset(store.current_index, visible, len(store))
    for row in store.render_rows():
        y = row.index - offset
        if y < 0:
            continue
        if y >= visible:
            break
        attr = palette.done if row.completed else palette.pending
        if row.selected:
            attr |= palette.selected
        _put(tasks_win, 1 + y, 1, row.label, inner_w, attr)

    # ---- input / status ----
    machine = state.machine
    input_win.box()
    _put(input_win, 0, 2, INPUT_TITLE, width - 4)
    if state.status:
        status = f" {state.status} "
        _put(input_win, INPUT_PANE_HEIGHT - 1, 2, status, width - 4, palette.status)

    hint = machine.status_hint()
    if machine.mode is Mode.DELETE:
        attr = palette.delete_prompt
    elif machine.mode is Mode.INSERT:
        attr = palette.insert_prompt
    else:
        attr = curses.A_NORMAL
    shown = hint
    if machine.mode is Mode.INSERT and len(hint) >= inner_w:
        # keep the end of long input (and the cursor) visible
        shown = hint[-(inner_w - 1):]
    _put(input_win, 1, 1, shown, inner_w, attr)

    if machine.mode is Mode.INSERT:
        _show_cursor(True)
        stdscr.move(list_h + 1, 1 + len(shown))
    else:
        _show_cursor(False)
    stdscr.refresh()


def _next_key(stdscr) -> Key | None:
    try:
        ch = stdscr.get_wch()
    except curses.error:
        # timeout elapsed with no input
        return None
    if ch == curses.KEY_RESIZE:
        return None
    return translate_key(ch)


def run_ui(stdscr, state: AppState, palette: Palette | None = None) -> None:
    """
    Main loop: draw, wait up to poll_interval_ms for a key, dispatch, repeat.

    Storage failures are shown in the status line; the loop keeps running.
    """
    if palette is None:
        palette = Palette.for_terminal()

    stdscr.keypad(True)
    stdscr.timeout(int(getattr(state.settings, "poll_interval_ms", 250)))
    logger.info("Curses UI started (tasks=%d).", len(state.store))

    while state.running:
        draw(stdscr, state, palette)
        key = _next_key(stdscr)
        if key is None:
            continue

        state.status = None
        try:
            if state.machine.handle_key(key):
                state.running = False
        except PersistenceError as e:
            logger.error("Storage error on %s: %s", state.store.repo.describe(), e)
            state.status = str(e)

    logger.info("Curses UI finished.")

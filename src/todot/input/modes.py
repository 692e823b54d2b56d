# src/todot/input/modes.py

"""
Input mode machine.

Maps key presses to TaskStore operations and mode transitions:

    NORMAL  i/o/a -> INSERT     k/Up, j/Down -> move     Space/Enter -> toggle
            d -> DELETE         q -> quit
    INSERT  printable -> append  Backspace -> pop   Enter -> insert + NORMAL
            Esc -> discard + NORMAL
    DELETE  d -> delete + NORMAL   Esc -> NORMAL   anything else ignored

INSERT and DELETE handling comes first, so global NORMAL bindings ("d", "q",
...) never fire while typing or confirming.
"""

from __future__ import annotations

import logging

from ..tasks.task_models import Mode
from ..tasks.task_store import TaskStore
from .keys import Key, KeyCode

logger = logging.getLogger(__name__)

INSERT_KEYS = ("i", "o", "a")
NORMAL_HINT = "Add a task (Press 'i' to insert)"
DELETE_HINT = "Press 'd' again to delete the selected task"


class ModeMachine:
    def __init__(self, store: TaskStore) -> None:
        self.store = store
        self.mode = Mode.NORMAL
        self.new_task_text = ""

    def handle_key(self, key: Key) -> bool:
        """
        Dispatch one key press. Returns True when the user asked to quit.

        The mode change is applied before the store is touched, so a
        PersistenceError raised by the store still leaves the machine in the
        mode the key asked for.
        """
        if self.mode is Mode.INSERT:
            self._handle_insert(key)
            return False
        if self.mode is Mode.DELETE:
            self._handle_delete(key)
            return False
        return self._handle_normal(key)

    def status_hint(self) -> str:
        if self.mode is Mode.INSERT:
            return self.new_task_text
        if self.mode is Mode.DELETE:
            return DELETE_HINT
        return NORMAL_HINT

    # ---- per-mode handlers ----

    def _handle_normal(self, key: Key) -> bool:
        if key.is_char(*INSERT_KEYS):
            self.new_task_text = ""
            self._enter(Mode.INSERT)
        elif key.is_char("q"):
            logger.info("Quit requested.")
            return True
        elif key.code is KeyCode.UP or key.is_char("k"):
            self.store.prev()
        elif key.code is KeyCode.DOWN or key.is_char("j"):
            self.store.next()
        elif key.code is KeyCode.ENTER or key.is_char(" "):
            self.store.toggle()
        elif key.is_char("d"):
            self._enter(Mode.DELETE)
        return False

    def _handle_insert(self, key: Key) -> None:
        if key.code is KeyCode.CHAR:
            self.new_task_text += key.char
        elif key.code is KeyCode.BACKSPACE:
            self.new_task_text = self.new_task_text[:-1]
        elif key.code is KeyCode.ENTER:
            text, self.new_task_text = self.new_task_text, ""
            self._enter(Mode.NORMAL)
            self.store.insert(text)
        elif key.code is KeyCode.ESC:
            self.new_task_text = ""
            self._enter(Mode.NORMAL)

    def _handle_delete(self, key: Key) -> None:
        if key.is_char("d"):
            self._enter(Mode.NORMAL)
            self.store.delete()
        elif key.code is KeyCode.ESC:
            self._enter(Mode.NORMAL)

    def _enter(self, mode: Mode) -> None:
        logger.debug("Mode %s -> %s", self.mode, mode)
        self.mode = mode

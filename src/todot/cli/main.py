# src/todot/cli/main.py

"""
CLI entrypoint.

Initializes file logging, builds AppState, then hands the terminal to the
curses UI until the user presses "q". curses.wrapper restores the terminal on
every exit path.
"""

from __future__ import annotations

import curses
import logging
import os

from ..cli.bootstrap import create_initial_state
from ..config import get_settings
from ..connectors.curses_ui import run_ui
from ..logging_setup import level_from_name, setup_logging

logger = logging.getLogger(__name__)

# Milliseconds curses waits after ESC to tell a lone Escape from an escape sequence.
ESC_DELAY_MS = "25"


def main() -> None:
    settings = get_settings()

    # stderr belongs to curses while the UI runs: log to file only.
    setup_logging(
        log_dir=settings.log_dir,
        console=False,
        file_level=level_from_name(settings.log_level, logging.DEBUG),
    )
    logger.info("Starting %s...", settings.app_name)

    state = create_initial_state(settings=settings)

    os.environ.setdefault("ESCDELAY", ESC_DELAY_MS)
    try:
        curses.wrapper(run_ui, state)
    except KeyboardInterrupt:
        logger.info("KeyboardInterrupt, exiting.")
    finally:
        logger.info("Bye.")


if __name__ == "__main__":
    main()

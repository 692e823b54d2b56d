# src/todot/core/errors.py

"""
Exceptions shared across the app.

Everything the UI layer is expected to recover from derives from TodotError:
the loop shows the message in the status line and keeps running.
"""

from __future__ import annotations


class TodotError(Exception):
    """Base class for recoverable todot errors."""


class ConfigError(TodotError):
    """Config file or config value could not be parsed."""


class PersistenceError(TodotError):
    """
    Loading or saving the task list failed.

    `operation` is "load" or "save". The underlying exception (OSError,
    json.JSONDecodeError, socket.timeout, ...) is chained as __cause__.
    """

    def __init__(self, operation: str, message: str) -> None:
        super().__init__(message)
        self.operation = operation

    def __str__(self) -> str:
        return f"{self.operation} failed: {self.args[0]}"

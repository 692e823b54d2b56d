# src/todot/storage/remote.py

"""
Client side of the sync peer line protocol.

Wire format (one TCP connection per call, no framing beyond one newline):

    save:  -> b"write\\n" + <JSON array>   (then half-close)
           <- one line, ignored
    load:  -> b"read\\n"
           <- <JSON array> b"\\n"

There is no authentication and no status code; anything that is not a JSON
array on load surfaces as PersistenceError.
"""

from __future__ import annotations

import logging
import socket
from collections.abc import Sequence

from ..core.errors import PersistenceError
from ..tasks.task_models import Task
from .codec import decode_tasks, encode_tasks

logger = logging.getLogger(__name__)

READ_COMMAND = b"read\n"
WRITE_COMMAND = b"write\n"
MAX_LINE_BYTES = 16 * 1024 * 1024


def read_line(sock: socket.socket, *, limit: int = MAX_LINE_BYTES) -> bytes:
    """Read up to and excluding the first b"\\n" (or EOF)."""
    buf = bytearray()
    while True:
        chunk = sock.recv(4096)
        if not chunk:
            return bytes(buf)
        nl = chunk.find(b"\n")
        if nl >= 0:
            buf += chunk[:nl]
            return bytes(buf)
        buf += chunk
        if len(buf) > limit:
            raise ValueError(f"line exceeds {limit} bytes")


class RemoteTaskRepo:
    def __init__(self, host: str, port: int, *, timeout: float = 5.0) -> None:
        self._host = host
        self._port = int(port)
        self._timeout = float(timeout)

    def describe(self) -> str:
        return f"peer:{self._host}:{self._port}"

    def _connect(self, operation: str) -> socket.socket:
        try:
            return socket.create_connection((self._host, self._port), timeout=self._timeout)
        except OSError as e:
            raise PersistenceError(operation, f"cannot connect to {self.describe()}: {e}") from e

    def load(self) -> list[Task]:
        sock = self._connect("load")
        with sock:
            try:
                sock.sendall(READ_COMMAND)
                line = read_line(sock)
            except (OSError, ValueError) as e:
                raise PersistenceError("load", f"read from {self.describe()} failed: {e}") from e

        tasks = decode_tasks(line, source=self.describe())
        logger.debug("Loaded %d tasks from %s", len(tasks), self.describe())
        return tasks

    def save(self, tasks: Sequence[Task]) -> None:
        payload = WRITE_COMMAND + encode_tasks(tasks).encode("utf-8")
        sock = self._connect("save")
        with sock:
            try:
                sock.sendall(payload)
                sock.shutdown(socket.SHUT_WR)
                ack = read_line(sock)
            except (OSError, ValueError) as e:
                raise PersistenceError("save", f"write to {self.describe()} failed: {e}") from e

        if ack.strip() == b"error":
            # the line is informational only; legacy peers send arbitrary text
            logger.warning("Peer %s answered %r to write", self.describe(), ack)
        logger.debug("Saved %d tasks to %s (ack=%r)", len(tasks), self.describe(), ack)

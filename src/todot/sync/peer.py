# src/todot/sync/peer.py

"""
Reference sync peer.

Serves one task list (kept in a local JSON file) over the same line protocol
RemoteTaskRepo speaks:

    "read\\n"            -> JSON array + "\\n"
    "write\\n" + JSON    -> body read until EOF, stored, "ok\\n"
    anything else       -> "error\\n"

Each connection carries exactly one command.
"""

from __future__ import annotations

import json
import logging
import socketserver
import threading

from ..config import get_settings, parse_address
from ..core.errors import ConfigError, PersistenceError
from ..logging_setup import level_from_name, setup_logging
from ..storage.codec import decode_tasks, encode_tasks
from ..storage.json_file import JsonFileRepo
from ..storage.remote import MAX_LINE_BYTES

logger = logging.getLogger(__name__)

ACK = b"ok\n"
ERROR = b"error\n"


class _PeerHandler(socketserver.StreamRequestHandler):
    server: PeerServer

    def setup(self) -> None:
        # StreamRequestHandler applies self.timeout to the connection socket.
        self.timeout = self.server.handler_timeout
        super().setup()

    def _read_body(self) -> bytes:
        """
        Read the JSON body of a write.

        Clients may or may not half-close after the body, so reading stops as
        soon as the buffer holds one complete JSON value, with EOF as the
        fallback. Raises ValueError past MAX_LINE_BYTES and TimeoutError when
        the client goes quiet mid-body.
        """
        decoder = json.JSONDecoder()
        buf = bytearray()
        while True:
            chunk = self.rfile.read1(65536)
            if not chunk:
                return bytes(buf)
            buf += chunk
            if len(buf) > MAX_LINE_BYTES:
                raise ValueError(f"body exceeds {MAX_LINE_BYTES} bytes")
            try:
                decoder.raw_decode(buf.decode("utf-8").lstrip())
            except (UnicodeDecodeError, json.JSONDecodeError):
                continue
            return bytes(buf)

    def handle(self) -> None:
        peer = "%s:%s" % self.client_address[:2]
        try:
            command = self.rfile.readline(64).strip()
        except OSError as e:
            logger.warning("no command from %s: %s", peer, e)
            return

        if command == b"read":
            try:
                body = encode_tasks(self.server.read_tasks())
            except PersistenceError:
                logger.exception("read from %s failed", peer)
                self.wfile.write(ERROR)
                return
            self.wfile.write(body.encode("utf-8") + b"\n")
            logger.debug("served read to %s", peer)
            return

        if command == b"write":
            try:
                raw = self._read_body()
            except (OSError, ValueError) as e:
                logger.warning("write from %s rejected: %s", peer, e)
                self.wfile.write(ERROR)
                return
            try:
                tasks = decode_tasks(raw, source=peer)
                self.server.write_tasks(tasks)
            except PersistenceError as e:
                logger.warning("write from %s rejected: %s", peer, e)
                self.wfile.write(ERROR)
                return
            self.wfile.write(ACK)
            logger.debug("stored %d tasks from %s", len(tasks), peer)
            return

        logger.warning("unknown command %r from %s", command, peer)
        self.wfile.write(ERROR)


class PeerServer(socketserver.ThreadingTCPServer):
    allow_reuse_address = True
    daemon_threads = True

    def __init__(
        self,
        address: tuple[str, int],
        repo: JsonFileRepo,
        *,
        handler_timeout: float | None = 5.0,
    ) -> None:
        super().__init__(address, _PeerHandler)
        self.repo = repo
        self.handler_timeout = handler_timeout
        self._lock = threading.Lock()

    def read_tasks(self):
        with self._lock:
            return self.repo.load()

    def write_tasks(self, tasks) -> None:
        with self._lock:
            self.repo.save(tasks)


def main() -> None:
    settings = get_settings()
    setup_logging(
        log_dir=settings.log_dir,
        console_level=level_from_name(settings.log_level),
    )

    try:
        host, port = parse_address(settings.peer_bind)
    except ConfigError as e:
        logger.error("Bad TODOT_PEER_BIND: %s", e)
        return

    repo = JsonFileRepo(settings.data_dir / "peer.json")
    with PeerServer((host, port), repo, handler_timeout=settings.connect_timeout) as server:
        logger.info("Sync peer listening on %s:%s (store=%s)", host, port, repo.path)
        try:
            server.serve_forever()
        except KeyboardInterrupt:
            logger.info("KeyboardInterrupt, shutting down.")
    logger.info("Bye.")


if __name__ == "__main__":
    main()

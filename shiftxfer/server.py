"""Two-port file server: a control port hands out the data port, the data port serves the file."""

from __future__ import annotations

import argparse
import contextlib
import enum
import logging
import os
import re
import select
import socket
import struct
import threading
from collections.abc import Iterable, Iterator
from pathlib import Path

from .cipher import encipher_file

CONTROL_PORT = 27015
DATA_PORT = 27016
CHUNK_SIZE = 1024
BACKLOG = 80
MAX_THREADS = 99
PORT_FORMAT = struct.Struct("<i")

_LINE = re.compile(rb"[^\n]*\n|[^\n]+")
_POLL_INTERVAL = 0.2

logger = logging.getLogger(__name__)


class Request(bytes, enum.Enum):
    """One-byte requests a client sends after connecting."""

    PORT = b"1"
    DOWNLOAD = b"2"


def _accept_ready(sockets: list[socket.socket], timeout: float | None):
    ready, _, _ = select.select(sockets, [], [], timeout)
    for sock in sockets:
        if sock in ready:
            return sock.accept()
    return None


def accept_any(sockets: Iterable[socket.socket]) -> tuple[socket.socket, object]:
    """Wait until any listening socket has a connection and accept it."""
    listeners = list(sockets)
    if not listeners:
        raise ValueError("no sockets to accept on")
    accepted = _accept_ready(listeners, None)
    if accepted is None:
        raise OSError("select returned without a ready socket")
    return accepted


def send_port(conn: socket.socket, port: int) -> None:
    """Send ``port`` as a 4-byte little-endian signed integer."""
    conn.sendall(PORT_FORMAT.pack(port))


def _chunks(data: bytes) -> Iterator[bytes]:
    for match in _LINE.finditer(data):
        line = match.group()
        for start in range(0, len(line), CHUNK_SIZE - 1):
            yield line[start:start + CHUNK_SIZE - 1].ljust(CHUNK_SIZE, b"\0")


def send_file(conn: socket.socket, path: str | os.PathLike) -> int:
    """Send a file line by line, each piece NUL-padded to a full chunk; return bytes sent."""
    total = 0
    for chunk in _chunks(Path(path).read_bytes()):
        conn.sendall(chunk)
        total += len(chunk)
    return total


class FileServer:
    """Serves one enciphered file over a control port and a data port."""

    def __init__(
        self,
        source: str | os.PathLike = "send1.txt",
        host: str = "::",
        control_port: int = CONTROL_PORT,
        data_port: int = DATA_PORT,
        work_path: str | os.PathLike = "encripted.txt",
    ):
        self.source = Path(source)
        self.host = host
        self.control_port = control_port
        self.data_port = data_port
        self.work_path = Path(work_path)
        self._listeners: list[socket.socket] = []
        self._threads: list[threading.Thread] = []
        self._closed = threading.Event()
        self._lock = threading.Lock()

    def _listen(self, port: int) -> socket.socket:
        family, kind, proto, _, address = socket.getaddrinfo(
            self.host, port, type=socket.SOCK_STREAM, flags=socket.AI_PASSIVE
        )[0]
        sock = socket.socket(family, kind, proto)
        try:
            if os.name != "nt":
                sock.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
            if family == socket.AF_INET6:
                with contextlib.suppress(OSError, AttributeError):
                    sock.setsockopt(socket.IPPROTO_IPV6, socket.IPV6_V6ONLY, 0)
            sock.bind(address)
            sock.listen(BACKLOG)
        except OSError:
            sock.close()
            raise
        return sock

    def start(self) -> "FileServer":
        """Bind and listen on both ports; ports given as 0 are replaced by the bound ones."""
        if self._listeners:
            raise RuntimeError("server already started")
        control = self._listen(self.control_port)
        try:
            data = self._listen(self.data_port)
        except OSError:
            control.close()
            raise
        self._listeners = [control, data]
        self.control_port = control.getsockname()[1]
        self.data_port = data.getsockname()[1]
        self._closed.clear()
        logger.info("listening on ports %d and %d", self.control_port, self.data_port)
        return self

    def serve_forever(self) -> None:
        """Accept connections on either port until closed, one thread per client."""
        if not self._listeners:
            self.start()
        while not self._closed.is_set():
            try:
                accepted = _accept_ready(self._listeners, _POLL_INTERVAL)
            except (OSError, ValueError):
                if self._closed.is_set():
                    break
                raise
            if accepted is None:
                continue
            conn, address = accepted
            logger.info("connection accepted from %s", address)
            thread = threading.Thread(target=self._serve_client, args=(conn,), daemon=True)
            thread.start()
            self._threads.append(thread)
            if len(self._threads) >= MAX_THREADS:
                for pending in self._threads:
                    pending.join()
                self._threads.clear()

    def _serve_client(self, conn: socket.socket) -> None:
        try:
            self.handle_client(conn)
        except OSError as exc:
            logger.error("client failed: %s", exc)

    def handle_client(self, conn: socket.socket) -> Request | None:
        """Read one request byte, answer it and close the connection."""
        with conn:
            try:
                raw = conn.recv(1)
            except OSError as exc:
                logger.error("receive failed: %s", exc)
                return None
            try:
                request = Request(raw)
            except ValueError:
                logger.info("unknown request %r", raw)
                return None
            if request is Request.PORT:
                send_port(conn, self.data_port)
            else:
                with self._lock:
                    encipher_file(self.source, self.work_path)
                    try:
                        send_file(conn, self.work_path)
                    finally:
                        with contextlib.suppress(FileNotFoundError):
                            self.work_path.unlink()
                logger.info("file sent")
            return request

    def close(self) -> None:
        """Stop serving and close the listening sockets."""
        self._closed.set()
        for sock in self._listeners:
            sock.close()
        self._listeners = []
        for thread in self._threads:
            thread.join(timeout=5)
        self._threads.clear()

    def __enter__(self) -> "FileServer":
        return self.start()

    def __exit__(self, *args) -> None:
        self.close()


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Serve an enciphered file to clients.")
    parser.add_argument("--source", default="send1.txt", help="file to serve")
    parser.add_argument("--host", default="::", help="address to listen on")
    parser.add_argument("--port", type=int, default=CONTROL_PORT, help="control port")
    parser.add_argument("--data-port", type=int, default=DATA_PORT, help="data port")
    parser.add_argument("--work-path", default="encripted.txt", help="temporary enciphered file")
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.INFO, format="%(message)s")
    try:
        server = FileServer(args.source, args.host, args.port, args.data_port, args.work_path)
        server.start()
    except OSError as exc:
        print(f"Starting server failed: {exc}")
        return 1
    with server:
        print("Waiting for incoming connections...")
        try:
            server.serve_forever()
        except KeyboardInterrupt:
            pass
    return 0
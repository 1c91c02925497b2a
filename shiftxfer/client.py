"""Client that asks the control port for a data port, then downloads and deciphers the file."""

from __future__ import annotations

import argparse
import contextlib
import os
import socket
import struct
from pathlib import Path
from typing import BinaryIO

from .cipher import decipher_file

SERVER_IPV4 = "127.0.0.1"
SERVER_IPV6 = "::1"
CONTROL_PORT = 27015
CHUNK_SIZE = 1024
PORT_FORMAT = struct.Struct("<i")
ENCRYPTED_PATH = "recvEncripted.txt"
OUTPUT_PATH = "recv.txt"

REQUEST_PORT = b"1"
REQUEST_DOWNLOAD = b"2"

PathLike = str | os.PathLike


def _write_record(out: BinaryIO, record: bytes) -> int:
    text = record.split(b"\0", 1)[0]
    out.write(text)
    return len(text)


def receive_to_file(sock: socket.socket, path: PathLike) -> int:
    """Read NUL-padded records from ``sock`` until it closes; write their text to ``path``.

    Each record is cut at its first NUL byte. Returns the number of bytes written.
    """
    written = 0
    pending = b""
    with open(path, "wb") as out:
        while True:
            block = sock.recv(CHUNK_SIZE)
            if not block:
                break
            pending += block
            while len(pending) >= CHUNK_SIZE:
                record, pending = pending[:CHUNK_SIZE], pending[CHUNK_SIZE:]
                written += _write_record(out, record)
        if pending:
            written += _write_record(out, pending)
    return written


def _receive_exact(sock: socket.socket, size: int) -> bytes:
    data = b""
    while len(data) < size:
        block = sock.recv(size - len(data))
        if not block:
            break
        data += block
    return data


def request_port(host: str = SERVER_IPV4, port: int = CONTROL_PORT) -> int:
    """Ask the control port which port serves the file."""
    with socket.create_connection((host, port)) as sock:
        sock.sendall(REQUEST_PORT)
        reply = _receive_exact(sock, PORT_FORMAT.size)
    if len(reply) != PORT_FORMAT.size:
        raise ConnectionError(f"expected {PORT_FORMAT.size} bytes for the port, got {len(reply)}")
    (data_port,) = PORT_FORMAT.unpack(reply)
    return data_port


def download(
    host: str,
    port: int,
    encrypted_path: PathLike = ENCRYPTED_PATH,
    output_path: PathLike = OUTPUT_PATH,
) -> int:
    """Download the enciphered file from the data port and decipher it into ``output_path``.

    The intermediate enciphered file is removed afterwards. Returns the bytes deciphered.
    """
    with socket.create_connection((host, port)) as sock:
        sock.sendall(REQUEST_DOWNLOAD)
        receive_to_file(sock, encrypted_path)
    try:
        return decipher_file(encrypted_path, output_path)
    finally:
        with contextlib.suppress(FileNotFoundError):
            Path(encrypted_path).unlink()


def fetch(
    host: str = SERVER_IPV4,
    port: int = CONTROL_PORT,
    encrypted_path: PathLike = ENCRYPTED_PATH,
    output_path: PathLike = OUTPUT_PATH,
) -> int:
    """Ask for the data port, then download and decipher the file from it."""
    data_port = request_port(host, port)
    return download(host, data_port, encrypted_path, output_path)


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Download and decipher a file from the server.")
    parser.add_argument("--host", default=None, help="server address")
    parser.add_argument("-6", "--ipv6", action="store_true", help="use the IPv6 loopback address")
    parser.add_argument("--port", type=int, default=CONTROL_PORT, help="control port")
    parser.add_argument("--encrypted", default=ENCRYPTED_PATH, help="temporary enciphered file")
    parser.add_argument("--output", default=OUTPUT_PATH, help="deciphered output file")
    args = parser.parse_args(argv)

    host = args.host or (SERVER_IPV6 if args.ipv6 else SERVER_IPV4)
    try:
        data_port = request_port(host, args.port)
        print(f"Received port {data_port}")
        download(host, data_port, args.encrypted, args.output)
    except OSError as exc:
        print(f"Download failed: {exc}")
        return 1
    print("Download complete")
    print("Decryption done")
    return 0
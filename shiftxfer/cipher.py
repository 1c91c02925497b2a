"""Single-byte shift cipher used to obscure files in transit."""

from __future__ import annotations

import os
from pathlib import Path

_ENCIPHER_TABLE = bytes((value + 1) % 256 for value in range(256))
_DECIPHER_TABLE = bytes((value - 1) % 256 for value in range(256))

PathLike = str | os.PathLike


def encipher(data: bytes) -> bytes:
    """Shift every byte of ``data`` up by one, wrapping at 256."""
    return bytes(data).translate(_ENCIPHER_TABLE)


def decipher(data: bytes) -> bytes:
    """Shift every byte of ``data`` down by one, wrapping at 0."""
    return bytes(data).translate(_DECIPHER_TABLE)


def encipher_file(source: PathLike, destination: PathLike) -> int:
    """Encipher ``source`` into ``destination``; return the number of bytes written."""
    payload = encipher(Path(source).read_bytes())
    Path(destination).write_bytes(payload)
    return len(payload)


def decipher_file(source: PathLike, destination: PathLike) -> int:
    """Decipher ``source`` into ``destination``; return the number of bytes written."""
    payload = decipher(Path(source).read_bytes())
    Path(destination).write_bytes(payload)
    return len(payload)
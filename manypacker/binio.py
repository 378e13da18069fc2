"""Small helpers for reading binary asset files."""

from __future__ import annotations

from typing import BinaryIO


def read_cstring(stream: BinaryIO) -> str:
    """Read bytes up to a NUL byte or the end of the stream.

    The terminator is consumed but not returned. Bytes that are not valid
    UTF-8 are kept losslessly as surrogate escapes.
    """
    collected = bytearray()
    while True:
        byte = stream.read(1)
        if not byte or byte == b"\0":
            break
        collected += byte
    return collected.decode("utf-8", errors="surrogateescape")
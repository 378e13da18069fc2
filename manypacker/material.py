"""Reader for binary material files."""

from __future__ import annotations

import os
import struct
from typing import BinaryIO

from .binio import read_cstring

_HEADER_SKIP = 48
_COUNT_TRAILER_SKIP = 14
_COUNT = struct.Struct("<H")
_MAP_ENTRY = struct.Struct("<III")


def _read(stream: BinaryIO, size: int) -> bytes:
    data = stream.read(size)
    if len(data) != size:
        raise ValueError("unexpected end of material data")
    return data


def parse_material(stream: BinaryIO) -> list[str]:
    """Return the image names referenced by a material's texture maps.

    The stream must be seekable: map names are stored at absolute offsets.
    """
    _read(stream, _HEADER_SKIP)
    (map_count,) = _COUNT.unpack(_read(stream, _COUNT.size))
    _read(stream, _COUNT_TRAILER_SKIP)

    images = []
    for _ in range(map_count):
        _type_offset, _unused, name_offset = _MAP_ENTRY.unpack(_read(stream, _MAP_ENTRY.size))
        resume = stream.tell()
        stream.seek(name_offset)
        images.append(read_cstring(stream))
        stream.seek(resume)
    return images


def read_material(path: str | os.PathLike[str]) -> list[str]:
    """Read the material file at ``path`` and return its image names."""
    with open(path, "rb") as stream:
        return parse_material(stream)
"""Reader for binary xmodel files (version 25)."""

from __future__ import annotations

import os
import struct
from dataclasses import dataclass, field
from typing import BinaryIO

from .binio import read_cstring

SUPPORTED_VERSION = 25
LOD_SLOTS = 4

_U16 = struct.Struct("<H")
_U32 = struct.Struct("<I")
_HEADER_SKIP = 25
_SECTION_SKIP = 4
_GROUP_ENTRY_SIZE = 48
_GROUP_TRAILER_SIZE = 36


class XModelError(ValueError):
    """Raised when an xmodel file cannot be read."""


@dataclass
class XModelInfo:
    """Names of the LODs and of the first LOD's materials."""

    lods: list[str] = field(default_factory=list)
    materials: list[str] = field(default_factory=list)


def _read(stream: BinaryIO, size: int) -> bytes:
    data = stream.read(size)
    if len(data) != size:
        raise XModelError("unexpected end of xmodel data")
    return data


def parse_xmodel(stream: BinaryIO) -> XModelInfo:
    """Parse an xmodel stream and return its LODs and materials."""
    head = stream.read(_U16.size)
    if len(head) != _U16.size or _U16.unpack(head)[0] != SUPPORTED_VERSION:
        raise XModelError("invalid or unsupported XModel version")

    _read(stream, _HEADER_SKIP)
    read_cstring(stream)

    lods = []
    for _ in range(LOD_SLOTS):
        _read(stream, _U32.size)
        name = read_cstring(stream)
        if name:
            lods.append(name)
    if not lods:
        raise XModelError("no LODs found in model")

    _read(stream, _SECTION_SKIP)
    (count,) = _U32.unpack(_read(stream, _U32.size))
    for _ in range(count):
        (subcount,) = _U32.unpack(_read(stream, _U32.size))
        _read(stream, subcount * _GROUP_ENTRY_SIZE + _GROUP_TRAILER_SIZE)

    (material_count,) = _U16.unpack(_read(stream, _U16.size))
    materials = [read_cstring(stream) for _ in range(material_count)]
    return XModelInfo(lods=lods, materials=materials)


def read_xmodel(path: str | os.PathLike[str]) -> XModelInfo:
    """Read and parse the xmodel file at ``path``."""
    try:
        with open(path, "rb") as stream:
            return parse_xmodel(stream)
    except OSError as exc:
        raise XModelError(f"failed to open xmodel file {os.fspath(path)}") from exc
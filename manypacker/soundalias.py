"""Reader for sound alias CSV tables."""

from __future__ import annotations

import csv
import os

FILE_COLUMN = "file"


class SoundAliasError(ValueError):
    """Raised when a sound alias table has no usable file column."""


def parse_sound_alias(text: str) -> list[str]:
    """Return every value of the ``file`` column, blank lines ignored."""
    lines = [line.rstrip("\r") for line in text.split("\n") if line.strip(" \t\r\n")]
    rows = list(csv.reader(lines))
    if not rows:
        raise SoundAliasError("sound alias table is empty")

    header, *records = rows
    if FILE_COLUMN not in header:
        raise SoundAliasError(f"sound alias table has no '{FILE_COLUMN}' column")
    column = len(header) - 1 - header[::-1].index(FILE_COLUMN)

    files = []
    for number, record in enumerate(records, start=2):
        if column >= len(record):
            raise SoundAliasError(f"row {number} has no '{FILE_COLUMN}' value")
        files.append(record[column])
    return files


def read_sound_alias(path: str | os.PathLike[str]) -> list[str]:
    """Read the sound alias table at ``path`` and return its sound files."""
    with open(path, "rb") as stream:
        raw = stream.read()
    return parse_sound_alias(raw.decode("utf-8-sig", errors="surrogateescape"))
"""Persistent user preferences."""

from __future__ import annotations

import json
import os
from dataclasses import dataclass, replace
from pathlib import Path

from platformdirs import user_config_path

from .library import is_cod4_root
from .model import NAME

_ROOT_KEY = "rootfolder"
_OUTPUT_KEY = "outputfolder"


def default_prefs_path() -> Path:
    """Location of the preferences file in the user's config folder."""
    return user_config_path(NAME, appauthor=False) / "prefs.json"


@dataclass
class Preferences:
    """Game root folder and export output folder remembered between runs."""

    root_folder: str = ""
    output_folder: str = ""

    @classmethod
    def load(cls, path: str | os.PathLike[str] | None = None) -> Preferences:
        """Load preferences; a missing or unreadable file gives defaults."""
        target = Path(path) if path is not None else default_prefs_path()
        try:
            data = json.loads(target.read_text(encoding="utf-8"))
        except (FileNotFoundError, json.JSONDecodeError, UnicodeDecodeError):
            return cls()
        if not isinstance(data, dict):
            return cls()

        def text(key: str) -> str:
            value = data.get(key, "")
            return value if isinstance(value, str) else ""

        return cls(root_folder=text(_ROOT_KEY), output_folder=text(_OUTPUT_KEY))

    def save(self, path: str | os.PathLike[str] | None = None) -> None:
        """Write the preferences, creating the folder if needed."""
        target = Path(path) if path is not None else default_prefs_path()
        target.parent.mkdir(parents=True, exist_ok=True)
        payload = {_ROOT_KEY: self.root_folder, _OUTPUT_KEY: self.output_folder}
        target.write_text(json.dumps(payload, indent=2), encoding="utf-8")


def resolve_root(prefs: Preferences, cwd: str | os.PathLike[str]) -> Preferences:
    """Fill in a missing root folder with ``cwd`` when it is a game folder."""
    if prefs.root_folder or not is_cod4_root(cwd):
        return prefs
    return replace(prefs, root_folder=os.fspath(cwd))
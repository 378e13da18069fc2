"""Discovering raw assets in a game root folder and tracking a selection."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterator

from .model import Asset, AssetType


def _asset_dirs(root: str | os.PathLike[str]) -> tuple[Path, Path, Path]:
    raw = Path(root) / "raw"
    return raw / "xmodel", raw / "weapons" / "mp", raw / "weapons" / "sp"


def is_cod4_root(root: str | os.PathLike[str] | None) -> bool:
    """Tell whether ``root`` holds the raw xmodel and weapon folders."""
    if not root or not os.fspath(root):
        return False
    return all(directory.is_dir() for directory in _asset_dirs(root))


@dataclass
class AssetCatalog:
    """Names of the selectable raw assets found under a root folder."""

    xmodels: list[str] = field(default_factory=list)
    mp_weapons: list[str] = field(default_factory=list)
    sp_weapons: list[str] = field(default_factory=list)


def _list_assets(directory: Path) -> list[str]:
    return sorted(
        entry.name for entry in directory.iterdir() if entry.is_file() and entry.suffix == ""
    )


def scan_assets(root: str | os.PathLike[str] | None) -> AssetCatalog:
    """List extensionless files in the xmodel and weapon folders of ``root``.

    An empty catalog is returned when ``root`` is not a valid game folder.
    """
    if not is_cod4_root(root):
        return AssetCatalog()
    xmodel_dir, mp_dir, sp_dir = _asset_dirs(root)
    return AssetCatalog(
        xmodels=_list_assets(xmodel_dir),
        mp_weapons=_list_assets(mp_dir),
        sp_weapons=_list_assets(sp_dir),
    )


class Selection:
    """Ordered list of assets chosen for export, without duplicates."""

    def __init__(self, assets: list[Asset] | tuple[Asset, ...] = ()) -> None:
        self._assets: list[Asset] = []
        for asset in assets:
            self.add(asset.name, asset.type)

    def add(self, name: str, asset_type: AssetType) -> bool:
        """Append an asset unless one with the same name and type is present."""
        if any(a.name == name and a.type is asset_type for a in self._assets):
            return False
        self._assets.append(Asset(name, asset_type))
        return True

    def remove(self, index: int) -> Asset | None:
        """Remove the asset at ``index``; out-of-range indexes are ignored."""
        if 0 <= index < len(self._assets):
            return self._assets.pop(index)
        return None

    def clear(self) -> None:
        """Remove every asset."""
        self._assets.clear()

    def __len__(self) -> int:
        return len(self._assets)

    def __iter__(self) -> Iterator[Asset]:
        return iter(list(self._assets))

    def __getitem__(self, index: int) -> Asset:
        return self._assets[index]
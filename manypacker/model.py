"""Core asset records shared across the packer."""

from __future__ import annotations

import enum
from dataclasses import dataclass, field

NAME = "ManyPacker"
VERSION = "1.0.3"
FULL_NAME = f"{NAME} {VERSION}"


class AssetType(enum.Enum):
    """Kinds of assets that can be listed in a mod.csv."""

    MP_WEAPON = "mp_weapon"
    SP_WEAPON = "sp_weapon"
    XMODEL = "xmodel"
    MATERIAL = "material"
    UNKNOWN = "unknown"

    def csv_prefix(self) -> str:
        """Return the mod.csv prefix written before the asset name."""
        return _CSV_PREFIXES[self]


_CSV_PREFIXES = {
    AssetType.MP_WEAPON: "weapon,mp/",
    AssetType.SP_WEAPON: "weapon,sp/",
    AssetType.XMODEL: "xmodel,",
    AssetType.MATERIAL: "material,",
    AssetType.UNKNOWN: "Unknown",
}


@dataclass(frozen=True, order=True)
class Asset:
    """A named asset; equality and ordering use the name only."""

    name: str
    type: AssetType = field(compare=False)

    def mod_line(self) -> str:
        """Return the line describing this asset in a mod.csv."""
        return self.type.csv_prefix() + self.name


class WeaponKind(enum.Enum):
    """Whether a weapon file belongs to multiplayer or single player."""

    MP = "mp"
    SP = "sp"

    @property
    def folder(self) -> str:
        """Name of the weapons sub-folder holding this kind of weapon."""
        return self.value


@dataclass
class Weapon:
    """A weapon file selected for export."""

    name: str
    kind: WeaponKind


@dataclass
class XModel:
    """An xmodel and the names of its levels of detail."""

    name: str
    lods: list[str] = field(default_factory=list)


@dataclass
class SoundAlias:
    """A sound alias table and the sound files it refers to."""

    name: str
    files: list[str] = field(default_factory=list)
"""Reader for weapon files and the assets they refer to."""

from __future__ import annotations

import os
from dataclasses import dataclass, field

MAGIC = "WEAPONFILE"
SEPARATOR = "\\"
MODEL_SLOTS = 16

DEFAULT_KNIFE_MODEL = "viewmodel_knife"
DEFAULT_WORLD_KNIFE_MODEL = "weapon_parabolic_knife"

# Stock skin variants; every model ending in one of these is left out.
IGNORED_XMODEL_SUFFIXES = ("_brock", "_bshdwl", "_bwmrpt", "_cmdtgr", "_stagger")

# Stock view models (without the "viewmodel_" prefix) that ship with the game.
# Skin variants are covered by the suffix rule above and so are not repeated.
_STOCK_VIEWMODELS = """
    ak47 ak47_and_silencer_mp ak47_gold_and_silencer_mp ak47_gold_grenadier_mp
    ak47_gold_mp ak47_grenadier ak47_grenadier_mp ak47_mp ak47_silencer
    ak74u ak74u_mp ak74u_silencer at4 barrett barrett_mp
    base_character base_fastrope_character base_viewhands
    benelli_m4 benelli_m4_gold_mp benelli_m4_mp
    beretta beretta_and_silencer_mp beretta_mp binoculars briefcase_bomb_mp
    c4 claymore colt45 colt45_and_silencer_mp colt45_mp default
    desert_eagle_gold_mp dragunov dragunov_gold_mp dragunov_mp
    g3 g3_mp g3_silencer g3m203_mp g36c g36c_mp g36c_silencer g36cm203_mp
    gasmask hands_cloth javelin knife m2_50cal
    m4 m4_acog m4_and_silencer m4_and_silencer_mp m4_mp m4_silencer_acog
    m4m203 m4m203_acog m4m203_and_silencer m4m203_mp m4m203_silencer_reflex
    m14 m14_gl_mp m14_mp m14_woodland m14sd_mp
    m16_and_silencer_mp m16_mp m16m203 m16m203_mp m21_mp m21sd
    m40a3 m40a3_camo m40a3_mp m60 m60_gold_mp m60_mp m67 m84 m249 m249_mp
    minigun miniuzi miniuzi_gold_mp miniuzi_mp miniuzi_silencer
    miniuzi_supressed_gold_mp miniuzi_supressed_mp
    mk2 mk19_agl_shield mk19_agl_tripod
    mp5 mp5_mp mp5_silencer mp5_silencer_mp mp5_silencer_reflex mp44 mp44_mp
    nvg p90 p90_mp p90_silencer p90_silencer_mp remington700 remington700_mp
    rpd rpd_mp rpg7 rpg7_rocket skorpion skorpion_mp skorpion_silencer stinger
    usp usp_mp usp_silencer usp_silencer_mp ussmokegrenade
    winchester1200 winchester1200_mp
"""

IGNORED_XMODELS = frozenset(f"viewmodel_{name}" for name in _STOCK_VIEWMODELS.split())

_ANIM_NAMES = """
    idle emptyIdle fire lastShot rechamber melee meleeCharge reload reloadEmpty
    reloadStart reloadEnd raise drop firstRaise altRaise altDrop quickRaise
    quickDrop emptyRaise emptyDrop sprintIn sprintLoop sprintOut
    nightVisionWear nightVisionRemove adsFire adsLastShot adsRechamber adsUp adsDown
"""

ANIM_KEYS = tuple(f"{name}Anim" for name in _ANIM_NAMES.split())

IGNORED_XANIMS = frozenset(f"viewmodel_M4m203_knife_melee_{n}" for n in (1, 2))

MATERIAL_KEYS = ("killIcon", "hudIcon", "adsOverlayShader", "adsOverlayShaderLowRes")

_STOCK_HUD_ICONS = """
    ak47_gp25 ak74u artillery at4 barrett50cal benelli_m4 c4 claymore cobra
    colt_45 desert_eagle dragunov g3 g36c g36c_mp javelin m4_grenadier m4_grunt
    m4_silencer m4carbine m4m203_silencer m9beretta m14 m14_scoped m16a4
    m16a4_grenade m40a3 m60e4 m249saw m249saw_mounted mini_uzi minigun mp5
    mp5_silencer mp44 nvg p90 pistol remington700 rpd rpg rpg_dpad shotgun
    skorpian sniperrifle stinger usp_45 winchester_1200
"""

_STOCK_KILL_ICONS = "44 30cal 40mm_grenade 40mm_grenade_mp ak47"

IGNORED_MATERIALS = frozenset(
    [f"hud_icon_{name}" for name in _STOCK_HUD_ICONS.split()]
    + [f"killIcon_{name}" for name in _STOCK_KILL_ICONS.split()]
)


class WeaponFileError(ValueError):
    """Raised when a weapon file cannot be read or lacks its header."""


@dataclass
class WeaponRefs:
    """Assets a weapon file refers to, in the order they were found."""

    xmodels: list[str] = field(default_factory=list)
    xanims: list[str] = field(default_factory=list)
    materials: list[str] = field(default_factory=list)


def is_ignored_xmodel(name: str) -> bool:
    """Tell whether an xmodel ships with the stock game and is left out."""
    return name.endswith(IGNORED_XMODEL_SUFFIXES) or name in IGNORED_XMODELS


def _tokenize(data: str) -> list[str]:
    tokens = data.split(SEPARATOR)
    # A trailing separator (or empty input) does not start a new token.
    if tokens[-1] == "":
        tokens.pop()
    return tokens


def _fields(tokens: list[str]) -> dict[str, str]:
    pairs = tokens[1:]
    return dict(zip(pairs[0::2], pairs[1::2]))


def _slot_suffix(slot: int) -> str:
    return "" if slot == 1 else str(slot)


def _model_refs(fields: dict[str, str]) -> list[str]:
    models = []
    for slot in range(MODEL_SLOTS):
        suffix = _slot_suffix(slot)
        for key in (f"gunModel{suffix}", f"worldModel{suffix}"):
            name = fields.get(key, "")
            if not name:
                continue
            if is_ignored_xmodel(name):
                # An ignored model skips whatever remains of this slot.
                break
            models.append(name)

    knife = fields.get("knifeModel", "")
    if knife and knife != DEFAULT_KNIFE_MODEL:
        models.append(knife)
    world_knife = fields.get("worldKnifeModel", "")
    if world_knife and world_knife != DEFAULT_WORLD_KNIFE_MODEL:
        models.append(world_knife)
    return models


def _refs(fields: dict[str, str], keys: tuple[str, ...], ignored: frozenset[str]) -> list[str]:
    values = (fields.get(key, "") for key in keys)
    return [value for value in values if value and value not in ignored]


def parse_weapon(data: str | bytes) -> WeaponRefs:
    """Parse backslash-separated weapon data and collect what it refers to."""
    if isinstance(data, bytes):
        data = data.decode("utf-8", errors="surrogateescape")
    tokens = _tokenize(data)
    if not tokens or tokens[0] != MAGIC:
        raise WeaponFileError("invalid weapon file")

    fields = _fields(tokens)
    return WeaponRefs(
        xmodels=_model_refs(fields),
        xanims=_refs(fields, ANIM_KEYS, IGNORED_XANIMS),
        materials=_refs(fields, MATERIAL_KEYS, IGNORED_MATERIALS),
    )


def read_weapon(path: str | os.PathLike[str]) -> WeaponRefs:
    """Read the weapon file at ``path`` and collect what it refers to."""
    try:
        with open(path, "rb") as stream:
            data = stream.read()
    except OSError as exc:
        raise WeaponFileError(f"failed to open weapon file {os.fspath(path)}") from exc
    return parse_weapon(data)
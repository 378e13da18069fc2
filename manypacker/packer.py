"""Gathering every file an asset depends on and packing them for a mod."""

from __future__ import annotations

import enum
import logging
import os
import re
import shutil
import zipfile
from collections.abc import Iterable
from dataclasses import dataclass, field
from pathlib import Path

from .material import read_material
from .model import Asset, AssetType, SoundAlias, Weapon, WeaponKind, XModel
from .soundalias import SoundAliasError, read_sound_alias
from .weapon import WeaponFileError, WeaponRefs, read_weapon
from .xmodel import XModelError, XModelInfo, read_xmodel

logger = logging.getLogger(__name__)

DEFAULT_OUTPUT_NAME = "processed_assets"
IGNORED_MATERIAL = "lambert1"
MOD_CSV = "mod.csv"

_MP_SUFFIX = "_mp"
_PATH_SEPARATORS = re.compile(r"[/\\]")


class ExportFormat(enum.Enum):
    """How the packed assets are delivered."""

    ZIP = 0
    FOLDER = 1


class ExportError(Exception):
    """Raised when an export cannot be completed."""

    def __init__(self, message: str, path: Path | None = None) -> None:
        super().__init__(message)
        self.path = path


@dataclass
class ExportOptions:
    """Where and how an export is written."""

    output_folder: str | os.PathLike[str]
    output_name: str = ""
    export_format: ExportFormat = ExportFormat.ZIP
    use_sound_aliases: bool = True

    @property
    def folder_name(self) -> str:
        """Name of the folder (and archive stem) the export is written to."""
        return self.output_name or DEFAULT_OUTPUT_NAME


@dataclass
class CollectedAssets:
    """Every asset reached from a selection, ready to be copied."""

    weapons: list[Weapon] = field(default_factory=list)
    xmodels: list[XModel] = field(default_factory=list)
    xanims: list[str] = field(default_factory=list)
    sound_aliases: list[SoundAlias] = field(default_factory=list)
    materials: list[str] = field(default_factory=list)
    images: list[str] = field(default_factory=list)
    additional_assets: list[Asset] = field(default_factory=list)


def _load_weapon(path: Path) -> WeaponRefs:
    try:
        return read_weapon(path)
    except WeaponFileError as exc:
        logger.error("%s", exc)
        return WeaponRefs()


def _load_xmodel(path: Path) -> XModelInfo:
    try:
        return read_xmodel(path)
    except XModelError as exc:
        logger.error("%s: %s", path, exc)
        return XModelInfo()


def _load_images(path: Path) -> list[str]:
    try:
        return read_material(path)
    except (OSError, ValueError) as exc:
        logger.error("failed to read material %s: %s", path, exc)
        return []


def _load_sound_files(path: Path) -> list[str]:
    try:
        return read_sound_alias(path)
    except (OSError, SoundAliasError) as exc:
        logger.error("error reading sound alias file %s: %s", path, exc)
        return []


def _unique_by_name(assets: list[Asset]) -> list[Asset]:
    result: list[Asset] = []
    for asset in sorted(assets):
        if not result or result[-1].name != asset.name:
            result.append(asset)
    return result


def _sound_alias_name(weapon_name: str) -> str:
    if len(weapon_name) > len(_MP_SUFFIX) and weapon_name.endswith(_MP_SUFFIX):
        return weapon_name[: -len(_MP_SUFFIX)]
    return weapon_name


def collect_assets(
    root: str | os.PathLike[str],
    selected: Iterable[Asset],
    use_sound_aliases: bool = True,
) -> CollectedAssets:
    """Follow the selected assets to every file they depend on."""
    raw = Path(root) / "raw"
    collected = CollectedAssets()
    xanims: list[str] = []
    materials: list[str] = []
    additional: list[Asset] = []

    def add_xmodel(name: str) -> None:
        info = _load_xmodel(raw / "xmodel" / name)
        collected.xmodels.append(XModel(name, list(info.lods)))
        materials.extend(info.materials)

    for asset in selected:
        if asset.type in (AssetType.MP_WEAPON, AssetType.SP_WEAPON):
            kind = WeaponKind.MP if asset.type is AssetType.MP_WEAPON else WeaponKind.SP
            collected.weapons.append(Weapon(asset.name, kind))
            refs = _load_weapon(raw / "weapons" / kind.folder / asset.name)
            for model in refs.xmodels:
                additional.append(Asset(model, AssetType.XMODEL))
                add_xmodel(model)
            xanims.extend(refs.xanims)
            for material in refs.materials:
                additional.append(Asset(material, AssetType.MATERIAL))
                materials.append(material)
        elif asset.type is AssetType.XMODEL:
            add_xmodel(asset.name)

    if use_sound_aliases:
        for weapon in collected.weapons:
            name = _sound_alias_name(weapon.name)
            path = raw / "soundaliases" / f"{name}.csv"
            if path.exists():
                collected.sound_aliases.append(SoundAlias(name, _load_sound_files(path)))

    collected.additional_assets = _unique_by_name(additional)
    collected.xanims = sorted(set(xanims))
    collected.materials = sorted(set(materials) - {IGNORED_MATERIAL})

    images = [
        image
        for material in collected.materials
        for image in _load_images(raw / "materials" / material)
    ]
    collected.images = [image for image in images if not image.startswith("$")]

    _log_summary(collected)
    return collected


def _log_summary(collected: CollectedAssets) -> None:
    for alias in collected.sound_aliases:
        logger.info("sound alias %s: %s", alias.name, ", ".join(alias.files))
    for weapon in collected.weapons:
        logger.info("weapon %s", weapon.name)
    for xmodel in collected.xmodels:
        logger.info("xmodel %s: LODs %s", xmodel.name, ", ".join(xmodel.lods))
    for xanim in collected.xanims:
        logger.info("xanim %s", xanim)
    for material in collected.materials:
        logger.info("material %s", material)
    for image in collected.images:
        logger.info("image %s.iwi", image)


def _copy(source: Path, target: Path, label: str) -> None:
    if not source.exists():
        logger.error("missing file %s", source)
        raise ExportError(f"Missing {label} file: {source}", path=source)
    shutil.copyfile(source, target)


def _relative(name: str) -> Path:
    return Path(*_PATH_SEPARATORS.split(name))


def _copy_sound_aliases(raw: Path, out: Path, aliases: list[SoundAlias]) -> None:
    if not aliases:
        return
    (out / "soundaliases").mkdir(parents=True, exist_ok=True)
    (out / "sound").mkdir(parents=True, exist_ok=True)
    for alias in aliases:
        csv_name = f"{alias.name}.csv"
        _copy(raw / "soundaliases" / csv_name, out / "soundaliases" / csv_name, "soundalias")
        for name in alias.files:
            relative = _relative(name)
            source = raw / "sound" / relative
            if not source.exists():
                logger.error("missing file %s", source)
                raise ExportError(f"Missing sound file: {source}", path=source)
            # Only files placed under a sub-folder of sound/ are carried over.
            if len(relative.parts) > 1:
                target = out / "sound" / relative
                target.parent.mkdir(parents=True, exist_ok=True)
                shutil.copyfile(source, target)


def _copy_xanims(raw: Path, out: Path, xanims: list[str]) -> None:
    if not xanims:
        return
    (out / "xanim").mkdir(parents=True, exist_ok=True)
    for xanim in xanims:
        _copy(raw / "xanim" / xanim, out / "xanim" / xanim, "xanim")


def _copy_xmodels(raw: Path, out: Path, xmodels: list[XModel]) -> None:
    if not xmodels:
        return
    for folder in ("xmodel", "xmodelparts", "xmodelsurfs"):
        (out / folder).mkdir(parents=True, exist_ok=True)
    for xmodel in xmodels:
        model_path = raw / "xmodel" / xmodel.name
        if not model_path.exists():
            raise ExportError(f"Missing xmodel file: {model_path}", path=model_path)
        if not xmodel.lods:
            raise ExportError(f"XModel has no LODs: {model_path}", path=model_path)
        part = xmodel.lods[0]
        part_path = raw / "xmodelparts" / part
        if not part_path.exists():
            raise ExportError(f"Missing xmodelparts file: {part_path}", path=part_path)
        shutil.copyfile(model_path, out / "xmodel" / xmodel.name)
        shutil.copyfile(part_path, out / "xmodelparts" / part)
        for lod in xmodel.lods:
            _copy(raw / "xmodelsurfs" / lod, out / "xmodelsurfs" / lod, "xmodelsurfs")


def _copy_materials(raw: Path, out: Path, materials: list[str]) -> None:
    if not materials:
        return
    (out / "materials").mkdir(parents=True, exist_ok=True)
    (out / "material_properties").mkdir(parents=True, exist_ok=True)
    for material in materials:
        material_path = raw / "materials" / material
        properties_path = raw / "material_properties" / material
        if not material_path.exists():
            raise ExportError(f"Missing material file: {material_path}", path=material_path)
        if not properties_path.exists():
            raise ExportError(
                f"Missing material properties file: {properties_path}", path=properties_path
            )
        shutil.copyfile(material_path, out / "materials" / material)
        shutil.copyfile(properties_path, out / "material_properties" / material)


def _copy_images(raw: Path, out: Path, images: list[str]) -> None:
    if not images:
        return
    (out / "images").mkdir(parents=True, exist_ok=True)
    for image in images:
        iwi = f"{image}.iwi"
        _copy(raw / "images" / iwi, out / "images" / iwi, "image")


def _copy_weapons(raw: Path, out: Path, weapons: list[Weapon]) -> None:
    if not weapons:
        return
    (out / "weapons").mkdir(parents=True, exist_ok=True)
    for weapon in weapons:
        folder = weapon.kind.folder
        (out / "weapons" / folder).mkdir(parents=True, exist_ok=True)
        _copy(
            raw / "weapons" / folder / weapon.name,
            out / "weapons" / folder / weapon.name,
            "weapon",
        )


def _mod_csv_lines(collected: CollectedAssets, selected: list[Asset]) -> list[str]:
    lines = [f"xanim,{xanim}" for xanim in collected.xanims]
    lines += [asset.mod_line() for asset in collected.additional_assets]
    lines += [asset.mod_line() for asset in selected]
    lines += [f"sound,{alias.name},,all_mp" for alias in collected.sound_aliases]
    return lines


def write_zip(folder: str | os.PathLike[str], archive_path: str | os.PathLike[str]) -> Path:
    """Store every file under ``folder`` in a zip, named relative to it."""
    base = Path(folder)
    archive = Path(archive_path)
    with zipfile.ZipFile(archive, "w", zipfile.ZIP_STORED) as bundle:
        for path in sorted(base.rglob("*")):
            if path.is_file():
                bundle.write(path, path.relative_to(base).as_posix())
    return archive


def export_assets(
    root: str | os.PathLike[str],
    selected: Iterable[Asset],
    options: ExportOptions,
) -> Path:
    """Copy the selection and its dependencies out and write a mod.csv.

    Returns the folder written, or the archive when zipping.
    """
    chosen = list(selected)
    if not chosen:
        raise ExportError("No assets selected.")

    collected = collect_assets(root, chosen, options.use_sound_aliases)
    raw = Path(root) / "raw"
    output_folder = Path(options.output_folder)
    out = output_folder / options.folder_name
    out.mkdir(parents=True, exist_ok=True)

    _copy_sound_aliases(raw, out, collected.sound_aliases)
    _copy_xanims(raw, out, collected.xanims)
    _copy_xmodels(raw, out, collected.xmodels)
    _copy_materials(raw, out, collected.materials)
    _copy_images(raw, out, collected.images)
    _copy_weapons(raw, out, collected.weapons)

    with open(out / MOD_CSV, "w", encoding="utf-8", newline="\n") as mod_csv:
        for line in _mod_csv_lines(collected, chosen):
            mod_csv.write(line + "\n")

    if options.export_format is ExportFormat.ZIP:
        archive = write_zip(out, output_folder / f"{options.folder_name}.zip")
        shutil.rmtree(out)
        return archive
    return out
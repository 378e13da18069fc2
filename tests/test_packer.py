import struct
import zipfile
from pathlib import Path

import pytest

from manypacker.model import Asset, AssetType, SoundAlias, WeaponKind
from manypacker.packer import (
    DEFAULT_OUTPUT_NAME,
    CollectedAssets,
    ExportError,
    ExportFormat,
    ExportOptions,
    collect_assets,
    export_assets,
    write_zip,
)


def _cstr(text):
    return text.encode() + b"\0"


def _xmodel_bytes(lods, materials):
    data = struct.pack("<H", 25) + bytes(25) + _cstr("")
    for slot in range(4):
        name = lods[slot] if slot < len(lods) else ""
        data += struct.pack("<I", 0) + _cstr(name)
    data += bytes(4) + struct.pack("<I", 0) + struct.pack("<H", len(materials))
    data += b"".join(_cstr(m) for m in materials)
    return data


def _material_bytes(maps):
    table_end = 48 + 2 + 14 + 12 * len(maps)
    strings = b""
    entries = b""
    for map_type, name in maps:
        type_offset = table_end + len(strings)
        strings += _cstr(map_type)
        name_offset = table_end + len(strings)
        strings += _cstr(name)
        entries += struct.pack("<III", type_offset, 0, name_offset)
    return bytes(48) + struct.pack("<H", len(maps)) + bytes(14) + entries + strings


def _write(path, data):
    path.parent.mkdir(parents=True, exist_ok=True)
    if isinstance(data, str):
        data = data.encode()
    path.write_bytes(data)


def _add_xmodel(raw, name, lods, materials):
    _write(raw / "xmodel" / name, _xmodel_bytes(lods, materials))
    _write(raw / "xmodelparts" / lods[0], b"part")
    for lod in lods:
        _write(raw / "xmodelsurfs" / lod, b"surf")


@pytest.fixture
def game_root(tmp_path):
    root = tmp_path / "cod4"
    raw = root / "raw"
    _add_xmodel(raw, "crate", ["crate_lod0", "crate_lod1"], ["mtl_crate", "lambert1"])
    _add_xmodel(raw, "viewmodel_gun", ["viewmodel_gun_lod0"], ["mtl_crate"])
    _write(
        raw / "materials" / "mtl_crate",
        _material_bytes([("colorMap", "crate_col"), ("normalMap", "$identitynormalmap")]),
    )
    _write(raw / "material_properties" / "mtl_crate", b"props")
    _write(raw / "images" / "crate_col.iwi", b"image")
    _write(raw / "xanim" / "gun_idle", b"anim")
    _write(raw / "xanim" / "gun_fire", b"anim")
    weapon = "\\".join([
        "WEAPONFILE",
        "gunModel", "viewmodel_gun",
        "worldModel", "crate",
        "idleAnim", "gun_idle",
        "fireAnim", "gun_fire",
        "raiseAnim", "gun_idle",
        "killIcon", "mtl_crate",
        "hudIcon", "hud_icon_ak74u",
    ])
    _write(raw / "weapons" / "mp" / "gun_mp", weapon)
    (raw / "weapons" / "sp").mkdir(parents=True)
    _write(raw / "soundaliases" / "gun.csv", "name,file\ngun_fire,weapons/gun/fire.wav\n\n")
    _write(raw / "sound" / "weapons" / "gun" / "fire.wav", b"wave")
    return root


def test_collect_xmodel_follows_materials_and_images(game_root):
    collected = collect_assets(game_root, [Asset("crate", AssetType.XMODEL)])
    assert [(m.name, m.lods) for m in collected.xmodels] == [("crate", ["crate_lod0", "crate_lod1"])]
    assert collected.materials == ["mtl_crate"]
    assert collected.images == ["crate_col"]
    assert collected.additional_assets == []
    assert collected.weapons == []


def test_collect_weapon_references(game_root):
    collected = collect_assets(game_root, [Asset("gun_mp", AssetType.MP_WEAPON)])
    assert [(w.name, w.kind) for w in collected.weapons] == [("gun_mp", WeaponKind.MP)]
    assert [m.name for m in collected.xmodels] == ["viewmodel_gun", "crate"]
    assert collected.xanims == ["gun_fire", "gun_idle"]
    assert [a.name for a in collected.additional_assets] == ["crate", "mtl_crate", "viewmodel_gun"]
    assert collected.additional_assets[1].type is AssetType.MATERIAL
    assert collected.sound_aliases == [SoundAlias("gun", ["weapons/gun/fire.wav"])]
    assert collected.images == ["crate_col"]


def test_collect_without_sound_aliases(game_root):
    collected = collect_assets(game_root, [Asset("gun_mp", AssetType.MP_WEAPON)], False)
    assert collected.sound_aliases == []


def test_collect_empty_selection_is_empty(game_root):
    assert collect_assets(game_root, []) == CollectedAssets()


def test_export_to_folder(game_root, tmp_path):
    out = tmp_path / "out"
    options = ExportOptions(out, "pack", ExportFormat.FOLDER)
    result = export_assets(game_root, [Asset("gun_mp", AssetType.MP_WEAPON)], options)
    assert result == out / "pack"
    lines = (result / "mod.csv").read_text().splitlines()
    assert lines == [
        "xanim,gun_fire",
        "xanim,gun_idle",
        "xmodel,crate",
        "material,mtl_crate",
        "xmodel,viewmodel_gun",
        "weapon,mp/gun_mp",
        "sound,gun,,all_mp",
    ]
    assert (result / "weapons" / "mp" / "gun_mp").read_bytes() == (
        game_root / "raw" / "weapons" / "mp" / "gun_mp"
    ).read_bytes()
    assert (result / "sound" / "weapons" / "gun" / "fire.wav").read_bytes() == b"wave"
    assert (result / "images" / "crate_col.iwi").read_bytes() == b"image"
    assert (result / "material_properties" / "mtl_crate").read_bytes() == b"props"
    assert (result / "xmodelparts" / "viewmodel_gun_lod0").is_file()
    assert sorted(p.name for p in (result / "xmodelsurfs").iterdir()) == [
        "crate_lod0", "crate_lod1", "viewmodel_gun_lod0",
    ]


def test_export_to_zip_removes_folder(game_root, tmp_path):
    out = tmp_path / "out"
    options = ExportOptions(out, "pack", ExportFormat.ZIP)
    result = export_assets(game_root, [Asset("crate", AssetType.XMODEL)], options)
    assert result == out / "pack.zip"
    assert not (out / "pack").exists()
    with zipfile.ZipFile(result) as bundle:
        names = set(bundle.namelist())
        assert bundle.read("mod.csv").decode().splitlines() == ["xmodel,crate"]
    assert {"mod.csv", "xmodel/crate", "xmodelparts/crate_lod0", "images/crate_col.iwi"} <= names


def test_default_output_name(game_root, tmp_path):
    options = ExportOptions(tmp_path / "out", export_format=ExportFormat.FOLDER)
    result = export_assets(game_root, [Asset("crate", AssetType.XMODEL)], options)
    assert result.name == DEFAULT_OUTPUT_NAME
    assert options.folder_name == DEFAULT_OUTPUT_NAME


def test_empty_selection_raises(game_root, tmp_path):
    with pytest.raises(ExportError, match="No assets selected"):
        export_assets(game_root, [], ExportOptions(tmp_path / "out"))


def test_missing_xmodelparts_raises(game_root, tmp_path):
    missing = game_root / "raw" / "xmodelparts" / "crate_lod0"
    missing.unlink()
    with pytest.raises(ExportError, match="Missing xmodelparts file") as info:
        export_assets(game_root, [Asset("crate", AssetType.XMODEL)], ExportOptions(tmp_path / "out"))
    assert info.value.path == missing


def test_missing_weapon_raises(game_root, tmp_path):
    with pytest.raises(ExportError, match="Missing weapon file"):
        export_assets(
            game_root, [Asset("nope", AssetType.SP_WEAPON)], ExportOptions(tmp_path / "out")
        )


def test_write_zip_round_trip(tmp_path):
    folder = tmp_path / "data"
    _write(folder / "a.txt", b"alpha")
    _write(folder / "sub" / "b.bin", b"\x00\x01")
    archive = write_zip(folder, tmp_path / "data.zip")
    with zipfile.ZipFile(archive) as bundle:
        assert sorted(bundle.namelist()) == ["a.txt", "sub/b.bin"]
        assert bundle.read("a.txt") == b"alpha"
        assert bundle.read("sub/b.bin") == b"\x00\x01"
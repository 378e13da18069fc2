import io
import struct

import pytest

from manypacker.xmodel import XModelError, XModelInfo, parse_xmodel, read_xmodel


def build_xmodel(lods, materials, version=25, groups=()):
    out = bytearray(struct.pack("<H", version))
    out += bytes(25)
    out += b"model_name\0"
    slots = list(lods) + [""] * (4 - len(lods))
    for lod in slots:
        out += struct.pack("<I", 0) + lod.encode() + b"\0"
    out += bytes(4)
    out += struct.pack("<I", len(groups))
    for subcount in groups:
        out += struct.pack("<I", subcount) + bytes(subcount * 48 + 36)
    out += struct.pack("<H", len(materials))
    for material in materials:
        out += material.encode() + b"\0"
    return bytes(out)


def test_reads_lods_and_materials():
    data = build_xmodel(["wpn_lod0", "wpn_lod1"], ["mtl_body", "mtl_scope"])
    info = parse_xmodel(io.BytesIO(data))
    assert info == XModelInfo(lods=["wpn_lod0", "wpn_lod1"], materials=["mtl_body", "mtl_scope"])


def test_skips_groups_before_materials():
    data = build_xmodel(["lod0"], ["mat"], groups=(0, 2, 5))
    assert parse_xmodel(io.BytesIO(data)).materials == ["mat"]


def test_empty_lod_slots_are_skipped():
    data = build_xmodel(["a", "", "b"], [])
    assert parse_xmodel(io.BytesIO(data)).lods == ["a", "b"]


def test_wrong_version_is_rejected():
    data = build_xmodel(["lod0"], [], version=20)
    with pytest.raises(XModelError):
        parse_xmodel(io.BytesIO(data))


def test_short_version_is_rejected():
    with pytest.raises(XModelError):
        parse_xmodel(io.BytesIO(b"\x19"))


def test_model_without_lods_is_rejected():
    data = build_xmodel([], ["mat"])
    with pytest.raises(XModelError):
        parse_xmodel(io.BytesIO(data))


def test_truncated_model_is_rejected():
    data = build_xmodel(["lod0"], [])[:-1]
    with pytest.raises(XModelError):
        parse_xmodel(io.BytesIO(data))


def test_read_xmodel_from_file(tmp_path):
    path = tmp_path / "my_model"
    path.write_bytes(build_xmodel(["lod0"], ["mat_a"]))
    info = read_xmodel(path)
    assert info.lods == ["lod0"]
    assert info.materials == ["mat_a"]


def test_read_missing_xmodel(tmp_path):
    with pytest.raises(XModelError):
        read_xmodel(tmp_path / "absent")
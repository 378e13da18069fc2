"""Command-line front end for picking assets and packing them for a mod."""

from __future__ import annotations

import argparse
import os
import sys
from collections.abc import Iterable, Sequence
from pathlib import Path

from .library import AssetCatalog, Selection, is_cod4_root, scan_assets
from .model import FULL_NAME, NAME, Asset, AssetType
from .packer import ExportError, ExportFormat, ExportOptions, export_assets
from .prefs import Preferences, resolve_root

ROOT_NOT_FOUND = (
    "The CoD4 root folder has not been found automatically, please select it manually."
)
ROOT_INVALID = "The selected directory is invalid."
NO_ASSETS = "Please select at least one asset to export."
EXPORT_OK = "Asset(s) exported successfully."
EXPORT_FAILED = "An error occurred during export."

_FORMATS = {"zip": ExportFormat.ZIP, "folder": ExportFormat.FOLDER}
_KINDS = ("xmodel", "mp", "sp")


def filter_items(items: Iterable[str], query: str) -> list[str]:
    """Keep the items containing ``query``, ignoring case; empty keeps all."""
    needle = query.lower()
    return [item for item in items if needle in item.lower()]


def default_output_name(selected: Iterable[Asset]) -> str:
    """Output name suggested for a selection: the first asset's name."""
    for asset in selected:
        return asset.name
    return ""


def _catalog_names(catalog: AssetCatalog, asset_type: AssetType) -> list[str]:
    return {
        AssetType.XMODEL: catalog.xmodels,
        AssetType.MP_WEAPON: catalog.mp_weapons,
        AssetType.SP_WEAPON: catalog.sp_weapons,
    }.get(asset_type, [])


def _find_root(
    args: argparse.Namespace, prefs: Preferences, prefs_path: str | None
) -> str | None:
    if args.root:
        root = args.root
    else:
        resolved = resolve_root(prefs, Path.cwd())
        if resolved.root_folder and not prefs.root_folder:
            resolved.save(prefs_path)
        root = resolved.root_folder
    if not root:
        print(ROOT_NOT_FOUND, file=sys.stderr)
        return None
    if not is_cod4_root(root):
        print(ROOT_INVALID, file=sys.stderr)
        return None
    return root


def _cmd_set_root(args: argparse.Namespace, prefs: Preferences, prefs_path: str | None) -> int:
    if not is_cod4_root(args.path):
        print(ROOT_INVALID, file=sys.stderr)
        return 2
    prefs.root_folder = os.path.abspath(args.path)
    prefs.save(prefs_path)
    print(f"Root folder set to {prefs.root_folder}")
    return 0


def _cmd_list(args: argparse.Namespace, prefs: Preferences, prefs_path: str | None) -> int:
    root = _find_root(args, prefs, prefs_path)
    if root is None:
        return 2
    catalog = scan_assets(root)
    sections = (
        ("xmodel", "XModels", catalog.xmodels),
        ("mp", "MP Weapons", catalog.mp_weapons),
        ("sp", "SP Weapons", catalog.sp_weapons),
    )
    for kind, title, names in sections:
        if args.kind and args.kind != kind:
            continue
        print(f"{title}:")
        for name in filter_items(names, args.filter):
            print(f"  {name}")
    return 0


def _cmd_export(args: argparse.Namespace, prefs: Preferences, prefs_path: str | None) -> int:
    root = _find_root(args, prefs, prefs_path)
    if root is None:
        return 2
    catalog = scan_assets(root)
    selection = Selection()
    for asset_type, name in args.assets or []:
        if name not in _catalog_names(catalog, asset_type):
            print(f"Unknown asset: {asset_type.csv_prefix()}{name}", file=sys.stderr)
            return 2
        selection.add(name, asset_type)

    if not len(selection):
        print(NO_ASSETS, file=sys.stderr)
        return 1

    if args.output:
        prefs.output_folder = os.path.abspath(args.output)
        prefs.save(prefs_path)
    output_folder = args.output or prefs.output_folder or "."
    output_name = args.name if args.name is not None else default_output_name(selection)

    options = ExportOptions(
        output_folder=output_folder,
        output_name=output_name,
        export_format=_FORMATS[args.format],
        use_sound_aliases=not args.no_sound_aliases,
    )
    try:
        written = export_assets(root, selection, options)
    except (ExportError, OSError) as exc:
        print(f"{EXPORT_FAILED}\n{exc}", file=sys.stderr)
        return 1
    print(EXPORT_OK)
    print(written)
    return 0


def _asset_arg(asset_type: AssetType):
    def convert(name: str) -> tuple[AssetType, str]:
        return asset_type, name

    return convert


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog=NAME.lower(),
        description=(
            "A simple asset packer that grabs every file connected to an asset "
            "from a CoD4 raw folder."
        ),
    )
    parser.add_argument("--version", action="version", version=FULL_NAME)
    parser.add_argument("--prefs", default=None, help="preferences file to use")
    commands = parser.add_subparsers(dest="command", required=True)

    set_root = commands.add_parser("set-root", help="remember the CoD4 root folder")
    set_root.add_argument("path")
    set_root.set_defaults(handler=_cmd_set_root)

    listing = commands.add_parser("list", help="list the selectable assets")
    listing.add_argument("--root", default=None)
    listing.add_argument("--filter", default="", help="case-insensitive search text")
    listing.add_argument("--kind", choices=_KINDS, default=None)
    listing.set_defaults(handler=_cmd_list)

    export = commands.add_parser("export", help="pack assets and their dependencies")
    export.add_argument("--root", default=None)
    export.add_argument(
        "--xmodel", dest="assets", action="append", type=_asset_arg(AssetType.XMODEL)
    )
    export.add_argument(
        "--mp", dest="assets", action="append", type=_asset_arg(AssetType.MP_WEAPON)
    )
    export.add_argument(
        "--sp", dest="assets", action="append", type=_asset_arg(AssetType.SP_WEAPON)
    )
    export.add_argument("--output", default=None, help="output folder")
    export.add_argument("--name", default=None, help="output name")
    export.add_argument("--format", choices=tuple(_FORMATS), default="zip")
    export.add_argument(
        "--no-sound-aliases",
        action="store_true",
        help="do not export soundaliases by weapon name",
    )
    export.set_defaults(handler=_cmd_export)
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    """Run the command line and return its exit status."""
    args = _build_parser().parse_args(argv)
    prefs = Preferences.load(args.prefs)
    return args.handler(args, prefs, args.prefs)


if __name__ == "__main__":
    sys.exit(main())
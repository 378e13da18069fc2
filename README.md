# manypacker

A small asset packer for Call of Duty 4 mod tools. Pick XModels, multiplayer
weapons or singleplayer weapons from a game install's `raw` folder, and
manypacker follows every reference they make and copies the files that belong
to them into a single output folder or `.zip` archive, together with a
ready-made `mod.csv`.

## What gets collected

Starting from the assets you select, manypacker reads:

- **Weapon files** (`raw/weapons/mp`, `raw/weapons/sp`): the gun and world
  models of all 16 slots, the knife and world-knife models, the view
  animations (`idleAnim`, `fireAnim`, `reloadAnim` and the rest), and the
  `killIcon`, `hudIcon`, `adsOverlayShader` and `adsOverlayShaderLowRes`
  materials. Stock models, animations and icons that ship with the game are
  left out.
- **XModels** (`raw/xmodel`, version 25): their LODs, which bring in
  `xmodelparts` (first LOD) and `xmodelsurfs` (every LOD), and the materials of
  the first LOD.
- **Materials** (`raw/materials`, `raw/material_properties`): the image maps
  they use, copied from `raw/images` as `.iwi` files. Built-in images whose
  names start with `$` and the default `lambert1` material are skipped.
- **Sound aliases** (optional, on by default): for each weapon,
  `raw/soundaliases/<weapon>.csv` (with a trailing `_mp` dropped from the
  name) when it exists, and the sound files listed in its `file` column. Every
  listed sound file must exist under `raw/sound`; those placed in a
  sub-folder of `raw/sound` are copied.

A raw file that cannot be parsed is logged and contributes nothing further.
If a file that has to be copied is missing, the export stops with an error
naming the file it was looking for.

The output mirrors the `raw` layout and contains a `mod.csv` listing, in this
order, the xanims, the extra models and materials that were pulled in, the
selected assets themselves, and a `sound,<name>,,all_mp` line for each sound
alias. When zipping, the folder is written first, stored in
`<output name>.zip` next to it, and then removed. Without an output name the
folder is called `processed_assets`.

## Installation

```
pip install manypacker
```

## Command line

```
manypacker --help
```

Commands:

- `manypacker set-root PATH` remembers the game root folder.
- `manypacker list [--root DIR] [--kind {xmodel,mp,sp}] [--filter TEXT]`
  lists the selectable XModels and weapons; `--filter` matches without regard
  to case.
- `manypacker export [--root DIR] [--xmodel NAME] [--mp NAME] [--sp NAME]
  [--output DIR] [--name NAME] [--format {zip,folder}] [--no-sound-aliases]`
  packs the chosen assets. `--xmodel`, `--mp` and `--sp` may be repeated. If
  `--name` is not given, the name of the first selected asset is used. An
  output folder given with `--output` is remembered; otherwise the remembered
  one, or the current directory, is used.

`--prefs FILE` (before the command) selects another preferences file, and
`--version` prints the version.

The game root and output folder are kept in a JSON preferences file in your
user configuration directory. When no root has been saved yet, the current
directory is used, and saved, if it looks like a game root, meaning it has
`raw/xmodel`, `raw/weapons/mp` and `raw/weapons/sp`.

The command exits with 0 on success, 1 when nothing was selected or the
export failed, and 2 when the root folder is missing or invalid or an asset
name is unknown.

## Library use

- `manypacker.library.scan_assets` lists the XModels and weapons available
  under a game root as an `AssetCatalog`, and `manypacker.library.is_cod4_root`
  checks a folder.
- `manypacker.library.Selection` holds the assets chosen for export and
  ignores duplicates of the same name and type.
- `manypacker.packer.collect_assets` resolves everything a selection depends
  on without copying anything, and `manypacker.packer.export_assets` performs
  the export described by an `ExportOptions`, raising `ExportError` when a
  file is missing. `manypacker.packer.write_zip` zips a folder.
- The individual readers, `manypacker.weapon.read_weapon`,
  `manypacker.xmodel.read_xmodel`, `manypacker.material.read_material` and
  `manypacker.soundalias.read_sound_alias`, parse single raw files; each has a
  `parse_*` counterpart working on data already in memory.
- `manypacker.prefs.Preferences` loads and saves the preferences file.

## What it does not do

manypacker is a command-line tool and library only. It has no graphical
window and no folder-picker dialog: folders are given as paths on the command
line.

## Running the tests

```
pip install -e ".[test]"
pytest
```
# proxyprint

Building blocks for laying out proxy cards on printable pages: physical units,
a project model with card and page sizes, bookkeeping of cropped images,
folder watching for card images, and exact cutting guides as SVG or DXF.
The package uses only the Python standard library.

## Installation

```
pip install .
```

To run the test suite:

```
pip install ".[test]"
pytest
```

## Modules

- `proxyprint.units` – `mm`, `cm`, `inches`, `points` return lengths in
  metres; `dpi` returns a density in pixels per metre and `density_to_dpi`
  converts back. `Vec2` is a frozen two-component value supporting `+`, `-`,
  `*`, `/` with another `Vec2` or a number, and `swapped()`.
- `proxyprint.version` – `proxy_pdf_version()`, `proxy_pdf_build_time()`
  (placeholders when unknown), the format version strings
  `JSON_FORMAT_VERSION`, `IMAGE_DB_FORMAT_VERSION`, `CONFIG_FORMAT_VERSION`,
  and `image_cache_format_version()`, the tag `PPP00004` read as a
  little-endian integer.
- `proxyprint.files` – `iter_files`, `iter_folders`, `list_files` and
  `list_folders` for the entries directly inside a directory; the `list_*`
  functions return sorted bare names.
- `proxyprint.flags` – `LogFlags` (an `IntFlag`), `bit`, `is_set` and
  `is_any_set`.
- `proxyprint.log` – `Log`, a named sink registered globally by name that
  writes to standard error and/or a timestamped file in a log folder (keeping
  at most 256 files), and calls installed hooks. `LogLevel`,
  `DetailInformation`, `log_message` and the helpers `log_info`, `log_debug`,
  `log_warning`, `log_error`, `log_fatal`, which format with `str.format` and
  send to the log named `"Main-Log"`; they do nothing until such a log exists.
- `proxyprint.config` – `Config` with the built-in page sizes (Letter, Legal,
  Ledger, A5, A4, A4+, A3, A3+, Fit, Base Pdf) and card sizes (Standard,
  Standard x2, Standard Novelty, Japanese, Poker); the enums `PdfBackend`,
  `ImageFormat`, `PageOrientation`; `UnitInfo`, `SizeInfo`, `LengthInfo`,
  `CardSizeInfo`; and `unit_from_name` / `unit_from_value` for the supported
  display units (mm, cm, inches, points).
- `proxyprint.image_database` – `ImageDataBase`, a JSON file mapping output
  files to the MD5 hash of their source and the `ImageParameters` used.
  `test_entry` returns `b""` when the recorded output is still current and the
  source's hash otherwise; `read` returns an empty database for a missing or
  incompatible file.
- `proxyprint.image_ops` – `list_image_files` (`.bmp`, `.gif`, `.jpg`,
  `.jpeg`, `.png`), `get_output_dir` (subfolders for a colour cube and for a
  bleed edge such as `0p50`), and `parse_color_cube` / `load_color_cube`,
  which read a `.cube` file into a `ColorCube` of RGB bytes.
- `proxyprint.project` – `Project` and `ProjectData`: load and dump the
  project JSON file, keep a `CardInfo` for each image found, compute page,
  card and margin sizes, and `cache_card_layout` to fit as many cards as
  possible on the page. Page sizes for "Base Pdf" come from an optional
  `pdf_size_loader` callable, falling back to A4.
- `proxyprint.card_provider` – `CardProvider` reports a project's card images
  to a `CardListener` and watches the image (and, with uncropping enabled,
  crop) folders by polling: call `poll()` to detect added, deleted and
  modified files.
- `proxyprint.cutting` – `generate_cards_path` and `project_cards_path` build
  a `CardsPath` of `CardRect` outlines; `cards_svg` and `cards_dxf` render
  them as text, and `generate_cards_svg` / `generate_cards_dxf` write them
  next to the project's output file name.

## Example

```python
from proxyprint.config import Config
from proxyprint.project import Project
from proxyprint.cutting import generate_cards_dxf
from proxyprint.units import mm

project = Project(Config())
project.load("proxy_project.json")  # also creates the output folder

print(project.data.card_layout)
print(project.compute_margins() / mm(1))

generate_cards_dxf(project)  # writes _printme.dxf by default
```

Sizes are `Vec2` values in metres; divide by `mm(1)` to get millimetres.

## What the package does not do

It does not read, crop, resize, colour-correct or encode images, does not
produce PDF pages, and has no preview cache reader or writer: `previews` in
`ProjectData` holds whatever objects the caller stores there. There is no
graphical interface and no command-line program; folder watching happens only
when `CardProvider.poll()` is called.
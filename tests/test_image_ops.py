from pathlib import Path

import pytest

from proxyprint.image_ops import (
    VALID_IMAGE_EXTENSIONS,
    ColorCube,
    get_output_dir,
    list_image_files,
    load_color_cube,
    parse_color_cube,
)
from proxyprint.units import mm

_HEADER = [
    "# title",
    "# comment",
    "# comment",
    "",
    "LUT_3D_SIZE 2",
    "",
    "DOMAIN_MIN 0 0 0",
    "DOMAIN_MAX 1 1 1",
    "",
    "#",
    "#",
]


def _cube_text(size=2):
    rows = []
    for b in range(size):
        for g in range(size):
            for r in range(size):
                rows.append(f"{r / (size - 1)} {g / (size - 1)} {b / (size - 1)}")
    return "\n".join(_HEADER + rows) + "\n"


def test_output_dir_plain(tmp_path):
    assert get_output_dir(tmp_path, 0.0, "None") == tmp_path


def test_output_dir_with_bleed(tmp_path):
    assert get_output_dir(tmp_path, mm(1), "None") == tmp_path / "1p00"
    assert get_output_dir(tmp_path, mm(0.5), "None") == tmp_path / "0p50"


def test_output_dir_with_cube(tmp_path):
    assert get_output_dir(tmp_path, 0.0, "Vivid") == tmp_path / "Vivid"
    assert get_output_dir(tmp_path, mm(1), "Vivid") == tmp_path / "Vivid" / "1p00"


def test_list_image_files_filters_extensions(tmp_path):
    for name in ("a.png", "b.jpg", "notes.txt", "c.jpeg"):
        (tmp_path / name).write_bytes(b"x")
    (tmp_path / "sub.png").mkdir()
    found = list_image_files(tmp_path)
    assert found == [Path("a.png"), Path("b.jpg"), Path("c.jpeg")]
    assert all(p.suffix in VALID_IMAGE_EXTENSIONS for p in found)


def test_list_image_files_merges_second_dir(tmp_path):
    first = tmp_path / "images"
    second = first / "crop"
    second.mkdir(parents=True)
    (first / "a.png").write_bytes(b"x")
    (second / "a.png").write_bytes(b"x")
    (second / "b.png").write_bytes(b"x")
    found = list_image_files(first, second)
    assert found == [Path("a.png"), Path("b.png")]
    assert len(found) == len(set(found))


def test_list_image_files_missing_dir(tmp_path):
    assert list_image_files(tmp_path / "missing") == []


def test_parse_color_cube():
    cube = parse_color_cube(_cube_text())
    assert cube.size == 2
    assert len(cube.data) == 2**3 * 3
    assert cube[0, 0, 0] == (0, 0, 0)
    assert cube[1, 1, 1] == (255, 255, 255)
    assert cube[0, 0, 1] == (255, 0, 0)


def test_parse_color_cube_too_short():
    text = "\n".join(_HEADER + ["0 0 0", "1 1 1"])
    with pytest.raises(ValueError):
        parse_color_cube(text)


def test_parse_color_cube_bad_size():
    lines = list(_HEADER)
    lines[4] = "LUT_3D_SIZE many"
    with pytest.raises(ValueError):
        parse_color_cube("\n".join(lines))


def test_load_color_cube_matches_parse(tmp_path):
    cube_file = tmp_path / "test.cube"
    cube_file.write_text(_cube_text(3))
    assert load_color_cube(cube_file) == parse_color_cube(_cube_text(3))


def test_color_cube_validates_data():
    with pytest.raises(ValueError):
        ColorCube(2, b"\x00" * 5)
    cube = ColorCube(1, b"\x01\x02\x03")
    with pytest.raises(IndexError):
        cube[1, 0, 0]
"""Image file discovery, output folder naming and colour cube loading."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from .files import iter_files, list_files
from .units import mm

VALID_IMAGE_EXTENSIONS: tuple[str, ...] = (".bmp", ".gif", ".jpg", ".jpeg", ".png")

_CUBE_SIZE_LINE = 4
_CUBE_DATA_START = 11


def list_image_files(
    path: os.PathLike | str,
    second_path: Optional[os.PathLike | str] = None,
) -> list[Path]:
    """Return image file names in ``path``, followed by those only in ``second_path``."""
    images = list_files(path, VALID_IMAGE_EXTENSIONS)
    if second_path is not None:
        known = set(images)
        extra = sorted(
            {Path(child.name) for child in iter_files(second_path, VALID_IMAGE_EXTENSIONS)} - known
        )
        images.extend(extra)
    return images


def get_output_dir(crop_dir: os.PathLike | str, bleed_edge: float, color_cube_name: str) -> Path:
    """Folder that cropped images go to for a given bleed edge and colour cube."""
    crop_path = Path(crop_dir)
    if color_cube_name != "None":
        return get_output_dir(crop_path / color_cube_name, bleed_edge, "None")

    if bleed_edge > 0:
        bleed_folder = f"{bleed_edge / mm(1):.2f}".replace(".", "p").replace(",", "p")
        return crop_path / bleed_folder

    return crop_path


@dataclass(frozen=True)
class ColorCube:
    """A 3D colour lookup table of ``size``³ RGB entries, stored as bytes."""

    size: int
    data: bytes

    def __post_init__(self) -> None:
        if self.size <= 0:
            raise ValueError(f"colour cube size must be positive, got {self.size}")
        if len(self.data) != self.size**3 * 3:
            raise ValueError(
                f"colour cube of size {self.size} needs {self.size**3 * 3} bytes, got {len(self.data)}"
            )

    def __getitem__(self, index: tuple[int, int, int]) -> tuple[int, int, int]:
        """Return the RGB entry at ``(i, j, k)`` in storage order."""
        i, j, k = index
        for coordinate in index:
            if not 0 <= coordinate < self.size:
                raise IndexError(f"colour cube index {index} out of range")
        offset = ((i * self.size + j) * self.size + k) * 3
        red, green, blue = self.data[offset : offset + 3]
        return red, green, blue


def _to_channel(token: str) -> int:
    return max(0, min(255, int(float(token) * 255)))


def parse_color_cube(text: str) -> ColorCube:
    """Parse the text of a ``.cube`` file into a :class:`ColorCube`."""
    lines = text.split("\n")
    if len(lines) <= _CUBE_SIZE_LINE:
        raise ValueError("colour cube is missing its size line")

    size_fields = lines[_CUBE_SIZE_LINE].split(" ")[1:]
    if not size_fields:
        raise ValueError("colour cube size line has no value")
    try:
        size = int(size_fields[0].strip())
    except ValueError as error:
        raise ValueError(f"invalid colour cube size: {size_fields[0]!r}") from error

    data_size = size**3 * 3
    values = bytearray()
    for line in lines[_CUBE_DATA_START:]:
        for token in line.split(" "):
            token = token.strip()
            if not token:
                continue
            try:
                values.append(_to_channel(token))
            except ValueError as error:
                raise ValueError(f"invalid colour cube value: {token!r}") from error
        if len(values) >= data_size:
            break

    if len(values) < data_size:
        raise ValueError(f"colour cube of size {size} needs {data_size} values, got {len(values)}")
    return ColorCube(size, bytes(values[:data_size]))


def load_color_cube(file_path: os.PathLike | str) -> ColorCube:
    """Read and parse a ``.cube`` file."""
    return parse_color_cube(Path(file_path).read_bytes().decode("latin-1"))
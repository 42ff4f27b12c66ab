"""Record of which source files produced which output images and how."""

from __future__ import annotations

import hashlib
import json
import math
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from .log import log_warning
from .units import Vec2, mm
from .version import IMAGE_DB_FORMAT_VERSION

_MICROMETRE = mm(0.001)
_EPSILON = 1e-6


def _micrometres(length: float) -> int:
    return math.floor(length / _MICROMETRE + _EPSILON)


@dataclass(frozen=True)
class ImageParameters:
    """Settings an output image was generated with."""

    dpi: float = 0.0
    width: float = 0.0
    card_size: Vec2 = Vec2(0.0, 0.0)
    full_bleed_edge: float = 0.0
    will_write_output: bool = True

    def _key(self) -> tuple[int, int, int, int, int]:
        return (
            math.floor(self.dpi),
            math.floor(self.width),
            _micrometres(self.card_size.x),
            _micrometres(self.card_size.y),
            _micrometres(self.full_bleed_edge),
        )

    def matches(self, other: "ImageParameters") -> bool:
        """True when both would produce the same image (whole dpi, pixels and micrometres)."""
        return self._key() == other._key()


@dataclass(frozen=True)
class ImageDataBaseEntry:
    """The source hash and parameters an output was written with."""

    source_hash: bytes
    params: ImageParameters


def _entry_to_json(entry: ImageDataBaseEntry) -> dict[str, Any]:
    params = entry.params
    return {
        "hash": {"bytes": list(entry.source_hash), "subtype": None},
        "dpi": int(params.dpi),
        "width": int(params.width),
        "card_size": {
            "width": _micrometres(params.card_size.x),
            "height": _micrometres(params.card_size.y),
        },
        "card_input_bleed": _micrometres(params.full_bleed_edge),
    }


def _entry_from_json(data: dict[str, Any]) -> ImageDataBaseEntry:
    return ImageDataBaseEntry(
        source_hash=bytes(data["hash"]["bytes"]),
        params=ImageParameters(
            dpi=float(int(data["dpi"])),
            width=float(int(data["width"])),
            card_size=Vec2(
                int(data["card_size"]["width"]) * _MICROMETRE,
                int(data["card_size"]["height"]) * _MICROMETRE,
            ),
            full_bleed_edge=int(data["card_input_bleed"]) * _MICROMETRE,
        ),
    )


class ImageDataBase:
    """Maps output files to the source hash and parameters they were made from."""

    def __init__(self) -> None:
        self._entries: dict[Path, ImageDataBaseEntry] = {}

    def __len__(self) -> int:
        return len(self._entries)

    @classmethod
    def read(cls, path: os.PathLike | str) -> "ImageDataBase":
        """Load a database; an empty one is returned if it is missing or incompatible."""
        image_db = cls()
        try:
            with open(path, encoding="utf-8") as file:
                data = json.load(file)
            if not isinstance(data, dict) or data.get("version") != IMAGE_DB_FORMAT_VERSION:
                raise ValueError("Image databse version not compatible with App version...")
            image_db._entries = {
                Path(destination): _entry_from_json(entry) for destination, entry in data["db"].items()
            }
        except (OSError, ValueError, KeyError, TypeError, AttributeError) as error:
            log_warning("{}", error)
            return cls()
        return image_db

    def write(self, path: os.PathLike | str) -> None:
        """Save the database; nothing happens if the file cannot be opened."""
        data = {
            "version": IMAGE_DB_FORMAT_VERSION,
            "db": {str(destination): _entry_to_json(entry) for destination, entry in self._entries.items()},
        }
        try:
            with open(path, "w", encoding="utf-8") as file:
                json.dump(data, file, separators=(",", ":"), sort_keys=True)
        except OSError:
            return

    def find_entry(self, destination: os.PathLike | str) -> bool:
        """True if ``destination`` was ever recorded."""
        return Path(destination) in self._entries

    def test_entry(
        self,
        destination: os.PathLike | str,
        source: os.PathLike | str,
        params: ImageParameters,
    ) -> bytes:
        """Return b"" if the recorded mapping is current, else the source's MD5 hash.

        A missing source also yields b"".
        """
        source_path = Path(source)
        if not source_path.exists():
            return b""

        current = hashlib.md5(source_path.read_bytes()).digest()

        destination_path = Path(destination)
        if params.will_write_output and not destination_path.exists():
            return current

        entry = self._entries.get(destination_path)
        if entry is None or not entry.params.matches(params) or entry.source_hash != current:
            return current
        return b""

    def put_entry(
        self,
        destination: os.PathLike | str,
        source_hash: bytes,
        params: ImageParameters,
    ) -> None:
        """Record that ``destination`` was made from a source with ``source_hash``."""
        self._entries[Path(destination)] = ImageDataBaseEntry(bytes(source_hash), params)
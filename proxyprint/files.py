"""Listing files and folders directly inside a directory."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Iterable, Iterator


def iter_files(path: os.PathLike | str, extensions: Iterable[str] = ()) -> Iterator[Path]:
    """Yield non-directory entries of ``path`` whose suffix is in ``extensions``.

    An empty ``extensions`` accepts every file. Nothing is yielded when
    ``path`` is not a directory.
    """
    directory = Path(path)
    if not directory.is_dir():
        return
    wanted = {str(ext) for ext in extensions}
    for child in directory.iterdir():
        if child.is_dir():
            continue
        if not wanted or child.suffix in wanted:
            yield child


def iter_folders(path: os.PathLike | str) -> Iterator[Path]:
    """Yield the sub-directories of ``path``; nothing if it is not a directory."""
    directory = Path(path)
    if not directory.is_dir():
        return
    for child in directory.iterdir():
        if child.is_dir():
            yield child


def list_files(path: os.PathLike | str, extensions: Iterable[str] = ()) -> list[Path]:
    """Return the sorted file names (without directory) found by :func:`iter_files`."""
    return sorted(Path(child.name) for child in iter_files(path, extensions))


def list_folders(path: os.PathLike | str) -> list[Path]:
    """Return the sorted names of the sub-directories of ``path``."""
    return sorted(Path(child.name) for child in iter_folders(path))
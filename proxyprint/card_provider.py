"""Discovers card images on disk and reports when they appear, change or vanish."""

from __future__ import annotations

import os
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Callable, Optional

from .files import iter_files
from .image_ops import VALID_IMAGE_EXTENSIONS, get_output_dir, list_image_files
from .project import Project


class FileAction(Enum):
    """A change observed in a watched folder."""

    ADD = "add"
    DELETE = "delete"
    MODIFIED = "modified"
    MOVED = "moved"


@dataclass
class CardListener:
    """Callbacks receiving the cards reported by a :class:`CardProvider`.

    A callback left as None is not called.
    """

    added: Optional[Callable[[Path, bool, bool], None]] = None
    removed: Optional[Callable[[Path], None]] = None
    renamed: Optional[Callable[[Path, Path], None]] = None
    modified: Optional[Callable[[Path], None]] = None


def _notify(callback: Optional[Callable[..., None]], *args) -> None:
    if callback is not None:
        callback(*args)


_Snapshot = dict[str, tuple[int, int]]


def _snapshot(directory: Path) -> _Snapshot:
    state: _Snapshot = {}
    for child in iter_files(directory):
        try:
            stat = child.stat()
        except OSError:
            continue
        state[child.name] = (stat.st_mtime_ns, stat.st_size)
    return state


class CardProvider:
    """Reports the card images of a project and watches its folders by polling."""

    def __init__(self, project: Project, listener: Optional[CardListener] = None) -> None:
        self.project = project
        self.listener = listener if listener is not None else CardListener()
        data = project.data
        self.image_dir: Path = Path(data.image_dir)
        self.crop_dir: Optional[Path] = Path(data.crop_dir) if project.config.enable_uncrop else None
        self.output_dir: Path = self._current_output_dir()
        self._watches: dict[Path, _Snapshot] = {}
        self._started = False

        self._add_watch(self.image_dir)
        if self.crop_dir is not None:
            self._add_watch(self.crop_dir)

    @property
    def started(self) -> bool:
        return self._started

    def _current_output_dir(self) -> Path:
        data = self.project.data
        return get_output_dir(data.crop_dir, data.bleed_edge, self.project.config.color_cube)

    def _add_watch(self, directory: Path) -> None:
        self._watches[directory] = _snapshot(directory)

    def _remove_watch(self, directory: Optional[Path]) -> None:
        if directory is not None:
            self._watches.pop(directory, None)

    def list_files(self) -> list[Path]:
        """Image names in the image folder, plus the crop folder when uncropping."""
        if self.crop_dir is not None:
            return list_image_files(self.image_dir, self.crop_dir)
        return list_image_files(self.image_dir)

    def _add_all(self, needs_crop: bool, needs_preview: bool) -> None:
        for image in self.list_files():
            _notify(self.listener.added, image, needs_crop, needs_preview)

    def start(self) -> None:
        """Report every current image and begin watching the folders."""
        self._add_all(True, True)
        if not self._started:
            for directory in self._watches:
                self._watches[directory] = _snapshot(directory)
            self._started = True

    def poll(self) -> list[tuple[FileAction, str]]:
        """Look for changes in the watched folders and report them; returns what changed."""
        if not self._started:
            return []

        events: list[tuple[FileAction, str]] = []
        for directory, before in list(self._watches.items()):
            after = _snapshot(directory)
            self._watches[directory] = after
            events.extend((FileAction.ADD, name) for name in sorted(after.keys() - before.keys()))
            events.extend((FileAction.DELETE, name) for name in sorted(before.keys() - after.keys()))
            events.extend(
                (FileAction.MODIFIED, name)
                for name in sorted(before.keys() & after.keys())
                if before[name] != after[name]
            )

        for action, name in events:
            self.handle_file_action(name, action)
        return events

    def new_project_opened(self) -> None:
        """Switch to the folders of a newly opened project."""
        self.image_dir_changed()

    def image_dir_changed(self) -> None:
        """Drop every card of the old folders and report those of the new ones."""
        for image in self.list_files():
            _notify(self.listener.removed, image)

        self._remove_watch(self.image_dir)
        self._remove_watch(self.crop_dir)

        data = self.project.data
        self.image_dir = Path(data.image_dir)
        self.crop_dir = Path(data.crop_dir) if self.project.config.enable_uncrop else None
        self.output_dir = self._current_output_dir()

        self._add_watch(self.image_dir)
        if self.crop_dir is not None:
            self._add_watch(self.crop_dir)

        self.start()

    def card_size_changed(self) -> None:
        """Request new crops and previews of every card."""
        self._add_all(True, True)

    def bleed_changed(self) -> None:
        """Request new crops of every card into the new output folder."""
        self.output_dir = self._current_output_dir()
        self._add_all(True, False)

    def enable_uncrop_changed(self) -> None:
        """Add or remove cards that exist only in the crop folder."""
        images = set(list_image_files(self.image_dir))
        if self.crop_dir is not None:
            for image in list_image_files(self.crop_dir):
                if image not in images:
                    _notify(self.listener.removed, image)
            self._remove_watch(self.crop_dir)
            self.crop_dir = None
        else:
            crop_dir = Path(self.project.data.crop_dir)
            for image in list_image_files(crop_dir):
                if image not in images:
                    _notify(self.listener.added, image, True, True)
            self.crop_dir = crop_dir
            self._add_watch(crop_dir)

    def color_cube_changed(self) -> None:
        """Request new crops of every card into the new output folder."""
        self.output_dir = self._current_output_dir()
        self._add_all(True, False)

    def base_preview_width_changed(self) -> None:
        """Request new previews of every card."""
        self._add_all(False, True)

    def max_dpi_changed(self) -> None:
        """Request new crops of every card."""
        self._add_all(True, False)

    def handle_file_action(
        self,
        filename: os.PathLike | str,
        action: FileAction,
        old_filename: Optional[os.PathLike | str] = None,
    ) -> None:
        """Report a change to an image file; other files and folders are ignored."""
        file_path = Path(filename)
        if not file_path.suffix:
            return
        if file_path.suffix not in VALID_IMAGE_EXTENSIONS:
            return

        if action is FileAction.ADD:
            _notify(self.listener.added, file_path, True, True)
        elif action is FileAction.DELETE:
            _notify(self.listener.removed, file_path)
        elif action is FileAction.MODIFIED:
            _notify(self.listener.modified, file_path)
        elif action is FileAction.MOVED:
            if old_filename is None:
                raise ValueError("a moved file needs its old name")
            _notify(self.listener.renamed, Path(old_filename), file_path)
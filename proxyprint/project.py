"""A print project: its cards, layout, guides and the sizes derived from them."""

from __future__ import annotations

import json
import math
import os
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Callable, Optional

from .config import BASE_PDF_SIZE, FIT_SIZE, CardSizeInfo, Config, PageOrientation
from .image_ops import get_output_dir, list_image_files
from .log import log_error, log_info
from .units import Vec2, cm, mm, points
from .version import JSON_FORMAT_VERSION

PdfSizeLoader = Callable[[Path], Optional[Vec2]]
PreviewListener = Callable[[Path, Any], None]


@dataclass
class CardInfo:
    """How often a card is printed and which backside it uses."""

    num: int = 1
    hidden: int = 0
    backside: Optional[Path] = None
    backside_short_edge: bool = False
    force_keep: int = 0


class FlipPageOn(Enum):
    """Edge the sheet is flipped on for double-sided printing."""

    LEFT_EDGE = "LeftEdge"
    TOP_EDGE = "TopEdge"


class CardCorners(Enum):
    """Shape of the card corners."""

    SQUARE = "Square"
    ROUNDED = "Rounded"


def _no_pdf_size(_path: Path) -> Optional[Vec2]:
    return None


@dataclass
class ProjectData:
    """Every setting of a project, with the sizes computed from them."""

    image_dir: Path = Path("images")
    crop_dir: Path = Path("images/crop")
    image_cache: Path = Path("images/crop/preview.cache")

    cards: dict[Path, CardInfo] = field(default_factory=dict)
    previews: dict[Path, Any] = field(default_factory=dict)
    fallback_preview: Any = None

    bleed_edge: float = 0.0
    spacing: Vec2 = Vec2(0.0, 0.0)
    spacing_linked: bool = True
    corners: CardCorners = CardCorners.SQUARE

    backside_enabled: bool = False
    backside_default: Path = Path("__back.png")
    backside_offset: float = 0.0

    card_size_choice: str = "Standard"
    page_size: str = "Letter"
    base_pdf: str = "None"
    custom_margins: Optional[Vec2] = None
    card_layout: tuple[int, int] = (3, 3)
    orientation: PageOrientation = PageOrientation.PORTRAIT
    flip_on: FlipPageOn = FlipPageOn.LEFT_EDGE
    file_name: Path = Path("_printme")

    export_exact_guides: bool = False
    enable_guides: bool = True
    backside_enable_guides: bool = False
    corner_guides: bool = True
    cross_guides: bool = False
    extended_guides: bool = False
    guides_color_a: tuple[int, int, int] = (0, 0, 0)
    guides_color_b: tuple[int, int, int] = (190, 190, 190)
    guides_offset: float = 0.0
    guides_thickness: float = points(1)
    guides_length: float = mm(1.5)

    def _card_size_info(self, config: Config) -> CardSizeInfo:
        info = config.card_sizes.get(self.card_size_choice)
        if info is None:
            info = config.card_sizes[config.default_card_size]
        return info

    def compute_page_size(self, config: Config, pdf_size_loader: Optional[PdfSizeLoader] = None) -> Vec2:
        """Size of the printed page in metres."""
        if self.page_size == FIT_SIZE:
            return self.compute_cards_size(config)
        if self.page_size == BASE_PDF_SIZE:
            loader = pdf_size_loader or _no_pdf_size
            size = loader(Path(self.base_pdf + ".pdf"))
            return size if size is not None else config.page_sizes["A4"].dimensions
        page_size = config.page_sizes[self.page_size].dimensions
        if self.orientation is PageOrientation.LANDSCAPE:
            page_size = page_size.swapped()
        return page_size

    def compute_cards_size(self, config: Config) -> Vec2:
        """Size taken by the whole grid of cards, spacing included."""
        layout = Vec2(*self.card_layout)
        card_size_with_bleed = self.card_size(config) + 2 * self.bleed_edge
        return layout * card_size_with_bleed + (layout - 1) * self.spacing

    def compute_margins(self, config: Config, pdf_size_loader: Optional[PdfSizeLoader] = None) -> Vec2:
        """Custom margins if set, otherwise the free space split evenly."""
        if self.custom_margins is not None:
            return self.custom_margins
        return self.compute_max_margins(config, pdf_size_loader) / 2.0

    def compute_max_margins(self, config: Config, pdf_size_loader: Optional[PdfSizeLoader] = None) -> Vec2:
        """Space left on the page around the grid of cards."""
        return self.compute_page_size(config, pdf_size_loader) - self.compute_cards_size(config)

    def card_ratio(self, config: Config) -> float:
        """Width of a card divided by its height."""
        size = self.card_size(config)
        return size.x / size.y

    def card_size(self, config: Config) -> Vec2:
        """Size of a card without any bleed."""
        info = self._card_size_info(config)
        return info.card_size.dimensions * info.card_size_scale

    def card_size_with_bleed(self, config: Config) -> Vec2:
        """Size of a card with the project's bleed edge on every side."""
        info = self._card_size_info(config)
        return info.card_size.dimensions * info.card_size_scale + self.bleed_edge * 2

    def card_size_with_full_bleed(self, config: Config) -> Vec2:
        """Size of a source image: the card with its full input bleed."""
        info = self._card_size_info(config)
        return (info.card_size.dimensions + info.input_bleed.dimension * 2) * info.card_size_scale

    def card_full_bleed(self, config: Config) -> float:
        """Input bleed of the card format."""
        info = self._card_size_info(config)
        return info.input_bleed.dimension * info.card_size_scale

    def card_corner_radius(self, config: Config) -> float:
        """Corner radius of the card format."""
        info = self._card_size_info(config)
        return info.corner_radius.dimension * info.card_size_scale


def _as_bool(value: Any) -> bool:
    if not isinstance(value, bool):
        raise TypeError(f"expected a boolean, got {value!r}")
    return value


def _as_number(value: Any) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise TypeError(f"expected a number, got {value!r}")
    return float(value)


def _as_uint(value: Any) -> int:
    return int(_as_number(value))


def _as_str(value: Any) -> str:
    if not isinstance(value, str):
        raise TypeError(f"expected a string, got {value!r}")
    return value


def _as_color(value: Any) -> tuple[int, int, int]:
    return (_as_uint(value[0]), _as_uint(value[1]), _as_uint(value[2]))


def _enum_from_name(enum_cls: type[Enum], value: Any, default: Enum) -> Any:
    try:
        return enum_cls(_as_str(value))
    except ValueError:
        return default


class Project:
    """A project bound to the settings it is computed with."""

    def __init__(self, config: Optional[Config] = None, pdf_size_loader: Optional[PdfSizeLoader] = None) -> None:
        self.config = config if config is not None else Config()
        self.pdf_size_loader: PdfSizeLoader = pdf_size_loader or _no_pdf_size
        self.data = self._fresh_data()
        self.preview_listeners: list[PreviewListener] = []

    def _fresh_data(self) -> ProjectData:
        return ProjectData(
            card_size_choice=self.config.default_card_size,
            page_size=self.config.default_page_size,
        )

    def load(self, json_path: os.PathLike | str) -> None:
        """Load a project file; on failure what was read so far is kept."""
        self.data = self._fresh_data()
        log_info("Initializing project...")
        try:
            self._load_json(Path(json_path))
        except (OSError, ValueError, KeyError, TypeError, IndexError) as error:
            log_error(
                "Failed loading project from {}, continuing with an empty project: {}",
                str(json_path),
                error,
            )
        self.init_properties()
        self.ensure_output_folder()

    def _load_json(self, json_path: Path) -> None:
        with open(json_path, encoding="utf-8") as file:
            doc = json.load(file)
        if not isinstance(doc, dict) or doc.get("version") != JSON_FORMAT_VERSION:
            raise ValueError("Project version not compatible with App version...")

        data = self.data
        config = self.config

        data.image_dir = Path(_as_str(doc["image_dir"]))
        data.crop_dir = data.image_dir / "crop"
        data.image_cache = data.crop_dir / "preview.cache"

        for card_json in doc["cards"]:
            name = Path(_as_str(card_json["name"]))
            card = data.cards.setdefault(name, CardInfo())
            card.num = _as_uint(card_json["num"])
            card.hidden = _as_uint(card_json["hidden"])
            backside = _as_str(card_json["backside"])
            card.backside = Path(backside) if backside else None
            card.backside_short_edge = _as_bool(card_json["backside_short_edge"])

        data.bleed_edge = _as_number(doc["bleed_edge"])
        spacing = doc["spacing"]
        if isinstance(spacing, (int, float)) and not isinstance(spacing, bool):
            data.spacing = Vec2(float(spacing), float(spacing))
        else:
            data.spacing = Vec2(
                _as_number(spacing["width"]) * mm(1),
                _as_number(spacing["height"]) * mm(1),
            )
            data.spacing_linked = _as_bool(doc["spacing_linked"])
        if "corners" in doc:
            data.corners = _enum_from_name(CardCorners, doc["corners"], CardCorners.SQUARE)

        data.backside_enabled = _as_bool(doc["backside_enabled"])
        data.backside_default = Path(_as_str(doc["backside_default"]))
        data.backside_offset = _as_number(doc["backside_offset"])

        data.card_size_choice = _as_str(doc["card_size"])
        if data.card_size_choice not in config.card_sizes:
            data.card_size_choice = config.default_card_size

        data.page_size = _as_str(doc["page_size"])
        if data.page_size not in config.page_sizes:
            data.page_size = config.default_page_size

        data.base_pdf = _as_str(doc["base_pdf"])
        data.orientation = _enum_from_name(PageOrientation, doc["orientation"], PageOrientation.PORTRAIT)
        if "flip_page_on" in doc:
            data.flip_on = _enum_from_name(FlipPageOn, doc["flip_page_on"], FlipPageOn.LEFT_EDGE)
        if data.page_size == FIT_SIZE:
            data.card_layout = (
                _as_uint(doc["card_layout"]["width"]),
                _as_uint(doc["card_layout"]["height"]),
            )
        else:
            self.cache_card_layout()

        if "custom_margins" in doc:
            data.custom_margins = Vec2(
                _as_number(doc["custom_margins"]["width"]) * cm(1),
                _as_number(doc["custom_margins"]["height"]) * cm(1),
            )
        else:
            data.custom_margins = None

        data.file_name = Path(_as_str(doc["file_name"]))

        data.export_exact_guides = _as_bool(doc["export_exact_guides"])
        data.enable_guides = _as_bool(doc["enable_guides"])
        data.backside_enable_guides = _as_bool(doc["enable_backside_guides"])
        if "corner_guides" in doc:
            data.corner_guides = _as_bool(doc["corner_guides"])
        else:
            data.corner_guides = data.enable_guides
        data.cross_guides = _as_bool(doc["cross_guides"])
        data.extended_guides = _as_bool(doc["extended_guides"])
        data.guides_color_a = _as_color(doc["guides_color_a"])
        data.guides_color_b = _as_color(doc["guides_color_b"])
        data.guides_offset = _as_number(doc["guides_offset"])
        data.guides_thickness = _as_number(doc["guides_thickness"])
        data.guides_length = _as_number(doc["guides_length"])

    def dump(self, json_path: os.PathLike | str) -> None:
        """Write the project file; an error is logged if it cannot be opened."""
        data = self.data
        doc: dict[str, Any] = {
            "version": JSON_FORMAT_VERSION,
            "image_dir": str(data.image_dir),
            "img_cache": str(data.image_cache),
            "cards": [
                {
                    "name": str(name),
                    "num": card.num,
                    "hidden": card.hidden,
                    "backside": str(card.backside) if card.backside is not None else "",
                    "backside_short_edge": card.backside_short_edge,
                }
                for name, card in sorted(data.cards.items())
            ],
            "bleed_edge": data.bleed_edge,
            "spacing": {"width": data.spacing.x / mm(1), "height": data.spacing.y / mm(1)},
            "spacing_linked": data.spacing_linked,
            "corners": data.corners.value,
            "backside_enabled": data.backside_enabled,
            "backside_default": str(data.backside_default),
            "backside_offset": data.backside_offset,
            "card_size": data.card_size_choice,
            "page_size": data.page_size,
            "base_pdf": data.base_pdf,
            "card_layout": {"width": data.card_layout[0], "height": data.card_layout[1]},
            "orientation": data.orientation.value,
            "flip_page_on": data.flip_on.value,
            "file_name": str(data.file_name),
            "export_exact_guides": data.export_exact_guides,
            "enable_guides": data.enable_guides,
            "enable_backside_guides": data.backside_enable_guides,
            "corner_guides": data.corner_guides,
            "cross_guides": data.cross_guides,
            "extended_guides": data.extended_guides,
            "guides_color_a": list(data.guides_color_a),
            "guides_color_b": list(data.guides_color_b),
            "guides_offset": data.guides_offset,
            "guides_thickness": data.guides_thickness,
            "guides_length": data.guides_length,
        }
        if data.custom_margins is not None:
            doc["custom_margins"] = {
                "width": data.custom_margins.x / cm(1),
                "height": data.custom_margins.y / cm(1),
            }

        try:
            file = open(json_path, "w", encoding="utf-8")
        except OSError:
            log_error("Failed opening file {} for write...", str(json_path))
            return
        with file:
            log_info("Writing project to {}...", str(json_path))
            json.dump(doc, file, separators=(",", ":"), sort_keys=True)

    def init_properties(self) -> None:
        """Add cards for every image found and drop cards whose image is gone."""
        log_info("Collecting images...")
        data = self.data
        if self.config.enable_uncrop:
            crop_list = list_image_files(data.image_dir)
        else:
            crop_list = list_image_files(data.image_dir, data.crop_dir)

        for img in crop_list:
            if img not in data.cards and img != self.config.fallback_name:
                data.cards[img] = self._new_card(img)

        present = set(crop_list)
        for stale in [name for name in data.cards if name not in present]:
            del data.cards[stale]

    @staticmethod
    def _new_card(card_name: Path) -> CardInfo:
        if str(card_name).startswith("__"):
            return CardInfo(num=0, hidden=1)
        return CardInfo(num=1, hidden=0)

    def card_added(self, card_name: os.PathLike | str) -> None:
        """Add a card for a new image, unless it is already known."""
        name = Path(card_name)
        if name not in self.data.cards:
            self.data.cards[name] = self._new_card(name)

    def card_removed(self, card_name: os.PathLike | str) -> None:
        """Forget a card and its preview, unless it is being force-kept."""
        name = Path(card_name)
        card = self.data.cards.get(name)
        if card is not None and card.force_keep > 0:
            card.force_keep -= 1
            return
        self.data.cards.pop(name, None)
        self.data.previews.pop(name, None)

    def card_renamed(self, old_card_name: os.PathLike | str, new_card_name: os.PathLike | str) -> None:
        """Move a card and its preview to a new name."""
        old_name, new_name = Path(old_card_name), Path(new_card_name)
        if old_name in self.data.cards:
            self.data.cards[new_name] = self.data.cards.pop(old_name)
        if old_name in self.data.previews:
            self.data.previews[new_name] = self.data.previews.pop(old_name)

    def set_preview(self, image_name: os.PathLike | str, preview: Any) -> None:
        """Store a preview and notify the preview listeners."""
        name = Path(image_name)
        for listener in list(self.preview_listeners):
            listener(name, preview)
        self.data.previews[name] = preview

    def has_preview(self, image_name: os.PathLike | str) -> bool:
        """True if a preview is stored for the image."""
        return Path(image_name) in self.data.previews

    def get_backside_image(self, image_name: os.PathLike | str) -> Path:
        """The card's own backside, or the project's default backside."""
        card = self.data.cards.get(Path(image_name))
        if card is not None and card.backside is not None:
            return card.backside
        return self.data.backside_default

    def cache_card_layout(self) -> bool:
        """Fit as many cards on the page as possible; True if the layout changed."""
        data = self.data
        if data.page_size == FIT_SIZE:
            return False

        previous = data.card_layout
        page_size = self.compute_page_size()
        fitting = page_size / self.card_size_with_bleed()
        columns, rows = max(0, math.floor(fitting.x)), max(0, math.floor(fitting.y))
        data.card_layout = (columns, rows)

        if data.spacing.x > 0 or data.spacing.y > 0:
            cards_size = self.compute_cards_size()
            if cards_size.x > page_size.x:
                columns = max(0, columns - 1)
            if cards_size.y > page_size.y:
                rows = max(0, rows - 1)
            data.card_layout = (columns, rows)

        return previous != data.card_layout

    def compute_page_size(self) -> Vec2:
        """Size of the printed page."""
        return self.data.compute_page_size(self.config, self.pdf_size_loader)

    def compute_cards_size(self) -> Vec2:
        """Size of the grid of cards."""
        return self.data.compute_cards_size(self.config)

    def compute_margins(self) -> Vec2:
        """Margins around the grid of cards."""
        return self.data.compute_margins(self.config, self.pdf_size_loader)

    def compute_max_margins(self) -> Vec2:
        """Free space around the grid of cards."""
        return self.data.compute_max_margins(self.config, self.pdf_size_loader)

    def card_ratio(self) -> float:
        """Width of a card divided by its height."""
        return self.data.card_ratio(self.config)

    def card_size(self) -> Vec2:
        """Size of a card without bleed."""
        return self.data.card_size(self.config)

    def card_size_with_bleed(self) -> Vec2:
        """Size of a card with the project's bleed edge."""
        return self.data.card_size_with_bleed(self.config)

    def card_size_with_full_bleed(self) -> Vec2:
        """Size of a card with the full input bleed."""
        return self.data.card_size_with_full_bleed(self.config)

    def card_full_bleed(self) -> float:
        """Input bleed of the card format."""
        return self.data.card_full_bleed(self.config)

    def card_corner_radius(self) -> float:
        """Corner radius of the card format."""
        return self.data.card_corner_radius(self.config)

    def output_dir(self) -> Path:
        """Folder the cropped images of this project are written to."""
        return get_output_dir(self.data.crop_dir, self.data.bleed_edge, self.config.color_cube)

    def ensure_output_folder(self) -> None:
        """Create the output folder if it does not exist."""
        self.output_dir().mkdir(parents=True, exist_ok=True)
"""Application settings: units, page sizes, card sizes and output options."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import ClassVar, Optional

from .units import Vec2, cm, dpi, inches, mm, points


class PdfBackend(Enum):
    """Library used to write the output document."""

    LIB_HARU = "LibHaru"
    PODOFO = "PoDoFo"
    PNG = "Png"


class ImageFormat(Enum):
    """Encoding of images embedded in the output document."""

    PNG = "Png"
    JPG = "Jpg"


class PageOrientation(Enum):
    """Orientation of the printed page."""

    PORTRAIT = "Portrait"
    LANDSCAPE = "Landscape"


@dataclass(frozen=True)
class UnitInfo:
    """A length unit offered to the user, with its size in metres."""

    name: str
    short_name: str
    unit: float


SUPPORTED_BASE_UNITS: tuple[UnitInfo, ...] = (
    UnitInfo("mm", "mm", mm(1)),
    UnitInfo("cm", "cm", mm(10)),
    UnitInfo("inches", "in", inches(1)),
    UnitInfo("points", "pts", points(1)),
)


def unit_from_name(unit_name: str) -> Optional[UnitInfo]:
    """Return the supported unit called ``unit_name``, or None."""
    return next((info for info in SUPPORTED_BASE_UNITS if info.name == unit_name), None)


def unit_from_value(unit_value: float) -> Optional[UnitInfo]:
    """Return the supported unit whose length is ``unit_value`` metres, or None."""
    tolerance = mm(0.0001)
    return next(
        (info for info in SUPPORTED_BASE_UNITS if abs(info.unit - unit_value) < tolerance),
        None,
    )


@dataclass(frozen=True)
class SizeInfo:
    """A two-dimensional size with the unit and precision it is shown in."""

    dimensions: Vec2 = Vec2(0.0, 0.0)
    base_unit: float = 0.0
    decimals: int = 0


@dataclass(frozen=True)
class LengthInfo:
    """A length with the unit and precision it is shown in."""

    dimension: float = 0.0
    base_unit: float = 0.0
    decimals: int = 0


@dataclass(frozen=True)
class CardSizeInfo:
    """Physical description of a card format."""

    card_size: SizeInfo
    input_bleed: LengthInfo
    corner_radius: LengthInfo
    hint: str = ""
    card_size_scale: float = 1.0


FIT_SIZE = "Fit"
BASE_PDF_SIZE = "Base Pdf"


def _default_page_sizes() -> dict[str, SizeInfo]:
    return {
        "A3": SizeInfo(Vec2(mm(297), mm(420)), mm(1), 0),
        "A3+": SizeInfo(Vec2(mm(329), mm(483)), mm(1), 0),
        "A4": SizeInfo(Vec2(mm(210), mm(297)), mm(1), 0),
        "A4+": SizeInfo(Vec2(mm(240), mm(329)), mm(1), 0),
        "A5": SizeInfo(Vec2(mm(148.5), mm(210)), mm(1), 1),
        BASE_PDF_SIZE: SizeInfo(),
        FIT_SIZE: SizeInfo(),
        "Ledger": SizeInfo(Vec2(inches(11), inches(17)), inches(1), 1),
        "Legal": SizeInfo(Vec2(inches(8.5), inches(14)), inches(1), 1),
        "Letter": SizeInfo(Vec2(inches(8.5), inches(11)), inches(1), 1),
    }


def _default_card_sizes() -> dict[str, CardSizeInfo]:
    return {
        "Japanese": CardSizeInfo(
            card_size=SizeInfo(Vec2(mm(59), mm(86)), mm(1), 0),
            input_bleed=LengthInfo(mm(2), mm(1), 0),
            corner_radius=LengthInfo(mm(1), mm(1), 0),
            hint=".e.g. Yu-Gi-Oh!",
        ),
        "Poker": CardSizeInfo(
            card_size=SizeInfo(Vec2(inches(2.5), mm(3.5)), inches(1), 1),
            input_bleed=LengthInfo(mm(2), mm(1), 0),
            corner_radius=LengthInfo(cm(3), mm(1), 0),
            hint="",
        ),
        "Standard": CardSizeInfo(
            card_size=SizeInfo(Vec2(inches(2.48), inches(3.46)), inches(1), 2),
            input_bleed=LengthInfo(inches(0.12), inches(1), 2),
            corner_radius=LengthInfo(mm(2.5), mm(1), 1),
            hint=".e.g. Magic the Gathering, Pokemon, and other TCGs",
        ),
        "Standard Novelty": CardSizeInfo(
            card_size=SizeInfo(Vec2(inches(2.48), inches(3.46)), inches(1), 2),
            input_bleed=LengthInfo(inches(0.12), inches(1), 2),
            corner_radius=LengthInfo(mm(2.5), mm(1), 1),
            hint=".e.g. novelty-sized Magic the Gathering",
            card_size_scale=0.5,
        ),
        "Standard x2": CardSizeInfo(
            card_size=SizeInfo(Vec2(inches(3.46), inches(4.96)), inches(1), 2),
            input_bleed=LengthInfo(inches(0.12), inches(1), 2),
            corner_radius=LengthInfo(mm(5), mm(1), 1),
            hint=".e.g. oversized Magic the Gathering",
        ),
    }


@dataclass
class Config:
    """User settings shared by the whole application."""

    FIT_SIZE: ClassVar[str] = FIT_SIZE
    BASE_PDF_SIZE: ClassVar[str] = BASE_PDF_SIZE

    enable_uncrop: bool = False
    enable_fancy_uncrop: bool = True
    base_preview_width: float = 248.0
    max_dpi: float = dpi(1200)
    display_columns: int = 5
    default_card_size: str = "Standard"
    default_page_size: str = "Letter"
    color_cube: str = "None"
    fallback_name: Path = Path("fallback.png")
    backend: PdfBackend = PdfBackend.LIB_HARU
    pdf_image_format: ImageFormat = ImageFormat.PNG
    png_compression: Optional[int] = None
    jpg_quality: Optional[int] = None
    base_unit: UnitInfo = SUPPORTED_BASE_UNITS[0]
    plugins_state: dict[str, bool] = field(default_factory=dict)
    page_sizes: dict[str, SizeInfo] = field(default_factory=_default_page_sizes)
    card_sizes: dict[str, CardSizeInfo] = field(default_factory=_default_card_sizes)
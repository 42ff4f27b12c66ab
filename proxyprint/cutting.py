"""Exact cutting outlines of the card grid, as SVG and DXF."""

from __future__ import annotations

import math
from contextlib import contextmanager
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterator, Optional
from xml.sax.saxutils import quoteattr

from .log import log_info
from .project import Project
from .units import Vec2, mm

SVG_TITLE = "Card cutting guides."
SVG_DESCRIPTION = "An SVG containing exact cutting guides for the accompanying sheet."

_QUARTER_CIRCLE_RESOLUTION = 32

_DXF_HEADER = "  0\nSECTION\n  2\nENTITIES\n"
_DXF_FOOTER = "  0\nENDSEC\n  0\nEOF\n"
_DXF_POLYLINE_START = "  0\nPOLYLINE\n  8\n0\n  66\n1\n  70\n9\n"
_DXF_POLYLINE_END = "  0\nSEQEND\n"


@dataclass(frozen=True)
class CardRect:
    """An axis-aligned rectangle with optionally rounded corners."""

    x: float
    y: float
    width: float
    height: float
    radius_x: float = 0.0
    radius_y: float = 0.0


@dataclass
class CardsPath:
    """The outline of a sheet: an optional outer border and one rectangle per card."""

    border: Optional[CardRect] = None
    cards: list[CardRect] = field(default_factory=list)

    def __iter__(self) -> Iterator[CardRect]:
        if self.border is not None:
            yield self.border
        yield from self.cards

    def __len__(self) -> int:
        return len(self.cards) + (self.border is not None)


def generate_cards_path(
    origin: Vec2,
    size: Vec2,
    grid: tuple[int, int],
    card_size: Vec2,
    bleed_edge: float,
    spacing: Vec2,
    corner_radius: float,
) -> CardsPath:
    """Outline of a ``grid`` of cards scaled to fill ``size`` starting at ``origin``.

    Cards are listed column by column.
    """
    columns, rows = grid
    grid_vec = Vec2(columns, rows)
    card_size_with_bleed = card_size + 2 * bleed_edge
    physical_canvas_size = grid_vec * card_size_with_bleed + (grid_vec - 1) * spacing
    if physical_canvas_size.x == 0 or physical_canvas_size.y == 0:
        raise ValueError("the card grid has no area")

    pixel_ratio = size / physical_canvas_size
    card_size_with_bleed_pixels = card_size_with_bleed * pixel_ratio
    corner_radius_pixels = pixel_ratio * corner_radius
    bleed_pixels = pixel_ratio * bleed_edge
    spacing_pixels = spacing * pixel_ratio
    card_size_pixels = card_size_with_bleed_pixels - 2 * bleed_pixels

    path = CardsPath()
    if bleed_edge > 0:
        path.border = CardRect(origin.x, origin.y, size.x, size.y)

    step = card_size_with_bleed_pixels + spacing_pixels
    for x in range(columns):
        for y in range(rows):
            top_left = origin + Vec2(x, y) * step + bleed_pixels
            path.cards.append(
                CardRect(
                    top_left.x,
                    top_left.y,
                    card_size_pixels.x,
                    card_size_pixels.y,
                    corner_radius_pixels.x,
                    corner_radius_pixels.y,
                )
            )
    return path


def project_cards_path(project: Project) -> CardsPath:
    """Outline of the project's card grid in millimetres, starting at the origin."""
    data = project.data
    return generate_cards_path(
        Vec2(0.0, 0.0),
        project.compute_cards_size() / mm(1),
        data.card_layout,
        project.card_size(),
        data.bleed_edge,
        data.spacing,
        project.card_corner_radius(),
    )


def _svg_number(value: float) -> str:
    return f"{value:.6g}"


def cards_svg(path: CardsPath, width: float, height: float) -> str:
    """Render an outline as an SVG document ``width`` by ``height`` units large."""
    lines = [
        '<?xml version="1.0" encoding="UTF-8" standalone="no"?>',
        (
            f'<svg xmlns="http://www.w3.org/2000/svg" version="1.2" '
            f'width="{_svg_number(width)}" height="{_svg_number(height)}" '
            f'viewBox="0 0 {_svg_number(width)} {_svg_number(height)}">'
        ),
        f"<title>{SVG_TITLE}</title>",
        f"<desc>{SVG_DESCRIPTION}</desc>",
        '<g fill="none" stroke="#ff0000" stroke-width="1">',
    ]
    for rect in path:
        lines.append(
            "<rect"
            f" x={quoteattr(_svg_number(rect.x))}"
            f" y={quoteattr(_svg_number(rect.y))}"
            f" width={quoteattr(_svg_number(rect.width))}"
            f" height={quoteattr(_svg_number(rect.height))}"
            f" rx={quoteattr(_svg_number(rect.radius_x))}"
            f" ry={quoteattr(_svg_number(rect.radius_y))}/>"
        )
    lines.append("</g>")
    lines.append("</svg>")
    return "\n".join(lines) + "\n"


def generate_cards_svg(project: Project) -> Path:
    """Write the project's cutting outline next to its output file as ``.svg``."""
    svg_path = Path(project.data.file_name).with_suffix(".svg")

    log_info("Generating card path...")
    path = project_cards_path(project)
    size = project.compute_cards_size() / mm(1)

    log_info("Drawing card path...")
    svg_path.write_text(cards_svg(path, size.x, size.y), encoding="utf-8")
    return svg_path


def _dxf_number(value: float) -> str:
    text = repr(float(value))
    return text[:-2] if text.endswith(".0") else text


def cards_dxf(project: Project) -> str:
    """Render the project's cutting outline, in millimetres, as DXF text."""
    parts: list[str] = [_DXF_HEADER]

    def draw_vertex(x: float, y: float) -> None:
        parts.append(f"  0\nVERTEX\n  8\n0\n  10\n{_dxf_number(x)}\n  20\n{_dxf_number(y)}\n")

    @contextmanager
    def poly_line() -> Iterator[None]:
        parts.append(_DXF_POLYLINE_START)
        yield
        parts.append(_DXF_POLYLINE_END)

    def draw_quarter_circle(center_x: float, center_y: float, radius: float, start_angle: float) -> None:
        start = math.radians(start_angle)
        for i in range(1, _QUARTER_CIRCLE_RESOLUTION):
            alpha = start + i * (math.pi / 2) / _QUARTER_CIRCLE_RESOLUTION
            draw_vertex(center_x + math.sin(alpha) * radius, center_y + math.cos(alpha) * radius)

    data = project.data
    if data.bleed_edge > 0:
        cards_size = project.compute_cards_size() / mm(1)
        with poly_line():
            draw_vertex(0, 0)
            draw_vertex(cards_size.x, 0)
            draw_vertex(cards_size.x, cards_size.y)
            draw_vertex(0, cards_size.y)

    radius = project.card_corner_radius() / mm(1)
    bleed = data.bleed_edge / mm(1)
    spacing = data.spacing / mm(1)
    card_size_with_bleed = project.card_size_with_bleed() / mm(1)
    card_size_without_bleed = project.card_size() / mm(1)
    columns, rows = data.card_layout

    origin = spacing
    step = card_size_with_bleed + spacing
    for x in range(columns):
        for y in range(rows):
            top_left = origin + Vec2(x, y) * step + bleed
            bottom_right = top_left + card_size_without_bleed
            left, top = top_left.x, top_left.y
            right, bottom = bottom_right.x, bottom_right.y

            with poly_line():
                draw_vertex(left, top + radius)
                draw_vertex(left, bottom - radius)
                draw_quarter_circle(left + radius, bottom - radius, radius, 270)
                draw_vertex(left + radius, bottom)
                draw_vertex(right - radius, bottom)
                draw_quarter_circle(right - radius, bottom - radius, radius, 0)
                draw_vertex(right, bottom - radius)
                draw_vertex(right, top + radius)
                draw_quarter_circle(right - radius, top + radius, radius, 90)
                draw_vertex(right - radius, top)
                draw_vertex(left + radius, top)
                draw_quarter_circle(left + radius, top + radius, radius, 180)

    parts.append(_DXF_FOOTER)
    return "".join(parts)


def generate_cards_dxf(project: Project) -> Path:
    """Write the project's cutting outline next to its output file as ``.dxf``."""
    dxf_path = Path(project.data.file_name).with_suffix(".dxf")
    log_info("Generating card path...")
    dxf_path.write_text(cards_dxf(project), encoding="utf-8")
    return dxf_path
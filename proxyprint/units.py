"""Physical lengths, pixel densities and a small two-component vector.

Lengths are plain floats in metres, pixel counts are plain floats and pixel
densities are pixels per metre.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator, Union

_Number = Union[int, float]

_METRES_PER_INCH = 0.0254
_INCHES_PER_POINT = 0.0138889


@dataclass(frozen=True)
class Vec2:
    """A two-component value such as a size, a position or a grid layout."""

    x: float
    y: float

    def __iter__(self) -> Iterator[float]:
        yield self.x
        yield self.y

    @staticmethod
    def _parts(other: Union["Vec2", _Number]) -> tuple[float, float]:
        if isinstance(other, Vec2):
            return other.x, other.y
        if isinstance(other, (int, float)):
            return other, other
        raise TypeError(f"unsupported operand: {other!r}")

    def __add__(self, other: Union["Vec2", _Number]) -> "Vec2":
        ox, oy = self._parts(other)
        return Vec2(self.x + ox, self.y + oy)

    __radd__ = __add__

    def __sub__(self, other: Union["Vec2", _Number]) -> "Vec2":
        ox, oy = self._parts(other)
        return Vec2(self.x - ox, self.y - oy)

    def __rsub__(self, other: _Number) -> "Vec2":
        ox, oy = self._parts(other)
        return Vec2(ox - self.x, oy - self.y)

    def __mul__(self, other: Union["Vec2", _Number]) -> "Vec2":
        ox, oy = self._parts(other)
        return Vec2(self.x * ox, self.y * oy)

    __rmul__ = __mul__

    def __truediv__(self, other: Union["Vec2", _Number]) -> "Vec2":
        ox, oy = self._parts(other)
        return Vec2(self.x / ox, self.y / oy)

    def __neg__(self) -> "Vec2":
        return Vec2(-self.x, -self.y)

    def swapped(self) -> "Vec2":
        """Return the vector with its components exchanged."""
        return Vec2(self.y, self.x)


def mm(value: _Number) -> float:
    """Length of ``value`` millimetres, in metres."""
    return value * 0.001


def cm(value: _Number) -> float:
    """Length of ``value`` centimetres, in metres."""
    return value * 0.01


def inches(value: _Number) -> float:
    """Length of ``value`` inches, in metres."""
    return value * _METRES_PER_INCH


def points(value: _Number) -> float:
    """Length of ``value`` typographic points, in metres."""
    return inches(_INCHES_PER_POINT) * value


def dpi(value: _Number) -> float:
    """Pixel density of ``value`` dots per inch, in pixels per metre."""
    return value / inches(1)


def density_to_dpi(density: float) -> float:
    """Convert a density in pixels per metre to dots per inch."""
    return density * inches(1)
"""Committed user strokes and their rasterization."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator

from .raster import Color, Point, Raster


def _line(start: Point, end: Point) -> Iterator[Point]:
    # Bresenham, all octants.
    x0, y0 = start
    x1, y1 = end
    dx = abs(x1 - x0)
    dy = -abs(y1 - y0)
    sx = 1 if x0 < x1 else -1
    sy = 1 if y0 < y1 else -1
    err = dx + dy
    while True:
        yield (x0, y0)
        if x0 == x1 and y0 == y1:
            return
        doubled = 2 * err
        if doubled >= dy:
            err += dy
            x0 += sx
        if doubled <= dx:
            err += dx
            y0 += sy


@dataclass(frozen=True, slots=True)
class Stroke:
    """Polyline drawn (or erased) in a single pointer gesture."""

    points: tuple[Point, ...]
    color: Color = "black"
    erase: bool = False

    def __post_init__(self) -> None:
        if not self.points:
            raise ValueError("Stroke requires at least one point")
        object.__setattr__(self, "points", tuple((int(x), int(y)) for x, y in self.points))

    def rasterize(self) -> Raster:
        value = None if self.erase else self.color
        pixels = {self.points[0]: value}
        for start, end in zip(self.points, self.points[1:]):
            for point in _line(start, end):
                pixels[point] = value
        return Raster(pixels=pixels)


__all__ = ["Stroke"]

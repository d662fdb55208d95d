"""Sparse pixel layers used as drawing history entries."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Mapping, Optional, Tuple

Point = Tuple[int, int]  # (x, y)
Color = str


@dataclass(slots=True)
class Raster:
    """Pixels painted by one or more strokes.

    A ``None`` color marks a pixel cleared by the eraser. Erased pixels are
    kept so that painting one raster over another stays associative.
    """

    pixels: Dict[Point, Optional[Color]] = field(default_factory=dict)

    def copy(self) -> "Raster":
        return Raster(pixels=dict(self.pixels))

    def visible(self) -> Mapping[Point, Color]:
        return {point: color for point, color in self.pixels.items() if color is not None}

    def color_at(self, point: Point) -> Optional[Color]:
        return self.pixels.get(point)

    def __len__(self) -> int:
        return len(self.pixels)


def paint_over(dest: Raster, src: Raster) -> Raster:
    """Paint ``src`` on top of ``dest`` in place and return ``dest``."""

    dest.pixels.update(src.pixels)
    return dest


__all__ = ["Color", "Point", "Raster", "paint_over"]

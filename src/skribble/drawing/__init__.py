"""Strokes, raster layers, and the drawing session built on history buffers."""

from .raster import Color, Point, Raster, paint_over
from .session import DrawingSession, SessionHooks, StepControls
from .stroke import Stroke

__all__ = [
    "Color",
    "Point",
    "Raster",
    "paint_over",
    "Stroke",
    "DrawingSession",
    "SessionHooks",
    "StepControls",
]

"""Drawing session wiring strokes, history, and host callbacks together."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Optional

from skribble.history import HistoryBuffer, HistoryConfig
from skribble.runtime import telemetry

from .raster import Raster, paint_over
from .stroke import Stroke


def _noop(*_args, **_kwargs) -> None:  # pragma: no cover - default hook
    return None


@dataclass(frozen=True, slots=True)
class StepControls:
    """Enabled state of the host's step back / step forward controls."""

    undo_enabled: bool = False
    redo_enabled: bool = False


@dataclass(slots=True)
class SessionHooks:
    """Callbacks a host UI provides to mirror session state."""

    update_canvas: Callable[[Raster], None] = _noop
    update_controls: Callable[[StepControls], None] = _noop
    log: Callable[[str], None] = _noop


class DrawingSession:
    """One editable drawing: one history layer per committed stroke."""

    def __init__(
        self,
        hooks: Optional[SessionHooks] = None,
        *,
        config: Optional[HistoryConfig] = None,
        name: str = "untitled",
    ) -> None:
        self.name = name
        self.hooks = hooks or SessionHooks()
        self.layers: HistoryBuffer[Raster] = HistoryBuffer(
            paint_over,
            config=config or HistoryConfig.from_env(),
            copier=Raster.copy,
            logger_name="skribble.history",
        )
        self._controls = StepControls()

    @property
    def controls(self) -> StepControls:
        return self._controls

    def commit(self, stroke: Stroke) -> Raster:
        with telemetry.span(
            "drawing::commit",
            logger_name="skribble.drawing",
            component="drawing",
            context={"session": self.name, "points": len(stroke.points)},
        ):
            layer = self.layers.append(stroke.rasterize())
        self._set_controls(StepControls(undo_enabled=True, redo_enabled=False))
        self.hooks.log(f"commit layer={len(self.layers)} pixels={len(layer)}")
        self._refresh_canvas()
        return layer

    def render(self) -> Raster:
        """Compose the current drawing into a fresh raster."""

        with telemetry.span(
            "drawing::render",
            logger_name="skribble.drawing",
            context={"session": self.name},
        ) as details:
            canvas = self.layers.reduce_to(Raster())
            details["pixels"] = len(canvas)
        return canvas

    def undo(self) -> bool:
        moved = self.layers.undo()
        # Controls follow the returned flag only. Landing on an empty drawing
        # keeps undo enabled; the next click returns False and disables it.
        self._set_controls(
            StepControls(
                undo_enabled=moved,
                redo_enabled=moved or self._controls.redo_enabled,
            )
        )
        self._record_step("undo", moved=moved)
        if moved:
            self._refresh_canvas()
        return moved

    def redo(self) -> bool:
        before = self.layers.cursor
        more = self.layers.redo()
        moved = self.layers.cursor != before
        self._set_controls(
            StepControls(
                undo_enabled=moved or self._controls.undo_enabled,
                redo_enabled=more,
            )
        )
        self._record_step("redo", more=more)
        if moved:
            self._refresh_canvas()
        return more

    def _record_step(self, command: str, **flags: bool) -> None:
        fields = {**flags, "cursor": self.layers.cursor}
        telemetry.record_event(
            f"drawing.{command}",
            level="debug",
            data={"session": self.name, **fields},
            logger_name="skribble.drawing",
        )
        self.hooks.log(" ".join([command, *(f"{key}={value}" for key, value in fields.items())]))

    def _set_controls(self, controls: StepControls) -> None:
        self._controls = controls
        self.hooks.update_controls(controls)

    def _refresh_canvas(self) -> None:
        self.hooks.update_canvas(self.render())


__all__ = ["DrawingSession", "SessionHooks", "StepControls"]

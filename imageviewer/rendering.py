"""Full-scene redraw and the dirty-gated frame loop.

:class:`SceneRenderer` knows how to paint one frame. :class:`RenderLoop`
decides when: the host calls :meth:`RenderLoop.tick` once per display refresh
and the loop only repaints when the scene is dirty.
"""
from __future__ import annotations

import logging
import math
from collections.abc import Mapping
from enum import Enum
from numbers import Real
from typing import TYPE_CHECKING, Any, Iterable, Optional

from .errors import ViewerDisposedError
from .geometry import XY
from .overlay import ButtonOverlay
from .scene import Scene
from .shapes import Polygon

if TYPE_CHECKING:
    from .input import InputState
    from .surface import CanvasSurface

LOGGER = logging.getLogger(__name__)

ANSWER_MARKER_SIZE = 10.0


class SceneRenderer:
    """Paint image, overlays and controls in a fixed order."""

    def __init__(self, scene: Scene, overlay: ButtonOverlay, surface: "CanvasSurface",
                 state: Optional["InputState"] = None) -> None:
        self.scene = scene
        self.overlay = overlay
        self.surface = surface
        self.state = state
        self._warned_answer = False

    def render(self) -> None:
        scene = self.scene
        mode = scene.mode
        ctx = self.surface.context()
        width, height = self.surface.width, self.surface.height

        ctx.clear_rect(0, 0, width, height)
        self.draw_image(ctx)

        if mode.solution_visible and scene.solution is not None:
            self.draw_polygon(ctx, scene.solution, scene.style.solution_color)

        if mode.annotations_visible:
            for annotation in scene.annotations:
                self.draw_polygon(ctx, annotation.polygon, annotation.color)

        if mode.editing:
            self.draw_edit_line(ctx)

        if mode.answer_visible and scene.answer is not None:
            self.draw_answer(ctx, scene.answer)

        self.overlay.draw(ctx, width, height, self.surface.measure_text)

    # ------------------------------------------------------------------
    # Layers
    # ------------------------------------------------------------------
    def draw_image(self, ctx: Any) -> None:
        transform = self.scene.transform
        ctx.save()
        ctx.translate(*transform.image_translation())
        ctx.scale(transform.scale, transform.scale)
        if self.scene.image.source is not None:
            ctx.draw_image(self.scene.image.source, 0, 0)
        ctx.restore()

    def draw_polygon(self, ctx: Any, polygon: Polygon, color: str) -> None:
        scene = self.scene
        style = scene.style
        points = [scene.transform.to_canvas(x, y) for x, y in polygon.points()]
        if not points:
            return

        ctx.save()
        ctx.stroke_style = color
        ctx.fill_style = color
        ctx.line_width = style.line_width
        self._trace(ctx, points, closed=polygon.is_closed())
        if polygon.is_closed():
            ctx.global_alpha = style.fill_alpha
            ctx.fill()
            ctx.global_alpha = 1.0
        ctx.stroke()

        if polygon is scene.active_polygon and scene.mode.editing:
            half = polygon.handle_width / 2.0
            ctx.line_width = 1
            for x, y in points:
                ctx.fill_rect(x - half, y - half, polygon.handle_width, polygon.handle_width)
                ctx.stroke_rect(x - half, y - half, polygon.handle_width, polygon.handle_width)
        ctx.restore()

    def draw_edit_line(self, ctx: Any) -> None:
        """Line from the last vertex of the open active polygon to the pointer."""
        polygon = self.scene.active_polygon
        pointer = self.state.last_pointer if self.state is not None else None
        if polygon is None or pointer is None or polygon.is_closed():
            return
        last = polygon.last_vertex()
        if last is None:
            return
        x, y = self.scene.transform.to_canvas(last.position.x, last.position.y)
        ctx.save()
        ctx.stroke_style = self.scene.style.edit_line_color
        ctx.line_width = self.scene.style.line_width
        ctx.begin_path()
        ctx.move_to(x, y)
        ctx.line_to(*pointer)
        ctx.stroke()
        ctx.restore()

    def draw_answer(self, ctx: Any, answer: Any) -> None:
        style = self.scene.style
        to_canvas = self.scene.transform.to_canvas
        if _is_xy(answer):
            x, y = to_canvas(float(answer["x"]), float(answer["y"]))
            r = ANSWER_MARKER_SIZE
            ctx.save()
            ctx.stroke_style = style.answer_color
            ctx.line_width = style.line_width
            ctx.begin_path()
            ctx.move_to(x - r, y - r)
            ctx.line_to(x + r, y + r)
            ctx.move_to(x + r, y - r)
            ctx.line_to(x - r, y + r)
            ctx.stroke()
            ctx.restore()
        elif isinstance(answer, Mapping) and isinstance(answer.get("points"), (list, tuple)) \
                and all(_is_xy(p) for p in answer["points"]):
            points = [to_canvas(float(p["x"]), float(p["y"])) for p in answer["points"]]
            if len(points) < 2:
                return
            ctx.save()
            ctx.stroke_style = style.answer_color
            ctx.line_width = style.line_width
            self._trace(ctx, points, closed=False)
            ctx.stroke()
            ctx.restore()
        elif not self._warned_answer:
            LOGGER.warning("Answer of shape %r cannot be drawn", type(answer).__name__)
            self._warned_answer = True

    @staticmethod
    def _trace(ctx: Any, points: Iterable[XY], *, closed: bool) -> None:
        ctx.begin_path()
        for i, (x, y) in enumerate(points):
            if i == 0:
                ctx.move_to(x, y)
            else:
                ctx.line_to(x, y)
        if closed:
            ctx.close_path()


def _is_xy(value: Any) -> bool:
    if not isinstance(value, Mapping):
        return False
    x, y = value.get("x"), value.get("y")
    return (
        isinstance(x, Real) and isinstance(y, Real)
        and not isinstance(x, bool) and not isinstance(y, bool)
        and math.isfinite(x) and math.isfinite(y)
    )


class LoopState(str, Enum):
    IDLE = "idle"
    RUNNING = "running"
    STOPPED = "stopped"  # terminal


class RenderLoop:
    """Repaint on host frame ticks while the scene is dirty."""

    def __init__(self, scene: Scene, renderer: SceneRenderer, surface: "CanvasSurface") -> None:
        self.scene = scene
        self.renderer = renderer
        self.surface = surface
        self.state = LoopState.IDLE
        self.frames_drawn = 0

    @property
    def running(self) -> bool:
        return self.state is LoopState.RUNNING

    def start(self) -> None:
        if self.state is LoopState.STOPPED:
            raise ViewerDisposedError("Render loop was stopped and cannot be restarted")
        if self.state is LoopState.RUNNING:
            return
        self.state = LoopState.RUNNING
        LOGGER.debug("Render loop started")
        self.surface.request_frame(self.tick)

    def tick(self) -> None:
        if self.state is not LoopState.RUNNING:
            return
        if self.scene.take_dirty():
            self.renderer.render()
            self.frames_drawn += 1
        if self.state is LoopState.RUNNING:
            self.surface.request_frame(self.tick)

    def stop(self) -> None:
        if self.state is not LoopState.STOPPED:
            LOGGER.debug("Render loop stopped")
        self.state = LoopState.STOPPED


__all__ = ["SceneRenderer", "LoopState", "RenderLoop"]

"""The :class:`ImageViewer` facade.

Wires a :class:`~imageviewer.scene.Scene` to a host
:class:`~imageviewer.surface.CanvasSurface`: the overlay controls, the input
dispatcher and the render loop. Collaborators are notified through the
``on_solution_change``, ``on_annotation_change`` and ``on_answer_change``
attributes; an edit that must notify an unset callback raises
:class:`~imageviewer.errors.CallbackNotSetError`.
"""
from __future__ import annotations

import logging
from typing import Any, Callable, Dict, List, Optional

from .config import ViewerOptions, ViewerStyle
from .errors import CallbackNotSetError, ViewerDisposedError
from .input import InputDispatcher, InputState
from .overlay import ButtonOverlay
from .rendering import RenderLoop, SceneRenderer
from .scene import Scene
from .shapes import Annotation, Polygon, export_annotations, export_solution
from .surface import CanvasSurface, ImageHandle

LOGGER = logging.getLogger(__name__)

SolutionCallback = Callable[[List[Dict[str, float]]], Any]
AnnotationCallback = Callable[[List[Dict[str, Any]]], Any]
AnswerCallback = Callable[[Any], Any]


class ImageViewer:
    """Zoomable, pannable image with solution and annotation polygons."""

    def __init__(
        self,
        surface: Optional[CanvasSurface],
        image: ImageHandle,
        options: Any = None,
        *,
        on_solution_change: Optional[SolutionCallback] = None,
        on_annotation_change: Optional[AnnotationCallback] = None,
        on_answer_change: Optional[AnswerCallback] = None,
        style: Optional[ViewerStyle] = None,
        autostart: bool = True,
    ) -> None:
        self.surface = surface
        self.options = ViewerOptions.from_value(options)
        self.on_solution_change = on_solution_change
        self.on_annotation_change = on_annotation_change
        self.on_answer_change = on_answer_change
        self._disposed = False

        width = surface.width if surface is not None else 0
        height = surface.height if surface is not None else 0
        if surface is None:
            LOGGER.warning("No canvas surface given; the viewer will not draw or receive input")

        self.scene = Scene(
            image,
            width,
            height,
            mode=self.options.mode,
            style=style,
            answer=self.options.answer,
        )
        self.scene.on_polygon_change = self._notify_polygon
        self.scene.on_answer_change = self._notify_answer

        if self.options.solution is not None:
            self.import_solution(self.options.solution)
        if self.options.annotations is not None:
            self.import_annotations(self.options.annotations)

        self.overlay = ButtonOverlay(self.scene, zoom_in=self.zoom_in, zoom_out=self.zoom_out)
        self.input_state = InputState()
        self.dispatcher = InputDispatcher(
            self.scene,
            self.overlay,
            surface,
            zoom_in=self.zoom_in,
            zoom_out=self.zoom_out,
            state=self.input_state,
        )
        self.renderer: Optional[SceneRenderer] = None
        self.loop: Optional[RenderLoop] = None
        if surface is not None:
            self.renderer = SceneRenderer(self.scene, self.overlay, surface, self.input_state)
            self.loop = RenderLoop(self.scene, self.renderer, surface)

        LOGGER.debug(
            "Viewer for %dx%d image on %dx%d canvas, mode=%r, scale=%.3f",
            image.width, image.height, width, height, self.scene.mode.value, self.scene.transform.scale,
        )
        if autostart:
            self.start()

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------
    def start(self) -> None:
        """Attach listeners and start the render loop."""
        if self._disposed:
            raise ViewerDisposedError("Viewer was disposed and cannot be restarted")
        self.dispatcher.attach()
        if self.loop is not None:
            self.loop.start()

    def dispose(self) -> None:
        """Detach every listener, stop the render loop and close the surface.

        Safe to repeat.
        """
        self.dispatcher.detach()
        if self.loop is not None:
            self.loop.stop()
        if self._disposed:
            return
        self._disposed = True
        if self.surface is not None:
            self.surface.close()
        LOGGER.debug("Viewer disposed")

    @property
    def disposed(self) -> bool:
        return self._disposed

    # ------------------------------------------------------------------
    # View
    # ------------------------------------------------------------------
    @property
    def scale(self) -> float:
        return self.scene.transform.scale

    @property
    def dirty(self) -> bool:
        return self.scene.dirty

    def zoom_in(self) -> float:
        return self.scene.zoom(1 + self.scene.style.zoom_step)

    def zoom_out(self) -> float:
        return self.scene.zoom(1 - self.scene.style.zoom_step)

    def refresh(self) -> None:
        """Redraw on the next frame."""
        self.scene.mark_dirty()

    # ------------------------------------------------------------------
    # Model access
    # ------------------------------------------------------------------
    @property
    def solution(self) -> Optional[Polygon]:
        return self.scene.solution

    @property
    def annotations(self) -> List[Annotation]:
        return self.scene.annotations

    @property
    def answer(self) -> Any:
        return self.scene.answer

    # ------------------------------------------------------------------
    # Import / export
    # ------------------------------------------------------------------
    def import_solution(self, records: Any) -> Polygon:
        polygon = Polygon.from_records(records, handle_width=self.scene.style.handle_width)
        if self.scene.active_polygon is self.scene.solution:
            self.scene.active_polygon = None
        self.scene.solution = polygon
        self.scene.mark_dirty()
        return polygon

    def export_solution(self) -> List[Dict[str, float]]:
        return export_solution(self.scene.solution)

    def import_annotations(self, records: Any) -> List[Annotation]:
        if not isinstance(records, (list, tuple)):
            raise ValueError(f"Annotation records must be a list, got {type(records).__name__}")
        style = self.scene.style
        annotations = [
            Annotation.from_record(record, default_color=style.annotation_colors[0],
                                   handle_width=style.handle_width)
            for record in records
        ]
        if self.scene.active_annotation() is not None:
            self.scene.active_polygon = None
        self.scene.annotations = annotations
        self.scene.mark_dirty()
        return annotations

    def export_annotations(self) -> List[Dict[str, Any]]:
        self.scene.cleanup_annotations()
        return export_annotations(self.scene.annotations)

    # ------------------------------------------------------------------
    # Notifications
    # ------------------------------------------------------------------
    def _notify_polygon(self, polygon: Polygon) -> None:
        if polygon is self.scene.solution:
            if self.on_solution_change is None:
                raise CallbackNotSetError("on_solution_change")
            self.on_solution_change(self.export_solution())
        else:
            if self.on_annotation_change is None:
                raise CallbackNotSetError("on_annotation_change")
            self.on_annotation_change(self.export_annotations())

    def _notify_answer(self, answer: Any) -> None:
        if self.on_answer_change is None:
            raise CallbackNotSetError("on_answer_change")
        self.on_answer_change(answer)


__all__ = ["ImageViewer"]

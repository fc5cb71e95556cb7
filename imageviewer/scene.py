"""Engine state shared by the renderer, the overlay and the input dispatcher.

Sub-components never capture each other's locals; they hold the :class:`Scene`
and change it through the methods below, which keep the dirty flag honest.
"""
from __future__ import annotations

import logging
from typing import Any, Callable, List, Optional

from .config import ViewerMode, ViewerStyle
from .geometry import ViewTransform
from .shapes import Annotation, Polygon
from .surface import ImageHandle

LOGGER = logging.getLogger(__name__)

PolygonListener = Callable[[Polygon], None]


class Scene:
    """Image, view transform and overlays of one viewer instance."""

    def __init__(
        self,
        image: ImageHandle,
        canvas_width: float,
        canvas_height: float,
        *,
        mode: ViewerMode = ViewerMode.NONE,
        style: Optional[ViewerStyle] = None,
        answer: Any = None,
    ) -> None:
        self.image = image
        self.style = style or ViewerStyle()
        self.mode = mode
        self.answer = answer
        self.transform = ViewTransform(canvas_width, canvas_height)
        self.transform.fit(image.width, image.height, width_bonus=self.style.width_fit_bonus)
        self.solution: Optional[Polygon] = None
        self.annotations: List[Annotation] = []
        self.active_polygon: Optional[Polygon] = None
        self.current_color = self.style.annotation_colors[0]
        self.dirty = True
        self.on_polygon_change: Optional[PolygonListener] = None
        self.on_answer_change: Optional[Callable[[Any], None]] = None

    # ------------------------------------------------------------------
    # Dirty flag
    # ------------------------------------------------------------------
    def mark_dirty(self) -> None:
        self.dirty = True

    def take_dirty(self) -> bool:
        """Return the dirty flag and clear it."""
        dirty, self.dirty = self.dirty, False
        return dirty

    # ------------------------------------------------------------------
    # View
    # ------------------------------------------------------------------
    def zoom(self, factor: float) -> float:
        scale = self.transform.zoom(factor, min_scale=self.style.min_scale, max_scale=self.style.max_scale)
        self.mark_dirty()
        return scale

    def pan(self, dx: float, dy: float) -> None:
        self.transform.pan(dx, dy)
        self.mark_dirty()

    # ------------------------------------------------------------------
    # Polygons
    # ------------------------------------------------------------------
    def annotation_for(self, polygon: Optional[Polygon]) -> Optional[Annotation]:
        for annotation in self.annotations:
            if annotation.polygon is polygon:
                return annotation
        return None

    def is_attached(self, polygon: Polygon) -> bool:
        return polygon is self.solution or self.annotation_for(polygon) is not None

    def can_edit(self, polygon: Polygon) -> bool:
        if polygon is self.solution:
            return self.mode.solution_editable
        return self.mode.annotations_editable and self.annotation_for(polygon) is not None

    def set_active_polygon(self, polygon: Optional[Polygon]) -> None:
        if polygon is not None and not self.is_attached(polygon):
            raise ValueError("Only the solution or an annotation polygon can be made active")
        if polygon is not self.active_polygon:
            LOGGER.debug("Active polygon: %r", polygon)
        self.active_polygon = polygon
        annotation = self.annotation_for(polygon)
        if annotation is not None:
            self.current_color = annotation.color
        self.mark_dirty()

    def active_annotation(self) -> Optional[Annotation]:
        return self.annotation_for(self.active_polygon)

    def ensure_solution(self) -> Polygon:
        if self.solution is None:
            self.solution = Polygon(handle_width=self.style.handle_width)
        return self.solution

    def start_annotation(self, color: Optional[str] = None) -> Annotation:
        annotation = Annotation(
            polygon=Polygon(handle_width=self.style.handle_width),
            color=color or self.current_color,
        )
        self.annotations.append(annotation)
        self.set_active_polygon(annotation.polygon)
        return annotation

    def cleanup_annotations(self) -> None:
        """Drop empty annotations, except the one being edited."""
        kept = [a for a in self.annotations if len(a.polygon) > 0 or a.polygon is self.active_polygon]
        if len(kept) != len(self.annotations):
            LOGGER.debug("Removed %d empty annotations", len(self.annotations) - len(kept))
            self.annotations = kept

    def polygon_changed(self, polygon: Polygon) -> None:
        self.mark_dirty()
        if self.on_polygon_change is not None:
            self.on_polygon_change(polygon)

    def set_answer(self, answer: Any) -> None:
        self.answer = answer
        self.mark_dirty()
        if self.on_answer_change is not None:
            self.on_answer_change(answer)

    def hit_polygons(self) -> List[Polygon]:
        """Polygons in hit-test order: annotations first, then the solution."""
        polygons: List[Polygon] = []
        if self.mode.annotations_visible:
            polygons.extend(a.polygon for a in self.annotations)
        if self.solution is not None and self.mode.solution_visible:
            polygons.append(self.solution)
        return polygons


__all__ = ["Scene"]

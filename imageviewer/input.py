"""Pointer and wheel handling.

The dispatcher resolves the topmost interactive element under the pointer by
scanning a priority-ordered list:

1. zoom buttons,
2. color buttons,
3. vertices of the active polygon (only while a polygon edit mode is on),
4. annotation polygons,
5. the solution polygon.

A press that nothing handles starts a drag. While the primary button is down
pointer motion moves either the pan center (``move_target is None``) or the
vertex that took the press.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Callable, List, Optional

from .elements import InteractiveElement
from .geometry import XY
from .overlay import ButtonOverlay
from .scene import Scene
from .shapes import Vertex
from .surface import (
    CLICK,
    POINTER_DOWN,
    POINTER_MOVE,
    POINTER_UP,
    PRIMARY_BUTTON,
    WHEEL,
    CanvasSurface,
    ListenerHandle,
    PointerEvent,
    WheelEvent,
)

LOGGER = logging.getLogger(__name__)


@dataclass
class InputState:
    left_button_down: bool = False
    # None means the drag pans the view
    move_target: Optional[Vertex] = None
    focus_element: Optional[InteractiveElement] = None
    last_pointer: Optional[XY] = None
    dragged: bool = False


class InputDispatcher:
    def __init__(
        self,
        scene: Scene,
        overlay: ButtonOverlay,
        surface: Optional[CanvasSurface],
        *,
        zoom_in: Callable[[], Any],
        zoom_out: Callable[[], Any],
        state: Optional[InputState] = None,
    ) -> None:
        self.scene = scene
        self.overlay = overlay
        self.surface = surface
        self.zoom_in = zoom_in
        self.zoom_out = zoom_out
        self.state = state or InputState()
        self._handles: List[ListenerHandle] = []

    # ------------------------------------------------------------------
    # Listener lifecycle
    # ------------------------------------------------------------------
    def attach(self) -> None:
        if self.surface is None or self._handles:
            return
        listen = self.surface.listen
        self._handles = [
            listen(POINTER_DOWN, self.on_pointer_down, global_scope=True),
            listen(POINTER_UP, self.on_pointer_up, global_scope=True),
            listen(POINTER_MOVE, self.on_pointer_move),
            listen(CLICK, self.on_click),
            listen(WHEEL, self.on_wheel),
        ]
        LOGGER.debug("Input attached (%d listeners)", len(self._handles))

    def detach(self) -> None:
        if self.surface is not None:
            for handle in self._handles:
                self.surface.unlisten(handle)
            if self._handles:
                LOGGER.debug("Input detached")
        self._handles = []

    @property
    def attached(self) -> bool:
        return bool(self._handles)

    # ------------------------------------------------------------------
    # Hit testing
    # ------------------------------------------------------------------
    def elements(self) -> List[InteractiveElement]:
        scene = self.scene
        elements: List[InteractiveElement] = list(self.overlay.elements())
        if scene.mode.editing and scene.active_polygon is not None:
            elements.extend(scene.active_polygon.vertices())
        elements.extend(scene.hit_polygons())
        return elements

    def element_at(self, x: float, y: float) -> Optional[InteractiveElement]:
        """Topmost element under a canvas point, or ``None``."""
        surface = self.surface
        if surface is None or surface.width <= 0 or surface.height <= 0:
            return None
        if not (0 <= x <= surface.width and 0 <= y <= surface.height):
            return None
        for element in self.elements():
            if element.is_within_bounds(x, y, self.scene):
                return element
        return None

    # ------------------------------------------------------------------
    # Event handlers
    # ------------------------------------------------------------------
    def on_pointer_down(self, event: PointerEvent) -> None:
        if event.button != PRIMARY_BUTTON:
            return
        self.state.dragged = False
        element = self.element_at(event.x, event.y)
        if element is None or not element.on_mouse_down(event, self.scene, self.state):
            self.state.left_button_down = True

    def on_pointer_up(self, event: PointerEvent) -> None:
        if event.button != PRIMARY_BUTTON:
            return
        self.state.move_target = None
        self.state.left_button_down = False

    def on_click(self, event: PointerEvent) -> None:
        if event.button != PRIMARY_BUTTON:
            return
        element = self.element_at(event.x, event.y)
        consumed = element is not None and not element.on_click(event, self.scene, self.state)
        if not consumed and not self.state.dragged:
            self.place(event.x, event.y)
        self.state.dragged = False

    def on_wheel(self, event: WheelEvent) -> None:
        event.prevent_default()
        if event.detail < 0 or event.wheel_delta > 0:
            self.zoom_out()
        else:
            self.zoom_in()

    def on_pointer_move(self, event: PointerEvent) -> None:
        scene = self.scene
        state = self.state
        last_x, last_y = state.last_pointer or (0.0, 0.0)
        dx, dy = event.x - last_x, event.y - last_y

        if state.left_button_down:
            if dx or dy:
                state.dragged = True
            target = state.move_target
            if target is None:
                scene.pan(dx, dy)
            elif dx or dy:
                target.position.move_by(*scene.transform.descale(dx, dy))
                scene.polygon_changed(target.polygon)
        else:
            element = self.element_at(event.x, event.y)
            state.focus_element = element
            self.overlay.set_tooltip(element.tooltip if element is not None else None)

        state.last_pointer = (event.x, event.y)
        if scene.mode.editing:
            scene.mark_dirty()

    # ------------------------------------------------------------------
    # Click placement
    # ------------------------------------------------------------------
    def place(self, x: float, y: float) -> None:
        """Act on a click that no element consumed."""
        scene = self.scene
        if not scene.transform.contains_canvas_point(x, y):
            return
        mode = scene.mode
        ix, iy = scene.transform.to_image(x, y)

        if mode.solution_editable:
            polygon = scene.ensure_solution()
            if scene.active_polygon is not polygon:
                scene.set_active_polygon(polygon)
            if polygon.is_closed():
                return
            polygon.append(ix, iy)
            scene.polygon_changed(polygon)
        elif mode.annotations_editable:
            annotation = scene.active_annotation()
            if annotation is None or annotation.polygon.is_closed():
                annotation = scene.start_annotation()
            annotation.polygon.append(ix, iy)
            scene.polygon_changed(annotation.polygon)
        elif mode.answer_editable:
            scene.set_answer({"x": ix, "y": iy})


__all__ = ["InputState", "InputDispatcher"]

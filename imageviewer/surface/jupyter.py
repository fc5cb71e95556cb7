"""Jupyter host: an :class:`ipycanvas.Canvas` driving an :class:`ImageViewer`.

ipycanvas reports pointer positions already relative to the canvas. It has no
document-level listeners, so "global" pointer listeners are served by the
canvas itself and leaving the canvas releases a drag. Clicks are synthesized
on pointer-up, and wheel events are wired when the installed ipycanvas offers
them.

Frames run on a :class:`threading.Timer` chain. Frames and widget callbacks
share one lock so that scene mutation never interleaves.
"""
from __future__ import annotations

import logging
import threading
import time
from typing import Any, Callable, Dict, List, Optional, Tuple

import ipywidgets as W
import numpy as np
from IPython.display import display
from ipycanvas import Canvas, hold_canvas
from PIL import Image, ImageFont

from ..config import ViewerStyle
from ..viewer import ImageViewer
from . import CLICK, POINTER_DOWN, POINTER_MOVE, POINTER_UP, WHEEL, CanvasSurface, ImageHandle, PointerEvent, WheelEvent

LOGGER = logging.getLogger(__name__)

DEFAULT_FRAME_INTERVAL = 1 / 60.0
WHEEL_EVENTS = ("on_wheel", "on_mouse_wheel")


def load_image(path: Any) -> ImageHandle:
    """Decode an image file into an offscreen canvas the viewer can draw."""
    with Image.open(path) as im:
        rgba = np.asarray(im.convert("RGBA"), dtype=np.uint8)
    height, width = rgba.shape[:2]
    offscreen = Canvas(width=width, height=height)
    offscreen.put_image_data(rgba, 0, 0)
    LOGGER.debug("Loaded %s (%dx%d)", path, width, height)
    return ImageHandle(width=width, height=height, source=offscreen)


class JupyterSurface(CanvasSurface):
    def __init__(self, canvas: Canvas, *, frame_interval: float = DEFAULT_FRAME_INTERVAL) -> None:
        super().__init__()
        self.canvas = canvas
        self.width = int(canvas.width)
        self.height = int(canvas.height)
        self.frame_interval = frame_interval
        self._lock = threading.RLock()
        self._timer: Optional[threading.Timer] = None
        self._last_frame = 0.0
        self._pressed = False
        self._fonts: Dict[int, Any] = {}
        self._wired: List[Tuple[str, Callable[..., None]]] = []
        self._wire()

    # ------------------------------------------------------------------
    # Drawing
    # ------------------------------------------------------------------
    def context(self) -> Canvas:
        return self.canvas

    def measure_text(self, text: str, font_size: float) -> float:
        size = max(1, int(round(font_size)))
        font = self._fonts.get(size)
        if font is None:
            font = self._fonts[size] = ImageFont.load_default(size=size)
        return float(font.getlength(text))

    # ------------------------------------------------------------------
    # Frames
    # ------------------------------------------------------------------
    def request_frame(self, callback: Callable[[], None]) -> None:
        elapsed = time.monotonic() - self._last_frame
        delay = max(0.0, self.frame_interval - elapsed)

        def _do():
            with self._lock:
                self._timer = None
                self._last_frame = time.monotonic()
                with hold_canvas(self.canvas):
                    callback()

        timer = threading.Timer(delay, _do)
        timer.daemon = True
        self._timer = timer
        timer.start()

    # ------------------------------------------------------------------
    # ipycanvas wiring
    # ------------------------------------------------------------------
    def _wire(self) -> None:
        handlers = [
            ("on_mouse_down", self._on_mouse_down),
            ("on_mouse_up", self._on_mouse_up),
            ("on_mouse_move", self._on_mouse_move),
            ("on_mouse_out", self._on_mouse_out),
        ]
        for name in WHEEL_EVENTS:
            if hasattr(self.canvas, name):
                handlers.append((name, self._on_wheel))
                break
        else:
            LOGGER.debug("ipycanvas without wheel events; zoom with the buttons")
        for name, handler in handlers:
            if hasattr(self.canvas, name):
                getattr(self.canvas, name)(handler)
                self._wired.append((name, handler))

    def close(self) -> None:
        """Remove canvas callbacks and drop any pending frame."""
        for name, handler in self._wired:
            getattr(self.canvas, name)(handler, remove=True)
        self._wired = []
        timer, self._timer = self._timer, None
        if timer is not None:
            timer.cancel()

    def listen(self, kind: str, callback: Callable[[Any], None], *, global_scope: bool = False):
        if global_scope:
            LOGGER.debug("No page-level %s events in Jupyter; listening on the canvas", kind)
        return super().listen(kind, callback, global_scope=global_scope)

    def _emit(self, kind: str, event: Any) -> None:
        with self._lock:
            self.dispatch(kind, event)

    def _on_mouse_down(self, x: float, y: float) -> None:
        self._pressed = True
        self._emit(POINTER_DOWN, PointerEvent(float(x), float(y)))

    def _on_mouse_up(self, x: float, y: float) -> None:
        pressed, self._pressed = self._pressed, False
        self._emit(POINTER_UP, PointerEvent(float(x), float(y)))
        if pressed:
            self._emit(CLICK, PointerEvent(float(x), float(y)))

    def _on_mouse_move(self, x: float, y: float) -> None:
        self._emit(POINTER_MOVE, PointerEvent(float(x), float(y)))

    def _on_mouse_out(self, x: float, y: float) -> None:
        if self._pressed:
            self._pressed = False
            self._emit(POINTER_UP, PointerEvent(float(x), float(y)))

    def _on_wheel(self, *args: Any, **kwargs: Any) -> None:
        x = float(args[0]) if len(args) >= 1 else 0.0
        y = float(args[1]) if len(args) >= 2 else 0.0
        dy = 0.0
        if len(args) >= 4:
            dy = float(args[3])
        elif "delta_y" in kwargs:
            dy = float(kwargs["delta_y"])
        # mousewheel convention: positive when scrolling up
        self._emit(WHEEL, WheelEvent(x=x, y=y, wheel_delta=-dy))


def show_image_viewer(
    path: Any,
    options: Any = None,
    *,
    width: int = 800,
    height: int = 600,
    on_solution_change: Optional[Callable[[Any], Any]] = None,
    on_annotation_change: Optional[Callable[[Any], Any]] = None,
    on_answer_change: Optional[Callable[[Any], Any]] = None,
    style: Optional[ViewerStyle] = None,
) -> ImageViewer:
    """Load ``path``, display it on a new canvas and return the viewer."""
    style = style or ViewerStyle()
    image = load_image(path)
    canvas = Canvas(
        width=width,
        height=height,
        layout=W.Layout(width=f"{width}px", height=f"{height}px", border="1px solid #eee"),
    )
    surface = JupyterSurface(canvas, frame_interval=style.frame_interval)
    viewer = ImageViewer(
        surface,
        image,
        options,
        on_solution_change=on_solution_change,
        on_annotation_change=on_annotation_change,
        on_answer_change=on_answer_change,
        style=style,
    )
    display(canvas)
    return viewer


__all__ = ["JupyterSurface", "load_image", "show_image_viewer"]

"""Top-level package for the image viewer.

The engine draws a zoomable, pannable image on a host canvas surface and lets
users draw and edit a solution polygon and colored annotation polygons on top
of it. The Jupyter host lives in :mod:`imageviewer.surface.jupyter`.
"""

from .config import ViewerMode, ViewerOptions, ViewerStyle
from .errors import CallbackNotSetError, ViewerDisposedError
from .geometry import Point, ViewTransform, XY
from .shapes import Annotation, Polygon, Vertex
from .surface import CanvasSurface, ImageHandle, PointerEvent, WheelEvent
from .viewer import ImageViewer

__all__ = [
    "ViewerMode",
    "ViewerOptions",
    "ViewerStyle",
    "CallbackNotSetError",
    "ViewerDisposedError",
    "Point",
    "ViewTransform",
    "XY",
    "Annotation",
    "Polygon",
    "Vertex",
    "CanvasSurface",
    "ImageHandle",
    "PointerEvent",
    "WheelEvent",
    "ImageViewer",
]

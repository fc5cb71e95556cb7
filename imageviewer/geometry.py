"""Coordinate transforms between image space and canvas space.

Image space is the pixel grid of the source image. Canvas space is the pixel
grid of the drawing surface. A :class:`ViewTransform` holds the zoom factor and
the pan center (the image-space point shown at the middle of the canvas) and
maps points in both directions.
"""
from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Optional, Sequence, Tuple

XY = Tuple[float, float]


@dataclass
class Point:
    """Mutable 2D point, shared by the pan center and polygon vertices."""

    x: float = 0.0
    y: float = 0.0

    def as_tuple(self) -> XY:
        return self.x, self.y

    def move_by(self, dx: float, dy: float) -> None:
        self.x += dx
        self.y += dy


@dataclass
class ViewTransform:
    """Scale and pan state for one canvas."""

    canvas_width: float
    canvas_height: float
    scale: float = 1.0
    center: Point = field(default_factory=Point)

    # ------------------------------------------------------------------
    # Point mapping
    # ------------------------------------------------------------------
    def _axis_origin(self, center: float, size: float) -> XY:
        """Return ``(visible image offset, canvas offset)`` for one axis.

        While the center sits at least half a scaled canvas away from the
        image edge, the visible part of the image starts at a positive offset.
        Otherwise the offset is clamped to 0 and the image is shifted on the
        canvas instead. Both directions go through this split.
        """
        half = size / self.scale / 2.0
        if center >= half:
            return center - half, 0.0
        return 0.0, size / 2.0 - center * self.scale

    def to_canvas(self, x: float, y: float) -> XY:
        visible_x, offset_x = self._axis_origin(self.center.x, self.canvas_width)
        visible_y, offset_y = self._axis_origin(self.center.y, self.canvas_height)
        return (
            (x - visible_x) * self.scale + offset_x,
            (y - visible_y) * self.scale + offset_y,
        )

    def to_image(self, x: float, y: float) -> XY:
        visible_x, offset_x = self._axis_origin(self.center.x, self.canvas_width)
        visible_y, offset_y = self._axis_origin(self.center.y, self.canvas_height)
        return (
            visible_x + x / self.scale - offset_x / self.scale,
            visible_y + y / self.scale - offset_y / self.scale,
        )

    def image_translation(self) -> XY:
        """Canvas translation that places the image origin for drawing."""
        return (
            self.canvas_width / 2.0 - self.center.x * self.scale,
            self.canvas_height / 2.0 - self.center.y * self.scale,
        )

    def descale(self, dx: float, dy: float) -> XY:
        return dx / self.scale, dy / self.scale

    # ------------------------------------------------------------------
    # Mutation
    # ------------------------------------------------------------------
    def fit(self, image_width: float, image_height: float, *, width_bonus: float = 0.3) -> None:
        """Fit the image into the canvas and center on it.

        The height-bound scale is used when the scaled width stays strictly
        inside the canvas. Otherwise the width-bound scale is used, plus
        ``width_bonus`` of overscan.
        """
        if image_width > 0 and image_height > 0 and self.canvas_width > 0 and self.canvas_height > 0:
            if self.canvas_height / image_height * image_width < self.canvas_width:
                self.scale = self.canvas_height / image_height
            else:
                self.scale = self.canvas_width / image_width + width_bonus
        self.center.x = image_width / 2.0
        self.center.y = image_height / 2.0

    def zoom(self, factor: float, *, min_scale: Optional[float] = None, max_scale: Optional[float] = None) -> float:
        """Multiply the scale by ``factor`` within the given bounds.

        A bound only stops a step that moves toward it. A scale already past
        a bound, such as a fit on a tiny image, never jumps back to it.
        """
        scale = self.scale * factor
        if min_scale is not None and scale < min_scale:
            scale = min(max(self.scale, scale), min_scale)
        if max_scale is not None and scale > max_scale:
            scale = max(min(self.scale, scale), max_scale)
        self.scale = scale
        return scale

    def pan(self, dx: float, dy: float) -> None:
        """Move the view with a canvas-space pointer delta.

        The center moves against the pointer so the image follows the drag.
        """
        ix, iy = self.descale(dx, dy)
        self.center.move_by(-ix, -iy)

    def contains_canvas_point(self, x: float, y: float) -> bool:
        return 0 <= x <= self.canvas_width and 0 <= y <= self.canvas_height


# ---------------------------------------------------------------------------
# Plane helpers
# ---------------------------------------------------------------------------


def distance_to_segment(p: XY, a: XY, b: XY) -> float:
    px, py = p
    ax, ay = a
    bx, by = b
    dx, dy = bx - ax, by - ay
    seg_len2 = dx * dx + dy * dy
    if seg_len2 <= 1e-12:
        return math.hypot(px - ax, py - ay)
    t = max(0.0, min(1.0, ((px - ax) * dx + (py - ay) * dy) / seg_len2))
    return math.hypot(px - (ax + t * dx), py - (ay + t * dy))


def point_in_polygon(p: XY, pts: Sequence[XY]) -> bool:
    """Even-odd ray casting test."""
    n = len(pts)
    if n < 3:
        return False
    x, y = p
    inside = False
    j = n - 1
    for i in range(n):
        xi, yi = pts[i]
        xj, yj = pts[j]
        if (yi > y) != (yj > y):
            x_cross = xi + (y - yi) * (xj - xi) / (yj - yi)
            if x < x_cross:
                inside = not inside
        j = i
    return inside


__all__ = [
    "XY",
    "Point",
    "ViewTransform",
    "distance_to_segment",
    "point_in_polygon",
]

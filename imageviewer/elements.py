"""Interactive elements: anything the pointer can hit on the canvas.

Buttons, polygon vertices and polygons share three capabilities. Each hook
receives the owning :class:`~imageviewer.scene.Scene` and the dispatcher's
:class:`~imageviewer.input.InputState` instead of capturing them.

* ``is_within_bounds`` answers whether a canvas point hits the element.
* ``on_click`` returns ``True`` to let the click bubble to the canvas and
  ``False`` to consume it.
* ``on_mouse_down`` returns ``True`` when it handled the press. ``False``
  lets the press start a drag.
"""
from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Callable, Optional, Union

from .geometry import XY

if TYPE_CHECKING:
    from .input import InputState
    from .scene import Scene
    from .surface import PointerEvent

LOGGER = logging.getLogger(__name__)


class InteractiveElement:
    tooltip: Optional[str] = None

    def is_within_bounds(self, x: float, y: float, scene: "Scene") -> bool:
        raise NotImplementedError

    def on_click(self, event: "PointerEvent", scene: "Scene", state: "InputState") -> bool:
        return True

    def on_mouse_down(self, event: "PointerEvent", scene: "Scene", state: "InputState") -> bool:
        return False


@dataclass(eq=False)
class Button(InteractiveElement):
    """Round control drawn on top of the scene.

    The draw position is only known after the first frame; until then the
    button cannot be hit.
    """

    icon: Optional[str] = None
    tooltip: Optional[str] = None
    action: Optional[Callable[[], Any]] = None
    color: str = "#000000"
    icon_color: str = "#ffffff"
    icon_font: str = "FontAwesome"
    alpha: float = 0.5
    enabled: Union[bool, Callable[[], bool]] = False
    enabled_alpha: float = 0.7
    line_width: float = 0.0
    stroke_style: str = "#000000"
    draw_position: Optional[XY] = None
    draw_radius: float = 0.0

    def is_enabled(self) -> bool:
        return bool(self.enabled()) if callable(self.enabled) else bool(self.enabled)

    def is_within_bounds(self, x: float, y: float, scene: Optional["Scene"] = None) -> bool:
        if self.draw_position is None:
            return False
        dx = abs(self.draw_position[0] - x)
        dy = abs(self.draw_position[1] - y)
        return dx * dx + dy * dy <= self.draw_radius * self.draw_radius

    def on_click(
        self,
        event: Optional["PointerEvent"] = None,
        scene: Optional["Scene"] = None,
        state: Optional["InputState"] = None,
    ) -> bool:
        if self.action is None:
            LOGGER.warning("Button %r has no click action", self.tooltip)
            return True
        self.action()
        return False

    def draw(self, ctx: Any, x: float, y: float, radius: float, measure: Callable[[str, float], float]) -> None:
        self.draw_position = (x, y)
        self.draw_radius = radius

        ctx.save()
        ctx.global_alpha = self.enabled_alpha if self.is_enabled() else self.alpha
        ctx.fill_style = self.color
        ctx.line_width = 0

        ctx.begin_path()
        ctx.arc(x, y, radius, 0, 2 * math.pi)
        ctx.close_path()
        ctx.fill()
        if self.line_width > 0:
            ctx.line_width = self.line_width
            ctx.stroke_style = self.stroke_style
            ctx.stroke()

        if self.icon is not None:
            # the glyph is punched out of the disc
            ctx.save()
            ctx.global_composite_operation = "destination-out"
            ctx.font = f"{radius}px {self.icon_font}"
            ctx.fill_style = self.icon_color
            width = measure(self.icon, radius)
            ctx.fill_text(self.icon, x - width / 2.0, y + radius * 0.7 / 2.0)
            ctx.restore()

        ctx.restore()


__all__ = ["InteractiveElement", "Button"]

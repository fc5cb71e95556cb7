"""Floating controls drawn on top of the scene.

Zoom buttons stack upward from the bottom-right corner, color buttons (only
while annotations are editable) stack upward from the bottom-left corner. The
tooltip of the hovered element is drawn as a translucent rounded rectangle
left of the zoom column.
"""
from __future__ import annotations

import logging
from typing import Any, Callable, List, Optional

from .elements import Button
from .scene import Scene

LOGGER = logging.getLogger(__name__)

Measure = Callable[[str, float], float]

TOOLTIP_ALPHA = 0.5
TOOLTIP_FILL = "#000000"
TOOLTIP_TEXT = "#ffffff"


def rounded_rect(ctx: Any, x: float, y: float, width: float, height: float, radius: float = 5.0,
                 fill: bool = True, stroke: bool = False) -> None:
    ctx.begin_path()
    ctx.move_to(x + radius, y)
    ctx.line_to(x + width - radius, y)
    ctx.quadratic_curve_to(x + width, y, x + width, y + radius)
    ctx.line_to(x + width, y + height - radius)
    ctx.quadratic_curve_to(x + width, y + height, x + width - radius, y + height)
    ctx.line_to(x + radius, y + height)
    ctx.quadratic_curve_to(x, y + height, x, y + height - radius)
    ctx.line_to(x, y + radius)
    ctx.quadratic_curve_to(x, y, x + radius, y)
    ctx.close_path()
    if fill:
        ctx.fill()
    if stroke:
        ctx.stroke()


class ButtonOverlay:
    def __init__(
        self,
        scene: Scene,
        *,
        zoom_in: Callable[[], Any],
        zoom_out: Callable[[], Any],
    ) -> None:
        self.scene = scene
        style = scene.style
        self.tooltip: Optional[str] = None
        self.zoom_out_button = self._button(style.zoom_out_icon, "Zoom out", zoom_out)
        self.zoom_in_button = self._button(style.zoom_in_icon, "Zoom in", zoom_in)
        self.buttons: List[Button] = [self.zoom_out_button, self.zoom_in_button]
        self.color_buttons: List[Button] = []
        if scene.mode.annotations_editable:
            for color in style.annotation_colors:
                self.add_color_button(color)

    def _button(self, icon: str, tooltip: str, action: Callable[[], Any], **kwargs: Any) -> Button:
        style = self.scene.style
        kwargs.setdefault("color", style.button_color)
        return Button(
            icon=icon,
            tooltip=tooltip,
            action=action,
            icon_color=style.icon_color,
            icon_font=style.icon_font,
            **kwargs,
        )

    # ------------------------------------------------------------------
    # Color buttons
    # ------------------------------------------------------------------
    def add_color_button(self, color: str) -> Button:
        button = self._button(
            self.scene.style.color_button_icon,
            f"Annotate with {color}",
            lambda: self.select_color(color),
            color=color,
            enabled=lambda: self._uses_color(color),
            line_width=1.0,
        )
        self.color_buttons.append(button)
        return button

    def _uses_color(self, color: str) -> bool:
        annotation = self.scene.active_annotation()
        return annotation is not None and annotation.color == color

    def select_color(self, color: str) -> None:
        """Recolor the open active annotation, or start a new one in ``color``."""
        scene = self.scene
        scene.current_color = color
        annotation = scene.active_annotation()
        if annotation is not None and not annotation.polygon.is_closed():
            annotation.color = color
            scene.polygon_changed(annotation.polygon)
        else:
            scene.start_annotation(color)
        LOGGER.debug("Annotation color %s", color)

    # ------------------------------------------------------------------
    # Hit testing
    # ------------------------------------------------------------------
    def elements(self) -> List[Button]:
        return self.buttons + self.color_buttons

    def set_tooltip(self, tooltip: Optional[str]) -> bool:
        """Replace the tooltip; returns whether the text changed."""
        if tooltip == self.tooltip:
            return False
        self.tooltip = tooltip
        self.scene.mark_dirty()
        return True

    # ------------------------------------------------------------------
    # Drawing
    # ------------------------------------------------------------------
    def draw(self, ctx: Any, width: float, height: float, measure: Measure) -> None:
        style = self.scene.style
        radius = style.button_radius
        padding = style.button_padding
        gap = 2 * radius + padding

        x = width - radius - padding
        y = height - radius - padding
        for i, button in enumerate(self.buttons):
            button.draw(ctx, x, y - gap * i, radius, measure)

        x = radius + padding
        for i, button in enumerate(self.color_buttons):
            button.draw(ctx, x, y - gap * i, radius, measure)

        if self.tooltip is not None:
            self._draw_tooltip(ctx, width, height, measure)

    def _draw_tooltip(self, ctx: Any, width: float, height: float, measure: Measure) -> None:
        style = self.scene.style
        radius = style.button_radius
        padding = style.button_padding
        font_size = radius

        ctx.save()
        ctx.global_alpha = TOOLTIP_ALPHA
        ctx.font = f"{font_size}px sans-serif"

        rect_width = measure(self.tooltip, font_size) + padding
        rect_height = font_size * 0.8 + padding
        rect_x = width - (2 * radius + 2 * padding) - rect_width
        rect_y = height - rect_height - padding

        ctx.fill_style = TOOLTIP_FILL
        rounded_rect(ctx, rect_x, rect_y, rect_width, rect_height, style.tooltip_corner_radius)

        ctx.fill_style = TOOLTIP_TEXT
        ctx.fill_text(self.tooltip, rect_x + 0.5 * padding, height - 1.5 * padding)
        ctx.restore()


__all__ = ["ButtonOverlay", "rounded_rect"]

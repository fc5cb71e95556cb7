"""Configuration models for the image viewer engine."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass
from enum import Enum
from typing import Any, List, Optional, Tuple

LOGGER = logging.getLogger(__name__)

DEFAULT_ANNOTATION_COLORS: Tuple[str, ...] = (
    "#8dd3c7",
    "#ffffb3",
    "#bebada",
    "#fb8072",
    "#80b1d3",
    "#fdb462",
)


class ViewerMode(str, Enum):
    """Which of answer, solution and annotations are visible or editable."""

    EDIT_ANSWER = "editAnswer"
    SHOW_SOLUTION = "showSolution"
    EDIT_SOLUTION = "editSolution"
    EDIT_ANNOTATIONS = "editAnnotations"
    SHOW_ANNOTATIONS = "showAnnotations"
    NONE = ""

    @classmethod
    def parse(cls, value: Any) -> "ViewerMode":
        if not isinstance(value, str):
            return cls.NONE
        try:
            return cls(value)
        except ValueError:
            LOGGER.warning("Unknown viewer mode %r, hiding answer, solution and annotations", value)
            return cls.NONE

    @property
    def answer_editable(self) -> bool:
        return self is ViewerMode.EDIT_ANSWER

    @property
    def answer_visible(self) -> bool:
        return self.answer_editable or self is ViewerMode.SHOW_SOLUTION

    @property
    def solution_editable(self) -> bool:
        return self is ViewerMode.EDIT_SOLUTION

    @property
    def solution_visible(self) -> bool:
        return self.solution_editable or self is ViewerMode.SHOW_SOLUTION

    @property
    def annotations_editable(self) -> bool:
        return self is ViewerMode.EDIT_ANNOTATIONS

    @property
    def annotations_visible(self) -> bool:
        return self.annotations_editable or self is ViewerMode.SHOW_ANNOTATIONS

    @property
    def editing(self) -> bool:
        """True in the two polygon edit modes."""
        return self.solution_editable or self.annotations_editable


@dataclass
class ViewerStyle:
    """Sizes, colors and zoom constants used while drawing."""

    button_radius: float = 20.0
    button_padding: float = 10.0
    button_color: str = "#000000"
    icon_color: str = "#ffffff"
    icon_font: str = "FontAwesome"
    zoom_in_icon: str = "\uf00e"
    zoom_out_icon: str = "\uf010"
    color_button_icon: str = "\uf040"
    tooltip_corner_radius: float = 8.0
    handle_width: float = 12.0
    line_width: float = 3.0
    edit_line_color: str = "#FF3300"
    solution_color: str = "#00cc00"
    answer_color: str = "#ff0000"
    fill_alpha: float = 0.3
    annotation_colors: Tuple[str, ...] = DEFAULT_ANNOTATION_COLORS
    zoom_step: float = 0.1
    width_fit_bonus: float = 0.3
    # None disables the bound
    min_scale: Optional[float] = 0.01
    max_scale: Optional[float] = 100.0
    frame_interval: float = 1 / 60.0


@dataclass
class ViewerOptions:
    """Options accepted at construction time.

    ``solution`` is a list of ``{"x", "y"}`` records and ``annotations`` a list
    of ``{"color", "vertices", "closed"}`` records; both are imported by the
    viewer. ``answer`` is kept verbatim.
    """

    mode: ViewerMode = ViewerMode.NONE
    answer: Any = None
    solution: Optional[List[Any]] = None
    annotations: Optional[List[Any]] = None

    @classmethod
    def from_value(cls, value: Any) -> "ViewerOptions":
        """Build options from any object, substituting defaults for bad fields."""
        if isinstance(value, ViewerOptions):
            return value
        if value is None:
            return cls()
        if not isinstance(value, Mapping):
            LOGGER.warning("Ignoring viewer options of type %s", type(value).__name__)
            return cls()
        solution = value.get("solution")
        annotations = value.get("annotations")
        return cls(
            mode=ViewerMode.parse(value.get("mode", "")),
            answer=value.get("answer"),
            solution=list(solution) if isinstance(solution, (list, tuple)) else None,
            annotations=list(annotations) if isinstance(annotations, (list, tuple)) else None,
        )


__all__ = [
    "DEFAULT_ANNOTATION_COLORS",
    "ViewerMode",
    "ViewerStyle",
    "ViewerOptions",
]

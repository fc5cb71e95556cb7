"""Shared test fixtures.

The default canvas is 800x600 and the default image 400x600, so the initial
fit is height-bound with scale 1.0 and center (200, 300). Image point (x, y)
then sits at canvas point (x + 200, y).
"""

from __future__ import annotations

from typing import Any, Dict, List

import pytest

from imageviewer import ImageHandle, ImageViewer
from imageviewer.surface.mock import RecordingSurface


class Recorder:
    """Collects payloads passed to viewer callbacks."""

    def __init__(self) -> None:
        self.calls: List[Any] = []

    def __call__(self, payload: Any) -> None:
        self.calls.append(payload)

    @property
    def count(self) -> int:
        return len(self.calls)

    @property
    def last(self) -> Any:
        return self.calls[-1]


@pytest.fixture
def surface() -> RecordingSurface:
    return RecordingSurface(800, 600)


@pytest.fixture
def image() -> ImageHandle:
    return ImageHandle(width=400, height=600, source="image")


@pytest.fixture
def callbacks() -> Dict[str, Recorder]:
    return {
        "on_solution_change": Recorder(),
        "on_annotation_change": Recorder(),
        "on_answer_change": Recorder(),
    }


@pytest.fixture
def make_viewer(surface, image, callbacks):
    def factory(options: Any = None, **kwargs: Any) -> ImageViewer:
        params = dict(callbacks)
        params.update(kwargs)
        viewer = ImageViewer(surface, image, options, **params)
        # first frame places the buttons
        surface.run_frame()
        return viewer

    return factory

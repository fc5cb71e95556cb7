"""Exceptions raised by the viewer engine."""
from __future__ import annotations


class ImageViewerError(Exception):
    """Base class for viewer errors."""


class CallbackNotSetError(ImageViewerError, RuntimeError):
    """An edit had to notify a collaborator that never registered a callback."""

    def __init__(self, name: str) -> None:
        super().__init__(f"No {name} callback registered")
        self.name = name


class ViewerDisposedError(ImageViewerError, RuntimeError):
    """The viewer was disposed and cannot be restarted."""


__all__ = ["ImageViewerError", "CallbackNotSetError", "ViewerDisposedError"]

"""In-memory surface used for headless runs and unit tests."""
from __future__ import annotations

from typing import Any, Callable, List, Tuple

from . import CLICK, POINTER_DOWN, POINTER_MOVE, POINTER_UP, WHEEL, CanvasSurface, PointerEvent, WheelEvent

Call = Tuple[Any, ...]


class RecordingContext:
    """Accepts any canvas call or style assignment and records it."""

    def __init__(self) -> None:
        object.__setattr__(self, "calls", [])

    def __setattr__(self, name: str, value: Any) -> None:
        self.calls.append(("set", name, value))
        object.__setattr__(self, name, value)

    def __getattr__(self, name: str) -> Callable[..., None]:
        if name.startswith("_"):
            raise AttributeError(name)

        def record(*args: Any, **kwargs: Any) -> None:
            self.calls.append((name,) + args + ((kwargs,) if kwargs else ()))

        return record

    def names(self) -> List[str]:
        return [call[0] for call in self.calls]

    def reset(self) -> None:
        self.calls.clear()


class RecordingSurface(CanvasSurface):
    """Small simulation of a host canvas.

    Frames are queued by :meth:`request_frame` and only run when
    :meth:`run_frame` is called, so tests decide when the display ticks.
    """

    def __init__(self, width: int = 800, height: int = 600, *, char_width: float = 0.6) -> None:
        super().__init__()
        self.width = width
        self.height = height
        self.char_width = char_width
        self.ctx = RecordingContext()
        self.pending_frames: List[Callable[[], None]] = []
        self.frames_run = 0
        self.close_count = 0

    # Drawing -----------------------------------------------------------
    def context(self) -> RecordingContext:
        return self.ctx

    def measure_text(self, text: str, font_size: float) -> float:
        return len(text) * font_size * self.char_width

    # Frames ------------------------------------------------------------
    def request_frame(self, callback: Callable[[], None]) -> None:
        self.pending_frames.append(callback)

    def run_frame(self) -> int:
        """Run the callbacks queued so far; returns how many ran."""
        frames, self.pending_frames = self.pending_frames, []
        for callback in frames:
            callback()
        self.frames_run += len(frames)
        return len(frames)

    def close(self) -> None:
        self.close_count += 1

    # Input helpers -----------------------------------------------------
    def pointer_down(self, x: float, y: float, button: int = 0) -> None:
        self.dispatch(POINTER_DOWN, PointerEvent(x, y, button))

    def pointer_up(self, x: float, y: float, button: int = 0) -> None:
        self.dispatch(POINTER_UP, PointerEvent(x, y, button))

    def pointer_move(self, x: float, y: float) -> None:
        self.dispatch(POINTER_MOVE, PointerEvent(x, y))

    def click(self, x: float, y: float, button: int = 0) -> None:
        self.dispatch(CLICK, PointerEvent(x, y, button))

    def wheel(self, *, detail: float = 0.0, wheel_delta: float = 0.0) -> WheelEvent:
        event = WheelEvent(detail=detail, wheel_delta=wheel_delta)
        self.dispatch(WHEEL, event)
        return event

    def drag(self, start: Tuple[float, float], end: Tuple[float, float]) -> None:
        """Press at ``start``, move to ``end`` and release there, then click."""
        self.pointer_move(*start)
        self.pointer_down(*start)
        self.pointer_move(*end)
        self.pointer_up(*end)
        self.click(*end)


__all__ = ["RecordingContext", "RecordingSurface"]

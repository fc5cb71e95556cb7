"""Host surfaces the viewer draws on and receives input from.

The viewer never reaches for a page or window object. A host hands it a
:class:`CanvasSurface` that knows its pixel size, exposes a 2D drawing context
with the canvas vocabulary (``clear_rect``, ``arc``, ``fill_text`` ...), lets
the viewer subscribe to pointer and wheel events and schedules frame
callbacks.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Callable, Dict, List

LOGGER = logging.getLogger(__name__)

POINTER_DOWN = "pointerdown"
POINTER_UP = "pointerup"
POINTER_MOVE = "pointermove"
CLICK = "click"
WHEEL = "wheel"

EVENT_KINDS = (POINTER_DOWN, POINTER_UP, POINTER_MOVE, CLICK, WHEEL)

PRIMARY_BUTTON = 0


@dataclass
class PointerEvent:
    """Pointer position in canvas pixels plus the button involved."""

    x: float
    y: float
    button: int = PRIMARY_BUTTON


@dataclass
class WheelEvent:
    """Wheel motion using the legacy DOM sign conventions.

    ``detail`` follows ``DOMMouseScroll`` and ``wheel_delta`` follows
    ``mousewheel``; hosts fill whichever they have.
    """

    x: float = 0.0
    y: float = 0.0
    detail: float = 0.0
    wheel_delta: float = 0.0
    default_prevented: bool = False

    def prevent_default(self) -> None:
        self.default_prevented = True


@dataclass(frozen=True)
class ImageHandle:
    """A decoded image: its pixel size and whatever the context can draw."""

    width: int
    height: int
    source: Any = None


@dataclass(eq=False)
class ListenerHandle:
    kind: str
    callback: Callable[[Any], None]
    global_scope: bool = False


class CanvasSurface:
    """Capabilities a host grants the viewer.

    Subclasses provide ``width``, ``height``, :meth:`context`,
    :meth:`measure_text` and :meth:`request_frame`. Listener bookkeeping is
    shared; hosts call :meth:`dispatch` when their toolkit reports an event.
    """

    width: int = 0
    height: int = 0

    def __init__(self) -> None:
        self._listeners: Dict[str, List[ListenerHandle]] = {kind: [] for kind in EVENT_KINDS}

    # Drawing -----------------------------------------------------------
    def context(self) -> Any:
        raise NotImplementedError

    def measure_text(self, text: str, font_size: float) -> float:
        raise NotImplementedError

    # Frames ------------------------------------------------------------
    def request_frame(self, callback: Callable[[], None]) -> None:
        raise NotImplementedError

    def close(self) -> None:
        """Release host resources. Called once when the viewer is disposed."""

    # Events ------------------------------------------------------------
    def listen(self, kind: str, callback: Callable[[Any], None], *, global_scope: bool = False) -> ListenerHandle:
        if kind not in self._listeners:
            raise ValueError(f"Unsupported event kind: {kind!r}")
        handle = ListenerHandle(kind=kind, callback=callback, global_scope=global_scope)
        self._listeners[kind].append(handle)
        LOGGER.debug("Listening for %s (global=%s)", kind, global_scope)
        return handle

    def unlisten(self, handle: ListenerHandle) -> None:
        listeners = self._listeners.get(handle.kind, [])
        if handle in listeners:
            listeners.remove(handle)
            LOGGER.debug("Stopped listening for %s", handle.kind)

    def listener_count(self, kind: str | None = None) -> int:
        if kind is not None:
            return len(self._listeners.get(kind, []))
        return sum(len(items) for items in self._listeners.values())

    def dispatch(self, kind: str, event: Any) -> None:
        for handle in list(self._listeners.get(kind, [])):
            handle.callback(event)


__all__ = [
    "POINTER_DOWN",
    "POINTER_UP",
    "POINTER_MOVE",
    "CLICK",
    "WHEEL",
    "EVENT_KINDS",
    "PRIMARY_BUTTON",
    "PointerEvent",
    "WheelEvent",
    "ImageHandle",
    "ListenerHandle",
    "CanvasSurface",
]

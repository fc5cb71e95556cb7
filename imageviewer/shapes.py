"""Vertices, polygons and annotations drawn over the image.

A polygon is a singly linked ring of vertices: ``initial_vertex`` -> ``next``
-> ... The last vertex's ``next`` is ``None`` while the polygon is open and
points back to ``initial_vertex`` once it is closed. All coordinates are in
image space.

Import/export records:

* a solution is a list of ``{"x": float, "y": float}`` vertex records;
* an annotation is ``{"color": str, "vertices": [...], "closed": bool}``.
"""
from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Dict, Iterator, List, Optional, Sequence

from .elements import InteractiveElement
from .geometry import XY, Point, distance_to_segment, point_in_polygon

if TYPE_CHECKING:
    from .input import InputState
    from .scene import Scene
    from .surface import PointerEvent

DEFAULT_HANDLE_WIDTH = 12.0


class Vertex(InteractiveElement):
    """A polygon corner with a square drag handle of fixed canvas size."""

    def __init__(self, x: float, y: float, polygon: Optional["Polygon"] = None,
                 handle_width: float = DEFAULT_HANDLE_WIDTH) -> None:
        self.position = Point(float(x), float(y))
        self.polygon = polygon
        self.next: Optional[Vertex] = None
        self.handle_width = handle_width

    def __repr__(self) -> str:
        return f"Vertex({self.position.x!r}, {self.position.y!r})"

    def equals(self, other: "Vertex") -> bool:
        return self.position.x == other.position.x and self.position.y == other.position.y

    def is_within_bounds(self, x: float, y: float, scene: "Scene") -> bool:
        cx, cy = scene.transform.to_canvas(self.position.x, self.position.y)
        half = self.handle_width / 2.0
        return cx - half <= x <= cx + half and cy - half <= y <= cy + half

    def on_mouse_down(self, event: "PointerEvent", scene: "Scene", state: "InputState") -> bool:
        # becomes the drag target; the press still starts a drag
        state.move_target = self
        return False

    def on_click(self, event: "PointerEvent", scene: "Scene", state: "InputState") -> bool:
        """Close the active ring when its first vertex is clicked.

        Clicks on handles never bubble, so they do not place a new vertex.
        """
        polygon = self.polygon
        if (
            polygon is not None
            and polygon is scene.active_polygon
            and polygon.initial_vertex is self
            and not polygon.is_closed()
            and len(polygon) >= 3
            and not state.dragged
        ):
            polygon.close()
            scene.polygon_changed(polygon)
        return False


class Polygon(InteractiveElement):
    """Ring of vertices that can be empty, open or closed."""

    def __init__(self, initial_vertex: Optional[Vertex] = None, *,
                 handle_width: float = DEFAULT_HANDLE_WIDTH) -> None:
        self.initial_vertex = initial_vertex
        self.handle_width = handle_width
        if initial_vertex is not None:
            initial_vertex.polygon = self

    def __repr__(self) -> str:
        state = "closed" if self.is_closed() else "open"
        return f"Polygon({len(self)} vertices, {state})"

    # ------------------------------------------------------------------
    # Ring traversal
    # ------------------------------------------------------------------
    def __iter__(self) -> Iterator[Vertex]:
        seen = set()
        vertex = self.initial_vertex
        while vertex is not None and id(vertex) not in seen:
            seen.add(id(vertex))
            yield vertex
            vertex = vertex.next

    def __len__(self) -> int:
        return sum(1 for _ in self)

    def vertices(self) -> List[Vertex]:
        return list(self)

    def points(self) -> List[XY]:
        return [v.position.as_tuple() for v in self]

    def last_vertex(self) -> Optional[Vertex]:
        last = None
        for vertex in self:
            last = vertex
        return last

    def is_closed(self) -> bool:
        last = self.last_vertex()
        return last is not None and last.next is self.initial_vertex

    # ------------------------------------------------------------------
    # Editing
    # ------------------------------------------------------------------
    def append(self, x: float, y: float) -> Vertex:
        if self.is_closed():
            raise ValueError("Cannot add a vertex to a closed polygon")
        vertex = Vertex(x, y, self, handle_width=self.handle_width)
        last = self.last_vertex()
        if last is None:
            self.initial_vertex = vertex
        else:
            last.next = vertex
        return vertex

    def close(self) -> None:
        last = self.last_vertex()
        if last is not None:
            last.next = self.initial_vertex

    # ------------------------------------------------------------------
    # Interaction
    # ------------------------------------------------------------------
    def is_within_bounds(self, x: float, y: float, scene: "Scene") -> bool:
        pts = self.points()
        if not pts:
            return False
        if self.is_closed():
            return point_in_polygon(scene.transform.to_image(x, y), pts)
        canvas_pts = [scene.transform.to_canvas(px, py) for px, py in pts]
        reach = self.handle_width / 2.0
        if len(canvas_pts) == 1:
            return distance_to_segment((x, y), canvas_pts[0], canvas_pts[0]) <= reach
        return any(
            distance_to_segment((x, y), a, b) <= reach
            for a, b in zip(canvas_pts, canvas_pts[1:])
        )

    def on_click(self, event: "PointerEvent", scene: "Scene", state: "InputState") -> bool:
        if not scene.can_edit(self):
            return True
        scene.set_active_polygon(self)
        return False

    # ------------------------------------------------------------------
    # Serialisation
    # ------------------------------------------------------------------
    def to_records(self) -> List[Dict[str, float]]:
        return [{"x": x, "y": y} for x, y in self.points()]

    @classmethod
    def from_records(cls, records: Any, *, closed: Optional[bool] = None,
                     handle_width: float = DEFAULT_HANDLE_WIDTH) -> "Polygon":
        """Build a polygon from vertex records.

        Without an explicit ``closed`` flag, three or more vertices form a
        closed ring.
        """
        if not isinstance(records, (list, tuple)):
            raise ValueError(f"Vertex records must be a list, got {type(records).__name__}")
        polygon = cls(handle_width=handle_width)
        for record in records:
            polygon.append(*_vertex_xy(record))
        if closed is None:
            closed = len(polygon) >= 3
        if closed:
            polygon.close()
        return polygon


@dataclass(eq=False)
class Annotation:
    polygon: Polygon
    color: str

    def to_record(self) -> Dict[str, Any]:
        return {
            "color": self.color,
            "vertices": self.polygon.to_records(),
            "closed": self.polygon.is_closed(),
        }

    @classmethod
    def from_record(cls, record: Any, *, default_color: str,
                    handle_width: float = DEFAULT_HANDLE_WIDTH) -> "Annotation":
        if not isinstance(record, Mapping):
            raise ValueError(f"Annotation record must be a mapping, got {type(record).__name__}")
        closed = record.get("closed")
        polygon = Polygon.from_records(
            record.get("vertices", []),
            closed=None if closed is None else bool(closed),
            handle_width=handle_width,
        )
        color = record.get("color")
        return cls(polygon=polygon, color=color if isinstance(color, str) and color else default_color)


def _vertex_xy(record: Any) -> XY:
    if isinstance(record, Mapping):
        raw = (record.get("x"), record.get("y"))
    elif isinstance(record, Sequence) and not isinstance(record, str) and len(record) == 2:
        raw = (record[0], record[1])
    else:
        raise ValueError(f"Invalid vertex record: {record!r}")
    try:
        return float(raw[0]), float(raw[1])
    except (TypeError, ValueError) as exc:
        raise ValueError(f"Invalid vertex record: {record!r}") from exc


def export_solution(solution: Optional[Polygon]) -> List[Dict[str, float]]:
    return solution.to_records() if solution is not None else []


def export_annotations(annotations: Sequence[Annotation]) -> List[Dict[str, Any]]:
    return [annotation.to_record() for annotation in annotations]


__all__ = [
    "DEFAULT_HANDLE_WIDTH",
    "Vertex",
    "Polygon",
    "Annotation",
    "export_solution",
    "export_annotations",
]

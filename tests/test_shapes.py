from __future__ import annotations

import pytest

from imageviewer.config import ViewerMode
from imageviewer.input import InputState
from imageviewer.scene import Scene
from imageviewer.shapes import Annotation, Polygon, Vertex, export_annotations, export_solution
from imageviewer.surface import ImageHandle, PointerEvent

TRIANGLE = [{"x": 10, "y": 10}, {"x": 100, "y": 10}, {"x": 50, "y": 80}]


def _scene(mode=ViewerMode.EDIT_SOLUTION):
    # scale 1.0, image (x, y) -> canvas (x + 200, y)
    return Scene(ImageHandle(400, 600), 800, 600, mode=mode)


def test_empty_polygon():
    polygon = Polygon()

    assert len(polygon) == 0
    assert polygon.last_vertex() is None
    assert not polygon.is_closed()
    assert polygon.vertices() == []


def test_append_builds_open_chain():
    polygon = Polygon()
    first = polygon.append(1, 2)
    second = polygon.append(3, 4)

    assert polygon.initial_vertex is first
    assert first.next is second
    assert second.next is None
    assert polygon.last_vertex() is second
    assert first.polygon is polygon
    assert not polygon.is_closed()


def test_close_links_back_to_first_vertex():
    polygon = Polygon.from_records(TRIANGLE, closed=False)
    polygon.close()

    assert polygon.is_closed()
    assert polygon.last_vertex().next is polygon.initial_vertex
    assert len(polygon) == 3


def test_append_to_closed_polygon_fails():
    polygon = Polygon.from_records(TRIANGLE)

    with pytest.raises(ValueError):
        polygon.append(0, 0)


def test_three_records_import_closed():
    polygon = Polygon.from_records(TRIANGLE)

    assert len(polygon) == 3
    assert polygon.is_closed()
    assert polygon.to_records() == [{"x": 10.0, "y": 10.0}, {"x": 100.0, "y": 10.0}, {"x": 50.0, "y": 80.0}]


def test_two_records_import_open():
    polygon = Polygon.from_records([[0, 0], [5, 5]])

    assert len(polygon) == 2
    assert not polygon.is_closed()


@pytest.mark.parametrize("records", ["nope", [{"x": 1}], [{"x": "a", "y": 2}], [[1, 2, 3]], [None]])
def test_malformed_records_raise(records):
    with pytest.raises(ValueError):
        Polygon.from_records(records)


def test_vertex_equals_compares_coordinates():
    assert Vertex(1.0, 2.0).equals(Vertex(1, 2))
    assert not Vertex(1.0, 2.0).equals(Vertex(1, 2.5))


def test_vertex_handle_size_independent_of_zoom():
    scene = _scene()
    vertex = Vertex(100, 100)

    # canvas (300, 100)
    assert vertex.is_within_bounds(305, 95, scene)
    assert not vertex.is_within_bounds(307, 100, scene)

    scene.transform.scale = 4.0
    cx, cy = scene.transform.to_canvas(100, 100)
    assert vertex.is_within_bounds(cx + 6, cy - 6, scene)
    assert not vertex.is_within_bounds(cx + 7, cy, scene)


def test_vertex_mouse_down_becomes_move_target():
    scene = _scene()
    vertex = Vertex(1, 1)
    state = InputState()

    assert vertex.on_mouse_down(PointerEvent(0, 0), scene, state) is False
    assert state.move_target is vertex


def test_closed_polygon_hit_inside():
    scene = _scene()
    polygon = Polygon.from_records(TRIANGLE)

    assert polygon.is_within_bounds(250, 30, scene)
    assert not polygon.is_within_bounds(205, 70, scene)


def test_open_polygon_hit_near_segment():
    scene = _scene()
    polygon = Polygon.from_records(TRIANGLE[:2])

    assert polygon.is_within_bounds(250, 14, scene)
    assert not polygon.is_within_bounds(250, 30, scene)
    assert not Polygon().is_within_bounds(0, 0, scene)


def test_polygon_click_selects_when_editable():
    scene = _scene(ViewerMode.EDIT_SOLUTION)
    scene.solution = Polygon.from_records(TRIANGLE)
    scene.dirty = False

    assert scene.solution.on_click(PointerEvent(250, 30), scene, InputState()) is False
    assert scene.active_polygon is scene.solution
    assert scene.dirty


def test_polygon_click_bubbles_outside_edit_mode():
    scene = _scene(ViewerMode.SHOW_SOLUTION)
    scene.solution = Polygon.from_records(TRIANGLE)

    assert scene.solution.on_click(PointerEvent(250, 30), scene, InputState()) is True
    assert scene.active_polygon is None


def test_clicking_first_vertex_closes_active_polygon():
    scene = _scene()
    changed = []
    scene.on_polygon_change = changed.append
    polygon = scene.ensure_solution()
    for record in TRIANGLE:
        polygon.append(record["x"], record["y"])
    scene.set_active_polygon(polygon)

    assert polygon.vertices()[1].on_click(PointerEvent(0, 0), scene, InputState()) is False
    assert not polygon.is_closed()

    assert polygon.initial_vertex.on_click(PointerEvent(0, 0), scene, InputState()) is False
    assert polygon.is_closed()
    assert changed == [polygon]


def test_drag_end_on_first_vertex_does_not_close():
    scene = _scene()
    scene.on_polygon_change = lambda polygon: None
    polygon = scene.ensure_solution()
    for record in TRIANGLE:
        polygon.append(record["x"], record["y"])
    scene.set_active_polygon(polygon)

    polygon.initial_vertex.on_click(PointerEvent(0, 0), scene, InputState(dragged=True))

    assert not polygon.is_closed()


def test_annotation_record_round_trip_shape():
    annotation = Annotation.from_record({"color": "#fb8072", "vertices": TRIANGLE}, default_color="#000")

    assert annotation.color == "#fb8072"
    assert annotation.to_record()["closed"] is True
    assert len(annotation.to_record()["vertices"]) == 3


def test_annotation_record_defaults():
    annotation = Annotation.from_record({"vertices": TRIANGLE, "closed": False}, default_color="#8dd3c7")

    assert annotation.color == "#8dd3c7"
    assert not annotation.polygon.is_closed()

    with pytest.raises(ValueError):
        Annotation.from_record(["not", "a", "mapping"], default_color="#000")


def test_export_helpers():
    assert export_solution(None) == []
    annotations = [Annotation(Polygon.from_records(TRIANGLE[:1]), "#bebada")]
    assert export_annotations(annotations) == [
        {"color": "#bebada", "vertices": [{"x": 10.0, "y": 10.0}], "closed": False}
    ]

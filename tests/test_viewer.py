from __future__ import annotations

import pytest

from imageviewer import ImageHandle, ImageViewer, ViewerMode
from imageviewer.errors import ViewerDisposedError
from imageviewer.surface.mock import RecordingSurface

TRIANGLE = [{"x": 10, "y": 10}, {"x": 100, "y": 10}, {"x": 50, "y": 80}]


def test_initial_fit_scenario():
    viewer = ImageViewer(RecordingSurface(800, 600), ImageHandle(400, 300))

    assert viewer.scale == pytest.approx(2.3)
    assert viewer.scene.transform.center.as_tuple() == (200, 150)


def test_zoom_on_tiny_image_keeps_direction():
    viewer = ImageViewer(RecordingSurface(800, 600), ImageHandle(4, 3))
    fitted = viewer.scale
    assert fitted == pytest.approx(200.3)

    assert viewer.zoom_in() >= fitted
    assert viewer.zoom_out() == pytest.approx(fitted * 0.9)


def test_list_answer_is_kept_and_warned_about_once(make_viewer, surface, caplog):
    answer = [{"x": 1, "y": 2}]
    viewer = make_viewer({"mode": "showSolution", "answer": answer})
    viewer.refresh()
    surface.run_frame()

    assert viewer.answer is answer
    assert len([r for r in caplog.records if "cannot be drawn" in r.getMessage()]) == 1


def test_solution_option_imports_closed_polygon(make_viewer):
    viewer = make_viewer({"mode": "showSolution", "solution": TRIANGLE})

    assert len(viewer.solution) == 3
    assert viewer.solution.is_closed()
    assert viewer.export_solution() == [{"x": 10.0, "y": 10.0}, {"x": 100.0, "y": 10.0}, {"x": 50.0, "y": 80.0}]


def test_annotations_option_imports_records(make_viewer):
    viewer = make_viewer(
        {
            "mode": "showAnnotations",
            "annotations": [
                {"color": "#fb8072", "vertices": TRIANGLE},
                {"vertices": TRIANGLE[:2], "closed": False},
            ],
        }
    )

    assert [a.color for a in viewer.annotations] == ["#fb8072", "#8dd3c7"]
    assert [a.polygon.is_closed() for a in viewer.annotations] == [True, False]
    assert viewer.scene.mode.annotations_visible
    assert not viewer.scene.mode.annotations_editable


def test_bad_options_fall_back_to_defaults(make_viewer):
    viewer = make_viewer("not options")

    assert viewer.scene.mode is ViewerMode.NONE
    assert viewer.solution is None
    assert viewer.annotations == []
    assert viewer.answer is None


def test_answer_is_kept_verbatim(make_viewer):
    answer = {"label": "B", "nested": {"keep": [1, 2]}}
    viewer = make_viewer({"mode": "editAnswer", "answer": answer})

    assert viewer.answer is answer


def test_malformed_import_raises(make_viewer):
    with pytest.raises(ValueError):
        make_viewer({"solution": [{"x": "left"}]})

    viewer = make_viewer()
    with pytest.raises(ValueError):
        viewer.import_annotations("nope")


def test_zoom_in_then_out_is_approximately_identity(make_viewer):
    viewer = make_viewer()
    before = viewer.scale

    viewer.zoom_in()
    assert viewer.scale == pytest.approx(before * 1.1)
    viewer.zoom_out()

    assert viewer.scale == pytest.approx(before, rel=0.02)
    assert viewer.scale != before


def test_zoom_out_is_clamped(make_viewer):
    viewer = make_viewer()
    for _ in range(200):
        viewer.zoom_out()

    assert viewer.scale == pytest.approx(viewer.scene.style.min_scale)
    assert viewer.scale > 0


def test_zoom_marks_dirty(make_viewer, surface):
    viewer = make_viewer()
    assert not viewer.dirty

    viewer.zoom_in()
    assert viewer.dirty
    surface.run_frame()
    assert not viewer.dirty


def test_refresh_is_idempotent(make_viewer, surface):
    viewer = make_viewer()
    drawn = viewer.loop.frames_drawn

    viewer.refresh()
    viewer.refresh()
    viewer.refresh()
    surface.run_frame()
    surface.run_frame()

    assert viewer.loop.frames_drawn == drawn + 1


def test_dispose_detaches_and_stops(make_viewer, surface):
    viewer = make_viewer()

    viewer.dispose()

    assert viewer.disposed
    assert surface.listener_count() == 0
    surface.run_frame()
    assert surface.pending_frames == []

    viewer.dispose()
    assert surface.close_count == 1
    with pytest.raises(ViewerDisposedError):
        viewer.start()
    assert surface.listener_count() == 0


def test_events_after_dispose_are_not_seen(make_viewer, surface):
    viewer = make_viewer({"mode": "editSolution"})
    viewer.dispose()

    surface.click(300, 100)

    assert viewer.solution is None


def test_export_annotations_drops_empty_inactive(make_viewer):
    viewer = make_viewer({"mode": "editAnnotations", "annotations": [{"vertices": TRIANGLE}]})
    empty = viewer.scene.start_annotation()
    viewer.scene.set_active_polygon(viewer.annotations[0].polygon)

    records = viewer.export_annotations()

    assert len(records) == 1
    assert empty not in viewer.annotations


def test_reimport_solution_clears_active_selection(make_viewer):
    viewer = make_viewer({"mode": "editSolution", "solution": TRIANGLE})
    viewer.scene.set_active_polygon(viewer.solution)

    viewer.import_solution(TRIANGLE[:2])

    assert viewer.scene.active_polygon is None
    assert len(viewer.solution) == 2


def test_set_active_polygon_rejects_detached(make_viewer):
    from imageviewer.shapes import Polygon

    viewer = make_viewer({"mode": "editSolution"})
    with pytest.raises(ValueError):
        viewer.scene.set_active_polygon(Polygon())


def test_viewer_without_surface():
    viewer = ImageViewer(None, ImageHandle(400, 300), {"mode": "editSolution"})

    assert viewer.loop is None
    assert viewer.dispatcher.element_at(10, 10) is None
    viewer.refresh()
    viewer.dispose()
    assert viewer.disposed


def test_callbacks_can_be_assigned_later(surface, image):
    seen = []
    viewer = ImageViewer(surface, image, {"mode": "editSolution"})
    viewer.on_solution_change = seen.append

    surface.click(300, 100)

    assert seen == [[{"x": 100.0, "y": 100.0}]]


def test_autostart_can_be_deferred(surface, image):
    viewer = ImageViewer(surface, image, autostart=False)

    assert surface.listener_count() == 0
    assert surface.pending_frames == []

    viewer.start()
    assert surface.listener_count() == 5
    assert surface.run_frame() == 1

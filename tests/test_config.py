from __future__ import annotations

import logging

import pytest

from imageviewer.config import DEFAULT_ANNOTATION_COLORS, ViewerMode, ViewerOptions, ViewerStyle


@pytest.mark.parametrize(
    "mode, answer, solution, annotations",
    [
        ("editAnswer", (True, True), (False, False), (False, False)),
        ("showSolution", (True, False), (True, False), (False, False)),
        ("editSolution", (False, False), (True, True), (False, False)),
        ("editAnnotations", (False, False), (False, False), (True, True)),
        ("showAnnotations", (False, False), (False, False), (True, False)),
        ("", (False, False), (False, False), (False, False)),
    ],
)
def test_visibility_matrix(mode, answer, solution, annotations):
    parsed = ViewerMode.parse(mode)

    assert (parsed.answer_visible, parsed.answer_editable) == answer
    assert (parsed.solution_visible, parsed.solution_editable) == solution
    assert (parsed.annotations_visible, parsed.annotations_editable) == annotations


def test_editing_only_in_polygon_edit_modes():
    assert ViewerMode.EDIT_SOLUTION.editing
    assert ViewerMode.EDIT_ANNOTATIONS.editing
    assert not ViewerMode.EDIT_ANSWER.editing
    assert not ViewerMode.NONE.editing


def test_unknown_mode_falls_back_to_none(caplog):
    with caplog.at_level(logging.WARNING, logger="imageviewer.config"):
        assert ViewerMode.parse("drawEverything") is ViewerMode.NONE
    assert "drawEverything" in caplog.text
    assert ViewerMode.parse(42) is ViewerMode.NONE


def test_options_from_mapping():
    answer = {"x": 1, "y": 2}
    options = ViewerOptions.from_value(
        {"mode": "editSolution", "answer": answer, "solution": ({"x": 1, "y": 1},), "annotations": []}
    )

    assert options.mode is ViewerMode.EDIT_SOLUTION
    assert options.answer is answer
    assert options.solution == [{"x": 1, "y": 1}]
    assert options.annotations == []


@pytest.mark.parametrize("value", [None, "editSolution", 12, ["mode"]])
def test_options_tolerate_garbage(value):
    options = ViewerOptions.from_value(value)

    assert options == ViewerOptions()


def test_options_drop_fields_of_wrong_type():
    options = ViewerOptions.from_value({"mode": None, "solution": "abc", "annotations": {}})

    assert options.mode is ViewerMode.NONE
    assert options.solution is None
    assert options.annotations is None


@pytest.mark.parametrize("answer", [[{"x": 1, "y": 2}], "B", 3])
def test_answer_is_kept_verbatim(answer):
    options = ViewerOptions.from_value({"mode": "editAnswer", "answer": answer})

    assert options.answer is answer


def test_options_instance_passes_through():
    options = ViewerOptions(mode=ViewerMode.EDIT_ANSWER)

    assert ViewerOptions.from_value(options) is options


def test_style_defaults():
    style = ViewerStyle()

    assert style.button_radius == 20
    assert style.button_padding == 10
    assert style.handle_width == 12
    assert style.line_width == 3
    assert style.edit_line_color == "#FF3300"
    assert style.annotation_colors == DEFAULT_ANNOTATION_COLORS
    assert len(style.annotation_colors) == 6

"""Example notebook cell: annotate an image and print every edit.

Run inside Jupyter::

    from examples.annotate import main
    viewer = main("photo.jpg")
"""
from __future__ import annotations

import json
import logging
import sys

from imageviewer.surface.jupyter import show_image_viewer


def _print(kind):
    def callback(payload):
        print(kind, json.dumps(payload))
    return callback


def main(path: str, mode: str = "editAnnotations"):
    logging.basicConfig(level=logging.INFO)
    options = {
        "mode": mode,
        "solution": [{"x": 40, "y": 40}, {"x": 200, "y": 60}, {"x": 120, "y": 180}],
    }
    return show_image_viewer(
        path,
        options,
        on_solution_change=_print("solution"),
        on_annotation_change=_print("annotations"),
        on_answer_change=_print("answer"),
    )


if __name__ == "__main__":
    main(sys.argv[1] if len(sys.argv) > 1 else "image.png")

"""
Tests for natural frame ordering and rolling frame-over-frame diffs.
"""

import json

import numpy as np
import pytest

from basepaint_tools.canvas_state import CanvasState
from basepaint_tools.core_types import AnimationFrame
from basepaint_tools.errors import FrameSequenceError
from basepaint_tools.frames import (
    compare_frame_names,
    frame_filename,
    numeric_tokens,
    process_animation_frames,
    sort_frame_names,
    sort_frames,
)


class Recorder:
    """emit() stand-in that keeps artifacts in order."""

    def __init__(self):
        self.files = []

    def __call__(self, filename, content):
        self.files.append((filename, json.loads(content)))


def _points(records):
    return {(r["point"]["x"], r["point"]["y"]): r["color"] for r in records}


class TestOrdering:
    def test_numeric_tokens(self):
        assert numeric_tokens("frame2") == [2]
        assert numeric_tokens("f10_b3") == [10, 3]
        assert numeric_tokens("intro") == []
        assert numeric_tokens("a007") == [7]

    def test_natural_not_lexicographic(self):
        names = ["frame2.png", "frame10.png", "frame1.png"]
        assert sort_frame_names(names) == ["frame1.png", "frame2.png", "frame10.png"]

    def test_missing_token_counts_as_zero(self):
        assert compare_frame_names("a1", "a1_2") < 0
        assert compare_frame_names("a1_0", "a1") > 0  # tokens equal, name decides
        assert compare_frame_names("intro", "x1") < 0

    def test_tie_broken_by_full_name(self):
        assert sort_frame_names(["b1.png", "a1.png", "a01.png"]) == [
            "a01.png",
            "a1.png",
            "b1.png",
        ]
        assert compare_frame_names("same", "same") == 0

    def test_multiple_tokens_compared_in_turn(self):
        names = ["f10_b3", "f2_b9", "f10_b1"]
        assert sort_frame_names(names) == ["f2_b9", "f10_b1", "f10_b3"]

    def test_sort_frames_returns_new_list(self):
        img = np.zeros((1, 1, 4), dtype=np.uint8)
        frames = [AnimationFrame("frame10.png", img), AnimationFrame("frame9.png", img)]
        ordered = sort_frames(frames)
        assert [f.name for f in ordered] == ["frame9.png", "frame10.png"]
        assert frames[0].name == "frame10.png"

    def test_frame_filename(self):
        assert frame_filename(1, "walk.png") == "frame-001-walk.txt"
        assert frame_filename(12, "a.b.gif") == "frame-012-a.b.txt"
        assert frame_filename(100, "noext") == "frame-100-noext.txt"


class TestProcessing:
    def test_rolling_diff_unchanged_pixel_dropped(self, make_image, palette):
        a = AnimationFrame("frame1.png", make_image({(5, 5): "#0000ff"}))
        b = AnimationFrame("frame2.png", make_image({(5, 5): "#0000ff"}))
        rec = Recorder()
        total = process_animation_frames([a, b], palette, CanvasState(), None, rec)
        assert _points(rec.files[0][1]) == {(5, 5): 2}
        assert rec.files[1][1] == []
        assert total == 1

    def test_rolling_diff_changed_pixel_kept(self, make_image, palette):
        a = AnimationFrame("frame1.png", make_image({(5, 5): "#0000ff"}))
        b = AnimationFrame("frame2.png", make_image({(5, 5): "#ffffff"}))
        rec = Recorder()
        total = process_animation_frames([b, a], palette, CanvasState(), None, rec)
        assert [name for name, _ in rec.files] == [
            "frame-001-frame1.txt",
            "frame-002-frame2.txt",
        ]
        assert _points(rec.files[0][1]) == {(5, 5): 2}
        assert _points(rec.files[1][1]) == {(5, 5): 3}
        assert total == 2

    def test_first_frame_diffed_against_canvas(self, make_image, palette):
        canvas = CanvasState({(0, 0): 0, (1, 0): 1})
        frame = AnimationFrame(
            "f1.png", make_image({(0, 0): "#ff0000", (1, 0): "#ff0000"})
        )
        rec = Recorder()
        process_animation_frames([frame], palette, canvas, None, rec)
        assert _points(rec.files[0][1]) == {(1, 0): 0}

    def test_callers_canvas_untouched_and_runs_independent(self, make_image, palette):
        canvas = CanvasState({(2, 2): 1})
        frames = [AnimationFrame("f1.png", make_image({(2, 2): "#ff0000"}))]
        first, second = Recorder(), Recorder()
        process_animation_frames(frames, palette, canvas, None, first)
        process_animation_frames(frames, palette, canvas, None, second)
        assert canvas == CanvasState({(2, 2): 1})
        assert first.files == second.files

    def test_progress_reported_before_each_frame(self, make_image, palette):
        events = []
        frames = [
            AnimationFrame(f"f{i}.png", make_image({(i, 0): "#ff0000"}))
            for i in (3, 1, 2)
        ]

        def on_progress(i, n):
            events.append(("progress", i, n))

        def emit(name, _content):
            events.append(("emit", name))

        total = process_animation_frames(
            frames, palette, CanvasState(), on_progress, emit
        )
        assert events == [
            ("progress", 1, 3),
            ("emit", "frame-001-f1.txt"),
            ("progress", 2, 3),
            ("emit", "frame-002-f2.txt"),
            ("progress", 3, 3),
            ("emit", "frame-003-f3.txt"),
        ]
        assert total == 3

    def test_failure_aborts_remaining_frames(self, make_image, palette):
        good = AnimationFrame(
            "f1.png", make_image({(0, 0): "#ff0000", (1, 0): "#00ff00"})
        )
        bad = AnimationFrame("f2.png", np.zeros((2, 2, 3), dtype=np.uint8))
        never = AnimationFrame("f3.png", make_image({(4, 4): "#ff0000"}))
        rec = Recorder()
        with pytest.raises(FrameSequenceError) as info:
            process_animation_frames(
                [never, bad, good], palette, CanvasState(), None, rec
            )
        assert [name for name, _ in rec.files] == ["frame-001-f1.txt"]
        assert info.value.frame_name == "f2.png"
        assert info.value.completed_frames == 1
        assert info.value.total_pixels == 2
        assert isinstance(info.value.__cause__, TypeError)

    def test_empty_batch(self, palette):
        rec = Recorder()
        assert process_animation_frames([], palette, CanvasState(), None, rec) == 0
        assert rec.files == []

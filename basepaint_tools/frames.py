# basepaint_tools/frames.py
from __future__ import annotations

"""
Animation frames: natural ordering and frame-over-frame stroke diffs.

Each frame is diffed against a rolling snapshot of the canvas that starts as a
copy of the fetched canvas state and absorbs every frame's strokes, so a frame
only carries the pixels that changed since the previous one. Frames run
strictly in order; the snapshot is owned by one call and never shared.
"""

import re
from functools import cmp_to_key
from typing import Iterable, List, Optional

from .canvas_state import CanvasState
from .core_types import AnimationFrame, EmitCallback, Palette, ProgressCallback
from .errors import FrameSequenceError
from .palette_index import build_palette_index
from .strokes import extract_strokes_filtered, strokes_to_json
from .utils import debug_log

_DIGITS = re.compile(r"\d+")
_EXTENSION = re.compile(r"\.[^/.]+$")


# Ordering


def numeric_tokens(name: str) -> List[int]:
    """Digit runs of name, left to right: 'f10_b3' -> [10, 3]."""
    return [int(m) for m in _DIGITS.findall(name)]


def compare_frame_names(a: str, b: str) -> int:
    """
    Three-way comparator: numeric tokens position by position (missing == 0),
    then the full name lexicographically.
    """
    nums_a = numeric_tokens(a)
    nums_b = numeric_tokens(b)
    for i in range(max(len(nums_a), len(nums_b))):
        na = nums_a[i] if i < len(nums_a) else 0
        nb = nums_b[i] if i < len(nums_b) else 0
        if na != nb:
            return -1 if na < nb else 1
    if a == b:
        return 0
    return -1 if a < b else 1


def sort_frame_names(names: Iterable[str]) -> List[str]:
    return sorted(names, key=cmp_to_key(compare_frame_names))


def sort_frames(frames: Iterable[AnimationFrame]) -> List[AnimationFrame]:
    """New list in natural name order; the input is not reordered."""
    return sorted(
        frames, key=cmp_to_key(lambda fa, fb: compare_frame_names(fa.name, fb.name))
    )


def frame_filename(position: int, name: str) -> str:
    """'frame-007-walk.txt' for 1-based position 7 and name 'walk.png'."""
    stem = _EXTENSION.sub("", name)
    return f"frame-{position:03d}-{stem}.txt"


# Processing


def process_animation_frames(
    frames: Iterable[AnimationFrame],
    palette: Palette,
    canvas_state: CanvasState,
    on_progress: Optional[ProgressCallback],
    emit: EmitCallback,
    debug: bool = False,
) -> int:
    """
    Diff frames in natural order and emit one stroke list per frame.

    For frame i (1-based) of n:
      on_progress(i, n) -> strokes vs rolling snapshot -> apply to snapshot
      -> add to running total -> emit(frame_filename(i, name), json)

    Returns the total number of strokes emitted. canvas_state is not
    modified. If a frame fails, FrameSequenceError is raised (chained) and the
    remaining frames are skipped; frames already emitted stay emitted.
    """
    ordered = sort_frames(frames)
    index = build_palette_index(palette)
    rolling = canvas_state.copy()
    total_pixels = 0
    n = len(ordered)

    for i, frame in enumerate(ordered, start=1):
        if on_progress is not None:
            on_progress(i, n)
        try:
            strokes = extract_strokes_filtered(frame.image, index, rolling)
        except Exception as exc:
            raise FrameSequenceError(frame.name, i - 1, total_pixels) from exc
        rolling.apply(strokes)
        total_pixels += len(strokes)
        if debug:
            debug_log(f"{frame.name}: {len(strokes):,} changed pixels")
        emit(frame_filename(i, frame.name), strokes_to_json(strokes))

    return total_pixels


__all__ = [
    "numeric_tokens",
    "compare_frame_names",
    "sort_frame_names",
    "sort_frames",
    "frame_filename",
    "process_animation_frames",
]

# basepaint_tools/__init__.py
"""
basepaint_tools package.

Purpose:
  Turn images into palette-indexed stroke lists for the BasePaint canvas. See
  basepaint.py for the CLI.

Public API:
  PaletteIndex              : exact colour -> palette index lookup.
  CanvasState               : sparse (x, y) -> palette index of painted pixels.
  build_canvas_state        : sample a canvas image into a CanvasState.
  extract_strokes           : image -> ordered stroke list.
  extract_strokes_filtered  : same, minus pixels the canvas already shows.
  process_animation_frames  : frame-over-frame stroke diffs.
  extract_palette           : image colours, most frequent first.
  replace_colours           : exact colour replacement.
  remote                    : day numbering, theme and canvas fetches.

Quick start:
  from basepaint_tools import build_canvas_state, extract_strokes_filtered
  from basepaint_tools.image_io import load_image
"""

__version__ = "0.2.0"

# Re-export namespaces for convenience.
from . import core_types
from . import image_io
from . import utils
from . import remote

from .canvas_state import CanvasState, build_canvas_state  # noqa: E402,F401
from .colour_replace import extract_palette, replace_colours  # noqa: E402,F401
from .core_types import AnimationFrame, PixelStroke, Theme  # noqa: E402,F401
from .frames import process_animation_frames, sort_frames  # noqa: E402,F401
from .palette_index import PaletteIndex  # noqa: E402,F401
from .strokes import extract_strokes, extract_strokes_filtered  # noqa: E402,F401

__all__ = [
    "__version__",
    "core_types",
    "image_io",
    "utils",
    "remote",
    "PaletteIndex",
    "CanvasState",
    "build_canvas_state",
    "PixelStroke",
    "AnimationFrame",
    "Theme",
    "extract_strokes",
    "extract_strokes_filtered",
    "process_animation_frames",
    "sort_frames",
    "extract_palette",
    "replace_colours",
]

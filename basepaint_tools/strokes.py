# basepaint_tools/strokes.py
from __future__ import annotations

"""
Image -> stroke list conversion.

Purpose:
  Turn an RGBA image into ordered PixelStroke edits (row-major, y outer, x
  inner), optionally dropping pixels the canvas already shows in the same
  palette colour. Also serialises stroke lists and splits them into sections
  for submission in batches.

Exports:
  extract_strokes(image, palette) -> List[PixelStroke]
  extract_strokes_filtered(image, palette, canvas_state) -> List[PixelStroke]
  strokes_to_json / strokes_from_json
  split_strokes(strokes, size) -> List[List[PixelStroke]]
  section_filename / info_filename / info_text
  render_strokes(strokes, palette) -> U8Image

Notes:
  Images of any size are accepted here; canvas size checks belong to callers.
  Pixels at or below the alpha cutoff and colours outside the palette are
  skipped, never reported.
"""

import json
from typing import Iterable, List, Optional, Sequence, Tuple

import numpy as np

from .canvas_state import CanvasState, opaque_mask
from .constants import CANVAS_SIZE, NOT_FOUND
from .core_types import (
    Palette,
    PixelStroke,
    U8Image,
    assert_u8_image_rgba,
    hex_list_to_u8_rgb_array,
)
from .palette_index import build_palette_index


def _classified_pixels(
    image: U8Image, palette: Palette
) -> Tuple[List[int], List[int], List[int]]:
    """Row-major (xs, ys, colours) of painted pixels whose colour is in the palette."""
    rgba = assert_u8_image_rgba(image)
    index = build_palette_index(palette)
    colours = index.classify_pixels(rgba[..., :3])
    keep = opaque_mask(rgba[..., 3]) & (colours != NOT_FOUND)
    ys, xs = np.nonzero(keep)
    return xs.tolist(), ys.tolist(), colours[ys, xs].tolist()


def extract_strokes(image: U8Image, palette: Palette) -> List[PixelStroke]:
    """Every painted, palette-matching pixel of the image as a stroke."""
    xs, ys, colours = _classified_pixels(image, palette)
    return [PixelStroke(x, y, c) for x, y, c in zip(xs, ys, colours)]


def extract_strokes_filtered(
    image: U8Image, palette: Palette, canvas_state: CanvasState
) -> List[PixelStroke]:
    """
    Like extract_strokes(), but only pixels whose coordinate is unpainted in
    canvas_state or painted with a different palette index.
    """
    xs, ys, colours = _classified_pixels(image, palette)
    out: List[PixelStroke] = []
    for x, y, c in zip(xs, ys, colours):
        current = canvas_state.get((x, y))
        if current is None or current != c:
            out.append(PixelStroke(x, y, c))
    return out


# Serialisation


def strokes_to_json(strokes: Iterable[PixelStroke]) -> str:
    """JSON array of {"point": {"x", "y"}, "color"} in emission order."""
    return json.dumps([s.to_json_obj() for s in strokes], separators=(",", ":"))


def strokes_from_json(text: str) -> List[PixelStroke]:
    try:
        data = json.loads(text)
    except json.JSONDecodeError as exc:
        raise ValueError(f"stroke list is not valid JSON: {exc}") from exc
    if not isinstance(data, list):
        raise ValueError("stroke list must be a JSON array")
    return [PixelStroke.from_json_obj(obj) for obj in data]


# Sections


def split_strokes(
    strokes: Sequence[PixelStroke], size: int
) -> List[List[PixelStroke]]:
    """Consecutive chunks of at most `size` strokes, order preserved."""
    if not isinstance(size, int) or isinstance(size, bool) or size < 1:
        raise ValueError("Please enter a valid number (minimum 1)")
    return [list(strokes[i : i + size]) for i in range(0, len(strokes), size)]


def section_filename(position: int, total: int) -> str:
    """'section-003-of-12.txt' for the 1-based position."""
    return f"section-{position:03d}-of-{total}.txt"


def info_filename(day: int) -> str:
    return f"info-{day}.txt"


def info_text(
    total_sections: int,
    per_section: int,
    total_pixels: int,
    day: int,
    theme: Optional[str],
) -> str:
    """Summary written next to the section files."""
    return (
        f"Total sections: {total_sections}\n"
        f"Pixels per section: {per_section}\n"
        f"Total pixels: {total_pixels}\n"
        f"\n"
        f"Canvas: {day} - {theme or '?'}"
    )


# Preview


def render_strokes(
    strokes: Iterable[PixelStroke], palette: Palette, size: int = CANVAS_SIZE
) -> U8Image:
    """
    Paint strokes onto a transparent size x size RGBA image.
    Strokes outside the canvas or with an unknown colour index are ignored.
    """
    pal_rgb = hex_list_to_u8_rgb_array(list(palette))
    out = np.zeros((size, size, 4), dtype=np.uint8)
    for s in strokes:
        if 0 <= s.x < size and 0 <= s.y < size and 0 <= s.color < len(pal_rgb):
            out[s.y, s.x, :3] = pal_rgb[s.color]
            out[s.y, s.x, 3] = 255
    return out


__all__ = [
    "extract_strokes",
    "extract_strokes_filtered",
    "strokes_to_json",
    "strokes_from_json",
    "split_strokes",
    "section_filename",
    "info_filename",
    "info_text",
    "render_strokes",
]

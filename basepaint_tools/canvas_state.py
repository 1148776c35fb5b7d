# basepaint_tools/canvas_state.py
from __future__ import annotations

"""
Sparse "already painted" canvas state.

CanvasState maps (x, y) -> palette index for painted, classifiable pixels only.
It is built once per session from a reference image of the canvas and cloned
whenever a caller needs a snapshot it can mutate on its own.
"""

from typing import Dict, Iterable, Iterator, Optional, Tuple

import numpy as np

from .constants import ALPHA_CUTOFF, CANVAS_SIZE, NOT_FOUND
from .core_types import (
    Coord,
    Palette,
    PixelStroke,
    U8Image,
    U8Mask,
    assert_u8_image_rgba,
)
from .image_io import resize_nearest
from .palette_index import build_palette_index


def opaque_mask(alpha: U8Mask) -> np.ndarray:
    """Boolean mask of painted pixels: alpha strictly above ALPHA_CUTOFF."""
    return np.asarray(alpha, dtype=np.uint8) > np.uint8(ALPHA_CUTOFF)


class CanvasState:
    """Mapping from coordinate to palette index. Missing key == not painted."""

    __slots__ = ("_pixels",)

    def __init__(self, pixels: Optional[Dict[Coord, int]] = None) -> None:
        self._pixels: Dict[Coord, int] = dict(pixels) if pixels else {}

    def __len__(self) -> int:
        return len(self._pixels)

    def __contains__(self, point: object) -> bool:
        return point in self._pixels

    def __iter__(self) -> Iterator[Coord]:
        return iter(self._pixels)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, CanvasState):
            return NotImplemented
        return self._pixels == other._pixels

    def __repr__(self) -> str:
        return f"CanvasState({len(self._pixels)} painted)"

    def get(self, point: Coord, default: Optional[int] = None) -> Optional[int]:
        return self._pixels.get(point, default)

    def set(self, point: Coord, color: int) -> None:
        self._pixels[point] = color

    def items(self) -> Iterable[Tuple[Coord, int]]:
        return self._pixels.items()

    def copy(self) -> "CanvasState":
        """Independent snapshot; mutating it leaves this state untouched."""
        return CanvasState(self._pixels)

    def apply(self, strokes: Iterable[PixelStroke]) -> None:
        """Record each stroke's colour at its coordinate, in order."""
        for s in strokes:
            self._pixels[(s.x, s.y)] = s.color


def build_canvas_state(
    image: U8Image, palette: Palette, size: int = CANVAS_SIZE
) -> CanvasState:
    """
    Sample a canvas image into a CanvasState.

    The image is resized to size x size with nearest-neighbour only when its
    dimensions differ. Pixels at or below the alpha cutoff and colours outside
    the palette are skipped.
    """
    rgba = resize_nearest(assert_u8_image_rgba(image), size)
    index = build_palette_index(palette)

    colours = index.classify_pixels(rgba[..., :3])
    keep = opaque_mask(rgba[..., 3]) & (colours != NOT_FOUND)

    # np.nonzero walks row-major: y outer, x inner.
    ys, xs = np.nonzero(keep)
    pixels: Dict[Coord, int] = {
        (x, y): c
        for x, y, c in zip(xs.tolist(), ys.tolist(), colours[ys, xs].tolist())
    }
    return CanvasState(pixels)


__all__ = ["CanvasState", "build_canvas_state", "opaque_mask"]

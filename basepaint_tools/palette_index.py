# basepaint_tools/palette_index.py
from __future__ import annotations

"""
Exact-match palette lookup.

PaletteIndex maps each colour's canonical '#rrggbb' form to the position of its
first occurrence. Matching is exact: there is no nearest-colour fallback, so a
pixel is either a palette colour or a miss (NOT_FOUND).

Build once per conversion and reuse for every pixel of the image.
"""

from typing import Dict, Iterator, List

import numpy as np
from numpy.typing import NDArray

from .constants import NOT_FOUND
from .core_types import HexStr, IndexMap, Palette, normalise_hex, pack_rgb, rgb_to_hex


class PaletteIndex:
    """Colour -> first palette index, with scalar and whole-image classification."""

    def __init__(self, palette: Palette) -> None:
        colours: List[HexStr] = [normalise_hex(hx) for hx in palette]
        lookup: Dict[HexStr, int] = {}
        for i, hx in enumerate(colours):
            # first occurrence wins for duplicated colours
            lookup.setdefault(hx, i)

        self._colours = colours
        self._lookup = lookup

        # Sorted packed keys for vectorised lookup of whole images.
        if lookup:
            keys = np.array(
                [int(hx[1:], 16) for hx in lookup.keys()], dtype=np.uint32
            )
            values = np.array(list(lookup.values()), dtype=np.int32)
            order = np.argsort(keys, kind="stable")
            self._keys: NDArray[np.uint32] = keys[order]
            self._values: NDArray[np.int32] = values[order]
        else:
            self._keys = np.zeros((0,), dtype=np.uint32)
            self._values = np.zeros((0,), dtype=np.int32)

    def __len__(self) -> int:
        return len(self._colours)

    def __iter__(self) -> Iterator[HexStr]:
        return iter(self._colours)

    def __getitem__(self, index: int) -> HexStr:
        return self._colours[index]

    @property
    def colours(self) -> List[HexStr]:
        return list(self._colours)

    def classify(self, r: int, g: int, b: int) -> int:
        """Palette index of (r, g, b), or NOT_FOUND."""
        return self._lookup.get(rgb_to_hex((r, g, b)), NOT_FOUND)

    def classify_hex(self, hex_str: str) -> int:
        """Palette index of a hex colour (any case, with or without '#')."""
        return self._lookup.get(normalise_hex(hex_str), NOT_FOUND)

    def classify_pixels(self, rgb: np.ndarray) -> IndexMap:
        """
        Classify every pixel of an (H, W, 3+) uint8 array.

        Returns an int32 (H, W) array holding the palette index per pixel, or
        NOT_FOUND where the colour is not in the palette.
        """
        keys = pack_rgb(np.asarray(rgb)[..., :3])
        if self._keys.size == 0:
            return np.full(keys.shape, NOT_FOUND, dtype=np.int32)
        pos = np.searchsorted(self._keys, keys)
        pos = np.minimum(pos, self._keys.size - 1)
        hit = self._keys[pos] == keys
        return np.where(hit, self._values[pos], NOT_FOUND).astype(np.int32)


def build_palette_index(palette: Palette) -> PaletteIndex:
    """Accept a PaletteIndex or a hex sequence; build the lookup only when needed."""
    if isinstance(palette, PaletteIndex):
        return palette
    return PaletteIndex(palette)


__all__ = ["PaletteIndex", "build_palette_index"]

# basepaint_tools/colour_replace.py
from __future__ import annotations

from typing import Dict, List, Tuple

import numpy as np

from .core_types import (
    ColourMap,
    HexStr,
    RGBTuple,
    U8Image,
    assert_u8_image_rgba,
    hex_to_rgb,
    normalise_hex,
    pack_rgb,
)
from .image_io import encode_png

"""
Colour listing and exact colour replacement for visible pixels (alpha > 0).

- extract_palette(image) -> ["#rrggbb", ...] most frequent first
- replace_colours(image, colour_map) -> new RGBA array
- replace_colours_png(image, colour_map) -> PNG bytes
"""


def colour_counts(image: U8Image) -> List[Tuple[HexStr, int]]:
    """
    (hex, count) for every colour of a visible pixel, sorted by count
    descending. Equal counts keep row-major discovery order.
    """
    rgba = assert_u8_image_rgba(image)
    visible = rgba[..., 3] > 0
    if not np.any(visible):
        return []
    keys = pack_rgb(rgba[visible][:, :3])
    uniq, first_idx, counts = np.unique(keys, return_index=True, return_counts=True)
    # primary: -count, secondary: first appearance
    order = np.lexsort((first_idx, -counts.astype(np.int64)))
    return [(f"#{int(uniq[i]):06x}", int(counts[i])) for i in order]


def extract_palette(image: U8Image) -> List[HexStr]:
    return [hx for hx, _n in colour_counts(image)]


def _parse_colour_map(colour_map: ColourMap) -> Dict[int, RGBTuple]:
    parsed: Dict[int, RGBTuple] = {}
    for old, new in colour_map.items():
        old_rgb = hex_to_rgb(old)
        key = (old_rgb[0] << 16) | (old_rgb[1] << 8) | old_rgb[2]
        parsed[key] = hex_to_rgb(new)
    return parsed


def replace_colours(image: U8Image, colour_map: ColourMap) -> U8Image:
    """
    Copy of image with each visible pixel whose colour is a key of colour_map
    recoloured to the mapped value. Alpha is untouched. Entries do not chain:
    every pixel is matched against its original colour.
    """
    rgba = assert_u8_image_rgba(image)
    lookup = _parse_colour_map(colour_map)
    out = rgba.copy()
    if not lookup:
        return out

    visible = rgba[..., 3] > 0
    keys = pack_rgb(rgba[..., :3])
    for key, rgb in lookup.items():
        hit = visible & (keys == key)
        if np.any(hit):
            out[hit, :3] = rgb
    return out


def replace_colours_png(image: U8Image, colour_map: ColourMap) -> bytes:
    """replace_colours() encoded as PNG."""
    return encode_png(replace_colours(image, colour_map))


def parse_colour_pairs(pairs: List[str]) -> Dict[HexStr, HexStr]:
    """Parse CLI 'old=new' items into a canonical colour map."""
    out: Dict[HexStr, HexStr] = {}
    for item in pairs:
        old, sep, new = item.partition("=")
        if not sep:
            raise ValueError(f"expected OLD=NEW colour pair, got {item!r}")
        out[normalise_hex(old)] = normalise_hex(new)
    return out


__all__ = [
    "colour_counts",
    "extract_palette",
    "replace_colours",
    "replace_colours_png",
    "parse_colour_pairs",
]

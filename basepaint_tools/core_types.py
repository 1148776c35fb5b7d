# basepaint_tools/core_types.py
from __future__ import annotations

"""
Core type aliases, small value objects, and lightweight helpers.
"""

from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Mapping, Sequence, Tuple

import numpy as np
from numpy.typing import NDArray

# Basic aliases

RGBTuple = Tuple[int, int, int]
HexStr = str
Coord = Tuple[int, int]  # (x, y)

U8Image = NDArray[np.uint8]  # (H, W, 4) RGBA
U8Mask = NDArray[np.uint8]  # (H, W)
IndexMap = NDArray[np.int32]  # (H, W) palette index or -1

Palette = Sequence[HexStr]
ColourMap = Mapping[HexStr, HexStr]  # "#rrggbb" -> "#rrggbb"

# Value objects


@dataclass(frozen=True)
class PixelStroke:
    """Set canvas position (x, y) to palette index `color`."""

    x: int
    y: int
    color: int

    @property
    def point(self) -> Coord:
        return (self.x, self.y)

    def to_json_obj(self) -> Dict[str, Any]:
        return {"point": {"x": self.x, "y": self.y}, "color": self.color}

    @classmethod
    def from_json_obj(cls, obj: Mapping[str, Any]) -> "PixelStroke":
        try:
            point = obj["point"]
            return cls(int(point["x"]), int(point["y"]), int(obj["color"]))
        except (KeyError, TypeError) as exc:
            raise ValueError(f"malformed stroke record: {obj!r}") from exc


@dataclass(frozen=True)
class AnimationFrame:
    """Decoded frame plus the display name used for ordering."""

    name: str
    image: U8Image = field(repr=False, compare=False)


@dataclass(frozen=True)
class Theme:
    """Palette and label for one canvas day."""

    day: int
    theme: str
    palette: Tuple[HexStr, ...]


# Small helpers


def rgb_to_hex(rgb: Sequence[int]) -> HexStr:
    """RGB triplet to lowercase hex string '#rrggbb'."""
    return f"#{int(rgb[0]):02x}{int(rgb[1]):02x}{int(rgb[2]):02x}"


def normalise_hex(hex_str: str) -> HexStr:
    """
    Canonicalise '#rrggbb' or 'rrggbb' (case-insensitive) to '#rrggbb'.
    Raises ValueError for anything else.
    """
    if not isinstance(hex_str, str):
        raise ValueError(f"hex colour must be a string, got {type(hex_str).__name__}")
    s = hex_str.strip().lower()
    if s.startswith("#"):
        s = s[1:]
    if len(s) != 6 or any(c not in "0123456789abcdef" for c in s):
        raise ValueError(f"malformed hex colour: {hex_str!r}")
    return f"#{s}"


def hex_to_rgb(hex_str: str) -> RGBTuple:
    """Parse '#rrggbb' or 'rrggbb' (case-insensitive) into an RGB tuple."""
    s = normalise_hex(hex_str)
    return (int(s[1:3], 16), int(s[3:5], 16), int(s[5:7], 16))


def pack_rgb(rgb: NDArray[np.generic]) -> NDArray[np.uint32]:
    """Pack (..., 3) uint8 RGB rows into (...) uint32 keys 0xRRGGBB."""
    arr = np.asarray(rgb)
    return (
        (arr[..., 0].astype(np.uint32) << 16)
        | (arr[..., 1].astype(np.uint32) << 8)
        | arr[..., 2].astype(np.uint32)
    )


def hex_list_to_u8_rgb_array(hex_list: Sequence[str]) -> NDArray[np.uint8]:
    """Convert a sequence of hex strings to a (N,3) uint8 array."""
    out = np.empty((len(hex_list), 3), dtype=np.uint8)
    for i, hx in enumerate(hex_list):
        out[i] = hex_to_rgb(hx)
    return out


def assert_u8_image_rgba(image: np.ndarray) -> U8Image:
    """Validate a uint8 (H,W,4) image and return it typed as U8Image."""
    if image.dtype != np.uint8 or image.ndim != 3 or image.shape[-1] != 4:
        raise TypeError("expected uint8 (H,W,4) RGBA image")
    return image  # type: ignore[return-value]


# Callable signatures

ProgressCallback = Callable[[int, int], None]  # (1-based index, total)
EmitCallback = Callable[[str, str], None]  # (filename, content)

__all__ = [
    # aliases / types
    "RGBTuple",
    "HexStr",
    "Coord",
    "U8Image",
    "U8Mask",
    "IndexMap",
    "Palette",
    "ColourMap",
    # value objects
    "PixelStroke",
    "AnimationFrame",
    "Theme",
    # helpers
    "rgb_to_hex",
    "normalise_hex",
    "hex_to_rgb",
    "pack_rgb",
    "hex_list_to_u8_rgb_array",
    "assert_u8_image_rgba",
    # callable signatures
    "ProgressCallback",
    "EmitCallback",
]

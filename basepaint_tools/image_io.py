# basepaint_tools/image_io.py
from __future__ import annotations

import io
from pathlib import Path
from typing import Union

import numpy as np
from PIL import Image, ImageOps, UnidentifiedImageError

from .constants import CANVAS_SIZE, SWATCH_SQUARE
from .core_types import Palette, U8Image, assert_u8_image_rgba, hex_list_to_u8_rgb_array
from .errors import DecodeError, SizeMismatchError

"""
Image I/O helpers (RGBA uint8 arrays), canvas size checks, nearest resize,
PNG encoding and palette swatches.

No colour management is applied on load: pixel values must match palette
entries exactly, so embedded ICC profiles are ignored.
"""


def _to_rgba_array(im: Image.Image) -> U8Image:
    im = ImageOps.exif_transpose(im)
    return np.array(im.convert("RGBA"), dtype=np.uint8)


def decode_image(data: bytes) -> U8Image:
    """Decode image bytes into an (H, W, 4) uint8 RGBA array."""
    try:
        with Image.open(io.BytesIO(data)) as im:
            im.load()
            return _to_rgba_array(im)
    except (UnidentifiedImageError, OSError, ValueError) as exc:
        raise DecodeError(f"Error loading image: {exc}") from exc


def load_image(path: Union[str, Path]) -> U8Image:
    """Load an image file into an (H, W, 4) uint8 RGBA array."""
    try:
        with Image.open(path) as im:
            im.load()
            return _to_rgba_array(im)
    except (UnidentifiedImageError, OSError, ValueError) as exc:
        raise DecodeError(f"Error loading image {Path(path).name}: {exc}") from exc


def validate_canvas_size(image: U8Image, size: int = CANVAS_SIZE) -> U8Image:
    """Raise SizeMismatchError unless the image is size x size."""
    height, width = image.shape[0], image.shape[1]
    if width != size or height != size:
        raise SizeMismatchError(width, height, size)
    return image


def decode_canvas_image(data: bytes) -> U8Image:
    """decode_image() plus the 256x256 size check."""
    return validate_canvas_size(decode_image(data))


def resize_nearest(image: U8Image, size: int = CANVAS_SIZE) -> U8Image:
    """Nearest-neighbour resize to size x size; no-op when already that size."""
    if image.shape[0] == size and image.shape[1] == size:
        return image
    im = Image.fromarray(assert_u8_image_rgba(image))
    im2 = im.resize((size, size), resample=Image.Resampling.NEAREST)
    return np.array(im2, dtype=np.uint8)


def encode_png(image: U8Image) -> bytes:
    """Encode an RGBA array as PNG bytes."""
    buf = io.BytesIO()
    Image.fromarray(np.ascontiguousarray(assert_u8_image_rgba(image))).save(
        buf, format="PNG"
    )
    return buf.getvalue()


def save_png(path: Path, image: U8Image) -> Path:
    if path.suffix.lower() != ".png":
        path = path.with_suffix(".png")
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(encode_png(image))
    return path


def palette_swatch(palette: Palette, square: int = SWATCH_SQUARE) -> U8Image:
    """Horizontal strip with one square x square block per palette colour, in order."""
    if square < 1:
        raise ValueError("swatch square must be >= 1")
    rgb = hex_list_to_u8_rgb_array(list(palette))
    out = np.zeros((square, square * len(rgb), 4), dtype=np.uint8)
    for i, row in enumerate(rgb):
        out[:, i * square : (i + 1) * square, :3] = row
        out[:, i * square : (i + 1) * square, 3] = 255
    return out


__all__ = [
    "decode_image",
    "load_image",
    "validate_canvas_size",
    "decode_canvas_image",
    "resize_nearest",
    "encode_png",
    "save_png",
    "palette_swatch",
]

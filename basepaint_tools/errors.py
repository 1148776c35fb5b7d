# basepaint_tools/errors.py
from __future__ import annotations

"""
Exception types raised at the collaborator boundaries.

Validation of colours, split sizes and colour maps raises plain ValueError,
classification misses are never errors.
"""


class BasepaintError(Exception):
    """Base class for errors surfaced to the CLI as a one-line message."""


class DecodeError(BasepaintError, ValueError):
    """Bytes or file are not a readable image."""


class SizeMismatchError(DecodeError):
    """Image is not the canonical canvas size."""

    def __init__(self, width: int, height: int, expected: int) -> None:
        super().__init__(
            f"The image must be {expected}x{expected}px (got {width}x{height})"
        )
        self.width = width
        self.height = height
        self.expected = expected


class FetchError(BasepaintError, RuntimeError):
    """Remote theme or canvas could not be fetched."""

    def __init__(self, url: str, reason: str) -> None:
        super().__init__(f"fetch failed for {url}: {reason}")
        self.url = url
        self.reason = reason


class FrameSequenceError(BasepaintError, RuntimeError):
    """A frame failed mid-sequence. Earlier frames were already emitted."""

    def __init__(
        self, frame_name: str, completed_frames: int, total_pixels: int
    ) -> None:
        super().__init__(
            f"frame {frame_name!r} failed after {completed_frames} completed frame(s)"
        )
        self.frame_name = frame_name
        self.completed_frames = completed_frames
        self.total_pixels = total_pixels


__all__ = [
    "BasepaintError",
    "DecodeError",
    "SizeMismatchError",
    "FetchError",
    "FrameSequenceError",
]

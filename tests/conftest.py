import numpy as np
import pytest

RED = "#ff0000"
GREEN = "#00ff00"
BLUE = "#0000ff"
WHITE = "#ffffff"


def paint(image, x, y, hex_str, alpha=255):
    """Set one pixel of an RGBA array from a hex colour."""
    s = hex_str.lstrip("#")
    image[y, x] = (int(s[0:2], 16), int(s[2:4], 16), int(s[4:6], 16), alpha)
    return image


def blank(width=8, height=8):
    return np.zeros((height, width, 4), dtype=np.uint8)


@pytest.fixture
def palette():
    return [RED, GREEN, BLUE, WHITE]


@pytest.fixture
def make_image():
    """Factory: make_image({(x, y): hex or (hex, alpha)}, width, height)."""

    def _make(pixels, width=8, height=8):
        img = blank(width, height)
        for (x, y), value in pixels.items():
            if isinstance(value, tuple):
                paint(img, x, y, value[0], value[1])
            else:
                paint(img, x, y, value)
        return img

    return _make

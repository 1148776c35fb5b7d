# basepaint_tools/constants.py
"""
Canvas geometry, thresholds, and service endpoints used across the project.

- CANVAS_SIZE, ALPHA_CUTOFF
- EPOCH_UTC for day numbering
- THEME_URL / CANVAS_URL / PROXY_URL templates
- Artifact defaults (section size, swatch square)
"""
from __future__ import annotations

from datetime import datetime, timezone

# =========================
# Canvas
# =========================
CANVAS_SIZE: int = 256

# Alpha at or below this is "not painted". 127 is excluded, 128 is included.
ALPHA_CUTOFF: int = 127

# Palette lookup miss.
NOT_FOUND: int = -1

# =========================
# Day numbering
# =========================
EPOCH_UTC: datetime = datetime(2023, 8, 8, 16, 41, 5, tzinfo=timezone.utc)
SECONDS_PER_DAY: int = 24 * 60 * 60

# =========================
# Remote service
# =========================
THEME_URL: str = "https://basepaint.xyz/api/theme/{day}"
CANVAS_URL: str = "https://basepaint.xyz/api/art/image?day={day}&scale=1"
PROXY_URL: str = "https://api.codetabs.com/v1/proxy/?quest={url}"
HTTP_TIMEOUT_S: float = 30.0

# =========================
# Artifacts
# =========================
DEFAULT_SECTION_SIZE: int = 1000
SWATCH_SQUARE: int = 50
FRAME_EXTS = {".png", ".gif", ".jpg", ".jpeg", ".webp", ".bmp"}

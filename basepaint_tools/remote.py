# basepaint_tools/remote.py
from __future__ import annotations

"""
BasePaint service access: day numbering, theme/palette and canvas image.

Every fetch is a single attempt. Failures surface as FetchError; nothing here
retries. fetch_with_fallback() is the one wrapper that, when a caller asks for
it, repeats a failed direct request once through the public CORS proxy.
"""

from datetime import datetime, timezone
from typing import Any, Callable, Mapping, Optional
from urllib.parse import quote

import requests

from .canvas_state import CanvasState, build_canvas_state
from .constants import (
    CANVAS_URL,
    EPOCH_UTC,
    HTTP_TIMEOUT_S,
    PROXY_URL,
    SECONDS_PER_DAY,
    THEME_URL,
)
from .core_types import Palette, Theme, normalise_hex
from .errors import FetchError
from .image_io import decode_image

Fetcher = Callable[[str], requests.Response]


def day_index(now: Optional[datetime] = None) -> int:
    """Whole days elapsed since the BasePaint epoch. Naive datetimes are UTC."""
    if now is None:
        now = datetime.now(timezone.utc)
    elif now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)
    elapsed = (now - EPOCH_UTC).total_seconds()
    if elapsed < 0:
        raise ValueError(f"{now.isoformat()} is before the first canvas day")
    return int(elapsed // SECONDS_PER_DAY)


def proxy_url(url: str) -> str:
    return PROXY_URL.format(url=quote(url, safe=""))


def fetch_direct(
    url: str, session: Optional[requests.Session] = None
) -> requests.Response:
    """One GET. Transport errors and non-2xx statuses raise FetchError."""
    getter = session.get if session is not None else requests.get
    try:
        res = getter(
            url, timeout=HTTP_TIMEOUT_S, headers={"Cache-Control": "no-store"}
        )
    except requests.RequestException as exc:
        raise FetchError(url, str(exc)) from exc
    if not res.ok:
        raise FetchError(url, f"HTTP {res.status_code}")
    return res


def fetch_with_fallback(
    url: str, session: Optional[requests.Session] = None
) -> requests.Response:
    """fetch_direct(url), and on failure one attempt through the proxy."""
    try:
        return fetch_direct(url, session)
    except FetchError as direct_exc:
        try:
            return fetch_direct(proxy_url(url), session)
        except FetchError as proxy_exc:
            raise FetchError(
                url, f"{direct_exc.reason}; via proxy: {proxy_exc.reason}"
            ) from proxy_exc


def parse_theme(day: int, payload: Any) -> Theme:
    """Validate a theme JSON payload: {"theme": str, "palette": [hex, ...], ...}."""
    if not isinstance(payload, Mapping):
        raise ValueError("theme payload is not a JSON object")
    palette = payload.get("palette")
    if not isinstance(palette, list) or not palette:
        raise ValueError("theme payload has no palette")
    return Theme(
        day=day,
        theme=str(payload.get("theme", "")),
        palette=tuple(normalise_hex(hx) for hx in palette),
    )


def fetch_theme(day: int, fetch: Fetcher = fetch_direct) -> Theme:
    url = THEME_URL.format(day=day)
    res = fetch(url)
    try:
        return parse_theme(day, res.json())
    except ValueError as exc:
        raise FetchError(url, f"invalid theme payload ({exc})") from exc


def fetch_canvas_image(day: int, fetch: Fetcher = fetch_direct) -> bytes:
    """Raw PNG bytes of the canvas for `day`."""
    return fetch(CANVAS_URL.format(day=day)).content


def fetch_current_canvas_state(
    day: int, palette: Palette, fetch: Fetcher = fetch_direct
) -> CanvasState:
    """Fetch, decode and sample the canvas for `day` into a CanvasState."""
    return build_canvas_state(decode_image(fetch_canvas_image(day, fetch)), palette)


__all__ = [
    "Fetcher",
    "day_index",
    "proxy_url",
    "fetch_direct",
    "fetch_with_fallback",
    "parse_theme",
    "fetch_theme",
    "fetch_canvas_image",
    "fetch_current_canvas_state",
]

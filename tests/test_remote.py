"""
Tests for day numbering and the remote fetch wrappers (network stubbed).
"""

import io
import json
from datetime import datetime, timedelta, timezone

import pytest
import requests
from PIL import Image

from basepaint_tools.constants import EPOCH_UTC
from basepaint_tools.errors import FetchError
from basepaint_tools.remote import (
    day_index,
    fetch_canvas_image,
    fetch_current_canvas_state,
    fetch_direct,
    fetch_theme,
    fetch_with_fallback,
    parse_theme,
    proxy_url,
)


def _response(status=200, body=b""):
    res = requests.Response()
    res.status_code = status
    res._content = body
    return res


class FakeSession:
    """Serves canned responses by URL; records every request."""

    def __init__(self, routes):
        self.routes = routes
        self.calls = []

    def get(self, url, **kwargs):
        self.calls.append(url)
        route = self.routes.get(url)
        if route is None:
            raise requests.ConnectionError(f"no route to {url}")
        return route


class TestDayIndex:
    def test_epoch_is_day_zero(self):
        assert day_index(EPOCH_UTC) == 0
        assert day_index(EPOCH_UTC + timedelta(hours=23, minutes=59)) == 0

    def test_whole_days(self):
        assert day_index(EPOCH_UTC + timedelta(days=812, seconds=1)) == 812
        assert day_index(EPOCH_UTC + timedelta(days=3) - timedelta(seconds=1)) == 2

    def test_naive_datetime_is_utc(self):
        naive = datetime(2023, 8, 10, 16, 41, 5)
        assert day_index(naive) == 2

    def test_other_timezone(self):
        tz = timezone(timedelta(hours=5))
        assert day_index(datetime(2023, 8, 9, 21, 41, 5, tzinfo=tz)) == 1

    def test_before_epoch_rejected(self):
        with pytest.raises(ValueError):
            day_index(EPOCH_UTC - timedelta(seconds=1))


class TestFetch:
    def test_direct_success(self):
        session = FakeSession({"https://x/a": _response(200, b"ok")})
        assert fetch_direct("https://x/a", session).content == b"ok"

    def test_direct_http_error(self):
        session = FakeSession({"https://x/a": _response(404)})
        with pytest.raises(FetchError) as info:
            fetch_direct("https://x/a", session)
        assert "HTTP 404" in str(info.value)
        assert session.calls == ["https://x/a"]

    def test_direct_transport_error_not_retried(self):
        session = FakeSession({})
        with pytest.raises(FetchError):
            fetch_direct("https://x/a", session)
        assert len(session.calls) == 1

    def test_fallback_uses_proxy_once(self):
        url = "https://x/a?b=1"
        session = FakeSession({proxy_url(url): _response(200, b"proxied")})
        assert fetch_with_fallback(url, session).content == b"proxied"
        assert session.calls == [url, proxy_url(url)]

    def test_fallback_failure_is_single_error(self):
        session = FakeSession({})
        with pytest.raises(FetchError) as info:
            fetch_with_fallback("https://x/a", session)
        assert info.value.url == "https://x/a"
        assert len(session.calls) == 2

    def test_proxy_url_quotes_target(self):
        assert proxy_url("https://a/b?c=1&d=2") == (
            "https://api.codetabs.com/v1/proxy/?quest="
            "https%3A%2F%2Fa%2Fb%3Fc%3D1%26d%3D2"
        )


class TestTheme:
    def test_parse_theme(self):
        theme = parse_theme(3, {"theme": "Sea", "palette": ["#FFFFFF", "000000"]})
        assert theme.day == 3
        assert theme.theme == "Sea"
        assert theme.palette == ("#ffffff", "#000000")

    @pytest.mark.parametrize(
        "payload", [[], {"theme": "x"}, {"palette": []}, {"palette": ["#12"]}]
    )
    def test_parse_theme_rejects(self, payload):
        with pytest.raises(ValueError):
            parse_theme(1, payload)

    def test_fetch_theme(self):
        body = json.dumps({"theme": "Sea", "palette": ["#0000ff"], "extra": 1})

        def fetch(url):
            assert url == "https://basepaint.xyz/api/theme/42"
            return _response(200, body.encode())

        assert fetch_theme(42, fetch).palette == ("#0000ff",)

    def test_fetch_theme_bad_payload(self):
        with pytest.raises(FetchError):
            fetch_theme(1, lambda url: _response(200, b'{"theme": "x"}'))


class TestCanvas:
    def test_fetch_canvas_state(self):
        im = Image.new("RGBA", (256, 256), (0, 0, 0, 0))
        im.putpixel((4, 9), (0, 0, 255, 255))
        im.putpixel((5, 9), (1, 2, 3, 255))
        buf = io.BytesIO()
        im.save(buf, format="PNG")

        def fetch(url):
            assert url == "https://basepaint.xyz/api/art/image?day=7&scale=1"
            return _response(200, buf.getvalue())

        state = fetch_current_canvas_state(7, ["#ff0000", "#0000ff"], fetch)
        assert len(state) == 1
        assert state.get((4, 9)) == 1

    def test_canvas_fetch_failure_propagates(self):
        def fetch(url):
            raise FetchError(url, "HTTP 500")

        with pytest.raises(FetchError):
            fetch_canvas_image(7, fetch)

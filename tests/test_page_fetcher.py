from __future__ import annotations

from unittest.mock import patch

import httpx
import pytest

from research_agent.exceptions import FetchError
from research_agent.tools.page_fetcher import PageFetcher

REAL_ASYNC_CLIENT = httpx.AsyncClient


def _patched(handler):
    def factory(*args, **kwargs):
        kwargs["transport"] = httpx.MockTransport(handler)
        return REAL_ASYNC_CLIENT(*args, **kwargs)

    return patch("research_agent.tools.page_fetcher.httpx.AsyncClient", side_effect=factory)


@pytest.mark.asyncio
async def test_fetch_non_success_raises_with_status():
    with _patched(lambda request: httpx.Response(404, text="missing")):
        with pytest.raises(FetchError) as exc_info:
            await PageFetcher().fetch("https://example.com/x")

    assert exc_info.value.status_code == 404
    assert str(exc_info.value) == "HTTP 404"


@pytest.mark.asyncio
async def test_fetch_timeout_has_no_status():
    def handler(request):
        raise httpx.ReadTimeout("slow", request=request)

    with _patched(handler):
        with pytest.raises(FetchError) as exc_info:
            await PageFetcher(timeout=2).fetch("https://example.com/x")

    assert exc_info.value.status_code is None
    assert "timed out after 2s" in str(exc_info.value)


@pytest.mark.asyncio
async def test_fetch_sends_user_agent():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["ua"] = request.headers.get("User-Agent")
        return httpx.Response(200, text="<p>ok</p>")

    with _patched(handler):
        page = await PageFetcher(user_agent="TestAgent/1.0").fetch("https://example.com/x")

    assert seen["ua"] == "TestAgent/1.0"
    assert page.status_code == 200
    assert page.html == "<p>ok</p>"


@pytest.mark.asyncio
async def test_fetch_and_extract_normalizes_and_truncates():
    html = "<html><script>x()</script><p>" + "word " * 50 + "</p></html>"

    with _patched(lambda request: httpx.Response(200, text=html)):
        text = await PageFetcher(max_chars=20).fetch_and_extract("https://example.com/x")

    assert text == ("word " * 50).strip()[:20]
    assert "x()" not in text


@pytest.mark.asyncio
async def test_fetch_and_extract_returns_empty_on_failure():
    with _patched(lambda request: httpx.Response(404)):
        assert await PageFetcher().fetch_and_extract("https://example.com/x") == ""


@pytest.mark.asyncio
async def test_fetch_rejected_url_raises_fetch_error():
    def handler(request):
        raise AssertionError("no request expected")

    with _patched(handler):
        with pytest.raises(FetchError) as exc_info:
            await PageFetcher().fetch("http://exa\u0007mple.com/x")

    assert exc_info.value.status_code is None

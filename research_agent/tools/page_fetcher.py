from __future__ import annotations

from dataclasses import dataclass

import httpx

from research_agent.config import Settings
from research_agent.exceptions import FetchError
from research_agent.services import logger as log_service
from research_agent.tools import text_extractor, web_utils

DEFAULT_USER_AGENT = "ResearchAgent/1.0 (+https://github.com/tedkaczynski-the-bot/research-agent)"
ACCEPT_HEADER = "text/html,application/xhtml+xml,text/plain,*/*"


@dataclass(slots=True)
class FetchedPage:
    url: str
    final_url: str
    status_code: int
    html: str


class PageFetcher:
    """Single-attempt page retrieval with a bounded timeout."""

    def __init__(
        self,
        *,
        timeout: float = 10.0,
        max_chars: int = 10000,
        user_agent: str = DEFAULT_USER_AGENT,
    ):
        self.timeout = timeout
        self.max_chars = max_chars
        self.user_agent = user_agent

    @classmethod
    def from_settings(cls, settings: Settings) -> "PageFetcher":
        return cls(
            timeout=settings.fetch_timeout_seconds,
            max_chars=settings.fetch_max_chars,
            user_agent=settings.user_agent,
        )

    async def fetch(self, url: str) -> FetchedPage:
        """Fetch ``url``; raise FetchError on transport failure or non-2xx."""
        try:
            async with httpx.AsyncClient(timeout=self.timeout, follow_redirects=True) as client:
                response = await client.get(
                    url,
                    headers={
                        "User-Agent": self.user_agent,
                        "Accept": ACCEPT_HEADER,
                    },
                )
        except httpx.TimeoutException as e:
            raise FetchError(f"timed out after {self.timeout:g}s") from e
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            raise FetchError(str(e) or e.__class__.__name__) from e

        if not response.is_success:
            raise FetchError(f"HTTP {response.status_code}", status_code=response.status_code)

        return FetchedPage(
            url=url,
            final_url=str(response.url),
            status_code=response.status_code,
            html=response.text,
        )

    async def fetch_and_extract(self, url: str) -> str:
        """Plain text of ``url`` capped at ``max_chars``; "" means unusable."""
        try:
            page = await self.fetch(url)
        except FetchError as e:
            log_service.log_event(
                event_type="fetch_failed",
                message=f"Fetch failed: {e}",
                level="WARNING",
                url=url,
            )
            return ""
        return web_utils.truncate(text_extractor.normalize(page.html), self.max_chars)

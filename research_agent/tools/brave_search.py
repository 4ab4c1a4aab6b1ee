from __future__ import annotations

from typing import Any

import httpx

from research_agent.config import Settings
from research_agent.models.research import SearchResult
from research_agent.services import logger as log_service

BRAVE_SEARCH_URL = "https://api.search.brave.com/res/v1/web/search"


class BraveSearchClient:
    """Brave web search. Every failure comes back as an empty result list."""

    def __init__(
        self,
        api_key: str,
        *,
        endpoint: str = BRAVE_SEARCH_URL,
        timeout: float = 10.0,
    ):
        self.api_key = api_key.strip()
        self.endpoint = endpoint
        self.timeout = timeout

    @classmethod
    def from_settings(cls, settings: Settings) -> "BraveSearchClient":
        return cls(
            settings.brave_api_key,
            endpoint=settings.brave_search_url,
            timeout=settings.search_timeout_seconds,
        )

    @property
    def enabled(self) -> bool:
        return bool(self.api_key)

    async def search(self, query: str, count: int = 5) -> list[SearchResult]:
        if not self.enabled:
            log_service.log_event(
                event_type="search_unavailable",
                message="BRAVE_API_KEY is not configured; skipping search",
                level="WARNING",
                query=query,
            )
            return []

        params: dict[str, Any] = {"q": query, "count": count}
        try:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                response = await client.get(
                    self.endpoint,
                    params=params,
                    headers={
                        "Accept": "application/json",
                        "X-Subscription-Token": self.api_key,
                    },
                )
                response.raise_for_status()
                payload = response.json()
        except httpx.HTTPStatusError as e:
            log_service.log_event(
                event_type="search_failed",
                message=f"Search returned HTTP {e.response.status_code}",
                level="WARNING",
                query=query,
            )
            return []
        except (httpx.HTTPError, ValueError) as e:
            log_service.log_event(
                event_type="search_failed",
                message="Search request failed",
                level="WARNING",
                query=query,
                error=str(e),
            )
            return []

        return parse_results(payload)[:count]


def parse_results(payload: Any) -> list[SearchResult]:
    """Map a Brave response body to SearchResults, skipping entries without a url."""
    if not isinstance(payload, dict):
        return []
    web = payload.get("web") or {}
    raw_results = web.get("results", []) if isinstance(web, dict) else []

    mapped: list[SearchResult] = []
    for item in raw_results:
        if not isinstance(item, dict):
            continue
        url = item.get("url")
        if not isinstance(url, str) or not url.strip():
            continue
        description = item.get("description", "") or ""
        if not description.strip():
            snippets = item.get("extra_snippets", []) or []
            description = " ".join(s for s in snippets if isinstance(s, str))
        mapped.append(
            SearchResult(
                title=str(item.get("title", "") or ""),
                url=url.strip(),
                description=description.strip(),
            )
        )
    return mapped

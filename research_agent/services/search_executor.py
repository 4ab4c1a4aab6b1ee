from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from typing import Iterable, Protocol, Sequence

from research_agent.models.research import SearchResult, SourceContent
from research_agent.services import logger as log_service
from research_agent.services.query_planner import DepthProfile
from research_agent.tools import web_utils


class SearchClient(Protocol):
    async def search(self, query: str, count: int = 5) -> list[SearchResult]: ...


class Fetcher(Protocol):
    async def fetch_and_extract(self, url: str) -> str: ...


@dataclass(slots=True)
class GatherResult:
    queries: list[str] = field(default_factory=list)
    results: list[SearchResult] = field(default_factory=list)
    sources: list[SourceContent] = field(default_factory=list)


def dedupe_by_url(results: Iterable[SearchResult]) -> list[SearchResult]:
    """One entry per url: the last one seen wins, at the first one's position."""
    by_url: dict[str, SearchResult] = {}
    for item in results:
        by_url[item.url] = item
    return list(by_url.values())


class SearchExecutor:
    """Runs planned queries, merges their hits and fetches the top pages."""

    def __init__(
        self,
        search_client: SearchClient,
        fetcher: Fetcher,
        *,
        results_per_query: int = 5,
        max_parallel: int = 4,
        min_source_chars: int = 200,
    ):
        self.search_client = search_client
        self.fetcher = fetcher
        self.results_per_query = max(int(results_per_query), 1)
        self.max_parallel = max(int(max_parallel), 1)
        self.min_source_chars = max(int(min_source_chars), 0)

    async def search_all(self, queries: Sequence[str]) -> list[SearchResult]:
        """Search every query; merged in query order then rank order."""
        semaphore = asyncio.Semaphore(self.max_parallel)

        async def run_query(query: str) -> list[SearchResult]:
            async with semaphore:
                return await self.search_client.search(query, self.results_per_query)

        per_query = await asyncio.gather(
            *(run_query(query) for query in queries),
            return_exceptions=True,
        )

        merged: list[SearchResult] = []
        for query, item in zip(queries, per_query):
            if isinstance(item, BaseException):
                log_service.log_event(
                    event_type="search_failed",
                    message="Search raised unexpectedly",
                    level="WARNING",
                    query=query,
                    error=str(item),
                )
                continue
            merged.extend(item)
        return merged

    async def fetch_sources(self, results: Sequence[SearchResult]) -> list[SourceContent]:
        semaphore = asyncio.Semaphore(self.max_parallel)

        async def run_fetch(result: SearchResult) -> str:
            if not web_utils.is_valid_url(result.url):
                log_service.log_event(
                    event_type="fetch_skipped",
                    message="Not an http(s) URL; skipping fetch",
                    level="WARNING",
                    url=result.url,
                )
                return ""
            async with semaphore:
                return await self.fetcher.fetch_and_extract(result.url)

        bodies = await asyncio.gather(
            *(run_fetch(result) for result in results),
            return_exceptions=True,
        )

        sources: list[SourceContent] = []
        for result, body in zip(results, bodies):
            if isinstance(body, BaseException):
                log_service.log_event(
                    event_type="fetch_failed",
                    message="Fetch raised unexpectedly",
                    level="WARNING",
                    url=result.url,
                    error=str(body),
                )
                continue
            if len(body) < self.min_source_chars:
                continue
            sources.append(SourceContent(url=result.url, title=result.title, body=body))
        return sources

    async def gather(self, queries: Sequence[str], profile: DepthProfile) -> GatherResult:
        merged = await self.search_all(queries)
        results = dedupe_by_url(merged)[: profile.max_sources]
        sources = await self.fetch_sources(results[: profile.fetch_limit])

        log_service.log_event(
            event_type="sources_gathered",
            message="Search and fetch complete",
            queries=len(queries),
            raw_results=len(merged),
            unique_results=len(results),
            sources=len(sources),
        )
        return GatherResult(queries=list(queries), results=results, sources=sources)

from __future__ import annotations

import random
from typing import Any

import pytest

from research_agent.agents.orchestrator import ResearchOrchestrator
from research_agent.agents.synthesizer import Synthesizer
from research_agent.exceptions import CapabilityUnavailable, FetchError
from research_agent.models.research import CompletionResult, SearchResult
from research_agent.services.search_executor import SearchExecutor
from research_agent.tools.page_fetcher import FetchedPage

LONG_BODY = " ".join(
    [
        "Solar power adoption is growing quickly across many regions of the world.",
        "The main result is a significant drop in the cost of electricity for households.",
        "However, grid operators warn that storage remains the key bottleneck for reliability.",
        "Critics argue that subsidies distort the market and hide the true costs involved.",
    ]
)


class FakeSearchClient:
    def __init__(
        self,
        by_query: dict[str, list[SearchResult]] | None = None,
        default: list[SearchResult] | None = None,
        enabled: bool = True,
    ):
        self.by_query = by_query or {}
        self.default = default or []
        self.enabled = enabled
        self.calls: list[tuple[str, int]] = []

    async def search(self, query: str, count: int = 5) -> list[SearchResult]:
        self.calls.append((query, count))
        if not self.enabled:
            return []
        return list(self.by_query.get(query, self.default))


class FakeFetcher:
    def __init__(
        self,
        bodies: dict[str, str] | None = None,
        html: str = "",
        error: FetchError | None = None,
    ):
        self.bodies = bodies or {}
        self.html = html
        self.error = error
        self.fetched: list[str] = []
        self.extracted: list[str] = []

    async def fetch(self, url: str) -> FetchedPage:
        self.fetched.append(url)
        if self.error is not None:
            raise self.error
        return FetchedPage(url=url, final_url=url, status_code=200, html=self.html)

    async def fetch_and_extract(self, url: str) -> str:
        self.extracted.append(url)
        return self.bodies.get(url, "")


class FakeCompletionClient:
    def __init__(self, text: str = "", error: Exception | None = None, enabled: bool = True):
        self.text = text
        self.error = error
        self.enabled = enabled
        self.calls: list[dict[str, Any]] = []

    async def complete(self, **kwargs: Any) -> CompletionResult:
        if not self.enabled:
            raise CapabilityUnavailable("OPENROUTER_API_KEY is not configured")
        self.calls.append(kwargs)
        if self.error is not None:
            raise self.error
        return CompletionResult(text=self.text, model="fake/model", input_tokens=10, output_tokens=20)


def build_orchestrator(
    *,
    search_client: FakeSearchClient | None = None,
    fetcher: FakeFetcher | None = None,
    completion: FakeCompletionClient | None = None,
    seed: int = 7,
) -> ResearchOrchestrator:
    search_client = search_client or FakeSearchClient(enabled=False)
    fetcher = fetcher or FakeFetcher()
    completion = completion or FakeCompletionClient(enabled=False)
    return ResearchOrchestrator(
        search_client=search_client,
        fetcher=fetcher,
        synthesizer=Synthesizer(completion),
        executor=SearchExecutor(search_client, fetcher, max_parallel=2),
        rng=random.Random(seed),
    )


@pytest.fixture
def long_body() -> str:
    return LONG_BODY

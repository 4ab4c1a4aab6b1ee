from __future__ import annotations

import random
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any
from uuid import uuid4

from pydantic import ValidationError

from research_agent.agents import frameworks
from research_agent.agents.synthesizer import Synthesizer
from research_agent.config import Settings
from research_agent.exceptions import FetchError, InputError
from research_agent.llm_client import CompletionClient
from research_agent.models.research import Decoded, DecodeFailed, ResearchState
from research_agent.models.schemas import (
    DeepResearchRequest,
    ResearchRequest,
    SummarizeRequest,
    describe_validation_error,
)
from research_agent.research_core.summarize import service as summarizer
from research_agent.services import logger as log_service
from research_agent.services import query_planner
from research_agent.services.search_executor import SearchExecutor
from research_agent.tools import text_extractor
from research_agent.tools.brave_search import BraveSearchClient
from research_agent.tools.page_fetcher import PageFetcher

MIN_EXTRACTED_CHARS = 100

REQUEST_MODELS = {
    "summarize": SummarizeRequest,
    "research": ResearchRequest,
    "deep-research": DeepResearchRequest,
}


@dataclass
class ResearchRun:
    """Per-request state; logged on every transition."""

    request_id: str = field(default_factory=lambda: uuid4().hex[:12])
    state: ResearchState = ResearchState.PLANNED
    history: list[ResearchState] = field(default_factory=list)

    def transition(self, state: ResearchState, **data: Any) -> None:
        self.state = state
        self.history.append(state)
        log_service.log_research_step(self.request_id, state.value, data or None)


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


class ResearchOrchestrator:
    """Entry points for summarize, research and deep research.

    Flow for deep research:
      1. Plan depth-capped search queries
      2. Search all queries, dedupe by url, cap by depth
      3. Fetch the top pages and keep the ones with enough text
      4. Synthesize with the completion capability, or fall back to raw
         sources with extractive summaries

    Each returns an envelope dict with a ``success`` flag and never raises.
    """

    def __init__(
        self,
        *,
        search_client: BraveSearchClient,
        fetcher: PageFetcher,
        synthesizer: Synthesizer,
        executor: SearchExecutor | None = None,
        rng: random.Random | None = None,
    ):
        self.search_client = search_client
        self.fetcher = fetcher
        self.synthesizer = synthesizer
        self.executor = executor or SearchExecutor(search_client, fetcher)
        self.rng = rng or random.Random()

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        *,
        rng: random.Random | None = None,
    ) -> "ResearchOrchestrator":
        search_client = BraveSearchClient.from_settings(settings)
        fetcher = PageFetcher.from_settings(settings)
        synthesizer = Synthesizer(
            CompletionClient.from_settings(settings),
            synthesis_max_tokens=settings.synthesis_max_tokens,
            analysis_max_tokens=settings.analysis_max_tokens,
            temperature=settings.llm_temperature,
            excerpt_chars=settings.source_excerpt_chars,
        )
        executor = SearchExecutor(
            search_client,
            fetcher,
            results_per_query=settings.search_results_per_query,
            max_parallel=settings.max_parallel_requests,
            min_source_chars=settings.min_source_chars,
        )
        return cls(
            search_client=search_client,
            fetcher=fetcher,
            synthesizer=synthesizer,
            executor=executor,
            rng=rng,
        )

    async def handle(self, entrypoint: str, payload: dict[str, Any]) -> dict[str, Any]:
        """Validate a raw payload and dispatch it to the named entrypoint."""
        request_model = REQUEST_MODELS.get(entrypoint)
        if request_model is None:
            return {"success": False, "error": f"Unknown entrypoint: {entrypoint}"}

        try:
            request = request_model.model_validate(payload)
        except ValidationError as e:
            return {"success": False, "error": describe_validation_error(e)}

        try:
            if isinstance(request, SummarizeRequest):
                return await self.summarize(request)
            if isinstance(request, ResearchRequest):
                return await self.research(request)
            return await self.deep_research(request)
        except InputError as e:
            return {"success": False, "error": str(e)}
        except Exception as e:
            log_service.log_event(
                event_type="entrypoint_error",
                message=f"Unhandled error in {entrypoint}",
                level="ERROR",
                error=str(e),
            )
            return {"success": False, "error": "Internal error while handling request"}

    async def summarize(self, request: SummarizeRequest) -> dict[str, Any]:
        content = request.text or ""

        if request.url:
            try:
                page = await self.fetcher.fetch(request.url)
            except FetchError as e:
                if e.status_code is not None:
                    error = f"Failed to fetch: HTTP {e.status_code}"
                else:
                    error = f"Fetch failed: {e}"
                log_service.log_event(
                    event_type="summarize_fetch_failed",
                    message=error,
                    level="WARNING",
                    url=request.url,
                )
                return {"error": error, "url": request.url, "success": False}

            content = text_extractor.normalize(page.html)
            log_service.log_event(
                event_type="summarize_page_fetched",
                message="Fetched page for summary",
                url=page.final_url,
                title=text_extractor.extract_title(page.html),
                chars=len(content),
            )
            if len(content) < MIN_EXTRACTED_CHARS:
                return {
                    "error": "Couldn't extract meaningful text from URL. Page might be JS-rendered or blocked.",
                    "url": request.url,
                    "success": False,
                    "tedNote": frameworks.EXTRACTION_NOTE,
                }

        result = summarizer.summarize(content, request.max_length, request.keywords)
        return {
            "summary": result.summary_text,
            "keyPoints": result.key_points,
            "sourceUrl": request.url,
            "originalWordCount": result.word_count,
            "summaryLength": len(result.summary_text),
            "success": True,
            "tedNote": frameworks.SUMMARY_NOTE,
        }

    async def research(self, request: ResearchRequest) -> dict[str, Any]:
        outcome = await self.synthesizer.analyze(
            request.topic,
            request.questions,
            request.skeptical_mode,
        )

        if isinstance(outcome, DecodeFailed):
            framework = frameworks.research_framework(
                request.topic,
                request.questions,
                request.skeptical_mode,
                self.rng,
                reason=outcome.reason,
            )
            return {**framework, "success": True}

        analysis = outcome.value.to_payload()
        if not request.skeptical_mode:
            analysis.pop("skepticalAnalysis", None)
        return {
            "topic": request.topic,
            "timestamp": _now_iso(),
            "analysis": analysis,
            "questionsToAnswer": request.questions or frameworks.default_questions(request.topic),
            "methodology": dict(frameworks.METHODOLOGY),
            "tedTake": outcome.value.ted_take or frameworks.ted_take(request.topic, self.rng),
            "aiPowered": True,
            "success": True,
        }

    async def deep_research(self, request: DeepResearchRequest) -> dict[str, Any]:
        run = ResearchRun()
        profile = query_planner.resolve_depth(request.depth)
        queries = query_planner.plan(request.topic, request.depth, request.focus_areas)
        run.transition(ResearchState.PLANNED, depth=profile.name, queries=queries)

        run.transition(ResearchState.SEARCHING)
        gathered = await self.executor.gather(queries, profile)
        if gathered.sources:
            run.transition(
                ResearchState.SOURCES_GATHERED,
                results=len(gathered.results),
                sources=len(gathered.sources),
            )
            outcome = await self.synthesizer.synthesize(
                request.topic,
                request.questions,
                request.focus_areas,
                gathered.sources,
            )
        else:
            run.transition(ResearchState.NO_SOURCES, results=len(gathered.results))
            outcome = DecodeFailed(reason="no sources gathered")

        payload: dict[str, Any] = {
            "topic": request.topic,
            "depth": profile.name,
            "timestamp": _now_iso(),
            "methodology": {
                "searchQueries": gathered.queries,
                "sourcesFound": len(gathered.results),
                "sourcesAnalyzed": len(gathered.sources),
            },
            "sources": [r.to_dict() for r in gathered.results],
        }

        if isinstance(outcome, Decoded):
            run.transition(ResearchState.SYNTHESIZED)
            payload["synthesis"] = outcome.value.to_payload()
            payload["aiPowered"] = True
        else:
            run.transition(ResearchState.SYNTHESIS_FALLBACK, reason=outcome.reason)
            payload["fallback"] = frameworks.deep_research_fallback(
                request.topic,
                gathered.results,
                gathered.sources,
                self.rng,
                reason=outcome.reason,
            )
            payload["aiPowered"] = False

        payload["state"] = run.state.value
        payload["success"] = True
        return payload

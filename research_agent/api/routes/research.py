from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends

from research_agent.agents.orchestrator import ResearchOrchestrator
from research_agent.api.deps import get_orchestrator
from research_agent.models.schemas import DeepResearchRequest, ResearchRequest, SummarizeRequest
from research_agent.services import logger as log_service

router = APIRouter(prefix="/api", tags=["research"])


@router.post("/summarize")
async def summarize(
    request: SummarizeRequest,
    orchestrator: ResearchOrchestrator = Depends(get_orchestrator),
) -> dict[str, Any]:
    """Summarize a URL or text. Extracts key points without the fluff."""
    log_service.log_event(
        event_type="summarize_requested",
        message="Summarize requested",
        url=request.url,
        text_chars=len(request.text or ""),
    )
    return await orchestrator.summarize(request)


@router.post("/research")
async def research(
    request: ResearchRequest,
    orchestrator: ResearchOrchestrator = Depends(get_orchestrator),
) -> dict[str, Any]:
    """Research analysis with a skeptical framework."""
    log_service.log_event(
        event_type="research_requested",
        message="Research requested",
        topic=request.topic[:100],
    )
    return await orchestrator.research(request)


@router.post("/deep-research")
async def deep_research(
    request: DeepResearchRequest,
    orchestrator: ResearchOrchestrator = Depends(get_orchestrator),
) -> dict[str, Any]:
    """Search, fetch and synthesize multiple sources on a topic."""
    log_service.log_event(
        event_type="deep_research_requested",
        message="Deep research requested",
        topic=request.topic[:100],
        depth=request.depth,
    )
    return await orchestrator.deep_research(request)

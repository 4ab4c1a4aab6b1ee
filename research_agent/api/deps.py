from __future__ import annotations

from research_agent.agents.orchestrator import ResearchOrchestrator
from research_agent.config import get_settings


def get_orchestrator() -> ResearchOrchestrator:
    """Build a request-scoped orchestrator from the process settings."""
    return ResearchOrchestrator.from_settings(get_settings())

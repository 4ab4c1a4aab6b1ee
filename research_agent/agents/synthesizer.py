from __future__ import annotations

from typing import Sequence

from pydantic import BaseModel

from research_agent.exceptions import CapabilityUnavailable
from research_agent.llm_client import CompletionClient
from research_agent.models.research import (
    Decoded,
    DecodeFailed,
    ResearchAnalysis,
    ResearchSynthesis,
    SourceContent,
)
from research_agent.services import logger as log_service
from research_agent.services import synthesis_decoder
from research_agent.services.prompt_store import render_prompt
from research_agent.tools import web_utils


def _bullet_block(title: str, items: Sequence[str] | None) -> str:
    cleaned = [" ".join(item.split()) for item in (items or []) if item and item.strip()]
    if not cleaned:
        return ""
    lines = [f"## {title}"] + [f"- {item}" for item in cleaned]
    return "\n".join(lines) + "\n"


class Synthesizer:
    """Turns gathered sources into a decoded ResearchSynthesis.

    Every failure (no credentials, call error, undecodable reply) comes back
    as DecodeFailed; nothing is raised to the caller.
    """

    def __init__(
        self,
        client: CompletionClient,
        *,
        synthesis_max_tokens: int = 4096,
        analysis_max_tokens: int = 2048,
        temperature: float = 0.3,
        excerpt_chars: int = 3000,
    ):
        self.client = client
        self.synthesis_max_tokens = synthesis_max_tokens
        self.analysis_max_tokens = analysis_max_tokens
        self.temperature = temperature
        self.excerpt_chars = excerpt_chars

    @property
    def enabled(self) -> bool:
        return self.client.enabled

    def build_sources_block(self, sources: Sequence[SourceContent]) -> str:
        parts: list[str] = []
        for index, source in enumerate(sources, 1):
            title = source.title or web_utils.extract_domain(source.url)
            excerpt = web_utils.truncate(source.body, self.excerpt_chars, marker="...")
            parts.append(f"### Source {index}: {title}\nURL: {source.url}\n{excerpt}\n")
        return "\n".join(parts)

    def build_synthesis_prompt(
        self,
        topic: str,
        questions: Sequence[str] | None,
        focus_areas: Sequence[str] | None,
        sources: Sequence[SourceContent],
    ) -> str:
        return render_prompt(
            "synthesizer.deep_research_prompt",
            topic=topic,
            questions_block=_bullet_block("Questions to answer", questions),
            focus_block=_bullet_block("Focus areas", focus_areas),
            sources_block=self.build_sources_block(sources),
        )

    def build_analysis_prompt(
        self,
        topic: str,
        questions: Sequence[str] | None,
        skeptical_mode: bool,
    ) -> str:
        instruction_key = (
            "synthesizer.skeptical_instruction"
            if skeptical_mode
            else "synthesizer.no_skeptical_instruction"
        )
        return render_prompt(
            "synthesizer.analysis_prompt",
            topic=topic,
            questions_block=_bullet_block("Questions to answer", questions),
            skeptical_block=render_prompt(instruction_key) + "\n",
        )

    async def synthesize(
        self,
        topic: str,
        questions: Sequence[str] | None,
        focus_areas: Sequence[str] | None,
        sources: Sequence[SourceContent],
    ) -> Decoded[ResearchSynthesis] | DecodeFailed:
        return await self._complete_and_decode(
            caller="synthesizer.synthesize",
            system=render_prompt("synthesizer.system_prompt"),
            user=self.build_synthesis_prompt(topic, questions, focus_areas, sources),
            max_tokens=self.synthesis_max_tokens,
            model=ResearchSynthesis,
        )

    async def analyze(
        self,
        topic: str,
        questions: Sequence[str] | None,
        skeptical_mode: bool,
    ) -> Decoded[ResearchAnalysis] | DecodeFailed:
        return await self._complete_and_decode(
            caller="synthesizer.analyze",
            system=render_prompt("synthesizer.analysis_system_prompt"),
            user=self.build_analysis_prompt(topic, questions, skeptical_mode),
            max_tokens=self.analysis_max_tokens,
            model=ResearchAnalysis,
        )

    async def _complete_and_decode(
        self,
        *,
        caller: str,
        system: str,
        user: str,
        max_tokens: int,
        model: type[BaseModel],
    ) -> Decoded | DecodeFailed:
        try:
            completion = await self.client.complete(
                system=system,
                user=user,
                max_tokens=max_tokens,
                temperature=self.temperature,
                caller=caller,
            )
        except CapabilityUnavailable as e:
            log_service.log_event(
                event_type="synthesis_unavailable",
                message=str(e),
                level="WARNING",
                caller=caller,
            )
            return DecodeFailed(reason="completion capability not configured")
        except Exception as e:
            log_service.log_event(
                event_type="synthesis_failed",
                message="Completion call failed",
                level="WARNING",
                caller=caller,
                error=str(e) or e.__class__.__name__,
            )
            return DecodeFailed(reason=f"completion call failed: {e.__class__.__name__}")

        outcome = synthesis_decoder.decode(completion.text, model)
        if isinstance(outcome, DecodeFailed):
            log_service.log_event(
                event_type="synthesis_decode_failed",
                message=outcome.reason,
                level="WARNING",
                caller=caller,
                response_preview=completion.text[:200],
            )
        return outcome

"""Deterministic payloads used when the completion capability cannot run."""
from __future__ import annotations

import random
from datetime import datetime, timezone
from typing import Any, Sequence

from research_agent.models.research import SearchResult, SourceContent
from research_agent.research_core.summarize import service as summarizer

SUMMARY_NOTE = "Summarization is lossy compression. The nuance is always in what got cut."
EXTRACTION_NOTE = "Modern web: where pages load without content until JavaScript runs. Progress."

RESEARCH_DISCLAIMER = (
    "This is a research framework, not research results. What I can do without live analysis "
    "is give you a structured approach to finding answers yourself. The best research is "
    "research you do, with skepticism you apply."
)

SYNTHESIS_UNAVAILABLE_NOTE = (
    "Synthesis unavailable: these are the raw sources with extractive summaries. "
    "Read them with the usual skepticism."
)

METHODOLOGY = {
    "step1": "Search multiple source types (docs, discussions, critiques)",
    "step2": "Note who's writing and what their incentives are",
    "step3": "Look for disagreement - it's where the truth lives",
    "step4": "Check dates - the space moves fast, old info might be stale",
    "step5": "Talk to actual users, not just promoters",
}

HIDDEN_ASSUMPTIONS = (
    "Assumes the reader shares certain baseline beliefs",
    "Takes current trends as permanent rather than cyclical",
    "May conflate correlation with causation",
    "Potentially cherry-picks supporting evidence",
)

MISSING_CONTEXT = (
    "Historical precedents that might inform this",
    "Contradicting viewpoints or data",
    "Long-term implications vs short-term benefits",
    "Second and third-order effects",
)

TED_TAKES = (
    "{topic} is being discussed like it's new. It's not. The patterns here are older than the internet.",
    "Everyone's focused on the technology. The real story is about the people and incentives.",
    "The hype-to-reality ratio here is concerning. Adjust expectations accordingly.",
    "There's signal in this noise, but you have to squint to find it.",
    "Interesting premise, but the execution details are where things usually fall apart.",
    "This reads like thought leadership content. Translation: more narrative than substance.",
    "The contrarian take would be more interesting, but this is what we've got.",
)


def ted_take(topic: str, rng: random.Random) -> str:
    return rng.choice(TED_TAKES).format(topic=topic)


def suggested_searches(topic: str) -> list[str]:
    return [
        f"{topic} overview",
        f"{topic} criticism",
        f"{topic} vs alternatives",
        f"{topic} problems",
        f'"{topic}" site:reddit.com',
        f'"{topic}" site:news.ycombinator.com',
    ]


def default_questions(topic: str) -> list[str]:
    return [
        f"What problem does {topic} actually solve?",
        f"Who benefits most from {topic}?",
        "What are the trade-offs?",
        "What's the strongest criticism?",
        f"What would have to happen for {topic} to fail?",
    ]


def skeptical_analysis(topic: str) -> dict[str, list[str]]:
    questions = [
        f"What incentives does the source have in presenting {topic} this way?",
        "What's NOT being said here?",
        "Who benefits from this framing?",
        "What would have to be true for this to be correct?",
        "What's the strongest argument against this position?",
    ]
    return {
        "questionsToAsk": questions[:3],
        "potentialBiases": list(HIDDEN_ASSUMPTIONS[:2]),
        "missingContext": list(MISSING_CONTEXT[:2]),
    }


def research_framework(
    topic: str,
    questions: Sequence[str] | None,
    skeptical_mode: bool,
    rng: random.Random,
    *,
    reason: str = "",
) -> dict[str, Any]:
    framework: dict[str, Any] = {
        "topic": topic,
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "suggestedSearches": suggested_searches(topic),
        "questionsToAnswer": list(questions) if questions else default_questions(topic),
        "methodology": dict(METHODOLOGY),
        "tedTake": ted_take(topic, rng),
        "disclaimer": RESEARCH_DISCLAIMER,
        "aiPowered": False,
    }
    if skeptical_mode:
        framework["skepticalAnalysis"] = skeptical_analysis(topic)
    if reason:
        framework["fallbackReason"] = reason
    return framework


def deep_research_fallback(
    topic: str,
    results: Sequence[SearchResult],
    sources: Sequence[SourceContent],
    rng: random.Random,
    *,
    reason: str,
    summary_length: int = 500,
) -> dict[str, Any]:
    """Raw deduplicated sources plus an extractive summary of each fetched body."""
    keywords = [word for word in topic.split() if len(word) > 2]
    summaries = []
    for source in sources:
        result = summarizer.summarize(source.body, summary_length, keywords)
        summaries.append(
            {
                "url": source.url,
                "title": source.title,
                "summary": result.summary_text,
                "keyPoints": result.key_points,
            }
        )

    return {
        "synthesisUnavailable": True,
        "reason": reason,
        "rawSources": [r.to_dict() for r in results],
        "sourceSummaries": summaries,
        "suggestedSearches": suggested_searches(topic),
        "tedTake": ted_take(topic, rng),
        "note": SYNTHESIS_UNAVAILABLE_NOTE,
    }

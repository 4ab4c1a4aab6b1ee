from __future__ import annotations

from typing import Sequence

from research_agent.models.research import ScoredSentence, SummaryResult
from research_agent.research_core.summarize.sentences import score_sentences, segment

MAX_SUMMARY_SENTENCES = 5
KEY_POINT_COUNT = 3
KEY_POINT_CHARS = 100
SEPARATOR_CHARS = 2


def rank(scored: Sequence[ScoredSentence]) -> list[ScoredSentence]:
    """Order by score, highest first; ties keep source order."""
    return sorted(scored, key=lambda s: (-s.score, s.original_index))


def select(ranked: Sequence[ScoredSentence], max_length: int) -> list[ScoredSentence]:
    """Greedy fill under ``max_length``, returned in source order.

    Skips sentences that do not fit and keeps going; stops at
    MAX_SUMMARY_SENTENCES accepted.
    """
    selected: list[ScoredSentence] = []
    current_length = 0
    for item in ranked:
        cost = len(item.text) + SEPARATOR_CHARS
        if current_length + cost <= max_length:
            selected.append(item)
            current_length += cost
        if len(selected) >= MAX_SUMMARY_SENTENCES:
            break
    return sorted(selected, key=lambda s: s.original_index)


def key_points(ranked: Sequence[ScoredSentence]) -> list[str]:
    points: list[str] = []
    for item in ranked[:KEY_POINT_COUNT]:
        text = item.text
        if len(text) > KEY_POINT_CHARS:
            text = text[:KEY_POINT_CHARS] + "..."
        points.append(text)
    return points


def summarize(text: str, max_length: int, keywords: Sequence[str] = ()) -> SummaryResult:
    """Extractive summary of ``text`` in at most ``max_length`` characters."""
    word_count = len(text.split())
    sentences = segment(text)

    if not sentences:
        return SummaryResult(summary_text=text[:max_length], key_points=[], word_count=word_count)

    ranked = rank(score_sentences(sentences, keywords))
    selected = select(ranked, max_length)

    return SummaryResult(
        summary_text=" ".join(s.text for s in selected),
        key_points=key_points(ranked),
        word_count=word_count,
    )

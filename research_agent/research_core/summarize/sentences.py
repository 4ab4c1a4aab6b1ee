from __future__ import annotations

import re
from typing import Sequence

from research_agent.models.research import ScoredSentence

MIN_SENTENCE_CHARS = 15
MAX_SENTENCE_CHARS = 500

INDICATORS = (
    "important",
    "key",
    "significant",
    "main",
    "primary",
    "conclusion",
    "result",
    "finding",
    "therefore",
    "thus",
    "however",
    "although",
    "despite",
    "notably",
    "specifically",
)

_SENTENCE_BREAK = re.compile(r"(?<=[.!?])\s+")


def segment(text: str) -> list[str]:
    """Split text on terminal punctuation and drop fragments and run-ons."""
    pieces = (piece.strip() for piece in _SENTENCE_BREAK.split(text))
    return [p for p in pieces if MIN_SENTENCE_CHARS < len(p) < MAX_SENTENCE_CHARS]


def score(sentence: str, index: int, total: int, keywords: Sequence[str]) -> float:
    if index < total * 0.3:
        value = 2.0
    elif index < total * 0.6:
        value = 1.0
    else:
        value = 0.5

    if 50 < len(sentence) < 200:
        value += 1.0

    lowered = sentence.lower()
    for keyword in keywords:
        if keyword and keyword.lower() in lowered:
            value += 1.5

    for indicator in INDICATORS:
        if indicator in lowered:
            value += 0.5

    if "?" in sentence or sentence.startswith('"'):
        value -= 0.5

    return value


def score_sentences(sentences: Sequence[str], keywords: Sequence[str]) -> list[ScoredSentence]:
    total = len(sentences)
    return [
        ScoredSentence(text=sentence, score=score(sentence, index, total, keywords), original_index=index)
        for index, sentence in enumerate(sentences)
    ]

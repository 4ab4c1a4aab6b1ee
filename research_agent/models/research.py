from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Generic, Literal, TypeVar

from pydantic import BaseModel, ConfigDict, field_validator
from pydantic.alias_generators import to_camel

Confidence = Literal["high", "medium", "low"]


class ResearchState(str, Enum):
    PLANNED = "planned"
    SEARCHING = "searching"
    SOURCES_GATHERED = "sources_gathered"
    NO_SOURCES = "no_sources"
    SYNTHESIZED = "synthesized"
    SYNTHESIS_FALLBACK = "synthesis_fallback"


@dataclass(frozen=True, slots=True)
class ScoredSentence:
    text: str
    score: float
    original_index: int


@dataclass(slots=True)
class SummaryResult:
    summary_text: str
    key_points: list[str] = field(default_factory=list)
    word_count: int = 0


@dataclass(slots=True)
class SearchResult:
    title: str
    url: str
    description: str = ""

    def to_dict(self) -> dict[str, str]:
        return {"title": self.title, "url": self.url, "description": self.description}


@dataclass(slots=True)
class SourceContent:
    url: str
    title: str
    body: str
    fetched_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))


@dataclass(slots=True)
class CompletionResult:
    text: str
    model: str
    input_tokens: int = 0
    output_tokens: int = 0


# --- Decoded completion payloads ---


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")

    def to_payload(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True)


def _normalize_confidence(value: Any) -> Any:
    if isinstance(value, str):
        return value.strip().lower()
    return value


class KeyFinding(_CamelModel):
    finding: str
    confidence: Confidence
    sources: list[str] = []

    @field_validator("confidence", mode="before")
    @classmethod
    def _lower_confidence(cls, value: Any) -> Any:
        return _normalize_confidence(value)

    @field_validator("sources")
    @classmethod
    def _unique_sources(cls, value: list[str]) -> list[str]:
        return list(dict.fromkeys(v.strip() for v in value if v.strip()))


class Answer(_CamelModel):
    question: str
    answer: str
    confidence: Confidence

    @field_validator("confidence", mode="before")
    @classmethod
    def _lower_confidence(cls, value: Any) -> Any:
        return _normalize_confidence(value)


class ResearchSynthesis(_CamelModel):
    executive_summary: str
    key_findings: list[KeyFinding]
    answers: list[Answer] = []
    consensus_view: str = ""
    controversial_points: list[str] = []
    gaps: list[str] = []
    bias_analysis: str = ""
    recommendations: list[str] = []
    ted_take: str = ""


class SkepticalAnalysis(_CamelModel):
    questions_to_ask: list[str] = []
    potential_biases: list[str] = []
    missing_context: list[str] = []


class ResearchAnalysis(_CamelModel):
    overview: str
    key_points: list[str]
    answers: list[Answer] = []
    skeptical_analysis: SkepticalAnalysis | None = None
    ted_take: str = ""


T = TypeVar("T")


@dataclass(slots=True)
class Decoded(Generic[T]):
    value: T


@dataclass(slots=True)
class DecodeFailed:
    reason: str
    raw_text: str = ""

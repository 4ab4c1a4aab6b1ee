from __future__ import annotations

from typing import Any, Literal, Sequence

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator, model_validator
from pydantic.alias_generators import to_camel

from research_agent.tools import web_utils

Depth = Literal["quick", "standard", "thorough", "deep", "exhaustive"]


class _Request(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")


def _clean_topic(value: str, *, min_length: int) -> str:
    cleaned = " ".join(value.split())
    if len(cleaned) < min_length:
        raise ValueError(f"topic must be at least {min_length} non-blank characters")
    return cleaned


# --- Requests ---


class SummarizeRequest(_Request):
    url: str | None = None
    text: str | None = None
    max_length: int = Field(default=500, ge=100, le=2000)
    keywords: list[str] = []

    @field_validator("url")
    @classmethod
    def _check_url(cls, value: str | None) -> str | None:
        if value is None:
            return None
        value = value.strip()
        if not value:
            return None
        if not web_utils.is_valid_url(value):
            raise ValueError("'url' must be an absolute http(s) URL")
        return value

    @model_validator(mode="after")
    def _require_source(self) -> "SummarizeRequest":
        if not self.url and not (self.text and self.text.strip()):
            raise ValueError("Provide either 'url' or 'text'")
        return self


class ResearchRequest(_Request):
    topic: str = Field(min_length=3)
    questions: list[str] | None = None
    skeptical_mode: bool = True

    @field_validator("topic")
    @classmethod
    def _strip_topic(cls, value: str) -> str:
        return _clean_topic(value, min_length=3)


class DeepResearchRequest(_Request):
    topic: str = Field(min_length=1)
    questions: list[str] | None = None
    depth: Depth = "standard"
    focus_areas: list[str] = []

    @field_validator("topic")
    @classmethod
    def _strip_topic(cls, value: str) -> str:
        return _clean_topic(value, min_length=1)


# --- Responses ---


class HealthResponse(BaseModel):
    status: str
    service: str
    version: str
    search_enabled: bool
    synthesis_enabled: bool


def describe_validation_error(error: ValidationError | Sequence[dict[str, Any]]) -> str:
    """One readable line for the first validation problem."""
    errors = error.errors() if isinstance(error, ValidationError) else list(error)
    if not errors:
        return "Invalid request"
    first = errors[0]
    message = str(first.get("msg", "Invalid value")).removeprefix("Value error, ")
    location = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
    return f"{location}: {message}" if location else message

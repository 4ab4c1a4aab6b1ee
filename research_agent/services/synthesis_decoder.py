"""Decode structured results out of free-form completion text."""
from __future__ import annotations

import json
from typing import TypeVar

from pydantic import BaseModel, ValidationError

from research_agent.models.research import Decoded, DecodeFailed

ModelT = TypeVar("ModelT", bound=BaseModel)


def extract_json_object(raw_text: str) -> str | None:
    """Return the first balanced ``{...}`` span, or None.

    Braces inside JSON string literals do not count toward the balance.
    """
    start = raw_text.find("{")
    if start < 0:
        return None

    depth = 0
    in_string = False
    escaped = False
    for index in range(start, len(raw_text)):
        char = raw_text[index]
        if in_string:
            if escaped:
                escaped = False
            elif char == "\\":
                escaped = True
            elif char == '"':
                in_string = False
            continue
        if char == '"':
            in_string = True
        elif char == "{":
            depth += 1
        elif char == "}":
            depth -= 1
            if depth == 0:
                return raw_text[start : index + 1]
    return None


def decode(raw_text: str, model: type[ModelT]) -> Decoded[ModelT] | DecodeFailed:
    span = extract_json_object(raw_text or "")
    if span is None:
        return DecodeFailed(reason="no JSON object in completion", raw_text=raw_text or "")

    try:
        payload = json.loads(span)
    except json.JSONDecodeError as e:
        return DecodeFailed(reason=f"invalid JSON: {e.msg}", raw_text=raw_text)

    if not isinstance(payload, dict):
        return DecodeFailed(reason="JSON value is not an object", raw_text=raw_text)

    try:
        return Decoded(value=model.model_validate(payload))
    except ValidationError as e:
        fields = sorted({".".join(str(p) for p in err["loc"]) for err in e.errors()})
        return DecodeFailed(
            reason=f"missing or invalid fields: {', '.join(fields)}",
            raw_text=raw_text,
        )

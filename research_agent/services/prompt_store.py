"""Prompt catalog backed by ``prompts/prompts.json``.

Entries are addressed by dotted keys (``synthesizer.system_prompt``) and may
be a single string or a list of lines. Placeholders use ``string.Template``
syntax (``$topic``).
"""
from __future__ import annotations

import json
from functools import lru_cache
from pathlib import Path
from string import Template
from typing import Any

PROMPTS_PATH = Path(__file__).resolve().parents[1] / "prompts" / "prompts.json"


class PromptCatalog:
    def __init__(self, entries: dict[str, Any]):
        self.entries = entries

    @classmethod
    def from_file(cls, path: Path) -> "PromptCatalog":
        data = json.loads(path.read_text(encoding="utf-8"))
        if not isinstance(data, dict):
            raise ValueError(f"{path.name} must hold a JSON object")
        return cls(data)

    def text(self, key: str) -> str:
        entry: Any = self.entries
        for section in key.split("."):
            if not isinstance(entry, dict) or section not in entry:
                raise KeyError(f"Unknown prompt: {key}")
            entry = entry[section]

        if isinstance(entry, str):
            return entry
        if isinstance(entry, list) and all(isinstance(line, str) for line in entry):
            return "\n".join(entry)
        raise TypeError(f"Prompt {key} is neither a string nor a list of lines")

    def render(self, key: str, **values: Any) -> str:
        template = Template(self.text(key))
        try:
            return template.substitute(values)
        except KeyError as e:
            raise KeyError(f"Prompt {key} needs a value for ${e.args[0]}") from e


@lru_cache(maxsize=1)
def get_catalog() -> PromptCatalog:
    return PromptCatalog.from_file(PROMPTS_PATH)


def render_prompt(key: str, **values: Any) -> str:
    return get_catalog().render(key, **values)

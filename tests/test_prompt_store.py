from __future__ import annotations

import pytest

from research_agent.services.prompt_store import PromptCatalog, render_prompt


def test_render_prompt_substitutes_template_values():
    prompt = render_prompt(
        "synthesizer.analysis_prompt",
        topic="tidal energy",
        questions_block="## Questions to answer\n- Is it viable?\n",
        skeptical_block="",
    )
    assert 'Research topic: "tidal energy"' in prompt
    assert "- Is it viable?" in prompt
    assert '"keyPoints"' in prompt


def test_render_prompt_joins_line_lists():
    prompt = render_prompt("synthesizer.system_prompt")
    assert "\n- Respond with a single JSON object and nothing else." in prompt


def test_render_prompt_raises_for_missing_value():
    with pytest.raises(KeyError, match="topic"):
        render_prompt("synthesizer.analysis_prompt", questions_block="", skeptical_block="")


def test_render_prompt_raises_for_unknown_key():
    with pytest.raises(KeyError):
        render_prompt("missing.prompt.key")


def test_catalog_resolves_nested_keys_and_rejects_non_text_entries():
    catalog = PromptCatalog({"agent": {"intro": ["Hi $name.", "Bye."], "limit": 3}})

    assert catalog.render("agent.intro", name="Ted") == "Hi Ted.\nBye."
    with pytest.raises(TypeError):
        catalog.text("agent.limit")
    with pytest.raises(KeyError):
        catalog.text("agent.intro.extra")

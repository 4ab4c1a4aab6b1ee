from __future__ import annotations

import json

import pytest

from conftest import LONG_BODY, FakeCompletionClient
from research_agent.agents.synthesizer import Synthesizer
from research_agent.llm_client import CompletionClient
from research_agent.models.research import Decoded, DecodeFailed, SourceContent

SYNTHESIS = {
    "executiveSummary": "Solar is cheap but storage lags.",
    "keyFindings": [{"finding": "Costs fell", "confidence": "high", "sources": ["https://a.com/solar"]}],
}


def _source(url: str = "https://a.com/solar", body: str = LONG_BODY, title: str = "Solar") -> SourceContent:
    return SourceContent(url=url, title=title, body=body)


@pytest.mark.asyncio
async def test_synthesize_decodes_completion():
    completion = FakeCompletionClient(text="Sure!\n" + json.dumps(SYNTHESIS))
    synthesizer = Synthesizer(completion)

    outcome = await synthesizer.synthesize("solar", ["Is it cheap?"], ["storage"], [_source()])

    assert isinstance(outcome, Decoded)
    assert outcome.value.executive_summary == "Solar is cheap but storage lags."
    call = completion.calls[0]
    assert call["caller"] == "synthesizer.synthesize"
    assert call["max_tokens"] == 4096
    assert 'Research topic: "solar"' in call["user"]
    assert "- Is it cheap?" in call["user"]
    assert "## Focus areas\n- storage" in call["user"]
    assert "### Source 1: Solar\nURL: https://a.com/solar" in call["user"]


@pytest.mark.asyncio
async def test_synthesize_call_error_becomes_decode_failed():
    synthesizer = Synthesizer(FakeCompletionClient(error=RuntimeError("boom")))

    outcome = await synthesizer.synthesize("solar", None, None, [_source()])

    assert isinstance(outcome, DecodeFailed)
    assert outcome.reason == "completion call failed: RuntimeError"


@pytest.mark.asyncio
async def test_synthesize_without_credentials():
    synthesizer = Synthesizer(CompletionClient("", model="openai/gpt-4o-mini"))

    outcome = await synthesizer.synthesize("solar", None, None, [_source()])

    assert synthesizer.enabled is False
    assert isinstance(outcome, DecodeFailed)
    assert outcome.reason == "completion capability not configured"


@pytest.mark.asyncio
async def test_synthesize_undecodable_reply():
    synthesizer = Synthesizer(FakeCompletionClient(text="I cannot help with that."))

    outcome = await synthesizer.synthesize("solar", None, None, [_source()])

    assert isinstance(outcome, DecodeFailed)
    assert outcome.reason == "no JSON object in completion"


def test_sources_block_caps_excerpts_and_falls_back_to_domain():
    synthesizer = Synthesizer(FakeCompletionClient(), excerpt_chars=20)

    block = synthesizer.build_sources_block(
        [_source(body="a" * 50), _source(url="https://b.org/page", title="", body="short")]
    )

    assert "### Source 1: Solar\nURL: https://a.com/solar\n" + "a" * 20 + "...\n" in block
    assert "### Source 2: b.org\nURL: https://b.org/page\nshort\n" in block


def test_analysis_prompt_switches_skeptical_instruction():
    synthesizer = Synthesizer(FakeCompletionClient())

    skeptical = synthesizer.build_analysis_prompt("solar", None, True)
    plain = synthesizer.build_analysis_prompt("solar", None, False)

    assert "Apply skeptical analysis" in skeptical
    assert "set skepticalAnalysis to null" in plain
    assert "Questions to answer" not in plain


@pytest.mark.asyncio
async def test_analyze_uses_analysis_budget():
    reply = json.dumps({"overview": "o", "keyPoints": ["k"]})
    completion = FakeCompletionClient(text=reply)

    outcome = await Synthesizer(completion, analysis_max_tokens=900).analyze("solar", ["why?"], False)

    assert isinstance(outcome, Decoded)
    assert outcome.value.key_points == ["k"]
    assert completion.calls[0]["max_tokens"] == 900
    assert completion.calls[0]["caller"] == "synthesizer.analyze"

from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence

from research_agent.exceptions import InputError


@dataclass(frozen=True, slots=True)
class DepthProfile:
    name: str
    tier: int
    max_queries: int
    max_sources: int
    fetch_limit: int


DEPTH_PROFILES = {
    "quick": DepthProfile("quick", tier=1, max_queries=2, max_sources=5, fetch_limit=3),
    "standard": DepthProfile("standard", tier=2, max_queries=4, max_sources=10, fetch_limit=5),
    "deep": DepthProfile("deep", tier=3, max_queries=6, max_sources=20, fetch_limit=8),
}

DEPTH_ALIASES = {
    "thorough": "standard",
    "exhaustive": "deep",
}


def resolve_depth(depth: str) -> DepthProfile:
    key = (depth or "").lower().strip()
    key = DEPTH_ALIASES.get(key, key)
    profile = DEPTH_PROFILES.get(key)
    if profile is None:
        raise InputError(f"Unknown depth: {depth!r}")
    return profile


def plan(topic: str, depth: str, focus_areas: Sequence[str] = ()) -> list[str]:
    """Expand a topic into search queries, capped by depth.

    Focus-area queries come before the generic criticism/problems angles so
    the cap drops generic angles first.
    """
    profile = resolve_depth(depth)
    cleaned_topic = " ".join(topic.split())

    queries: list[str] = [
        cleaned_topic,
        f"{cleaned_topic} overview",
        f"{cleaned_topic} explained",
    ]
    if profile.tier >= 2:
        queries.extend(f"{cleaned_topic} {area}" for area in focus_areas)
        queries.append(f"{cleaned_topic} criticism")
        queries.append(f"{cleaned_topic} problems")

    deduped: list[str] = []
    seen: set[str] = set()
    for query in queries:
        q = " ".join(query.split()).strip()
        if not q:
            continue
        key = q.lower()
        if key in seen:
            continue
        seen.add(key)
        deduped.append(q)
        if len(deduped) >= profile.max_queries:
            break
    return deduped

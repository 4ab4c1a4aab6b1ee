"""Markup to plain text conversion for fetched pages."""
from __future__ import annotations

import re

from bs4 import BeautifulSoup

_DROP_BLOCKS = (
    re.compile(r"<script[^>]*>.*?</script>", re.IGNORECASE | re.DOTALL),
    re.compile(r"<style[^>]*>.*?</style>", re.IGNORECASE | re.DOTALL),
    re.compile(r"<noscript[^>]*>.*?</noscript>", re.IGNORECASE | re.DOTALL),
    re.compile(r"<!--.*?-->", re.DOTALL),
)
_BLOCK_TAG = re.compile(r"<(p|h[1-6]|li|td|th|div|span|article|section)[^>]*>", re.IGNORECASE)
_LINE_BREAK = re.compile(r"<br\s*/?>", re.IGNORECASE)
_ANY_TAG = re.compile(r"<[^>]+>")

# Only the common named references; everything else is left as-is.
_ENTITIES = (
    ("&nbsp;", " "),
    ("&amp;", "&"),
    ("&lt;", "<"),
    ("&gt;", ">"),
    ("&quot;", '"'),
    ("&#39;", "'"),
)


def normalize(raw: str) -> str:
    """Strip markup from ``raw`` and collapse whitespace.

    Block-level tags and ``<br>`` become line boundaries, other tags become a
    single space. Never raises; empty input gives an empty string.
    """
    if not raw:
        return ""

    text = raw
    for pattern in _DROP_BLOCKS:
        text = pattern.sub("", text)
    text = _BLOCK_TAG.sub("\n", text)
    text = _LINE_BREAK.sub("\n", text)
    text = _ANY_TAG.sub(" ", text)
    for entity, replacement in _ENTITIES:
        text = text.replace(entity, replacement)

    text = re.sub(r"[^\S\n]+", " ", text)
    text = re.sub(r"\n\s+", "\n", text)
    text = re.sub(r" +\n", "\n", text)
    text = re.sub(r"\n+", "\n", text)
    return text.strip()


def extract_title(raw: str) -> str:
    if not raw or "<title" not in raw.lower():
        return ""
    soup = BeautifulSoup(raw, "html.parser")
    title = soup.title.string if soup.title and soup.title.string else ""
    return " ".join(title.split())

"""Deterministic text helpers shared by the extraction stages."""

from __future__ import annotations

import re
from collections.abc import Iterable

_MULTISPACE_RE = re.compile(r"\s+")
_SENTENCE_BOUNDARY_RE = re.compile(r"(?<=[.!?])\s+")
_TOKEN_RE = re.compile(r"[a-z0-9]+")

ELLIPSIS = "..."

STOP_WORDS = frozenset(
    {
        "the", "and", "for", "are", "but", "not", "you", "all", "any", "can", "had", "her",
        "was", "one", "our", "out", "has", "his", "how", "its", "may", "new", "now", "see",
        "two", "who", "did", "get", "him", "let", "say", "she", "too", "use", "also", "been",
        "from", "have", "into", "more", "most", "much", "must", "only", "other", "over",
        "some", "such", "than", "that", "their", "them", "then", "there", "these", "they",
        "this", "those", "very", "what", "when", "where", "which", "while", "will", "with",
        "would", "could", "should", "about", "after", "before", "being", "between", "both",
        "each", "were", "your", "here", "just", "like", "many", "well", "does", "within",
        "without", "because", "through", "under", "upon", "onto", "whose", "why", "yet",
    }
)


def normalize_text(text: str | None) -> str:
    """Collapse whitespace runs and trim."""

    if not text:
        return ""
    return _MULTISPACE_RE.sub(" ", text).strip()


def split_sentences(text: str | None) -> list[str]:
    """Split text into trimmed sentences, keeping terminal punctuation."""

    normalized = normalize_text(text)
    if not normalized:
        return []
    return [part.strip() for part in _SENTENCE_BOUNDARY_RE.split(normalized) if part.strip()]


def tokenize(text: str | None, *, min_length: int = 3) -> list[str]:
    """Lowercased alphanumeric tokens minus stop-words."""

    if not text:
        return []
    return [
        token
        for token in _TOKEN_RE.findall(text.lower())
        if len(token) >= min_length and token not in STOP_WORDS
    ]


def truncate_with_ellipsis(text: str, limit: int) -> str:
    """Cut text to at most ``limit`` characters, marking the cut."""

    if len(text) <= limit:
        return text
    cut = text[: max(0, limit - len(ELLIPSIS))].rstrip()
    return f"{cut}{ELLIPSIS}"


def unique_casefold(values: Iterable[str]) -> list[str]:
    seen: set[str] = set()
    result: list[str] = []
    for value in values:
        key = value.lower()
        if not value or key in seen:
            continue
        seen.add(key)
        result.append(value)
    return result

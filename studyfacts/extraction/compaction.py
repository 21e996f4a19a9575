"""Rewrite accepted facts into short, punctuation-terminated statements."""

from __future__ import annotations

import re

from studyfacts.extraction.cleaning import ensure_terminal_punctuation
from studyfacts.extraction.text import normalize_text

_WRAPPING_QUOTES = "\"'`“”‘’"
_HEDGE_RE = re.compile(
    r"\b(?:"
    r"in this (?:lecture|chapter|section|slide|course|video|lesson|presentation)"
    r"|for (?:example|instance)"
    r"|as (?:mentioned|discussed|noted)(?: (?:earlier|above|before|previously))?"
    r"|it is important to (?:note|remember) that"
    r"|(?:please )?note that"
    r"|in other words"
    r"|basically"
    r"|essentially"
    r"|generally speaking"
    r")\b,?",
    re.IGNORECASE,
)
_SPACE_BEFORE_PUNCT_RE = re.compile(r"\s+([,.;:!?])")
_LEADING_PUNCT_RE = re.compile(r"^[\s,;:]+")


def compact_fact(fact: str, max_words: int) -> str:
    """Return ``fact`` trimmed to one leading clause plus at most one supporting clause."""

    text = normalize_text(fact).strip(_WRAPPING_QUOTES).strip()
    if not text:
        return ""

    without_hedges = _HEDGE_RE.sub("", text)
    without_hedges = _SPACE_BEFORE_PUNCT_RE.sub(r"\1", normalize_text(without_hedges))
    without_hedges = _LEADING_PUNCT_RE.sub("", without_hedges)
    if re.search(r"[A-Za-z]", without_hedges):
        text = without_hedges

    clauses = [clause.strip() for clause in text.split(",") if clause.strip()]
    text = ", ".join(clauses[:2])

    words = text.split()
    if max_words > 0 and len(words) > max_words:
        words = words[:max_words]
    text = " ".join(words).rstrip(" ;:,")
    if not text:
        return ""
    text = text[0].upper() + text[1:]
    return ensure_terminal_punctuation(text)

"""Normalization, validation, grounding and deduplication of raw fact candidates."""

from __future__ import annotations

import math
import re
from collections.abc import Iterable

from studyfacts.extraction.text import normalize_text, tokenize

MIN_FACT_CHARS = 18
TERMINAL_PUNCTUATION = (".", "!", "?")

BULLET_PREFIX_RE = re.compile(r"^\s*(?:[-*•·▪‣–—>]+|\(?\d{1,3}[.):]|\(?[a-z]\))\s+")
_LETTER_RE = re.compile(r"[A-Za-z]")
_STRAY_OPENER_RE = re.compile(r"""^["']?[\w .\-]+["']?\s*:\s*[{\[]\s*$""")
_QUOTED_PAIR_RE = re.compile(r""""([^"]+?)"\s*:\s*"([^"]*?)"|'([^']+?)'\s*:\s*'([^']*?)'""")
_SINGLE_QUOTED_PAIR_RE = re.compile(r"""^["']([^"']+)["']\s*:\s*["'](.*?)["']\s*,?$""")
_UNQUOTED_KEY = r"[A-Za-z][\w ()/&\-]{0,40}"
_UNQUOTED_SPLIT_RE = re.compile(rf"\s*[,;]\s*(?={_UNQUOTED_KEY}:\s)")
_UNQUOTED_PAIR_RE = re.compile(rf"^({_UNQUOTED_KEY}):\s+(.+)$")
_RESIDUAL_EDGE_RE = re.compile(r"""^[\s\[\]{}"'`,]+|[\s\[\]{}"'`,]+$""")

_VERB_WORDS = (
    "is|are|was|were|be|been|am|has|have|had|do|does|did|can|could|will|would|shall|should|"
    "may|might|must|"
    "include|contain|produce|use|make|cause|lead|allow|provide|require|form|occur|refer|"
    "describe|define|represent|consist|depend|increase|decrease|reduce|create|convert|store|"
    "release|transfer|help|enable|prevent|affect|determine|become|remain|mean|show|take|give|"
    "work|run|move|change|control|support|measure|explain|involve|result|begin|serve|act|"
    "follow|combine|split|divide|break|build|protect|generate|regulate|absorb|emit|bind|"
    "transport|carry|carries|apply|applies|rely|relies|vary|varies|exist|differ|improve|"
    "limit|add|remove|replace|return|hold|keep|let|set|grow|flow|pass|link|connect|map|"
    "handle|process|compute|calculate|encode|decode|send|receive|need|tend|seem|appear"
)
_VERB_SIGNAL_RE = re.compile(
    rf"\b(?:(?:{_VERB_WORDS})(?:s|es)?|\w+(?:ed|ing))\b",
    re.IGNORECASE,
)


def clean_candidates(raw_candidates: Iterable[str], source_text: str | None, limit: int) -> list[str]:
    """Return validated, grounded, case-insensitively unique facts, capped at ``limit``.

    Running the cleaner over its own output returns the same sequence.
    """

    if limit <= 0:
        return []
    source_tokens = set(tokenize(source_text))
    seen: set[str] = set()
    cleaned: list[str] = []
    for raw in raw_candidates:
        if not isinstance(raw, str):
            continue
        for line in _expand_candidate(raw):
            if not is_fact_like(line):
                continue
            if not is_grounded(line, source_tokens):
                continue
            fact = ensure_terminal_punctuation(line)
            key = fact.lower()
            if key in seen:
                continue
            seen.add(key)
            cleaned.append(fact)
            if len(cleaned) >= limit:
                return cleaned
    return cleaned


def strip_bullet_prefix(value: str) -> str:
    text = value
    while True:
        stripped = BULLET_PREFIX_RE.sub("", text, count=1)
        if stripped == text:
            return text
        text = stripped


def split_structured_line(line: str) -> list[str]:
    """Rewrite multi-pair ``key: value`` lines into one ``<key> is <value>`` sentence per pair."""

    quoted_pairs = [
        (match.group(1) or match.group(3), match.group(2) if match.group(1) else match.group(4))
        for match in _QUOTED_PAIR_RE.finditer(line)
    ]
    if len(quoted_pairs) >= 2:
        return [_pair_sentence(key, value) for key, value in quoted_pairs if value.strip()]

    segments = _UNQUOTED_SPLIT_RE.split(line)
    if len(segments) >= 2:
        matches = [_UNQUOTED_PAIR_RE.match(segment.strip()) for segment in segments]
        if all(matches):
            return [_pair_sentence(match.group(1), match.group(2)) for match in matches if match]
    return [line]


def is_fact_like(line: str) -> bool:
    if not _LETTER_RE.search(line):
        return False
    if line.endswith(":"):
        return False
    if len(line) < MIN_FACT_CHARS:
        return False
    return bool(_VERB_SIGNAL_RE.search(line))


def is_grounded(line: str, source_tokens: set[str]) -> bool:
    """Require the candidate vocabulary to overlap the source vocabulary."""

    candidate_tokens = set(tokenize(line))
    if not candidate_tokens:
        return True
    required = max(2, min(4, math.ceil(0.35 * len(candidate_tokens))))
    return len(candidate_tokens & source_tokens) >= required


def ensure_terminal_punctuation(value: str) -> str:
    text = value.rstrip()
    if text.endswith(TERMINAL_PUNCTUATION):
        return text
    return f"{text.rstrip(' ;:,')}."


def _expand_candidate(raw: str) -> list[str]:
    line = normalize_text(strip_bullet_prefix(normalize_text(raw)))
    if not line or _STRAY_OPENER_RE.match(line):
        return []
    lines: list[str] = []
    for unit in split_structured_line(line):
        value = normalize_text(_RESIDUAL_EDGE_RE.sub("", _unwrap_single_pair(unit)))
        if value == unit:
            lines.append(value)
        elif value:
            # Unwrapped values may carry their own bullets or pairs; each pass is strictly shorter.
            lines.extend(_expand_candidate(value))
    return lines


def _unwrap_single_pair(unit: str) -> str:
    match = _SINGLE_QUOTED_PAIR_RE.match(unit.strip())
    if match:
        return match.group(2)
    return unit


def _pair_sentence(key: str, value: str) -> str:
    return f"{normalize_text(key)} is {normalize_text(value).rstrip(' ,;')}"

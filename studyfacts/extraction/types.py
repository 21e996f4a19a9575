"""Typed extraction values shared by every pipeline stage."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Literal

SourceLabel = Literal["llm", "fallback", "fallback-fast"]
FactCategory = Literal[
    "Comparison/Trade-off",
    "Cause and Effect",
    "Method",
    "Process",
    "Definition",
    "Concept",
]


@dataclass(frozen=True, slots=True)
class ExtractionSettings:
    """Caller options after clamping and defaulting."""

    max_facts: int = 12
    fast_mode: bool = False
    include_source_preview: bool = True
    min_fact_words: int = 5
    max_fact_words: int = 24

    def to_payload(self) -> dict[str, Any]:
        return {
            "maxFacts": self.max_facts,
            "fastMode": self.fast_mode,
            "includeSourcePreview": self.include_source_preview,
            "minFactWords": self.min_fact_words,
            "maxFactWords": self.max_fact_words,
        }


@dataclass(slots=True)
class EnrichedFact:
    """Fact with its category and supporting source passage."""

    fact: str
    category: FactCategory
    context: str
    source_preview: str


@dataclass(slots=True)
class AttemptOutcome:
    """Normalized result of one generative attempt."""

    label: str
    candidates: list[str] = field(default_factory=list)
    error: str | None = None


@dataclass(slots=True)
class FactExtractionResult:
    """Container for the finalized pipeline output."""

    facts: list[str]
    enriched_facts: list[EnrichedFact]
    settings: ExtractionSettings
    source: SourceLabel
    note: str | None = None

"""Fact extraction orchestration: generation attempts, fallback and finalization."""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from time import perf_counter
from typing import Any

from studyfacts.config import GenerationConfig, get_generation_config
from studyfacts.extraction.chunking import chunk_text, condense_text
from studyfacts.extraction.cleaning import clean_candidates
from studyfacts.extraction.compaction import compact_fact
from studyfacts.extraction.enrichment import enrich_facts
from studyfacts.extraction.extractor_interface import FactExtractorInterface
from studyfacts.extraction.fallback_extractor import FallbackExtractor
from studyfacts.extraction.llm_extractor import LLMExtractionError, LLMFactExtractor
from studyfacts.extraction.settings import MAX_FACTS_RANGE, normalize_extraction_settings
from studyfacts.extraction.text import normalize_text, unique_casefold
from studyfacts.extraction.types import (
    AttemptOutcome,
    ExtractionSettings,
    FactExtractionResult,
    SourceLabel,
)

logger = logging.getLogger(__name__)

CONDENSED_RETRY_FLOOR = 6
INTERMEDIATE_CAP = MAX_FACTS_RANGE[1]

FAST_MODE_NOTE = "Fast mode: facts were selected with sentence heuristics only."
FALLBACK_NOTE = "The generative backend produced no usable facts; sentence heuristics were used instead."
UNCONFIGURED_NOTE = "No generative provider is configured; sentence heuristics were used instead."
CEILING_NOTE = "Text exceeds {limit} characters, so generative extraction was skipped; sentence heuristics were used instead."

# Returns the segment to send for the current accumulator, or None to skip the attempt.
SegmentSelector = Callable[[list[str]], str | None]


class FactExtractionInputError(ValueError):
    """Raised when the caller supplies no usable text."""


@dataclass(slots=True)
class GenerationRun:
    """Candidates gathered by the retry loop and how they were obtained."""

    candidates: list[str]
    source: SourceLabel
    note: str | None = None
    attempts: list[AttemptOutcome] = field(default_factory=list)


def extract_study_facts(
    text: str | None,
    raw_settings: Any = None,
    *,
    extractor: FactExtractorInterface | None = None,
    config: GenerationConfig | None = None,
) -> FactExtractionResult:
    """Run the whole pipeline for one document text."""

    normalized = normalize_text(text)
    if not normalized:
        raise FactExtractionInputError("Text is required for fact extraction.")
    settings = normalize_extraction_settings(raw_settings)

    total_started = perf_counter()
    attempts: list[AttemptOutcome] = []
    if settings.fast_mode:
        candidates = _fallback_candidates(normalized)
        source: SourceLabel = "fallback-fast"
        note: str | None = FAST_MODE_NOTE
    else:
        active_config = config or get_generation_config()
        active_extractor = extractor or LLMFactExtractor.from_config(active_config)
        run = run_generation_attempts(
            normalized,
            active_extractor,
            target=settings.max_facts,
            config=active_config,
        )
        candidates, source, note, attempts = run.candidates, run.source, run.note, run.attempts

    started = perf_counter()
    compacted = [fact for fact in (compact_fact(c, settings.max_fact_words) for c in candidates) if fact]
    grounded = clean_candidates(compacted, normalized, INTERMEDIATE_CAP)
    if not grounded:
        grounded = unique_casefold(compacted)
    if not grounded:
        excerpt = compact_fact(FallbackExtractor.excerpt(normalized), settings.max_fact_words)
        grounded = [excerpt] if excerpt else []
    result = finalize_facts(grounded, normalized, settings, source=source, note=note)
    finalize_ms = (perf_counter() - started) * 1000.0

    logger.info(
        (
            "facts.extraction_timing source=%s chars=%d attempts=%d failed_attempts=%d "
            "candidates=%d facts=%d finalize_ms=%.2f total_ms=%.2f"
        ),
        result.source,
        len(normalized),
        len(attempts),
        sum(1 for attempt in attempts if attempt.error),
        len(candidates),
        len(result.facts),
        finalize_ms,
        (perf_counter() - total_started) * 1000.0,
    )
    return result


def run_generation_attempts(
    text: str,
    extractor: FactExtractorInterface,
    *,
    target: int,
    config: GenerationConfig,
) -> GenerationRun:
    """Try full text, then chunks, then a condensed excerpt until ``target`` facts are gathered.

    Calls run one at a time so the loop can stop as soon as the quota is met.
    """

    if len(text) > config.max_llm_chars:
        logger.info(
            "facts.generation_skipped reason=length chars=%d limit=%d",
            len(text),
            config.max_llm_chars,
        )
        return GenerationRun(
            candidates=_fallback_candidates(text),
            source="fallback",
            note=CEILING_NOTE.format(limit=config.max_llm_chars),
        )
    if isinstance(extractor, LLMFactExtractor) and not extractor.is_configured:
        logger.info("facts.generation_skipped reason=unconfigured provider=%s", config.provider)
        return GenerationRun(candidates=_fallback_candidates(text), source="fallback", note=UNCONFIGURED_NOTE)

    per_call = max(1, min(target, config.max_facts_per_call))
    accumulated: list[str] = []
    outcomes: list[AttemptOutcome] = []
    for label, select_segment in _attempt_plan(text, target, config):
        if quota_met(accumulated, target):
            break
        segment = select_segment(accumulated)
        if segment is None:
            continue
        outcome = _run_attempt(extractor, label, segment, per_call)
        outcomes.append(outcome)
        accumulated = clean_candidates([*accumulated, *outcome.candidates], text, target)

    if accumulated:
        return GenerationRun(candidates=accumulated, source="llm", attempts=outcomes)
    return GenerationRun(
        candidates=_fallback_candidates(text),
        source="fallback",
        note=FALLBACK_NOTE,
        attempts=outcomes,
    )


def quota_met(accumulated: list[str], target: int) -> bool:
    return len(accumulated) >= target


def finalize_facts(
    facts: list[str],
    source_text: str,
    settings: ExtractionSettings,
    *,
    source: SourceLabel,
    note: str | None = None,
) -> FactExtractionResult:
    """Apply the word budget and fact cap, then enrich in the same order."""

    in_budget = [
        fact for fact in facts if settings.min_fact_words <= len(fact.split()) <= settings.max_fact_words
    ]
    selected = (in_budget or list(facts))[: settings.max_facts]
    enriched = enrich_facts(selected, source_text)
    if not settings.include_source_preview:
        for item in enriched:
            item.source_preview = ""
    return FactExtractionResult(
        facts=selected,
        enriched_facts=enriched,
        settings=settings,
        source=source,
        note=note,
    )


def _attempt_plan(text: str, target: int, config: GenerationConfig) -> list[tuple[str, SegmentSelector]]:
    plan: list[tuple[str, SegmentSelector]] = [("full_text", lambda _acc: text)]

    if len(text) > config.chunk_trigger_chars:
        chunks = chunk_text(text, config.chunk_max_chars)[: config.max_chunks]
        for index, chunk in enumerate(chunks):
            plan.append((f"chunk_{index + 1}", lambda _acc, chunk=chunk: chunk))

    condensed = condense_text(text, config.condensed_max_sentences)
    floor = min(CONDENSED_RETRY_FLOOR, target)

    def select_condensed(accumulated: list[str]) -> str | None:
        if len(accumulated) >= floor or not condensed or condensed == text:
            return None
        return condensed

    plan.append(("condensed", select_condensed))
    return plan


def _run_attempt(
    extractor: FactExtractorInterface,
    label: str,
    segment: str,
    max_facts: int,
) -> AttemptOutcome:
    started = perf_counter()
    try:
        candidates = extractor.extract_candidates(segment, max_facts=max_facts)
    except LLMExtractionError as exc:
        logger.warning(
            "facts.attempt_failed attempt=%s chars=%d elapsed_ms=%.2f error=%s",
            label,
            len(segment),
            (perf_counter() - started) * 1000.0,
            exc,
        )
        return AttemptOutcome(label=label, error=str(exc))
    logger.info(
        "facts.attempt_completed attempt=%s chars=%d candidates=%d elapsed_ms=%.2f",
        label,
        len(segment),
        len(candidates),
        (perf_counter() - started) * 1000.0,
    )
    return AttemptOutcome(label=label, candidates=list(candidates))


def _fallback_candidates(text: str) -> list[str]:
    raw = FallbackExtractor().extract_candidates(text)
    return clean_candidates(raw, text, INTERMEDIATE_CAP) or raw

"""Fact extraction pipeline stages."""

from studyfacts.extraction.cleaning import clean_candidates
from studyfacts.extraction.compaction import compact_fact
from studyfacts.extraction.enrichment import enrich_facts
from studyfacts.extraction.fallback_extractor import FallbackExtractor
from studyfacts.extraction.llm_extractor import LLMExtractionError, LLMFactExtractor
from studyfacts.extraction.settings import normalize_extraction_settings
from studyfacts.extraction.types import EnrichedFact, ExtractionSettings, FactExtractionResult

__all__ = [
    "EnrichedFact",
    "ExtractionSettings",
    "FactExtractionResult",
    "FallbackExtractor",
    "LLMExtractionError",
    "LLMFactExtractor",
    "clean_candidates",
    "compact_fact",
    "enrich_facts",
    "normalize_extraction_settings",
]

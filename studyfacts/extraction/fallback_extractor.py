"""Deterministic sentence-selection extractor used without a generative backend."""

from __future__ import annotations

from studyfacts.extraction.extractor_interface import FactExtractorInterface
from studyfacts.extraction.text import ELLIPSIS, normalize_text, split_sentences

DEFAULT_FALLBACK_MAX_FACTS = 12
MIN_SENTENCE_CHARS = 20
EXCERPT_MAX_CHARS = 180


class FallbackExtractor(FactExtractorInterface):
    """Pick informative-length sentences in source order."""

    def extract_candidates(self, text: str, *, max_facts: int = DEFAULT_FALLBACK_MAX_FACTS) -> list[str]:
        """Return up to ``max_facts`` sentences, or one excerpt when none qualify."""

        normalized = normalize_text(text)
        if not normalized:
            return []

        selected: list[str] = []
        for sentence in split_sentences(normalized):
            if len(selected) >= max_facts:
                break
            if len(sentence) >= MIN_SENTENCE_CHARS:
                selected.append(sentence)
        if selected:
            return selected
        return [self.excerpt(normalized)]

    @staticmethod
    def excerpt(text: str, limit: int = EXCERPT_MAX_CHARS) -> str:
        """Return the text cut to ``limit`` characters with an ellipsis suffix."""

        normalized = normalize_text(text)
        if not normalized:
            return ""
        cut = normalized[: limit - len(ELLIPSIS)].rstrip(" .,;:")
        return f"{cut}{ELLIPSIS}"

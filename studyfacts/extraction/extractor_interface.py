"""Extractor interface for pluggable fact candidate sources."""

from abc import ABC, abstractmethod


class FactExtractorInterface(ABC):
    """Abstract source of raw fact candidates."""

    @abstractmethod
    def extract_candidates(self, text: str, *, max_facts: int) -> list[str]:
        """Return raw, unvalidated fact candidates for a text segment."""

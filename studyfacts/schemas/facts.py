"""Fact extraction endpoint schemas."""

from __future__ import annotations

from typing import Any, Generic, TypeVar

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from studyfacts.extraction.types import FactCategory, FactExtractionResult, SourceLabel

T = TypeVar("T")


class ApiResponse(BaseModel, Generic[T]):
    """JSON envelope shared by every route."""

    data: T


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ImageReference(_CamelModel):
    """Image already extracted from the uploaded document."""

    url: str
    original_name: str | None = None


class FactExtractionRequest(_CamelModel):
    """Decoded document text plus optional extraction settings."""

    text: str | None = None
    settings: dict[str, Any] | str | None = None
    file_name: str | None = None
    images: list[ImageReference] | None = None


class ExtractionSettingsRead(_CamelModel):
    max_facts: int
    fast_mode: bool
    include_source_preview: bool
    min_fact_words: int
    max_fact_words: int


class EnrichedFactRead(_CamelModel):
    fact: str
    category: FactCategory
    context: str
    source_preview: str


class FactExtractionResponse(_CamelModel):
    """Finalized facts for one document."""

    source: SourceLabel
    file_name: str | None = None
    chars: int
    facts: list[str] = Field(default_factory=list)
    enriched_facts: list[EnrichedFactRead] = Field(default_factory=list)
    images: list[ImageReference] | None = None
    settings: ExtractionSettingsRead
    note: str | None = None

    @classmethod
    def from_result(
        cls,
        result: FactExtractionResult,
        *,
        chars: int,
        file_name: str | None = None,
        images: list[ImageReference] | None = None,
    ) -> "FactExtractionResponse":
        return cls(
            source=result.source,
            file_name=file_name,
            chars=chars,
            facts=list(result.facts),
            enriched_facts=[
                EnrichedFactRead(
                    fact=item.fact,
                    category=item.category,
                    context=item.context,
                    source_preview=item.source_preview,
                )
                for item in result.enriched_facts
            ],
            images=images,
            settings=ExtractionSettingsRead.model_validate(result.settings.to_payload()),
            note=result.note,
        )

"""Normalization of caller-supplied extraction options."""

from __future__ import annotations

import json
import math
from collections.abc import Mapping
from typing import Any

from pydantic import BaseModel

from studyfacts.extraction.types import ExtractionSettings

MAX_FACTS_RANGE = (1, 30)
MIN_FACT_WORDS_RANGE = (3, 30)
MAX_FACT_WORDS_CEILING = 60

_DEFAULTS = ExtractionSettings()
_TRUTHY_STRINGS = {"true", "1", "yes", "on"}

_FIELD_ALIASES: dict[str, tuple[str, ...]] = {
    "max_facts": ("maxFacts", "max_facts"),
    "fast_mode": ("fastMode", "fast_mode"),
    "include_source_preview": ("includeSourcePreview", "include_source_preview"),
    "min_fact_words": ("minFactWords", "min_fact_words"),
    "max_fact_words": ("maxFactWords", "max_fact_words"),
}


def normalize_extraction_settings(raw: Any = None) -> ExtractionSettings:
    """Return clamped settings for any input; never raises."""

    values = _coerce_mapping(raw)

    max_facts = _clamped_int(_lookup(values, "max_facts"), _DEFAULTS.max_facts, *MAX_FACTS_RANGE)
    min_words = _clamped_int(
        _lookup(values, "min_fact_words"),
        _DEFAULTS.min_fact_words,
        *MIN_FACT_WORDS_RANGE,
    )
    max_words = _clamped_int(
        _lookup(values, "max_fact_words"),
        max(_DEFAULTS.max_fact_words, min_words),
        min_words,
        MAX_FACT_WORDS_CEILING,
    )
    return ExtractionSettings(
        max_facts=max_facts,
        fast_mode=_is_explicit_true(_lookup(values, "fast_mode")),
        include_source_preview=not _is_explicit_false(_lookup(values, "include_source_preview")),
        min_fact_words=min_words,
        max_fact_words=max_words,
    )


def _coerce_mapping(raw: Any) -> Mapping[str, Any]:
    if isinstance(raw, ExtractionSettings):
        return {name: getattr(raw, name) for name in _FIELD_ALIASES}
    if isinstance(raw, BaseModel):
        return raw.model_dump(exclude_none=True)
    if isinstance(raw, (str, bytes)):
        try:
            decoded = json.loads(raw)
        except (TypeError, ValueError):
            return {}
        return decoded if isinstance(decoded, Mapping) else {}
    if isinstance(raw, Mapping):
        return raw
    return {}


def _lookup(values: Mapping[str, Any], field_name: str) -> Any:
    for key in _FIELD_ALIASES[field_name]:
        if key in values and values[key] is not None:
            return values[key]
    return None


def _clamped_int(value: Any, default: int, lower: int, upper: int) -> int:
    number = _finite_number(value)
    if number is None:
        return max(lower, min(upper, default))
    # Halves round up, not to even.
    return max(lower, min(upper, math.floor(number + 0.5)))


def _finite_number(value: Any) -> float | None:
    if isinstance(value, bool) or value is None:
        return None
    if isinstance(value, str):
        value = value.strip()
        if not value:
            return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    if not math.isfinite(number):
        return None
    return number


def _is_explicit_true(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        return value.strip().lower() in _TRUTHY_STRINGS
    return False


def _is_explicit_false(value: Any) -> bool:
    if isinstance(value, bool):
        return not value
    if isinstance(value, str):
        return value.strip().lower() == "false"
    return False

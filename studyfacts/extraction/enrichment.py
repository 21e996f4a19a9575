"""Category tagging and source-passage lookup for accepted facts."""

from __future__ import annotations

import re

from studyfacts.extraction.text import normalize_text, split_sentences, tokenize, truncate_with_ellipsis
from studyfacts.extraction.types import EnrichedFact, FactCategory

CONTEXT_MAX_CHARS = 320
SOURCE_PREVIEW_MAX_CHARS = 520
FACT_TOKEN_MIN_LENGTH = 4

# Ordered by priority; the first matching rule wins.
CATEGORY_RULES: tuple[tuple[FactCategory, re.Pattern[str]], ...] = (
    (
        "Comparison/Trade-off",
        re.compile(
            r"\b(?:versus|vs\.?|compared (?:to|with)|whereas|unlike|trade-?offs?|"
            r"better than|worse than|faster than|slower than|more \w+ than|less \w+ than|"
            r"in contrast|differs? from|on the other hand)\b",
            re.IGNORECASE,
        ),
    ),
    (
        "Cause and Effect",
        re.compile(
            r"\b(?:because|causes?|caused|leads? to|led to|results? in|resulted in|due to|"
            r"therefore|consequently|triggers?|triggered|as a result|effect of)\b",
            re.IGNORECASE,
        ),
    ),
    (
        "Method",
        re.compile(
            r"\b(?:methods?|techniques?|approach(?:es)?|algorithms?|by using|procedures?|"
            r"strateg(?:y|ies)|is used to|are used to|can be used)\b",
            re.IGNORECASE,
        ),
    ),
    (
        "Process",
        re.compile(
            r"\b(?:process(?:es)?|steps?|stages?|phases?|first|then|finally|during|cycles?|"
            r"sequence|followed by)\b",
            re.IGNORECASE,
        ),
    ),
    (
        "Definition",
        re.compile(
            r"\b(?:defined as|refers? to|known as|is called|are called|means|"
            r"(?:is|are) (?:a|an|the) )",
            re.IGNORECASE,
        ),
    ),
)


def categorize_fact(fact: str) -> FactCategory:
    for category, pattern in CATEGORY_RULES:
        if pattern.search(fact):
            return category
    return "Concept"


def locate_source_context(fact: str, source_text: str, max_chars: int) -> str:
    """Return the best-matching source sentence with one neighbour on each side."""

    return truncate_with_ellipsis(_best_passage(fact, source_text, _index_sentences(source_text)), max_chars)


def enrich_fact(
    fact: str,
    source_text: str,
    sentence_index: list[tuple[str, frozenset[str]]] | None = None,
) -> EnrichedFact:
    if sentence_index is None:
        sentence_index = _index_sentences(source_text)
    passage = _best_passage(fact, source_text, sentence_index)
    return EnrichedFact(
        fact=fact,
        category=categorize_fact(fact),
        context=truncate_with_ellipsis(passage, CONTEXT_MAX_CHARS),
        source_preview=truncate_with_ellipsis(passage, SOURCE_PREVIEW_MAX_CHARS),
    )


def enrich_facts(facts: list[str], source_text: str) -> list[EnrichedFact]:
    """Enrich every fact, preserving order. The source is split and tokenized once."""

    sentence_index = _index_sentences(source_text)
    return [enrich_fact(fact, source_text, sentence_index) for fact in facts]


def _index_sentences(source_text: str) -> list[tuple[str, frozenset[str]]]:
    return [
        (sentence, frozenset(tokenize(sentence, min_length=FACT_TOKEN_MIN_LENGTH)))
        for sentence in split_sentences(source_text)
    ]


def _best_passage(fact: str, source_text: str, sentence_index: list[tuple[str, frozenset[str]]]) -> str:
    if not sentence_index:
        return normalize_text(source_text)

    fact_tokens = set(tokenize(fact, min_length=FACT_TOKEN_MIN_LENGTH))
    best_index = 0
    best_score = -1
    for index, (_sentence, sentence_tokens) in enumerate(sentence_index):
        score = len(fact_tokens & sentence_tokens)
        if score > best_score:
            best_index = index
            best_score = score

    window = sentence_index[max(0, best_index - 1) : best_index + 2]
    return " ".join(sentence for sentence, _tokens in window)

"""Sentence-aligned chunking and condensing of long documents."""

from __future__ import annotations

from studyfacts.extraction.text import split_sentences

DEFAULT_CHUNK_MAX_CHARS = 4200
DEFAULT_CONDENSED_MAX_SENTENCES = 40
CONDENSED_MIN_SENTENCE_CHARS = 25


def chunk_text(text: str, max_chars: int = DEFAULT_CHUNK_MAX_CHARS) -> list[str]:
    """Greedily pack consecutive sentences into chunks of at most ``max_chars``.

    A sentence longer than the budget becomes a chunk of its own rather than
    being cut mid-sentence.
    """

    chunks: list[str] = []
    current: list[str] = []
    current_len = 0
    for sentence in split_sentences(text):
        added = len(sentence) + (1 if current else 0)
        if current and current_len + added > max_chars:
            chunks.append(" ".join(current))
            current = []
            current_len = 0
            added = len(sentence)
        current.append(sentence)
        current_len += added
    if current:
        chunks.append(" ".join(current))
    return chunks


def condense_text(text: str, max_sentences: int = DEFAULT_CONDENSED_MAX_SENTENCES) -> str:
    """Return a representative excerpt built from the longer sentences."""

    selected: list[str] = []
    for sentence in split_sentences(text):
        if len(selected) >= max_sentences:
            break
        if len(sentence) >= CONDENSED_MIN_SENTENCE_CHARS:
            selected.append(sentence)
    return " ".join(selected)

"""Tests for fact compaction, categorization and source context lookup."""

import unittest
from unittest import mock

from studyfacts.extraction.compaction import compact_fact
from studyfacts.extraction.enrichment import (
    CONTEXT_MAX_CHARS,
    SOURCE_PREVIEW_MAX_CHARS,
    categorize_fact,
    enrich_facts,
    locate_source_context,
)
from studyfacts.extraction.text import split_sentences


class CompactFactTests(unittest.TestCase):
    def test_strips_quotes_and_hedging_phrases(self) -> None:
        self.assertEqual(
            compact_fact('"In this lecture, enzymes lower the activation energy of reactions"', 24),
            "Enzymes lower the activation energy of reactions.",
        )
        self.assertEqual(
            compact_fact("Enzymes, for example, speed up reactions.", 24),
            "Enzymes, speed up reactions.",
        )

    def test_keeps_two_clauses_and_word_budget(self) -> None:
        self.assertEqual(
            compact_fact("Enzymes are proteins, they speed up reactions, and they are reusable.", 24),
            "Enzymes are proteins, they speed up reactions.",
        )
        self.assertEqual(
            compact_fact("One two three four five six seven eight nine ten.", 5),
            "One two three four five.",
        )

    def test_strips_trailing_separators_and_keeps_terminal_punctuation(self) -> None:
        self.assertEqual(compact_fact("Why do enzymes denature at high temperatures?", 24), "Why do enzymes denature at high temperatures?")
        self.assertEqual(compact_fact("Enzymes are catalysts;", 24), "Enzymes are catalysts.")
        self.assertEqual(compact_fact("enzymes are catalysts:", 24), "Enzymes are catalysts.")

    def test_empty_input(self) -> None:
        self.assertEqual(compact_fact("", 10), "")
        self.assertEqual(compact_fact('  ""  ', 10), "")


class CategorizeFactTests(unittest.TestCase):
    def test_priority_order(self) -> None:
        self.assertEqual(categorize_fact("TCP is reliable whereas UDP is faster."), "Comparison/Trade-off")
        self.assertEqual(categorize_fact("Heat causes the enzyme to denature."), "Cause and Effect")
        self.assertEqual(categorize_fact("Gradient descent is an algorithm for optimization."), "Method")
        self.assertEqual(categorize_fact("Mitosis has four stages that divide the nucleus."), "Process")
        self.assertEqual(categorize_fact("A mutation is a change in the DNA sequence."), "Process")
        self.assertEqual(categorize_fact("Osmosis is the diffusion of water across a membrane."), "Definition")
        self.assertEqual(categorize_fact("Water boils at one hundred degrees Celsius."), "Concept")

    def test_comparison_outranks_cause(self) -> None:
        self.assertEqual(
            categorize_fact("Compared to glucose, fructose causes a smaller insulin response."),
            "Comparison/Trade-off",
        )


class SourceContextTests(unittest.TestCase):
    SOURCE = (
        "Cells are the basic unit of life. "
        "The nucleus stores DNA and controls cell activity. "
        "Mitochondria produce energy through respiration. "
        "Ribosomes build proteins from amino acids. "
        "The membrane controls what enters the cell."
    )

    def test_window_around_best_sentence(self) -> None:
        context = locate_source_context("Mitochondria produce energy.", self.SOURCE, CONTEXT_MAX_CHARS)

        self.assertEqual(
            context,
            "The nucleus stores DNA and controls cell activity. "
            "Mitochondria produce energy through respiration. "
            "Ribosomes build proteins from amino acids.",
        )

    def test_first_sentence_wins_ties_and_window_is_clipped(self) -> None:
        context = locate_source_context("Unrelated words only.", self.SOURCE, CONTEXT_MAX_CHARS)

        self.assertEqual(
            context,
            "Cells are the basic unit of life. The nucleus stores DNA and controls cell activity.",
        )

    def test_truncates_long_context(self) -> None:
        long_sentence = "Photosynthesis " + "energy " * 120 + "ends here."
        context = locate_source_context("Photosynthesis energy.", long_sentence, CONTEXT_MAX_CHARS)

        self.assertEqual(len(context), CONTEXT_MAX_CHARS)
        self.assertTrue(context.endswith("..."))

    def test_enrich_facts_preserves_order(self) -> None:
        facts = ["Ribosomes build proteins from amino acids.", "The nucleus stores DNA."]

        enriched = enrich_facts(facts, self.SOURCE)

        self.assertEqual([item.fact for item in enriched], facts)
        for item in enriched:
            self.assertLessEqual(len(item.context), CONTEXT_MAX_CHARS)
            self.assertLessEqual(len(item.source_preview), SOURCE_PREVIEW_MAX_CHARS)
        self.assertIn("Ribosomes build proteins", enriched[0].context)

    def test_enrich_facts_splits_source_once(self) -> None:
        facts = [
            "Ribosomes build proteins from amino acids.",
            "The nucleus stores DNA.",
            "Mitochondria produce energy.",
        ]

        with mock.patch(
            "studyfacts.extraction.enrichment.split_sentences", wraps=split_sentences
        ) as splitter:
            enriched = enrich_facts(facts, self.SOURCE)

        self.assertEqual(splitter.call_count, 1)
        for item in enriched:
            self.assertEqual(item.source_preview, locate_source_context(item.fact, self.SOURCE, SOURCE_PREVIEW_MAX_CHARS))
            self.assertTrue(item.source_preview.startswith(item.context.removesuffix("...")))


if __name__ == "__main__":
    unittest.main()

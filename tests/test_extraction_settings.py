"""Unit tests for extraction settings normalization."""

import unittest

from studyfacts.extraction.settings import normalize_extraction_settings
from studyfacts.extraction.types import ExtractionSettings


class ExtractionSettingsTests(unittest.TestCase):
    def test_missing_settings_use_defaults(self) -> None:
        self.assertEqual(normalize_extraction_settings(None), ExtractionSettings())
        self.assertEqual(normalize_extraction_settings({}), ExtractionSettings())
        self.assertEqual(normalize_extraction_settings(["not", "a", "mapping"]), ExtractionSettings())

    def test_numbers_are_rounded_and_clamped(self) -> None:
        settings = normalize_extraction_settings(
            {"maxFacts": 99, "minFactWords": 1.6, "maxFactWords": 500}
        )

        self.assertEqual(settings.max_facts, 30)
        self.assertEqual(settings.min_fact_words, 3)
        self.assertEqual(settings.max_fact_words, 60)

        settings = normalize_extraction_settings({"maxFacts": 0, "minFactWords": 12.4})
        self.assertEqual(settings.max_facts, 1)
        self.assertEqual(settings.min_fact_words, 12)
        self.assertEqual(settings.max_fact_words, 24)

    def test_halves_round_up(self) -> None:
        settings = normalize_extraction_settings({"maxFacts": 2.5, "minFactWords": "4.5", "maxFactWords": 20.5})

        self.assertEqual(settings.max_facts, 3)
        self.assertEqual(settings.min_fact_words, 5)
        self.assertEqual(settings.max_fact_words, 21)

    def test_non_finite_and_malformed_numbers_fall_back_to_defaults(self) -> None:
        settings = normalize_extraction_settings(
            {"maxFacts": float("nan"), "minFactWords": "lots", "maxFactWords": float("inf")}
        )

        self.assertEqual(settings.max_facts, 12)
        self.assertEqual(settings.min_fact_words, 5)
        self.assertEqual(settings.max_fact_words, 24)

    def test_max_words_never_below_min_words(self) -> None:
        settings = normalize_extraction_settings({"minFactWords": 20, "maxFactWords": 8})

        self.assertEqual(settings.min_fact_words, 20)
        self.assertEqual(settings.max_fact_words, 20)
        self.assertLessEqual(settings.min_fact_words, settings.max_fact_words)

    def test_source_preview_only_disabled_by_explicit_false(self) -> None:
        self.assertTrue(normalize_extraction_settings({"includeSourcePreview": 0}).include_source_preview)
        self.assertTrue(normalize_extraction_settings({"includeSourcePreview": "no"}).include_source_preview)
        self.assertFalse(normalize_extraction_settings({"includeSourcePreview": False}).include_source_preview)
        self.assertFalse(normalize_extraction_settings({"include_source_preview": "false"}).include_source_preview)

    def test_json_encoded_settings_and_snake_case_keys(self) -> None:
        settings = normalize_extraction_settings('{"maxFacts": 4, "fastMode": true}')
        self.assertEqual(settings.max_facts, 4)
        self.assertTrue(settings.fast_mode)

        settings = normalize_extraction_settings({"max_facts": "7", "fast_mode": "yes"})
        self.assertEqual(settings.max_facts, 7)
        self.assertTrue(settings.fast_mode)

        self.assertEqual(normalize_extraction_settings("{not json"), ExtractionSettings())

    def test_camel_case_payload(self) -> None:
        settings = normalize_extraction_settings({"maxFacts": 3, "minFactWords": 6, "maxFactWords": 18})

        self.assertEqual(
            settings.to_payload(),
            {
                "maxFacts": 3,
                "fastMode": False,
                "includeSourcePreview": True,
                "minFactWords": 6,
                "maxFactWords": 18,
            },
        )


if __name__ == "__main__":
    unittest.main()

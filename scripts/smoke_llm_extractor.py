"""Run a real fact extraction against the configured provider.

Usage (after ``pip install -e .``):
    python scripts/smoke_llm_extractor.py
    FACT_PROVIDER=openai OPENAI_API_KEY=... python scripts/smoke_llm_extractor.py
"""

from __future__ import annotations

import json
import logging

from studyfacts.services.facts import extract_study_facts


def _demo_text() -> str:
    return (
        "Photosynthesis converts light energy into chemical energy stored in glucose. "
        "It takes place in the chloroplasts of plant cells, which contain the pigment chlorophyll. "
        "The light-dependent reactions split water molecules and release oxygen as a by-product. "
        "The Calvin cycle then uses ATP and NADPH to fix carbon dioxide into sugars. "
        "Compared to cellular respiration, photosynthesis stores energy rather than releasing it."
    )


def main() -> None:
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s %(message)s")
    result = extract_study_facts(_demo_text(), {"maxFacts": 5})
    print(
        json.dumps(
            {
                "source": result.source,
                "note": result.note,
                "settings": result.settings.to_payload(),
                "facts": result.facts,
                "enrichedFacts": [
                    {
                        "fact": item.fact,
                        "category": item.category,
                        "context": item.context,
                        "sourcePreview": item.source_preview,
                    }
                    for item in result.enriched_facts
                ],
            },
            indent=2,
        )
    )


if __name__ == "__main__":
    main()

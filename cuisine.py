from typing import Optional

from recipe_models import Cuisine, ExtractionRules


def parse_cuisine(text: Optional[str], rules: Optional[ExtractionRules] = None) -> Cuisine:
    """Best-effort cuisine tag from free text, ``Western`` when nothing matches."""
    rules = rules or ExtractionRules()
    lowered = (text or "").lower()
    for label, keywords in rules.cuisine_keywords:
        if any(keyword in lowered for keyword in keywords):
            return Cuisine(label)
    return Cuisine.WESTERN

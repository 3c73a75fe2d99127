import json
from dataclasses import dataclass, field, fields, replace
from enum import Enum
from pathlib import Path
from typing import Any, Dict, List, Tuple, Union

import constants


class Cuisine(str, Enum):
    """Cuisine labels. ``ALL`` is a filter sentinel and never a classification."""

    CHINESE = "Chinese"
    WESTERN = "Western"
    ITALIAN = "Italian"
    JAPANESE = "Japanese"
    KOREAN = "Korean"
    ALL = "All"


@dataclass
class ExtractedRecipe:
    """Structured representation of a captured recipe."""

    title: str
    image: str = constants.DEFAULT_IMAGE_URL
    ingredients: List[str] = field(default_factory=list)
    steps: List[str] = field(default_factory=list)
    cuisine: Cuisine = Cuisine.WESTERN

    def to_dict(self) -> Dict[str, Any]:
        return {
            "title": self.title,
            "image": self.image,
            "ingredients": list(self.ingredients),
            "steps": list(self.steps),
            "cuisine": self.cuisine.value,
        }


@dataclass(frozen=True)
class ExtractionRules:
    """Keyword tables driving the heuristics.

    The defaults are tuned for Chinese social-media recipe posts. Any table
    can be replaced, e.g. from a JSON file with :meth:`from_json`.
    """

    action_verbs: Tuple[str, ...] = constants.ACTION_VERBS
    step_opening_verbs: Tuple[str, ...] = constants.STEP_OPENING_VERBS
    ingredient_tokens: Tuple[str, ...] = constants.INGREDIENT_TOKENS
    lead_in_phrases: Tuple[str, ...] = constants.LEAD_IN_PHRASES
    title_keywords: Tuple[str, ...] = constants.TITLE_KEYWORDS
    cuisine_keywords: Tuple[Tuple[str, Tuple[str, ...]], ...] = constants.CUISINE_KEYWORDS

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ExtractionRules":
        known = {f.name for f in fields(cls)}
        unknown = set(data) - known
        if unknown:
            raise ValueError(f"Unknown rule tables: {', '.join(sorted(unknown))}")

        overrides: Dict[str, Any] = {}
        for name, value in data.items():
            if name == "cuisine_keywords":
                overrides[name] = _cuisine_table(value)
                continue
            if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
                raise ValueError(f"Rule table '{name}' must be a list of strings")
            overrides[name] = tuple(value)
        return replace(cls(), **overrides)

    @classmethod
    def from_json(cls, path: Union[str, Path]) -> "ExtractionRules":
        with open(path, encoding="utf-8") as f:
            data = json.load(f)
        if not isinstance(data, dict):
            raise ValueError(f"Rules file {path} must contain a JSON object")
        return cls.from_dict(data)


def _cuisine_table(value: Any) -> Tuple[Tuple[str, Tuple[str, ...]], ...]:
    # A JSON object keeps insertion order, which is the priority order.
    if not isinstance(value, dict):
        raise ValueError("Rule table 'cuisine_keywords' must map labels to keyword lists")
    table = []
    for label, keywords in value.items():
        try:
            cuisine = Cuisine(label)
        except ValueError:
            raise ValueError(f"Unknown cuisine label '{label}'") from None
        if cuisine is Cuisine.ALL:
            raise ValueError("'All' cannot be used as a classification label")
        if not isinstance(keywords, list) or not all(isinstance(k, str) for k in keywords):
            raise ValueError(f"Keywords for '{label}' must be a list of strings")
        table.append((cuisine.value, tuple(k.lower() for k in keywords)))
    return tuple(table)

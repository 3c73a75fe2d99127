import json
import logging
import re
from typing import Any, List, Mapping, Optional

import requests

from constants import (
    DEFAULT_IMAGE_URL,
    INGREDIENT_MAX_LEN,
    INGREDIENTS_PLACEHOLDER,
    MAX_INGREDIENTS,
    MAX_STEPS,
    STEP_MAX_LEN,
    STEPS_PLACEHOLDER,
    TITLE_PLACEHOLDER,
    UNTITLED_RECIPE,
)
from cuisine import parse_cuisine
from recipe_models import ExtractedRecipe, ExtractionRules
from recipe_parser import dedupe, extract_ingredients, extract_steps, extract_title

logger = logging.getLogger(__name__)

OPENAI_CHAT_URL = "https://api.openai.com/v1/chat/completions"
DEFAULT_MODEL = "gpt-4o-mini"
MAX_PROMPT_CHARS = 8000

SYSTEM_PROMPT = """你是一个专业的食谱提取助手。请从提供的内容中提取食谱信息。

返回一个 JSON 对象，格式如下：
{
  "title": "食谱名称",
  "ingredients": ["食材1", "食材2", ...],
  "steps": ["步骤1", "步骤2", ...],
  "cuisine": "Chinese/Western/Italian/Japanese/Korean"
}

提取规则：
1. 标题：如果包含"——"，提取后面的部分，去除表情符号和多余文字。
2. 食材：只从【材料】、【配菜】、【调味】等标记的区域内提取，不要从做法步骤中提取；去除括号内的说明文字和"我准备了"等描述性文字。
3. 步骤：只从【做法】或"做法："区域提取；有编号时按编号顺序，每个编号一步；子步骤（"-"或"•"）用分号合并到主步骤中。
4. 菜系：根据食材和做法判断。"""


def extract(
    text: Optional[str],
    image_url: Optional[str] = None,
    source_url: Optional[str] = None,
    rules: Optional[ExtractionRules] = None
) -> ExtractedRecipe:
    """Segment free text into a recipe. Never raises; empty fields get placeholders."""
    text = text or ""
    rules = rules or ExtractionRules()

    title = extract_title(text, source_url, rules)
    ingredients = extract_ingredients(text, rules)
    steps = extract_steps(text, rules)
    logger.debug("Heuristics found %d ingredients, %d steps", len(ingredients), len(steps))

    return ExtractedRecipe(
        title=title or TITLE_PLACEHOLDER,
        image=image_url or DEFAULT_IMAGE_URL,
        ingredients=ingredients or [INGREDIENTS_PLACEHOLDER],
        steps=steps or [STEPS_PLACEHOLDER],
        cuisine=parse_cuisine(text, rules),
    )


def _string_items(value: Any) -> List[str]:
    if not isinstance(value, list):
        return []
    return [item.strip() for item in value if isinstance(item, str) and item.strip()]


def normalize_external(data: Any, image_url: Optional[str] = None) -> ExtractedRecipe:
    """Coerce a recipe-shaped mapping from an external service."""
    if not isinstance(data, Mapping):
        raise ValueError("External recipe must be a JSON object")

    title = data.get("title")
    cuisine = data.get("cuisine")
    image = data.get("image")
    ingredients = dedupe(
        i for i in _string_items(data.get("ingredients")) if len(i) < INGREDIENT_MAX_LEN
    )
    steps = dedupe(s for s in _string_items(data.get("steps")) if len(s) < STEP_MAX_LEN)
    return ExtractedRecipe(
        title=title.strip() if isinstance(title, str) and title.strip() else UNTITLED_RECIPE,
        image=image_url or (image if isinstance(image, str) and image else DEFAULT_IMAGE_URL),
        ingredients=ingredients[:MAX_INGREDIENTS],
        steps=steps[:MAX_STEPS],
        cuisine=parse_cuisine(cuisine if isinstance(cuisine, str) else ""),
    )


def _extract_first_json_block(text: str) -> Optional[dict]:
    try:
        return json.loads(text)
    except ValueError:
        pass

    json_match = re.search(r"\{.*\}", text, re.S)
    if not json_match:
        return None
    try:
        return json.loads(json_match.group(0))
    except ValueError:
        return None


def gpt_structure(
    text: str,
    api_key: str,
    model: str = DEFAULT_MODEL,
    timeout: float = 60,
    image_url: Optional[str] = None
) -> ExtractedRecipe:
    """Ask the chat completion API for the recipe. Request and parse errors propagate."""
    resp = requests.post(
        OPENAI_CHAT_URL,
        headers={"Authorization": f"Bearer {api_key}"},
        json={
            "model": model,
            "messages": [
                {"role": "system", "content": SYSTEM_PROMPT},
                {"role": "user", "content": f"请从以下内容中提取食谱信息：\n\n{text[:MAX_PROMPT_CHARS]}"}
            ],
            "response_format": {"type": "json_object"},
            "temperature": 0.3
        },
        timeout=timeout
    )
    resp.raise_for_status()
    content = resp.json()["choices"][0]["message"]["content"]
    # null when the model refuses
    if not isinstance(content, str):
        raise ValueError("No JSON in GPT response")

    data = _extract_first_json_block(content.strip())
    if data is None:
        raise ValueError("No JSON in GPT response")
    return normalize_external(data, image_url)


def _content_count(items: List[str], placeholder: str) -> int:
    return sum(1 for item in items if item != placeholder)


def is_richer(candidate: ExtractedRecipe, baseline: ExtractedRecipe) -> bool:
    """True when ``candidate`` has strictly more ingredients and strictly more steps.

    Placeholder entries do not count.
    """
    return (
        _content_count(candidate.ingredients, INGREDIENTS_PLACEHOLDER)
        > _content_count(baseline.ingredients, INGREDIENTS_PLACEHOLDER)
        and _content_count(candidate.steps, STEPS_PLACEHOLDER)
        > _content_count(baseline.steps, STEPS_PLACEHOLDER)
    )


class RecipeExtractor:
    """Service producing an ExtractedRecipe from raw text, optionally helped by GPT."""

    def __init__(
        self,
        use_gpt: bool = False,
        api_key: Optional[str] = None,
        model: str = DEFAULT_MODEL,
        timeout: float = 60,
        rules: Optional[ExtractionRules] = None
    ):
        self.use_gpt = use_gpt
        self.api_key = api_key
        self.model = model
        self.timeout = timeout
        self.rules = rules or ExtractionRules()

    def build(
        self,
        text: Optional[str],
        image_url: Optional[str] = None,
        source_url: Optional[str] = None
    ) -> ExtractedRecipe:
        recipe = extract(text, image_url, source_url, self.rules)
        if not (self.use_gpt and self.api_key and text):
            return recipe

        try:
            gpt_recipe = gpt_structure(text, self.api_key, self.model, self.timeout, image_url)
        except (requests.RequestException, ValueError, KeyError, IndexError, TypeError) as exc:
            logger.warning("GPT extraction failed, keeping heuristic result: %s", exc)
            return recipe

        if is_richer(gpt_recipe, recipe):
            logger.info("Using GPT result (%d ingredients, %d steps)",
                        len(gpt_recipe.ingredients), len(gpt_recipe.steps))
            return gpt_recipe
        return recipe

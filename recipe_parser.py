import re
import unicodedata
from typing import Dict, Iterable, List, Optional, Tuple
from urllib.parse import unquote, urlparse

from constants import (
    ANNOTATION_RE,
    INGREDIENT_MAX_LEN,
    INGREDIENT_SECTION_PATTERNS,
    INGREDIENT_SPLIT_RE,
    LIST_MARKER_RE,
    MAX_INGREDIENTS,
    MAX_STEPS,
    METHOD_SECTION_PATTERNS,
    METHOD_START_RE,
    NUMBER_ONLY_RE,
    NUMBERED_STEP_MAX_LEN,
    NUMBERED_STEP_RE,
    PLATE_EMOJI_RE,
    STEP_LINE_MAX_LEN,
    STEP_LINE_MIN_WIDTH,
    STEP_MARKER_RE,
    STEP_MAX_LEN,
    STEP_MIN_WIDTH,
    SUB_BULLET_RE,
    TITLE_LINE_BOUNDS,
    TITLE_PATTERN_BOUNDS,
    TITLE_PATTERNS,
    TITLE_SEPARATOR,
    UNTITLED_RECIPE,
)
from recipe_models import ExtractionRules

WHITESPACE_RE = re.compile(r"\s+")


def display_width(text: str) -> int:
    """Column width of ``text``; East Asian wide and full-width characters count two."""
    return sum(2 if unicodedata.east_asian_width(ch) in ("W", "F") else 1 for ch in text)


def dedupe(items: Iterable[str]) -> List[str]:
    seen = set()
    results: List[str] = []
    for item in items:
        if item in seen:
            continue
        seen.add(item)
        results.append(item)
    return results


def _within(value: int, bounds: Tuple[int, int]) -> bool:
    low, high = bounds
    return low < value < high


def title_from_url(url: Optional[str]) -> str:
    if not url:
        return UNTITLED_RECIPE
    try:
        parsed = urlparse(url.strip())
    except ValueError:
        return UNTITLED_RECIPE
    if not parsed.scheme or not parsed.netloc:
        return UNTITLED_RECIPE

    segments = [s for s in parsed.path.split("/") if s]
    if not segments:
        return UNTITLED_RECIPE
    title = re.sub(r"[-_]", " ", unquote(segments[-1])).strip()
    return title or UNTITLED_RECIPE


def _title_from_patterns(text: str) -> str:
    for pattern in TITLE_PATTERNS:
        m = pattern.search(text)
        if not m:
            continue
        hook = (m.group(1) or "").strip()
        name = (m.group(2) or "").strip() if pattern.groups > 1 else ""
        candidate = name or hook
        if _within(len(candidate), TITLE_PATTERN_BOUNDS):
            return candidate
    return ""


def _title_from_lines(text: str, rules: ExtractionRules) -> str:
    lines = [line.strip() for line in text.split("\n") if line.strip()]
    for line in lines[:3]:
        if not _within(len(line), TITLE_LINE_BOUNDS):
            continue
        if LIST_MARKER_RE.match(line) or line.startswith("【"):
            continue
        if TITLE_SEPARATOR in line:
            candidate = line.split(TITLE_SEPARATOR)[-1]
        elif any(keyword in line for keyword in rules.title_keywords):
            candidate = line
        else:
            continue
        candidate = PLATE_EMOJI_RE.sub("", candidate).strip()
        if candidate:
            return candidate
    return ""


def extract_title(
    text: str,
    fallback_url: Optional[str] = None,
    rules: Optional[ExtractionRules] = None
) -> str:
    """Pull a dish name out of a post such as ``"30分钟快手晚餐 —— 家常版酸汤肥牛🍽️"``.

    Tries the structural patterns, then the first three lines, then the last
    path segment of ``fallback_url``. Never empty.
    """
    rules = rules or ExtractionRules()
    return (
        _title_from_patterns(text)
        or _title_from_lines(text, rules)
        or title_from_url(fallback_url)
    )


def method_start_index(text: str) -> int:
    m = METHOD_START_RE.search(text)
    return m.start() if m else -1


def _strip_lead_in(item: str, phrases: Iterable[str]) -> str:
    for phrase in sorted(phrases, key=len, reverse=True):
        if phrase and item.startswith(phrase):
            return item[len(phrase):].strip()
    return item


def extract_ingredients(text: str, rules: Optional[ExtractionRules] = None) -> List[str]:
    """Ingredients from the 材料/配菜/调味 sections before the method section."""
    rules = rules or ExtractionRules()
    start = method_start_index(text)
    search_space = text[:start] if start > 0 else text

    candidates: List[str] = []
    for pattern in INGREDIENT_SECTION_PATTERNS:
        for m in pattern.finditer(search_space):
            # annotations may contain separators themselves
            section = ANNOTATION_RE.sub("", m.group(1))
            for raw in INGREDIENT_SPLIT_RE.split(section):
                item = raw.strip()
                if not item or len(item) >= INGREDIENT_MAX_LEN:
                    continue
                # leaked instruction text
                if any(verb in item for verb in rules.action_verbs):
                    continue
                candidates.append(item)

    cleaned = [_strip_lead_in(item, rules.lead_in_phrases) for item in candidates]
    cleaned = [item for item in cleaned if 0 < len(item) < INGREDIENT_MAX_LEN]
    return dedupe(cleaned)[:MAX_INGREDIENTS]


def extract_method_section(text: str) -> Optional[str]:
    """Text of the cooking-method section, or ``None`` when no marker is found."""
    for pattern in METHOD_SECTION_PATTERNS:
        m = pattern.search(text)
        if m and m.group(1):
            return m.group(1)
    return None


def extract_numbered_steps(section: str) -> List[str]:
    """Steps introduced by ``1.``/``1、`` markers, ordered by marker value."""
    by_number: Dict[int, str] = {}
    for m in NUMBERED_STEP_RE.finditer(section):
        body = SUB_BULLET_RE.sub("；", m.group(2).strip())
        body = WHITESPACE_RE.sub(" ", body).strip(" ；")
        if display_width(body) > STEP_MIN_WIDTH and len(body) < NUMBERED_STEP_MAX_LEN:
            by_number[int(m.group(1))] = body
    return [by_number[number] for number in sorted(by_number)]


def _keep_step_line(line: str, rules: ExtractionRules) -> bool:
    if display_width(line) < STEP_LINE_MIN_WIDTH or len(line) > STEP_LINE_MAX_LEN:
        return False
    if NUMBER_ONLY_RE.match(line):
        return False
    return not line.startswith(tuple(rules.ingredient_tokens))


def _opens_step(line: str, rules: ExtractionRules) -> bool:
    return bool(STEP_MARKER_RE.match(line)) or line.startswith(tuple(rules.step_opening_verbs))


def group_step_lines(
    section: str,
    rules: Optional[ExtractionRules] = None,
    require_opener: bool = False
) -> List[str]:
    """Group unnumbered lines into steps.

    A line starting with a numeral marker or a cooking verb opens a new step;
    any other line continues the current one. With ``require_opener``, lines
    seen before the first opener are dropped.
    """
    rules = rules or ExtractionRules()
    lines = [line.strip() for line in section.split("\n")]

    steps: List[str] = []
    current = ""
    for line in lines:
        if not _keep_step_line(line, rules):
            continue
        if _opens_step(line, rules):
            if current:
                steps.append(current)
            current = line
        elif current:
            current += " " + line
        elif not require_opener:
            current = line
    if current:
        steps.append(current)
    return steps


def extract_steps(text: str, rules: Optional[ExtractionRules] = None) -> List[str]:
    rules = rules or ExtractionRules()
    section = extract_method_section(text)
    degraded = section is None
    body = text if degraded else section

    steps = extract_numbered_steps(body)
    if not steps:
        steps = group_step_lines(body, rules, require_opener=degraded)

    steps = [
        s for s in dedupe(steps)
        if display_width(s) > STEP_MIN_WIDTH and len(s) < STEP_MAX_LEN
    ]
    return steps[:MAX_STEPS]

import re
from typing import Pattern, List, Tuple

DEFAULT_IMAGE_URL = "https://images.unsplash.com/photo-1556910103-1c02745aae4d?w=800"

INGREDIENTS_PLACEHOLDER = "请手动输入食材"
STEPS_PLACEHOLDER = "请手动输入步骤"
TITLE_PLACEHOLDER = "食谱"
UNTITLED_RECIPE = "Untitled Recipe"

# Length bounds are exclusive
TITLE_PATTERN_BOUNDS = (3, 50)
TITLE_LINE_BOUNDS = (5, 80)
INGREDIENT_MAX_LEN = 50
MAX_INGREDIENTS = 30
NUMBERED_STEP_MAX_LEN = 300
STEP_LINE_MIN_WIDTH = 10
STEP_LINE_MAX_LEN = 300
STEP_MIN_WIDTH = 5
STEP_MAX_LEN = 400
MAX_STEPS = 20

TITLE_SEPARATOR = "——"
PLATE_EMOJI_RE = re.compile("\U0001F37D\ufe0f?")

TITLE_PATTERNS: List[Pattern[str]] = [
    re.compile(r"^(.+?)\s*——\s*(.+?)(?:\s*\U0001F37D\ufe0f?|[ \t]*(?:\n|\Z))"),
    re.compile(r"^(.+?)\s*30分钟\s*(.+?)(?:\s*\U0001F37D\ufe0f?|[ \t]*(?:\n|\Z))"),
    re.compile(r"家常版(.+?)(?:\s*\U0001F37D\ufe0f?|\s)"),
    re.compile(r"^(.+?)\s*\U0001F37D\ufe0f?"),
    re.compile(r"^(.+?)[—\-]"),
]

METHOD_START_RE = re.compile(r"做法|步骤|🥣")

# Everything that may open the next block inside the ingredients area
SECTION_BOUNDARY = r"(?=【|(?:材料|配菜|调味)[：:]|做法|步骤|🥣|\Z)"

INGREDIENT_SECTION_PATTERNS: List[Pattern[str]] = [
    re.compile(r"【材料】([\s\S]*?)" + SECTION_BOUNDARY),
    re.compile(r"【配菜】([\s\S]*?)" + SECTION_BOUNDARY),
    re.compile(r"【调味】([\s\S]*?)" + SECTION_BOUNDARY),
    re.compile(r"材料[：:]\s*([\s\S]*?)" + SECTION_BOUNDARY),
    re.compile(r"配菜[：:]\s*([\s\S]*?)" + SECTION_BOUNDARY),
    re.compile(r"调味[：:]\s*([\s\S]*?)" + SECTION_BOUNDARY),
]

INGREDIENT_SPLIT_RE = re.compile(r"[，,、\n]")
ANNOTATION_RE = re.compile(r"（[^）]*）")

METHOD_SECTION_PATTERNS: List[Pattern[str]] = [
    re.compile(r"🥣\s*做法[：:]\s*([\s\S]*?)(?=📝|\Z)"),
    re.compile(r"【做法】([\s\S]*?)(?=【|📝|\Z)"),
    re.compile(r"做法[：:]\s*([\s\S]*?)(?=【|📝|\Z)"),
    re.compile(r"步骤[：:]\s*([\s\S]*?)(?=【|📝|\Z)"),
]

_STEP_CONTINUATION = r"(?:\n(?!\s*\d+[.、])(?!\s*[-•])\s*[^\n]+)*"

# Body: first line and its continuations, then any bullet sub-items up to the next marker
NUMBERED_STEP_RE = re.compile(
    r"(?:^|\n)\s*(\d+)[.、]\s*([^\n]+" + _STEP_CONTINUATION
    + r"(?:\n\s*[-•][^\n]*" + _STEP_CONTINUATION + r")*)"
)
SUB_BULLET_RE = re.compile(r"\n\s*[-•]\s*")
STEP_MARKER_RE = re.compile(r"^[1-9一二三四五六七八九十][.、]")
NUMBER_ONLY_RE = re.compile(r"^\d+$")
LIST_MARKER_RE = re.compile(r"^\d+[.、]")

ACTION_VERBS: Tuple[str, ...] = ("准备", "焯", "炒", "煮", "加", "放", "倒入")

STEP_OPENING_VERBS: Tuple[str, ...] = (
    "焯", "炒", "煮", "烤", "蒸", "加", "放", "倒入", "加入", "放入",
    "准备", "切", "锅", "把", "撒", "泼",
)

INGREDIENT_TOKENS: Tuple[str, ...] = (
    "肥牛", "酸菜", "豆腐", "白菜", "金针菇", "粉丝", "姜", "葱", "蒜",
    "花椒", "辣椒", "盐", "胡椒", "鸡精",
)

LEAD_IN_PHRASES: Tuple[str, ...] = (
    "我", "根据", "自己", "准备", "爱吃的菜", "即可", "今天", "准备了", "和",
)

TITLE_KEYWORDS: Tuple[str, ...] = ("肥牛", "酸汤", "家常", "快手", "晚餐", "食谱", "分钟")

# Ordered: the first label with a hit wins
CUISINE_KEYWORDS: Tuple[Tuple[str, Tuple[str, ...]], ...] = (
    ("Chinese", ("chinese", "中餐", "中国")),
    ("Italian", ("italian", "pasta", "pizza")),
    ("Japanese", ("japanese", "sushi", "ramen")),
    ("Korean", ("korean", "kimchi", "kbbq")),
    ("Western", ("western", "american", "european")),
)

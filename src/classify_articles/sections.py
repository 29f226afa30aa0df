"""Editorial sections, their size limits, feed-hint aliases and keyword rules."""

from __future__ import annotations

import re

SECTION_KEYS = (
    "commentaries",
    "international",
    "politics",
    "business",
    "tech",
    "entertainment",
    "science",
    "lifestyle",
    "sport",
    "culture",
    "wildcard",
)

DEFAULT_SECTION = "wildcard"

SECTION_LIMITS: dict[str, int] = {
    "commentaries": 15,
    "international": 8,
    "politics": 8,
    "business": 8,
    "tech": 8,
    "entertainment": 8,
    "science": 6,
    "lifestyle": 6,
    "sport": 6,
    "culture": 6,
    "wildcard": 3,
}

# Hint tokens are compared after lowercasing and dropping non-letters.
HINT_SECTION_MAP: dict[str, str] = {
    **{key: key for key in SECTION_KEYS},
    "technology": "tech",
    "sports": "sport",
    "wildcardfeature": "wildcard",
}


def _patterns(*expressions: str) -> tuple[re.Pattern, ...]:
    return tuple(re.compile(expression, re.I) for expression in expressions)


# First matching section wins.
SECTION_RULES: list[tuple[str, tuple[re.Pattern, ...]]] = [
    ("commentaries", _patterns(r"opinion", r"analysis", r"commentary", r"column", r"editorial", r"perspective")),
    ("international", _patterns(r"world", r"global", r"asia", r"middle east", r"europe", r"africa", r"latin america", r"international")),
    ("politics", _patterns(r"politic", r"government", r"policy", r"election", r"congress", r"parliament", r"white house", r"senate")),
    ("business", _patterns(r"business", r"market", r"econom", r"finance", r"industry", r"stock", r"shares", r"revenue", r"earnings", r"investor")),
    ("tech", _patterns(r"tech", r"software", r"\bai\b", r"artificial intelligence", r"machine learning", r"startup", r"\bapps?\b", r"device", r"cyber", r"crypto")),
    ("entertainment", _patterns(r"entertainment", r"celebrity", r"hollywood", r"movie", r"film", r"\btv\b", r"television", r"music", r"award", r"streaming")),
    ("science", _patterns(r"science", r"scientist", r"research", r"discovery", r"\bstudy\b", r"experiment", r"innovation", r"breakthrough")),
    ("lifestyle", _patterns(r"lifestyle", r"health", r"wellness", r"fitness", r"travel", r"\bfood", r"fashion", r"\bhome\b", r"family")),
    ("sport", _patterns(r"sport", r"football", r"basketball", r"soccer", r"tennis", r"cricket", r"athlete", r"championship", r"tournament")),
    ("culture", _patterns(r"culture", r"\barts?\b", r"\bbooks?\b", r"literature", r"museum", r"theatre|theater")),
    ("wildcard", _patterns(r"feature", r"trend")),
]


def normalize_hint(hint: str) -> str:
    return re.sub(r"[^a-z]", "", (hint or "").lower())


def section_for_hint(hint: str) -> str | None:
    """Map a feed-supplied section hint to a section key, if it names one."""
    return HINT_SECTION_MAP.get(normalize_hint(hint))

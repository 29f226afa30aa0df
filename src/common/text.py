"""Title normalization and textual similarity between articles.

Every score here is computed from raw text only and lies in [0, 1].
"""

from __future__ import annotations

import re
from datetime import datetime
from typing import Iterable, Optional

from rapidfuzz.distance import Levenshtein

STOP_WORDS = frozenset(
    {
        "the", "a", "an", "and", "or", "but", "in", "on", "at", "to", "for",
        "of", "with", "by", "from", "as", "is", "was", "are", "were", "be",
        "been", "being", "have", "has", "had", "do", "does", "did",
    }
)

KEYWORD_STOP_WORDS = STOP_WORDS | {
    "will", "would", "should", "could", "may", "might", "must", "can",
    "says", "said",
}

_PUBLISHER_PREFIXES = [
    re.compile(r"^BBC:\s*", re.I),
    re.compile(r"^CNN\s*-\s*", re.I),
    re.compile(r"^NPR\s*-\s*", re.I),
    re.compile(r"^Al Jazeera\s*[:|]\s*", re.I),
    re.compile(r"^The Guardian\s*-\s*", re.I),
    re.compile(r"^Reuters\s*-\s*", re.I),
    re.compile(r"^AP News\s*-\s*", re.I),
    re.compile(r"^Bloomberg\s*-\s*", re.I),
    re.compile(r"^Financial Times\s*-\s*", re.I),
]

_EDITORIAL_PREFIX = re.compile(
    r"^(?:LIVE|BREAKING|UPDATE|EXCLUSIVE|VIDEO|WATCH|READ|ANALYSIS|OPINION):\s*", re.I
)
_BRACKET_PREFIX = re.compile(r"^\[[^\]]+\]\s*")
_TRAILING_DATE = re.compile(r"\s*[-–—]\s*\w+\s+\d{1,2},?\s+\d{4}$", re.I)
_TRAILING_ISO_DATE = re.compile(r"\s*\(\d{4}-\d{2}-\d{2}\)$")
_TRAILING_PUBLISHER = re.compile(r"\s*[-–—|]\s*\w+\s*$")
_PUNCTUATION = re.compile(r"[^\w\s]")

_QUOTE_RE = re.compile(r"[\"']([^\"']{10,})[\"']")
_LOCATION_RES = [
    re.compile(r"\b(?:in|at|near|from)\s+([A-Z][a-z]+(?:\s+[A-Z][a-z]+)?)\b"),
    re.compile(r"\b(?:in|at)\s+the\s+([A-Z][a-z]+(?:\s+[A-Z][a-z]+)?)\b"),
]
_NUMBER_RES = [
    re.compile(r"\b\d+(?:,\d{3})*(?:\.\d+)?\s*(?:dead|killed|injured|people|million|billion|percent|%)", re.I),
    re.compile(r"\$\d+(?:,\d{3})*(?:\.\d+)?(?:\s*(?:million|billion|k))?", re.I),
    re.compile(r"\b\d+-\d+\b"),
    re.compile(r"\b\d+(?:,\d{3})+\b"),
]
_PROPER_NOUN_RE = re.compile(r"\b[A-Z][a-z]+(?:\s+[A-Z][a-z]+)*\b")


def strip_title_decorations(title: str) -> str:
    """Remove publisher/editorial prefixes, tags, trailing dates and publisher suffixes."""
    cleaned = title or ""
    for pattern in _PUBLISHER_PREFIXES:
        cleaned = pattern.sub("", cleaned)
    cleaned = _EDITORIAL_PREFIX.sub("", cleaned)
    cleaned = _BRACKET_PREFIX.sub("", cleaned)
    cleaned = _TRAILING_DATE.sub("", cleaned)
    cleaned = _TRAILING_ISO_DATE.sub("", cleaned)
    cleaned = _TRAILING_PUBLISHER.sub("", cleaned)
    return cleaned.strip()


def normalize_title(title: str) -> str:
    """Lowercase, punctuation-free, stop-word-free form of a title."""
    cleaned = _PUNCTUATION.sub(" ", strip_title_decorations(title).lower())
    return " ".join(word for word in cleaned.split() if word not in STOP_WORDS)


def jaccard(a: Iterable[str], b: Iterable[str]) -> float:
    """Jaccard index of two collections; 0.0 when both are empty."""
    set_a, set_b = set(a), set(b)
    union = set_a | set_b
    if not union:
        return 0.0
    return len(set_a & set_b) / len(union)


def _overlap(a: set[str], b: set[str]) -> float:
    # Only meaningful when both sides carry the signal.
    if not a or not b:
        return 0.0
    return jaccard(a, b)


def word_jaccard(a: str, b: str) -> float:
    return jaccard(normalize_title(a).split(), normalize_title(b).split())


def char_ngrams(text: str, n: int = 3) -> set[str]:
    if len(text) < n:
        return {text}
    return {text[i:i + n] for i in range(len(text) - n + 1)}


def containment(a: str, b: str) -> float:
    """Share of the shorter title's significant words found in the longer one."""
    words_a = [w for w in normalize_title(a).split() if len(w) > 2]
    words_b = [w for w in normalize_title(b).split() if len(w) > 2]
    if not words_a or not words_b:
        return 0.0

    shorter, longer = (words_a, words_b) if len(words_a) < len(words_b) else (words_b, words_a)
    longer_set = set(longer)
    return sum(1 for w in shorter if w in longer_set) / len(shorter)


def title_similarity(a: str, b: str) -> float:
    """Blend of word Jaccard (0.6), character trigrams (0.25) and Levenshtein (0.15)."""
    norm_a = normalize_title(a)
    norm_b = normalize_title(b)
    if not norm_a or not norm_b:
        return 0.0
    if norm_a == norm_b:
        return 1.0

    words = jaccard(norm_a.split(), norm_b.split())
    trigrams = jaccard(char_ngrams(norm_a), char_ngrams(norm_b))
    edit = Levenshtein.normalized_similarity(norm_a, norm_b)
    return min(1.0, words * 0.6 + trigrams * 0.25 + edit * 0.15)


def extract_quotes(text: str) -> set[str]:
    quotes = set()
    for match in _QUOTE_RE.findall(text):
        quote = match.lower().strip()
        if len(quote) >= 10:
            quotes.add(quote)
    return quotes


def extract_locations(text: str) -> set[str]:
    locations = set()
    for pattern in _LOCATION_RES:
        for match in pattern.findall(text):
            if len(match) >= 3:
                locations.add(match.lower())
    return locations


def extract_numbers(text: str) -> set[str]:
    numbers = set()
    for pattern in _NUMBER_RES:
        numbers.update(m.lower().strip() for m in pattern.findall(text))
    return numbers


def extract_keywords(text: str) -> set[str]:
    """Capitalized word runs, a cheap stand-in for named entities."""
    keywords = set()
    for word in _PROPER_NOUN_RE.findall(text):
        lowered = word.lower()
        if lowered not in KEYWORD_STOP_WORDS and len(word) >= 3:
            keywords.add(lowered)
    return keywords


def temporal_boost(date_a: datetime, date_b: datetime) -> float:
    hours = abs((date_a - date_b).total_seconds()) / 3600
    if hours < 2:
        return 1.15
    if hours < 6:
        return 1.08
    if hours < 24:
        return 1.0
    return 0.95


def article_similarity(
    title_a: str,
    desc_a: str,
    title_b: str,
    desc_b: str,
    date_a: Optional[datetime] = None,
    date_b: Optional[datetime] = None,
) -> float:
    """Combined similarity of two articles from title, description and timing.

    Strong single signals (near-identical titles, title containment, shared
    quotes, shared numbers plus entities, heavy entity overlap) short-circuit;
    otherwise a weighted blend is returned, scaled by publication proximity.
    """
    title_sim = title_similarity(title_a, title_b)
    if title_sim >= 0.6:
        return title_sim

    contained = containment(title_a, title_b)
    if contained >= 0.7:
        return max(title_sim, contained * 0.9)

    text_a = f"{title_a} {desc_a or ''}"
    text_b = f"{title_b} {desc_b or ''}"

    keyword_sim = _overlap(extract_keywords(text_a), extract_keywords(text_b))
    number_sim = _overlap(extract_numbers(text_a), extract_numbers(text_b))
    quote_sim = _overlap(extract_quotes(text_a), extract_quotes(text_b))
    location_sim = _overlap(extract_locations(text_a), extract_locations(text_b))

    if quote_sim >= 0.5:
        return max(title_sim, quote_sim * 0.95)
    if number_sim >= 0.5 and keyword_sim >= 0.4:
        return max(title_sim, (number_sim + keyword_sim) / 2)
    if keyword_sim >= 0.5:
        return max(title_sim, keyword_sim * 0.85)

    desc_sim = word_jaccard(desc_a, desc_b) if desc_a and desc_b else 0.0
    if title_sim < 0.3 and desc_sim > 0.5:
        return desc_sim * 0.75

    score = (
        contained * 0.25
        + title_sim * 0.2
        + keyword_sim * 0.2
        + number_sim * 0.15
        + quote_sim * 0.1
        + location_sim * 0.05
        + desc_sim * 0.05
    )
    if date_a is not None and date_b is not None:
        score *= temporal_boost(date_a, date_b)
    return min(1.0, score)

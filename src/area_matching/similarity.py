"""
Area Name Similarity Scoring

Scores a candidate area text against the existing canonical area names of a
hospital and picks the best match above CONFIDENCE_THRESHOLD.

Score (0-100, symmetric), after normalizing both strings (lowercase, strip
punctuation, collapse whitespace):
- identical                   -> 100
- one contains the other      -> round(len(shorter) / len(longer) * 95)
- otherwise                   -> round((1 - levenshtein / max_len) * 100), floored at 0

Each candidate/area pair is scored over four text variants (raw and cleaned
on either side) and the maximum is kept. Ties between areas keep the area
seen first.
"""

import math
import re
from dataclasses import dataclass
from typing import Iterable, List, Optional, Sequence, Tuple

from rapidfuzz.distance import Levenshtein

from schemas.areas import CONFIDENCE_THRESHOLD
from src.area_matching.noise import strip_noise, tidy_text
from src.area_matching.segments import CITY_RULES

CONTAINMENT_CEILING = 95

_NON_ALPHANUMERIC = re.compile(r'[^a-z0-9\s]')
_WHITESPACE = re.compile(r'\s+')
_HOSPITAL_NAME_PARTS = re.compile(r'\s+[-–—]\s+')


@dataclass(frozen=True)
class AreaMatch:
    """Best existing-area hit for a candidate."""
    area: object
    confidence: int


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def normalize_for_comparison(text: Optional[str]) -> str:
    if not text:
        return ''
    text = text.lower().strip()
    text = _NON_ALPHANUMERIC.sub('', text)
    return _WHITESPACE.sub(' ', text).strip()


def calculate_similarity(a: Optional[str], b: Optional[str]) -> int:
    """
    Similarity score between two area names, 0-100.

    Examples:
        >>> calculate_similarity('Ward 5 - South', 'ward 5 south')
        100
        >>> calculate_similarity('Wellington Gastro Ward', 'Wellington Gastro Ward 2')
        87
    """
    norm_a = normalize_for_comparison(a)
    norm_b = normalize_for_comparison(b)

    if norm_a == norm_b:
        return 100

    shorter, longer = sorted((norm_a, norm_b), key=len)
    if shorter in longer:
        return _round_half_up(len(shorter) / len(longer) * CONTAINMENT_CEILING)

    distance = Levenshtein.distance(norm_a, norm_b)
    max_length = max(len(norm_a), len(norm_b))
    similarity = _round_half_up((1 - distance / max_length) * 100)
    return max(0, similarity)


def _hospital_name_phrases(hospital_name: Optional[str]) -> List[str]:
    """'Counties Manukau - Health New Zealand' -> full name plus each dash part."""
    if not hospital_name or not isinstance(hospital_name, str):
        return []

    phrases = [hospital_name.strip()]
    parts = [part.strip() for part in _HOSPITAL_NAME_PARTS.split(hospital_name)]
    phrases.extend(part for part in parts if len(part) >= 4 and part not in phrases)
    return sorted(phrases, key=len, reverse=True)


def clean_area_text(text: Optional[str], hospital_name: Optional[str] = None) -> str:
    """
    Strip reference noise, town names and the hospital's own name.

    Used to compare the department part of two names, e.g.
    "Wellington Gastro" and "Gastro" both clean to "Gastro".
    """
    cleaned = strip_noise(text)
    for phrase in _hospital_name_phrases(hospital_name):
        cleaned = re.sub(r'(?<!\w)' + re.escape(phrase) + r'(?!\w)', ' ', cleaned, flags=re.IGNORECASE)
    for rule in CITY_RULES:
        cleaned = rule.regex.sub(' ', cleaned)
    return tidy_text(cleaned)


def score_variants(
    candidate: str,
    area_name: str,
    hospital_name: Optional[str] = None,
    cleaned_candidate: Optional[str] = None,
) -> int:
    """
    Best score over the raw/cleaned variants of a candidate and an area name.

    Variant pairs where either side normalizes to nothing are skipped.
    """
    if cleaned_candidate is None:
        cleaned_candidate = clean_area_text(candidate, hospital_name)
    cleaned_area = clean_area_text(area_name, hospital_name)

    pairs: Sequence[Tuple[str, str]] = (
        (candidate, area_name),
        (cleaned_candidate, area_name),
        (cleaned_candidate, cleaned_area),
        (candidate, cleaned_area),
    )

    best = 0
    for left, right in pairs:
        if not normalize_for_comparison(left) or not normalize_for_comparison(right):
            continue
        best = max(best, calculate_similarity(left, right))
    return best


def find_best_existing_area(
    candidate: str,
    existing_areas: Iterable,
    hospital_name: Optional[str] = None,
    threshold: int = CONFIDENCE_THRESHOLD,
) -> Optional[AreaMatch]:
    """
    Pick the existing area with the strictly highest score at or above threshold.

    Args:
        candidate: Trimmed raw area text
        existing_areas: Areas of one hospital; each needs a `name` attribute
        hospital_name: Hospital name, stripped from both sides when cleaning
        threshold: Minimum score to accept

    Returns:
        AreaMatch, or None if no area clears the threshold
    """
    cleaned_candidate = clean_area_text(candidate, hospital_name)

    best: Optional[AreaMatch] = None
    for area in existing_areas:
        confidence = score_variants(candidate, area.name, hospital_name, cleaned_candidate)
        if confidence < threshold:
            continue
        if best is None or confidence > best.confidence:
            best = AreaMatch(area=area, confidence=confidence)
    return best

"""
CustomerRef Parsing

Derives the raw area text from a full order customer reference, the text
typed by hospital purchasing staff on each sales order. Orders that are not
for a hospital area (spares, hooks, credits, a contact's name) give None.

Examples:
    "1578153 - Waikato PACU Lvl 3 - 2 yr replacements - Due Feb 2026"  -> "Waikato PACU Lvl 3"
    "PO9112 - Whangarei Endoscopy 2-yr changeover - Oct"                -> "Whangarei Endoscopy"
    "PO-22933 - Spares - Oct 2023"                                      -> None
"""

import logging
import re
from typing import List, Optional

from src.area_matching.noise import (
    is_admin_field,
    remove_boilerplate,
    split_fields,
    strip_reference_prefix,
    tidy_text,
)
from src.area_matching.rules import PatternRule, find_first_match

logger = logging.getLogger(__name__)


# Orders for parts, samples or credits rather than an area
NON_AREA_RULES = [
    PatternRule(r'\bspares?\b', 'spares'),
    PatternRule(r'^hooks?$', 'hooks'),
    PatternRule(r'^glides?$', 'glides'),
    PatternRule(r'^curtain\s*(?:hooks?|recycle|track)', 'curtain_parts'),
    PatternRule(r'^recycl', 'recycling'),
    PatternRule(r'^extra(?:\s*curtains?)?$', 'extras'),
    PatternRule(r'^misc', 'misc'),
    PatternRule(r'^sample', 'sample'),
    PatternRule(r'^test', 'test'),
    PatternRule(r'^credit', 'credit'),
    PatternRule(r'^refund', 'refund'),
    PatternRule(r'^cancel+ed', 'cancelled'),
    PatternRule(r'^void', 'void'),
    PatternRule(r'^replacements?$', 'replacement'),
    PatternRule(r'^changeovers?$', 'changeover'),
]

# A later field naming one of these replaces the first field as the area
AREA_KEYWORDS = re.compile(
    r'\b(?:wards?|units?|icu|pacu|theatres?|clinics?|rooms?|rms?|beds?|bays?|floor|level|lvl'
    r'|endoscopy|dialysis|radiology|recovery|surgery|surgical|medical|med|ortho\w*|stroke'
    r'|children\w*|maternity|emergency|ed|er|day[\s-]*stay|pre-?op|post-?op|ccu|nicu|mapu'
    r'|atu|ssu|ssr|ctu|outpatients?|inpatients?|x-?ray|procedures?|admissions?)\b',
    re.IGNORECASE,
)

# "Jane Smith": a contact rather than an area, unless it names a place
PERSON_NAME = re.compile(r'^[A-Z][a-z]+\s+[A-Z][a-z]+$')
PLACE_KEYWORDS = re.compile(
    r'\b(?:wards?|units?|rooms?|rms?|icu|theatres?|clinics?|bays?|level|floor|dept|department'
    r'|ed|pacu|nicu|dialysis|radiology|lab|pharmacy|reception|admin|stores?|kitchen|laundry'
    r'|office|corridor|lobby|entrance|waiting|emergency)\b',
    re.IGNORECASE,
)

TRAILING_SUFFIXES = [
    re.compile(
        r'\s*\b\d+\s*-?\s*y(?:ea)?rs?\b(?:\s+curtains?)?'
        r'(?:\s+(?:changeovers?|replacements?|replace|installs?|reorders?|changes?))?\s*$',
        re.IGNORECASE,
    ),
    re.compile(r'\s*\breorders?\s*$', re.IGNORECASE),
]


def _is_noise_field(field_text: str) -> bool:
    if len(field_text) < 2 or is_admin_field(field_text):
        return True
    # "2 yr Replacements", "Reorder", "New"
    return not tidy_text(remove_boilerplate(field_text))


def _pick_area_field(fields: List[str]) -> Optional[str]:
    best = None
    for field_text in fields:
        if _is_noise_field(field_text):
            continue
        if best is None or AREA_KEYWORDS.search(field_text):
            best = field_text
    return best


def _strip_trailing_suffixes(text: str) -> str:
    for pattern in TRAILING_SUFFIXES:
        text = pattern.sub('', text).strip()
    return text


def is_person_name(text: str) -> bool:
    return bool(PERSON_NAME.match(text)) and not PLACE_KEYWORDS.search(text)


def parse_customer_ref(customer_ref: Optional[str]) -> Optional[str]:
    """
    Extract the area part of an order customer reference.

    Args:
        customer_ref: Full customer reference (may be None)

    Returns:
        Area text with prefixes and reorder suffixes removed, or None if the
        reference does not name an area.

    Examples:
        >>> parse_customer_ref('NCR 528 290 - Medical Ward')
        'Medical Ward'
        >>> parse_customer_ref('357956 - ED X-Ray')
        'ED X-Ray'
        >>> parse_customer_ref('John Smith') is None
        True
    """
    if not customer_ref or not isinstance(customer_ref, str):
        return None

    text = _pick_area_field(split_fields(strip_reference_prefix(customer_ref)))
    if text is None:
        return None

    rule_match = find_first_match(NON_AREA_RULES, text)
    if rule_match:
        logger.debug(f"Skipping non-area reference '{customer_ref}' ({rule_match.rule.label})")
        return None

    if is_person_name(text):
        logger.debug(f"Skipping person-name reference '{customer_ref}'")
        return None

    text = tidy_text(_strip_trailing_suffixes(text))
    if len(text) < 2:
        return None
    return text

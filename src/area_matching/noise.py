"""
Noise Stripping for Customer References

Removes order-administration noise from free-text customer references typed
by hospital purchasing staff, leaving only the words that describe where the
curtains hang.

Removed:
- PO / reference prefixes: "PO-22933", "PO CE15082022", "LKC265019",
  "NCR 528 290", "M12345", "030-28-168", "296222 + 296654", "235287 & 235299"
- Administrative fields: "Due Feb 2026", "Oct 2023", "2025", "Reorder"
- Reorder boilerplate: "2-yr Curtain changeover", "2 yr replacements",
  "2yr Change", "New", "screens", "balance of curtains", "acceptance email",
  "per Jane Smith email", "5 x Med", "+", dates like 15/08/2022

Compound terms such as "X-Ray", "Pre-op", "Day-stay", "2-yr" and numeric
ranges such as "1-4" keep their hyphen through field splitting.

Usage:
    from src.area_matching.noise import strip_noise

    strip_noise('1578153 - Waikato PACU Lvl 3 - 2 yr replacements - Due Feb 2026')
    # 'Waikato PACU Lvl 3'
"""

import re
from typing import List, Optional

from src.area_matching.rules import (
    PatternRule,
    apply_substitutions,
    find_first_match,
    strip_first_match,
)


# Reference numbers. PO codes and bare 5+ digit runs are found anywhere in the
# text, the other codes only at the start. Only the first hit is stripped.
_PREFIX_SEPARATOR = r'\s*[-:]?\s*'

PREFIX_RULES = [
    # PO-22933, PO 280065, PO9112, PO CE15082022
    PatternRule(r'\bPO\s*[-:]?\s*[A-Z]{0,3}\d+\b' + _PREFIX_SEPARATOR, 'po'),
    # Organisation-specific purchase codes
    PatternRule(
        r'^(?:PIN|LKC|LK|RT|FA|WN|GR|BS|NH|NCR|MT|SEO|IN|RW)\s*\d+(?:\s+\d+)*\*?'
        + _PREFIX_SEPARATOR,
        'org_code',
    ),
    # M1234, G56789
    PatternRule(r'^[MG]\d{4,}' + _PREFIX_SEPARATOR, 'mg_code'),
    # 030-28-168
    PatternRule(r'^\d{2,4}(?:-\d{2,4}){2,}' + _PREFIX_SEPARATOR, 'dash_grouped'),
    # 290138, 296222 + 296654 + 296725, 235287 & 235299
    PatternRule(r'\b\d{5,}(?:\s*[+&,]\s*\d{5,})*\b' + _PREFIX_SEPARATOR, 'bare_number'),
    # 12 & 14
    PatternRule(r'^\d+\s*&\s*\d+' + _PREFIX_SEPARATOR, 'number_pair'),
]

_LEADING_COLON = re.compile(r'^\s*:\s*')

# Hyphenated terms that are not field delimiters. The hyphen is swapped for a
# placeholder before splitting and restored on each field afterwards.
HYPHEN_PLACEHOLDER = '_HYPHEN_'

PROTECTED_COMPOUNDS = [
    PatternRule(r'\b(X)-(Ray)\b', r'\1' + HYPHEN_PLACEHOLDER + r'\2'),
    PatternRule(r'\b(Pre)-(op)\b', r'\1' + HYPHEN_PLACEHOLDER + r'\2'),
    PatternRule(r'\b(Post)-(op)\b', r'\1' + HYPHEN_PLACEHOLDER + r'\2'),
    PatternRule(r'\b(Day)-(stay)\b', r'\1' + HYPHEN_PLACEHOLDER + r'\2'),
    PatternRule(r'(\d)-(y(?:ea)?rs?)\b', r'\1' + HYPHEN_PLACEHOLDER + r'\2'),
    PatternRule(r'(\d)-(\d)', r'\1' + HYPHEN_PLACEHOLDER + r'\2'),
]

FIELD_DELIMITER = re.compile(r'\s*[-–—]\s*')

_MONTHS = (
    r'(?:jan(?:uary)?|feb(?:ruary)?|mar(?:ch)?|apr(?:il)?|may|june?|july?|aug(?:ust)?'
    r'|sep(?:t(?:ember)?)?|oct(?:ober)?|nov(?:ember)?|dec(?:ember)?)\.?'
)

# Whole fields that only carry order administration
ADMIN_FIELD_RULES = [
    PatternRule(r'^[\d\s&+,.#]+$', 'numbers_only'),
    PatternRule(r'^due\b.*$', 'due_date'),
    PatternRule(r'^' + _MONTHS + r'(?:\s+\d{2,4})?$', 'month'),
    PatternRule(r'^(?:19|20)\d{2}(?:\s+reorders?)?$', 'year'),
    PatternRule(r'^reorders?$', 'reorder'),
    PatternRule(r'^d$', 'marker'),
]

# Reorder-cycle boilerplate, removed globally in this order
BOILERPLATE_RULES = [
    PatternRule(r'\b\d{1,2}/\d{1,2}/\d{2}(?:\d{2})?\b', ' '),
    PatternRule(r'\b[Pp]er\s+[A-Z][a-z]+\s+[A-Z][a-z]+(?:\'s)?\s+[Ee]mail\b', ' ', flags=0),
    PatternRule(
        r'\b\d+\s*-?\s*y(?:ea)?rs?\b(?:\s+curtains?)?'
        r'(?:\s+(?:changeovers?|replacements?|reorders?|changes?))?',
        ' ',
    ),
    PatternRule(r'\bbalance\s+of(?:\s+curtains?)?\b', ' '),
    PatternRule(r'\bacceptance\s+email\b', ' '),
    PatternRule(r'\bemail\b', ' '),
    PatternRule(r'\bcurtains?\b', ' '),
    PatternRule(r'\bchangeovers?\b', ' '),
    PatternRule(r'\breplacements?\b', ' '),
    PatternRule(r'\breorders?\b', ' '),
    PatternRule(r'\bchanges?\b', ' '),
    PatternRule(r'\bnew\b(?!\s+plymouth)', ' '),
    PatternRule(r'\bscreens?\b', ' '),
    PatternRule(r'\bHW\b', ' '),
    PatternRule(r'\b\d+\s*x\s*(?:small|sml|sm|medium|med|large|lge|lg|xl)\b', ' '),
    PatternRule(r'\+', ' '),
]

_EDGE_SEPARATORS_START = re.compile(r'^[\s\-–—:;,&/.+]+')
_EDGE_SEPARATORS_END = re.compile(r'[\s\-–—:;,&/+]+$')
_EMPTY_BRACKETS = re.compile(r'\(\s*\)|\[\s*\]')
_WHITESPACE = re.compile(r'\s+')


def tidy_text(text: Optional[str]) -> str:
    """Collapse whitespace and trim separator debris from both ends."""
    if not text:
        return ''

    text = _EMPTY_BRACKETS.sub(' ', text)
    text = _WHITESPACE.sub(' ', text)
    text = _EDGE_SEPARATORS_START.sub('', text)
    text = _EDGE_SEPARATORS_END.sub('', text)
    return text.strip()


def strip_reference_prefix(text: Optional[str]) -> str:
    """
    Strip a PO / reference number from text.

    Only the first matching rule is applied, at its first occurrence. PO
    codes and bare reference numbers may sit anywhere in the text. A
    leading colon left behind by the strip is removed as well.

    Examples:
        >>> strip_reference_prefix('PO-22933 - Spares - Oct 2023')
        'Spares - Oct 2023'
        >>> strip_reference_prefix('LKC265019 - ICU Windows Rm 1, 4, 5 & 6')
        'ICU Windows Rm 1, 4, 5 & 6'
    """
    if not text or not isinstance(text, str):
        return ''

    text, _ = strip_first_match(PREFIX_RULES, text.strip())
    text = _LEADING_COLON.sub('', text)
    return text.strip()


def protect_compounds(text: str) -> str:
    return apply_substitutions(PROTECTED_COMPOUNDS, text)


def restore_compounds(text: str) -> str:
    return text.replace(HYPHEN_PLACEHOLDER, '-')


def is_admin_field(field_text: str) -> bool:
    """True if a hyphen-delimited field is pure order administration."""
    return find_first_match(ADMIN_FIELD_RULES, field_text.strip()) is not None


def split_fields(text: Optional[str]) -> List[str]:
    """
    Split a prefix-stripped reference into its hyphen-delimited fields.

    Compound terms keep their hyphens. Empty fields are dropped; admin
    fields are kept so callers can decide what to do with them.
    """
    if not text:
        return []

    protected = protect_compounds(text)
    fields = [restore_compounds(part).strip() for part in FIELD_DELIMITER.split(protected)]
    return [f for f in fields if f]


def remove_boilerplate(text: str) -> str:
    return apply_substitutions(BOILERPLATE_RULES, text)


def strip_noise(text: Optional[str]) -> str:
    """
    Remove all order-administration noise from a raw reference.

    Args:
        text: Raw customer reference or extracted area text (may be None)

    Returns:
        Cleaned text with original word order preserved, or '' if nothing
        meaningful is left.

    Examples:
        >>> strip_noise('Transit Lounge 2yr Change')
        'Transit Lounge'
        >>> strip_noise('2-yr Curtain changeover')
        ''
    """
    text = strip_reference_prefix(text)
    if not text:
        return ''

    fields = [f for f in split_fields(text) if not is_admin_field(f)]
    text = ' '.join(fields)
    text = remove_boilerplate(text)
    return tidy_text(text)

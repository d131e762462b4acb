"""
Canonical Area Name Formatting

Reassembles a ParsedArea into the display name used for new areas:

    Where  What  Location  Sub-location

e.g. "Children's Hospital Piko Ward Lvl 4", "Greenlane Clinic Rms Bldg 4 Lvl 1".

Empty segments are omitted. When nothing could be extracted from the
reference itself, a generic cleanup of the original text is used instead;
a result shorter than 2 characters, or with no letters or digits, becomes ''
(nothing to suggest).
"""

import re
from typing import List, Optional

from src.area_matching.noise import strip_noise, tidy_text
from src.area_matching.rules import find_all_matches, find_first_match
from src.area_matching.segments import (
    LOCATION_RULES,
    SUB_LOCATION_RULES,
    ParsedArea,
    parse_area,
)


# Lowercased token -> canonical clinical abbreviation
ABBREVIATIONS = {
    'icu': 'ICU',
    'ed': 'ED',
    'ced': 'CED',
    'hdu': 'HDU',
    'ccu': 'CCU',
    'nicu': 'NICU',
    'picu': 'PICU',
    'pacu': 'PACU',
    'mapu': 'MAPU',
    'edou': 'EDOU',
    'ssr': 'SSR',
    'sau': 'SAU',
    'sapu': 'SAPU',
    'assu': 'ASSU',
    'mssu': 'MSSU',
    'irw': 'IRW',
    'wrh': 'WRH',
    'ct': 'CT',
    'mri': 'MRI',
    'ent': 'ENT',
    'pet': 'PET',
    'gp': 'GP',
    'ot': 'OT',
}

# Department words with a fixed short form
WORD_FORMS = {
    'room': 'Rm',
    'rm': 'Rm',
    'rooms': 'Rms',
    'rms': 'Rms',
}

# All-uppercase tokens up to this many letters are kept as typed ("A1", "M4", "CE")
MAX_ABBREVIATION_LETTERS = 3

_SINGLE_NUMBER = re.compile(r'^\d+[A-Z]?$', re.IGNORECASE)
_LIST_AND = re.compile(r'\s*(?:&|\band\b)\s*', re.IGNORECASE)
_LIST_COMMA = re.compile(r'\s*,\s*')
_LIST_RANGE = re.compile(r'\s*(?:-|\bto\b)\s*', re.IGNORECASE)
_LIST_KEYWORD = re.compile(
    r'\b(?:rooms?|rms?|resus(?:citation)?|bays?|beds?|spaces?|care)\.?\s*#?\s*(?=\d)', re.IGNORECASE
)
_HAS_WORD = re.compile(r'[A-Za-z0-9]')


def _capitalize_piece(piece: str) -> str:
    lowered = piece.lower()
    if lowered[:1].isdigit():
        return lowered
    for i, ch in enumerate(lowered):
        if ch.isalpha():
            return lowered[:i] + ch.upper() + lowered[i + 1:]
    return piece


def title_case_word(word: str) -> str:
    """
    Title-case one word, keeping abbreviations.

    Examples:
        >>> title_case_word('pacu')
        'PACU'
        >>> title_case_word("children's")
        "Children's"
        >>> title_case_word('2nd')
        '2nd'
    """
    lowered = word.lower()
    if lowered in ABBREVIATIONS:
        return ABBREVIATIONS[lowered]
    if lowered in WORD_FORMS:
        return WORD_FORMS[lowered]

    letters = [ch for ch in word if ch.isalpha()]
    if letters and word.isupper() and len(letters) <= MAX_ABBREVIATION_LETTERS:
        return word

    return '-'.join(_capitalize_piece(piece) for piece in word.split('-'))


def title_case_text(text: Optional[str]) -> str:
    if not text:
        return ''
    return ' '.join(title_case_word(word) for word in text.split())


def normalize_number_list(numbers: str) -> str:
    """'5 and 6' -> '5 & 6', '1 - 4' -> '1-4', '1,4' -> '1, 4', '5 and Room 6' -> '5 & 6'."""
    numbers = _LIST_KEYWORD.sub('', numbers)
    numbers = _LIST_AND.sub(' & ', numbers)
    numbers = _LIST_COMMA.sub(', ', numbers)
    numbers = _LIST_RANGE.sub('-', numbers)
    return numbers.upper().strip()


def format_where(where: Optional[str]) -> str:
    return (where or '').strip()


def format_what(what: Optional[str]) -> str:
    return title_case_text(tidy_text(what))


def format_location(location: Optional[str]) -> str:
    """
    Normalize level / building tokens.

    Examples:
        >>> format_location('Building 4 Level 1')
        'Bldg 4 Lvl 1'
        >>> format_location('LVL 5')
        'Lvl 5'
    """
    if not location:
        return ''

    matches = find_all_matches(LOCATION_RULES, location)
    if not matches:
        return title_case_text(location)

    parts = []
    for match in matches:
        value = match.value.upper() if len(match.value) <= 3 else match.value.title()
        parts.append(match.rule.template.format(label=match.rule.label, value=value).strip())
    return ' '.join(parts)


def format_sub_location(sub_location: Optional[str]) -> str:
    """
    Normalize room / bay / bed tokens.

    Rooms take "Rm" for one number and "Rms" for several; the other labels
    are fixed.

    Examples:
        >>> format_sub_location('rooms 5 and 6')
        'Rms 5 & 6'
        >>> format_sub_location('Bay 1-4')
        'Bays 1-4'
    """
    if not sub_location:
        return ''

    match = find_first_match(SUB_LOCATION_RULES, sub_location)
    if match is None:
        return title_case_text(sub_location)

    numbers = normalize_number_list(match.value)
    label = match.rule.label
    if label == 'Rm' and not _SINGLE_NUMBER.match(numbers):
        label = 'Rms'
    return f"{label} {numbers}"


def generic_cleanup(text: Optional[str]) -> str:
    """Noise-strip and title-case text that has no recognisable segments."""
    cleaned = title_case_text(strip_noise(text))
    if len(cleaned) < 2 or not _HAS_WORD.search(cleaned):
        return ''
    return cleaned


def format_parsed_area(parsed: ParsedArea) -> str:
    """
    Join the formatted segments in Where, What, Location, Sub-location order.

    Returns '' when nothing usable is left; callers treat that as "no
    suggestion", never as an area name.
    """
    if not parsed.has_segments:
        return generic_cleanup(parsed.original)

    segments: List[str] = [
        format_where(parsed.where),
        format_what(parsed.what),
        format_location(parsed.location),
        format_sub_location(parsed.sub_location),
    ]
    return ' '.join(segment for segment in segments if segment)


def format_new_area_suggestion(raw_text: Optional[str], hospital_name: Optional[str] = None) -> str:
    """
    Build the canonical display name for a raw reference.

    Args:
        raw_text: Raw customer reference / extracted area text
        hospital_name: Hospital (customer) name, used as a Where hint

    Returns:
        Canonical area name, or '' if nothing could be salvaged

    Examples:
        >>> format_new_area_suggestion('Lvl 3 ICU', 'Capital & Coast Health')
        'ICU Lvl 3'
        >>> format_new_area_suggestion('Kenepuru PACU', 'Capital & Coast Health New Zealand')
        'Kenepuru PACU'
        >>> format_new_area_suggestion('2-yr Curtain changeover', 'Counties Manukau')
        ''
    """
    if not raw_text or not isinstance(raw_text, str) or not raw_text.strip():
        return ''

    return format_parsed_area(parse_area(raw_text, hospital_name))

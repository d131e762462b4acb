"""
Area Segment Extraction

Decomposes a noise-stripped reference into the four-part area naming
convention:

    Where         facility or town        "Kenepuru", "Children's Hospital"
    What          department / function   "PACU", "Piko Ward"
    Location      building / level        "Lvl 4", "Bldg 4 Lvl 1"
    Sub-location  room / bay / bed        "Rm 5", "Rms 5 & 6", "Bays 1-4"

Extraction order (each hit is cut from the working text before the next step):
1. Sub-location - first rule that matches, first occurrence only
2. Location     - every non-overlapping match, kept in left-to-right order
3. Where        - facility, then town, then a hint from the hospital name
4. What         - whatever is left

Usage:
    from src.area_matching.segments import parse_area

    parsed = parse_area("Greenlane Clinic Rooms Building 4 Level 1", "Auckland - Health New Zealand")
    parsed.where        # 'Greenlane'
    parsed.what         # 'Clinic Rooms'
    parsed.location     # 'Building 4 Level 1'
"""

import re
from dataclasses import dataclass, asdict
from typing import Optional, Dict, Any, Tuple

from src.area_matching.noise import strip_noise, tidy_text
from src.area_matching.rules import (
    PatternRule,
    find_all_matches,
    find_first_match,
    remove_spans,
)


WHERE_FROM_REFERENCE = 'reference'
WHERE_FROM_HOSPITAL = 'hospital'


@dataclass
class ParsedArea:
    """Decomposed form of a raw reference. Transient, never persisted."""
    where: Optional[str] = None
    what: Optional[str] = None
    location: Optional[str] = None
    sub_location: Optional[str] = None
    original: str = ''
    where_source: Optional[str] = None  # reference, hospital

    @property
    def has_segments(self) -> bool:
        """True if anything was extracted from the reference text itself."""
        return bool(
            self.what
            or self.location
            or self.sub_location
            or (self.where and self.where_source == WHERE_FROM_REFERENCE)
        )

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


# =============================================================================
# Sub-location rules (room / bay / bed / space / care / resus + number)
# =============================================================================

_ROOM = r'rooms?|rms?'
_RESUS = r'resus(?:citation)?(?:\s+(?:bays?|rooms?))?'


def _sub_location_pattern(keyword: str) -> str:
    """
    Keyword followed by a number list.

    Matches "5", "5 & 6", "5 and 6", "1, 4, 5 & 6", "1-4", "12A", and lists
    that repeat the keyword: "Room 5 and Room 6".
    """
    number = r'\d+[A-Z]?'
    repeated = r'(?:(?:' + keyword + r')\.?\s*#?\s*)?'
    return (
        r'\b(?:' + keyword + r')\.?\s*#?\s*'
        r'(' + number + r'(?:\s*(?:&|,|and|to|-)\s*' + repeated + number + r')*)\b'
    )


SUB_LOCATION_RULES = [
    PatternRule(_sub_location_pattern(_ROOM), 'Rm'),
    PatternRule(_sub_location_pattern(_RESUS), 'Resus'),
    PatternRule(_sub_location_pattern(r'bays?'), 'Bays'),
    PatternRule(_sub_location_pattern(r'beds?'), 'Beds'),
    PatternRule(_sub_location_pattern(r'spaces?'), 'Spaces'),
    PatternRule(_sub_location_pattern(r'care'), 'Care'),
]

# =============================================================================
# Location rules (level / floor / building / block / wing / unit / compass)
# =============================================================================

# A lone letter must be set apart from the keyword: "Block B", not "Blocks"
_BUILDING_VALUE = r'([A-Z]?\d+[A-Z]?|(?<![A-Z])[A-Z])\b'

LOCATION_RULES = [
    PatternRule(r'\b(?:level|lvl|lev|lv)\.?\s*(\d+|G)\b', 'Lvl'),
    PatternRule(r'\bL(\d{1,2})\b', 'Lvl'),
    PatternRule(r'\b(\d+)(?:st|nd|rd|th)\s+(?:floor|flr)\b', 'Floor'),
    PatternRule(r'\b(?:floor|flr)\s*(\d+|G)\b', 'Floor'),
    PatternRule(r'\b(?:building|bldg|blg|bld)\.?\s*#?\s*' + _BUILDING_VALUE, 'Bldg'),
    PatternRule(r'\bblock\s*' + _BUILDING_VALUE, 'Block'),
    PatternRule(r'\b(north|south|east|west)\s+wing\b', 'Wing', template='{value} {label}'),
    PatternRule(r'\bwing\s*' + _BUILDING_VALUE, 'Wing'),
    PatternRule(r'\bunit\s*' + _BUILDING_VALUE, 'Unit'),
    # Trailing compass direction: "Ward 5 South"
    PatternRule(r'(?<!palmerston )\b(north|south|east|west)\s*$', '', template='{value}'),
]

# =============================================================================
# Where rules
# =============================================================================

def _place_pattern(name: str, suffix: str = r'(?:\s+hospital)?') -> str:
    words = [re.escape(word) for word in name.lower().split()]
    return r'\b' + r'\s+'.join(words) + suffix + r'\b'


# Named campuses and ward clusters. Checked before towns so that a town in the
# same reference never becomes the Where.
FACILITY_RULES = [
    PatternRule(r"\b(?:wellington\s+)?children['’]?s\s+hospital\b", "Children's Hospital"),
    PatternRule(r"\bstarship(?:\s+(?:children['’]?s\s+)?hospital)?\b", 'Starship'),
    PatternRule(_place_pattern('Greenlane', r'(?:\s+clinical\s+centre|\s+hospital)?'), 'Greenlane'),
    PatternRule(_place_pattern('Middlemore'), 'Middlemore'),
    PatternRule(_place_pattern('Kenepuru'), 'Kenepuru'),
    PatternRule(r'\bhutt(?:\s+valley)?(?:\s+hospital)?\b', 'Hutt Valley'),
    PatternRule(_place_pattern('Manukau', r'\s+super\s*clinic'), 'Manukau Superclinic'),
    PatternRule(_place_pattern('Botany', r'\s+super\s*clinic'), 'Botany Superclinic'),
    PatternRule(_place_pattern('North Shore'), 'North Shore'),
    PatternRule(_place_pattern('Waitakere'), 'Waitakere'),
    PatternRule(_place_pattern('Thames'), 'Thames'),
    PatternRule(_place_pattern('Tokoroa'), 'Tokoroa'),
    PatternRule(_place_pattern('Te Kuiti'), 'Te Kuiti'),
    PatternRule(_place_pattern('Taumarunui'), 'Taumarunui'),
    PatternRule(_place_pattern('Wakefield'), 'Wakefield'),
    PatternRule(_place_pattern('Burwood'), 'Burwood'),
    PatternRule(_place_pattern('Princess Margaret'), 'Princess Margaret'),
]

# Town names. The capture group holds a trailing "Hospital" (optionally
# "City Hospital", "Regional Hospital"); a "<Town> Hospital" mention names the
# main campus and is stripped without becoming the Where.
_MAIN_CAMPUS_SUFFIX = r'(\s+(?:city\s+|regional\s+|base\s+|public\s+)?hospital)?'

CITY_NAMES = [
    'Wellington', 'Auckland', 'Hamilton', 'Waikato', 'Whangarei', 'Tauranga',
    'Rotorua', 'Napier', 'Hastings', 'Palmerston North', 'Whanganui', 'Nelson',
    'Christchurch', 'Dunedin', 'Invercargill', 'Timaru', 'Manukau',
    'New Plymouth', 'Gisborne', 'Masterton', 'Blenheim', 'Greymouth', 'Taupo',
    'Whakatane',
]

CITY_RULES = [PatternRule(_place_pattern(name, _MAIN_CAMPUS_SUFFIX), name) for name in CITY_NAMES]

_WHAT_SEPARATORS = re.compile(r'[,;:/\\|#]+')
_LOOSE_DASHES = re.compile(r'(?<!\w)[-–—]+|[-–—]+(?!\w)')
_HAS_WORD = re.compile(r'[A-Za-z0-9]')


def _strip_cities(text: str) -> str:
    for rule in CITY_RULES:
        text = rule.regex.sub(' ', text)
    return text


def find_where_hint(hospital_name: Optional[str]) -> Optional[str]:
    """
    Find a facility or town named inside a hospital (customer) name.

    Examples:
        >>> find_where_hint('Waikato DHB')
        'Waikato'
        >>> find_where_hint('Capital & Coast Health New Zealand') is None
        True
    """
    if not hospital_name or not isinstance(hospital_name, str):
        return None

    match = find_first_match(FACILITY_RULES, hospital_name) or find_first_match(CITY_RULES, hospital_name)
    return match.rule.label if match else None


def extract_where(text: str) -> Tuple[Optional[str], str]:
    """
    Pull a facility or town name out of text.

    Returns:
        (canonical_where_or_None, remaining_text)
    """
    match = find_first_match(FACILITY_RULES, text)
    if match:
        remaining = remove_spans(text, [match.span])
        return match.rule.label, _strip_cities(remaining)

    match = find_first_match(CITY_RULES, text)
    if match:
        if match.value:
            return None, remove_spans(text, [match.span])
        return match.rule.label, match.rule.regex.sub(' ', text)

    return None, text


def clean_what(text: str) -> Optional[str]:
    """Tidy the department remainder; None if no words are left."""
    text = _WHAT_SEPARATORS.sub(' ', text or '')
    text = _LOOSE_DASHES.sub(' ', text)
    text = tidy_text(text)
    if not _HAS_WORD.search(text):
        return None
    return text


def extract_segments(
    text: Optional[str],
    hospital_name: Optional[str] = None,
    original: Optional[str] = None,
) -> ParsedArea:
    """
    Decompose noise-stripped text into Where / What / Location / Sub-location.

    Args:
        text: Reference text with noise already removed (see strip_noise)
        hospital_name: Customer name of the hospital, used as a Where hint
        original: The raw reference, kept on the result (defaults to text)

    Returns:
        ParsedArea; segments that were not found are None
    """
    working = text if isinstance(text, str) else ''
    parsed = ParsedArea(original=original if isinstance(original, str) else working)

    if not working.strip():
        return parsed

    sub_match = find_first_match(SUB_LOCATION_RULES, working)
    if sub_match:
        parsed.sub_location = tidy_text(sub_match.text)
        working = remove_spans(working, [sub_match.span])

    location_matches = find_all_matches(LOCATION_RULES, working)
    if location_matches:
        parsed.location = ' '.join(tidy_text(m.text) for m in location_matches)
        working = remove_spans(working, [m.span for m in location_matches])

    where, working = extract_where(working)
    if where:
        parsed.where = where
        parsed.where_source = WHERE_FROM_REFERENCE
    else:
        hint = find_where_hint(hospital_name)
        if hint:
            parsed.where = hint
            parsed.where_source = WHERE_FROM_HOSPITAL

    parsed.what = clean_what(working)
    return parsed


def parse_area(raw_text: Optional[str], hospital_name: Optional[str] = None) -> ParsedArea:
    """Strip noise from a raw reference and extract its segments."""
    return extract_segments(strip_noise(raw_text), hospital_name, original=raw_text or '')

"""
Unit tests for area segment extraction.
"""

import pytest

from src.area_matching.segments import (
    WHERE_FROM_HOSPITAL,
    WHERE_FROM_REFERENCE,
    ParsedArea,
    extract_segments,
    extract_where,
    find_where_hint,
    parse_area,
)


class TestSubLocation:
    """Test room / bay / bed extraction."""

    @pytest.mark.parametrize("text,expected", [
        ('ICU Windows Rm 1, 4, 5 & 6', 'Rm 1, 4, 5 & 6'),
        ('Rms 5 & 6', 'Rms 5 & 6'),
        ('Recovery Bays 1-4', 'Bays 1-4'),
        ('Ward 3 Bed 12', 'Bed 12'),
        ('Cardiac Care Lvl 1, Care 3', 'Care 3'),
        ('ED Resus 2', 'Resus 2'),
        ('Day Surgery Room 5 and Room 6', 'Room 5 and Room 6'),
        ('Recovery Bay 1 & Bay 2', 'Bay 1 & Bay 2'),
    ])
    def test_sub_location(self, text, expected):
        """The first sub-location rule with a number is extracted."""
        assert extract_segments(text).sub_location == expected

    def test_requires_number(self):
        """'Clinic Rooms' has no number and stays in What."""
        parsed = extract_segments('Clinic Rooms')
        assert parsed.sub_location is None
        assert parsed.what == 'Clinic Rooms'


class TestLocation:
    """Test building / level extraction."""

    @pytest.mark.parametrize("text,expected", [
        ('Lvl 3 ICU', 'Lvl 3'),
        ('SSR Lv3 2nd Stage recovery', 'Lv3'),
        ('Clinic Building 4 Level 1', 'Building 4 Level 1'),
        ('Theatres 3rd Floor', '3rd Floor'),
        ('Ward 5 South', 'South'),
        ('Surgical East Wing', 'East Wing'),
    ])
    def test_location(self, text, expected):
        """All location tokens are kept in their original order."""
        assert extract_segments(text).location == expected

    @pytest.mark.parametrize("text", [
        'Surgical Units',
        'Outpatient Blocks',
        'Maternity Buildings',
        'Day Stay Wings',
    ])
    def test_plural_keyword_is_not_location(self, text):
        """A plural 's' is not taken as a building letter."""
        parsed = extract_segments(text)
        assert parsed.location is None
        assert parsed.what == text

    @pytest.mark.parametrize("text,expected", [
        ('Outpatients Block B', 'Block B'),
        ('Surgical Unit A1', 'Unit A1'),
        ('Clinic Bldg #3', 'Bldg #3'),
    ])
    def test_building_value(self, text, expected):
        """Letters and codes after the keyword are still locations."""
        assert extract_segments(text).location == expected

    def test_palmerston_north_is_not_compass(self):
        """A town name ending in a compass word is not a location."""
        parsed = extract_segments('Palmerston North')
        assert parsed.location is None
        assert parsed.where == 'Palmerston North'


class TestWhere:
    """Test facility and town detection."""

    def test_facility_in_reference(self):
        """A named facility becomes the Where and leaves the text."""
        where, remaining = extract_where("Wellington Children's Hospital Piko Ward")
        assert where == "Children's Hospital"
        assert 'Wellington' not in remaining
        assert 'Piko Ward' in remaining

    def test_city_hospital_is_stripped(self):
        """'<Town> Hospital' is the main campus and is not a Where."""
        where, remaining = extract_where('Wellington Hospital Gastro Unit')
        assert where is None
        assert remaining.strip() == 'Gastro Unit'

    def test_plain_city_is_where(self):
        """A bare town name is the Where."""
        where, remaining = extract_where('Waikato PACU')
        assert where == 'Waikato'
        assert remaining.strip() == 'PACU'

    @pytest.mark.parametrize("hospital,expected", [
        ('Waikato DHB', 'Waikato'),
        ('Counties Manukau', 'Manukau'),
        ('Counties Manukau - Health New Zealand', 'Manukau'),
        ('Auckland - Health New Zealand', 'Auckland'),
        ('Capital & Coast Health New Zealand', None),
        ('Capital & Coast Health', None),
        ('', None),
        (None, None),
    ])
    def test_where_hint(self, hospital, expected):
        """Hints come from the hospital's customer name."""
        assert find_where_hint(hospital) == expected


class TestExtractSegments:
    """Test the full extraction order."""

    def test_greenlane(self):
        """Facility, department and both location tokens are separated."""
        parsed = parse_area('Greenlane Clinic Rooms Building 4 Level 1', 'Auckland - Health New Zealand')
        assert parsed.where == 'Greenlane'
        assert parsed.where_source == WHERE_FROM_REFERENCE
        assert parsed.what == 'Clinic Rooms'
        assert parsed.location == 'Building 4 Level 1'
        assert parsed.sub_location is None

    def test_hospital_hint_used_as_fallback(self):
        """Without a Where in the text, the hospital supplies one."""
        parsed = parse_area('ed department', 'Counties Manukau')
        assert parsed.where == 'Manukau'
        assert parsed.where_source == WHERE_FROM_HOSPITAL
        assert parsed.what == 'ed department'

    def test_reference_where_wins_over_hint(self):
        """A Where in the reference beats the hospital hint."""
        parsed = parse_area('Middlemore Ward 21', 'Counties Manukau - Health New Zealand')
        assert parsed.where == 'Middlemore'
        assert parsed.what == 'Ward 21'

    def test_original_is_kept(self):
        """The raw text is carried on the result."""
        raw = 'PO293774 - Wellington Hospital - Minor Care Zone'
        parsed = parse_area(raw)
        assert parsed.original == raw
        assert parsed.what == 'Minor Care Zone'

    def test_empty_input(self):
        """Empty input gives an empty ParsedArea."""
        parsed = parse_area(None, 'Waikato DHB')
        assert parsed == ParsedArea()
        assert not parsed.has_segments

    def test_hint_alone_is_not_a_segment(self):
        """A hospital-derived Where does not count as extracted content."""
        parsed = ParsedArea(where='Waikato', where_source=WHERE_FROM_HOSPITAL)
        assert not parsed.has_segments

    def test_to_dict(self):
        """to_dict includes every field."""
        parsed = parse_area('Lvl 3 ICU')
        data = parsed.to_dict()
        assert data['what'] == 'ICU'
        assert data['location'] == 'Lvl 3'
        assert set(data) == {'where', 'what', 'location', 'sub_location', 'original', 'where_source'}

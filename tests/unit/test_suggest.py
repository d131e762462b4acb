"""
Unit tests for the area suggestion API.
"""

import pandas as pd
import pytest
from pydantic import TypeAdapter, ValidationError

from schemas.areas import (
    AreaSuggestion,
    ExistingArea,
    ExistingAreaSuggestion,
    NewAreaSuggestion,
)
from src.area_matching.suggest import (
    SUGGESTION_COLUMNS,
    get_suggestions_for_purchases,
    index_areas_by_hospital,
    suggest_area,
    suggest_areas_dataframe,
)


class TestSuggestArea:
    """Test single-reference suggestions."""

    @pytest.mark.parametrize("raw", [None, '', '   '])
    def test_blank_gives_none(self, hospital_areas, raw):
        """None or blank text gives no suggestion at all."""
        assert suggest_area(raw, hospital_areas) is None

    def test_exact_match(self, hospital_areas):
        """Exact names reuse the existing area at 100."""
        result = suggest_area('Wellington Gastro Ward 2', hospital_areas)
        assert result.type == 'existing'
        assert result.area_id == 1
        assert result.area_name == 'Wellington Gastro Ward 2'
        assert result.confidence == 100

    def test_case_insensitive(self, hospital_areas):
        """Case differences still score 100."""
        result = suggest_area('wellington gastro ward 2', hospital_areas)
        assert result.type == 'existing'
        assert result.area_id == 1
        assert result.confidence == 100

    def test_partial_match(self, hospital_areas):
        """A contained name reuses the area above the threshold."""
        result = suggest_area('Wellington Gastro Ward', hospital_areas)
        assert result.type == 'existing'
        assert result.confidence >= 60

    def test_prefers_higher_confidence(self, hospital_areas):
        """The exact match beats a longer containing name."""
        result = suggest_area('Wellington Gastro', hospital_areas)
        assert result.area_id == 2
        assert result.confidence == 100

    def test_punctuation(self, hospital_areas):
        """Dashes do not prevent a match."""
        result = suggest_area('Ward 5 - South', hospital_areas)
        assert result.type == 'existing'
        assert result.area_id == 5

    def test_trims_whitespace(self, hospital_areas):
        """Surrounding whitespace is ignored."""
        result = suggest_area('  Radiology  ', hospital_areas)
        assert result.type == 'existing'
        assert result.area_id == 4
        assert result.area_name == 'Radiology'

    def test_new_when_no_match(self, hospital_areas):
        """Unmatched text proposes a new area with confidence 0."""
        result = suggest_area('Completely New Area Name', hospital_areas, 'Test Hospital')
        assert isinstance(result, NewAreaSuggestion)
        assert result.type == 'new'
        assert result.confidence == 0
        assert not hasattr(result, 'area_id')

    def test_new_below_threshold(self, hospital_areas):
        """Very different text proposes a new area."""
        result = suggest_area('XYZABC123', hospital_areas, 'Test Hospital')
        assert result.type == 'new'

    def test_new_when_no_areas(self):
        """A hospital without areas always gets a new area."""
        result = suggest_area('Some Area', [], 'Test Hospital')
        assert result.type == 'new'
        assert result.area_name == 'Some Area'

    def test_new_area_name_is_canonical(self):
        """New names follow the naming convention."""
        result = suggest_area('Lvl 3 ICU', [], 'Capital & Coast Health New Zealand')
        assert result.area_name == 'ICU Lvl 3'

    def test_all_noise_gives_empty_new(self):
        """All-noise text gives a new suggestion with an empty name."""
        result = suggest_area('2-yr Curtain changeover', [], 'Counties Manukau')
        assert result == NewAreaSuggestion(area_name='')

    def test_punctuation_only_gives_empty_new(self, hospital_areas):
        """Text without letters or digits is never proposed as an area name."""
        result = suggest_area('!!!', hospital_areas, 'Capital & Coast Health New Zealand')
        assert result == NewAreaSuggestion(area_name='')

    def test_accepts_dicts(self):
        """Areas may be plain dicts, including the camelCase export."""
        areas = [{'id': 7, 'name': 'Radiology', 'hospitalId': 1}]
        result = suggest_area('Radiology', areas)
        assert result.area_id == 7

    def test_malformed_area_raises(self):
        """An area without a name is rejected."""
        with pytest.raises(ValidationError):
            suggest_area('Radiology', [{'id': 7, 'hospital_id': 1}])


class TestSuggestionModels:
    """Test the suggestion union."""

    def test_discriminated_union(self):
        """The type field selects the model."""
        adapter = TypeAdapter(AreaSuggestion)
        existing = adapter.validate_python({'type': 'existing', 'area_id': 1, 'area_name': 'ICU', 'confidence': 80})
        new = adapter.validate_python({'type': 'new', 'area_name': 'ICU Lvl 3'})
        assert isinstance(existing, ExistingAreaSuggestion)
        assert isinstance(new, NewAreaSuggestion)

    @pytest.mark.parametrize("confidence", [59, 101])
    def test_existing_confidence_range(self, confidence):
        """Existing suggestions must be between the threshold and 100."""
        with pytest.raises(ValidationError):
            ExistingAreaSuggestion(area_id=1, area_name='ICU', confidence=confidence)

    def test_new_confidence_fixed(self):
        """New suggestions always have confidence 0."""
        with pytest.raises(ValidationError):
            NewAreaSuggestion(area_name='ICU', confidence=50)


class TestBatchSuggestions:
    """Test purchase batches."""

    def test_index_areas_by_hospital(self, hospital_areas):
        """Areas are grouped per hospital in input order."""
        index = index_areas_by_hospital(hospital_areas)
        assert [a.id for a in index[1]] == [1, 2, 3, 4, 5]
        assert [a.id for a in index[2]] == [6]

    def test_suggestions_scoped_to_hospital(self, hospital_areas, hospital_names, sample_purchases):
        """Each purchase only matches its own hospital's areas."""
        index = index_areas_by_hospital(hospital_areas)
        results = get_suggestions_for_purchases(sample_purchases, index, hospital_names)

        assert set(results) == {101, 102, 103, 104, 105}
        assert results[101].area_id == 2
        assert results[102] is not None
        assert results[103] is None
        assert results[104].type == 'existing'
        assert results[104].area_id == 6
        assert results[105].type == 'new'

    def test_unknown_hospital(self, hospital_names):
        """A hospital with no registered areas gets new suggestions."""
        results = get_suggestions_for_purchases(
            [{'id': 1, 'raw_area_text': 'Radiology', 'hospital_id': 99}], {}, hospital_names
        )
        assert results[1].type == 'new'
        assert results[1].area_name == 'Radiology'


class TestSuggestAreasDataframe:
    """Test the DataFrame batch variant."""

    def test_adds_columns(self, purchases_df, areas_df, hospitals_df):
        """Suggestion columns are added without touching the input."""
        result = suggest_areas_dataframe(purchases_df, areas_df, hospitals_df)

        for column in SUGGESTION_COLUMNS:
            assert column in result.columns
            assert column not in purchases_df.columns
        assert len(result) == len(purchases_df)

    def test_values(self, purchases_df, areas_df, hospitals_df):
        """Existing, new and empty rows are filled accordingly."""
        result = suggest_areas_dataframe(purchases_df, areas_df, hospitals_df).set_index('id')

        assert result.loc[101, 'suggestion_type'] == 'existing'
        assert result.loc[101, 'suggested_area_id'] == 2
        assert result.loc[101, 'confidence'] == 100
        assert result.loc[105, 'suggestion_type'] == 'new'
        assert pd.isna(result.loc[105, 'suggested_area_id'])
        assert result.loc[105, 'confidence'] == 0
        assert pd.isna(result.loc[103, 'suggestion_type'])

    def test_missing_hospital_id(self, areas_df, hospitals_df):
        """Rows without a hospital get no suggestion."""
        purchases = pd.DataFrame([{'id': 1, 'raw_area_text': 'Radiology', 'hospital_id': None}])
        result = suggest_areas_dataframe(purchases, areas_df, hospitals_df)
        assert pd.isna(result.loc[0, 'suggestion_type'])

"""
Area Suggestion

Combines the similarity scorer and the canonical formatter into one
suggestion per raw reference:

- None                      raw text is None or blank
- ExistingAreaSuggestion    an existing area of the hospital scores >= 60
- NewAreaSuggestion         otherwise; area_name is the canonical new name
                            (may be '' when the text was all noise)

Usage:
    from src.area_matching.suggest import suggest_area

    suggestion = suggest_area('Wellington Gastro', areas, 'Capital & Coast Health')
    if suggestion is not None and suggestion.type == 'existing':
        print(suggestion.area_id, suggestion.confidence)
"""

import logging
from collections import defaultdict
from typing import Any, Dict, Iterable, List, Mapping, Optional

import pandas as pd

from schemas.areas import (
    AreaSuggestion,
    ExistingArea,
    ExistingAreaSuggestion,
    NewAreaSuggestion,
    PurchaseReference,
)
from src.area_matching.formatter import format_new_area_suggestion
from src.area_matching.similarity import find_best_existing_area

logger = logging.getLogger(__name__)

SUGGESTION_COLUMNS = ['suggestion_type', 'suggested_area_id', 'suggested_area_name', 'confidence']


def _as_area(area: Any) -> ExistingArea:
    if isinstance(area, ExistingArea):
        return area
    if isinstance(area, Mapping):
        return ExistingArea.model_validate(area)
    return ExistingArea.model_validate(area, from_attributes=True)


def _as_purchase(purchase: Any) -> PurchaseReference:
    if isinstance(purchase, PurchaseReference):
        return purchase
    if isinstance(purchase, Mapping):
        return PurchaseReference.model_validate(purchase)
    return PurchaseReference.model_validate(purchase, from_attributes=True)


def suggest_area(
    raw_area_text: Optional[str],
    existing_areas: Iterable[Any],
    hospital_name: Optional[str] = '',
) -> Optional[AreaSuggestion]:
    """
    Suggest an existing area, or a new canonical name, for one raw reference.

    Args:
        raw_area_text: Area text from the order's customer reference
        existing_areas: Areas of the order's hospital only (ExistingArea
            models or dicts with id / name / hospital_id)
        hospital_name: Customer name of the hospital

    Returns:
        ExistingAreaSuggestion, NewAreaSuggestion, or None for None/blank text

    Raises:
        pydantic.ValidationError: If an area dict is malformed
    """
    if raw_area_text is None or not isinstance(raw_area_text, str):
        return None

    text = raw_area_text.strip()
    if not text:
        return None

    areas = [_as_area(area) for area in existing_areas]
    match = find_best_existing_area(text, areas, hospital_name)
    if match is not None:
        logger.debug(f"'{text}' -> existing area {match.area.id} '{match.area.name}' ({match.confidence})")
        return ExistingAreaSuggestion(
            area_id=match.area.id,
            area_name=match.area.name,
            confidence=match.confidence,
        )

    area_name = format_new_area_suggestion(text, hospital_name)
    logger.debug(f"'{text}' -> new area '{area_name}'")
    return NewAreaSuggestion(area_name=area_name)


def index_areas_by_hospital(areas: Iterable[Any]) -> Dict[int, List[ExistingArea]]:
    """Group areas by hospital_id, keeping input order within each hospital."""
    grouped: Dict[int, List[ExistingArea]] = defaultdict(list)
    for area in areas:
        area = _as_area(area)
        grouped[area.hospital_id].append(area)
    return dict(grouped)


def get_suggestions_for_purchases(
    purchases: Iterable[Any],
    areas_by_hospital: Mapping[int, Iterable[Any]],
    hospital_names: Mapping[int, str],
) -> Dict[int, Optional[AreaSuggestion]]:
    """
    Suggest an area for every purchase, scoped to the purchase's hospital.

    Args:
        purchases: PurchaseReference models or dicts (id, raw_area_text, hospital_id)
        areas_by_hospital: hospital_id -> existing areas (see index_areas_by_hospital)
        hospital_names: hospital_id -> customer name

    Returns:
        purchase id -> suggestion (None where the purchase has no area text)
    """
    results: Dict[int, Optional[AreaSuggestion]] = {}
    for purchase in purchases:
        purchase = _as_purchase(purchase)
        results[purchase.id] = suggest_area(
            purchase.raw_area_text,
            areas_by_hospital.get(purchase.hospital_id, []),
            hospital_names.get(purchase.hospital_id, ''),
        )

    counts = defaultdict(int)
    for suggestion in results.values():
        counts[suggestion.type if suggestion is not None else 'none'] += 1
    logger.info(
        f"Suggested areas for {len(results)} purchases: "
        f"{counts['existing']} existing, {counts['new']} new, {counts['none']} without text"
    )
    return results


def _text_or_none(value: Any) -> Optional[str]:
    if value is None or (not isinstance(value, str) and pd.isna(value)):
        return None
    return str(value)


def _suggestion_columns(suggestion: Optional[AreaSuggestion]) -> Dict[str, Any]:
    if suggestion is None:
        return dict.fromkeys(SUGGESTION_COLUMNS)
    return {
        'suggestion_type': suggestion.type,
        'suggested_area_id': getattr(suggestion, 'area_id', None),
        'suggested_area_name': suggestion.area_name,
        'confidence': suggestion.confidence,
    }


def suggest_areas_dataframe(
    purchases_df: pd.DataFrame,
    areas_df: pd.DataFrame,
    hospitals_df: pd.DataFrame,
    text_col: str = 'raw_area_text',
) -> pd.DataFrame:
    """
    Add area suggestions to a purchases dataframe.

    Adds columns:
    - suggestion_type: 'existing', 'new', or empty
    - suggested_area_id: existing area id (empty for new)
    - suggested_area_name: existing area name or proposed new name
    - confidence: 60-100 for existing, 0 for new

    Args:
        purchases_df: Columns id, hospital_id and text_col
        areas_df: Columns id, name, hospital_id
        hospitals_df: Columns id, name
        text_col: Column holding the raw area text

    Returns:
        Copy of purchases_df with the suggestion columns added
    """
    areas_by_hospital = index_areas_by_hospital(
        {'id': int(row.id), 'name': str(row.name), 'hospital_id': int(row.hospital_id)}
        for row in areas_df[['id', 'name', 'hospital_id']].itertuples(index=False)
    )
    hospital_names = {
        int(row.id): _text_or_none(row.name) or ''
        for row in hospitals_df[['id', 'name']].itertuples(index=False)
    }

    suggestions = []
    for _, row in purchases_df.iterrows():
        hospital_id = row.get('hospital_id')
        if pd.isna(hospital_id):
            suggestions.append(None)
            continue
        hospital_id = int(hospital_id)
        suggestions.append(suggest_area(
            _text_or_none(row.get(text_col)),
            areas_by_hospital.get(hospital_id, []),
            hospital_names.get(hospital_id, ''),
        ))

    result = purchases_df.copy()
    columns = pd.DataFrame(
        [_suggestion_columns(s) for s in suggestions],
        columns=SUGGESTION_COLUMNS,
        index=purchases_df.index,
    )
    for column in SUGGESTION_COLUMNS:
        result[column] = columns[column]

    logger.info(
        f"Suggested areas for {len(result)} rows "
        f"({(result['suggestion_type'] == 'existing').sum()} existing, "
        f"{(result['suggestion_type'] == 'new').sum()} new)"
    )
    return result

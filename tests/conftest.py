"""Pytest configuration and fixtures."""
import pytest
import pandas as pd
from typing import List, Dict, Any

from schemas.areas import ExistingArea


@pytest.fixture
def hospital_areas() -> List[ExistingArea]:
    """Existing areas for two hospitals, in registration order."""
    return [
        ExistingArea(id=1, name='Wellington Gastro Ward 2', hospital_id=1),
        ExistingArea(id=2, name='Wellington Gastro', hospital_id=1),
        ExistingArea(id=3, name='ICU Level 3', hospital_id=1),
        ExistingArea(id=4, name='Radiology', hospital_id=1),
        ExistingArea(id=5, name='Ward 5 South', hospital_id=1),
        ExistingArea(id=6, name='Middlemore Ward 6', hospital_id=2),
    ]


@pytest.fixture
def hospital_names() -> Dict[int, str]:
    """Customer names per hospital id."""
    return {
        1: 'Capital & Coast Health New Zealand',
        2: 'Counties Manukau - Health New Zealand',
    }


@pytest.fixture
def sample_purchases() -> List[Dict[str, Any]]:
    """Purchases across both hospitals."""
    return [
        {'id': 101, 'raw_area_text': 'Wellington Gastro', 'hospital_id': 1},
        {'id': 102, 'raw_area_text': 'Lvl 3 ICU', 'hospital_id': 1},
        {'id': 103, 'raw_area_text': None, 'hospital_id': 1},
        {'id': 104, 'raw_area_text': 'Middlemore Ward 6', 'hospital_id': 2},
        {'id': 105, 'raw_area_text': 'Middlemore Ward 6', 'hospital_id': 1},
    ]


@pytest.fixture
def areas_df(hospital_areas) -> pd.DataFrame:
    """areas.csv contents."""
    return pd.DataFrame([area.model_dump() for area in hospital_areas])


@pytest.fixture
def hospitals_df(hospital_names) -> pd.DataFrame:
    """hospitals.csv contents."""
    return pd.DataFrame([{'id': k, 'name': v} for k, v in hospital_names.items()])


@pytest.fixture
def purchases_df(sample_purchases) -> pd.DataFrame:
    """purchases.csv contents."""
    return pd.DataFrame(sample_purchases)

"""
Data schemas for the area suggestion tooling.

Pydantic models for the suggestion API plus the CSV files the batch CLI
reads and writes.

Usage:
    from schemas import read_validated_csv, validated_df_to_csv
    from schemas.areas import ExistingArea, NewAreaSuggestion

    areas_df = read_validated_csv('data/raw/areas.csv')

    # Or use the registry
    from schemas import SCHEMA_REGISTRY
    schema = SCHEMA_REGISTRY['area_suggestions.csv']
"""

from .validator import (
    read_validated_csv,
    validate_dataframe,
    validated_df_to_csv,
    SchemaValidationError,
)
from .registry import SCHEMA_REGISTRY, get_schema_for_file
from .areas import (
    AreaSuggestion,
    ExistingArea,
    ExistingAreaSuggestion,
    NewAreaSuggestion,
    PurchaseReference,
)

__all__ = [
    'read_validated_csv',
    'validate_dataframe',
    'validated_df_to_csv',
    'SchemaValidationError',
    'SCHEMA_REGISTRY',
    'get_schema_for_file',
    'AreaSuggestion',
    'ExistingArea',
    'ExistingAreaSuggestion',
    'NewAreaSuggestion',
    'PurchaseReference',
]

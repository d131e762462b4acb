"""
Schema registry mapping file names to their Pydantic schemas.

Central reference for the CSV files read and written by the area
suggestion tooling.
"""

from typing import Type, Dict, Optional
from pathlib import Path
from pydantic import BaseModel

from .areas import AreaRecord, HospitalRecord, PurchaseRecord, AreaSuggestionRecord


# Keys are file names (without path), values are Pydantic model classes
SCHEMA_REGISTRY: Dict[str, Type[BaseModel]] = {
    # Inputs
    'areas.csv': AreaRecord,
    'hospitals.csv': HospitalRecord,
    'purchases.csv': PurchaseRecord,

    # Outputs
    'area_suggestions.csv': AreaSuggestionRecord,
}


def get_schema_for_file(file_path: str) -> Optional[Type[BaseModel]]:
    """
    Get the schema for a file based on its name.

    Args:
        file_path: Path to the file (can be full path or just filename)

    Returns:
        Pydantic model class or None if no schema registered
    """
    filename = Path(file_path).name
    return SCHEMA_REGISTRY.get(filename)


def list_registered_files() -> list:
    """Return list of all registered file names."""
    return sorted(SCHEMA_REGISTRY.keys())

"""
Area Matching Module

Turns the free-text customer reference on a hospital curtain order into an
area suggestion: reuse one of the hospital's existing areas, or create a new
area with a canonical name.

Usage (single reference):
    from src.area_matching import suggest_area

    suggestion = suggest_area(
        'Ward 5 - South',
        existing_areas=[{'id': 5, 'name': 'Ward 5 South', 'hospital_id': 1}],
        hospital_name='Capital & Coast Health New Zealand',
    )
    suggestion.type         # 'existing' or 'new'
    suggestion.area_name    # existing name, or proposed canonical name
    suggestion.confidence   # 60-100 for existing, 0 for new

Usage (canonical name only):
    from src.area_matching import format_new_area_suggestion

    format_new_area_suggestion('Greenlane Clinic Rooms Building 4 Level 1', 'Auckland - Health New Zealand')
    # 'Greenlane Clinic Rms Bldg 4 Lvl 1'

Usage (batch):
    from src.area_matching import suggest_areas_dataframe

    df = suggest_areas_dataframe(purchases_df, areas_df, hospitals_df)

Module Structure:
    area_matching/
    ├── __init__.py       # Public API (this file)
    ├── rules.py          # PatternRule tables and generic matchers
    ├── noise.py          # PO prefix and reorder boilerplate stripping
    ├── segments.py       # Where / What / Location / Sub-location extraction
    ├── formatter.py      # Canonical display names
    ├── similarity.py     # Similarity scoring against existing areas
    ├── suggest.py        # Suggestion API (single, purchases, DataFrame)
    ├── customer_ref.py   # Area text from full order references
    └── cli.py            # area-suggest command
"""

from src.area_matching.customer_ref import parse_customer_ref
from src.area_matching.formatter import format_new_area_suggestion, format_parsed_area
from src.area_matching.noise import strip_noise
from src.area_matching.segments import ParsedArea, extract_segments, parse_area
from src.area_matching.similarity import (
    CONFIDENCE_THRESHOLD,
    calculate_similarity,
    clean_area_text,
    find_best_existing_area,
)
from src.area_matching.suggest import (
    get_suggestions_for_purchases,
    index_areas_by_hospital,
    suggest_area,
    suggest_areas_dataframe,
)

__all__ = [
    'CONFIDENCE_THRESHOLD',
    'ParsedArea',
    'calculate_similarity',
    'clean_area_text',
    'extract_segments',
    'find_best_existing_area',
    'format_new_area_suggestion',
    'format_parsed_area',
    'get_suggestions_for_purchases',
    'index_areas_by_hospital',
    'parse_area',
    'parse_customer_ref',
    'strip_noise',
    'suggest_area',
    'suggest_areas_dataframe',
]

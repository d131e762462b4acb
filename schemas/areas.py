"""
Area suggestion schemas.

Two groups of models live here:

- Domain models passed through the suggestion API (ExistingArea,
  PurchaseReference, ExistingAreaSuggestion, NewAreaSuggestion).
- CSV row schemas for the batch files read and written by the
  area-suggest CLI (AreaRecord, HospitalRecord, PurchaseRecord,
  AreaSuggestionRecord).

Input Location: {DATA_DIR}/raw/
Output Location: {DATA_DIR}/processed/
"""

from typing import Annotated, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field


CONFIDENCE_THRESHOLD = 60


# =============================================================================
# Domain models
# =============================================================================

class ExistingArea(BaseModel):
    """
    A canonical area already registered for a hospital.

    Read-only to the suggestion code. `hospitalId` is accepted as an alias so
    records exported from the dashboard can be passed straight in.
    """

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    id: int = Field(description="Area primary key")
    name: str = Field(description="Canonical area display name")
    hospital_id: int = Field(alias='hospitalId', description="Owning hospital")


class PurchaseReference(BaseModel):
    """One order to suggest an area for."""

    model_config = ConfigDict(populate_by_name=True)

    id: int = Field(description="Purchase / order id")
    raw_area_text: Optional[str] = Field(
        default=None,
        alias='rawAreaText',
        description="Area text derived from the order's customer reference",
    )
    hospital_id: int = Field(alias='hospitalId', description="Hospital the order belongs to")


class ExistingAreaSuggestion(BaseModel):
    """Reuse an existing area; confidence is always at or above the threshold."""

    type: Literal['existing'] = 'existing'
    area_id: int
    area_name: str
    confidence: int = Field(ge=CONFIDENCE_THRESHOLD, le=100)


class NewAreaSuggestion(BaseModel):
    """
    Create a new area.

    area_name may be empty when the reference held nothing but noise; callers
    treat an empty name as "no suggestion".
    """

    type: Literal['new'] = 'new'
    area_name: str = ''
    confidence: Literal[0] = 0


AreaSuggestion = Annotated[
    Union[ExistingAreaSuggestion, NewAreaSuggestion],
    Field(discriminator='type'),
]


# =============================================================================
# CSV row schemas
# =============================================================================

class AreaRecord(BaseModel):
    """
    Existing area table schema.

    File: areas.csv
    Purpose: Canonical areas per hospital, matched against order references.
    """

    id: int = Field(description="Area primary key")
    name: str = Field(description="Canonical area display name")
    hospital_id: int = Field(description="FK to hospitals.csv")


class HospitalRecord(BaseModel):
    """
    Hospital table schema.

    File: hospitals.csv
    Purpose: Customer name per hospital, used as a Where hint and stripped
    from references when comparing.
    """

    id: int = Field(description="Hospital primary key")
    name: str = Field(description="Customer name, e.g. 'Counties Manukau - Health New Zealand'")


class PurchaseRecord(BaseModel):
    """
    Purchase (order) extract schema.

    File: purchases.csv
    Purpose: Orders needing an area. raw_area_text may be empty; the CLI
    derives it from a customer_ref column when present.
    """

    id: int = Field(description="Purchase / order id")
    hospital_id: int = Field(description="FK to hospitals.csv")
    raw_area_text: Optional[str] = Field(default=None, description="Area text from the customer reference")


class AreaSuggestionRecord(BaseModel):
    """
    Area suggestion output schema.

    File: area_suggestions.csv
    Records: one per purchase

    Note: suggested_area_id and confidence are empty when no suggestion was
    made, so pandas reads them as float64.
    """

    id: int = Field(description="Purchase / order id")
    hospital_id: int = Field(description="FK to hospitals.csv")
    raw_area_text: Optional[str] = Field(default=None, description="Area text the suggestion was made for")
    suggestion_type: Optional[str] = Field(default=None, description="existing, new, or empty")
    suggested_area_id: Optional[float] = Field(default=None, description="FK to areas.csv for existing suggestions")
    suggested_area_name: Optional[str] = Field(default=None, description="Existing area name or proposed new name")
    confidence: Optional[float] = Field(default=None, description="60-100 for existing, 0 for new")

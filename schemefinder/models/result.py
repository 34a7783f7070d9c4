"""
Pydantic models for eligibility results and cache statistics
"""
from datetime import datetime, timezone
from typing import List

from pydantic import BaseModel, ConfigDict, Field

from .scheme import Scheme


def get_current_utc_time():
    """Get current UTC time for default values"""
    return datetime.now(timezone.utc)


class EligibilityResult(BaseModel):
    """Per-scheme verdict with the labels that explain it"""
    scheme_id: str = Field(..., description="Scheme identifier")
    scheme_name: str = Field(..., description="Scheme name")
    eligible: bool = Field(..., description="Conjunction of every criterion group")
    matched_criteria: List[str] = Field(default_factory=list, description="Satisfied criteria")
    unmatched_criteria: List[str] = Field(default_factory=list, description="Unsatisfied criteria")

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "scheme_id": "farmer_scheme_1a2b3c4d",
                "scheme_name": "Farmer Scheme",
                "eligible": False,
                "matched_criteria": ["Age between 18 and 60", "Resident of GJ"],
                "unmatched_criteria": ["Income bracket: 1_TO_3_LAKH"]
            }
        }
    )


class EligibleSchemes(BaseModel):
    """Eligible subset of one catalog version for one user"""
    user_id: str = Field(..., description="User identifier")
    catalog_version: int = Field(..., description="Catalog snapshot the result was computed from")
    schemes: List[Scheme] = Field(default_factory=list, description="Eligible schemes in catalog order")
    computed_at: datetime = Field(default_factory=get_current_utc_time)
    from_cache: bool = Field(False, description="Served from the eligibility cache")

    @property
    def scheme_names(self) -> List[str]:
        return [scheme.name for scheme in self.schemes]


class CacheStats(BaseModel):
    """Eligibility cache counters"""
    hits: int = 0
    misses: int = 0
    hit_rate: float = Field(0.0, ge=0, le=1)
    entries: int = 0
    stale_entries: int = 0

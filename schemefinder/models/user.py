"""
Pydantic models for user profiles
"""
from typing import Any, Dict, List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from .enums import Gender, IncomeBracket, State

# Fields every scheme's fixed predicates read
ELIGIBILITY_FIELDS: Tuple[str, ...] = ("age", "state", "gender", "income_bracket")

MIN_AGE = 1
MAX_AGE = 120


class UserProfile(BaseModel):
    """User profile information for eligibility checking"""
    age: Optional[int] = Field(None, ge=MIN_AGE, le=MAX_AGE, description="User's age")
    state: Optional[State] = Field(None, description="State or union territory code")
    gender: Optional[Gender] = Field(None, description="User's gender")
    income_bracket: Optional[IncomeBracket] = Field(None, description="Annual household income band")

    # Attributes commonly targeted by custom conditions
    occupation: Optional[str] = Field(None, description="User's occupation")
    caste: Optional[str] = Field(None, description="User's caste category")
    district: Optional[str] = Field(None, description="User's district")
    annual_income: Optional[float] = Field(None, ge=0, description="Annual household income in rupees")
    is_student: Optional[bool] = Field(None, description="Whether user is a student")
    is_farmer: Optional[bool] = Field(None, description="Whether user is a farmer")
    is_disabled: Optional[bool] = Field(None, description="Whether user has a disability")
    is_rural: Optional[bool] = Field(None, description="Whether user lives in a rural area")
    family_size: Optional[int] = Field(None, ge=1, description="Family size")
    land_size_acres: Optional[float] = Field(None, ge=0, description="Land size in acres")

    @field_validator('state', mode='before')
    @classmethod
    def validate_state(cls, v):
        if isinstance(v, str):
            return v.strip().upper()
        return v

    @field_validator('gender', mode='before')
    @classmethod
    def validate_gender(cls, v):
        if isinstance(v, str):
            return Gender(v)
        return v

    def missing_eligibility_fields(self) -> List[str]:
        """Names of the fixed eligibility fields that are not filled in"""
        return [name for name in ELIGIBILITY_FIELDS if getattr(self, name) is None]

    def is_complete(self) -> bool:
        return not self.missing_eligibility_fields()

    def lookup(self, field_name: str) -> Tuple[bool, Any]:
        """
        Resolve an arbitrary profile attribute by field name or camelCase alias.

        Returns:
            (found, value); found is False when the attribute is unknown or unset
        """
        name = _ALIAS_TO_FIELD.get(field_name, field_name)
        if name in type(self).model_fields:
            value = getattr(self, name)
        else:
            value = (self.model_extra or {}).get(field_name)
        if value is None:
            return False, None
        return True, value

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="allow",
        json_schema_extra={
            "example": {
                "age": 45,
                "state": "GJ",
                "gender": "Male",
                "incomeBracket": "BELOW_1_LAKH",
                "occupation": "farmer",
                "isFarmer": True,
                "landSizeAcres": 1.5
            }
        }
    )


_ALIAS_TO_FIELD: Dict[str, str] = {to_camel(name): name for name in UserProfile.model_fields}


def profile_field_name(name: str) -> str:
    """Snake_case field name for a camelCase alias; other names pass through"""
    return _ALIAS_TO_FIELD.get(name, name)


def normalize_profile_keys(data: Dict[str, Any]) -> Dict[str, Any]:
    """Map camelCase keys onto their snake_case field names"""
    return {profile_field_name(key): value for key, value in data.items()}


def apply_profile_changes(profile: UserProfile, changes: Dict[str, Any]) -> Tuple[UserProfile, List[str]]:
    """
    Build an updated profile and report which attributes actually changed.

    Args:
        profile: Current profile
        changes: Partial update, snake_case or camelCase keys

    Returns:
        (validated new profile, names of changed fields)
    """
    current = profile.model_dump()
    updates = normalize_profile_keys(changes)
    merged = {**current, **updates}
    updated = UserProfile.model_validate(merged)

    new_values = updated.model_dump()
    changed = [
        name for name in updates
        if current.get(name) != new_values.get(name)
    ]
    return updated, changed

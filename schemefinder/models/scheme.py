"""
Pydantic models for schemes and eligibility criteria
"""
from typing import Annotated, Any, Dict, FrozenSet, Literal, Optional, Tuple, Union

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    StrictBool,
    field_validator,
    model_validator,
)
from pydantic.alias_generators import to_camel

from ..utils.validators import generate_scheme_id
from .enums import Gender, IncomeBracket, SchemeLevel, State
from .user import MAX_AGE, MIN_AGE

OPERATORS = ("equals", "contains", "greaterThan", "lessThan")


class _Condition(BaseModel):
    field: str = Field(..., min_length=1, description="Profile attribute to test")

    model_config = ConfigDict(frozen=True)

    def describe(self) -> str:
        return f"{self.field} {self.operator} {self.value!r}"


class EqualsCondition(_Condition):
    """Exact match against the profile value"""
    operator: Literal["equals"] = "equals"
    value: Union[StrictBool, int, float, str]


class ContainsCondition(_Condition):
    """Substring of a text field, or member of a list field"""
    operator: Literal["contains"] = "contains"
    value: Union[int, str]


class GreaterThanCondition(_Condition):
    operator: Literal["greaterThan"] = "greaterThan"
    value: float


class LessThanCondition(_Condition):
    operator: Literal["lessThan"] = "lessThan"
    value: float


CustomCondition = Annotated[
    Union[EqualsCondition, ContainsCondition, GreaterThanCondition, LessThanCondition],
    Field(discriminator="operator"),
]


class SchemeEligibilityCriteria(BaseModel):
    """Complete eligibility criteria for a scheme; absent constraints never exclude"""
    age_min: Optional[int] = Field(None, ge=MIN_AGE, le=MAX_AGE, description="Minimum age, inclusive")
    age_max: Optional[int] = Field(None, ge=MIN_AGE, le=MAX_AGE, description="Maximum age, inclusive")
    states: Optional[FrozenSet[State]] = Field(None, description="Region scope; absent means nationwide")
    genders: Optional[FrozenSet[Gender]] = Field(None, description="Admitted genders")
    income_brackets: Optional[FrozenSet[IncomeBracket]] = Field(None, description="Admitted income bands")
    custom_conditions: Tuple[CustomCondition, ...] = Field(
        default_factory=tuple,
        description="Every condition must hold"
    )

    @field_validator('states', 'genders', 'income_brackets', mode='before')
    @classmethod
    def normalize_admit_lists(cls, v, info):
        if v is None:
            return v
        if isinstance(v, str):
            v = [v]
        # An empty admit-list could never be satisfied; treat it as unconstrained
        if not v:
            return None
        if info.field_name == 'states':
            return [s.strip().upper() if isinstance(s, str) else s for s in v]
        if info.field_name == 'genders':
            return [Gender(g) if isinstance(g, str) else g for g in v]
        return v

    @field_validator('custom_conditions', mode='before')
    @classmethod
    def validate_custom_conditions(cls, v):
        # Accept bare (field, operator, value) triples as well as mappings
        if v is None:
            return ()
        if isinstance(v, (list, tuple)):
            return [
                {"field": c[0], "operator": c[1], "value": c[2]}
                if isinstance(c, (list, tuple)) and len(c) == 3 else c
                for c in v
            ]
        return v

    @model_validator(mode='after')
    def check_satisfiable(self):
        if self.age_min is not None and self.age_max is not None and self.age_min > self.age_max:
            raise ValueError(f"age_min ({self.age_min}) is greater than age_max ({self.age_max})")
        return self

    @property
    def referenced_fields(self) -> FrozenSet[str]:
        return frozenset(c.field for c in self.custom_conditions)

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
    )


_CRITERIA_KEY_TO_FIELD: Dict[str, str] = {
    key: name
    for name in SchemeEligibilityCriteria.model_fields
    for key in (name, to_camel(name))
}


class Scheme(BaseModel):
    """A welfare scheme as held in the in-memory catalog"""
    scheme_id: str = Field(..., min_length=1, description="Unique identifier for the scheme")
    name: str = Field(..., min_length=1, description="Official name of the scheme")
    level: SchemeLevel = Field(default=SchemeLevel.STATE, description="Central schemes ignore state scope")
    description: Optional[str] = Field(None, description="Short summary of benefits")
    criteria: SchemeEligibilityCriteria = Field(default_factory=SchemeEligibilityCriteria)

    @model_validator(mode='before')
    @classmethod
    def fold_flat_criteria(cls, data: Any):
        """Accept criteria keys at the top level and fill in a missing scheme_id"""
        if not isinstance(data, dict):
            return data
        data = dict(data)
        if "scheme_name" in data and "name" not in data:
            data["name"] = data.pop("scheme_name")

        flat = {
            _CRITERIA_KEY_TO_FIELD[key]: data.pop(key)
            for key in list(data) if key in _CRITERIA_KEY_TO_FIELD
        }
        if flat:
            nested = data.get("criteria") or {}
            if isinstance(nested, BaseModel):
                nested = nested.model_dump()
            nested = {_CRITERIA_KEY_TO_FIELD.get(k, k): v for k, v in nested.items()}
            data["criteria"] = {**nested, **flat}

        if not (data.get("scheme_id") or data.get("schemeId")) and data.get("name"):
            data["scheme_id"] = generate_scheme_id(data["name"])
        return data

    @property
    def is_nationwide(self) -> bool:
        return self.level == SchemeLevel.CENTRAL or not self.criteria.states

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
        json_schema_extra={
            "example": {
                "schemeId": "pm_kisan",
                "name": "Farmer Scheme",
                "level": "state",
                "criteria": {
                    "ageMin": 18,
                    "ageMax": 60,
                    "states": ["GJ"],
                    "incomeBrackets": ["BELOW_1_LAKH"],
                    "customConditions": [
                        {"field": "occupation", "operator": "equals", "value": "farmer"}
                    ]
                }
            }
        }
    )

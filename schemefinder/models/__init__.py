"""
Models package for the SchemeFinder Eligibility Engine
"""

from .enums import (
    Gender,
    IncomeBracket,
    SchemeLevel,
    State
)

from .user import (
    ELIGIBILITY_FIELDS,
    UserProfile,
    apply_profile_changes
)

from .scheme import (
    ContainsCondition,
    CustomCondition,
    EqualsCondition,
    GreaterThanCondition,
    LessThanCondition,
    Scheme,
    SchemeEligibilityCriteria
)

from .result import (
    CacheStats,
    EligibilityResult,
    EligibleSchemes
)

__all__ = [
    # Enums
    "Gender",
    "IncomeBracket",
    "SchemeLevel",
    "State",

    # User models
    "ELIGIBILITY_FIELDS",
    "UserProfile",
    "apply_profile_changes",

    # Scheme models
    "ContainsCondition",
    "CustomCondition",
    "EqualsCondition",
    "GreaterThanCondition",
    "LessThanCondition",
    "Scheme",
    "SchemeEligibilityCriteria",

    # Results
    "CacheStats",
    "EligibilityResult",
    "EligibleSchemes"
]

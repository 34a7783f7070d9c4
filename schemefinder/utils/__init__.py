"""
Utility functions for the SchemeFinder Eligibility Engine
"""

from .validators import (
    generate_scheme_id,
    validate_profile_data
)

__all__ = [
    "generate_scheme_id",
    "validate_profile_data"
]

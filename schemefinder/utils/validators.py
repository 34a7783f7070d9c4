"""
Utility functions for validating raw input and generating identifiers
"""
import hashlib
import re
from typing import Any, Dict, List


def generate_scheme_id(scheme_name: str, source: str = "") -> str:
    """
    Generate a stable scheme ID from a scheme name

    Args:
        scheme_name: Name of the scheme
        source: Source of the scheme (optional)

    Returns:
        Scheme ID of the form ``<slug>_<hash>``
    """
    # Clean the scheme name
    clean_name = re.sub(r'[^\w\s-]', '', scheme_name.lower())

    # Replace spaces and hyphens with underscores
    clean_name = re.sub(r'[\s-]+', '_', clean_name).strip('_')

    if source:
        source_clean = re.sub(r'[^\w]', '', source.lower())
        clean_name = f"{source_clean}_{clean_name}"

    if len(clean_name) > 50:
        clean_name = clean_name[:50]

    # Hash suffix keeps ids unique when slugs collide
    hash_suffix = hashlib.md5(scheme_name.encode()).hexdigest()[:8]
    return f"{clean_name}_{hash_suffix}"


def validate_profile_data(profile_data: Dict[str, Any]) -> List[str]:
    """
    Validate raw profile data and return a list of validation errors

    Only the fields present are checked, so partial updates can be validated
    before they are merged into a stored profile.

    Args:
        profile_data: Dictionary containing profile data (snake_case or camelCase keys)

    Returns:
        List of validation error messages (empty if valid)
    """
    from ..models.enums import Gender, IncomeBracket, State
    from ..models.user import MAX_AGE, MIN_AGE

    errors = []

    age = profile_data.get('age')
    if age is not None:
        if isinstance(age, bool):
            errors.append("Age must be a valid number")
        else:
            try:
                age = int(age)
                if age < MIN_AGE or age > MAX_AGE:
                    errors.append(f"Age must be between {MIN_AGE} and {MAX_AGE}")
            except (ValueError, TypeError):
                errors.append("Age must be a valid number")

    gender = profile_data.get('gender')
    if gender is not None:
        try:
            Gender(gender)
        except ValueError:
            errors.append(f"Gender must be one of: {', '.join(g.value for g in Gender)}")

    state = profile_data.get('state')
    if state is not None:
        state = str(getattr(state, 'value', state)).strip().upper()
        if len(state) != 2 or not state.isalpha():
            errors.append("State must be a 2-letter code")
        elif state not in State.__members__:
            errors.append(f"Unknown state code: {state}")

    bracket = profile_data.get('income_bracket', profile_data.get('incomeBracket'))
    if bracket is not None:
        valid_brackets = [b.value for b in IncomeBracket]
        if getattr(bracket, 'value', bracket) not in valid_brackets:
            errors.append(f"Income bracket must be one of: {', '.join(valid_brackets)}")

    income = profile_data.get('annual_income', profile_data.get('annualIncome'))
    if income is not None:
        try:
            if float(income) < 0:
                errors.append("Income cannot be negative")
        except (ValueError, TypeError):
            errors.append("Income must be a valid number")

    return errors

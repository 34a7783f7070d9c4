"""
Error taxonomy for the eligibility engine.

None of these are fatal to the process: the catalog and the result cache are
both rebuildable from their sources of truth.
"""
from typing import Iterable, Optional


class EligibilityError(Exception):
    """Base class for all eligibility engine errors."""


class MalformedCriterion(EligibilityError):
    """A custom condition has an unknown operator or an incomparable value."""

    def __init__(self, message: str, scheme_id: Optional[str] = None):
        self.scheme_id = scheme_id
        prefix = f"Scheme {scheme_id}: " if scheme_id else ""
        super().__init__(f"{prefix}{message}")


class ProfileIncomplete(EligibilityError):
    """One or more eligibility-relevant profile fields are missing."""

    def __init__(self, missing_fields: Iterable[str]):
        self.missing_fields = list(missing_fields)
        super().__init__(
            f"Profile is missing required fields: {', '.join(self.missing_fields)}"
        )


class CatalogUnavailable(EligibilityError):
    """No catalog snapshot has been loaded yet."""

    def __init__(self, message: str = "No scheme catalog has been loaded"):
        super().__init__(message)


class ProfileNotFound(EligibilityError):
    """The profile store has no profile for the user."""

    def __init__(self, user_id: str):
        self.user_id = user_id
        super().__init__(f"Profile not found: {user_id}")


class SchemeNotFound(EligibilityError):
    """The current catalog snapshot has no scheme with this id."""

    def __init__(self, scheme_id: str):
        self.scheme_id = scheme_id
        super().__init__(f"Scheme not found: {scheme_id}")

"""
Eligibility engine: evaluates user profiles against scheme criteria

Every operation here is a pure function of (profile, criteria) or
(profile, catalog snapshot), so any number of evaluations may run in
parallel without locking.
"""
import logging
from enum import Enum
from typing import Any, Iterable, List, Optional, Tuple, Union

from ..exceptions import MalformedCriterion, ProfileIncomplete
from ..models.result import EligibilityResult
from ..models.scheme import CustomCondition, Scheme, SchemeEligibilityCriteria
from ..models.user import UserProfile

logger = logging.getLogger(__name__)

Target = Union[Scheme, SchemeEligibilityCriteria]

NATIONWIDE_LABEL = "Available nationwide"


def _plain(value: Any) -> Any:
    return value.value if isinstance(value, Enum) else value


def _to_number(value: Any) -> float:
    value = _plain(value)
    if isinstance(value, bool):
        raise MalformedCriterion(f"cannot compare boolean {value!r} numerically")
    try:
        return float(value)
    except (TypeError, ValueError, OverflowError):
        raise MalformedCriterion(f"cannot compare {value!r} numerically") from None


def _joined(values: Iterable[Any]) -> str:
    return ", ".join(sorted(str(_plain(v)) for v in values))


class EligibilityEngine:
    """Conjunctive rule evaluation over the five criterion groups"""

    def __init__(self):
        self.operators = {
            'equals': self._equals,
            'contains': self._contains,
            'greaterThan': self._greater_than,
            'lessThan': self._less_than
        }

    # Public operations

    def evaluate(self, profile: UserProfile, target: Target) -> bool:
        """
        Decide eligibility, stopping at the first failing group

        Args:
            profile: Complete user profile
            target: A scheme, or bare criteria (treated as state-level)

        Returns:
            True if every criterion group passes
        """
        self._require_complete(profile)
        criteria, nationwide, scheme_id = self._unpack(target)
        return (
            self._age_ok(profile, criteria)
            and self._state_ok(profile, criteria, nationwide)
            and self._gender_ok(profile, criteria)
            and self._income_ok(profile, criteria)
            and all(self._condition_ok(profile, c, scheme_id) for c in criteria.custom_conditions)
        )

    def explain(self, profile: UserProfile, target: Target) -> EligibilityResult:
        """
        Evaluate every group without short-circuiting and label the outcome

        Unconstrained groups contribute no label, except that nationwide
        schemes record a matched "Available nationwide" label.
        """
        self._require_complete(profile)
        criteria, nationwide, scheme_id = self._unpack(target)
        matched: List[str] = []
        unmatched: List[str] = []

        def record(passed: bool, label: str):
            (matched if passed else unmatched).append(label)

        if criteria.age_min is not None or criteria.age_max is not None:
            record(self._age_ok(profile, criteria), self._age_label(criteria))

        if nationwide:
            matched.append(NATIONWIDE_LABEL)
        else:
            record(
                self._state_ok(profile, criteria, nationwide),
                f"Resident of {_joined(criteria.states)}"
            )

        if criteria.genders:
            record(self._gender_ok(profile, criteria), f"Gender: {_joined(criteria.genders)}")

        if criteria.income_brackets:
            record(
                self._income_ok(profile, criteria),
                f"Income bracket: {_joined(criteria.income_brackets)}"
            )

        for condition in criteria.custom_conditions:
            record(self._condition_ok(profile, condition, scheme_id), condition.describe())

        return EligibilityResult(
            scheme_id=scheme_id or "",
            scheme_name=target.name if isinstance(target, Scheme) else "",
            eligible=not unmatched,
            matched_criteria=matched,
            unmatched_criteria=unmatched
        )

    def get_eligible_schemes(self, profile: UserProfile, catalog: Iterable[Scheme]) -> List[Scheme]:
        """
        Filter a catalog snapshot down to the schemes the profile qualifies for

        Returns:
            Eligible schemes in catalog order
        """
        self._require_complete(profile)
        eligible = [scheme for scheme in catalog if self.evaluate(profile, scheme)]
        logger.debug(f"Profile eligible for {len(eligible)} schemes")
        return eligible

    def explain_all(self, profile: UserProfile, catalog: Iterable[Scheme]) -> List[EligibilityResult]:
        """Explain every scheme in a catalog snapshot"""
        self._require_complete(profile)
        return [self.explain(profile, scheme) for scheme in catalog]

    # Criterion groups; evaluate and explain share these

    @staticmethod
    def _age_ok(profile: UserProfile, criteria: SchemeEligibilityCriteria) -> bool:
        if criteria.age_min is not None and profile.age < criteria.age_min:
            return False
        if criteria.age_max is not None and profile.age > criteria.age_max:
            return False
        return True

    @staticmethod
    def _state_ok(profile: UserProfile, criteria: SchemeEligibilityCriteria, nationwide: bool) -> bool:
        return nationwide or profile.state in criteria.states

    @staticmethod
    def _gender_ok(profile: UserProfile, criteria: SchemeEligibilityCriteria) -> bool:
        return not criteria.genders or profile.gender in criteria.genders

    @staticmethod
    def _income_ok(profile: UserProfile, criteria: SchemeEligibilityCriteria) -> bool:
        return not criteria.income_brackets or profile.income_bracket in criteria.income_brackets

    def _condition_ok(
        self,
        profile: UserProfile,
        condition: CustomCondition,
        scheme_id: Optional[str] = None
    ) -> bool:
        found, actual = profile.lookup(condition.field)
        if not found:
            # Missing attribute fails the condition, never the batch
            return False

        op_func = self.operators.get(condition.operator)
        if not op_func:
            logger.warning(f"Unknown operator '{condition.operator}' in scheme {scheme_id}")
            return False

        try:
            return op_func(actual, condition.value)
        except MalformedCriterion as e:
            logger.warning(
                f"Malformed criterion in scheme {scheme_id}: {condition.describe()} ({e})"
            )
            return False

    # Operator functions

    @staticmethod
    def _equals(actual, expected) -> bool:
        actual = _plain(actual)
        if isinstance(actual, bool) or isinstance(expected, bool):
            return isinstance(actual, bool) and isinstance(expected, bool) and actual == expected
        return actual == expected

    @staticmethod
    def _contains(actual, expected) -> bool:
        actual = _plain(actual)
        if isinstance(actual, str):
            return str(expected) in actual
        if isinstance(actual, (list, tuple, set, frozenset)):
            return any(_plain(item) == expected for item in actual)
        raise MalformedCriterion(f"'contains' needs text or a list, got {type(actual).__name__}")

    @staticmethod
    def _greater_than(actual, expected) -> bool:
        return _to_number(actual) > expected

    @staticmethod
    def _less_than(actual, expected) -> bool:
        return _to_number(actual) < expected

    # Helpers

    @staticmethod
    def _require_complete(profile: UserProfile):
        missing = profile.missing_eligibility_fields()
        if missing:
            raise ProfileIncomplete(missing)

    @staticmethod
    def _unpack(target: Target) -> Tuple[SchemeEligibilityCriteria, bool, Optional[str]]:
        if isinstance(target, Scheme):
            return target.criteria, target.is_nationwide, target.scheme_id
        return target, not target.states, None

    @staticmethod
    def _age_label(criteria: SchemeEligibilityCriteria) -> str:
        if criteria.age_min is not None and criteria.age_max is not None:
            return f"Age between {criteria.age_min} and {criteria.age_max}"
        if criteria.age_min is not None:
            return f"Age at least {criteria.age_min}"
        return f"Age at most {criteria.age_max}"

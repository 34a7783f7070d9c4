"""
Shared pytest fixtures for the eligibility engine tests
"""
import pytest

from schemefinder.models import UserProfile
from schemefinder.services import (
    CatalogRegistry,
    EligibilityCache,
    EligibilityEngine,
    EligibilityService,
    InMemoryCatalogSource,
    InMemoryProfileStore,
)


class FakeClock:
    """Manually advanced monotonic clock"""

    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float):
        self.now += seconds


EXAMPLE_CATALOG = [
    {
        "name": "Farmer Scheme",
        "ageMin": 18,
        "ageMax": 60,
        "states": ["GJ"],
        "incomeBrackets": ["BELOW_1_LAKH"],
    },
    {"name": "Women Scheme", "genders": ["Female"]},
    {"name": "Senior Scheme", "ageMin": 60},
]


@pytest.fixture
def farmer_profile() -> UserProfile:
    return UserProfile.model_validate({
        "age": 45,
        "state": "GJ",
        "gender": "Male",
        "incomeBracket": "BELOW_1_LAKH",
    })


@pytest.fixture
def example_catalog():
    return [dict(entry) for entry in EXAMPLE_CATALOG]


@pytest.fixture
def engine() -> EligibilityEngine:
    return EligibilityEngine()


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def cache(clock) -> EligibilityCache:
    return EligibilityCache(ttl_seconds=600, clock=clock)


@pytest.fixture
def registry(example_catalog) -> CatalogRegistry:
    registry = CatalogRegistry()
    registry.publish(example_catalog)
    return registry


@pytest.fixture
def profile_store() -> InMemoryProfileStore:
    return InMemoryProfileStore()


@pytest.fixture
def catalog_source(example_catalog) -> InMemoryCatalogSource:
    return InMemoryCatalogSource(example_catalog)


@pytest.fixture
def service(profile_store, registry, cache, catalog_source) -> EligibilityService:
    return EligibilityService(
        profile_store=profile_store,
        catalog=registry,
        cache=cache,
        catalog_source=catalog_source,
    )

"""
Services package for the SchemeFinder Eligibility Engine
"""

from .cache import CacheState, EligibilityCache
from .catalog import (
    CatalogRegistry,
    CatalogSnapshot,
    CatalogSource,
    InMemoryCatalogSource,
    MongoCatalogSource,
    RejectedScheme,
    build_snapshot
)
from .eligibility_engine import EligibilityEngine
from .eligibility_service import EligibilityService
from .mongo_service import MongoService
from .profile_store import InMemoryProfileStore, MongoProfileStore, ProfileStore

__all__ = [
    "CacheState",
    "EligibilityCache",
    "CatalogRegistry",
    "CatalogSnapshot",
    "CatalogSource",
    "InMemoryCatalogSource",
    "MongoCatalogSource",
    "RejectedScheme",
    "build_snapshot",
    "EligibilityEngine",
    "EligibilityService",
    "MongoService",
    "InMemoryProfileStore",
    "MongoProfileStore",
    "ProfileStore"
]

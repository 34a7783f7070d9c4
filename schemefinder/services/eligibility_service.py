"""
Eligibility service wiring profile store, catalog, engine and result cache
"""
import logging
import time
from typing import Any, Dict, FrozenSet, Iterable, List, Optional

from ..exceptions import CatalogUnavailable
from ..models.result import CacheStats, EligibilityResult, EligibleSchemes
from ..models.scheme import Scheme
from ..models.user import ELIGIBILITY_FIELDS, UserProfile, profile_field_name
from ..utils.validators import validate_profile_data
from .cache import EligibilityCache
from .catalog import CatalogRegistry, CatalogSnapshot, CatalogSource, RawScheme
from .eligibility_engine import EligibilityEngine
from .profile_store import ProfileStore

logger = logging.getLogger(__name__)


class EligibilityService:
    """Service for checking user eligibility against the scheme catalog"""

    def __init__(
        self,
        profile_store: ProfileStore,
        catalog: CatalogRegistry,
        cache: EligibilityCache,
        engine: Optional[EligibilityEngine] = None,
        catalog_source: Optional[CatalogSource] = None
    ):
        self.profile_store = profile_store
        self.catalog = catalog
        self.cache = cache
        self.engine = engine or EligibilityEngine()
        self.catalog_source = catalog_source

        self.profile_store.add_listener(self._on_profile_changed)
        self.catalog.add_listener(self.on_catalog_changed)

    async def get_eligible_schemes(self, user_id: str) -> EligibleSchemes:
        """
        Eligible schemes for a stored user, read through the cache

        Raises:
            CatalogUnavailable: if no catalog has been loaded
            ProfileNotFound: if the user has no profile
            ProfileIncomplete: if the profile lacks an eligibility field
        """
        snapshot = self.catalog.snapshot()

        cached = self.cache.get(user_id, snapshot.version)
        if cached is not None:
            return cached.model_copy(update={"from_cache": True})

        # Taken before the profile read so a concurrent update voids our put
        token = self.cache.generation(user_id)
        profile = await self.profile_store.get_profile(user_id)

        start_time = time.time()
        schemes = self.engine.get_eligible_schemes(profile, snapshot.schemes)
        processing_time = (time.time() - start_time) * 1000

        result = EligibleSchemes(
            user_id=user_id,
            catalog_version=snapshot.version,
            schemes=schemes
        )
        self.cache.put(user_id, snapshot.version, result, generation=token)

        logger.info(
            f"Eligibility check completed for {user_id}: {len(schemes)}/{len(snapshot.schemes)} "
            f"schemes eligible in {processing_time:.1f} ms"
        )
        return result

    async def explain(self, user_id: str, scheme_id: str) -> EligibilityResult:
        """Why a stored user is or is not eligible for one scheme"""
        snapshot = self.catalog.snapshot()
        scheme = snapshot.get(scheme_id)
        profile = await self.profile_store.get_profile(user_id)
        return self.engine.explain(profile, scheme)

    async def explain_all(self, user_id: str) -> List[EligibilityResult]:
        """Explanations for every scheme in the current catalog"""
        snapshot = self.catalog.snapshot()
        profile = await self.profile_store.get_profile(user_id)
        return self.engine.explain_all(profile, snapshot.schemes)

    def evaluate_profile(self, profile: UserProfile) -> List[Scheme]:
        """Eligible schemes for an unsaved profile; never cached"""
        snapshot = self.catalog.snapshot()
        return self.engine.get_eligible_schemes(profile, snapshot.schemes)

    async def save_profile(self, user_id: str, profile: UserProfile) -> UserProfile:
        return await self.profile_store.save_profile(user_id, profile)

    async def update_profile(self, user_id: str, changes: Dict[str, Any]) -> UserProfile:
        """
        Apply a partial profile update

        The cached result is invalidated before this returns.

        Raises:
            ValueError: if the changes fail validation
        """
        validation_errors = validate_profile_data(changes)
        if validation_errors:
            raise ValueError(f"Invalid user profile data: {'; '.join(validation_errors)}")
        return await self.profile_store.update_profile(user_id, changes)

    def invalidate(self, user_id: str) -> int:
        """Explicit cache-busting for one user"""
        return self.cache.invalidate(user_id)

    def cache_stats(self) -> CacheStats:
        return self.cache.stats()

    def publish_catalog(self, raw_schemes: Iterable[RawScheme]) -> CatalogSnapshot:
        return self.catalog.publish(raw_schemes)

    async def reload_catalog(self) -> CatalogSnapshot:
        """Fetch the catalog from its source and publish it as a new snapshot"""
        if self.catalog_source is None:
            raise CatalogUnavailable("No catalog source configured")
        raw_schemes = await self.catalog_source.fetch_schemes()
        return self.catalog.publish(raw_schemes)

    def eligibility_relevant_fields(self) -> FrozenSet[str]:
        """Fixed eligibility fields plus every field a custom condition reads"""
        fields = set(ELIGIBILITY_FIELDS)
        try:
            snapshot = self.catalog.snapshot()
        except CatalogUnavailable:
            return frozenset(fields)
        fields.update(profile_field_name(name) for name in snapshot.referenced_fields)
        return frozenset(fields)

    # Change hooks

    def on_profile_eligibility_fields_changed(self, user_id: str):
        self.cache.invalidate(user_id)

    def on_catalog_changed(self, new_version: int):
        self.cache.retire_versions_before(new_version)

    def _on_profile_changed(self, user_id: str, changed_fields: List[str]):
        if self.eligibility_relevant_fields().intersection(changed_fields):
            self.on_profile_eligibility_fields_changed(user_id)
        else:
            logger.debug(f"Profile change for {user_id} does not affect eligibility")

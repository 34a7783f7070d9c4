"""
Assembly of a ready-to-use eligibility service from settings
"""
import logging
from typing import Optional

from .config import Settings, settings as default_settings
from .services.cache import EligibilityCache
from .services.catalog import CatalogRegistry, MongoCatalogSource
from .services.eligibility_service import EligibilityService
from .services.mongo_service import MongoService
from .services.profile_store import MongoProfileStore

logger = logging.getLogger(__name__)


def configure_logging(settings: Optional[Settings] = None):
    """Configure root logging from the LOG_LEVEL setting"""
    settings = settings or default_settings
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s"
    )


def build_service(mongo: MongoService, settings: Optional[Settings] = None) -> EligibilityService:
    """Wire a Mongo-backed eligibility service without touching the network"""
    settings = settings or default_settings
    return EligibilityService(
        profile_store=MongoProfileStore(mongo),
        catalog=CatalogRegistry(strict=settings.strict_catalog_ingest),
        cache=EligibilityCache(ttl_seconds=settings.cache_ttl_seconds),
        catalog_source=MongoCatalogSource(mongo)
    )


async def create_eligibility_service(settings: Optional[Settings] = None) -> EligibilityService:
    """
    Connect to MongoDB, load the scheme catalog and return the service

    Args:
        settings: Settings to use (defaults to the global settings)

    Returns:
        EligibilityService with its first catalog snapshot published
    """
    settings = settings or default_settings
    configure_logging(settings)

    mongo = MongoService(settings)
    await mongo.connect()

    service = build_service(mongo, settings)
    snapshot = await service.reload_catalog()
    logger.info(f"{settings.app_name} ready with catalog version {snapshot.version}")
    return service


async def shutdown_eligibility_service(service: EligibilityService):
    """Close the MongoDB connection behind a service built here"""
    mongo = getattr(service.profile_store, "mongo", None)
    if mongo is not None:
        await mongo.close()

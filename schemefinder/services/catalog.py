"""
Scheme catalog: immutable versioned snapshots behind an atomically swapped pointer

Ingest validates every raw scheme once, so evaluation never sees an unknown
operator or an operand of the wrong type. Readers take the current snapshot
and keep using it even if a newer one is published mid-evaluation.
"""
import logging
import threading
from abc import ABC, abstractmethod
from datetime import datetime
from typing import Any, Callable, Dict, FrozenSet, Iterable, List, Optional, Tuple, Union

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from ..exceptions import CatalogUnavailable, MalformedCriterion, SchemeNotFound
from ..models.result import get_current_utc_time
from ..models.scheme import Scheme

logger = logging.getLogger(__name__)

RawScheme = Union[Scheme, Dict[str, Any]]
CatalogListener = Callable[[int], None]


class RejectedScheme(BaseModel):
    """A catalog entry that failed validation at ingest"""
    scheme_id: Optional[str] = Field(None, description="Identifier, if the entry carried one")
    name: Optional[str] = Field(None, description="Name, if the entry carried one")
    errors: List[str] = Field(default_factory=list, description="Validation error messages")

    model_config = ConfigDict(frozen=True)


class CatalogSnapshot(BaseModel):
    """Point-in-time view of every scheme and its criteria"""
    version: int = Field(..., ge=1)
    schemes: Tuple[Scheme, ...] = Field(default_factory=tuple)
    rejected: Tuple[RejectedScheme, ...] = Field(default_factory=tuple)
    loaded_at: datetime = Field(default_factory=get_current_utc_time)

    model_config = ConfigDict(frozen=True)

    def get(self, scheme_id: str) -> Scheme:
        for scheme in self.schemes:
            if scheme.scheme_id == scheme_id:
                return scheme
        raise SchemeNotFound(scheme_id)

    @property
    def referenced_fields(self) -> FrozenSet[str]:
        """Profile attributes read by any custom condition in this snapshot"""
        fields = set()
        for scheme in self.schemes:
            fields.update(scheme.criteria.referenced_fields)
        return frozenset(fields)


def _describe_errors(error: ValidationError) -> List[str]:
    return [
        f"{'.'.join(str(part) for part in detail['loc']) or '<root>'}: {detail['msg']}"
        for detail in error.errors()
    ]


def build_snapshot(raw_schemes: Iterable[RawScheme], version: int, strict: bool = False) -> CatalogSnapshot:
    """
    Validate raw scheme entries and freeze them into a snapshot

    Args:
        raw_schemes: Scheme models or raw mappings (snake_case or camelCase)
        version: Version number for the new snapshot
        strict: Raise on the first malformed entry instead of quarantining it

    Returns:
        CatalogSnapshot holding the valid schemes in input order
    """
    schemes: List[Scheme] = []
    rejected: List[RejectedScheme] = []
    seen_ids = set()

    for index, raw in enumerate(raw_schemes):
        if isinstance(raw, Scheme):
            scheme = raw
        else:
            try:
                scheme = Scheme.model_validate(raw)
            except ValidationError as e:
                raw_dict = raw if isinstance(raw, dict) else {}
                scheme_id = raw_dict.get("scheme_id") or raw_dict.get("schemeId")
                name = raw_dict.get("name") or raw_dict.get("scheme_name")
                label = scheme_id or name or f"#{index}"
                if strict:
                    raise MalformedCriterion(
                        f"invalid catalog entry: {'; '.join(_describe_errors(e))}",
                        scheme_id=label
                    ) from e
                logger.warning(f"Rejected scheme {label} at catalog ingest: {e.error_count()} validation errors")
                rejected.append(RejectedScheme(
                    scheme_id=scheme_id,
                    name=name,
                    errors=_describe_errors(e)
                ))
                continue

        if scheme.scheme_id in seen_ids:
            if strict:
                raise MalformedCriterion("duplicate scheme id", scheme_id=scheme.scheme_id)
            logger.warning(f"Rejected duplicate scheme id {scheme.scheme_id} at catalog ingest")
            rejected.append(RejectedScheme(
                scheme_id=scheme.scheme_id,
                name=scheme.name,
                errors=["duplicate scheme id"]
            ))
            continue

        seen_ids.add(scheme.scheme_id)
        schemes.append(scheme)

    return CatalogSnapshot(version=version, schemes=tuple(schemes), rejected=tuple(rejected))


class CatalogRegistry:
    """Owns the current catalog snapshot and notifies listeners on change"""

    def __init__(self, strict: bool = False):
        self.strict = strict
        self._lock = threading.Lock()
        self._snapshot: Optional[CatalogSnapshot] = None
        self._listeners: List[CatalogListener] = []

    @property
    def version(self) -> Optional[int]:
        snapshot = self._snapshot
        return snapshot.version if snapshot else None

    def snapshot(self) -> CatalogSnapshot:
        """
        Current snapshot

        Raises:
            CatalogUnavailable: if nothing has been published yet
        """
        snapshot = self._snapshot
        if snapshot is None:
            raise CatalogUnavailable()
        return snapshot

    def add_listener(self, listener: CatalogListener):
        with self._lock:
            self._listeners.append(listener)

    def publish(self, raw_schemes: Iterable[RawScheme]) -> CatalogSnapshot:
        """
        Build the next snapshot and swap it in

        Listeners run before this returns, so by the time the publisher
        is acknowledged every cache keyed on the old version is retired.
        """
        with self._lock:
            version = self._snapshot.version + 1 if self._snapshot else 1
            snapshot = build_snapshot(raw_schemes, version, strict=self.strict)
            self._snapshot = snapshot
            listeners = list(self._listeners)

        logger.info(
            f"Published catalog version {snapshot.version}: "
            f"{len(snapshot.schemes)} schemes, {len(snapshot.rejected)} rejected"
        )
        for listener in listeners:
            listener(snapshot.version)
        return snapshot


class CatalogSource(ABC):
    """Scheme Catalog Store the registry is loaded from"""

    @abstractmethod
    async def fetch_schemes(self) -> List[Dict[str, Any]]:
        """Return every active raw scheme entry"""


class InMemoryCatalogSource(CatalogSource):

    def __init__(self, schemes: Optional[Iterable[Dict[str, Any]]] = None):
        self._schemes = list(schemes or [])

    def replace(self, schemes: Iterable[Dict[str, Any]]):
        self._schemes = list(schemes)

    async def fetch_schemes(self) -> List[Dict[str, Any]]:
        return list(self._schemes)


class MongoCatalogSource(CatalogSource):
    """Reads scheme rules documents through the MongoDB service"""

    def __init__(self, mongo):
        self.mongo = mongo

    async def fetch_schemes(self) -> List[Dict[str, Any]]:
        return await self.mongo.get_all_scheme_rules()

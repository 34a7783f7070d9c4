"""
Tests for catalog ingest and the snapshot registry.
"""
import pytest

from schemefinder.exceptions import CatalogUnavailable, MalformedCriterion, SchemeNotFound
from schemefinder.models import Scheme
from schemefinder.services import CatalogRegistry, EligibilityEngine, build_snapshot

MALFORMED_SCHEME = {
    "name": "Broken Scheme",
    "customConditions": [{"field": "age", "operator": "regex", "value": "^4"}],
}


class TestBuildSnapshot:

    def test_valid_entries_kept_in_order(self, example_catalog):
        snapshot = build_snapshot(example_catalog, version=3)

        assert snapshot.version == 3
        assert [s.name for s in snapshot.schemes] == ["Farmer Scheme", "Women Scheme", "Senior Scheme"]
        assert snapshot.rejected == ()

    def test_malformed_entry_quarantined(self, example_catalog, caplog):
        snapshot = build_snapshot([MALFORMED_SCHEME] + example_catalog, version=1)

        assert len(snapshot.schemes) == 3
        assert len(snapshot.rejected) == 1
        assert snapshot.rejected[0].name == "Broken Scheme"
        assert snapshot.rejected[0].errors
        assert "Rejected scheme Broken Scheme" in caplog.text

    def test_malformed_entry_does_not_hide_other_schemes(self, example_catalog, farmer_profile):
        catalog = example_catalog + [MALFORMED_SCHEME, {"name": "Open Scheme"}]
        snapshot = build_snapshot(catalog, version=1)

        eligible = EligibilityEngine().get_eligible_schemes(farmer_profile, snapshot.schemes)

        assert [s.name for s in eligible] == ["Farmer Scheme", "Open Scheme"]

    def test_strict_ingest_raises(self, example_catalog):
        with pytest.raises(MalformedCriterion) as exc_info:
            build_snapshot(example_catalog + [MALFORMED_SCHEME], version=1, strict=True)

        assert exc_info.value.scheme_id == "Broken Scheme"

    def test_non_mapping_entry_rejected(self):
        snapshot = build_snapshot(["not a scheme", {"name": "Fine"}], version=1)

        assert [s.name for s in snapshot.schemes] == ["Fine"]
        assert snapshot.rejected[0].scheme_id is None

    def test_duplicate_ids_keep_first(self):
        snapshot = build_snapshot([
            {"scheme_id": "dup", "name": "First"},
            {"scheme_id": "dup", "name": "Second"},
        ], version=1)

        assert [s.name for s in snapshot.schemes] == ["First"]
        assert snapshot.rejected[0].errors == ["duplicate scheme id"]

    def test_accepts_scheme_models(self):
        scheme = Scheme(scheme_id="ready", name="Ready")

        snapshot = build_snapshot([scheme], version=1)

        assert snapshot.schemes == (scheme,)

    def test_get_and_referenced_fields(self):
        snapshot = build_snapshot([
            {"scheme_id": "a", "name": "A", "customConditions": [["occupation", "equals", "farmer"]]},
            {"scheme_id": "b", "name": "B", "customConditions": [["isFarmer", "equals", True]]},
        ], version=1)

        assert snapshot.get("b").name == "B"
        assert snapshot.referenced_fields == frozenset({"occupation", "isFarmer"})
        with pytest.raises(SchemeNotFound):
            snapshot.get("missing")


class TestCatalogRegistry:

    def test_unavailable_before_first_publish(self):
        registry = CatalogRegistry()

        assert registry.version is None
        with pytest.raises(CatalogUnavailable):
            registry.snapshot()

    def test_versions_increase(self, example_catalog):
        registry = CatalogRegistry()

        first = registry.publish(example_catalog)
        second = registry.publish(example_catalog[:1])

        assert (first.version, second.version) == (1, 2)
        assert registry.snapshot() is second
        assert registry.version == 2

    def test_in_flight_snapshot_is_unchanged(self, example_catalog):
        registry = CatalogRegistry()
        registry.publish(example_catalog)
        held = registry.snapshot()

        registry.publish([])

        assert len(held.schemes) == 3
        assert registry.snapshot().schemes == ()

    def test_listeners_receive_new_version(self, example_catalog):
        registry = CatalogRegistry()
        seen = []
        registry.add_listener(seen.append)

        registry.publish(example_catalog)
        registry.publish(example_catalog)

        assert seen == [1, 2]

    def test_strict_registry_keeps_previous_snapshot_on_failure(self, example_catalog):
        registry = CatalogRegistry(strict=True)
        registry.publish(example_catalog)

        with pytest.raises(MalformedCriterion):
            registry.publish([MALFORMED_SCHEME])

        assert registry.version == 1

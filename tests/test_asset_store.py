# ============================================================================
# ASSET STORE TESTS
# ============================================================================
# STATUS: Tests - In-memory asset collection
# PURPOSE: Verify upsert/remove/load semantics and change notifications
# CREATED: 19 OCT 2026
# ============================================================================
"""
AssetStore Tests

Run with:
    pytest tests/test_asset_store.py -v
"""

import pytest

from core.contracts import StoreChangeKind
from core.errors import ValidationError
from core.models.asset import Asset
from services.asset_store import AssetStore


# ============================================================================
# HELPERS
# ============================================================================

def _make_asset(asset_id="a1", latitude=28.69, longitude=77.29, **overrides):
    record = {
        "id": asset_id,
        "type": "Pump",
        "latitude": latitude,
        "longitude": longitude,
        "installationDate": "2023-04-12",
        "condition": "Good",
    }
    record.update(overrides)
    return Asset.from_record(record)


def _recording_store(*assets):
    store = AssetStore(assets)
    changes = []
    store.subscribe(changes.append)
    return store, changes


# ============================================================================
# UPSERT
# ============================================================================

class TestUpsert:

    def test_insert_new_id(self):
        store, changes = _recording_store()
        store.upsert(_make_asset("a1"))

        assert store.ids() == ["a1"]
        assert len(changes) == 1
        assert changes[0].kind is StoreChangeKind.UPSERTED
        assert changes[0].asset_ids == ("a1",)

    def test_replace_whole_record(self):
        store, changes = _recording_store(_make_asset("a1", manufacturer="Old"))
        store.upsert(_make_asset("a1", latitude=10.0))

        assert len(store) == 1
        assert store.get("a1").latitude == 10.0
        assert store.get("a1").manufacturer == ""
        assert len(changes) == 1

    def test_ids_stay_unique(self):
        store, _ = _recording_store()
        for _ in range(3):
            store.upsert(_make_asset("a1"))
        assert store.ids() == ["a1"]

    def test_insertion_order_kept_on_replace(self):
        store, _ = _recording_store(_make_asset("a1"), _make_asset("a2"))
        store.upsert(_make_asset("a1", latitude=1.0))
        assert store.ids() == ["a1", "a2"]

    def test_upsert_record_dict(self):
        store, _ = _recording_store()
        asset = store.upsert({
            "id": "v9",
            "type": "Valve",
            "latitude": "12.5",
            "longitude": "77.1",
            "installationDate": "2020-01-01",
            "condition": "Fair",
        })
        assert asset.latitude == 12.5
        assert "v9" in store

    def test_invalid_record_leaves_store_and_emits_nothing(self):
        store, changes = _recording_store(_make_asset("a1"))
        with pytest.raises(ValidationError):
            store.upsert({"id": "a2", "type": "Pump", "latitude": 200, "longitude": 0,
                          "installationDate": "2020-01-01", "condition": "Good"})
        assert store.ids() == ["a1"]
        assert changes == []

    def test_wrong_type_rejected(self):
        store, _ = _recording_store()
        with pytest.raises(ValidationError):
            store.upsert("a1")


# ============================================================================
# REMOVE / LOAD / CLEAR
# ============================================================================

class TestRemove:

    def test_remove_existing(self):
        store, changes = _recording_store(_make_asset("a1"), _make_asset("a2"))
        assert store.remove("a1") is True
        assert store.ids() == ["a2"]
        assert changes[0].kind is StoreChangeKind.REMOVED
        assert changes[0].asset_ids == ("a1",)

    def test_remove_unknown_is_not_an_error(self):
        store, changes = _recording_store(_make_asset("a1"))
        assert store.remove("zz") is False
        assert store.ids() == ["a1"]
        assert changes == []


class TestLoad:

    def test_load_replaces_collection(self):
        store, changes = _recording_store(_make_asset("old"))
        count = store.load([_make_asset("a1"), _make_asset("a2")])

        assert count == 2
        assert store.ids() == ["a1", "a2"]
        assert changes[-1].kind is StoreChangeKind.LOADED
        assert changes[-1].asset_ids == ("a1", "a2")

    def test_load_with_bad_record_keeps_previous(self):
        store, changes = _recording_store(_make_asset("old"))
        with pytest.raises(ValidationError):
            store.load([_make_asset("a1"), {"id": "bad"}])
        assert store.ids() == ["old"]
        assert changes == []


class TestClear:

    def test_clear(self):
        store, changes = _recording_store(_make_asset("a1"))
        store.clear()
        assert len(store) == 0
        assert changes[0].kind is StoreChangeKind.CLEARED

    def test_clear_empty_is_silent(self):
        store, changes = _recording_store()
        store.clear()
        assert changes == []


# ============================================================================
# SUBSCRIPTIONS
# ============================================================================

class TestSubscribe:

    def test_unsubscribe(self):
        store = AssetStore()
        changes = []
        unsubscribe = store.subscribe(changes.append)
        unsubscribe()
        unsubscribe()
        store.upsert(_make_asset("a1"))
        assert changes == []
        assert store.listener_count == 0

    def test_listener_sees_updated_collection(self):
        store = AssetStore()
        seen = []
        store.subscribe(lambda change: seen.append(store.ids()))
        store.upsert(_make_asset("a1"))
        assert seen == [["a1"]]

    def test_listener_may_unsubscribe_during_notify(self):
        store = AssetStore()
        calls = []

        def once(change):
            calls.append(change)
            unsubscribe()

        unsubscribe = store.subscribe(once)
        other = []
        store.subscribe(other.append)

        store.upsert(_make_asset("a1"))
        store.upsert(_make_asset("a2"))

        assert len(calls) == 1
        assert len(other) == 2

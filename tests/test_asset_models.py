# ============================================================================
# ASSET MODEL TESTS
# ============================================================================
# STATUS: Tests - Asset/Draft model validation and presentation
# PURPOSE: Verify wire parsing, bounds checks and popup labels
# CREATED: 19 OCT 2026
# ============================================================================
"""
Asset Model Tests

Pure model tests: no store, no map.

Run with:
    pytest tests/test_asset_models.py -v
"""

from datetime import date

import pytest

from core.contracts import AssetCondition, AssetType, SurfaceState
from core.errors import ValidationError
from core.models.asset import ASSET_FIELDS, Asset, Draft
from core.models.consumable import Consumable, Panchayat


# ============================================================================
# HELPERS
# ============================================================================

def _record(**overrides):
    """A valid REST asset record."""
    record = {
        "id": "a1",
        "type": "Pump",
        "latitude": 28.69,
        "longitude": 77.29,
        "installationDate": "2023-04-12",
        "manufacturer": "Kirloskar",
        "model": "KP-40",
        "capacity": "40 HP",
        "condition": "Good",
    }
    record.update(overrides)
    return record


# ============================================================================
# ENUM PARSING
# ============================================================================

class TestEnums:

    def test_asset_type_accepts_display_name(self):
        assert AssetType.parse("Treatment Plant") is AssetType.TREATMENT_PLANT
        assert AssetType.parse("treatment_plant") is AssetType.TREATMENT_PLANT

    def test_asset_type_case_insensitive(self):
        assert AssetType.parse("valve") is AssetType.VALVE

    def test_asset_type_unknown(self):
        assert AssetType.parse("Reservoir") is None

    def test_condition_parse(self):
        assert AssetCondition.parse("poor") is AssetCondition.POOR
        assert AssetCondition.parse("Broken") is None

    def test_surface_state_accepts_markers_only_when_ready(self):
        assert SurfaceState.READY.accepts_markers()
        for state in (SurfaceState.UNINITIALIZED, SurfaceState.DEFERRED,
                      SurfaceState.FAILED, SurfaceState.RELEASED):
            assert not state.accepts_markers()


# ============================================================================
# ASSET
# ============================================================================

class TestAsset:

    def test_from_record(self):
        asset = Asset.from_record(_record())
        assert asset.id == "a1"
        assert asset.type is AssetType.PUMP
        assert asset.installation_date == date(2023, 4, 12)
        assert asset.lng_lat == (77.29, 28.69)

    def test_to_record_uses_wire_names(self):
        record = Asset.from_record(_record(type="Treatment Plant")).to_record()
        assert record["installationDate"] == "2023-04-12"
        assert record["type"] == "TreatmentPlant"
        assert set(record) == set(ASSET_FIELDS)

    def test_latitude_out_of_range(self):
        with pytest.raises(ValidationError) as exc:
            Asset.from_record(_record(latitude=91))
        assert "latitude" in exc.value.field_errors

    def test_longitude_out_of_range(self):
        with pytest.raises(ValidationError) as exc:
            Asset.from_record(_record(longitude=-180.5))
        assert "longitude" in exc.value.field_errors

    def test_boundary_coordinates_accepted(self):
        asset = Asset.from_record(_record(latitude=-90, longitude=180))
        assert asset.latitude == -90.0
        assert asset.longitude == 180.0

    def test_nan_rejected(self):
        with pytest.raises(ValidationError):
            Asset.from_record(_record(latitude=float("nan")))

    def test_unknown_type_rejected(self):
        with pytest.raises(ValidationError) as exc:
            Asset.from_record(_record(type="Reservoir"))
        assert "type" in exc.value.field_errors

    def test_blank_id_rejected(self):
        with pytest.raises(ValidationError) as exc:
            Asset.from_record(_record(id="   "))
        assert "id" in exc.value.field_errors

    def test_optional_text_fields_default_blank(self):
        record = _record(manufacturer=None)
        del record["model"]
        asset = Asset.from_record(record)
        assert asset.manufacturer == ""
        assert asset.model == ""

    def test_frozen(self):
        asset = Asset.from_record(_record())
        with pytest.raises(Exception):
            asset.latitude = 0.0

    def test_display_label(self):
        asset = Asset.from_record(_record())
        assert asset.display_label() == "Pump a1: Kirloskar KP-40 (Good)"

    def test_display_label_without_make(self):
        asset = Asset.from_record(_record(type="TreatmentPlant", manufacturer="", model=""))
        assert asset.display_label() == "Treatment Plant a1 (Good)"


# ============================================================================
# DRAFT
# ============================================================================

class TestDraft:

    def test_blank_has_every_form_field(self):
        values = Draft.blank().form_values()
        assert list(values) == list(ASSET_FIELDS)
        assert all(v == "" for v in values.values())

    def test_from_asset_copies_fields(self):
        asset = Asset.from_record(_record())
        draft = Draft.from_asset(asset)
        assert draft.source_id == "a1"
        values = draft.form_values()
        assert values["installationDate"] == "2023-04-12"
        assert values["latitude"] == 28.69
        assert values["type"] == "Pump"

    def test_draft_keeps_raw_values(self):
        draft = Draft.blank()
        draft.latitude = "not-a-number"
        assert draft.form_values()["latitude"] == "not-a-number"

    def test_draft_is_a_copy(self):
        asset = Asset.from_record(_record())
        draft = Draft.from_asset(asset)
        draft.manufacturer = "Other"
        assert asset.manufacturer == "Kirloskar"


# ============================================================================
# BACKEND RECORDS
# ============================================================================

class TestConsumable:

    def test_underscore_id(self):
        item = Consumable.model_validate({
            "_id": "c1",
            "item_name": "Chlorine",
            "current_quantity": 2,
            "minimum_threshold": 5,
            "panchayat_id": "p1",
        })
        assert item.id == "c1"
        assert item.needs_replenishment

    def test_panchayat(self):
        p = Panchayat.model_validate({"_id": "p1", "name": "Rampur"})
        assert p.id == "p1"
        assert p.name == "Rampur"

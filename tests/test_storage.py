import json
import logging
from datetime import datetime

from doughcalc.dough_api import FormState, run_plan
from doughcalc.storage import (
    JsonFileStore,
    MemoryStore,
    PersistentField,
    load_form_state,
    save_form_state,
)


class BrokenStore:
    def get_item(self, key):
        raise OSError("storage unavailable")

    def set_item(self, key, value):
        raise OSError("storage unavailable")

    def remove_item(self, key):
        raise OSError("storage unavailable")


def test_missing_key_returns_default():
    field = PersistentField(MemoryStore(), "dough:hydration", 63)
    assert field.get() == 63


def test_set_then_get_round_trips_json_scalars():
    store = MemoryStore()
    field = PersistentField(store, "dough:use-autolyse", False)
    field.set(True)
    assert store.get_item("dough:use-autolyse") == "true"
    assert field.get() is True


def test_parse_error_falls_back_to_default():
    store = MemoryStore({"dough:pizza-count": "{not json"})
    assert PersistentField(store, "dough:pizza-count", 1).get() == 1


def test_broken_store_never_raises(caplog):
    field = PersistentField(BrokenStore(), "dough:mode", "weight", legacy_keys=("dough:old-mode",))
    assert field.get() == "weight"
    with caplog.at_level(logging.WARNING, logger="doughcalc.storage"):
        field.set("diameter")
    assert "Could not persist" in caplog.text


def test_legacy_key_is_migrated_once():
    store = MemoryStore({"dough:target-weight": "650"})
    field = PersistentField(store, "dough:target-weight:v2", 300, legacy_keys=("dough:target-weight",))
    assert field.get() == 650
    assert store.get_item("dough:target-weight") is None


def test_migration_keeps_existing_new_value():
    store = MemoryStore({"dough:target-weight": "650", "dough:target-weight:v2": "900"})
    field = PersistentField(store, "dough:target-weight:v2", 300, legacy_keys=("dough:target-weight",))
    assert field.get() == 900
    assert "dough:target-weight" not in store.keys()


def test_json_file_store_persists_across_instances(tmp_path):
    path = tmp_path / "state" / "dough.json"
    PersistentField(JsonFileStore(path), "dough:preset", "neapolitan").set("detroit")
    assert json.loads(path.read_text(encoding="utf-8")) == {"dough:preset": '"detroit"'}
    assert PersistentField(JsonFileStore(path), "dough:preset", "neapolitan").get() == "detroit"


def test_corrupt_state_file_falls_back(tmp_path):
    path = tmp_path / "dough.json"
    path.write_text("[1, 2", encoding="utf-8")
    assert PersistentField(JsonFileStore(path), "dough:preset", "neapolitan").get() == "neapolitan"


def test_form_state_round_trip_and_migration():
    store = MemoryStore({"dough:target-weight": "520"})
    state = load_form_state(store, FormState())
    assert state.target_weight == 520
    assert state.preset_id == "neapolitan"

    changed = FormState(preset_id="detroit", pizza_count=3, use_autolyse=True)
    save_form_state(store, changed)
    assert load_form_state(store, FormState()) == changed


def test_stored_null_falls_back_to_default():
    store = MemoryStore({"dough:hydration": "null"})
    assert PersistentField(store, "dough:hydration", 63).get() == 63


def test_wrong_typed_value_falls_back_to_default():
    store = MemoryStore({"dough:pizza-count": '"abc"', "dough:use-autolyse": "1", "dough:mode": "5"})
    assert PersistentField(store, "dough:pizza-count", 1).get() == 1
    assert PersistentField(store, "dough:use-autolyse", False).get() is False
    assert PersistentField(store, "dough:mode", "weight").get() == "weight"


def test_ints_and_floats_are_interchangeable_but_bools_are_not_numbers():
    store = MemoryStore({"dough:hydration": "65", "dough:target-weight": "true"})
    assert PersistentField(store, "dough:hydration", 63.0).get() == 65
    assert PersistentField(store, "dough:target-weight", 300.0).get() == 300.0


def test_null_form_field_still_plans(presets, catalog):
    store = MemoryStore({"dough:target-weight:v2": "null", "dough:pizza-count": '"two"'})
    state = load_form_state(store, FormState())
    assert state.target_weight == 300.0
    assert state.pizza_count == 1

    out = run_plan(state, presets, datetime(2024, 1, 1, 10, 0), catalog.resolver("en"))
    assert out.grams["total_dough"] == 300

"""
Persistence of the last-used form values.

Values are stored as JSON strings in a key-value store, one key per form
field. Reads never fail: missing keys, unreadable stores and bad JSON all
fall back to the caller's default. Writes are best-effort.
"""
from __future__ import annotations

import json
import logging
from dataclasses import fields, replace
from pathlib import Path
from typing import Any, Dict, Generic, Iterable, Optional, Protocol, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


class KeyValueStore(Protocol):
    def get_item(self, key: str) -> Optional[str]:
        ...

    def set_item(self, key: str, value: str) -> None:
        ...

    def remove_item(self, key: str) -> None:
        ...


class MemoryStore:
    """In-process store (tests, one-shot CLI runs)."""

    def __init__(self, initial: Optional[Dict[str, str]] = None):
        self._items: Dict[str, str] = dict(initial or {})

    def get_item(self, key: str) -> Optional[str]:
        return self._items.get(key)

    def set_item(self, key: str, value: str) -> None:
        self._items[key] = value

    def remove_item(self, key: str) -> None:
        self._items.pop(key, None)

    def keys(self):
        return list(self._items)


class JsonFileStore:
    """Store backed by a single JSON object on disk, rewritten on every change."""

    def __init__(self, path: str | Path):
        self.path = Path(path)

    def _read(self) -> Dict[str, str]:
        try:
            with self.path.open("r", encoding="utf-8") as f:
                data = json.load(f)
        except FileNotFoundError:
            return {}
        if not isinstance(data, dict):
            raise ValueError(f"State file {self.path} does not hold a JSON object")
        return data

    def _write(self, data: Dict[str, str]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        with self.path.open("w", encoding="utf-8") as f:
            json.dump(data, f, indent=2, ensure_ascii=False)

    def get_item(self, key: str) -> Optional[str]:
        value = self._read().get(key)
        return None if value is None else str(value)

    def set_item(self, key: str, value: str) -> None:
        data = self._read()
        data[key] = value
        self._write(data)

    def remove_item(self, key: str) -> None:
        data = self._read()
        if key in data:
            del data[key]
            self._write(data)


def _matches_default(value: Any, default: Any) -> bool:
    """Stored value has the default's type; ints and floats stand in for each other, bools do not."""
    if default is None:
        return True
    if value is None:
        return False
    if isinstance(default, bool) or isinstance(value, bool):
        return isinstance(value, bool) and isinstance(default, bool)
    if isinstance(default, (int, float)):
        return isinstance(value, (int, float))
    return isinstance(value, type(default))


class PersistentField(Generic[T]):
    """
    Typed accessor for one stored value.

    Args:
        store: backing key-value store
        key: current storage key
        default: returned when nothing usable is stored
        legacy_keys: earlier names of this key; migrated once on construction
    """

    def __init__(self, store: KeyValueStore, key: str, default: T, legacy_keys: Iterable[str] = ()):
        self.store = store
        self.key = key
        self.default = default
        self.legacy_keys = tuple(legacy_keys)
        self._migrate()

    def _migrate(self) -> None:
        for old_key in self.legacy_keys:
            try:
                old_value = self.store.get_item(old_key)
                if old_value is None:
                    continue
                if self.store.get_item(self.key) is None:
                    self.store.set_item(self.key, old_value)
                self.store.remove_item(old_key)
                logger.debug("Migrated stored value %s -> %s", old_key, self.key)
            except Exception as e:
                logger.warning("Could not migrate %s -> %s: %s", old_key, self.key, e)

    def get(self) -> T:
        try:
            raw = self.store.get_item(self.key)
            if not raw:
                return self.default
            value = json.loads(raw)
            if not _matches_default(value, self.default):
                logger.debug("Ignoring stored %s for %s; expected %s", type(value).__name__, self.key, type(self.default).__name__)
                return self.default
            return value
        except Exception as e:
            logger.debug("Falling back to default for %s: %s", self.key, e)
            return self.default

    def set(self, value: T) -> None:
        try:
            self.store.set_item(self.key, json.dumps(value))
        except Exception as e:
            logger.warning("Could not persist %s: %s", self.key, e)


# FormState attribute -> (storage key, legacy keys)
FORM_FIELDS: Dict[str, tuple] = {
    "preset_id": ("dough:preset", ()),
    "mode": ("dough:mode", ()),
    "pizza_count": ("dough:pizza-count", ()),
    "target_weight": ("dough:target-weight:v2", ("dough:target-weight",)),
    "diameter_cm": ("dough:diameter", ()),
    "hydration": ("dough:hydration", ()),
    "yeast_type": ("dough:yeast", ()),
    "max_oven_temp_c": ("dough:max-oven-temp", ()),
    "include_sugar": ("dough:include-sugar", ()),
    "timeline_mode": ("dough:timeline-mode", ()),
    "timeline_start_hours": ("dough:timeline-start-hours", ()),
    "ferment_temp_c": ("dough:ferment-temp", ()),
    "use_autolyse": ("dough:use-autolyse", ()),
    "autolyse_minutes": ("dough:autolyse-minutes", ()),
    "bulk_ferment_hours": ("dough:bulk-ferment-hours", ()),
    "final_proof_hours": ("dough:final-proof-hours", ()),
    "language": ("dough:language", ()),
}


def form_fields(store: KeyValueStore, defaults: Any) -> Dict[str, PersistentField]:
    """One PersistentField per FORM_FIELDS entry, defaulting to ``defaults``."""
    out: Dict[str, PersistentField] = {}
    for name, (key, legacy) in FORM_FIELDS.items():
        out[name] = PersistentField(store, key, getattr(defaults, name), legacy_keys=legacy)
    return out


def load_form_state(store: KeyValueStore, defaults: Any):
    """Return ``defaults`` (a FormState) with every stored field applied."""
    known = {f.name for f in fields(defaults)}
    values = {name: fld.get() for name, fld in form_fields(store, defaults).items() if name in known}
    return replace(defaults, **values)


def save_form_state(store: KeyValueStore, state: Any) -> None:
    for name, fld in form_fields(store, state).items():
        fld.set(getattr(state, name))


__all__ = [
    "KeyValueStore",
    "MemoryStore",
    "JsonFileStore",
    "PersistentField",
    "FORM_FIELDS",
    "form_fields",
    "load_form_state",
    "save_form_state",
]

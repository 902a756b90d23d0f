"""I/O utilities: YAML loaders for the preset catalog and message catalog.

Data files ship inside the package (``doughcalc/data``); set
``DOUGHCALC_DATA_DIR`` to point the loaders at another directory.
"""
from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

import yaml

from .models import DoughPreset, YEAST_INSTANT, YEAST_TYPES

logger = logging.getLogger(__name__)

PACKAGE_DATA_DIR = Path(__file__).resolve().parents[1] / "data"
PRESETS_FILE = "presets.yml"
MESSAGES_FILE = "messages.yml"


def _env_flag_truthy(var_name: str) -> bool:
    """
    Return True when the environment variable is set to a truthy value.
    Accepted truthy values: '1', 'true', 'yes', 'on' (case insensitive).
    """
    raw = os.environ.get(var_name, "")
    return raw.strip().lower() in {"1", "true", "yes", "on"}


def _debug_print(*args, **kwargs) -> None:
    if _env_flag_truthy("DOUGHCALC_DEBUG_IO"):
        print(*args, **kwargs)


def default_data_dir() -> Path:
    override = os.environ.get("DOUGHCALC_DATA_DIR", "").strip()
    if override:
        return Path(override)
    return PACKAGE_DATA_DIR


def safe_yaml_load(filepath: str | Path, default=None):
    """Safe YAML loader: returns default when file missing or invalid."""
    try:
        p = Path(filepath)
        with p.open("r", encoding="utf-8") as f:
            return yaml.safe_load(f) or default
    except FileNotFoundError:
        logger.warning("YAML file not found: %s; returning default", filepath)
        return default
    except Exception as e:
        logger.error("Error reading YAML %s: %s", filepath, e)
        return default


def _float_field(entry: Dict[str, Any], key: str, default: float = 0.0) -> float:
    value = entry.get(key)
    if value is None:
        return default
    try:
        return float(value)
    except (TypeError, ValueError):
        logger.warning("Preset field %s=%r is not numeric; using %s", key, value, default)
        return default


def _parse_preset(entry: Dict[str, Any]) -> DoughPreset:
    preset_id = str(entry.get("id") or "").strip()
    if not preset_id:
        raise ValueError("Dough preset missing 'id'.")
    yeast_type = str(entry.get("default_yeast_type") or YEAST_INSTANT).strip()
    if yeast_type not in YEAST_TYPES:
        logger.warning("Preset %s has unknown yeast type %r; using %s", preset_id, yeast_type, YEAST_INSTANT)
        yeast_type = YEAST_INSTANT
    return DoughPreset(
        id=preset_id,
        name=str(entry.get("name") or preset_id),
        description=str(entry.get("description") or ""),
        default_hydration=_float_field(entry, "default_hydration"),
        salt_percent=_float_field(entry, "salt_percent"),
        oil_percent=_float_field(entry, "oil_percent"),
        sugar_percent=_float_field(entry, "sugar_percent"),
        yeast_percent=_float_field(entry, "yeast_percent"),
        default_yeast_type=yeast_type,
        oven_temp_c=_float_field(entry, "oven_temp_c"),
        default_diameter_cm=_float_field(entry, "default_diameter_cm"),
        thickness_factor=_float_field(entry, "thickness_factor"),
    )


def load_presets(filepath: Optional[str | Path] = None) -> List[DoughPreset]:
    """Load the ordered preset catalog (``presets:`` list in presets.yml)."""
    path = Path(filepath) if filepath else default_data_dir() / PRESETS_FILE
    raw = safe_yaml_load(path, default={}) or {}
    entries = raw.get("presets", []) if isinstance(raw, dict) else raw
    presets = [_parse_preset(entry or {}) for entry in (entries or [])]
    if not presets:
        logger.warning("No dough presets loaded from %s", path)
    logger.debug("Loaded %d presets from %s", len(presets), path)
    _debug_print(f"[io] presets: {[p.id for p in presets]}")
    return presets


def load_yeast_options(filepath: Optional[str | Path] = None) -> List[Tuple[str, str]]:
    """Return [(yeast_type, label), ...] from the ``yeast_options`` table."""
    path = Path(filepath) if filepath else default_data_dir() / PRESETS_FILE
    raw = safe_yaml_load(path, default={}) or {}
    out: List[Tuple[str, str]] = []
    for item in raw.get("yeast_options", []) if isinstance(raw, dict) else []:
        value = str(item.get("value") or "").strip()
        if value in YEAST_TYPES:
            out.append((value, str(item.get("label") or value)))
    if not out:
        out = [(y, y) for y in YEAST_TYPES]
    return out


def load_messages(filepath: Optional[str | Path] = None) -> Dict[str, Any]:
    """Raw message catalog mapping: {language: {section: {...}}}."""
    path = Path(filepath) if filepath else default_data_dir() / MESSAGES_FILE
    raw = safe_yaml_load(path, default={}) or {}
    if not isinstance(raw, dict):
        logger.error("Invalid message catalog at %s", path)
        return {}
    logger.debug("Loaded message catalog from %s (languages: %s)", path, sorted(raw))
    return raw


__all__ = [
    "PACKAGE_DATA_DIR",
    "default_data_dir",
    "safe_yaml_load",
    "load_presets",
    "load_yeast_options",
    "load_messages",
]

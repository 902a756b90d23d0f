"""Models and core data structures.

Value objects shared by the formula engine, the timeline builder and the
surfaces (CLI, Streamlit). All of them are frozen dataclasses; a new
computation always builds new objects.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, Optional

# Sizing modes
MODE_WEIGHT = "weight"
MODE_DIAMETER = "diameter"
DOUGH_MODES = (MODE_WEIGHT, MODE_DIAMETER)

# Yeast types
YEAST_INSTANT = "instant"
YEAST_ACTIVE_DRY = "active-dry"
YEAST_FRESH = "fresh"
YEAST_SOURDOUGH = "sourdough-starter"
YEAST_TYPES = (YEAST_INSTANT, YEAST_ACTIVE_DRY, YEAST_FRESH, YEAST_SOURDOUGH)

# Timeline shapes
SHAPE_COMPACT = "compact"
SHAPE_DETAILED = "detailed"
TIMELINE_SHAPES = (SHAPE_COMPACT, SHAPE_DETAILED)

# Step template ids
STEP_MIX = "mix"
STEP_AUTOLYSE_START = "autolyse-start"
STEP_AUTOLYSE_END = "autolyse-end"
STEP_BULK_END = "bulk-ferment-end"
STEP_DIVIDE = "divide"
STEP_PROOF_END = "final-proof-end"
STEP_BAKE = "bake"
STEP_TEMPLATES = (
    STEP_MIX,
    STEP_AUTOLYSE_START,
    STEP_AUTOLYSE_END,
    STEP_BULK_END,
    STEP_DIVIDE,
    STEP_PROOF_END,
    STEP_BAKE,
)


@dataclass(frozen=True)
class DoughInputs:
    """Everything the formula engine needs for one computation.

    Args:
        mode: 'weight' | 'diameter'; selects how total dough mass is derived
        pizza_count: number of dough balls
        target_weight: total dough (g), used in weight mode
        diameter_cm: per-pizza diameter, used in diameter mode
        hydration_percent .. yeast_percent: baker's percentages (parts per 100 of flour);
            yeast_percent is the instant-yeast baseline
        yeast_type: scales the baseline yeast percent by leavening strength
        thickness_factor: grams of dough per cm² of pizza surface
    """
    mode: str
    pizza_count: int
    target_weight: float
    diameter_cm: float
    hydration_percent: float
    salt_percent: float
    oil_percent: float
    sugar_percent: float
    yeast_percent: float
    yeast_type: str
    thickness_factor: float


@dataclass(frozen=True)
class DoughBreakdown:
    flour: float
    water: float
    salt: float
    oil: float
    sugar: float
    yeast: float
    total_dough: float
    per_ball: float

    def ingredient_sum(self) -> float:
        return self.flour + self.water + self.salt + self.oil + self.sugar + self.yeast

    def as_dict(self) -> Dict[str, float]:
        return {
            "flour": self.flour,
            "water": self.water,
            "salt": self.salt,
            "oil": self.oil,
            "sugar": self.sugar,
            "yeast": self.yeast,
            "total_dough": self.total_dough,
            "per_ball": self.per_ball,
        }


@dataclass(frozen=True)
class DoughPreset:
    """Named dough style with its default ratios (read-only catalog entry)."""

    id: str
    name: str
    description: str
    default_hydration: float
    salt_percent: float
    oil_percent: float
    sugar_percent: float
    yeast_percent: float
    default_yeast_type: str
    oven_temp_c: float
    default_diameter_cm: float
    thickness_factor: float


@dataclass(frozen=True)
class TimelineInputs:
    use_autolyse: bool
    autolyse_minutes: float
    bulk_ferment_hours: float
    final_proof_hours: float
    ferment_temp_c: float
    flour_grams: int
    water_grams: int
    salt_grams: int
    yeast_grams: int
    include_sugar: bool
    pizza_count: int
    effective_oven_temp: float
    bake_minutes: float
    oil_grams: int = 0
    sugar_grams: int = 0


@dataclass(frozen=True)
class PlannedStep:
    """Language-neutral step: when it happens, which template, which values."""

    time: datetime
    template_id: str
    params: Dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class StepText:
    label: str
    description: str


@dataclass(frozen=True)
class TimelineStep:
    time: datetime
    label: str
    description: str
    template_id: Optional[str] = None


__all__ = [
    "MODE_WEIGHT",
    "MODE_DIAMETER",
    "DOUGH_MODES",
    "YEAST_INSTANT",
    "YEAST_ACTIVE_DRY",
    "YEAST_FRESH",
    "YEAST_SOURDOUGH",
    "YEAST_TYPES",
    "SHAPE_COMPACT",
    "SHAPE_DETAILED",
    "TIMELINE_SHAPES",
    "STEP_MIX",
    "STEP_AUTOLYSE_START",
    "STEP_AUTOLYSE_END",
    "STEP_BULK_END",
    "STEP_DIVIDE",
    "STEP_PROOF_END",
    "STEP_BAKE",
    "STEP_TEMPLATES",
    "DoughInputs",
    "DoughBreakdown",
    "DoughPreset",
    "TimelineInputs",
    "PlannedStep",
    "StepText",
    "TimelineStep",
]

"""Dough formula engine.

Baker's-percentage solver plus the standalone estimators used by the engine
and by the reference tables:

- estimate_weight_from_diameter / estimate_weight_from_square: surface area
  times a style thickness factor (g/cm²)
- derive_total_weight / compute_dough: total dough mass and its split into
  ingredients, solving for flour from a target total
- suggest_yeast_percent: time/temperature heuristic anchored at 7 h and 21 °C
- estimate_bake_minutes: anchored at 12 min, 250 °C, thickness 0.36

Inputs come straight from interactive forms, so nothing here raises on odd
numbers: negatives and blanks are clamped instead.
"""
from __future__ import annotations

import math
from typing import Dict, Optional

from .models import DoughBreakdown, DoughInputs, MODE_DIAMETER

YEAST_MULTIPLIERS: Dict[str, float] = {
    "instant": 1.0,
    "active-dry": 1.25,
    "fresh": 2.5,
    "sourdough-starter": 20.0,  # starter is a preferment % of flour
}

# suggest_yeast_percent calibration
BASELINE_HOURS = 7.0
BASELINE_TEMP_C = 21.0
MIN_TARGET_HOURS = 0.5
HOURS_EXPONENT = 1.05
HOURS_FACTOR_RANGE = (0.3, 8.0)
TEMP_FACTOR_PER_10C = 0.65
YEAST_PERCENT_RANGE = (0.01, 5.0)

# estimate_bake_minutes calibration
BASELINE_BAKE_TEMP_C = 250.0
BASELINE_BAKE_MINUTES = 12.0
BASELINE_THICKNESS = 0.36
MIN_OVEN_TEMP_C = 180.0
TEMP_EXPONENT = 0.7
BAKE_MINUTES_RANGE = (1.5, 15.0)


def _coerce_float(value, default: float = 0.0) -> float:
    try:
        if value is None:
            return default
        number = float(value)
    except (TypeError, ValueError):
        return default
    return number if math.isfinite(number) else default


def _clamp(value: float, low: float, high: float) -> float:
    return max(low, min(high, value))


def _round_half_up(value: float, digits: int = 1) -> float:
    scale = 10 ** digits
    return math.floor(value * scale + 0.5) / scale


def estimate_weight_from_diameter(diameter_cm, thickness_factor) -> float:
    """Dough weight (g) for one round pizza of the given diameter."""
    radius = max(_coerce_float(diameter_cm), 0.0) / 2
    area = math.pi * radius * radius
    return area * _coerce_float(thickness_factor)


def estimate_weight_from_square(width_cm, height_cm, thickness_factor) -> float:
    """Dough weight (g) for one rectangular (tray) pizza."""
    area = max(_coerce_float(width_cm), 0.0) * max(_coerce_float(height_cm), 0.0)
    return area * _coerce_float(thickness_factor)


def derive_total_weight(inputs: DoughInputs) -> float:
    if inputs.mode == MODE_DIAMETER:
        per_pizza = estimate_weight_from_diameter(inputs.diameter_cm, inputs.thickness_factor)
        return per_pizza * _coerce_float(inputs.pizza_count)
    return max(_coerce_float(inputs.target_weight), 0.0)


def yeast_multiplier(yeast_type: Optional[str]) -> float:
    return YEAST_MULTIPLIERS.get(yeast_type or "", 1.0)


def compute_dough(inputs: DoughInputs) -> DoughBreakdown:
    """Split the total dough into ingredient grams.

    Every ingredient is a fraction of flour, so flour is solved from the total:
    ``flour = total / (1 + hydration + salt + oil + sugar + effective_yeast)``.
    The total itself always comes from ``derive_total_weight``.
    """
    total_dough = derive_total_weight(inputs)
    hydration = _coerce_float(inputs.hydration_percent) / 100
    salt = _coerce_float(inputs.salt_percent) / 100
    oil = _coerce_float(inputs.oil_percent) / 100
    sugar = _coerce_float(inputs.sugar_percent) / 100
    yeast = _coerce_float(inputs.yeast_percent) / 100 * yeast_multiplier(inputs.yeast_type)

    divisor = 1 + hydration + salt + oil + sugar + yeast
    flour = total_dough / divisor if divisor > 0 else 0.0

    pizza_count = _coerce_float(inputs.pizza_count, default=1.0)
    return DoughBreakdown(
        flour=flour,
        water=flour * hydration,
        salt=flour * salt,
        oil=flour * oil,
        sugar=flour * sugar,
        yeast=flour * yeast,
        total_dough=total_dough,
        per_ball=total_dough / max(pizza_count, 1.0),
    )


def format_grams(value) -> int:
    """Round a gram amount up to the next whole gram; NaN and infinities give 0."""
    return int(math.ceil(_coerce_float(value)))


def suggest_yeast_percent(base_percent, target_hours, temp_c) -> float:
    """
    Suggest a yeast percentage for a target fermentation time and dough temperature.

    ``base_percent`` is assumed to ferment in ~7 h at 21 °C. Shorter targets
    scale yeast up almost linearly (clamped to 0.3x..8x); every 10 °C colder
    multiplies by 1/0.65, every 10 °C warmer by 0.65. The result stays within
    0.01..5 %.
    """
    hours_ratio = BASELINE_HOURS / max(_coerce_float(target_hours), MIN_TARGET_HOURS)
    hours_factor = _clamp(hours_ratio ** HOURS_EXPONENT, *HOURS_FACTOR_RANGE)
    temp_delta = _coerce_float(temp_c, default=BASELINE_TEMP_C) - BASELINE_TEMP_C
    temp_factor = TEMP_FACTOR_PER_10C ** (temp_delta / 10)
    suggested = _coerce_float(base_percent) * hours_factor * temp_factor
    return _clamp(suggested, *YEAST_PERCENT_RANGE)


def estimate_bake_minutes(temp_c, thickness_factor) -> float:
    """
    Rough bake time (minutes, one decimal) from oven temperature and thickness.
    Oven temperatures below 180 °C count as 180 °C; result within 1.5..15.
    """
    temp_ratio = BASELINE_BAKE_TEMP_C / max(_coerce_float(temp_c), MIN_OVEN_TEMP_C)
    temp_effect = temp_ratio ** TEMP_EXPONENT
    thickness_effect = _coerce_float(thickness_factor) / BASELINE_THICKNESS
    minutes = BASELINE_BAKE_MINUTES * temp_effect * thickness_effect
    return _clamp(_round_half_up(minutes, 1), *BAKE_MINUTES_RANGE)


__all__ = [
    "YEAST_MULTIPLIERS",
    "estimate_weight_from_diameter",
    "estimate_weight_from_square",
    "derive_total_weight",
    "yeast_multiplier",
    "compute_dough",
    "format_grams",
    "suggest_yeast_percent",
    "estimate_bake_minutes",
]

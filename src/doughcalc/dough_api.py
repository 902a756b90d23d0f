# -*- coding: utf-8 -*-
"""
dough_api.py
Central API between the surfaces (Streamlit app, CLI) and the core engine.

- FormState / PlanOutputs dataclasses
- apply_preset_defaults(...) re-seeds hydration/diameter/yeast type when the
  preset changes (and only then)
- build_dough_inputs(...) combines preset ratios, user overrides and the
  time/temperature yeast suggestion
- run_plan(...) runs formula engine + timeline builder for one form state
- ball_weight_guide(...) reference table of dough ball weights per style
- write_run_log(...) helper for simple JSON logs
"""

from __future__ import annotations

import json
import logging
import os
from dataclasses import asdict, dataclass, field, replace
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, List, Optional, Sequence, Tuple

import pandas as pd

from doughcalc.core.formula import (
    compute_dough,
    estimate_bake_minutes,
    estimate_weight_from_diameter,
    estimate_weight_from_square,
    format_grams,
    suggest_yeast_percent,
)
from doughcalc.core.models import (
    DoughBreakdown,
    DoughInputs,
    DoughPreset,
    MODE_WEIGHT,
    SHAPE_COMPACT,
    TimelineInputs,
    TimelineStep,
)
from doughcalc.core.timeline import (
    TemplateResolver,
    calculate_timeline,
    format_duration,
    get_total_duration,
)

logger = logging.getLogger(__name__)

TIMELINE_MODE_TIME = "time"
TIMELINE_MODE_DURATION = "duration"

# (label, diameter_cm) rounds and (label, width_cm, height_cm) trays
GUIDE_ROUNDS: Tuple[Tuple[str, float], ...] = (
    ("26 cm", 26),
    ("28 cm", 28),
    ("30 cm", 30),
    ("32 cm", 32),
    ("35 cm", 35),
    ("40 cm", 40),
)
GUIDE_TRAYS: Tuple[Tuple[str, float, float], ...] = (("30×40 cm", 30, 40),)
GUIDE_STYLE_COUNT = 6


@dataclass(frozen=True)
class FormState:
    """Every user-editable field of the calculator, with first-run defaults."""

    preset_id: str = "neapolitan"
    mode: str = MODE_WEIGHT
    pizza_count: int = 1
    target_weight: float = 300.0
    diameter_cm: float = 30.0
    hydration: float = 63.0
    yeast_type: str = "active-dry"
    max_oven_temp_c: float = 300.0
    include_sugar: bool = True
    timeline_mode: str = TIMELINE_MODE_TIME
    timeline_start_hours: float = 0.0
    ferment_temp_c: float = 20.0
    use_autolyse: bool = False
    autolyse_minutes: float = 30.0
    bulk_ferment_hours: float = 2.0
    final_proof_hours: float = 1.0
    language: str = "en"


@dataclass
class PlanOutputs:

    """Complete results for one form state.

    Attributes:
        preset: preset the ratios came from
        inputs: DoughInputs handed to the formula engine
        breakdown: raw (fractional) ingredient grams
        grams: ceiling-rounded grams shown to the user
        suggested_yeast_percent: time/temperature adjusted instant-yeast baseline
        effective_oven_temp: min(preset oven temperature, user oven cap)
        bake_minutes: estimated bake time (one decimal)
        timeline: rendered steps
        total_minutes: first to last step
        step_times: per-step clock time ('7:30 PM') or elapsed ('+2h') label
    """
    preset: DoughPreset
    inputs: DoughInputs
    breakdown: DoughBreakdown
    grams: Dict[str, int]
    suggested_yeast_percent: float
    effective_oven_temp: float
    bake_minutes: float
    timeline: List[TimelineStep]
    total_minutes: int
    step_times: List[str] = field(default_factory=list)


def find_preset(presets: Sequence[DoughPreset], preset_id: Optional[str]) -> DoughPreset:
    """Preset with ``preset_id``; the first preset when the id is unknown."""
    if not presets:
        raise ValueError("Preset catalog is empty.")
    for preset in presets:
        if preset.id == preset_id:
            return preset
    logger.warning("Unknown preset %r; using %s", preset_id, presets[0].id)
    return presets[0]


def apply_preset_defaults(state: FormState, preset: DoughPreset) -> FormState:
    """Re-seed the preset-driven fields; weight, count and schedule stay as set."""
    return replace(
        state,
        preset_id=preset.id,
        hydration=preset.default_hydration,
        diameter_cm=preset.default_diameter_cm,
        yeast_type=preset.default_yeast_type,
    )


def select_preset(state: FormState, presets: Sequence[DoughPreset], preset_id: str) -> FormState:
    """Switch preset; a no-op when ``preset_id`` is already selected."""
    if preset_id == state.preset_id:
        return state
    return apply_preset_defaults(state, find_preset(presets, preset_id))


def effective_oven_temp(preset: DoughPreset, max_oven_temp_c: float) -> float:
    return min(preset.oven_temp_c, max_oven_temp_c)


def build_dough_inputs(state: FormState, preset: DoughPreset) -> DoughInputs:
    suggested = suggest_yeast_percent(
        base_percent=preset.yeast_percent,
        target_hours=state.bulk_ferment_hours + state.final_proof_hours,
        temp_c=state.ferment_temp_c,
    )
    return DoughInputs(
        mode=state.mode,
        pizza_count=state.pizza_count,
        target_weight=max(state.target_weight, 0),
        diameter_cm=max(state.diameter_cm, 0),
        hydration_percent=state.hydration,
        salt_percent=preset.salt_percent,
        oil_percent=preset.oil_percent,
        sugar_percent=preset.sugar_percent if state.include_sugar else 0.0,
        yeast_percent=suggested,
        yeast_type=state.yeast_type,
        thickness_factor=preset.thickness_factor,
    )


def resolve_start_time(now: datetime, timeline_mode: str, start_in_hours: float) -> datetime:
    if timeline_mode == TIMELINE_MODE_TIME and start_in_hours > 0:
        return now + timedelta(hours=start_in_hours)
    return now


def format_clock(moment: datetime) -> str:
    """'7:05 PM' style clock time."""
    hour = moment.hour % 12 or 12
    suffix = "AM" if moment.hour < 12 else "PM"
    return f"{hour}:{moment.minute:02d} {suffix}"


def run_plan(
    state: FormState,
    presets: Sequence[DoughPreset],
    now: datetime,
    resolver: TemplateResolver,
    shape: str = SHAPE_COMPACT,
) -> PlanOutputs:
    """
    Execute the calculator for one form state.
    Steps:
      1) pick the preset and build DoughInputs (suggested yeast, sugar toggle)
      2) compute the ingredient breakdown and bake estimate
      3) build the timeline from ceiling-rounded grams
    """
    preset = find_preset(presets, state.preset_id)
    inputs = build_dough_inputs(state, preset)
    breakdown = compute_dough(inputs)
    grams = {name: format_grams(value) for name, value in breakdown.as_dict().items()}

    oven_temp = effective_oven_temp(preset, state.max_oven_temp_c)
    bake_minutes = estimate_bake_minutes(oven_temp, preset.thickness_factor)

    timeline_inputs = TimelineInputs(
        use_autolyse=state.use_autolyse,
        autolyse_minutes=state.autolyse_minutes,
        bulk_ferment_hours=state.bulk_ferment_hours,
        final_proof_hours=state.final_proof_hours,
        ferment_temp_c=state.ferment_temp_c,
        flour_grams=grams["flour"],
        water_grams=grams["water"],
        salt_grams=grams["salt"],
        yeast_grams=grams["yeast"],
        include_sugar=state.include_sugar,
        pizza_count=state.pizza_count,
        effective_oven_temp=oven_temp,
        bake_minutes=bake_minutes,
        oil_grams=grams["oil"],
        sugar_grams=grams["sugar"],
    )
    start = resolve_start_time(now, state.timeline_mode, state.timeline_start_hours)
    timeline = calculate_timeline(timeline_inputs, start, resolver, shape=shape)

    if state.timeline_mode == TIMELINE_MODE_DURATION:
        step_times = [format_duration(timeline[0].time, step.time) for step in timeline]
    else:
        step_times = [format_clock(step.time) for step in timeline]

    logger.debug(
        "Plan %s: total=%.1f g flour=%.1f g bake=%.1f min steps=%d",
        preset.id, breakdown.total_dough, breakdown.flour, bake_minutes, len(timeline),
    )
    return PlanOutputs(
        preset=preset,
        inputs=inputs,
        breakdown=breakdown,
        grams=grams,
        suggested_yeast_percent=inputs.yeast_percent,
        effective_oven_temp=oven_temp,
        bake_minutes=bake_minutes,
        timeline=timeline,
        total_minutes=get_total_duration(timeline),
        step_times=step_times,
    )


def ball_weight_guide(
    presets: Sequence[DoughPreset],
    rounds: Sequence[Tuple[str, float]] = GUIDE_ROUNDS,
    trays: Sequence[Tuple[str, float, float]] = GUIDE_TRAYS,
    style_count: int = GUIDE_STYLE_COUNT,
) -> pd.DataFrame:
    """Recommended dough ball weight (g, rounded up) per size and style, plus min/max."""
    styles = list(presets)[:style_count]
    rows: Dict[str, Dict[str, int]] = {}
    for label, diameter in rounds:
        rows[label] = {p.name: format_grams(estimate_weight_from_diameter(diameter, p.thickness_factor)) for p in styles}
    for label, width, height in trays:
        rows[label] = {p.name: format_grams(estimate_weight_from_square(width, height, p.thickness_factor)) for p in styles}

    df = pd.DataFrame.from_dict(rows, orient="index", columns=[p.name for p in styles])
    if not df.empty:
        df["min"] = df.min(axis=1)
        df["max"] = df[[p.name for p in styles]].max(axis=1)
    df.index.name = "size"
    return df


def plan_payload(state: FormState, out: PlanOutputs) -> Dict[str, Any]:
    """JSON-serialisable summary of a plan."""
    return {
        "state": asdict(state),
        "preset": out.preset.id,
        "grams": out.grams,
        "suggested_yeast_percent": out.suggested_yeast_percent,
        "effective_oven_temp": out.effective_oven_temp,
        "bake_minutes": out.bake_minutes,
        "total_minutes": out.total_minutes,
        "timeline": [
            {
                "time": step.time.isoformat(),
                "template_id": step.template_id,
                "label": step.label,
                "description": step.description,
            }
            for step in out.timeline
        ],
    }


def write_run_log(log_dir: str, payload: Dict[str, Any]) -> str:
    """
    Write a compact JSON log (form state + plan). Returns the file path.

    Note:
        Log files are named with UTC timestamp: plan_YYYYMMDDTHHMMSSZ.json
    """
    os.makedirs(log_dir, exist_ok=True)
    ts = datetime.now(timezone.utc).strftime("%Y%m%dT%H%M%SZ")
    fpath = os.path.join(log_dir, f"plan_{ts}.json")
    with open(fpath, "w", encoding="utf-8") as f:
        json.dump(payload, f, indent=2, ensure_ascii=False)
    return fpath


__all__ = [
    "TIMELINE_MODE_TIME",
    "TIMELINE_MODE_DURATION",
    "FormState",
    "PlanOutputs",
    "find_preset",
    "apply_preset_defaults",
    "select_preset",
    "effective_oven_temp",
    "build_dough_inputs",
    "resolve_start_time",
    "format_clock",
    "run_plan",
    "ball_weight_guide",
    "plan_payload",
    "write_run_log",
]

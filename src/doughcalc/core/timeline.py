"""Timeline builder.

Turns a start instant plus the fermentation schedule into an ordered list of
steps. Planning and wording are separate phases:

1) ``plan_timeline`` computes timestamps and emits language-neutral
   ``PlannedStep`` records (template id + parameters);
2) ``calculate_timeline`` resolves each record through a ``TemplateResolver``
   (see ``doughcalc.messages``) into label/description text.

``start_time`` is the only time source; identical inputs give identical plans.
"""
from __future__ import annotations

import math
from datetime import datetime, timedelta
from typing import Any, Dict, List, Protocol, Sequence

from .models import (
    PlannedStep,
    SHAPE_DETAILED,
    STEP_AUTOLYSE_END,
    STEP_AUTOLYSE_START,
    STEP_BAKE,
    STEP_BULK_END,
    STEP_DIVIDE,
    STEP_MIX,
    STEP_PROOF_END,
    StepText,
    TimelineInputs,
    TimelineStep,
)


class TemplateResolver(Protocol):
    def resolve(self, template_id: str, params: Dict[str, Any]) -> StepText:
        ...


def _display_number(value):
    """20.0 -> 20, 8.5 -> 8.5; keeps step text free of trailing '.0'."""
    try:
        number = float(value)
    except (TypeError, ValueError):
        return value
    if math.isfinite(number) and number.is_integer():
        return int(number)
    return number


def _non_negative(value) -> float:
    try:
        number = float(value)
    except (TypeError, ValueError):
        return 0.0
    return max(number, 0.0) if math.isfinite(number) else 0.0


def _ball_count(value) -> int:
    try:
        number = float(value)
    except (TypeError, ValueError):
        return 1
    return int(number) if math.isfinite(number) else 1


def _step_params(inputs: TimelineInputs) -> Dict[str, Any]:
    additions = []
    if inputs.oil_grams and inputs.oil_grams > 0:
        additions.append("oil")
    if inputs.include_sugar:
        additions.append("sugar")
    return {
        "flour": _display_number(inputs.flour_grams),
        "water": _display_number(inputs.water_grams),
        "salt": _display_number(inputs.salt_grams),
        "yeast": _display_number(inputs.yeast_grams),
        "oil": _display_number(inputs.oil_grams),
        "sugar": _display_number(inputs.sugar_grams if inputs.include_sugar else 0),
        "temp": _display_number(inputs.ferment_temp_c),
        "count": _ball_count(inputs.pizza_count),
        "oven_temp": _display_number(inputs.effective_oven_temp),
        "minutes": int(math.ceil(_non_negative(inputs.bake_minutes))),
        "additions": tuple(additions),
    }


def plan_timeline(inputs: TimelineInputs, start_time: datetime, shape: str = "compact") -> List[PlannedStep]:
    """
    Compute step timestamps.

    compact:  [mix | autolyse-start, autolyse-end], bulk-ferment-end, final-proof-end
    detailed: same, plus 'divide' after bulk-ferment-end and 'bake' after
              final-proof-end, each sharing the preceding timestamp
    """
    params = _step_params(inputs)
    steps: List[PlannedStep] = []
    current = start_time

    def _add(template_id: str) -> None:
        steps.append(PlannedStep(time=current, template_id=template_id, params=dict(params)))

    if inputs.use_autolyse:
        _add(STEP_AUTOLYSE_START)
        current = current + timedelta(minutes=_non_negative(inputs.autolyse_minutes))
        _add(STEP_AUTOLYSE_END)
    else:
        _add(STEP_MIX)

    current = current + timedelta(hours=_non_negative(inputs.bulk_ferment_hours))
    _add(STEP_BULK_END)
    if shape == SHAPE_DETAILED:
        _add(STEP_DIVIDE)

    current = current + timedelta(hours=_non_negative(inputs.final_proof_hours))
    _add(STEP_PROOF_END)
    if shape == SHAPE_DETAILED:
        _add(STEP_BAKE)

    return steps


def calculate_timeline(
    inputs: TimelineInputs,
    start_time: datetime,
    resolver: TemplateResolver,
    shape: str = "compact",
) -> List[TimelineStep]:
    """Plan the timeline and render every step through ``resolver``."""
    rendered: List[TimelineStep] = []
    for planned in plan_timeline(inputs, start_time, shape=shape):
        text = resolver.resolve(planned.template_id, planned.params)
        rendered.append(
            TimelineStep(
                time=planned.time,
                label=text.label,
                description=text.description,
                template_id=planned.template_id,
            )
        )
    return rendered


def _elapsed_minutes(start: datetime, end: datetime) -> int:
    return math.floor((end - start).total_seconds() / 60)


def format_duration(start: datetime, end: datetime) -> str:
    """Elapsed time as '+30 min', '+2h' or '+2h 15min' (floored to the minute)."""
    minutes = _elapsed_minutes(start, end)
    if minutes < 60:
        return f"+{minutes} min"
    hours, mins = divmod(minutes, 60)
    if mins == 0:
        return f"+{hours}h"
    return f"+{hours}h {mins}min"


def get_total_duration(steps: Sequence[Any]) -> int:
    """Whole minutes between the first and the last step; 0 for fewer than two."""
    if len(steps) < 2:
        return 0
    return _elapsed_minutes(steps[0].time, steps[-1].time)


__all__ = [
    "TemplateResolver",
    "plan_timeline",
    "calculate_timeline",
    "format_duration",
    "get_total_duration",
]

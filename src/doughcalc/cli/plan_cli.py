"""Command-line dough planner.

Examples
  doughcalc-plan --preset new-york --count 3 --weight 780
  doughcalc-plan --preset detroit --mode diameter --diameter 25 --autolyse 30 --durations
  doughcalc-plan --guide
"""
from __future__ import annotations

import argparse
import logging
import sys
from dataclasses import replace
from datetime import datetime
from pathlib import Path
from typing import Optional, Sequence

from doughcalc.core.io import load_presets
from doughcalc.core.models import DOUGH_MODES, TIMELINE_SHAPES, YEAST_TYPES, SHAPE_COMPACT
from doughcalc.dough_api import (
    FormState,
    TIMELINE_MODE_DURATION,
    TIMELINE_MODE_TIME,
    apply_preset_defaults,
    ball_weight_guide,
    plan_payload,
    run_plan,
    write_run_log,
)
from doughcalc.messages import MessageCatalog, default_language
from doughcalc.core.timeline import format_duration

INGREDIENT_ROWS = ("flour", "water", "salt", "oil", "sugar", "yeast", "total_dough", "per_ball")


def _build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(description="Compute a pizza dough formula and preparation timeline")
    p.add_argument("--preset", default=FormState.preset_id, help="Preset id (default: neapolitan)")
    p.add_argument("--mode", choices=DOUGH_MODES, default=None, help="Size by total weight or by diameter")
    p.add_argument("--weight", type=float, default=None, help="Total dough weight (g), weight mode")
    p.add_argument("--diameter", type=float, default=None, help="Pizza diameter (cm), diameter mode")
    p.add_argument("--count", type=int, default=None, help="Number of pizzas")
    p.add_argument("--hydration", type=float, default=None, help="Hydration percent (default: preset)")
    p.add_argument("--yeast-type", choices=YEAST_TYPES, default=None, help="Yeast type (default: preset)")
    p.add_argument("--max-oven-temp", type=float, default=None, help="Highest temperature your oven reaches (°C)")
    p.add_argument("--no-sugar", action="store_true", help="Leave sugar out of the formula")
    p.add_argument("--ferment-temp", type=float, default=None, help="Fermentation temperature (°C)")
    p.add_argument("--bulk-hours", type=float, default=None, help="Bulk fermentation (hours)")
    p.add_argument("--proof-hours", type=float, default=None, help="Final proof (hours)")
    p.add_argument("--autolyse", type=float, default=None, metavar="MINUTES", help="Use an autolyse rest of MINUTES")
    p.add_argument("--start-in", type=float, default=0.0, help="Start the timeline in N hours")
    p.add_argument("--durations", action="store_true", help="Show elapsed durations instead of clock times")
    p.add_argument("--shape", choices=TIMELINE_SHAPES, default=SHAPE_COMPACT, help="Timeline detail level")
    p.add_argument("--lang", default=None, help="Language for step text (en | hr)")
    p.add_argument("--presets-file", type=Path, default=None, help="Alternative presets YAML")
    p.add_argument("--guide", action="store_true", help="Print the dough ball weight guide and exit")
    p.add_argument("--log-dir", type=str, default=None, help="Write a JSON plan log into this directory")
    p.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    return p


def _state_from_args(args: argparse.Namespace, presets) -> Optional[FormState]:
    preset = next((p for p in presets if p.id == args.preset), None)
    if preset is None:
        return None
    state = apply_preset_defaults(FormState(language=args.lang or default_language()), preset)
    overrides = {
        "mode": args.mode,
        "target_weight": args.weight,
        "diameter_cm": args.diameter,
        "pizza_count": args.count,
        "hydration": args.hydration,
        "yeast_type": args.yeast_type,
        "max_oven_temp_c": args.max_oven_temp,
        "ferment_temp_c": args.ferment_temp,
        "bulk_ferment_hours": args.bulk_hours,
        "final_proof_hours": args.proof_hours,
    }
    state = replace(state, **{k: v for k, v in overrides.items() if v is not None})
    if args.autolyse is not None:
        state = replace(state, use_autolyse=True, autolyse_minutes=args.autolyse)
    return replace(
        state,
        include_sugar=not args.no_sugar,
        timeline_mode=TIMELINE_MODE_DURATION if args.durations else TIMELINE_MODE_TIME,
        timeline_start_hours=max(args.start_in, 0.0),
    )


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = _build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    presets = load_presets(args.presets_file)
    if not presets:
        print("No presets available.", file=sys.stderr)
        return 2

    if args.guide:
        print(ball_weight_guide(presets).to_string())
        return 0

    state = _state_from_args(args, presets)
    if state is None:
        known = ", ".join(p.id for p in presets)
        print(f"Unknown preset '{args.preset}'. Known presets: {known}", file=sys.stderr)
        return 2

    catalog = MessageCatalog.load()
    resolver = catalog.resolver(state.language)
    out = run_plan(state, presets, datetime.now(), resolver, shape=args.shape)

    print(f"=== {out.preset.name} ===")
    print(f"Mode: {state.mode}  Pizzas: {state.pizza_count}  Hydration: {state.hydration:g}%  Yeast: {state.yeast_type}")
    print(f"Suggested yeast (instant baseline): {out.suggested_yeast_percent:.3f}%")
    for name in INGREDIENT_ROWS:
        print(f"  {resolver.text(name):16s} {out.grams[name]:>6d} g")
    print(resolver.text("bake_time", {"minutes": out.bake_minutes, "temp": f"{out.effective_oven_temp:g}"}))

    print(f"--- {resolver.text('timeline')} ---")
    for when, step in zip(out.step_times, out.timeline):
        print(f"  {when:>10s}  {step.label}: {step.description}")
    if out.timeline:
        print(resolver.text("total_time", {"duration": format_duration(out.timeline[0].time, out.timeline[-1].time)}))

    if args.log_dir:
        path_written = write_run_log(args.log_dir, plan_payload(state, out))
        print(f"  ↳ log written to {path_written}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())

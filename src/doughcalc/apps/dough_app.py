# -*- coding: utf-8 -*-
"""
Pizza dough calculator – Streamlit UI.

- Pick a style preset; switching preset re-seeds hydration/diameter/yeast type.
- Size by total weight or by pizza diameter.
- Delegate all math to doughcalc.dough_api.run_plan (no duplicate math here).
- Remember the last form values in a JSON state file (DOUGHCALC_STATE_FILE).

Run:  streamlit run src/doughcalc/apps/dough_app.py
"""

from __future__ import annotations

import os
from dataclasses import replace
from datetime import datetime
from pathlib import Path

import pandas as pd
import streamlit as st

from doughcalc.core.io import load_presets, load_yeast_options
from doughcalc.core.models import MODE_DIAMETER, MODE_WEIGHT, SHAPE_COMPACT, SHAPE_DETAILED
from doughcalc.core.timeline import format_duration
from doughcalc.dough_api import (
    FormState,
    TIMELINE_MODE_DURATION,
    TIMELINE_MODE_TIME,
    ball_weight_guide,
    format_clock,
    run_plan,
    select_preset,
)
from doughcalc.messages import MessageCatalog
from doughcalc.storage import JsonFileStore, load_form_state, save_form_state

st.set_page_config(page_title="Pizza Dough Calculator", layout="wide")

STATE_FILE = Path(os.getenv("DOUGHCALC_STATE_FILE", str(Path.home() / ".doughcalc" / "state.json")))

OVEN_TEMPS = [200, 250, 300, 350, 400, 450, 500]
FERMENT_TEMPS = [5, 10, 15, 20, 25, 30, 35, 40]
BULK_HOURS = [0.5, 1, 2, 3, 4, 6, 8, 12, 16, 24]
PROOF_HOURS = [0.5, 1, 2, 3, 4, 6, 8, 12, 24]
AUTOLYSE_MINUTES = [20, 30, 45, 60]
START_OFFSETS = [0, 1, 2, 3, 4, 5, 6, 7, 8]


def _pick(options, value, fallback):
    """Stored value when it is one of the options, else the fallback."""
    for opt in options:
        if opt == value:
            return opt
    return fallback


@st.cache_data
def _presets():
    return load_presets()


@st.cache_data
def _yeast_options():
    return load_yeast_options()


@st.cache_resource
def _catalog() -> MessageCatalog:
    return MessageCatalog.load()


presets = _presets()
catalog = _catalog()
store = JsonFileStore(STATE_FILE)

if "form" not in st.session_state:
    st.session_state["form"] = load_form_state(store, FormState())
form: FormState = st.session_state["form"]

languages = catalog.languages
language = st.sidebar.radio(
    "Language / Jezik",
    languages,
    index=languages.index(form.language) if form.language in languages else 0,
    horizontal=True,
)
resolver = catalog.resolver(language)
tr = resolver.text

st.title(tr("app_title"))

# -----------------------------
# Inputs
# -----------------------------
preset_ids = [p.id for p in presets]
preset_names = {p.id: p.name for p in presets}
picked = st.selectbox(
    tr("preset"),
    preset_ids,
    index=preset_ids.index(form.preset_id) if form.preset_id in preset_ids else 0,
    format_func=lambda pid: preset_names[pid],
)
form = select_preset(form, presets, picked)
current = next(p for p in presets if p.id == form.preset_id)
st.caption(current.description)

col_a, col_b = st.columns(2)
with col_a:
    mode = st.radio(
        tr("mode"),
        [MODE_WEIGHT, MODE_DIAMETER],
        index=0 if form.mode == MODE_WEIGHT else 1,
        format_func=lambda m: tr("mode_weight") if m == MODE_WEIGHT else tr("mode_diameter"),
        horizontal=True,
    )
    pizza_count = st.number_input(tr("pizza_count"), min_value=1, step=1, value=int(form.pizza_count))
    if mode == MODE_WEIGHT:
        target_weight = st.number_input(tr("total_dough_weight"), min_value=0.0, step=10.0, value=float(form.target_weight))
        diameter_cm = form.diameter_cm
    else:
        diameter_cm = st.number_input(tr("pizza_diameter"), min_value=0.0, step=1.0, value=float(form.diameter_cm))
        target_weight = form.target_weight
    hydration = st.slider(tr("hydration"), 50.0, 90.0, float(form.hydration), step=0.5)
    yeast_labels = dict(_yeast_options())
    yeast_keys = list(yeast_labels)
    yeast_type = st.selectbox(
        tr("yeast_type"),
        yeast_keys,
        index=yeast_keys.index(form.yeast_type) if form.yeast_type in yeast_keys else 0,
        format_func=lambda y: yeast_labels[y],
    )
    include_sugar = st.checkbox(tr("include_sugar"), value=bool(form.include_sugar))

with col_b:
    max_oven = st.select_slider(tr("max_oven_temp"), options=OVEN_TEMPS, value=_pick(OVEN_TEMPS, form.max_oven_temp_c, 300))
    ferment_temp = st.select_slider(tr("ferment_temp"), options=FERMENT_TEMPS, value=_pick(FERMENT_TEMPS, form.ferment_temp_c, 20))
    bulk_hours = st.select_slider(tr("bulk_ferment"), options=BULK_HOURS, value=_pick(BULK_HOURS, form.bulk_ferment_hours, 2))
    proof_hours = st.select_slider(tr("final_proof"), options=PROOF_HOURS, value=_pick(PROOF_HOURS, form.final_proof_hours, 1))
    use_autolyse = st.checkbox(tr("use_autolyse"), value=bool(form.use_autolyse))
    autolyse_minutes = form.autolyse_minutes
    if use_autolyse:
        autolyse_minutes = st.radio(
            tr("autolyse_minutes"),
            AUTOLYSE_MINUTES,
            index=AUTOLYSE_MINUTES.index(_pick(AUTOLYSE_MINUTES, form.autolyse_minutes, 30)),
            horizontal=True,
        )

form = replace(
    form,
    mode=mode,
    pizza_count=int(pizza_count),
    target_weight=float(target_weight),
    diameter_cm=float(diameter_cm),
    hydration=float(hydration),
    yeast_type=yeast_type,
    include_sugar=bool(include_sugar),
    max_oven_temp_c=float(max_oven),
    ferment_temp_c=float(ferment_temp),
    bulk_ferment_hours=float(bulk_hours),
    final_proof_hours=float(proof_hours),
    use_autolyse=bool(use_autolyse),
    autolyse_minutes=float(autolyse_minutes),
    language=language,
)

# -----------------------------
# Results
# -----------------------------
st.subheader(tr("timeline"))
t_col1, t_col2, t_col3 = st.columns(3)
with t_col1:
    timeline_mode = st.radio(
        " ",
        [TIMELINE_MODE_TIME, TIMELINE_MODE_DURATION],
        index=0 if form.timeline_mode == TIMELINE_MODE_TIME else 1,
        format_func=lambda m: tr("timeline_mode_time") if m == TIMELINE_MODE_TIME else tr("timeline_mode_duration"),
        horizontal=True,
    )
with t_col2:
    start_in = form.timeline_start_hours
    if timeline_mode == TIMELINE_MODE_TIME:
        start_in = st.selectbox(
            tr("start_now") + " / +h",
            START_OFFSETS,
            index=START_OFFSETS.index(_pick(START_OFFSETS, form.timeline_start_hours, 0)),
        )
with t_col3:
    detailed = st.toggle(resolver.resolve("divide", {}).label + " / " + resolver.resolve("bake", {}).label, value=False)

form = replace(form, timeline_mode=timeline_mode, timeline_start_hours=float(start_in))
st.session_state["form"] = form
save_form_state(store, form)

out = run_plan(form, presets, datetime.now(), resolver, shape=SHAPE_DETAILED if detailed else SHAPE_COMPACT)

st.subheader(tr("results"))
rows = [
    (tr(name), out.grams[name])
    for name in ("flour", "water", "salt", "oil", "sugar", "yeast", "total_dough", "per_ball")
]
st.table(pd.DataFrame(rows, columns=[tr("ingredient"), tr("grams")]).set_index(tr("ingredient")))
st.write(tr("bake_time", {"minutes": out.bake_minutes, "temp": f"{out.effective_oven_temp:g}"}))

if out.timeline:
    if form.timeline_mode == TIMELINE_MODE_TIME:
        start_label = tr("start_now") if form.timeline_start_hours <= 0 else tr("start_in", {"hours": f"{form.timeline_start_hours:g}"})
        st.info(tr("ready_at", {"start": start_label, "time": format_clock(out.timeline[-1].time)}))
    else:
        st.info(tr("total_time", {"duration": format_duration(out.timeline[0].time, out.timeline[-1].time)}))
    for when, step in zip(out.step_times, out.timeline):
        st.markdown(f"**{when}** · **{step.label}**: {step.description}")

with st.expander(tr("guide_title")):
    st.dataframe(ball_weight_guide(presets))

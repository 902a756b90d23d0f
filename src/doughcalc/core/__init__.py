"""
Core package façade.

Submodules:
  - models: value objects (DoughInputs, DoughBreakdown, TimelineStep, ...)
  - formula: baker's-percentage solver and estimators
  - timeline: step scheduling and duration formatting
  - io: YAML loaders for presets and messages

Downstream code can import from `doughcalc.core.*` directly.
"""

from . import models, formula, timeline, io

__all__ = [
    "models",
    "formula",
    "timeline",
    "io",
]

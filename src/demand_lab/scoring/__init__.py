"""Scoring module: dimension scoring and recommendation synthesis."""

from .engine import (
    DIMENSION_LABELS,
    compute_overall_score,
    conversion_rate_adjustment,
    maturity_stage_for,
    score_demand,
    status_from_score,
)
from .recommendations import build_narrative, build_projects, build_quick_wins

__all__ = [
    "DIMENSION_LABELS",
    "build_narrative",
    "build_projects",
    "build_quick_wins",
    "compute_overall_score",
    "conversion_rate_adjustment",
    "maturity_stage_for",
    "score_demand",
    "status_from_score",
]

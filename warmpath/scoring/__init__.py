"""Profile similarity scoring and edge weights"""

from __future__ import annotations

from .edge_weights import (
    EdgeWeightModel,
    ScoreBreakdown,
    ScoringWeights,
    WeightAdjustments,
    edge_weight,
    match_score,
    score_breakdown,
)

__all__ = [
    "EdgeWeightModel",
    "ScoreBreakdown",
    "ScoringWeights",
    "WeightAdjustments",
    "edge_weight",
    "match_score",
    "score_breakdown",
]

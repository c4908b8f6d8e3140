"""Acceptance rate estimates and calibration tracking.

Maps hop counts and similarity scores to estimated connection-request
acceptance rates (0-1), and aggregates tracked outcomes so predictions can be
compared with what actually happened.
"""

from __future__ import annotations

from collections import defaultdict
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from .models import ConnectionStrategy

# Hop count -> acceptance rate for paths through mutual connections
HOP_ACCEPTANCE_RATES = {
    1: 0.85,  # Direct connection
    2: 0.65,  # One mutual
    3: 0.45,  # Two mutuals
    4: 0.30,  # Three mutuals, rare
}
LONG_PATH_ACCEPTANCE_RATE = 0.25

# Pure cold outreach baseline and its bounded boosts
COLD_BASE_RATE = 0.12
COLD_SIMILARITY_BOOST = 0.08
COLD_GATEWAY_BOOST = 0.02


def hop_acceptance_rate(hop_count: int) -> float:
    """Acceptance rate for a path of the given number of hops."""
    return HOP_ACCEPTANCE_RATES.get(hop_count, LONG_PATH_ACCEPTANCE_RATE)


def similarity_acceptance_rate(similarity: float) -> float:
    """Map a similarity (0-1) to an acceptance rate.

    - 0.65-1.0 -> 40-45% (same-school quality)
    - 0.45-0.65 -> 20-40% (personalized cold outreach)
    - 0.25-0.45 -> 15-20% (some commonalities)
    - below 0.25 -> 12-15% (pure cold)
    """
    similarity = max(0.0, min(1.0, similarity))

    if similarity >= 0.65:
        return 0.40 + (similarity - 0.65) * (0.05 / 0.35)
    if similarity >= 0.45:
        return 0.20 + (similarity - 0.45) * (0.20 / 0.20)
    if similarity >= 0.25:
        return 0.15 + (similarity - 0.25) * (0.05 / 0.20)
    return 0.12 + similarity * (0.03 / 0.25)


def cold_outreach_acceptance_rate(similarity: float, has_gateway: bool = False) -> float:
    """Conservative rate for a cold approach; never above 22%."""
    similarity = max(0.0, min(1.0, similarity))
    rate = COLD_BASE_RATE + similarity * COLD_SIMILARITY_BOOST
    if has_gateway:
        rate += COLD_GATEWAY_BOOST
    return rate


@dataclass
class TrackedResult:
    """One predicted-versus-actual connection attempt"""

    predicted: float
    actual: float
    strategy: str

    @property
    def error(self) -> float:
        return abs(self.predicted - self.actual)


def track_connection_result(strategy: ConnectionStrategy, accepted: bool) -> TrackedResult:
    """Record how a recommended strategy played out."""
    return TrackedResult(
        predicted=strategy.estimated_acceptance_rate,
        actual=1.0 if accepted else 0.0,
        strategy=strategy.type,
    )


def calculate_calibration_metrics(results: list[TrackedResult]) -> dict[str, dict[str, Any]]:
    """Average predicted and actual acceptance per strategy type.

    Returns:
        strategy type -> {avg_predicted, avg_actual, count, error}
    """
    by_strategy: dict[str, list[TrackedResult]] = defaultdict(list)
    for result in results:
        by_strategy[result.strategy].append(result)

    metrics: dict[str, dict[str, Any]] = {}
    for strategy, strategy_results in by_strategy.items():
        count = len(strategy_results)
        avg_predicted = sum(r.predicted for r in strategy_results) / count
        avg_actual = sum(r.actual for r in strategy_results) / count
        metrics[strategy] = {
            "avg_predicted": avg_predicted,
            "avg_actual": avg_actual,
            "count": count,
            "error": abs(avg_predicted - avg_actual),
        }

    return metrics

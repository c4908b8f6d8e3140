"""Connection strategy selection, caching and acceptance estimates"""

from __future__ import annotations

from .acceptance_rates import (
    TrackedResult,
    calculate_calibration_metrics,
    cold_outreach_acceptance_rate,
    hop_acceptance_rate,
    similarity_acceptance_rate,
    track_connection_result,
)
from .cache import CacheEntry, StrategyCache
from .models import (
    CANDIDATE,
    DIRECT_PATH,
    INTERMEDIARY,
    MUTUAL_PATH,
    STRATEGY_TYPES,
    CandidateStrategy,
    ConnectionStrategy,
    DirectPathStrategy,
    IntermediaryStrategy,
    MutualPathStrategy,
    SuggestedPerson,
    dump_strategy,
    parse_strategy,
)
from .selector import RankedActor, SelectorSettings, StrategySelector

__all__ = [
    "CANDIDATE",
    "DIRECT_PATH",
    "INTERMEDIARY",
    "MUTUAL_PATH",
    "STRATEGY_TYPES",
    "CacheEntry",
    "CandidateStrategy",
    "ConnectionStrategy",
    "DirectPathStrategy",
    "IntermediaryStrategy",
    "MutualPathStrategy",
    "RankedActor",
    "SelectorSettings",
    "StrategyCache",
    "StrategySelector",
    "SuggestedPerson",
    "TrackedResult",
    "calculate_calibration_metrics",
    "cold_outreach_acceptance_rate",
    "dump_strategy",
    "hop_acceptance_rate",
    "parse_strategy",
    "similarity_acceptance_rate",
    "track_connection_result",
]

"""Profile similarity and traversal weights.

match_score sums five independently capped components into a 0-100 score.
edge_weight turns that score plus categorical boosts into a traversal cost in
[0.1, 1.0]; lower weight is a stronger connection, which is what the path
search minimizes.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from ..models import ActorNode, ActorProfile, Edge

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ScoringWeights:
    """Points per shared item and the cap of each component"""

    mutual_points: int = 4
    mutual_cap: int = 40
    school_points: int = 10
    school_cap: int = 20
    employer_points: int = 10
    employer_cap: int = 20
    skill_points: int = 2
    skill_cap: int = 10
    location_exact: int = 10
    location_partial: int = 5

    @property
    def max_score(self) -> int:
        return self.mutual_cap + self.school_cap + self.employer_cap + self.skill_cap + self.location_exact


@dataclass(frozen=True)
class WeightAdjustments:
    """Deductions applied to the base traversal weight"""

    base_weight: float = 1.0
    match_factor: float = 0.3  # Scaled by match_score / 100
    same_employer: float = 0.2
    shared_school: float = 0.15
    recent_activity: float = 0.1
    min_weight: float = 0.1
    max_weight: float = 1.0


DEFAULT_WEIGHTS = ScoringWeights()
DEFAULT_ADJUSTMENTS = WeightAdjustments()


@dataclass
class ScoreBreakdown:
    """Per-component points behind a match score"""

    mutual: int = 0
    schools: int = 0
    employers: int = 0
    skills: int = 0
    location: int = 0
    shared: dict[str, list[str]] = field(default_factory=dict)

    @property
    def raw_total(self) -> int:
        return self.mutual + self.schools + self.employers + self.skills + self.location

    def strongest_components(self, limit: int = 2) -> list[str]:
        """Names of the highest-scoring non-zero components, best first."""
        components = {
            "mutual connections": self.mutual,
            "education": self.schools,
            "employers": self.employers,
            "skills": self.skills,
            "location": self.location,
        }
        ranked = sorted((item for item in components.items() if item[1] > 0), key=lambda item: -item[1])
        return [name for name, _ in ranked[:limit]]

    def describe(self) -> str:
        """Human-readable summary such as "education and employers"."""
        top = self.strongest_components()
        if not top:
            return "background"
        return " and ".join(top)


def _normalize(value: str) -> str:
    return value.strip().lower()


def _count_shared_entries(left: list[str], right: list[str]) -> tuple[int, list[str]]:
    """Count entries of left whose value also appears in right.

    Repeated entries (two roles at one employer, two degrees at one school)
    each count, matching how profiles list separate stints.
    """
    right_values = {_normalize(v) for v in right if v and v.strip()}
    matched = [v for v in left if v and v.strip() and _normalize(v) in right_values]
    return len(matched), sorted({_normalize(v) for v in matched})


def _location_points(a: str, b: str, weights: ScoringWeights) -> int:
    if not a or not b or not a.strip() or not b.strip():
        return 0
    loc_a, loc_b = _normalize(a), _normalize(b)
    if loc_a == loc_b:
        return weights.location_exact
    if loc_a in loc_b or loc_b in loc_a:
        return weights.location_partial
    return 0


def score_breakdown(
    a: ActorProfile,
    b: ActorProfile,
    mutual_count: int | None = None,
    weights: ScoringWeights = DEFAULT_WEIGHTS,
) -> ScoreBreakdown:
    """Compute the capped component points between two profiles.

    Args:
        a: First profile
        b: Second profile
        mutual_count: Known mutual connections; defaults to the mutuals listed on a
        weights: Points and caps per component
    """
    if mutual_count is None:
        mutual_count = len(a.mutual_connections)
    mutual_count = max(0, mutual_count)

    school_count, shared_schools = _count_shared_entries(a.schools, b.schools)
    employer_count, shared_employers = _count_shared_entries(a.employers, b.employers)
    skill_count, shared_skills = _count_shared_entries(a.skills, b.skills)

    return ScoreBreakdown(
        mutual=min(weights.mutual_cap, mutual_count * weights.mutual_points),
        schools=min(weights.school_cap, school_count * weights.school_points),
        employers=min(weights.employer_cap, employer_count * weights.employer_points),
        skills=min(weights.skill_cap, skill_count * weights.skill_points),
        location=_location_points(a.location, b.location, weights),
        shared={"schools": shared_schools, "employers": shared_employers, "skills": shared_skills},
    )


def match_score(
    a: ActorProfile,
    b: ActorProfile,
    mutual_count: int | None = None,
    weights: ScoringWeights = DEFAULT_WEIGHTS,
) -> int:
    """Similarity between two profiles as a 0-100 percentage of the maximum."""
    breakdown = score_breakdown(a, b, mutual_count=mutual_count, weights=weights)
    max_score = weights.max_score
    if max_score <= 0:
        return 0
    percentage = round(breakdown.raw_total / max_score * 100)
    return max(0, min(100, percentage))


def shares_school(a: ActorProfile, b: ActorProfile) -> bool:
    count, _ = _count_shared_entries(a.schools, b.schools)
    return count > 0


def same_current_employer(a: ActorProfile, b: ActorProfile) -> bool:
    """Both most recent employers are known and equal."""
    employer_a, employer_b = a.current_employer, b.current_employer
    if not employer_a or not employer_b:
        return False
    return _normalize(employer_a) == _normalize(employer_b)


def edge_weight(
    a: ActorProfile,
    b: ActorProfile,
    score: int,
    adjustments: WeightAdjustments = DEFAULT_ADJUSTMENTS,
) -> float:
    """Traversal cost from a to b in [0.1, 1.0]; lower is stronger.

    Args:
        a: Profile the edge leaves
        b: Profile the edge reaches (its visible activity counts)
        score: Pre-computed match score (0-100)
    """
    weight = adjustments.base_weight
    weight -= (max(0, min(100, score)) / 100) * adjustments.match_factor

    if same_current_employer(a, b):
        weight -= adjustments.same_employer
    if shares_school(a, b):
        weight -= adjustments.shared_school
    if b.has_recent_activity:
        weight -= adjustments.recent_activity

    return max(adjustments.min_weight, min(adjustments.max_weight, weight))


class EdgeWeightModel:
    """Scores actor pairs and derives weighted edges between them."""

    def __init__(
        self,
        weights: ScoringWeights = DEFAULT_WEIGHTS,
        adjustments: WeightAdjustments = DEFAULT_ADJUSTMENTS,
    ):
        self.weights = weights
        self.adjustments = adjustments

    def match_score(self, a: ActorProfile, b: ActorProfile, mutual_count: int | None = None) -> int:
        return match_score(a, b, mutual_count=mutual_count, weights=self.weights)

    def breakdown(self, a: ActorProfile, b: ActorProfile, mutual_count: int | None = None) -> ScoreBreakdown:
        return score_breakdown(a, b, mutual_count=mutual_count, weights=self.weights)

    def edge_weight(self, a: ActorProfile, b: ActorProfile, score: int) -> float:
        return edge_weight(a, b, score, adjustments=self.adjustments)

    def build_edge(self, from_node: ActorNode, to_node: ActorNode, mutual_count: int | None = None) -> Edge:
        """Edge between two actors with a weight derived from their profiles."""
        score = self.match_score(from_node.profile, to_node.profile, mutual_count=mutual_count)
        weight = self.edge_weight(from_node.profile, to_node.profile, score)
        logger.debug(f"Edge {from_node.id} -> {to_node.id}: score={score} weight={weight:.2f}")
        return Edge(from_id=from_node.id, to_id=to_node.id, weight=weight)

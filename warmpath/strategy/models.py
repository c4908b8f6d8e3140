"""Connection strategy result types.

ConnectionStrategy is a closed union discriminated on "type". There is no
empty variant: a payload tagged "none" (or anything else) fails validation,
so a strategy value always carries an actionable recommendation.
"""

from __future__ import annotations

from typing import Annotated, Any, Literal

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, field_validator

from ..models import ActorNode, Route

DIRECT_PATH = "direct-path"
MUTUAL_PATH = "mutual-path"
INTERMEDIARY = "intermediary"
CANDIDATE = "candidate"

STRATEGY_TYPES = (DIRECT_PATH, MUTUAL_PATH, INTERMEDIARY, CANDIDATE)


class SuggestedPerson(BaseModel):
    """A person the user should approach, with the reason why"""

    model_config = ConfigDict(frozen=True)

    node: ActorNode
    score: int = Field(ge=0, le=100)  # Match score behind the suggestion
    reasoning: str


class _StrategyBase(BaseModel):
    model_config = ConfigDict(frozen=True)

    confidence: float = Field(ge=0, le=1)
    estimated_acceptance_rate: float = Field(ge=0, le=1)
    low_confidence: bool = False
    reasoning: str
    next_steps: list[str] = Field(min_length=1)

    route: Route | None = None
    intermediary: SuggestedPerson | None = None
    candidate: SuggestedPerson | None = None

    @property
    def suggested_person(self) -> SuggestedPerson | None:
        return self.intermediary or self.candidate

    @property
    def is_path(self) -> bool:
        return self.route is not None


class DirectPathStrategy(_StrategyBase):
    """The target is one hop away"""

    type: Literal["direct-path"] = DIRECT_PATH
    route: Route

    @field_validator("route")
    @classmethod
    def validate_hops(cls, v: Route) -> Route:
        if v.hop_count != 1:
            raise ValueError(f"direct-path requires a 1-hop route, got {v.hop_count}")
        return v


class MutualPathStrategy(_StrategyBase):
    """The target is reachable through one or more mutual connections"""

    type: Literal["mutual-path"] = MUTUAL_PATH
    route: Route

    @field_validator("route")
    @classmethod
    def validate_hops(cls, v: Route) -> Route:
        if v.hop_count < 2:
            raise ValueError(f"mutual-path requires at least 2 hops, got {v.hop_count}")
        return v


class IntermediaryStrategy(_StrategyBase):
    """No path within the hop budget; a known actor tied to the target can bridge"""

    type: Literal["intermediary"] = INTERMEDIARY
    intermediary: SuggestedPerson


class CandidateStrategy(_StrategyBase):
    """No path and no bridge; similarity-based suggestion, always low confidence"""

    type: Literal["candidate"] = CANDIDATE
    candidate: SuggestedPerson
    low_confidence: Literal[True] = True
    gateway: SuggestedPerson | None = None  # Best-ranked known actor, if any


ConnectionStrategy = Annotated[
    DirectPathStrategy | MutualPathStrategy | IntermediaryStrategy | CandidateStrategy,
    Field(discriminator="type"),
]

_strategy_adapter: TypeAdapter[ConnectionStrategy] = TypeAdapter(ConnectionStrategy)


def parse_strategy(payload: Any) -> ConnectionStrategy:
    """Validate a persisted strategy payload.

    Raises:
        pydantic.ValidationError: If the payload is not one of the known variants
    """
    return _strategy_adapter.validate_python(payload)


def dump_strategy(strategy: ConnectionStrategy) -> dict[str, Any]:
    """JSON-safe representation of a strategy."""
    return _strategy_adapter.dump_python(strategy, mode="json", by_alias=True)

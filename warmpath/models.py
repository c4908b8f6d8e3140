"""Core domain models for the connection pathfinding engine.

Actors are keyed by their canonical profile URL. Profiles are always the
lean shape; collaborator record formats are converted in warmpath.profiles.
"""

from __future__ import annotations

from datetime import UTC, datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, computed_field


class ConnectionStatus(Enum):
    """Relationship status between the viewing user and an actor"""

    NOT_CONTACTED = "not_contacted"
    CONTACTED = "contacted"
    CONNECTED = "connected"


class ActorProfile(BaseModel):
    """Lean profile summary used by scoring and search"""

    name: str
    headline: str = ""
    location: str = ""
    skills: list[str] = Field(default_factory=list)
    employers: list[str] = Field(default_factory=list)  # Most recent first
    schools: list[str] = Field(default_factory=list)
    avatar_url: str | None = None
    mutual_connections: list[str] = Field(default_factory=list)  # Actor ids seen on the profile page
    recent_activity: list[str] = Field(default_factory=list)

    @property
    def current_employer(self) -> str | None:
        """Most recent employer, if any"""
        return self.employers[0] if self.employers else None

    @property
    def has_recent_activity(self) -> bool:
        return len(self.recent_activity) > 0


class ActorNode(BaseModel):
    """A person in the acquaintance graph"""

    id: str
    profile: ActorProfile
    status: ConnectionStatus = ConnectionStatus.NOT_CONTACTED
    degree: int = Field(default=1, ge=0)  # Hop distance from the viewing user, 0 for self
    match_score: int = Field(default=0, ge=0, le=100)

    @property
    def name(self) -> str:
        return self.profile.name

    @classmethod
    def placeholder(cls, actor_id: str) -> ActorNode:
        """Minimal node for an id seen only as an edge endpoint."""
        return cls(id=actor_id, profile=ActorProfile(name=actor_id))


class Edge(BaseModel):
    """Directed connection between two actors.

    Lower weight means a stronger, more traversable connection.
    """

    model_config = ConfigDict(populate_by_name=True)

    from_id: str = Field(alias="from")
    to_id: str = Field(alias="to")
    weight: float = Field(default=1.0, ge=0.1, le=1.0)

    @property
    def pair(self) -> tuple[str, str]:
        return (self.from_id, self.to_id)


class GraphSnapshot(BaseModel):
    """Serialized node and edge set, as persisted between requests"""

    nodes: list[ActorNode] = Field(default_factory=list)
    edges: list[Edge] = Field(default_factory=list)


class Route(BaseModel):
    """Ordered path from source to target, inclusive of both endpoints"""

    target_id: str
    nodes: list[ActorNode]
    edges: list[Edge]
    total_weight: float
    success_probability: float = Field(ge=0, le=100)
    computed_at: datetime = Field(default_factory=lambda: datetime.now(UTC))

    @computed_field  # type: ignore[prop-decorator]
    @property
    def hop_count(self) -> int:
        return len(self.edges)

    @property
    def node_ids(self) -> list[str]:
        return [node.id for node in self.nodes]

    @property
    def intermediaries(self) -> list[ActorNode]:
        """Nodes strictly between source and target"""
        return self.nodes[1:-1]

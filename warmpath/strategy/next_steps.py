"""Human-actionable next steps for each strategy type."""

from __future__ import annotations

from ..models import ActorNode, Route
from ..scoring.edge_weights import ScoreBreakdown


def path_next_steps(route: Route) -> list[str]:
    """One action per intermediate hop, then the final outreach step."""
    steps: list[str] = []
    nodes = route.nodes
    target = nodes[-1]

    for index, intermediary in enumerate(route.intermediaries, start=1):
        next_person = nodes[index + 1]
        if index == 1:
            steps.append(f"Message {intermediary.name} (mutual connection) and ask for an introduction to {next_person.name}")
        else:
            steps.append(f"Have {nodes[index - 1].name} connect you with {intermediary.name}, who knows {next_person.name}")

    if route.intermediaries:
        steps.append(f"Reach out to {target.name} mentioning {route.intermediaries[-1].name} as a shared connection")
    else:
        steps.append(f"Message {target.name} directly; you are already connected")

    return steps


def intermediary_next_steps(intermediary: ActorNode, target: ActorNode) -> list[str]:
    return [
        f"Connect with {intermediary.name} first (if not already connected)",
        "Build the relationship by engaging with their posts",
        f"Ask {intermediary.name} to introduce you to {target.name}",
        f"Alternative: message {target.name} mentioning {intermediary.name} as a mutual contact",
    ]


def candidate_next_steps(
    target: ActorNode,
    breakdown: ScoreBreakdown,
    gateway: ActorNode | None = None,
) -> list[str]:
    """Cold outreach plan, personalized by what the two profiles share."""
    steps = [
        f"Engage with {target.name}'s content regularly before reaching out",
    ]
    if breakdown.raw_total > 0:
        steps.append(f"Send a personalized request mentioning shared {breakdown.describe()}")
    else:
        steps.append("Lead with a clear value proposition rather than commonalities")
    if gateway is not None:
        steps.append(f"Consider building a relationship with {gateway.name} as a possible gateway")
    steps.append(f"Visit more profiles around {target.name} to grow your network graph")
    return steps

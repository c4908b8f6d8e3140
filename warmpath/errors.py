"""Pathfinding error classes.

Only SelfTargetError, EmptyGraphError and InternalInvariantError ever reach
the caller of a pathfinding request. Cache misses and an exhausted hop budget
are ordinary control flow and never raise.
"""

from __future__ import annotations


class WarmPathError(Exception):
    """Base exception for pathfinding errors."""

    user_message = "Something went wrong while finding a connection path."

    def __init__(self, message: str | None = None):
        super().__init__(message or self.user_message)


class SelfTargetError(WarmPathError):
    """Raised when the source and target actor are the same person."""

    user_message = "You are viewing your own profile. Open another profile to find connection paths."

    def __init__(self, actor_id: str):
        self.actor_id = actor_id
        super().__init__(f"Source and target are the same actor: {actor_id}")


class EmptyGraphError(WarmPathError):
    """Raised when there is no accumulated graph data to search."""

    user_message = "Your network graph is empty. Visit a few profiles to build it, then try again."

    def __init__(self, node_count: int, required: int):
        self.node_count = node_count
        self.required = required
        super().__init__(f"Graph snapshot has {node_count} nodes, at least {required} required")


class UserDetectionError(WarmPathError):
    """Raised when the current (source) actor cannot be resolved.

    The engine itself never hits this mid-search; it is raised while turning
    collaborator records into actors, before a search starts.
    """

    user_message = "Could not detect your own profile. Make sure you are signed in, then try again."


class InvalidCacheEntryError(WarmPathError):
    """Raised when a persisted cache entry fails validation (e.g. a 'none' strategy)."""

    def __init__(self, target_id: str, reason: str):
        self.target_id = target_id
        self.reason = reason
        super().__init__(f"Invalid cache entry for {target_id}: {reason}")


class InternalInvariantError(WarmPathError):
    """Raised when the selector is about to return no strategy at all.

    This is a logic defect, reported as an internal error rather than as a
    "no match" result.
    """

    user_message = "Internal error while building a connection strategy. Please report this issue."


class SnapshotFormatError(WarmPathError):
    """Raised when a persisted graph snapshot cannot be parsed."""

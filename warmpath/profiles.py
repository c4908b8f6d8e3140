"""Profile views over collaborator records.

Two record shapes reach the engine: the signed-in user's resume-style record
and profile pages scraped while browsing. Both are converted to ActorNode
here so the rest of the engine only ever sees the lean profile.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import Any

from .errors import UserDetectionError
from .models import ActorNode, ActorProfile, ConnectionStatus

logger = logging.getLogger(__name__)


def _clean(value: Any) -> str:
    return value.strip() if isinstance(value, str) else ""


def _entry_names(entries: Any, field: str) -> list[str]:
    """Non-empty `field` values from a list of dicts (plain strings accepted too)."""
    names: list[str] = []
    for entry in entries or []:
        if isinstance(entry, dict):
            name = _clean(entry.get(field))
        else:
            name = _clean(entry)
        if name:
            names.append(name)
    return names


def _skill_names(skills: Any) -> list[str]:
    return _entry_names(skills, "name")


class ProfileView(ABC):
    """Read-only view of a collaborator record as an actor"""

    # Record fields tried, in order, for the actor id
    id_fields: tuple[str, ...] = ("id",)

    def __init__(self, record: dict[str, Any]):
        self.record = record

    def actor_id(self) -> str | None:
        """First non-empty id field, or None if the record has none."""
        for field in self.id_fields:
            value = _clean(self.record.get(field))
            if value:
                return value
        return None

    @abstractmethod
    def to_profile(self) -> ActorProfile:
        pass

    def to_node(self, degree: int = 1, status: ConnectionStatus = ConnectionStatus.NOT_CONTACTED) -> ActorNode:
        """Actor node for this record.

        Raises:
            ValueError: If the record has no resolvable id
        """
        actor_id = self.actor_id()
        if actor_id is None:
            raise ValueError(f"{type(self).__name__} record has no id")
        return ActorNode(id=actor_id, profile=self.to_profile(), degree=degree, status=status)


class LeanProfileView(ProfileView):
    """Resume-style record of the signed-in user"""

    id_fields = ("id", "url", "email", "name")

    def to_profile(self) -> ActorProfile:
        record = self.record
        return ActorProfile(
            name=_clean(record.get("name")) or _clean(record.get("email")) or "Unknown",
            headline=_clean(record.get("title")),
            location=_clean(record.get("location")),
            skills=_skill_names(record.get("skills")),
            employers=_entry_names(record.get("workExperience"), "company"),
            schools=_entry_names(record.get("education"), "school"),
            avatar_url=_clean(record.get("avatarUrl")) or None,
        )


class ScrapedProfileView(ProfileView):
    """Profile page captured while browsing"""

    id_fields = ("id", "profileUrl", "email", "name")

    def to_profile(self) -> ActorProfile:
        record = self.record
        posts = record.get("recentPosts") or []
        return ActorProfile(
            name=_clean(record.get("name")) or "Unknown",
            headline=_clean(record.get("headline")),
            location=_clean(record.get("location")),
            skills=_skill_names(record.get("skills")),
            employers=_entry_names(record.get("experience"), "company"),
            schools=_entry_names(record.get("education"), "school"),
            avatar_url=_clean(record.get("avatarUrl")) or _clean(record.get("photoUrl")) or None,
            mutual_connections=_entry_names(record.get("mutualConnections"), "profileUrl"),
            recent_activity=[p if isinstance(p, str) else _clean(p.get("text")) for p in posts if p],
        )


def resolve_source_actor(record: dict[str, Any] | None) -> ActorNode:
    """The viewing user as an actor at degree 0.

    Raises:
        UserDetectionError: If there is no record or it has no resolvable id
    """
    if not record:
        logger.warning("No source user record available")
        raise UserDetectionError("No source user record available")

    view = LeanProfileView(record)
    if view.actor_id() is None:
        logger.warning("Source user record has no id, url, email or name")
        raise UserDetectionError("Source user record has no resolvable id")
    return view.to_node(degree=0)


def resolve_target_actor(record: dict[str, Any] | None) -> ActorNode:
    """The viewed profile as an actor.

    Raises:
        ValueError: If there is no record or it has no resolvable id
    """
    if not record:
        raise ValueError("No viewed profile record")
    return ScrapedProfileView(record).to_node()

"""Tests for converting collaborator records into actors."""

from __future__ import annotations

import pytest

from tests.fixtures.builders import lean_record, scraped_record
from warmpath.errors import UserDetectionError
from warmpath.profiles import LeanProfileView, ScrapedProfileView, resolve_source_actor, resolve_target_actor


class TestLeanProfileView:
    """Resume-style user records."""

    def test_maps_resume_fields(self):
        record = lean_record(
            title="Staff Engineer",
            location="Berlin",
            workExperience=[{"company": "Acme", "title": "Engineer"}, {"company": " Globex "}, {"title": "Intern"}],
            education=[{"school": "TU Berlin"}],
            skills=["Python", {"name": "SQL"}, ""],
            avatarUrl="https://cdn.example.com/me.png",
        )

        profile = LeanProfileView(record).to_profile()

        assert profile.name == "Me"
        assert profile.headline == "Staff Engineer"
        assert profile.employers == ["Acme", "Globex"]
        assert profile.current_employer == "Acme"
        assert profile.schools == ["TU Berlin"]
        assert profile.skills == ["Python", "SQL"]
        assert profile.avatar_url == "https://cdn.example.com/me.png"

    def test_id_resolution_order(self):
        assert LeanProfileView({"url": "u", "email": "e", "name": "n"}).actor_id() == "u"
        assert LeanProfileView({"email": "e", "name": "n"}).actor_id() == "e"
        assert LeanProfileView({"name": "n"}).actor_id() == "n"
        assert LeanProfileView({"id": "  ", "name": "n"}).actor_id() == "n"
        assert LeanProfileView({}).actor_id() is None

    def test_missing_name_falls_back_to_email(self):
        profile = LeanProfileView({"email": "me@example.com"}).to_profile()
        assert profile.name == "me@example.com"


class TestScrapedProfileView:
    """Profile pages captured while browsing."""

    def test_maps_scraped_fields(self):
        record = scraped_record(
            "https://example.com/in/bob",
            "Bob",
            headline="Designer at Initech",
            location="Lisbon",
            experience=[{"company": "Initech"}],
            education=[{"school": "IST"}],
            skills=[{"name": "Figma"}],
            mutualConnections=[{"profileUrl": "https://example.com/in/carol", "name": "Carol"}],
            recentPosts=["Shipped a redesign", {"text": "Hiring!"}],
            photoUrl="https://cdn.example.com/bob.png",
        )

        node = ScrapedProfileView(record).to_node()

        assert node.id == "https://example.com/in/bob"
        assert node.profile.headline == "Designer at Initech"
        assert node.profile.employers == ["Initech"]
        assert node.profile.schools == ["IST"]
        assert node.profile.skills == ["Figma"]
        assert node.profile.mutual_connections == ["https://example.com/in/carol"]
        assert node.profile.has_recent_activity
        assert node.profile.avatar_url == "https://cdn.example.com/bob.png"

    def test_record_without_id_cannot_become_node(self):
        with pytest.raises(ValueError):
            ScrapedProfileView({"headline": "anonymous"}).to_node()


class TestResolveActors:
    def test_source_actor_is_degree_zero(self):
        node = resolve_source_actor(lean_record())
        assert node.id == "https://example.com/in/me"
        assert node.degree == 0

    @pytest.mark.parametrize("record", [None, {}, {"title": "no identity"}])
    def test_unresolvable_source(self, record):
        with pytest.raises(UserDetectionError) as exc_info:
            resolve_source_actor(record)
        assert "signed in" in exc_info.value.user_message

    def test_target_actor(self):
        node = resolve_target_actor(scraped_record("https://example.com/in/bob", "Bob"))
        assert node.degree == 1
        assert node.name == "Bob"

    def test_missing_target_record(self):
        with pytest.raises(ValueError):
            resolve_target_actor(None)

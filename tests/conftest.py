"""
Root test configuration and fixtures for warmpath.

Note: sys.path manipulation is handled here to ensure imports work correctly.
"""

from __future__ import annotations

import os
import sys
from pathlib import Path
from unittest.mock import Mock

import pytest

# Add project root to path to allow imports
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from warmpath.config import ConfigLoader  # noqa: E402
from warmpath.storage import InMemoryKeyValueStore  # noqa: E402


def create_mock_pocketbase():
    """Create a mock PocketBase instance with a chainable collection."""
    mock_pb = Mock()
    mock_collection = Mock()

    mock_collection.auth_with_password = Mock(return_value=True)
    mock_collection.get_first_list_item = Mock()
    mock_collection.create = Mock(return_value=Mock(id="mock-id"))
    mock_collection.update = Mock()
    mock_collection.delete = Mock()

    mock_pb.collection = Mock(return_value=mock_collection)
    return mock_pb


@pytest.fixture
def mock_pocketbase():
    """Create a mock PocketBase instance for tests that need it."""
    return create_mock_pocketbase()


@pytest.fixture(autouse=True)
def reset_config(monkeypatch):
    """Give every test a fresh ConfigLoader and no CONFIG_* overrides."""
    for name in list(os.environ):
        if name.startswith("CONFIG_"):
            monkeypatch.delenv(name, raising=False)
    ConfigLoader.reset()
    yield
    ConfigLoader.reset()


@pytest.fixture
def kv_store():
    return InMemoryKeyValueStore()

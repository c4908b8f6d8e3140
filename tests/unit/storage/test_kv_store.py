"""Tests for the key-value storage backends."""

from __future__ import annotations

from unittest.mock import Mock

import pytest
from pocketbase.client import ClientResponseError  # type: ignore[attr-defined]

from warmpath.storage import InMemoryKeyValueStore, PocketBaseKeyValueStore


class TestInMemoryKeyValueStore:
    def test_get_missing_key(self, kv_store):
        assert kv_store.get("missing") is None

    def test_set_get_delete(self, kv_store):
        kv_store.set("k", {"a": [1, 2]})
        assert kv_store.get("k") == {"a": [1, 2]}

        kv_store.delete("k")
        assert kv_store.get("k") is None
        kv_store.delete("k")

    def test_values_are_not_aliased(self, kv_store):
        value = {"a": [1]}
        kv_store.set("k", value)
        value["a"].append(2)

        loaded = kv_store.get("k")
        loaded["a"].append(3)

        assert kv_store.get("k") == {"a": [1]}

    def test_rejects_non_json_values(self, kv_store):
        with pytest.raises(TypeError):
            kv_store.set("k", {"a": object()})

    def test_initial_values(self):
        store = InMemoryKeyValueStore({"x": 1, "y": "two"})
        assert sorted(store.keys()) == ["x", "y"]


def _not_found() -> ClientResponseError:
    return ClientResponseError(status=404)


class TestPocketBaseKeyValueStore:
    @pytest.fixture
    def collection(self, mock_pocketbase):
        return mock_pocketbase.collection.return_value

    @pytest.fixture
    def store(self, mock_pocketbase):
        return PocketBaseKeyValueStore(mock_pocketbase, collection="kv_store")

    def test_get_decoded_json_value(self, store, collection, mock_pocketbase):
        collection.get_first_list_item.return_value = Mock(id="r1", value={"nodes": []})

        assert store.get("network_graph") == {"nodes": []}
        mock_pocketbase.collection.assert_called_with("kv_store")
        collection.get_first_list_item.assert_called_with('key = "network_graph"')

    def test_get_text_value_is_decoded(self, store, collection):
        collection.get_first_list_item.return_value = Mock(id="r1", value='{"a": 1}')
        assert store.get("k") == {"a": 1}

    def test_missing_record_reads_as_none(self, store, collection):
        collection.get_first_list_item.side_effect = _not_found()
        assert store.get("k") is None

    def test_other_errors_propagate(self, store, collection):
        collection.get_first_list_item.side_effect = ClientResponseError(status=500)
        with pytest.raises(ClientResponseError):
            store.get("k")

    def test_set_creates_missing_record(self, store, collection):
        collection.get_first_list_item.side_effect = _not_found()

        store.set("k", {"a": 1})

        collection.create.assert_called_once_with({"key": "k", "value": {"a": 1}})
        collection.update.assert_not_called()

    def test_set_updates_existing_record(self, store, collection):
        collection.get_first_list_item.return_value = Mock(id="r1", value={})

        store.set("k", {"a": 1})

        collection.update.assert_called_once_with("r1", {"value": {"a": 1}})
        collection.create.assert_not_called()

    def test_delete(self, store, collection):
        collection.get_first_list_item.return_value = Mock(id="r1", value={})
        store.delete("k")
        collection.delete.assert_called_once_with("r1")

"""Tests for key-value backends."""

import json

import pytest

from triplestore.core.backends import (
    JsonFileKeyValueStore,
    KeyValueStore,
    MemoryKeyValueStore,
    SQLiteKeyValueStore,
    create_backend,
    get_backend,
    list_backends,
)


class TestKeyValueStoreContract:
    """Behaviour every backend shares (parametrized via the backend fixture)."""

    def test_get_missing(self, backend):
        assert backend.get("nope") is None
        assert "nope" not in backend

    def test_set_and_get(self, backend):
        backend.set("k", "v")
        assert backend.get("k") == "v"
        assert "k" in backend
        assert len(backend) == 1

    def test_overwrite_keeps_position(self, backend):
        """Overwriting a key does not move it in enumeration order."""
        backend.set("a", "1")
        backend.set("b", "2")
        backend.set("a", "3")

        assert backend.keys() == ["a", "b"]
        assert backend.get("a") == "3"

    def test_key_by_index(self, backend):
        backend.set("a", "1")
        backend.set("b", "2")

        assert backend.key(0) == "a"
        assert backend.key(1) == "b"
        assert backend.key(2) is None
        assert backend.key(-1) is None

    def test_remove(self, backend):
        backend.set("a", "1")
        backend.remove("a")
        backend.remove("never-there")

        assert backend.get("a") is None
        assert len(backend) == 0

    def test_clear(self, backend):
        backend.set("a", "1")
        backend.set("b", "2")
        backend.clear()

        assert backend.keys() == []
        assert len(backend) == 0

    def test_keys_is_snapshot(self, backend):
        """Mutating while iterating over keys() is safe."""
        backend.set("a", "1")
        backend.set("b", "2")

        for key in backend.keys():
            backend.remove(key)

        assert len(backend) == 0


class TestDurability:
    """Durable backends keep data across re-opening."""

    def test_json_reopen(self, tmp_path):
        path = tmp_path / "nested" / "store.json"
        first = JsonFileKeyValueStore(path)
        first.set("http://a", '{"http://name":"Alice"}')

        second = JsonFileKeyValueStore(path)
        assert second.get("http://a") == '{"http://name":"Alice"}'

    def test_json_empty_file(self, tmp_path):
        path = tmp_path / "store.json"
        path.write_text("")
        assert len(JsonFileKeyValueStore(path)) == 0

    def test_json_non_ascii_reopen(self, tmp_path):
        path = tmp_path / "store.json"
        JsonFileKeyValueStore(path).set("http://z", '{"http://name":"Zoë"}')

        assert "Zoë" in path.read_text(encoding="utf-8")
        assert JsonFileKeyValueStore(path).get("http://z") == '{"http://name":"Zoë"}'

    def test_json_failed_write_keeps_file_and_memory(self, tmp_path, monkeypatch):
        path = tmp_path / "store.json"
        store = JsonFileKeyValueStore(path)
        store.set("http://a", "1")
        before = path.read_text(encoding="utf-8")

        def fail_dump(*args, **kwargs):
            raise OSError("disk full")

        monkeypatch.setattr(json, "dump", fail_dump)
        with pytest.raises(OSError, match="disk full"):
            store.set("http://b", "2")
        with pytest.raises(OSError, match="disk full"):
            store.clear()

        assert path.read_text(encoding="utf-8") == before
        assert store.keys() == ["http://a"]
        assert store.get("http://b") is None
        assert [p.name for p in tmp_path.iterdir()] == ["store.json"]

    def test_json_rejects_non_object_file(self, tmp_path):
        path = tmp_path / "store.json"
        path.write_text('["a"]')
        with pytest.raises(ValueError, match="must hold a JSON object"):
            JsonFileKeyValueStore(path)

    def test_sqlite_reopen(self, tmp_path):
        path = tmp_path / "nested" / "store.db"
        first = SQLiteKeyValueStore(path)
        first.set("b", "2")
        first.set("a", "1")

        second = SQLiteKeyValueStore(path)
        assert second.keys() == ["b", "a"]
        assert second.get("a") == "1"

    def test_memory_initial(self):
        store = MemoryKeyValueStore({"a": "1"})
        assert store.get("a") == "1"


class TestRegistry:
    """Tests for the backend registry."""

    def test_list_backends(self):
        assert {"memory", "json", "sqlite"} <= set(list_backends())

    def test_get_backend(self):
        assert get_backend("memory") is MemoryKeyValueStore
        assert get_backend("sqlite") is SQLiteKeyValueStore

    def test_unknown_backend(self):
        with pytest.raises(ValueError, match="Unknown backend"):
            get_backend("redis")

    def test_create_backend(self, tmp_path):
        backend = create_backend("json", path=tmp_path / "s.json")
        assert isinstance(backend, JsonFileKeyValueStore)
        assert isinstance(backend, KeyValueStore)

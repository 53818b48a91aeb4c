"""
Shared pytest fixtures for triplestore tests.

Provides fixtures for:
- Backing stores of every registered kind
- Triplestore instances with and without a write log
- Sample triples
"""

from pathlib import Path
from typing import List, Tuple

import pytest

from triplestore.core.backends import (
    JsonFileKeyValueStore,
    KeyValueStore,
    MemoryKeyValueStore,
    SQLiteKeyValueStore,
)
from triplestore.core.observability import ObservabilityLogger
from triplestore.core.store import Triplestore


def _make_backend(kind: str, tmp_path: Path) -> KeyValueStore:
    if kind == "memory":
        return MemoryKeyValueStore()
    if kind == "json":
        return JsonFileKeyValueStore(tmp_path / "store.json")
    return SQLiteKeyValueStore(tmp_path / "store.db")


@pytest.fixture(params=["memory", "json", "sqlite"])
def backend(request, tmp_path: Path) -> KeyValueStore:
    """Backing store, parametrized over every backend kind."""
    return _make_backend(request.param, tmp_path)


@pytest.fixture
def store(backend: KeyValueStore) -> Triplestore:
    """Triplestore over each backend kind."""
    return Triplestore(backend)


@pytest.fixture
def memory_store() -> Triplestore:
    """Triplestore over an in-memory backend."""
    return Triplestore(MemoryKeyValueStore())


@pytest.fixture
def logger(tmp_path: Path) -> ObservabilityLogger:
    """Write log in a temp directory."""
    return ObservabilityLogger(tmp_path / "logs.db")


@pytest.fixture
def logged_store(logger: ObservabilityLogger) -> Triplestore:
    """In-memory Triplestore recording mutations to a write log."""
    return Triplestore(MemoryKeyValueStore(), logger=logger)


@pytest.fixture
def sample_triples() -> List[Tuple[str, str, str]]:
    """A small social graph."""
    return [
        ("http://a", "http://name", "Alice"),
        ("http://a", "http://age", "30"),
        ("http://b", "http://name", "Bob"),
        ("http://c", "http://knows", "http://a"),
    ]


@pytest.fixture
def populated_store(store: Triplestore, sample_triples) -> Triplestore:
    """Triplestore (each backend kind) preloaded with sample_triples."""
    for triple in sample_triples:
        store.push(*triple)
    return store

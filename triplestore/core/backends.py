"""
Key-value backends for the triple store.

The engine only talks to the KeyValueStore interface: a synchronous,
string-keyed, string-valued map that can be enumerated by index or by
key snapshot. Backends:
- MemoryKeyValueStore: dict in process memory (not durable)
- JsonFileKeyValueStore: a single JSON object file
- SQLiteKeyValueStore: one table in an SQLite database

Backends are registered by name so configuration can pick one.
"""

import json
import os
import sqlite3
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Dict, List, Optional


class KeyValueStore(ABC):
    """Abstract synchronous key-value store.

    Enumeration order (key(i) and keys()) is the order keys were first
    set. Overwriting a key does not move it.
    """

    @abstractmethod
    def get(self, key: str) -> Optional[str]:
        """Return the value stored under key, or None."""
        pass

    @abstractmethod
    def set(self, key: str, value: str) -> None:
        """Store value under key, replacing any previous value."""
        pass

    @abstractmethod
    def remove(self, key: str) -> None:
        """Delete key. Missing keys are ignored."""
        pass

    @abstractmethod
    def clear(self) -> None:
        """Delete every key."""
        pass

    @abstractmethod
    def keys(self) -> List[str]:
        """Snapshot of all keys in enumeration order."""
        pass

    @abstractmethod
    def __len__(self) -> int:
        pass

    def key(self, index: int) -> Optional[str]:
        """Return the key at position index, or None when out of range."""
        if index < 0:
            return None
        keys = self.keys()
        if index >= len(keys):
            return None
        return keys[index]

    def __contains__(self, key: str) -> bool:
        return self.get(key) is not None


# Backend registry for loading by name
_BACKEND_REGISTRY: Dict[str, type] = {}


def register_backend(name: str):
    """Decorator to register a backend class."""
    def decorator(cls):
        _BACKEND_REGISTRY[name] = cls
        return cls
    return decorator


def get_backend(name: str) -> type:
    """Get a backend class by name."""
    if name not in _BACKEND_REGISTRY:
        raise ValueError(f"Unknown backend: {name}. Available: {list(_BACKEND_REGISTRY.keys())}")
    return _BACKEND_REGISTRY[name]


def list_backends() -> List[str]:
    """List available backend names."""
    return list(_BACKEND_REGISTRY.keys())


def create_backend(name: str, **kwargs) -> KeyValueStore:
    """Instantiate a backend by name.

    Args:
        name: Registered backend name ("memory", "json", "sqlite")
        **kwargs: Arguments passed to the backend constructor

    Returns:
        KeyValueStore instance
    """
    return get_backend(name)(**kwargs)


@register_backend("memory")
class MemoryKeyValueStore(KeyValueStore):
    """Dict-backed store. Contents vanish with the process."""

    def __init__(self, initial: Optional[Dict[str, str]] = None):
        self._data: Dict[str, str] = dict(initial or {})

    def get(self, key: str) -> Optional[str]:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value

    def remove(self, key: str) -> None:
        self._data.pop(key, None)

    def clear(self) -> None:
        self._data.clear()

    def keys(self) -> List[str]:
        return list(self._data)

    def __len__(self) -> int:
        return len(self._data)


@register_backend("json")
class JsonFileKeyValueStore(KeyValueStore):
    """Store persisted as one UTF-8 JSON object file.

    The file is read once on open and rewritten on every mutation. Writes
    go to a sibling temp file that replaces the store file, so a failed
    write leaves both the file and the in-memory view unchanged.
    """

    def __init__(self, path: Path):
        """Open (or create) the store file.

        Args:
            path: Path to the JSON file

        Raises:
            ValueError: If the file does not hold a JSON object
        """
        self.path = Path(path)
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self._data: Dict[str, str] = {}
        if self.path.exists():
            with open(self.path, encoding="utf-8") as f:
                content = f.read()
            if content.strip():
                data = json.loads(content)
                if not isinstance(data, dict):
                    raise ValueError(
                        f"Store file {self.path} must hold a JSON object, got {type(data).__name__}"
                    )
                self._data = data

    def _flush(self, data: Dict[str, str]) -> None:
        tmp_path = self.path.with_name(self.path.name + ".tmp")
        try:
            with open(tmp_path, "w", encoding="utf-8") as f:
                json.dump(data, f, indent=2, ensure_ascii=False)
                f.write("\n")
            os.replace(tmp_path, self.path)
        except BaseException:
            tmp_path.unlink(missing_ok=True)
            raise
        self._data = data

    def get(self, key: str) -> Optional[str]:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._flush({**self._data, key: value})

    def remove(self, key: str) -> None:
        if key in self._data:
            self._flush({k: v for k, v in self._data.items() if k != key})

    def clear(self) -> None:
        self._flush({})

    def keys(self) -> List[str]:
        return list(self._data)

    def __len__(self) -> int:
        return len(self._data)


@register_backend("sqlite")
class SQLiteKeyValueStore(KeyValueStore):
    """Store persisted in an SQLite table.

    Each call opens its own connection and commits before returning.
    """

    def __init__(self, path: Path):
        """Open (or create) the database.

        Args:
            path: Path to SQLite database file
        """
        self.db_path = Path(path)
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        self._init_db()

    def _init_db(self) -> None:
        """Create tables if they don't exist."""
        with sqlite3.connect(self.db_path) as conn:
            conn.executescript("""
                CREATE TABLE IF NOT EXISTS items (
                    key TEXT PRIMARY KEY,
                    value TEXT NOT NULL
                );
            """)

    def get(self, key: str) -> Optional[str]:
        with sqlite3.connect(self.db_path) as conn:
            row = conn.execute("SELECT value FROM items WHERE key = ?", (key,)).fetchone()
        return row[0] if row else None

    def set(self, key: str, value: str) -> None:
        # Upsert keeps the rowid, so enumeration order survives overwrites
        with sqlite3.connect(self.db_path) as conn:
            conn.execute(
                """
                INSERT INTO items (key, value) VALUES (?, ?)
                ON CONFLICT(key) DO UPDATE SET value = excluded.value
                """,
                (key, value),
            )

    def remove(self, key: str) -> None:
        with sqlite3.connect(self.db_path) as conn:
            conn.execute("DELETE FROM items WHERE key = ?", (key,))

    def clear(self) -> None:
        with sqlite3.connect(self.db_path) as conn:
            conn.execute("DELETE FROM items")

    def keys(self) -> List[str]:
        with sqlite3.connect(self.db_path) as conn:
            return [row[0] for row in conn.execute("SELECT key FROM items ORDER BY rowid")]

    def key(self, index: int) -> Optional[str]:
        if index < 0:
            return None
        with sqlite3.connect(self.db_path) as conn:
            row = conn.execute(
                "SELECT key FROM items ORDER BY rowid LIMIT 1 OFFSET ?", (index,)
            ).fetchone()
        return row[0] if row else None

    def __len__(self) -> int:
        with sqlite3.connect(self.db_path) as conn:
            return conn.execute("SELECT COUNT(*) FROM items").fetchone()[0]

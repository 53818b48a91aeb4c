"""
triplestore - Subject/property/object facts over a key-value store

Record and query RDF-like triples on top of any synchronous, string-keyed
key-value store. Compact identifiers (CURIEs such as "foaf:name") expand
to full IRIs through a per-store prefix mapping.

Core components:
- Triplestore: push/remove triples and query subjects, properties, values
- resolve: CURIE expansion against a prefix mapping
- KeyValueStore: backing store interface, with memory, JSON file, and
  SQLite backends
- ObservabilityLogger: Session-based log of mutations
"""

__version__ = "0.1.0"

from triplestore.core.backends import (
    KeyValueStore,
    MemoryKeyValueStore,
    JsonFileKeyValueStore,
    SQLiteKeyValueStore,
    register_backend,
    get_backend,
    list_backends,
    create_backend,
)
from triplestore.core.config import TriplestoreConfig, load_config, open_store
from triplestore.core.curie import is_absolute, resolve
from triplestore.core.errors import (
    TriplestoreError,
    RecordNotFoundError,
    NotFoundError,
    MalformedRecordError,
)
from triplestore.core.observability import ObservabilityLogger, LogEntry
from triplestore.core.store import Triplestore

__all__ = [
    # Engine
    "Triplestore",
    "resolve",
    "is_absolute",
    # Backends
    "KeyValueStore",
    "MemoryKeyValueStore",
    "JsonFileKeyValueStore",
    "SQLiteKeyValueStore",
    "register_backend",
    "get_backend",
    "list_backends",
    "create_backend",
    # Config
    "TriplestoreConfig",
    "load_config",
    "open_store",
    # Errors
    "TriplestoreError",
    "RecordNotFoundError",
    "NotFoundError",
    "MalformedRecordError",
    # Observability
    "ObservabilityLogger",
    "LogEntry",
]

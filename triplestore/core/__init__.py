"""Core abstractions for triplestore."""

from triplestore.core.backends import KeyValueStore, create_backend
from triplestore.core.curie import is_absolute, resolve, set_mapping
from triplestore.core.errors import (
    TriplestoreError,
    RecordNotFoundError,
    NotFoundError,
    MalformedRecordError,
)
from triplestore.core.observability import ObservabilityLogger, LogEntry
from triplestore.core.records import deserialize_record, serialize_record
from triplestore.core.store import Triplestore

__all__ = [
    # Resolver
    "resolve",
    "is_absolute",
    "set_mapping",
    # Storage
    "KeyValueStore",
    "create_backend",
    "serialize_record",
    "deserialize_record",
    # Engine
    "Triplestore",
    # Errors
    "TriplestoreError",
    "RecordNotFoundError",
    "NotFoundError",
    "MalformedRecordError",
    # Observability
    "ObservabilityLogger",
    "LogEntry",
]

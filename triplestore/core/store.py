"""
Triplestore - subject/property/object facts over a key-value store.

Each subject is one key in the backing store; its value is a JSON object
mapping property IRIs to a single object value. Every identifier passed
in is first expanded through the instance's prefix mapping.
"""

from typing import Dict, List, Optional, TextIO

import click

from triplestore.core.backends import KeyValueStore
from triplestore.core.curie import resolve, set_mapping
from triplestore.core.errors import NotFoundError
from triplestore.core.observability import ObservabilityLogger
from triplestore.core.records import deserialize_record, serialize_record

# Key/field used when a subject or property resolves to nothing
NULL_KEY = "null"


def _storage_key(identifier: Optional[str]) -> str:
    return NULL_KEY if identifier is None else identifier


class Triplestore:
    """Triple store backed by a KeyValueStore.

    The model is functional: a subject holds at most one object per
    property, and pushing again overwrites. Removing the last property
    of a subject leaves an empty record behind; only remove(subject)
    deletes the subject itself.

    Example:
        st = Triplestore(MemoryKeyValueStore())
        st.set_mapping("foaf", "http://xmlns.com/foaf/0.1/")
        st.push("http://sample.org/bob", "foaf:name", "Bob")
        st.get_values("http://sample.org/bob", "foaf:name")  # ["Bob"]
    """

    def __init__(
        self,
        backend: KeyValueStore,
        prefix_mapping: Optional[Dict[str, str]] = None,
        logger: Optional[ObservabilityLogger] = None,
    ):
        """Initialize the store.

        Args:
            backend: Key-value store holding the subject records (not owned)
            prefix_mapping: Initial prefix bindings (copied)
            logger: Optional write log for successful mutations
        """
        self.backend = backend
        self.logger = logger
        self._prefix_mapping: Dict[str, str] = dict(prefix_mapping or {})

    @property
    def prefix_mapping(self) -> Dict[str, str]:
        """Copy of the current prefix bindings."""
        return dict(self._prefix_mapping)

    def resolve(self, token: Optional[str]) -> Optional[str]:
        """Expand token against this store's prefix mapping."""
        return resolve(self._prefix_mapping, token)

    def set_mapping(self, prefix: str, iri: str) -> None:
        """Bind a prefix for CURIE expansion.

        Example:
            st.set_mapping("foaf", "http://xmlns.com/foaf/0.1/")
        """
        set_mapping(self._prefix_mapping, prefix, iri)
        if self.logger:
            self.logger.log_mapping(prefix, iri)

    def _read(self, subject: str) -> Dict[str, str]:
        return deserialize_record(self.backend.get(subject), subject)

    def _write(self, subject: str, record: Dict[str, str]) -> None:
        self.backend.set(subject, serialize_record(record))

    # Queries

    def get_subjects(self, property: Optional[str] = None, value: Optional[str] = None) -> List[str]:
        """List subjects, optionally filtered by property and value.

        Args:
            property: Only subjects that have this property
            value: Only subjects whose property (or, with no property given,
                any property) has this value

        Returns:
            Subject IRIs in store order

        Example:
            st.get_subjects("foaf:name", "Bob")
        """
        property = self.resolve(property)
        value = self.resolve(value)

        subjects = []
        for subject in self.backend.keys():
            record = self._read(subject)

            if property:
                if value:
                    if record.get(property) == value:
                        subjects.append(subject)
                elif record.get(property):
                    subjects.append(subject)
            elif value:
                for obj in record.values():
                    if obj == value:
                        subjects.append(subject)
                        break
            else:
                # Every persisted record counts, including emptied ones
                subjects.append(subject)

        return subjects

    def get_properties(self, subject: Optional[str] = None) -> List[str]:
        """List properties of one subject, or of every subject.

        Args:
            subject: Subject to inspect; omit for the union over the store

        Returns:
            Property IRIs. For the union, first-occurrence order.

        Raises:
            RecordNotFoundError: If subject is given but has no record
        """
        if subject:
            subject = self.resolve(subject)
            return list(self._read(subject))

        seen: Dict[str, None] = {}
        for key in self.backend.keys():
            for prop in self._read(key):
                seen.setdefault(prop, None)
        return list(seen)

    def get_values(self, subject: Optional[str] = None, property: Optional[str] = None) -> List[str]:
        """List object values, optionally restricted to a subject and/or property.

        Subjects without a record, and subjects lacking the property, are
        skipped. Values are not deduplicated.

        Example:
            st.get_values("http://sample.org/bob", "foaf:name")
        """
        subject = self.resolve(subject)
        property = self.resolve(property)

        subjects = [subject] if subject else self.backend.keys()

        values = []
        for subj in subjects:
            raw = self.backend.get(subj)
            if not raw:
                continue
            record = deserialize_record(raw, subj)

            if property:
                if record.get(property):
                    values.append(record[property])
            else:
                values.extend(record.values())

        return values

    # Mutations

    def push(self, subject: str, property: str, object: str) -> None:
        """Store a triple, replacing any previous object for the property.

        Example:
            st.push("http://sample.org/bob", "foaf:name", "Bob")
        """
        subject = _storage_key(self.resolve(subject))
        property = _storage_key(self.resolve(property))
        object = self.resolve(object)

        raw = self.backend.get(subject)
        record = deserialize_record(raw, subject) if raw else {}
        record[property] = object
        self._write(subject, record)

        if self.logger:
            self.logger.log_push(subject, property, object)

    def remove(self, subject: Optional[str] = None, property: Optional[str] = None) -> None:
        """Remove a property, a subject, a property everywhere, or everything.

        - subject and property: drop the property from that subject
        - subject only: drop the subject
        - property only: drop the property from every subject
        - neither: clear the store

        Records emptied by a property removal are kept.

        Raises:
            NotFoundError: If subject and property are given and the
                subject has no record
        """
        subject = self.resolve(subject)
        property = self.resolve(property)

        if subject:
            if property:
                raw = self.backend.get(subject)
                if not raw:
                    raise NotFoundError(subject, property)
                record = deserialize_record(raw, subject)
                record.pop(property, None)
                self._write(subject, record)
                if self.logger:
                    self.logger.log_remove(subject, property, "property")
            else:
                self.backend.remove(subject)
                if self.logger:
                    self.logger.log_remove(subject, None, "subject")
        elif property:
            affected = 0
            for key in self.backend.keys():
                record = self._read(key)
                if record.get(property):
                    del record[property]
                    self._write(key, record)
                    affected += 1
            if self.logger:
                self.logger.log_remove(None, property, "property_sweep", affected)
        else:
            removed = len(self.backend)
            self.backend.clear()
            if self.logger:
                self.logger.log_clear(removed)

    # Diagnostics

    def show(self, file: Optional[TextIO] = None) -> None:
        """Print every stored record as "subject:record", one per line."""
        for i in range(len(self.backend)):
            subject = self.backend.key(i)
            click.echo(f"{subject}:{self.backend.get(subject)}", file=file)

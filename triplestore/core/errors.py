"""Exception types raised by the triple store engine."""

from typing import Optional


class TriplestoreError(Exception):
    """Base class for triple store errors."""


class RecordNotFoundError(TriplestoreError, KeyError):
    """No record is persisted for a subject."""

    def __init__(self, subject: Optional[str]):
        self.subject = subject
        super().__init__(f"No record for subject: {subject}")

    def __str__(self) -> str:
        # KeyError.__str__ would repr() the message
        return self.args[0]


class NotFoundError(TriplestoreError, KeyError):
    """A subject/property pair targeted by remove() does not exist."""

    def __init__(self, subject: Optional[str], property: Optional[str]):
        self.subject = subject
        self.property = property
        super().__init__(f"Not found {subject}:{property}")

    def __str__(self) -> str:
        return self.args[0]


class MalformedRecordError(TriplestoreError, ValueError):
    """A stored value does not decode to a property mapping."""

    def __init__(self, subject: Optional[str], raw: str, reason: str = ""):
        self.subject = subject
        self.raw = raw
        message = f"Malformed record for subject: {subject}"
        if reason:
            message = f"{message} ({reason})"
        super().__init__(message)

"""
Subject record codec.

A subject record maps property IRIs to a single object value and is
persisted as one compact JSON object per subject.
"""

import json
from typing import Dict, Optional

from triplestore.core.errors import MalformedRecordError, RecordNotFoundError


def serialize_record(record: Dict[str, str]) -> str:
    """Encode a record as a compact JSON object string."""
    return json.dumps(record, ensure_ascii=False, separators=(",", ":"))


def deserialize_record(raw: Optional[str], subject: Optional[str] = None) -> Dict[str, str]:
    """Decode a stored record.

    Args:
        raw: Serialized record as read from the backing store
        subject: Subject the record belongs to (used in error messages)

    Returns:
        Property -> object mapping, in stored order

    Raises:
        RecordNotFoundError: If raw is None (nothing stored for subject)
        MalformedRecordError: If raw is not a JSON object
    """
    if raw is None:
        raise RecordNotFoundError(subject)

    try:
        record = json.loads(raw)
    except json.JSONDecodeError as e:
        raise MalformedRecordError(subject, raw, str(e)) from e

    if not isinstance(record, dict):
        raise MalformedRecordError(subject, raw, f"expected object, got {type(record).__name__}")

    return record

"""
Identifier resolution for compact URIs (CURIEs).

Tokens come in three shapes:
- absolute IRIs, anything containing "://", returned as-is
- CURIEs, "prefix:local", expanded against a prefix mapping
- everything else, returned as-is

Resolution never fails. An unknown prefix leaves the token untouched.
"""

from typing import Dict, Optional

ABSOLUTE_MARKER = "://"


def is_absolute(token: str) -> bool:
    """Return True if token looks like an absolute IRI (contains "://")."""
    return ABSOLUTE_MARKER in token


def resolve(mapping: Dict[str, str], token: Optional[str]) -> Optional[str]:
    """Expand a CURIE against a prefix mapping.

    Args:
        mapping: Prefix -> IRI-prefix bindings
        token: CURIE, absolute IRI, bare token, or None

    Returns:
        The expanded IRI, the token unchanged when no expansion applies,
        or None when token is None or empty.

    Examples:
        >>> resolve({"foaf": "http://xmlns.com/foaf/0.1/"}, "foaf:name")
        'http://xmlns.com/foaf/0.1/name'
        >>> resolve({"http": "urn:"}, "http://example.org/x")
        'http://example.org/x'
    """
    if not token:
        return None
    if is_absolute(token):
        return token

    prefix, sep, local = token.partition(":")
    if not sep:
        return token

    iri = mapping.get(prefix)
    if iri:
        return iri + local
    return token


def set_mapping(mapping: Dict[str, str], prefix: str, iri: str) -> None:
    """Bind (or rebind) prefix to iri in mapping."""
    mapping[prefix] = iri

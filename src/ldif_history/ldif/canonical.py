"""
Canonical identity and creation time of LDIF entries.

The canonical identity is what decides an entry's file name, so it must be
stable across runs and insensitive to cosmetic differences in the export:
- Each DN component is split on its first '='
- Key and value are trimmed and lower-cased
- Components are rejoined with ',' in their original order
"""

from ..core.models import CanonicalEntry, EntryRecord, SENTINEL_TIMESTAMP
from .parser import find_value, parse_entry


DEFAULT_UNIQUE_KEY = "dn"
DEFAULT_CREATION_TIME = "createTimestamp"


def canonicalize_dn(value: str) -> str:
    """
    Canonicalize a hierarchical unique key such as a DN.
    
    Args:
        value: Raw unique-key value, e.g. "CN=Jane Doe , dc=Example,DC=org"
        
    Returns:
        Canonical form, e.g. "cn=jane doe,dc=example,dc=org"
    """
    if not value:
        return ""

    components = []
    for component in value.split(","):
        key, sep, rest = component.partition("=")
        if sep:
            components.append(f"{key.strip().lower()}={rest.strip().lower()}")
        else:
            components.append(component.strip().lower())
    return ",".join(components)


def canonicalize_timestamp(value: str) -> str:
    """Return the trimmed creation time, or the sentinel if it is empty."""
    if value is None:
        return SENTINEL_TIMESTAMP
    value = value.strip()
    return value or SENTINEL_TIMESTAMP


def canonicalize_entry(
    record: EntryRecord,
    unique_key: str = DEFAULT_UNIQUE_KEY,
    creation_time: str = DEFAULT_CREATION_TIME,
) -> CanonicalEntry:
    """
    Extract the canonical identity and creation time of one entry.
    
    A missing unique key yields an empty identity and a missing creation
    time yields the sentinel timestamp; neither is an error.
    
    Args:
        record: The entry to canonicalize
        unique_key: Name of the unique-key attribute (case-insensitive)
        creation_time: Name of the creation-time attribute (case-insensitive)
        
    Returns:
        CanonicalEntry for the record
    """
    attributes = parse_entry(record.text)
    identity = canonicalize_dn(find_value(attributes, unique_key) or "")
    timestamp = canonicalize_timestamp(find_value(attributes, creation_time))
    return CanonicalEntry(identity=identity, timestamp=timestamp)

"""
Data models for the backup pipeline.

An EntryRecord is the raw text of one directory entry as it appeared in the
export. Canonicalization turns it into a CanonicalEntry, and naming pairs it
with the file it will be stored in (NamedRecord).
"""

from dataclasses import dataclass
from typing import Any, Dict


# Creation time used for entries without a creation-time attribute.
# Sorts before every real YYYYMMDDHHMMSSZ value.
SENTINEL_TIMESTAMP = "00000000000000Z"


@dataclass(frozen=True)
class EntryRecord:
    """
    Raw text of one directory entry.
    
    Attributes:
        text: Entry text exactly as exported, ending in a single newline
        position: Zero-based position of the entry in the export
    """
    text: str
    position: int = 0

    def __str__(self) -> str:
        return self.text


@dataclass(frozen=True)
class CanonicalEntry:
    """
    Normalized identity and creation time of one entry.
    
    Attributes:
        identity: Canonical unique key (lower-cased, trimmed DN); empty if absent
        timestamp: Creation time as YYYYMMDDHHMMSSZ, or the sentinel
    """
    identity: str
    timestamp: str = SENTINEL_TIMESTAMP

    @property
    def has_identity(self) -> bool:
        return bool(self.identity)


@dataclass(frozen=True)
class NamedRecord:
    """An entry paired with the snapshot file name it is written to."""
    record: EntryRecord
    canonical: CanonicalEntry
    filename: str

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            "filename": self.filename,
            "identity": self.canonical.identity,
            "timestamp": self.canonical.timestamp,
            "position": self.record.position,
        }

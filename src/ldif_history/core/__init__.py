"""
Core subpackage for ldif-history.

Contains data models, exceptions, and logging utilities.
"""

from .models import EntryRecord, CanonicalEntry, NamedRecord, SENTINEL_TIMESTAMP
from .exceptions import (
    BackupError,
    ExportCommandError,
    QuiescenceError,
    SnapshotWriteError,
    VersionControlError,
    ConfigError,
)

__all__ = [
    # Models
    "EntryRecord",
    "CanonicalEntry",
    "NamedRecord",
    "SENTINEL_TIMESTAMP",
    # Exceptions
    "BackupError",
    "ExportCommandError",
    "QuiescenceError",
    "SnapshotWriteError",
    "VersionControlError",
    "ConfigError",
]

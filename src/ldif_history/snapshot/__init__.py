"""
Snapshot module: the git-tracked directory of per-entry .ldif files.

This module provides:
- FilenameRegistry: run-scoped, collision-safe entry file names
- GitRepository: init/remove/add/commit on the snapshot directory
- SnapshotSynchronizer: full replace of the tracked entry files
- CommitComposer: one commit per run, dated from a string or a file
"""

from .naming import FilenameRegistry, identity_digest, LDIF_SUFFIX
from .git_repo import VersionControl, GitRepository
from .sync_engine import SnapshotSynchronizer, SyncReport
from .commit import CommitComposer, resolve_commit_date

__all__ = [
    "FilenameRegistry",
    "identity_digest",
    "LDIF_SUFFIX",
    "VersionControl",
    "GitRepository",
    "SnapshotSynchronizer",
    "SyncReport",
    "CommitComposer",
    "resolve_commit_date",
]

"""
Snapshot synchronizer.

Replaces every tracked .ldif file in the snapshot directory with the files
of the current run: all existing entry files are removed, the new ones are
written and added. Unchanged entries end up with the same name and content,
so version control records only real additions, removals and changes.
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Iterable, List

from ..core.exceptions import SnapshotWriteError
from ..core.models import NamedRecord
from .git_repo import VersionControl
from .naming import LDIF_SUFFIX


logger = logging.getLogger(__name__)


@dataclass
class SyncReport:
    """Result of one synchronization of the snapshot directory."""
    snapshot_dir: str
    removed: List[str] = field(default_factory=list)
    written: List[str] = field(default_factory=list)

    @property
    def removed_count(self) -> int:
        return len(self.removed)

    @property
    def written_count(self) -> int:
        return len(self.written)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            "snapshot_dir": self.snapshot_dir,
            "removed": self.removed_count,
            "written": self.written_count,
        }


class SnapshotSynchronizer:
    """
    Writes the entry files of a run into the snapshot directory.
    """

    def __init__(self, snapshot_dir: Path, vcs: VersionControl):
        """
        Initialize the synchronizer.

        Args:
            snapshot_dir: Working tree holding the .ldif files
            vcs: Version control for the working tree
        """
        self.snapshot_dir = Path(snapshot_dir)
        self.vcs = vcs

    def existing_files(self) -> List[Path]:
        """Entry files currently in the snapshot directory, sorted by name."""
        if not self.snapshot_dir.exists():
            return []
        return sorted(
            p for p in self.snapshot_dir.iterdir()
            if p.is_file() and p.name.endswith(LDIF_SUFFIX)
        )

    def synchronize(self, named_records: Iterable[NamedRecord]) -> SyncReport:
        """
        Replace the snapshot's entry files with the given records.

        Args:
            named_records: Records with their target file names

        Returns:
            SyncReport listing removed and written files

        Raises:
            SnapshotWriteError: If a file cannot be written; files written
                before the failure stay on disk
        """
        report = SyncReport(snapshot_dir=str(self.snapshot_dir))

        for path in self.existing_files():
            self.vcs.remove(path)
            report.removed.append(path.name)
        logger.debug(f"Removed {report.removed_count} entry files from {self.snapshot_dir}")

        written_paths = []
        for named in named_records:
            path = self.snapshot_dir / named.filename
            self._write(path, named.record.text)
            written_paths.append(path)
            report.written.append(named.filename)

        for path in written_paths:
            self.vcs.add(path)

        logger.info(
            f"Synchronized {self.snapshot_dir}: "
            f"{report.removed_count} removed, {report.written_count} written"
        )
        return report

    def _write(self, path: Path, text: str) -> None:
        try:
            with open(path, "w", encoding="utf-8", errors="surrogateescape", newline="") as f:
                f.write(text)
        except OSError as e:
            raise SnapshotWriteError(f"Could not write {path}: {e}", path=str(path)) from e

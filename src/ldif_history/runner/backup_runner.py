"""
Main execution runner for the backup pipeline.
"""

import logging
import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List, Optional

from ..core.logging import RunLoggerAdapter
from ..core.models import NamedRecord, SENTINEL_TIMESTAMP
from ..export.reader import QuiescenceReader
from ..ldif.canonical import DEFAULT_CREATION_TIME, DEFAULT_UNIQUE_KEY, canonicalize_entry
from ..snapshot.commit import CommitComposer
from ..snapshot.git_repo import VersionControl
from ..snapshot.naming import FilenameRegistry
from ..snapshot.sync_engine import SnapshotSynchronizer, SyncReport


logger = logging.getLogger(__name__)


@dataclass
class RunSettings:
    """
    Per-run options.

    Attributes:
        commit_message: Message for the snapshot commit
        commit_date: Date string or path whose mtime becomes the commit date
        unique_key: Name of the unique-key attribute
        creation_time: Name of the creation-time attribute
        gc: Run repository housekeeping after committing
        dry_run: Stop after naming; do not touch the snapshot directory
    """
    commit_message: str = "LDAP backup"
    commit_date: Optional[str] = None
    unique_key: str = DEFAULT_UNIQUE_KEY
    creation_time: str = DEFAULT_CREATION_TIME
    gc: bool = False
    dry_run: bool = False


@dataclass
class RunReport:
    """Report of a backup run."""
    run_id: str
    snapshot_dir: str
    dry_run: bool
    started_at: datetime
    completed_at: Optional[datetime] = None
    read_attempts: int = 0
    entry_count: int = 0
    missing_identity: int = 0
    missing_timestamp: int = 0
    collisions: int = 0
    files: List[str] = field(default_factory=list)
    sync: Optional[SyncReport] = None
    revision: Optional[str] = None

    @property
    def committed(self) -> bool:
        return self.revision is not None

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            "run_id": self.run_id,
            "snapshot_dir": self.snapshot_dir,
            "dry_run": self.dry_run,
            "started_at": self.started_at.isoformat() if self.started_at else None,
            "completed_at": self.completed_at.isoformat() if self.completed_at else None,
            "read_attempts": self.read_attempts,
            "entry_count": self.entry_count,
            "missing_identity": self.missing_identity,
            "missing_timestamp": self.missing_timestamp,
            "collisions": self.collisions,
            "files": self.files,
            "sync": self.sync.to_dict() if self.sync else None,
            "revision": self.revision,
        }

    def summary(self) -> str:
        """Get a human-readable summary."""
        lines = [
            f"Backup Run {self.run_id}",
            f"  Snapshot: {self.snapshot_dir}",
            f"  Dry run: {self.dry_run}",
        ]
        if self.completed_at:
            lines.append(f"  Duration: {(self.completed_at - self.started_at).total_seconds():.1f}s")
        lines.extend([
            "",
            f"  Reads: {self.read_attempts}",
            f"  Entries: {self.entry_count}",
            f"    Without unique key: {self.missing_identity}",
            f"    Without creation time: {self.missing_timestamp}",
            f"    Name collisions: {self.collisions}",
        ])
        if self.sync:
            lines.extend([
                "",
                f"  Files removed: {self.sync.removed_count}",
                f"  Files written: {self.sync.written_count}",
            ])
        if not self.dry_run:
            lines.append(f"  Revision: {self.revision or 'none (no changes)'}")
        return "\n".join(lines)


class BackupRunner:
    """
    Orchestrates one backup run.

    Manages the workflow:
    1. Read the export until it settles
    2. Canonicalize each entry
    3. Name each entry with a run-scoped registry
    4. Synchronize the snapshot directory
    5. Commit (and optionally gc)

    Any error aborts the run; nothing is committed in that case.
    """

    def __init__(
        self,
        reader: QuiescenceReader,
        vcs: VersionControl,
        snapshot_dir: Path,
        settings: Optional[RunSettings] = None,
    ):
        """
        Initialize the backup runner.

        Args:
            reader: Quiescence reader over the export source
            vcs: Version control for the snapshot directory
            snapshot_dir: Directory holding the .ldif files
            settings: Run options (defaults if omitted)
        """
        self.reader = reader
        self.vcs = vcs
        self.snapshot_dir = Path(snapshot_dir)
        self.settings = settings or RunSettings()

    def name_records(self, records, registry: FilenameRegistry) -> List[NamedRecord]:
        """Canonicalize and name records in export order."""
        named = []
        for record in records:
            canonical = canonicalize_entry(
                record,
                unique_key=self.settings.unique_key,
                creation_time=self.settings.creation_time,
            )
            named.append(NamedRecord(
                record=record,
                canonical=canonical,
                filename=registry.filename_for(canonical),
            ))
        return named

    def run(self, run_id: Optional[str] = None) -> RunReport:
        """
        Run the backup pipeline.

        Args:
            run_id: Optional run identifier

        Returns:
            RunReport describing the run
        """
        if run_id is None:
            run_id = uuid.uuid4().hex[:12]
        log = RunLoggerAdapter(logger, run_id=run_id, snapshot_dir=str(self.snapshot_dir))

        report = RunReport(
            run_id=run_id,
            snapshot_dir=str(self.snapshot_dir),
            dry_run=self.settings.dry_run,
            started_at=datetime.now(timezone.utc),
        )
        log.info(f"Starting backup run into {self.snapshot_dir}")

        records = self.reader.read_records()
        report.read_attempts = self.reader.attempts
        report.entry_count = len(records)

        registry = FilenameRegistry()
        named = self.name_records(records, registry)
        report.files = [n.filename for n in named]
        report.collisions = registry.collisions()
        report.missing_identity = sum(1 for n in named if not n.canonical.has_identity)
        report.missing_timestamp = sum(
            1 for n in named if n.canonical.timestamp == SENTINEL_TIMESTAMP
        )

        if report.missing_identity:
            log.warning(f"{report.missing_identity} entries have no '{self.settings.unique_key}' attribute")

        if self.settings.dry_run:
            log.info(f"Dry run: {len(named)} entries named, snapshot left untouched")
            report.completed_at = datetime.now(timezone.utc)
            return report

        self.vcs.init()
        synchronizer = SnapshotSynchronizer(self.snapshot_dir, self.vcs)
        report.sync = synchronizer.synchronize(named)

        composer = CommitComposer(self.vcs)
        report.revision = composer.commit(self.settings.commit_message, self.settings.commit_date)

        if self.settings.gc:
            self.vcs.gc()

        report.completed_at = datetime.now(timezone.utc)
        log.info(f"Backup run finished: {report.entry_count} entries, revision {report.revision}")
        return report

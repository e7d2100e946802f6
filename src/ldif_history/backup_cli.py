#!/usr/bin/env python3
"""
CLI for backing up an LDAP directory into a git repository.

Usage:
    ldif-history --backup-dir /var/backups/ldap
    ldif-history --backup-dir /var/backups/ldap --ldif-cmd "slapcat -n 1" --gc
    ldif-history --config config/ldif-history.yaml --commit-date /var/backups/dump.ldif
    ldif-history --backup-dir /var/backups/ldap --ldif-cmd "cat dump.ldif" --dry-run --json
"""

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import List, Optional

from dotenv import find_dotenv, load_dotenv

from .config import BackupConfig
from .core.exceptions import BackupError, ConfigError
from .core.logging import configure_logging
from .export.reader import CommandExportSource, QuiescenceReader
from .runner.backup_runner import BackupRunner, RunSettings
from .snapshot.git_repo import GitRepository


logger = logging.getLogger(__name__)


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        prog="ldif-history",
        description="Back up an LDAP directory into git, one .ldif file per entry",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )

    parser.add_argument("-v", "--verbose", action="store_true", help="Enable verbose/debug logging")
    parser.add_argument("--log-json", action="store_true", help="Emit JSON-structured log lines")
    parser.add_argument("--config", help="Path to YAML config file")
    parser.add_argument("--backup-dir", help="Snapshot directory (git working tree)")
    parser.add_argument("--ldif-cmd", help="Command that writes the LDIF export to stdout")
    parser.add_argument("--commit-msg", help="Commit message")
    parser.add_argument("--commit-date",
                        help="Commit date, or a file whose modification time is used")
    parser.add_argument("--max-attempts", type=int,
                        help="Maximum export reads while waiting for a stable entry count")
    parser.add_argument("--gc", action="store_true", default=None, help="Run git gc after committing")
    parser.add_argument("--dry-run", action="store_true",
                        help="Read and name entries without touching the snapshot")
    parser.add_argument("--json", action="store_true", help="Output report as JSON")

    return parser.parse_args(argv)


def build_config(args: argparse.Namespace) -> BackupConfig:
    """Load configuration and apply command-line overrides."""
    config = BackupConfig(Path(args.config) if args.config else None)

    overrides = {
        "backup.dir": args.backup_dir,
        "backup.ldif_cmd": args.ldif_cmd,
        "backup.commit_msg": args.commit_msg,
        "backup.commit_date": args.commit_date,
        "backup.gc": args.gc,
        "reader.max_attempts": args.max_attempts,
    }
    for key, value in overrides.items():
        if value is not None:
            config.set(key, value)

    config.validate()
    if not config.get("backup.dir"):
        raise ConfigError("No backup directory given (use --backup-dir or backup.dir)")
    return config


def build_runner(config: BackupConfig, dry_run: bool = False) -> BackupRunner:
    """Wire the pipeline from configuration."""
    snapshot_dir = Path(config.get("backup.dir")).expanduser().resolve()

    reader = QuiescenceReader(
        CommandExportSource(config.get("backup.ldif_cmd")),
        max_attempts=config.get("reader.max_attempts"),
        retry_delay=float(config.get("reader.retry_delay", 0.0)),
    )
    vcs = GitRepository(
        snapshot_dir,
        git_executable=config.get("git.executable", "git"),
        user_name=config.get("git.user_name"),
        user_email=config.get("git.user_email"),
    )
    settings = RunSettings(
        commit_message=config.get("backup.commit_msg"),
        commit_date=config.get("backup.commit_date"),
        unique_key=config.get("ldif.unique_key"),
        creation_time=config.get("ldif.creation_time"),
        gc=bool(config.get("backup.gc", False)),
        dry_run=dry_run,
    )
    return BackupRunner(reader=reader, vcs=vcs, snapshot_dir=snapshot_dir, settings=settings)


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point."""
    load_dotenv(find_dotenv(usecwd=True))
    args = parse_args(argv)

    configure_logging(
        level=logging.DEBUG if args.verbose else logging.INFO,
        structured=args.log_json,
    )

    try:
        config = build_config(args)
        runner = build_runner(config, dry_run=args.dry_run)
        report = runner.run()
    except BackupError as e:
        logger.error(f"Backup failed: {e}")
        return 1

    if args.json:
        print(json.dumps(report.to_dict(), indent=2))
    else:
        print(report.summary())

    return 0


if __name__ == "__main__":
    sys.exit(main())

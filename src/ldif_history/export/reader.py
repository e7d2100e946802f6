"""
Export sources and the quiescence reader.

A live directory can change while it is being dumped. The reader re-runs the
export until two consecutive runs agree on the number of entries and only
then hands the entries to the rest of the pipeline.
"""

import logging
import subprocess
import time
from abc import ABC, abstractmethod
from typing import List, Optional

from ..core.exceptions import ConfigError, ExportCommandError, QuiescenceError
from ..core.models import EntryRecord
from .splitter import split_records


logger = logging.getLogger(__name__)

DEFAULT_MAX_ATTEMPTS = 10


class ExportSource(ABC):
    """
    Abstract base class for anything that produces an LDIF export.
    """

    @abstractmethod
    def read(self) -> str:
        """
        Produce one complete export.

        Returns:
            Export text

        Raises:
            ExportCommandError if the export cannot be produced
        """
        pass

    @abstractmethod
    def get_name(self) -> str:
        """Return a short description of the source for logging."""
        pass


class CommandExportSource(ExportSource):
    """
    Runs a shell command (e.g. slapcat or ldapsearch) and returns its stdout.

    Output is decoded as UTF-8 with surrogateescape so that bytes which are
    not valid UTF-8 are carried through to the snapshot files unchanged.
    """

    def __init__(self, command: str, cwd: Optional[str] = None):
        """
        Initialize the command source.

        Args:
            command: Shell command line producing LDIF on stdout
            cwd: Optional working directory for the command
        """
        if not command or not command.strip():
            raise ConfigError("Export command must not be empty")
        self.command = command
        self.cwd = cwd

    def read(self) -> str:
        logger.debug(f"Running export command: {self.command}")
        try:
            result = subprocess.run(
                self.command,
                shell=True,
                cwd=self.cwd,
                stdout=subprocess.PIPE,
                stderr=subprocess.PIPE,
                check=False,
            )
        except OSError as e:
            raise ExportCommandError(
                f"Could not start export command '{self.command}': {e}",
                command=self.command,
            ) from e

        stderr = result.stderr.decode("utf-8", errors="replace").strip()
        if result.returncode != 0:
            raise ExportCommandError(
                f"Export command '{self.command}' exited with status {result.returncode}"
                + (f": {stderr}" if stderr else ""),
                command=self.command,
                returncode=result.returncode,
                stderr=stderr,
            )
        if stderr:
            logger.warning(f"Export command wrote to stderr: {stderr}")

        return result.stdout.decode("utf-8", errors="surrogateescape")

    def get_name(self) -> str:
        return self.command


class StaticExportSource(ExportSource):
    """
    Export source backed by a fixed sequence of export texts.

    Each read returns the next text; the last one repeats once the sequence
    is exhausted. Useful for replaying a saved dump and in tests.
    """

    def __init__(self, *exports: str):
        if not exports:
            raise ConfigError("StaticExportSource needs at least one export")
        self.exports = list(exports)
        self.reads = 0

    def read(self) -> str:
        index = min(self.reads, len(self.exports) - 1)
        self.reads += 1
        return self.exports[index]

    def get_name(self) -> str:
        return f"static({len(self.exports)} exports)"


class QuiescenceReader:
    """
    Reads an export repeatedly until the entry count settles.

    Two consecutive reads with the same entry count are taken as evidence
    that the directory was not modified mid-dump. This compares counts only,
    not content.
    """

    def __init__(
        self,
        source: ExportSource,
        max_attempts: int = DEFAULT_MAX_ATTEMPTS,
        retry_delay: float = 0.0,
    ):
        """
        Initialize the reader.

        Args:
            source: Export source to invoke
            max_attempts: Maximum number of invocations before giving up (>= 2)
            retry_delay: Seconds to wait between invocations
        """
        if max_attempts < 2:
            raise ConfigError(f"max_attempts must be at least 2, got {max_attempts}")
        self.source = source
        self.max_attempts = max_attempts
        self.retry_delay = retry_delay
        self.attempts = 0

    def read_records(self) -> List[EntryRecord]:
        """
        Read the export until two consecutive reads agree on entry count.

        Returns:
            Entry records from the last read

        Raises:
            ExportCommandError: If the source fails (never retried)
            QuiescenceError: If the count never settles within max_attempts
        """
        counts: List[int] = []
        previous: Optional[int] = None
        self.attempts = 0

        while self.attempts < self.max_attempts:
            if self.attempts and self.retry_delay > 0:
                time.sleep(self.retry_delay)

            self.attempts += 1
            records = list(split_records(self.source.read()))
            count = len(records)
            counts.append(count)

            logger.debug(
                f"Export read {self.attempts}/{self.max_attempts}: {count} entries",
                extra={"attempt": self.attempts, "entry_count": count},
            )

            if previous is not None and count == previous:
                logger.info(f"Export settled at {count} entries after {self.attempts} reads")
                return records

            if previous is not None:
                logger.info(f"Entry count changed from {previous} to {count}, reading again")
            previous = count

        raise QuiescenceError(
            f"Export of {self.source.get_name()} did not settle after "
            f"{self.max_attempts} reads (counts: {counts})",
            counts=counts,
        )

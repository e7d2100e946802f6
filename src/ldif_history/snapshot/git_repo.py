"""
Version control for the snapshot directory.

The pipeline only needs four operations (init, remove, add, commit) plus
optional housekeeping. VersionControl describes them; GitRepository carries
them out with the git executable.
"""

import logging
import os
import subprocess
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Dict, List, Optional, Union

from ..core.exceptions import VersionControlError


logger = logging.getLogger(__name__)

PathLike = Union[str, Path]

DEFAULT_USER_NAME = "ldif-history"
DEFAULT_USER_EMAIL = "ldif-history@localhost"


class VersionControl(ABC):
    """
    Abstract base class for the snapshot's version control.
    """

    @abstractmethod
    def init(self) -> None:
        """Ensure a repository exists at the snapshot directory (idempotent)."""
        pass

    @abstractmethod
    def remove(self, path: PathLike) -> None:
        """Stop tracking a file and delete it from the working tree."""
        pass

    @abstractmethod
    def add(self, path: PathLike) -> None:
        """Start tracking the current content of a file."""
        pass

    @abstractmethod
    def commit(self, message: str, date: Optional[str] = None) -> Optional[str]:
        """
        Record the tracked state as one revision.

        Args:
            message: Commit message
            date: Commit date in any format git accepts, or None for now

        Returns:
            The new revision id, or None if there was nothing to commit
        """
        pass

    def gc(self) -> None:
        """Optional repository housekeeping."""
        pass


class GitRepository(VersionControl):
    """
    VersionControl backed by the git command line.

    Every git invocation that fails raises VersionControlError.
    """

    def __init__(
        self,
        path: PathLike,
        git_executable: str = "git",
        user_name: Optional[str] = None,
        user_email: Optional[str] = None,
    ):
        """
        Initialize the repository wrapper.

        Args:
            path: Snapshot directory (the repository's working tree)
            git_executable: Name or path of the git binary
            user_name: Commit identity; falls back to git config, then a default
            user_email: Commit email; falls back to git config, then a default
        """
        self.path = Path(path).expanduser().resolve()
        self.git_executable = git_executable
        self.user_name = user_name
        self.user_email = user_email

    def _run(
        self,
        *args: str,
        check: bool = True,
        env: Optional[Dict[str, str]] = None,
    ) -> subprocess.CompletedProcess:
        cmd = [self.git_executable, *args]
        run_env = None
        if env:
            run_env = os.environ.copy()
            run_env.update(env)

        try:
            result = subprocess.run(
                cmd,
                cwd=self.path,
                env=run_env,
                capture_output=True,
                text=True,
                check=False,
            )
        except OSError as e:
            raise VersionControlError(
                f"Could not run {' '.join(cmd)}: {e}", git_args=list(args)
            ) from e

        if check and result.returncode != 0:
            raise VersionControlError(
                f"git {' '.join(args)} failed with status {result.returncode}: "
                f"{result.stderr.strip()}",
                git_args=list(args),
                stderr=result.stderr,
            )
        return result

    def is_repository(self) -> bool:
        return (self.path / ".git").exists()

    def init(self) -> None:
        self.path.mkdir(parents=True, exist_ok=True)
        if self.is_repository():
            logger.debug(f"Using existing git repository in {self.path}")
            return
        logger.info(f"Initializing git repository in {self.path}")
        self._run("init", "-q")

    def _pathspec(self, path: PathLike) -> str:
        """Absolute path for git, independent of the process working directory."""
        return str(Path(path).resolve())

    def remove(self, path: PathLike) -> None:
        path = Path(path)
        self._run("rm", "-q", "-f", "--ignore-unmatch", "--", self._pathspec(path))
        # Untracked files are not touched by git rm
        if path.exists():
            path.unlink()

    def add(self, path: PathLike) -> None:
        self._run("add", "--", self._pathspec(path))

    def has_staged_changes(self) -> bool:
        """Whether the index differs from HEAD (or from nothing, before the first commit)."""
        result = self._run("status", "--porcelain", "--untracked-files=no")
        for line in result.stdout.splitlines():
            if line and line[0] not in (" ", "?", "!"):
                return True
        return False

    def _identity_env(self) -> Dict[str, str]:
        name = self.user_name or self._config_value("user.name") or DEFAULT_USER_NAME
        email = self.user_email or self._config_value("user.email") or DEFAULT_USER_EMAIL
        return {
            "GIT_AUTHOR_NAME": name,
            "GIT_AUTHOR_EMAIL": email,
            "GIT_COMMITTER_NAME": name,
            "GIT_COMMITTER_EMAIL": email,
        }

    def _config_value(self, key: str) -> Optional[str]:
        result = self._run("config", "--get", key, check=False)
        value = result.stdout.strip()
        return value or None

    def commit(self, message: str, date: Optional[str] = None) -> Optional[str]:
        if not self.has_staged_changes():
            logger.info("Snapshot unchanged, nothing to commit")
            return None

        env = self._identity_env()
        args = ["commit", "-q", "-m", message]
        if date:
            args.extend(["--date", date])
            env["GIT_COMMITTER_DATE"] = date

        self._run(*args, env=env)
        revision = self.head()
        logger.info(f"Committed snapshot {revision[:12]}")
        return revision

    def head(self) -> Optional[str]:
        """Return the current revision id, or None before the first commit."""
        result = self._run("rev-parse", "--verify", "-q", "HEAD", check=False)
        if result.returncode != 0:
            return None
        return result.stdout.strip()

    def history(self) -> List[str]:
        """Return revision ids, newest first."""
        if self.head() is None:
            return []
        return self._run("rev-list", "HEAD").stdout.split()

    def tracked_files(self) -> List[str]:
        """Return paths tracked in the index, relative to the repository root."""
        return self._run("ls-files").stdout.splitlines()

    def files_in_history(self) -> List[str]:
        """Return every path that appeared in any revision, sorted."""
        if self.head() is None:
            return []
        result = self._run("log", "--pretty=format:", "--name-only", "HEAD")
        return sorted({line for line in result.stdout.splitlines() if line.strip()})

    def gc(self) -> None:
        logger.info(f"Running git gc in {self.path}")
        self._run("gc", "--quiet")

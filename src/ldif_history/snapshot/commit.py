"""
Commit composer: turns a synchronized snapshot into one revision.
"""

import logging
import os
from datetime import datetime, timezone
from typing import Optional

from .git_repo import VersionControl


logger = logging.getLogger(__name__)


def resolve_commit_date(date: Optional[str]) -> Optional[str]:
    """
    Resolve the commit date parameter.
    
    If `date` names an existing path, that path's modification time is used
    (e.g. the dump file a backup was taken from). Anything else is passed to
    version control verbatim.
    
    Args:
        date: Date string, path, or None for "now"
        
    Returns:
        ISO 8601 timestamp, the original string, or None
    """
    if not date:
        return None

    if os.path.exists(date):
        mtime = os.path.getmtime(date)
        resolved = datetime.fromtimestamp(mtime, tz=timezone.utc).isoformat(timespec="seconds")
        logger.debug(f"Using modification time of {date} as commit date: {resolved}")
        return resolved

    return date


class CommitComposer:
    """Commits the snapshot with a message and date."""

    def __init__(self, vcs: VersionControl):
        self.vcs = vcs

    def commit(self, message: str, date: Optional[str] = None) -> Optional[str]:
        """
        Commit the current snapshot state.
        
        Returns:
            New revision id, or None if the snapshot did not change
        """
        return self.vcs.commit(message, resolve_commit_date(date))

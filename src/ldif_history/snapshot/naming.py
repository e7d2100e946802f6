"""
File names for entries in the snapshot directory.

Names have the form {timestamp}-{digest7}[-{n}].ldif, where digest7 is the
first seven hex digits of the SHA-1 of the canonical identity and n counts
earlier entries in the same run that produced the same base name.
"""

import hashlib
import re
from typing import Dict

from ..core.models import CanonicalEntry


LDIF_SUFFIX = ".ldif"
DIGEST_LENGTH = 7

_UNSAFE_CHARS = re.compile(r"[^0-9A-Za-z.+_-]")


def identity_digest(identity: str) -> str:
    """Return the short hex digest of a canonical identity."""
    return hashlib.sha1(identity.encode("utf-8")).hexdigest()[:DIGEST_LENGTH]


def base_name(entry: CanonicalEntry) -> str:
    """Build the collision-free part of a file name, without suffix."""
    timestamp = _UNSAFE_CHARS.sub("_", entry.timestamp)
    return f"{timestamp}-{identity_digest(entry.identity)}"


class FilenameRegistry:
    """
    Collision counters for one backup run.

    A new registry must be created for every run; it is never persisted, and
    names only need to be unique among the files written by that run.
    """

    def __init__(self):
        self._counters: Dict[str, int] = {}

    def filename_for(self, entry: CanonicalEntry) -> str:
        """
        Register an entry and return its unique file name.

        Args:
            entry: Canonical identity and timestamp of the entry

        Returns:
            File name such as "20240101120000Z-1a2b3c4.ldif" or, for the
            second entry with the same base name, "20240101120000Z-1a2b3c4-1.ldif"
        """
        base = base_name(entry)
        if base not in self._counters:
            self._counters[base] = 0
            return base + LDIF_SUFFIX

        self._counters[base] += 1
        return f"{base}-{self._counters[base]}{LDIF_SUFFIX}"

    def collisions(self) -> int:
        """Number of names that needed a disambiguation counter."""
        return sum(self._counters.values())

    def __len__(self) -> int:
        return len(self._counters)

    def __contains__(self, base: str) -> bool:
        return base in self._counters

"""
ldif-history: keep the history of an LDAP directory in git, one file per entry.

This package provides:
- Export reading: run a dump command until two reads agree on entry count
- LDIF parsing: unfold, decode and canonicalize entry identities
- Snapshot sync: replace the tracked .ldif files and commit the result
"""

__version__ = "0.1.0"

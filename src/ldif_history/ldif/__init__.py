"""
LDIF module: entry parsing and canonicalization.
"""

from .parser import Attribute, ValueEncoding, parse_entry, find_value, unfold_lines
from .canonical import canonicalize_dn, canonicalize_entry, canonicalize_timestamp

__all__ = [
    "Attribute",
    "ValueEncoding",
    "parse_entry",
    "find_value",
    "unfold_lines",
    "canonicalize_dn",
    "canonicalize_entry",
    "canonicalize_timestamp",
]

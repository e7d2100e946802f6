"""
Line parser for single LDIF entries.

Works as a small state machine over the physical lines of one entry:
continuation lines (one leading space) are glued onto the previous logical
line, comment lines are dropped together with their continuations, and every
logical line is then split into attribute name and value.
"""

import base64
import binascii
import logging
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional


logger = logging.getLogger(__name__)


class ValueEncoding(str, Enum):
    """How an attribute value was written in the LDIF."""
    PLAIN = "plain"      # name: value
    BASE64 = "base64"    # name:: dmFsdWU=
    URL = "url"          # name:< file:///path


class _State(Enum):
    START = "start"
    ATTRIBUTE = "attribute"
    COMMENT = "comment"


@dataclass(frozen=True)
class Attribute:
    """
    One attribute line of an entry, after unfolding and decoding.

    Attributes:
        name: Attribute description as written, including options (cn;lang-de)
        value: Decoded value (base64 values are decoded to text)
        encoding: How the value was encoded in the LDIF
    """
    name: str
    value: str
    encoding: ValueEncoding = ValueEncoding.PLAIN

    @property
    def base_name(self) -> str:
        """Lower-cased attribute type without options."""
        return self.name.split(";", 1)[0].strip().lower()


def unfold_lines(text: str) -> List[str]:
    """
    Join folded LDIF lines into logical lines.

    A physical line starting with a single space continues the previous
    logical line; the space is removed and the rest appended as-is.
    Comment lines and their continuations are dropped.

    Args:
        text: Raw text of one entry

    Returns:
        Logical lines in order
    """
    logical: List[str] = []
    current: Optional[str] = None
    state = _State.START

    for physical in text.split("\n"):
        if physical.endswith("\r"):
            physical = physical[:-1]

        if physical.startswith(" "):
            if state is _State.ATTRIBUTE:
                current += physical[1:]
            elif state is _State.START:
                logger.debug(f"Ignoring continuation line with nothing to continue: {physical!r}")
            continue

        if current is not None:
            logical.append(current)
            current = None

        if physical.startswith("#"):
            state = _State.COMMENT
        elif physical == "":
            state = _State.START
        else:
            current = physical
            state = _State.ATTRIBUTE

    if current is not None:
        logical.append(current)

    return logical


def parse_line(line: str) -> Optional[Attribute]:
    """
    Split one logical line into an Attribute.

    Returns:
        The attribute, or None if the line has no name/value separator
    """
    name, sep, rest = line.partition(":")
    if not sep or not name:
        logger.debug(f"Skipping line without attribute separator: {line!r}")
        return None

    if rest.startswith(":"):
        return Attribute(name, _decode_base64(name, rest[1:].strip()), ValueEncoding.BASE64)
    if rest.startswith("<"):
        return Attribute(name, rest[1:].strip(), ValueEncoding.URL)
    return Attribute(name, rest.lstrip(" "), ValueEncoding.PLAIN)


def _decode_base64(name: str, encoded: str) -> str:
    try:
        raw = base64.b64decode(encoded, validate=True)
    except (binascii.Error, ValueError) as e:
        logger.warning(f"Invalid base64 value for attribute '{name}', keeping it encoded: {e}")
        return encoded
    return raw.decode("utf-8", errors="replace")


def parse_entry(text: str) -> List[Attribute]:
    """
    Parse the text of one entry into its attributes.

    Args:
        text: Raw entry text

    Returns:
        Attributes in the order they appear
    """
    attributes = []
    for line in unfold_lines(text):
        attribute = parse_line(line)
        if attribute is not None:
            attributes.append(attribute)
    return attributes


def find_value(attributes: List[Attribute], name: str) -> Optional[str]:
    """
    Return the value of the first attribute named `name`.

    The comparison ignores case and attribute options.
    """
    wanted = name.strip().lower()
    for attribute in attributes:
        if attribute.base_name == wanted:
            return attribute.value
    return None

"""
Record splitter for LDIF export streams.

Entries in an export are separated by an empty line. The splitter yields
each entry's raw text unchanged, so folded lines and base64 values survive
byte-for-byte into the snapshot files.
"""

import io
from typing import Generator, Iterable, List, Union

from ..core.models import EntryRecord


StreamLike = Union[str, bytes, Iterable[str]]


def _iter_lines(stream: StreamLike) -> Iterable[str]:
    """Turn the supported stream types into an iterable of text lines."""
    if isinstance(stream, bytes):
        stream = stream.decode("utf-8", errors="surrogateescape")
    if isinstance(stream, str):
        return io.StringIO(stream, newline="")
    return stream


def _is_separator(line: str) -> bool:
    return line.rstrip("\r\n") == ""


def split_records(stream: StreamLike) -> Generator[EntryRecord, None, None]:
    """
    Lazily split an export stream into entry records.
    
    Runs of blank lines count as a single separator, and a final entry
    without a trailing blank line is still emitted.
    
    Args:
        stream: Export text, raw bytes, or any iterable of lines
        
    Yields:
        EntryRecord for each entry, in export order
    """
    buffer: List[str] = []
    position = 0

    for line in _iter_lines(stream):
        if _is_separator(line):
            if buffer:
                yield _make_record(buffer, position)
                position += 1
                buffer = []
            continue
        buffer.append(line)

    if buffer:
        yield _make_record(buffer, position)


def _make_record(lines: List[str], position: int) -> EntryRecord:
    text = "".join(lines)
    if not text.endswith("\n"):
        text += "\n"
    return EntryRecord(text=text, position=position)


def count_records(stream: StreamLike) -> int:
    """Count the entries in an export stream without keeping them."""
    return sum(1 for _ in split_records(stream))

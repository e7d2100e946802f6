"""
Export module: reading a directory dump and splitting it into entries.
"""

from .splitter import split_records, count_records
from .reader import ExportSource, CommandExportSource, StaticExportSource, QuiescenceReader

__all__ = [
    "split_records",
    "count_records",
    "ExportSource",
    "CommandExportSource",
    "StaticExportSource",
    "QuiescenceReader",
]

"""
Persistence for URL mappings.

A single append-only text file; the in-memory indices are rebuilt from it
on startup.
"""

from .store import URLStore, DELIMITER, format_record, parse_record

__all__ = [
    "URLStore",
    "DELIMITER",
    "format_record",
    "parse_record",
]

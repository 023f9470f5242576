"""
Data models for URL shortener.

Mappings live in memory and in the append-only store file, there is no ORM.
"""

from .url import URLMapping

__all__ = ["URLMapping"]

"""
Append-only text store for URL mappings.

File format (UTF-8, one record per line):

    alias<space>long_url\\n

No header and no escaping: URL validation guarantees that neither field
contains the delimiter or a newline. Records are only ever appended.
"""

import logging
import os
from pathlib import Path
from typing import Iterator, Union

from shortener_app.exceptions import StoreError
from shortener_app.models.url import URLMapping

logger = logging.getLogger(__name__)

DELIMITER = " "


class URLStore:
    """
    Line-oriented file holding every mapping ever created.

    The handle is opened once and kept for the life of the process.
    Callers serialize `append`; the store itself holds no lock.
    """

    def __init__(self, path: Union[str, Path], fsync: bool = True):
        self.path = Path(path)
        self.fsync = fsync
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            # Unbuffered binary append mode: writes always land at the end of the file
            self._file = open(self.path, "a+b", buffering=0)
        except OSError as e:
            raise StoreError(f"Cannot open store {self.path}: {e}") from e

    def load(self) -> Iterator[URLMapping]:
        """
        Yield every well-formed record in file order.

        Malformed lines are logged and skipped.
        """
        try:
            self._file.seek(0)
            lines = self._file.readall().split(b"\n")
        except OSError as e:
            raise StoreError(f"Cannot read store {self.path}: {e}") from e

        for lineno, raw in enumerate(lines, start=1):
            try:
                line = raw.decode("utf-8").rstrip("\r\n")
            except UnicodeDecodeError:
                logger.warning("Skipping undecodable record at %s:%d", self.path, lineno)
                continue

            if not line:
                continue

            mapping = parse_record(line)
            if mapping is None:
                logger.warning("Skipping malformed record at %s:%d: %r", self.path, lineno, line)
                continue

            yield mapping

    def append(self, mapping: URLMapping) -> None:
        """
        Write one record and flush it to disk.

        The handle is unbuffered, so bytes that failed to reach the file
        are never written later by another append. On failure the file is
        truncated back to its previous size so a half-written line never
        survives, then StoreError is raised.
        """
        data = format_record(mapping).encode("utf-8")
        try:
            size = self._file.seek(0, os.SEEK_END)
        except (OSError, ValueError) as e:
            raise StoreError(f"Cannot append to store {self.path}: {e}") from e

        try:
            view = memoryview(data)
            while view:
                # Raw writes may be partial
                written = self._file.write(view)
                view = view[written:]
            if self.fsync:
                os.fsync(self._file.fileno())
        except (OSError, ValueError) as e:
            self._rollback(size)
            raise StoreError(f"Cannot append to store {self.path}: {e}") from e

    def _rollback(self, size: int) -> None:
        try:
            self._file.truncate(size)
        except (OSError, ValueError):
            logger.exception("Could not truncate %s back to %d bytes", self.path, size)

    def close(self) -> None:
        if not self._file.closed:
            self._file.close()

    @property
    def closed(self) -> bool:
        return self._file.closed


def format_record(mapping: URLMapping) -> str:
    return f"{mapping.alias}{DELIMITER}{mapping.long_url}\n"


def parse_record(line: str):
    """Split a stored line into a mapping, or None when it is corrupt."""
    alias, sep, long_url = line.partition(DELIMITER)
    if not sep or not alias or not long_url or DELIMITER in long_url:
        return None
    return URLMapping(alias=alias, long_url=long_url)

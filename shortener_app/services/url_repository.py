import logging
import threading
from pathlib import Path
from typing import Dict, List, Optional, Union

from shortener_app.models.url import URLMapping
from shortener_app.services.short_code_strategies import (
    ShortCodeStrategy,
    RandomShortCodeStrategy
)
from shortener_app.storage.store import URLStore

logger = logging.getLogger(__name__)

# Fixed routes that an alias must never shadow
RESERVED_ALIASES = frozenset({"", "all", "new", "health"})


def is_reserved(alias: str) -> bool:
    """True for route names and static asset names like `index.html`."""
    return alias in RESERVED_ALIASES or alias.startswith("index.")


class URLRepository:
    """
    Alias <-> long URL mapping backed by an append-only store.

    Two dicts give constant-time lookups in both directions. Reads go
    straight to the dicts; inserts are serialized by a single lock that
    also covers the file append, so the store and the indices never
    disagree.

    Ordering on insert is append-then-index: a mapping only becomes
    visible after its record is on disk.
    """

    def __init__(self, store: URLStore, strategy: Optional[ShortCodeStrategy] = None):
        self.store = store
        self.strategy = strategy or RandomShortCodeStrategy()
        self._by_alias: Dict[str, str] = {}
        self._by_url: Dict[str, str] = {}
        self._lock = threading.Lock()
        self._load()

    @classmethod
    def open(
        cls,
        path: Union[str, Path],
        strategy: Optional[ShortCodeStrategy] = None,
        fsync: bool = True
    ) -> "URLRepository":
        """Open (or create) the store at `path` and load every record."""
        store = URLStore(path, fsync=fsync)
        try:
            return cls(store, strategy=strategy)
        except Exception:
            store.close()
            raise

    def _load(self):
        for mapping in self.store.load():
            if mapping.alias in self._by_alias:
                logger.warning("Skipping duplicate alias %r in %s", mapping.alias, self.store.path)
                continue
            if mapping.long_url in self._by_url:
                logger.warning("Skipping duplicate URL %r in %s", mapping.long_url, self.store.path)
                continue
            self._index(mapping)

        logger.info("Loaded %d mappings from %s", len(self._by_alias), self.store.path)

    def _index(self, mapping: URLMapping):
        self._by_alias[mapping.alias] = mapping.long_url
        self._by_url[mapping.long_url] = mapping.alias

    def _is_taken(self, alias: str) -> bool:
        return alias in self._by_alias or is_reserved(alias)

    def lookup(self, alias: str) -> Optional[str]:
        """Long URL for `alias`, or None"""
        return self._by_alias.get(alias)

    def find_alias(self, long_url: str) -> Optional[str]:
        """Alias already issued for `long_url`, or None"""
        return self._by_url.get(long_url)

    def insert(self, long_url: str) -> str:
        """
        Return the alias for `long_url`, creating one if needed.

        Idempotent: a URL that is already stored returns its existing alias
        without touching the store.

        Raises:
            StoreError: the record could not be persisted; nothing is indexed
        """
        with self._lock:
            existing = self._by_url.get(long_url)
            if existing is not None:
                return existing

            alias = self.strategy.generate(self._is_taken)
            mapping = URLMapping(alias=alias, long_url=long_url)
            self.store.append(mapping)
            self._index(mapping)

        logger.info("Created mapping %s -> %s", alias, long_url)
        return alias

    def list_all(self) -> List[URLMapping]:
        """Snapshot of every mapping, in insertion order"""
        with self._lock:
            return [
                URLMapping(alias=alias, long_url=long_url)
                for alias, long_url in self._by_alias.items()
            ]

    def __len__(self) -> int:
        return len(self._by_alias)

    def close(self):
        self.store.close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()

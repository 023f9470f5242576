from typing import List, Optional

from starlette.concurrency import run_in_threadpool

from shortener_app.models.url import URLMapping
from shortener_app.services.url_repository import URLRepository


class URLService:
    """
    URL Service with the repository injected.

    This follows the Dependency Injection pattern:
    - The repository is constructed once at startup and passed in
    - Easy to test (point the repository at a temporary file)

    Store writes block on disk I/O and listing waits for them, so both run
    in the threadpool and the event loop keeps serving redirects meanwhile.
    """

    def __init__(self, repository: URLRepository):
        self.repository = repository

    async def create_short_url(self, long_url: str) -> str:
        """Return the alias for long_url, creating it if needed

        Note: Same long URL always gets the same alias.

        Raises StoreError when the new mapping could not be persisted.
        """
        return await run_in_threadpool(self.repository.insert, long_url)

    async def get_long_url_for_redirect(self, short_code: str) -> Optional[str]:
        """Long URL for short_code, or None if it was never issued"""
        return self.repository.lookup(short_code)

    async def list_urls(self) -> List[URLMapping]:
        """Snapshot of every mapping, taken off the event loop"""
        return await run_in_threadpool(self.repository.list_all)

import asyncio
import threading

from shortener_app.services.url_service import URLService


class TestURLService:
    """Test URL service business logic directly"""

    def test_create_and_resolve(self, repository):
        service = URLService(repository)

        alias = asyncio.run(service.create_short_url("https://www.example.com/"))

        long_url = asyncio.run(service.get_long_url_for_redirect(alias))
        assert long_url == "https://www.example.com/"
        assert asyncio.run(service.get_long_url_for_redirect("zzzzz")) is None

    def test_listing_waits_off_the_event_loop(self, repository):
        """Test that a listing blocked behind an insert leaves the loop free"""
        repository.insert("https://example.com")
        service = URLService(repository)

        async def list_while_ticking():
            ticks = 0

            async def ticker():
                nonlocal ticks
                while True:
                    ticks += 1
                    await asyncio.sleep(0.01)

            task = asyncio.create_task(ticker())
            await asyncio.sleep(0)
            mappings = await service.list_urls()
            task.cancel()
            return ticks, mappings

        # Stand-in for an insert holding the lock through a slow fsync
        repository._lock.acquire()
        releaser = threading.Timer(0.3, repository._lock.release)
        releaser.start()
        try:
            ticks, mappings = asyncio.run(list_while_ticking())
        finally:
            releaser.join()

        assert ticks >= 5
        assert [m.long_url for m in mappings] == ["https://example.com"]

"""
Test configuration and fixtures for FastAPI URL shortener.
This centralizes all test setup, making individual tests clean.
"""

import random

import pytest
from fastapi.testclient import TestClient

from main import create_app
from shortener_app.config import Settings
from shortener_app.services.short_code_strategies import RandomShortCodeStrategy
from shortener_app.services.url_repository import URLRepository


@pytest.fixture(scope="function")
def store_path(tmp_path):
    """Fresh store file location for each test."""
    return tmp_path / "urls.txt"


@pytest.fixture(scope="function")
def static_dir(tmp_path):
    """Static directory with a minimal frontend."""
    public = tmp_path / "public"
    public.mkdir()
    (public / "index.html").write_text("<h1>URL Shortener</h1>", encoding="utf-8")
    (public / "app.js").write_text("console.log('hi');", encoding="utf-8")
    return public


@pytest.fixture(scope="function")
def test_settings(store_path, static_dir):
    return Settings(
        store_path=str(store_path),
        static_dir=str(static_dir),
        store_fsync=False,
    )


@pytest.fixture(scope="function")
def repository(store_path):
    """
    Repository against a temporary store, with a seeded generator.
    Closed after the test.
    """
    strategy = RandomShortCodeStrategy(rng=random.Random(1234))
    repo = URLRepository.open(store_path, strategy=strategy, fsync=False)
    try:
        yield repo
    finally:
        repo.close()


@pytest.fixture(scope="function")
def client(test_settings):
    """
    Create a test client for an app bound to the temporary store.
    This is the main fixture that tests will use.
    """
    app = create_app(test_settings, rng=random.Random(42))

    with TestClient(app) as test_client:
        yield test_client

"""
FastAPI dependencies for dependency injection.

The repository is created once in the application lifespan and kept on
`app.state`; routes receive it (wrapped in URLService) through Depends.

Pattern: Dependency Injection
- No module-level singleton, each app owns its repository
- Easy to test (build an app against a temporary store file)
"""

from fastapi import Depends, Request

from shortener_app.services.url_repository import URLRepository
from shortener_app.services.url_service import URLService


def get_repository(request: Request) -> URLRepository:
    """Repository opened by the lifespan of the running app."""
    return request.app.state.repository


def get_url_service(repository: URLRepository = Depends(get_repository)) -> URLService:
    """
    Get URLService with the repository injected.

    Controllers depend on the service, the service depends on the
    repository.
    """
    return URLService(repository)

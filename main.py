import logging
import sys
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Optional

import uvicorn
from fastapi import FastAPI, Request
from fastapi.responses import PlainTextResponse, RedirectResponse
from fastapi.staticfiles import StaticFiles
from starlette.exceptions import HTTPException as StarletteHTTPException

from shortener_app.config import Settings, settings
from shortener_app.api import urls, redirect
from shortener_app.logging_config import setup_logging
from shortener_app.middleware import LoggingMiddleware
from shortener_app.services.short_code_strategies import RandomShortCodeStrategy
from shortener_app.services.url_repository import URLRepository

logger = logging.getLogger("shortener_app")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Open the store on startup and close it on shutdown."""
    app_settings: Settings = app.state.settings

    strategy = RandomShortCodeStrategy(
        length=app_settings.short_url_length,
        max_retries=app_settings.max_retries,
        rng=app.state.rng
    )
    # StoreError here aborts startup
    repository = URLRepository.open(
        app_settings.store_path,
        strategy=strategy,
        fsync=app_settings.store_fsync
    )
    app.state.repository = repository
    try:
        yield
    finally:
        repository.close()
        logger.info("Store %s closed", app_settings.store_path)


def mount_static(app: FastAPI, prefix: str, directory: Path) -> bool:
    """Serve files under `directory` at `prefix`; mount after all routes."""
    if not directory.is_dir():
        logger.warning("Static directory %s does not exist, not serving static files", directory)
        return False

    app.mount(prefix, StaticFiles(directory=str(directory)), name="static")
    return True


async def plain_text_http_error(request: Request, exc: StarletteHTTPException):
    """Render HTTP errors as short plain-text bodies"""
    return PlainTextResponse(
        str(exc.detail),
        status_code=exc.status_code,
        headers=getattr(exc, "headers", None)
    )


def create_app(app_settings: Optional[Settings] = None, rng=None) -> FastAPI:
    """
    Build the application.

    Route order matters: the fixed routes come first, then the alias
    route, then the static mount which catches everything else.
    """
    app_settings = app_settings or settings

    app = FastAPI(
        title=app_settings.app_name,
        version=app_settings.app_version,
        description="A URL shortener service built with FastAPI",
        debug=app_settings.debug,
        # /docs, /redoc and /openapi.json would shadow aliases of the same name
        docs_url=None,
        redoc_url=None,
        openapi_url=None,
        lifespan=lifespan
    )
    app.state.settings = app_settings
    app.state.rng = rng

    app.add_middleware(LoggingMiddleware)
    app.add_exception_handler(StarletteHTTPException, plain_text_http_error)

    @app.get("/")
    def read_root():
        """Frontend entry point"""
        return RedirectResponse(url="/index.html", status_code=302)

    @app.get("/health")
    def health_check(request: Request):
        """Health check endpoint"""
        return {
            "status": "healthy",
            "environment": app_settings.environment,
            "version": app_settings.app_version,
            "urls": len(request.app.state.repository),
        }

    ######## Include routers
    app.include_router(urls.router)
    app.include_router(redirect.router)

    mount_static(app, "/", app_settings.resolve_static_dir())

    return app


app = create_app()


def run():
    """Run the service with uvicorn; exits non-zero if startup fails."""
    setup_logging(settings.log_level)
    logger.info("Starting %s on %s:%d", settings.app_name, settings.host, settings.port)

    server = uvicorn.Server(
        uvicorn.Config(
            app,
            host=settings.host,
            port=settings.port,
            log_level=settings.log_level.lower(),
            lifespan="on",
        )
    )
    server.run()

    if not server.started:
        logger.error("Startup failed")
        sys.exit(1)


if __name__ == "__main__":
    run()

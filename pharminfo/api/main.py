"""
FastAPI Main Application
Entry point for the 약정보 site.
"""

import logging
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.staticfiles import StaticFiles

from ..config.settings import get_settings
from ..content.store import ContentError, ContentStore
from .errors import setup_error_handlers
from .middleware import RequestLoggingMiddleware, RequestTimingMiddleware
from .routers import feeds_router, health_router, pages_router
from .templating import create_templates

# Configure logging
logging.basicConfig(
    level=logging.INFO, format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan handler.

    Loads the content snapshot on startup unless one was supplied.
    """
    logger.info("Starting 약정보 site...")

    if app.state.store is None:
        content_dir = app.state.content_dir
        try:
            app.state.store = ContentStore.load(content_dir)
            problems = app.state.store.check_integrity()
            for problem in problems:
                logger.warning(f"Content integrity: {problem}")
        except ContentError as e:
            logger.error(f"Failed to load content: {e}")
            logger.warning("Pages will return 503 until content is available")

    logger.info("약정보 site started")

    yield

    logger.info("Shutting down 약정보 site...")


def create_app(store: Optional[ContentStore] = None, content_dir: Optional[Path] = None) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        store: Preloaded content (skips loading at startup)
        content_dir: Content directory to load (defaults to settings)

    Returns:
        Configured FastAPI application instance
    """
    settings = get_settings()

    app = FastAPI(
        title=settings.site_name,
        description=settings.site_tagline,
        version=settings.version,
        lifespan=lifespan,
        docs_url=None,
        redoc_url=None,
        openapi_url=None,
    )
    app.state.store = store
    app.state.content_dir = Path(content_dir or settings.content_dir)
    app.state.templates = create_templates()

    # Add GZip compression
    app.add_middleware(GZipMiddleware, minimum_size=1000)

    # Add custom middleware
    app.add_middleware(RequestTimingMiddleware)
    app.add_middleware(RequestLoggingMiddleware)

    setup_error_handlers(app, app.state.templates)

    # Fixed paths first; the page router's "/{category}" matches any segment
    app.include_router(health_router)
    app.include_router(feeds_router)

    images_dir = Path(settings.images_dir)
    if images_dir.is_dir():
        app.mount("/images", StaticFiles(directory=str(images_dir)), name="images")
    else:
        logger.warning(f"Images directory not found: {images_dir}")

    app.include_router(pages_router)

    return app


if __name__ == "__main__":
    import uvicorn

    settings = get_settings()

    uvicorn.run(
        "pharminfo.api.main:create_app",
        factory=True,
        host=settings.host,
        port=settings.port,
        reload=settings.reload,
        log_level=settings.log_level.lower(),
    )

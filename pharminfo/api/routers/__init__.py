"""
API Routers
Route modules for the site. Register order matters: pages last, since
"/{category}" matches any single segment.
"""

from .feeds import router as feeds_router
from .health import router as health_router
from .pages import router as pages_router

__all__ = [
    "feeds_router",
    "health_router",
    "pages_router",
]

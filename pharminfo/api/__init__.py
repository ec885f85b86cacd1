"""
Web Package
FastAPI application serving the hub/spoke pages, sitemap and RSS feed.
"""

from .main import create_app

__all__ = ["create_app"]

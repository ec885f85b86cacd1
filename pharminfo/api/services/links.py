"""
Site URLs.
Relative paths for templates and absolute URLs for structured data, feeds
and the sitemap. Korean slugs are percent-encoded.
"""

from typing import Optional
from urllib.parse import quote

from ...config.settings import Settings, get_settings

PRICE_COMPARE_SEGMENT = "가격비교"


def hub_path(category_slug: str) -> str:
    return f"/{quote(category_slug)}"


def spoke_path(category_slug: str, slug: str) -> str:
    return f"/{quote(category_slug)}/{quote(slug)}"


def price_compare_path(category_slug: str) -> str:
    return f"/{quote(category_slug)}/{quote(PRICE_COMPARE_SEGMENT)}"


def absolute(path: str, settings: Optional[Settings] = None) -> str:
    settings = settings or get_settings()
    return settings.absolute_url(path)


def image_url(image: str, settings: Optional[Settings] = None) -> Optional[str]:
    """Absolute image URL, or None when the product has no image."""
    if not image:
        return None
    if image.startswith("http"):
        return image
    return absolute(image, settings)

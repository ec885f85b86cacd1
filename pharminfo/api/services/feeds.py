"""
Sitemap and RSS entries.
"""

from dataclasses import dataclass
from datetime import datetime, timezone
from email.utils import format_datetime
from typing import List, Optional

from ...config.settings import Settings, get_settings
from ...content.store import ContentStore
from .links import absolute, hub_path, spoke_path


@dataclass
class SitemapEntry:
    loc: str
    lastmod: Optional[str]
    changefreq: str
    priority: float


@dataclass
class FeedItem:
    title: str
    link: str
    description: str
    date: str  # ISO date, sort key

    @property
    def pub_date(self) -> str:
        return rfc822(self.date)


def parse_date(value: str) -> datetime:
    parsed = datetime.fromisoformat(value)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def rfc822(value: str) -> str:
    return format_datetime(parse_date(value).astimezone(timezone.utc), usegmt=True)


def sitemap_entries(store: ContentStore, settings: Optional[Settings] = None) -> List[SitemapEntry]:
    settings = settings or get_settings()
    now = datetime.now(timezone.utc).isoformat(timespec="seconds")

    entries = [
        SitemapEntry(settings.base_url, now, "weekly", 1.0),
        SitemapEntry(absolute("/about", settings), settings.about_last_modified, "monthly", 0.5),
    ]
    for hub in store.hub_articles:
        entries.append(
            SitemapEntry(absolute(hub_path(hub.category_slug), settings), hub.date_modified, "weekly", 0.9)
        )
    for category, slug, spoke in store.iter_spokes():
        entries.append(
            SitemapEntry(absolute(spoke_path(category, slug), settings), spoke.date_modified, "monthly", 0.8)
        )
    return entries


def feed_items(store: ContentStore, settings: Optional[Settings] = None) -> List[FeedItem]:
    """Hubs and spokes, newest first."""
    settings = settings or get_settings()
    fallback = settings.default_content_date

    items = []
    for hub in store.hub_articles:
        items.append(
            FeedItem(
                title=hub.title,
                link=absolute(hub_path(hub.category_slug), settings),
                description=hub.meta_description,
                date=hub.date_modified or hub.date_published or fallback,
            )
        )
    for category, slug, spoke in store.iter_spokes():
        items.append(
            FeedItem(
                title=spoke.title,
                link=absolute(spoke_path(category, slug), settings),
                description=spoke.meta_description,
                date=spoke.date_modified or spoke.date_published or fallback,
            )
        )

    # Stable sort keeps hubs before spokes on equal dates
    items.sort(key=lambda item: item.date, reverse=True)
    return items


def last_build_date() -> str:
    return format_datetime(datetime.now(timezone.utc), usegmt=True)

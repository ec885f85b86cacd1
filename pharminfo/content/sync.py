"""
Hub/spoke synchronisation.
Keeps each hub's spoke listing in step with the spoke articles of its category.
"""

import logging
from dataclasses import dataclass
from typing import Dict, List, Mapping, Tuple

from ..models.content import HubArticle, SpokeArticle, SpokeSummary
from .store import ContentStore

logger = logging.getLogger(__name__)


def fallback_title(slug: str) -> str:
    return f"{slug} 성분 효과 | 사용법 부작용 총정리"


def fallback_description(slug: str) -> str:
    return f"{slug}의 성분, 효과, 사용법, 부작용 정보"


def find_missing_hub_entries(hub: HubArticle, spokes: Mapping[str, SpokeArticle]) -> List[str]:
    """Spoke slugs not yet listed in the hub, in spoke order."""
    listed = set(hub.spoke_slugs)
    return [slug for slug in spokes if slug not in listed]


def sync_hub_spokes(hub: HubArticle, spokes: Mapping[str, SpokeArticle]) -> Tuple[HubArticle, List[str]]:
    """
    Append hub entries for spokes the hub does not list yet.

    Returns:
        (updated hub, added slugs). The input hub is not modified.
    """
    missing = find_missing_hub_entries(hub, spokes)
    if not missing:
        return hub, []

    entries = list(hub.spokes)
    for slug in missing:
        spoke = spokes[slug]
        entries.append(
            SpokeSummary(
                slug=slug,
                title=spoke.title or fallback_title(slug),
                description=spoke.description or fallback_description(slug),
            )
        )
    return hub.model_copy(update={"spokes": entries}), missing


@dataclass
class CountRow:
    category: str
    hub_count: int
    spokes_count: int

    @property
    def difference(self) -> int:
        return self.spokes_count - self.hub_count


def count_report(store: ContentStore) -> List[CountRow]:
    rows = []
    for category, article_file in store.article_files.items():
        rows.append(CountRow(category, len(article_file.hub.spokes), len(article_file.spokes)))
    return rows


def sync_store(store: ContentStore, dry_run: bool = False) -> Dict[str, List[str]]:
    """
    Sync every category in the store, rewriting changed article files.

    Returns:
        Added slugs keyed by category (categories with no changes omitted)
    """
    added: Dict[str, List[str]] = {}
    for category, article_file in list(store.article_files.items()):
        hub, new_slugs = sync_hub_spokes(article_file.hub, article_file.spokes)
        if not new_slugs:
            logger.info(f"[{category}] in sync ({len(article_file.hub.spokes)} spokes)")
            continue

        added[category] = new_slugs
        logger.info(f"[{category}] adding {len(new_slugs)} hub entries: {', '.join(new_slugs)}")
        if not dry_run:
            store.write_articles(category, hub, article_file.spokes)

    return added

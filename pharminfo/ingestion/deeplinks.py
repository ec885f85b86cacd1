"""
Marketplace deep links.
Resolves, repairs and verifies Barkiri product ids used for affiliate links.
"""

import logging
import re
import time
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple
from urllib.parse import quote

import requests
from bs4 import BeautifulSoup

from ..config.settings import Settings, get_settings
from ..content.store import ContentStore
from ..models.content import Product

logger = logging.getLogger(__name__)

PRODUCT_PATH_RE = re.compile(r"/products/(p\d+)")


def product_url(product_id: str, settings: Optional[Settings] = None) -> str:
    settings = settings or get_settings()
    return f"{settings.marketplace_url}/products/{product_id}"


def search_url(query: str, settings: Optional[Settings] = None) -> str:
    """Public search page linked from the site."""
    settings = settings or get_settings()
    return f"{settings.marketplace_url}/search?query={quote(query)}"


def affiliate_url(product: Product, settings: Optional[Settings] = None) -> str:
    """Best purchase link for a product: direct page, external search, then marketplace search."""
    if product.barkiry_product_id:
        return product_url(product.barkiry_product_id, settings)
    if product.external_search_url:
        return product.external_search_url
    return search_url(product.barkiry_query or product.slug, settings)


def extract_product_ids(html: str) -> List[str]:
    """
    Unique product ids from a search page.

    Linked results come first in page order, followed by ids that only
    appear in embedded data such as client-rendered result lists.
    """
    soup = BeautifulSoup(html, "html.parser")
    ids: List[str] = []
    for link in soup.find_all("a", href=True):
        match = PRODUCT_PATH_RE.search(link["href"])
        if match and match.group(1) not in ids:
            ids.append(match.group(1))

    for product_id in PRODUCT_PATH_RE.findall(html):
        if product_id not in ids:
            ids.append(product_id)
    return ids


class MarketplaceClient:
    """HTTP access to the marketplace search and product pages."""

    def __init__(
        self,
        settings: Optional[Settings] = None,
        timeout: Optional[int] = None,
        session: Optional[requests.Session] = None,
    ):
        self.settings = settings or get_settings()
        self.timeout = timeout or self.settings.resolver_timeout
        self.session = session or requests.Session()
        self.session.headers.update({"User-Agent": self.settings.user_agent})

    def search(self, query: str) -> Optional[Tuple[str, int]]:
        """
        Search the marketplace.

        Returns:
            (first product id, number of unique ids) or None
        """
        url = f"{self.settings.marketplace_url}/search"
        try:
            response = self.session.get(url, params={"term": query}, timeout=self.timeout)
        except requests.RequestException as e:
            logger.warning(f"Search failed for '{query}': {e}")
            return None
        if not response.ok:
            return None

        ids = extract_product_ids(response.text)
        if not ids:
            return None
        return ids[0], len(ids)

    def head_product(self, product_id: str) -> requests.Response:
        return self.session.head(
            product_url(product_id, self.settings), allow_redirects=True, timeout=self.timeout
        )

    def check_product(self, product_id: str) -> bool:
        try:
            return self.head_product(product_id).ok
        except requests.RequestException:
            return False


@dataclass
class LinkChange:
    category: str
    name: str
    slug: str
    old_id: Optional[str]
    new_id: str

    @property
    def action(self) -> str:
        return "replace" if self.old_id else "add"


@dataclass
class ResolveResult:
    valid: int = 0
    fixed: int = 0
    not_found: int = 0
    changes: List[LinkChange] = field(default_factory=list)
    backups: List[str] = field(default_factory=list)


class DeepLinkResolver:
    """
    Checks existing product ids and searches for missing or broken ones.

    Products that cannot be resolved keep their search fallback link.
    """

    def __init__(
        self,
        store: ContentStore,
        client: Optional[MarketplaceClient] = None,
        delay: Optional[float] = None,
    ):
        self.store = store
        self.client = client or MarketplaceClient()
        self.delay = self.client.settings.resolver_delay if delay is None else delay

    def run(self, dry_run: bool = False) -> ResolveResult:
        result = ResolveResult()
        updated: Dict[str, List[Product]] = {}

        for category, products in self.store.product_files.items():
            new_products = list(products)
            for i, product in enumerate(products):
                new_id = self._resolve(product, result)
                if new_id is not None:
                    result.changes.append(
                        LinkChange(category, product.name, product.slug, product.barkiry_product_id, new_id)
                    )
                    new_products[i] = product.model_copy(update={"barkiry_product_id": new_id})
                    updated[category] = new_products
                time.sleep(self.delay)

        if not result.changes:
            logger.info("All deep links are valid; nothing to change")
            return result

        if dry_run:
            logger.info(f"Dry run: {len(result.changes)} changes not written")
            return result

        for category, products in updated.items():
            path = self.store.content_dir / "products" / f"{category}.json"
            had_file = path.exists()
            self.store.write_products(category, products, backup=True)
            if had_file:
                result.backups.append(str(path) + ".bak")
            logger.info(f"Updated {path}")

        return result

    def _resolve(self, product: Product, result: ResolveResult) -> Optional[str]:
        """Return a new product id when one should be written, else None."""
        query = product.barkiry_query or product.slug

        if product.barkiry_product_id:
            if self.client.check_product(product.barkiry_product_id):
                logger.info(f"OK {product.name} -> /products/{product.barkiry_product_id}")
                result.valid += 1
                return None
            logger.warning(f"BROKEN {product.name} -> /products/{product.barkiry_product_id}, searching again")
            time.sleep(self.delay)
        else:
            logger.info(f"{product.name}: no product id, searching")

        found = self.client.search(query)
        if found is None:
            logger.warning(f"  no marketplace result for '{query}', keeping search fallback")
            result.not_found += 1
            return None

        new_id, total = found
        logger.info(f"  found {new_id} (first of {total} results)")
        result.fixed += 1
        return new_id


@dataclass
class LinkStatus:
    name: str
    url: str
    status: str  # OK, FAIL or ERROR
    code: str


def verify_deeplinks(store: ContentStore, client: Optional[MarketplaceClient] = None) -> List[LinkStatus]:
    """HEAD every product page that has an id."""
    settings = get_settings()
    client = client or MarketplaceClient(settings=settings, timeout=settings.verify_timeout)

    statuses = []
    for product in store.products:
        if not product.barkiry_product_id:
            continue
        url = product_url(product.barkiry_product_id, client.settings)
        try:
            response = client.head_product(product.barkiry_product_id)
            status = "OK" if response.ok else "FAIL"
            statuses.append(LinkStatus(product.name, url, status, str(response.status_code)))
        except requests.RequestException as e:
            statuses.append(LinkStatus(product.name, url, "ERROR", str(e)))
    return statuses

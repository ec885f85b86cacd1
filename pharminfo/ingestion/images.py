"""
Product images.
Downloads API and marketplace CDN images, reports products still using
the placeholder and resets image paths whose file is gone.
"""

import logging
import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional, Union

import requests

from ..config.settings import get_settings
from ..content.store import ContentStore
from ..models.content import Product

logger = logging.getLogger(__name__)

MIN_IMAGE_BYTES = 500
DOWNLOAD_TIMEOUT = 10
CDN_DELAY = 0.15


def download_image(
    url: str,
    path: Union[str, Path],
    session: Optional[requests.Session] = None,
    min_bytes: int = 0,
) -> bool:
    """
    Save the body of url to path.

    Returns:
        True when the file was written; failures are logged, never raised
    """
    http = session or requests
    try:
        response = http.get(url, timeout=DOWNLOAD_TIMEOUT)
    except requests.RequestException as e:
        logger.warning(f"Image download failed: {url} ({e})")
        return False

    if not response.ok:
        logger.warning(f"Image download failed: {url} (HTTP {response.status_code})")
        return False
    if len(response.content) < min_bytes:
        logger.warning(f"Image too small: {url} ({len(response.content)} bytes)")
        return False

    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(response.content)
    return True


def fetch_marketplace_image(
    product_id: str,
    slug: str,
    images_dir: Union[str, Path],
    session: Optional[requests.Session] = None,
) -> Optional[str]:
    """
    Download a product's CDN image as barkiri-<slug>.webp.

    Returns:
        Site path of the saved image (/images/...), or None
    """
    settings = get_settings()
    url = f"{settings.marketplace_cdn_url}/{product_id}.webp"
    headers = {
        "User-Agent": settings.user_agent,
        "Referer": f"{settings.marketplace_url}/products/{product_id}",
    }
    http = session or requests

    try:
        response = http.get(url, headers=headers, timeout=DOWNLOAD_TIMEOUT)
    except requests.RequestException as e:
        logger.warning(f"[{slug}] CDN request failed: {e}")
        return None

    if not response.ok:
        logger.warning(f"[{slug}] CDN HTTP {response.status_code}")
        return None

    content_type = response.headers.get("content-type", "")
    if "image" not in content_type and "webp" not in content_type:
        logger.warning(f"[{slug}] not an image: {content_type}")
        return None

    if len(response.content) < MIN_IMAGE_BYTES:
        logger.warning(f"[{slug}] image too small ({len(response.content)} bytes)")
        return None

    filename = f"barkiri-{slug}.webp"
    target = Path(images_dir) / filename
    target.parent.mkdir(parents=True, exist_ok=True)
    target.write_bytes(response.content)
    return f"/images/{filename}"


@dataclass
class MissingImage:
    category: str
    slug: str
    name: str
    current_image: str
    product_id: Optional[str] = None


@dataclass
class MissingImageReport:
    fetchable: List[MissingImage] = field(default_factory=list)  # has a marketplace id
    manual: List[MissingImage] = field(default_factory=list)

    @property
    def total(self) -> int:
        return len(self.fetchable) + len(self.manual)


def find_missing_images(store: ContentStore) -> MissingImageReport:
    report = MissingImageReport()
    for category, products in store.product_files.items():
        for product in products:
            if not product.has_placeholder_image:
                continue
            entry = MissingImage(
                category=category,
                slug=product.slug,
                name=product.name,
                current_image=product.image,
                product_id=product.barkiry_product_id,
            )
            if product.barkiry_product_id:
                report.fetchable.append(entry)
            else:
                report.manual.append(entry)
    return report


def fill_missing_images(
    store: ContentStore,
    images_dir: Union[str, Path],
    dry_run: bool = False,
    session: Optional[requests.Session] = None,
) -> Dict[str, int]:
    """
    Fetch CDN images for fetchable products and point their records at them.

    Returns:
        Counts of downloaded, reused and failed images
    """
    images_dir = Path(images_dir)
    stats = {"downloaded": 0, "reused": 0, "failed": 0}
    report = find_missing_images(store)
    changed: Dict[str, List[Product]] = {}

    for entry in report.fetchable:
        filename = f"barkiri-{entry.slug}.webp"
        site_path: Optional[str] = f"/images/{filename}"

        if (images_dir / filename).exists():
            stats["reused"] += 1
        elif dry_run:
            logger.info(f"[dry-run] would fetch {entry.category}/{entry.slug} ({entry.product_id})")
            continue
        else:
            site_path = fetch_marketplace_image(entry.product_id, entry.slug, images_dir, session=session)
            time.sleep(CDN_DELAY)
            if site_path is None:
                stats["failed"] += 1
                continue
            stats["downloaded"] += 1

        products = changed.setdefault(entry.category, store.get_products_by_category(entry.category))
        for i, product in enumerate(products):
            if product.slug == entry.slug:
                products[i] = product.model_copy(update={"image": site_path})
                break

    if not dry_run:
        for category, products in changed.items():
            store.write_products(category, products)
            logger.info(f"Updated images in products/{category}.json")

    return stats


def repair_broken_images(
    store: ContentStore,
    public_dir: Union[str, Path],
    dry_run: bool = False,
) -> List[MissingImage]:
    """
    Point products whose image file is missing under public_dir back at the
    placeholder.

    Returns:
        The repaired products, with the path they pointed at before
    """
    public_dir = Path(public_dir)
    placeholder = get_settings().placeholder_image
    repaired: List[MissingImage] = []

    for category in list(store.product_files):
        products = store.get_products_by_category(category)
        changed = False
        for i, product in enumerate(products):
            image = product.image
            if not image.startswith("/") or image == placeholder:
                continue
            if (public_dir / image.lstrip("/")).exists():
                continue

            logger.info(f"[{category}] {image} -> {placeholder}")
            repaired.append(
                MissingImage(
                    category=category,
                    slug=product.slug,
                    name=product.name,
                    current_image=image,
                    product_id=product.barkiry_product_id,
                )
            )
            products[i] = product.model_copy(update={"image": placeholder})
            changed = True

        if changed and not dry_run:
            store.write_products(category, products)
            logger.info(f"Updated images in products/{category}.json")

    return repaired

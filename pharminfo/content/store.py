"""
Content Store
Loads categories, products and hub/spoke articles from the content directory
and writes them back for the batch tools.
"""

import json
import logging
import shutil
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Tuple, Union

from pydantic import TypeAdapter, ValidationError

from ..models.content import ArticleFile, Category, HubArticle, Product, SpokeArticle

logger = logging.getLogger(__name__)

CATEGORIES_FILE = "categories.json"
PRODUCTS_DIR = "products"
ARTICLES_DIR = "articles"

_categories_adapter = TypeAdapter(List[Category])
_products_adapter = TypeAdapter(List[Product])


class ContentError(Exception):
    """Raised when a content file is missing or does not validate."""

    def __init__(self, message: str, path: Optional[Path] = None):
        self.message = message
        self.path = path
        super().__init__(f"{path}: {message}" if path else message)


def _read_json(path: Path) -> Any:
    try:
        with open(path, encoding="utf-8") as f:
            return json.load(f)
    except OSError as e:
        raise ContentError(f"cannot read file ({e})", path) from e
    except json.JSONDecodeError as e:
        raise ContentError(f"invalid JSON at line {e.lineno}", path) from e


def write_json(path: Path, data: Any, backup: bool = False) -> Optional[Path]:
    """
    Write data as pretty UTF-8 JSON.

    Args:
        path: Target file
        data: JSON-serialisable data
        backup: Copy an existing file to <name>.bak first

    Returns:
        Backup path when one was written
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    backup_path = None
    if backup and path.exists():
        backup_path = path.with_name(path.name + ".bak")
        shutil.copyfile(path, backup_path)
        logger.info(f"Backup written: {backup_path}")

    with open(path, "w", encoding="utf-8") as f:
        json.dump(data, f, ensure_ascii=False, indent=2)
        f.write("\n")
    return backup_path


def _dump(models: Iterable) -> List[Dict[str, Any]]:
    return [m.model_dump(mode="json") for m in models]


class ContentStore:
    """
    In-memory snapshot of the content directory.

    Products and articles are grouped by category slug. Lookups for unknown
    categories or slugs return None (or an empty list).
    """

    def __init__(
        self,
        content_dir: Union[str, Path],
        categories: Optional[List[Category]] = None,
        products: Optional[Dict[str, List[Product]]] = None,
        articles: Optional[Dict[str, ArticleFile]] = None,
    ):
        self.content_dir = Path(content_dir)
        self._categories: List[Category] = categories or []
        self._products: Dict[str, List[Product]] = products or {}
        self._articles: Dict[str, ArticleFile] = articles or {}

    # ------------------------------------------------------------------
    # Loading
    # ------------------------------------------------------------------

    @classmethod
    def load(cls, content_dir: Union[str, Path]) -> "ContentStore":
        content_dir = Path(content_dir)
        if not content_dir.is_dir():
            raise ContentError("content directory not found", content_dir)

        categories: List[Category] = []
        categories_path = content_dir / CATEGORIES_FILE
        if categories_path.exists():
            try:
                categories = _categories_adapter.validate_python(_read_json(categories_path))
            except ValidationError as e:
                raise ContentError(f"invalid categories: {e.error_count()} errors", categories_path) from e

        products: Dict[str, List[Product]] = {}
        for path in sorted((content_dir / PRODUCTS_DIR).glob("*.json")):
            try:
                products[path.stem] = _products_adapter.validate_python(_read_json(path))
            except ValidationError as e:
                raise ContentError(f"invalid products: {e.error_count()} errors", path) from e

        articles: Dict[str, ArticleFile] = {}
        for path in sorted((content_dir / ARTICLES_DIR).glob("*.json")):
            try:
                articles[path.stem] = ArticleFile.model_validate(_read_json(path))
            except ValidationError as e:
                raise ContentError(f"invalid articles: {e.error_count()} errors", path) from e

        store = cls(content_dir, categories, products, articles)
        logger.info(
            f"Loaded content from {content_dir}: {len(categories)} categories, "
            f"{len(store.products)} products, {len(store.spoke_articles)} spokes"
        )
        return store

    # ------------------------------------------------------------------
    # Categories
    # ------------------------------------------------------------------

    @property
    def categories(self) -> List[Category]:
        return list(self._categories)

    def get_category(self, slug: str) -> Optional[Category]:
        for category in self._categories:
            if category.slug == slug:
                return category
        return None

    # ------------------------------------------------------------------
    # Products
    # ------------------------------------------------------------------

    @property
    def products(self) -> List[Product]:
        return [p for items in self._products.values() for p in items]

    @property
    def product_files(self) -> Dict[str, List[Product]]:
        return self._products

    def get_products_by_category(self, category_slug: str) -> List[Product]:
        if category_slug in self._products:
            return list(self._products[category_slug])
        return [p for p in self.products if p.category_slug == category_slug]

    def get_product_by_slug(self, category_slug: str, slug: str) -> Optional[Product]:
        for product in self.get_products_by_category(category_slug):
            if product.slug == slug:
                return product
        return None

    # ------------------------------------------------------------------
    # Articles
    # ------------------------------------------------------------------

    @property
    def hub_articles(self) -> List[HubArticle]:
        return [a.hub for a in self._articles.values()]

    @property
    def spoke_articles(self) -> List[SpokeArticle]:
        return [s for a in self._articles.values() for s in a.spokes.values()]

    @property
    def article_files(self) -> Dict[str, ArticleFile]:
        return self._articles

    def get_hub_article(self, category_slug: str) -> Optional[HubArticle]:
        article_file = self._articles.get(category_slug)
        return article_file.hub if article_file else None

    def get_spoke_article(self, category_slug: str, slug: str) -> Optional[SpokeArticle]:
        article_file = self._articles.get(category_slug)
        if article_file is None:
            return None
        return article_file.spokes.get(slug)

    def get_spokes(self, category_slug: str) -> Dict[str, SpokeArticle]:
        article_file = self._articles.get(category_slug)
        return dict(article_file.spokes) if article_file else {}

    def iter_spokes(self, category_slug: Optional[str] = None) -> Iterable[Tuple[str, str, SpokeArticle]]:
        """Yield (category, slug, article) for every spoke, optionally one category."""
        for cat, article_file in self._articles.items():
            if category_slug and cat != category_slug:
                continue
            for slug, spoke in article_file.spokes.items():
                yield cat, slug, spoke

    def get_spoke_products(self, article: SpokeArticle) -> List[Product]:
        """Resolve the product slugs referenced by a spoke. Unknown slugs are skipped."""
        resolved = []
        for product_slug in article.products:
            product = self.get_product_by_slug(article.category_slug, product_slug)
            if product is not None:
                resolved.append(product)
        return resolved

    def spoke_count(self, category_slug: str) -> int:
        article_file = self._articles.get(category_slug)
        return len(article_file.spokes) if article_file else 0

    def check_integrity(self) -> List[str]:
        """
        Cross-reference hubs, spokes and products.

        Returns:
            Human-readable problems; empty when the content is consistent
        """
        problems: List[str] = []
        for cat, article_file in self._articles.items():
            listed = set(article_file.hub.spoke_slugs)
            present = set(article_file.spokes)

            for slug in article_file.hub.spoke_slugs:
                if slug not in present:
                    problems.append(f"{cat}: hub lists missing spoke '{slug}'")
            for slug in article_file.spokes:
                if slug not in listed:
                    problems.append(f"{cat}: spoke '{slug}' not listed in hub")

            for slug, spoke in article_file.spokes.items():
                if spoke.category_slug != cat:
                    problems.append(f"{cat}/{slug}: category_slug is '{spoke.category_slug}'")
                for product_slug in spoke.products:
                    if self.get_product_by_slug(cat, product_slug) is None:
                        problems.append(f"{cat}/{slug}: unknown product '{product_slug}'")

        return problems

    # ------------------------------------------------------------------
    # Writers
    # ------------------------------------------------------------------

    def write_categories(self, categories: List[Category], backup: bool = False) -> Path:
        path = self.content_dir / CATEGORIES_FILE
        write_json(path, _dump(categories), backup=backup)
        self._categories = list(categories)
        return path

    def write_products(self, category_slug: str, products: List[Product], backup: bool = False) -> Path:
        path = self.content_dir / PRODUCTS_DIR / f"{category_slug}.json"
        write_json(path, _dump(products), backup=backup)
        self._products[category_slug] = list(products)
        return path

    def write_articles(
        self,
        category_slug: str,
        hub: HubArticle,
        spokes: Dict[str, SpokeArticle],
        backup: bool = False,
    ) -> Path:
        path = self.content_dir / ARTICLES_DIR / f"{category_slug}.json"
        article_file = ArticleFile(hub=hub, spokes=spokes)
        write_json(path, article_file.model_dump(mode="json"), backup=backup)
        self._articles[category_slug] = article_file
        return path

"""
Content Generation Pipeline
Fetches drug records from the public API and writes categories, products and
hub/spoke articles into the content directory.
"""

import logging
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Optional

from ..config.settings import Settings, get_settings
from ..content.store import ContentStore
from .drug_api import DrugAPIClient
from .images import download_image
from .normalizer import (
    CATEGORY_NAMES,
    ProcessedDrug,
    build_categories,
    build_hub,
    build_product,
    build_spoke,
    deduplicate_slugs,
    group_by_category,
    process_item,
)

logger = logging.getLogger(__name__)

UNCLASSIFIED_SAMPLES = 5


class ContentGenerationError(Exception):
    """Raised when the API returned nothing to generate from."""


def _percent(count: int, total: int) -> float:
    return round(count / total * 100, 1) if total else 0.0


def validation_report(drugs: List[ProcessedDrug], duplicates: int) -> Dict[str, Any]:
    """Category distribution, completeness and unclassified samples for a batch."""
    total = len(drugs)
    distribution: Dict[str, int] = {}
    for drug in drugs:
        distribution[drug.category_slug] = distribution.get(drug.category_slug, 0) + 1

    missing = {
        "efficacy": sum(1 for d in drugs if not d.description_full),
        "usage": sum(1 for d in drugs if not d.usage_full),
        "image": sum(1 for d in drugs if not d.has_image),
        "caution": sum(1 for d in drugs if not d.caution),
    }
    unclassified = [d for d in drugs if d.category_slug == "일반"]

    return {
        "total": total,
        "distribution": distribution,
        "missing": missing,
        "missing_percent": {k: _percent(v, total) for k, v in missing.items()},
        "duplicates": duplicates,
        "unclassified": len(unclassified),
        "unclassified_samples": [d.name for d in unclassified[:UNCLASSIFIED_SAMPLES]],
    }


def log_validation_report(report: Dict[str, Any]) -> None:
    logger.info("=" * 60)
    logger.info("VALIDATION REPORT")
    logger.info("=" * 60)

    logger.info("Category distribution:")
    for slug, count in report["distribution"].items():
        logger.info(f"  {CATEGORY_NAMES.get(slug, slug)}: {count}")

    logger.info("Completeness:")
    for key, count in report["missing"].items():
        logger.info(f"  no {key}: {count} ({report['missing_percent'][key]}%)")

    logger.info(f"Duplicate slugs: {report['duplicates']} (numbered automatically)")

    if report["unclassified"]:
        logger.warning(f"Unclassified: {report['unclassified']} assigned to 일반의약품")
        for name in report["unclassified_samples"]:
            logger.warning(f"  - {name}")
    logger.info("=" * 60)


class ContentGenerationPipeline:
    """
    End-to-end generator.

    fetch -> process -> dedupe slugs -> report -> images -> write content.
    """

    def __init__(
        self,
        client: Optional[DrugAPIClient] = None,
        settings: Optional[Settings] = None,
        content_dir: Optional[Path] = None,
        images_dir: Optional[Path] = None,
    ):
        self.settings = settings or get_settings()
        self.client = client or DrugAPIClient(settings=self.settings)
        self.content_dir = Path(content_dir or self.settings.content_dir)
        self.images_dir = Path(images_dir or self.settings.images_dir)

        self.stats: Dict[str, Any] = {
            "fetched": 0,
            "products": 0,
            "categories": 0,
            "duplicates": 0,
            "images_downloaded": 0,
            "images_reused": 0,
            "files_written": [],
            "report": {},
        }

    def run(self, item_name: Optional[str] = None, rows: int = 100, dry_run: bool = False) -> Dict[str, Any]:
        start_time = datetime.now()
        logger.info(f"Fetching medicines (keyword: {item_name or 'all'}, rows: {rows}, dry_run: {dry_run})")

        items = self.client.fetch_list(item_name, rows)
        self.stats["fetched"] = len(items)
        logger.info(f"Collected {len(items)} records")

        if not items:
            raise ContentGenerationError("no records returned; check the API key and keyword")

        drugs = [process_item(item) for item in items]
        self.stats["duplicates"] = deduplicate_slugs(drugs)

        report = validation_report(drugs, self.stats["duplicates"])
        self.stats["report"] = report
        log_validation_report(report)

        self.stats["products"] = len(drugs)
        self.stats["categories"] = len(report["distribution"])

        if dry_run:
            logger.info("Dry run: validation only, no files written")
            return self.stats

        self._download_images(drugs)
        self._write_content(drugs)

        elapsed = (datetime.now() - start_time).total_seconds()
        logger.info(
            f"Generated {len(drugs)} products / {self.stats['categories']} hubs "
            f"in {elapsed:.1f} seconds"
        )
        return self.stats

    def _download_images(self, drugs: List[ProcessedDrug]) -> None:
        self.images_dir.mkdir(parents=True, exist_ok=True)

        for drug in drugs:
            if not drug.image.startswith("http"):
                continue
            ext = ".jpg" if ".jpg" in drug.image else ".png"
            filename = f"{drug.id}{ext}"
            target = self.images_dir / filename

            if target.exists():
                self.stats["images_reused"] += 1
                drug.image = f"/images/{filename}"
            elif download_image(drug.image, target):
                self.stats["images_downloaded"] += 1
                drug.image = f"/images/{filename}"

        logger.info(
            f"Images: {self.stats['images_downloaded']} downloaded, "
            f"{self.stats['images_reused']} reused"
        )

    def _write_content(self, drugs: List[ProcessedDrug]) -> None:
        self.content_dir.mkdir(parents=True, exist_ok=True)
        store = ContentStore(self.content_dir)

        path = store.write_categories(build_categories(drugs))
        self.stats["files_written"].append(str(path))

        for category_slug, group in group_by_category(drugs).items():
            path = store.write_products(category_slug, [build_product(d) for d in group])
            self.stats["files_written"].append(str(path))

            spokes = {d.slug: build_spoke(d) for d in group}
            path = store.write_articles(category_slug, build_hub(category_slug, group), spokes)
            self.stats["files_written"].append(str(path))

        for path in self.stats["files_written"]:
            logger.info(f"Wrote {path}")

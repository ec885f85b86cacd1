#!/usr/bin/env python3
"""
API Cross-check Script
Looks every product up in the public drug API and compares the
manufacturer named in its article with the registered one.

Usage:
    DATA_GO_KR_KEY=... python -m pharminfo.scripts.api_crosscheck
    DATA_GO_KR_KEY=... python -m pharminfo.scripts.api_crosscheck --category 탈모
"""

import argparse
import logging
import sys

from ..config.settings import get_settings
from ..content.store import ContentError, ContentStore
from ..ingestion.crosscheck import CrossChecker
from ..ingestion.drug_api import DrugAPIClient

logging.basicConfig(
    level=logging.INFO, format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)


def main():
    parser = argparse.ArgumentParser(description="Cross-check products against the public drug API")
    parser.add_argument("--category", type=str, default=None, help="Only check one category slug")
    parser.add_argument("--content-dir", type=str, default=None, help="Content directory (default: settings)")
    args = parser.parse_args()

    settings = get_settings()
    if not settings.drug_api_key:
        logger.error("DATA_GO_KR_KEY environment variable not set")
        sys.exit(1)

    try:
        store = ContentStore.load(args.content_dir or settings.content_dir)
    except ContentError as e:
        logger.error(f"Cannot load content: {e}")
        sys.exit(1)

    checker = CrossChecker(store, DrugAPIClient(settings=settings))
    result = checker.run(args.category)

    logger.info("=" * 60)
    logger.info("API CROSS-CHECK RESULTS")
    logger.info("=" * 60)
    logger.info(f"Checked: {result.checked}")
    logger.info(f"Found in API: {len(result.found)}")
    logger.info(f"Not found: {len(result.not_found)}")
    logger.info(f"Manufacturer mismatches: {len(result.errors)}")

    for category, entries in sorted(result.found_by_category().items()):
        logger.info(f"[{category}] {len(entries)} registered")

    if result.not_found:
        logger.warning("Not registered (review whether these are OTC products):")
        for entry in result.not_found:
            logger.warning(f"  - {entry.category}/{entry.slug}: {entry.reason}")

    if result.errors:
        logger.error("Manufacturer mismatches:")
        for entry in result.errors:
            logger.error(
                f"  - {entry.category}/{entry.slug}: article says {', '.join(entry.article_manufacturers)}, "
                f"API says {entry.api_manufacturer}"
            )
        sys.exit(1)


if __name__ == "__main__":
    main()

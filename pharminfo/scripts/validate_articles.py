#!/usr/bin/env python3
"""
Article Validation Script
Runs the 18-point quality check over every spoke article.

Usage:
    python -m pharminfo.scripts.validate_articles
    python -m pharminfo.scripts.validate_articles --category 무좀
"""

import argparse
import logging
import sys

from ..config.settings import get_settings
from ..content.store import ContentError, ContentStore
from ..models.quality import ArticleValidator, summarize

logging.basicConfig(
    level=logging.INFO, format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)


def main():
    parser = argparse.ArgumentParser(description="Validate spoke articles against the 18-point checklist")
    parser.add_argument("--category", type=str, default=None, help="Only validate one category slug")
    parser.add_argument("--content-dir", type=str, default=None, help="Content directory (default: settings)")
    args = parser.parse_args()

    try:
        store = ContentStore.load(args.content_dir or get_settings().content_dir)
    except ContentError as e:
        logger.error(f"Cannot load content: {e}")
        sys.exit(1)

    validator = ArticleValidator(store)
    total = 0
    passed_articles = 0

    for category, slug, article in store.iter_spokes(args.category):
        results = validator.validate(category, slug, article)
        failures = [r for r in results if not r.passed]
        total += 1

        if not failures:
            passed_articles += 1
            logger.info(f"PASS {category}/{slug}: {summarize(results)}")
            continue

        logger.warning(f"FAIL {category}/{slug}: {summarize(results)}")
        for result in failures:
            logger.warning(f"   [{result.id}] {result.name}: {result.detail}")

    logger.info("=" * 60)
    logger.info(f"Passed: {passed_articles}/{total}, failed: {total - passed_articles}/{total}")
    logger.info("=" * 60)

    if passed_articles != total:
        logger.warning("Some articles failed; fix the items listed above")
        sys.exit(1)
    logger.info("All articles passed the 18-point check")


if __name__ == "__main__":
    main()

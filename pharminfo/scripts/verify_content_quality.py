#!/usr/bin/env python3
"""
Content Quality Script
Checks finished articles against the fixed six-section layout.

Usage:
    python -m pharminfo.scripts.verify_content_quality
    python -m pharminfo.scripts.verify_content_quality --lenient
"""

import argparse
import logging
import sys

from ..config.settings import get_settings
from ..content.store import ContentError, ContentStore
from ..models.quality import QualitySeverity, StrictContentChecker

logging.basicConfig(
    level=logging.INFO, format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)


def main():
    parser = argparse.ArgumentParser(description="Verify article layout, tone and FAQ rules")
    parser.add_argument("--category", type=str, default=None, help="Only check one category slug")
    parser.add_argument("--content-dir", type=str, default=None, help="Content directory (default: settings)")
    parser.add_argument("--lenient", action="store_true", help="Only fail on errors, not warnings")
    args = parser.parse_args()

    try:
        store = ContentStore.load(args.content_dir or get_settings().content_dir)
    except ContentError as e:
        logger.error(f"Cannot load content: {e}")
        sys.exit(1)

    errors = []
    warnings = []
    total = 0

    for category, slug, article in store.iter_spokes(args.category):
        total += 1
        product = store.get_product_by_slug(category, slug)
        for issue in StrictContentChecker.check(category, slug, article, product):
            if issue.severity == QualitySeverity.ERROR:
                errors.append(issue)
            else:
                warnings.append(issue)

    for issue in errors:
        logger.error(f"[{issue.category}/{issue.slug}] {issue.message}")
    for issue in warnings:
        logger.warning(f"[{issue.category}/{issue.slug}] {issue.message}")

    logger.info("=" * 60)
    logger.info(f"Articles checked: {total}")
    logger.info(f"Errors: {len(errors)}")
    logger.info(f"Warnings: {len(warnings)}")
    logger.info("=" * 60)

    if errors or (warnings and not args.lenient):
        sys.exit(1)


if __name__ == "__main__":
    main()

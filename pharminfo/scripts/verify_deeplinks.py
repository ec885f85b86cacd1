#!/usr/bin/env python3
"""
Deep Link Verification Script
HEAD-checks every marketplace product page referenced by a product.

Usage:
    python -m pharminfo.scripts.verify_deeplinks
"""

import argparse
import logging
import sys

from ..config.settings import get_settings
from ..content.store import ContentError, ContentStore
from ..ingestion.deeplinks import verify_deeplinks

logging.basicConfig(
    level=logging.INFO, format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)


def main():
    parser = argparse.ArgumentParser(description="Verify marketplace product deep links")
    parser.add_argument("--content-dir", type=str, default=None, help="Content directory (default: settings)")
    args = parser.parse_args()

    try:
        store = ContentStore.load(args.content_dir or get_settings().content_dir)
    except ContentError as e:
        logger.error(f"Cannot load content: {e}")
        sys.exit(1)

    statuses = verify_deeplinks(store)
    if not statuses:
        logger.error("No products with a marketplace id")
        sys.exit(1)

    for status in statuses:
        line = f"{status.status:5} {status.name} -> {status.url} [{status.code}]"
        if status.status == "OK":
            logger.info(line)
        else:
            logger.error(line)

    failed = [s for s in statuses if s.status != "OK"]
    logger.info("=" * 60)
    logger.info(f"Checked: {len(statuses)}, OK: {len(statuses) - len(failed)}, failed: {len(failed)}")
    logger.info("=" * 60)

    if failed:
        sys.exit(1)


if __name__ == "__main__":
    main()

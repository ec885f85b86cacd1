#!/usr/bin/env python3
"""
Image Check Script
Lists products still using a placeholder image, optionally fetches
replacements from the marketplace CDN and resets paths to missing files.

Usage:
    python -m pharminfo.scripts.check_images
    python -m pharminfo.scripts.check_images --fetch
    python -m pharminfo.scripts.check_images --fix-broken --dry-run
"""

import argparse
import logging
import sys
from itertools import groupby
from pathlib import Path

from ..config.settings import get_settings
from ..content.store import ContentError, ContentStore
from ..ingestion.images import fill_missing_images, find_missing_images, repair_broken_images

logging.basicConfig(
    level=logging.INFO, format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)

MANUAL_PREVIEW = 5


def main():
    parser = argparse.ArgumentParser(description="Report and fill missing product images")
    parser.add_argument("--content-dir", type=str, default=None, help="Content directory (default: settings)")
    parser.add_argument("--images-dir", type=str, default=None, help="Images directory (default: settings)")
    parser.add_argument("--fetch", action="store_true", help="Download CDN images for fetchable products")
    parser.add_argument("--public-dir", type=str, default=None, help="Site public directory (default: parent of images dir)")
    parser.add_argument("--fix-broken", action="store_true", help="Reset images whose file is missing to the placeholder")
    parser.add_argument("--dry-run", action="store_true", help="With --fetch or --fix-broken, report without writing")
    args = parser.parse_args()

    settings = get_settings()
    try:
        store = ContentStore.load(args.content_dir or settings.content_dir)
    except ContentError as e:
        logger.error(f"Cannot load content: {e}")
        sys.exit(1)

    images_dir = Path(args.images_dir or settings.images_dir)

    if args.fix_broken:
        public_dir = Path(args.public_dir) if args.public_dir else images_dir.parent
        repaired = repair_broken_images(store, public_dir, dry_run=args.dry_run)
        prefix = "[dry-run] " if args.dry_run else ""
        logger.info(f"{prefix}Broken image paths reset to placeholder: {len(repaired)}")

    report = find_missing_images(store)

    logger.info("=" * 60)
    logger.info(f"Fetchable from marketplace CDN: {len(report.fetchable)}")
    logger.info("=" * 60)
    for category, items in groupby(report.fetchable, key=lambda m: m.category):
        items = list(items)
        logger.info(f"[{category}] {len(items)}")
        for item in items:
            logger.info(f"  - {item.slug} ({item.product_id}) -> {item.current_image}")

    logger.info("=" * 60)
    logger.info(f"Manual image needed: {len(report.manual)}")
    logger.info("=" * 60)
    for category, items in groupby(report.manual, key=lambda m: m.category):
        items = list(items)
        logger.info(f"[{category}] {len(items)}")
        for item in items[:MANUAL_PREVIEW]:
            logger.info(f"  - {item.slug}: {item.current_image}")
        if len(items) > MANUAL_PREVIEW:
            logger.info(f"  ... and {len(items) - MANUAL_PREVIEW} more")

    if not args.fetch:
        return

    stats = fill_missing_images(store, images_dir, dry_run=args.dry_run)
    logger.info(
        f"Downloaded: {stats['downloaded']}, reused: {stats['reused']}, failed: {stats['failed']}"
    )
    if stats["failed"]:
        sys.exit(1)


if __name__ == "__main__":
    main()

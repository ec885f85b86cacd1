#!/usr/bin/env python3
"""
Deep Link Resolver Script
Verifies marketplace product ids and searches for missing or broken ones.

Usage:
    python -m pharminfo.scripts.resolve_deeplinks --dry-run
    python -m pharminfo.scripts.resolve_deeplinks
"""

import argparse
import logging
import sys

from ..config.settings import get_settings
from ..content.store import ContentError, ContentStore
from ..ingestion.deeplinks import DeepLinkResolver

logging.basicConfig(
    level=logging.INFO, format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)


def main():
    parser = argparse.ArgumentParser(description="Resolve marketplace deep links for all products")
    parser.add_argument("--content-dir", type=str, default=None, help="Content directory (default: settings)")
    parser.add_argument("--dry-run", action="store_true", help="Report changes without writing files")
    args = parser.parse_args()

    try:
        store = ContentStore.load(args.content_dir or get_settings().content_dir)
    except ContentError as e:
        logger.error(f"Cannot load content: {e}")
        sys.exit(1)

    result = DeepLinkResolver(store).run(dry_run=args.dry_run)

    logger.info("=" * 60)
    logger.info("DEEP LINK RESOLUTION")
    logger.info("=" * 60)
    logger.info(f"Valid: {result.valid}")
    logger.info(f"Fixed: {result.fixed}")
    logger.info(f"Not found (search fallback): {result.not_found}")
    for change in result.changes:
        logger.info(f"  {change.action}: {change.category}/{change.slug} {change.old_id or '-'} -> {change.new_id}")
    for backup in result.backups:
        logger.info(f"Backup: {backup}")


if __name__ == "__main__":
    main()

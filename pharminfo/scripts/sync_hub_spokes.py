#!/usr/bin/env python3
"""
Hub Sync Script
Adds hub entries for spoke articles that the hub does not list yet.

Usage:
    python -m pharminfo.scripts.sync_hub_spokes --report
    python -m pharminfo.scripts.sync_hub_spokes
"""

import argparse
import logging
import sys

from ..config.settings import get_settings
from ..content.store import ContentError, ContentStore
from ..content.sync import count_report, sync_store

logging.basicConfig(
    level=logging.INFO, format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)


def main():
    parser = argparse.ArgumentParser(description="Sync hub spoke listings with the spoke articles")
    parser.add_argument("--content-dir", type=str, default=None, help="Content directory (default: settings)")
    parser.add_argument("--dry-run", action="store_true", help="Report missing entries without writing")
    parser.add_argument("--report", action="store_true", help="Only print hub/spoke counts per category")
    args = parser.parse_args()

    try:
        store = ContentStore.load(args.content_dir or get_settings().content_dir)
    except ContentError as e:
        logger.error(f"Cannot load content: {e}")
        sys.exit(1)

    if args.report:
        logger.info(f"{'category':10} {'hub':>5} {'spokes':>7} {'diff':>5}")
        for row in count_report(store):
            logger.info(f"{row.category:10} {row.hub_count:>5} {row.spokes_count:>7} {row.difference:>5}")
        return

    added = sync_store(store, dry_run=args.dry_run)
    total = sum(len(slugs) for slugs in added.values())

    logger.info("=" * 60)
    logger.info(f"Hub entries {'missing' if args.dry_run else 'added'}: {total} in {len(added)} categories")
    logger.info("=" * 60)


if __name__ == "__main__":
    main()

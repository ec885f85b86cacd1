#!/usr/bin/env python3
"""
Medicine Fetch Script
Pulls OTC medicine records from the public drug API and generates
categories, products, hub and spoke articles in the content directory.

Usage:
    DATA_GO_KR_KEY=... python -m pharminfo.scripts.fetch_medicines --rows 200
    python -m pharminfo.scripts.fetch_medicines --item-name 미녹시딜 --dry-run
"""

import argparse
import logging
import sys

from ..config.settings import get_settings
from ..ingestion.drug_api import DrugAPIClient, DrugAPIError
from ..ingestion.generator import ContentGenerationError, ContentGenerationPipeline

# Configure logging
logging.basicConfig(
    level=logging.INFO, format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)


def main():
    """Fetch records and write generated content."""
    parser = argparse.ArgumentParser(description="Generate medicine content from the public drug API")
    parser.add_argument("--item-name", type=str, default=None, help="Product name keyword (default: all)")
    parser.add_argument("--rows", type=int, default=100, help="Number of records to fetch (default: 100)")
    parser.add_argument("--content-dir", type=str, default=None, help="Content directory (default: settings)")
    parser.add_argument("--images-dir", type=str, default=None, help="Images directory (default: settings)")
    parser.add_argument(
        "--dry-run", action="store_true", help="Fetch and report only, without writing files"
    )
    args = parser.parse_args()

    settings = get_settings()
    if not settings.drug_api_key:
        logger.error("DATA_GO_KR_KEY environment variable not set")
        logger.error("Get a key at https://www.data.go.kr (e약은요 의약품개요정보)")
        sys.exit(1)

    try:
        pipeline = ContentGenerationPipeline(
            client=DrugAPIClient(settings=settings),
            settings=settings,
            content_dir=args.content_dir,
            images_dir=args.images_dir,
        )
        stats = pipeline.run(item_name=args.item_name, rows=args.rows, dry_run=args.dry_run)
    except (ContentGenerationError, DrugAPIError) as e:
        logger.error(f"Content generation failed: {e}")
        sys.exit(1)

    logger.info("=" * 60)
    logger.info("GENERATION COMPLETE" if not args.dry_run else "DRY RUN COMPLETE")
    logger.info("=" * 60)
    logger.info(f"Records fetched: {stats['fetched']}")
    logger.info(f"Products: {stats['products']}")
    logger.info(f"Categories: {stats['categories']}")
    logger.info(f"Duplicate slugs renamed: {stats['duplicates']}")
    if not args.dry_run:
        logger.info(f"Images downloaded: {stats['images_downloaded']}, reused: {stats['images_reused']}")
        logger.info(f"Files written: {len(stats['files_written'])}")


if __name__ == "__main__":
    main()

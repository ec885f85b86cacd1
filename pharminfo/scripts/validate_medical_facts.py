#!/usr/bin/env python3
"""
Medical Fact Lint Script
Scans spoke articles for known pharmacology mistakes.

Usage:
    python -m pharminfo.scripts.validate_medical_facts
"""

import argparse
import logging
import sys

from ..config.settings import get_settings
from ..content.store import ContentError, ContentStore
from ..models.medical_facts import MedicalFactChecker
from ..models.quality import QualitySeverity

logging.basicConfig(
    level=logging.INFO, format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)


def main():
    parser = argparse.ArgumentParser(description="Lint articles for known medical fact errors")
    parser.add_argument("--category", type=str, default=None, help="Only check one category slug")
    parser.add_argument("--content-dir", type=str, default=None, help="Content directory (default: settings)")
    args = parser.parse_args()

    try:
        store = ContentStore.load(args.content_dir or get_settings().content_dir)
    except ContentError as e:
        logger.error(f"Cannot load content: {e}")
        sys.exit(1)

    checker = MedicalFactChecker()
    findings = []
    total = 0
    per_category = {}

    for category, slug, article in store.iter_spokes(args.category):
        total += 1
        found = checker.check_spoke(category, slug, article)
        findings.extend(found)
        per_category[category] = per_category.get(category, 0) + len(found)

    for category, count in sorted(per_category.items()):
        logger.info(f"{'OK  ' if count == 0 else 'WARN'} {category}: {count} issues")

    errors = [f for f in findings if f.severity == QualitySeverity.ERROR]
    warnings = [f for f in findings if f.severity != QualitySeverity.ERROR]

    for finding in errors:
        logger.error(f"[{finding.category}/{finding.slug}] {finding.message} (found: \"{finding.context}\")")
    for finding in warnings:
        logger.warning(f"[{finding.category}/{finding.slug}] {finding.message} (found: \"{finding.context}\")")

    logger.info("=" * 60)
    logger.info(f"Articles: {total}, errors: {len(errors)}, warnings: {len(warnings)}")
    logger.info("=" * 60)

    if errors:
        sys.exit(1)
    if not warnings:
        logger.info("No known medical fact patterns found")


if __name__ == "__main__":
    main()

"""
API cross-check.
Looks every product up in the public drug API and compares the manufacturer
named in its article with the registered one.
"""

import logging
import re
import time
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from ..content.store import ContentStore
from ..models.content import Product
from .drug_api import FIELD_MANUFACTURER, FIELD_NAME, DrugAPIClient
from .normalizer import clean_html

logger = logging.getLogger(__name__)

# Prescription-only medicines the OTC API does not list
SKIP_SLUGS = frozenset(
    [
        # finasteride
        "프로페시아", "피나스테리드", "아보다트", "두타스테리드",
        "파나스카정", "씨엠피나정", "모나스카정", "핀나정", "세화피나정",
        "헤어그로정", "탈피나정", "유한피나스테리드정", "대웅바이오피나스테리드정",
        "네오피나정", "피나온정", "한미피나스테리드정", "코오롱피나스테리드정",
        "명인피나스테리드정", "제일피나스테리드정", "삼아피나스테리드정",
        "동구바이오피나스테리드정", "일양피나스테리드정", "안국피나스테리드정",
        "태극피나스테리드정", "피나리드정", "피나모린정", "신신피나스테리드정",
        "크라운피나스테리드정", "피나젝트정", "오스코피나정", "지오파나정",
        "하이피나정", "피나쎄정", "피나테크정", "올피나정",
        # dutasteride
        "두타반연질캡슐", "아보다트연질캡슐", "아보트렉스연질캡슐",
        "두타사이드연질캡슐", "두타레이드연질캡슐", "두타정", "두타렉스연질캡슐",
        "두타스정",
    ]
)

_COMPANY_MARKERS = re.compile(r"\(주\)|주식회사|\(유\)|유한회사|㈜")

MANUFACTURER_PATTERNS = [
    # "X제약이 제조/생산/출시/판매"
    re.compile(
        r"([가-힣\w\s()주]{2,20}(?:제약|제약사|바이오|헬스|파마|pharma))[이가]?\s*(제조|생산|출시|판매)",
        re.IGNORECASE,
    ),
    # "제조사: X" / "제조사는 X"
    re.compile(r"제조사[는은이가]?\s*:?\s*([가-힣\w\s()주]{3,25}(?:제약|바이오|헬스|파마))"),
    # "X제약의" / "X제약에서"
    re.compile(r"([가-힣]{2,8}(?:제약|바이오))[의에서가이]"),
]


def normalize_manufacturer(name: Optional[str]) -> str:
    if not name:
        return ""
    name = _COMPANY_MARKERS.sub("", name)
    return re.sub(r"\s+", "", name).lower()


def find_manufacturers(text: str) -> List[str]:
    """Manufacturer names mentioned in article text, first match per pattern."""
    found: List[str] = []
    for pattern in MANUFACTURER_PATTERNS:
        match = pattern.search(text)
        if match:
            name = match.group(1).strip()
            if len(name) >= 2 and name not in found:
                found.append(name)
    return found


def manufacturers_match(article_names: List[str], api_name: str) -> bool:
    api_norm = normalize_manufacturer(api_name)
    for name in article_names:
        norm = normalize_manufacturer(name)
        if norm in api_norm or api_norm in norm:
            return True
    return False


@dataclass
class CrossCheckEntry:
    category: str
    slug: str
    name: str
    api_name: str = ""
    api_manufacturer: str = ""
    article_manufacturers: List[str] = field(default_factory=list)
    reason: str = ""


@dataclass
class CrossCheckResult:
    checked: int = 0
    found: List[CrossCheckEntry] = field(default_factory=list)
    not_found: List[CrossCheckEntry] = field(default_factory=list)
    errors: List[CrossCheckEntry] = field(default_factory=list)  # manufacturer mismatches

    def found_by_category(self) -> Dict[str, List[CrossCheckEntry]]:
        grouped: Dict[str, List[CrossCheckEntry]] = {}
        for entry in self.found:
            grouped.setdefault(entry.category, []).append(entry)
        return grouped


class CrossChecker:
    """Sequential API lookups with a fixed delay between products."""

    def __init__(self, store: ContentStore, client: DrugAPIClient, delay: Optional[float] = None):
        self.store = store
        self.client = client
        self.delay = client.delay if delay is None else delay

    def products_to_check(self, category: Optional[str] = None) -> List[Product]:
        categories = [category] if category else list(self.store.product_files)
        products = []
        for cat in categories:
            for product in self.store.get_products_by_category(cat):
                if product.slug in SKIP_SLUGS:
                    continue
                products.append(product)
        return products

    def run(self, category: Optional[str] = None) -> CrossCheckResult:
        result = CrossCheckResult()
        products = self.products_to_check(category)
        logger.info(f"Cross-checking {len(products)} products")

        for i, product in enumerate(products, 1):
            if i % 10 == 0:
                logger.info(f"Progress: {i}/{len(products)}")

            items = self.client.search(product.slug)
            time.sleep(self.delay)
            result.checked += 1

            entry = CrossCheckEntry(
                category=product.category_slug,
                slug=product.slug,
                name=product.name,
            )

            if not items:
                entry.reason = "not registered (prescription-only or missing from API)"
                result.not_found.append(entry)
                continue

            item = items[0]
            entry.api_name = item.get(FIELD_NAME) or ""
            entry.api_manufacturer = clean_html(item.get(FIELD_MANUFACTURER))
            result.found.append(entry)

            spoke = self.store.get_spoke_article(product.category_slug, product.slug)
            if spoke is None:
                continue
            mentioned = find_manufacturers(spoke.full_text())
            if mentioned and not manufacturers_match(mentioned, entry.api_manufacturer):
                entry.article_manufacturers = mentioned
                result.errors.append(entry)

        return result

"""
Quality assessment for spoke articles.
Structural and tone checks over generated medicine content.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, List, Optional, Sequence, Union

from .content import IngredientType, Product, SpokeArticle

if TYPE_CHECKING:
    from ..content.store import ContentStore


class QualitySeverity(str, Enum):
    """Severity levels for quality issues."""

    ERROR = "error"  # Article must be fixed
    WARNING = "warning"  # Article is usable but off-formula


@dataclass
class CheckResult:
    """Outcome of one numbered article check."""

    id: int
    name: str
    passed: bool
    detail: str = ""


@dataclass
class QualityIssue:
    category: str
    slug: str
    message: str
    severity: QualitySeverity = QualitySeverity.ERROR


# Formal register endings that should have been converted to the polite tone
FORMAL_PATTERNS = [
    re.compile(r"습니다"),
    re.compile(r"하십시오"),
    re.compile(r"됩니다"),
    re.compile(r"있습니다"),
    re.compile(r"없습니다"),
    re.compile(r"바랍니다"),
    re.compile(r"마십시오"),
    re.compile(r"드립니다"),
    re.compile(r"입니다(?!\.)"),
]

REQUIRED_SECTION_KEYWORDS: List[Union[str, re.Pattern]] = [
    "성분",
    "효능",
    re.compile(r"사용법|복용법"),
    "부작용",
    "주의사항",
    "보관",
]

MIN_SECTION_LENGTH = 200
MAX_META_LENGTH = 155


def _keyword_label(keyword: Union[str, re.Pattern]) -> str:
    return keyword.pattern if isinstance(keyword, re.Pattern) else keyword


class ArticleValidator:
    """
    Eighteen-point article check.

    Every spoke is compared against the reference article layout: title
    formula, intro, six sections, ingredient table, FAQ, product card,
    deep link, internal links and tone.
    """

    def __init__(self, store: "ContentStore"):
        self.store = store

    def validate(self, category: str, slug: str, article: SpokeArticle) -> List[CheckResult]:
        results: List[CheckResult] = []
        sections = article.sections
        products = self.store.get_spoke_products(article)

        # 1. Title formula
        title_pattern = re.compile(
            rf"^{re.escape(slug)} 최저가 가격 \| 성분 효과 (사용법|복용법) 부작용까지$"
        )
        results.append(
            CheckResult(1, "title format", bool(title_pattern.match(article.title)), article.title)
        )

        # 2. H1 equals title
        same = article.h1 == article.title
        results.append(
            CheckResult(2, "h1 = title", same, "match" if same else f'h1: "{article.h1}"')
        )

        # 3. Meta description
        meta = article.meta_description
        meta_ok = 0 < len(meta) <= MAX_META_LENGTH and slug in meta
        results.append(
            CheckResult(
                3,
                "meta description",
                meta_ok,
                f"{len(meta)} chars, contains slug: {slug in meta}",
            )
        )

        # 4. Intro must exist and must not repeat the first section
        hero_present = len(article.hero_description) > 0
        hero_unique = bool(sections) and article.hero_description != sections[0].content
        if not hero_present:
            hero_detail = "empty"
        elif not hero_unique:
            hero_detail = "copied from first section"
        else:
            hero_detail = "unique intro"
        results.append(
            CheckResult(4, "hero description", hero_present and hero_unique, hero_detail)
        )

        # 5. Structured data needs FAQ and product entries
        results.append(
            CheckResult(
                5,
                "schema data",
                len(article.faq) > 0 and len(products) > 0,
                f"FAQ: {len(article.faq)}, products: {len(products)}",
            )
        )

        # 6. Section count
        results.append(
            CheckResult(6, "at least 6 sections", len(sections) >= 6, f"{len(sections)} sections")
        )

        # 7. Every section title names the medicine
        titled = [s for s in sections if slug in s.title]
        results.append(
            CheckResult(
                7,
                "slug in section titles",
                len(titled) == len(sections),
                f"{len(titled)}/{len(sections)}",
            )
        )

        # 8. Required section keywords
        missing = [
            kw
            for kw in REQUIRED_SECTION_KEYWORDS
            if not any(
                (kw.search(s.title) if isinstance(kw, re.Pattern) else kw in s.title)
                for s in sections
            )
        ]
        results.append(
            CheckResult(
                8,
                "required section keywords",
                not missing,
                "all present" if not missing else "missing: " + ", ".join(_keyword_label(k) for k in missing),
            )
        )

        # 9. Ingredient table on the first section
        first_ingredients = sections[0].ingredients if sections else None
        results.append(
            CheckResult(
                9,
                "ingredient table",
                bool(first_ingredients),
                f"{len(first_ingredients)} ingredients" if first_ingredients else "no ingredient table",
            )
        )

        # 10. Section length
        short = [s for s in sections if len(s.content) < MIN_SECTION_LENGTH]
        if short:
            length_detail = ", ".join(f'"{s.title}": {len(s.content)}' for s in short)
        elif sections:
            average = round(sum(len(s.content) for s in sections) / len(sections))
            length_detail = f"all ok (average {average})"
        else:
            length_detail = "no sections"
        results.append(
            CheckResult(10, f"sections >= {MIN_SECTION_LENGTH} chars", not short, length_detail)
        )

        # 11. Paragraph breaks
        single = [s for s in sections if len(s.content.split("\n\n")) < 2]
        results.append(
            CheckResult(
                11,
                "paragraph breaks",
                not single,
                "all ok" if not single else "single paragraph: " + ", ".join(f'"{s.title}"' for s in single),
            )
        )

        # 12. FAQ count and answers not copied from sections
        copied = any(f.answer == s.content for f in article.faq for s in sections)
        results.append(
            CheckResult(
                12,
                "faq >= 3 and unique",
                len(article.faq) >= 3 and not copied,
                f"{len(article.faq)} items" + (", copied from sections" if copied else ""),
            )
        )

        # 13. Product card
        main_product: Optional[Product] = products[0] if products else None
        results.append(
            CheckResult(
                13,
                "product card",
                main_product is not None,
                f"{main_product.name} (query: {main_product.barkiry_query})" if main_product else "no product",
            )
        )

        # 14. Marketplace deep link query
        query = main_product.barkiry_query if main_product else ""
        query_ok = bool(query) and slug in query
        results.append(
            CheckResult(14, "marketplace deep link", query_ok, f'query: "{query or "none"}"')
        )

        # 15. Price CTA placement needs a usage section
        has_method = article.method_section_index is not None
        results.append(
            CheckResult(
                15,
                "price CTA placement",
                has_method,
                "usage section present" if has_method else "no usage section",
            )
        )

        # 16. Internal links to sibling spokes
        hub = self.store.get_hub_article(category)
        siblings = len([s for s in hub.spokes if s.slug != slug]) if hub else 0
        results.append(
            CheckResult(16, "related spokes", siblings >= 2, f"{siblings} sibling spokes")
        )

        # 17. Other products in the same category
        others = [p for p in self.store.get_products_by_category(category) if p.slug != slug]
        results.append(
            CheckResult(17, "same category products", len(others) >= 1, f"{len(others)} products")
        )

        # 18. Polite tone
        body = " ".join(s.content for s in sections)
        formal = [p.pattern for p in FORMAL_PATTERNS if p.search(body)]
        results.append(
            CheckResult(
                18,
                "colloquial tone",
                not formal,
                "no formal endings" if not formal else "found: " + ", ".join(formal),
            )
        )

        return results


# Categories whose medicines are applied rather than swallowed
EXTERNAL_CATEGORIES = {"연고", "무좀", "안약"}
EXTERNAL_HAIR_LOSS = {
    "미녹시딜", "판시딜", "두피나액", "판시딜액", "로게인", "카필러스폼", "미녹시폼",
    "판시딜액3", "동성미녹시딜3", "나녹시딜액", "마이딜액", "목시딜액", "백일후애액",
    "볼두민액", "마이녹실액", "미녹시딜바이그루트액3",
}

STRICT_FORMAL = re.compile(r"(합니다|입니다|됩니다|었습니다|있습니다|없습니다)")
STRICT_FORMAL_FAQ = re.compile(r"(합니다|입니다|됩니다)")
EM_DASH = "—"


def is_external_use(category: str, slug: str) -> bool:
    """Whether the title formula should say 사용법 instead of 복용법."""
    if category in EXTERNAL_CATEGORIES:
        return True
    if category == "탈모" and slug in EXTERNAL_HAIR_LOSS:
        return True
    return "나잘" in slug or "스프레이" in slug


def expected_section_titles(category: str, slug: str) -> List[str]:
    method = "사용법" if is_external_use(category, slug) else "복용법"
    return [
        f"{slug} 성분 분석",
        f"{slug} 효능과 효과",
        f"{slug} 올바른 {method}",
        f"{slug} 부작용",
        f"{slug} 주의사항",
        f"{slug} 보관법",
    ]


class StrictContentChecker:
    """
    Fixed-layout checks for finished wiki articles.

    Stricter than ArticleValidator: exact section titles in order, exactly
    three FAQ entries, ingredient amounts, three paragraphs per section.
    """

    REQUIRED_FAQ = 3
    REQUIRED_SECTIONS = 6
    MIN_PARAGRAPHS = 3

    @classmethod
    def check(
        cls,
        category: str,
        slug: str,
        article: SpokeArticle,
        product: Optional[Product] = None,
    ) -> List[QualityIssue]:
        issues: List[QualityIssue] = []

        def error(msg: str) -> None:
            issues.append(QualityIssue(category, slug, msg, QualitySeverity.ERROR))

        def warn(msg: str) -> None:
            issues.append(QualityIssue(category, slug, msg, QualitySeverity.WARNING))

        if not article.title:
            error("missing title")
        if not article.h1:
            error("missing h1")
        if article.title and article.h1 and article.title != article.h1:
            error("title != h1")

        if len(article.faq) != cls.REQUIRED_FAQ:
            error(f"{len(article.faq)} FAQ items ({cls.REQUIRED_FAQ} required)")

        sections = article.sections
        if not sections:
            error("no sections")
            return issues
        if len(sections) != cls.REQUIRED_SECTIONS:
            error(f"{len(sections)} sections ({cls.REQUIRED_SECTIONS} required)")

        ingredients = [item for s in sections for item in (s.ingredients or [])]
        if not any(s.ingredients is not None for s in sections):
            error("no ingredient list")
        else:
            if not any(i.type == IngredientType.ADDITIVE for i in ingredients):
                warn("no additives listed")
            for item in ingredients:
                if item.type == IngredientType.ACTIVE and not item.amount:
                    warn(f"active ingredient without amount: {item.name}")

        for section in sections:
            match = STRICT_FORMAL.search(section.content)
            if match:
                error(f'formal ending in content: "...{match.group(0)}"')

        for faq in article.faq:
            if STRICT_FORMAL_FAQ.search(faq.answer):
                error("formal ending in FAQ answer")

        if EM_DASH in article.full_text():
            error("em dash found")

        for section in sections:
            count = len(section.content.split("\n\n"))
            if count < 2:
                error(f'"{section.title}" {count} paragraph(s) (min {cls.MIN_PARAGRAPHS})')
            elif count < cls.MIN_PARAGRAPHS:
                warn(f'"{section.title}" {count} paragraphs (min {cls.MIN_PARAGRAPHS})')

        expected = expected_section_titles(category, slug)
        method = "사용법" if is_external_use(category, slug) else "복용법"
        if article.title and method not in article.title:
            warn(f'title does not mention "{method}"')

        for actual, wanted in zip(sections, expected):
            if actual.title == wanted:
                continue
            if re.sub(r"\s+", "", actual.title) == re.sub(r"\s+", "", wanted):
                warn(f'section title spacing: "{actual.title}" -> "{wanted}"')
            else:
                error(f'section title mismatch: "{actual.title}" (expected "{wanted}")')

        if "최저가 가격" in article.title:
            if product is None:
                error("lowest-price title without product data")
            elif not product.has_deeplink:
                error("lowest-price title without deep link")

        return issues


def summarize(results: Sequence[CheckResult]) -> str:
    passed = sum(1 for r in results if r.passed)
    return f"{passed}/{len(results)}"

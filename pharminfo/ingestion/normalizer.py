"""
Drug record normalizer.
Turns raw API items into cleaned, polite-register text and builds the
category, product and article records the site serves.
"""

import re
from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple

from ..models.content import (
    ArticleSection,
    Category,
    FAQItem,
    HubArticle,
    Product,
    SpokeArticle,
    SpokeSummary,
)
from . import drug_api as api

PLACEHOLDER_IMAGE = "/images/placeholder.svg"
SUMMARY_LENGTH = 80
HUB_SUMMARY_LENGTH = 60

# Applied in order; earlier rules win on overlapping endings
TONE_RULES: List[Tuple[re.Pattern, str]] = [
    (re.compile(r"마십시오"), "마세요"),
    (re.compile(r"마시오"), "마세요"),
    (re.compile(r"하십시오"), "하세요"),
    (re.compile(r"하시오"), "하세요"),
    (re.compile(r"드십시오"), "드세요"),
    (re.compile(r"받으십시오"), "받으세요"),
    (re.compile(r"두십시오"), "두세요"),
    (re.compile(r"주십시오"), "주세요"),
    (re.compile(r"쓰십시오"), "쓰세요"),
    (re.compile(r"피하십시오"), "피하세요"),
    (re.compile(r"삼가십시오"), "삼가세요"),
    (re.compile(r"보십시오"), "보세요"),
    (re.compile(r"됩니다"), "돼요"),
    (re.compile(r"입니다"), "이에요"),
    (re.compile(r"습니다"), "어요"),
    (re.compile(r"합니다"), "해요"),
    (re.compile(r"않습니다"), "않아요"),
    (re.compile(r"없습니다"), "없어요"),
    (re.compile(r"있습니다"), "있어요"),
    (re.compile(r"바랍니다"), "바라요"),
    (re.compile(r"드립니다"), "드려요"),
]

# Checked in this order; the first matching category wins
CATEGORY_KEYWORDS: Dict[str, List[str]] = {
    "탈모": ["탈모", "발모", "미녹시딜", "피나스테리드"],
    "연고": ["연고", "상처", "피부", "화상", "습진", "아토피", "크림", "외용"],
    "감기": ["감기", "해열", "콧물", "기침", "인후"],
    "진통제": ["진통", "두통", "치통", "생리통", "해열진통"],
    "무좀": ["무좀", "진균", "백선", "칸디다"],
    "설사": ["설사", "장염", "지사", "정장"],
    "소화제": ["소화", "위장", "제산", "위산"],
    "안약": ["안약", "점안", "안과", "인공눈물", "결막"],
}

CATEGORY_NAMES: Dict[str, str] = {
    "탈모": "탈모약",
    "연고": "연고",
    "감기": "감기약",
    "진통제": "진통제",
    "무좀": "무좀약",
    "설사": "설사약",
    "소화제": "소화제",
    "안약": "안약",
    "일반": "일반의약품",
}

CATEGORY_ICONS: Dict[str, str] = {
    "탈모": "💊",
    "연고": "🩹",
    "감기": "🤧",
    "진통제": "💉",
    "무좀": "🦶",
    "설사": "🏥",
    "소화제": "💚",
    "안약": "👁️",
    "일반": "💊",
}

DEFAULT_CATEGORY = ("일반의약품", "일반")

TOPICAL_CATEGORIES = {"연고", "무좀", "안약"}
TOPICAL_KEYWORDS = ["바르", "도포", "점안", "외용", "부착", "뿌리"]

_TAG_RE = re.compile(r"<[^>]*>")
_SPACE_RE = re.compile(r"\s+")
_PAREN_RE = re.compile(r"\(.*?\)")
_DOSAGE_RE = re.compile(r"\d+(\.\d+)?\s*(mg|g|ml|mL|정|캡슐|포|매|개|밀리리터|그램)", re.IGNORECASE)

_ENTITIES = [
    ("&nbsp;", " "),
    ("&amp;", "&"),
    ("&lt;", "<"),
    ("&gt;", ">"),
    ("&quot;", '"'),
]


def clean_html(text: Optional[str]) -> str:
    if not text:
        return ""
    text = _TAG_RE.sub("", text)
    for entity, char in _ENTITIES:
        text = text.replace(entity, char)
    return _SPACE_RE.sub(" ", text).strip()


def convert_to_colloquial(text: str) -> str:
    for pattern, replacement in TONE_RULES:
        text = pattern.sub(replacement, text)
    return text


def detect_category(name: str, efficacy: str) -> Tuple[str, str]:
    """
    Guess the category from the product name and efficacy text.

    Returns:
        (display name, slug)
    """
    combined = f"{name} {efficacy}"
    for slug, keywords in CATEGORY_KEYWORDS.items():
        if any(kw in combined for kw in keywords):
            return CATEGORY_NAMES.get(slug, slug), slug
    return DEFAULT_CATEGORY


def make_slug(name: str) -> str:
    slug = _PAREN_RE.sub("", name)
    slug = _DOSAGE_RE.sub("", slug)
    return _SPACE_RE.sub(" ", slug).strip()


def truncate(text: str, max_len: int) -> str:
    if len(text) <= max_len:
        return text
    return text[:max_len] + "..."


def is_topical(category_slug: str, usage: str) -> bool:
    if category_slug in TOPICAL_CATEGORIES:
        return True
    return any(kw in usage for kw in TOPICAL_KEYWORDS)


def method_word(category_slug: str, usage: str) -> str:
    return "사용법" if is_topical(category_slug, usage) else "복용법"


@dataclass
class ProcessedDrug:
    """One API record after cleaning, with full texts kept alongside card summaries."""

    id: str
    name: str
    image: str
    category: str
    category_slug: str
    slug: str
    description: str
    description_full: str
    usage: str
    usage_full: str
    caution: str = ""
    interaction: str = ""
    side_effect: str = ""
    storage: str = ""
    manufacturer: str = ""
    price: int = 0
    unit: str = "1개"
    barkiry_query: str = ""
    ingredients: str = ""

    @property
    def method(self) -> str:
        return method_word(self.category_slug, self.usage_full)

    @property
    def has_image(self) -> bool:
        return bool(self.image) and self.image != PLACEHOLDER_IMAGE


def _field(item: Mapping[str, Any], key: str) -> str:
    return convert_to_colloquial(clean_html(item.get(key)))


def process_item(item: Mapping[str, Any]) -> ProcessedDrug:
    name = item.get(api.FIELD_NAME) or ""
    efficacy = _field(item, api.FIELD_EFFICACY)
    usage = _field(item, api.FIELD_USAGE)
    category, category_slug = detect_category(name, efficacy)
    slug = make_slug(name)

    return ProcessedDrug(
        id=str(item.get(api.FIELD_SEQ) or ""),
        name=name,
        image=item.get(api.FIELD_IMAGE) or PLACEHOLDER_IMAGE,
        category=category,
        category_slug=category_slug,
        slug=slug,
        description=truncate(efficacy, SUMMARY_LENGTH),
        description_full=efficacy,
        usage=truncate(usage, SUMMARY_LENGTH),
        usage_full=usage,
        caution=_field(item, api.FIELD_CAUTION),
        interaction=_field(item, api.FIELD_INTERACTION),
        side_effect=_field(item, api.FIELD_SIDE_EFFECT),
        storage=_field(item, api.FIELD_STORAGE),
        manufacturer=item.get(api.FIELD_MANUFACTURER) or "",
        barkiry_query=slug,
    )


def deduplicate_slugs(drugs: Iterable[ProcessedDrug]) -> int:
    """
    Suffix repeated (category, slug) pairs with -2, -3, ... in place.

    Returns:
        Number of renamed records
    """
    seen: Dict[Tuple[str, str], int] = {}
    renamed = 0
    for drug in drugs:
        key = (drug.category_slug, drug.slug)
        if key in seen:
            seen[key] += 1
            drug.slug = f"{drug.slug}-{seen[key]}"
            renamed += 1
        else:
            seen[key] = 1
    return renamed


def group_by_category(drugs: Iterable[ProcessedDrug]) -> Dict[str, List[ProcessedDrug]]:
    grouped: Dict[str, List[ProcessedDrug]] = {}
    for drug in drugs:
        grouped.setdefault(drug.category_slug, []).append(drug)
    return grouped


# ----------------------------------------------------------------------
# Content builders
# ----------------------------------------------------------------------


def spoke_title(slug: str, method: str) -> str:
    return f"{slug} 최저가 가격 | 성분 효과 {method} 부작용까지"


def hub_title(category_name: str) -> str:
    return f"{category_name} 추천 최저가 가격 비교 | 성분 효과 부작용 가이드"


def build_product(drug: ProcessedDrug) -> Product:
    return Product(
        id=drug.id,
        name=drug.name,
        image=drug.image,
        category=drug.category,
        category_slug=drug.category_slug,
        description=drug.description,
        price=drug.price,
        unit=drug.unit,
        barkiry_query=drug.barkiry_query,
        ingredients=drug.ingredients,
        usage=drug.usage,
        slug=drug.slug,
    )


def build_hub(category_slug: str, drugs: List[ProcessedDrug]) -> HubArticle:
    name = CATEGORY_NAMES.get(category_slug, category_slug)
    return HubArticle(
        category_slug=category_slug,
        title=hub_title(name),
        h1=f"{name} 추천 가이드 - 제품별 비교 분석",
        meta_description=f"{name} 성분과 효능, 부작용을 비교 분석했어요. 약국별 최저가 비교로 가장 저렴하게 구매하세요.",
        description=f"{name} 제품의 성분, 효과, 부작용을 비교 분석해요.",
        hero_description=(
            f"{name} 종류가 많아 어떤 제품을 선택할지 고민되시죠? "
            "제품별 효능, 성분, 사용법을 비교해 드려요."
        ),
        spokes=[
            SpokeSummary(
                slug=d.slug,
                title=spoke_title(d.slug, d.method),
                description=truncate(d.description_full, HUB_SUMMARY_LENGTH),
            )
            for d in drugs
        ],
    )


def build_spoke(drug: ProcessedDrug) -> SpokeArticle:
    slug = drug.slug
    method = drug.method

    sections: List[ArticleSection] = []
    for title, content in [
        (f"{slug} 효능과 효과", drug.description_full),
        (f"{slug} 올바른 {method}", drug.usage_full),
        (f"{slug} 부작용", drug.side_effect),
        (f"{slug} 주의사항", drug.caution),
        (f"{slug} 보관법", drug.storage),
    ]:
        if content:
            sections.append(ArticleSection(title=title, content=content))

    faq: List[FAQItem] = []
    for question, answer in [
        (f"{slug}은(는) 어떤 약인가요?", drug.description_full),
        (f"{slug} {method}은?", drug.usage_full),
        (f"{slug} 주의사항은?", drug.caution),
        (f"{slug}과(와) 함께 먹으면 안 되는 약은?", drug.interaction),
    ]:
        if answer:
            faq.append(FAQItem(question=question, answer=answer))

    title = spoke_title(slug, method)
    return SpokeArticle(
        slug=slug,
        category_slug=drug.category_slug,
        title=title,
        h1=title,
        meta_description=(
            f"{slug} 성분과 효능, 부작용, 올바른 {method}을 정리했어요. "
            "약국별 최저가 비교로 가장 저렴하게 구매하세요."
        ),
        description=f"{drug.name}의 효능, 성분, {method}, 최저가 비교 정보를 제공해요.",
        hero_description=drug.description_full,
        products=[slug],
        faq=faq,
        sections=sections,
    )


def build_categories(drugs: Iterable[ProcessedDrug]) -> List[Category]:
    counts: Dict[str, int] = {}
    for drug in drugs:
        counts[drug.category_slug] = counts.get(drug.category_slug, 0) + 1

    categories = []
    for slug, count in counts.items():
        name = CATEGORY_NAMES.get(slug, slug)
        categories.append(
            Category(
                name=name,
                slug=slug,
                icon=CATEGORY_ICONS.get(slug, "💊"),
                description=f"{name} 효능, 성분, 가격 비교",
                count=count,
            )
        )
    return categories

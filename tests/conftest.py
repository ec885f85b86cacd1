"""
Pytest configuration and shared fixtures
"""

from typing import List

import pytest

from pharminfo.config.settings import reset_settings
from pharminfo.content.store import ContentStore
from pharminfo.models.content import (
    ArticleSection,
    Category,
    FAQItem,
    HubArticle,
    IngredientItem,
    Product,
    SpokeArticle,
    SpokeSummary,
)
from pharminfo.models.quality import expected_section_titles

FILLER = "정해진 용법과 용량을 지키고 증상이 계속되면 약사와 상담해 주세요. "


def paragraphs(lead: str, count: int = 3) -> str:
    """Section body with `count` paragraphs, each well over 60 chars."""
    return "\n\n".join(f"{lead} {n}번째 설명이에요. " + FILLER * 2 for n in range(1, count + 1))


def make_product(category_slug: str, slug: str, **overrides) -> Product:
    data = {
        "id": f"item-{slug}",
        "name": f"{slug} 10g",
        "category": f"{category_slug}약",
        "category_slug": category_slug,
        "description": f"{slug} 대표 제품",
        "price": 7000,
        "unit": "10g",
        "barkiry_query": slug,
        "slug": slug,
    }
    data.update(overrides)
    return Product(**data)


def make_spoke(category_slug: str, slug: str, **overrides) -> SpokeArticle:
    """A spoke that passes every article check for its category."""
    titles = expected_section_titles(category_slug, slug)
    method = "사용법" if "사용법" in titles[2] else "복용법"
    title = f"{slug} 최저가 가격 | 성분 효과 {method} 부작용까지"

    sections: List[ArticleSection] = []
    for i, section_title in enumerate(titles):
        sections.append(
            ArticleSection(
                title=section_title,
                content=paragraphs(section_title),
                ingredients=[
                    IngredientItem(type="주성분", name="테스트성분", amount="10mg/g", role="균을 없애요"),
                    IngredientItem(type="첨가제", name="세틸알코올", role="제형을 만들어요"),
                ]
                if i == 0
                else None,
            )
        )

    data = {
        "slug": slug,
        "category_slug": category_slug,
        "title": title,
        "h1": title,
        "meta_description": f"{slug}의 성분, 효과, {method}, 부작용과 약국 최저가를 정리했어요.",
        "description": f"{slug} 가이드",
        "hero_description": f"{slug}를 처음 쓰는 분을 위한 안내예요.",
        "products": [slug],
        "faq": [
            FAQItem(question=f"{slug} 질문 {n}", answer=f"{slug} 답변 {n}번이에요.") for n in range(1, 4)
        ],
        "sections": sections,
        "date_published": "2026-01-10",
        "date_modified": "2026-02-01",
    }
    data.update(overrides)
    return SpokeArticle(**data)


def make_hub(category_slug: str, spokes: List[SpokeArticle], **overrides) -> HubArticle:
    data = {
        "category_slug": category_slug,
        "title": f"{category_slug}약 추천 비교",
        "h1": f"{category_slug}약 추천 비교",
        "meta_description": f"{category_slug}약 성분과 가격 비교",
        "hero_description": f"{category_slug}약 고르는 법",
        "spokes": [SpokeSummary(slug=s.slug, title=s.title, description=s.description) for s in spokes],
        "date_published": "2026-01-05",
        "date_modified": "2026-01-20",
    }
    data.update(overrides)
    return HubArticle(**data)


ATHLETES_FOOT = ["라미실크림", "카네스텐크림", "풀케어네일라카"]


@pytest.fixture(autouse=True)
def clean_settings(monkeypatch, tmp_path):
    """Fresh settings per test, with images pointed at a temp dir."""
    monkeypatch.setenv("IMAGES_DIR", str(tmp_path / "images"))
    monkeypatch.setenv("SITE_BASE_URL", "https://example.test")
    reset_settings()
    yield
    reset_settings()


@pytest.fixture
def categories() -> List[Category]:
    return [
        Category(name="무좀약", slug="무좀", icon="🦶", description="무좀 연고 비교", count=0),
        Category(name="탈모약", slug="탈모", icon="💊", description="탈모약 비교", count=0),
    ]


@pytest.fixture
def products() -> List[Product]:
    return [
        make_product("무좀", "라미실크림", price=9500, barkiry_product_id="p1042"),
        make_product("무좀", "카네스텐크림", price=7000),
        make_product("무좀", "풀케어네일라카", price=28000, barkiry_query=""),
    ]


@pytest.fixture
def spokes() -> List[SpokeArticle]:
    return [make_spoke("무좀", slug) for slug in ATHLETES_FOOT]


@pytest.fixture
def content_dir(tmp_path, categories, products, spokes):
    """Content directory written through the store writers."""
    root = tmp_path / "content"
    writer = ContentStore(root)
    writer.write_categories(categories)
    writer.write_products("무좀", products)
    writer.write_articles("무좀", make_hub("무좀", spokes), {s.slug: s for s in spokes})
    writer.write_articles("탈모", make_hub("탈모", []), {})
    return root


@pytest.fixture
def store(content_dir) -> ContentStore:
    return ContentStore.load(content_dir)


@pytest.fixture
def product_factory():
    return make_product


@pytest.fixture
def spoke_factory():
    return make_spoke


@pytest.fixture
def hub_factory():
    return make_hub

"""
JSON-LD Builders
schema.org structured data embedded in the rendered pages.
"""

import json
from typing import Any, Dict, List, Optional, Sequence, Tuple

from ...config.settings import Settings, get_settings
from ...models.content import Category, HubArticle, Product, SpokeArticle
from .links import absolute, hub_path, image_url, price_compare_path, spoke_path

SCHEMA_CONTEXT = "https://schema.org"
HOME_NAME = "홈"

EDITOR_KNOWS_ABOUT = [
    "일반의약품(OTC) 성분 분석",
    "의약품 효능 및 부작용 분석",
    "복약 지도",
    "의약품 가격 비교 데이터",
]


def _drop_none(data: Dict[str, Any]) -> Dict[str, Any]:
    return {k: v for k, v in data.items() if v is not None}


def to_json(data: Dict[str, Any]) -> str:
    """Serialise for a <script type="application/ld+json"> block."""
    # "</" would close the script element early
    return json.dumps(data, ensure_ascii=False).replace("</", "<\\/")


def breadcrumb(items: Sequence[Tuple[str, str]], settings: Optional[Settings] = None) -> Dict[str, Any]:
    """
    BreadcrumbList from (name, site path) pairs.

    The home entry is prepended automatically.
    """
    settings = settings or get_settings()
    trail = [(HOME_NAME, "")] + list(items)
    return {
        "@context": SCHEMA_CONTEXT,
        "@type": "BreadcrumbList",
        "itemListElement": [
            {
                "@type": "ListItem",
                "position": i,
                "name": name,
                "item": absolute(path, settings),
            }
            for i, (name, path) in enumerate(trail, 1)
        ],
    }


def website(settings: Optional[Settings] = None) -> Dict[str, Any]:
    settings = settings or get_settings()
    return {
        "@context": SCHEMA_CONTEXT,
        "@type": "WebSite",
        "name": settings.site_name,
        "url": settings.base_url,
    }


def organization(settings: Optional[Settings] = None) -> Dict[str, Any]:
    settings = settings or get_settings()
    return {
        "@context": SCHEMA_CONTEXT,
        "@type": "Organization",
        "name": settings.site_name,
        "url": settings.base_url,
        "logo": absolute("/logo.png", settings),
        "description": "공공데이터 기반 일반의약품 정보 플랫폼. 효능, 성분, 사용법, 최저가 비교 정보를 제공해요.",
    }


def editor(settings: Optional[Settings] = None) -> Dict[str, Any]:
    settings = settings or get_settings()
    return {
        "@type": "Person",
        "name": settings.editor_name,
        "url": absolute("/about", settings),
        "jobTitle": "의약품 정보 전문 에디터",
        "worksFor": {"@type": "Organization", "name": settings.site_name, "url": settings.base_url},
        "knowsAbout": EDITOR_KNOWS_ABOUT,
    }


def profile_page(settings: Optional[Settings] = None) -> Dict[str, Any]:
    return {"@context": SCHEMA_CONTEXT, "@type": "ProfilePage", "mainEntity": editor(settings)}


def item_list(category: Category, hub: HubArticle, settings: Optional[Settings] = None) -> Dict[str, Any]:
    """Hub table of contents."""
    settings = settings or get_settings()
    return {
        "@context": SCHEMA_CONTEXT,
        "@type": "ItemList",
        "name": f"{category.name} 가이드",
        "description": hub.description,
        "numberOfItems": len(hub.spokes),
        "itemListElement": [
            {
                "@type": "ListItem",
                "position": i,
                "name": spoke.title,
                "url": absolute(spoke_path(category.slug, spoke.slug), settings),
            }
            for i, spoke in enumerate(hub.spokes, 1)
        ],
    }


def price_compare_page(category: Category, settings: Optional[Settings] = None) -> Dict[str, Any]:
    settings = settings or get_settings()
    path = price_compare_path(category.slug)
    crumbs = breadcrumb([(category.name, hub_path(category.slug)), ("가격비교", path)], settings)
    crumbs.pop("@context")
    return {
        "@context": SCHEMA_CONTEXT,
        "@type": "WebPage",
        "name": f"{category.name} 가격비교",
        "description": f"{category.name} 전체 제품 약국 기준가 및 최저가 비교",
        "url": absolute(path, settings),
        "breadcrumb": crumbs,
    }


def article(
    spoke: SpokeArticle,
    main_product: Optional[Product],
    settings: Optional[Settings] = None,
) -> Dict[str, Any]:
    settings = settings or get_settings()
    author = editor(settings)
    return _drop_none(
        {
            "@context": SCHEMA_CONTEXT,
            "@type": "Article",
            "headline": spoke.title,
            "description": spoke.description,
            "image": image_url(main_product.image, settings) if main_product else None,
            "datePublished": spoke.date_published,
            "dateModified": spoke.date_modified,
            "author": {"@type": "Person", "name": author["name"], "url": author["url"]},
            "publisher": {
                "@type": "Organization",
                "name": settings.site_name,
                "logo": {"@type": "ImageObject", "url": absolute("/logo.png", settings)},
            },
            "mainEntityOfPage": {
                "@type": "WebPage",
                "@id": absolute(spoke_path(spoke.category_slug, spoke.slug), settings),
            },
        }
    )


def faq_page(spoke: SpokeArticle) -> Dict[str, Any]:
    return {
        "@context": SCHEMA_CONTEXT,
        "@type": "FAQPage",
        "mainEntity": [
            {
                "@type": "Question",
                "name": item.question,
                "acceptedAnswer": {"@type": "Answer", "text": item.answer},
            }
            for item in spoke.faq
        ],
    }


def how_to(spoke: SpokeArticle) -> Optional[Dict[str, Any]]:
    """One step per section; None for articles without sections."""
    if not spoke.sections:
        return None
    return {
        "@context": SCHEMA_CONTEXT,
        "@type": "HowTo",
        "name": f"{spoke.slug} 올바른 사용법",
        "description": spoke.description,
        "step": [
            {
                "@type": "HowToStep",
                "position": i,
                "name": section.title,
                "text": section.content,
            }
            for i, section in enumerate(spoke.sections, 1)
        ],
    }


def drug(spoke: SpokeArticle, product: Product, settings: Optional[Settings] = None) -> Dict[str, Any]:
    settings = settings or get_settings()
    return _drop_none(
        {
            "@context": SCHEMA_CONTEXT,
            "@type": "Drug",
            "name": product.name,
            "description": product.description,
            "image": image_url(product.image, settings),
            "activeIngredient": product.ingredients or None,
            "indication": product.description,
            "administrationRoute": "경구 또는 외용",
            "url": absolute(spoke_path(spoke.category_slug, spoke.slug), settings),
            "offers": {
                "@type": "Offer",
                "price": product.price,
                "priceCurrency": "KRW",
                "availability": "https://schema.org/InStock",
            },
        }
    )


def spoke_page(
    category: Category,
    spoke: SpokeArticle,
    main_product: Optional[Product],
    settings: Optional[Settings] = None,
) -> List[Dict[str, Any]]:
    """Every block rendered on a spoke page, in page order."""
    settings = settings or get_settings()
    blocks = [
        article(spoke, main_product, settings),
        faq_page(spoke),
        breadcrumb(
            [
                (category.name, hub_path(category.slug)),
                (spoke.slug, spoke_path(category.slug, spoke.slug)),
            ],
            settings,
        ),
    ]
    steps = how_to(spoke)
    if steps is not None:
        blocks.append(steps)
    if main_product is not None:
        blocks.append(drug(spoke, main_product, settings))
    return blocks

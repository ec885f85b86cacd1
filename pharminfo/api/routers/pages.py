"""
Page Endpoints
Home, about, hub, price comparison and spoke article pages.
"""

import logging
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends, Request
from fastapi.responses import HTMLResponse
from fastapi.templating import Jinja2Templates

from ...config.settings import get_settings
from ...content.store import ContentStore
from ...models.content import Category, HubArticle, Product, SpokeArticle
from ..dependencies import get_category, get_hub, get_spoke, get_store, get_templates
from ..services import structured_data as ld
from ..services.links import hub_path, price_compare_path, spoke_path

logger = logging.getLogger(__name__)

router = APIRouter(tags=["pages"], default_response_class=HTMLResponse)

POPULAR_PRODUCTS = 6


def _render(
    templates: Jinja2Templates,
    request: Request,
    name: str,
    context: Dict[str, Any],
) -> HTMLResponse:
    return templates.TemplateResponse(request, name, context)


@router.get("/")
async def home(
    request: Request,
    store: ContentStore = Depends(get_store),
    templates: Jinja2Templates = Depends(get_templates),
):
    # Card counts come from the live spoke articles, not the stored count
    categories = [
        c.model_copy(update={"count": store.spoke_count(c.slug)}) for c in store.categories
    ]
    return _render(
        templates,
        request,
        "home.html",
        {
            "categories": categories,
            "products": store.products[:POPULAR_PRODUCTS],
            "canonical": "/",
        },
    )


@router.get("/about")
async def about(
    request: Request,
    store: ContentStore = Depends(get_store),
    templates: Jinja2Templates = Depends(get_templates),
):
    settings = get_settings()
    return _render(
        templates,
        request,
        "about.html",
        {
            "categories": store.categories,
            "canonical": "/about",
            "json_ld": [
                ld.profile_page(settings),
                ld.breadcrumb([("작성자 소개", "/about")], settings),
            ],
        },
    )


@router.get("/{category}")
async def hub_page(
    request: Request,
    category: Category = Depends(get_category),
    hub: HubArticle = Depends(get_hub),
    store: ContentStore = Depends(get_store),
    templates: Jinja2Templates = Depends(get_templates),
):
    return _render(
        templates,
        request,
        "hub.html",
        {
            "category": category,
            "hub": hub,
            "products": store.get_products_by_category(category.slug),
            "canonical": hub_path(category.slug),
            "json_ld": [
                ld.breadcrumb([(category.name, hub_path(category.slug))]),
                ld.item_list(category, hub),
            ],
        },
    )


def split_by_link(products: List[Product]) -> Dict[str, List[Product]]:
    """Sort by price and split into linkable and reference-only products."""
    ordered = sorted(products, key=lambda p: p.price)
    return {
        "linked": [p for p in ordered if p.has_price_link],
        "reference": [p for p in ordered if not p.has_price_link],
    }


@router.get("/{category}/가격비교")
async def price_compare(
    request: Request,
    category: Category = Depends(get_category),
    store: ContentStore = Depends(get_store),
    templates: Jinja2Templates = Depends(get_templates),
):
    products = store.get_products_by_category(category.slug)
    groups = split_by_link(products)
    return _render(
        templates,
        request,
        "price_compare.html",
        {
            "category": category,
            "linked": groups["linked"],
            "reference": groups["reference"],
            "total": len(products),
            "canonical": price_compare_path(category.slug),
            "json_ld": [ld.price_compare_page(category)],
        },
    )


@router.get("/{category}/{slug}")
async def spoke_page(
    request: Request,
    slug: str,
    category: Category = Depends(get_category),
    spoke: SpokeArticle = Depends(get_spoke),
    store: ContentStore = Depends(get_store),
    templates: Jinja2Templates = Depends(get_templates),
):
    products = store.get_spoke_products(spoke)
    main_product: Optional[Product] = products[0] if products else None
    related = [p for p in store.get_products_by_category(category.slug) if p.slug != slug]

    hub = store.get_hub_article(category.slug)
    related_spokes = [s for s in hub.spokes if s.slug != slug] if hub else []

    return _render(
        templates,
        request,
        "spoke.html",
        {
            "category": category,
            "article": spoke,
            "products": products,
            "main_product": main_product,
            "related_products": related,
            "related_spokes": related_spokes,
            "canonical": spoke_path(category.slug, slug),
            "json_ld": ld.spoke_page(category, spoke, main_product),
        },
    )

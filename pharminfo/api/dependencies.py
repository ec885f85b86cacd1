"""
Dependency Injection
FastAPI dependencies for the content snapshot and templates.
"""

from fastapi import Depends, Request
from fastapi.templating import Jinja2Templates

from ..content.store import ContentStore
from ..models.content import Category, HubArticle, SpokeArticle
from .errors import ContentUnavailableError, ResourceNotFoundError


def get_store(request: Request) -> ContentStore:
    """Content loaded at startup."""
    store = getattr(request.app.state, "store", None)
    if store is None:
        raise ContentUnavailableError("content not loaded")
    return store


def get_templates(request: Request) -> Jinja2Templates:
    return request.app.state.templates


def get_category(category: str, store: ContentStore = Depends(get_store)) -> Category:
    found = store.get_category(category)
    if found is None:
        raise ResourceNotFoundError("category", category)
    return found


def get_hub(category: Category = Depends(get_category), store: ContentStore = Depends(get_store)) -> HubArticle:
    hub = store.get_hub_article(category.slug)
    if hub is None:
        raise ResourceNotFoundError("hub article", category.slug)
    return hub


def get_spoke(
    slug: str,
    category: Category = Depends(get_category),
    store: ContentStore = Depends(get_store),
) -> SpokeArticle:
    spoke = store.get_spoke_article(category.slug, slug)
    if spoke is None:
        raise ResourceNotFoundError("article", f"{category.slug}/{slug}")
    return spoke

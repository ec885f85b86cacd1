"""
Feed Endpoints
sitemap.xml and RSS 2.0 feed.
"""

from fastapi import APIRouter, Depends
from fastapi.responses import Response
from fastapi.templating import Jinja2Templates

from ...content.store import ContentStore
from ..dependencies import get_store, get_templates
from ..services.feeds import feed_items, last_build_date, sitemap_entries

router = APIRouter(tags=["feeds"])

XML_MEDIA_TYPE = "application/xml; charset=utf-8"


def _xml(templates: Jinja2Templates, name: str, context: dict) -> Response:
    body = templates.get_template(name).render(context)
    return Response(content=body, media_type=XML_MEDIA_TYPE)


@router.get("/sitemap.xml")
async def sitemap(
    store: ContentStore = Depends(get_store),
    templates: Jinja2Templates = Depends(get_templates),
):
    return _xml(templates, "sitemap.xml", {"entries": sitemap_entries(store)})


@router.get("/feed.xml")
async def feed(
    store: ContentStore = Depends(get_store),
    templates: Jinja2Templates = Depends(get_templates),
):
    return _xml(
        templates,
        "feed.xml",
        {"items": feed_items(store), "last_build_date": last_build_date()},
    )

"""
Jinja2 environment for the site templates.
"""

from datetime import date
from pathlib import Path

from fastapi.templating import Jinja2Templates

from ..config.settings import get_settings
from ..ingestion.deeplinks import affiliate_url
from .services import links
from .services.structured_data import organization, to_json, website

TEMPLATES_DIR = Path(__file__).parent / "templates"


def format_won(value) -> str:
    """7000 -> '7,000'"""
    try:
        return f"{int(value):,}"
    except (TypeError, ValueError):
        return "0"


def site_structured_data():
    """JSON-LD blocks rendered on every page."""
    return [website(), organization()]


def korean_date(value) -> str:
    """2026-02-22 -> 2026년 2월 22일"""
    if not value:
        return ""
    try:
        year, month, day = str(value)[:10].split("-")
        return f"{year}년 {int(month)}월 {int(day)}일"
    except ValueError:
        return str(value)


def today_dotted() -> str:
    return date.today().strftime("%Y.%m.%d")


def create_templates() -> Jinja2Templates:
    templates = Jinja2Templates(directory=str(TEMPLATES_DIR))
    env = templates.env
    env.trim_blocks = True
    env.lstrip_blocks = True

    env.filters["won"] = format_won
    env.filters["ld_json"] = to_json
    env.filters["korean_date"] = korean_date

    env.globals.update(
        settings=get_settings(),
        hub_path=links.hub_path,
        spoke_path=links.spoke_path,
        price_compare_path=links.price_compare_path,
        absolute_url=links.absolute,
        affiliate_url=affiliate_url,
        today=today_dotted,
        site_structured_data=site_structured_data,
    )
    return templates

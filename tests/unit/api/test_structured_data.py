"""
Test JSON-LD builders.
"""

import json
from urllib.parse import quote

from pharminfo.api.services import structured_data as ld
from pharminfo.api.services.links import absolute, image_url, price_compare_path, spoke_path


def test_paths_are_percent_encoded():
    assert spoke_path("무좀", "라미실크림") == f"/{quote('무좀')}/{quote('라미실크림')}"
    assert price_compare_path("무좀").endswith(quote("가격비교"))
    assert absolute("/about") == "https://example.test/about"
    assert absolute("") == "https://example.test"


def test_image_url():
    assert image_url("") is None
    assert image_url("/images/1.jpg") == "https://example.test/images/1.jpg"
    assert image_url("https://cdn.example/1.jpg") == "https://cdn.example/1.jpg"


def test_to_json_escapes_closing_tags():
    rendered = ld.to_json({"text": "</script><b>무좀</b>"})
    assert "</" not in rendered
    assert "무좀" in rendered
    assert json.loads(rendered) == {"text": "</script><b>무좀</b>"}


def test_breadcrumb_prepends_home():
    crumbs = ld.breadcrumb([("무좀약", "/무좀")])

    items = crumbs["itemListElement"]
    assert [i["name"] for i in items] == ["홈", "무좀약"]
    assert [i["position"] for i in items] == [1, 2]
    assert items[0]["item"] == "https://example.test"


def test_item_list_follows_hub_order(store):
    category = store.get_category("무좀")
    hub = store.get_hub_article("무좀")

    data = ld.item_list(category, hub)

    assert data["numberOfItems"] == 3
    assert [i["name"] for i in data["itemListElement"]] == [s.title for s in hub.spokes]
    assert data["itemListElement"][0]["url"] == absolute(spoke_path("무좀", hub.spokes[0].slug))


def test_price_compare_page_embeds_breadcrumb_without_context(store):
    data = ld.price_compare_page(store.get_category("무좀"))

    assert data["@type"] == "WebPage"
    assert "@context" not in data["breadcrumb"]
    assert data["breadcrumb"]["itemListElement"][-1]["name"] == "가격비교"


class TestSpokePage:
    def test_blocks_in_page_order(self, store):
        category = store.get_category("무좀")
        spoke = store.get_spoke_article("무좀", "라미실크림")
        product = store.get_product_by_slug("무좀", "라미실크림")

        blocks = ld.spoke_page(category, spoke, product)

        assert [b["@type"] for b in blocks] == ["Article", "FAQPage", "BreadcrumbList", "HowTo", "Drug"]
        assert len(blocks[1]["mainEntity"]) == 3
        assert len(blocks[3]["step"]) == 6

    def test_article_and_drug_fields(self, store):
        spoke = store.get_spoke_article("무좀", "라미실크림")
        product = store.get_product_by_slug("무좀", "라미실크림")

        article = ld.article(spoke, product)
        drug = ld.drug(spoke, product)

        assert article["datePublished"] == "2026-01-10"
        assert article["image"] == "https://example.test/images/placeholder.svg"
        assert article["author"]["url"] == "https://example.test/about"
        assert drug["offers"]["price"] == 9500
        assert drug["offers"]["priceCurrency"] == "KRW"
        assert "activeIngredient" not in drug

    def test_without_product_or_sections(self, store, spoke_factory):
        category = store.get_category("무좀")
        spoke = spoke_factory("무좀", "라미실크림", sections=[], date_published=None)

        blocks = ld.spoke_page(category, spoke, None)

        assert [b["@type"] for b in blocks] == ["Article", "FAQPage", "BreadcrumbList"]
        assert "image" not in blocks[0]
        assert "datePublished" not in blocks[0]


def test_profile_page_names_editor():
    data = ld.profile_page()
    assert data["mainEntity"]["@type"] == "Person"
    assert data["mainEntity"]["knowsAbout"] == ld.EDITOR_KNOWS_ABOUT

"""
Test loading, lookups and writes of the content store.
"""

import json

import pytest

from pharminfo.content.store import ContentError, ContentStore, write_json


def test_load_reads_all_files(store):
    assert [c.slug for c in store.categories] == ["무좀", "탈모"]
    assert len(store.products) == 3
    assert len(store.spoke_articles) == 3
    assert len(store.hub_articles) == 2


def test_lookups(store):
    assert store.get_category("무좀").name == "무좀약"
    assert store.get_category("없는카테고리") is None

    assert [p.slug for p in store.get_products_by_category("무좀")] == [
        "라미실크림",
        "카네스텐크림",
        "풀케어네일라카",
    ]
    assert store.get_products_by_category("탈모") == []
    assert store.get_product_by_slug("무좀", "카네스텐크림").price == 7000
    assert store.get_product_by_slug("무좀", "없는제품") is None

    assert store.get_hub_article("무좀").category_slug == "무좀"
    assert store.get_hub_article("없는카테고리") is None
    assert store.get_spoke_article("무좀", "라미실크림").slug == "라미실크림"
    assert store.get_spoke_article("탈모", "라미실크림") is None
    assert store.spoke_count("무좀") == 3
    assert store.spoke_count("탈모") == 0


def test_iter_spokes_filters_by_category(store):
    assert len(list(store.iter_spokes())) == 3
    assert list(store.iter_spokes("탈모")) == []
    category, slug, _ = next(iter(store.iter_spokes("무좀")))
    assert (category, slug) == ("무좀", "라미실크림")


def test_spoke_products_skip_unknown_slugs(store):
    article = store.get_spoke_article("무좀", "라미실크림")
    article = article.model_copy(update={"products": ["라미실크림", "없는제품"]})
    assert [p.slug for p in store.get_spoke_products(article)] == ["라미실크림"]


def test_integrity_of_consistent_content(store):
    assert store.check_integrity() == []


def test_integrity_reports_unlisted_and_missing(store, hub_factory, spoke_factory):
    spokes = store.get_spokes("무좀")
    hub = hub_factory("무좀", [spoke_factory("무좀", "없는글")])
    store.write_articles("무좀", hub, spokes)

    problems = store.check_integrity()

    assert "무좀: hub lists missing spoke '없는글'" in problems
    assert "무좀: spoke '라미실크림' not listed in hub" in problems


def test_missing_directory_raises(tmp_path):
    with pytest.raises(ContentError):
        ContentStore.load(tmp_path / "nope")


def test_invalid_json_raises_with_path(content_dir):
    bad = content_dir / "products" / "무좀.json"
    bad.write_text("{not json", encoding="utf-8")

    with pytest.raises(ContentError) as exc_info:
        ContentStore.load(content_dir)

    assert exc_info.value.path == bad


def test_schema_errors_raise(content_dir):
    path = content_dir / "products" / "무좀.json"
    path.write_text(json.dumps([{"name": "이름만 있는 제품"}], ensure_ascii=False), encoding="utf-8")

    with pytest.raises(ContentError, match="invalid products"):
        ContentStore.load(content_dir)


def test_price_strings_are_cleaned(content_dir, product_factory):
    path = content_dir / "products" / "무좀.json"
    record = product_factory("무좀", "라미실크림").model_dump(mode="json")
    record["price"] = "9,500원"
    record["id"] = 197400169
    path.write_text(json.dumps([record], ensure_ascii=False), encoding="utf-8")

    product = ContentStore.load(content_dir).get_product_by_slug("무좀", "라미실크림")

    assert product.price == 9500
    assert product.id == "197400169"


def test_write_json_keeps_korean_and_backs_up(tmp_path):
    path = tmp_path / "data.json"
    assert write_json(path, {"이름": "라미실"}) is None

    backup = write_json(path, {"이름": "카네스텐"}, backup=True)

    assert backup == tmp_path / "data.json.bak"
    assert json.loads(backup.read_text(encoding="utf-8")) == {"이름": "라미실"}
    assert "카네스텐" in path.read_text(encoding="utf-8")


def test_writes_round_trip_through_load(store, product_factory):
    store.write_products("탈모", [product_factory("탈모", "판토가", price=45000)])

    reloaded = ContentStore.load(store.content_dir)

    assert reloaded.get_product_by_slug("탈모", "판토가").price == 45000
    assert store.get_product_by_slug("탈모", "판토가") is not None

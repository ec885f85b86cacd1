"""
Test marketplace deep-link resolution and verification.
"""

from unittest.mock import MagicMock
from urllib.parse import quote

import pytest
import requests

from pharminfo.config.settings import get_settings
from pharminfo.content.store import ContentStore
from pharminfo.ingestion.deeplinks import (
    DeepLinkResolver,
    MarketplaceClient,
    affiliate_url,
    extract_product_ids,
    product_url,
    search_url,
    verify_deeplinks,
)

SEARCH_HTML = """
<html><body>
  <a href="/products/p501">카네스텐크림 20g</a>
  <a href="https://barkiri.com/products/p502?from=search">카네스텐크림 10g</a>
  <a href="/products/p501">중복</a>
  <a href="/events">이벤트</a>
</body></html>
"""

EMBEDDED_HTML = """
<html><body><div id="root"></div>
<script>window.__DATA__ = {"items": [{"url": "/products/p900"}, {"url": "/products/p901"}]}</script>
</body></html>
"""

MIXED_HTML = """
<html><body>
  <a href="/products/p501">카네스텐크림 20g</a>
<script>window.__DATA__ = {"items": [{"url": "/products/p777"}, {"url": "/products/p501"}]}</script>
</body></html>
"""


class TestAffiliateUrl:
    def test_prefers_product_page(self, product_factory):
        product = product_factory("무좀", "라미실크림", barkiry_product_id="p1042")
        assert affiliate_url(product) == "https://barkiri.com/products/p1042"

    def test_external_search_before_marketplace_search(self, product_factory):
        product = product_factory("탈모", "로게인", external_search_url="https://search.example/로게인")
        assert affiliate_url(product) == "https://search.example/로게인"

    def test_falls_back_to_query_then_slug(self, product_factory):
        with_query = product_factory("무좀", "카네스텐크림", barkiry_query="카네스텐 크림")
        no_query = product_factory("무좀", "풀케어네일라카", barkiry_query="")

        assert affiliate_url(with_query) == search_url("카네스텐 크림")
        assert affiliate_url(no_query).endswith(quote("풀케어네일라카"))
        assert search_url("a b") == "https://barkiri.com/search?query=a%20b"


def test_extract_product_ids_from_anchors():
    assert extract_product_ids(SEARCH_HTML) == ["p501", "p502"]


def test_extract_product_ids_from_embedded_data():
    assert extract_product_ids(EMBEDDED_HTML) == ["p900", "p901"]
    assert extract_product_ids("<html></html>") == []


def test_extract_product_ids_counts_embedded_ids_after_links():
    assert extract_product_ids(MIXED_HTML) == ["p501", "p777"]


class TestMarketplaceClient:
    @pytest.fixture
    def session(self):
        session = MagicMock()
        session.headers = {}
        return session

    def test_sets_user_agent(self, session):
        MarketplaceClient(session=session)
        assert session.headers["User-Agent"] == get_settings().user_agent

    def test_search_returns_first_id_and_count(self, session):
        session.get.return_value = MagicMock(ok=True, text=SEARCH_HTML)

        assert MarketplaceClient(session=session).search("카네스텐크림") == ("p501", 2)
        assert session.get.call_args.kwargs["params"] == {"term": "카네스텐크림"}

    def test_search_counts_every_product_on_page(self, session):
        session.get.return_value = MagicMock(ok=True, text=MIXED_HTML)
        assert MarketplaceClient(session=session).search("카네스텐크림") == ("p501", 2)

    def test_search_without_results(self, session):
        session.get.return_value = MagicMock(ok=True, text="<html></html>")
        assert MarketplaceClient(session=session).search("없는약") is None

    def test_search_http_and_network_errors(self, session):
        client = MarketplaceClient(session=session)

        session.get.return_value = MagicMock(ok=False, text="")
        assert client.search("판콜에이") is None

        session.get.side_effect = requests.Timeout("slow")
        assert client.search("판콜에이") is None

    def test_check_product(self, session):
        client = MarketplaceClient(session=session)

        session.head.return_value = MagicMock(ok=True)
        assert client.check_product("p1")
        assert session.head.call_args.args[0] == product_url("p1")

        session.head.side_effect = requests.ConnectionError("down")
        assert not client.check_product("p1")


def _client(valid_ids=(), search_results=None):
    client = MagicMock()
    client.check_product.side_effect = lambda product_id: product_id in valid_ids
    results = search_results or {}
    client.search.side_effect = lambda query: results.get(query)
    return client


class TestDeepLinkResolver:
    def test_dry_run_reports_without_writing(self, store, content_dir):
        before = (content_dir / "products" / "무좀.json").read_text(encoding="utf-8")
        client = _client(valid_ids={"p1042"}, search_results={"카네스텐크림": ("p555", 3)})

        result = DeepLinkResolver(store, client, delay=0).run(dry_run=True)

        assert (result.valid, result.fixed, result.not_found) == (1, 1, 1)
        assert [(c.slug, c.new_id, c.action) for c in result.changes] == [("카네스텐크림", "p555", "add")]
        assert result.backups == []
        assert (content_dir / "products" / "무좀.json").read_text(encoding="utf-8") == before

    def test_writes_changes_with_backup(self, store, content_dir):
        client = _client(search_results={"라미실크림": ("p2000", 1), "카네스텐크림": ("p555", 3)})

        result = DeepLinkResolver(store, client, delay=0).run()

        assert [(c.slug, c.old_id, c.action) for c in result.changes] == [
            ("라미실크림", "p1042", "replace"),
            ("카네스텐크림", None, "add"),
        ]
        assert result.backups == [str(content_dir / "products" / "무좀.json") + ".bak"]
        assert (content_dir / "products" / "무좀.json.bak").exists()

        reloaded = ContentStore.load(content_dir)
        assert reloaded.get_product_by_slug("무좀", "라미실크림").barkiry_product_id == "p2000"
        assert reloaded.get_product_by_slug("무좀", "카네스텐크림").barkiry_product_id == "p555"
        assert reloaded.get_product_by_slug("무좀", "풀케어네일라카").barkiry_product_id is None

    def test_nothing_to_change(self, store, content_dir):
        client = _client(valid_ids={"p1042"})

        result = DeepLinkResolver(store, client, delay=0).run()

        assert result.changes == []
        assert result.not_found == 2
        assert not (content_dir / "products" / "무좀.json.bak").exists()


def test_verify_deeplinks_only_checks_linked_products(store):
    client = MagicMock()
    client.settings = get_settings()
    client.head_product.return_value = MagicMock(ok=False, status_code=404)

    statuses = verify_deeplinks(store, client)

    assert len(statuses) == 1
    assert statuses[0].name == "라미실크림 10g"
    assert statuses[0].url == "https://barkiri.com/products/p1042"
    assert (statuses[0].status, statuses[0].code) == ("FAIL", "404")


def test_verify_deeplinks_records_network_errors(store):
    client = MagicMock()
    client.settings = get_settings()
    client.head_product.side_effect = requests.ConnectionError("refused")

    statuses = verify_deeplinks(store, client)

    assert statuses[0].status == "ERROR"
    assert "refused" in statuses[0].code

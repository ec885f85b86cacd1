"""
Test the drug API client against a mocked session.
"""

from unittest.mock import MagicMock, patch

import pytest
import requests

from pharminfo.config.settings import Settings
from pharminfo.ingestion.drug_api import DrugAPIClient, DrugAPIError, parse_body


def _response(body=None, status=200, reason="OK", json_error=False):
    response = MagicMock()
    response.ok = 200 <= status < 300
    response.status_code = status
    response.reason = reason
    if json_error:
        response.json.side_effect = ValueError("no json")
    else:
        response.json.return_value = body
    return response


def _body(items, total):
    return {"header": {"resultCode": "00"}, "body": {"items": items, "totalCount": total}}


@pytest.fixture
def session():
    return MagicMock(spec=requests.Session)


@pytest.fixture
def client(session):
    settings = Settings(drug_api_key="test-key", drug_api_page_size=2, drug_api_delay=0)
    return DrugAPIClient(settings=settings, session=session)


def test_missing_key_raises():
    with pytest.raises(ValueError, match="DATA_GO_KR_KEY"):
        DrugAPIClient(settings=Settings(drug_api_key=None))


def test_fetch_page_sends_query_params(client, session):
    session.get.return_value = _response(_body([{"itemName": "판콜에이"}], 1))

    items, total = client.fetch_page("판콜", page_no=3, num_of_rows=10)

    assert items == [{"itemName": "판콜에이"}]
    assert total == 1
    params = session.get.call_args.kwargs["params"]
    assert params["serviceKey"] == "test-key"
    assert params["pageNo"] == "3"
    assert params["numOfRows"] == "10"
    assert params["type"] == "json"
    assert params["itemName"] == "판콜"


def test_fetch_page_without_name_filter(client, session):
    session.get.return_value = _response(_body([], 0))
    client.fetch_page()
    assert "itemName" not in session.get.call_args.kwargs["params"]


def test_http_error_raises_with_status(client, session):
    session.get.return_value = _response(status=500, reason="Server Error")

    with pytest.raises(DrugAPIError) as exc_info:
        client.fetch_page("판콜")

    assert exc_info.value.status_code == 500
    assert "500" in exc_info.value.message


def test_network_error_raises(client, session):
    session.get.side_effect = requests.ConnectionError("down")
    with pytest.raises(DrugAPIError, match="request failed"):
        client.fetch_page()


def test_non_json_body_raises(client, session):
    session.get.return_value = _response(json_error=True)
    with pytest.raises(DrugAPIError, match="not JSON"):
        client.fetch_page()


class TestParseBody:
    def test_single_item_becomes_list(self):
        items, total = parse_body(_body({"itemName": "타이레놀정"}, 1))
        assert items == [{"itemName": "타이레놀정"}]
        assert total == 1

    def test_missing_body(self):
        assert parse_body({"header": {}}) == ([], 0)
        assert parse_body(None) == ([], 0)

    def test_empty_items_keep_total(self):
        assert parse_body(_body("", 7)) == ([], 7)


def test_fetch_list_pages_until_total_rows(client, session):
    session.get.side_effect = [
        _response(_body([{"itemSeq": 1}, {"itemSeq": 2}], 10)),
        _response(_body([{"itemSeq": 3}, {"itemSeq": 4}], 10)),
        _response(_body([{"itemSeq": 5}], 10)),
    ]

    with patch("pharminfo.ingestion.drug_api.time.sleep") as sleep:
        items = client.fetch_list(total_rows=5)

    assert [i["itemSeq"] for i in items] == [1, 2, 3, 4, 5]
    assert session.get.call_count == 3
    assert session.get.call_args.kwargs["params"]["numOfRows"] == "1"
    assert sleep.call_count == 2


def test_fetch_list_stops_when_api_runs_out(client, session):
    session.get.side_effect = [
        _response(_body([{"itemSeq": 1}, {"itemSeq": 2}], 3)),
        _response(_body([{"itemSeq": 3}], 3)),
    ]

    with patch("pharminfo.ingestion.drug_api.time.sleep"):
        items = client.fetch_list(total_rows=10)

    assert len(items) == 3
    assert session.get.call_count == 2


def test_search_returns_none_on_error(client, session):
    session.get.return_value = _response(status=503, reason="Unavailable")
    assert client.search("판콜에이") is None


def test_search_returns_empty_list_when_unregistered(client, session):
    session.get.return_value = _response(_body("", 0))
    assert client.search("프로페시아") == []

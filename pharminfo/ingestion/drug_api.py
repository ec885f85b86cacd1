"""
Drug API Client
Public e약은요 (DrbEasyDrugInfoService) list endpoint on data.go.kr.
"""

import logging
import math
import time
from typing import Any, Dict, List, Optional, Tuple

import requests

from ..config.settings import Settings, get_settings

logger = logging.getLogger(__name__)

# Field names returned by the API
FIELD_MANUFACTURER = "entpName"
FIELD_NAME = "itemName"
FIELD_SEQ = "itemSeq"
FIELD_EFFICACY = "efcyQesitm"
FIELD_USAGE = "useMethodQesitm"
FIELD_CAUTION = "atpnQesitm"
FIELD_INTERACTION = "intrcQesitm"
FIELD_SIDE_EFFECT = "seQesitm"
FIELD_STORAGE = "depositMethodQesitm"
FIELD_IMAGE = "itemImage"


class DrugAPIError(Exception):
    """Raised when the drug API answers with a non-2xx status or unreadable body."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        self.message = message
        self.status_code = status_code
        super().__init__(message)


class DrugAPIClient:
    """
    Thin client for the drug list endpoint.

    Pages are requested sequentially with a fixed delay between them; there
    is no retry.
    """

    def __init__(
        self,
        api_key: Optional[str] = None,
        settings: Optional[Settings] = None,
        session: Optional[requests.Session] = None,
    ):
        self.settings = settings or get_settings()
        self.api_key = api_key or self.settings.drug_api_key
        if not self.api_key:
            raise ValueError("drug API key is required (DATA_GO_KR_KEY)")

        self.url = self.settings.drug_api_url
        self.page_size = self.settings.drug_api_page_size
        self.delay = self.settings.drug_api_delay
        self.timeout = self.settings.drug_api_timeout
        self.session = session or requests.Session()

    def fetch_page(
        self, item_name: Optional[str] = None, page_no: int = 1, num_of_rows: int = 100
    ) -> Tuple[List[Dict[str, Any]], int]:
        """
        Fetch one page of drug records.

        Args:
            item_name: Optional product name filter
            page_no: 1-based page number
            num_of_rows: Rows per page

        Returns:
            (items, total_count)
        """
        params = {
            "serviceKey": self.api_key,
            "pageNo": str(page_no),
            "numOfRows": str(num_of_rows),
            "type": "json",
        }
        if item_name:
            params["itemName"] = item_name

        logger.info(f"[API] requesting page {page_no} ({num_of_rows} rows)")
        try:
            response = self.session.get(self.url, params=params, timeout=self.timeout)
        except requests.RequestException as e:
            raise DrugAPIError(f"request failed: {e}") from e

        if not response.ok:
            raise DrugAPIError(
                f"API error: {response.status_code} {response.reason}",
                status_code=response.status_code,
            )

        try:
            data = response.json()
        except ValueError as e:
            raise DrugAPIError("response is not JSON") from e

        return parse_body(data)

    def fetch_list(self, item_name: Optional[str] = None, total_rows: int = 100) -> List[Dict[str, Any]]:
        """Collect up to total_rows records across pages."""
        items: List[Dict[str, Any]] = []
        total_pages = math.ceil(total_rows / self.page_size)

        for page in range(1, total_pages + 1):
            rows_this_page = min(self.page_size, total_rows - len(items))
            page_items, total_count = self.fetch_page(item_name, page, rows_this_page)
            items.extend(page_items)
            logger.info(f"  -> collected {len(items)}/{min(total_rows, total_count)}")

            if len(items) >= total_rows or len(items) >= total_count:
                break
            time.sleep(self.delay)

        return items[:total_rows]

    def search(self, item_name: str, rows: int = 5) -> Optional[List[Dict[str, Any]]]:
        """
        Look up a product by name for cross-checking.

        Returns:
            Matching items (possibly empty), or None when the request failed
        """
        try:
            items, _ = self.fetch_page(item_name, 1, rows)
            return items
        except DrugAPIError as e:
            logger.warning(f"Drug API lookup failed for '{item_name}': {e}")
            return None


def parse_body(data: Any) -> Tuple[List[Dict[str, Any]], int]:
    """Pull (items, totalCount) out of a JSON response; a single item becomes a list."""
    body = data.get("body") if isinstance(data, dict) else None
    if not isinstance(body, dict):
        return [], 0

    total_count = int(body.get("totalCount") or 0)
    items = body.get("items")
    if not items:
        return [], total_count
    if isinstance(items, dict):
        items = [items]
    return list(items), total_count

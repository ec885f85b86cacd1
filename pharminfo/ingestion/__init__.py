"""
Data Ingestion Package
Drug API client, record normalisation, content generation and the
marketplace tooling that keeps product links and images current.
"""

from .crosscheck import CrossChecker, CrossCheckResult
from .deeplinks import DeepLinkResolver, MarketplaceClient, affiliate_url, verify_deeplinks
from .drug_api import DrugAPIClient, DrugAPIError
from .generator import ContentGenerationError, ContentGenerationPipeline

__all__ = [
    "CrossChecker",
    "CrossCheckResult",
    "DeepLinkResolver",
    "MarketplaceClient",
    "affiliate_url",
    "verify_deeplinks",
    "DrugAPIClient",
    "DrugAPIError",
    "ContentGenerationError",
    "ContentGenerationPipeline",
]

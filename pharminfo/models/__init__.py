"""
Data Models Package
Content records and the article linters that run over them.
"""

from .content import (
    ArticleFile,
    ArticleSection,
    Category,
    FAQItem,
    HubArticle,
    IngredientItem,
    IngredientType,
    Product,
    SpokeArticle,
    SpokeSummary,
)
from .medical_facts import FactFinding, FactRule, MedicalFactChecker
from .quality import ArticleValidator, CheckResult, QualityIssue, QualitySeverity, StrictContentChecker

__all__ = [
    "ArticleFile",
    "ArticleSection",
    "Category",
    "FAQItem",
    "HubArticle",
    "IngredientItem",
    "IngredientType",
    "Product",
    "SpokeArticle",
    "SpokeSummary",
    "FactFinding",
    "FactRule",
    "MedicalFactChecker",
    "ArticleValidator",
    "CheckResult",
    "QualityIssue",
    "QualitySeverity",
    "StrictContentChecker",
]

"""
Content models for the site.
Categories, products and hub/spoke articles as stored in the content directory.
"""

from enum import Enum
from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class IngredientType(str, Enum):
    """Ingredient roles shown in the ingredient table."""

    ACTIVE = "주성분"
    ADDITIVE = "첨가제"


class ContentModel(BaseModel):
    """Shared config for all content records."""

    model_config = ConfigDict(
        str_strip_whitespace=True,  # Auto-strip whitespace
        populate_by_name=True,
        use_enum_values=True,  # Use string values for enums
    )


class Product(ContentModel):
    """A purchasable medicine shown on cards and the price comparison page."""

    id: str
    name: str
    image: str = "/images/placeholder.svg"
    category: str
    category_slug: str
    description: str = ""
    price: int = Field(default=0, ge=0)  # KRW
    unit: str = "1개"
    barkiry_query: str = ""
    barkiry_product_id: Optional[str] = None
    external_search_url: Optional[str] = None
    ingredients: Optional[str] = None
    usage: Optional[str] = None
    slug: str

    @field_validator("id", mode="before")
    @classmethod
    def convert_to_string(cls, v):
        """Item sequence numbers sometimes arrive as integers."""
        return str(v) if v is not None else v

    @field_validator("price", mode="before")
    @classmethod
    def clean_price(cls, v):
        """Accept '7,000원' style prices."""
        if v is None or v == "":
            return 0
        if isinstance(v, str):
            digits = "".join(ch for ch in v if ch.isdigit())
            return int(digits) if digits else 0
        return v

    @property
    def has_deeplink(self) -> bool:
        return bool(self.barkiry_product_id or self.external_search_url)

    @property
    def has_price_link(self) -> bool:
        return bool(self.barkiry_product_id or self.external_search_url or self.barkiry_query)

    @property
    def has_placeholder_image(self) -> bool:
        return "placeholder" in self.image or self.image.endswith(".svg")


class Category(ContentModel):
    name: str
    slug: str
    icon: str = "💊"
    description: str = ""
    count: int = 0


class FAQItem(ContentModel):
    question: str
    answer: str


class IngredientItem(ContentModel):
    type: IngredientType
    name: str
    amount: Optional[str] = None
    role: str = ""


class ArticleSection(ContentModel):
    title: str
    content: str = ""
    ingredients: Optional[List[IngredientItem]] = None

    @property
    def paragraphs(self) -> List[str]:
        return [p for p in self.content.split("\n\n") if p.strip()]

    @property
    def is_method_section(self) -> bool:
        """True for the usage section the price CTA follows."""
        return "사용법" in self.title or "복용법" in self.title


class SpokeSummary(ContentModel):
    """Hub listing entry pointing at a spoke article."""

    slug: str
    title: str
    description: str = ""


class HubArticle(ContentModel):
    category_slug: str
    title: str = ""
    h1: str = ""
    meta_description: str = ""
    description: str = ""
    hero_description: str = ""
    spokes: List[SpokeSummary] = Field(default_factory=list)
    date_published: Optional[str] = None
    date_modified: Optional[str] = None

    @property
    def spoke_slugs(self) -> List[str]:
        return [s.slug for s in self.spokes]


class SpokeArticle(ContentModel):
    slug: str
    category_slug: str
    title: str
    h1: str
    meta_description: str = ""
    description: str = ""
    hero_description: str = ""
    # Product slugs, resolved against the category's products by the store
    products: List[str] = Field(default_factory=list)
    faq: List[FAQItem] = Field(default_factory=list)
    sections: List[ArticleSection] = Field(default_factory=list)
    date_published: Optional[str] = None
    date_modified: Optional[str] = None

    @property
    def method_section_index(self) -> Optional[int]:
        for i, section in enumerate(self.sections):
            if section.is_method_section:
                return i
        return None

    def full_text(self) -> str:
        """All human-readable text of the article, one field per line."""
        parts = [self.title, self.h1, self.meta_description, self.description, self.hero_description]
        for section in self.sections:
            parts.extend([section.title, section.content])
            for item in section.ingredients or []:
                parts.extend([item.name, item.amount or "", item.role])
        for faq in self.faq:
            parts.extend([faq.question, faq.answer])
        return "\n".join(p for p in parts if p)


class ArticleFile(ContentModel):
    """On-disk layout of content/articles/<category>.json."""

    hub: HubArticle
    spokes: Dict[str, SpokeArticle] = Field(default_factory=dict)

"""
Product data models.

Pure data classes for representing fetched pages, intermediate extraction
results, and the final records handed to callers.
No business logic - only data structure definitions.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

from ..common.constants import (
    CONFIDENCE_DOM,
    CONFIDENCE_NONE,
    CONFIDENCE_STRUCTURED,
    CONFIDENCE_STUB,
    DEFAULT_DELIVERY_DAYS,
)


@dataclass
class RawFetchResult:
    """Response from one mirror attempt. Never persisted."""
    url: str
    status_code: int = 0
    body: str = ""
    error: str = ""


@dataclass
class FetchAttempt:
    """A failed mirror attempt, kept for diagnostics."""
    url: str
    error: str


@dataclass(frozen=True)
class ProductVariant:
    """Product variant (SKU) data."""
    sku_id: str = ""
    attributes: str = ""
    price_text: str = ""
    quantity: int = 0


@dataclass(frozen=True)
class ShippingInfo:
    """Shipping summary."""
    price: float = 0.0
    delivery_days: str = DEFAULT_DELIVERY_DAYS


@dataclass(frozen=True)
class SellerInfo:
    """Seller (store) summary."""
    name: str = ""
    store_url: str = ""
    rating: float = 0.0


@dataclass(frozen=True)
class RatingInfo:
    """Customer rating summary."""
    average: float = 0.0
    count: int = 0


@dataclass
class IntermediateProductData:
    """
    Common shape produced by both extractors.

    Every field is optional except the confidence marker. Instances are
    combined with dataclasses.replace(), never mutated after extraction.
    """
    confidence: str = CONFIDENCE_NONE
    name: str = ""
    description: str = ""
    price_text: str = ""
    currency: str = ""
    images: List[str] = field(default_factory=list)
    variants: List[ProductVariant] = field(default_factory=list)
    shipping: Optional[ShippingInfo] = None
    seller: Optional[SellerInfo] = None
    rating: Optional[RatingInfo] = None

    def __post_init__(self):
        if self.confidence not in (CONFIDENCE_STRUCTURED, CONFIDENCE_DOM, CONFIDENCE_NONE):
            raise ValueError(f"Invalid extraction confidence: {self.confidence!r}")

    @property
    def has_title(self) -> bool:
        return bool(self.name and self.name.strip())


@dataclass(frozen=True)
class ProductRecord:
    """
    Final normalized product, ready for persistence by the caller.

    Field Groups:
    - Identity: canonical source id and the reference it was imported from
    - Content: name, description, images, variants
    - Pricing: computed retail price, source price, currency
    - Summaries: shipping, seller, rating
    - Metadata: confidence marker (structured | dom | stub)
    """

    # Identity
    product_id: str
    source_url: str

    # Content
    name: str
    description: str = ""
    images: Tuple[str, ...] = ()
    variants: Tuple[ProductVariant, ...] = ()

    # Pricing
    price: float = 0.0
    original_price: float = 0.0
    currency: str = ""

    # Summaries
    shipping: ShippingInfo = field(default_factory=ShippingInfo)
    seller: SellerInfo = field(default_factory=SellerInfo)
    rating: RatingInfo = field(default_factory=RatingInfo)

    # Metadata
    confidence: str = CONFIDENCE_STUB

    def __post_init__(self):
        """Validate required fields after initialization."""
        if not self.product_id:
            raise ValueError("Product id is required")
        if not self.name:
            raise ValueError("Product name is required")
        if self.confidence not in (CONFIDENCE_STRUCTURED, CONFIDENCE_DOM, CONFIDENCE_STUB):
            raise ValueError(f"Invalid record confidence: {self.confidence!r}")

    @property
    def needs_review(self) -> bool:
        """Stub records were synthesized without source data."""
        return self.confidence == CONFIDENCE_STUB


@dataclass(frozen=True)
class SearchResultItem:
    """Lightweight summary of one listing entry."""
    product_id: str
    name: str = ""
    description: str = ""
    price: float = 0.0
    original_price: float = 0.0
    currency: str = ""
    image: str = ""
    shipping: ShippingInfo = field(default_factory=ShippingInfo)
    seller: SellerInfo = field(default_factory=SellerInfo)
    rating: RatingInfo = field(default_factory=RatingInfo)


@dataclass
class ReviewPage:
    """One page of product feedback."""
    reviews: List[Dict[str, Any]] = field(default_factory=list)
    total_pages: int = 1
    statistics: Dict[str, Any] = field(default_factory=dict)

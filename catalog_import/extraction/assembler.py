"""
Degradation Assembler

Combines the best available extraction results into a ProductRecord.
Extraction-quality problems never raise: a missing price falls back to a
floor price, and a missing title produces a stub record. The record's
confidence marker tells callers which path produced it.
"""

from __future__ import annotations

import dataclasses
import logging
from typing import Callable, Optional

from ..common.constants import (
    CONFIDENCE_STUB,
    DEFAULT_CURRENCY,
    DEFAULT_FLOOR_PRICE,
    STUB_DESCRIPTION,
    STUB_SELLER_NAME,
)
from ..models import IntermediateProductData, ProductRecord, RatingInfo, SellerInfo, ShippingInfo
from .pricing import PriceCalculator, parse_price

logger = logging.getLogger(__name__)

FloorPriceLookup = Callable[[str], Optional[float]]


def _is_empty(value) -> bool:
    if value is None or value == "" or value == [] or value == ():
        return True
    if isinstance(value, (SellerInfo, RatingInfo)):
        # Treat an all-default summary as absent
        return value == type(value)()
    return False


def merge_intermediate(
    primary: IntermediateProductData,
    secondary: Optional[IntermediateProductData],
) -> IntermediateProductData:
    """
    Fill empty fields of the primary result from the secondary one.

    Args:
        primary: Result that supplied the title (keeps its confidence)
        secondary: Lower-priority result, or None

    Returns:
        New IntermediateProductData; neither input is modified
    """
    if secondary is None:
        return primary

    updates = {}
    for f in dataclasses.fields(IntermediateProductData):
        if f.name == 'confidence':
            continue
        if _is_empty(getattr(primary, f.name)) and not _is_empty(getattr(secondary, f.name)):
            updates[f.name] = getattr(secondary, f.name)

    return dataclasses.replace(primary, **updates) if updates else primary


class DegradationAssembler:
    """
    Builds the final ProductRecord from intermediate extraction results.

    Usage:
        assembler = DegradationAssembler(PriceCalculator(30), floor_price=9.99)
        record = assembler.assemble(data, product_id, source_url)
    """

    def __init__(
        self,
        calculator: PriceCalculator | None = None,
        floor_price: float = DEFAULT_FLOOR_PRICE,
        default_currency: str = DEFAULT_CURRENCY,
        floor_price_lookup: FloorPriceLookup | None = None,
    ):
        """
        Initialize the assembler.

        Args:
            calculator: Markup engine shared with the rest of the pipeline
            floor_price: Minimum retail price of any record
            default_currency: Currency when the source does not state one
            floor_price_lookup: Optional best-effort price source keyed by
                product id, consulted when no price could be computed
        """
        self.calculator = calculator or PriceCalculator()
        self.floor_price = floor_price
        self.default_currency = default_currency
        self.floor_price_lookup = floor_price_lookup

    def assemble(
        self,
        data: Optional[IntermediateProductData],
        product_id: str,
        source_url: str,
    ) -> ProductRecord:
        """
        Assemble a record from the best extraction result.

        Args:
            data: Result with a usable title, or None when extraction failed
            product_id: Canonical product id
            source_url: Reference the import started from

        Returns:
            ProductRecord (stub confidence when data has no title)
        """
        if data is None or not data.has_title:
            return self._build_stub(product_id, source_url)

        original_price = parse_price(data.price_text)
        retail_price = self.calculator.retail_price(original_price)
        price = self._apply_floor(retail_price, product_id)

        return ProductRecord(
            product_id=product_id,
            source_url=source_url,
            name=data.name,
            description=data.description,
            images=tuple(data.images),
            variants=tuple(data.variants),
            price=price,
            original_price=original_price if original_price > 0 else price,
            currency=data.currency or self.default_currency,
            shipping=data.shipping or ShippingInfo(),
            seller=data.seller or SellerInfo(),
            rating=data.rating or RatingInfo(),
            confidence=data.confidence,
        )

    def _build_stub(self, product_id: str, source_url: str) -> ProductRecord:
        """Synthesize a minimal record when no extractor produced a title."""
        logger.warning("Creating stub record for product %s", product_id)
        price = self._apply_floor(0.0, product_id)

        return ProductRecord(
            product_id=product_id,
            source_url=source_url,
            name=f"Product {product_id}",
            description=STUB_DESCRIPTION,
            price=price,
            original_price=price,
            currency=self.default_currency,
            seller=SellerInfo(name=STUB_SELLER_NAME),
            confidence=CONFIDENCE_STUB,
        )

    def _apply_floor(self, price: float, product_id: str) -> float:
        """
        Enforce the floor price policy.

        Zero prices consult the lookup first, then the fixed floor; any
        price is finally raised to at least the floor.
        """
        if price <= 0:
            price = self._lookup_floor_price(product_id)
        return max(price, self.floor_price)

    def _lookup_floor_price(self, product_id: str) -> float:
        if self.floor_price_lookup is None:
            return self.floor_price

        try:
            found = self.floor_price_lookup(product_id)
        except Exception as e:
            # Lookup failures fall back to the fixed floor
            logger.warning("Floor price lookup failed for %s: %s", product_id, e)
            return self.floor_price

        if found and found > 0:
            logger.info("Found fallback price from search: %.2f", found)
            return found

        return self.floor_price

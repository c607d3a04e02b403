"""
Listing Parser

Extracts search results from the listing page's embedded _init_data_
payload. Items live in an array under the catalog module
(mods.itemList.content); each maps to a SearchResultItem.

Malformed items degrade to empty/zero fields instead of dropping the list.
"""

from __future__ import annotations

import logging
import re
from typing import Any, Dict, List

from bs4 import BeautifulSoup

from ...common.constants import DEFAULT_CURRENCY, DEFAULT_DELIVERY_DAYS
from ...common.text_utils import absolute_url, clean_text
from ...models import RatingInfo, SearchResultItem, SellerInfo, ShippingInfo
from ..pricing import PriceCalculator, parse_price
from .script_payload import PayloadFormat, coerce_float, coerce_int, first_value, get_path, iter_script_payloads

logger = logging.getLogger(__name__)

LISTING_FORMATS = [
    PayloadFormat('init_data', '_init_data_', re.compile(r'_init_data_\s*=\s*\{\s*data:\s*(?=\{)'),
                  trailer=re.compile(r'\s*\}')),
]


class ListingParser:
    """
    Parses listing (search) pages into SearchResultItem lists.

    Usage:
        parser = ListingParser(PriceCalculator(markup_percentage=30))
        items = parser.parse(html)
    """

    ITEM_LIST_PATHS = [
        'root.fields.mods.itemList.content',
        'data.root.fields.mods.itemList.content',
        'mods.itemList.content',
    ]

    def __init__(self, calculator: PriceCalculator | None = None, default_currency: str = DEFAULT_CURRENCY):
        self.calculator = calculator or PriceCalculator()
        self.default_currency = default_currency

    def parse(self, html: str) -> List[SearchResultItem]:
        """
        Parse a listing page.

        Args:
            html: Raw HTML of the listing page

        Returns:
            Ordered list of results (empty if the payload is missing or bad)
        """
        if not html:
            return []

        soup = BeautifulSoup(html, "lxml")

        for _name, payload in iter_script_payloads(soup, LISTING_FORMATS):
            content = first_value(payload, self.ITEM_LIST_PATHS)
            if isinstance(content, list):
                return self.parse_items(content)

        logger.debug("No listing payload found")
        return []

    def parse_items(self, content: List[Any]) -> List[SearchResultItem]:
        """Map raw listing entries, skipping only entries that are not objects."""
        results = []
        for item in content:
            if not isinstance(item, dict):
                logger.debug("Skipping non-object listing entry: %r", item)
                continue
            results.append(self.parse_item(item))
        return results

    def parse_item(self, item: Dict[str, Any]) -> SearchResultItem:
        """
        Map one listing entry.

        Args:
            item: Raw entry from mods.itemList.content

        Returns:
            SearchResultItem with missing fields left empty/zero
        """
        original_price = parse_price(first_value(item, [
            'prices.salePrice.minPrice',
            'prices.salePrice.formattedPrice',
            'prices.originalPrice.minPrice',
        ]))

        return SearchResultItem(
            product_id=clean_text(first_value(item, ['productId', 'itemId'])),
            name=clean_text(first_value(item, ['title.displayTitle', 'title.seoTitle'])),
            description=clean_text(get_path(item, 'title.seoTitle')),
            price=self.calculator.retail_price(original_price),
            original_price=original_price,
            currency=clean_text(get_path(item, 'prices.salePrice.currencyCode')) or self.default_currency,
            image=absolute_url(get_path(item, 'image.imgUrl')),
            shipping=ShippingInfo(
                price=parse_price(get_path(item, 'shipping.price')),
                delivery_days=clean_text(get_path(item, 'shipping.deliveryDays')) or DEFAULT_DELIVERY_DAYS,
            ),
            seller=SellerInfo(
                name=clean_text(get_path(item, 'store.storeName')),
                store_url=absolute_url(get_path(item, 'store.storeUrl')),
                rating=coerce_float(get_path(item, 'store.storeRating')),
            ),
            rating=RatingInfo(
                average=coerce_float(get_path(item, 'evaluation.starRating')),
                count=coerce_int(get_path(item, 'evaluation.starCount')),
            ),
        )

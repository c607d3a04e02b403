"""
HTML Content Parser

Extracts product information from presentation elements:
- Title from heading selectors, falling back to the <title> element
- Price text from price selectors
- Images from gallery elements, falling back to CDN images with alt text
- Seller from store-name links
- Rating and review count

This parser handles direct HTML element extraction when no script
payload is available. It always returns a result, even if most fields
are empty.
"""

import logging
import re
from typing import List
from urllib.parse import urlparse

from bs4 import BeautifulSoup

from ...common.constants import CONFIDENCE_DOM
from ...common.text_utils import absolute_url, clean_text
from ...models import IntermediateProductData, RatingInfo, SellerInfo, ShippingInfo
from ..pricing import detect_currency

logger = logging.getLogger(__name__)


class HTMLContentParser:
    """
    Parses product content from HTML elements.

    Usage:
        parser = HTMLContentParser(soup)
        data = parser.extract()
        title = parser.extract_title()
        images = parser.extract_images()
    """

    TITLE_SELECTORS = [
        'h1.product-title',
        'h1.title',
        'h1[data-pl="product-title"]',
        'h1',
        'div.product-title',
    ]
    PRICE_SELECTORS = [
        'div.product-price span.price',
        'span.product-price-value',
        'div.product-price-current span',
        'span.uniform-banner-box-price',
        'span.price',
    ]
    SELLER_SELECTORS = [
        'a.store-name',
        'span.shop-name',
        'div.store-header a',
        '[data-pl="store-name"]',
    ]
    GALLERY_SELECTORS = [
        'div.image-gallery img',
        'div.product-image img',
        'img.main-image',
        'div.images-view-wrap img',
    ]
    DESCRIPTION_SELECTORS = ['div.product-description', 'div.detail-desc']

    # Site name suffixes appended to <title>, e.g. "Foo Bar | AliExpress"
    TITLE_SUFFIX_PATTERN = re.compile(r'\s*[|\-–]\s*(?:AliExpress|Aliexpress)\b.*$')
    ASSET_HOST = 'alicdn.com'
    EXCLUDE_IMAGE_PATTERNS = [
        'placeholder', 'icon', 'logo', 'sprite', 'loading', 'blank', 'avatar', '.svg', '.gif',
    ]

    def __init__(self, soup: BeautifulSoup):
        """
        Initialize the HTML parser.

        Args:
            soup: BeautifulSoup object of the page
        """
        self.soup = soup

    @classmethod
    def from_html(cls, html: str) -> "HTMLContentParser":
        return cls(BeautifulSoup(html or "", "lxml"))

    def extract(self) -> IntermediateProductData:
        """
        Extract every field as a best-effort result.

        Returns:
            IntermediateProductData tagged 'dom' (never None)
        """
        price_text = self.extract_price_text()
        seller_name, store_url = self.extract_seller()

        return IntermediateProductData(
            confidence=CONFIDENCE_DOM,
            name=self.extract_title(),
            description=self.extract_description(),
            price_text=price_text,
            currency=detect_currency(price_text),
            images=self.extract_images(),
            shipping=ShippingInfo(),
            seller=SellerInfo(name=seller_name, store_url=store_url),
            rating=RatingInfo(
                average=self.extract_rating(),
                count=self.extract_review_count(),
            ),
        )

    def _first_text(self, selectors: List[str]) -> str:
        """Return the text of the first selector with a non-empty match."""
        for selector in selectors:
            element = self.soup.select_one(selector)
            if element:
                text = clean_text(element.get_text())
                if text:
                    return text
        return ""

    def extract_title(self) -> str:
        """
        Extract product title from HTML.

        Tries heading selectors in priority order, then the document title
        with the site-name suffix removed.

        Returns:
            Product title or empty string
        """
        title = self._first_text(self.TITLE_SELECTORS)
        if title:
            return title

        title_elem = self.soup.find('title')
        if title_elem:
            text = clean_text(title_elem.get_text())
            text = self.TITLE_SUFFIX_PATTERN.sub('', text).strip()
            # A bare site name is not a product title
            if text.lower() != 'aliexpress':
                return text

        return ""

    def extract_price_text(self) -> str:
        """
        Extract the displayed price text.

        Returns:
            Price text containing at least one digit, or empty string
        """
        for selector in self.PRICE_SELECTORS:
            element = self.soup.select_one(selector)
            if element:
                text = clean_text(element.get_text())
                if text and re.search(r'\d', text):
                    return text
        return ""

    def extract_seller(self) -> tuple[str, str]:
        """
        Extract seller name and store URL.

        Returns:
            Tuple of (name, store_url), empty strings when absent
        """
        for selector in self.SELLER_SELECTORS:
            element = self.soup.select_one(selector)
            if element:
                name = clean_text(element.get_text())
                if name:
                    href = element.get('href', '') if element.name == 'a' else ''
                    return name, absolute_url(href)
        return "", ""

    def extract_description(self) -> str:
        """
        Extract product description.

        Returns:
            Meta description, or description block text, or empty string
        """
        meta = self.soup.find('meta', attrs={'name': 'description'})
        if meta:
            content = clean_text(meta.get('content', ''))
            if content:
                return content

        return self._first_text(self.DESCRIPTION_SELECTORS)

    def extract_images(self) -> List[str]:
        """
        Extract product image URLs.

        Returns:
            De-duplicated list of absolute image URLs
        """
        images: List[str] = []

        for selector in self.GALLERY_SELECTORS:
            for img in self.soup.select(selector):
                src = absolute_url(img.get('src') or img.get('data-src'))
                if self._is_product_image(src) and src not in images:
                    images.append(src)

        if not images:
            images = self._extract_cdn_images()

        return images

    def _extract_cdn_images(self) -> List[str]:
        """Broadened search: any CDN-hosted image with alt text."""
        images: List[str] = []

        for img in self.soup.find_all('img'):
            src = absolute_url(img.get('src') or img.get('data-src'))
            alt = clean_text(img.get('alt', ''))
            if not src or not alt:
                continue
            host = urlparse(src).netloc.lower()
            if not host.endswith(self.ASSET_HOST):
                continue
            if self._is_product_image(src) and src not in images:
                images.append(src)

        return images

    def _is_product_image(self, url: str) -> bool:
        """Check if URL is a product image (not icon/placeholder)."""
        if not url:
            return False
        filename = urlparse(url).path.rsplit('/', 1)[-1].lower()
        return not any(pattern in filename for pattern in self.EXCLUDE_IMAGE_PATTERNS)

    def extract_rating(self) -> float:
        """
        Extract average star rating.

        Returns:
            Rating as float, 0.0 if absent
        """
        text = self._first_text(['span.rating-value'])
        match = re.search(r'\d+(?:[.,]\d+)?', text)
        return float(match.group(0).replace(',', '.')) if match else 0.0

    def extract_review_count(self) -> int:
        """
        Extract number of reviews.

        Returns:
            Review count, 0 if absent
        """
        text = self._first_text(['span.review-count'])
        match = re.search(r'\d+', text.replace(',', ''))
        return int(match.group(0)) if match else 0

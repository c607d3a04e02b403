"""
Product Importer

Runs the single-product import pipeline:

    reference -> product id -> mirror fetch -> script payload extraction
    -> HTML fallback -> JSON endpoint fallback -> assembled ProductRecord

Only UnresolvableReference and AllMirrorsFailed escape. Everything else
degrades into a lower-confidence record.
"""

from __future__ import annotations

import logging
from typing import Optional

import requests
from bs4 import BeautifulSoup

from ..common.config_loader import load_importer_settings
from ..common.constants import DEFAULT_CURRENCY, DEFAULT_FLOOR_PRICE
from ..models import IntermediateProductData, ProductRecord, ReviewPage
from .assembler import DegradationAssembler, merge_intermediate
from .fetcher import MirrorFetcher
from .identifier import resolve_product_id
from .listing_search import ListingSearch
from .parsers import HTMLContentParser, StructuredPayloadParser, get_path
from .pricing import PriceCalculator

logger = logging.getLogger(__name__)


class ProductImporter:
    """
    Imports one product from a URL or id into a ProductRecord.

    Usage:
        importer = ProductImporter(markup_percentage=30)
        record = importer.import_product("https://www.aliexpress.com/item/1005001234567890.html")
        if record.needs_review:
            ...
    """

    def __init__(
        self,
        markup_percentage: float | None = None,
        settings: dict | None = None,
        session: requests.Session | None = None,
        fetcher: MirrorFetcher | None = None,
        searcher: ListingSearch | None = None,
    ):
        """
        Initialize the importer.

        Args:
            markup_percentage: Markup override (default from settings, then 30)
            settings: Importer settings (default: config/importer.yaml + env)
            session: Shared HTTP session for every network call
            fetcher: Custom mirror fetcher
            searcher: Custom listing search (used for the floor price lookup)
        """
        self.settings = settings if settings is not None else load_importer_settings()
        source = self.settings.get('source', {})
        http = self.settings.get('http', {})
        pricing = self.settings.get('pricing', {})

        self._owns_session = session is None
        if session is None:
            session = requests.Session()
            session.max_redirects = http.get('max_redirects', session.max_redirects)
        self._session = session

        self.calculator = PriceCalculator.from_settings(pricing, markup_percentage)
        self.fetcher = fetcher or MirrorFetcher.from_settings(self.settings, session=self._session)
        self.searcher = searcher or ListingSearch.from_settings(
            self.settings, calculator=self.calculator, session=self._session,
        )
        self.structured_parser = StructuredPayloadParser()

        lookup = self.searcher.first_price if pricing.get('floor_price_search', True) else None
        self.assembler = DegradationAssembler(
            calculator=self.calculator,
            floor_price=pricing.get('floor_price', DEFAULT_FLOOR_PRICE),
            default_currency=pricing.get('default_currency', DEFAULT_CURRENCY),
            floor_price_lookup=lookup,
        )

        self.api_fallback = source.get('api_fallback', False)
        self.api_url = source.get('api_url', "")
        self.reviews_url = source.get('reviews_url', "")
        self.headers = dict(http.get('headers') or {})
        self.timeout = http.get('timeout', 30)

    def __enter__(self):
        return self

    def __exit__(self, *args):
        self.close()

    def close(self):
        """Close the HTTP session if the importer created it."""
        if self._owns_session:
            self._session.close()

    def import_product(self, reference: str) -> ProductRecord:
        """
        Import a product from a free-form reference.

        Args:
            reference: Product URL (any known shape) or bare id

        Returns:
            ProductRecord; check record.confidence / record.needs_review

        Raises:
            UnresolvableReference: If no product id can be derived
            AllMirrorsFailed: If no mirror could be reached
        """
        product_id = resolve_product_id(reference)
        logger.info("Importing product %s", product_id)

        source_url = reference.strip()
        if not source_url.startswith(('http://', 'https://')):
            source_url = None

        return self.get_product_details(product_id, source_url=source_url)

    def get_product_details(self, product_id: str, source_url: Optional[str] = None) -> ProductRecord:
        """
        Fetch and assemble a product by canonical id.

        Args:
            product_id: Canonical product id
            source_url: Reference to record (default: the mirror that answered)

        Returns:
            ProductRecord

        Raises:
            AllMirrorsFailed: If no mirror could be reached
        """
        fetched = self.fetcher.fetch(product_id)
        logger.debug("Fetched %s (HTTP %d, %d chars)", fetched.url, fetched.status_code, len(fetched.body))

        data = self.extract(fetched.body)

        if data is None and self.api_fallback:
            data = self.fetch_api_product(product_id)

        record = self.assembler.assemble(data, product_id, source_url or fetched.url)
        logger.info("Imported %s: %s (%s, %.2f %s)",
                    product_id, record.name[:50], record.confidence, record.price, record.currency)
        return record

    def extract(self, html: str) -> Optional[IntermediateProductData]:
        """
        Run both extractors over a page.

        The script payload is preferred; the HTML result fills its gaps,
        and stands alone only when it has a title.

        Args:
            html: Raw page HTML

        Returns:
            Best intermediate result, or None if no title was found
        """
        soup = BeautifulSoup(html or "", "lxml")

        structured = self.structured_parser.extract_from_soup(soup)
        dom = HTMLContentParser(soup).extract()

        if structured is not None:
            return merge_intermediate(structured, dom)

        if dom.has_title:
            logger.info("Script extraction failed, using HTML extraction")
            return dom

        logger.info("Both extraction methods failed")
        return None

    def extract_from_html(self, html: str, product_id: str, source_url: str) -> ProductRecord:
        """
        Build a record from already fetched content.

        Args:
            html: Raw page HTML
            product_id: Canonical product id
            source_url: Reference to record

        Returns:
            ProductRecord
        """
        return self.assembler.assemble(self.extract(html), product_id, source_url)

    def fetch_api_product(self, product_id: str) -> Optional[IntermediateProductData]:
        """
        Try the site's JSON endpoint for product data.

        Args:
            product_id: Canonical product id

        Returns:
            Structured result with a title, or None on any failure
        """
        if not self.api_url:
            return None

        url = self.api_url.format(product_id=product_id)
        headers = dict(self.headers)
        headers['Accept'] = 'application/json, text/plain, */*'
        headers['Referer'] = f"https://www.aliexpress.com/item/{product_id}.html"

        logger.debug("Trying JSON endpoint: %s", url)
        try:
            response = self._session.get(url, headers=headers, timeout=self.timeout)
            if response.status_code >= 400:
                logger.debug("JSON endpoint returned HTTP %d", response.status_code)
                return None
            payload = response.json()
        except (requests.RequestException, ValueError) as e:
            logger.warning("Error fetching from JSON endpoint: %s", e)
            return None

        product_info = get_path(payload, 'data.productInfo')
        if not isinstance(product_info, dict):
            return None

        data = self.structured_parser.from_product_info(product_info)
        if not data.has_title:
            return None

        logger.info("Extracted product data from JSON endpoint")
        return data

    def fetch_reviews(self, product_id: str, page: int = 1) -> ReviewPage:
        """
        Fetch one page of product feedback.

        Args:
            product_id: Canonical product id
            page: 1-based page number

        Returns:
            ReviewPage (empty on any failure)
        """
        if not self.reviews_url:
            return ReviewPage()

        url = self.reviews_url.format(product_id=product_id, page=page)
        try:
            response = self._session.get(url, headers=self.headers, timeout=self.timeout)
            if response.status_code >= 400:
                return ReviewPage()
            payload = response.json()
        except (requests.RequestException, ValueError) as e:
            logger.warning("Error getting product reviews for %s: %s", product_id, e)
            return ReviewPage()

        data = get_path(payload, 'data')
        if not isinstance(data, dict):
            return ReviewPage()

        reviews = data.get('evaViewList') or []
        statistics = data.get('productEvaluationStatistic') or {}
        try:
            total_pages = int(data.get('totalPage') or 1)
        except (TypeError, ValueError):
            total_pages = 1

        return ReviewPage(
            reviews=[r for r in reviews if isinstance(r, dict)],
            total_pages=total_pages,
            statistics=statistics if isinstance(statistics, dict) else {},
        )

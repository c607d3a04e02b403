"""
Listing Search

Fetches one search listing page for a keyword and parses it into
SearchResultItem entries. Search never fails: transport errors, server
errors and unparsable pages all yield an empty list.
"""

from __future__ import annotations

import logging
from typing import Dict, List, Optional

import requests

from ..common.constants import DEFAULT_CURRENCY
from ..models import SearchResultItem
from .fetcher import DEFAULT_HEADERS
from .parsers import ListingParser
from .pricing import PriceCalculator

logger = logging.getLogger(__name__)

DEFAULT_LOCALE = {'currency': 'USD', 'language': 'en_US', 'country': 'US'}


class ListingSearch:
    """
    Keyword search against the source's listing pages.

    Usage:
        search = ListingSearch(calculator=PriceCalculator(30))
        items = search.search("usb cable", page=2, sort="orders")
    """

    def __init__(
        self,
        base_url: str = "https://www.aliexpress.com",
        search_url: str = "{base_url}/wholesale",
        headers: Optional[Dict[str, str]] = None,
        timeout: float = 30,
        calculator: PriceCalculator | None = None,
        default_currency: str = DEFAULT_CURRENCY,
        default_sort: str = "default",
        default_locale: Optional[Dict[str, str]] = None,
        session: requests.Session | None = None,
    ):
        self.base_url = base_url.rstrip('/')
        self.search_url = search_url.format(base_url=self.base_url)
        self.headers = dict(headers or DEFAULT_HEADERS)
        self.timeout = timeout
        self.parser = ListingParser(calculator, default_currency=default_currency)
        self.default_sort = default_sort
        self.default_locale = dict(default_locale or DEFAULT_LOCALE)
        self._session = session
        self._owns_session = False

    @classmethod
    def from_settings(
        cls,
        settings: dict,
        calculator: PriceCalculator | None = None,
        session: requests.Session | None = None,
    ) -> "ListingSearch":
        """Build a search client from importer settings."""
        source = settings.get('source', {})
        http = settings.get('http', {})
        search = settings.get('search', {})
        return cls(
            base_url=source.get('base_url', "https://www.aliexpress.com"),
            search_url=source.get('search_url', "{base_url}/wholesale"),
            headers=http.get('headers'),
            timeout=http.get('timeout', 30),
            calculator=calculator,
            default_currency=settings.get('pricing', {}).get('default_currency', DEFAULT_CURRENCY),
            default_sort=search.get('sort', "default"),
            default_locale=search.get('locale'),
            session=session,
        )

    @property
    def session(self) -> requests.Session:
        if self._session is None:
            self._session = requests.Session()
            self._owns_session = True
        return self._session

    def build_params(self, keyword: str, page: int = 1, sort: Optional[str] = None) -> Dict[str, str]:
        """Query parameters for one listing page."""
        try:
            page_number = max(1, int(page))
        except (TypeError, ValueError):
            page_number = 1

        return {
            'trafficChannel': 'main',
            'd': 'y',
            'CatId': '0',
            'SearchText': keyword,
            'ltype': 'wholesale',
            'SortType': sort or self.default_sort,
            'page': str(page_number),
        }

    def locale_cookie(self, locale: Optional[Dict[str, str]] = None) -> str:
        """Site preference cookie selecting currency, region and language."""
        merged = {**self.default_locale, **(locale or {})}
        return (
            f"aep_usuc_f=site=glo&c_tp={merged.get('currency', 'USD')}"
            f"&region={merged.get('country', 'US')}&b_locale={merged.get('language', 'en_US')}"
        )

    def search(
        self,
        keyword: str,
        page: int = 1,
        sort: Optional[str] = None,
        locale: Optional[Dict[str, str]] = None,
    ) -> List[SearchResultItem]:
        """
        Search listings for a keyword.

        Args:
            keyword: Search text
            page: 1-based page number
            sort: Site sort type (default from settings)
            locale: Overrides for currency/language/country

        Returns:
            Ordered list of results, empty on any failure
        """
        if not keyword or not keyword.strip():
            return []

        headers = dict(self.headers)
        headers['Cookie'] = self.locale_cookie(locale)

        try:
            response = self.session.get(
                self.search_url,
                params=self.build_params(keyword.strip(), page, sort),
                headers=headers,
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            logger.warning("Error searching products for %r: %s", keyword, e)
            return []

        if response.status_code >= 500:
            logger.warning("Search returned HTTP %d for %r", response.status_code, keyword)
            return []

        results = self.parser.parse(response.text or "")
        logger.debug("Search %r page %s: %d results", keyword, page, len(results))
        return results

    def first_price(self, keyword: str) -> Optional[float]:
        """
        Retail price of the first result, used as a fallback price.

        Args:
            keyword: Search text (the pipeline passes the product id)

        Returns:
            Price of the first result if positive, otherwise None
        """
        results = self.search(keyword)
        if results and results[0].price > 0:
            return results[0].price
        return None

    def close(self):
        """Close the session if this object created it."""
        if self._owns_session:
            self._session.close()

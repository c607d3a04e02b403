"""
Script Payload Parser

Extracts product information from data blobs embedded in page scripts.
This is the highest priority source for product data: the site ships the
same data its front-end renders from, in one of several historical formats:

- csrf:        data: {...}, csrfToken: "..."
- runParams:   window.runParams = {...};
- init_data:   window._init_data_ = { data: {...} }
- productInfo: data: {... productInfo ...}

Each object is cut out by a brace-balanced scan that skips string literals.
The blobs are JavaScript object literals, not always valid JSON, so each
captured block goes through a bounded sequence of textual repairs before
parsing. The product sub-object and its fields sit under different keys
depending on the format, so lookups go through ordered accessor paths.
"""

import json
import logging
import re
from typing import Any, Callable, Dict, Iterator, List, NamedTuple, Optional

from bs4 import BeautifulSoup

from ...common.constants import CONFIDENCE_STRUCTURED
from ...common.text_utils import absolute_url, clean_text
from ...models import IntermediateProductData, ProductVariant, RatingInfo, SellerInfo, ShippingInfo

logger = logging.getLogger(__name__)


class PayloadFormat(NamedTuple):
    """Where one kind of embedded object literal starts and what must surround it."""
    name: str
    marker: str                           # substring a script must contain
    opening: re.Pattern                   # match ends right before the object's '{'
    trailer: Optional[re.Pattern] = None  # must match right after the closing '}'
    requires: str = ""                    # substring the object itself must contain


# In priority order
PAYLOAD_FORMATS: List[PayloadFormat] = [
    PayloadFormat('csrf', 'data:', re.compile(r'data:\s*(?=\{)'), trailer=re.compile(r'\s*,\s*csrfToken')),
    PayloadFormat('runParams', 'window.runParams', re.compile(r'window\.runParams\s*=\s*(?=\{)')),
    PayloadFormat('init_data', '_init_data_', re.compile(r'_init_data_\s*=\s*\{\s*data:\s*(?=\{)'),
                  trailer=re.compile(r'\s*\}')),
    PayloadFormat('productInfo', 'productInfo', re.compile(r'data\s*:\s*(?=\{)'), requires='productInfo'),
]

# Double- or single-quoted JavaScript string literal, escapes included
STRING_LITERAL = r'"(?:\\.|[^"\\])*"|\'(?:\\.|[^\'\\])*\''

_STRING_RE = re.compile(STRING_LITERAL, re.DOTALL)
_LITERAL_TOKEN_RE = re.compile(
    rf'(?P<string>{STRING_LITERAL})|\bundefined\b|(?<![\w!])!0\b|(?<![\w!])!1\b', re.DOTALL,
)
_BARE_KEY_RE = re.compile(
    rf'(?P<string>{STRING_LITERAL})|(?P<lead>[{{,]\s*)(?P<key>[A-Za-z_$][\w$]*)\s*:', re.DOTALL,
)

_LITERAL_TOKENS = {'undefined': 'null', '!0': 'true', '!1': 'false'}


def scan_object(text: str, start: int) -> Optional[str]:
    """
    Return the object literal opening at text[start], up to its matching brace.

    Braces inside string literals are not counted.

    Args:
        text: Script source
        start: Index of the opening '{'

    Returns:
        The balanced object text, or None if it never closes
    """
    if start >= len(text) or text[start] != '{':
        return None

    depth = 0
    quote = None
    escaped = False
    for index in range(start, len(text)):
        char = text[index]
        if quote:
            if escaped:
                escaped = False
            elif char == '\\':
                escaped = True
            elif char == quote:
                quote = None
            continue

        if char in '"\'`':
            quote = char
        elif char == '{':
            depth += 1
        elif char == '}':
            depth -= 1
            if depth == 0:
                return text[start:index + 1]
    return None


def _replace_literal_tokens(text: str) -> str:
    """JavaScript literals json cannot parse."""
    def replace(match):
        if match.group('string') is not None:
            return match.group('string')
        return _LITERAL_TOKENS[match.group(0)]

    return _LITERAL_TOKEN_RE.sub(replace, text)


def _quote_keys(text: str) -> str:
    """Quote bare object keys: {foo: 1, bar_baz: 2} -> {"foo": 1, "bar_baz": 2}."""
    def replace(match):
        if match.group('string') is not None:
            return match.group('string')
        return f'{match.group("lead")}"{match.group("key")}":'

    return _BARE_KEY_RE.sub(replace, text)


def _double_quote_strings(text: str) -> str:
    """Convert single-quoted strings to double-quoted ones."""
    def replace(match):
        literal = match.group(0)
        if literal.startswith('"'):
            return literal
        body = literal[1:-1].replace("\\'", "'").replace('"', '\\"')
        return f'"{body}"'

    return _STRING_RE.sub(replace, text)


# Applied cumulatively; parsing is attempted before the first and after each
PAYLOAD_REPAIRS: List[Callable[[str], str]] = [
    _replace_literal_tokens,
    _quote_keys,
    _double_quote_strings,
]


def decode_payload(text: str) -> Optional[Any]:
    """
    Parse an embedded object literal, repairing it as needed.

    Args:
        text: Captured object literal

    Returns:
        Parsed data, or None if no repair makes it parsable
    """
    if not text:
        return None

    candidate = text.strip().rstrip(';')
    try:
        return json.loads(candidate)
    except (json.JSONDecodeError, ValueError):
        pass

    for repair in PAYLOAD_REPAIRS:
        candidate = repair(candidate)
        try:
            return json.loads(candidate)
        except (json.JSONDecodeError, ValueError):
            continue

    return None


def get_path(data: Any, path: str) -> Any:
    """
    Read a dotted path from nested dicts.

    Args:
        data: Parsed payload
        path: Dotted key path ("" for the object itself)

    Returns:
        Value at the path, or None if any step is missing
    """
    if not path:
        return data

    current = data
    for key in path.split('.'):
        if not isinstance(current, dict):
            return None
        current = current.get(key)
        if current is None:
            return None
    return current


def first_value(data: Any, paths: List[str]) -> Any:
    """
    Return the first present, non-empty value among ordered accessor paths.

    Args:
        data: Parsed payload
        paths: Dotted key paths in priority order

    Returns:
        First value that is not None/""/empty container, or None
    """
    for path in paths:
        value = get_path(data, path)
        if value is None or value == "" or value == [] or value == {}:
            continue
        return value
    return None


def iter_payload_objects(content: str, payload_format: PayloadFormat) -> Iterator[str]:
    """Yield every object literal in a script that fits the format's surroundings."""
    for match in payload_format.opening.finditer(content):
        obj = scan_object(content, match.end())
        if obj is None:
            continue
        end = match.end() + len(obj)
        if payload_format.trailer is not None and not payload_format.trailer.match(content, end):
            continue
        if payload_format.requires not in obj:
            continue
        yield obj


def iter_script_payloads(soup: BeautifulSoup, formats: Optional[List[PayloadFormat]] = None):
    """
    Yield (format name, decoded payload) for every script object that matches.

    Args:
        soup: Parsed page
        formats: Ordered PayloadFormat list (default: PAYLOAD_FORMATS)

    Yields:
        Tuples of (format name, parsed payload) in priority order
    """
    formats = PAYLOAD_FORMATS if formats is None else formats
    scripts = [script.string or script.get_text() or "" for script in soup.find_all('script')]

    for payload_format in formats:
        for content in scripts:
            if payload_format.marker not in content:
                continue
            for obj in iter_payload_objects(content, payload_format):
                data = decode_payload(obj)
                if data is None:
                    logger.debug("Could not decode %s payload (%d chars)", payload_format.name, len(obj))
                    continue
                yield payload_format.name, data


class StructuredPayloadParser:
    """
    Parses product data from embedded script payloads.

    Usage:
        parser = StructuredPayloadParser()
        data = parser.extract(html)
        if data is not None:
            title = data.name
    """

    # Where the product object lives, by payload format
    PRODUCT_INFO_PATHS = [
        'data.productInfo',
        'productInfo',
        'root.fields.productInfo',
        'data.root.fields.productInfo',
        # Module-style payloads keep fields in *Module objects at the top
        'data',
        '',
    ]

    TITLE_PATHS = ['subject', 'title', 'name', 'titleModule.subject']
    DESCRIPTION_PATHS = ['description', 'pageModule.description']
    PRICE_PATHS = [
        'priceInfo.formatedActivityPrice',
        'priceInfo.formatedPrice',
        'price.formatedActivityPrice',
        'price.formatedPrice',
        'formatedActivityPrice',
        'formatedPrice',
        'priceModule.formatedActivityPrice',
        'priceModule.formatedPrice',
    ]
    CURRENCY_PATHS = ['currencyCode', 'priceModule.currencyCode', 'webEnv.currency']
    IMAGE_PATHS = ['imagePathList', 'images', 'imageModule.imagePathList']
    VARIANT_PATHS = ['skuList', 'variants', 'skuModule.skuPriceList']
    STORE_NAME_PATHS = ['storeName', 'storeModule.storeName']
    STORE_URL_PATHS = ['storeUrl', 'storeModule.storeURL']
    STORE_RATING_PATHS = ['storeRating', 'storeModule.positiveRate']
    RATING_AVERAGE_PATHS = ['averageStarRate', 'titleModule.feedbackRating.averageStar']
    RATING_COUNT_PATHS = ['totalEvaluation', 'titleModule.feedbackRating.totalValidNum']

    def extract(self, html: str) -> Optional[IntermediateProductData]:
        """
        Extract product data from embedded payloads.

        Args:
            html: Raw HTML of the page

        Returns:
            IntermediateProductData tagged 'structured', or None if no
            payload yields a product title
        """
        if not html:
            return None

        soup = BeautifulSoup(html, "lxml")
        return self.extract_from_soup(soup)

    def extract_from_soup(self, soup: BeautifulSoup) -> Optional[IntermediateProductData]:
        """Extract from an already parsed page."""
        for name, payload in iter_script_payloads(soup):
            product_info = self.find_product_info(payload)
            if product_info is None:
                continue
            data = self.from_product_info(product_info)
            if data.has_title:
                logger.debug("Extracted product data from %s payload", name)
                return data

        return None

    def find_product_info(self, payload: Any) -> Optional[Dict[str, Any]]:
        """
        Locate the product sub-object.

        Args:
            payload: Decoded script payload

        Returns:
            First dict found along PRODUCT_INFO_PATHS that carries a title
        """
        for path in self.PRODUCT_INFO_PATHS:
            candidate = get_path(payload, path)
            if isinstance(candidate, dict) and first_value(candidate, self.TITLE_PATHS):
                return candidate
        return None

    def from_product_info(self, info: Dict[str, Any]) -> IntermediateProductData:
        """
        Map a product object into the common intermediate shape.

        Args:
            info: Product sub-object from a payload or the JSON endpoint

        Returns:
            IntermediateProductData tagged 'structured'
        """
        price = first_value(info, self.PRICE_PATHS)

        return IntermediateProductData(
            confidence=CONFIDENCE_STRUCTURED,
            name=clean_text(first_value(info, self.TITLE_PATHS)),
            description=clean_text(first_value(info, self.DESCRIPTION_PATHS)),
            price_text=clean_text(price) if price is not None else "",
            currency=clean_text(first_value(info, self.CURRENCY_PATHS)),
            images=self._extract_images(first_value(info, self.IMAGE_PATHS)),
            variants=self._extract_variants(first_value(info, self.VARIANT_PATHS)),
            shipping=ShippingInfo(),
            seller=SellerInfo(
                name=clean_text(first_value(info, self.STORE_NAME_PATHS)),
                store_url=absolute_url(first_value(info, self.STORE_URL_PATHS)),
                rating=coerce_float(first_value(info, self.STORE_RATING_PATHS)),
            ),
            rating=RatingInfo(
                average=coerce_float(first_value(info, self.RATING_AVERAGE_PATHS)),
                count=coerce_int(first_value(info, self.RATING_COUNT_PATHS)),
            ),
        )

    def _extract_images(self, value: Any) -> List[str]:
        """Normalize an image list (strings or {url: ...} objects), de-duplicated."""
        if isinstance(value, str):
            value = [value]
        if not isinstance(value, list):
            return []

        images = []
        for item in value:
            if isinstance(item, dict):
                item = item.get('imgUrl') or item.get('url') or item.get('src')
            url = absolute_url(item)
            if url and url not in images:
                images.append(url)
        return images

    def _extract_variants(self, value: Any) -> List[ProductVariant]:
        """Normalize SKU entries from any payload format."""
        if not isinstance(value, list):
            return []

        variants = []
        for item in value:
            if isinstance(item, dict):
                sku_val = item.get('skuVal') if isinstance(item.get('skuVal'), dict) else {}
                price = first_value(item, [
                    'skuVal.skuAmount.formatedAmount',
                    'skuVal.skuActivityAmount.formatedAmount',
                    'skuVal.actSkuCalPrice',
                    'skuVal.skuCalPrice',
                    'price',
                ])
                variants.append(ProductVariant(
                    sku_id=clean_text(item.get('skuId') or item.get('skuIdStr') or item.get('id')),
                    attributes=clean_text(item.get('skuAttr') or item.get('skuPropIds') or item.get('name')),
                    price_text=clean_text(price) if price is not None else "",
                    quantity=coerce_int(sku_val.get('availQuantity') or item.get('quantity')),
                ))
            elif isinstance(item, (str, int)):
                variants.append(ProductVariant(attributes=clean_text(item)))
        return variants


def coerce_float(value: Any) -> float:
    """Coerce a rating-like value ("4.8", "97.5%", 4) to float, 0.0 if not numeric."""
    if value is None or isinstance(value, bool):
        return 0.0
    if isinstance(value, (int, float)):
        return float(value)
    match = re.search(r'\d+(?:\.\d+)?', str(value))
    return float(match.group(0)) if match else 0.0


def coerce_int(value: Any) -> int:
    """Coerce a count-like value ("1,234 reviews", 12) to int, 0 if not numeric."""
    if value is None or isinstance(value, bool):
        return 0
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value)
    digits = re.sub(r'[,\s]', '', str(value))
    match = re.search(r'\d+', digits)
    return int(match.group(0)) if match else 0

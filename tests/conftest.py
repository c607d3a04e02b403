"""Shared test fixtures."""

from pathlib import Path
from unittest.mock import MagicMock

import pytest

from catalog_import.models import ProductRecord, ProductVariant, RatingInfo, SellerInfo, ShippingInfo

FIXTURES_DIR = Path(__file__).parent / "fixtures"

PRODUCT_ID = "1005001234567890"


def load_fixture(name: str) -> str:
    return (FIXTURES_DIR / name).read_text(encoding="utf-8")


def make_response(status_code: int = 200, text: str = "", json_data=None) -> MagicMock:
    """Build a requests.Response stand-in."""
    response = MagicMock()
    response.status_code = status_code
    response.text = text
    if json_data is not None:
        response.json.return_value = json_data
    else:
        response.json.side_effect = ValueError("No JSON object could be decoded")
    return response


@pytest.fixture
def fixtures_dir():
    """Return path to fixtures directory."""
    return FIXTURES_DIR


@pytest.fixture
def runparams_html():
    """Product page with a window.runParams payload."""
    return load_fixture("product_runparams.html")


@pytest.fixture
def dom_only_html():
    """Product page without any script payload."""
    return load_fixture("product_dom_only.html")


@pytest.fixture
def blank_html():
    """Soft-error page with no product title anywhere."""
    return load_fixture("product_blank.html")


@pytest.fixture
def search_html():
    """Listing page with three results."""
    return load_fixture("search_listing.html")


@pytest.fixture
def importer_settings():
    """Importer settings with a single mirror and no optional lookups."""
    return {
        'source': {
            'base_url': 'https://www.aliexpress.com',
            'mirrors': ['{base_url}/item/{product_id}.html'],
            'api_fallback': False,
            'api_url': 'https://www.aliexpress.com/fn/search-pc/index?productId={product_id}',
            'reviews_url': 'https://feedback.aliexpress.com/pc/searchEvaluation.do?productId={product_id}&page={page}',
            'search_url': '{base_url}/wholesale',
        },
        'http': {
            'timeout': 5,
            'headers': {'User-Agent': 'test-agent'},
        },
        'pricing': {
            'markup_percentage': 30,
            'policy': 'plain',
            'floor_price': 9.99,
            'default_currency': 'USD',
            'floor_price_search': False,
        },
        'search': {
            'sort': 'default',
            'locale': {'currency': 'USD', 'language': 'en_US', 'country': 'US'},
        },
    }


@pytest.fixture
def fake_response():
    """Factory for requests.Response stand-ins."""
    return make_response


@pytest.fixture
def mock_session():
    """Session stand-in; set .get.return_value or .get.side_effect per test."""
    return MagicMock()


@pytest.fixture
def full_record():
    """A fully populated structured record."""
    return ProductRecord(
        product_id=PRODUCT_ID,
        source_url=f"https://www.aliexpress.com/item/{PRODUCT_ID}.html",
        name="Stainless Steel Water Bottle 750ml",
        description="Double wall vacuum insulated bottle.",
        images=(
            "https://ae01.alicdn.com/kf/bottle-front.jpg",
            "https://ae01.alicdn.com/kf/bottle-side.jpg",
        ),
        variants=(
            ProductVariant(sku_id="12000001", attributes="14:193", price_text="US $19.99", quantity=120),
        ),
        price=25.99,
        original_price=19.99,
        currency="USD",
        shipping=ShippingInfo(price=0.0, delivery_days="15-45"),
        seller=SellerInfo(name="Hydro Goods Store", store_url="https://www.aliexpress.com/store/912345", rating=97.8),
        rating=RatingInfo(average=4.8, count=1234),
        confidence="structured",
    )


@pytest.fixture
def stub_record():
    """A stub record synthesized without source data."""
    return ProductRecord(
        product_id=PRODUCT_ID,
        source_url=f"https://www.aliexpress.com/item/{PRODUCT_ID}.html",
        name=f"Product {PRODUCT_ID}",
        description="Product details could not be extracted. Please check the original product page.",
        price=9.99,
        original_price=9.99,
        currency="USD",
        seller=SellerInfo(name="AliExpress Seller"),
        confidence="stub",
    )

"""
Price Normalizer & Markup Engine

Parses free-text source prices ("US $1,234.56", "1.234,56 €", "12,99 руб.")
into numbers and computes retail prices by applying a percentage markup.

Two rounding policies exist:
- plain: round(original * (1 + markup/100), 2)
- charm: floor(original * (1 + markup/100) * 100 + 99) / 100  (ends in .99)

One PriceCalculator (one policy) is shared by every call site of a
pipeline so product and listing prices are always computed the same way.
"""

import math
import re
from typing import Any

from ..common.constants import DEFAULT_MARKUP_PERCENTAGE

POLICY_PLAIN = "plain"
POLICY_CHARM = "charm"
PRICING_POLICIES = (POLICY_PLAIN, POLICY_CHARM)

# First numeric run: digits with optional grouping/decimal separators
PRICE_PATTERN = re.compile(r'\d[\d.,]*')

# Ordered: multi-character markers before their single-symbol prefixes
CURRENCY_MARKERS = [
    ('US $', 'USD'),
    ('USD', 'USD'),
    ('C$', 'CAD'),
    ('CA $', 'CAD'),
    ('AU $', 'AUD'),
    ('A$', 'AUD'),
    ('EUR', 'EUR'),
    ('€', 'EUR'),
    ('GBP', 'GBP'),
    ('£', 'GBP'),
    ('руб', 'RUB'),
    ('₽', 'RUB'),
    ('R$', 'BRL'),
    ('₪', 'ILS'),
    ('$', 'USD'),
]


def _normalize_separators(number: str) -> str:
    """Convert a numeric run with locale punctuation to a float-parsable string."""
    number = number.rstrip('.,')
    has_comma = ',' in number
    has_dot = '.' in number

    if has_comma and has_dot:
        # Right-most separator is the decimal point
        if number.rfind(',') > number.rfind('.'):
            return number.replace('.', '').replace(',', '.')
        return number.replace(',', '')

    if has_comma:
        head, _, tail = number.rpartition(',')
        if number.count(',') == 1 and 1 <= len(tail) <= 2:
            return f"{head}.{tail}"
        return number.replace(',', '')

    if number.count('.') > 1:
        return number.replace('.', '')

    return number


def parse_price(value: Any) -> float:
    """
    Parse a source price into a non-negative number.

    Args:
        value: Price text, number, or None

    Returns:
        Parsed amount, or 0.0 when absent or unparsable
    """
    if value is None or isinstance(value, bool):
        return 0.0

    if isinstance(value, (int, float)):
        if math.isnan(value) or math.isinf(value):
            return 0.0
        return max(0.0, float(value))

    match = PRICE_PATTERN.search(str(value))
    if not match:
        return 0.0

    try:
        amount = float(_normalize_separators(match.group(0)))
    except ValueError:
        return 0.0

    return amount if math.isfinite(amount) else 0.0


def detect_currency(text: Any) -> str:
    """
    Detect an ISO currency code from a price string.

    Args:
        text: Price text, e.g. "US $12.99"

    Returns:
        Currency code or empty string
    """
    if not text or not isinstance(text, str):
        return ""

    for marker, code in CURRENCY_MARKERS:
        if marker in text:
            return code

    return ""


class PriceCalculator:
    """
    Applies the configured markup policy to source prices.

    Usage:
        calculator = PriceCalculator(markup_percentage=30)
        calculator.retail_price(10.0)         # 13.0
        calculator.retail_from_text("US $10")  # 13.0
    """

    def __init__(self, markup_percentage: float = DEFAULT_MARKUP_PERCENTAGE, policy: str = POLICY_PLAIN):
        """
        Initialize the calculator.

        Args:
            markup_percentage: Markup applied to the source price (default 30)
            policy: "plain" or "charm" rounding

        Raises:
            ValueError: If the policy is unknown or the markup is negative
        """
        if policy not in PRICING_POLICIES:
            raise ValueError(f"Unknown pricing policy: {policy!r}. Supported: {', '.join(PRICING_POLICIES)}")
        if markup_percentage is None:
            markup_percentage = DEFAULT_MARKUP_PERCENTAGE
        markup_percentage = float(markup_percentage)
        if markup_percentage < 0:
            raise ValueError(f"Markup percentage must be >= 0 (got {markup_percentage})")

        self.markup_percentage = markup_percentage
        self.policy = policy

    @classmethod
    def from_settings(cls, pricing: dict, markup_percentage: float = None) -> "PriceCalculator":
        """Build a calculator from the 'pricing' section of importer settings."""
        if markup_percentage is None:
            markup_percentage = pricing.get('markup_percentage', DEFAULT_MARKUP_PERCENTAGE)
        return cls(markup_percentage=markup_percentage, policy=pricing.get('policy', POLICY_PLAIN))

    def retail_price(self, original_price: float) -> float:
        """
        Compute the retail price for a source price.

        Args:
            original_price: Source price (non-negative)

        Returns:
            Retail price, 0.0 for a zero source price
        """
        if not original_price or original_price <= 0:
            return 0.0

        marked_up = original_price * (1 + self.markup_percentage / 100)

        if self.policy == POLICY_CHARM:
            # round() first absorbs float noise such as 1299.9999999998
            return math.floor(round(marked_up * 100, 6) + 99) / 100

        return round(marked_up, 2)

    def retail_from_text(self, price_text: Any) -> float:
        """Parse a source price and apply the markup."""
        return self.retail_price(parse_price(price_text))

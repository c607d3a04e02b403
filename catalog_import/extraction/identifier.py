"""
Identifier Resolver

Turns a free-form product reference (any known URL shape or a bare id)
into the canonical product identifier used by the source site.

Patterns are tried in priority order and the first non-empty match wins,
so the specific URL shapes take precedence over the generic digit-run
pattern (which could otherwise pick up an unrelated number).
"""

import logging
import re
from typing import Callable, List, Optional, Tuple

from .errors import UnresolvableReference

logger = logging.getLogger(__name__)

# Any run of 10+ digits (last resort)
DIGIT_RUN_PATTERN = re.compile(r'(\d{10,})')


def _group(pattern: str) -> Callable[[str], Optional[str]]:
    """Build a matcher returning the first capture group of a pattern."""
    compiled = re.compile(pattern, re.IGNORECASE)

    def match(reference: str) -> Optional[str]:
        found = compiled.search(reference)
        return found.group(1) if found else None

    return match


def _app_link_token(reference: str) -> Optional[str]:
    """Extract the opaque token from an app short link (a.aliexpress.com/_mXXXX)."""
    found = re.search(r'a\.aliexpress\.[a-z.]+/_m([A-Za-z0-9]+)', reference, re.IGNORECASE)
    return found.group(1) if found else None


# (name, matcher) in priority order
ID_PATTERNS: List[Tuple[str, Callable[[str], Optional[str]]]] = [
    ('item_path', _group(r'/item/(\d+)\.html')),
    ('short_item_path', _group(r'/i/(\d+)\.html')),
    ('product_path', _group(r'/product/(\d+)\.html')),
    ('domain_digit_run', _group(r'aliexpress\.(?:com|us|ru)\b.*?(\d{10,})')),
    ('mobile_item_path', _group(r'aliexpress.*?item/(\d+)')),
    ('app_short_link', _app_link_token),
]


def resolve_product_id(reference) -> str:
    """
    Resolve a product reference to its canonical identifier.

    Args:
        reference: Product URL in any known shape, or a bare id

    Returns:
        Canonical product id (never empty)

    Raises:
        UnresolvableReference: If no identifier can be derived
    """
    if not isinstance(reference, str):
        raise UnresolvableReference(reference)

    cleaned = reference.strip()
    if not cleaned:
        raise UnresolvableReference(reference)

    for name, matcher in ID_PATTERNS:
        product_id = matcher(cleaned)
        if product_id:
            logger.debug("Found product ID %s using pattern %s", product_id, name)
            return product_id

    match = DIGIT_RUN_PATTERN.search(cleaned)
    if match:
        logger.debug("Found product ID %s using digit run", match.group(1))
        return match.group(1)

    logger.warning("Could not extract product ID from %r", cleaned[:100])
    raise UnresolvableReference(reference)

"""
Record Validator

Flags imported records that need a human look before they are published.
"""

from __future__ import annotations

from urllib.parse import urlparse

from ..common.constants import CONFIDENCE_DOM, DEFAULT_FLOOR_PRICE
from ..models import ProductRecord

# Hostnames that mark an image URL as a placeholder rather than a product photo
_PLACEHOLDER_DOMAINS: frozenset[str] = frozenset({
    "example.com",
    "placeholder.com",
    "dummyimage.com",
    "placehold.it",
    "localhost",
})


def _is_placeholder_domain(hostname: str) -> bool:
    """Return True if hostname is or is a subdomain of a known placeholder domain."""
    h = hostname.lower()
    return any(h == d or h.endswith("." + d) for d in _PLACEHOLDER_DOMAINS)


class RecordValidator:
    """Reviews a ProductRecord for publishing readiness."""

    def __init__(self, record: ProductRecord, floor_price: float = DEFAULT_FLOOR_PRICE):
        self.record = record
        self.floor_price = floor_price

    def validate(self) -> dict:
        """
        Run all checks.

        Returns a dict with keys:
          needs_review - True for stub records or when any error fires
          confidence   - the record's confidence marker
          errors       - blocking quality issues
          warnings     - non-blocking quality issues
        """
        errors: list[str] = []
        warnings: list[str] = []
        r = self.record

        # ── Error checks ─────────────────────────────────────────────────────

        if r.needs_review:
            errors.append("confidence: stub record (no product data extracted)")

        if r.price <= 0:
            errors.append(f"price: must be > 0 (got {r.price})")

        if not r.source_url.startswith(("http://", "https://")):
            errors.append(f"source_url: not an absolute URL ({r.source_url[:50]!r})")

        if not r.images:
            errors.append("images: no images found")
        else:
            for url in r.images:
                if not url.startswith("https://"):
                    errors.append(f"image URL: must start with https:// ({url[:60]!r})")
                elif _is_placeholder_domain(urlparse(url).netloc):
                    errors.append(f"image URL: placeholder domain ({urlparse(url).netloc})")

        # ── Warning checks ────────────────────────────────────────────────────

        if r.confidence == CONFIDENCE_DOM:
            warnings.append("confidence: extracted from page markup only")

        if r.price <= self.floor_price:
            warnings.append(f"price: at floor price ({r.price:.2f})")

        if not r.seller.name:
            warnings.append("seller: missing name")

        if not r.description or not r.description.strip():
            warnings.append("description: empty")

        if len(r.name) > 250:
            warnings.append(f"name: too long ({len(r.name)} chars, max 250)")

        return {
            "needs_review": r.needs_review or bool(errors),
            "confidence": r.confidence,
            "errors": errors,
            "warnings": warnings,
        }

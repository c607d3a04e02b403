"""
Import Pipeline Errors

Only these failures cross the pipeline boundary. Extraction-quality
problems are absorbed by the assembler and reported through the record's
confidence marker instead.
"""

from typing import List

from ..models import FetchAttempt


class CatalogImportError(Exception):
    """Base class for fatal import failures."""


class UnresolvableReference(CatalogImportError, ValueError):
    """No product identifier could be derived from the reference."""

    def __init__(self, reference):
        self.reference = reference
        super().__init__(
            f"Could not extract product ID from reference: {reference!r}. "
            "Please check the URL format."
        )


class AllMirrorsFailed(CatalogImportError):
    """Every mirror failed at the transport level."""

    def __init__(self, product_id: str, attempts: List[FetchAttempt]):
        self.product_id = product_id
        self.attempts = attempts
        detail = "; ".join(f"{a.url}: {a.error}" for a in attempts)
        super().__init__(
            f"All {len(attempts)} mirrors failed for product {product_id}: {detail}"
        )

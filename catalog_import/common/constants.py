"""
Shared constants for the project.

This module contains application-wide constants that should have a single source of truth.
"""

# Confidence markers for extraction results
CONFIDENCE_STRUCTURED = "structured"
CONFIDENCE_DOM = "dom"
CONFIDENCE_NONE = "none"
CONFIDENCE_STUB = "stub"

# Pricing defaults (overridable in config/importer.yaml)
DEFAULT_MARKUP_PERCENTAGE = 30
DEFAULT_FLOOR_PRICE = 9.99
DEFAULT_CURRENCY = "USD"
DEFAULT_DELIVERY_DAYS = "15-45"

# Placeholder values for records synthesized without source data
STUB_SELLER_NAME = "AliExpress Seller"
STUB_DESCRIPTION = (
    "Product details could not be extracted. "
    "Please check the original product page."
)

"""
Product import pipeline.

Modules:
    identifier - Product id resolution from free-form references
    fetcher - Ordered mirror fetching
    pricing - Price text parsing and markup policy
    assembler - Degradation assembly into ProductRecord
    listing_search - Keyword search over listing pages
    product_importer - Single product import pipeline
    validator - RecordValidator for publishing readiness
    bulk_importer - Bulk import with progress tracking
    parsers - Specialized parsers for different data sources
"""

from .errors import AllMirrorsFailed, CatalogImportError, UnresolvableReference
from .identifier import resolve_product_id
from .fetcher import MirrorFetcher
from .pricing import PriceCalculator, parse_price
from .assembler import DegradationAssembler, merge_intermediate
from .listing_search import ListingSearch
from .product_importer import ProductImporter
from .validator import RecordValidator
from .bulk_importer import BulkImporter
from .parsers import (
    StructuredPayloadParser,
    HTMLContentParser,
    ListingParser,
)

__all__ = [
    # Errors
    'CatalogImportError',
    'UnresolvableReference',
    'AllMirrorsFailed',
    # Pipeline stages
    'resolve_product_id',
    'MirrorFetcher',
    'PriceCalculator',
    'parse_price',
    'DegradationAssembler',
    'merge_intermediate',
    # Entry points
    'ProductImporter',
    'ListingSearch',
    'BulkImporter',
    # Validator
    'RecordValidator',
    # Parsers
    'StructuredPayloadParser',
    'HTMLContentParser',
    'ListingParser',
]

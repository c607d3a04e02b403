"""
Specialized parsers for product data extraction.

Each parser handles a specific data source:
- StructuredPayloadParser: script-embedded data payloads (four historical formats)
- HTMLContentParser: HTML element extraction (lower-confidence fallback)
- ListingParser: search listing payloads
"""

from .html_parser import HTMLContentParser
from .listing_parser import ListingParser
from .script_payload import StructuredPayloadParser, decode_payload, first_value, get_path

__all__ = [
    'StructuredPayloadParser',
    'HTMLContentParser',
    'ListingParser',
    'decode_payload',
    'first_value',
    'get_path',
]

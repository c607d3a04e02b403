"""
External Catalog Import Tool

Modules:
    models      - Data models (ProductRecord, SearchResultItem, IntermediateProductData)
    common      - Shared utilities (config loader, logging, text helpers)
    extraction  - Product import pipeline (resolver, fetcher, parsers, pricing, assembler)
    export      - Catalog entry serialization for persistence collaborators
"""

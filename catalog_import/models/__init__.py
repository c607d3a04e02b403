"""
Data models for catalog import.

This module contains pure data classes with no business logic.
"""

from .product import (
    FetchAttempt,
    IntermediateProductData,
    ProductRecord,
    ProductVariant,
    RatingInfo,
    RawFetchResult,
    ReviewPage,
    SearchResultItem,
    SellerInfo,
    ShippingInfo,
)

__all__ = [
    'FetchAttempt',
    'RawFetchResult',
    'ProductVariant',
    'ShippingInfo',
    'SellerInfo',
    'RatingInfo',
    'IntermediateProductData',
    'ProductRecord',
    'SearchResultItem',
    'ReviewPage',
]

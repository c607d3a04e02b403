"""
Catalog Exporter

Maps ProductRecords into the catalog entry shape the storefront loads,
and writes them as a JSON list or as JSON lines.
"""

import json
import logging
import os
from typing import Any, Dict, Iterable, List, Optional, TextIO

from ..models import ProductRecord

logger = logging.getLogger(__name__)

DEFAULT_BRAND = "AliExpress"
DEFAULT_CATEGORY = "Other"
DEFAULT_STOCK = 999
MAX_EXPORTED_REVIEWS = 10


class CatalogExporter:
    """
    Exports product records as catalog entries.

    Usage:
        exporter = CatalogExporter()
        entry = exporter.to_catalog_entry(record)
        exporter.export_json(records, "output/catalog.json")
    """

    def __init__(self, category: str = DEFAULT_CATEGORY, count_in_stock: int = DEFAULT_STOCK):
        """
        Initialize the exporter.

        Args:
            category: Category assigned to imported entries
            count_in_stock: Stock level assigned to imported entries
        """
        self.category = category
        self.count_in_stock = count_in_stock

    def to_catalog_entry(
        self,
        record: ProductRecord,
        reviews: Optional[List[Dict[str, Any]]] = None,
    ) -> Dict[str, Any]:
        """
        Convert a record to a catalog entry.

        Args:
            record: Record to convert
            reviews: Raw feedback entries (only the first ten are kept)

        Returns:
            JSON-serializable dictionary
        """
        return {
            'name': record.name,
            'description': record.description,
            'price': record.price,
            'originalPrice': record.original_price,
            'sourcePrice': record.original_price,
            'currency': record.currency,
            'images': list(record.images),
            'brand': record.seller.name or DEFAULT_BRAND,
            'rating': record.rating.average,
            'numReviews': record.rating.count,
            'countInStock': self.count_in_stock,
            'category': self.category,
            'sourceProductId': record.product_id,
            'sourceData': {
                'originalUrl': record.source_url,
                'variants': [
                    {
                        'skuId': v.sku_id,
                        'attributes': v.attributes,
                        'price': v.price_text,
                        'quantity': v.quantity,
                    }
                    for v in record.variants
                ],
                'shippingOptions': [
                    {
                        'price': record.shipping.price,
                        'deliveryDays': record.shipping.delivery_days,
                    }
                ],
                'reviews': list(reviews or [])[:MAX_EXPORTED_REVIEWS],
                'confidence': record.confidence,
            },
        }

    def export_json(self, records: Iterable[ProductRecord], output_path: str) -> int:
        """
        Export records to a JSON list.

        Args:
            records: Records to export
            output_path: Output JSON file path

        Returns:
            Number of entries written
        """
        os.makedirs(os.path.dirname(output_path) or '.', exist_ok=True)

        entries = [self.to_catalog_entry(r) for r in records]
        with open(output_path, 'w', encoding='utf-8') as f:
            json.dump(entries, f, indent=2, ensure_ascii=False)

        logger.info("Exported %d entries to %s", len(entries), output_path)
        return len(entries)

    def write_jsonl(self, record: ProductRecord, stream: TextIO,
                    reviews: Optional[List[Dict[str, Any]]] = None) -> None:
        """Write one entry as a JSON line to an open stream."""
        stream.write(json.dumps(self.to_catalog_entry(record, reviews), ensure_ascii=False))
        stream.write('\n')

    def append_jsonl(self, record: ProductRecord, output_path: str,
                     reviews: Optional[List[Dict[str, Any]]] = None) -> None:
        """
        Append one entry to a JSON lines file.

        Args:
            record: Record to append
            output_path: Output JSONL file path
            reviews: Raw feedback entries for the record
        """
        os.makedirs(os.path.dirname(output_path) or '.', exist_ok=True)
        with open(output_path, 'a', encoding='utf-8') as f:
            self.write_jsonl(record, f, reviews)

#!/usr/bin/env python3
"""
Single Product Import

Imports a single product with a review report.
Accepts any known product URL shape or a bare product id.

Usage:
    python3 import_single.py --url https://www.aliexpress.com/item/1005001234567890.html
    python3 import_single.py --url 1005001234567890 --markup 40 --reviews
"""

import argparse
import json
import os
import sys

from dotenv import load_dotenv

from catalog_import.common import load_importer_settings, setup_logging
from catalog_import.export import CatalogExporter
from catalog_import.extraction import (
    AllMirrorsFailed,
    ProductImporter,
    RecordValidator,
    UnresolvableReference,
)
from catalog_import.models import ProductRecord


def print_report(record: ProductRecord, validation: dict):
    """Print import report."""

    print("\n" + "="*80)
    print("IMPORT REPORT")
    print("="*80)

    print(f"\nProduct ID: {record.product_id}")
    print(f"Source URL: {record.source_url}")
    print(f"Confidence: {record.confidence}")

    print("\n" + "-"*80)
    print("IMPORTED DATA")
    print("-"*80)

    fields = [
        ("Name", record.name),
        ("Price", f"{record.price:.2f} {record.currency}"),
        ("Original price", f"{record.original_price:.2f} {record.currency}"),
        ("Seller", record.seller.name),
        ("Rating", f"{record.rating.average} ({record.rating.count} reviews)" if record.rating.count else ""),
        ("Shipping", f"{record.shipping.price:.2f}, {record.shipping.delivery_days} days"),
    ]

    for label, value in fields:
        status = "OK" if value else "MISSING"
        print(f"  [{status:7}] {label:20} {value or 'MISSING'}")

    print(f"\nIMAGES ({len(record.images)} images):")
    for idx, url in enumerate(record.images, 1):
        print(f"  {idx}. {url.split('/')[-1]}")

    print(f"\nVARIANTS ({len(record.variants)}):")
    for variant in record.variants:
        print(f"  - {variant.sku_id} {variant.attributes} {variant.price_text}")

    if validation["errors"]:
        print("\nERRORS:")
        for error in validation["errors"]:
            print(f"  - {error}")

    if validation["warnings"]:
        print("\nWARNINGS:")
        for warning in validation["warnings"]:
            print(f"  - {warning}")

    if validation["needs_review"]:
        print("\n  NEEDS REVIEW before publishing")
    elif not validation["warnings"]:
        print("\nNo issues found!")

    print("\n" + "="*80)


def main():
    load_dotenv()

    parser = argparse.ArgumentParser(
        description="Import a single product with review report"
    )
    parser.add_argument(
        "--url",
        required=True,
        help="Product URL or id"
    )
    parser.add_argument(
        "--markup",
        type=float,
        help="Markup percentage (default: ALIEXPRESS_MARKUP_PERCENTAGE or config)"
    )
    parser.add_argument(
        "--reviews",
        action="store_true",
        help="Also fetch the first page of reviews"
    )
    parser.add_argument(
        "--output-json",
        help="Output JSON path (default: output/{product_id}.json)"
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Enable verbose (debug) logging"
    )
    parser.add_argument(
        "--quiet",
        action="store_true",
        help="Suppress info messages, show only warnings and errors"
    )

    args = parser.parse_args()
    settings = load_importer_settings()
    setup_logging(verbose=args.verbose, quiet=args.quiet, settings=settings.get('logging'))

    try:
        with ProductImporter(markup_percentage=args.markup, settings=settings) as importer:
            record = importer.import_product(args.url)
            reviews = importer.fetch_reviews(record.product_id).reviews if args.reviews else None
    except UnresolvableReference as e:
        print(f"\nError: {e}")
        sys.exit(2)
    except AllMirrorsFailed as e:
        print(f"\nImport failed: {e}")
        sys.exit(1)

    validation = RecordValidator(record).validate()
    print_report(record, validation)

    output_json = args.output_json or f"output/{record.product_id}.json"
    output_data = {
        "entry": CatalogExporter().to_catalog_entry(record, reviews),
        "validation": validation,
    }

    os.makedirs(os.path.dirname(output_json) or '.', exist_ok=True)
    with open(output_json, 'w', encoding='utf-8') as f:
        json.dump(output_data, f, indent=2, ensure_ascii=False)

    print(f"\nResults saved to: {output_json}")

    sys.exit(1 if validation["needs_review"] else 0)


if __name__ == "__main__":
    main()

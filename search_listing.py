#!/usr/bin/env python3
"""
Listing Search

Searches listing pages for a keyword and prints the results with
retail prices.

Usage:
    python3 search_listing.py --keyword "usb cable"
    python3 search_listing.py --keyword "usb cable" --page 2 --sort orders --json
"""

import argparse
import json
import logging
from dataclasses import asdict

from dotenv import load_dotenv

from catalog_import.common import load_importer_settings, setup_logging
from catalog_import.extraction import ListingSearch, PriceCalculator

logger = logging.getLogger(__name__)


def main():
    load_dotenv()

    parser = argparse.ArgumentParser(
        description="Search listing pages for a keyword"
    )
    parser.add_argument("--keyword", "-k", required=True, help="Search text")
    parser.add_argument("--page", "-p", type=int, default=1, help="Page number (default: 1)")
    parser.add_argument("--sort", help="Sort type (default: from config)")
    parser.add_argument("--currency", help="Display currency, e.g. USD")
    parser.add_argument("--language", help="Display language, e.g. en_US")
    parser.add_argument("--country", help="Shipping country, e.g. US")
    parser.add_argument(
        "--markup",
        type=float,
        help="Markup percentage (default: ALIEXPRESS_MARKUP_PERCENTAGE or config)"
    )
    parser.add_argument("--json", action="store_true", help="Print results as JSON")
    parser.add_argument("--verbose", action="store_true", help="Enable verbose (debug) logging")
    parser.add_argument("--quiet", action="store_true", help="Suppress info messages")

    args = parser.parse_args()
    settings = load_importer_settings()
    setup_logging(verbose=args.verbose, quiet=args.quiet, settings=settings.get('logging'))
    calculator = PriceCalculator.from_settings(settings.get('pricing', {}), args.markup)
    search = ListingSearch.from_settings(settings, calculator=calculator)

    locale = {
        key: value
        for key, value in (('currency', args.currency), ('language', args.language), ('country', args.country))
        if value
    }

    try:
        results = search.search(args.keyword, page=args.page, sort=args.sort, locale=locale)
    finally:
        search.close()

    if args.json:
        print(json.dumps([asdict(item) for item in results], indent=2, ensure_ascii=False))
        return

    logger.info("Found %d results for %r", len(results), args.keyword)
    for idx, item in enumerate(results, 1):
        print(f"{idx:3}. [{item.product_id}] {item.name[:60]}")
        print(f"     {item.price:.2f} {item.currency} (source {item.original_price:.2f})"
              f"  seller: {item.seller.name or '-'}  rating: {item.rating.average}")


if __name__ == "__main__":
    main()

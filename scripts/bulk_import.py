#!/usr/bin/env python3
"""
Bulk Product Import Script

Imports products from a list of references and writes catalog entries
as JSON lines.

Features:
- Progress tracking with resume capability
- Failed reference tracking for retry
- Rate limiting for respectful crawling
- Stub records kept and flagged for review

Usage:
    python3 scripts/bulk_import.py --refs data/references.txt
    python3 scripts/bulk_import.py --refs data/references.txt --limit 100
    python3 scripts/bulk_import.py --refs refs.txt --output output/catalog.jsonl --resume
"""

import argparse
import logging
import os
import sys

# Add project root to path for imports
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from dotenv import load_dotenv

from catalog_import.common.config_loader import load_importer_settings
from catalog_import.common.log_config import setup_logging
from catalog_import.extraction import BulkImporter, ProductImporter

logger = logging.getLogger(__name__)


def main():
    load_dotenv()

    parser = argparse.ArgumentParser(
        description="Bulk import products from a list of URLs or ids"
    )
    parser.add_argument(
        "--refs", "-r",
        required=True,
        help="Input file with product references (one per line)"
    )
    parser.add_argument(
        "--output", "-o",
        default="output/catalog.jsonl",
        help="Output JSON lines file (default: output/catalog.jsonl)"
    )
    parser.add_argument(
        "--limit", "-l",
        type=int,
        default=0,
        help="Limit number of products to import (0 = no limit)"
    )
    parser.add_argument(
        "--delay", "-d",
        type=float,
        default=1.5,
        help="Delay between requests in seconds (default: 1.5)"
    )
    parser.add_argument(
        "--markup",
        type=float,
        help="Markup percentage (default: ALIEXPRESS_MARKUP_PERCENTAGE or config)"
    )
    parser.add_argument(
        "--resume",
        action="store_true",
        help="Resume from previous import state"
    )
    parser.add_argument(
        "--stop-on-error",
        action="store_true",
        help="Stop import if any reference fails (default: continue on error)"
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

    if not os.path.exists(args.refs):
        print(f"Reference file not found: {args.refs}")
        sys.exit(1)

    with open(args.refs, "r", encoding="utf-8") as f:
        references = [line.strip() for line in f if line.strip() and not line.startswith("#")]

    if not references:
        logger.error("No references found in input file")
        sys.exit(1)

    print("=" * 60)
    print("Bulk Product Import")
    print("=" * 60)
    print(f"  Input file:       {args.refs}")
    print(f"  Total references: {len(references)}")
    print(f"  Output JSONL:     {args.output}")
    print(f"  Request delay:    {args.delay}s")
    print(f"  Resume mode:      {args.resume}")

    bulk = BulkImporter(
        output_jsonl=args.output,
        output_dir=os.path.dirname(args.output) or "output",
        delay=args.delay,
    )

    with ProductImporter(markup_percentage=args.markup, settings=settings) as importer:
        bulk.import_all(
            references=references,
            importer=importer,
            limit=args.limit,
            resume=args.resume,
            continue_on_error=not args.stop_on_error,
        )

    logger.info("Import complete. Output: %s", args.output)


if __name__ == "__main__":
    main()

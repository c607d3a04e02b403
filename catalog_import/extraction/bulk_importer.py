"""
Bulk Product Importer

Imports products from a list of references and writes catalog entries
as JSON lines.

Features:
- Progress tracking with resume capability
- Failed reference tracking for retry
- Rate limiting for respectful crawling
- Stub records are kept and counted for review
"""

from __future__ import annotations

import json
import logging
import os
import time
from datetime import datetime

from ..export import CatalogExporter
from .errors import AllMirrorsFailed, UnresolvableReference
from .product_importer import ProductImporter

logger = logging.getLogger(__name__)


class BulkImporter:
    """Bulk product import with progress tracking and resume capability."""

    def __init__(
        self,
        output_jsonl: str,
        output_dir: str = "output",
        delay: float = 1.0,
        exporter: CatalogExporter | None = None,
    ):
        """
        Initialize the bulk importer.

        Args:
            output_jsonl: Path to output JSON lines file
            output_dir: Directory for state and failure files
            delay: Delay between products in seconds
            exporter: Catalog entry exporter
        """
        self.output_jsonl = output_jsonl
        self.output_dir = output_dir
        self.delay = delay

        # Progress tracking
        self.state_file = os.path.join(output_dir, "import_state.json")
        self.failed_file = os.path.join(output_dir, "failed_references.txt")

        # State
        self.processed_refs: set[str] = set()
        self.failed_refs: list[dict] = []
        self.total_imported = 0
        self.total_needs_review = 0
        self.total_images = 0
        self.start_time = None

        os.makedirs(output_dir, exist_ok=True)

        self._exporter = exporter or CatalogExporter()

    def load_state(self) -> bool:
        """Load previous import state for resume."""
        if not os.path.exists(self.state_file):
            return False
        try:
            with open(self.state_file, "r", encoding="utf-8") as f:
                state = json.load(f)
        except (OSError, ValueError) as e:
            logger.warning("Could not load state: %s", e)
            return False

        self.processed_refs = set(state.get("processed_refs", []))
        self.failed_refs = state.get("failed_refs", [])
        self.total_imported = state.get("total_imported", 0)
        self.total_needs_review = state.get("total_needs_review", 0)
        self.total_images = state.get("total_images", 0)

        logger.info("Loaded state: references processed=%d, products=%d",
                    len(self.processed_refs), self.total_imported)
        return True

    def save_state(self) -> None:
        """Save current import state."""
        state = {
            "processed_refs": sorted(self.processed_refs),
            "failed_refs": self.failed_refs,
            "total_imported": self.total_imported,
            "total_needs_review": self.total_needs_review,
            "total_images": self.total_images,
            "last_updated": datetime.now().isoformat(),
        }
        with open(self.state_file, "w", encoding="utf-8") as f:
            json.dump(state, f, indent=2, ensure_ascii=False)

    def save_failed_refs(self) -> None:
        """Save failed references to a separate file for retry."""
        with open(self.failed_file, "w", encoding="utf-8") as f:
            for failure in self.failed_refs:
                f.write(f"{failure['reference']}\t{failure['error']}\n")

    def import_all(
        self,
        references: list[str],
        importer: ProductImporter,
        limit: int = 0,
        resume: bool = False,
        continue_on_error: bool = True,
    ) -> None:
        """
        Import all products from a reference list.

        Args:
            references: Product URLs or ids
            importer: Configured single-product importer
            limit: Maximum number of references to process (0 = no limit)
            resume: Whether to resume from previous state
            continue_on_error: Whether to continue after a failed reference
        """
        self.start_time = datetime.now()

        if resume:
            self.load_state()

        refs_to_process = [r for r in references if r not in self.processed_refs]
        if limit > 0:
            refs_to_process = refs_to_process[:limit]

        total_refs = len(refs_to_process)
        already_processed = len(self.processed_refs)

        logger.info("Import progress: total=%d, remaining=%d", len(references), total_refs)

        write_mode = 'a' if (resume and os.path.exists(self.output_jsonl)) else 'w'
        os.makedirs(os.path.dirname(self.output_jsonl) or '.', exist_ok=True)

        with open(self.output_jsonl, write_mode, encoding='utf-8') as out:
            for i, reference in enumerate(refs_to_process, 1):
                logger.info("[%d/%d] %s", already_processed + i, len(references), reference[:60])

                try:
                    record = importer.import_product(reference)
                except (UnresolvableReference, AllMirrorsFailed) as e:
                    error_msg = f"{type(e).__name__}: {str(e)[:100]}"
                    logger.error("Error: %s", error_msg)

                    self.failed_refs.append({
                        "reference": reference,
                        "error": error_msg,
                        "timestamp": datetime.now().isoformat(),
                    })
                    self.processed_refs.add(reference)

                    if not continue_on_error:
                        logger.error("Stopping due to error (use --continue-on-error to ignore)")
                        break
                else:
                    self._exporter.write_jsonl(record, out)

                    self.total_imported += 1
                    self.total_images += len(record.images)
                    if record.needs_review:
                        self.total_needs_review += 1
                        logger.warning("Needs review: %s (%s)", record.product_id, record.confidence)
                    self.processed_refs.add(reference)

                    logger.info("OK: %s... (%s)", record.name[:50], record.confidence)

                if i % 10 == 0:
                    self.save_state()
                    out.flush()

                if i < total_refs and self.delay > 0:
                    time.sleep(self.delay)

        self.save_state()
        self.save_failed_refs()

        self._print_summary()

    def _print_summary(self) -> None:
        """Print import summary."""
        elapsed = (datetime.now() - self.start_time).total_seconds()

        print("\n" + "=" * 60)
        print("Import Summary")
        print("=" * 60)
        print(f"  References processed: {len(self.processed_refs)}")
        print(f"  References failed:    {len(self.failed_refs)}")
        print(f"  Products imported:    {self.total_imported}")
        print(f"  Needing review:       {self.total_needs_review}")
        print(f"  Total images:         {self.total_images}")
        print(f"  Time elapsed:         {elapsed:.1f} seconds")
        print(f"  Output:               {self.output_jsonl}")
        if self.failed_refs:
            print(f"  Failed:               {self.failed_file}")
        print("=" * 60)

    def get_stats(self) -> dict:
        """Return import statistics."""
        return {
            'total_imported': self.total_imported,
            'total_needs_review': self.total_needs_review,
            'total_images': self.total_images,
            'processed_refs': len(self.processed_refs),
            'failed_refs': len(self.failed_refs),
        }

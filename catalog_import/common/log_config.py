"""
Logging Configuration

Sets up the catalog_import logger from the `logging` section of
importer.yaml, with --verbose/--quiet taking precedence.
Output goes to stderr to keep stdout clean for reports and JSON.
"""

import logging
import sys
from typing import Any, Dict, Optional, Union

DEFAULT_FORMAT = "%(levelname)-8s %(name)s: %(message)s"

# HTTP client libraries that log every connection at DEBUG
LIBRARY_LOGGERS = ("urllib3", "charset_normalizer")


def parse_level(value: Union[str, int, None], default: int) -> int:
    """Turn a level name ("debug", "WARNING") or number into a logging level."""
    if isinstance(value, int) and not isinstance(value, bool):
        return value
    if not value:
        return default
    level = logging.getLevelName(str(value).strip().upper())
    return level if isinstance(level, int) else default


def setup_logging(
    verbose: bool = False,
    quiet: bool = False,
    settings: Optional[Dict[str, Any]] = None,
) -> None:
    """
    Configure logging for the import pipeline.

    Args:
        verbose: If True, set level to DEBUG
        quiet: If True, set level to WARNING
        settings: `logging` section of importer.yaml
            (level, format, library_level); missing keys use defaults
    """
    settings = settings or {}

    if verbose:
        level = logging.DEBUG
    elif quiet:
        level = logging.WARNING
    else:
        level = parse_level(settings.get('level'), logging.INFO)

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter(settings.get('format') or DEFAULT_FORMAT))

    logger = logging.getLogger("catalog_import")
    logger.setLevel(level)

    # Avoid duplicate handlers if called multiple times
    logger.handlers.clear()
    logger.addHandler(handler)

    library_level = parse_level(settings.get('library_level'), logging.WARNING)
    for name in LIBRARY_LOGGERS:
        logging.getLogger(name).setLevel(library_level)

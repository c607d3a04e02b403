"""
Export modules.

Modules:
    catalog_exporter - ProductRecord to catalog entry mapping (JSON / JSON lines)
"""

from .catalog_exporter import CatalogExporter

__all__ = [
    'CatalogExporter',
]

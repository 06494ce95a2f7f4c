"""
Ingest Package - Site source ingestion

Handles file discovery, binary classification, attribute extraction and item
assembly for the content, layouts and includes directories.
"""

from sitesource.ingest.item import Item, ItemRole
from sitesource.ingest.pipeline import FilesystemDataSource, IngestionStats
from sitesource.ingest.processor import IngestionResult, ingest_source

__all__ = [
    "FilesystemDataSource",
    "IngestionResult",
    "IngestionStats",
    "Item",
    "ItemRole",
    "ingest_source",
]

"""
Ingestion Processor - Main entry point

Runs a complete ingestion with a FilesystemDataSource and hands back its
collections.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, Optional

from sitesource.ingest.filesystem import FileSystem
from sitesource.ingest.item import Item
from sitesource.ingest.pipeline import FilesystemDataSource, IngestionStats
from sitesource.settings import settings

logger = logging.getLogger(__name__)


@dataclass
class IngestionResult:
    items: Dict[str, Item] = field(default_factory=dict)
    layouts: Dict[str, Item] = field(default_factory=dict)
    includes: Dict[str, Item] = field(default_factory=dict)
    stats: IngestionStats = field(default_factory=IngestionStats)


def ingest_source(
    params: Optional[Mapping[str, Any]] = None, fs: Optional[FileSystem] = None
) -> IngestionResult:
    """Ingest a site source directory.

    Args:
        params: Data source parameters.
                Defaults to the environment settings if None.
        fs: Filesystem to read from. Defaults to the local disk.

    Returns:
        IngestionResult with the three collections and the run statistics
    """
    if params is None:
        params = settings.as_params()

    source = FilesystemDataSource(params, fs=fs)
    source.configure()
    stats = source.process()

    return IngestionResult(
        items=source.get_items(),
        layouts=source.get_layouts(),
        includes=source.get_includes(),
        stats=stats,
    )

"""
Filesystem Data Source

Orchestrates the flow: configuration -> discovery -> item loader -> collections.

Source-root structure:

    source_root/
    |- content/      content items (posts/ holds the blog posts)
    |- layouts/      layout items
    |- includes/     include items
"""

import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, Optional, Union

from sitesource.exceptions import SourceException
from sitesource.ingest.discovery import (
    DiscoveredFile,
    find_content_files,
    find_role_files,
)
from sitesource.ingest.filesystem import FileSystem, LocalFileSystem
from sitesource.ingest.item import Item, ItemRole
from sitesource.ingest.loader import (
    ATTRIBUTES_FROM_FRONTMATTER,
    ATTRIBUTES_FROM_SIDECAR,
    ItemLoader,
)
from sitesource.settings import DataSourceConfig, resolve_config

logger = logging.getLogger(__name__)


@dataclass
class IngestionStats:
    content_items: int = 0
    layouts: int = 0
    includes: int = 0
    binary_files: int = 0
    sidecar_attributes: int = 0
    frontmatter_attributes: int = 0
    ids_overridden: int = 0


class FilesystemDataSource:
    """
    Reads a site source directory into three id-keyed collections of Items.

    Usage follows a fixed order: configure(), process(), then the get_*()
    accessors. Every process() call is a fresh run with fresh collections.

    When two files produce the same id within a collection (an `include`
    entry overlapping the content scan, for instance) the file processed last
    wins; each override is logged and counted in the stats.
    """

    def __init__(
        self,
        params: Optional[Union[Mapping[str, Any], DataSourceConfig]] = None,
        fs: Optional[FileSystem] = None,
    ):
        self.params = params
        self.fs = fs or LocalFileSystem()
        self.config: Optional[DataSourceConfig] = None
        self.loader: Optional[ItemLoader] = None
        self.stats = IngestionStats()
        self._items: Dict[str, Item] = {}
        self._layouts: Dict[str, Item] = {}
        self._includes: Dict[str, Item] = {}
        self._processed = False

    def configure(self) -> DataSourceConfig:
        """
        Validate the parameters. Touches no file.

        Raises:
            ConfigurationError: If the parameters are invalid
        """
        self.config = resolve_config(self.params)
        self.loader = ItemLoader(self.config, self.fs)
        self._processed = False
        return self.config

    def process(self) -> IngestionStats:
        """
        Run the ingestion over content/, layouts/ and includes/.

        Returns:
            IngestionStats object with results

        Raises:
            RuntimeError: If configure() has not been called
            SourceException: On any parse or filesystem error; the partial
                collections are discarded
        """
        if self.config is None:
            raise RuntimeError("configure() must be called before process()")

        self._reset()
        logger.info(f"Starting ingestion of {self.config.source_root}")

        try:
            self._process_files(
                find_content_files(self.fs, self.config), ItemRole.CONTENT
            )
            for role in (ItemRole.LAYOUT, ItemRole.INCLUDE):
                self._process_files(find_role_files(self.fs, self.config, role), role)
        except SourceException as e:
            logger.error(f"Ingestion of {self.config.source_root} failed: {e.message}")
            self._reset()
            raise

        self._processed = True
        self._log_completion()
        return self.stats

    def get_items(self) -> Dict[str, Item]:
        return self._collection(self._items)

    def get_layouts(self) -> Dict[str, Item]:
        return self._collection(self._layouts)

    def get_includes(self) -> Dict[str, Item]:
        return self._collection(self._includes)

    def _collection(self, collection: Dict[str, Item]) -> Dict[str, Item]:
        if not self._processed:
            raise RuntimeError("Collections are available after a successful process()")
        return collection

    def _reset(self):
        self._items = {}
        self._layouts = {}
        self._includes = {}
        self.stats = IngestionStats()
        self._processed = False

    def _process_files(self, files: List[DiscoveredFile], role: ItemRole):
        collection = {
            ItemRole.CONTENT: self._items,
            ItemRole.LAYOUT: self._layouts,
            ItemRole.INCLUDE: self._includes,
        }[role]

        for file in files:
            item, attribute_source = self.loader.load_file(file, role)

            if item.is_binary:
                self.stats.binary_files += 1
            if attribute_source == ATTRIBUTES_FROM_SIDECAR:
                self.stats.sidecar_attributes += 1
            elif attribute_source == ATTRIBUTES_FROM_FRONTMATTER:
                self.stats.frontmatter_attributes += 1

            self._register(collection, item)

        self.stats.content_items = len(self._items)
        self.stats.layouts = len(self._layouts)
        self.stats.includes = len(self._includes)

    def _register(self, collection: Dict[str, Item], item: Item):
        """Insert an item, replacing any earlier item with the same id."""
        if item.id in collection:
            logger.warning(
                f"{item.role.value} '{item.id}' defined more than once, keeping the last one"
            )
            self.stats.ids_overridden += 1
        collection[item.id] = item

    def _log_completion(self):
        logger.info(
            f"Ingestion complete. "
            f"Items: {self.stats.content_items}, layouts: {self.stats.layouts}, "
            f"includes: {self.stats.includes}. "
            f"Binary: {self.stats.binary_files}, overridden ids: {self.stats.ids_overridden}."
        )

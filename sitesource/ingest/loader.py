"""
Item Loader

Turns one discovered file into an Item: reads it (text files only), resolves
its attributes from a sidecar file or a frontmatter block, and adds the
attributes derived from its name and location.
"""

import logging
import posixpath
from datetime import datetime
from typing import Optional, Tuple

from sitesource.ingest.conventions import apply_categories, apply_filename_convention
from sitesource.ingest.discovery import (
    SIDECAR_SUFFIX,
    DiscoveredFile,
    is_binary,
    split_extension,
)
from sitesource.ingest.filesystem import FileSystem, LocalFileSystem
from sitesource.ingest.item import (
    SNAPSHOT_BODY,
    SNAPSHOT_PATH_RELATIVE,
    SNAPSHOT_PATH_SOURCE,
    SNAPSHOT_RAW,
    Attributes,
    Item,
    ItemRole,
)
from sitesource.ingest.metadata import AttributeParser
from sitesource.settings import DataSourceConfig

logger = logging.getLogger(__name__)

ATTRIBUTES_FROM_SIDECAR = "sidecar"
ATTRIBUTES_FROM_FRONTMATTER = "frontmatter"


class ItemLoader:
    """
    Builds Items from discovered files.
    """

    def __init__(self, config: DataSourceConfig, fs: Optional[FileSystem] = None):
        """
        Initialize ItemLoader.

        Args:
            config: Resolved data source configuration
            fs: Filesystem to read from. Defaults to the local disk.
        """
        self.config = config
        self.fs = fs or LocalFileSystem()
        self.parser = AttributeParser(config.attribute_syntax)

    def load_file(
        self, file: DiscoveredFile, role: ItemRole
    ) -> Tuple[Item, Optional[str]]:
        """
        Load a single file.

        Args:
            file: File found by the walker
            role: Collection the item belongs to

        Returns:
            Tuple of (item, attribute_source) where attribute_source is
            "sidecar", "frontmatter" or None when no metadata was found

        Raises:
            AttributeParseError: If a sidecar or frontmatter document is malformed
            FileAccessError: If the file cannot be read
        """
        basename = posixpath.basename(file.relative_path)
        filename, extension = split_extension(basename, self.config.text_extensions)
        binary = is_binary(basename, self.config.text_extensions)

        raw = "" if binary else self.fs.read_text(file.path)
        content_snapshots = {SNAPSHOT_RAW: raw}
        path_snapshots = {SNAPSHOT_PATH_RELATIVE: file.relative_path}

        if binary:
            path_snapshots[SNAPSHOT_PATH_SOURCE] = self.fs.realpath(file.path)

        attributes: Attributes = {}
        attribute_source = None

        if role is not ItemRole.INCLUDE:
            attributes, body, attribute_source = self._resolve_attributes(
                file, role, raw, binary
            )
            if not binary:
                content_snapshots[SNAPSHOT_BODY] = body

        attributes["mtime"] = self._modified_time(file.path)
        attributes["filename"] = filename
        attributes["extension"] = extension

        if role is not ItemRole.INCLUDE:
            apply_filename_convention(attributes, filename)
        if role is ItemRole.CONTENT:
            apply_categories(attributes, posixpath.dirname(file.relative_path))

        logger.debug(
            f"Loaded {role.value} {file.relative_path} "
            f"(binary={binary}, attributes={attribute_source or 'none'})"
        )

        item = Item(
            id=file.relative_path,
            role=role,
            is_binary=binary,
            content_snapshots=content_snapshots,
            path_snapshots=path_snapshots,
            attributes=attributes,
        )
        return item, attribute_source

    def _resolve_attributes(
        self, file: DiscoveredFile, role: ItemRole, raw: str, binary: bool
    ) -> Tuple[Attributes, str, Optional[str]]:
        """Sidecar first, then frontmatter for text files."""
        if role is ItemRole.CONTENT:
            sidecar = file.path + SIDECAR_SUFFIX
            if self.fs.is_file(sidecar):
                attributes = self.parser.parse(self.fs.read_text(sidecar), path=sidecar)
                return attributes, raw, ATTRIBUTES_FROM_SIDECAR

        if binary:
            return {}, raw, None

        attributes, body = self.parser.parse_frontmatter(raw, path=file.path)
        if body == raw:
            return attributes, body, None
        return attributes, body, ATTRIBUTES_FROM_FRONTMATTER

    def _modified_time(self, path: str) -> str:
        modified = datetime.fromtimestamp(self.fs.mtime(path), tz=self.config.tzinfo)
        return modified.isoformat(timespec="seconds")

"""
Metadata Extraction - Sidecar files and frontmatter blocks

Parses YAML or JSON attribute documents and normalizes the parsed values into
AttributeValue (str, int, float, bool, list, dict) so the rendering stage
never sees parser-specific types.
"""

import json
import logging
import re
from datetime import date, datetime, time
from typing import Any, Optional, Tuple

import yaml

from sitesource.exceptions import AttributeParseError
from sitesource.ingest.item import Attributes, AttributeValue

logger = logging.getLogger(__name__)

# A block opening with a `---` line at the very start of the text and closing
# at the next `---` line.
FRONTMATTER_PATTERN = re.compile(
    r"\A---[ \t]*\r?\n(?P<block>.*?)(?:\r?\n)?^---[ \t]*(?:\r?\n|\Z)",
    re.DOTALL | re.MULTILINE,
)

_DROP = object()


def normalize_value(value: Any) -> AttributeValue:
    """Convert a parsed document value into an AttributeValue.

    - dates and datetimes become ISO 8601 strings
    - None is dropped from mappings and sequences
    - tuples and sets become lists
    - anything else that is not a plain scalar becomes a string
    """
    if value is None:
        return _DROP
    if isinstance(value, (bool, int, float, str)):
        return value
    if isinstance(value, (date, datetime, time)):
        return value.isoformat()
    if isinstance(value, dict):
        normalized = {}
        for key, item in value.items():
            item = normalize_value(item)
            if item is not _DROP:
                normalized[str(key)] = item
        return normalized
    if isinstance(value, (list, tuple, set, frozenset)):
        return [item for item in map(normalize_value, value) if item is not _DROP]
    return str(value)


class AttributeParser:
    """Parses attribute documents in one syntax ("yaml" or "json")."""

    def __init__(self, syntax: str = "yaml"):
        if syntax not in ("yaml", "json"):
            raise ValueError(f"Unsupported attribute syntax: {syntax}")
        self.syntax = syntax

    def _load(self, text: str) -> Any:
        if self.syntax == "json":
            return json.loads(text)
        return yaml.safe_load(text)

    def parse(self, text: str, path: Optional[str] = None) -> Attributes:
        """Parse a whole document into attributes.

        An empty document yields an empty mapping.

        Raises:
            AttributeParseError: If the document is malformed or its top level
                is not a mapping
        """
        if not text.strip():
            return {}

        try:
            document = self._load(text)
        except (yaml.YAMLError, ValueError) as e:
            # PyYAML raises a bare ValueError for well-formed but impossible
            # timestamps (2020-13-45); JSONDecodeError is a ValueError too
            raise AttributeParseError(
                f"Malformed {self.syntax.upper()} attributes: {e}", path=path
            ) from e

        if document is None:
            return {}
        if not isinstance(document, dict):
            raise AttributeParseError(
                f"Attributes must be a mapping, got {type(document).__name__}",
                path=path,
            )

        attributes = normalize_value(document)
        logger.debug(f"Parsed attribute keys: {list(attributes.keys())}")
        return attributes

    def parse_frontmatter(
        self, text: str, path: Optional[str] = None
    ) -> Tuple[Attributes, str]:
        """Extract the frontmatter block from the start of a text.

        Args:
            text: Full file content
            path: File the text came from, for error messages

        Returns:
            Tuple of (attributes, body). Without a frontmatter block this is
            ({}, text).
        """
        match = FRONTMATTER_PATTERN.match(text)
        if not match:
            if text.startswith("---"):
                logger.warning(
                    f"Unterminated frontmatter block in {path or 'text'}, left as content"
                )
            return {}, text

        attributes = self.parse(match.group("block"), path=path)
        return attributes, text[match.end():]

"""
sitesource - filesystem data source for static site generation

Reads a site source tree (content, layouts, includes) into Items carrying raw
content, attributes and classification for the rendering stage.
"""

from sitesource.exceptions import (
    AttributeParseError,
    ConfigurationError,
    FileAccessError,
    SourceException,
)

__version__ = "0.1.0"

__all__ = [
    "AttributeParseError",
    "ConfigurationError",
    "FileAccessError",
    "SourceException",
]

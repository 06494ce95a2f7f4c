"""
Exception hierarchy for the filesystem data source.

Every error raised by an ingestion run derives from SourceException so callers
can abort a run with a single except clause.
"""

from typing import Optional


class SourceException(Exception):
    """Base exception for the data source"""

    def __init__(self, message: str, path: Optional[str] = None):
        self.message = message
        self.path = path
        super().__init__(self.message)


class ConfigurationError(SourceException):
    """Invalid or missing ingestion parameter"""

    def __init__(self, message: str):
        super().__init__(message)


class AttributeParseError(SourceException):
    """Malformed sidecar or frontmatter document"""

    def __init__(self, message: str, path: Optional[str] = None):
        if path:
            message = f"{message} (in {path})"
        super().__init__(message, path=path)


class FileAccessError(SourceException):
    """Filesystem failure that aborts the run"""

    def __init__(self, message: str, path: Optional[str] = None):
        super().__init__(message, path=path)
